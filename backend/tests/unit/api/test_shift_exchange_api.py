"""
Unit Tests for POST /api/v1/roster/shift_exchange
"""
from datetime import date

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from soc_portal.models.activity_log import ActivityLog
from soc_portal.models.notification import AdminNotification, UserNotification
from soc_portal.models.roster import RosterEntry, RosterScheduleNote
from tests.mocks.factories import make_user

SHIFT_EXCHANGE = '/api/v1/roster/shift_exchange'
ROSTER_DAY = date(2025, 3, 1)


@pytest.fixture
async def roster_day(db_session, user_account, teammate_account):
    db_session.add_all([
        RosterEntry(roster_date=ROSTER_DAY, short_name=user_account.short_name, shift='MORNING'),
        RosterEntry(roster_date=ROSTER_DAY, short_name=teammate_account.short_name, shift='NIGHT'),
    ])
    await db_session.commit()


def exchange_payload(**overrides):
    payload = {
        'date': '2025-03-01',
        'assignedTo': 'BOB',
        'reason': 'Family event',
        'communicatedPerson': 'Team Lead',
        'handoverTask': '',
    }
    payload.update(overrides)
    return payload


async def shifts(db_session):
    rows = (await db_session.execute(
        select(RosterEntry.short_name, RosterEntry.shift).where(RosterEntry.roster_date == ROSTER_DAY)
    )).all()
    return dict(rows)


class TestShiftExchange:

    @pytest.mark.asyncio
    async def test_exchange_success(self, user_client: AsyncClient, db_session, roster_day, alerts):
        response = await user_client.post(SHIFT_EXCHANGE, json=exchange_payload())

        assert response.status_code == 200
        data = response.json()['data']
        assert data['yourShift'] == 'MORNING'
        assert data['updatedShift'] == 'NIGHT'
        assert data['adminNotificationId'] == 'AN0001SOCP'

        assert await shifts(db_session) == {'ALI': 'NIGHT', 'BOB': 'MORNING'}

        note = (await db_session.execute(select(RosterScheduleNote))).scalar_one()
        assert note.handover_task == 'No Dependency'
        assert note.requester_old_shift == 'MORNING'

        titles = (await db_session.execute(select(UserNotification.title))).scalars().all()
        assert len(titles) == 2
        admin_titles = (await db_session.execute(select(AdminNotification.title))).scalars().all()
        assert admin_titles == ['Shift Exchange: ALI exchanged shift with BOB on 01/03/2025']

        actions = (await db_session.execute(select(ActivityLog.action))).scalars().all()
        assert actions == ['SHIFT_EXCHANGE']
        assert alerts.contains('SHIFT EXCHANGE')

    @pytest.mark.asyncio
    async def test_missing_fields(self, user_client: AsyncClient, roster_day):
        response = await user_client.post(SHIFT_EXCHANGE, json=exchange_payload(reason=''))

        assert response.status_code == 400
        assert response.json()['message'] == 'Missing required fields'

    @pytest.mark.asyncio
    async def test_bad_date(self, user_client: AsyncClient, roster_day):
        response = await user_client.post(SHIFT_EXCHANGE, json=exchange_payload(date='01/03/2025'))

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_partner(self, user_client: AsyncClient, roster_day):
        response = await user_client.post(SHIFT_EXCHANGE, json=exchange_payload(assignedTo='ZED'))

        assert response.status_code == 404
        assert response.json()['message'] == 'Selected team member not found'

    @pytest.mark.asyncio
    async def test_partner_not_soc(self, user_client: AsyncClient, db_session, roster_day):
        db_session.add(make_user(soc_portal_id='U03SOCP', short_name='OPSY', role_type='OPS'))
        await db_session.commit()

        response = await user_client.post(SHIFT_EXCHANGE, json=exchange_payload(assignedTo='OPSY'))

        assert response.status_code == 400
        assert response.json()['message'] == 'Selected team member is not an active SOC member'

    @pytest.mark.asyncio
    async def test_no_roster_for_date(self, user_client: AsyncClient, roster_day):
        response = await user_client.post(SHIFT_EXCHANGE, json=exchange_payload(date='2025-04-01'))

        assert response.status_code == 404
        assert response.json()['message'] == 'No roster found for selected date'

    @pytest.mark.asyncio
    async def test_partner_has_no_shift(self, user_client: AsyncClient, db_session, user_account, teammate_account):
        db_session.add(RosterEntry(roster_date=ROSTER_DAY, short_name=user_account.short_name, shift='MORNING'))
        await db_session.commit()

        response = await user_client.post(SHIFT_EXCHANGE, json=exchange_payload())

        assert response.status_code == 400
        assert 'selected team member' in response.json()['message']

    @pytest.mark.asyncio
    async def test_failure_rolls_back_swap(self, user_client: AsyncClient, db_session, roster_day, monkeypatch):
        async def broken_notification(*args, **kwargs):
            raise RuntimeError('notification table unavailable')

        monkeypatch.setattr(
            'soc_portal.services.roster_service.create_user_notification', broken_notification
        )

        with pytest.raises(RuntimeError):
            await user_client.post(SHIFT_EXCHANGE, json=exchange_payload())

        assert await shifts(db_session) == {'ALI': 'MORNING', 'BOB': 'NIGHT'}
        assert (await db_session.execute(select(RosterScheduleNote))).first() is None

    @pytest.mark.asyncio
    async def test_admin_cannot_exchange(self, admin_client: AsyncClient):
        response = await admin_client.post(SHIFT_EXCHANGE, json=exchange_payload())

        assert response.status_code == 403
