"""
Unit Tests for notification endpoints
"""
import pytest
from httpx import AsyncClient
from sqlalchemy import select

from soc_portal.models.notification import UserNotification, NotificationStatus
from soc_portal.services.notification_service import create_admin_notification, create_user_notification

NOTIFICATIONS = '/api/v1/notifications'


@pytest.fixture
async def user_notifications(db_session, user_account, teammate_account):
    mine = [
        await create_user_notification(db_session, user_account.soc_portal_id, 'Shift Exchange: You exchanged shift'),
        await create_user_notification(db_session, user_account.soc_portal_id, 'Security breach detected on VPN gateway'),
    ]
    other = await create_user_notification(db_session, teammate_account.soc_portal_id, 'Welcome to SOC Portal')
    await db_session.commit()
    return mine, other


class TestListNotifications:

    @pytest.mark.asyncio
    async def test_requires_session(self, client: AsyncClient):
        response = await client.get(NOTIFICATIONS)

        assert response.status_code == 401
        assert response.json()['success'] is False

    @pytest.mark.asyncio
    async def test_user_sees_only_own(self, user_client: AsyncClient, user_notifications):
        mine, _ = user_notifications

        response = await user_client.get(NOTIFICATIONS)

        assert response.status_code == 200
        data = response.json()
        assert {n['id'] for n in data} == {n.notification_id for n in mine}
        for item in data:
            assert item['read'] is False
            assert item['time'] == 'Just now'
        icons = {item['title']: item['icon'] for item in data}
        assert icons['Security breach detected on VPN gateway'] == 'alert'

    @pytest.mark.asyncio
    async def test_admin_sees_admin_feed(self, admin_client: AsyncClient, db_session):
        created = await create_admin_notification(db_session, 'New User Added: Ali Khan (U01SOCP) as SOC')
        await db_session.commit()

        response = await admin_client.get(NOTIFICATIONS)

        assert response.status_code == 200
        assert response.json() == [{
            'id': created.notification_id,
            'title': 'New User Added: Ali Khan (U01SOCP) as SOC',
            'time': 'Just now',
            'read': False,
            'icon': 'user',
        }]


class TestMarkRead:

    @pytest.mark.asyncio
    async def test_mark_single_read(self, user_client: AsyncClient, user_notifications):
        mine, _ = user_notifications
        target = mine[0].notification_id

        response = await user_client.put(f'{NOTIFICATIONS}/{target}')

        assert response.status_code == 200
        assert response.json()['data']['read'] is True

    @pytest.mark.asyncio
    async def test_mark_unknown(self, user_client: AsyncClient):
        response = await user_client.put(f'{NOTIFICATIONS}/UN9999SOCP')

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_cannot_mark_another_users(self, user_client: AsyncClient, user_notifications):
        _, other = user_notifications

        response = await user_client.put(f'{NOTIFICATIONS}/{other.notification_id}')

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_bulk_read_scoped_to_caller(self, user_client: AsyncClient, db_session, user_notifications):
        _, other = user_notifications

        response = await user_client.put(f'{NOTIFICATIONS}/bulk_read')

        assert response.status_code == 200
        assert response.json()['data']['updated'] == 2

        untouched = (await db_session.execute(
            select(UserNotification.status).where(UserNotification.notification_id == other.notification_id)
        )).scalar_one()
        assert untouched == NotificationStatus.UNREAD
