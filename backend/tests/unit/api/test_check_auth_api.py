"""
Unit Tests for GET /api/v1/auth/check_auth
"""
from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient

from soc_portal.models.admin import AccountStatus
from tests.mocks.factories import session_cookie_values, set_client_cookies

CHECK_AUTH = '/api/v1/auth/check_auth'


class TestCheckAuth:
    """Server gate over HTTP"""

    @pytest.mark.asyncio
    async def test_missing_credentials(self, client: AsyncClient, alerts):
        response = await client.get(CHECK_AUTH)

        assert response.status_code == 401
        assert response.json() == {
            'authenticated': False,
            'message': 'Unauthenticated: missing credentials',
        }
        assert alerts.contains('UNAUTHENTICATED ACCESS')

    @pytest.mark.asyncio
    async def test_admin_without_last_activity(self, client: AsyncClient, admin_account):
        """Scenario A"""
        set_client_cookies(client, session_cookie_values(admin_account, 'admin', lastActivity=None))

        response = await client.get(CHECK_AUTH)

        assert response.status_code == 200
        data = response.json()
        assert data['authenticated'] is True
        assert data['userType'] == 'admin'
        assert data['role'] == 'Super Admin'
        assert data['socPortalId'] == admin_account.soc_portal_id

    @pytest.mark.asyncio
    async def test_inactive_admin(self, client: AsyncClient, db_session, admin_account):
        """Scenario B"""
        admin_account.status = AccountStatus.INACTIVE.value
        await db_session.commit()
        set_client_cookies(client, session_cookie_values(admin_account, 'admin'))

        response = await client.get(CHECK_AUTH)

        assert response.status_code == 403
        assert response.json() == {'authenticated': False, 'message': 'Account inactive'}

    @pytest.mark.asyncio
    async def test_expired_session_clears_cookies(self, client: AsyncClient, admin_account):
        """Scenario C"""
        stale = datetime.now(timezone.utc) - timedelta(minutes=20)
        set_client_cookies(client, session_cookie_values(admin_account, 'admin', last_activity=stale))

        response = await client.get(CHECK_AUTH)

        assert response.status_code == 401
        assert response.json() == {'authenticated': False, 'message': 'Session expired'}
        cleared = {h.split('=', 1)[0] for h in response.headers.get_list('set-cookie')}
        assert {'sessionId', 'email', 'lastActivity', 'socPortalId'} <= cleared
        assert client.cookies.get('sessionId') is None

    @pytest.mark.asyncio
    async def test_portal_id_mismatch(self, client: AsyncClient, user_account):
        """Scenario D"""
        set_client_cookies(client, session_cookie_values(user_account, 'user', socPortalId='U99SOCP'))

        response = await client.get(CHECK_AUTH)

        assert response.status_code == 403
        assert response.json()['message'] == 'Invalid credentials'

    @pytest.mark.asyncio
    async def test_unknown_account(self, client: AsyncClient, user_account):
        values = session_cookie_values(user_account, 'user', email='ghost@nagad.com.bd')
        set_client_cookies(client, values)

        response = await client.get(CHECK_AUTH)

        assert response.status_code == 404
        assert response.json()['message'] == 'Account not found'

    @pytest.mark.asyncio
    async def test_success_refreshes_last_activity(self, client: AsyncClient, user_account):
        earlier = datetime.now(timezone.utc) - timedelta(minutes=5)
        values = session_cookie_values(user_account, 'user', last_activity=earlier)
        set_client_cookies(client, values)

        response = await client.get(CHECK_AUTH)

        assert response.status_code == 200
        assert response.json()['role'] == 'User'
        assert client.cookies.get('lastActivity') != values['lastActivity']

    @pytest.mark.asyncio
    async def test_repeated_checks_do_not_expire(self, user_client: AsyncClient):
        """Heartbeat round-trip: each success re-arms the timeout"""
        for _ in range(3):
            response = await user_client.get(CHECK_AUTH)
            assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_security_headers(self, client: AsyncClient):
        response = await client.get(CHECK_AUTH)

        assert response.headers['X-Content-Type-Options'] == 'nosniff'
        assert response.headers['X-Frame-Options'] == 'DENY'
        assert 'X-Request-ID' in response.headers
