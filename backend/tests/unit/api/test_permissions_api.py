"""
Unit Tests for permission endpoints
"""
import pytest
from httpx import AsyncClient
from sqlalchemy import select

from soc_portal.models.activity_log import ActivityLog, AuthAuditLog
from soc_portal.models.role_permission import RolePermission

USER_PERMISSIONS = '/api/v1/permissions/user_permissions'
UNAUTHORIZED_ALERT = '/api/v1/permissions/unauthorized_alert'


@pytest.fixture
async def soc_permissions(db_session, user_account):
    db_session.add_all([
        RolePermission(role_type='SOC', menu_path='/user_dashboard/roster', is_allowed=True),
        RolePermission(role_type='SOC', menu_path='/user_dashboard/reports', is_allowed=True),
        RolePermission(role_type='SOC', menu_path='/user_dashboard/settings', is_allowed=True),
        RolePermission(role_type='OPS', menu_path='/user_dashboard/ops', is_allowed=True),
        # User override denies a role default
        RolePermission(
            role_type='SOC',
            soc_portal_id=user_account.soc_portal_id,
            menu_path='/user_dashboard/reports',
            is_allowed=False,
        ),
    ])
    await db_session.commit()


class TestUserPermissions:

    @pytest.mark.asyncio
    async def test_defaults_to_caller(self, user_client: AsyncClient, soc_permissions):
        response = await user_client.get(USER_PERMISSIONS)

        assert response.status_code == 200
        assert response.json() == {
            'success': True,
            'permissions': ['/user_dashboard/roster', '/user_dashboard/settings'],
            'deniedPaths': ['/user_dashboard/reports'],
        }

    @pytest.mark.asyncio
    async def test_user_cannot_read_others(self, user_client: AsyncClient, soc_permissions):
        response = await user_client.get(USER_PERMISSIONS, params={'soc_portal_id': 'U02SOCP'})

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_reads_any_user(self, admin_client: AsyncClient, soc_permissions):
        response = await admin_client.get(USER_PERMISSIONS, params={
            'soc_portal_id': 'U02SOCP',
            'role_type': 'SOC',
        })

        assert response.status_code == 200
        assert response.json()['permissions'] == [
            '/user_dashboard/reports',
            '/user_dashboard/roster',
            '/user_dashboard/settings',
        ]

    @pytest.mark.asyncio
    async def test_admin_must_name_user(self, admin_client: AsyncClient):
        response = await admin_client.get(USER_PERMISSIONS)

        assert response.status_code == 400
        assert response.json()['message'] == 'User ID and role type are required'


class TestUnauthorizedAlert:

    @pytest.mark.asyncio
    async def test_route_access_alert(self, user_client: AsyncClient, db_session, alerts):
        response = await user_client.post(UNAUTHORIZED_ALERT, json={
            'attemptedUrl': '/user_dashboard/reports',
            'alertType': 'UNAUTHORIZED_ROUTE_ACCESS',
        })

        assert response.status_code == 200
        assert response.json()['alertType'] == 'UNAUTHORIZED_ROUTE_ACCESS'
        assert alerts.contains('UNAUTHORIZED ACCESS ATTEMPT')

        activity = (await db_session.execute(select(ActivityLog))).scalar_one()
        assert activity.action == 'UNAUTHORIZED_ACCESS'
        audit = (await db_session.execute(
            select(AuthAuditLog).where(AuthAuditLog.event == 'unauthorized_access')
        )).scalar_one()
        assert audit.severity == 'HIGH'

    @pytest.mark.asyncio
    async def test_admin_dashboard_attempt(self, user_client: AsyncClient, alerts):
        response = await user_client.post(UNAUTHORIZED_ALERT, json={
            'attemptedUrl': '/admin_dashboard/users',
            'alertType': 'ADMIN_ACCESS_ATTEMPT',
        })

        assert response.status_code == 200
        assert alerts.contains('ADMIN DASHBOARD ACCESS ATTEMPT')
        assert alerts.contains('BLOCKED - User attempted admin access')

    @pytest.mark.asyncio
    async def test_requires_session(self, client: AsyncClient):
        response = await client.post(UNAUTHORIZED_ALERT, json={'attemptedUrl': '/admin_dashboard'})

        assert response.status_code == 401
