"""
Unit Tests for menu path permissions
"""
import pytest

from soc_portal.models.role_permission import RolePermission
from soc_portal.services.permission_service import is_path_allowed, normalize_path, resolve_permissions


class TestIsPathAllowed:

    ALLOWED = ['/user_dashboard/roster', '/user_dashboard/reports/']

    @pytest.mark.parametrize('path,expected', [
        ('/user_dashboard', True),
        ('/user_dashboard/', True),
        ('/user_dashboard/roster', True),
        ('/user_dashboard/roster/', True),
        ('/user_dashboard/roster?month=3', True),
        ('/user_dashboard/roster/shift_exchange', True),
        ('/user_dashboard/roster/shift_exchange/history', False),
        ('/user_dashboard/reports', True),
        ('/user_dashboard/rosterx', False),
        ('/user_dashboard/settings', False),
    ])
    def test_paths(self, path, expected):
        assert is_path_allowed(path, self.ALLOWED) is expected

    def test_nothing_allowed(self):
        assert is_path_allowed('/user_dashboard/roster', []) is False

    def test_normalize(self):
        assert normalize_path('/a/b/?x=1#top') == '/a/b'
        assert normalize_path('/') == '/'
        assert normalize_path('') == '/'


class TestResolvePermissions:

    @pytest.mark.asyncio
    async def test_user_override_allows_denied_default(self, db_session):
        db_session.add_all([
            RolePermission(role_type='INTERN', menu_path='/user_dashboard/roster', is_allowed=False),
            RolePermission(role_type='INTERN', soc_portal_id='U05SOCP', menu_path='/user_dashboard/roster', is_allowed=True),
        ])
        await db_session.commit()

        allowed, denied = await resolve_permissions(db_session, 'U05SOCP', 'INTERN')
        assert allowed == ['/user_dashboard/roster']
        assert denied == []

        allowed, denied = await resolve_permissions(db_session, 'U06SOCP', 'INTERN')
        assert allowed == []
        assert denied == ['/user_dashboard/roster']

    @pytest.mark.asyncio
    async def test_other_role_ignored(self, db_session):
        db_session.add(RolePermission(role_type='OPS', menu_path='/user_dashboard/ops', is_allowed=True))
        await db_session.commit()

        assert await resolve_permissions(db_session, 'U01SOCP', 'SOC') == ([], [])
