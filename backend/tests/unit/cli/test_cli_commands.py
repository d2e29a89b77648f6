"""
Unit Tests for CLI commands, run against the app in-process
"""
import pytest
from httpx import ASGITransport

from soc_portal.main import app
from soc_cli.api_client import PortalClient, read_cookie
from soc_cli.config import ClientConfig
from soc_cli.main import create_parser, run_logout, run_status
from tests.mocks.factories import USER_PASSWORD


@pytest.fixture
def cli_config(tmp_path):
    return ClientConfig(server_url='http://test/api/v1', config_dir=str(tmp_path))


@pytest.fixture
async def portal(client):
    async with PortalClient('http://test/api/v1', transport=ASGITransport(app=app)) as portal_client:
        yield portal_client


class TestParser:

    def test_status_roles(self):
        args = create_parser().parse_args([
            'status', '--path', '/admin_dashboard', '--role', 'Admin', '--role', 'Super Admin',
        ])

        assert args.command == 'status'
        assert args.path == '/admin_dashboard'
        assert args.roles == ['Admin', 'Super Admin']

    def test_status_defaults(self):
        args = create_parser().parse_args(['status'])

        assert args.path == '/user_dashboard'
        assert args.roles == []

    def test_server_url(self):
        args = create_parser().parse_args(['--server-url', 'http://x/api/v1', 'logout'])

        assert args.server_url == 'http://x/api/v1'
        assert args.command == 'logout'


class TestCommands:

    @pytest.mark.asyncio
    async def test_status_authorized(self, portal, cli_config, user_account):
        await portal.login(user_account.email, USER_PASSWORD)

        assert await run_status(portal, cli_config, '/user_dashboard', []) is True

    @pytest.mark.asyncio
    async def test_status_without_session(self, portal, cli_config):
        assert await run_status(portal, cli_config, '/user_dashboard', []) is False

    @pytest.mark.asyncio
    async def test_logout_forgets_cookie_file(self, portal, cli_config, user_account, tmp_path):
        await portal.login(user_account.email, USER_PASSWORD)
        portal.save_cookies(cli_config.cookie_file)

        assert await run_logout(portal, cli_config) is True
        assert not (tmp_path / 'cookies.json').exists()
        assert read_cookie(portal.cookies, 'sessionId') is None
