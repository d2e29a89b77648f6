"""
Auth guard run before a protected page renders.

The guard asks the server gate once per mount. Until the answer arrives only
the loading indicator is rendered; afterwards the page is either rendered or
a redirect has been requested. Toasts go through a one-shot notifier so
re-rendering never repeats them.
"""

import logging
from enum import Enum
from typing import Callable, Iterable, Optional

import httpx

from soc_portal.core.cookies import ROLE_TYPE
from soc_portal.modules.auth.identity import ADMIN_TYPE, USER_TYPE, effective_role_for
from soc_portal.services.permission_service import normalize_path, is_path_allowed
from soc_cli.api_client import read_cookie
from soc_cli.notifier import ConsoleNotifier, NotificationLevel, OneShotNotifier


logger = logging.getLogger("soc_portal.cli")

ADMIN_HOME = "/admin_dashboard"
USER_HOME = "/user_dashboard"
SESSION_EXPIRED_REDIRECT = "/?sessionExpired=true"
AUTH_REQUIRED_REDIRECT = "/?authRequired=true"

SESSION_EXPIRED_TOAST = "Session expired! Please login again"
AUTH_REQUIRED_TOAST = "Authentication required! Please login"
ACCESS_DENIED_TOAST = "Access denied"

ADMIN_ACCESS_ATTEMPT = "ADMIN_ACCESS_ATTEMPT"
UNAUTHORIZED_ROUTE_ACCESS = "UNAUTHORIZED_ROUTE_ACCESS"

LOADING_INDICATOR = "Loading..."


class GuardState(str, Enum):
    LOADING = "loading"
    AUTHORIZED = "authorized"
    REDIRECTED = "redirected"


def _under(path: str, root: str) -> bool:
    return path == root or path.startswith(root + "/")


class AuthGuard:
    """Gate one page mount on the server's check_auth answer"""

    def __init__(
        self,
        client,
        required_roles: Iterable[str] = (),
        path: str = "/",
        notifier=None,
        navigator: Optional[Callable[[str], None]] = None,
    ):
        self.client = client
        self.required_roles = tuple(required_roles)
        self.path = normalize_path(path)
        self.toast = OneShotNotifier(notifier or ConsoleNotifier())
        self.navigator = navigator or (lambda url: None)

        self.state = GuardState.LOADING
        self.redirect_to: Optional[str] = None
        self.role: Optional[str] = None
        self.user_type: Optional[str] = None
        self.soc_portal_id: Optional[str] = None
        self._checked = False

    async def mount(self) -> GuardState:
        """Run the check; repeated calls within one mount reuse the first result"""
        if self._checked:
            return self.state
        self._checked = True

        try:
            response = await self.client.check_auth()
        except httpx.HTTPError as e:
            logger.warning(f"check_auth request failed: {e}")
            return self._fail(AUTH_REQUIRED_TOAST, AUTH_REQUIRED_REDIRECT)

        if not response.ok or not response.data.get("authenticated"):
            if response.status_code == 401 and response.message == "Session expired":
                return self._fail(SESSION_EXPIRED_TOAST, SESSION_EXPIRED_REDIRECT)
            return self._fail(AUTH_REQUIRED_TOAST, AUTH_REQUIRED_REDIRECT)

        self.user_type = response.data.get("userType")
        self.soc_portal_id = response.data.get("socPortalId")
        self.role = effective_role_for(self.user_type, response.data.get("role"))

        if self.user_type == USER_TYPE and _under(self.path, ADMIN_HOME):
            await self._report(ADMIN_ACCESS_ATTEMPT)
            return self._deny(USER_HOME)

        if self.required_roles and self.role not in self.required_roles:
            return self._deny(ADMIN_HOME if self.user_type == ADMIN_TYPE else USER_HOME)

        if self.user_type == USER_TYPE and _under(self.path, USER_HOME) and self.path != USER_HOME:
            if not await self._path_permitted():
                await self._report(UNAUTHORIZED_ROUTE_ACCESS)
                return self._deny(USER_HOME)

        self.state = GuardState.AUTHORIZED
        return self.state

    def render(self, content):
        """Loading indicator, the page content, or nothing once redirected"""
        if self.state == GuardState.LOADING:
            return LOADING_INDICATOR
        if self.state == GuardState.AUTHORIZED:
            return content
        return None

    def unmount(self) -> None:
        self.toast.reset()
        self.state = GuardState.LOADING
        self.redirect_to = None
        self._checked = False

    async def _path_permitted(self) -> bool:
        role_type = read_cookie(self.client.cookies, ROLE_TYPE)
        try:
            response = await self.client.user_permissions(self.soc_portal_id, role_type)
        except httpx.HTTPError as e:
            logger.warning(f"user_permissions request failed: {e}")
            return False
        if not response.ok:
            return False
        return is_path_allowed(self.path, response.data.get("permissions") or [])

    async def _report(self, alert_type: str) -> None:
        try:
            await self.client.unauthorized_alert(self.path, alert_type)
        except httpx.HTTPError as e:
            logger.warning(f"unauthorized_alert request failed: {e}")

    def _fail(self, message: str, redirect_to: str) -> GuardState:
        self.toast.notify(NotificationLevel.ERROR, message)
        return self._redirect(redirect_to)

    def _deny(self, redirect_to: str) -> GuardState:
        self.toast.notify(NotificationLevel.ERROR, ACCESS_DENIED_TOAST)
        return self._redirect(redirect_to)

    def _redirect(self, url: str) -> GuardState:
        self.state = GuardState.REDIRECTED
        self.redirect_to = url
        self.navigator(url)
        return self.state
