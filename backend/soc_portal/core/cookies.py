"""
Session cookies.

`SessionCookies` is the single parser for the cookie set issued at login.
Handlers read identity and correlation values through its typed accessors
instead of splitting the Cookie header themselves.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Mapping, Optional

from starlette.requests import Request
from starlette.responses import Response

from soc_portal.modules.auth.session_policy import format_timestamp, parse_timestamp, utcnow


SESSION_ID = "sessionId"
EMAIL = "email"
EID = "eid"
SOC_PORTAL_ID = "socPortalId"
USER_TYPE = "userType"
ROLE_TYPE = "roleType"
LOGIN_TIME = "loginTime"
LAST_ACTIVITY = "lastActivity"

SESSION_COOKIE_NAMES = (
    SESSION_ID,
    EMAIL,
    EID,
    SOC_PORTAL_ID,
    USER_TYPE,
    ROLE_TYPE,
    LOGIN_TIME,
    LAST_ACTIVITY,
)

# Only the opaque token is hidden from scripts
HTTP_ONLY_COOKIES = {SESSION_ID}


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class SessionCookies:
    session_id: Optional[str] = None
    email: Optional[str] = None
    eid: Optional[str] = None
    soc_portal_id: Optional[str] = None
    user_type: Optional[str] = None
    role_type: Optional[str] = None
    login_time_raw: Optional[str] = None
    last_activity_raw: Optional[str] = None

    @classmethod
    def from_mapping(cls, cookies: Mapping[str, str]) -> "SessionCookies":
        return cls(
            session_id=_clean(cookies.get(SESSION_ID)),
            email=_clean(cookies.get(EMAIL)),
            eid=_clean(cookies.get(EID)),
            soc_portal_id=_clean(cookies.get(SOC_PORTAL_ID)),
            user_type=_clean(cookies.get(USER_TYPE)),
            role_type=_clean(cookies.get(ROLE_TYPE)),
            login_time_raw=_clean(cookies.get(LOGIN_TIME)),
            last_activity_raw=_clean(cookies.get(LAST_ACTIVITY)),
        )

    @classmethod
    def from_request(cls, request: Request) -> "SessionCookies":
        return cls.from_mapping(request.cookies)

    @property
    def has_credentials(self) -> bool:
        return bool(self.email and self.session_id)

    @property
    def last_activity(self) -> Optional[datetime]:
        return parse_timestamp(self.last_activity_raw)

    @property
    def login_time(self) -> Optional[datetime]:
        return parse_timestamp(self.login_time_raw)

    @property
    def last_activity_malformed(self) -> bool:
        return self.last_activity_raw is not None and self.last_activity is None

    def audit_context(self) -> dict:
        """Correlation fields attached to log entries and audit rows"""
        return {
            "eid": self.eid or "N/A",
            "sid": self.session_id or "N/A",
            "soc_portal_id": self.soc_portal_id or "N/A",
        }


def set_session_cookies(
    response: Response,
    values: Mapping[str, str],
    max_age: int,
    secure: bool = False,
) -> None:
    """Write the login cookie set"""
    for name, value in values.items():
        response.set_cookie(
            key=name,
            value=value,
            max_age=max_age,
            path="/",
            httponly=name in HTTP_ONLY_COOKIES,
            secure=secure,
            samesite="strict",
        )


def refresh_last_activity(
    response: Response,
    max_age: int,
    secure: bool = False,
    now: Optional[datetime] = None,
) -> str:
    value = format_timestamp(now or utcnow())
    response.set_cookie(
        key=LAST_ACTIVITY,
        value=value,
        max_age=max_age,
        path="/",
        httponly=False,
        secure=secure,
        samesite="strict",
    )
    return value


def clear_session_cookies(response: Response) -> None:
    for name in SESSION_COOKIE_NAMES:
        response.delete_cookie(key=name, path="/")
