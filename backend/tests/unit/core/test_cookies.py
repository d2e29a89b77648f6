"""
Unit Tests for session cookie parsing and writing
"""
from datetime import datetime, timezone

from starlette.responses import Response

from soc_portal.core.cookies import (
    SessionCookies,
    SESSION_COOKIE_NAMES,
    set_session_cookies,
    refresh_last_activity,
    clear_session_cookies,
)


def _set_cookie_headers(response: Response) -> list:
    return [value.decode() for key, value in response.raw_headers if key == b"set-cookie"]


class TestSessionCookies:

    def test_from_mapping_reads_all_fields(self):
        cookies = SessionCookies.from_mapping({
            "sessionId": "abc",
            "email": "analyst@nagad.com.bd",
            "eid": "SOC-100200",
            "socPortalId": "U01SOCP",
            "userType": "user",
            "roleType": "SOC",
            "loginTime": "2026-03-01T12:00:00.000Z",
            "lastActivity": "2026-03-01T12:05:00.000Z",
        })

        assert cookies.has_credentials
        assert cookies.soc_portal_id == "U01SOCP"
        assert cookies.role_type == "SOC"
        assert cookies.last_activity == datetime(2026, 3, 1, 12, 5, tzinfo=timezone.utc)
        assert cookies.login_time == datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

    def test_blank_values_are_absent(self):
        cookies = SessionCookies.from_mapping({"sessionId": "  ", "email": "a@b.c"})
        assert cookies.session_id is None
        assert not cookies.has_credentials

    def test_missing_email_or_session(self):
        assert not SessionCookies.from_mapping({"email": "a@b.c"}).has_credentials
        assert not SessionCookies.from_mapping({"sessionId": "abc"}).has_credentials
        assert not SessionCookies.from_mapping({}).has_credentials

    def test_malformed_last_activity(self):
        cookies = SessionCookies.from_mapping({"lastActivity": "not-a-date"})
        assert cookies.last_activity is None
        assert cookies.last_activity_malformed

    def test_absent_last_activity_not_malformed(self):
        assert not SessionCookies.from_mapping({}).last_activity_malformed

    def test_audit_context_defaults(self):
        assert SessionCookies().audit_context() == {"eid": "N/A", "sid": "N/A", "soc_portal_id": "N/A"}


class TestCookieWriting:

    def test_set_session_cookies_http_only_for_session_id(self):
        response = Response()
        set_session_cookies(response, {"sessionId": "abc", "email": "a@b.c"}, max_age=60)

        headers = _set_cookie_headers(response)
        session_header = next(h for h in headers if h.startswith("sessionId="))
        email_header = next(h for h in headers if h.startswith("email="))

        assert "HttpOnly" in session_header
        assert "HttpOnly" not in email_header
        assert "SameSite=strict" in session_header
        assert "Max-Age=60" in session_header

    def test_secure_flag(self):
        response = Response()
        set_session_cookies(response, {"sessionId": "abc"}, max_age=60, secure=True)
        assert "Secure" in _set_cookie_headers(response)[0]

    def test_refresh_last_activity(self):
        response = Response()
        now = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

        value = refresh_last_activity(response, max_age=60, now=now)

        assert value == "2026-03-01T12:00:00.000Z"
        assert _set_cookie_headers(response)[0].startswith("lastActivity=")

    def test_clear_session_cookies_expires_every_name(self):
        response = Response()
        clear_session_cookies(response)

        headers = _set_cookie_headers(response)
        cleared = {h.split("=", 1)[0] for h in headers}
        assert cleared == set(SESSION_COOKIE_NAMES)
        assert all("Max-Age=0" in h for h in headers)
