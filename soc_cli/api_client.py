"""
HTTP client for the SOC Portal API.

Authentication is cookie based: the jar received at login is sent back on
every call, and the activity tracker writes `lastActivity` into the same jar.
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import httpx

from soc_portal.core.cookies import SESSION_COOKIE_NAMES


@dataclass
class ApiResponse:
    status_code: int
    data: Dict[str, Any]

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def message(self) -> str:
        return self.data.get("message") or ""


def read_cookie(jar: httpx.Cookies, name: str) -> Optional[str]:
    """First value for `name` across domains (Cookies.get raises on duplicates)"""
    for cookie in jar.jar:
        if cookie.name == name:
            return cookie.value
    return None


def write_cookie(jar: httpx.Cookies, name: str, value: str) -> None:
    """Replace `name` in place, keeping the domain the server set it for"""
    domain, path = "", "/"
    for cookie in list(jar.jar):
        if cookie.name == name:
            domain, path = cookie.domain, cookie.path
            jar.jar.clear(cookie.domain, cookie.path, cookie.name)
    jar.set(name, value, domain=domain, path=path)


def clear_session_cookies(jar: httpx.Cookies) -> None:
    for cookie in list(jar.jar):
        if cookie.name in SESSION_COOKIE_NAMES:
            jar.jar.clear(cookie.domain, cookie.path, cookie.name)


def _decode(response: httpx.Response) -> ApiResponse:
    try:
        data = response.json()
    except ValueError:
        data = {"message": response.text}
    if not isinstance(data, dict):
        data = {"data": data}
    return ApiResponse(status_code=response.status_code, data=data)


class PortalClient:
    """Async SOC Portal API client"""

    def __init__(
        self,
        server_url: str = "http://localhost:8000/api/v1",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.server_url = server_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.server_url,
            timeout=timeout,
            transport=transport,
        )

    @property
    def cookies(self) -> httpx.Cookies:
        return self._client.cookies

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "PortalClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    async def login(self, email: str, password: str) -> ApiResponse:
        response = await self._client.post("/auth/login", json={"email": email, "password": password})
        return _decode(response)

    async def logout(self, reason: str = "user_initiated") -> ApiResponse:
        response = await self._client.post("/auth/logout", json={"reason": reason})
        return _decode(response)

    async def check_auth(self) -> ApiResponse:
        response = await self._client.get("/auth/check_auth")
        return _decode(response)

    async def user_permissions(
        self, soc_portal_id: Optional[str] = None, role_type: Optional[str] = None
    ) -> ApiResponse:
        params = {"soc_portal_id": soc_portal_id, "role_type": role_type}
        response = await self._client.get(
            "/permissions/user_permissions",
            params={key: value for key, value in params.items() if value},
        )
        return _decode(response)

    async def unauthorized_alert(self, attempted_url: str, alert_type: str) -> ApiResponse:
        response = await self._client.post(
            "/permissions/unauthorized_alert",
            json={"attemptedUrl": attempted_url, "alertType": alert_type},
        )
        return _decode(response)

    # ==================== Cookie persistence ====================

    def save_cookies(self, path: str) -> None:
        """Persist the session jar (owner-readable only)"""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        entries = [
            {"name": c.name, "value": c.value, "domain": c.domain, "path": c.path}
            for c in self.cookies.jar
        ]
        with open(target, "w") as f:
            json.dump(entries, f, indent=2)
        os.chmod(target, 0o600)

    def load_cookies(self, path: str) -> bool:
        target = Path(path)
        if not target.exists():
            return False
        with open(target) as f:
            entries = json.load(f)
        for entry in entries:
            self.cookies.set(entry["name"], entry["value"], domain=entry.get("domain", ""), path=entry.get("path", "/"))
        return True

    @staticmethod
    def forget_cookies(path: str) -> None:
        target = Path(path)
        if target.exists():
            target.unlink()
