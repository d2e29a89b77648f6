from dataclasses import dataclass

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from soc_portal.core.cache import TTLCache
from soc_portal.core.config import settings
from soc_portal.core.cookies import SessionCookies
from soc_portal.core.database import get_db
from soc_portal.core.exceptions import AuthorizationError
from soc_portal.core.logging_config import set_portal_id
from soc_portal.core.request_utils import get_client_ip, get_user_agent
from soc_portal.modules.auth.gate import AuthGate, GateSuccess
from soc_portal.modules.auth.identity import Identity, AdminIdentity
from soc_portal.modules.auth.session_policy import SessionPolicy
from soc_portal.services.alert_service import AlertService, get_alert_service


_session_policy = SessionPolicy.from_minutes(
    settings.SESSION_TIMEOUT_MINUTES,
    warning_ratio=settings.SESSION_WARNING_RATIO,
)

_welcome_cache: TTLCache = TTLCache(ttl=settings.WELCOME_CHECK_CACHE_SECONDS)


def get_session_policy() -> SessionPolicy:
    """Timeout policy shared by every gate check"""
    return _session_policy


def get_welcome_cache() -> TTLCache:
    """Short-lived welcome-check results, keyed by portal id"""
    return _welcome_cache


def get_auth_gate(
    db: AsyncSession = Depends(get_db),
    policy: SessionPolicy = Depends(get_session_policy),
    alerts: AlertService = Depends(get_alert_service),
) -> AuthGate:
    return AuthGate(db, policy, alerts)


@dataclass(frozen=True)
class RequestActor:
    """Authenticated identity plus the correlation values handlers log with"""
    identity: Identity
    cookies: SessionCookies
    ip_address: str
    user_agent: str

    @property
    def soc_portal_id(self) -> str:
        return self.identity.soc_portal_id

    @property
    def is_admin(self) -> bool:
        return isinstance(self.identity, AdminIdentity)


async def get_current_actor(
    request: Request,
    gate: AuthGate = Depends(get_auth_gate),
) -> RequestActor:
    """Run the auth gate for a feature handler; failures raise the gate's errors"""
    cookies = SessionCookies.from_request(request)
    ip_address = get_client_ip(request)
    success: GateSuccess = await gate.check(cookies, ip_address=ip_address, audit_success=False)
    set_portal_id(success.soc_portal_id)
    return RequestActor(
        identity=success.identity,
        cookies=cookies,
        ip_address=ip_address,
        user_agent=get_user_agent(request),
    )


async def get_current_admin(
    actor: RequestActor = Depends(get_current_actor),
) -> RequestActor:
    """Require an admin identity"""
    if not actor.is_admin:
        raise AuthorizationError("Admin access required")
    return actor
