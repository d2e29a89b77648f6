"""
Server-side authentication gate.

Decides, from the session cookies alone, whether a request is authenticated
and as whom. The checks run in a fixed order and the first failure wins:

    1. email + sessionId present           else 401 missing credentials
    2. lastActivity within the timeout     else 401 session expired
    3. email resolves (admin, then user)   else 404 account not found
    4. account status is Active            else 403 account inactive
    5. socPortalId cookie matches store    else 403 invalid credentials

Every decision is written to the auth audit log and the application log.
Unexpected failures surface as PortalSystemError after a CRITICAL log entry
and an alert.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from soc_portal.core.cookies import SessionCookies
from soc_portal.core.exceptions import (
    SocPortalError,
    AuthenticationError,
    SessionExpiredError,
    AccountNotFoundError,
    AccountInactiveError,
    InvalidCredentialsError,
    PortalSystemError,
)
from soc_portal.core.logging_config import logger
from soc_portal.models.admin import AccountStatus
from soc_portal.modules.auth.identity import (
    Identity,
    effective_role,
    user_type,
    is_active,
    resolve_identity,
)
from soc_portal.modules.auth.session_policy import SessionPolicy, utcnow
from soc_portal.services.activity_service import record_auth_audit
from soc_portal.services.alert_service import AlertService, format_alert


MISSING_CREDENTIALS_MESSAGE = "Unauthenticated: missing credentials"
RESIGNED_MESSAGE = "You Already Gave Your Resignation"


@dataclass(frozen=True)
class GateSuccess:
    identity: Identity

    @property
    def role(self) -> str:
        return effective_role(self.identity)

    @property
    def user_type(self) -> str:
        return user_type(self.identity)

    @property
    def soc_portal_id(self) -> str:
        return self.identity.soc_portal_id

    def to_response(self) -> dict:
        return {
            "authenticated": True,
            "role": self.role,
            "userType": self.user_type,
            "socPortalId": self.soc_portal_id,
        }


class AuthGate:
    """
    Cookie-based session validation.

    Usage:
        gate = AuthGate(db, policy, alerts)
        success = await gate.check(SessionCookies.from_request(request))
    """

    def __init__(
        self,
        db: AsyncSession,
        policy: SessionPolicy,
        alerts: AlertService,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.db = db
        self.policy = policy
        self.alerts = alerts
        self.clock = clock

    async def check(
        self,
        cookies: SessionCookies,
        ip_address: Optional[str] = None,
        audit_success: bool = True,
    ) -> GateSuccess:
        try:
            return await self._check(cookies, ip_address, audit_success)
        except SocPortalError:
            raise
        except Exception as e:
            logger.log_error_with_context(
                e,
                context="auth_gate",
                critical=True,
                user_email=cookies.email,
                **cookies.audit_context(),
            )
            self.alerts.dispatch(format_alert("Auth Check Failure", {
                "Email": cookies.email,
                "Session": cookies.session_id,
                "EID": cookies.eid,
                "IP Address": ip_address,
                "Error": type(e).__name__,
            }, status="CRITICAL"))
            raise PortalSystemError("Internal server error") from e

    async def _check(
        self,
        cookies: SessionCookies,
        ip_address: Optional[str],
        audit_success: bool,
    ) -> GateSuccess:
        if not cookies.has_credentials:
            await self._audit(cookies, ip_address, "missing_credentials", "HIGH", MISSING_CREDENTIALS_MESSAGE)
            self.alerts.dispatch(format_alert("Unauthenticated Access", {
                "Email": cookies.email,
                "Session": cookies.session_id,
                "EID": cookies.eid,
                "IP Address": ip_address,
            }, status="Missing credentials"))
            raise AuthenticationError(MISSING_CREDENTIALS_MESSAGE)

        if self._is_expired(cookies):
            await self._audit(cookies, ip_address, "expired", "MEDIUM", "Session expired")
            raise SessionExpiredError()

        identity = await resolve_identity(self.db, cookies.email)
        if identity is None:
            await self._audit(cookies, ip_address, "not_found", "MEDIUM", "Account not found")
            raise AccountNotFoundError(cookies.email)

        if not is_active(identity):
            message = RESIGNED_MESSAGE if identity.status == AccountStatus.RESIGNED.value else "Account inactive"
            await self._audit(cookies, ip_address, "inactive", "MEDIUM", message, identity.soc_portal_id)
            raise AccountInactiveError(identity.status, message)

        if cookies.soc_portal_id and cookies.soc_portal_id != identity.soc_portal_id:
            await self._audit(
                cookies, ip_address, "invalid_portal_id", "HIGH", "Invalid credentials", identity.soc_portal_id
            )
            raise InvalidCredentialsError()

        if audit_success:
            await self._audit(cookies, ip_address, "success", "LOW", "Authenticated", identity.soc_portal_id)
        return GateSuccess(identity=identity)

    def _is_expired(self, cookies: SessionCookies) -> bool:
        if cookies.last_activity_raw is None:
            return False
        last_activity = cookies.last_activity
        if last_activity is None:
            # Unreadable heartbeat: fail closed
            return True
        return self.policy.is_expired(last_activity, self.clock())

    async def _audit(
        self,
        cookies: SessionCookies,
        ip_address: Optional[str],
        outcome: str,
        severity: str,
        message: str,
        soc_portal_id: Optional[str] = None,
    ) -> None:
        success = outcome == "success"
        logger.log_auth_event(
            "check_auth",
            success=success,
            user_email=cookies.email,
            reason=None if success else message,
            severity=severity,
            **cookies.audit_context(),
        )
        record_auth_audit(
            self.db,
            event="check_auth",
            outcome=outcome,
            severity=severity,
            message=message,
            email=cookies.email,
            soc_portal_id=soc_portal_id or cookies.soc_portal_id,
            session_id=cookies.session_id,
            eid=cookies.eid,
            ip_address=ip_address,
        )
        # Audit rows persist even when the request is about to fail
        await self.db.commit()
