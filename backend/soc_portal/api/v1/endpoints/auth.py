from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from soc_portal.core.config import settings
from soc_portal.core.cookies import (
    SessionCookies,
    set_session_cookies,
    refresh_last_activity,
    clear_session_cookies,
)
from soc_portal.core.database import get_db
from soc_portal.core.exceptions import SocPortalError, SessionExpiredError
from soc_portal.core.logging_config import logger, set_eid, set_portal_id
from soc_portal.core.rate_limiter import limiter
from soc_portal.core.request_utils import get_client_ip, get_user_agent
from soc_portal.modules.auth.dependencies import get_auth_gate
from soc_portal.modules.auth.gate import AuthGate
from soc_portal.modules.auth.identity import resolve_identity, user_type
from soc_portal.modules.auth.session_service import authenticate, open_session, close_session
from soc_portal.schemas.auth import LoginRequest, LoginResponse, LogoutRequest, CheckAuthResponse
from soc_portal.services.activity_service import ActivityAction, record_activity, record_auth_audit
from soc_portal.services.alert_service import AlertService, get_alert_service, format_alert


router = APIRouter()


def _cookie_max_age() -> int:
    return settings.SESSION_COOKIE_MAX_AGE_DAYS * 24 * 60 * 60


@router.get("/check_auth", response_model=CheckAuthResponse, response_model_exclude_none=True)
async def check_auth(
    request: Request,
    gate: AuthGate = Depends(get_auth_gate),
):
    """
    Validate the caller's session cookies.

    200 {authenticated, role, userType, socPortalId} and a refreshed
    lastActivity cookie, or {authenticated: false, message} with the gate's
    status code. An expired session also clears the session cookies.
    """
    cookies = SessionCookies.from_request(request)
    try:
        success = await gate.check(cookies, ip_address=get_client_ip(request))
    except SocPortalError as e:
        response = JSONResponse(
            status_code=e.status_code,
            content=CheckAuthResponse(authenticated=False, message=e.message).model_dump(exclude_none=True),
        )
        if isinstance(e, SessionExpiredError):
            clear_session_cookies(response)
        return response

    response = JSONResponse(
        content=CheckAuthResponse(**success.to_response()).model_dump(exclude_none=True)
    )
    refresh_last_activity(response, max_age=_cookie_max_age(), secure=settings.is_production)
    return response


@router.post("/login", response_model=LoginResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
    alerts: AlertService = Depends(get_alert_service),
):
    """Authenticate with email/password and issue the session cookie set"""
    client_ip = get_client_ip(request)
    user_agent = get_user_agent(request)
    email = credentials.email.strip().lower()

    try:
        identity = await authenticate(db, email, credentials.password)
    except SocPortalError as e:
        logger.log_auth_event("login", success=False, user_email=email, reason=e.message, client_ip=client_ip)
        record_auth_audit(
            db,
            event="login",
            outcome=e.code.lower(),
            severity="MEDIUM",
            message=e.message,
            email=email,
            ip_address=client_ip,
        )
        await db.commit()
        alerts.dispatch(format_alert("Login Failed", {
            "Email": email,
            "IP Address": client_ip,
            "User Agent": user_agent,
            "Reason": e.message,
        }, status="Failed"))
        raise

    issued = await open_session(db, identity)
    set_eid(issued.eid)
    set_portal_id(identity.soc_portal_id)

    record_activity(
        db,
        soc_portal_id=identity.soc_portal_id,
        action=ActivityAction.LOGIN_SUCCESS,
        description=f"Logged in as {user_type(identity)}",
        ip_address=client_ip,
        device_info=user_agent,
        eid=issued.eid,
        sid=issued.session_id,
    )
    record_auth_audit(
        db,
        event="login",
        outcome="success",
        severity="LOW",
        message="Login successful",
        email=identity.email,
        soc_portal_id=identity.soc_portal_id,
        session_id=issued.session_id,
        eid=issued.eid,
        ip_address=client_ip,
    )
    await db.commit()

    logger.log_auth_event("login", success=True, user_email=identity.email, client_ip=client_ip)
    alerts.dispatch(format_alert("Login", {
        "Email": identity.email,
        "SOC Portal ID": identity.soc_portal_id,
        "Role": issued.cookie_values()["roleType"],
        "EID": issued.eid,
        "IP Address": client_ip,
        "User Agent": user_agent,
    }, status="Success"))

    response = JSONResponse(content=LoginResponse(**issued.to_response()).model_dump())
    set_session_cookies(
        response,
        issued.cookie_values(),
        max_age=_cookie_max_age(),
        secure=settings.is_production,
    )
    return response


@router.post("/logout")
async def logout(
    request: Request,
    body: Optional[LogoutRequest] = None,
    db: AsyncSession = Depends(get_db),
    alerts: AlertService = Depends(get_alert_service),
):
    """
    End the session. Cookies are cleared even when recording the logout
    fails; the reply then carries a 500 status.
    """
    cookies = SessionCookies.from_request(request)
    reason = (body.reason if body and body.reason else "user_initiated")
    client_ip = get_client_ip(request)

    try:
        identity = await resolve_identity(db, cookies.email) if cookies.email else None
        if identity is not None:
            await close_session(db, identity)
            record_activity(
                db,
                soc_portal_id=identity.soc_portal_id,
                action=ActivityAction.LOGOUT,
                description=f"Logged out ({reason})",
                ip_address=client_ip,
                device_info=get_user_agent(request),
                eid=cookies.eid,
                sid=cookies.session_id,
            )
        record_auth_audit(
            db,
            event="logout",
            outcome=reason,
            severity="LOW",
            message="Logout",
            email=cookies.email,
            soc_portal_id=identity.soc_portal_id if identity else cookies.soc_portal_id,
            session_id=cookies.session_id,
            eid=cookies.eid,
            ip_address=client_ip,
        )
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.log_error_with_context(e, context="logout", **cookies.audit_context())
        response = JSONResponse(
            status_code=500,
            content={"success": False, "message": "Logout completed with some errors"},
        )
        clear_session_cookies(response)
        return response

    logger.log_auth_event("logout", success=True, user_email=cookies.email, reason=reason)
    alerts.dispatch(format_alert("Logout", {
        "Email": cookies.email,
        "SOC Portal ID": cookies.soc_portal_id,
        "EID": cookies.eid,
        "IP Address": client_ip,
        "Reason": reason,
    }, status="Logged out"))

    response = JSONResponse(content={"success": True, "message": "Logged out successfully"})
    clear_session_cookies(response)
    return response
