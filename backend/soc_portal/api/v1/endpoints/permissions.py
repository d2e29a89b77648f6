from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from soc_portal.core.database import get_db
from soc_portal.core.exceptions import ValidationError, AuthorizationError
from soc_portal.core.logging_config import logger
from soc_portal.modules.auth.dependencies import RequestActor, get_current_actor
from soc_portal.modules.auth.identity import UserIdentity
from soc_portal.schemas.permission import UnauthorizedAlertRequest
from soc_portal.services.activity_service import ActivityAction, record_activity, record_auth_audit
from soc_portal.services.alert_service import AlertService, get_alert_service, format_alert
from soc_portal.services.permission_service import resolve_permissions


router = APIRouter()

ADMIN_ACCESS_ATTEMPT = "ADMIN_ACCESS_ATTEMPT"


@router.get("/user_permissions")
async def user_permissions(
    soc_portal_id: Optional[str] = Query(None),
    role_type: Optional[str] = Query(None),
    actor: RequestActor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """Allowed menu paths for (soc_portal_id, role_type); defaults to the caller"""
    if isinstance(actor.identity, UserIdentity):
        soc_portal_id = soc_portal_id or actor.soc_portal_id
        role_type = role_type or actor.identity.role_type
        # Users may only read their own permissions
        if soc_portal_id != actor.soc_portal_id:
            raise AuthorizationError("Cannot read another user's permissions")

    if not soc_portal_id or not role_type:
        raise ValidationError("User ID and role type are required")

    allowed, denied = await resolve_permissions(db, soc_portal_id, role_type)
    logger.debug(
        f"Permissions resolved for {soc_portal_id}: {len(allowed)} allowed, {len(denied)} denied"
    )
    return {"success": True, "permissions": allowed, "deniedPaths": denied}


@router.post("/unauthorized_alert")
async def unauthorized_alert(
    body: UnauthorizedAlertRequest,
    actor: RequestActor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
    alerts: AlertService = Depends(get_alert_service),
):
    """Record and alert on a blocked route access"""
    identity = actor.identity
    role_type = identity.role_type if isinstance(identity, UserIdentity) else identity.role
    if body.alertType == ADMIN_ACCESS_ATTEMPT:
        title, status = "Admin Dashboard Access Attempt", "BLOCKED - User attempted admin access"
    else:
        title, status = "Unauthorized Access Attempt", "BLOCKED - Unauthorized Access"

    record_activity(
        db,
        soc_portal_id=identity.soc_portal_id,
        action=ActivityAction.UNAUTHORIZED_ACCESS,
        description=f"Blocked access to {body.attemptedUrl} ({body.alertType})",
        ip_address=actor.ip_address,
        device_info=actor.user_agent,
        eid=actor.cookies.eid,
        sid=actor.cookies.session_id,
    )
    record_auth_audit(
        db,
        event="unauthorized_access",
        outcome=body.alertType.lower(),
        severity="HIGH",
        message=f"Attempted {body.attemptedUrl}",
        email=identity.email,
        soc_portal_id=identity.soc_portal_id,
        session_id=actor.cookies.session_id,
        eid=actor.cookies.eid,
        ip_address=actor.ip_address,
    )
    await db.commit()

    logger.warning(
        f"Unauthorized access: {identity.soc_portal_id} attempted {body.attemptedUrl}",
        extra={"event_type": "unauthorized_access", "alert_type": body.alertType, "role_type": role_type}
    )
    alerts.dispatch(format_alert(title, {
        "User": identity.email,
        "SOC Portal ID": identity.soc_portal_id,
        "Role Type": role_type,
        "Attempted URL": body.attemptedUrl,
        "IP Address": actor.ip_address,
        "Device Info": actor.user_agent[:100],
    }, status=status))

    return {"success": True, "message": "Alert sent successfully", "alertType": body.alertType}
