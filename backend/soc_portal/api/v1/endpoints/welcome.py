from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from soc_portal.core.cache import TTLCache
from soc_portal.core.database import get_db
from soc_portal.core.logging_config import logger
from soc_portal.modules.auth.dependencies import RequestActor, get_current_actor, get_welcome_cache
from soc_portal.models.login_tracker import UserLoginTracker
from soc_portal.models.user import UserInfo
from soc_portal.services.alert_service import AlertService, get_alert_service, format_alert


router = APIRouter()

NO_WELCOME = {"showWelcome": False}


def _cache_key(soc_portal_id: str) -> str:
    return f"welcome_{soc_portal_id}"


@router.get("")
async def welcome_check(
    actor: RequestActor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
    cache: TTLCache = Depends(get_welcome_cache),
    alerts: AlertService = Depends(get_alert_service),
):
    """Whether to show the first-login welcome popup"""
    key = _cache_key(actor.soc_portal_id)
    cached = cache.get(key)
    if cached is not None:
        logger.debug(f"Returning cached welcome check for {actor.soc_portal_id}")
        return cached

    if actor.is_admin:
        cache.set(key, NO_WELCOME)
        return NO_WELCOME

    tracker = (await db.execute(
        select(UserLoginTracker).where(UserLoginTracker.soc_portal_id == actor.soc_portal_id)
    )).scalar_one_or_none()
    if tracker is None or tracker.total_login_count != 1 or tracker.welcome_shown:
        cache.set(key, NO_WELCOME)
        return NO_WELCOME

    user = (await db.execute(
        select(UserInfo).where(UserInfo.soc_portal_id == actor.soc_portal_id)
    )).scalar_one_or_none()
    if user is None:
        cache.set(key, NO_WELCOME)
        return NO_WELCOME

    result = {
        "showWelcome": True,
        "userInfo": {
            "firstName": user.first_name,
            "lastName": user.last_name,
            "socPortalId": user.soc_portal_id,
            "ngdId": user.ngd_id,
            "profilePhoto": user.profile_photo_url,
            "roleType": user.role_type,
            "designation": user.designation,
            "email": user.email,
            "phone": user.phone,
            "joiningDate": user.joining_date.isoformat() if user.joining_date else None,
        },
    }
    cache.set(key, result)

    alerts.dispatch(format_alert("Welcome New User", {
        "New User": user.full_name,
        "Email": user.email,
        "SOC Portal ID": user.soc_portal_id,
        "NGD ID": user.ngd_id,
        "Role Type": user.role_type,
        "Designation": user.designation,
    }, status="First Login - Welcome Popup Displayed"))
    return result


@router.post("/acknowledge")
async def acknowledge_welcome(
    actor: RequestActor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
    cache: TTLCache = Depends(get_welcome_cache),
):
    """Mark the welcome popup as shown so it never appears again"""
    tracker = (await db.execute(
        select(UserLoginTracker).where(UserLoginTracker.soc_portal_id == actor.soc_portal_id)
    )).scalar_one_or_none()
    if tracker is not None and not tracker.welcome_shown:
        tracker.welcome_shown = True
        await db.commit()

    cache.invalidate(_cache_key(actor.soc_portal_id))
    return {"success": True, "message": "Welcome acknowledged"}
