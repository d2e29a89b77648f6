from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from soc_portal.core.database import get_db
from soc_portal.core.exceptions import NotFoundError
from soc_portal.modules.auth.dependencies import RequestActor, get_current_actor
from soc_portal.models.user import UserInfo
from soc_portal.services.activity_service import ActivityAction, record_activity
from soc_portal.services.storage_service import save_profile_photo


router = APIRouter()


@router.post("/profile_photo")
async def upload_profile_photo(
    profilePhoto: UploadFile = File(...),
    actor: RequestActor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """Replace the caller's profile photo (jpeg/png/webp, at most 5MB)"""
    user = (await db.execute(
        select(UserInfo).where(UserInfo.soc_portal_id == actor.soc_portal_id)
    )).scalar_one_or_none()
    if user is None:
        raise NotFoundError("User", actor.soc_portal_id, message="User not found")

    content = await profilePhoto.read()
    photo_url = await save_profile_photo(actor.soc_portal_id, content, profilePhoto.content_type)

    user.profile_photo_url = photo_url.split("?", 1)[0]
    record_activity(
        db,
        soc_portal_id=actor.soc_portal_id,
        action=ActivityAction.PROFILE_PHOTO_UPDATE,
        description="Updated profile photo",
        ip_address=actor.ip_address,
        device_info=actor.user_agent,
        eid=actor.cookies.eid,
        sid=actor.cookies.session_id,
    )
    await db.commit()

    return {"success": True, "message": "Profile photo updated", "data": {"profilePhotoUrl": photo_url}}
