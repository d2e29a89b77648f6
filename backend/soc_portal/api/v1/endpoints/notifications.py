from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from soc_portal.core.database import get_db
from soc_portal.modules.auth.dependencies import RequestActor, get_current_actor
from soc_portal.schemas.notification import NotificationOut
from soc_portal.services.notification_service import (
    list_notifications,
    mark_read,
    mark_all_read,
    serialize_notification,
)


router = APIRouter()


@router.get("", response_model=List[NotificationOut])
async def get_notifications(
    actor: RequestActor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """Caller's notifications, newest first (admins see the admin feed)"""
    notifications = await list_notifications(db, actor.is_admin, actor.soc_portal_id)
    return [serialize_notification(n) for n in notifications]


# Declared before /{notification_id} so "bulk_read" is not taken as an id
@router.put("/bulk_read")
async def mark_notifications_read(
    actor: RequestActor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    updated = await mark_all_read(db, actor.is_admin, actor.soc_portal_id)
    await db.commit()
    return {"success": True, "message": f"{updated} notifications marked as read", "data": {"updated": updated}}


@router.put("/{notification_id}")
async def mark_notification_read(
    notification_id: str,
    actor: RequestActor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    notification = await mark_read(db, notification_id, actor.is_admin, actor.soc_portal_id)
    await db.commit()
    return {"success": True, "message": "Notification marked as read", "data": serialize_notification(notification)}
