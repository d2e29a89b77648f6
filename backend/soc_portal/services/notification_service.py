"""
Notification Service
====================
Creates and reads admin/user notifications.

IDs are `<prefix><serial:04d>SOCP` (AN0001SOCP, UN0042SOCP), derived from the
next serial of the target table. Rows are flushed immediately so several
notifications created in one transaction get consecutive ids.
"""

import re
from datetime import datetime
from typing import Dict, List, Optional, Type, Union

from sqlalchemy import select, func, update
from sqlalchemy.ext.asyncio import AsyncSession

from soc_portal.core.exceptions import NotFoundError, AuthorizationError
from soc_portal.models.notification import AdminNotification, UserNotification, NotificationStatus


ADMIN_PREFIX = "AN"
USER_PREFIX = "UN"

NotificationModel = Union[AdminNotification, UserNotification]

# First matching pattern wins
ICON_RULES = (
    (re.compile(r"update|patch|upgrade"), "update"),
    (re.compile(r"user|register|signup|profile|account"), "user"),
    (re.compile(r"alert|warning|security|breach|attack"), "alert"),
    (re.compile(r"maintenance|downtime|service|outage"), "maintenance"),
    (re.compile(r"backup|restore|save|recovery"), "backup"),
    (re.compile(r"login|logout|access|authentication"), "login"),
)


def format_notification_id(prefix: str, serial: int) -> str:
    return f"{prefix}{serial:04d}SOCP"


def notification_icon(title: Optional[str]) -> str:
    if not title:
        return "user"
    lowered = title.lower()
    for pattern, icon in ICON_RULES:
        if pattern.search(lowered):
            return icon
    return "user"


def time_ago(created_at: datetime, now: Optional[datetime] = None) -> str:
    minutes = int(((now or datetime.utcnow()) - created_at).total_seconds() // 60)
    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes} min ago"
    if minutes < 1440:
        return f"{minutes // 60} hours ago"
    return f"{minutes // 1440} days ago"


async def _next_notification_id(db: AsyncSession, model: Type[NotificationModel], prefix: str) -> str:
    max_serial = (await db.execute(select(func.max(model.serial)))).scalar()
    return format_notification_id(prefix, (max_serial or 0) + 1)


async def create_admin_notification(db: AsyncSession, title: str) -> AdminNotification:
    notification = AdminNotification(
        notification_id=await _next_notification_id(db, AdminNotification, ADMIN_PREFIX),
        title=title,
        status=NotificationStatus.UNREAD,
    )
    db.add(notification)
    await db.flush()
    return notification


async def create_user_notification(db: AsyncSession, soc_portal_id: str, title: str) -> UserNotification:
    notification = UserNotification(
        notification_id=await _next_notification_id(db, UserNotification, USER_PREFIX),
        soc_portal_id=soc_portal_id,
        title=title,
        status=NotificationStatus.UNREAD,
    )
    db.add(notification)
    await db.flush()
    return notification


def serialize_notification(notification: NotificationModel, now: Optional[datetime] = None) -> Dict:
    return {
        "id": notification.notification_id,
        "title": notification.title,
        "time": time_ago(notification.created_at, now),
        "read": notification.status == NotificationStatus.READ,
        "icon": notification_icon(notification.title),
    }


async def list_notifications(db: AsyncSession, is_admin: bool, soc_portal_id: str) -> List[NotificationModel]:
    if is_admin:
        query = select(AdminNotification)
        order = AdminNotification.created_at.desc()
    else:
        query = select(UserNotification).where(UserNotification.soc_portal_id == soc_portal_id)
        order = UserNotification.created_at.desc()
    result = await db.execute(query.order_by(order))
    return list(result.scalars().all())


async def mark_read(db: AsyncSession, notification_id: str, is_admin: bool, soc_portal_id: str) -> NotificationModel:
    model = AdminNotification if is_admin else UserNotification
    result = await db.execute(select(model).where(model.notification_id == notification_id))
    notification = result.scalar_one_or_none()
    if notification is None:
        raise NotFoundError("Notification", notification_id)
    if not is_admin and notification.soc_portal_id != soc_portal_id:
        raise AuthorizationError("Notification does not belong to this user")

    notification.status = NotificationStatus.READ
    return notification


async def mark_all_read(db: AsyncSession, is_admin: bool, soc_portal_id: str) -> int:
    if is_admin:
        stmt = (
            update(AdminNotification)
            .where(AdminNotification.status == NotificationStatus.UNREAD)
            .values(status=NotificationStatus.READ)
        )
    else:
        stmt = (
            update(UserNotification)
            .where(
                UserNotification.soc_portal_id == soc_portal_id,
                UserNotification.status == NotificationStatus.UNREAD,
            )
            .values(status=NotificationStatus.READ)
        )
    result = await db.execute(stmt)
    return result.rowcount or 0
