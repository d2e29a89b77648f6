"""
Activity and audit logging.

`record_activity` appends a business action to the activity log;
`record_auth_audit` appends one auth gate decision. Both only add rows to
the session: the caller's transaction decides whether they persist.
"""

from datetime import datetime, date, time
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from soc_portal.core.logging_config import logger
from soc_portal.models.activity_log import ActivityLog, AuthAuditLog


class ActivityAction:
    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    LOGOUT = "LOGOUT"
    SHIFT_EXCHANGE = "SHIFT_EXCHANGE"
    ADD_USER = "ADD_USER"
    PROFILE_PHOTO_UPDATE = "PROFILE_PHOTO_UPDATE"
    NOTIFICATION_READ = "NOTIFICATION_READ"
    UNAUTHORIZED_ACCESS = "UNAUTHORIZED_ACCESS"


SORT_FIELDS = {
    "created_at": ActivityLog.created_at,
    "action": ActivityLog.action,
}


def record_activity(
    db: AsyncSession,
    soc_portal_id: str,
    action: str,
    description: str,
    ip_address: Optional[str] = None,
    device_info: Optional[str] = None,
    eid: Optional[str] = None,
    sid: Optional[str] = None,
) -> ActivityLog:
    entry = ActivityLog(
        soc_portal_id=soc_portal_id,
        action=action,
        description=description,
        ip_address=ip_address,
        device_info=device_info,
        eid=eid,
        sid=sid,
    )
    db.add(entry)
    logger.log_audit_event(action, soc_portal_id, description, eid=eid, sid=sid)
    return entry


def record_auth_audit(
    db: AsyncSession,
    event: str,
    outcome: str,
    severity: str,
    message: str,
    email: Optional[str] = None,
    soc_portal_id: Optional[str] = None,
    session_id: Optional[str] = None,
    eid: Optional[str] = None,
    ip_address: Optional[str] = None,
) -> AuthAuditLog:
    entry = AuthAuditLog(
        event=event,
        outcome=outcome,
        severity=severity,
        message=message,
        email=email,
        soc_portal_id=soc_portal_id,
        session_id=session_id,
        eid=eid,
        ip_address=ip_address,
    )
    db.add(entry)
    return entry


async def list_activity(
    db: AsyncSession,
    soc_portal_id: Optional[str] = None,
    action_type: Optional[str] = None,
    search_term: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    sort_by: str = "created_at",
    sort_order: str = "desc",
    page: int = 1,
    page_size: int = 20,
) -> Tuple[List[ActivityLog], int]:
    """
    Filtered, paginated activity rows.

    `soc_portal_id` None means every identity (admin view).
    Returns (rows, total matching).
    """
    filters = []
    if soc_portal_id:
        filters.append(ActivityLog.soc_portal_id == soc_portal_id)
    if action_type and action_type.lower() != "all":
        filters.append(ActivityLog.action == action_type)
    if search_term:
        pattern = f"%{search_term}%"
        filters.append(or_(
            ActivityLog.description.ilike(pattern),
            ActivityLog.action.ilike(pattern),
            ActivityLog.soc_portal_id.ilike(pattern),
        ))
    if start_date:
        filters.append(ActivityLog.created_at >= datetime.combine(start_date, time.min))
    if end_date:
        filters.append(ActivityLog.created_at <= datetime.combine(end_date, time.max))

    total = (await db.execute(
        select(func.count()).select_from(ActivityLog).where(*filters)
    )).scalar_one()

    column = SORT_FIELDS.get(sort_by, ActivityLog.created_at)
    ordering = column.asc() if sort_order.lower() == "asc" else column.desc()

    result = await db.execute(
        select(ActivityLog)
        .where(*filters)
        .order_by(ordering, ActivityLog.serial.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    return list(result.scalars().all()), total


async def activity_stats(db: AsyncSession, soc_portal_id: Optional[str] = None) -> Dict[str, Any]:
    """Total rows and per-action counts"""
    query = select(ActivityLog.action, func.count()).group_by(ActivityLog.action)
    if soc_portal_id:
        query = query.where(ActivityLog.soc_portal_id == soc_portal_id)

    by_action = {action: count for action, count in (await db.execute(query)).all()}
    return {
        "total": sum(by_action.values()),
        "byAction": by_action,
    }
