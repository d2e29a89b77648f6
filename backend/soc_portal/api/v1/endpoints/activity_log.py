from datetime import date
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from soc_portal.core.config import settings
from soc_portal.core.database import get_db
from soc_portal.core.exceptions import ValidationError
from soc_portal.modules.auth.dependencies import RequestActor, get_current_actor
from soc_portal.services.activity_service import list_activity, activity_stats


router = APIRouter()


@router.get("")
async def get_activity_log(
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=200),
    actionType: Optional[str] = Query(None),
    searchTerm: Optional[str] = Query(None),
    startDate: Optional[date] = Query(None),
    endDate: Optional[date] = Query(None),
    sortBy: str = Query("created_at"),
    sortOrder: str = Query("desc", pattern="^(asc|desc)$"),
    actor: RequestActor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
):
    """
    Paginated activity log.

    Users see their own rows; admins see every identity's rows.
    """
    if startDate and endDate and startDate > endDate:
        raise ValidationError("Start date cannot be after end date", field="startDate")

    page_size = limit or settings.ACTIVITY_LOG_PAGE_SIZE
    scope = None if actor.is_admin else actor.soc_portal_id

    rows, total = await list_activity(
        db,
        soc_portal_id=scope,
        action_type=actionType,
        search_term=searchTerm,
        start_date=startDate,
        end_date=endDate,
        sort_by=sortBy,
        sort_order=sortOrder,
        page=page,
        page_size=page_size,
    )
    stats = await activity_stats(db, soc_portal_id=scope)

    return {
        "success": True,
        "data": [
            {
                "serial": row.serial,
                "socPortalId": row.soc_portal_id,
                "action": row.action,
                "description": row.description,
                "ipAddress": row.ip_address,
                "deviceInfo": row.device_info,
                "eid": row.eid,
                "createdAt": row.created_at.isoformat(),
            }
            for row in rows
        ],
        "pagination": {
            "page": page,
            "limit": page_size,
            "total": total,
            "totalPages": (total + page_size - 1) // page_size,
        },
        "stats": stats,
    }
