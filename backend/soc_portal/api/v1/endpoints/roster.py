from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from soc_portal.core.database import get_db
from soc_portal.core.exceptions import AuthorizationError
from soc_portal.modules.auth.dependencies import RequestActor, get_current_actor
from soc_portal.schemas.roster import ShiftExchangeRequest
from soc_portal.services.alert_service import AlertService, get_alert_service, format_alert
from soc_portal.services.roster_service import exchange_shift


router = APIRouter()


@router.post("/shift_exchange")
async def shift_exchange(
    payload: ShiftExchangeRequest,
    actor: RequestActor = Depends(get_current_actor),
    db: AsyncSession = Depends(get_db),
    alerts: AlertService = Depends(get_alert_service),
):
    """Swap the caller's shift with a teammate's on one date"""
    if actor.is_admin:
        raise AuthorizationError("Shift exchange is available to roster members only")

    result = await exchange_shift(
        db,
        requester_id=actor.soc_portal_id,
        payload=payload,
        ip_address=actor.ip_address,
        device_info=actor.user_agent,
        eid=actor.cookies.eid,
        sid=actor.cookies.session_id,
    )

    alerts.dispatch(format_alert("Shift Exchange", {
        "User": result.requester,
        "Date": result.roster_date.strftime("%d/%m/%Y"),
        "Your Shift": result.requester_old_shift,
        "Assigned To": result.assigned_to,
        "Updated Shift": result.requester_new_shift,
        "Reason": payload.reason,
        "Task Handover": payload.handoverTask or "No Dependency",
        "Communicated To": payload.communicatedPerson,
        "Requested By": actor.soc_portal_id,
        "IP Address": actor.ip_address,
        "EID": actor.cookies.eid,
    }))

    return JSONResponse(
        status_code=200,
        content={"success": True, "message": "Shift exchanged successfully", "data": result.to_dict()},
    )
