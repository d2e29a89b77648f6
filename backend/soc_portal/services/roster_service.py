"""
Roster shift exchange.

Swaps the requester's shift with a teammate's on one date. The swap, the
schedule note, the three notifications and the activity row are written in
one transaction: either all of them persist or none do.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from soc_portal.core.exceptions import ValidationError, NotFoundError
from soc_portal.core.logging_config import logger
from soc_portal.models.admin import AccountStatus
from soc_portal.models.roster import RosterEntry, RosterScheduleNote
from soc_portal.models.user import UserInfo
from soc_portal.schemas.roster import ShiftExchangeRequest
from soc_portal.services.activity_service import ActivityAction, record_activity
from soc_portal.services.notification_service import create_admin_notification, create_user_notification


SOC_ROLE = "SOC"
DEFAULT_HANDOVER = "No Dependency"


@dataclass(frozen=True)
class ShiftExchangeResult:
    roster_date: date
    requester: str
    assigned_to: str
    requester_old_shift: str
    requester_new_shift: str
    admin_notification_id: str

    def to_dict(self) -> dict:
        return {
            "date": self.roster_date.isoformat(),
            "requester": self.requester,
            "assignedTo": self.assigned_to,
            "yourShift": self.requester_old_shift,
            "updatedShift": self.requester_new_shift,
            "adminNotificationId": self.admin_notification_id,
        }


def format_roster_date(value: date) -> str:
    return value.strftime("%d/%m/%Y")


def parse_roster_date(raw: str) -> date:
    try:
        return datetime.strptime(raw.strip()[:10], "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError("Invalid date format, expected YYYY-MM-DD", field="date")


async def _get_entry(db: AsyncSession, roster_date: date, short_name: str) -> Optional[RosterEntry]:
    result = await db.execute(
        select(RosterEntry).where(
            RosterEntry.roster_date == roster_date,
            RosterEntry.short_name == short_name,
        )
    )
    return result.scalar_one_or_none()


async def exchange_shift(
    db: AsyncSession,
    requester_id: str,
    payload: ShiftExchangeRequest,
    ip_address: Optional[str] = None,
    device_info: Optional[str] = None,
    eid: Optional[str] = None,
    sid: Optional[str] = None,
) -> ShiftExchangeResult:
    """Validate, then swap inside one transaction. Raises on any failure after rolling back."""
    if not (payload.date and payload.assignedTo and payload.reason and payload.communicatedPerson):
        raise ValidationError("Missing required fields")

    roster_date = parse_roster_date(payload.date)

    requester = (await db.execute(
        select(UserInfo).where(UserInfo.soc_portal_id == requester_id)
    )).scalar_one_or_none()
    if requester is None or not requester.short_name:
        raise NotFoundError("User", requester_id, message="User not found")

    partner = (await db.execute(
        select(UserInfo).where(UserInfo.short_name == payload.assignedTo)
    )).scalar_one_or_none()
    if partner is None:
        raise NotFoundError("Team member", payload.assignedTo, message="Selected team member not found")
    if partner.role_type != SOC_ROLE or partner.status != AccountStatus.ACTIVE.value:
        raise ValidationError("Selected team member is not an active SOC member", field="assignedTo")

    roster_exists = (await db.execute(
        select(RosterEntry.id).where(RosterEntry.roster_date == roster_date).limit(1)
    )).first()
    if roster_exists is None:
        raise NotFoundError("Roster", roster_date.isoformat(), message="No roster found for selected date")

    mine = await _get_entry(db, roster_date, requester.short_name)
    theirs = await _get_entry(db, roster_date, partner.short_name)
    if mine is None or not mine.shift:
        raise ValidationError("No shift assigned to you on the selected date")
    if theirs is None or not theirs.shift:
        raise ValidationError("No shift assigned to the selected team member on the selected date")

    my_shift, their_shift = mine.shift, theirs.shift
    shown_date = format_roster_date(roster_date)

    try:
        mine.shift, theirs.shift = their_shift, my_shift

        db.add(RosterScheduleNote(
            roster_date=roster_date,
            requested_by=requester.soc_portal_id,
            requester_short_name=requester.short_name,
            assigned_to=partner.short_name,
            requester_old_shift=my_shift,
            requester_new_shift=their_shift,
            reason=payload.reason,
            handover_task=payload.handoverTask or DEFAULT_HANDOVER,
            communicated_person=payload.communicatedPerson,
        ))

        admin_notification = await create_admin_notification(
            db, f"Shift Exchange: {requester.short_name} exchanged shift with {partner.short_name} on {shown_date}"
        )
        await create_user_notification(
            db, requester.soc_portal_id,
            f"Shift Exchange: You exchanged shift with {partner.short_name} on {shown_date}"
        )
        await create_user_notification(
            db, partner.soc_portal_id,
            f"Shift Exchange: {requester.short_name} has exchanged shifts with you on {shown_date}"
        )

        record_activity(
            db,
            soc_portal_id=requester.soc_portal_id,
            action=ActivityAction.SHIFT_EXCHANGE,
            description=(
                f"Exchanged {my_shift} with {partner.short_name}'s {their_shift} on {shown_date}"
            ),
            ip_address=ip_address,
            device_info=device_info,
            eid=eid,
            sid=sid,
        )
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.log_error_with_context(e, context="shift_exchange", soc_portal_id=requester_id)
        raise

    return ShiftExchangeResult(
        roster_date=roster_date,
        requester=requester.short_name,
        assigned_to=partner.short_name,
        requester_old_shift=my_shift,
        requester_new_shift=their_shift,
        admin_notification_id=admin_notification.notification_id,
    )
