"""
User onboarding (admin add-user).

The form rules live on `NewUserForm`; this module turns a failed form into
the portal's 400 envelope, and inserts the account. Uniqueness is checked
inside the same transaction that inserts.
"""

import re
from datetime import date
from typing import Any, Mapping, Optional

from pydantic import ValidationError as FormValidationError
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from soc_portal.core.config import settings
from soc_portal.core.exceptions import ValidationError, ConflictError
from soc_portal.core.logging_config import logger
from soc_portal.core.security import get_password_hash
from soc_portal.models.login_tracker import UserLoginTracker
from soc_portal.models.user import UserInfo
from soc_portal.schemas.user import NewUserForm
from soc_portal.services.activity_service import ActivityAction, record_activity
from soc_portal.services.notification_service import create_admin_notification, create_user_notification
from soc_portal.services.storage_service import save_profile_photo, remove_profile_photo


PORTAL_ID_PATTERN = re.compile(r"^U(\d{2})SOCP$")


def _form_name(field: str) -> str:
    info = NewUserForm.model_fields.get(field)
    return (info.alias if info and info.alias else field)


def validate_new_user(data: Mapping[str, Any], today: Optional[date] = None) -> NewUserForm:
    """Parse the submitted add-user fields; raise ValidationError on the first broken rule"""
    try:
        return NewUserForm.model_validate(dict(data), context={"today": today})
    except FormValidationError as e:
        error = e.errors()[0]
        if error["type"] == "form_rule":
            ctx = error.get("ctx") or {}
            raise ValidationError(ctx.get("message", error["msg"]), field=ctx.get("field") or None)
        field = _form_name(str(error["loc"][0])) if error["loc"] else None
        if field in {_form_name(name) for name in NewUserForm.DATE_FIELDS}:
            raise ValidationError(f"Invalid date for {field}, expected YYYY-MM-DD", field=field)
        raise ValidationError(f"Invalid {field}" if field else "Invalid form", field=field)


async def next_soc_portal_id(db: AsyncSession) -> str:
    """U01SOCP, U02SOCP, ... one past the highest existing user id"""
    ids = (await db.execute(select(UserInfo.soc_portal_id))).scalars().all()
    highest = 0
    for portal_id in ids:
        match = PORTAL_ID_PATTERN.match(portal_id or "")
        if match:
            highest = max(highest, int(match.group(1)))
    return f"U{highest + 1:02d}SOCP"


async def create_user(
    db: AsyncSession,
    form: NewUserForm,
    created_by: str,
    photo: Optional[bytes] = None,
    photo_content_type: Optional[str] = None,
    ip_address: Optional[str] = None,
    device_info: Optional[str] = None,
    eid: Optional[str] = None,
    sid: Optional[str] = None,
) -> UserInfo:
    """
    Insert the user, its login tracker, notifications and activity row in one
    transaction.

    An uploaded photo is written before the INSERT and deleted again when the
    transaction does not commit, so a failed add leaves neither rows nor file.
    """
    email_taken = (await db.execute(
        select(func.count()).select_from(UserInfo).where(func.lower(UserInfo.email) == form.email.lower())
    )).scalar_one()
    if email_taken:
        raise ConflictError("Email already registered", field="email")

    ngd_taken = (await db.execute(
        select(func.count()).select_from(UserInfo).where(UserInfo.ngd_id == form.ngd_id)
    )).scalar_one()
    if ngd_taken:
        raise ConflictError("NGD ID already registered", field="ngdId")

    soc_portal_id = await next_soc_portal_id(db)
    photo_url = None
    if photo:
        photo_url = await save_profile_photo(soc_portal_id, photo, photo_content_type)

    try:
        user = UserInfo(
            soc_portal_id=soc_portal_id,
            ngd_id=form.ngd_id,
            email=form.email.lower(),
            password=get_password_hash(form.password),
            first_name=form.first_name,
            last_name=form.last_name,
            short_name=form.short_name,
            phone=form.phone,
            emergency_contact=form.emergency_contact,
            designation=form.designation,
            blood_group=form.blood_group,
            gender=form.gender,
            date_of_birth=form.date_of_birth,
            joining_date=form.joining_date,
            resign_date=form.resign_date,
            role_type=form.role_type,
            status=form.status or "Active",
            profile_photo_url=photo_url.split("?", 1)[0] if photo_url else settings.DEFAULT_PROFILE_PHOTO_URL,
        )
        db.add(user)
        db.add(UserLoginTracker(soc_portal_id=soc_portal_id, total_login_count=0, current_login_status="Idle"))
        await db.flush()

        full_name = f"{form.first_name} {form.last_name}"
        await create_admin_notification(db, f"New User Added: {full_name} ({soc_portal_id}) as {form.role_type}")
        await create_user_notification(db, soc_portal_id, f"Welcome to SOC Portal, {form.first_name}! Your account is ready")

        record_activity(
            db,
            soc_portal_id=created_by,
            action=ActivityAction.ADD_USER,
            description=f"Added user {full_name} ({soc_portal_id}, {form.role_type})",
            ip_address=ip_address,
            device_info=device_info,
            eid=eid,
            sid=sid,
        )
        await db.commit()
    except Exception as e:
        await db.rollback()
        if photo_url:
            await remove_profile_photo(photo_url)
        logger.log_error_with_context(e, context="add_user", created_by=created_by)
        raise

    return user
