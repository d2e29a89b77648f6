from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from soc_portal.core.database import get_db
from soc_portal.core.logging_config import logger
from soc_portal.modules.auth.dependencies import RequestActor, get_current_admin
from soc_portal.services.alert_service import AlertService, get_alert_service, format_alert
from soc_portal.services.storage_service import validate_photo
from soc_portal.services.user_service import validate_new_user, create_user


router = APIRouter()


@router.post("", status_code=201)
async def add_user(
    firstName: Optional[str] = Form(None),
    lastName: Optional[str] = Form(None),
    shortName: Optional[str] = Form(None),
    ngdId: Optional[str] = Form(None),
    dateOfBirth: Optional[str] = Form(None),
    joiningDate: Optional[str] = Form(None),
    resignDate: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    emergencyContact: Optional[str] = Form(None),
    designation: Optional[str] = Form(None),
    bloodGroup: Optional[str] = Form(None),
    gender: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    roleType: Optional[str] = Form(None),
    status: Optional[str] = Form("Active"),
    profilePhoto: Optional[UploadFile] = File(None),
    actor: RequestActor = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
    alerts: AlertService = Depends(get_alert_service),
):
    """Create a user account (admin only)"""
    form = validate_new_user({
        "firstName": firstName,
        "lastName": lastName,
        "shortName": shortName,
        "ngdId": ngdId,
        "dateOfBirth": dateOfBirth,
        "joiningDate": joiningDate,
        "resignDate": resignDate,
        "email": email,
        "phone": phone,
        "emergencyContact": emergencyContact,
        "designation": designation,
        "bloodGroup": bloodGroup,
        "gender": gender,
        "password": password,
        "roleType": roleType,
        "status": status,
    })

    photo_content = None
    if profilePhoto is not None and profilePhoto.filename:
        photo_content = await profilePhoto.read()
        if photo_content:
            validate_photo(profilePhoto.content_type, len(photo_content))

    user = await create_user(
        db,
        form,
        created_by=actor.soc_portal_id,
        photo=photo_content,
        photo_content_type=profilePhoto.content_type if photo_content else None,
        ip_address=actor.ip_address,
        device_info=actor.user_agent,
        eid=actor.cookies.eid,
        sid=actor.cookies.session_id,
    )

    logger.info(f"User {user.soc_portal_id} created by {actor.soc_portal_id}")
    alerts.dispatch(format_alert("User Add", {
        "Email": user.email,
        "User ID": user.soc_portal_id,
        "Role": user.role_type,
        "Admin ID": actor.soc_portal_id,
        "EID": actor.cookies.eid,
        "IP Address": actor.ip_address,
    }, status="Completed"))

    return JSONResponse(
        status_code=201,
        content={
            "success": True,
            "message": "User created successfully",
            "data": {
                "socPortalId": user.soc_portal_id,
                "email": user.email,
                "roleType": user.role_type,
                "profilePhotoUrl": user.profile_photo_url,
            },
        },
    )
