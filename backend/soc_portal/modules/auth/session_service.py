"""
Login and logout.

Login resolves the account (admin store first), verifies the password,
issues a new session id and correlation id, and bumps the login tracker.
Logout closes the tracker entry. Cookie writing is left to the endpoint.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Type, Union

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from soc_portal.core.cookies import (
    SESSION_ID, EMAIL, EID, SOC_PORTAL_ID, USER_TYPE, ROLE_TYPE, LOGIN_TIME, LAST_ACTIVITY,
)
from soc_portal.core.exceptions import AuthenticationError, AccountInactiveError
from soc_portal.core.logging_config import logger
from soc_portal.core.security import check_password, is_password_hashed, get_password_hash, generate_eid, generate_session_id
from soc_portal.models.admin import AdminInfo, AccountStatus
from soc_portal.models.login_tracker import AdminLoginTracker, UserLoginTracker
from soc_portal.modules.auth.gate import RESIGNED_MESSAGE
from soc_portal.modules.auth.identity import (
    Identity,
    AdminIdentity,
    find_account,
    identity_from_admin,
    identity_from_user,
    effective_role,
    user_type,
)
from soc_portal.modules.auth.session_policy import format_timestamp


INVALID_LOGIN_MESSAGE = "Invalid email or password"
ADMIN_HOME = "/admin_dashboard"
USER_HOME = "/user_dashboard"


@dataclass(frozen=True)
class IssuedSession:
    identity: Identity
    session_id: str
    eid: str
    login_time: datetime

    @property
    def redirect_url(self) -> str:
        return ADMIN_HOME if isinstance(self.identity, AdminIdentity) else USER_HOME

    def cookie_values(self) -> dict:
        stamp = format_timestamp(self.login_time)
        role_type = self.identity.role if isinstance(self.identity, AdminIdentity) else self.identity.role_type
        return {
            SESSION_ID: self.session_id,
            EMAIL: self.identity.email,
            EID: self.eid,
            SOC_PORTAL_ID: self.identity.soc_portal_id,
            USER_TYPE: user_type(self.identity),
            ROLE_TYPE: role_type,
            LOGIN_TIME: stamp,
            LAST_ACTIVITY: stamp,
        }

    def to_response(self) -> dict:
        return {
            "success": True,
            "message": "Login successful",
            "redirectUrl": self.redirect_url,
            "userType": user_type(self.identity),
            "role": effective_role(self.identity),
            "socPortalId": self.identity.soc_portal_id,
        }


def tracker_model(identity: Identity) -> Type[Union[AdminLoginTracker, UserLoginTracker]]:
    return AdminLoginTracker if isinstance(identity, AdminIdentity) else UserLoginTracker


async def get_login_tracker(db: AsyncSession, identity: Identity):
    model = tracker_model(identity)
    result = await db.execute(select(model).where(model.soc_portal_id == identity.soc_portal_id))
    return result.scalar_one_or_none()


async def authenticate(db: AsyncSession, email: str, password: str) -> Identity:
    """
    Verify credentials and return the identity.

    Raises AuthenticationError for an unknown email or wrong password, and
    AccountInactiveError for any non-Active status. Legacy plaintext
    passwords are accepted once and replaced with a bcrypt hash.
    """
    account = await find_account(db, email)
    if account is None:
        raise AuthenticationError(INVALID_LOGIN_MESSAGE)

    if account.status == AccountStatus.RESIGNED.value:
        raise AccountInactiveError(account.status, RESIGNED_MESSAGE)
    if account.status != AccountStatus.ACTIVE.value:
        raise AccountInactiveError(account.status)

    if not check_password(password, account.password):
        raise AuthenticationError(INVALID_LOGIN_MESSAGE)

    if not is_password_hashed(account.password):
        account.password = get_password_hash(password)
        logger.info(f"Migrated legacy password to bcrypt for {account.soc_portal_id}")

    if isinstance(account, AdminInfo):
        return identity_from_admin(account)
    return identity_from_user(account)


async def open_session(db: AsyncSession, identity: Identity, now: Optional[datetime] = None) -> IssuedSession:
    """Issue session/correlation ids and record the login on the tracker"""
    now = now or datetime.utcnow()
    tracker = await get_login_tracker(db, identity)
    if tracker is None:
        tracker = tracker_model(identity)(soc_portal_id=identity.soc_portal_id, total_login_count=0)
        db.add(tracker)

    tracker.last_login_time = now
    tracker.total_login_count = (tracker.total_login_count or 0) + 1
    tracker.current_login_status = "Active"

    return IssuedSession(
        identity=identity,
        session_id=generate_session_id(),
        eid=generate_eid(),
        login_time=now,
    )


async def close_session(db: AsyncSession, identity: Identity, now: Optional[datetime] = None) -> None:
    tracker = await get_login_tracker(db, identity)
    if tracker is None:
        return
    tracker.last_logout_time = now or datetime.utcnow()
    tracker.current_login_status = "Idle"
