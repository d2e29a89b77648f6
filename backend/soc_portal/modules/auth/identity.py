"""
Identity resolution against the two credential stores.

An identity is either an admin (carrying its stored role) or a user. Users
are always presented with the effective role "User", whatever their internal
role type (SOC, OPS, ...).
"""

from dataclasses import dataclass
from typing import Optional, Union

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from soc_portal.models.admin import AdminInfo, AccountStatus
from soc_portal.models.user import UserInfo


USER_ROLE = "User"
ADMIN_TYPE = "admin"
USER_TYPE = "user"


@dataclass(frozen=True)
class AdminIdentity:
    soc_portal_id: str
    email: str
    status: str
    role: str
    short_name: Optional[str] = None
    source: str = ADMIN_TYPE


@dataclass(frozen=True)
class UserIdentity:
    soc_portal_id: str
    email: str
    status: str
    role_type: str
    short_name: Optional[str] = None
    source: str = USER_TYPE


Identity = Union[AdminIdentity, UserIdentity]


def effective_role(identity: Identity) -> str:
    if isinstance(identity, AdminIdentity):
        return identity.role
    return USER_ROLE


def user_type(identity: Identity) -> str:
    return ADMIN_TYPE if isinstance(identity, AdminIdentity) else USER_TYPE


def is_active(identity: Identity) -> bool:
    return identity.status == AccountStatus.ACTIVE.value


def effective_role_for(user_type_value: Optional[str], role: Optional[str]) -> Optional[str]:
    """Same normalization applied to the (userType, role) pair a client receives"""
    if user_type_value == USER_TYPE:
        return USER_ROLE
    return role


def identity_from_admin(row: AdminInfo) -> AdminIdentity:
    return AdminIdentity(
        soc_portal_id=row.soc_portal_id,
        email=row.email,
        status=row.status,
        role=row.role_type,
        short_name=row.short_name,
    )


def identity_from_user(row: UserInfo) -> UserIdentity:
    return UserIdentity(
        soc_portal_id=row.soc_portal_id,
        email=row.email,
        status=row.status,
        role_type=row.role_type,
        short_name=row.short_name,
    )


async def find_account(db: AsyncSession, email: str) -> Optional[Union[AdminInfo, UserInfo]]:
    """Admin store first, then user store; emails match case-insensitively"""
    result = await db.execute(select(AdminInfo).where(func.lower(AdminInfo.email) == email.strip().lower()))
    admin = result.scalar_one_or_none()
    if admin is not None:
        return admin

    result = await db.execute(select(UserInfo).where(func.lower(UserInfo.email) == email.strip().lower()))
    return result.scalar_one_or_none()


async def resolve_identity(db: AsyncSession, email: str) -> Optional[Identity]:
    account = await find_account(db, email)
    if account is None:
        return None
    if isinstance(account, AdminInfo):
        return identity_from_admin(account)
    return identity_from_user(account)
