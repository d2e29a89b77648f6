"""
Menu path permissions.

A role has default rows (soc_portal_id NULL). A row for a specific user
overrides the default for the same menu path, whether it allows or denies.
"""

from typing import Dict, Iterable, List, Tuple

from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from soc_portal.models.role_permission import RolePermission


ALWAYS_ALLOWED_PATHS = ("/user_dashboard",)


async def resolve_permissions(
    db: AsyncSession, soc_portal_id: str, role_type: str
) -> Tuple[List[str], List[str]]:
    """Return (allowed_paths, denied_paths) after applying user overrides"""
    result = await db.execute(
        select(RolePermission).where(
            RolePermission.role_type == role_type,
            or_(
                RolePermission.soc_portal_id == soc_portal_id,
                RolePermission.soc_portal_id.is_(None),
            ),
        )
    )

    effective: Dict[str, RolePermission] = {}
    for row in result.scalars().all():
        current = effective.get(row.menu_path)
        # User-specific row beats the role default
        if current is None or (row.soc_portal_id is not None and current.soc_portal_id is None):
            effective[row.menu_path] = row

    allowed = sorted(path for path, row in effective.items() if row.is_allowed)
    denied = sorted(path for path, row in effective.items() if not row.is_allowed)
    return allowed, denied


def normalize_path(path: str) -> str:
    path = path.split("?", 1)[0].split("#", 1)[0]
    if len(path) > 1:
        path = path.rstrip("/")
    return path or "/"


def is_path_allowed(path: str, allowed_paths: Iterable[str]) -> bool:
    """
    Exact match, or a direct child of an allowed path:
    /a/b allows /a/b and /a/b/c, but not /a/b/c/d.
    """
    path = normalize_path(path)
    if path in ALWAYS_ALLOWED_PATHS:
        return True

    for allowed in allowed_paths:
        allowed = normalize_path(allowed)
        if path == allowed:
            return True
        if path.startswith(allowed + "/"):
            remainder = path[len(allowed) + 1:]
            if remainder and "/" not in remainder:
                return True
    return False
