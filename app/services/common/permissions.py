# app/services/common/permissions.py
"""
Ownership checks for the service layer.

Rooms, bills and their history belong to the owner who manages the room.
Admins may read everything.
"""
from __future__ import annotations

from typing import Optional

from app.core.exceptions import AuthorizationError


def is_owner_or_admin(
    requester_id: Optional[str],
    owner_id: Optional[str],
    *,
    is_admin: bool = False,
) -> bool:
    """
    Check whether a requester may access a resource of owner_id.

    Resources without an owner are visible to admins only.
    """
    if is_admin:
        return True
    return requester_id is not None and owner_id is not None and requester_id == owner_id


def require_owner_or_admin(
    requester_id: Optional[str],
    owner_id: Optional[str],
    *,
    is_admin: bool = False,
    resource: str = "resource",
    resource_id: Optional[str] = None,
) -> None:
    """
    Assert that a requester owns the resource or is an admin.

    Raises:
        AuthorizationError: If the requester is neither
    """
    if not is_owner_or_admin(requester_id, owner_id, is_admin=is_admin):
        raise AuthorizationError(
            f"User {requester_id} is not allowed to access this {resource}",
            details={"resource": resource, "resource_id": resource_id, "requester_id": requester_id},
        )
