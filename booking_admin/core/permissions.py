"""
Permission catalogue used by roles and route guards.
"""
from __future__ import annotations

import enum
from typing import Dict, Iterable, List, Optional, Set


class Permission(str, enum.Enum):
    """Permissions assignable to a role. ADMIN implies every other one."""
    ADMIN = "ADMIN"

    SHOW_ROLE = "SHOW_ROLE"
    CREATE_ROLE = "CREATE_ROLE"
    EDIT_ROLE = "EDIT_ROLE"
    DELETE_ROLE = "DELETE_ROLE"

    VIEW_USER = "VIEW_USER"
    CREATE_USER = "CREATE_USER"
    EDIT_USER = "EDIT_USER"
    DELETE_USER = "DELETE_USER"

    VIEW_ROOM = "VIEW_ROOM"
    CREATE_ROOM = "CREATE_ROOM"
    EDIT_ROOM = "EDIT_ROOM"
    DELETE_ROOM = "DELETE_ROOM"

    VIEW_BOOKING = "VIEW_BOOKING"
    CREATE_BOOKING = "CREATE_BOOKING"
    EDIT_BOOKING = "EDIT_BOOKING"
    DELETE_BOOKING = "DELETE_BOOKING"
    SYNC_BOOKING = "SYNC_BOOKING"

    VIEW_LOGS = "VIEW_LOGS"


PERMISSION_DESCRIPTIONS: Dict[Permission, str] = {
    Permission.ADMIN: "Full access to every resource",
    Permission.SHOW_ROLE: "View roles and the permission list",
    Permission.CREATE_ROLE: "Create roles",
    Permission.EDIT_ROLE: "Edit roles",
    Permission.DELETE_ROLE: "Delete roles and reassign their users",
    Permission.VIEW_USER: "View users",
    Permission.CREATE_USER: "Create users",
    Permission.EDIT_USER: "Edit users",
    Permission.DELETE_USER: "Delete users",
    Permission.VIEW_ROOM: "View rooms",
    Permission.CREATE_ROOM: "Create rooms",
    Permission.EDIT_ROOM: "Edit rooms and override their status",
    Permission.DELETE_ROOM: "Delete rooms",
    Permission.VIEW_BOOKING: "View bookings and room availability",
    Permission.CREATE_BOOKING: "Create bookings",
    Permission.EDIT_BOOKING: "Edit bookings and record check-in/out",
    Permission.DELETE_BOOKING: "Delete bookings",
    Permission.SYNC_BOOKING: "Pull reservations from channel managers",
    Permission.VIEW_LOGS: "View activity logs",
}


def list_permissions(search_key: Optional[str] = None) -> List[Dict[str, str]]:
    """Permission catalogue, optionally filtered by a case-insensitive search key"""
    needle = (search_key or "").strip().lower()
    return [
        {"name": permission.value, "description": PERMISSION_DESCRIPTIONS[permission]}
        for permission in Permission
        if not needle
        or needle in permission.value.lower()
        or needle in PERMISSION_DESCRIPTIONS[permission].lower()
    ]


def has_any_permission(granted: Iterable[str], required: Iterable[str]) -> bool:
    """True when ``granted`` holds ADMIN or at least one of ``required``"""
    granted_set: Set[str] = {str(getattr(p, "value", p)) for p in granted}
    if Permission.ADMIN.value in granted_set:
        return True
    required_set = {str(getattr(p, "value", p)) for p in required}
    if not required_set:
        return True
    return bool(granted_set & required_set)
