"""Role-level authorization predicates.

Role is a closed enum; each predicate matches every member explicitly.
"""
from __future__ import annotations

from typing import Optional

from ..core.enums import Role
from ..core.ids import UserId
from .model import User


def can_manage_daily_reports(user: User) -> bool:
    if user.role == Role.ADMIN:
        return True
    if user.role == Role.MANAGER:
        return True
    if user.role == Role.EMPLOYEE:
        return False
    raise ValueError(f"Unknown role: {user.role!r}")


def can_manage_users(user: User) -> bool:
    return user.role == Role.ADMIN


def can_have_subordinates(user: User) -> bool:
    return user.role in {Role.ADMIN, Role.MANAGER}


def can_approve_report_of(
    approver: User,
    owner_manager_id: Optional[UserId],
    *,
    restrict_managers_to_subordinates: bool = False,
) -> bool:
    """Whether ``approver`` may approve/reject a report owned by a user whose manager is ``owner_manager_id``."""
    if approver.role == Role.ADMIN:
        return True
    if approver.role == Role.MANAGER:
        if restrict_managers_to_subordinates:
            return owner_manager_id == approver.user_id
        return True
    if approver.role == Role.EMPLOYEE:
        return False
    raise ValueError(f"Unknown role: {approver.role!r}")
