from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from ..core.enums import Role
from ..core.ids import DepartmentId, UserId


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: plain data object, no DB access. ``password_hash`` is only set on
    values read from the store and is stripped by ``public()`` before a user
    leaves the service layer.
    """

    user_id: UserId
    email: str
    name: str
    role: Role
    dept_id: DepartmentId
    manager_id: Optional[UserId] = None
    is_active: bool = True
    chat_user_id: Optional[str] = None
    password_hash: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def public(self) -> "User":
        return replace(self, password_hash=None)

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "email": self.email,
            "name": self.name,
            "role": self.role.value,
            "departmentId": self.dept_id,
            "managerId": self.manager_id,
            "isActive": self.is_active,
            "chatUserId": self.chat_user_id,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class NewAccount:
    email: str
    password: str
    name: str
    role: Role
    dept_id: DepartmentId
    manager_id: Optional[UserId] = None
    chat_user_id: Optional[str] = None


@dataclass(frozen=True)
class ProfileUpdate:
    """Partial profile update; ``None`` keeps the stored value."""

    user_id: UserId
    email: Optional[str] = None
    name: Optional[str] = None
    role: Optional[Role] = None
    dept_id: Optional[DepartmentId] = None
    manager_id: Optional[UserId] = None
    is_active: Optional[bool] = None
    chat_user_id: Optional[str] = None


@dataclass(frozen=True)
class UserSearchCriteria:
    email: Optional[str] = None
    name: Optional[str] = None
    role: Optional[Role] = None
    dept_id: Optional[DepartmentId] = None
    manager_id: Optional[UserId] = None
    is_active: Optional[bool] = None
