from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Optional

from ..common.validators import is_blank, is_strong_password, is_valid_email
from ..core.enums import Role
from ..core.errors import (
    already_exists,
    business_rule_violation,
    forbidden,
    not_found,
    unauthorized,
    validation_error,
)
from ..core.exceptions import DuplicateKeyError
from ..core.ids import UserId, new_user_id
from ..core.result import Err, Ok, Result
from .model import NewAccount, ProfileUpdate, User, UserSearchCriteria
from .permissions import can_have_subordinates, can_manage_users
from .repository import UserRepository
from .security import PasswordHasher, WerkzeugPasswordHasher

logger = logging.getLogger(__name__)

WEAK_PASSWORD_MESSAGE = "Password must be at least 8 characters and contain upper-case, lower-case and a digit"


class AuthService:
    """Use cases: authenticate (login) and change password."""

    def __init__(self, users: UserRepository, hasher: Optional[PasswordHasher] = None):
        self._users = users
        self._hasher = hasher or WerkzeugPasswordHasher()

    def authenticate(self, email: str, password: str) -> Result:
        user = self._users.get_by_email((email or "").strip())
        if not user or not user.password_hash:
            return Err(unauthorized("Invalid email or password"))

        if not user.is_active:
            return Err(forbidden("This account has been deactivated"))

        if not self._hasher.verify(password or "", user.password_hash):
            return Err(unauthorized("Invalid email or password"))

        return Ok(user.public())

    def change_password(
        self,
        *,
        user_id: UserId,
        current_password: str,
        new_password: str,
        now: Optional[datetime] = None,
    ) -> Result:
        now = now or datetime.now()

        user = self._users.get_by_id(user_id)
        if not user or not user.password_hash:
            return Err(not_found("User not found"))

        if not self._hasher.verify(current_password or "", user.password_hash):
            return Err(unauthorized("Current password is incorrect"))

        if not is_strong_password(new_password):
            return Err(validation_error(WEAK_PASSWORD_MESSAGE))

        self._users.update(replace(user, password_hash=self._hasher.hash(new_password), updated_at=now))
        logger.info("password changed for user %s", user_id)
        return Ok(None)


class UserService:
    """Use cases: manage user accounts."""

    def __init__(self, users: UserRepository, hasher: Optional[PasswordHasher] = None):
        self._users = users
        self._hasher = hasher or WerkzeugPasswordHasher()

    def _check_manager(self, manager_id: UserId) -> Optional[Result]:
        manager = self._users.get_by_id(manager_id)
        if not manager:
            return Err(not_found("Manager not found", {"managerId": manager_id}))
        if not can_have_subordinates(manager):
            return Err(business_rule_violation("The given user does not hold a manager role", {"managerId": manager_id}))
        return None

    def create_account(self, account: NewAccount, *, now: Optional[datetime] = None) -> Result:
        now = now or datetime.now()

        if not is_valid_email(account.email):
            return Err(validation_error("Invalid email address", {"field": "email"}))
        if not is_strong_password(account.password):
            return Err(validation_error(WEAK_PASSWORD_MESSAGE, {"field": "password"}))
        if is_blank(account.name):
            return Err(validation_error("Name is required", {"field": "name"}))

        if self._users.get_by_email(account.email):
            return Err(already_exists("This email address is already in use"))

        if account.manager_id:
            failure = self._check_manager(account.manager_id)
            if failure:
                return failure

        user = User(
            user_id=new_user_id(),
            email=account.email,
            name=account.name,
            role=account.role,
            dept_id=account.dept_id,
            manager_id=account.manager_id,
            is_active=True,
            chat_user_id=account.chat_user_id,
            password_hash=self._hasher.hash(account.password),
            created_at=now,
            updated_at=now,
        )

        try:
            created = self._users.create(user)
        except DuplicateKeyError:
            return Err(already_exists("This email address is already in use"))

        logger.info("account %s created (role=%s)", created.user_id, created.role.value)
        return Ok(created.public())

    def update_profile(self, update: ProfileUpdate, *, now: Optional[datetime] = None) -> Result:
        now = now or datetime.now()

        user = self._users.get_by_id(update.user_id)
        if not user:
            return Err(not_found("User not found"))

        if update.email and update.email != user.email:
            if not is_valid_email(update.email):
                return Err(validation_error("Invalid email address", {"field": "email"}))
            if self._users.get_by_email(update.email):
                return Err(already_exists("This email address is already in use"))

        if update.name is not None and is_blank(update.name):
            return Err(validation_error("Name is required", {"field": "name"}))

        if update.manager_id and update.manager_id != user.manager_id:
            failure = self._check_manager(update.manager_id)
            if failure:
                return failure

        updated = replace(
            user,
            email=update.email or user.email,
            name=update.name if update.name is not None else user.name,
            role=update.role or user.role,
            dept_id=update.dept_id or user.dept_id,
            manager_id=update.manager_id if update.manager_id is not None else user.manager_id,
            is_active=update.is_active if update.is_active is not None else user.is_active,
            chat_user_id=update.chat_user_id if update.chat_user_id is not None else user.chat_user_id,
            updated_at=now,
        )

        try:
            saved = self._users.update(updated)
        except DuplicateKeyError:
            return Err(already_exists("This email address is already in use"))
        return Ok(saved.public())

    def update_own_profile(self, update: ProfileUpdate, *, now: Optional[datetime] = None) -> Result:
        """Self-service edit: role and active flag are never taken from the caller."""
        return self.update_profile(replace(update, role=None, is_active=None), now=now)

    def register(self, account: NewAccount, *, now: Optional[datetime] = None) -> Result:
        """Self-signup always creates an employee without a manager."""
        return self.create_account(replace(account, role=Role.EMPLOYEE, manager_id=None), now=now)

    def deactivate(self, *, current_user_id: UserId, user_id: UserId, now: Optional[datetime] = None) -> Result:
        now = now or datetime.now()

        current = self._users.get_by_id(current_user_id)
        if not current or not can_manage_users(current):
            return Err(forbidden("You are not allowed to deactivate accounts"))

        user = self._users.get_by_id(user_id)
        if not user:
            return Err(not_found("User not found"))

        if not user.is_active:
            return Ok(user.public())

        saved = self._users.update(replace(user, is_active=False, updated_at=now))
        logger.info("account %s deactivated by %s", user_id, current_user_id)
        return Ok(saved.public())

    def get_user(self, user_id: UserId) -> Result:
        user = self._users.get_by_id(user_id)
        if not user:
            return Err(not_found("User not found"))
        return Ok(user.public())

    def search_users(self, criteria: UserSearchCriteria) -> list[User]:
        return [u.public() for u in self._users.search(criteria)]

    def list_subordinates(self, manager_id: UserId) -> Result:
        manager = self._users.get_by_id(manager_id)
        if not manager:
            return Err(not_found("Manager not found"))
        if not can_have_subordinates(manager):
            return Err(forbidden("You are not allowed to view subordinates"))
        return Ok([u.public() for u in self._users.list_subordinates(manager_id)])
