from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.ids import UserId
from .model import User, UserSearchCriteria


class UserRepository(Protocol):
    """Storage contract for user accounts."""

    def get_by_id(self, user_id: UserId) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def create(self, user: User) -> User:
        raise NotImplementedError

    def update(self, user: User) -> User:
        raise NotImplementedError

    def search(self, criteria: UserSearchCriteria) -> Sequence[User]:
        raise NotImplementedError

    def list_subordinates(self, manager_id: UserId) -> Sequence[User]:
        raise NotImplementedError
