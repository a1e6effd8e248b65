from __future__ import annotations

from typing import Optional, Sequence

from ..core.constants import DEFAULT_USER_SEARCH_LIMIT
from ..core.enums import Role
from ..core.ids import DepartmentId, UserId
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User, UserSearchCriteria
from .repository import UserRepository

_COLUMNS = (
    "user_id, email, name, password_hash, role, dept_id, manager_id, is_active, chat_user_id, created_at, updated_at"
)


def _to_user(row: dict) -> User:
    return User(
        user_id=UserId(row["user_id"]),
        email=row["email"],
        name=row["name"],
        password_hash=row.get("password_hash"),
        role=Role(row["role"]),
        dept_id=DepartmentId(row["dept_id"]),
        manager_id=UserId(row["manager_id"]) if row.get("manager_id") else None,
        is_active=bool(row.get("is_active", True)),
        chat_user_id=row.get("chat_user_id"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: UserId) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (user_id,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def create(self, user: User) -> User:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(user_id, email, name, password_hash, role, dept_id, manager_id,
                                  is_active, chat_user_id, created_at, updated_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    user.user_id,
                    user.email,
                    user.name,
                    user.password_hash,
                    user.role.value,
                    user.dept_id,
                    user.manager_id,
                    int(user.is_active),
                    user.chat_user_id,
                    user.created_at,
                    user.updated_at,
                ),
            )
        return user

    def update(self, user: User) -> User:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE users
                SET email=%s, name=%s, password_hash=%s, role=%s, dept_id=%s, manager_id=%s,
                    is_active=%s, chat_user_id=%s, updated_at=%s
                WHERE user_id=%s
                """,
                (
                    user.email,
                    user.name,
                    user.password_hash,
                    user.role.value,
                    user.dept_id,
                    user.manager_id,
                    int(user.is_active),
                    user.chat_user_id,
                    user.updated_at,
                    user.user_id,
                ),
            )
        return user

    def search(self, criteria: UserSearchCriteria) -> Sequence[User]:
        where: list[str] = []
        params: list = []
        if criteria.email:
            where.append("email=%s")
            params.append(criteria.email)
        if criteria.name:
            where.append("name LIKE %s")
            params.append(f"%{criteria.name}%")
        if criteria.role:
            where.append("role=%s")
            params.append(criteria.role.value)
        if criteria.dept_id:
            where.append("dept_id=%s")
            params.append(criteria.dept_id)
        if criteria.manager_id:
            where.append("manager_id=%s")
            params.append(criteria.manager_id)
        if criteria.is_active is not None:
            where.append("is_active=%s")
            params.append(int(criteria.is_active))

        sql = f"SELECT {_COLUMNS} FROM users"
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY name ASC LIMIT %s"
        params.append(DEFAULT_USER_SEARCH_LIMIT)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_user(r) for r in fetchall(cur)]

    def list_subordinates(self, manager_id: UserId) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM users WHERE manager_id=%s ORDER BY name ASC",
                (manager_id,),
            )
            return [_to_user(r) for r in fetchall(cur)]
