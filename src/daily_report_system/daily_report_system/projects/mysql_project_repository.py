from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..core.enums import ProjectStatus
from ..core.ids import DepartmentId, ProjectId
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import Project
from .repository import ProjectRepository

_COLUMNS = "project_id, name, description, dept_id, status, start_date, end_date, is_active"


def _to_project(row: dict) -> Project:
    return Project(
        project_id=ProjectId(row["project_id"]),
        name=row["name"],
        description=row.get("description"),
        dept_id=DepartmentId(row["dept_id"]),
        status=ProjectStatus(row["status"]),
        start_date=row["start_date"],
        end_date=row.get("end_date"),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLProjectRepository(ProjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, project_id: ProjectId) -> Optional[Project]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM projects WHERE project_id=%s", (project_id,))
            row = fetchone(cur)
            return _to_project(row) if row else None

    def get_by_ids(self, project_ids: Iterable[ProjectId]) -> Sequence[Project]:
        ids = list(dict.fromkeys(project_ids))
        if not ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM projects WHERE project_id IN ({in_clause(ids)})", tuple(ids))
            return [_to_project(r) for r in fetchall(cur)]
