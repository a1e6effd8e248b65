from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import ProjectStatus
from ..core.ids import DepartmentId, ProjectId


@dataclass(frozen=True)
class Project:
    project_id: ProjectId
    name: str
    dept_id: DepartmentId
    status: ProjectStatus
    start_date: date
    end_date: Optional[date] = None
    is_active: bool = True
    description: Optional[str] = None

