from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from ..core.ids import ProjectId
from .model import Project


class ProjectRepository(Protocol):
    """Read-only project lookups; the report workflow only checks existence."""

    def get_by_id(self, project_id: ProjectId) -> Optional[Project]:
        raise NotImplementedError

    def get_by_ids(self, project_ids: Iterable[ProjectId]) -> Sequence[Project]:
        raise NotImplementedError
