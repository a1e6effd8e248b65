from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.ids import CommentId, DailyReportId
from .model import Comment


class CommentRepository(Protocol):
    """Append-only comment store; the only mutation is the read flag."""

    def get_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        raise NotImplementedError

    def list_for_report(self, report_id: DailyReportId) -> Sequence[Comment]:
        """Comments of one report, oldest first."""

        raise NotImplementedError

    def create(self, comment: Comment) -> Comment:
        raise NotImplementedError

    def mark_as_read(self, comment_id: CommentId, *, now: datetime) -> Optional[Comment]:
        raise NotImplementedError
