from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.validators import is_blank
from ..core.errors import forbidden, not_found, validation_error
from ..core.ids import CommentId, DailyReportId, UserId, new_comment_id
from ..core.result import Err, Ok, Result
from ..reports.repository import DailyReportRepository
from ..users.permissions import can_manage_daily_reports
from ..users.repository import UserRepository
from .model import Comment
from .repository import CommentRepository

logger = logging.getLogger(__name__)


class CommentService:
    """Feedback threads attached to daily reports."""

    def __init__(self, comments: CommentRepository, reports: DailyReportRepository, users: UserRepository):
        self._comments = comments
        self._reports = reports
        self._users = users

    def create_comment(
        self,
        *,
        report_id: DailyReportId,
        user_id: UserId,
        content: str,
        now: Optional[datetime] = None,
    ) -> Result:
        now = now or datetime.now()

        report = self._reports.get_by_id(report_id)
        if not report:
            return Err(not_found("Daily report not found"))

        author = self._users.get_by_id(user_id)
        if not author:
            return Err(not_found("User not found"))

        if report.user_id != user_id and not can_manage_daily_reports(author):
            return Err(forbidden("You are not allowed to comment on this daily report"))

        if is_blank(content):
            return Err(validation_error("Comment content is required", {"field": "content"}))

        comment = Comment(
            comment_id=new_comment_id(),
            report_id=report_id,
            user_id=user_id,
            content=content,
            is_read=False,
            created_at=now,
            updated_at=now,
        )
        created = self._comments.create(comment)
        logger.info("comment %s added to report %s by %s", created.comment_id, report_id, user_id)
        return Ok(created)

    def list_comments(self, *, requester_id: UserId, report_id: DailyReportId) -> Result:
        requester = self._users.get_by_id(requester_id)
        if not requester:
            return Err(not_found("User not found"))

        report = self._reports.get_by_id(report_id)
        if not report:
            return Err(not_found("Daily report not found"))

        if report.user_id != requester_id and not can_manage_daily_reports(requester):
            return Err(forbidden("You are not allowed to view comments on this daily report"))

        return Ok(list(self._comments.list_for_report(report_id)))

    def mark_as_read(self, comment_id: CommentId, *, now: Optional[datetime] = None) -> Result:
        """Idempotent: marking an already-read comment returns it unchanged."""
        now = now or datetime.now()

        comment = self._comments.get_by_id(comment_id)
        if not comment:
            return Err(not_found("Comment not found"))
        if comment.is_read:
            return Ok(comment)

        updated = self._comments.mark_as_read(comment_id, now=now)
        if not updated:
            return Err(not_found("Comment not found"))
        return Ok(updated)
