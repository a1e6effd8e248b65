from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.ids import CommentId, DailyReportId, UserId


@dataclass(frozen=True)
class Comment:
    comment_id: CommentId
    report_id: DailyReportId
    user_id: UserId
    content: str
    is_read: bool
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.comment_id,
            "dailyReportId": self.report_id,
            "userId": self.user_id,
            "content": self.content,
            "isRead": self.is_read,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }
