from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.ids import CommentId, DailyReportId, UserId
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Comment
from .repository import CommentRepository

_COLUMNS = "comment_id, report_id, user_id, content, is_read, created_at, updated_at"


def _to_comment(row: dict) -> Comment:
    return Comment(
        comment_id=CommentId(row["comment_id"]),
        report_id=DailyReportId(row["report_id"]),
        user_id=UserId(row["user_id"]),
        content=row["content"],
        is_read=bool(row["is_read"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class MySQLCommentRepository(CommentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM comments WHERE comment_id=%s", (comment_id,))
            row = fetchone(cur)
            return _to_comment(row) if row else None

    def list_for_report(self, report_id: DailyReportId) -> Sequence[Comment]:
        with db_cursor(self._conn_factory) as (_, cur):
            # seq is an AUTO_INCREMENT tie-breaker for comments created in the same microsecond.
            cur.execute(
                f"SELECT {_COLUMNS} FROM comments WHERE report_id=%s ORDER BY created_at ASC, seq ASC",
                (report_id,),
            )
            return [_to_comment(r) for r in fetchall(cur)]

    def create(self, comment: Comment) -> Comment:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO comments(comment_id, report_id, user_id, content, is_read, created_at, updated_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    comment.comment_id,
                    comment.report_id,
                    comment.user_id,
                    comment.content,
                    int(comment.is_read),
                    comment.created_at,
                    comment.updated_at,
                ),
            )
        return comment

    def mark_as_read(self, comment_id: CommentId, *, now: datetime) -> Optional[Comment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE comments SET is_read=1, updated_at=%s WHERE comment_id=%s AND is_read=0",
                (now, comment_id),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM comments WHERE comment_id=%s", (comment_id,))
            row = fetchone(cur)
            return _to_comment(row) if row else None
