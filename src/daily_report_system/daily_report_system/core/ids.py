"""Typed identifiers.

All ids are plain strings at rest; the NewType wrappers keep a report id
from being passed where a user id is expected (checked by mypy/pyright).
"""
from __future__ import annotations

from typing import NewType
from uuid import uuid4

UserId = NewType("UserId", str)
DailyReportId = NewType("DailyReportId", str)
DepartmentId = NewType("DepartmentId", str)
ProjectId = NewType("ProjectId", str)
TaskId = NewType("TaskId", str)
CommentId = NewType("CommentId", str)
NotificationId = NewType("NotificationId", str)


def _new_id() -> str:
    return uuid4().hex


def new_user_id() -> UserId:
    return UserId(_new_id())


def new_report_id() -> DailyReportId:
    return DailyReportId(_new_id())


def new_task_id() -> TaskId:
    return TaskId(_new_id())


def new_comment_id() -> CommentId:
    return CommentId(_new_id())
