"""Business rules for daily reports.

Pure predicates over report and task fields plus the per-report
transition guards. Nothing here touches a repository.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Sequence

from ..common.validators import is_blank
from ..core.constants import HOURS_DECIMAL_PLACES, MAX_HOURS_PER_DAY, MAX_PROGRESS, MIN_PROGRESS
from ..core.enums import ReportStatus
from ..core.errors import validation_error
from ..core.ids import UserId
from ..core.result import Err, Ok, Result
from .model import DailyReport, TaskInput


def is_valid_work_hours(hours: float) -> bool:
    return 0 <= hours <= MAX_HOURS_PER_DAY


def has_storable_hours_precision(hours: float) -> bool:
    """Hours are stored with two decimals; anything finer would be rounded on save."""
    return Decimal(str(hours)).as_tuple().exponent >= -HOURS_DECIMAL_PLACES


def is_valid_progress(progress: float) -> bool:
    return MIN_PROGRESS <= progress <= MAX_PROGRESS


def is_valid_total_work_hours(tasks: Iterable[TaskInput]) -> bool:
    """A day cannot hold more than 24 recorded hours across all tasks."""
    # Summed as decimals so 23.99 + 0.01 is exactly 24.
    return sum((Decimal(str(t.hours_spent)) for t in tasks), Decimal(0)) <= MAX_HOURS_PER_DAY


def can_edit_report(report: DailyReport, user_id: UserId) -> bool:
    # Owner only; approved reports are locked for good.
    if report.user_id != user_id:
        return False
    return report.status != ReportStatus.APPROVED


def can_submit_report(report: DailyReport) -> bool:
    return report.status in {ReportStatus.DRAFT, ReportStatus.REJECTED}


def can_approve_report(report: DailyReport) -> bool:
    return report.status == ReportStatus.SUBMITTED


def can_reject_report(report: DailyReport) -> bool:
    return report.status == ReportStatus.SUBMITTED


def validate_task_fields(tasks: Sequence[TaskInput]) -> Result:
    """Field-level task checks; the first failure wins."""
    if not tasks:
        return Err(validation_error("At least one task is required", {"field": "tasks"}))

    for index, task in enumerate(tasks):
        if not is_valid_work_hours(task.hours_spent):
            return Err(validation_error("Hours spent must be between 0 and 24", {"field": "tasks", "index": index}))
        if not has_storable_hours_precision(task.hours_spent):
            return Err(
                validation_error("Hours spent can have at most 2 decimal places", {"field": "tasks", "index": index})
            )
        if not is_valid_progress(task.progress):
            return Err(validation_error("Progress must be between 0 and 100", {"field": "tasks", "index": index}))
        if is_blank(task.description):
            return Err(validation_error("Task description is required", {"field": "tasks", "index": index}))

    if not is_valid_total_work_hours(tasks):
        return Err(validation_error("Total hours for one day cannot exceed 24", {"field": "tasks"}))

    return Ok(None)


def validate_report_text(*, challenges: str, next_day_plan: str) -> Result:
    if is_blank(challenges):
        return Err(validation_error("Challenges are required", {"field": "challenges"}))
    if is_blank(next_day_plan):
        return Err(validation_error("Next day plan is required", {"field": "nextDayPlan"}))
    return Ok(None)
