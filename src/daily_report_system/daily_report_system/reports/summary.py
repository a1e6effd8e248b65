from __future__ import annotations

from datetime import date
from typing import Iterable

from ..core.enums import ReportStatus
from ..core.ids import ProjectId, UserId
from .model import DailyReport, DailyReportSummary


def summarize_reports(
    reports: Iterable[DailyReport],
    *,
    user_id: UserId,
    date_from: date,
    date_to: date,
) -> DailyReportSummary:
    """Fold a user's reports dated within [date_from, date_to] into hour and status totals."""
    total_reports = 0
    total_hours: float = 0
    project_hours: dict[ProjectId, float] = {}
    counts = {status: 0 for status in ReportStatus}

    for report in reports:
        if report.user_id != user_id or not (date_from <= report.report_date <= date_to):
            continue

        total_reports += 1
        counts[report.status] += 1

        for task in report.tasks:
            total_hours += task.hours_spent
            project_hours[task.project_id] = project_hours.get(task.project_id, 0) + task.hours_spent

    return DailyReportSummary(
        user_id=user_id,
        date_from=date_from,
        date_to=date_to,
        total_reports=total_reports,
        total_hours=total_hours,
        project_hours=project_hours,
        submitted_count=counts[ReportStatus.SUBMITTED],
        approved_count=counts[ReportStatus.APPROVED],
        rejected_count=counts[ReportStatus.REJECTED],
        draft_count=counts[ReportStatus.DRAFT],
    )
