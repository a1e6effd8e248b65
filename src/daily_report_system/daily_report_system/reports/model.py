from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import ReportStatus
from ..core.ids import DailyReportId, ProjectId, TaskId, UserId


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class TaskInput:
    """A report line item as entered by the user, before it gets an id."""

    project_id: ProjectId
    description: str
    hours_spent: float
    progress: int


@dataclass(frozen=True)
class Task:
    task_id: TaskId
    project_id: ProjectId
    description: str
    hours_spent: float
    progress: int

    def to_dict(self) -> dict:
        return {
            "id": self.task_id,
            "projectId": self.project_id,
            "description": self.description,
            "hoursSpent": self.hours_spent,
            "progress": self.progress,
        }


@dataclass(frozen=True)
class DailyReport:
    report_id: DailyReportId
    user_id: UserId
    report_date: date
    tasks: tuple[Task, ...]
    challenges: str
    next_day_plan: str
    status: ReportStatus
    created_at: datetime
    updated_at: datetime
    submitted_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    approved_by: Optional[UserId] = None
    rejected_at: Optional[datetime] = None
    rejected_by: Optional[UserId] = None
    feedback: Optional[str] = None

    @property
    def total_hours(self) -> float:
        return sum(t.hours_spent for t in self.tasks)

    def to_dict(self) -> dict:
        return {
            "id": self.report_id,
            "userId": self.user_id,
            "date": self.report_date.isoformat(),
            "tasks": [t.to_dict() for t in self.tasks],
            "challenges": self.challenges,
            "nextDayPlan": self.next_day_plan,
            "status": self.status.value,
            "submittedAt": _iso(self.submitted_at),
            "approvedAt": _iso(self.approved_at),
            "approvedBy": self.approved_by,
            "rejectedAt": _iso(self.rejected_at),
            "rejectedBy": self.rejected_by,
            "feedback": self.feedback,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


@dataclass(frozen=True)
class NewDailyReport:
    user_id: UserId
    report_date: date
    tasks: tuple[TaskInput, ...]
    challenges: str
    next_day_plan: str


@dataclass(frozen=True)
class DailyReportChanges:
    """Partial update; ``None`` keeps the stored value."""

    report_id: DailyReportId
    user_id: UserId
    tasks: Optional[tuple[TaskInput, ...]] = None
    challenges: Optional[str] = None
    next_day_plan: Optional[str] = None


@dataclass(frozen=True)
class ReportSearchCriteria:
    user_id: Optional[UserId] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    status: Optional[ReportStatus] = None
    approver_id: Optional[UserId] = None
    project_id: Optional[ProjectId] = None
    # Set by the service when a requester's visibility is limited to a user set.
    user_ids: Optional[tuple[UserId, ...]] = None


@dataclass(frozen=True)
class DailyReportSummary:
    user_id: UserId
    date_from: date
    date_to: date
    total_reports: int = 0
    total_hours: float = 0
    project_hours: dict[ProjectId, float] = field(default_factory=dict)
    submitted_count: int = 0
    approved_count: int = 0
    rejected_count: int = 0
    draft_count: int = 0

    def to_dict(self) -> dict:
        return {
            "userId": self.user_id,
            "dateFrom": self.date_from.isoformat(),
            "dateTo": self.date_to.isoformat(),
            "totalReports": self.total_reports,
            "totalHours": self.total_hours,
            "projectHours": dict(self.project_hours),
            "submittedCount": self.submitted_count,
            "approvedCount": self.approved_count,
            "rejectedCount": self.rejected_count,
            "draftCount": self.draft_count,
        }
