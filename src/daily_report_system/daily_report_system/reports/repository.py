from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import ReportStatus
from ..core.ids import DailyReportId, UserId
from .model import DailyReport, ReportSearchCriteria


class DailyReportRepository(Protocol):
    def get_by_id(self, report_id: DailyReportId) -> Optional[DailyReport]:
        raise NotImplementedError

    def get_for_user_and_date(self, user_id: UserId, report_date: date) -> Optional[DailyReport]:
        raise NotImplementedError

    def create(self, report: DailyReport) -> DailyReport:
        """Persist a new report; raises DuplicateKeyError if (user_id, report_date) is taken."""

        raise NotImplementedError

    def update(self, report: DailyReport, *, expected_status: Optional[ReportStatus] = None) -> DailyReport:
        """Replace the whole report, task list included, atomically.

        When ``expected_status`` is given the write only happens if the stored
        status still matches; otherwise ConcurrentModificationError is raised.
        """

        raise NotImplementedError

    def search(self, criteria: ReportSearchCriteria) -> Sequence[DailyReport]:
        """Matching reports ordered by report date, newest first."""

        raise NotImplementedError

    def list_for_user_in_range(self, user_id: UserId, date_from: date, date_to: date) -> Sequence[DailyReport]:
        raise NotImplementedError
