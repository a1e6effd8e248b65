from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.validators import is_blank
from ..core.enums import ReportStatus, Role
from ..core.errors import business_rule_violation, forbidden, not_found, validation_error
from ..core.exceptions import ConcurrentModificationError, DuplicateKeyError
from ..core.ids import DailyReportId, UserId, new_report_id, new_task_id
from ..core.result import Err, Ok, Result
from ..projects.repository import ProjectRepository
from ..users.model import User
from ..users.permissions import can_approve_report_of, can_manage_daily_reports
from ..users.repository import UserRepository
from .model import DailyReport, DailyReportChanges, NewDailyReport, ReportSearchCriteria, Task, TaskInput
from .repository import DailyReportRepository
from .rules import (
    can_approve_report,
    can_edit_report,
    can_reject_report,
    can_submit_report,
    validate_report_text,
    validate_task_fields,
)
from .summary import summarize_reports

logger = logging.getLogger(__name__)


def _with_fresh_ids(tasks: Sequence[TaskInput]) -> tuple[Task, ...]:
    # Every save of a task list mints new ids, even for unchanged tasks.
    return tuple(
        Task(
            task_id=new_task_id(),
            project_id=t.project_id,
            description=t.description,
            hours_spent=t.hours_spent,
            progress=t.progress,
        )
        for t in tasks
    )


class DailyReportService:
    """Daily report lifecycle: create, update, submit, approve, reject, search and summarize.

    Every operation returns ``Ok``/``Err``; storage faults other than the
    uniqueness and status compare-and-swap conflicts propagate to the caller.
    """

    def __init__(
        self,
        reports: DailyReportRepository,
        users: UserRepository,
        projects: ProjectRepository,
        *,
        restrict_managers_to_subordinates: bool = False,
    ):
        self._reports = reports
        self._users = users
        self._projects = projects
        self._restrict_managers = bool(restrict_managers_to_subordinates)

    # ------------------------------------------------------------------
    # helpers

    def _validate_tasks(self, tasks: Sequence[TaskInput]) -> Result:
        checked = validate_task_fields(tasks)
        if checked.is_err():
            return checked

        project_ids = [t.project_id for t in tasks]
        found = {p.project_id for p in self._projects.get_by_ids(project_ids)}
        for project_id in project_ids:
            if project_id not in found:
                return Err(not_found(f"Project {project_id} not found", {"projectId": project_id}))
        return Ok(None)

    def _subordinate_ids(self, manager_id: UserId) -> set[UserId]:
        return {u.user_id for u in self._users.list_subordinates(manager_id)}

    def _can_view_reports_of(self, requester: User, owner_id: UserId) -> bool:
        if requester.user_id == owner_id:
            return True
        if not can_manage_daily_reports(requester):
            return False
        if self._restrict_managers and requester.role == Role.MANAGER:
            return owner_id in self._subordinate_ids(requester.user_id)
        return True

    def _can_decide(self, decider: User, report: DailyReport) -> bool:
        owner_manager_id = None
        if self._restrict_managers and decider.role == Role.MANAGER:
            owner = self._users.get_by_id(report.user_id)
            owner_manager_id = owner.manager_id if owner else None
        return can_approve_report_of(
            decider,
            owner_manager_id,
            restrict_managers_to_subordinates=self._restrict_managers,
        )

    def _save_transition(self, updated: DailyReport, *, observed: ReportStatus) -> Result:
        try:
            return Ok(self._reports.update(updated, expected_status=observed))
        except ConcurrentModificationError:
            logger.warning("report %s changed status concurrently (expected %s)", updated.report_id, observed.value)
            return Err(business_rule_violation("The report was modified by someone else, reload and try again"))

    # ------------------------------------------------------------------
    # lifecycle

    def create_report(self, new: NewDailyReport, *, now: Optional[datetime] = None) -> Result:
        now = now or datetime.now()

        validated = self._validate_tasks(new.tasks).and_then(
            lambda _: validate_report_text(challenges=new.challenges, next_day_plan=new.next_day_plan)
        )
        if validated.is_err():
            return validated

        if not self._users.get_by_id(new.user_id):
            return Err(not_found("User not found"))

        if self._reports.get_for_user_and_date(new.user_id, new.report_date):
            return Err(business_rule_violation("A daily report already exists for this date"))

        report = DailyReport(
            report_id=new_report_id(),
            user_id=new.user_id,
            report_date=new.report_date,
            tasks=_with_fresh_ids(new.tasks),
            challenges=new.challenges,
            next_day_plan=new.next_day_plan,
            status=ReportStatus.DRAFT,
            created_at=now,
            updated_at=now,
        )

        try:
            created = self._reports.create(report)
        except DuplicateKeyError:
            logger.warning("duplicate report for user %s on %s rejected by storage", new.user_id, new.report_date)
            return Err(business_rule_violation("A daily report already exists for this date"))

        logger.info("report %s created for user %s on %s", created.report_id, created.user_id, created.report_date)
        return Ok(created)

    def update_report(self, changes: DailyReportChanges, *, now: Optional[datetime] = None) -> Result:
        now = now or datetime.now()

        report = self._reports.get_by_id(changes.report_id)
        if not report:
            return Err(not_found("Daily report not found"))

        if not can_edit_report(report, changes.user_id):
            return Err(forbidden("You are not allowed to edit this daily report"))

        if changes.tasks is not None:
            validated = self._validate_tasks(changes.tasks)
            if validated.is_err():
                return validated

        if changes.challenges is not None and is_blank(changes.challenges):
            return Err(validation_error("Challenges are required", {"field": "challenges"}))
        if changes.next_day_plan is not None and is_blank(changes.next_day_plan):
            return Err(validation_error("Next day plan is required", {"field": "nextDayPlan"}))

        updated = replace(
            report,
            tasks=_with_fresh_ids(changes.tasks) if changes.tasks is not None else report.tasks,
            challenges=changes.challenges if changes.challenges is not None else report.challenges,
            next_day_plan=changes.next_day_plan if changes.next_day_plan is not None else report.next_day_plan,
            updated_at=now,
        )
        return self._save_transition(updated, observed=report.status)

    def submit_report(self, *, report_id: DailyReportId, user_id: UserId, now: Optional[datetime] = None) -> Result:
        now = now or datetime.now()

        report = self._reports.get_by_id(report_id)
        if not report:
            return Err(not_found("Daily report not found"))

        if report.user_id != user_id:
            return Err(forbidden("You cannot submit another user's daily report"))

        if not can_submit_report(report):
            return Err(business_rule_violation("This daily report cannot be submitted in its current state"))

        submitted = replace(report, status=ReportStatus.SUBMITTED, submitted_at=now, updated_at=now)
        result = self._save_transition(submitted, observed=report.status)
        if result.is_ok():
            logger.info("report %s submitted by %s", report_id, user_id)
        return result

    def approve_report(
        self,
        *,
        report_id: DailyReportId,
        approver_id: UserId,
        feedback: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Result:
        now = now or datetime.now()

        report = self._reports.get_by_id(report_id)
        if not report:
            return Err(not_found("Daily report not found"))

        approver = self._users.get_by_id(approver_id)
        if not approver:
            return Err(not_found("Approver not found"))

        if not self._can_decide(approver, report):
            return Err(forbidden("You are not allowed to approve this daily report"))

        if not can_approve_report(report):
            return Err(business_rule_violation("This daily report cannot be approved in its current state"))

        # Feedback is always overwritten so a stale rejection note does not survive approval.
        approved = replace(
            report,
            status=ReportStatus.APPROVED,
            approved_at=now,
            approved_by=approver_id,
            feedback=feedback,
            updated_at=now,
        )
        result = self._save_transition(approved, observed=report.status)
        if result.is_ok():
            logger.info("report %s approved by %s", report_id, approver_id)
        return result

    def reject_report(
        self,
        *,
        report_id: DailyReportId,
        rejector_id: UserId,
        feedback: str,
        now: Optional[datetime] = None,
    ) -> Result:
        now = now or datetime.now()

        report = self._reports.get_by_id(report_id)
        if not report:
            return Err(not_found("Daily report not found"))

        rejector = self._users.get_by_id(rejector_id)
        if not rejector:
            return Err(not_found("Rejector not found"))

        if not self._can_decide(rejector, report):
            return Err(forbidden("You are not allowed to reject this daily report"))

        if not can_reject_report(report):
            return Err(business_rule_violation("This daily report cannot be rejected in its current state"))

        if is_blank(feedback):
            return Err(validation_error("A reason is required when rejecting a report", {"field": "feedback"}))

        rejected = replace(
            report,
            status=ReportStatus.REJECTED,
            rejected_at=now,
            rejected_by=rejector_id,
            feedback=feedback,
            updated_at=now,
        )
        result = self._save_transition(rejected, observed=report.status)
        if result.is_ok():
            logger.info("report %s rejected by %s", report_id, rejector_id)
        return result

    # ------------------------------------------------------------------
    # queries

    def get_report(self, *, requester_id: UserId, report_id: DailyReportId) -> Result:
        requester = self._users.get_by_id(requester_id)
        if not requester:
            return Err(not_found("User not found"))

        report = self._reports.get_by_id(report_id)
        if not report:
            return Err(not_found("Daily report not found"))

        if not self._can_view_reports_of(requester, report.user_id):
            return Err(forbidden("You are not allowed to view this daily report"))
        return Ok(report)

    def search_reports(self, *, requester_id: UserId, criteria: ReportSearchCriteria) -> Result:
        requester = self._users.get_by_id(requester_id)
        if not requester:
            return Err(not_found("User not found"))

        if requester.role == Role.EMPLOYEE:
            # Employees only ever see their own reports, whatever filter they sent.
            criteria = replace(criteria, user_id=requester_id, user_ids=None)
        elif requester.role == Role.MANAGER and self._restrict_managers:
            visible = tuple(sorted(self._subordinate_ids(requester_id) | {requester_id}))
            criteria = replace(criteria, user_ids=visible)

        return Ok(list(self._reports.search(criteria)))

    def get_summary(
        self,
        *,
        requester_id: UserId,
        target_user_id: UserId,
        date_from: date,
        date_to: date,
    ) -> Result:
        if date_from > date_to:
            return Err(validation_error("dateFrom must not be after dateTo", {"field": "dateFrom"}))

        requester = self._users.get_by_id(requester_id)
        if not requester:
            return Err(not_found("User not found"))

        if not self._can_view_reports_of(requester, target_user_id):
            return Err(forbidden("You are not allowed to view this user's summary"))

        if not self._users.get_by_id(target_user_id):
            return Err(not_found("Target user not found"))

        reports = self._reports.list_for_user_in_range(target_user_id, date_from, date_to)
        return Ok(summarize_reports(reports, user_id=target_user_id, date_from=date_from, date_to=date_to))
