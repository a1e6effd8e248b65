"""In-memory repositories used by the service and controller tests."""
from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Iterable, Optional

from src.daily_report_system.daily_report_system.comments.model import Comment
from src.daily_report_system.daily_report_system.core.enums import ReportStatus
from src.daily_report_system.daily_report_system.core.exceptions import (
    ConcurrentModificationError,
    DuplicateKeyError,
)
from src.daily_report_system.daily_report_system.projects.model import Project
from src.daily_report_system.daily_report_system.reports.model import DailyReport, ReportSearchCriteria
from src.daily_report_system.daily_report_system.users.model import User, UserSearchCriteria


class InMemoryUsers:
    def __init__(self, users: Iterable[User] = ()):
        self._by_id: dict[str, User] = {u.user_id: u for u in users}

    def get_by_id(self, user_id):
        return self._by_id.get(user_id)

    def get_by_email(self, email):
        for u in self._by_id.values():
            if u.email == email:
                return u
        return None

    def create(self, user):
        if user.user_id in self._by_id or self.get_by_email(user.email):
            raise DuplicateKeyError(user.email)
        self._by_id[user.user_id] = user
        return user

    def update(self, user):
        self._by_id[user.user_id] = user
        return user

    def search(self, criteria: UserSearchCriteria):
        out = []
        for u in self._by_id.values():
            if criteria.email and criteria.email not in u.email:
                continue
            if criteria.name and criteria.name not in u.name:
                continue
            if criteria.role and u.role != criteria.role:
                continue
            if criteria.dept_id and u.dept_id != criteria.dept_id:
                continue
            if criteria.manager_id and u.manager_id != criteria.manager_id:
                continue
            if criteria.is_active is not None and u.is_active != criteria.is_active:
                continue
            out.append(u)
        return sorted(out, key=lambda u: u.name)

    def list_subordinates(self, manager_id):
        return [u for u in self._by_id.values() if u.manager_id == manager_id]


class InMemoryProjects:
    def __init__(self, projects: Iterable[Project] = ()):
        self._by_id = {p.project_id: p for p in projects}

    def get_by_id(self, project_id):
        return self._by_id.get(project_id)

    def get_by_ids(self, project_ids):
        return [self._by_id[pid] for pid in dict.fromkeys(project_ids) if pid in self._by_id]


class InMemoryReports:
    def __init__(self):
        self._by_id: dict[str, DailyReport] = {}

    def get_by_id(self, report_id):
        return self._by_id.get(report_id)

    def get_for_user_and_date(self, user_id, report_date: date):
        for r in self._by_id.values():
            if r.user_id == user_id and r.report_date == report_date:
                return r
        return None

    def create(self, report):
        if self.get_for_user_and_date(report.user_id, report.report_date):
            raise DuplicateKeyError(report.report_id)
        self._by_id[report.report_id] = report
        return report

    def update(self, report, *, expected_status: Optional[ReportStatus] = None):
        current = self._by_id.get(report.report_id)
        if current is None:
            raise ConcurrentModificationError(report.report_id)
        if expected_status is not None and current.status != expected_status:
            raise ConcurrentModificationError(report.report_id)
        self._by_id[report.report_id] = report
        return report

    def search(self, criteria: ReportSearchCriteria):
        out = []
        for r in self._by_id.values():
            if criteria.user_id and r.user_id != criteria.user_id:
                continue
            if criteria.user_ids is not None and r.user_id not in criteria.user_ids:
                continue
            if criteria.date_from and r.report_date < criteria.date_from:
                continue
            if criteria.date_to and r.report_date > criteria.date_to:
                continue
            if criteria.status and r.status != criteria.status:
                continue
            if criteria.approver_id and r.approved_by != criteria.approver_id:
                continue
            if criteria.project_id and all(t.project_id != criteria.project_id for t in r.tasks):
                continue
            out.append(r)
        return sorted(out, key=lambda r: r.report_date, reverse=True)

    def list_for_user_in_range(self, user_id, date_from, date_to):
        return self.search(ReportSearchCriteria(user_id=user_id, date_from=date_from, date_to=date_to))

    def force_status(self, report_id, status: ReportStatus):
        """Simulate another writer changing the stored status."""
        self._by_id[report_id] = replace(self._by_id[report_id], status=status)


class InMemoryComments:
    def __init__(self):
        self._items: list[Comment] = []

    def get_by_id(self, comment_id):
        for c in self._items:
            if c.comment_id == comment_id:
                return c
        return None

    def list_for_report(self, report_id):
        # Stable sort keeps insertion order for equal timestamps.
        return sorted((c for c in self._items if c.report_id == report_id), key=lambda c: c.created_at)

    def create(self, comment):
        self._items.append(comment)
        return comment

    def mark_as_read(self, comment_id, *, now: datetime):
        for i, c in enumerate(self._items):
            if c.comment_id == comment_id:
                if not c.is_read:
                    self._items[i] = replace(c, is_read=True, updated_at=now)
                return self._items[i]
        return None
