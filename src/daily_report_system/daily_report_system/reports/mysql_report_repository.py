from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import ReportStatus
from ..core.exceptions import ConcurrentModificationError
from ..core.ids import DailyReportId, ProjectId, TaskId, UserId
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import DailyReport, ReportSearchCriteria, Task
from .repository import DailyReportRepository

_COLUMNS = (
    "r.report_id, r.user_id, r.report_date, r.challenges, r.next_day_plan, r.status, "
    "r.submitted_at, r.approved_at, r.approved_by, r.rejected_at, r.rejected_by, r.feedback, "
    "r.created_at, r.updated_at"
)


def _to_task(row: dict) -> Task:
    return Task(
        task_id=TaskId(row["task_id"]),
        project_id=ProjectId(row["project_id"]),
        description=row["description"],
        hours_spent=float(row["hours_spent"]),
        progress=int(row["progress"]),
    )


def _to_report(row: dict, tasks: Sequence[Task]) -> DailyReport:
    return DailyReport(
        report_id=DailyReportId(row["report_id"]),
        user_id=UserId(row["user_id"]),
        report_date=row["report_date"],
        tasks=tuple(tasks),
        challenges=row["challenges"],
        next_day_plan=row["next_day_plan"],
        status=ReportStatus(row["status"]),
        submitted_at=row.get("submitted_at"),
        approved_at=row.get("approved_at"),
        approved_by=UserId(row["approved_by"]) if row.get("approved_by") else None,
        rejected_at=row.get("rejected_at"),
        rejected_by=UserId(row["rejected_by"]) if row.get("rejected_by") else None,
        feedback=row.get("feedback"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _load_tasks(cur, report_ids: Sequence[str]) -> dict[str, list[Task]]:
    out: dict[str, list[Task]] = {rid: [] for rid in report_ids}
    if not report_ids:
        return out
    cur.execute(
        f"""
        SELECT task_id, report_id, project_id, description, hours_spent, progress
        FROM tasks
        WHERE report_id IN ({in_clause(report_ids)})
        ORDER BY report_id, position ASC
        """,
        tuple(report_ids),
    )
    for row in fetchall(cur):
        out[row["report_id"]].append(_to_task(row))
    return out


def _insert_tasks(cur, report: DailyReport) -> None:
    for position, task in enumerate(report.tasks):
        cur.execute(
            """
            INSERT INTO tasks(task_id, report_id, project_id, description, hours_spent, progress, position)
            VALUES(%s,%s,%s,%s,%s,%s,%s)
            """,
            (
                task.task_id,
                report.report_id,
                task.project_id,
                task.description,
                task.hours_spent,
                task.progress,
                position,
            ),
        )


class MySQLDailyReportRepository(DailyReportRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _fetch(self, where: str, params: tuple, *, order_by: str = "") -> list[DailyReport]:
        with db_cursor(self._conn_factory) as (_, cur):
            sql = f"SELECT {_COLUMNS} FROM daily_reports r"
            if where:
                sql += f" WHERE {where}"
            if order_by:
                sql += f" ORDER BY {order_by}"
            cur.execute(sql, params)
            rows = fetchall(cur)
            tasks = _load_tasks(cur, [r["report_id"] for r in rows])
            return [_to_report(r, tasks[r["report_id"]]) for r in rows]

    def get_by_id(self, report_id: DailyReportId) -> Optional[DailyReport]:
        found = self._fetch("r.report_id=%s", (report_id,))
        return found[0] if found else None

    def get_for_user_and_date(self, user_id: UserId, report_date: date) -> Optional[DailyReport]:
        found = self._fetch("r.user_id=%s AND r.report_date=%s", (user_id, report_date))
        return found[0] if found else None

    def create(self, report: DailyReport) -> DailyReport:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO daily_reports(report_id, user_id, report_date, challenges, next_day_plan,
                                          status, created_at, updated_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    report.report_id,
                    report.user_id,
                    report.report_date,
                    report.challenges,
                    report.next_day_plan,
                    report.status.value,
                    report.created_at,
                    report.updated_at,
                ),
            )
            _insert_tasks(cur, report)
        return report

    def update(self, report: DailyReport, *, expected_status: Optional[ReportStatus] = None) -> DailyReport:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT status FROM daily_reports WHERE report_id=%s FOR UPDATE", (report.report_id,))
            row = fetchone(cur)
            if not row:
                raise ConcurrentModificationError(f"report {report.report_id} no longer exists")
            if expected_status is not None and row["status"] != expected_status.value:
                raise ConcurrentModificationError(
                    f"report {report.report_id} is {row['status']}, expected {expected_status.value}"
                )

            cur.execute(
                """
                UPDATE daily_reports
                SET challenges=%s, next_day_plan=%s, status=%s,
                    submitted_at=%s, approved_at=%s, approved_by=%s,
                    rejected_at=%s, rejected_by=%s, feedback=%s, updated_at=%s
                WHERE report_id=%s
                """,
                (
                    report.challenges,
                    report.next_day_plan,
                    report.status.value,
                    report.submitted_at,
                    report.approved_at,
                    report.approved_by,
                    report.rejected_at,
                    report.rejected_by,
                    report.feedback,
                    report.updated_at,
                    report.report_id,
                ),
            )
            # Task list is replaced wholesale in the same transaction.
            cur.execute("DELETE FROM tasks WHERE report_id=%s", (report.report_id,))
            _insert_tasks(cur, report)
        return report

    def search(self, criteria: ReportSearchCriteria) -> Sequence[DailyReport]:
        where: list[str] = []
        params: list = []
        if criteria.user_id:
            where.append("r.user_id=%s")
            params.append(criteria.user_id)
        if criteria.user_ids is not None:
            if not criteria.user_ids:
                return []
            where.append(f"r.user_id IN ({in_clause(criteria.user_ids)})")
            params.extend(criteria.user_ids)
        if criteria.date_from:
            where.append("r.report_date >= %s")
            params.append(criteria.date_from)
        if criteria.date_to:
            where.append("r.report_date <= %s")
            params.append(criteria.date_to)
        if criteria.status:
            where.append("r.status=%s")
            params.append(criteria.status.value)
        if criteria.approver_id:
            where.append("r.approved_by=%s")
            params.append(criteria.approver_id)
        if criteria.project_id:
            where.append("EXISTS (SELECT 1 FROM tasks t WHERE t.report_id=r.report_id AND t.project_id=%s)")
            params.append(criteria.project_id)

        return self._fetch(" AND ".join(where), tuple(params), order_by="r.report_date DESC, r.created_at DESC")

    def list_for_user_in_range(self, user_id: UserId, date_from: date, date_to: date) -> Sequence[DailyReport]:
        return self._fetch(
            "r.user_id=%s AND r.report_date BETWEEN %s AND %s",
            (user_id, date_from, date_to),
            order_by="r.report_date ASC",
        )
