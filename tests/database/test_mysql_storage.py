from __future__ import annotations

from dataclasses import replace

import mysql.connector
import pytest
from mysql.connector import errorcode

from src.daily_report_system.daily_report_system.core.enums import ReportStatus
from src.daily_report_system.daily_report_system.core.exceptions import (
    ConcurrentModificationError,
    DuplicateKeyError,
)
from src.daily_report_system.daily_report_system.database.bootstrap import (
    _strip_create_db_and_use,
    iter_sql_statements,
)
from src.daily_report_system.daily_report_system.database.mysql_base import db_cursor, in_clause
from src.daily_report_system.daily_report_system.reports.model import DailyReport, ReportSearchCriteria, Task
from src.daily_report_system.daily_report_system.reports.mysql_report_repository import MySQLDailyReportRepository

from tests.factories import DAY, NOW, P1, U1


class FakeCursor:
    def __init__(self, rows=None, fail_with=None):
        self.rows = list(rows or [])
        self.fail_with = fail_with
        self.executed = []
        self.closed = False

    def execute(self, sql, params=None):
        self.executed.append((" ".join(sql.split()), params))
        if self.fail_with is not None:
            raise self.fail_with

    def fetchone(self):
        return self.rows.pop(0) if self.rows else None

    def fetchall(self):
        rows, self.rows = self.rows, []
        return rows

    def close(self):
        self.closed = True


class FakeConn:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeFactory:
    def __init__(self, conn):
        self.conn = conn

    def connect(self):
        return self.conn


def test_db_cursor_commits_and_closes():
    conn = FakeConn(FakeCursor())

    with db_cursor(FakeFactory(conn)) as (_, cur):
        cur.execute("SELECT 1")

    assert conn.committed and conn.closed
    assert not conn.rolled_back


def test_duplicate_entry_becomes_duplicate_key_error():
    dup = mysql.connector.IntegrityError(msg="Duplicate entry", errno=errorcode.ER_DUP_ENTRY)
    conn = FakeConn(FakeCursor(fail_with=dup))

    with pytest.raises(DuplicateKeyError):
        with db_cursor(FakeFactory(conn)) as (_, cur):
            cur.execute("INSERT INTO daily_reports ...")

    assert conn.rolled_back and conn.closed
    assert not conn.committed


def test_other_integrity_errors_propagate_unchanged():
    fk = mysql.connector.IntegrityError(msg="FK fails", errno=errorcode.ER_NO_REFERENCED_ROW_2)
    conn = FakeConn(FakeCursor(fail_with=fk))

    with pytest.raises(mysql.connector.IntegrityError):
        with db_cursor(FakeFactory(conn)) as (_, cur):
            cur.execute("INSERT INTO tasks ...")

    assert conn.rolled_back


def _report(status):
    return DailyReport(
        report_id="R1",
        user_id=U1,
        report_date=DAY,
        tasks=(Task(task_id="T1", project_id=P1, description="d", hours_spent=2, progress=10),),
        challenges="x",
        next_day_plan="y",
        status=status,
        created_at=NOW,
        updated_at=NOW,
    )


def test_update_refuses_when_stored_status_moved_on():
    cur = FakeCursor(rows=[{"status": "approved"}])
    conn = FakeConn(cur)
    repo = MySQLDailyReportRepository(FakeFactory(conn))

    with pytest.raises(ConcurrentModificationError):
        repo.update(_report(ReportStatus.REJECTED), expected_status=ReportStatus.SUBMITTED)

    assert len(cur.executed) == 1
    assert cur.executed[0][0].endswith("FOR UPDATE")
    assert conn.rolled_back


def test_update_replaces_tasks_in_same_transaction():
    cur = FakeCursor(rows=[{"status": "submitted"}])
    conn = FakeConn(cur)
    repo = MySQLDailyReportRepository(FakeFactory(conn))
    report = replace(_report(ReportStatus.APPROVED), approved_by="M1")

    repo.update(report, expected_status=ReportStatus.SUBMITTED)

    statements = [sql.split()[0] for sql, _ in cur.executed]
    assert statements == ["SELECT", "UPDATE", "DELETE", "INSERT"]
    assert conn.committed


def test_search_with_empty_visibility_set_skips_query():
    cur = FakeCursor()
    repo = MySQLDailyReportRepository(FakeFactory(FakeConn(cur)))

    assert repo.search(ReportSearchCriteria(user_ids=())) == []
    assert cur.executed == []


def test_in_clause():
    assert in_clause(["a", "b", "c"]) == "%s,%s,%s"


def test_sql_script_splitting():
    sql = """
    CREATE DATABASE IF NOT EXISTS daily_report_db;
    USE daily_report_db;
    INSERT INTO departments VALUES ('d1', 'R&D; core');
    INSERT INTO departments VALUES ('d2', 'It\\'s sales');
    """

    statements = list(iter_sql_statements(_strip_create_db_and_use(sql)))

    assert statements == [
        "INSERT INTO departments VALUES ('d1', 'R&D; core')",
        "INSERT INTO departments VALUES ('d2', 'It\\'s sales')",
    ]
