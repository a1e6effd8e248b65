from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .comments.mysql_comment_repository import MySQLCommentRepository
from .comments.repository import CommentRepository
from .comments.service import CommentService
from .database.connection import DBConfig, DatabaseConnection
from .projects.mysql_project_repository import MySQLProjectRepository
from .projects.repository import ProjectRepository
from .reports.mysql_report_repository import MySQLDailyReportRepository
from .reports.repository import DailyReportRepository
from .reports.service import DailyReportService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.security import PasswordHasher, WerkzeugPasswordHasher
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    projects_repo: ProjectRepository
    reports_repo: DailyReportRepository
    comments_repo: CommentRepository

    auth_service: AuthService
    user_service: UserService
    report_service: DailyReportService
    comment_service: CommentService


def assemble(
    *,
    users_repo: UserRepository,
    projects_repo: ProjectRepository,
    reports_repo: DailyReportRepository,
    comments_repo: CommentRepository,
    conn: Optional[DatabaseConnection] = None,
    hasher: Optional[PasswordHasher] = None,
    restrict_managers_to_subordinates: bool = False,
) -> Container:
    """Wire services on top of any set of repositories (MySQL in production, in-memory in tests)."""
    hasher = hasher or WerkzeugPasswordHasher()
    return Container(
        conn=conn,
        users_repo=users_repo,
        projects_repo=projects_repo,
        reports_repo=reports_repo,
        comments_repo=comments_repo,
        auth_service=AuthService(users_repo, hasher),
        user_service=UserService(users_repo, hasher),
        report_service=DailyReportService(
            reports_repo,
            users_repo,
            projects_repo,
            restrict_managers_to_subordinates=restrict_managers_to_subordinates,
        ),
        comment_service=CommentService(comments_repo, reports_repo, users_repo),
    )


def build_container(*, db_config: dict, restrict_managers_to_subordinates: bool = False) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_settings(db_config))

    return assemble(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        projects_repo=MySQLProjectRepository(conn),
        reports_repo=MySQLDailyReportRepository(conn),
        comments_repo=MySQLCommentRepository(conn),
        restrict_managers_to_subordinates=restrict_managers_to_subordinates,
    )
