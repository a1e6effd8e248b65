from __future__ import annotations

import pytest

from src.daily_report_system.daily_report_system import create_app
from src.daily_report_system.daily_report_system.container import assemble

from tests.factories import NOW, U1, default_projects, default_users, new_report
from tests.fakes import InMemoryComments, InMemoryProjects, InMemoryReports, InMemoryUsers


@pytest.fixture
def users_repo():
    return InMemoryUsers(default_users())


@pytest.fixture
def projects_repo():
    return InMemoryProjects(default_projects())


@pytest.fixture
def reports_repo():
    return InMemoryReports()


@pytest.fixture
def comments_repo():
    return InMemoryComments()


@pytest.fixture
def container(users_repo, projects_repo, reports_repo, comments_repo):
    return assemble(
        users_repo=users_repo,
        projects_repo=projects_repo,
        reports_repo=reports_repo,
        comments_repo=comments_repo,
    )


@pytest.fixture
def report_service(container):
    return container.report_service


@pytest.fixture
def comment_service(container):
    return container.comment_service


@pytest.fixture
def draft(report_service):
    return report_service.create_report(new_report(), now=NOW).unwrap()


@pytest.fixture
def submitted(report_service, draft):
    return report_service.submit_report(report_id=draft.report_id, user_id=U1, now=NOW).unwrap()


@pytest.fixture
def app(container):
    return create_app(container=container, settings_module="config.testing")


@pytest.fixture
def client(app):
    return app.test_client()
