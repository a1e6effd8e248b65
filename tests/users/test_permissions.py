from __future__ import annotations

import pytest

from src.daily_report_system.daily_report_system.core.enums import Role
from src.daily_report_system.daily_report_system.users.permissions import (
    can_approve_report_of,
    can_have_subordinates,
    can_manage_daily_reports,
    can_manage_users,
)

from tests.factories import MANAGER, OTHER_MANAGER, make_user


@pytest.mark.parametrize("role,expected", [(Role.ADMIN, True), (Role.MANAGER, True), (Role.EMPLOYEE, False)])
def test_report_management_capability(role, expected):
    assert can_manage_daily_reports(make_user("x", role)) is expected


def test_only_admin_manages_users():
    assert can_manage_users(make_user("a", Role.ADMIN))
    assert not can_manage_users(make_user("m", Role.MANAGER))
    assert can_have_subordinates(make_user("m", Role.MANAGER))
    assert not can_have_subordinates(make_user("e", Role.EMPLOYEE))


def test_approval_scope():
    manager = make_user(MANAGER, Role.MANAGER)

    assert can_approve_report_of(manager, OTHER_MANAGER)
    assert can_approve_report_of(manager, MANAGER, restrict_managers_to_subordinates=True)
    assert not can_approve_report_of(manager, OTHER_MANAGER, restrict_managers_to_subordinates=True)
    assert can_approve_report_of(make_user("a", Role.ADMIN), None, restrict_managers_to_subordinates=True)
    assert not can_approve_report_of(make_user("e", Role.EMPLOYEE), None)
