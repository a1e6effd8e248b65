from __future__ import annotations

import pytest

from src.daily_report_system.daily_report_system.core.enums import ErrorKind, Role
from src.daily_report_system.daily_report_system.users.model import NewAccount, ProfileUpdate, UserSearchCriteria
from src.daily_report_system.daily_report_system.users.service import AuthService, UserService

from tests.factories import ADMIN, DEV, MANAGER, NOW, PASSWORD, U1, U2


@pytest.fixture
def user_service(users_repo):
    return UserService(users_repo)


@pytest.fixture
def auth_service(users_repo):
    return AuthService(users_repo)


def _account(**overrides):
    data = dict(email="new@example.com", password="Passw0rdX", name="New Person", role=Role.EMPLOYEE, dept_id=DEV)
    data.update(overrides)
    return NewAccount(**data)


def test_create_account_hashes_password_and_hides_it(user_service, users_repo):
    created = user_service.create_account(_account(manager_id=MANAGER), now=NOW).unwrap()

    assert created.password_hash is None
    stored = users_repo.get_by_id(created.user_id)
    assert stored.password_hash and stored.password_hash != "Passw0rdX"
    assert stored.manager_id == MANAGER


def test_new_account_can_log_in(user_service, auth_service):
    user_service.create_account(_account(), now=NOW)

    assert auth_service.authenticate("new@example.com", "Passw0rdX").is_ok()
    assert auth_service.authenticate("new@example.com", "wrong").error.kind == ErrorKind.UNAUTHORIZED


@pytest.mark.parametrize(
    "overrides,field",
    [
        ({"email": "not-an-email"}, "email"),
        ({"password": "short1A"}, "password"),
        ({"password": "alllowercase1"}, "password"),
        ({"name": "  "}, "name"),
    ],
)
def test_create_account_validation(user_service, overrides, field):
    result = user_service.create_account(_account(**overrides))

    assert result.error.kind == ErrorKind.VALIDATION_ERROR
    assert result.error.details == {"field": field}


def test_duplicate_email_is_already_exists(user_service):
    result = user_service.create_account(_account(email="u1@example.com"))

    assert result.error.kind == ErrorKind.ALREADY_EXISTS


def test_manager_must_hold_manager_role(user_service):
    assert user_service.create_account(_account(manager_id=U2)).error.kind == ErrorKind.BUSINESS_RULE_VIOLATION
    assert user_service.create_account(_account(manager_id="ghost")).error.kind == ErrorKind.NOT_FOUND


def test_inactive_user_cannot_log_in(user_service, auth_service):
    user_service.deactivate(current_user_id=ADMIN, user_id=U1)

    assert auth_service.authenticate("u1@example.com", PASSWORD).error.kind == ErrorKind.FORBIDDEN


def test_deactivate_requires_admin(user_service):
    assert user_service.deactivate(current_user_id=MANAGER, user_id=U1).error.kind == ErrorKind.FORBIDDEN


def test_deactivate_twice_is_harmless(user_service):
    user_service.deactivate(current_user_id=ADMIN, user_id=U1)
    again = user_service.deactivate(current_user_id=ADMIN, user_id=U1).unwrap()

    assert again.is_active is False


def test_change_password(auth_service):
    assert (
        auth_service.change_password(user_id=U1, current_password="bad", new_password="Another1X").error.kind
        == ErrorKind.UNAUTHORIZED
    )
    assert (
        auth_service.change_password(user_id=U1, current_password=PASSWORD, new_password="weak").error.kind
        == ErrorKind.VALIDATION_ERROR
    )
    assert auth_service.change_password(user_id=U1, current_password=PASSWORD, new_password="Another1X").is_ok()
    assert auth_service.authenticate("u1@example.com", "Another1X").is_ok()
    assert auth_service.authenticate("u1@example.com", PASSWORD).is_err()


def test_update_profile_partial(user_service):
    updated = user_service.update_profile(ProfileUpdate(user_id=U1, name="Renamed"), now=NOW).unwrap()

    assert updated.name == "Renamed"
    assert updated.email == "u1@example.com"
    assert updated.role == Role.EMPLOYEE


def test_update_profile_email_taken(user_service):
    result = user_service.update_profile(ProfileUpdate(user_id=U1, email="u2@example.com"))

    assert result.error.kind == ErrorKind.ALREADY_EXISTS


def test_list_subordinates(user_service):
    subs = user_service.list_subordinates(MANAGER).unwrap()

    assert [u.user_id for u in subs] == [U1]
    assert user_service.list_subordinates(U1).error.kind == ErrorKind.FORBIDDEN


def test_search_users_by_role(user_service):
    managers = user_service.search_users(UserSearchCriteria(role=Role.MANAGER))

    assert {u.role for u in managers} == {Role.MANAGER}
    assert all(u.password_hash is None for u in managers)


def test_self_update_ignores_role_and_active_flag(user_service):
    updated = user_service.update_own_profile(
        ProfileUpdate(user_id=U1, name="Self Edited", role=Role.ADMIN, is_active=False), now=NOW
    ).unwrap()

    assert updated.name == "Self Edited"
    assert updated.role == Role.EMPLOYEE
    assert updated.is_active is True


def test_register_always_creates_unmanaged_employee(user_service):
    created = user_service.register(_account(role=Role.ADMIN, manager_id=MANAGER), now=NOW).unwrap()

    assert created.role == Role.EMPLOYEE
    assert created.manager_id is None
