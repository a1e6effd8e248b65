from __future__ import annotations

from datetime import datetime

from src.daily_report_system.daily_report_system.core.enums import ErrorKind

from tests.factories import ADMIN, MANAGER, NOW, U1, U2

LATER = datetime(2024, 1, 16, 9, 0, 0)


def test_owner_and_manager_can_comment(comment_service, draft):
    own = comment_service.create_comment(report_id=draft.report_id, user_id=U1, content="Question", now=NOW)
    managed = comment_service.create_comment(report_id=draft.report_id, user_id=MANAGER, content="Answer", now=NOW)

    assert own.is_ok()
    assert managed.is_ok()
    assert own.value.is_read is False


def test_other_employee_cannot_comment(comment_service, draft):
    result = comment_service.create_comment(report_id=draft.report_id, user_id=U2, content="hi")

    assert result.error.kind == ErrorKind.FORBIDDEN


def test_blank_comment_is_validation_error(comment_service, draft):
    result = comment_service.create_comment(report_id=draft.report_id, user_id=U1, content="   ")

    assert result.error.kind == ErrorKind.VALIDATION_ERROR
    assert result.error.message == "Comment content is required"


def test_comment_on_missing_report_or_by_missing_user(comment_service, draft):
    assert comment_service.create_comment(report_id="nope", user_id=U1, content="x").error.kind == ErrorKind.NOT_FOUND
    assert (
        comment_service.create_comment(report_id=draft.report_id, user_id="ghost", content="x").error.kind
        == ErrorKind.NOT_FOUND
    )


def test_comments_listed_oldest_first(comment_service, draft):
    comment_service.create_comment(report_id=draft.report_id, user_id=U1, content="first", now=NOW)
    comment_service.create_comment(report_id=draft.report_id, user_id=ADMIN, content="second", now=NOW)
    comment_service.create_comment(report_id=draft.report_id, user_id=MANAGER, content="third", now=LATER)

    comments = comment_service.list_comments(requester_id=U1, report_id=draft.report_id).unwrap()

    assert [c.content for c in comments] == ["first", "second", "third"]


def test_list_comments_visibility(comment_service, draft):
    assert comment_service.list_comments(requester_id=U2, report_id=draft.report_id).error.kind == ErrorKind.FORBIDDEN
    assert comment_service.list_comments(requester_id=U1, report_id="nope").error.kind == ErrorKind.NOT_FOUND


def test_mark_as_read_is_idempotent(comment_service, draft):
    comment = comment_service.create_comment(report_id=draft.report_id, user_id=MANAGER, content="ok", now=NOW).unwrap()

    first = comment_service.mark_as_read(comment.comment_id, now=LATER).unwrap()
    second = comment_service.mark_as_read(comment.comment_id, now=datetime(2024, 1, 17)).unwrap()

    assert first.is_read is True
    assert second.is_read is True
    assert second.updated_at == LATER


def test_mark_missing_comment_is_not_found(comment_service):
    assert comment_service.mark_as_read("nope").error.kind == ErrorKind.NOT_FOUND
