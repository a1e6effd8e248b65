from __future__ import annotations

import pytest

from src.daily_report_system.daily_report_system.core.enums import ErrorKind
from src.daily_report_system.daily_report_system.core.errors import (
    DomainError,
    http_status_for,
    not_found,
    validation_error,
)
from src.daily_report_system.daily_report_system.core.result import Err, Ok


def test_ok_map_and_then_chain():
    result = Ok(2).map(lambda v: v + 1).and_then(lambda v: Ok(v * 10))

    assert result.is_ok()
    assert result.unwrap() == 30


def test_err_short_circuits_combinators():
    called = []
    result = Err(not_found("missing")).map(lambda v: called.append(v)).and_then(lambda v: Ok(called.append(v)))

    assert result.is_err()
    assert result.error.kind == ErrorKind.NOT_FOUND
    assert called == []


def test_and_then_stops_at_first_failure():
    result = Ok(1).and_then(lambda _: Err(validation_error("bad"))).and_then(lambda _: Ok("never"))

    assert result.is_err()
    assert result.error.message == "bad"


def test_unwrap_on_err_raises():
    with pytest.raises(ValueError):
        Err(not_found("missing")).unwrap()


def test_domain_error_payload_shape():
    error = DomainError(ErrorKind.FORBIDDEN, "nope", {"field": "x"})

    assert error.to_dict() == {"error": {"type": "FORBIDDEN", "message": "nope", "details": {"field": "x"}}}


@pytest.mark.parametrize(
    "kind,status",
    [
        (ErrorKind.NOT_FOUND, 404),
        (ErrorKind.ALREADY_EXISTS, 409),
        (ErrorKind.VALIDATION_ERROR, 400),
        (ErrorKind.UNAUTHORIZED, 401),
        (ErrorKind.FORBIDDEN, 403),
        (ErrorKind.BUSINESS_RULE_VIOLATION, 422),
        (ErrorKind.EXTERNAL_SERVICE_ERROR, 503),
    ],
)
def test_http_status_mapping(kind, status):
    assert http_status_for(kind) == status
