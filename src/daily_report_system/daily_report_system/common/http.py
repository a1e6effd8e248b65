"""Shared helpers for the JSON controllers: auth guards, payload parsing, Result → response."""
from __future__ import annotations

import logging
import math
from functools import wraps
from typing import Any, Callable, Optional

import mysql.connector
from flask import current_app, jsonify, request, session

from ..core.enums import Role
from ..core.errors import DomainError, external_service_error, forbidden, http_status_for, unauthorized, validation_error
from ..core.exceptions import RepositoryError
from ..core.ids import UserId
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)


class BadPayload(ValueError):
    """Raised while parsing a request body or query string."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


def error_response(error: DomainError):
    return jsonify(error.to_dict()), http_status_for(error.kind)


def respond(result, *, key: str, status: int = 200, render: Optional[Callable[[Any], Any]] = None):
    if result.is_err():
        return error_response(result.error)
    value = result.value
    if render is not None:
        body = render(value)
    elif isinstance(value, list):
        body = [v.to_dict() for v in value]
    else:
        body = value.to_dict()
    return jsonify({key: body}), status


CONTAINER_KEY = "daily_report_system"


def current_user_id() -> UserId:
    return UserId(session["user_id"])


def json_endpoint(view):
    """Translate parsing and storage faults into typed error responses."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except BadPayload as e:
            details = {"field": e.field} if e.field else None
            return error_response(validation_error(str(e), details))
        except (mysql.connector.Error, RepositoryError):
            return _storage_unavailable()

    return wrapper


def _storage_unavailable():
    logger.exception("storage failure in %s", request.path)
    return error_response(external_service_error("The data store is currently unavailable"))


def _load_session_user():
    """Re-read the signed-in user so deactivation and role changes apply to live sessions.

    Returns ``(user, None)`` or ``(None, error response)``.
    """
    if "user_id" not in session:
        return None, error_response(unauthorized("Please log in to continue"))

    container = current_app.extensions[CONTAINER_KEY]
    try:
        result = container.user_service.get_user(current_user_id())
    except (mysql.connector.Error, RepositoryError):
        return None, _storage_unavailable()

    if result.is_err():
        session.clear()
        return None, error_response(unauthorized("Please log in to continue"))

    user = result.value
    if not user.is_active:
        session.clear()
        return None, error_response(forbidden("This account has been deactivated"))

    session["role"] = user.role.value
    return user, None


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        _, failure = _load_session_user()
        if failure:
            return failure
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    allowed = set(roles)

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user, failure = _load_session_user()
            if failure:
                return failure
            if user.role not in allowed:
                return error_response(forbidden("You do not have permission for this action"))
            return view(*args, **kwargs)

        return wrapper

    return decorator


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise BadPayload("Request body must be a JSON object")
    return data


def require_str(data: dict, field: str) -> str:
    value = data.get(field)
    if not isinstance(value, str):
        raise BadPayload(f"{field} is required", field)
    return value


def optional_str(data: dict, field: str) -> Optional[str]:
    value = data.get(field)
    if value is None:
        return None
    if not isinstance(value, str):
        raise BadPayload(f"{field} must be a string", field)
    return value


def require_number(data: dict, field: str) -> float:
    value = data.get(field)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise BadPayload(f"{field} must be a number", field)
    if not math.isfinite(value):
        raise BadPayload(f"{field} must be a finite number", field)
    return value


def parse_date_value(value: Optional[str], field: str) -> Optional[Any]:
    if value in (None, ""):
        return None
    try:
        return parse_iso_date(str(value))
    except ValueError:
        raise BadPayload(f"{field} must be a date in YYYY-MM-DD format", field)


def parse_enum(enum_cls, value: Optional[str], field: str):
    if value in (None, ""):
        return None
    try:
        return enum_cls(value)
    except ValueError:
        raise BadPayload(f"{field} is not a valid value", field)
