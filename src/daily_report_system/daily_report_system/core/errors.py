from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .enums import ErrorKind


@dataclass(frozen=True)
class DomainError:
    """Typed failure carried by ``Err``: a kind, a readable message and optional field details."""

    kind: ErrorKind
    message: str
    details: Optional[Any] = None

    def to_dict(self) -> dict:
        return {
            "error": {
                "type": self.kind.value,
                "message": self.message,
                "details": self.details,
            }
        }


def not_found(message: str, details: Any = None) -> DomainError:
    return DomainError(ErrorKind.NOT_FOUND, message, details)


def already_exists(message: str, details: Any = None) -> DomainError:
    return DomainError(ErrorKind.ALREADY_EXISTS, message, details)


def validation_error(message: str, details: Any = None) -> DomainError:
    return DomainError(ErrorKind.VALIDATION_ERROR, message, details)


def unauthorized(message: str, details: Any = None) -> DomainError:
    return DomainError(ErrorKind.UNAUTHORIZED, message, details)


def forbidden(message: str, details: Any = None) -> DomainError:
    return DomainError(ErrorKind.FORBIDDEN, message, details)


def business_rule_violation(message: str, details: Any = None) -> DomainError:
    return DomainError(ErrorKind.BUSINESS_RULE_VIOLATION, message, details)


def external_service_error(message: str, details: Any = None) -> DomainError:
    return DomainError(ErrorKind.EXTERNAL_SERVICE_ERROR, message, details)


_HTTP_STATUS = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.ALREADY_EXISTS: 409,
    ErrorKind.VALIDATION_ERROR: 400,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.BUSINESS_RULE_VIOLATION: 422,
    ErrorKind.EXTERNAL_SERVICE_ERROR: 503,
}


def http_status_for(kind: ErrorKind) -> int:
    return _HTTP_STATUS.get(kind, 500)
