"""Error taxonomy & redaction for Jira API failures.

Every failed request is classified into one of a small closed set of
variants and then rendered to a single human-readable message. The order
in which :func:`classify_failure` checks the response is the whole error
policy of the client, so keep it in one place.

Public API:
- JiraAPIError: raised by the transport layer, carries status & payload
- classify_failure(error) -> Failure
- format_failure(failure) -> str
- redact(text) -> str
- mask_secret(value) -> str
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Union

AUTH_FAILED_MESSAGE = "Authentication failed. Please check your email and API token."
ACCESS_DENIED_MESSAGE = "Access denied. You may not have permission for this action."
NOT_FOUND_MESSAGE = "Resource not found. Please check the issue key or project key."
UNKNOWN_ERROR_MESSAGE = "Unknown error occurred"

_STATUS_MESSAGES: dict[int, str] = {
    401: AUTH_FAILED_MESSAGE,
    403: ACCESS_DENIED_MESSAGE,
    404: NOT_FOUND_MESSAGE,
}

_SENSITIVE_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"ATATT[A-Za-z0-9_\-=]{20,}"),  # Atlassian API tokens
    re.compile(r"Basic [A-Za-z0-9+/=]{8,}"),  # Authorization header values
]

_REDACTION_PLACEHOLDER = "<redacted>"


class JiraAPIError(RuntimeError):
    """Raised when a Jira request fails at the HTTP or network level."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        payload: Any | None = None,
    ):
        super().__init__(message)
        self.status = status
        self.payload = payload


@dataclass(frozen=True)
class MessageList:
    messages: list[str]


@dataclass(frozen=True)
class KeyedErrors:
    errors: dict[str, Any]


@dataclass(frozen=True)
class HttpStatus:
    code: int


@dataclass(frozen=True)
class Transport:
    message: str


@dataclass(frozen=True)
class Unknown:
    pass


Failure = Union[MessageList, KeyedErrors, HttpStatus, Transport, Unknown]


def classify_failure(error: BaseException) -> Failure:
    """Classify a failed request.

    Precedence:
    - ``errorMessages`` with a non-empty first entry -> MessageList
    - non-empty ``errors`` mapping -> KeyedErrors
    - status 401 / 403 / 404 -> HttpStatus
    - any exception text -> Transport
    - otherwise -> Unknown
    """
    status = getattr(error, "status", None)
    payload = getattr(error, "payload", None)

    if isinstance(payload, dict):
        messages = payload.get("errorMessages")
        if isinstance(messages, list) and messages and messages[0]:
            return MessageList([str(m) for m in messages])
        errors = payload.get("errors")
        # an empty errors object would render as "", so it does not count as keyed
        if isinstance(errors, dict) and errors:
            return KeyedErrors(dict(errors))
    if status in _STATUS_MESSAGES:
        return HttpStatus(int(status))
    message = str(error) if error else ""
    if message:
        return Transport(message)
    return Unknown()


def format_failure(failure: Failure) -> str:
    if isinstance(failure, MessageList):
        return failure.messages[0]
    if isinstance(failure, KeyedErrors):
        return ", ".join(str(v) for v in failure.errors.values())
    if isinstance(failure, HttpStatus):
        return _STATUS_MESSAGES.get(failure.code, UNKNOWN_ERROR_MESSAGE)
    if isinstance(failure, Transport):
        return failure.message
    return UNKNOWN_ERROR_MESSAGE


def describe_error(error: BaseException) -> str:
    """Shortcut for ``format_failure(classify_failure(error))``."""
    return format_failure(classify_failure(error))


def redact(text: str) -> str:
    """Replace API tokens and auth header values in ``text`` with a placeholder."""
    if not text:
        return text
    redacted = text
    for pat in _SENSITIVE_PATTERNS:
        redacted = pat.sub(_REDACTION_PLACEHOLDER, redacted)
    return redacted


def mask_secret(value: str, visible: int = 10) -> str:
    if not value:
        return ""
    return f"{value[:visible]}..."


__all__ = [
    "ACCESS_DENIED_MESSAGE",
    "AUTH_FAILED_MESSAGE",
    "NOT_FOUND_MESSAGE",
    "UNKNOWN_ERROR_MESSAGE",
    "Failure",
    "HttpStatus",
    "JiraAPIError",
    "KeyedErrors",
    "MessageList",
    "Transport",
    "Unknown",
    "classify_failure",
    "describe_error",
    "format_failure",
    "mask_secret",
    "redact",
]
