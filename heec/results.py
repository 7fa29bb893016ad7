"""Outcome types shared by the service layer."""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Optional


class ErrorKind(str, enum.Enum):
    ACCESS_DENIED = "ACCESS_DENIED"
    NOT_FOUND = "NOT_FOUND"
    NOT_A_TEACHER = "NOT_A_TEACHER"
    ALREADY_ASSIGNED = "ALREADY_ASSIGNED"
    NOT_ASSIGNED = "NOT_ASSIGNED"
    SCHEDULE_CONFLICT = "SCHEDULE_CONFLICT"
    HAS_DEPENDENTS = "HAS_DEPENDENTS"
    HAS_FUTURE_SESSIONS = "HAS_FUTURE_SESSIONS"
    SELF_MODIFICATION_FORBIDDEN = "SELF_MODIFICATION_FORBIDDEN"
    VALIDATION_ERROR = "VALIDATION_ERROR"


class StorageError(RuntimeError):
    """Raised when the database rejects or cannot serve a request."""


@dataclass
class ActionResult:
    success: bool
    message: str
    data: Any = None
    error: Optional[ErrorKind] = None

    @classmethod
    def ok(cls, message: str, data: Any = None) -> "ActionResult":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, error: ErrorKind, message: str, data: Any = None) -> "ActionResult":
        return cls(success=False, message=message, data=data, error=error)


ACCESS_DENIED_MESSAGE = "Accès refusé - Droits administrateur requis"


def access_denied() -> ActionResult:
    return ActionResult.fail(ErrorKind.ACCESS_DENIED, ACCESS_DENIED_MESSAGE)


def not_found(message: str) -> ActionResult:
    return ActionResult.fail(ErrorKind.NOT_FOUND, message)
