"""Glue between service results and HTTP responses."""
from __future__ import annotations

from typing import Any, Optional

from flask import request, session

from ..results import ActionResult, ErrorKind
from .serializers import to_json


STATUS_BY_ERROR: dict[ErrorKind, int] = {
    ErrorKind.ACCESS_DENIED: 403,
    ErrorKind.SELF_MODIFICATION_FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.NOT_A_TEACHER: 409,
    ErrorKind.ALREADY_ASSIGNED: 409,
    ErrorKind.NOT_ASSIGNED: 409,
    ErrorKind.SCHEDULE_CONFLICT: 409,
    ErrorKind.HAS_DEPENDENTS: 409,
    ErrorKind.HAS_FUTURE_SESSIONS: 409,
    ErrorKind.VALIDATION_ERROR: 400,
}


def current_actor_id() -> Optional[int]:
    return session.get("user_id")


def payload() -> dict[str, Any]:
    return request.get_json(silent=True) or {}


def query_params() -> dict[str, Any]:
    return {key: value for key, value in request.args.items() if value != ""}


def respond(result: ActionResult, *, created: bool = False, detailed: bool = False) -> tuple[dict[str, Any], int]:
    body: dict[str, Any] = {
        "success": result.success,
        "message": result.message,
        "data": to_json(result.data, detailed=detailed),
    }
    if result.success:
        return body, 201 if created else 200
    body["error"] = result.error.value if result.error else None
    return body, STATUS_BY_ERROR.get(result.error, 400)
