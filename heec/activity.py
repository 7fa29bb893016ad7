"""Best-effort audit trail.

Recording runs after the triggering mutation has been committed. A failure
here is logged and counted but never propagated.
"""
from __future__ import annotations

import threading
from typing import Any, Optional

from flask import current_app, has_request_context, request
from sqlalchemy.exc import SQLAlchemyError

from .extensions import db
from .models import ActionType, ActivityLog, EntityType


def _request_origin() -> tuple[str, str]:
    if not has_request_context():
        return "unknown", "unknown"
    forwarded = request.headers.get("X-Forwarded-For", "")
    ip_address = (
        forwarded.split(",")[0].strip()
        or request.headers.get("X-Real-IP")
        or request.remote_addr
        or "unknown"
    )
    user_agent = request.headers.get("User-Agent") or "unknown"
    return ip_address, user_agent[:255]


class ActivityRecorder:
    def __init__(self) -> None:
        self._dropped = 0
        self._lock = threading.Lock()

    @property
    def dropped_entries(self) -> int:
        with self._lock:
            return self._dropped

    def record(
        self,
        actor_id: Optional[int],
        action: ActionType,
        entity_type: EntityType,
        description: str,
        *,
        entity_id: Optional[int] = None,
        entity_name: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> Optional[ActivityLog]:
        ip_address, user_agent = _request_origin()
        entry = ActivityLog(
            user_id=actor_id,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            entity_name=entity_name,
            description=description,
            details=metadata,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        try:
            db.session.add(entry)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            with self._lock:
                self._dropped += 1
            current_app.logger.exception(
                "Unable to record activity %s on %s #%s",
                action.value,
                entity_type.value,
                entity_id,
            )
            return None
        return entry


recorder = ActivityRecorder()
