"""Administrator dashboard operations."""
from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Any, Mapping, Optional

from flask import current_app
from sqlalchemy import select

from ..activity import recorder
from ..auth import is_admin
from ..forms import PaginationForm, validation_error
from ..guards import check_self_modification
from ..models import ActionType, ActivityLog, EntityType, User
from ..results import ActionResult, ErrorKind, access_denied, not_found
from ..store import store


def toggle_active_status(actor_id: int, target_user_id: int) -> ActionResult:
    """Activate or deactivate ``target_user_id``.

    An administrator can never change their own status; that refusal happens
    before anything is written or logged.
    """
    if not is_admin(actor_id):
        return access_denied()
    verdict = check_self_modification(actor_id, target_user_id)
    if not verdict.success:
        current_app.logger.warning("User %s tried to toggle their own status", actor_id)
        return verdict
    user: Optional[User] = store.find(EntityType.USER, target_user_id)
    if user is None:
        return not_found("Utilisateur non trouvé")

    store.update(user, active=not user.active)
    action = ActionType.ACTIVATE if user.active else ActionType.DEACTIVATE
    state = "activé" if user.active else "désactivé"
    current_app.logger.info("User %s %s by %s", user.id, action.value.lower(), actor_id)
    recorder.record(
        actor_id,
        action,
        EntityType.USER,
        f"Compte de {user.full_name} {state}",
        entity_id=user.id,
        entity_name=user.full_name,
        metadata={"email": user.email, "active": user.active},
    )
    return ActionResult.ok(f"Utilisateur {state} avec succès", data=user)


def get_all_users_for_admin(actor_id: int) -> ActionResult:
    if not is_admin(actor_id):
        return access_denied()
    users = store.find_many(EntityType.USER, order_by=(User.created_at.desc(), User.id.desc()))
    overview = [
        {
            "id": user.id,
            "first_name": user.first_name,
            "last_name": user.last_name,
            "email": user.email,
            "active": user.active,
            "created_at": user.created_at.isoformat() if user.created_at else None,
            "department": user.department.name if user.department else None,
            "filiere": user.filiere.name if user.filiere else None,
            "roles": [role.type.value for role in user.roles],
            "modules": len(user.modules),
            "seances": len(user.seances_taught),
        }
        for user in users
    ]
    return ActionResult.ok("Utilisateurs récupérés", data=overview)


def _as_day(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def get_activity_logs(actor_id: int, filters: Optional[Mapping[str, Any]] = None) -> ActionResult:
    """Page through the activity trail, newest first.

    ``filters`` accepts ``user_id``, ``action``, ``entity_type``,
    ``start_date``, ``end_date`` (both inclusive) and the usual ``page`` and
    ``limit``.
    """
    if not is_admin(actor_id):
        return access_denied()
    filters = dict(filters or {})

    form = PaginationForm.from_payload(
        {key: filters[key] for key in ("page", "limit") if key in filters}
    )
    if not form.validate():
        return validation_error(form)
    paging = form.cleaned_data()

    stmt = select(ActivityLog)
    try:
        if filters.get("user_id") not in (None, ""):
            stmt = stmt.where(ActivityLog.user_id == int(filters["user_id"]))
        if filters.get("action"):
            stmt = stmt.where(ActivityLog.action == ActionType(filters["action"]))
        if filters.get("entity_type"):
            stmt = stmt.where(ActivityLog.entity_type == EntityType(filters["entity_type"]))
        start = _as_day(filters.get("start_date"))
        end = _as_day(filters.get("end_date"))
    except ValueError as exc:
        return ActionResult.fail(ErrorKind.VALIDATION_ERROR, f"Filtre invalide : {exc}")
    if start is not None:
        stmt = stmt.where(ActivityLog.created_at >= datetime.combine(start, time.min))
    if end is not None:
        stmt = stmt.where(ActivityLog.created_at < datetime.combine(end + timedelta(days=1), time.min))
    stmt = stmt.order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())

    page = paging.get("page") or 1
    limit = paging.get("limit") or current_app.config.get("ACTIVITY_LOG_PAGE_SIZE", 50)
    items, pagination = store.paginate(stmt, page, limit)
    return ActionResult.ok(
        "Journal d'activité récupéré", data={"items": items, "pagination": pagination}
    )
