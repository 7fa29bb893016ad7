from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from flask import current_app
from sqlalchemy import or_, select

from ..activity import recorder
from ..forms import PaginationForm, validation_error
from ..models import ActionType, EntityType
from ..results import ActionResult, ErrorKind
from ..store import store


# Never exposed as a sort key.
UNSORTABLE_COLUMNS = frozenset({"password_hash"})


def paginated(
    model: type,
    params: Optional[Mapping[str, Any]],
    *,
    search_columns: Sequence[Any],
    default_order: Sequence[Any],
    joins: Sequence[Any] = (),
    message: str = "Liste récupérée",
) -> ActionResult:
    """Run a searchable, sortable and paginated listing of ``model``."""
    form = PaginationForm.from_payload(params)
    if not form.validate():
        return validation_error(form)
    values = form.cleaned_data()

    page = values.get("page") or 1
    limit = values.get("limit") or current_app.config.get("PAGINATION_DEFAULT_LIMIT", 10)
    stmt = select(model)
    for target in joins:
        stmt = stmt.outerjoin(target)

    search = values.get("search")
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(or_(*(column.ilike(pattern) for column in search_columns)))

    sort_by = values.get("sort_by")
    if sort_by:
        if sort_by in UNSORTABLE_COLUMNS or sort_by not in model.__mapper__.columns:
            return ActionResult.fail(
                ErrorKind.VALIDATION_ERROR, f"Tri impossible sur le champ « {sort_by} »"
            )
        column = getattr(model, sort_by)
        descending = values.get("sort_order") == "desc"
        stmt = stmt.order_by(column.desc() if descending else column.asc())
    else:
        stmt = stmt.order_by(*default_order)

    items, pagination = store.paginate(stmt, page, limit)
    return ActionResult.ok(message, data={"items": items, "pagination": pagination})


def record(
    actor_id: int,
    action: ActionType,
    entity_type: EntityType,
    instance: Any,
    entity_name: str,
    description: str,
    metadata: Optional[dict[str, Any]] = None,
) -> None:
    recorder.record(
        actor_id,
        action,
        entity_type,
        description,
        entity_id=getattr(instance, "id", None),
        entity_name=entity_name,
        metadata=metadata,
    )


def changed_fields(values: Mapping[str, Any]) -> dict[str, Any]:
    """JSON-friendly view of an update payload for the activity log."""
    serialisable: dict[str, Any] = {}
    for key, value in values.items():
        if key == "password":
            continue
        if hasattr(value, "isoformat"):
            value = value.isoformat()
        elif hasattr(value, "value"):
            value = value.value
        serialisable[key] = value
    return {"fields": serialisable}
