"""Role management."""
from __future__ import annotations

from typing import Any, Mapping, Optional

from flask import current_app

from ..auth import is_admin
from ..forms import RoleForm, validation_error
from ..guards import can_delete
from ..labels import role_label
from ..models import ActionType, EntityType, Role, RoleType
from ..results import ActionResult, ErrorKind, access_denied, not_found
from ..store import store
from .common import changed_fields, paginated, record


def create_role(actor_id: int, payload: Mapping[str, Any]) -> ActionResult:
    if not is_admin(actor_id):
        return access_denied()
    form = RoleForm.from_payload(payload)
    if not form.validate():
        return validation_error(form)
    values = form.cleaned_data()
    values["type"] = RoleType(values["type"])

    role = store.create(EntityType.ROLE, **values)
    current_app.logger.info("Role %s (%s) created", role.name, role.type.value)
    record(
        actor_id,
        ActionType.CREATE,
        EntityType.ROLE,
        role,
        role.name,
        f"Création du rôle {role.name} ({role_label(role.type)})",
        {"type": role.type.value},
    )
    return ActionResult.ok("Rôle créé avec succès", data=role)


def get_roles(params: Optional[Mapping[str, Any]] = None) -> ActionResult:
    return paginated(
        Role,
        params,
        search_columns=(Role.name, Role.description),
        default_order=(Role.name.asc(), Role.id.asc()),
        message="Rôles récupérés",
    )


def get_role(role_id: int) -> ActionResult:
    role = store.find(EntityType.ROLE, role_id)
    if role is None:
        return not_found("Rôle non trouvé")
    return ActionResult.ok("Rôle récupéré", data=role)


def update_role(actor_id: int, role_id: int, payload: Mapping[str, Any]) -> ActionResult:
    if not is_admin(actor_id):
        return access_denied()
    role: Optional[Role] = store.find(EntityType.ROLE, role_id)
    if role is None:
        return not_found("Rôle non trouvé")
    form = RoleForm.from_payload(payload, partial=True)
    if not form.validate():
        return validation_error(form)
    values = form.cleaned_data()
    if "type" in values:
        values["type"] = RoleType(values["type"])

    store.update(role, **values)
    record(
        actor_id,
        ActionType.UPDATE,
        EntityType.ROLE,
        role,
        role.name,
        f"Modification du rôle {role.name}",
        changed_fields(values),
    )
    return ActionResult.ok("Rôle mis à jour avec succès", data=role)


def delete_role(actor_id: int, role_id: int) -> ActionResult:
    if not is_admin(actor_id):
        return access_denied()
    verdict = can_delete(EntityType.ROLE, role_id)
    if not verdict.success:
        return verdict

    role = store.find(EntityType.ROLE, role_id)
    name, role_type = role.name, role.type
    store.delete(role)
    current_app.logger.info("Role %s deleted", name)
    record(
        actor_id,
        ActionType.DELETE,
        EntityType.ROLE,
        None,
        name,
        f"Suppression du rôle {name}",
        {"role_id": role_id, "type": role_type.value},
    )
    return ActionResult.ok("Rôle supprimé avec succès")


def get_all_roles() -> ActionResult:
    roles = store.find_many(EntityType.ROLE, order_by=(Role.name,))
    return ActionResult.ok("Rôles récupérés", data=roles)


def get_roles_by_type(role_type: RoleType | str) -> ActionResult:
    try:
        role_type = RoleType(role_type)
    except ValueError:
        return ActionResult.fail(
            ErrorKind.VALIDATION_ERROR, f"Type de rôle inconnu : {role_type}"
        )
    roles = store.find_many(EntityType.ROLE, Role.type == role_type, order_by=(Role.name,))
    return ActionResult.ok(f"Rôles de type {role_label(role_type)}", data=roles)
