"""Department management."""
from __future__ import annotations

from typing import Any, Mapping, Optional

from flask import current_app
from sqlalchemy import func

from ..auth import is_admin
from ..forms import DepartmentForm, validation_error
from ..guards import can_delete
from ..models import ActionType, Department, EntityType
from ..results import ActionResult, ErrorKind, access_denied, not_found
from ..store import store
from .common import changed_fields, paginated, record


def _name_taken(name: str, exclude_id: Optional[int] = None) -> bool:
    criteria = [func.lower(Department.name) == name.lower()]
    if exclude_id is not None:
        criteria.append(Department.id != exclude_id)
    return store.count(EntityType.DEPARTEMENT, *criteria) > 0


def create_department(actor_id: int, payload: Mapping[str, Any]) -> ActionResult:
    if not is_admin(actor_id):
        return access_denied()
    form = DepartmentForm.from_payload(payload)
    if not form.validate():
        return validation_error(form)
    values = form.cleaned_data()
    if _name_taken(values["name"]):
        return ActionResult.fail(
            ErrorKind.VALIDATION_ERROR, "Un département avec ce nom existe déjà"
        )

    department = store.create(EntityType.DEPARTEMENT, **values)
    current_app.logger.info("Department %s created", department.name)
    record(
        actor_id,
        ActionType.CREATE,
        EntityType.DEPARTEMENT,
        department,
        department.name,
        f"Création du département {department.name}",
    )
    return ActionResult.ok("Département créé avec succès", data=department)


def get_departments(params: Optional[Mapping[str, Any]] = None) -> ActionResult:
    return paginated(
        Department,
        params,
        search_columns=(Department.name, Department.description),
        default_order=(Department.created_at.desc(), Department.id.desc()),
        message="Départements récupérés",
    )


def get_department(department_id: int) -> ActionResult:
    department = store.find(EntityType.DEPARTEMENT, department_id)
    if department is None:
        return not_found("Département non trouvé")
    return ActionResult.ok("Département récupéré", data=department)


def update_department(actor_id: int, department_id: int, payload: Mapping[str, Any]) -> ActionResult:
    if not is_admin(actor_id):
        return access_denied()
    department = store.find(EntityType.DEPARTEMENT, department_id)
    if department is None:
        return not_found("Département non trouvé")
    form = DepartmentForm.from_payload(payload, partial=True)
    if not form.validate():
        return validation_error(form)
    values = form.cleaned_data()
    if "name" in values and _name_taken(values["name"], exclude_id=department.id):
        return ActionResult.fail(
            ErrorKind.VALIDATION_ERROR, "Un département avec ce nom existe déjà"
        )

    store.update(department, **values)
    record(
        actor_id,
        ActionType.UPDATE,
        EntityType.DEPARTEMENT,
        department,
        department.name,
        f"Modification du département {department.name}",
        changed_fields(values),
    )
    return ActionResult.ok("Département mis à jour avec succès", data=department)


def delete_department(actor_id: int, department_id: int) -> ActionResult:
    if not is_admin(actor_id):
        return access_denied()
    verdict = can_delete(EntityType.DEPARTEMENT, department_id)
    if not verdict.success:
        return verdict

    department = store.find(EntityType.DEPARTEMENT, department_id)
    name = department.name
    store.delete(department)
    current_app.logger.info("Department %s deleted", name)
    record(
        actor_id,
        ActionType.DELETE,
        EntityType.DEPARTEMENT,
        None,
        name,
        f"Suppression du département {name}",
        {"department_id": department_id},
    )
    return ActionResult.ok("Département supprimé avec succès")


def get_all_departments() -> ActionResult:
    departments = store.find_many(EntityType.DEPARTEMENT, order_by=(Department.name,))
    return ActionResult.ok("Départements récupérés", data=departments)


def get_department_stats(department_id: int) -> ActionResult:
    department: Optional[Department] = store.find(EntityType.DEPARTEMENT, department_id)
    if department is None:
        return not_found("Département non trouvé")
    stats = {
        "id": department.id,
        "name": department.name,
        "filieres": len(department.filieres),
        "users": len(department.users),
        "total_modules": sum(len(filiere.modules) for filiere in department.filieres),
        "total_users_in_filieres": sum(len(filiere.users) for filiere in department.filieres),
    }
    return ActionResult.ok("Statistiques du département", data=stats)
