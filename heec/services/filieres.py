"""Filière management."""
from __future__ import annotations

from typing import Any, Mapping, Optional

from flask import current_app

from ..assignments import attach_filiere
from ..auth import is_admin
from ..forms import FiliereForm, validation_error
from ..guards import can_delete
from ..models import ActionType, Department, EntityType, Filiere
from ..results import ActionResult, access_denied, not_found
from ..store import store
from .common import changed_fields, paginated, record


def create_filiere(actor_id: int, payload: Mapping[str, Any]) -> ActionResult:
    if not is_admin(actor_id):
        return access_denied()
    form = FiliereForm.from_payload(payload)
    if not form.validate():
        return validation_error(form)
    values = form.cleaned_data()
    department = store.find(EntityType.DEPARTEMENT, values["department_id"])
    if department is None:
        return not_found("Département non trouvé")

    filiere = store.create(EntityType.FILIERE, **values)
    current_app.logger.info("Filiere %s created in department %s", filiere.name, department.name)
    record(
        actor_id,
        ActionType.CREATE,
        EntityType.FILIERE,
        filiere,
        filiere.name,
        f"Création de la filière {filiere.name} ({department.name})",
        {"department_id": department.id, "department_name": department.name},
    )
    return ActionResult.ok("Filière créée avec succès", data=filiere)


def get_filieres(params: Optional[Mapping[str, Any]] = None) -> ActionResult:
    return paginated(
        Filiere,
        params,
        search_columns=(Filiere.name, Filiere.description, Department.name),
        default_order=(Filiere.created_at.desc(), Filiere.id.desc()),
        joins=(Filiere.department,),
        message="Filières récupérées",
    )


def get_filiere(filiere_id: int) -> ActionResult:
    filiere = store.find(EntityType.FILIERE, filiere_id)
    if filiere is None:
        return not_found("Filière non trouvée")
    return ActionResult.ok("Filière récupérée", data=filiere)


def update_filiere(actor_id: int, filiere_id: int, payload: Mapping[str, Any]) -> ActionResult:
    if not is_admin(actor_id):
        return access_denied()
    filiere: Optional[Filiere] = store.find(EntityType.FILIERE, filiere_id)
    if filiere is None:
        return not_found("Filière non trouvée")
    form = FiliereForm.from_payload(payload, partial=True)
    if not form.validate():
        return validation_error(form)
    values = form.cleaned_data()
    department: Optional[Department] = None
    if "department_id" in values:
        department = store.find(EntityType.DEPARTEMENT, values["department_id"])
        if department is None:
            return not_found("Département non trouvé")

    if department is not None and department.id != filiere.department_id:
        # Members follow the filière into its new department.
        filiere.department = department
        for user in filiere.users:
            attach_filiere(user, filiere)
        current_app.logger.info(
            "Filiere %s moved to department %s with %d member(s)",
            filiere.name,
            department.name,
            len(filiere.users),
        )
    store.update(filiere, **values)
    record(
        actor_id,
        ActionType.UPDATE,
        EntityType.FILIERE,
        filiere,
        filiere.name,
        f"Modification de la filière {filiere.name}",
        changed_fields(values),
    )
    return ActionResult.ok("Filière mise à jour avec succès", data=filiere)


def delete_filiere(actor_id: int, filiere_id: int) -> ActionResult:
    if not is_admin(actor_id):
        return access_denied()
    verdict = can_delete(EntityType.FILIERE, filiere_id)
    if not verdict.success:
        return verdict

    filiere = store.find(EntityType.FILIERE, filiere_id)
    name = filiere.name
    department_name = filiere.department.name
    store.delete(filiere)
    current_app.logger.info("Filiere %s deleted", name)
    record(
        actor_id,
        ActionType.DELETE,
        EntityType.FILIERE,
        None,
        name,
        f"Suppression de la filière {name}",
        {"filiere_id": filiere_id, "department_name": department_name},
    )
    return ActionResult.ok("Filière supprimée avec succès")


def get_all_filieres() -> ActionResult:
    filieres = store.find_many(EntityType.FILIERE, order_by=(Filiere.name,))
    return ActionResult.ok("Filières récupérées", data=filieres)


def get_filieres_by_department(department_id: int) -> ActionResult:
    if store.find(EntityType.DEPARTEMENT, department_id) is None:
        return not_found("Département non trouvé")
    filieres = store.find_many(
        EntityType.FILIERE,
        Filiere.department_id == department_id,
        order_by=(Filiere.name,),
    )
    return ActionResult.ok("Filières du département récupérées", data=filieres)


def get_filiere_stats(filiere_id: int) -> ActionResult:
    filiere: Optional[Filiere] = store.find(EntityType.FILIERE, filiere_id)
    if filiere is None:
        return not_found("Filière non trouvée")
    teacher_ids = {teacher.id for module in filiere.modules for teacher in module.teachers}
    stats = {
        "id": filiere.id,
        "name": filiere.name,
        "department": filiere.department.name,
        "modules": len(filiere.modules),
        "users": len(filiere.users),
        "total_seances": sum(len(module.seances) for module in filiere.modules),
        "total_teachers": len(teacher_ids),
    }
    return ActionResult.ok("Statistiques de la filière", data=stats)
