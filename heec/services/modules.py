"""Module management."""
from __future__ import annotations

from collections import Counter
from typing import Any, Mapping, Optional

from flask import current_app

from ..auth import is_admin
from ..forms import ModuleForm, validation_error
from ..guards import can_delete
from ..models import ActionType, EntityType, Filiere, Module, SeanceType, User
from ..results import ActionResult, access_denied, not_found
from ..store import store
from .common import changed_fields, paginated, record


def create_module(actor_id: int, payload: Mapping[str, Any]) -> ActionResult:
    if not is_admin(actor_id):
        return access_denied()
    form = ModuleForm.from_payload(payload)
    if not form.validate():
        return validation_error(form)
    values = form.cleaned_data()
    filiere: Optional[Filiere] = store.find(EntityType.FILIERE, values["filiere_id"])
    if filiere is None:
        return not_found("Filière non trouvée")

    module = store.create(EntityType.MODULE, **values)
    current_app.logger.info("Module %s created in filiere %s", module.code, filiere.name)
    record(
        actor_id,
        ActionType.CREATE,
        EntityType.MODULE,
        module,
        module.name,
        f"Création du module {module.code} - {module.name}",
        {"filiere_id": filiere.id, "filiere_name": filiere.name},
    )
    return ActionResult.ok("Module créé avec succès", data=module)


def get_modules(params: Optional[Mapping[str, Any]] = None) -> ActionResult:
    return paginated(
        Module,
        params,
        search_columns=(Module.name, Module.code, Module.description, Filiere.name),
        default_order=(Module.created_at.desc(), Module.id.desc()),
        joins=(Module.filiere,),
        message="Modules récupérés",
    )


def get_module(module_id: int) -> ActionResult:
    module = store.find(EntityType.MODULE, module_id)
    if module is None:
        return not_found("Module non trouvé")
    return ActionResult.ok("Module récupéré", data=module)


def update_module(actor_id: int, module_id: int, payload: Mapping[str, Any]) -> ActionResult:
    if not is_admin(actor_id):
        return access_denied()
    module: Optional[Module] = store.find(EntityType.MODULE, module_id)
    if module is None:
        return not_found("Module non trouvé")
    form = ModuleForm.from_payload(payload, partial=True)
    if not form.validate():
        return validation_error(form)
    values = form.cleaned_data()
    if "filiere_id" in values and store.find(EntityType.FILIERE, values["filiere_id"]) is None:
        return not_found("Filière non trouvée")

    store.update(module, **values)
    record(
        actor_id,
        ActionType.UPDATE,
        EntityType.MODULE,
        module,
        module.name,
        f"Modification du module {module.code}",
        changed_fields(values),
    )
    return ActionResult.ok("Module mis à jour avec succès", data=module)


def delete_module(actor_id: int, module_id: int) -> ActionResult:
    if not is_admin(actor_id):
        return access_denied()
    verdict = can_delete(EntityType.MODULE, module_id)
    if not verdict.success:
        return verdict

    module = store.find(EntityType.MODULE, module_id)
    name, code = module.name, module.code
    store.delete(module)
    current_app.logger.info("Module %s deleted", code)
    record(
        actor_id,
        ActionType.DELETE,
        EntityType.MODULE,
        None,
        name,
        f"Suppression du module {code} - {name}",
        {"module_id": module_id, "code": code},
    )
    return ActionResult.ok("Module supprimé avec succès")


def get_all_modules() -> ActionResult:
    modules = store.find_many(EntityType.MODULE, order_by=(Module.code,))
    return ActionResult.ok("Modules récupérés", data=modules)


def get_modules_by_filiere(filiere_id: int) -> ActionResult:
    if store.find(EntityType.FILIERE, filiere_id) is None:
        return not_found("Filière non trouvée")
    modules = store.find_many(
        EntityType.MODULE, Module.filiere_id == filiere_id, order_by=(Module.code,)
    )
    return ActionResult.ok("Modules de la filière récupérés", data=modules)


def get_modules_by_teacher(teacher_id: int) -> ActionResult:
    if store.find(EntityType.USER, teacher_id) is None:
        return not_found("Enseignant introuvable")
    modules = store.find_many(
        EntityType.MODULE,
        Module.teachers.any(User.id == teacher_id),
        order_by=(Module.code,),
    )
    return ActionResult.ok("Modules de l'enseignant récupérés", data=modules)


def get_module_stats(module_id: int) -> ActionResult:
    module: Optional[Module] = store.find(EntityType.MODULE, module_id)
    if module is None:
        return not_found("Module non trouvé")
    per_type = Counter(seance.type for seance in module.seances)
    delivered = module.delivered_hours()
    stats = {
        "id": module.id,
        "code": module.code,
        "name": module.name,
        "planned_hours": module.hours,
        "delivered_hours": round(delivered, 2),
        "remaining_hours": round(module.hours - delivered, 2) if module.hours else None,
        "teachers": len(module.teachers),
        "seances": len(module.seances),
        "seances_by_type": {member.value: per_type.get(member, 0) for member in SeanceType},
    }
    return ActionResult.ok("Statistiques du module", data=stats)
