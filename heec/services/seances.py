"""Séance scheduling.

Creation and update pass through the assignment gate and the conflict checker
before anything is written. The check and the write are not serialised: two
concurrent requests for the same teacher may both pass the conflict read and
persist overlapping séances.
"""
from __future__ import annotations

from datetime import date, datetime, time
from typing import Any, Mapping, Optional

from flask import current_app

from ..assignments import can_schedule_teacher_on_module
from ..auth import is_admin
from ..forms import SeanceForm, validation_error
from ..models import ActionType, EntityType, Module, Seance, SeanceType, User
from ..results import ActionResult, ErrorKind, access_denied, not_found
from ..scheduling import anchor, available_teachers_for_seance, has_conflict
from ..store import store
from .common import changed_fields, paginated, record


CONFLICT_MESSAGE = "L'enseignant a déjà une séance programmée à cette heure"
NOT_ELIGIBLE_MESSAGE = "Cet enseignant n'est pas affecté à ce module ou son compte est inactif"


def _check_slot(
    teacher_id: int,
    module_id: int,
    day: date,
    start_time: datetime,
    end_time: datetime,
    exclude_seance_id: Optional[int] = None,
) -> Optional[ActionResult]:
    """Return the failure for an unusable slot, or ``None`` when it is free."""
    teacher: Optional[User] = store.find(EntityType.USER, teacher_id)
    if teacher is None:
        return not_found("Enseignant introuvable")
    module: Optional[Module] = store.find(EntityType.MODULE, module_id)
    if module is None:
        return not_found("Module non trouvé")
    if end_time <= start_time:
        return ActionResult.fail(
            ErrorKind.VALIDATION_ERROR, "L'heure de fin doit être après l'heure de début"
        )
    if not can_schedule_teacher_on_module(teacher_id, module_id):
        current_app.logger.warning(
            "Teacher %s is not eligible for module %s", teacher_id, module.code
        )
        return ActionResult.fail(ErrorKind.NOT_A_TEACHER, NOT_ELIGIBLE_MESSAGE)
    if has_conflict(teacher_id, day, start_time, end_time, exclude_seance_id):
        current_app.logger.warning(
            "Schedule conflict for teacher %s on %s %s-%s",
            teacher_id,
            day.isoformat(),
            start_time.strftime("%H:%M"),
            end_time.strftime("%H:%M"),
        )
        return ActionResult.fail(ErrorKind.SCHEDULE_CONFLICT, CONFLICT_MESSAGE)
    return None


def create_seance(actor_id: int, payload: Mapping[str, Any]) -> ActionResult:
    if not is_admin(actor_id):
        return access_denied()
    form = SeanceForm.from_payload(payload)
    if not form.validate():
        return validation_error(form)
    values = form.cleaned_data()

    day: date = values["date"]
    start_time = anchor(day, values["start_time"])
    end_time = anchor(day, values["end_time"])
    rejection = _check_slot(values["teacher_id"], values["module_id"], day, start_time, end_time)
    if rejection is not None:
        return rejection

    values.update(
        start_time=start_time,
        end_time=end_time,
        type=SeanceType(values.get("type") or SeanceType.COURS.value),
    )
    seance = store.create(EntityType.SEANCE, **values)
    current_app.logger.info(
        "Seance %s scheduled for teacher %s on %s", seance.id, seance.teacher_id, day.isoformat()
    )
    record(
        actor_id,
        ActionType.CREATE,
        EntityType.SEANCE,
        seance,
        seance.title,
        f"Création de la séance {seance.title} ({seance.module.code})",
        {
            "module_id": seance.module_id,
            "teacher_id": seance.teacher_id,
            "date": day.isoformat(),
            "start_time": start_time.isoformat(),
            "end_time": end_time.isoformat(),
        },
    )
    return ActionResult.ok("Séance créée avec succès", data=seance)


def get_seances(params: Optional[Mapping[str, Any]] = None) -> ActionResult:
    return paginated(
        Seance,
        params,
        search_columns=(
            Seance.title,
            Seance.room,
            Module.name,
            Module.code,
            User.last_name,
            User.first_name,
        ),
        default_order=(Seance.date.desc(), Seance.start_time.desc(), Seance.id.desc()),
        joins=(Seance.module, Seance.teacher),
        message="Séances récupérées",
    )


def get_seance(seance_id: int) -> ActionResult:
    seance = store.find(EntityType.SEANCE, seance_id)
    if seance is None:
        return not_found("Séance non trouvée")
    return ActionResult.ok("Séance récupérée", data=seance)


def _time_of(value: datetime | time) -> time:
    return value.time() if isinstance(value, datetime) else value


def update_seance(actor_id: int, seance_id: int, payload: Mapping[str, Any]) -> ActionResult:
    if not is_admin(actor_id):
        return access_denied()
    seance: Optional[Seance] = store.find(EntityType.SEANCE, seance_id)
    if seance is None:
        return not_found("Séance non trouvée")
    form = SeanceForm.from_payload(payload, partial=True)
    if not form.validate():
        return validation_error(form)
    values = form.cleaned_data()

    day: date = values.get("date") or seance.date
    start_time = anchor(day, _time_of(values.get("start_time") or seance.start_time))
    end_time = anchor(day, _time_of(values.get("end_time") or seance.end_time))
    teacher_id = values.get("teacher_id") or seance.teacher_id
    module_id = values.get("module_id") or seance.module_id

    rejection = _check_slot(
        teacher_id, module_id, day, start_time, end_time, exclude_seance_id=seance.id
    )
    if rejection is not None:
        return rejection

    patch = dict(values)
    patch.update(date=day, start_time=start_time, end_time=end_time)
    if "type" in patch:
        patch["type"] = SeanceType(patch["type"] or SeanceType.COURS.value)
    store.update(seance, **patch)
    record(
        actor_id,
        ActionType.UPDATE,
        EntityType.SEANCE,
        seance,
        seance.title,
        f"Modification de la séance {seance.title}",
        changed_fields(values),
    )
    return ActionResult.ok("Séance mise à jour avec succès", data=seance)


def delete_seance(actor_id: int, seance_id: int) -> ActionResult:
    if not is_admin(actor_id):
        return access_denied()
    seance: Optional[Seance] = store.find(EntityType.SEANCE, seance_id)
    if seance is None:
        return not_found("Séance non trouvée")

    title = seance.title
    metadata = {
        "seance_id": seance.id,
        "module_code": seance.module.code,
        "teacher_id": seance.teacher_id,
        "date": seance.date.isoformat(),
    }
    store.delete(seance)
    current_app.logger.info("Seance %s deleted", seance_id)
    record(
        actor_id,
        ActionType.DELETE,
        EntityType.SEANCE,
        None,
        title,
        f"Suppression de la séance {title}",
        metadata,
    )
    return ActionResult.ok("Séance supprimée avec succès")


def get_seances_by_module(module_id: int) -> ActionResult:
    if store.find(EntityType.MODULE, module_id) is None:
        return not_found("Module non trouvé")
    seances = store.find_many(
        EntityType.SEANCE,
        Seance.module_id == module_id,
        order_by=(Seance.date, Seance.start_time),
    )
    return ActionResult.ok("Séances du module récupérées", data=seances)


def get_seances_by_teacher(
    teacher_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> ActionResult:
    if store.find(EntityType.USER, teacher_id) is None:
        return not_found("Enseignant introuvable")
    criteria = [Seance.teacher_id == teacher_id]
    if start_date is not None:
        criteria.append(Seance.date >= start_date)
    if end_date is not None:
        criteria.append(Seance.date <= end_date)
    seances = store.find_many(
        EntityType.SEANCE, *criteria, order_by=(Seance.date, Seance.start_time)
    )
    return ActionResult.ok("Séances de l'enseignant récupérées", data=seances)


def get_seances_by_date(day: date) -> ActionResult:
    seances = store.find_many(
        EntityType.SEANCE, Seance.date == day, order_by=(Seance.start_time,)
    )
    return ActionResult.ok("Séances du jour récupérées", data=seances)


def get_available_teachers(
    module_id: int,
    day: date,
    start: datetime | time,
    end: datetime | time,
) -> ActionResult:
    start_time, end_time = anchor(day, start), anchor(day, end)
    if end_time <= start_time:
        return ActionResult.fail(
            ErrorKind.VALIDATION_ERROR, "L'heure de fin doit être après l'heure de début"
        )
    teachers = available_teachers_for_seance(module_id, day, start_time, end_time)
    if teachers is None:
        return not_found("Module non trouvé")
    return ActionResult.ok("Enseignants disponibles", data=teachers)
