"""Teacher eligibility rules for modules and filières."""
from __future__ import annotations

from datetime import date
from typing import Optional

from flask import current_app

from .activity import recorder
from .auth import is_admin
from .models import ActionType, EntityType, Filiere, Module, Seance, User
from .results import ActionResult, ErrorKind, access_denied, not_found
from .store import store


def is_assigned(teacher: User, module: Module) -> bool:
    return any(candidate.id == module.id for candidate in teacher.modules)


def can_schedule_teacher_on_module(teacher_id: int, module_id: int) -> bool:
    """A teacher may run séances of a module only once explicitly assigned."""
    teacher: Optional[User] = store.find(EntityType.USER, teacher_id)
    module: Optional[Module] = store.find(EntityType.MODULE, module_id)
    if teacher is None or module is None:
        return False
    return teacher.active and is_assigned(teacher, module)


def can_unassign_teacher_from_module(
    teacher_id: int, module_id: int, today: Optional[date] = None
) -> ActionResult:
    today = today or date.today()
    upcoming = store.count(
        EntityType.SEANCE,
        Seance.module_id == module_id,
        Seance.teacher_id == teacher_id,
        Seance.date >= today,
    )
    if upcoming:
        return ActionResult.fail(
            ErrorKind.HAS_FUTURE_SESSIONS,
            "Impossible de retirer cet enseignant car il a "
            f"{upcoming} séance(s) programmée(s) dans ce module",
            data={"seances": upcoming},
        )
    return ActionResult.ok("Désaffectation possible")


def attach_filiere(user: User, filiere: Optional[Filiere]) -> None:
    """Set the user's filière and keep the department aligned with it.

    Whenever a filière is set, ``user.department_id`` equals
    ``filiere.department_id``. Clearing the filière leaves the department
    untouched.
    """
    user.filiere = filiere
    if filiere is not None:
        user.department = filiere.department


def _teacher_summary(teacher: User) -> dict[str, object]:
    return {
        "id": teacher.id,
        "first_name": teacher.first_name,
        "last_name": teacher.last_name,
        "email": teacher.email,
        "filiere_id": teacher.filiere_id,
        "filiere": teacher.filiere.name if teacher.filiere else None,
        "department_id": teacher.department_id,
        "department": teacher.department.name if teacher.department else None,
    }


def assign_teacher_to_module(actor_id: int, teacher_id: int, module_id: int) -> ActionResult:
    if not is_admin(actor_id):
        return access_denied()

    teacher: Optional[User] = store.find(EntityType.USER, teacher_id)
    module: Optional[Module] = store.find(EntityType.MODULE, module_id)
    if teacher is None or module is None:
        return not_found("Enseignant ou module introuvable")
    if not teacher.is_teacher:
        return ActionResult.fail(
            ErrorKind.NOT_A_TEACHER, "L'utilisateur n'est pas un enseignant"
        )
    if is_assigned(teacher, module):
        return ActionResult.fail(
            ErrorKind.ALREADY_ASSIGNED, "Enseignant déjà affecté à ce module"
        )

    store.connect_relation(teacher, "modules", module)
    current_app.logger.info("Teacher %s assigned to module %s", teacher.id, module.code)
    recorder.record(
        actor_id,
        ActionType.ASSIGN,
        EntityType.MODULE,
        f"Affectation de l'enseignant {teacher.full_name} au module {module.name}",
        entity_id=module.id,
        entity_name=module.name,
        metadata={
            "teacher_id": teacher.id,
            "teacher_name": teacher.full_name,
            "module_code": module.code,
            "filiere_name": module.filiere.name,
        },
    )
    return ActionResult.ok(f"{teacher.full_name} affecté(e) au module {module.name}")


def unassign_teacher_from_module(
    actor_id: int, teacher_id: int, module_id: int, today: Optional[date] = None
) -> ActionResult:
    if not is_admin(actor_id):
        return access_denied()

    teacher: Optional[User] = store.find(EntityType.USER, teacher_id)
    module: Optional[Module] = store.find(EntityType.MODULE, module_id)
    if teacher is None or module is None:
        return not_found("Enseignant ou module introuvable")
    if not is_assigned(teacher, module):
        return ActionResult.fail(
            ErrorKind.NOT_ASSIGNED, "Cet enseignant n'est pas affecté à ce module"
        )
    verdict = can_unassign_teacher_from_module(teacher.id, module.id, today=today)
    if not verdict.success:
        return verdict

    store.disconnect_relation(teacher, "modules", module)
    current_app.logger.info("Teacher %s unassigned from module %s", teacher.id, module.code)
    recorder.record(
        actor_id,
        ActionType.UNASSIGN,
        EntityType.MODULE,
        f"Désaffectation de l'enseignant {teacher.full_name} du module {module.name}",
        entity_id=module.id,
        entity_name=module.name,
        metadata={
            "teacher_id": teacher.id,
            "teacher_name": teacher.full_name,
            "module_code": module.code,
        },
    )
    return ActionResult.ok(f"{teacher.full_name} désaffecté(e) du module {module.name}")


def assign_teacher_to_filiere(actor_id: int, teacher_id: int, filiere_id: int) -> ActionResult:
    if not is_admin(actor_id):
        return access_denied()

    teacher: Optional[User] = store.find(EntityType.USER, teacher_id)
    if teacher is None:
        return not_found("Enseignant introuvable")
    if not teacher.is_teacher:
        return ActionResult.fail(
            ErrorKind.NOT_A_TEACHER, "L'utilisateur n'est pas un enseignant"
        )
    filiere: Optional[Filiere] = store.find(EntityType.FILIERE, filiere_id)
    if filiere is None:
        return not_found("Filière introuvable")

    attach_filiere(teacher, filiere)
    store.commit()
    recorder.record(
        actor_id,
        ActionType.ASSIGN,
        EntityType.USER,
        f"Affectation à la filière {filiere.name}",
        entity_id=teacher.id,
        entity_name=teacher.full_name,
        metadata={
            "filiere_id": filiere.id,
            "filiere_name": filiere.name,
            "department_name": filiere.department.name,
        },
    )
    return ActionResult.ok(
        f"{teacher.full_name} affecté(e) à la filière {filiere.name}",
        data=_teacher_summary(teacher),
    )
