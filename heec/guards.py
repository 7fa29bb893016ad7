"""Deletion and account-status guards."""
from __future__ import annotations

from .models import EntityType, Filiere, Module, Role, Seance, User
from .results import ActionResult, ErrorKind, not_found
from .store import store


NOT_FOUND_MESSAGES: dict[EntityType, str] = {
    EntityType.USER: "Utilisateur non trouvé",
    EntityType.ROLE: "Rôle non trouvé",
    EntityType.DEPARTEMENT: "Département non trouvé",
    EntityType.FILIERE: "Filière non trouvée",
    EntityType.MODULE: "Module non trouvé",
    EntityType.SEANCE: "Séance non trouvée",
}

_SUBJECTS: dict[EntityType, str] = {
    EntityType.DEPARTEMENT: "ce département car il",
    EntityType.FILIERE: "cette filière car elle",
    EntityType.MODULE: "ce module car il",
}


def _dependents(entity_type: EntityType, entity_id: int) -> list[tuple[str, int]]:
    if entity_type is EntityType.DEPARTEMENT:
        return [
            ("filière(s)", store.count(EntityType.FILIERE, Filiere.department_id == entity_id)),
            ("utilisateur(s)", store.count(EntityType.USER, User.department_id == entity_id)),
        ]
    if entity_type is EntityType.FILIERE:
        return [
            ("module(s)", store.count(EntityType.MODULE, Module.filiere_id == entity_id)),
            ("utilisateur(s)", store.count(EntityType.USER, User.filiere_id == entity_id)),
        ]
    if entity_type is EntityType.MODULE:
        return [
            ("séance(s)", store.count(EntityType.SEANCE, Seance.module_id == entity_id)),
        ]
    if entity_type is EntityType.ROLE:
        return [
            (
                "utilisateur(s)",
                store.count(EntityType.USER, User.roles.any(Role.id == entity_id)),
            ),
        ]
    return []


def can_delete(entity_type: EntityType, entity_id: int) -> ActionResult:
    """Refuse deleting a parent that still has children.

    Users and séances carry no dependent gate. The failure message names the
    first blocking dependent and its count.
    """
    if store.find(entity_type, entity_id) is None:
        return not_found(NOT_FOUND_MESSAGES[entity_type])

    for label, count in _dependents(entity_type, entity_id):
        if count <= 0:
            continue
        if entity_type is EntityType.ROLE:
            message = (
                "Impossible de supprimer ce rôle car il est assigné à "
                f"{count} {label}"
            )
        else:
            message = (
                f"Impossible de supprimer {_SUBJECTS[entity_type]} contient "
                f"{count} {label}"
            )
        return ActionResult.fail(
            ErrorKind.HAS_DEPENDENTS,
            message,
            data={"dependent": label, "count": count},
        )
    return ActionResult.ok("Suppression autorisée")


def check_self_modification(actor_id: int, target_user_id: int) -> ActionResult:
    if actor_id == target_user_id:
        return ActionResult.fail(
            ErrorKind.SELF_MODIFICATION_FORBIDDEN,
            "Vous ne pouvez pas modifier votre propre statut",
        )
    return ActionResult.ok("Modification autorisée")
