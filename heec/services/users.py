"""User accounts and their roles."""
from __future__ import annotations

from typing import Any, Mapping, Optional

from flask import current_app
from sqlalchemy import func

from ..assignments import attach_filiere
from ..auth import is_admin
from ..forms import UserForm, validation_error
from ..models import ActionType, Department, EntityType, Filiere, Role, User
from ..results import ActionResult, ErrorKind, access_denied, not_found
from ..store import store
from .common import changed_fields, paginated, record


def _email_taken(email: str, exclude_id: Optional[int] = None) -> bool:
    criteria = [func.lower(User.email) == email.lower()]
    if exclude_id is not None:
        criteria.append(User.id != exclude_id)
    return store.count(EntityType.USER, *criteria) > 0


def _resolve_affiliation(
    values: dict[str, Any], current: Optional[User] = None
) -> tuple[Optional[ActionResult], Optional[Department], Optional[Filiere]]:
    """Pop ``department_id``/``filiere_id`` from ``values`` and load them.

    Missing keys fall back to the current affiliation of ``current``. An
    explicit department that contradicts the filière is rejected.
    """
    department_given = "department_id" in values
    filiere_given = "filiere_id" in values
    department_id = values.pop("department_id", None)
    filiere_id = values.pop("filiere_id", None)

    department = current.department if current is not None and not department_given else None
    filiere = current.filiere if current is not None and not filiere_given else None
    if department_id is not None:
        department = store.find(EntityType.DEPARTEMENT, department_id)
        if department is None:
            return not_found("Département non trouvé"), None, None
    if filiere_id is not None:
        filiere = store.find(EntityType.FILIERE, filiere_id)
        if filiere is None:
            return not_found("Filière non trouvée"), None, None

    if (
        department_given
        and department is not None
        and filiere is not None
        and filiere.department_id != department.id
    ):
        return (
            ActionResult.fail(
                ErrorKind.VALIDATION_ERROR,
                "La filière n'appartient pas au département sélectionné",
            ),
            None,
            None,
        )
    return None, department, filiere


def _affiliate(user: User, department: Optional[Department], filiere: Optional[Filiere]) -> None:
    if filiere is not None:
        attach_filiere(user, filiere)
    else:
        user.filiere = None
        user.department = department


def create_user(actor_id: int, payload: Mapping[str, Any]) -> ActionResult:
    if not is_admin(actor_id):
        return access_denied()
    form = UserForm.from_payload(payload)
    if not form.validate():
        return validation_error(form)
    values = form.cleaned_data()
    email = values.pop("email").lower()
    if _email_taken(email):
        return ActionResult.fail(
            ErrorKind.VALIDATION_ERROR, "Un utilisateur avec cet email existe déjà"
        )
    rejection, department, filiere = _resolve_affiliation(values)
    if rejection is not None:
        return rejection

    user = User(
        first_name=values.pop("first_name"),
        last_name=values.pop("last_name"),
        email=email,
        active=values.pop("active") if "active" in values else True,
    )
    user.set_password(values.pop("password"))
    _affiliate(user, department, filiere)
    store.add(user)
    current_app.logger.info("User %s created", user.email)
    record(
        actor_id,
        ActionType.CREATE,
        EntityType.USER,
        user,
        user.full_name,
        f"Création de l'utilisateur {user.full_name}",
        {"email": user.email},
    )
    return ActionResult.ok("Utilisateur créé avec succès", data=user)


def get_users(params: Optional[Mapping[str, Any]] = None) -> ActionResult:
    return paginated(
        User,
        params,
        search_columns=(User.last_name, User.first_name, User.email),
        default_order=(User.created_at.desc(), User.id.desc()),
        message="Utilisateurs récupérés",
    )


def get_user(user_id: int) -> ActionResult:
    user = store.find(EntityType.USER, user_id)
    if user is None:
        return not_found("Utilisateur non trouvé")
    return ActionResult.ok("Utilisateur récupéré", data=user)


def update_user(actor_id: int, user_id: int, payload: Mapping[str, Any]) -> ActionResult:
    if not is_admin(actor_id):
        return access_denied()
    user: Optional[User] = store.find(EntityType.USER, user_id)
    if user is None:
        return not_found("Utilisateur non trouvé")
    form = UserForm.from_payload(payload, partial=True)
    if not form.validate():
        return validation_error(form)
    values = form.cleaned_data()
    logged = changed_fields(values)

    if "email" in values:
        values["email"] = values["email"].lower()
        if _email_taken(values["email"], exclude_id=user.id):
            return ActionResult.fail(
                ErrorKind.VALIDATION_ERROR, "Un utilisateur avec cet email existe déjà"
            )
    password = values.pop("password", None)
    rejection, department, filiere = _resolve_affiliation(values, current=user)
    if rejection is not None:
        return rejection

    _affiliate(user, department, filiere)
    if password:
        user.set_password(password)
    store.update(user, **values)
    record(
        actor_id,
        ActionType.UPDATE,
        EntityType.USER,
        user,
        user.full_name,
        f"Modification de l'utilisateur {user.full_name}",
        logged,
    )
    return ActionResult.ok("Utilisateur mis à jour avec succès", data=user)


def delete_user(actor_id: int, user_id: int) -> ActionResult:
    """Delete an account together with the séances it teaches.

    Activity entries written by the account are kept with their author
    cleared.
    """
    if not is_admin(actor_id):
        return access_denied()
    if actor_id == user_id:
        return ActionResult.fail(
            ErrorKind.SELF_MODIFICATION_FORBIDDEN,
            "Vous ne pouvez pas supprimer votre propre compte",
        )
    user: Optional[User] = store.find(EntityType.USER, user_id)
    if user is None:
        return not_found("Utilisateur non trouvé")

    name, email = user.full_name, user.email
    seances = len(user.seances_taught)
    store.delete(user)
    current_app.logger.info("User %s deleted with %d seance(s)", email, seances)
    record(
        actor_id,
        ActionType.DELETE,
        EntityType.USER,
        None,
        name,
        f"Suppression de l'utilisateur {name}",
        {"user_id": user_id, "email": email, "seances": seances},
    )
    return ActionResult.ok("Utilisateur supprimé avec succès")


def get_users_by_department(department_id: int) -> ActionResult:
    if store.find(EntityType.DEPARTEMENT, department_id) is None:
        return not_found("Département non trouvé")
    users = store.find_many(
        EntityType.USER,
        User.department_id == department_id,
        order_by=(User.last_name, User.first_name),
    )
    return ActionResult.ok("Utilisateurs du département récupérés", data=users)


def get_users_by_filiere(filiere_id: int) -> ActionResult:
    if store.find(EntityType.FILIERE, filiere_id) is None:
        return not_found("Filière non trouvée")
    users = store.find_many(
        EntityType.USER,
        User.filiere_id == filiere_id,
        order_by=(User.last_name, User.first_name),
    )
    return ActionResult.ok("Utilisateurs de la filière récupérés", data=users)


def assign_role(actor_id: int, user_id: int, role_id: int) -> ActionResult:
    if not is_admin(actor_id):
        return access_denied()
    user: Optional[User] = store.find(EntityType.USER, user_id)
    role: Optional[Role] = store.find(EntityType.ROLE, role_id)
    if user is None or role is None:
        return not_found("Utilisateur ou rôle introuvable")
    if role in user.roles:
        return ActionResult.fail(
            ErrorKind.ALREADY_ASSIGNED, "Ce rôle est déjà attribué à l'utilisateur"
        )

    store.connect_relation(user, "roles", role)
    current_app.logger.info("Role %s granted to user %s", role.type.value, user.id)
    record(
        actor_id,
        ActionType.ASSIGN,
        EntityType.ROLE,
        role,
        role.name,
        f"Attribution du rôle {role.name} à {user.full_name}",
        {"user_id": user.id, "role_type": role.type.value},
    )
    return ActionResult.ok(f"Rôle {role.name} attribué à {user.full_name}", data=user)


def remove_role(actor_id: int, user_id: int, role_id: int) -> ActionResult:
    if not is_admin(actor_id):
        return access_denied()
    user: Optional[User] = store.find(EntityType.USER, user_id)
    role: Optional[Role] = store.find(EntityType.ROLE, role_id)
    if user is None or role is None:
        return not_found("Utilisateur ou rôle introuvable")
    if role not in user.roles:
        return ActionResult.fail(
            ErrorKind.NOT_ASSIGNED, "Ce rôle n'est pas attribué à l'utilisateur"
        )

    store.disconnect_relation(user, "roles", role)
    current_app.logger.info("Role %s revoked from user %s", role.type.value, user.id)
    record(
        actor_id,
        ActionType.UNASSIGN,
        EntityType.ROLE,
        role,
        role.name,
        f"Retrait du rôle {role.name} à {user.full_name}",
        {"user_id": user.id, "role_type": role.type.value},
    )
    return ActionResult.ok(f"Rôle {role.name} retiré à {user.full_name}", data=user)
