"""Role-based authorisation and account bootstrap."""
from __future__ import annotations

from typing import Optional

from sqlalchemy import func, select

from .models import EntityType, Role, RoleType, User
from .store import store


def is_admin(user_id: Optional[int]) -> bool:
    """Return ``True`` when ``user_id`` is an active administrator.

    Administrators hold an ``ADMINISTRATEUR`` or ``DIRECTEUR_GENERAL`` role.
    Unknown or inactive accounts are never administrators.
    """
    user = store.find(EntityType.USER, user_id)
    if user is None:
        return False
    return user.is_admin


def find_user_by_email(email: str) -> Optional[User]:
    normalised = (email or "").strip().lower()
    if not normalised:
        return None
    return store.first(select(User).where(func.lower(User.email) == normalised))


def authenticate(email: str, password: str) -> Optional[User]:
    user = find_user_by_email(email)
    if user is None or not user.active:
        return None
    if not user.check_password(password or ""):
        return None
    return user


def ensure_role(role_type: RoleType, name: str, description: Optional[str] = None) -> Role:
    role = store.first(select(Role).where(Role.type == role_type).order_by(Role.id))
    if role is None:
        role = store.create(
            EntityType.ROLE, name=name, type=role_type, description=description
        )
    return role


def bootstrap_admin(email: str, password: str, *, first_name: str = "Admin", last_name: str = "HEEC") -> User:
    """Create or reactivate the configured bootstrap administrator.

    The account is granted the ``ADMINISTRATEUR`` role; from then on it is
    authorised like any other administrator.
    """
    role = ensure_role(RoleType.ADMINISTRATEUR, "Administrateur")
    user = find_user_by_email(email)
    if user is None:
        user = User(
            first_name=first_name,
            last_name=last_name,
            email=email.strip().lower(),
            active=True,
        )
        user.set_password(password)
        store.add(user)
    elif not user.active:
        store.update(user, active=True)
    if role not in user.roles:
        store.connect_relation(user, "roles", role)
    return user

