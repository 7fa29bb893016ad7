from __future__ import annotations

import enum
from datetime import date, datetime, timezone
from typing import Any, List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Table,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from werkzeug.security import check_password_hash, generate_password_hash

from .extensions import db


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class RoleType(str, enum.Enum):
    ENSEIGNANT = "ENSEIGNANT"
    ADMINISTRATEUR = "ADMINISTRATEUR"
    CHEF_DE_FILIERE = "CHEF_DE_FILIERE"
    CHEF_DE_DEPARTEMENT = "CHEF_DE_DEPARTEMENT"
    DIRECTEUR_GENERAL = "DIRECTEUR_GENERAL"


ADMIN_ROLE_TYPES = frozenset({RoleType.ADMINISTRATEUR, RoleType.DIRECTEUR_GENERAL})


class SeanceType(str, enum.Enum):
    COURS = "COURS"
    TD = "TD"
    TP = "TP"
    EXAMEN = "EXAMEN"
    CONFERENCE = "CONFERENCE"
    SEMINAIRE = "SEMINAIRE"


class ActionType(str, enum.Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    ASSIGN = "ASSIGN"
    UNASSIGN = "UNASSIGN"
    ACTIVATE = "ACTIVATE"
    DEACTIVATE = "DEACTIVATE"


class EntityType(str, enum.Enum):
    USER = "USER"
    ROLE = "ROLE"
    DEPARTEMENT = "DEPARTEMENT"
    FILIERE = "FILIERE"
    MODULE = "MODULE"
    SEANCE = "SEANCE"


user_role = Table(
    "user_role",
    db.Model.metadata,
    Column("user_id", ForeignKey("user.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", ForeignKey("role.id", ondelete="CASCADE"), primary_key=True),
)

user_module = Table(
    "user_module",
    db.Model.metadata,
    Column("user_id", ForeignKey("user.id", ondelete="CASCADE"), primary_key=True),
    Column("module_id", ForeignKey("module.id", ondelete="CASCADE"), primary_key=True),
)


class TimeStampedModel:
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)


class Department(db.Model, TimeStampedModel):
    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False, unique=True)
    description: Mapped[Optional[str]] = mapped_column(Text)

    filieres: Mapped[List["Filiere"]] = relationship(
        back_populates="department", order_by="Filiere.name"
    )
    users: Mapped[List["User"]] = relationship(back_populates="department")

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Department {self.name}>"


class Filiere(db.Model, TimeStampedModel):
    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    department_id: Mapped[int] = mapped_column(
        ForeignKey("department.id", ondelete="RESTRICT"), nullable=False, index=True
    )

    department: Mapped[Department] = relationship(back_populates="filieres")
    modules: Mapped[List["Module"]] = relationship(
        back_populates="filiere", order_by="Module.name"
    )
    users: Mapped[List["User"]] = relationship(back_populates="filiere")

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Filiere {self.name}>"


class Module(db.Model, TimeStampedModel):
    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    code: Mapped[str] = mapped_column(String(40), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    credits: Mapped[Optional[int]] = mapped_column(Integer)
    hours: Mapped[Optional[int]] = mapped_column(Integer)
    filiere_id: Mapped[int] = mapped_column(
        ForeignKey("filiere.id", ondelete="RESTRICT"), nullable=False, index=True
    )

    filiere: Mapped[Filiere] = relationship(back_populates="modules")
    teachers: Mapped[List["User"]] = relationship(
        secondary=user_module,
        back_populates="modules",
        order_by="User.last_name",
    )
    seances: Mapped[List["Seance"]] = relationship(
        back_populates="module", order_by="Seance.start_time"
    )

    __table_args__ = (
        CheckConstraint("credits IS NULL OR credits > 0", name="chk_module_credits"),
        CheckConstraint("hours IS NULL OR hours > 0", name="chk_module_hours"),
    )

    def delivered_hours(self) -> float:
        return sum(seance.duration_hours for seance in self.seances)

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Module {self.code}>"


class Role(db.Model, TimeStampedModel):
    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    type: Mapped[RoleType] = mapped_column(Enum(RoleType, name="role_type"), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)

    users: Mapped[List["User"]] = relationship(
        secondary=user_role,
        back_populates="roles",
        order_by="User.last_name",
    )

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Role {self.name} ({self.type.value})>"


class User(db.Model, TimeStampedModel):
    id: Mapped[int] = mapped_column(primary_key=True)
    last_name: Mapped[str] = mapped_column(String(120), nullable=False)
    first_name: Mapped[str] = mapped_column(String(120), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    department_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("department.id", ondelete="SET NULL"), index=True
    )
    filiere_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("filiere.id", ondelete="SET NULL"), index=True
    )

    department: Mapped[Optional[Department]] = relationship(back_populates="users")
    filiere: Mapped[Optional[Filiere]] = relationship(back_populates="users")
    roles: Mapped[List[Role]] = relationship(
        secondary=user_role, back_populates="users", order_by="Role.name"
    )
    modules: Mapped[List[Module]] = relationship(
        secondary=user_module, back_populates="teachers", order_by="Module.name"
    )
    seances_taught: Mapped[List["Seance"]] = relationship(
        back_populates="teacher",
        cascade="all, delete-orphan",
        order_by="Seance.start_time",
    )
    activity_logs: Mapped[List["ActivityLog"]] = relationship(back_populates="user")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    def has_role_type(self, *role_types: RoleType) -> bool:
        wanted = set(role_types)
        return any(role.type in wanted for role in self.roles)

    @property
    def is_teacher(self) -> bool:
        return self.has_role_type(RoleType.ENSEIGNANT)

    @property
    def is_admin(self) -> bool:
        return self.active and self.has_role_type(*ADMIN_ROLE_TYPES)

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<User {self.email}>"


class Seance(db.Model, TimeStampedModel):
    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[Optional[str]] = mapped_column(Text)
    date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    start_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    room: Mapped[Optional[str]] = mapped_column(String(120))
    type: Mapped[SeanceType] = mapped_column(
        Enum(SeanceType, name="seance_type"), nullable=False, default=SeanceType.COURS
    )
    supplement: Mapped[Optional[str]] = mapped_column(Text)
    module_id: Mapped[int] = mapped_column(
        ForeignKey("module.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    teacher_id: Mapped[int] = mapped_column(
        ForeignKey("user.id", ondelete="CASCADE"), nullable=False, index=True
    )

    module: Mapped[Module] = relationship(back_populates="seances")
    teacher: Mapped[User] = relationship(back_populates="seances_taught")

    __table_args__ = (
        CheckConstraint("end_time > start_time", name="chk_seance_time_order"),
    )

    @property
    def duration_hours(self) -> float:
        delta = self.end_time - self.start_time
        return delta.total_seconds() / 3600

    def as_event(self) -> dict[str, object]:
        return {
            "id": self.id,
            "title": f"{self.module.code} - {self.title}",
            "start": self.start_time.isoformat(),
            "end": self.end_time.isoformat(),
            "extendedProps": {
                "type": self.type.value,
                "room": self.room,
                "teacher": self.teacher.full_name,
                "module": self.module.name,
            },
        }

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<Seance {self.title} {self.start_time:%Y-%m-%d %H:%M}>"


class ActivityLog(db.Model):
    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("user.id", ondelete="SET NULL"), index=True
    )
    action: Mapped[ActionType] = mapped_column(Enum(ActionType, name="action_type"), nullable=False)
    entity_type: Mapped[EntityType] = mapped_column(
        Enum(EntityType, name="entity_type"), nullable=False
    )
    entity_id: Mapped[Optional[int]] = mapped_column(Integer)
    entity_name: Mapped[Optional[str]] = mapped_column(String(255))
    description: Mapped[str] = mapped_column(Text, nullable=False)
    details: Mapped[Optional[dict[str, Any]]] = mapped_column("metadata", JSON)
    ip_address: Mapped[Optional[str]] = mapped_column(String(64))
    user_agent: Mapped[Optional[str]] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, index=True)

    user: Mapped[Optional[User]] = relationship(back_populates="activity_logs")

    def __repr__(self) -> str:  # pragma: no cover - debug helper
        return f"<ActivityLog {self.action.value} {self.entity_type.value}>"
