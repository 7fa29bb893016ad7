"""JSON views of the ORM entities."""
from __future__ import annotations

from datetime import date, datetime
from typing import Any

from ..labels import action_label, entity_label, role_color, role_label, seance_type_label
from ..models import ActivityLog, Department, Filiere, Module, Role, Seance, User


def _iso(value: date | datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def serialize_department(department: Department, *, detailed: bool = False) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": department.id,
        "name": department.name,
        "description": department.description,
        "created_at": _iso(department.created_at),
        "updated_at": _iso(department.updated_at),
        "filieres_count": len(department.filieres),
        "users_count": len(department.users),
    }
    if detailed:
        data["filieres"] = [
            {"id": filiere.id, "name": filiere.name} for filiere in department.filieres
        ]
        data["users"] = [
            {"id": user.id, "full_name": user.full_name, "email": user.email}
            for user in department.users
        ]
    return data


def serialize_filiere(filiere: Filiere, *, detailed: bool = False) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": filiere.id,
        "name": filiere.name,
        "description": filiere.description,
        "department_id": filiere.department_id,
        "department": filiere.department.name if filiere.department else None,
        "created_at": _iso(filiere.created_at),
        "updated_at": _iso(filiere.updated_at),
        "modules_count": len(filiere.modules),
        "users_count": len(filiere.users),
    }
    if detailed:
        data["modules"] = [
            {"id": module.id, "code": module.code, "name": module.name}
            for module in filiere.modules
        ]
    return data


def serialize_module(module: Module, *, detailed: bool = False) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": module.id,
        "name": module.name,
        "code": module.code,
        "description": module.description,
        "credits": module.credits,
        "hours": module.hours,
        "filiere_id": module.filiere_id,
        "filiere": module.filiere.name if module.filiere else None,
        "created_at": _iso(module.created_at),
        "updated_at": _iso(module.updated_at),
        "teachers": [
            {"id": teacher.id, "full_name": teacher.full_name} for teacher in module.teachers
        ],
        "seances_count": len(module.seances),
    }
    if detailed:
        data["seances"] = [serialize_seance(seance) for seance in module.seances]
    return data


def serialize_seance(seance: Seance) -> dict[str, Any]:
    return {
        "id": seance.id,
        "title": seance.title,
        "content": seance.content,
        "date": _iso(seance.date),
        "start_time": _iso(seance.start_time),
        "end_time": _iso(seance.end_time),
        "duration_hours": round(seance.duration_hours, 2),
        "room": seance.room,
        "type": seance.type.value,
        "type_label": seance_type_label(seance.type),
        "supplement": seance.supplement,
        "module_id": seance.module_id,
        "module": seance.module.name if seance.module else None,
        "teacher_id": seance.teacher_id,
        "teacher": seance.teacher.full_name if seance.teacher else None,
    }


def serialize_role(role: Role) -> dict[str, Any]:
    return {
        "id": role.id,
        "name": role.name,
        "type": role.type.value,
        "label": role_label(role.type),
        "color": role_color(role.type),
        "description": role.description,
        "users_count": len(role.users),
    }


def serialize_user(user: User, *, detailed: bool = False) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": user.id,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "full_name": user.full_name,
        "email": user.email,
        "active": user.active,
        "department_id": user.department_id,
        "department": user.department.name if user.department else None,
        "filiere_id": user.filiere_id,
        "filiere": user.filiere.name if user.filiere else None,
        "roles": [{"id": role.id, "name": role.name, "type": role.type.value} for role in user.roles],
        "created_at": _iso(user.created_at),
    }
    if detailed:
        data["modules"] = [
            {"id": module.id, "code": module.code, "name": module.name} for module in user.modules
        ]
        data["seances_count"] = len(user.seances_taught)
    return data


def serialize_activity(entry: ActivityLog) -> dict[str, Any]:
    return {
        "id": entry.id,
        "user_id": entry.user_id,
        "user": entry.user.full_name if entry.user else None,
        "action": entry.action.value,
        "action_label": action_label(entry.action),
        "entity_type": entry.entity_type.value,
        "entity_label": entity_label(entry.entity_type),
        "entity_id": entry.entity_id,
        "entity_name": entry.entity_name,
        "description": entry.description,
        "metadata": entry.details,
        "ip_address": entry.ip_address,
        "user_agent": entry.user_agent,
        "created_at": _iso(entry.created_at),
    }


_SERIALIZERS = {
    Department: serialize_department,
    Filiere: serialize_filiere,
    Module: serialize_module,
    Seance: serialize_seance,
    Role: serialize_role,
    User: serialize_user,
    ActivityLog: serialize_activity,
}


def to_json(value: Any, *, detailed: bool = False) -> Any:
    """Recursively turn service results into JSON-compatible values."""
    serializer = _SERIALIZERS.get(type(value))
    if serializer is not None:
        if detailed and serializer in (
            serialize_department,
            serialize_filiere,
            serialize_module,
            serialize_user,
        ):
            return serializer(value, detailed=True)
        return serializer(value)
    if isinstance(value, dict):
        return {key: to_json(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json(item) for item in value]
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value
