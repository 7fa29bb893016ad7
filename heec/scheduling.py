"""Teacher timetable conflict detection."""
from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional

from sqlalchemy import select

from .models import EntityType, Module, Seance, User
from .store import store


def overlaps(
    first_start: datetime,
    first_end: datetime,
    second_start: datetime,
    second_end: datetime,
) -> bool:
    """Half-open interval overlap: touching endpoints do not collide."""
    return first_start < second_end and second_start < first_end


def anchor(day: date, value: datetime | time) -> datetime:
    """Return ``value`` as a timestamp on ``day``."""
    if isinstance(value, datetime):
        value = value.time()
    return datetime.combine(day, value)


def _conflict_query(
    teacher_id: int,
    day: date,
    start_time: datetime,
    end_time: datetime,
    exclude_seance_id: Optional[int] = None,
):
    stmt = select(Seance).where(
        Seance.teacher_id == teacher_id,
        Seance.date == day,
        Seance.start_time < end_time,
        Seance.end_time > start_time,
    )
    if exclude_seance_id is not None:
        stmt = stmt.where(Seance.id != exclude_seance_id)
    return stmt.order_by(Seance.start_time)


def find_conflict(
    teacher_id: int,
    day: date,
    start_time: datetime,
    end_time: datetime,
    exclude_seance_id: Optional[int] = None,
) -> Optional[Seance]:
    return store.first(
        _conflict_query(teacher_id, day, start_time, end_time, exclude_seance_id)
    )


def has_conflict(
    teacher_id: int,
    day: date,
    start_time: datetime,
    end_time: datetime,
    exclude_seance_id: Optional[int] = None,
) -> bool:
    """Return whether the teacher already teaches during ``[start, end)``.

    Only séances on ``day`` are considered. ``exclude_seance_id`` removes a
    séance from the comparison set so that an update does not collide with
    the row being edited.
    """
    return (
        find_conflict(teacher_id, day, start_time, end_time, exclude_seance_id)
        is not None
    )


def available_teachers_for_seance(
    module_id: int,
    day: date,
    start_time: datetime,
    end_time: datetime,
) -> Optional[list[User]]:
    """Eligible active teachers of the module who are free on the slot.

    Returns ``None`` when the module does not exist.
    """
    module: Optional[Module] = store.find(EntityType.MODULE, module_id)
    if module is None:
        return None
    available = [
        teacher
        for teacher in module.teachers
        if teacher.active and not has_conflict(teacher.id, day, start_time, end_time)
    ]
    available.sort(key=lambda teacher: (teacher.last_name.lower(), teacher.first_name.lower()))
    return available
