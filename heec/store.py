"""Thin persistence gateway over the Flask-SQLAlchemy session.

Every write commits immediately; any SQLAlchemy failure rolls the session back
and surfaces as :class:`~heec.results.StorageError`.
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql import Select

from .extensions import db
from .models import Department, EntityType, Filiere, Module, Role, Seance, User
from .results import StorageError


MODELS: dict[EntityType, type] = {
    EntityType.USER: User,
    EntityType.ROLE: Role,
    EntityType.DEPARTEMENT: Department,
    EntityType.FILIERE: Filiere,
    EntityType.MODULE: Module,
    EntityType.SEANCE: Seance,
}


class EntityStore:
    @property
    def session(self):
        return db.session

    @contextmanager
    def _guard(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StorageError(f"Échec de l'opération « {action} » : {exc}") from exc

    def find(self, entity_type: EntityType, entity_id: Optional[int]) -> Any:
        if entity_id is None:
            return None
        with self._guard("lecture"):
            return self.session.get(MODELS[entity_type], entity_id)

    def find_many(
        self,
        entity_type: EntityType,
        *criteria: Any,
        order_by: Sequence[Any] = (),
    ) -> list[Any]:
        stmt = select(MODELS[entity_type]).where(*criteria).order_by(*order_by)
        with self._guard("lecture"):
            return list(self.session.scalars(stmt).all())

    def first(self, stmt: Select) -> Any:
        with self._guard("lecture"):
            return self.session.scalars(stmt.limit(1)).first()

    def count(self, entity_type: EntityType, *criteria: Any) -> int:
        model = MODELS[entity_type]
        stmt = select(func.count()).select_from(model).where(*criteria)
        with self._guard("comptage"):
            return int(self.session.scalar(stmt) or 0)

    def paginate(self, stmt: Select, page: int, limit: int) -> tuple[list[Any], dict[str, int]]:
        with self._guard("pagination"):
            pagination = db.paginate(stmt, page=page, per_page=limit, error_out=False)
        return list(pagination.items), {
            "page": page,
            "limit": limit,
            "total": pagination.total or 0,
            "total_pages": pagination.pages,
        }

    def create(self, entity_type: EntityType, **values: Any) -> Any:
        instance = MODELS[entity_type](**values)
        with self._guard("création"):
            self.session.add(instance)
            self.session.commit()
        return instance

    def add(self, instance: Any) -> Any:
        with self._guard("création"):
            self.session.add(instance)
            self.session.commit()
        return instance

    def update(self, instance: Any, **patch: Any) -> Any:
        with self._guard("mise à jour"):
            for attr, value in patch.items():
                setattr(instance, attr, value)
            self.session.commit()
        return instance

    def commit(self) -> None:
        with self._guard("enregistrement"):
            self.session.commit()

    def delete(self, instance: Any) -> None:
        with self._guard("suppression"):
            self.session.delete(instance)
            self.session.commit()

    def connect_relation(self, instance: Any, relation_name: str, target: Any) -> None:
        with self._guard("liaison"):
            collection = getattr(instance, relation_name)
            if target not in collection:
                collection.append(target)
            self.session.commit()

    def disconnect_relation(self, instance: Any, relation_name: str, target: Any) -> None:
        with self._guard("déliaison"):
            collection = getattr(instance, relation_name)
            if target in collection:
                collection.remove(target)
            self.session.commit()


store = EntityStore()
