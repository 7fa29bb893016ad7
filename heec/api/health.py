"""Healthcheck endpoint."""
from __future__ import annotations

from flask import current_app
from flask_restx import Namespace, Resource
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ..activity import recorder
from ..extensions import db


ns = Namespace("health", description="Service health status")


@ns.route("")
class HealthResource(Resource):
    """Database connectivity and dropped activity entries."""

    def get(self) -> dict[str, object]:
        try:
            db.session.execute(text("SELECT 1"))
            db_ok = "ok"
        except SQLAlchemyError:
            db.session.rollback()
            current_app.logger.exception("Database healthcheck failed")
            db_ok = "error"
        return {
            "status": "ok",
            "database": db_ok,
            "dropped_activity_entries": recorder.dropped_entries,
        }
