"""REST API definition using Flask-RESTX."""
from __future__ import annotations

from flask import Blueprint, current_app
from flask_restx import Api

from ..results import StorageError
from .admin import ns as admin_ns
from .auth import ns as auth_ns
from .departments import ns as departments_ns
from .filieres import ns as filieres_ns
from .health import ns as health_ns
from .modules import ns as modules_ns
from .roles import ns as roles_ns
from .seances import ns as seances_ns
from .users import ns as users_ns


def register_namespaces(api: Api) -> None:
    """Register all API namespaces."""
    api.add_namespace(health_ns, path="/health")
    api.add_namespace(auth_ns, path="/auth")
    api.add_namespace(departments_ns, path="/departments")
    api.add_namespace(filieres_ns, path="/filieres")
    api.add_namespace(modules_ns, path="/modules")
    api.add_namespace(seances_ns, path="/seances")
    api.add_namespace(users_ns, path="/users")
    api.add_namespace(roles_ns, path="/roles")
    api.add_namespace(admin_ns, path="/admin")


def create_api_blueprint() -> Blueprint:
    """Build a fresh blueprint so that every application owns its ``Api``."""
    blueprint = Blueprint("api", __name__)
    api = Api(
        blueprint,
        title="HEEC Manager API",
        version="1.0",
        description="Gestion des départements, filières, modules, séances et enseignants",
        doc="/docs",
    )
    register_namespaces(api)

    @api.errorhandler(StorageError)
    def handle_storage_error(error: StorageError):
        current_app.logger.exception("Storage failure: %s", error)
        return {
            "success": False,
            "message": "Service de données indisponible",
            "data": None,
            "error": "STORAGE_ERROR",
        }, 503

    return blueprint
