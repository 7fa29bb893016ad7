"""Administrator dashboard endpoints."""
from __future__ import annotations

from flask_restx import Namespace, Resource

from ..services import admin
from .common import current_actor_id, query_params, respond


ns = Namespace("admin", description="Administration des comptes et journal d'activité")


@ns.route("/users")
class AdminUsers(Resource):
    def get(self):
        return respond(admin.get_all_users_for_admin(current_actor_id()))


@ns.route("/users/<int:user_id>/toggle-active")
@ns.param("user_id", "Identifiant de l'utilisateur")
class ToggleActive(Resource):
    def post(self, user_id: int):
        return respond(admin.toggle_active_status(current_actor_id(), user_id))


@ns.route("/activity-logs")
class ActivityLogs(Resource):
    @ns.doc(
        params={
            "user_id": "Auteur",
            "action": "Type d'action",
            "entity_type": "Type d'entité",
            "start_date": "YYYY-MM-DD",
            "end_date": "YYYY-MM-DD",
            "page": "Page",
            "limit": "Taille de page",
        }
    )
    def get(self):
        return respond(admin.get_activity_logs(current_actor_id(), query_params()))
