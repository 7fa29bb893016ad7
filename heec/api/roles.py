"""Role endpoints."""
from __future__ import annotations

from flask_restx import Namespace, Resource, fields

from ..models import RoleType
from ..services import roles
from .common import current_actor_id, payload, query_params, respond


ns = Namespace("roles", description="Rôles et permissions")

role_model = ns.model(
    "Role",
    {
        "id": fields.Integer(readonly=True),
        "name": fields.String(required=True),
        "type": fields.String(required=True, enum=[member.value for member in RoleType]),
        "description": fields.String,
    },
)


@ns.route("")
class RoleList(Resource):
    def get(self):
        return respond(roles.get_roles(query_params()))

    @ns.expect(role_model)
    def post(self):
        return respond(roles.create_role(current_actor_id(), payload()), created=True)


@ns.route("/all")
class RoleChoices(Resource):
    def get(self):
        return respond(roles.get_all_roles())


@ns.route("/by-type/<string:role_type>")
class RolesByType(Resource):
    def get(self, role_type: str):
        return respond(roles.get_roles_by_type(role_type.upper()))


@ns.route("/<int:role_id>")
@ns.param("role_id", "Identifiant du rôle")
class RoleResource(Resource):
    def get(self, role_id: int):
        return respond(roles.get_role(role_id))

    @ns.expect(role_model)
    def put(self, role_id: int):
        return respond(roles.update_role(current_actor_id(), role_id, payload()))

    def delete(self, role_id: int):
        return respond(roles.delete_role(current_actor_id(), role_id))
