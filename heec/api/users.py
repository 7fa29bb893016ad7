"""User, role membership and filière assignment endpoints."""
from __future__ import annotations

from flask_restx import Namespace, Resource, fields

from ..assignments import assign_teacher_to_filiere
from ..services import users
from .common import current_actor_id, payload, query_params, respond


ns = Namespace("users", description="Comptes utilisateurs")

user_model = ns.model(
    "User",
    {
        "id": fields.Integer(readonly=True),
        "last_name": fields.String(required=True),
        "first_name": fields.String(required=True),
        "email": fields.String(required=True),
        "password": fields.String(required=True, min_length=6),
        "active": fields.Boolean(default=True),
        "department_id": fields.Integer,
        "filiere_id": fields.Integer,
    },
)


@ns.route("")
class UserList(Resource):
    def get(self):
        return respond(users.get_users(query_params()))

    @ns.expect(user_model)
    def post(self):
        return respond(users.create_user(current_actor_id(), payload()), created=True)


@ns.route("/<int:user_id>")
@ns.param("user_id", "Identifiant de l'utilisateur")
class UserResource(Resource):
    def get(self, user_id: int):
        return respond(users.get_user(user_id), detailed=True)

    @ns.expect(user_model)
    def put(self, user_id: int):
        return respond(users.update_user(current_actor_id(), user_id, payload()))

    def delete(self, user_id: int):
        return respond(users.delete_user(current_actor_id(), user_id))


@ns.route("/by-department/<int:department_id>")
class UsersByDepartment(Resource):
    def get(self, department_id: int):
        return respond(users.get_users_by_department(department_id))


@ns.route("/by-filiere/<int:filiere_id>")
class UsersByFiliere(Resource):
    def get(self, filiere_id: int):
        return respond(users.get_users_by_filiere(filiere_id))


@ns.route("/<int:user_id>/roles/<int:role_id>")
class UserRole(Resource):
    def put(self, user_id: int, role_id: int):
        return respond(users.assign_role(current_actor_id(), user_id, role_id))

    def delete(self, user_id: int, role_id: int):
        return respond(users.remove_role(current_actor_id(), user_id, role_id))


@ns.route("/<int:user_id>/filiere/<int:filiere_id>")
class UserFiliere(Resource):
    def put(self, user_id: int, filiere_id: int):
        return respond(assign_teacher_to_filiere(current_actor_id(), user_id, filiere_id))
