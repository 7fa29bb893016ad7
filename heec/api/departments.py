"""Department endpoints."""
from __future__ import annotations

from flask_restx import Namespace, Resource, fields

from ..services import departments
from .common import current_actor_id, payload, query_params, respond


ns = Namespace("departments", description="Départements de l'établissement")

department_model = ns.model(
    "Department",
    {
        "id": fields.Integer(readonly=True),
        "name": fields.String(required=True),
        "description": fields.String,
    },
)


@ns.route("")
class DepartmentList(Resource):
    @ns.doc(params={"page": "Page", "limit": "Taille de page", "search": "Recherche", "sort_by": "Colonne", "sort_order": "asc ou desc"})
    def get(self):
        return respond(departments.get_departments(query_params()))

    @ns.expect(department_model)
    def post(self):
        return respond(departments.create_department(current_actor_id(), payload()), created=True)


@ns.route("/all")
class DepartmentChoices(Resource):
    def get(self):
        return respond(departments.get_all_departments())


@ns.route("/<int:department_id>")
@ns.param("department_id", "Identifiant du département")
class DepartmentResource(Resource):
    def get(self, department_id: int):
        return respond(departments.get_department(department_id), detailed=True)

    @ns.expect(department_model)
    def put(self, department_id: int):
        return respond(
            departments.update_department(current_actor_id(), department_id, payload())
        )

    def delete(self, department_id: int):
        return respond(departments.delete_department(current_actor_id(), department_id))


@ns.route("/<int:department_id>/stats")
class DepartmentStats(Resource):
    def get(self, department_id: int):
        return respond(departments.get_department_stats(department_id))
