"""Filière endpoints."""
from __future__ import annotations

from flask_restx import Namespace, Resource, fields

from ..services import filieres
from .common import current_actor_id, payload, query_params, respond


ns = Namespace("filieres", description="Filières rattachées aux départements")

filiere_model = ns.model(
    "Filiere",
    {
        "id": fields.Integer(readonly=True),
        "name": fields.String(required=True),
        "description": fields.String,
        "department_id": fields.Integer(required=True),
    },
)


@ns.route("")
class FiliereList(Resource):
    def get(self):
        return respond(filieres.get_filieres(query_params()))

    @ns.expect(filiere_model)
    def post(self):
        return respond(filieres.create_filiere(current_actor_id(), payload()), created=True)


@ns.route("/all")
class FiliereChoices(Resource):
    def get(self):
        return respond(filieres.get_all_filieres())


@ns.route("/by-department/<int:department_id>")
class FilieresByDepartment(Resource):
    def get(self, department_id: int):
        return respond(filieres.get_filieres_by_department(department_id))


@ns.route("/<int:filiere_id>")
@ns.param("filiere_id", "Identifiant de la filière")
class FiliereResource(Resource):
    def get(self, filiere_id: int):
        return respond(filieres.get_filiere(filiere_id), detailed=True)

    @ns.expect(filiere_model)
    def put(self, filiere_id: int):
        return respond(filieres.update_filiere(current_actor_id(), filiere_id, payload()))

    def delete(self, filiere_id: int):
        return respond(filieres.delete_filiere(current_actor_id(), filiere_id))


@ns.route("/<int:filiere_id>/stats")
class FiliereStats(Resource):
    def get(self, filiere_id: int):
        return respond(filieres.get_filiere_stats(filiere_id))
