"""Module endpoints, including teacher assignment."""
from __future__ import annotations

from flask_restx import Namespace, Resource, fields

from ..assignments import assign_teacher_to_module, unassign_teacher_from_module
from ..services import modules
from .common import current_actor_id, payload, query_params, respond


ns = Namespace("modules", description="Modules d'enseignement")

module_model = ns.model(
    "Module",
    {
        "id": fields.Integer(readonly=True),
        "name": fields.String(required=True),
        "code": fields.String(required=True),
        "description": fields.String,
        "credits": fields.Integer(min=1),
        "hours": fields.Integer(min=1),
        "filiere_id": fields.Integer(required=True),
    },
)


@ns.route("")
class ModuleList(Resource):
    def get(self):
        return respond(modules.get_modules(query_params()))

    @ns.expect(module_model)
    def post(self):
        return respond(modules.create_module(current_actor_id(), payload()), created=True)


@ns.route("/all")
class ModuleChoices(Resource):
    def get(self):
        return respond(modules.get_all_modules())


@ns.route("/by-filiere/<int:filiere_id>")
class ModulesByFiliere(Resource):
    def get(self, filiere_id: int):
        return respond(modules.get_modules_by_filiere(filiere_id))


@ns.route("/by-teacher/<int:teacher_id>")
class ModulesByTeacher(Resource):
    def get(self, teacher_id: int):
        return respond(modules.get_modules_by_teacher(teacher_id))


@ns.route("/<int:module_id>")
@ns.param("module_id", "Identifiant du module")
class ModuleResource(Resource):
    def get(self, module_id: int):
        return respond(modules.get_module(module_id), detailed=True)

    @ns.expect(module_model)
    def put(self, module_id: int):
        return respond(modules.update_module(current_actor_id(), module_id, payload()))

    def delete(self, module_id: int):
        return respond(modules.delete_module(current_actor_id(), module_id))


@ns.route("/<int:module_id>/stats")
class ModuleStats(Resource):
    def get(self, module_id: int):
        return respond(modules.get_module_stats(module_id))


@ns.route("/<int:module_id>/teachers/<int:teacher_id>")
class ModuleTeacher(Resource):
    def put(self, module_id: int, teacher_id: int):
        return respond(assign_teacher_to_module(current_actor_id(), teacher_id, module_id))

    def delete(self, module_id: int, teacher_id: int):
        return respond(unassign_teacher_from_module(current_actor_id(), teacher_id, module_id))
