"""Séance endpoints."""
from __future__ import annotations

from datetime import date, time
from typing import Optional

from flask import request
from flask_restx import Namespace, Resource, fields

from ..results import ActionResult, ErrorKind
from ..services import seances
from .common import current_actor_id, payload, query_params, respond


ns = Namespace("seances", description="Séances programmées")

seance_model = ns.model(
    "Seance",
    {
        "id": fields.Integer(readonly=True),
        "title": fields.String(required=True),
        "content": fields.String,
        "date": fields.String(required=True, description="YYYY-MM-DD"),
        "start_time": fields.String(required=True, description="HH:MM"),
        "end_time": fields.String(required=True, description="HH:MM"),
        "room": fields.String,
        "type": fields.String(enum=["COURS", "TD", "TP", "EXAMEN", "CONFERENCE", "SEMINAIRE"]),
        "supplement": fields.String,
        "module_id": fields.Integer(required=True),
        "teacher_id": fields.Integer(required=True),
    },
)


def _invalid(message: str) -> ActionResult:
    return ActionResult.fail(ErrorKind.VALIDATION_ERROR, message)


def _date_arg(name: str) -> Optional[date]:
    raw = request.args.get(name)
    return date.fromisoformat(raw) if raw else None


@ns.route("")
class SeanceList(Resource):
    def get(self):
        return respond(seances.get_seances(query_params()))

    @ns.expect(seance_model)
    def post(self):
        return respond(seances.create_seance(current_actor_id(), payload()), created=True)


@ns.route("/<int:seance_id>")
@ns.param("seance_id", "Identifiant de la séance")
class SeanceResource(Resource):
    def get(self, seance_id: int):
        return respond(seances.get_seance(seance_id))

    @ns.expect(seance_model)
    def put(self, seance_id: int):
        return respond(seances.update_seance(current_actor_id(), seance_id, payload()))

    def delete(self, seance_id: int):
        return respond(seances.delete_seance(current_actor_id(), seance_id))


@ns.route("/by-module/<int:module_id>")
class SeancesByModule(Resource):
    def get(self, module_id: int):
        return respond(seances.get_seances_by_module(module_id))


@ns.route("/by-teacher/<int:teacher_id>")
class SeancesByTeacher(Resource):
    @ns.doc(params={"start_date": "YYYY-MM-DD", "end_date": "YYYY-MM-DD"})
    def get(self, teacher_id: int):
        try:
            start_date, end_date = _date_arg("start_date"), _date_arg("end_date")
        except ValueError:
            return respond(_invalid("Date invalide"))
        return respond(seances.get_seances_by_teacher(teacher_id, start_date, end_date))


@ns.route("/by-teacher/<int:teacher_id>/events")
class TeacherCalendar(Resource):
    """Calendar events for a teacher's timetable."""

    @ns.doc(params={"start_date": "YYYY-MM-DD", "end_date": "YYYY-MM-DD"})
    def get(self, teacher_id: int):
        try:
            start_date, end_date = _date_arg("start_date"), _date_arg("end_date")
        except ValueError:
            return respond(_invalid("Date invalide"))
        result = seances.get_seances_by_teacher(teacher_id, start_date, end_date)
        if not result.success:
            return respond(result)
        return [seance.as_event() for seance in result.data]


@ns.route("/by-date/<string:day>")
class SeancesByDate(Resource):
    def get(self, day: str):
        try:
            parsed = date.fromisoformat(day)
        except ValueError:
            return respond(_invalid("Date invalide"))
        return respond(seances.get_seances_by_date(parsed))


@ns.route("/available-teachers")
class AvailableTeachers(Resource):
    @ns.doc(params={"module_id": "Module", "date": "YYYY-MM-DD", "start_time": "HH:MM", "end_time": "HH:MM"})
    def get(self):
        try:
            module_id = int(request.args["module_id"])
            day = date.fromisoformat(request.args["date"])
            start = time.fromisoformat(request.args["start_time"])
            end = time.fromisoformat(request.args["end_time"])
        except (KeyError, ValueError):
            return respond(_invalid("Paramètres module_id, date, start_time et end_time requis"))
        return respond(seances.get_available_teachers(module_id, day, start, end))
