"""Session login and logout."""
from __future__ import annotations

from flask import current_app, session
from flask_restx import Namespace, Resource, fields

from ..activity import recorder
from ..auth import authenticate
from ..models import ActionType, EntityType
from ..results import ActionResult, ErrorKind
from ..store import store
from .common import current_actor_id, payload, respond


ns = Namespace("auth", description="Ouverture et fermeture de session")

credentials_model = ns.model(
    "Credentials",
    {
        "email": fields.String(required=True),
        "password": fields.String(required=True),
    },
)


@ns.route("/login")
class Login(Resource):
    @ns.expect(credentials_model)
    def post(self):
        body = payload()
        user = authenticate(body.get("email", ""), body.get("password", ""))
        if user is None:
            current_app.logger.warning("Failed login for %s", body.get("email"))
            return {
                "success": False,
                "message": "Email ou mot de passe incorrect",
                "data": None,
                "error": ErrorKind.ACCESS_DENIED.value,
            }, 401

        session.clear()
        session["user_id"] = user.id
        recorder.record(
            user.id,
            ActionType.LOGIN,
            EntityType.USER,
            f"Connexion de {user.full_name}",
            entity_id=user.id,
            entity_name=user.full_name,
        )
        return respond(ActionResult.ok("Connexion réussie", data=user))


@ns.route("/logout")
class Logout(Resource):
    def post(self):
        user = store.find(EntityType.USER, current_actor_id())
        session.clear()
        if user is not None:
            recorder.record(
                user.id,
                ActionType.LOGOUT,
                EntityType.USER,
                f"Déconnexion de {user.full_name}",
                entity_id=user.id,
                entity_name=user.full_name,
            )
        return respond(ActionResult.ok("Déconnexion réussie"))


@ns.route("/me")
class CurrentUser(Resource):
    def get(self):
        user = store.find(EntityType.USER, current_actor_id())
        if user is None:
            return respond(ActionResult.fail(ErrorKind.ACCESS_DENIED, "Non connecté"))
        return respond(ActionResult.ok("Utilisateur connecté", data=user), detailed=True)
