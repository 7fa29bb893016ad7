import click
from flask import Flask
from flask.cli import with_appcontext

from .config import Config, _normalise_prefix
from .extensions import db, migrate


def create_app(config_class: type[Config] = Config) -> Flask:
    app = Flask(__name__, static_folder=None)
    app.config.from_object(config_class)

    url_prefix = _normalise_prefix(app.config.get("URL_PREFIX", ""))
    app.config["URL_PREFIX"] = url_prefix

    db.init_app(app)
    migrate.init_app(app, db)

    from . import models  # noqa: F401  # Ensure models registered for migrations

    with app.app_context():
        db.create_all()

    from .api import create_api_blueprint

    app.register_blueprint(create_api_blueprint(), url_prefix=f"{url_prefix}/api")

    @app.cli.command("seed")
    @with_appcontext
    def seed() -> None:
        """Create the default roles."""
        from .auth import ensure_role
        from .labels import ROLE_LABELS, role_description

        for role_type, name in ROLE_LABELS.items():
            ensure_role(role_type, name, role_description(role_type))
        click.echo(f"{len(ROLE_LABELS)} rôle(s) disponible(s).")

    @app.cli.command("bootstrap-admin")
    @click.option("--email", default=None, help="Defaults to BOOTSTRAP_ADMIN_EMAIL.")
    @click.option("--password", default=None, help="Defaults to BOOTSTRAP_ADMIN_PASSWORD.")
    @with_appcontext
    def bootstrap_admin_command(email, password) -> None:
        """Provision the first administrator account."""
        from .auth import bootstrap_admin

        email = email or app.config.get("BOOTSTRAP_ADMIN_EMAIL")
        password = password or app.config.get("BOOTSTRAP_ADMIN_PASSWORD")
        if not email or not password:
            raise click.UsageError(
                "BOOTSTRAP_ADMIN_EMAIL et BOOTSTRAP_ADMIN_PASSWORD doivent être définis."
            )
        user = bootstrap_admin(email, password)
        app.logger.info("Bootstrap administrator %s ready", user.email)
        click.echo(f"Administrateur {user.email} prêt.")

    return app


__all__ = ["create_app", "db"]
