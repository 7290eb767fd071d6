"""Flask application factory, CLI entry points, and database bootstrap."""

import os
import sqlite3

import click
from flask import Flask
from flask_compress import Compress
from flask_talisman import Talisman
from sqlalchemy import event
from sqlalchemy.engine import Engine

from dotenv import load_dotenv; load_dotenv()

from config import Config, INSTANCE_DIR as CONFIG_INSTANCE_DIR
from extensions import db, migrate, csrf, limiter, login_manager
from utils.error_handlers import register_error_handlers
from utils.errors import AppError, AuthenticationError
from utils.logging_config import configure_logging, register_request_id


def _configure_login_manager(app: Flask) -> None:
    """Bind Flask-Login to the game-tracker-session cookie."""
    login_manager.init_app(app)
    # Identity is re-read from the session cookie on every request; Flask's own
    # session only carries the CSRF token, so there is nothing to protect there.
    login_manager.session_protection = None

    @login_manager.request_loader
    def _load_user_from_request(req):
        from routes.base import get_store
        from services.auth_sessions import SESSION_COOKIE_NAME, validate_session

        return validate_session(get_store(), req.cookies.get(SESSION_COOKIE_NAME))

    @login_manager.unauthorized_handler
    def _unauthorized():
        raise AuthenticationError("Not authenticated")


# ---------------------------------------------------------------------------
# Extension bootstrap helpers
# ---------------------------------------------------------------------------

def _safe_init_sqlalchemy(app: Flask):
    """Initialise SQLAlchemy only if it has not been bound yet."""
    if not getattr(app, "extensions", None) or "sqlalchemy" not in app.extensions:
        db.init_app(app)


def _safe_init_migrate(app: Flask):
    """Bind Flask-Migrate; batch mode keeps ALTERs working on SQLite."""
    if not getattr(app, "extensions", None) or "migrate" not in app.extensions:
        migrate.init_app(app, db, render_as_batch=True)


def _register_cli(app: Flask) -> None:
    from services.auth_sessions import cleanup_expired_sessions
    from services.store import TrackerStore
    from services.user_service import register_player

    @app.cli.group("players")
    def players_cli():
        """Manage Game Tracker players."""

    @players_cli.command("create")
    @click.argument("username")
    def create_player(username):
        try:
            player = register_player(TrackerStore(db.session), username)
        except AppError as exc:
            raise click.ClickException(exc.message)
        click.echo(f"Created player {player.username} (id={player.id}).")

    @app.cli.group("auth-sessions")
    def auth_sessions_cli():
        """Maintain login sessions."""

    @auth_sessions_cli.command("cleanup")
    def cleanup_sessions():
        removed = cleanup_expired_sessions(TrackerStore(db.session))
        click.echo(f"Removed {removed} expired session(s).")

    @app.cli.command("seed-demo")
    def seed_demo():
        """Load demo players, games and results."""
        from seeds.seed_demo import seed_demo_data

        created = seed_demo_data(TrackerStore(db.session))
        click.echo(
            "Seeded {players} player(s), {games} game(s), {results} result(s).".format(**created)
        )


def create_app():
    """Create, configure, and return a fully-initialised Flask app."""
    app = Flask(
        __name__,
        instance_path=str(CONFIG_INSTANCE_DIR),
        instance_relative_config=False,
    )
    app.config.from_object(Config)
    os.makedirs(app.instance_path, exist_ok=True)
    configure_logging(app)

    # --- Core extensions ---
    _safe_init_sqlalchemy(app)
    _safe_init_migrate(app)
    _configure_login_manager(app)
    csrf.init_app(app)
    limiter.init_app(app)
    Compress(app)

    if app.config.get("ENABLE_TALISMAN", True):
        Talisman(
            app,
            content_security_policy=app.config.get("CONTENT_SECURITY_POLICY"),
            force_https=app.config.get("TALISMAN_FORCE_HTTPS", not app.debug),
            session_cookie_secure=app.config.get("SESSION_COOKIE_SECURE", True),
            session_cookie_samesite=app.config.get("SESSION_COOKIE_SAMESITE", "Lax"),
        )

    with app.app_context():
        # Import models after db is bound
        import models  # noqa: F401

        if app.config.get("AUTO_CREATE_TABLES"):
            db.create_all()

    # Blueprints
    from routes import api_bp, register_routes

    register_routes()
    app.register_blueprint(api_bp)

    register_error_handlers(app)
    register_request_id(app)
    _register_cli(app)

    app.logger.info("Game Tracker started (debug=%s)", app.debug)
    return app


# Single SQLite PRAGMA hook (avoid duplicate listeners)
_SQLITE_PRAGMA_STATEMENTS = (
    "PRAGMA foreign_keys=ON;",
    "PRAGMA journal_mode=WAL;",
    "PRAGMA synchronous=NORMAL;",
)


def _apply_sqlite_pragmas(dbapi_connection) -> None:
    """Execute the configured PRAGMAs if this is a SQLite connection."""
    if not isinstance(dbapi_connection, sqlite3.Connection):
        return
    cur = dbapi_connection.cursor()
    try:
        for statement in _SQLITE_PRAGMA_STATEMENTS:
            cur.execute(statement)
    finally:
        cur.close()


@event.listens_for(Engine, "connect")
def _sqlite_pragmas(dbapi_connection, _) -> None:
    """Turn on foreign keys (and WAL) each time SQLite opens a connection."""
    _apply_sqlite_pragmas(dbapi_connection)


if __name__ == "__main__":
    _app = create_app()
    _app.run(host="127.0.0.1", port=5000, debug=True)
