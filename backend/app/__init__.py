"""Flask application factory."""

import os
from datetime import timedelta

from flask import Flask, abort, send_from_directory
from flask_cors import CORS

from app.config import DEFAULT_SECRET, Config
from services.session_store import create_session_store


def init_session_store(app):
    """Attach the configured session store to the app."""
    lifetime = app.config["PERMANENT_SESSION_LIFETIME"]
    if not isinstance(lifetime, timedelta):
        lifetime = timedelta(seconds=lifetime)

    store = app.config.get("SESSION_STORE")
    if store is None:
        store = create_session_store(app.config["SESSION_BACKEND"], lifetime)

    app.extensions["session_store"] = store
    app.logger.info(
        f"Using {type(store).__name__} with {lifetime} session lifetime"
    )


def register_static(app):
    """Serve the frontend build from STATIC_DIR, if configured."""
    static_dir = app.config.get("STATIC_DIR")

    @app.route("/")
    def index():
        if not static_dir or not os.path.isfile(os.path.join(static_dir, "index.html")):
            abort(404)
        return send_from_directory(static_dir, "index.html")

    if static_dir:
        @app.route("/<path:filename>")
        def static_files(filename):
            return send_from_directory(static_dir, filename)


def create_app(overrides=None):
    """Create and configure the Flask application."""
    app = Flask(__name__, static_folder=None)
    app.config.from_mapping(Config().to_dict())
    if overrides:
        app.config.from_mapping(overrides)

    if app.config["SECRET_KEY"] == DEFAULT_SECRET and not app.config.get("TESTING"):
        app.logger.warning("SESSION_SECRET not set, using the development secret")

    # Enable CORS for frontend; cookies carry the session
    CORS(app, supports_credentials=True, resources={
        r"/api/*": {
            "origins": app.config["CORS_ORIGINS"],
            "methods": ["GET", "POST", "OPTIONS"],
            "allow_headers": ["Content-Type"]
        }
    })

    init_session_store(app)

    # Register blueprints
    from app.api import auth, boards, sprints
    app.register_blueprint(auth.bp)
    app.register_blueprint(boards.bp)
    app.register_blueprint(sprints.bp)

    @app.route("/healthz")
    def healthz():
        return {"status": "ok"}

    register_static(app)

    return app
