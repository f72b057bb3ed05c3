"""
API gateway: combines the auth, events and announcements blueprints, the
diagnostic endpoints and the static pages into one Flask app.
This is the local entrypoint for development.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from flask import Flask, Response, jsonify, send_from_directory
from flask_cors import CORS
from pymongo.database import Database
from pymongo.errors import PyMongoError
from werkzeug.exceptions import HTTPException

from bethel_backend.announcements_service.routes import announcements_bp
from bethel_backend.auth_service.routes import auth_bp
from bethel_backend.auth_service.utils import TokenIssuer
from bethel_backend.core.config import Settings
from bethel_backend.core.responses import error_response, success_response
from bethel_backend.database.db_connection import connect, ensure_indexes, get_db
from bethel_backend.database.init_db import collection_counts, ping
from bethel_backend.events_service.routes import events_bp

LOG_FORMAT = "[%(levelname)s] %(asctime)s - %(message)s"

# URL -> file in the static directory
PAGES = {
    "/": "index.html",
    "/login": "login.html",
    "/signup": "signup.html",
    "/events": "Events.html",
    "/announcements": "Announcements.html",
    "/archives": "Archives.html",
}


@dataclass
class AppServices:
    """Process-wide objects built once at startup and shared by every request."""
    settings: Settings
    tokens: TokenIssuer
    db: Database
    indexes_ready: bool = False


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO), format=LOG_FORMAT)


def create_app(settings: Optional[Settings] = None, db: Optional[Database] = None) -> Flask:
    """
    Application factory for creating the Flask app.

    Args:
        settings: Configuration; read from the environment when omitted.
        db: Database handle; a new MongoClient is created from `settings` when omitted.

    Returns:
        Flask: The configured Flask application.
    """
    settings = settings or Settings.from_env()
    configure_logging(settings)
    for problem in settings.validate():
        logging.warning(problem)

    app = Flask(__name__, static_folder=None)
    app.config["DEBUG"] = settings.debug

    CORS(app, resources={
        r"/api/*": {
            "origins": settings.cors_origins,
            "methods": ["GET", "POST", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization"],
        }
    })

    if db is None:
        db = connect(settings)
    indexes_ready = False
    try:
        ensure_indexes(db)
        indexes_ready = True
    except PyMongoError:
        logging.exception(
            "Database initialization failed. Check MONGO_URI and that MongoDB is running. "
            "Index creation will be retried on signup."
        )

    app.extensions["bethel"] = AppServices(
        settings=settings,
        tokens=TokenIssuer(settings),
        db=db,
        indexes_ready=indexes_ready,
    )

    # --- REGISTER BLUEPRINTS ---
    app.register_blueprint(auth_bp, url_prefix="/api")
    app.register_blueprint(events_bp, url_prefix="/api")
    app.register_blueprint(announcements_bp, url_prefix="/api")

    # --- DIAGNOSTICS ---
    @app.route("/api", methods=["GET"])
    def api_status() -> Tuple[Response, int]:
        """Simple 'online' check that also reports whether the store answers."""
        database = "connected" if ping(get_db()) else "disconnected"
        return jsonify({"message": "Bethel Department API is working!", "database": database}), 200

    @app.route("/api/test-db", methods=["GET"])
    def test_db() -> Tuple[Response, int]:
        """Report document counts for each collection."""
        try:
            counts = collection_counts(get_db())
        except PyMongoError as e:
            logging.exception("Database test failed")
            return error_response("Database connection failed", 500, str(e))
        return success_response(200, database=settings.mongo_db_name, collections=counts)

    # --- STATIC PAGES ---
    def make_page_view(filename: str):
        def page() -> Response:
            return send_from_directory(settings.static_dir, filename)
        return page

    for url, filename in PAGES.items():
        endpoint = "page_" + (url.strip("/") or "index")
        app.add_url_rule(url, endpoint=endpoint, view_func=make_page_view(filename), methods=["GET"])

    @app.route("/<path:filename>", methods=["GET"])
    def static_asset(filename: str) -> Response:
        return send_from_directory(settings.static_dir, filename)

    # --- ERROR HANDLERS ---
    @app.errorhandler(HTTPException)
    def http_error(error: HTTPException) -> Tuple[Response, int]:
        return error_response(error.name, error.code or 500, error.description)

    @app.errorhandler(Exception)
    def internal_error(error: Exception) -> Tuple[Response, int]:
        logging.exception("Unhandled error")
        return error_response("Internal Server Error", 500)

    logging.info("All blueprints registered successfully.")
    return app


def main() -> None:
    settings = Settings.from_env()
    app = create_app(settings)
    logging.info(f"Bethel Department app running on port {settings.port}")
    app.run(host=settings.host, port=settings.port, debug=settings.debug)


if __name__ == "__main__":
    main()
