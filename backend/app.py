from __future__ import annotations

import logging
from typing import Any

from flask import Flask, jsonify
from flask_cors import CORS
from flask_socketio import SocketIO
from pymongo.database import Database
from werkzeug.exceptions import HTTPException

from campus import config
from campus.broadcast import Broadcaster, SocketIOBroadcaster
from campus.config import ConfigError
from campus.db import use_db
from campus.errors import ResourceError, json_error
from campus.routes import (
    create_academics_blueprint,
    internships_bp,
    people_bp,
    placements_bp,
    projects_bp,
    records_bp,
    reports_bp,
    services_bp,
    student_affairs_bp,
)

logger = logging.getLogger(__name__)

socketio = SocketIO()


def _handle_resource_error(exc: ResourceError):
    return json_error(exc.message, exc.status, exc.details)


def _handle_config_error(exc: ConfigError):
    logger.exception("Missing configuration for MongoDB")
    return json_error(str(exc), 500)


def _handle_unexpected_error(exc: Exception):
    if isinstance(exc, HTTPException):
        return json_error(exc.description or exc.name, exc.code or 500)
    logger.exception("Unhandled error while serving request")
    return json_error("Internal server error.", 500)


def create_app(
    database: Database | None = None,
    broadcaster: Broadcaster | None = None,
    **settings: Any,
) -> Flask:
    """Build the API application.

    ``database`` replaces the connection configured through MONGODB_URI and
    ``broadcaster`` replaces the Socket.IO channel used to announce new
    assignments, events and polls.
    """

    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = Flask(__name__)
    app.secret_key = config.SECRET_KEY
    app.config.update(settings)

    CORS(app, origins=config.CORS_ORIGINS)
    socketio.init_app(app, cors_allowed_origins=config.CORS_ORIGINS)

    if database is not None:
        use_db(database)
    if broadcaster is None:
        broadcaster = SocketIOBroadcaster(socketio)

    app.register_blueprint(people_bp)
    app.register_blueprint(services_bp)
    app.register_blueprint(create_academics_blueprint(broadcaster))
    app.register_blueprint(records_bp)
    app.register_blueprint(student_affairs_bp)
    app.register_blueprint(internships_bp)
    app.register_blueprint(projects_bp)
    app.register_blueprint(placements_bp)
    app.register_blueprint(reports_bp)

    app.register_error_handler(ResourceError, _handle_resource_error)
    app.register_error_handler(ConfigError, _handle_config_error)
    app.register_error_handler(Exception, _handle_unexpected_error)

    @app.get("/api/health")
    def health():
        return jsonify({"ok": True})

    @app.get("/api")
    def index():
        return jsonify({"message": "Campus API server running"})

    return app


app = create_app()


if __name__ == "__main__":
    socketio.run(app, host="0.0.0.0", port=config.PORT, debug=True)
