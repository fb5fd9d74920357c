from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .container import Container, build_container
from .core.constants import DEFAULT_TOKEN_DAYS
from .core.exceptions import DomainError
from .database.bootstrap import apply_schema, ensure_default_admin, list_tables
from .logging_setup import configure_logging
from .attendance.controller import register as register_attendance
from .groups.controller import register as register_groups
from .students.controller import register as register_students
from .users.controller import register as register_users
from .users.guards import build_guards

logger = logging.getLogger(__name__)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return jsonify({"error": str(e)}), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e: HTTPException):
        return jsonify({"error": e.description or e.name}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error")
        if app.config.get("DEBUG"):
            return jsonify({"error": f"Internal server error: {e}"}), 500
        return jsonify({"error": "Internal server error"}), 500


def create_app(*, container: Optional[Container] = None, settings_module: Optional[str] = None) -> Flask:
    """Application factory.

    Passing ``container`` skips all database setup (used by tests).
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["EXPORT_COLLAPSE_LATE"] = bool(getattr(settings, "EXPORT_COLLAPSE_LATE", False))
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
            ensure_default_admin(
                db_config,
                username=getattr(settings, "DEFAULT_ADMIN_USERNAME", "admin"),
                password=getattr(settings, "DEFAULT_ADMIN_PASSWORD", "admin123"),
            )

        container = build_container(
            db_config=db_config,
            secret_key=app.secret_key,
            token_days=int(getattr(settings, "TOKEN_DAYS", DEFAULT_TOKEN_DAYS)),
        )

    app.extensions["vedomost.container"] = container
    guards = build_guards(container)

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok"})

    register_users(app, container, guards)
    register_groups(app, container, guards)
    register_students(app, container, guards)
    register_attendance(app, container, guards)
    _register_error_handlers(app)

    return app
