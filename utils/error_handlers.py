"""Centralized JSON error handlers."""

from __future__ import annotations

from flask import jsonify
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from utils.errors import AppError

_HTTP_MESSAGES = {
    404: "Resource not found",
    405: "Method not allowed",
    429: "Too many requests",
}


def _json_error(message: str, status: int, **extra):
    payload = {"success": False, "error": message}
    payload.update(extra)
    return jsonify(payload), status


def register_error_handlers(app) -> None:
    """Register error handlers on the Flask app."""
    from extensions import db

    @app.errorhandler(AppError)
    def app_error(err: AppError):  # type: ignore[no-redef]
        if err.status_code >= 500:
            db.session.rollback()
            app.logger.error("Application error: %s", err.message)
        return jsonify(err.to_payload()), err.status_code

    @app.errorhandler(IntegrityError)
    def integrity_error(err: IntegrityError):  # type: ignore[no-redef]
        db.session.rollback()
        app.logger.warning("Integrity error: %s", err.orig)
        return _json_error("Conflict with existing data", 409)

    @app.errorhandler(HTTPException)
    def http_error(err: HTTPException):  # type: ignore[no-redef]
        status = err.code or 500
        message = _HTTP_MESSAGES.get(status) or err.description or err.name
        return _json_error(message, status)

    @app.errorhandler(Exception)
    def internal(err: Exception):  # type: ignore[no-redef]
        db.session.rollback()
        app.logger.exception("Unhandled error: %s", err)
        return _json_error("Internal server error", 500)
