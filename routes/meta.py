"""Service health."""

from __future__ import annotations

from flask import current_app, jsonify
from sqlalchemy import text

from .base import api_bp, get_store


@api_bp.get("/health")
def health():
    store = get_store()
    try:
        store.session.execute(text("SELECT 1"))
    except Exception:
        current_app.logger.exception("Health check could not reach the database")
        store.rollback()
        return jsonify(status="error", database="unavailable"), 503
    return jsonify(status="ok", database="ok")
