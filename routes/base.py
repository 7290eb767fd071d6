"""Shared pieces for the JSON API blueprint."""

from __future__ import annotations

from typing import Any, Dict

from flask import Blueprint, g, jsonify, request
from flask_login import current_user

from extensions import db
from services.store import TrackerStore
from utils.errors import ValidationError
from utils.validation import parse_id

api_bp = Blueprint("api", __name__, url_prefix="/api")


def get_store() -> TrackerStore:
    """One store per request, bound to the Flask-SQLAlchemy scoped session."""
    store = g.get("tracker_store")
    if store is None:
        store = g.tracker_store = TrackerStore(db.session)
    return store


def json_body() -> Dict[str, Any]:
    """Return the request's JSON object; an empty body reads as ``{}``."""
    data = request.get_json(silent=True)
    if data is None:
        if request.get_data(cache=True):
            raise ValidationError("Invalid JSON body")
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def path_id(value: str, label: str) -> int:
    return parse_id(value, label=label)


def current_player():
    """The logged-in User model (unwrapped from Flask-Login's proxy)."""
    return current_user._get_current_object()


def ok(data: Any = None, message: str | None = None, status: int = 200, **extra):
    payload: Dict[str, Any] = {"success": True}
    if data is not None:
        payload["data"] = data
    if message:
        payload["message"] = message
    payload.update(extra)
    return jsonify(payload), status


__all__ = ["api_bp", "current_player", "get_store", "json_body", "ok", "path_id"]
