"""Login, logout and session introspection."""

from __future__ import annotations

from flask import current_app, jsonify, request
from flask_login import current_user, login_required

from extensions import csrf, generate_csrf, limiter
from services.audit import record_audit_event
from services.auth_sessions import (
    SESSION_COOKIE_NAME,
    clear_session_cookie,
    create_session,
    destroy_session,
    set_session_cookie,
)
from utils.errors import NotFoundError, ValidationError

from .base import api_bp, get_store, json_body


def _login_limit() -> str:
    return current_app.config.get("LOGIN_RATE_LIMIT", "10 per minute")


@api_bp.post("/auth/login")
@limiter.limit(_login_limit)
def auth_login():
    body = json_body()
    username = body.get("username")
    if not isinstance(username, str) or not username.strip():
        raise ValidationError("Username is required", field="username")

    store = get_store()
    player = store.get_player_by_username(username.strip())
    if player is None:
        current_app.logger.info("Login attempt for unknown username")
        raise NotFoundError("User not found")

    token, expires_at = create_session(store, player)
    record_audit_event(store, "login", {"username": player.username}, user_id=player.id)
    store.commit()

    resp = jsonify({"success": True, "message": "Login successful", "user": player.to_dict()})
    set_session_cookie(resp, token, expires_at)
    return resp


@api_bp.post("/auth/logout")
@csrf.exempt
def auth_logout():
    store = get_store()
    if current_user.is_authenticated:
        record_audit_event(store, "logout", {"username": current_user.username})
    destroy_session(store, request.cookies.get(SESSION_COOKIE_NAME))

    resp = jsonify({"success": True, "message": "Logout successful"})
    clear_session_cookie(resp)
    return resp


@api_bp.get("/auth/me")
@login_required
def auth_me():
    return jsonify({"success": True, "user": current_user.to_dict()})


@api_bp.get("/auth/csrf")
def auth_csrf():
    return jsonify({"csrf_token": generate_csrf()})
