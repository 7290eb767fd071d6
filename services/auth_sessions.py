"""Cookie-backed login sessions.

A login issues an opaque random token, stores its SHA-256 digest with the
player and an expiry, and hands the plaintext to the browser in the
``game-tracker-session`` cookie. Lifetimes are fixed; nothing renews a
session except logging in again.
"""
from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional, Tuple

from flask import current_app

from models import User, hash_session_token
from utils.time import utcnow

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "game-tracker-session"
SESSION_LIFETIME = timedelta(days=30)


def create_session(store, player: User) -> Tuple[str, datetime]:
    """Persist a new session for ``player`` and return ``(token, expires_at)``."""
    token = secrets.token_urlsafe(32)
    expires_at = utcnow() + SESSION_LIFETIME
    store.add_auth_session(
        token_hash=hash_session_token(token),
        player_id=player.id,
        expires_at=expires_at,
    )
    store.commit()
    logger.info("Session created for user_id=%s", player.id)
    return token, expires_at


def validate_session(store, token: Optional[str]) -> Optional[User]:
    """Return the player behind ``token``, or None when missing, unknown or expired."""
    if not token:
        return None
    try:
        record = store.find_auth_session(hash_session_token(token))
        if record is None or record.user is None:
            return None
        if record.is_expired():
            return None
        return record.user
    except Exception:
        # A broken lookup must never authenticate anyone.
        logger.exception("Session lookup failed")
        store.rollback()
        return None


def destroy_session(store, token: Optional[str]) -> bool:
    """Delete the session behind ``token``. Unknown or missing tokens are a no-op."""
    if not token:
        return False
    deleted = store.delete_auth_session(hash_session_token(token))
    store.commit()
    return bool(deleted)


def cleanup_expired_sessions(store, now: Optional[datetime] = None) -> int:
    removed = store.delete_expired_auth_sessions(now or utcnow())
    store.commit()
    if removed:
        logger.info("Removed %s expired session(s)", removed)
    return removed


def set_session_cookie(response, token: str, expires_at: datetime) -> None:
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        expires=expires_at,
        max_age=int(SESSION_LIFETIME.total_seconds()),
        path="/",
        secure=bool(current_app.config.get("SESSION_COOKIE_SECURE")),
        httponly=True,
        samesite="Lax",
    )


def clear_session_cookie(response) -> None:
    response.delete_cookie(
        SESSION_COOKIE_NAME,
        path="/",
        secure=bool(current_app.config.get("SESSION_COOKIE_SECURE")),
        httponly=True,
        samesite="Lax",
    )


__all__ = [
    "SESSION_COOKIE_NAME",
    "SESSION_LIFETIME",
    "cleanup_expired_sessions",
    "clear_session_cookie",
    "create_session",
    "destroy_session",
    "set_session_cookie",
    "validate_session",
]
