"""Audit logging helpers for account and ownership changes."""
from __future__ import annotations

from typing import Any, Dict, Optional

from flask import current_app, has_request_context, request
from flask_login import current_user

from models import AuditLog


def _current_user_id() -> Optional[int]:
    if not has_request_context():
        return None
    if current_user and getattr(current_user, "is_authenticated", False):
        try:
            return int(current_user.get_id())
        except (TypeError, ValueError):
            return None
    return None


def record_audit_event(
    store,
    action: str,
    details: Optional[Dict[str, Any]] = None,
    *,
    user_id: Optional[int] = None,
) -> None:
    """Add an audit log entry to the store's pending transaction.

    ``user_id`` defaults to the logged-in player. The caller commits.
    """
    try:
        entry = AuditLog(
            user_id=user_id if user_id is not None else _current_user_id(),
            action=action,
            details=details or {},
        )
        if has_request_context():
            entry.ip_address = request.headers.get("X-Forwarded-For", request.remote_addr)
            entry.user_agent = (request.headers.get("User-Agent") or "")[:255]
        store.add(entry)
        # Flushing keeps the entry tied to the surrounding transaction without forcing a commit.
        store.flush()
    except Exception:
        current_app.logger.exception("Failed to record audit event: action=%s", action)
