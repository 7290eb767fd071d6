"""SQLAlchemy models package for Game Tracker.
Re-exports the shared `db` instance to avoid import loops and provides
convenient names for the model classes.

Usage:
    from models import db, User, Game, MatchResult
"""
from __future__ import annotations

from extensions import db  # shared SQLAlchemy() instance

# Import models only after db exists to avoid circular imports
from .user import AuditLog, AuthSession, User, hash_session_token  # type: ignore F401
from .game import Game, MatchParticipant, MatchResult, PlaySession  # type: ignore F401

__all__ = [
    "db",
    "AuditLog",
    "AuthSession",
    "Game",
    "MatchParticipant",
    "MatchResult",
    "PlaySession",
    "User",
    "hash_session_token",
]
