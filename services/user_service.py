"""Player registration and profile maintenance."""
from __future__ import annotations

import logging
from typing import List

from sqlalchemy.exc import IntegrityError

from models import User
from services.audit import record_audit_event
from utils.errors import ConflictError, NotFoundError, PermissionDeniedError
from utils.validation import validate_username

logger = logging.getLogger(__name__)


def list_players(store) -> List[User]:
    return store.list_players()


def get_player(store, player_id: int) -> User:
    player = store.get_player(player_id)
    if player is None:
        raise NotFoundError("User not found")
    return player


def _ensure_username_free(store, username: str, *, exclude_id: int | None = None) -> None:
    existing = store.get_player_by_username(username)
    if existing is not None and existing.id != exclude_id:
        raise ConflictError("Username already exists", {"field": "username"})


def _commit_username(store) -> None:
    try:
        store.commit()
    except IntegrityError:
        # Lost a race against a concurrent registration.
        store.rollback()
        raise ConflictError("Username already exists", {"field": "username"})


def register_player(store, username) -> User:
    username = validate_username(username)
    _ensure_username_free(store, username)
    player = store.add(User(username=username))
    store.flush()
    record_audit_event(store, "player_registered", {"username": username}, user_id=player.id)
    _commit_username(store)
    logger.info("Registered player %s (id=%s)", username, player.id)
    return player


def update_player(store, player_id: int, username, *, actor: User) -> User:
    player = get_player(store, player_id)
    if actor.id != player.id:
        raise PermissionDeniedError("You can only update your own profile")
    username = validate_username(username)
    if username == player.username:
        return player
    _ensure_username_free(store, username, exclude_id=player.id)
    previous = player.username
    player.username = username
    record_audit_event(store, "player_updated", {"from": previous, "to": username})
    _commit_username(store)
    return player


def delete_player(store, player_id: int, *, actor: User) -> None:
    player = get_player(store, player_id)
    if actor.id != player.id:
        raise PermissionDeniedError("You can only delete your own profile")
    if store.player_owns_games(player.id):
        raise ConflictError("Cannot delete a user who has created games")
    if store.player_has_history(player.id):
        raise ConflictError("Cannot delete a user with recorded results")
    record_audit_event(store, "player_deleted", {"user_id": player.id, "username": player.username})
    store.delete(player)
    store.commit()
    logger.info("Deleted player id=%s", player_id)


__all__ = ["delete_player", "get_player", "list_players", "register_player", "update_player"]
