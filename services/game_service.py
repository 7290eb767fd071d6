"""Game catalogue operations."""
from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from models import Game, User
from services.audit import record_audit_event
from utils.errors import NotFoundError, PermissionDeniedError
from utils.validation import (
    sanitize_string,
    validate_game_category,
    validate_game_name,
    validate_image_url,
)

logger = logging.getLogger(__name__)


def list_games(
    store,
    *,
    category: Optional[str] = None,
    created_by: Optional[int] = None,
    search: Optional[str] = None,
) -> List[Game]:
    if category:
        category = validate_game_category(category)
    search = sanitize_string(search, max_length=100) if search else None
    return store.list_games(category=category, created_by=created_by, search=search or None)


def get_game(store, game_id: int) -> Game:
    game = store.get_game(game_id)
    if game is None:
        raise NotFoundError("Game not found")
    return game


def _ensure_creator(game: Game, actor: User, action: str) -> None:
    if game.created_by != actor.id:
        raise PermissionDeniedError(f"Only the game creator can {action} it")


def create_game(store, payload: Mapping[str, Any], *, actor: User) -> Game:
    game = Game(
        name=validate_game_name(payload.get("name")),
        category=validate_game_category(payload.get("type", payload.get("category"))),
        image_url=validate_image_url(payload.get("image_url", payload.get("imageUrl"))),
        created_by=actor.id,
    )
    store.add(game)
    store.commit()
    logger.info("Game %s created by user_id=%s", game.id, actor.id)
    return game


def update_game(store, game_id: int, payload: Mapping[str, Any], *, actor: User) -> Game:
    game = get_game(store, game_id)
    _ensure_creator(game, actor, "update")
    if "name" in payload:
        game.name = validate_game_name(payload.get("name"))
    for key in ("image_url", "imageUrl"):
        if key in payload:
            game.image_url = validate_image_url(payload.get(key))
            break
    store.commit()
    return game


def delete_game(store, game_id: int, *, actor: User) -> None:
    game = get_game(store, game_id)
    _ensure_creator(game, actor, "delete")
    record_audit_event(store, "game_deleted", {"game_id": game.id, "name": game.name})
    store.delete(game)
    store.commit()
    logger.info("Game %s deleted by user_id=%s", game_id, actor.id)


__all__ = ["create_game", "delete_game", "get_game", "list_games", "update_game"]
