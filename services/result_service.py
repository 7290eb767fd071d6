"""Recording, editing and listing match results."""
from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError

from models import MatchParticipant, MatchResult, User
from services.game_service import get_game
from utils.errors import NotFoundError, PermissionDeniedError, ValidationError
from utils.validation import (
    log_validation_error,
    parse_id,
    parse_played_at,
    parse_score,
    validate_notes,
)

logger = logging.getLogger(__name__)

MIN_PARTICIPANTS = 2
MAX_PARTICIPANTS = 10
DEFAULT_RECENT_LIMIT = 10

_PLAYER_FIELDS_MESSAGE = "Each player must have user_id, score, and is_winner fields"


def _pick(payload: Mapping[str, Any], *keys: str) -> Any:
    """First present key wins; older clients send camelCase."""
    for key in keys:
        if key in payload:
            return payload[key]
    return None


def parse_participants(raw: Any) -> List[MatchParticipant]:
    """Validate a ``players`` list and build unsaved participant rows in seat order."""
    if not isinstance(raw, list):
        raise ValidationError("Players array is required", field="players", value=raw)
    if len(raw) < MIN_PARTICIPANTS:
        raise ValidationError(
            f"Game result must have at least {MIN_PARTICIPANTS} players", field="players", value=len(raw)
        )
    if len(raw) > MAX_PARTICIPANTS:
        raise ValidationError(
            f"Game result cannot have more than {MAX_PARTICIPANTS} players", field="players", value=len(raw)
        )

    participants: List[MatchParticipant] = []
    seen: set[int] = set()
    for seat, item in enumerate(raw, start=1):
        if not isinstance(item, Mapping):
            raise ValidationError(_PLAYER_FIELDS_MESSAGE, field="players", value=item)
        user_id = _pick(item, "user_id", "userId")
        score = _pick(item, "score")
        is_winner = _pick(item, "is_winner", "isWinner")
        if user_id is None or score is None or is_winner is None:
            raise ValidationError(_PLAYER_FIELDS_MESSAGE, field="players", value=item)
        try:
            user_id = parse_id(user_id, label="user")
        except ValidationError:
            raise ValidationError("Player user ID must be positive", field="user_id", value=user_id)
        if not isinstance(is_winner, bool):
            raise ValidationError("is_winner must be true or false", field="is_winner", value=is_winner)
        if user_id in seen:
            raise ValidationError("Duplicate player in game result", field="players", value=user_id)
        seen.add(user_id)
        participants.append(
            MatchParticipant(
                user_id=user_id,
                seat=seat,
                score=parse_score(score),
                is_winner=is_winner,
            )
        )

    if not any(p.is_winner for p in participants):
        raise ValidationError("Game result must have at least one winner", field="players")
    return participants


def _ensure_players_exist(store, participants: List[MatchParticipant]) -> None:
    ids = [p.user_id for p in participants]
    found = store.players_by_ids(ids)
    missing = [pid for pid in ids if pid not in found]
    if missing:
        raise NotFoundError("Player not found", {"user_ids": missing})


def _ensure_can_edit(result: MatchResult, actor: User) -> None:
    if result.recorded_by == actor.id:
        return
    if result.game is not None and result.game.created_by == actor.id:
        return
    raise PermissionDeniedError("Only the recorder or the game creator can change this result")


def get_result(store, result_id: int) -> MatchResult:
    result = store.get_result(result_id)
    if result is None:
        raise NotFoundError("Game result not found")
    return result


def list_results(
    store,
    *,
    game_id: Optional[int] = None,
    player_id: Optional[int] = None,
    recent: bool = False,
    limit: Optional[int] = None,
) -> List[MatchResult]:
    if recent and limit is None:
        limit = DEFAULT_RECENT_LIMIT
    return store.list_results(game_id=game_id, player_id=player_id, limit=limit)


def create_result(store, payload: Mapping[str, Any], *, actor: User) -> MatchResult:
    raw_game_id = _pick(payload, "game_id", "gameId")
    raw_players = _pick(payload, "players")
    if raw_game_id is None or raw_players is None:
        raise ValidationError("Game ID and players array are required")
    try:
        game = get_game(store, parse_id(raw_game_id, label="game"))
        participants = parse_participants(raw_players)
        played_at = parse_played_at(_pick(payload, "played_at", "playedAt"))
        notes = validate_notes(_pick(payload, "notes"))
    except ValidationError as err:
        log_validation_error(err, context="create_result")
        raise
    _ensure_players_exist(store, participants)

    result = MatchResult(
        game_id=game.id,
        played_at=played_at,
        notes=notes,
        recorded_by=actor.id,
        participants=participants,
    )
    store.add(result)
    store.commit()
    logger.info(
        "Result %s recorded for game %s with %s players", result.id, game.id, len(participants)
    )
    return result


def update_result(store, result_id: int, payload: Mapping[str, Any], *, actor: User) -> MatchResult:
    result = get_result(store, result_id)
    _ensure_can_edit(result, actor)

    participants = None
    try:
        if "players" in payload:
            participants = parse_participants(payload.get("players"))
        played_at = _pick(payload, "played_at", "playedAt")
        if played_at is not None:
            played_at = parse_played_at(played_at)
        notes_given = "notes" in payload
        notes = validate_notes(payload.get("notes")) if notes_given else None
    except ValidationError as err:
        log_validation_error(err, context="update_result")
        raise
    if participants is not None:
        _ensure_players_exist(store, participants)

    try:
        if participants is not None:
            store.replace_participants(result, participants)
        if played_at is not None:
            result.played_at = played_at
        if notes_given:
            result.notes = notes
        store.commit()
    except SQLAlchemyError:
        store.rollback()
        raise
    return result


def delete_result(store, result_id: int, *, actor: User) -> None:
    result = get_result(store, result_id)
    _ensure_can_edit(result, actor)
    store.delete(result)
    store.commit()
    logger.info("Result %s deleted by user_id=%s", result_id, actor.id)


__all__ = [
    "MAX_PARTICIPANTS",
    "MIN_PARTICIPANTS",
    "create_result",
    "delete_result",
    "get_result",
    "list_results",
    "parse_participants",
    "update_result",
]
