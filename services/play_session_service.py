"""Head-to-head play sessions.

A game's creator sets up a session between two players for a fixed number
of rounds. Each submitted round is stored as an ordinary two-player
MatchResult linked to the session, so it counts towards every scoreboard.
"""
from __future__ import annotations

import logging
from typing import Any, List, Mapping

from models import MatchParticipant, MatchResult, PlaySession, User
from services.game_service import get_game
from utils.errors import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from utils.time import utcnow
from utils.validation import parse_id, parse_positive_int, parse_score, validate_notes

logger = logging.getLogger(__name__)

MAX_ROUNDS = 10
UPDATABLE_STATUSES = ("in_progress", "completed", "cancelled")


def get_play_session(store, session_id: int) -> PlaySession:
    session = store.get_play_session(session_id)
    if session is None:
        raise NotFoundError("Session not found")
    return session


def list_play_sessions(store, game_id: int) -> List[PlaySession]:
    game = get_game(store, game_id)
    return store.list_play_sessions(game.id)


def create_play_session(store, game_id: int, payload: Mapping[str, Any], *, actor: User) -> PlaySession:
    game = get_game(store, game_id)
    if game.created_by != actor.id:
        raise PermissionDeniedError("Only the game creator can start sessions")

    raw_p1 = payload.get("player1_id")
    raw_p2 = payload.get("player2_id")
    raw_rounds = payload.get("total_rounds")
    if raw_p1 is None or raw_p2 is None or raw_rounds is None:
        raise ValidationError("Player IDs and total rounds are required")
    player1_id = parse_id(raw_p1, label="user")
    player2_id = parse_id(raw_p2, label="user")
    if player1_id == player2_id:
        raise ValidationError("Players must be different", field="player2_id", value=raw_p2)
    try:
        total_rounds = parse_positive_int(raw_rounds, field="total_rounds")
    except ValidationError:
        total_rounds = 0
    if not 1 <= total_rounds <= MAX_ROUNDS:
        raise ValidationError(
            f"Total rounds must be between 1 and {MAX_ROUNDS}", field="total_rounds", value=raw_rounds
        )
    if len(store.players_by_ids([player1_id, player2_id])) != 2:
        raise NotFoundError("One or both players not found")

    session = PlaySession(
        game_id=game.id,
        started_by=actor.id,
        player1_id=player1_id,
        player2_id=player2_id,
        total_rounds=total_rounds,
        current_round=1,
        status="setup",
    )
    store.add(session)
    store.commit()
    logger.info("Play session %s created for game %s", session.id, game.id)
    return session


def _ensure_starter(session: PlaySession, actor: User, message: str) -> None:
    if session.started_by != actor.id:
        raise PermissionDeniedError(message)


def update_play_session(store, session_id: int, payload: Mapping[str, Any], *, actor: User) -> PlaySession:
    session = get_play_session(store, session_id)
    _ensure_starter(session, actor, "Only the session creator can update it")

    status = payload.get("status")
    if not status:
        raise ValidationError("Status is required", field="status")
    if status not in UPDATABLE_STATUSES:
        raise ValidationError("Invalid status", field="status", value=status)
    if session.is_final:
        raise ConflictError(f"Session is already {session.status}")

    current_round = payload.get("current_round")
    if current_round is not None:
        current_round = parse_positive_int(current_round, field="current_round")
        if current_round > session.total_rounds:
            raise ValidationError(
                "Current round cannot exceed total rounds", field="current_round", value=current_round
            )
        session.current_round = current_round
    elif status == "in_progress" and session.status == "setup":
        session.current_round = 1

    session.status = status
    if status == "completed":
        session.completed_at = utcnow()
    store.commit()
    return session


def submit_round(store, session_id: int, payload: Mapping[str, Any], *, actor: User):
    """Record the current round and advance the session.

    Returns ``(result, session_completed)``. Equal scores are a shared win.
    """
    session = get_play_session(store, session_id)
    _ensure_starter(session, actor, "Only the session creator can submit results")
    if session.status != "in_progress":
        raise ValidationError("Can only submit results for active sessions", field="status")

    scores = []
    for key in ("player1_score", "player2_score"):
        try:
            score = parse_score(payload.get(key), field=key)
        except ValidationError:
            raise ValidationError("Scores must be numbers", field=key, value=payload.get(key))
        if score < 0:
            raise ValidationError("Scores cannot be negative", field=key, value=score)
        scores.append(score)
    score1, score2 = scores
    notes = validate_notes(payload.get("notes"))

    result = MatchResult(
        game_id=session.game_id,
        play_session_id=session.id,
        recorded_by=actor.id,
        played_at=utcnow(),
        notes=notes,
        participants=[
            MatchParticipant(user_id=session.player1_id, seat=1, score=score1, is_winner=score1 >= score2),
            MatchParticipant(user_id=session.player2_id, seat=2, score=score2, is_winner=score2 >= score1),
        ],
    )
    store.add(result)

    completed = session.current_round >= session.total_rounds
    if completed:
        session.status = "completed"
        session.completed_at = utcnow()
    else:
        session.current_round += 1
    store.commit()
    logger.info(
        "Round submitted for play session %s (completed=%s)", session.id, completed
    )
    return result, completed


__all__ = [
    "MAX_ROUNDS",
    "create_play_session",
    "get_play_session",
    "list_play_sessions",
    "submit_round",
    "update_play_session",
]
