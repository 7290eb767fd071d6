"""Factory helpers for quickly seeding the test database."""
from __future__ import annotations

import itertools
from datetime import datetime, timedelta
from typing import Iterable, Optional, Tuple

from models import AuthSession, Game, MatchParticipant, MatchResult, User, hash_session_token
from utils.time import utcnow

_player_counter = itertools.count(1)
_game_counter = itertools.count(1)


def create_player(store, username: Optional[str] = None) -> User:
    player = User(username=username or f"player{_next_value(_player_counter)}")
    store.add(player)
    store.flush()
    return player


def create_game(
    store,
    *,
    creator: User,
    name: Optional[str] = None,
    category: str = "video",
) -> Game:
    game = Game(
        name=name or f"Game {_next_value(_game_counter)}",
        category=category,
        created_by=creator.id,
    )
    store.add(game)
    store.flush()
    return game


def record_result(
    store,
    game: Game,
    rows: Iterable[Tuple[User, float, bool]],
    *,
    played_at: Optional[datetime] = None,
    recorded_by: Optional[User] = None,
) -> MatchResult:
    """``rows`` is ``(player, score, is_winner)`` in seat order."""
    result = MatchResult(
        game_id=game.id,
        played_at=played_at or utcnow(),
        recorded_by=recorded_by.id if recorded_by else game.created_by,
        participants=[
            MatchParticipant(user_id=player.id, seat=seat, score=float(score), is_winner=winner)
            for seat, (player, score, winner) in enumerate(rows, start=1)
        ],
    )
    store.add(result)
    store.flush()
    return result


def create_auth_session(store, player: User, *, expires_in: timedelta = timedelta(days=30)) -> str:
    """Insert a session row directly and return the plaintext cookie token."""
    token = f"token-{player.id}-{_next_value(_player_counter)}"
    store.add(
        AuthSession(
            token_hash=hash_session_token(token),
            user_id=player.id,
            expires_at=utcnow() + expires_in,
        )
    )
    store.flush()
    return token


def _next_value(counter: itertools.count) -> int:
    return next(counter)


__all__ = ["create_auth_session", "create_game", "create_player", "record_result"]
