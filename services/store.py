"""Persistence for Game Tracker.

``TrackerStore`` wraps one SQLAlchemy session. Route handlers build one per
request (``routes.base.get_store``) and hand it to the service functions,
which never reach for ``db.session`` themselves.
"""
from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import joinedload, selectinload

from models import AuthSession, Game, MatchParticipant, MatchResult, PlaySession, User
from services.stats import STREAK_WINDOW, ParticipationEvent


class TrackerStore:
    def __init__(self, session):
        self.session = session

    # Unit of work ---------------------------------------------------------
    def add(self, obj):
        self.session.add(obj)
        return obj

    def delete(self, obj) -> None:
        self.session.delete(obj)

    def flush(self) -> None:
        self.session.flush()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    # Players --------------------------------------------------------------
    def list_players(self) -> List[User]:
        return self.session.query(User).order_by(User.username.asc()).all()

    def get_player(self, player_id: int) -> Optional[User]:
        return self.session.get(User, player_id)

    def get_player_by_username(self, username: str) -> Optional[User]:
        return self.session.query(User).filter(User.username == username).first()

    def players_by_ids(self, player_ids: Iterable[int]) -> dict[int, User]:
        ids = set(player_ids)
        if not ids:
            return {}
        rows = self.session.query(User).filter(User.id.in_(ids)).all()
        return {user.id: user for user in rows}

    def player_owns_games(self, player_id: int) -> bool:
        return self.session.query(Game.id).filter(Game.created_by == player_id).first() is not None

    def player_has_history(self, player_id: int) -> bool:
        """True when the player appears in any result or play session."""
        if self.session.query(MatchParticipant.id).filter(MatchParticipant.user_id == player_id).first():
            return True
        return (
            self.session.query(PlaySession.id)
            .filter(or_(PlaySession.player1_id == player_id, PlaySession.player2_id == player_id))
            .first()
            is not None
        )

    # Games ----------------------------------------------------------------
    def list_games(
        self,
        *,
        category: Optional[str] = None,
        created_by: Optional[int] = None,
        search: Optional[str] = None,
    ) -> List[Game]:
        q = self.session.query(Game).options(joinedload(Game.creator))
        if category:
            q = q.filter(Game.category == category)
        if created_by is not None:
            q = q.filter(Game.created_by == created_by)
        if search:
            escaped = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
            q = q.filter(Game.name.ilike(f"%{escaped}%", escape="\\"))
        return q.order_by(Game.created_at.desc(), Game.id.desc()).all()

    def get_game(self, game_id: int) -> Optional[Game]:
        return self.session.get(Game, game_id)

    # Results --------------------------------------------------------------
    def _results_query(self):
        return self.session.query(MatchResult).options(
            joinedload(MatchResult.game),
            selectinload(MatchResult.participants).joinedload(MatchParticipant.user),
        )

    def get_result(self, result_id: int) -> Optional[MatchResult]:
        return self._results_query().filter(MatchResult.id == result_id).first()

    def list_results(
        self,
        *,
        game_id: Optional[int] = None,
        player_id: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[MatchResult]:
        q = self._results_query()
        if game_id is not None:
            q = q.filter(MatchResult.game_id == game_id)
        if player_id is not None:
            q = q.filter(
                MatchResult.participants.any(MatchParticipant.user_id == player_id)
            )
        q = q.order_by(MatchResult.played_at.desc(), MatchResult.id.desc())
        if limit:
            q = q.limit(limit)
        return q.all()

    def replace_participants(self, result: MatchResult, participants: List[MatchParticipant]) -> None:
        """Swap the participant rows of ``result``; the caller commits."""
        result.participants.clear()
        # Old rows must be gone before new ones reuse the (result, seat) keys.
        self.session.flush()
        result.participants.extend(participants)

    # Scoreboard queries ---------------------------------------------------
    def participation_events(self, *, game_id: Optional[int] = None) -> List[ParticipationEvent]:
        q = (
            self.session.query(
                MatchParticipant.user_id,
                User.username,
                MatchParticipant.score,
                MatchParticipant.is_winner,
            )
            .join(User, User.id == MatchParticipant.user_id)
            .join(MatchResult, MatchResult.id == MatchParticipant.result_id)
        )
        if game_id is not None:
            q = q.filter(MatchResult.game_id == game_id)
        return [
            ParticipationEvent(
                player_id=user_id,
                username=username,
                score=float(score or 0),
                is_winner=bool(is_winner),
            )
            for user_id, username, score, is_winner in q.all()
        ]

    def recent_outcomes(
        self,
        player_id: int,
        *,
        game_id: Optional[int] = None,
        limit: int = STREAK_WINDOW,
    ) -> List[bool]:
        """Newest-first win flags for one player."""
        q = (
            self.session.query(MatchParticipant.is_winner)
            .join(MatchResult, MatchResult.id == MatchParticipant.result_id)
            .filter(MatchParticipant.user_id == player_id)
        )
        if game_id is not None:
            q = q.filter(MatchResult.game_id == game_id)
        q = q.order_by(MatchResult.played_at.desc(), MatchResult.id.desc()).limit(limit)
        return [bool(is_winner) for (is_winner,) in q.all()]

    def player_participations(self, player_id: int) -> List[tuple[int, str, ParticipationEvent]]:
        """``(game_id, game_name, event)`` for every result the player took part in."""
        rows = (
            self.session.query(
                Game.id,
                Game.name,
                User.username,
                MatchParticipant.score,
                MatchParticipant.is_winner,
            )
            .select_from(MatchParticipant)
            .join(User, User.id == MatchParticipant.user_id)
            .join(MatchResult, MatchResult.id == MatchParticipant.result_id)
            .join(Game, Game.id == MatchResult.game_id)
            .filter(MatchParticipant.user_id == player_id)
            .all()
        )
        return [
            (
                game_id,
                game_name,
                ParticipationEvent(
                    player_id=player_id,
                    username=username,
                    score=float(score or 0),
                    is_winner=bool(is_winner),
                ),
            )
            for game_id, game_name, username, score, is_winner in rows
        ]

    def game_breakdown(self) -> List[dict]:
        total_games = func.count(func.distinct(MatchResult.id))
        unique_players = func.count(func.distinct(MatchParticipant.user_id))
        rows = (
            self.session.query(
                Game.id,
                Game.name,
                Game.category,
                total_games,
                unique_players,
            )
            .outerjoin(MatchResult, MatchResult.game_id == Game.id)
            .outerjoin(MatchParticipant, MatchParticipant.result_id == MatchResult.id)
            .group_by(Game.id, Game.name, Game.category)
            .order_by(total_games.desc(), Game.id.asc())
            .all()
        )
        return [
            {
                "id": game_id,
                "name": name,
                "type": category,
                "total_games": int(total or 0),
                "unique_players": int(players or 0),
            }
            for game_id, name, category, total, players in rows
        ]

    def game_score_summaries(self) -> List[dict]:
        rows = (
            self.session.query(
                Game.id,
                Game.name,
                Game.category,
                Game.created_at,
                func.count(func.distinct(MatchResult.id)),
                func.count(func.distinct(MatchParticipant.user_id)),
                func.avg(MatchParticipant.score),
                func.max(MatchParticipant.score),
                func.min(MatchParticipant.score),
                func.max(MatchResult.played_at),
            )
            .outerjoin(MatchResult, MatchResult.game_id == Game.id)
            .outerjoin(MatchParticipant, MatchParticipant.result_id == MatchResult.id)
            .group_by(Game.id, Game.name, Game.category, Game.created_at)
            .order_by(Game.id.asc())
            .all()
        )
        return [
            {
                "game_id": game_id,
                "game_name": name,
                "type": category,
                "created_at": created_at,
                "total_plays": int(plays or 0),
                "unique_players": int(players or 0),
                "average_score": avg_score,
                "highest_score": high,
                "lowest_score": low,
                "last_played": last_played,
            }
            for game_id, name, category, created_at, plays, players, avg_score, high, low, last_played in rows
        ]

    # Auth sessions --------------------------------------------------------
    def add_auth_session(self, *, token_hash: str, player_id: int, expires_at: datetime) -> AuthSession:
        record = AuthSession(token_hash=token_hash, user_id=player_id, expires_at=expires_at)
        self.session.add(record)
        return record

    def find_auth_session(self, token_hash: str) -> Optional[AuthSession]:
        return (
            self.session.query(AuthSession)
            .options(joinedload(AuthSession.user))
            .join(User, User.id == AuthSession.user_id)
            .filter(AuthSession.token_hash == token_hash)
            .first()
        )

    def delete_auth_session(self, token_hash: str) -> int:
        return (
            self.session.query(AuthSession)
            .filter(AuthSession.token_hash == token_hash)
            .delete(synchronize_session=False)
        )

    def delete_expired_auth_sessions(self, now: datetime) -> int:
        return (
            self.session.query(AuthSession)
            .filter(AuthSession.expires_at <= now)
            .delete(synchronize_session=False)
        )

    # Play sessions --------------------------------------------------------
    def get_play_session(self, session_id: int) -> Optional[PlaySession]:
        return self.session.get(PlaySession, session_id)

    def list_play_sessions(self, game_id: int) -> List[PlaySession]:
        return (
            self.session.query(PlaySession)
            .filter(PlaySession.game_id == game_id)
            .order_by(PlaySession.created_at.desc(), PlaySession.id.desc())
            .all()
        )


__all__ = ["TrackerStore"]
