"""Game catalogue, recorded match results and multi-round play sessions."""

from __future__ import annotations

from extensions import db
from utils.time import isoformat, utcnow


class Game(db.Model):
    __tablename__ = "games"
    __table_args__ = (
        db.CheckConstraint("category IN ('video', 'table', 'card')", name="category"),
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False, index=True)
    category = db.Column(db.String(10), nullable=False, index=True)
    image_url = db.Column(db.String(500), nullable=True)
    created_by = db.Column(
        db.Integer,
        db.ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    creator = db.relationship("User", back_populates="games")
    results = db.relationship(
        "MatchResult",
        back_populates="game",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="dynamic",
    )
    play_sessions = db.relationship(
        "PlaySession",
        back_populates="game",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="dynamic",
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.category,
            "image_url": self.image_url,
            "created_by": self.created_by,
            "created_by_username": self.creator.username if self.creator else None,
            "created_at": isoformat(self.created_at),
            "updated_at": isoformat(self.updated_at),
        }


class MatchResult(db.Model):
    """One recorded match of a game between two to ten participants."""

    __tablename__ = "match_results"

    id = db.Column(db.Integer, primary_key=True)
    game_id = db.Column(
        db.Integer,
        db.ForeignKey("games.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    play_session_id = db.Column(
        db.Integer,
        db.ForeignKey("play_sessions.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    recorded_by = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    played_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    notes = db.Column(db.String(500), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    game = db.relationship("Game", back_populates="results")
    play_session = db.relationship("PlaySession", back_populates="results")
    recorder = db.relationship("User", foreign_keys=[recorded_by])
    participants = db.relationship(
        "MatchParticipant",
        back_populates="result",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="MatchParticipant.seat",
    )

    @property
    def winner_ids(self) -> list[int]:
        return [p.user_id for p in self.participants if p.is_winner]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "game_id": self.game_id,
            "game_name": self.game.name if self.game else None,
            "play_session_id": self.play_session_id,
            "recorded_by": self.recorded_by,
            "played_at": isoformat(self.played_at),
            "notes": self.notes,
            "players": [p.to_dict() for p in self.participants],
            "winner_ids": self.winner_ids,
            "created_at": isoformat(self.created_at),
        }


class MatchParticipant(db.Model):
    __tablename__ = "match_participants"
    __table_args__ = (
        db.UniqueConstraint("result_id", "user_id", name="uq_match_participant_user"),
        db.UniqueConstraint("result_id", "seat", name="uq_match_participant_seat"),
        db.CheckConstraint("seat >= 1 AND seat <= 10", name="seat_range"),
    )

    id = db.Column(db.Integer, primary_key=True)
    result_id = db.Column(
        db.Integer,
        db.ForeignKey("match_results.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    seat = db.Column(db.Integer, nullable=False)
    score = db.Column(db.Float, nullable=False, default=0.0)
    is_winner = db.Column(db.Boolean, nullable=False, default=False, server_default=db.false())

    result = db.relationship("MatchResult", back_populates="participants")
    user = db.relationship("User")

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "username": self.user.username if self.user else None,
            "seat": self.seat,
            "score": self.score,
            "is_winner": bool(self.is_winner),
        }


class PlaySession(db.Model):
    """A head-to-head series of rounds; each submitted round becomes a MatchResult."""

    __tablename__ = "play_sessions"
    __table_args__ = (
        db.CheckConstraint("total_rounds >= 1 AND total_rounds <= 10", name="total_rounds"),
        db.CheckConstraint(
            "status IN ('setup', 'in_progress', 'completed', 'cancelled')",
            name="status",
        ),
        db.CheckConstraint("player1_id <> player2_id", name="distinct_players"),
    )

    STATUSES = ("setup", "in_progress", "completed", "cancelled")
    FINAL_STATUSES = ("completed", "cancelled")

    id = db.Column(db.Integer, primary_key=True)
    game_id = db.Column(
        db.Integer,
        db.ForeignKey("games.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    started_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    player1_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    player2_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    total_rounds = db.Column(db.Integer, nullable=False, default=1)
    current_round = db.Column(db.Integer, nullable=False, default=1)
    status = db.Column(db.String(20), nullable=False, default="setup", server_default="setup")
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    completed_at = db.Column(db.DateTime, nullable=True)

    game = db.relationship("Game", back_populates="play_sessions")
    starter = db.relationship("User", foreign_keys=[started_by])
    player1 = db.relationship("User", foreign_keys=[player1_id])
    player2 = db.relationship("User", foreign_keys=[player2_id])
    results = db.relationship(
        "MatchResult",
        back_populates="play_session",
        passive_deletes=True,
        order_by="MatchResult.played_at",
    )

    @property
    def is_final(self) -> bool:
        return self.status in self.FINAL_STATUSES

    def to_dict(self, *, include_results: bool = False) -> dict:
        data = {
            "id": self.id,
            "game_id": self.game_id,
            "game_name": self.game.name if self.game else None,
            "started_by": self.started_by,
            "player1_id": self.player1_id,
            "player1_username": self.player1.username if self.player1 else None,
            "player2_id": self.player2_id,
            "player2_username": self.player2.username if self.player2 else None,
            "total_rounds": self.total_rounds,
            "current_round": self.current_round,
            "status": self.status,
            "created_at": isoformat(self.created_at),
            "completed_at": isoformat(self.completed_at),
        }
        if include_results:
            data["results"] = [r.to_dict() for r in self.results]
        return data
