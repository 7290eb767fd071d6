"""Player statistics: aggregation, streaks and ranking.

Everything here is pure: callers hand in rows already fetched from the
store, so the functions can be exercised without a database.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Iterable, List, Sequence, Tuple

# Streaks only look at a player's most recent results.
STREAK_WINDOW = 50


@dataclass(frozen=True)
class ParticipationEvent:
    """One participant row of one recorded result."""

    player_id: int
    username: str
    score: float
    is_winner: bool


@dataclass
class PlayerStats:
    player_id: int
    username: str
    games_played: int = 0
    wins: int = 0
    losses: int = 0
    win_rate: float = 0.0
    total_score: float = 0.0
    avg_score: float = 0.0
    current_streak: int = 0
    longest_streak: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


def _win_rate(wins: int, games_played: int) -> float:
    if not games_played:
        return 0.0
    return round(wins / games_played * 100, 2)


def aggregate_player_stats(events: Iterable[ParticipationEvent]) -> List[PlayerStats]:
    """Fold participation events into one PlayerStats per player, ordered by player id.

    Streak fields are left at zero; see ``compute_streaks``.
    """
    buckets: dict[int, PlayerStats] = {}
    for event in events:
        stats = buckets.get(event.player_id)
        if stats is None:
            stats = buckets[event.player_id] = PlayerStats(
                player_id=event.player_id, username=event.username
            )
        stats.games_played += 1
        if event.is_winner:
            stats.wins += 1
        stats.total_score += float(event.score or 0)

    out = []
    for player_id in sorted(buckets):
        stats = buckets[player_id]
        stats.losses = stats.games_played - stats.wins
        stats.win_rate = _win_rate(stats.wins, stats.games_played)
        stats.avg_score = round(stats.total_score / stats.games_played, 2)
        out.append(stats)
    return out


def compute_streaks(outcomes: Sequence[bool]) -> Tuple[int, int]:
    """Return ``(current_streak, longest_streak)`` from newest-first win flags.

    The current streak is negative for a run of losses. The longest streak
    only counts wins. Outcomes beyond ``STREAK_WINDOW`` are ignored.
    """
    window = list(outcomes)[:STREAK_WINDOW]
    if not window:
        return 0, 0

    polarity = window[0]
    current = 0
    for won in window:
        if won != polarity:
            break
        current += 1
    if not polarity:
        current = -current

    longest = 0
    run = 0
    for won in window:
        if won:
            run += 1
            longest = max(longest, run)
        else:
            run = 0
    return current, longest


def rank_players(stats: Iterable[PlayerStats]) -> List[PlayerStats]:
    """Order by wins, then win rate, then average score, all descending.

    ``sorted`` is stable, so ties keep their incoming (player id) order.
    """
    return sorted(stats, key=lambda s: (s.wins, s.win_rate, s.avg_score), reverse=True)


__all__ = [
    "STREAK_WINDOW",
    "ParticipationEvent",
    "PlayerStats",
    "aggregate_player_stats",
    "compute_streaks",
    "rank_players",
]
