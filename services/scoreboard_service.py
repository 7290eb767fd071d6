"""Scoreboards and player profiles.

Every call re-reads the store; nothing here is cached.
"""
from __future__ import annotations

from collections import defaultdict
from typing import List, Optional

from services.game_service import get_game
from services.stats import (
    PlayerStats,
    aggregate_player_stats,
    compute_streaks,
    rank_players,
)
from services.user_service import get_player
from utils.errors import ValidationError
from utils.time import isoformat

TOP_SORT_KEYS = {
    "wins": lambda s: (s.wins, s.win_rate),
    "win_rate": lambda s: (s.win_rate, s.wins),
}
RECENT_RESULTS_LIMIT = 10


def _attach_streaks(store, stats: List[PlayerStats], *, game_id: Optional[int] = None) -> List[PlayerStats]:
    for entry in stats:
        outcomes = store.recent_outcomes(entry.player_id, game_id=game_id)
        entry.current_streak, entry.longest_streak = compute_streaks(outcomes)
    return stats


def ranked_player_stats(store, *, game_id: Optional[int] = None) -> List[PlayerStats]:
    stats = aggregate_player_stats(store.participation_events(game_id=game_id))
    return rank_players(_attach_streaks(store, stats, game_id=game_id))


def global_scoreboard(store) -> dict:
    players = ranked_player_stats(store)
    return {
        "players": [p.to_dict() for p in players],
        "summary": {
            "total_players": len(players),
            "total_games_played": sum(p.games_played for p in players),
            "games_available": store.game_breakdown(),
        },
    }


def game_scoreboard(store, game_id: int) -> dict:
    game = get_game(store, game_id)
    players = ranked_player_stats(store, game_id=game.id)
    return {
        "game_id": game.id,
        "game_name": game.name,
        "players": [p.to_dict() for p in players],
    }


def top_players(store, *, sort_by: str = "win_rate", limit: int = 10) -> List[dict]:
    key = TOP_SORT_KEYS.get(sort_by)
    if key is None:
        raise ValidationError(
            f"sort_by must be one of: {', '.join(TOP_SORT_KEYS)}", field="sort_by", value=sort_by
        )
    stats = aggregate_player_stats(store.participation_events())
    top = sorted(stats, key=key, reverse=True)[:limit]
    return [p.to_dict() for p in _attach_streaks(store, top)]


def player_profile(store, player_id: int) -> dict:
    player = get_player(store, player_id)
    rows = store.player_participations(player.id)

    overall = aggregate_player_stats(event for _, _, event in rows)
    summary = overall[0] if overall else PlayerStats(player_id=player.id, username=player.username)
    summary.current_streak, summary.longest_streak = compute_streaks(store.recent_outcomes(player.id))

    per_game: dict[int, list] = defaultdict(list)
    names: dict[int, str] = {}
    for game_id, game_name, event in rows:
        per_game[game_id].append(event)
        names[game_id] = game_name

    breakdown = []
    for game_id in sorted(per_game):
        events = per_game[game_id]
        (stats,) = aggregate_player_stats(events)
        breakdown.append(
            {
                "game_id": game_id,
                "game_name": names[game_id],
                "games_played": stats.games_played,
                "wins": stats.wins,
                "win_rate": stats.win_rate,
                "avg_score": stats.avg_score,
                "best_score": max(e.score for e in events),
            }
        )
    breakdown.sort(key=lambda g: g["games_played"], reverse=True)

    recent = store.list_results(player_id=player.id, limit=RECENT_RESULTS_LIMIT)
    return {
        "player": summary.to_dict(),
        "games": breakdown,
        "recent_results": [r.to_dict() for r in recent],
    }


def game_stats(store) -> List[dict]:
    out = []
    for row in store.game_score_summaries():
        avg = row["average_score"]
        out.append(
            {
                "game_id": row["game_id"],
                "game_name": row["game_name"],
                "type": row["type"],
                "total_plays": row["total_plays"],
                "unique_players": row["unique_players"],
                "average_score": round(float(avg), 2) if avg is not None else 0,
                "highest_score": row["highest_score"] if row["highest_score"] is not None else 0,
                "lowest_score": row["lowest_score"] if row["lowest_score"] is not None else 0,
                "last_played": isoformat(row["last_played"] or row["created_at"]),
            }
        )
    return out


__all__ = [
    "game_scoreboard",
    "game_stats",
    "global_scoreboard",
    "player_profile",
    "ranked_player_stats",
    "top_players",
]
