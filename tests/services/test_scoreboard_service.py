from datetime import datetime

import pytest

from factories import create_game, create_player, record_result
from services import scoreboard_service
from utils.errors import NotFoundError, ValidationError


@pytest.fixture
def league(store):
    alice = create_player(store, "alice")
    bob = create_player(store, "bob")
    charlie = create_player(store, "charlie")
    game1 = create_game(store, creator=alice, name="Test Game 1", category="video")
    game2 = create_game(store, creator=bob, name="Test Game 2", category="table")
    record_result(store, game1, [(alice, 100, True), (bob, 80, False)], played_at=datetime(2024, 1, 1))
    record_result(store, game1, [(bob, 90, False), (charlie, 110, True)], played_at=datetime(2024, 1, 2))
    record_result(store, game2, [(charlie, 50, False), (alice, 70, True)], played_at=datetime(2024, 1, 3))
    store.commit()
    return store, game1, game2


def test_global_scoreboard_totals_and_order(league):
    store, _game1, _game2 = league
    board = scoreboard_service.global_scoreboard(store)

    assert [p["username"] for p in board["players"]] == ["alice", "charlie", "bob"]
    alice, charlie, bob = board["players"]
    assert (alice["wins"], alice["losses"], alice["win_rate"]) == (2, 0, 100)
    assert (alice["current_streak"], alice["longest_streak"]) == (2, 2)
    assert alice["avg_score"] == 85
    assert (bob["wins"], bob["losses"], bob["win_rate"]) == (0, 2, 0)
    assert (bob["current_streak"], bob["longest_streak"]) == (-2, 0)
    assert (charlie["current_streak"], charlie["longest_streak"]) == (-1, 1)

    summary = board["summary"]
    assert summary["total_players"] == 3
    assert summary["total_games_played"] == 6
    assert {g["name"]: (g["total_games"], g["unique_players"]) for g in summary["games_available"]} == {
        "Test Game 1": (2, 3),
        "Test Game 2": (1, 2),
    }


def test_game_scoreboard_is_scoped_to_game(league):
    store, game1, _game2 = league
    board = scoreboard_service.game_scoreboard(store, game1.id)
    assert board["game_name"] == "Test Game 1"
    # charlie and alice tie on wins and win rate; charlie's higher average decides it
    assert [p["username"] for p in board["players"]] == ["charlie", "alice", "bob"]


def test_game_scoreboard_unknown_game(store):
    with pytest.raises(NotFoundError, match="Game not found"):
        scoreboard_service.game_scoreboard(store, 404)


def test_top_players_sorting(league):
    store, _game1, _game2 = league
    by_rate = scoreboard_service.top_players(store, sort_by="win_rate", limit=2)
    assert [p["username"] for p in by_rate] == ["alice", "charlie"]
    with pytest.raises(ValidationError):
        scoreboard_service.top_players(store, sort_by="elo")


def test_player_profile_breakdown(league):
    store, game1, game2 = league
    profile = scoreboard_service.player_profile(store, 1)

    assert profile["player"]["username"] == "alice"
    assert profile["player"]["games_played"] == 2
    games = {g["game_id"]: g for g in profile["games"]}
    assert games[game1.id]["best_score"] == 100
    assert games[game2.id]["wins"] == 1
    assert [r["played_at"][:10] for r in profile["recent_results"]] == ["2024-01-03", "2024-01-01"]


def test_player_profile_without_results(store):
    loner = create_player(store, "loner")
    store.commit()
    profile = scoreboard_service.player_profile(store, loner.id)
    assert profile["player"]["games_played"] == 0
    assert profile["games"] == []
    assert profile["recent_results"] == []


def test_game_stats_include_unplayed_games(league):
    store, _game1, _game2 = league
    lonely = create_game(store, creator=store.get_player(1), name="Unplayed")
    store.commit()

    stats = {row["game_name"]: row for row in scoreboard_service.game_stats(store)}
    assert stats["Test Game 1"]["total_plays"] == 2
    assert stats["Test Game 1"]["highest_score"] == 110
    assert stats["Test Game 1"]["lowest_score"] == 80
    assert stats["Test Game 1"]["average_score"] == 95
    assert stats["Unplayed"]["total_plays"] == 0
    assert stats["Unplayed"]["last_played"] is not None
    assert lonely.id in {row["game_id"] for row in stats.values()}
