import pytest

from factories import create_game, create_player


@pytest.fixture
def arena(seed):
    with seed() as store:
        host = create_player(store, "host")
        alice = create_player(store, "alice")
        bob = create_player(store, "bob")
        game = create_game(store, creator=host, name="Chess", category="table")
        ids = {"host": host.id, "alice": alice.id, "bob": bob.id, "game": game.id}
    return ids


def _create(client, ids, rounds=2):
    return client.post(
        f"/api/games/{ids['game']}/sessions",
        json={"player1_id": ids["alice"], "player2_id": ids["bob"], "total_rounds": rounds},
    )


def test_full_session_flow(client, login, arena):
    login("host")
    created = _create(client, arena, rounds=2)
    assert created.status_code == 201
    session = created.get_json()["data"]
    assert (session["status"], session["current_round"]) == ("setup", 1)
    assert session["player1_username"] == "alice"

    started = client.put(f"/api/sessions/{session['id']}", json={"status": "in_progress"})
    assert started.status_code == 200
    assert started.get_json()["data"]["status"] == "in_progress"

    first = client.post(f"/api/sessions/{session['id']}/results", json={"player1_score": 3, "player2_score": 1})
    assert first.status_code == 201
    assert first.get_json()["data"]["session_completed"] is False

    second = client.post(f"/api/sessions/{session['id']}/results", json={"player1_score": 2, "player2_score": 2})
    assert second.get_json()["data"]["session_completed"] is True
    assert len(second.get_json()["data"]["result"]["winner_ids"]) == 2

    detail = client.get(f"/api/sessions/{session['id']}").get_json()["data"]
    assert detail["status"] == "completed"
    assert len(detail["results"]) == 2

    late = client.post(f"/api/sessions/{session['id']}/results", json={"player1_score": 1, "player2_score": 0})
    assert late.status_code == 400
    assert late.get_json()["error"] == "Can only submit results for active sessions"

    reopen = client.put(f"/api/sessions/{session['id']}", json={"status": "in_progress"})
    assert reopen.status_code == 409

    board = client.get(f"/api/games/{arena['game']}/scoreboard").get_json()
    assert {p["username"]: p["wins"] for p in board["players"]} == {"alice": 2, "bob": 1}


def test_only_game_creator_starts_sessions(client, login, arena):
    login("alice")
    resp = _create(client, arena)
    assert resp.status_code == 403
    assert resp.get_json()["error"] == "Only the game creator can start sessions"


def test_session_create_validation(client, login, arena):
    login("host")
    resp = client.post(
        f"/api/games/{arena['game']}/sessions",
        json={"player1_id": arena["alice"], "player2_id": arena["alice"], "total_rounds": 3},
    )
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Players must be different"

    missing_game = client.post("/api/games/999/sessions", json={})
    assert missing_game.status_code == 404


def test_list_sessions_for_game(client, login, arena):
    login("host")
    _create(client, arena, rounds=1)
    _create(client, arena, rounds=3)

    listing = client.get(f"/api/games/{arena['game']}/sessions")
    assert listing.status_code == 200
    assert sorted(s["total_rounds"] for s in listing.get_json()["data"]) == [1, 3]


def test_session_lookup_errors(client):
    assert client.get("/api/sessions/abc").get_json()["error"] == "Invalid session ID"
    missing = client.get("/api/sessions/77")
    assert missing.status_code == 404
    assert missing.get_json()["error"] == "Session not found"
