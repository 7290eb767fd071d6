from datetime import datetime

import pytest

from factories import create_game, create_player, record_result


@pytest.fixture
def match_setup(seed):
    with seed() as store:
        alice = create_player(store, "alice")
        bob = create_player(store, "bob")
        create_player(store, "carol")
        game = create_game(store, creator=alice, name="Chess", category="table")
        ids = {"alice": alice.id, "bob": bob.id, "game": game.id}
    return ids


def _payload(ids, **extra):
    body = {
        "game_id": ids["game"],
        "players": [
            {"user_id": ids["alice"], "score": 21, "is_winner": True},
            {"user_id": ids["bob"], "score": 17.5, "is_winner": False},
        ],
    }
    body.update(extra)
    return body


def test_record_result(client, login, match_setup):
    login("bob")
    resp = client.post("/api/results", json=_payload(match_setup, notes="rematch"))
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["message"] == "Game result created successfully"
    data = body["data"]
    assert data["game_name"] == "Chess"
    assert data["recorded_by"] == match_setup["bob"]
    assert data["winner_ids"] == [match_setup["alice"]]
    assert [(p["username"], p["seat"], p["score"]) for p in data["players"]] == [
        ("alice", 1, 21),
        ("bob", 2, 17.5),
    ]
    assert data["played_at"].endswith("Z")


def test_record_result_requires_login(client, match_setup):
    assert client.post("/api/results", json=_payload(match_setup)).status_code == 401


@pytest.mark.parametrize(
    "override, status, message",
    [
        ({"players": None}, 400, "Game ID and players array are required"),
        ({"game_id": "abc"}, 400, "Invalid game ID"),
        ({"game_id": 999}, 404, "Game not found"),
        ({"played_at": "yesterday"}, 400, None),
    ],
)
def test_record_result_rejects_bad_input(client, login, match_setup, override, status, message):
    login("alice")
    payload = _payload(match_setup)
    for key, value in override.items():
        if value is None:
            payload.pop(key)
        else:
            payload[key] = value
    resp = client.post("/api/results", json=payload)
    assert resp.status_code == status
    body = resp.get_json()
    assert body["success"] is False
    if message:
        assert body["error"] == message


def test_record_result_unknown_player(client, login, match_setup):
    login("alice")
    payload = _payload(match_setup)
    payload["players"][1]["user_id"] = 999
    resp = client.post("/api/results", json=payload)
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "Player not found"


def test_list_results_filters_and_order(client, seed, match_setup):
    with seed() as store:
        alice = store.get_player(match_setup["alice"])
        bob = store.get_player(match_setup["bob"])
        carol = store.get_player_by_username("carol")
        game = store.get_game(match_setup["game"])
        other = create_game(store, creator=bob, name="Go")
        record_result(store, game, [(alice, 1, True), (bob, 0, False)], played_at=datetime(2024, 1, 1))
        record_result(store, game, [(bob, 1, True), (carol, 0, False)], played_at=datetime(2024, 1, 3))
        record_result(store, other, [(alice, 1, False), (carol, 2, True)], played_at=datetime(2024, 1, 2))
        other_id = other.id

    def dates(query=""):
        data = client.get(f"/api/results{query}").get_json()["data"]
        return [r["played_at"][:10] for r in data]

    assert dates() == ["2024-01-03", "2024-01-02", "2024-01-01"]
    assert dates(f"?game_id={other_id}") == ["2024-01-02"]
    assert dates(f"?user_id={match_setup['alice']}") == ["2024-01-02", "2024-01-01"]
    assert dates("?recent=true&limit=2") == ["2024-01-03", "2024-01-02"]
    assert client.get("/api/results?limit=0").status_code == 400


def test_result_detail_update_and_delete(client, login, match_setup):
    login("bob")
    created = client.post("/api/results", json=_payload(match_setup)).get_json()["data"]
    result_id = created["id"]

    assert client.get(f"/api/results/{result_id}").get_json()["data"]["id"] == result_id
    assert client.get("/api/results/x").get_json()["error"] == "Invalid game result ID"
    assert client.get("/api/results/999").get_json()["error"] == "Game result not found"

    updated = client.put(
        f"/api/results/{result_id}",
        json={
            "players": [
                {"user_id": match_setup["bob"], "score": 30, "is_winner": True},
                {"user_id": match_setup["alice"], "score": 12, "is_winner": False},
            ],
            "notes": "recount",
        },
    )
    assert updated.status_code == 200
    data = updated.get_json()["data"]
    assert data["winner_ids"] == [match_setup["bob"]]
    assert data["notes"] == "recount"

    login("carol")
    assert client.put(f"/api/results/{result_id}", json={"notes": "hijack"}).status_code == 403
    assert client.delete(f"/api/results/{result_id}").status_code == 403

    # game creator may remove results recorded by others
    login("alice")
    deleted = client.delete(f"/api/results/{result_id}")
    assert deleted.status_code == 200
    assert client.get(f"/api/results/{result_id}").status_code == 404
