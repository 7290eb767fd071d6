from factories import create_game, create_player, record_result


def test_register_and_list_players(client):
    created = client.post("/api/users", json={"username": "  alice "})
    assert created.status_code == 201
    body = created.get_json()
    assert body["success"] is True
    assert body["message"] == "User created successfully"
    assert body["data"]["username"] == "alice"

    client.post("/api/users", json={"username": "bob"})
    listing = client.get("/api/users").get_json()
    assert [u["username"] for u in listing["data"]] == ["alice", "bob"]


def test_register_rejects_duplicate_and_invalid_names(client):
    client.post("/api/users", json={"username": "alice"})

    dup = client.post("/api/users", json={"username": "alice"})
    assert dup.status_code == 409
    assert dup.get_json() == {"success": False, "error": "Username already exists", "field": "username"}

    bad = client.post("/api/users", json={"username": "no spaces"})
    assert bad.status_code == 400
    assert bad.get_json()["field"] == "username"


def test_user_detail_validates_id(client, seed):
    with seed() as store:
        alice_id = create_player(store, "alice").id

    assert client.get(f"/api/users/{alice_id}").get_json()["data"]["username"] == "alice"

    bad = client.get("/api/users/abc")
    assert bad.status_code == 400
    assert bad.get_json()["error"] == "Invalid user ID"

    missing = client.get("/api/users/999")
    assert missing.status_code == 404
    assert missing.get_json()["error"] == "User not found"


def test_update_requires_login_and_ownership(client, seed, login):
    with seed() as store:
        alice_id = create_player(store, "alice").id
        bob_id = create_player(store, "bob").id

    assert client.put(f"/api/users/{alice_id}", json={"username": "x_alice"}).status_code == 401

    login("bob")
    forbidden = client.put(f"/api/users/{alice_id}", json={"username": "x_alice"})
    assert forbidden.status_code == 403

    renamed = client.put(f"/api/users/{bob_id}", json={"username": "bobby"})
    assert renamed.status_code == 200
    assert renamed.get_json()["data"]["username"] == "bobby"


def test_delete_self_only_when_unreferenced(client, seed, login):
    with seed() as store:
        alice = create_player(store, "alice")
        bob = create_player(store, "bob")
        loner_id = create_player(store, "loner").id
        game = create_game(store, creator=alice)
        record_result(store, game, [(alice, 1, True), (bob, 0, False)])
        alice_id, bob_id = alice.id, bob.id

    login("alice")
    assert client.delete(f"/api/users/{alice_id}").status_code == 409
    assert client.delete(f"/api/users/{bob_id}").status_code == 403

    login("bob")
    blocked = client.delete(f"/api/users/{bob_id}")
    assert blocked.status_code == 409
    assert blocked.get_json()["error"] == "Cannot delete a user with recorded results"

    login("loner")
    assert client.delete(f"/api/users/{loner_id}").status_code == 200
    assert client.get(f"/api/users/{loner_id}").status_code == 404
    # the deleted player's sessions went with them
    assert client.get("/api/auth/me").status_code == 401


def test_user_stats_profile(client, seed):
    with seed() as store:
        alice = create_player(store, "alice")
        bob = create_player(store, "bob")
        game = create_game(store, creator=alice, name="Chess", category="table")
        record_result(store, game, [(alice, 10, True), (bob, 4, False)])
        alice_id = alice.id

    resp = client.get(f"/api/users/{alice_id}/stats")
    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["player"]["wins"] == 1
    assert data["player"]["current_streak"] == 1
    assert [g["game_name"] for g in data["games"]] == ["Chess"]
    assert len(data["recent_results"]) == 1
