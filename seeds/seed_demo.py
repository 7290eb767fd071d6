from __future__ import annotations

from datetime import datetime

from models import Game, MatchParticipant, MatchResult, User

DEMO_PLAYERS = ["alice_gamer", "bob_player", "charlie_pro"]

DEMO_GAMES = [
    ("Rocket League", "video"),
    ("Catan", "table"),
    ("Uno", "card"),
]

# (game name, played_at, [(username, score, is_winner), ...])
DEMO_RESULTS = [
    ("Rocket League", datetime(2024, 1, 5, 18, 0), [("alice_gamer", 3, True), ("bob_player", 1, False)]),
    ("Rocket League", datetime(2024, 1, 6, 18, 0), [("bob_player", 2, False), ("charlie_pro", 4, True)]),
    (
        "Catan",
        datetime(2024, 1, 7, 20, 0),
        [("alice_gamer", 10, True), ("bob_player", 7, False), ("charlie_pro", 8, False)],
    ),
    ("Uno", datetime(2024, 1, 8, 21, 0), [("charlie_pro", 0, False), ("alice_gamer", 120, True)]),
]


def seed_demo_data(store) -> dict:
    """Insert demo players, games and results. Safe to run more than once."""
    created = {"players": 0, "games": 0, "results": 0}

    players = {}
    for username in DEMO_PLAYERS:
        player = store.get_player_by_username(username)
        if player is None:
            player = store.add(User(username=username))
            created["players"] += 1
        players[username] = player
    store.flush()

    owner = players[DEMO_PLAYERS[0]]
    existing_games = {g.name: g for g in store.list_games(created_by=owner.id)}
    games = {}
    new_games = set()
    for name, category in DEMO_GAMES:
        game = existing_games.get(name)
        if game is None:
            game = store.add(Game(name=name, category=category, created_by=owner.id))
            new_games.add(name)
            created["games"] += 1
        games[name] = game
    store.flush()

    for game_name, played_at, rows in DEMO_RESULTS:
        if game_name in new_games:
            store.add(
                MatchResult(
                    game_id=games[game_name].id,
                    played_at=played_at,
                    recorded_by=owner.id,
                    participants=[
                        MatchParticipant(
                            user_id=players[username].id,
                            seat=seat,
                            score=float(score),
                            is_winner=is_winner,
                        )
                        for seat, (username, score, is_winner) in enumerate(rows, start=1)
                    ],
                )
            )
            created["results"] += 1

    store.commit()
    return created
