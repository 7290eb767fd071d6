"""Game catalogue, per-game scoreboards and game statistics."""

from __future__ import annotations

from flask import jsonify, request
from flask_login import login_required

from services import game_service, scoreboard_service
from utils.validation import parse_optional_positive_int

from .base import api_bp, current_player, get_store, json_body, ok, path_id


@api_bp.get("/games")
def games_list():
    games = game_service.list_games(
        get_store(),
        category=request.args.get("type") or None,
        created_by=parse_optional_positive_int(request.args.get("created_by"), field="created_by"),
        search=request.args.get("q") or None,
    )
    return ok([g.to_dict() for g in games], "Games retrieved successfully")


@api_bp.post("/games")
@login_required
def games_create():
    game = game_service.create_game(get_store(), json_body(), actor=current_player())
    return ok(game.to_dict(), "Game created successfully", status=201)


@api_bp.get("/games/stats")
def games_stats():
    return ok(scoreboard_service.game_stats(get_store()))


@api_bp.get("/games/<game_id>")
def games_detail(game_id: str):
    game = game_service.get_game(get_store(), path_id(game_id, "game"))
    return ok(game.to_dict(), "Game retrieved successfully")


@api_bp.put("/games/<game_id>")
@login_required
def games_update(game_id: str):
    gid = path_id(game_id, "game")
    game = game_service.update_game(get_store(), gid, json_body(), actor=current_player())
    return ok(game.to_dict(), "Game updated successfully")


@api_bp.delete("/games/<game_id>")
@login_required
def games_delete(game_id: str):
    game_service.delete_game(get_store(), path_id(game_id, "game"), actor=current_player())
    return ok(message="Game deleted successfully")


@api_bp.get("/games/<game_id>/scoreboard")
def games_scoreboard(game_id: str):
    board = scoreboard_service.game_scoreboard(get_store(), path_id(game_id, "game"))
    return jsonify(board)
