"""Player registration and profiles."""

from __future__ import annotations

from flask_login import login_required

from services import scoreboard_service, user_service

from .base import api_bp, current_player, get_store, json_body, ok, path_id


@api_bp.get("/users")
def users_list():
    players = user_service.list_players(get_store())
    return ok([p.to_dict() for p in players], "Users retrieved successfully")


@api_bp.post("/users")
def users_create():
    body = json_body()
    player = user_service.register_player(get_store(), body.get("username"))
    return ok(player.to_dict(), "User created successfully", status=201)


@api_bp.get("/users/<user_id>")
def users_detail(user_id: str):
    player = user_service.get_player(get_store(), path_id(user_id, "user"))
    return ok(player.to_dict(), "User retrieved successfully")


@api_bp.put("/users/<user_id>")
@login_required
def users_update(user_id: str):
    player_id = path_id(user_id, "user")
    body = json_body()
    player = user_service.update_player(
        get_store(), player_id, body.get("username"), actor=current_player()
    )
    return ok(player.to_dict(), "User updated successfully")


@api_bp.delete("/users/<user_id>")
@login_required
def users_delete(user_id: str):
    user_service.delete_player(get_store(), path_id(user_id, "user"), actor=current_player())
    return ok(message="User deleted successfully")


@api_bp.get("/users/<user_id>/stats")
def users_stats(user_id: str):
    profile = scoreboard_service.player_profile(get_store(), path_id(user_id, "user"))
    return ok(profile)
