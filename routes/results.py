"""Match result recording and history."""

from __future__ import annotations

from flask import request
from flask_login import login_required

from services import result_service
from utils.validation import parse_limit, parse_optional_positive_int

from .base import api_bp, current_player, get_store, json_body, ok, path_id

_TRUTHY = {"1", "true", "yes", "on"}


def _arg(*names: str):
    for name in names:
        value = request.args.get(name)
        if value is not None:
            return value
    return None


@api_bp.get("/results")
def results_list():
    recent = (request.args.get("recent") or "").lower() in _TRUTHY
    raw_limit = request.args.get("limit")
    limit = parse_limit(raw_limit) if (recent or raw_limit) else None
    results = result_service.list_results(
        get_store(),
        game_id=parse_optional_positive_int(_arg("game_id", "gameId"), field="game_id"),
        player_id=parse_optional_positive_int(_arg("user_id", "userId"), field="user_id"),
        recent=recent,
        limit=limit,
    )
    return ok([r.to_dict() for r in results], "Game results retrieved successfully")


@api_bp.post("/results")
@login_required
def results_create():
    result = result_service.create_result(get_store(), json_body(), actor=current_player())
    return ok(result.to_dict(), "Game result created successfully", status=201)


@api_bp.get("/results/<result_id>")
def results_detail(result_id: str):
    result = result_service.get_result(get_store(), path_id(result_id, "game result"))
    return ok(result.to_dict(), "Game result retrieved successfully")


@api_bp.put("/results/<result_id>")
@login_required
def results_update(result_id: str):
    rid = path_id(result_id, "game result")
    result = result_service.update_result(get_store(), rid, json_body(), actor=current_player())
    return ok(result.to_dict(), "Game result updated successfully")


@api_bp.delete("/results/<result_id>")
@login_required
def results_delete(result_id: str):
    result_service.delete_result(get_store(), path_id(result_id, "game result"), actor=current_player())
    return ok(message="Game result deleted successfully")
