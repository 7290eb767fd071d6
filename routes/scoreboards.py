"""Global and top-N scoreboards."""

from __future__ import annotations

from flask import jsonify, request

from services import scoreboard_service
from utils.validation import parse_limit

from .base import api_bp, get_store


@api_bp.get("/scoreboards")
def scoreboards_global():
    return jsonify(scoreboard_service.global_scoreboard(get_store()))


@api_bp.get("/scoreboards/top")
def scoreboards_top():
    sort_by = (request.args.get("sort_by") or "win_rate").strip().lower()
    limit = parse_limit(request.args.get("limit"))
    players = scoreboard_service.top_players(get_store(), sort_by=sort_by, limit=limit)
    return jsonify({"sort_by": sort_by, "limit": limit, "players": players})
