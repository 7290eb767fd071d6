"""Head-to-head play sessions and their rounds."""

from __future__ import annotations

from flask_login import login_required

from services import play_session_service

from .base import api_bp, current_player, get_store, json_body, ok, path_id


@api_bp.post("/games/<game_id>/sessions")
@login_required
def play_sessions_create(game_id: str):
    session = play_session_service.create_play_session(
        get_store(), path_id(game_id, "game"), json_body(), actor=current_player()
    )
    return ok(session.to_dict(), "Game session created successfully", status=201)


@api_bp.get("/games/<game_id>/sessions")
def play_sessions_list(game_id: str):
    sessions = play_session_service.list_play_sessions(get_store(), path_id(game_id, "game"))
    return ok([s.to_dict() for s in sessions])


@api_bp.get("/sessions/<session_id>")
def play_sessions_detail(session_id: str):
    session = play_session_service.get_play_session(get_store(), path_id(session_id, "session"))
    return ok(session.to_dict(include_results=True))


@api_bp.put("/sessions/<session_id>")
@login_required
def play_sessions_update(session_id: str):
    session = play_session_service.update_play_session(
        get_store(), path_id(session_id, "session"), json_body(), actor=current_player()
    )
    return ok(session.to_dict(), "Session updated successfully")


@api_bp.post("/sessions/<session_id>/results")
@login_required
def play_sessions_submit(session_id: str):
    result, completed = play_session_service.submit_round(
        get_store(), path_id(session_id, "session"), json_body(), actor=current_player()
    )
    return ok(
        {"result": result.to_dict(), "session_completed": completed},
        "Results submitted successfully",
        status=201,
    )
