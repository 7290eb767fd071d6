import pytest

from factories import create_game, create_player, record_result
from models import AuditLog
from services import user_service
from utils.errors import ConflictError, NotFoundError, PermissionDeniedError, ValidationError


def test_register_player_trims_and_audits(store):
    player = user_service.register_player(store, "  new_player ")
    assert player.username == "new_player"
    entry = store.session.query(AuditLog).filter_by(action="player_registered").one()
    assert entry.user_id == player.id


@pytest.mark.parametrize(
    "username, message",
    [
        (None, "Username is required"),
        ("   ", "Username is required"),
        ("ab", "at least 3 characters"),
        ("x" * 21, "at most 20 characters"),
        ("bad name!", "letters, numbers, underscores, and hyphens"),
    ],
)
def test_register_player_validates_username(store, username, message):
    with pytest.raises(ValidationError) as exc:
        user_service.register_player(store, username)
    assert message in exc.value.message


def test_register_player_rejects_duplicates(store):
    user_service.register_player(store, "alice")
    with pytest.raises(ConflictError, match="Username already exists"):
        user_service.register_player(store, "alice")


def test_update_player_is_self_only(store):
    alice = create_player(store, "alice")
    bob = create_player(store, "bob")
    store.commit()

    with pytest.raises(PermissionDeniedError):
        user_service.update_player(store, alice.id, "alice2", actor=bob)
    with pytest.raises(ConflictError):
        user_service.update_player(store, alice.id, "bob", actor=alice)
    assert user_service.update_player(store, alice.id, "alice_2", actor=alice).username == "alice_2"


def test_delete_player_blocked_by_games_and_history(store):
    owner = create_player(store, "owner")
    rival = create_player(store, "rival")
    loner = create_player(store, "loner")
    game = create_game(store, creator=owner)
    record_result(store, game, [(owner, 2, True), (rival, 1, False)])
    store.commit()

    with pytest.raises(ConflictError, match="created games"):
        user_service.delete_player(store, owner.id, actor=owner)
    with pytest.raises(ConflictError, match="recorded results"):
        user_service.delete_player(store, rival.id, actor=rival)
    with pytest.raises(PermissionDeniedError):
        user_service.delete_player(store, loner.id, actor=rival)

    user_service.delete_player(store, loner.id, actor=loner)
    with pytest.raises(NotFoundError, match="User not found"):
        user_service.get_player(store, loner.id)
