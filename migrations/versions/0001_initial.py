"""Initial baseline migration for Game Tracker."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Players --------------------------------------------------------------
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("username", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "auth_sessions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("token_hash", sa.String(length=64), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], name="fk_auth_sessions_user_id_users", ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_auth_sessions"),
    )
    op.create_index("ix_auth_sessions_token_hash", "auth_sessions", ["token_hash"], unique=True)
    op.create_index("ix_auth_sessions_user_id", "auth_sessions", ["user_id"], unique=False)
    op.create_index("ix_auth_sessions_expires_at", "auth_sessions", ["expires_at"], unique=False)

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column("action", sa.String(length=120), nullable=False),
        sa.Column("details", sa.JSON(), nullable=True),
        sa.Column("ip_address", sa.String(length=64), nullable=True),
        sa.Column("user_agent", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(
            ["user_id"], ["users.id"], name="fk_audit_logs_user_id_users", ondelete="SET NULL"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_audit_logs"),
    )
    op.create_index("ix_audit_logs_user_id", "audit_logs", ["user_id"], unique=False)
    op.create_index("ix_audit_logs_created_at", "audit_logs", ["created_at"], unique=False)

    # Games ----------------------------------------------------------------
    op.create_table(
        "games",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("category", sa.String(length=10), nullable=False),
        sa.Column("image_url", sa.String(length=500), nullable=True),
        sa.Column("created_by", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("category IN ('video', 'table', 'card')", name="ck_games_category"),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"], name="fk_games_created_by_users"),
        sa.PrimaryKeyConstraint("id", name="pk_games"),
    )
    op.create_index("ix_games_name", "games", ["name"], unique=False)
    op.create_index("ix_games_category", "games", ["category"], unique=False)
    op.create_index("ix_games_created_by", "games", ["created_by"], unique=False)
    op.create_index("ix_games_created_at", "games", ["created_at"], unique=False)

    # Play sessions ------------------------------------------------------
    op.create_table(
        "play_sessions",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("game_id", sa.Integer(), nullable=False),
        sa.Column("started_by", sa.Integer(), nullable=False),
        sa.Column("player1_id", sa.Integer(), nullable=False),
        sa.Column("player2_id", sa.Integer(), nullable=False),
        sa.Column("total_rounds", sa.Integer(), nullable=False),
        sa.Column("current_round", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="setup"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.CheckConstraint("total_rounds >= 1 AND total_rounds <= 10", name="ck_play_sessions_total_rounds"),
        sa.CheckConstraint(
            "status IN ('setup', 'in_progress', 'completed', 'cancelled')",
            name="ck_play_sessions_status",
        ),
        sa.CheckConstraint("player1_id <> player2_id", name="ck_play_sessions_distinct_players"),
        sa.ForeignKeyConstraint(
            ["game_id"], ["games.id"], name="fk_play_sessions_game_id_games", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["started_by"], ["users.id"], name="fk_play_sessions_started_by_users"),
        sa.ForeignKeyConstraint(["player1_id"], ["users.id"], name="fk_play_sessions_player1_id_users"),
        sa.ForeignKeyConstraint(["player2_id"], ["users.id"], name="fk_play_sessions_player2_id_users"),
        sa.PrimaryKeyConstraint("id", name="pk_play_sessions"),
    )
    for column in ("game_id", "started_by", "player1_id", "player2_id", "created_at"):
        op.create_index(f"ix_play_sessions_{column}", "play_sessions", [column], unique=False)

    # Match results ------------------------------------------------------
    op.create_table(
        "match_results",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("game_id", sa.Integer(), nullable=False),
        sa.Column("play_session_id", sa.Integer(), nullable=True),
        sa.Column("recorded_by", sa.Integer(), nullable=True),
        sa.Column("played_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("notes", sa.String(length=500), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(
            ["game_id"], ["games.id"], name="fk_match_results_game_id_games", ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["play_session_id"],
            ["play_sessions.id"],
            name="fk_match_results_play_session_id_play_sessions",
            ondelete="SET NULL",
        ),
        sa.ForeignKeyConstraint(
            ["recorded_by"], ["users.id"], name="fk_match_results_recorded_by_users", ondelete="SET NULL"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_match_results"),
    )
    for column in ("game_id", "play_session_id", "recorded_by", "played_at"):
        op.create_index(f"ix_match_results_{column}", "match_results", [column], unique=False)

    op.create_table(
        "match_participants",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("result_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("seat", sa.Integer(), nullable=False),
        sa.Column("score", sa.Float(), nullable=False),
        sa.Column("is_winner", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.CheckConstraint("seat >= 1 AND seat <= 10", name="ck_match_participants_seat_range"),
        sa.ForeignKeyConstraint(
            ["result_id"],
            ["match_results.id"],
            name="fk_match_participants_result_id_match_results",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], name="fk_match_participants_user_id_users"),
        sa.PrimaryKeyConstraint("id", name="pk_match_participants"),
        sa.UniqueConstraint("result_id", "user_id", name="uq_match_participant_user"),
        sa.UniqueConstraint("result_id", "seat", name="uq_match_participant_seat"),
    )
    op.create_index("ix_match_participants_result_id", "match_participants", ["result_id"], unique=False)
    op.create_index("ix_match_participants_user_id", "match_participants", ["user_id"], unique=False)


def downgrade() -> None:
    op.drop_table("match_participants")
    op.drop_table("match_results")
    op.drop_table("play_sessions")
    op.drop_table("games")
    op.drop_table("audit_logs")
    op.drop_table("auth_sessions")
    op.drop_table("users")
