"""Weekly event schema: leagues, players, events, attendance, draws, pairs, matches, scoring

Revision ID: 001_weekly_event
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy import inspect

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_weekly_event"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    bind = op.get_bind()
    tables = inspect(bind).get_table_names()

    if "league" not in tables:
        op.create_table(
            "league",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("name", sa.String(), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint("id"),
        )

    if "player" not in tables:
        op.create_table(
            "player",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("full_name", sa.String(), nullable=False),
            sa.Column("nickname", sa.String(), nullable=True),
            sa.Column("ranking_points", sa.Integer(), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.PrimaryKeyConstraint("id"),
        )

    if "weekly_event" not in tables:
        op.create_table(
            "weekly_event",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("league_id", sa.Integer(), nullable=False),
            sa.Column("event_date", sa.Date(), nullable=False),
            sa.Column("status", sa.String(), nullable=False),
            sa.Column("duos_generated", sa.Boolean(), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(["league_id"], ["league.id"]),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("league_id", "event_date", name="uq_league_event_date"),
        )
        op.create_index(op.f("ix_weekly_event_league_id"), "weekly_event", ["league_id"], unique=False)

    if "event_attendance" not in tables:
        op.create_table(
            "event_attendance",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("event_id", sa.Integer(), nullable=False),
            sa.Column("player_id", sa.Integer(), nullable=False),
            sa.Column("status", sa.String(), nullable=False),
            sa.Column("updated_at", sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(["event_id"], ["weekly_event.id"]),
            sa.ForeignKeyConstraint(["player_id"], ["player.id"]),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("event_id", "player_id", name="uq_event_attendance_player"),
        )
        op.create_index(op.f("ix_event_attendance_event_id"), "event_attendance", ["event_id"], unique=False)
        op.create_index(op.f("ix_event_attendance_player_id"), "event_attendance", ["player_id"], unique=False)

    if "draw" not in tables:
        op.create_table(
            "draw",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("league_id", sa.Integer(), nullable=False),
            sa.Column("event_id", sa.Integer(), nullable=True),
            sa.Column("event_date", sa.Date(), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.Column("created_by", sa.String(), nullable=True),
            sa.ForeignKeyConstraint(["league_id"], ["league.id"]),
            sa.ForeignKeyConstraint(["event_id"], ["weekly_event.id"]),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("league_id", "event_date", name="uq_draw_league_date"),
        )
        op.create_index(op.f("ix_draw_league_id"), "draw", ["league_id"], unique=False)

    if "pair" not in tables:
        op.create_table(
            "pair",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("draw_id", sa.Integer(), nullable=False),
            sa.Column("sequence", sa.Integer(), nullable=False),
            sa.Column("tier", sa.String(), nullable=False),
            sa.Column("player1_id", sa.Integer(), nullable=False),
            sa.Column("player2_id", sa.Integer(), nullable=True),
            sa.ForeignKeyConstraint(["draw_id"], ["draw.id"]),
            sa.ForeignKeyConstraint(["player1_id"], ["player.id"]),
            sa.ForeignKeyConstraint(["player2_id"], ["player.id"]),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("draw_id", "sequence", name="uq_draw_pair_sequence"),
        )
        op.create_index(op.f("ix_pair_draw_id"), "pair", ["draw_id"], unique=False)

    if "match" not in tables:
        op.create_table(
            "match",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("draw_id", sa.Integer(), nullable=False),
            sa.Column("sequence", sa.Integer(), nullable=False),
            sa.Column("tier", sa.String(), nullable=False),
            sa.Column("pair_a_id", sa.Integer(), nullable=False),
            sa.Column("pair_b_id", sa.Integer(), nullable=False),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.CheckConstraint("pair_a_id < pair_b_id", name="ck_match_pair_order"),
            sa.ForeignKeyConstraint(["draw_id"], ["draw.id"]),
            sa.ForeignKeyConstraint(["pair_a_id"], ["pair.id"]),
            sa.ForeignKeyConstraint(["pair_b_id"], ["pair.id"]),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("draw_id", "pair_a_id", "pair_b_id", name="uq_draw_matchup"),
            sa.UniqueConstraint("draw_id", "sequence", name="uq_draw_match_sequence"),
        )
        op.create_index(op.f("ix_match_draw_id"), "match", ["draw_id"], unique=False)

    if "blowout_record" not in tables:
        op.create_table(
            "blowout_record",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("event_id", sa.Integer(), nullable=False),
            sa.Column("applier_pair_id", sa.Integer(), nullable=True),
            sa.Column("applier_player_id", sa.Integer(), nullable=False),
            sa.Column("victim_player_id", sa.Integer(), nullable=False),
            sa.Column("source", sa.String(), nullable=False),
            sa.Column("created_by", sa.String(), nullable=True),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(["event_id"], ["weekly_event.id"]),
            sa.ForeignKeyConstraint(["applier_pair_id"], ["pair.id"]),
            sa.ForeignKeyConstraint(["applier_player_id"], ["player.id"]),
            sa.ForeignKeyConstraint(["victim_player_id"], ["player.id"]),
            sa.PrimaryKeyConstraint("id"),
        )
        op.create_index(op.f("ix_blowout_record_event_id"), "blowout_record", ["event_id"], unique=False)
        op.create_index(
            op.f("ix_blowout_record_applier_player_id"), "blowout_record", ["applier_player_id"], unique=False
        )
        op.create_index(
            op.f("ix_blowout_record_victim_player_id"), "blowout_record", ["victim_player_id"], unique=False
        )

    if "score_record" not in tables:
        op.create_table(
            "score_record",
            sa.Column("id", sa.Integer(), nullable=False),
            sa.Column("event_id", sa.Integer(), nullable=False),
            sa.Column("player_id", sa.Integer(), nullable=False),
            sa.Column("confirmed", sa.Boolean(), nullable=False),
            sa.Column("bbq_participated", sa.Boolean(), nullable=False),
            sa.Column("victories", sa.Integer(), nullable=False),
            sa.Column("defeats", sa.Integer(), nullable=False),
            sa.Column("blowouts_applied", sa.Integer(), nullable=False),
            sa.Column("blowouts_received", sa.Integer(), nullable=False),
            sa.Column("total_points", sa.Numeric(precision=7, scale=1), nullable=False),
            sa.Column("submitted", sa.Boolean(), nullable=False),
            sa.Column("updated_at", sa.DateTime(), nullable=False),
            sa.ForeignKeyConstraint(["event_id"], ["weekly_event.id"]),
            sa.ForeignKeyConstraint(["player_id"], ["player.id"]),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("event_id", "player_id", name="uq_score_event_player"),
        )
        op.create_index(op.f("ix_score_record_event_id"), "score_record", ["event_id"], unique=False)
        op.create_index(op.f("ix_score_record_player_id"), "score_record", ["player_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_score_record_player_id"), table_name="score_record")
    op.drop_index(op.f("ix_score_record_event_id"), table_name="score_record")
    op.drop_table("score_record")

    op.drop_index(op.f("ix_blowout_record_victim_player_id"), table_name="blowout_record")
    op.drop_index(op.f("ix_blowout_record_applier_player_id"), table_name="blowout_record")
    op.drop_index(op.f("ix_blowout_record_event_id"), table_name="blowout_record")
    op.drop_table("blowout_record")

    op.drop_index(op.f("ix_match_draw_id"), table_name="match")
    op.drop_table("match")

    op.drop_index(op.f("ix_pair_draw_id"), table_name="pair")
    op.drop_table("pair")

    op.drop_index(op.f("ix_draw_league_id"), table_name="draw")
    op.drop_table("draw")

    op.drop_index(op.f("ix_event_attendance_player_id"), table_name="event_attendance")
    op.drop_index(op.f("ix_event_attendance_event_id"), table_name="event_attendance")
    op.drop_table("event_attendance")

    op.drop_index(op.f("ix_weekly_event_league_id"), table_name="weekly_event")
    op.drop_table("weekly_event")

    op.drop_table("player")
    op.drop_table("league")
