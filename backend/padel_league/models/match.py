from datetime import datetime, timezone
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, String
from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Column, Field, Relationship, SQLModel

from padel_league.models.pair import Tier

if TYPE_CHECKING:
    from padel_league.models.draw import Draw
    from padel_league.models.pair import Pair


class Match(SQLModel, table=True):
    """
    Fixture between two pairs of the same tier.

    Constraint: pair_a_id < pair_b_id so a matchup can only be stored one way.
    """

    __table_args__ = (
        SAUniqueConstraint("draw_id", "pair_a_id", "pair_b_id", name="uq_draw_matchup"),
        SAUniqueConstraint("draw_id", "sequence", name="uq_draw_match_sequence"),
        CheckConstraint("pair_a_id < pair_b_id", name="ck_match_pair_order"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    draw_id: int = Field(foreign_key="draw.id", index=True)
    sequence: int
    tier: Tier = Field(sa_column=Column(String, nullable=False))
    pair_a_id: int = Field(foreign_key="pair.id")
    pair_b_id: int = Field(foreign_key="pair.id")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    draw: "Draw" = Relationship(back_populates="matches")
    pair_a: Optional["Pair"] = Relationship(sa_relationship_kwargs={"foreign_keys": "Match.pair_a_id"})
    pair_b: Optional["Pair"] = Relationship(sa_relationship_kwargs={"foreign_keys": "Match.pair_b_id"})
