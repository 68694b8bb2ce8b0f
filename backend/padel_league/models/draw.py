from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from padel_league.models.league import League
    from padel_league.models.match import Match
    from padel_league.models.pair import Pair


class Draw(SQLModel, table=True):
    """
    Pairs + matches generated for one league's one event occurrence.

    Constraint: a single draw per (league_id, event_date). Regenerating deletes
    the previous draw in the same transaction before inserting the new one.
    """

    __table_args__ = (SAUniqueConstraint("league_id", "event_date", name="uq_draw_league_date"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    league_id: int = Field(foreign_key="league.id", index=True)
    event_id: Optional[int] = Field(default=None, foreign_key="weekly_event.id")
    event_date: date
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    created_by: Optional[str] = None

    # Relationships
    league: "League" = Relationship(back_populates="draws")
    pairs: List["Pair"] = Relationship(back_populates="draw")
    matches: List["Match"] = Relationship(back_populates="draw")
