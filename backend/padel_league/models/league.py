from datetime import datetime, timezone
from typing import TYPE_CHECKING, List, Optional

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from padel_league.models.draw import Draw
    from padel_league.models.weekly_event import WeeklyEvent


class League(SQLModel, table=True):
    """League row. Owned by the membership service; only read here."""

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    events: List["WeeklyEvent"] = Relationship(back_populates="league")
    draws: List["Draw"] = Relationship(back_populates="league")
