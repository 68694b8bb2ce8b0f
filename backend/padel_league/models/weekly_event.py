from datetime import date, datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import String
from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Column, Field, Relationship, SQLModel

if TYPE_CHECKING:
    from padel_league.models.attendance import EventAttendance
    from padel_league.models.league import League


class EventStatus(str, Enum):
    scheduled = "scheduled"
    attendance_open = "attendance_open"
    in_progress = "in_progress"
    scoring_open = "scoring_open"
    completed = "completed"
    cancelled = "cancelled"


# Once an event reaches one of these the draw is frozen
DRAW_LOCKED_STATUSES = frozenset(
    {EventStatus.in_progress, EventStatus.scoring_open, EventStatus.completed, EventStatus.cancelled}
)

# Scores and blowouts are only accepted once play has started
SCORING_STATUSES = frozenset({EventStatus.in_progress, EventStatus.scoring_open, EventStatus.completed})


class WeeklyEvent(SQLModel, table=True):
    __tablename__ = "weekly_event"
    __table_args__ = (SAUniqueConstraint("league_id", "event_date", name="uq_league_event_date"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    league_id: int = Field(foreign_key="league.id", index=True)
    event_date: date
    status: EventStatus = Field(default=EventStatus.scheduled, sa_column=Column(String, nullable=False))
    duos_generated: bool = Field(default=False)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    league: "League" = Relationship(back_populates="events")
    attendance: List["EventAttendance"] = Relationship(back_populates="event")
