"""
Event Attendance Model

One row per (event, player) holding the player's RSVP. The RSVP state machine
lives in the attendance service; this service only reads the final status.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String
from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Column, Field, Relationship, SQLModel

if TYPE_CHECKING:
    from padel_league.models.weekly_event import WeeklyEvent


class AttendanceStatus(str, Enum):
    no_response = "no_response"
    declined = "declined"
    confirmed = "confirmed"
    bbq_only = "bbq_only"
    play_and_bbq = "play_and_bbq"


PLAYING_STATUSES = frozenset({AttendanceStatus.confirmed, AttendanceStatus.play_and_bbq})
SOCIAL_STATUSES = frozenset({AttendanceStatus.bbq_only, AttendanceStatus.play_and_bbq})
NOT_ATTENDING_STATUSES = frozenset({AttendanceStatus.declined, AttendanceStatus.no_response})


class EventAttendance(SQLModel, table=True):
    __tablename__ = "event_attendance"
    __table_args__ = (SAUniqueConstraint("event_id", "player_id", name="uq_event_attendance_player"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    event_id: int = Field(foreign_key="weekly_event.id", index=True)
    player_id: int = Field(foreign_key="player.id", index=True)
    status: AttendanceStatus = Field(default=AttendanceStatus.no_response, sa_column=Column(String, nullable=False))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relationships
    event: "WeeklyEvent" = Relationship(back_populates="attendance")
