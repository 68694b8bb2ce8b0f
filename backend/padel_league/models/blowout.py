"""
Blowout Record Model

A lopsided result recorded by an applier player against a victim player.
Pair membership of either side is resolved against the event's draw when
scores are evaluated; applier_pair_id is only a snapshot taken at submit time.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel

BLOWOUT_SOURCE_PLAYER = "player"
BLOWOUT_SOURCE_MANUAL = "manual"


class BlowoutRecord(SQLModel, table=True):
    __tablename__ = "blowout_record"

    id: Optional[int] = Field(default=None, primary_key=True)
    event_id: int = Field(foreign_key="weekly_event.id", index=True)
    applier_pair_id: Optional[int] = Field(default=None, foreign_key="pair.id")
    applier_player_id: int = Field(foreign_key="player.id", index=True)
    victim_player_id: int = Field(foreign_key="player.id", index=True)
    source: str = Field(default=BLOWOUT_SOURCE_PLAYER)  # "player" | "manual"
    created_by: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
