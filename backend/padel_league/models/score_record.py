from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, SQLModel


class ScoreRecord(SQLModel, table=True):
    __tablename__ = "score_record"
    __table_args__ = (SAUniqueConstraint("event_id", "player_id", name="uq_score_event_player"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    event_id: int = Field(foreign_key="weekly_event.id", index=True)
    player_id: int = Field(foreign_key="player.id", index=True)
    confirmed: bool = Field(default=False)
    bbq_participated: bool = Field(default=False)
    victories: int = Field(default=0)
    defeats: int = Field(default=0)
    blowouts_applied: int = Field(default=0)
    blowouts_received: int = Field(default=0)
    total_points: Decimal = Field(default=Decimal("0"), max_digits=7, decimal_places=1)
    submitted: bool = Field(default=False)
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
