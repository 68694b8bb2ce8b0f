from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel


class Player(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    full_name: str
    nickname: Optional[str] = None
    ranking_points: int = Field(default=0)  # maintained by the rankings service
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
