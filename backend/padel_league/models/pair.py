from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import String
from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Column, Field, Relationship, SQLModel

if TYPE_CHECKING:
    from padel_league.models.draw import Draw


class Tier(str, Enum):
    top = "top"
    bottom = "bottom"


class Pair(SQLModel, table=True):
    __table_args__ = (SAUniqueConstraint("draw_id", "sequence", name="uq_draw_pair_sequence"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    draw_id: int = Field(foreign_key="draw.id", index=True)
    sequence: int  # 1-based, top tier first
    tier: Tier = Field(sa_column=Column(String, nullable=False))
    player1_id: int = Field(foreign_key="player.id")
    player2_id: Optional[int] = Field(default=None, foreign_key="player.id")  # None = wildcard

    # Relationships
    draw: "Draw" = Relationship(back_populates="pairs")

    @property
    def is_wildcard(self) -> bool:
        return self.player2_id is None

    def player_ids(self):
        return [pid for pid in (self.player1_id, self.player2_id) if pid is not None]
