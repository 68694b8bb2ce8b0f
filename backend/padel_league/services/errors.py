"""Domain errors and non-fatal warnings raised by the weekly-event services."""

from typing import Any, Dict, Optional


class InsufficientPlayersError(ValueError):
    """Fewer than two players are eligible; no draw is produced."""

    def __init__(self, player_count: int):
        self.player_count = player_count
        super().__init__(f"INSUFFICIENT_PLAYERS: need at least 2 eligible players, got {player_count}")


class InvalidScoreInputError(ValueError):
    pass


class ScoringNotAllowedError(ValueError):
    pass


class DrawLockedError(ValueError):
    pass


class IncompleteScheduleError(ValueError):
    """Raised instead of a warning when strict match quotas are enabled."""


class EventNotFoundError(LookupError):
    pass


class LeagueNotFoundError(LookupError):
    pass


class DrawNotFoundError(LookupError):
    pass


# Warning codes
FORCED_REPEAT_PAIRING = "FORCED_REPEAT_PAIRING"
PARTIAL_SCHEDULE = "PARTIAL_SCHEDULE"


class DrawWarning:
    """Non-fatal outcome surfaced alongside a committed draw"""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self):
        return {"code": self.code, "message": self.message, "details": self.details}
