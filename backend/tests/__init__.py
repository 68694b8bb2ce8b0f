# Force SQLModel table registration at test discovery time
# This ensures all models are registered before any test database creation
from padel_league.models.attendance import EventAttendance  # noqa: F401
from padel_league.models.blowout import BlowoutRecord  # noqa: F401
from padel_league.models.draw import Draw  # noqa: F401
from padel_league.models.league import League  # noqa: F401
from padel_league.models.match import Match  # noqa: F401
from padel_league.models.pair import Pair  # noqa: F401
from padel_league.models.player import Player  # noqa: F401
from padel_league.models.score_record import ScoreRecord  # noqa: F401
from padel_league.models.weekly_event import WeeklyEvent  # noqa: F401
