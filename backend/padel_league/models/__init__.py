from padel_league.models.attendance import AttendanceStatus, EventAttendance
from padel_league.models.blowout import BlowoutRecord
from padel_league.models.draw import Draw
from padel_league.models.league import League
from padel_league.models.match import Match
from padel_league.models.pair import Pair, Tier
from padel_league.models.player import Player
from padel_league.models.score_record import ScoreRecord
from padel_league.models.weekly_event import EventStatus, WeeklyEvent

__all__ = [
    "League",
    "Player",
    "WeeklyEvent",
    "EventStatus",
    "EventAttendance",
    "AttendanceStatus",
    "Draw",
    "Pair",
    "Tier",
    "Match",
    "BlowoutRecord",
    "ScoreRecord",
]
