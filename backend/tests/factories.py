"""Row factories shared by the database-backed tests."""

from datetime import datetime, timedelta, timezone

from sqlmodel import Session

from padel_league.models import EventAttendance, League, Player, WeeklyEvent


def make_league(session: Session, name: str = "Thursday Padel") -> League:
    league = League(name=name)
    session.add(league)
    session.commit()
    session.refresh(league)
    return league


def make_players(session: Session, points: list) -> list:
    """Create one player per entry in *points*, in order."""
    players = []
    for i, pts in enumerate(points, start=1):
        player = Player(full_name=f"Player {i}", ranking_points=pts)
        session.add(player)
        players.append(player)
    session.commit()
    for player in players:
        session.refresh(player)
    return players


def make_event(session: Session, league: League, event_date, statuses: dict, status: str = "attendance_open") -> WeeklyEvent:
    """Create an event and its attendance rows.

    *statuses* maps player_id -> AttendanceStatus value; rows are stamped one
    second apart in dict order so confirmation order is deterministic.
    """
    event = WeeklyEvent(league_id=league.id, event_date=event_date, status=status)
    session.add(event)
    session.commit()
    session.refresh(event)

    base = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
    for offset, (player_id, attendance) in enumerate(statuses.items()):
        session.add(
            EventAttendance(
                event_id=event.id,
                player_id=player_id,
                status=attendance,
                updated_at=base + timedelta(seconds=offset),
            )
        )
    session.commit()
    return event


def set_event_status(session: Session, event: WeeklyEvent, status: str) -> WeeklyEvent:
    event.status = status
    session.add(event)
    session.commit()
    session.refresh(event)
    return event
