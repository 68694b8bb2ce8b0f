"""
Attendance Resolver

Read-only adapter over EventAttendance rows: which players play at an event
occurrence, and at what ranking points.
"""

from datetime import date
from typing import Iterable, List, Mapping, Optional, Tuple

from sqlmodel import Session, select

from padel_league.models.attendance import (
    PLAYING_STATUSES,
    AttendanceStatus,
    EventAttendance,
)
from padel_league.models.player import Player
from padel_league.models.weekly_event import WeeklyEvent
from padel_league.services.pairing_engine import PlayerSeed


def normalize_status(value) -> AttendanceStatus:
    """Coerce a stored status string (or None) to AttendanceStatus."""
    if value is None:
        return AttendanceStatus.no_response
    return AttendanceStatus(value)


def eligible_from_snapshot(
    snapshot: Iterable[Tuple[int, str]],
    points: Mapping[int, int],
) -> List[PlayerSeed]:
    """Filter an in-memory (player_id, status) snapshot down to playing players.

    Snapshot order is kept. Players without known points are seeded at 0.
    """
    eligible = []
    for player_id, status in snapshot:
        if normalize_status(status) in PLAYING_STATUSES:
            eligible.append(PlayerSeed(player_id=player_id, points=points.get(player_id, 0)))
    return eligible


def find_event(session: Session, league_id: int, event_date: date) -> Optional[WeeklyEvent]:
    return session.exec(
        select(WeeklyEvent).where(WeeklyEvent.league_id == league_id, WeeklyEvent.event_date == event_date)
    ).first()


def _attendance_rows(session: Session, event_id: int) -> List[EventAttendance]:
    # Confirmation order: earliest update first, id as tie-breaker
    return session.exec(
        select(EventAttendance)
        .where(EventAttendance.event_id == event_id)
        .order_by(EventAttendance.updated_at, EventAttendance.id)
    ).all()


def resolve_eligible_players(session: Session, league_id: int, event_date: date) -> List[PlayerSeed]:
    """Players with status confirmed or play_and_bbq for the event on *event_date*.

    No event row for that date means nobody has confirmed yet.
    """
    event = find_event(session, league_id, event_date)
    if not event:
        return []

    rows = _attendance_rows(session, event.id)
    player_ids = [row.player_id for row in rows]
    players = session.exec(select(Player).where(Player.id.in_(player_ids))).all() if player_ids else []
    points = {p.id: p.ranking_points for p in players}

    return eligible_from_snapshot(((row.player_id, row.status) for row in rows), points)


def social_only_players(session: Session, event_id: int) -> List[int]:
    """Player ids whose status is bbq_only."""
    rows = _attendance_rows(session, event_id)
    return [row.player_id for row in rows if normalize_status(row.status) == AttendanceStatus.bbq_only]


def attendance_status_for(session: Session, event_id: int, player_id: int) -> AttendanceStatus:
    row = session.exec(
        select(EventAttendance).where(EventAttendance.event_id == event_id, EventAttendance.player_id == player_id)
    ).first()
    return normalize_status(row.status if row else None)
