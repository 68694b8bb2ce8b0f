from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlmodel import Session, select

from padel_league.database import get_session
from padel_league.models.attendance import PLAYING_STATUSES, AttendanceStatus, EventAttendance
from padel_league.models.player import Player
from padel_league.models.weekly_event import WeeklyEvent
from padel_league.services.attendance_resolver import normalize_status

router = APIRouter()


class AttendanceUpdate(BaseModel):
    status: AttendanceStatus


class AttendanceResponse(BaseModel):
    event_id: int
    player_id: int
    status: AttendanceStatus
    playing: bool
    updated_at: datetime


def _to_response(row: EventAttendance) -> AttendanceResponse:
    status = normalize_status(row.status)
    return AttendanceResponse(
        event_id=row.event_id,
        player_id=row.player_id,
        status=status,
        playing=status in PLAYING_STATUSES,
        updated_at=row.updated_at,
    )


@router.get("/events/{event_id}/attendance", response_model=List[AttendanceResponse])
def get_attendance(event_id: int, session: Session = Depends(get_session)):
    """Get all attendance rows for an event"""
    if not session.get(WeeklyEvent, event_id):
        raise HTTPException(status_code=404, detail="Event not found")

    rows = session.exec(
        select(EventAttendance)
        .where(EventAttendance.event_id == event_id)
        .order_by(EventAttendance.updated_at, EventAttendance.id)
    ).all()
    return [_to_response(r) for r in rows]


@router.put("/events/{event_id}/attendance/{player_id}", response_model=AttendanceResponse)
def put_attendance(
    event_id: int, player_id: int, payload: AttendanceUpdate, session: Session = Depends(get_session)
):
    """Record a player's RSVP for an event (upsert)"""
    if not session.get(WeeklyEvent, event_id):
        raise HTTPException(status_code=404, detail="Event not found")
    if not session.get(Player, player_id):
        raise HTTPException(status_code=404, detail="Player not found")

    row = session.exec(
        select(EventAttendance).where(EventAttendance.event_id == event_id, EventAttendance.player_id == player_id)
    ).first()
    if row is None:
        row = EventAttendance(event_id=event_id, player_id=player_id)

    row.status = payload.status
    row.updated_at = datetime.now(timezone.utc)
    session.add(row)
    session.commit()
    session.refresh(row)

    return _to_response(row)
