from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlmodel import Session

from padel_league.database import get_session
from padel_league.models.weekly_event import DRAW_LOCKED_STATUSES, EventStatus, WeeklyEvent

router = APIRouter()


class EventStatusUpdate(BaseModel):
    status: EventStatus


class EventResponse(BaseModel):
    id: int
    league_id: int
    event_date: date
    status: EventStatus
    duos_generated: bool
    created_at: datetime

    class Config:
        from_attributes = True


@router.get("/events/{event_id}", response_model=EventResponse)
def get_event(event_id: int, session: Session = Depends(get_session)):
    """Get a weekly event"""
    event = session.get(WeeklyEvent, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


@router.put("/events/{event_id}/status", response_model=EventResponse)
def update_event_status(event_id: int, payload: EventStatusUpdate, session: Session = Depends(get_session)):
    """Move an event through its lifecycle

    Once play has started (or the event was cancelled) the draw is frozen, so
    the event cannot go back to scheduled / attendance_open.
    """
    event = session.get(WeeklyEvent, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")

    current = EventStatus(event.status)
    if current in DRAW_LOCKED_STATUSES and payload.status not in DRAW_LOCKED_STATUSES:
        raise HTTPException(
            status_code=409,
            detail=f"EVENT_STATUS_LOCKED: event {event_id} cannot move from '{current.value}' to '{payload.status.value}'",
        )

    event.status = payload.status
    session.add(event)
    session.commit()
    session.refresh(event)

    return event
