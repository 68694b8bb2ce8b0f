import random
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, field_validator
from sqlmodel import Session

from padel_league.database import get_session
from padel_league.models.league import League
from padel_league.services.draw_orchestrator import (
    delete_draw,
    draw_matches,
    draw_pairs,
    get_draw,
    run_draw,
    serialize_match,
    serialize_pair,
)
from padel_league.services.errors import (
    DrawLockedError,
    DrawNotFoundError,
    IncompleteScheduleError,
    InsufficientPlayersError,
    LeagueNotFoundError,
)

router = APIRouter()


class RunDrawRequest(BaseModel):
    event_date: date
    created_by: Optional[str] = None
    seed: Optional[int] = None  # reproducible tie shuffles / match order
    matches_per_pair: Optional[int] = None
    strict_quota: Optional[bool] = None

    @field_validator("matches_per_pair")
    @classmethod
    def validate_matches_per_pair(cls, v):
        if v is not None and v < 1:
            raise ValueError("matches_per_pair must be >= 1")
        return v


class DrawResponse(BaseModel):
    id: int
    league_id: int
    event_id: Optional[int] = None
    event_date: date
    created_at: datetime
    created_by: Optional[str] = None
    pairs: List[Dict[str, Any]]
    matches: List[Dict[str, Any]]


@router.post("/leagues/{league_id}/draws", status_code=201)
def create_draw(league_id: int, request: RunDrawRequest, session: Session = Depends(get_session)):
    """
    Run the draw for one event date (replaces any existing draw for that date)

    Returns the committed pairs and matches plus non-fatal warnings:
    - FORCED_REPEAT_PAIRING: a previous-event pair had to be reused
    - PARTIAL_SCHEDULE: a pair could not reach its match quota
    """
    rng = random.Random(request.seed) if request.seed is not None else None

    try:
        result = run_draw(
            session,
            league_id,
            request.event_date,
            created_by=request.created_by,
            rng=rng,
            matches_per_pair=request.matches_per_pair,
            strict_quota=request.strict_quota,
        )
    except LeagueNotFoundError:
        raise HTTPException(status_code=404, detail="League not found")
    except InsufficientPlayersError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except (DrawLockedError, IncompleteScheduleError) as e:
        raise HTTPException(status_code=409, detail=str(e))
    except RuntimeError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return result.to_dict()


@router.get("/leagues/{league_id}/draws/{event_date}", response_model=DrawResponse)
def read_draw(league_id: int, event_date: date, session: Session = Depends(get_session)):
    """Get the current draw for a league event date"""
    if not session.get(League, league_id):
        raise HTTPException(status_code=404, detail="League not found")

    draw = get_draw(session, league_id, event_date)
    if not draw:
        raise HTTPException(status_code=404, detail="Draw not found")

    return DrawResponse(
        id=draw.id,
        league_id=draw.league_id,
        event_id=draw.event_id,
        event_date=draw.event_date,
        created_at=draw.created_at,
        created_by=draw.created_by,
        pairs=[serialize_pair(p) for p in draw_pairs(session, draw.id)],
        matches=[serialize_match(m) for m in draw_matches(session, draw.id)],
    )


@router.delete("/draws/{draw_id}")
def remove_draw(draw_id: int, session: Session = Depends(get_session)):
    """Delete a draw with all of its pairs and matches"""
    try:
        return delete_draw(session, draw_id)
    except DrawNotFoundError:
        raise HTTPException(status_code=404, detail="Draw not found")
    except DrawLockedError as e:
        raise HTTPException(status_code=409, detail=str(e))
