"""
Weekly-event scoring endpoints.

Players submit their own results; organizers may submit on a player's behalf
(player_id in the body) and record manual blowouts. Totals are always
recomputed server-side.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, field_validator
from sqlmodel import Session

from padel_league.database import get_session
from padel_league.services.errors import (
    EventNotFoundError,
    InvalidScoreInputError,
    LeagueNotFoundError,
    ScoringNotAllowedError,
)
from padel_league.services.scoring_service import (
    event_scores,
    league_standings,
    reset_league_scores,
    score_social_only_attendees,
    submit_manual_blowout,
    submit_score,
)

router = APIRouter()


class ScoreSubmission(BaseModel):
    player_id: int
    victories: int
    defeats: int
    bbq_participated: bool = False
    confirmed: bool = True
    blowout_victim_ids: List[int] = Field(default_factory=list)
    submitted_by: Optional[str] = None

    @field_validator("victories", "defeats")
    @classmethod
    def validate_non_negative(cls, v):
        if v < 0:
            raise ValueError("must be >= 0")
        return v


class ManualBlowoutRequest(BaseModel):
    applier_ids: List[int]
    victim_ids: List[int]
    created_by: Optional[str] = None

    @field_validator("applier_ids", "victim_ids")
    @classmethod
    def validate_not_empty(cls, v):
        if not v:
            raise ValueError("at least one player id is required")
        return v


class ResetScoresRequest(BaseModel):
    confirm: bool = False


@router.post("/events/{event_id}/scores")
def post_score(event_id: int, payload: ScoreSubmission, session: Session = Depends(get_session)):
    """Submit or edit a player's result for an event"""
    try:
        return submit_score(
            session,
            event_id,
            payload.player_id,
            victories=payload.victories,
            defeats=payload.defeats,
            applied_victim_ids=payload.blowout_victim_ids,
            bbq_participated=payload.bbq_participated,
            confirmed=payload.confirmed,
            submitted_by=payload.submitted_by,
        )
    except EventNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")
    except InvalidScoreInputError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ScoringNotAllowedError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.post("/events/{event_id}/blowouts", status_code=201)
def post_manual_blowout(event_id: int, payload: ManualBlowoutRequest, session: Session = Depends(get_session)):
    """Organizer entry: every applier x victim combination gets a blowout record"""
    try:
        return submit_manual_blowout(
            session, event_id, payload.applier_ids, payload.victim_ids, created_by=payload.created_by
        )
    except EventNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")
    except InvalidScoreInputError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ScoringNotAllowedError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.post("/events/{event_id}/scores/social")
def post_social_scores(event_id: int, session: Session = Depends(get_session)):
    """Score every bbq-only attendee with the fixed social score"""
    try:
        return score_social_only_attendees(session, event_id)
    except EventNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")
    except ScoringNotAllowedError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/events/{event_id}/scores")
def get_event_scores(event_id: int, session: Session = Depends(get_session)):
    try:
        return {"event_id": event_id, "scores": event_scores(session, event_id)}
    except EventNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")


@router.post("/leagues/{league_id}/scores/reset")
def post_reset_scores(league_id: int, payload: ResetScoresRequest, session: Session = Depends(get_session)):
    """Delete all blowouts and zero all scores of a league. Irreversible; requires confirm=true."""
    if not payload.confirm:
        raise HTTPException(status_code=400, detail="RESET_NOT_CONFIRMED: pass confirm=true to reset league scores")
    try:
        return reset_league_scores(session, league_id, confirm=True)
    except LeagueNotFoundError:
        raise HTTPException(status_code=404, detail="League not found")


@router.get("/leagues/{league_id}/standings")
def get_standings(league_id: int, session: Session = Depends(get_session)):
    try:
        return {"league_id": league_id, "standings": league_standings(session, league_id)}
    except LeagueNotFoundError:
        raise HTTPException(status_code=404, detail="League not found")
