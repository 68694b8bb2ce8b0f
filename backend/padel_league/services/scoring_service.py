"""
Scoring Service - weekly-event points ledger persistence.

Every mutation of BlowoutRecords is followed by a full recomputation of the
affected ScoreRecords from the event's current record set. Counts are never
adjusted incrementally, so edits arriving out of order still converge.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from padel_league.models import BlowoutRecord, League, Player, ScoreRecord, WeeklyEvent
from padel_league.models.attendance import NOT_ATTENDING_STATUSES, AttendanceStatus
from padel_league.models.blowout import BLOWOUT_SOURCE_MANUAL, BLOWOUT_SOURCE_PLAYER
from padel_league.models.weekly_event import SCORING_STATUSES, EventStatus
from padel_league.services.attendance_resolver import attendance_status_for, social_only_players
from padel_league.services.draw_orchestrator import player_pair_map
from padel_league.services.errors import (
    EventNotFoundError,
    InvalidScoreInputError,
    LeagueNotFoundError,
    ScoringNotAllowedError,
)
from padel_league.services.scoring_engine import (
    BlowoutEntry,
    BlowoutTally,
    calculate_total_points,
    points_breakdown,
    tally_blowouts,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _require_event(session: Session, event_id: int) -> WeeklyEvent:
    event = session.get(WeeklyEvent, event_id)
    if not event:
        raise EventNotFoundError(f"Event {event_id} not found")
    return event


def _require_scoring_open(session: Session, event_id: int) -> WeeklyEvent:
    """Event lookup for writes to the points ledger; the draw must be frozen."""
    event = _require_event(session, event_id)
    status = EventStatus(event.status)
    if status not in SCORING_STATUSES:
        raise ScoringNotAllowedError(
            f"SCORING_NOT_ALLOWED: event {event_id} is '{status.value}', scoring opens once play starts"
        )
    return event


def _get_or_create_record(session: Session, event_id: int, player_id: int) -> ScoreRecord:
    record = session.exec(
        select(ScoreRecord).where(ScoreRecord.event_id == event_id, ScoreRecord.player_id == player_id)
    ).first()
    if record is None:
        record = ScoreRecord(event_id=event_id, player_id=player_id)
    return record


def _event_blowouts(session: Session, event_id: int) -> List[BlowoutRecord]:
    return session.exec(select(BlowoutRecord).where(BlowoutRecord.event_id == event_id)).all()


def recompute_player_score(
    session: Session,
    event: WeeklyEvent,
    player_id: int,
    pair_of_player: Optional[Dict[int, int]] = None,
) -> ScoreRecord:
    """Re-read all blowouts of the event and rewrite one player's counts and total. No commit."""
    if pair_of_player is None:
        pair_of_player = player_pair_map(session, event)

    entries = [
        BlowoutEntry(
            applier_player_id=r.applier_player_id,
            victim_player_id=r.victim_player_id,
            applier_pair_id=r.applier_pair_id,
        )
        for r in _event_blowouts(session, event.id)
    ]
    tally = tally_blowouts(entries, pair_of_player).get(player_id, BlowoutTally())

    record = _get_or_create_record(session, event.id, player_id)
    record.blowouts_applied = tally.applied
    record.blowouts_received = tally.received
    record.total_points = calculate_total_points(
        confirmed=record.confirmed,
        bbq_participated=record.bbq_participated,
        victories=record.victories,
        blowouts_applied=tally.applied,
        blowouts_received=tally.received,
    )
    record.updated_at = _utcnow()
    session.add(record)
    session.flush()
    return record


def _recompute_many(session: Session, event: WeeklyEvent, player_ids: Iterable[int]) -> Dict[str, List[int]]:
    """Recompute and commit each player on its own; one failure does not stop the rest."""
    pair_of_player = player_pair_map(session, event)
    updated: List[int] = []
    failed: List[int] = []

    for player_id in sorted(set(player_ids)):
        try:
            recompute_player_score(session, event, player_id, pair_of_player)
            session.commit()
            updated.append(player_id)
        except SQLAlchemyError:
            session.rollback()
            logger.exception("Score recompute failed for player %s at event %s", player_id, event.id)
            failed.append(player_id)

    return {"updated": updated, "failed": failed}


def _validate_counts(victories: int, defeats: int) -> None:
    if victories is None or victories < 0:
        raise InvalidScoreInputError(f"victories must be >= 0, got {victories}")
    if defeats is None or defeats < 0:
        raise InvalidScoreInputError(f"defeats must be >= 0, got {defeats}")


def score_to_dict(record: ScoreRecord) -> Dict:
    breakdown = points_breakdown(
        record.confirmed,
        record.bbq_participated,
        record.victories,
        record.blowouts_applied,
        record.blowouts_received,
    )
    return {
        "event_id": record.event_id,
        "player_id": record.player_id,
        "confirmed": record.confirmed,
        "bbq_participated": record.bbq_participated,
        "victories": record.victories,
        "defeats": record.defeats,
        "blowouts_applied": record.blowouts_applied,
        "blowouts_received": record.blowouts_received,
        "total_points": float(record.total_points),
        "submitted": record.submitted,
        "breakdown": {k: float(v) for k, v in breakdown.items()},
    }


# ============================================================================
# Operations
# ============================================================================


def submit_score(
    session: Session,
    event_id: int,
    player_id: int,
    victories: int,
    defeats: int,
    applied_victim_ids: Optional[List[int]] = None,
    bbq_participated: bool = False,
    confirmed: bool = True,
    submitted_by: Optional[str] = None,
) -> Dict:
    """
    Submit (or edit) one player's result for an event.

    The player's own player-sourced blowouts are replaced by *applied_victim_ids*;
    partner submissions and organizer entries are left alone. The player's
    record and every victim touched before or after the edit are recomputed.

    Raises:
        InvalidScoreInputError: negative counts or self-blowout
        ScoringNotAllowedError: player declined or never answered, or event not started
        EventNotFoundError: unknown event
    """
    _validate_counts(victories, defeats)
    victim_ids = list(dict.fromkeys(applied_victim_ids or []))
    if player_id in victim_ids:
        raise InvalidScoreInputError("A player cannot record a blowout against themselves")

    event = _require_scoring_open(session, event_id)
    status = attendance_status_for(session, event_id, player_id)
    if status in NOT_ATTENDING_STATUSES:
        raise ScoringNotAllowedError(
            f"SCORING_NOT_ALLOWED: player {player_id} has status '{status.value}' for event {event_id}"
        )

    if status == AttendanceStatus.bbq_only:
        # Social-only attendees cannot report play results
        if victories or defeats or victim_ids:
            logger.info("Ignoring play results for bbq-only player %s at event %s", player_id, event_id)
        confirmed, bbq_participated = False, True
        victories, defeats, victim_ids = 0, 0, []

    try:
        previous = session.exec(
            select(BlowoutRecord).where(
                BlowoutRecord.event_id == event_id,
                BlowoutRecord.applier_player_id == player_id,
                BlowoutRecord.source == BLOWOUT_SOURCE_PLAYER,
            )
        ).all()
        previous_victims = {r.victim_player_id for r in previous}
        for blowout in previous:
            session.delete(blowout)
        session.flush()

        pair_of_player = player_pair_map(session, event)
        for victim_id in victim_ids:
            session.add(
                BlowoutRecord(
                    event_id=event_id,
                    applier_pair_id=pair_of_player.get(player_id),
                    applier_player_id=player_id,
                    victim_player_id=victim_id,
                    source=BLOWOUT_SOURCE_PLAYER,
                    created_by=submitted_by,
                )
            )

        record = _get_or_create_record(session, event_id, player_id)
        record.victories = victories
        record.defeats = defeats
        record.bbq_participated = bbq_participated
        record.confirmed = confirmed
        record.submitted = confirmed
        session.add(record)
        session.flush()

        record = recompute_player_score(session, event, player_id, pair_of_player)
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Submit score failed for player %s at event %s", player_id, event_id)
        raise

    affected = previous_victims | set(victim_ids)
    victims = _recompute_many(session, event, affected)
    session.commit()

    session.refresh(record)
    logger.info(
        "Score submitted for player %s at event %s: %s points (%d victims recomputed)",
        player_id,
        event_id,
        record.total_points,
        len(victims["updated"]),
    )
    return {"score": score_to_dict(record), "recomputed_players": victims["updated"], "failed_players": victims["failed"]}


def submit_manual_blowout(
    session: Session,
    event_id: int,
    applier_ids: List[int],
    victim_ids: List[int],
    created_by: Optional[str] = None,
) -> Dict:
    """Organizer entry: record every applier x victim combination, then recompute all of them."""
    appliers = list(dict.fromkeys(applier_ids or []))
    victims = list(dict.fromkeys(victim_ids or []))
    if not appliers or not victims:
        raise InvalidScoreInputError("Manual blowout needs at least one applier and one victim")
    overlap = set(appliers) & set(victims)
    if overlap:
        raise InvalidScoreInputError(f"Players {sorted(overlap)} cannot be both applier and victim")

    event = _require_scoring_open(session, event_id)

    created = 0
    try:
        for applier_id in appliers:
            for victim_id in victims:
                session.add(
                    BlowoutRecord(
                        event_id=event_id,
                        applier_pair_id=None,
                        applier_player_id=applier_id,
                        victim_player_id=victim_id,
                        source=BLOWOUT_SOURCE_MANUAL,
                        created_by=created_by,
                    )
                )
                created += 1
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Manual blowout insert failed at event %s", event_id)
        raise

    outcome = _recompute_many(session, event, set(appliers) | set(victims))
    session.commit()

    logger.info("Manual blowouts at event %s: %d records, %d players recomputed", event_id, created, len(outcome["updated"]))
    return {"created_records": created, "recomputed_players": outcome["updated"], "failed_players": outcome["failed"]}


def score_social_only_attendees(session: Session, event_id: int) -> Dict:
    """Write the fixed bbq-only score for every social-only attendee of the event."""
    event = _require_scoring_open(session, event_id)
    player_ids = social_only_players(session, event_id)

    for player_id in player_ids:
        record = _get_or_create_record(session, event_id, player_id)
        record.confirmed = False
        record.bbq_participated = True
        record.victories = 0
        record.defeats = 0
        record.submitted = False  # submitted tracks played attendance
        session.add(record)
    session.flush()

    outcome = _recompute_many(session, event, player_ids)
    session.commit()
    return {"scored_players": outcome["updated"], "failed_players": outcome["failed"]}


def reset_league_scores(session: Session, league_id: int, confirm: bool = False) -> Dict[str, int]:
    """
    Delete every blowout and zero every score of the league's events.

    Irreversible; the caller must pass confirm=True.
    """
    if not confirm:
        raise ValueError("RESET_NOT_CONFIRMED: pass confirm=true to reset league scores")
    if not session.get(League, league_id):
        raise LeagueNotFoundError(f"League {league_id} not found")

    event_ids = session.exec(select(WeeklyEvent.id).where(WeeklyEvent.league_id == league_id)).all()
    if not event_ids:
        return {"events": 0, "deleted_blowouts": 0, "reset_scores": 0}

    try:
        blowouts = session.exec(select(BlowoutRecord).where(BlowoutRecord.event_id.in_(event_ids))).all()
        for blowout in blowouts:
            session.delete(blowout)

        records = session.exec(select(ScoreRecord).where(ScoreRecord.event_id.in_(event_ids))).all()
        now = _utcnow()
        for record in records:
            record.confirmed = False
            record.bbq_participated = False
            record.victories = 0
            record.defeats = 0
            record.blowouts_applied = 0
            record.blowouts_received = 0
            record.total_points = Decimal("0")
            record.submitted = False
            record.updated_at = now
            session.add(record)

        session.commit()
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Reset scores failed for league %s, transaction rolled back", league_id)
        raise

    logger.warning(
        "League %s scores reset: %d blowouts deleted, %d score records zeroed", league_id, len(blowouts), len(records)
    )
    return {"events": len(event_ids), "deleted_blowouts": len(blowouts), "reset_scores": len(records)}


# ============================================================================
# Read side
# ============================================================================


def event_scores(session: Session, event_id: int) -> List[Dict]:
    _require_event(session, event_id)
    records = session.exec(
        select(ScoreRecord).where(ScoreRecord.event_id == event_id).order_by(ScoreRecord.player_id)
    ).all()
    return [score_to_dict(r) for r in records]


def league_standings(session: Session, league_id: int) -> List[Dict]:
    """Season totals per player across the league's events, best first."""
    if not session.get(League, league_id):
        raise LeagueNotFoundError(f"League {league_id} not found")

    rows = session.exec(
        select(ScoreRecord)
        .join(WeeklyEvent, WeeklyEvent.id == ScoreRecord.event_id)
        .where(WeeklyEvent.league_id == league_id)
    ).all()

    totals: Dict[int, Dict] = {}
    for record in rows:
        entry = totals.setdefault(
            record.player_id,
            {"player_id": record.player_id, "events": 0, "victories": 0, "defeats": 0, "total_points": Decimal("0")},
        )
        entry["events"] += 1 if record.submitted else 0
        entry["victories"] += record.victories
        entry["defeats"] += record.defeats
        entry["total_points"] += Decimal(record.total_points)

    names: Dict[int, str] = {}
    if totals:
        players = session.exec(select(Player).where(Player.id.in_(list(totals)))).all()
        names = {p.id: p.nickname or p.full_name for p in players}

    standings = sorted(totals.values(), key=lambda e: (-e["total_points"], e["player_id"]))
    result = []
    for position, entry in enumerate(standings, start=1):
        result.append(
            {
                "position": position,
                "player_id": entry["player_id"],
                "player_name": names.get(entry["player_id"]),
                "events": entry["events"],
                "victories": entry["victories"],
                "defeats": entry["defeats"],
                "total_points": float(entry["total_points"]),
            }
        )
    return result
