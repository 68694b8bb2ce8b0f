"""
Draw Orchestrator - Run Draw V1

Runs the whole weekly draw for one (league, event_date):
1. Validate (league exists, event not started)
2. Resolve eligible players
3. Load the previous event's pairs
4. Compute pairs (pure)
5. Generate matches (pure)
6. Replace the stored draw: delete old subtree, insert new one

Steps 1-5 never write. Step 6 happens inside a single transaction, so a
repeated or concurrent run either fully replaces the draw or changes nothing.
"""

import logging
import os
import random
from datetime import date
from typing import Dict, List, Optional, Set

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from padel_league.models import BlowoutRecord, Draw, League, Match, Pair, Tier, WeeklyEvent
from padel_league.models.weekly_event import DRAW_LOCKED_STATUSES, EventStatus
from padel_league.services.attendance_resolver import find_event, resolve_eligible_players
from padel_league.services.errors import (
    FORCED_REPEAT_PAIRING,
    PARTIAL_SCHEDULE,
    DrawLockedError,
    DrawNotFoundError,
    DrawWarning,
    IncompleteScheduleError,
    LeagueNotFoundError,
)
from padel_league.services.match_scheduler import DEFAULT_MATCHES_PER_PAIR, schedule_draw
from padel_league.services.pairing_engine import PairKey, compute_draw, pair_keys_from

logger = logging.getLogger(__name__)

MATCHES_PER_PAIR = int(os.getenv("MATCHES_PER_PAIR", str(DEFAULT_MATCHES_PER_PAIR)))
STRICT_MATCH_QUOTA = os.getenv("STRICT_MATCH_QUOTA", "false").lower() in ("true", "1", "yes")


class DrawBuildResult:
    """Complete result of a draw run"""

    def __init__(self):
        self.status = "success"
        self.league_id: Optional[int] = None
        self.event_date: Optional[date] = None
        self.draw_id: Optional[int] = None
        self.replaced_draw_id: Optional[int] = None
        self.players_count = 0
        self.pairs: List[Dict] = []
        self.matches: List[Dict] = []
        self.warnings: List[DrawWarning] = []
        self.failed_step: Optional[str] = None
        self.error_message: Optional[str] = None

    def to_dict(self):
        result = {
            "status": self.status,
            "league_id": self.league_id,
            "event_date": self.event_date.isoformat() if self.event_date else None,
            "draw_id": self.draw_id,
            "replaced_draw_id": self.replaced_draw_id,
            "summary": {
                "players": self.players_count,
                "pairs": len(self.pairs),
                "wildcards": sum(1 for p in self.pairs if p["player2_id"] is None),
                "matches": len(self.matches),
            },
            "pairs": self.pairs,
            "matches": self.matches,
            "warnings": [w.to_dict() for w in self.warnings],
        }

        if self.failed_step:
            result["failed_step"] = self.failed_step
            result["error_message"] = self.error_message

        return result


# ============================================================================
# Lookups
# ============================================================================


def get_draw(session: Session, league_id: int, event_date: date) -> Optional[Draw]:
    return session.exec(select(Draw).where(Draw.league_id == league_id, Draw.event_date == event_date)).first()


def draw_pairs(session: Session, draw_id: int) -> List[Pair]:
    return session.exec(select(Pair).where(Pair.draw_id == draw_id).order_by(Pair.sequence)).all()


def draw_matches(session: Session, draw_id: int) -> List[Match]:
    return session.exec(select(Match).where(Match.draw_id == draw_id).order_by(Match.sequence)).all()


def previous_pair_keys(session: Session, league_id: int, event_date: date) -> Set[PairKey]:
    """Pairs of the league's most recent draw strictly before *event_date*."""
    previous = session.exec(
        select(Draw)
        .where(Draw.league_id == league_id, Draw.event_date < event_date)
        .order_by(Draw.event_date.desc())
    ).first()
    if not previous:
        return set()
    return pair_keys_from((p.player1_id, p.player2_id) for p in draw_pairs(session, previous.id))


def player_pair_map(session: Session, event: WeeklyEvent) -> Dict[int, int]:
    """player_id -> pair_id in the draw for *event* (empty when no draw exists)."""
    draw = get_draw(session, event.league_id, event.event_date)
    if not draw:
        return {}
    mapping: Dict[int, int] = {}
    for pair in draw_pairs(session, draw.id):
        for player_id in pair.player_ids():
            mapping[player_id] = pair.id
    return mapping


def serialize_pair(pair: Pair) -> Dict:
    return {
        "id": pair.id,
        "sequence": pair.sequence,
        "tier": Tier(pair.tier).value,
        "player1_id": pair.player1_id,
        "player2_id": pair.player2_id,
    }


def serialize_match(match: Match) -> Dict:
    return {
        "id": match.id,
        "sequence": match.sequence,
        "tier": Tier(match.tier).value,
        "pair_a_id": match.pair_a_id,
        "pair_b_id": match.pair_b_id,
    }


# ============================================================================
# Delete
# ============================================================================


def _delete_draw_subtree(session: Session, draw: Draw) -> Dict[str, int]:
    """Delete matches, pairs and the draw row. No commit."""
    matches = draw_matches(session, draw.id)
    pairs = draw_pairs(session, draw.id)
    pair_ids = [p.id for p in pairs]

    if pair_ids:
        # Keep blowout rows; pair membership is re-resolved from the new draw
        stale = session.exec(select(BlowoutRecord).where(BlowoutRecord.applier_pair_id.in_(pair_ids))).all()
        for record in stale:
            record.applier_pair_id = None
            session.add(record)

    for match in matches:
        session.delete(match)
    session.flush()
    for pair in pairs:
        session.delete(pair)
    session.flush()
    session.delete(draw)
    session.flush()

    return {"deleted_matches": len(matches), "deleted_pairs": len(pairs)}


def delete_draw(session: Session, draw_id: int) -> Dict[str, int]:
    """Delete a draw with all of its pairs and matches in one transaction."""
    draw = session.get(Draw, draw_id)
    if not draw:
        raise DrawNotFoundError(f"Draw {draw_id} not found")

    event = find_event(session, draw.league_id, draw.event_date)
    if event and EventStatus(event.status) in DRAW_LOCKED_STATUSES:
        raise DrawLockedError(f"DRAW_LOCKED: event {event.id} is '{EventStatus(event.status).value}'")

    try:
        counts = _delete_draw_subtree(session, draw)
        if event:
            event.duos_generated = False
            session.add(event)
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Delete draw %s failed, transaction rolled back", draw_id)
        raise

    logger.info("Deleted draw %s (%d pairs, %d matches)", draw_id, counts["deleted_pairs"], counts["deleted_matches"])
    return {"draw_id": draw_id, **counts}


# ============================================================================
# Main Orchestrator Function
# ============================================================================


def run_draw(
    session: Session,
    league_id: int,
    event_date: date,
    created_by: Optional[str] = None,
    rng: Optional[random.Random] = None,
    matches_per_pair: Optional[int] = None,
    strict_quota: Optional[bool] = None,
) -> DrawBuildResult:
    """
    Generate (or regenerate) the draw for one league event date.

    Args:
        session: Database session
        league_id: League ID
        event_date: Date of the event occurrence
        created_by: Organizer identifier stored on the draw
        rng: Random source for tie shuffles and match order
        matches_per_pair: Match quota per pair (default MATCHES_PER_PAIR)
        strict_quota: Reject the draw when a pair misses its quota
            (default STRICT_MATCH_QUOTA)

    Returns:
        DrawBuildResult describing the committed draw

    Raises:
        LeagueNotFoundError: league does not exist
        DrawLockedError: event already started, finished or was cancelled
        InsufficientPlayersError: fewer than 2 eligible players
        IncompleteScheduleError: strict quota enabled and a pair fell short
        RuntimeError: database failure while replacing the draw
    """
    rng = rng or random.Random()
    matches_per_pair = MATCHES_PER_PAIR if matches_per_pair is None else matches_per_pair
    strict_quota = STRICT_MATCH_QUOTA if strict_quota is None else strict_quota

    result = DrawBuildResult()
    result.league_id = league_id
    result.event_date = event_date

    try:
        # ====================================================================
        # Step 1: Validate
        # ====================================================================
        result.failed_step = "VALIDATE"

        if not session.get(League, league_id):
            raise LeagueNotFoundError(f"League {league_id} not found")

        event = find_event(session, league_id, event_date)
        if event and EventStatus(event.status) in DRAW_LOCKED_STATUSES:
            raise DrawLockedError(
                f"DRAW_LOCKED: event {event.id} is '{EventStatus(event.status).value}', draw can no longer change"
            )

        # ====================================================================
        # Step 2-3: Snapshot inputs
        # ====================================================================
        result.failed_step = "RESOLVE_ATTENDANCE"
        players = resolve_eligible_players(session, league_id, event_date)
        result.players_count = len(players)

        result.failed_step = "LOAD_PREVIOUS_PAIRS"
        previous = previous_pair_keys(session, league_id, event_date)

        # ====================================================================
        # Step 4: Compute pairs
        # ====================================================================
        result.failed_step = "COMPUTE_PAIRS"
        pairing = compute_draw(players, previous, rng)

        for a, b in pairing.forced_repeats:
            result.warnings.append(
                DrawWarning(
                    code=FORCED_REPEAT_PAIRING,
                    message=f"Players {a} and {b} were paired again; no repeat-free assignment was available",
                    details={"player_ids": [a, b]},
                )
            )

        # ====================================================================
        # Step 5: Generate matches
        # ====================================================================
        result.failed_step = "GENERATE_MATCHES"
        schedule = schedule_draw(pairing.pairs, matches_per_pair=matches_per_pair, rng=rng)

        if schedule.under_quota:
            if strict_quota:
                raise IncompleteScheduleError(
                    f"INCOMPLETE_SCHEDULE: pairs {sorted(schedule.under_quota)} below {matches_per_pair} matches"
                )
            for seq, reached in sorted(schedule.under_quota.items()):
                result.warnings.append(
                    DrawWarning(
                        code=PARTIAL_SCHEDULE,
                        message=f"Pair {seq} has {reached} of {matches_per_pair} matches",
                        details={"pair_sequence": seq, "matches": reached, "target": matches_per_pair},
                    )
                )

        # ====================================================================
        # Step 6: Replace stored draw (single transaction)
        # ====================================================================
        result.failed_step = "CLEAR_EXISTING"
        existing = get_draw(session, league_id, event_date)
        if existing:
            result.replaced_draw_id = existing.id
            _delete_draw_subtree(session, existing)

        result.failed_step = "PERSIST_DRAW"
        draw = Draw(
            league_id=league_id,
            event_id=event.id if event else None,
            event_date=event_date,
            created_by=created_by,
        )
        session.add(draw)
        session.flush()

        pair_rows: Dict[int, Pair] = {}
        for slot in pairing.pairs:
            row = Pair(
                draw_id=draw.id,
                sequence=slot.sequence,
                tier=slot.tier,
                player1_id=slot.player1_id,
                player2_id=slot.player2_id,
            )
            session.add(row)
            pair_rows[slot.sequence] = row
        session.flush()

        match_rows: List[Match] = []
        for slot in schedule.matches:
            id_a, id_b = sorted((pair_rows[slot.pair_a].id, pair_rows[slot.pair_b].id))
            row = Match(draw_id=draw.id, sequence=slot.sequence, tier=slot.tier, pair_a_id=id_a, pair_b_id=id_b)
            session.add(row)
            match_rows.append(row)

        if event:
            event.duos_generated = True
            session.add(event)

        session.flush()

        result.draw_id = draw.id
        result.pairs = [serialize_pair(row) for row in pair_rows.values()]
        result.matches = [serialize_match(row) for row in match_rows]

        # ====================================================================
        # Step 7: Success - single commit
        # ====================================================================
        session.commit()
        result.status = "success"
        result.failed_step = None

        for warning in result.warnings:
            logger.warning("Draw %s: %s %s", draw.id, warning.code, warning.message)
        logger.info(
            "Draw %s committed for league %s on %s: %d players, %d pairs, %d matches",
            result.draw_id,
            league_id,
            event_date,
            result.players_count,
            len(result.pairs),
            len(result.matches),
        )
        return result

    except (ValueError, LookupError):
        session.rollback()
        raise
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Run draw failed, transaction rolled back")
        result.status = "error"
        result.error_message = f"Draw failed at step {result.failed_step}: {str(e)}"
        raise RuntimeError(f"Run draw failed: {result.error_message}") from e
