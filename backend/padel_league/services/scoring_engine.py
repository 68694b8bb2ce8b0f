"""
Weekly-event points ledger rules.

    total = 2.5 (played)  + 2.5 (bbq)
          + 2 per victory
          + 3 per blowout applied
          - 3 per blowout received

Blowouts are counted per distinct opposing pair, so two players of the same
pair flagging the same victim pair count once on each side.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Hashable, Iterable, Mapping, Optional, Set

ATTENDANCE_POINTS = Decimal("2.5")
BBQ_POINTS = Decimal("2.5")
VICTORY_POINTS = Decimal("2")
BLOWOUT_APPLIED_POINTS = Decimal("3")
BLOWOUT_RECEIVED_POINTS = Decimal("-3")


@dataclass(frozen=True)
class BlowoutEntry:
    """Engine view of one BlowoutRecord."""
    applier_player_id: int
    victim_player_id: int
    applier_pair_id: Optional[int] = None


@dataclass
class BlowoutTally:
    applied: int = 0
    received: int = 0


def calculate_total_points(
    confirmed: bool,
    bbq_participated: bool,
    victories: int,
    blowouts_applied: int,
    blowouts_received: int,
) -> Decimal:
    """Total for one player at one event. Defeats do not score."""
    total = Decimal("0")
    if confirmed:
        total += ATTENDANCE_POINTS
    if bbq_participated:
        total += BBQ_POINTS
    total += VICTORY_POINTS * victories
    total += BLOWOUT_APPLIED_POINTS * blowouts_applied
    total += BLOWOUT_RECEIVED_POINTS * blowouts_received
    return total


def points_breakdown(
    confirmed: bool,
    bbq_participated: bool,
    victories: int,
    blowouts_applied: int,
    blowouts_received: int,
) -> Dict[str, Decimal]:
    return {
        "attendance": ATTENDANCE_POINTS if confirmed else Decimal("0"),
        "bbq": BBQ_POINTS if bbq_participated else Decimal("0"),
        "victories": VICTORY_POINTS * victories,
        "blowouts_applied": BLOWOUT_APPLIED_POINTS * blowouts_applied,
        "blowouts_received": BLOWOUT_RECEIVED_POINTS * blowouts_received,
    }


def social_only_total() -> Decimal:
    """Fixed score of a bbq-only attendee."""
    return calculate_total_points(False, True, 0, 0, 0)


def _group_of(player_id: int, pair_of_player: Mapping[int, int]) -> Hashable:
    pair_id = pair_of_player.get(player_id)
    if pair_id is not None:
        return ("pair", pair_id)
    return ("player", player_id)


def _applier_group(entry: BlowoutEntry, pair_of_player: Mapping[int, int]) -> Hashable:
    # Draw membership wins; the stored pair id only covers players missing from the draw
    if entry.applier_player_id in pair_of_player:
        return ("pair", pair_of_player[entry.applier_player_id])
    if entry.applier_pair_id is not None:
        return ("pair", entry.applier_pair_id)
    return ("player", entry.applier_player_id)


def tally_blowouts(
    entries: Iterable[BlowoutEntry],
    pair_of_player: Mapping[int, int],
) -> Dict[int, BlowoutTally]:
    """Count applied/received blowouts per player for one event.

    applied[p]  = distinct victim pairs among entries applied by p
    received[p] = distinct applier pairs among entries naming p as victim

    Players absent from *pair_of_player* are their own group.
    """
    victims_by_applier: Dict[int, Set[Hashable]] = {}
    appliers_by_victim: Dict[int, Set[Hashable]] = {}

    for entry in entries:
        victims_by_applier.setdefault(entry.applier_player_id, set()).add(
            _group_of(entry.victim_player_id, pair_of_player)
        )
        appliers_by_victim.setdefault(entry.victim_player_id, set()).add(_applier_group(entry, pair_of_player))

    tallies: Dict[int, BlowoutTally] = {}
    for player_id, groups in victims_by_applier.items():
        tallies.setdefault(player_id, BlowoutTally()).applied = len(groups)
    for player_id, groups in appliers_by_victim.items():
        tallies.setdefault(player_id, BlowoutTally()).received = len(groups)
    return tallies
