"""
Weekly draw pairing: tier split by ranking points, greedy repeat-avoiding pairs.

Seeding: descending ranking points (stable), or a seeded shuffle when every
player has the same points so confirmation order does not bias the draw.
Tiers: half = n // 2; top tier gets half (half - 1 when half is odd), bottom
tier gets the rest. Players are only ever paired inside their own tier.
Repeats: a pair that played together at the previous event is avoided when
any repeat-free assignment of the tier exists.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Set, Tuple

from padel_league.models.pair import Tier
from padel_league.services.errors import InsufficientPlayersError

logger = logging.getLogger(__name__)

PairKey = FrozenSet[int]

# Upper bound on greedy scan rounds per tier
MAX_PAIRING_ATTEMPTS = 500
# Upper bound on nodes visited by the repeat-free backtracking search per tier
MAX_SEARCH_STEPS = 20_000


@dataclass
class PlayerSeed:
    """Lightweight struct for pairing input."""
    player_id: int
    points: int


@dataclass
class PairSlot:
    sequence: int
    tier: Tier
    player1_id: int
    player2_id: Optional[int] = None

    @property
    def is_wildcard(self) -> bool:
        return self.player2_id is None

    def player_ids(self) -> List[int]:
        return [pid for pid in (self.player1_id, self.player2_id) if pid is not None]


@dataclass
class PairingResult:
    pairs: List[PairSlot]
    forced_repeats: List[Tuple[int, int]] = field(default_factory=list)

    def by_tier(self) -> Dict[Tier, List[PairSlot]]:
        grouped: Dict[Tier, List[PairSlot]] = {Tier.top: [], Tier.bottom: []}
        for pair in self.pairs:
            grouped[pair.tier].append(pair)
        return grouped


def pair_key(player_a: int, player_b: int) -> PairKey:
    """Order-independent identity of two players playing together."""
    return frozenset((player_a, player_b))


def pair_keys_from(pairs: Iterable[Tuple[int, Optional[int]]]) -> Set[PairKey]:
    """Build the previous-pairs set from (player1, player2) tuples; wildcards are skipped."""
    return {pair_key(a, b) for a, b in pairs if a is not None and b is not None}


def seed_players(players: Sequence[PlayerSeed], rng: random.Random) -> List[PlayerSeed]:
    """Order players for tiering.

    All-equal points -> uniform shuffle with *rng*.
    Otherwise -> points descending; equal points keep input order.
    """
    ordered = list(players)
    if len({p.points for p in ordered}) <= 1:
        rng.shuffle(ordered)
        return ordered
    return sorted(ordered, key=lambda p: -p.points)


def tier_sizes(n: int) -> Tuple[int, int]:
    """(top, bottom) sizes for *n* seeded players.

      5 players -> half 2 (even) -> (2, 3)
      6 players -> half 3 (odd)  -> (2, 4)
      2 players -> half 1 (odd)  -> (0, 2)
    """
    half = n // 2
    top = half - 1 if half % 2 == 1 else half
    return top, n - top


def _greedy_pairs(
    pool: List[int], previous_pairs: Set[PairKey]
) -> Tuple[List[Tuple[int, int]], Optional[int], List[Tuple[int, int]]]:
    """Greedy pass: returns (pairs, leftover, forced)."""
    remaining = list(pool)
    used: Set[PairKey] = set()
    pairs: List[Tuple[int, int]] = []
    forced: List[Tuple[int, int]] = []

    attempts = 0
    while len(remaining) >= 2 and attempts < MAX_PAIRING_ATTEMPTS:
        attempts += 1
        committed = False

        for i, player in enumerate(remaining):
            for partner in remaining[i + 1:]:
                key = pair_key(player, partner)
                if key in previous_pairs or key in used:
                    continue
                pairs.append((player, partner))
                used.add(key)
                remaining.remove(player)
                remaining.remove(partner)
                committed = True
                break
            if committed:
                break

        if not committed:
            player, partner = remaining[0], remaining[1]
            pairs.append((player, partner))
            forced.append((player, partner))
            used.add(pair_key(player, partner))
            del remaining[:2]

    # Attempt ceiling hit: close out whatever is left in order
    while len(remaining) >= 2:
        player, partner = remaining.pop(0), remaining.pop(0)
        pairs.append((player, partner))
        if pair_key(player, partner) in previous_pairs:
            forced.append((player, partner))

    leftover = remaining[0] if remaining else None
    return pairs, leftover, forced


def _repeat_free_pairs(
    pool: List[int], previous_pairs: Set[PairKey]
) -> Optional[Tuple[List[Tuple[int, int]], Optional[int]]]:
    """Bounded backtracking search for a tier assignment with no repeats.

    Partners are tried in seed order and the wildcard is taken as late as
    possible, so the result stays close to what greedy would have produced.
    Returns None when no repeat-free assignment exists or the budget runs out.
    """
    steps = 0
    allow_wildcard = len(pool) % 2 == 1

    def search(remaining: List[int], wildcard_used: bool):
        nonlocal steps
        steps += 1
        if steps > MAX_SEARCH_STEPS:
            return None
        if not remaining:
            return [], None
        head, rest = remaining[0], remaining[1:]

        for idx, partner in enumerate(rest):
            if pair_key(head, partner) in previous_pairs:
                continue
            found = search(rest[:idx] + rest[idx + 1:], wildcard_used)
            if found is not None:
                pairs, leftover = found
                return [(head, partner)] + pairs, leftover

        if allow_wildcard and not wildcard_used:
            found = search(rest, True)
            if found is not None:
                pairs, _ = found
                return pairs, head
        return None

    return search(list(pool), False)


def _pair_tier(pool: List[int], previous_pairs: Set[PairKey], tier: Tier):
    pairs, leftover, forced = _greedy_pairs(pool, previous_pairs)

    if forced:
        clean = _repeat_free_pairs(pool, previous_pairs)
        if clean is not None:
            logger.info("Tier %s: greedy pass repeated %d pair(s); using repeat-free assignment", tier.value, len(forced))
            pairs, leftover = clean
            forced = []
        else:
            for a, b in forced:
                logger.warning("Tier %s: forced repeat pairing of players %s and %s", tier.value, a, b)

    return pairs, leftover, forced


def compute_draw(
    players: Sequence[PlayerSeed],
    previous_pairs: Optional[Set[PairKey]] = None,
    rng: Optional[random.Random] = None,
) -> PairingResult:
    """Build the pairs for one event occurrence.

    Every input player lands in exactly one PairSlot; a tier with an odd
    player count ends with one wildcard slot. Slots are numbered 1..k,
    top tier first.

    Raises:
        InsufficientPlayersError: fewer than 2 players
    """
    if len(players) < 2:
        raise InsufficientPlayersError(len(players))
    if len({p.player_id for p in players}) != len(players):
        raise ValueError("compute_draw: duplicate player_id in input")

    previous_pairs = previous_pairs or set()
    rng = rng or random.Random()

    seeded = seed_players(players, rng)
    top_size, _ = tier_sizes(len(seeded))
    tiers = [
        (Tier.top, [p.player_id for p in seeded[:top_size]]),
        (Tier.bottom, [p.player_id for p in seeded[top_size:]]),
    ]

    slots: List[PairSlot] = []
    forced_all: List[Tuple[int, int]] = []
    sequence = 1

    for tier, pool in tiers:
        if not pool:
            continue
        pairs, leftover, forced = _pair_tier(pool, previous_pairs, tier)
        forced_all.extend(forced)

        for a, b in pairs:
            slots.append(PairSlot(sequence=sequence, tier=tier, player1_id=a, player2_id=b))
            sequence += 1
        if leftover is not None:
            slots.append(PairSlot(sequence=sequence, tier=tier, player1_id=leftover))
            sequence += 1

    return PairingResult(pairs=slots, forced_repeats=forced_all)
