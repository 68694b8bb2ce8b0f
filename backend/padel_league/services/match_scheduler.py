"""
Intra-tier fixture generation for a weekly draw.

Each pair should play `matches_per_pair` different opponents from its own tier.
This is a bounded greedy pass, not a complete round robin: when tier size or
parity makes the quota unreachable, the pairs that fall short are reported and
the schedule is kept.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set, Tuple

from padel_league.models.pair import Tier
from padel_league.services.pairing_engine import PairSlot

logger = logging.getLogger(__name__)

DEFAULT_MATCHES_PER_PAIR = 4
# Upper bound on full passes over a tier
MAX_SCHEDULING_PASSES = 100


@dataclass
class MatchSlot:
    sequence: int
    tier: Tier
    pair_a: int  # pair sequence, always < pair_b
    pair_b: int


@dataclass
class ScheduleResult:
    matches: List[MatchSlot] = field(default_factory=list)
    match_counts: Dict[int, int] = field(default_factory=dict)  # pair sequence -> matches
    under_quota: Dict[int, int] = field(default_factory=dict)  # pair sequence -> matches reached

    def extend(self, other: "ScheduleResult") -> None:
        self.matches.extend(other.matches)
        self.match_counts.update(other.match_counts)
        self.under_quota.update(other.under_quota)


def matchup_key(pair_a: int, pair_b: int) -> Tuple[int, int]:
    """Canonical (low, high) form of a matchup."""
    return (pair_a, pair_b) if pair_a < pair_b else (pair_b, pair_a)


def generate_matches(
    pairs: Sequence[PairSlot],
    matches_per_pair: int = DEFAULT_MATCHES_PER_PAIR,
    rng: Optional[random.Random] = None,
    start_sequence: int = 1,
) -> ScheduleResult:
    """Generate matches between the pairs of a single tier.

    Args:
        pairs: PairSlots that all belong to the same tier
        matches_per_pair: target number of matches for every pair
        rng: random source for the fairness shuffle
        start_sequence: sequence number of the first match produced

    Returns:
        ScheduleResult; fewer than 2 pairs yields no matches
    """
    result = ScheduleResult()
    if len(pairs) < 2:
        return result

    tiers = {p.tier for p in pairs}
    if len(tiers) != 1:
        raise ValueError(f"generate_matches expects pairs from a single tier, got {sorted(t.value for t in tiers)}")
    tier = next(iter(tiers))

    rng = rng or random.Random()
    order = [p.sequence for p in pairs]
    rng.shuffle(order)

    counts: Dict[int, int] = {seq: 0 for seq in order}
    played: Set[Tuple[int, int]] = set()
    sequence = start_sequence

    for _ in range(MAX_SCHEDULING_PASSES):
        progress = False

        for seq in order:
            if counts[seq] >= matches_per_pair:
                continue
            for other in order:
                if other == seq or counts[other] >= matches_per_pair:
                    continue
                key = matchup_key(seq, other)
                if key in played:
                    continue

                played.add(key)
                result.matches.append(MatchSlot(sequence=sequence, tier=tier, pair_a=key[0], pair_b=key[1]))
                sequence += 1
                counts[seq] += 1
                counts[other] += 1
                progress = True
                break

        if not progress or all(c >= matches_per_pair for c in counts.values()):
            break

    result.match_counts = dict(counts)
    result.under_quota = {seq: c for seq, c in counts.items() if c < matches_per_pair}
    for seq in sorted(result.under_quota):
        logger.warning(
            "Tier %s: pair %s reached %d of %d matches",
            tier.value,
            seq,
            result.under_quota[seq],
            matches_per_pair,
        )

    return result


def schedule_draw(
    pairs: Sequence[PairSlot],
    matches_per_pair: int = DEFAULT_MATCHES_PER_PAIR,
    rng: Optional[random.Random] = None,
) -> ScheduleResult:
    """Run generate_matches for the top tier then the bottom tier; sequences continue across tiers."""
    if matches_per_pair < 1:
        raise ValueError(f"matches_per_pair must be >= 1, got {matches_per_pair}")

    rng = rng or random.Random()
    combined = ScheduleResult()

    for tier in (Tier.top, Tier.bottom):
        tier_pairs = [p for p in pairs if p.tier == tier]
        tier_result = generate_matches(
            tier_pairs,
            matches_per_pair=matches_per_pair,
            rng=rng,
            start_sequence=len(combined.matches) + 1,
        )
        combined.extend(tier_result)

    return combined
