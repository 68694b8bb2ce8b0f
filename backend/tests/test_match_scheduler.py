"""
Tests for intra-tier match generation.
"""

import random
from collections import Counter

import pytest

from padel_league.models.pair import Tier
from padel_league.services.match_scheduler import generate_matches, matchup_key, schedule_draw
from padel_league.services.pairing_engine import PairSlot


def _pairs(count: int, tier: Tier = Tier.bottom, start: int = 1) -> list:
    return [PairSlot(sequence=s, tier=tier, player1_id=100 + s, player2_id=200 + s) for s in range(start, start + count)]


def _assert_consistent(result, quota):
    keys = [(m.pair_a, m.pair_b) for m in result.matches]
    assert len(keys) == len(set(keys)), "duplicate matchup"
    assert all(a < b for a, b in keys)

    appearances = Counter()
    for a, b in keys:
        appearances[a] += 1
        appearances[b] += 1
    for seq, count in result.match_counts.items():
        assert appearances[seq] == count
        assert count <= quota


class TestSmallTiers:
    def test_single_pair_has_no_matches(self):
        result = generate_matches(_pairs(1), 4, random.Random(0))
        assert result.matches == []
        assert result.under_quota == {}

    def test_no_pairs(self):
        assert generate_matches([], 4, random.Random(0)).matches == []

    def test_two_pairs_play_once_and_report_shortfall(self):
        result = generate_matches(_pairs(2), 4, random.Random(0))
        assert [(m.pair_a, m.pair_b) for m in result.matches] == [(1, 2)]
        assert result.under_quota == {1: 1, 2: 1}


class TestQuota:
    def test_five_pairs_complete_round_robin(self):
        result = generate_matches(_pairs(5), 4, random.Random(3))
        assert len(result.matches) == 10
        assert result.under_quota == {}
        assert set(result.match_counts.values()) == {4}
        _assert_consistent(result, 4)

    @pytest.mark.parametrize("count", [3, 4, 6, 7, 8, 9])
    def test_invariants_hold_for_any_size(self, count):
        for seed in range(5):
            result = generate_matches(_pairs(count), 4, random.Random(seed))
            _assert_consistent(result, 4)
            for seq, reached in result.under_quota.items():
                assert reached < 4
                assert result.match_counts[seq] == reached

    def test_smaller_quota(self):
        result = generate_matches(_pairs(6), 2, random.Random(1))
        _assert_consistent(result, 2)
        assert all(c <= 2 for c in result.match_counts.values())

    def test_matches_are_numbered_from_start_sequence(self):
        result = generate_matches(_pairs(3), 4, random.Random(0), start_sequence=7)
        assert [m.sequence for m in result.matches] == [7, 8, 9]

    def test_mixed_tiers_rejected(self):
        pairs = _pairs(2, Tier.top) + _pairs(2, Tier.bottom, start=3)
        with pytest.raises(ValueError):
            generate_matches(pairs, 4, random.Random(0))


class TestScheduleDraw:
    def test_tiers_never_cross_and_numbering_continues(self):
        pairs = _pairs(3, Tier.top) + _pairs(3, Tier.bottom, start=4)
        result = schedule_draw(pairs, 4, random.Random(5))

        assert [m.sequence for m in result.matches] == list(range(1, 7))
        assert [m.tier for m in result.matches] == [Tier.top] * 3 + [Tier.bottom] * 3
        for m in result.matches:
            if m.tier == Tier.top:
                assert {m.pair_a, m.pair_b} <= {1, 2, 3}
            else:
                assert {m.pair_a, m.pair_b} <= {4, 5, 6}

    def test_empty_top_tier(self):
        result = schedule_draw(_pairs(3, Tier.bottom), 4, random.Random(0))
        assert len(result.matches) == 3
        assert all(m.tier == Tier.bottom for m in result.matches)

    def test_invalid_quota(self):
        with pytest.raises(ValueError):
            schedule_draw(_pairs(3), 0, random.Random(0))

    def test_same_seed_same_schedule(self):
        pairs = _pairs(4, Tier.top) + _pairs(7, Tier.bottom, start=5)
        first = schedule_draw(pairs, 4, random.Random(11))
        second = schedule_draw(pairs, 4, random.Random(11))
        assert [(m.sequence, m.pair_a, m.pair_b) for m in first.matches] == [
            (m.sequence, m.pair_a, m.pair_b) for m in second.matches
        ]


def test_matchup_key_is_order_independent():
    assert matchup_key(5, 2) == matchup_key(2, 5) == (2, 5)
