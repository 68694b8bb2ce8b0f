"""
Tests for weekly draw pairing: seeding, tier split, repeat avoidance.
"""

import math
import random

import pytest

from padel_league.models.pair import Tier
from padel_league.services.errors import InsufficientPlayersError
from padel_league.services.pairing_engine import (
    PlayerSeed,
    compute_draw,
    pair_key,
    pair_keys_from,
    seed_players,
    tier_sizes,
)


def _seeds(points: list) -> list:
    """Helper: player ids 1..n with the given points."""
    return [PlayerSeed(player_id=i, points=p) for i, p in enumerate(points, start=1)]


def _as_tuples(result):
    return [(p.sequence, p.tier, p.player1_id, p.player2_id) for p in result.pairs]


class TestTierSizes:
    def test_even_half(self):
        assert tier_sizes(5) == (2, 3)
        assert tier_sizes(8) == (4, 4)

    def test_odd_half_moves_one_player_down(self):
        assert tier_sizes(6) == (2, 4)
        assert tier_sizes(10) == (4, 6)

    def test_smallest_draws(self):
        assert tier_sizes(2) == (0, 2)
        assert tier_sizes(3) == (0, 3)


class TestSeeding:
    def test_sorted_by_points_descending(self):
        seeded = seed_players(_seeds([100, 500, 300]), random.Random(1))
        assert [p.player_id for p in seeded] == [2, 3, 1]

    def test_ties_keep_input_order(self):
        seeded = seed_players(_seeds([300, 500, 300, 500]), random.Random(1))
        assert [p.player_id for p in seeded] == [2, 4, 1, 3]

    def test_all_equal_points_are_shuffled_with_rng(self):
        players = _seeds([100] * 12)
        first = seed_players(players, random.Random(42))
        second = seed_players(players, random.Random(42))
        assert [p.player_id for p in first] == [p.player_id for p in second]
        assert sorted(p.player_id for p in first) == list(range(1, 13))
        # Input list is not mutated
        assert [p.player_id for p in players] == list(range(1, 13))


class TestScenarios:
    def test_five_players_two_tiers_with_wildcard(self):
        result = compute_draw(_seeds([500, 500, 300, 300, 100]), set(), random.Random(0))
        assert _as_tuples(result) == [
            (1, Tier.top, 1, 2),
            (2, Tier.bottom, 3, 4),
            (3, Tier.bottom, 5, None),
        ]
        assert result.forced_repeats == []

    def test_two_players_single_pair(self):
        result = compute_draw(_seeds([100, 200]), set(), random.Random(0))
        assert _as_tuples(result) == [(1, Tier.bottom, 2, 1)]

    def test_three_players_pair_plus_wildcard(self):
        result = compute_draw(_seeds([300, 200, 100]), set(), random.Random(0))
        assert len(result.pairs) == 2
        assert result.pairs[-1].is_wildcard
        assert result.pairs[-1].player1_id == 3


class TestInsufficientPlayers:
    @pytest.mark.parametrize("points", [[], [100]])
    def test_fewer_than_two_players(self, points):
        with pytest.raises(InsufficientPlayersError):
            compute_draw(_seeds(points), set(), random.Random(0))

    def test_duplicate_player_rejected(self):
        with pytest.raises(ValueError):
            compute_draw([PlayerSeed(1, 100), PlayerSeed(1, 100)], set(), random.Random(0))


class TestAssignmentInvariants:
    def test_every_player_exactly_once(self):
        rng = random.Random(2024)
        for n in range(2, 31):
            points = [rng.randint(0, 5) * 100 for _ in range(n)]
            result = compute_draw(_seeds(points), set(), random.Random(n))

            placed = [pid for p in result.pairs for pid in p.player_ids()]
            assert sorted(placed) == list(range(1, n + 1))
            assert len(result.pairs) == math.ceil(n / 2)

    def test_sequences_are_contiguous_top_first(self):
        result = compute_draw(_seeds([900, 800, 700, 600, 500, 400, 300, 200, 100]), set(), random.Random(0))
        assert [p.sequence for p in result.pairs] == list(range(1, len(result.pairs) + 1))
        tiers = [p.tier for p in result.pairs]
        assert tiers == sorted(tiers, key=lambda t: 0 if t == Tier.top else 1)

    def test_pairs_stay_inside_their_tier(self):
        points = [1000 - 10 * i for i in range(11)]
        result = compute_draw(_seeds(points), set(), random.Random(0))
        top_size, _ = tier_sizes(11)
        top_ids = set(range(1, top_size + 1))
        for pair in result.pairs:
            members = set(pair.player_ids())
            if pair.tier == Tier.top:
                assert members <= top_ids
            else:
                assert not members & top_ids

    def test_at_most_one_wildcard_per_tier(self):
        result = compute_draw(_seeds([10 * i for i in range(1, 8)]), set(), random.Random(0))
        for tier in (Tier.top, Tier.bottom):
            assert sum(1 for p in result.pairs if p.tier == tier and p.is_wildcard) <= 1


class TestRepeatAvoidance:
    def test_previous_partner_is_skipped(self):
        # 6 players: top {1,2}, bottom {3,4,5,6}
        previous = {pair_key(3, 4)}
        result = compute_draw(_seeds([600, 500, 400, 300, 200, 100]), previous, random.Random(0))
        keys = {pair_key(p.player1_id, p.player2_id) for p in result.pairs if not p.is_wildcard}
        assert not keys & previous
        assert result.forced_repeats == []

    def test_finds_clean_assignment_greedy_would_miss(self):
        # Greedy takes 3-5 and is left with the repeat 4-6; 3-6 / 4-5 is clean
        previous = {pair_key(3, 4), pair_key(4, 6)}
        result = compute_draw(_seeds([600, 500, 400, 300, 200, 100]), previous, random.Random(0))
        bottom = {pair_key(p.player1_id, p.player2_id) for p in result.pairs if p.tier == Tier.bottom}
        assert bottom == {pair_key(3, 6), pair_key(4, 5)}
        assert result.forced_repeats == []

    def test_wildcard_moves_to_avoid_repeat(self):
        # Bottom tier {3,4,5}: 3-4 and 3-5 both repeats, so 3 becomes the wildcard
        previous = {pair_key(3, 4), pair_key(3, 5)}
        result = compute_draw(_seeds([500, 400, 300, 200, 100]), previous, random.Random(0))
        bottom = [p for p in result.pairs if p.tier == Tier.bottom]
        assert {pair_key(p.player1_id, p.player2_id) for p in bottom if not p.is_wildcard} == {pair_key(4, 5)}
        assert [p.player1_id for p in bottom if p.is_wildcard] == [3]

    def test_unavoidable_repeat_is_forced_not_fatal(self):
        previous = {pair_key(1, 2)}
        result = compute_draw(_seeds([200, 100]), previous, random.Random(0))
        assert len(result.pairs) == 1
        assert result.forced_repeats == [(1, 2)]

    def test_pair_keys_skip_wildcards(self):
        assert pair_keys_from([(1, 2), (3, None)]) == {pair_key(2, 1)}


class TestDeterminism:
    def test_same_seed_same_draw(self):
        players = _seeds([250] * 9)
        previous = {pair_key(1, 2), pair_key(3, 4)}
        first = compute_draw(players, previous, random.Random(99))
        second = compute_draw(players, previous, random.Random(99))
        assert _as_tuples(first) == _as_tuples(second)
