"""Tests for the per-difficulty tuning tables."""

import random

import pytest

from levelforge.config import DifficultyTier
from levelforge.tiers import TIER_PROFILES, get_profile, random_weight


def test_every_tier_has_a_profile():
    assert set(TIER_PROFILES) == set(DifficultyTier)


def test_capacities_shrink_with_difficulty():
    producer = [get_profile(t).producer_capacity for t in DifficultyTier]
    neutral = [get_profile(t).neutral_capacity for t in DifficultyTier]
    assert producer == [4, 3, 2, 2]
    assert neutral == [3, 2, 2, 1]


def test_hop_ranges():
    assert get_profile("easy").skeleton_hops == (2, 4)
    assert get_profile("expert").skeleton_hops == (5, 7)
    assert get_profile("medium").solution_hops == (2, 3)


@pytest.mark.parametrize(
    "tier, paths, expected",
    [
        (DifficultyTier.EASY, 3, 6),
        (DifficultyTier.MEDIUM, 3, 3),
        (DifficultyTier.HARD, 5, 2),
        (DifficultyTier.HARD, 1, 1),
        (DifficultyTier.EXPERT, 2, 1),
        (DifficultyTier.EXPERT, 9, 3),
    ],
)
def test_cycle_count(tier, paths, expected):
    assert get_profile(tier).cycle_count(paths) == expected


def test_unknown_difficulty():
    with pytest.raises(ValueError, match="Unknown difficulty"):
        get_profile("nightmare")


def test_random_weight_range():
    rng = random.Random(0)
    weights = [random_weight(DifficultyTier.MEDIUM, rng) for _ in range(200)]
    assert all(1 <= abs(w) <= 3 for w in weights)
    assert any(w > 0 for w in weights) and any(w < 0 for w in weights)
