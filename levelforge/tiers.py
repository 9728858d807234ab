"""Per-difficulty tuning tables used by placement and the mapping generators."""

from __future__ import annotations

import random

from pydantic import BaseModel, ConfigDict

from levelforge.config import DifficultyTier


class TierProfile(BaseModel):
    """Every knob a difficulty tier turns during generation."""
    model_config = ConfigDict(frozen=True)

    producer_capacity: int
    neutral_capacity: int
    positive_weight_chance: float

    # Core + noise generator
    skeleton_hops: tuple[int, int]          # inclusive range
    alternative_sources: int                # extra upstream candidates per consumer
    cycle_multiplier: int = 1
    cycle_divisor: int = 1
    noise_intensity: float

    # Solution-first fallback
    solution_hops: tuple[int, int]          # inclusive range
    decoy_probability: float

    def cycle_count(self, core_paths: int) -> int:
        """Cycle edges to attempt; harder tiers get fewer alternative routings."""
        if self.cycle_divisor > 1:
            return max(1, core_paths // self.cycle_divisor)
        return core_paths * self.cycle_multiplier


TIER_PROFILES: dict[DifficultyTier, TierProfile] = {
    DifficultyTier.EASY: TierProfile(
        producer_capacity=4,
        neutral_capacity=3,
        positive_weight_chance=0.6,
        skeleton_hops=(2, 4),
        alternative_sources=0,
        cycle_multiplier=2,
        noise_intensity=0.2,
        solution_hops=(1, 2),
        decoy_probability=0.1,
    ),
    DifficultyTier.MEDIUM: TierProfile(
        producer_capacity=3,
        neutral_capacity=2,
        positive_weight_chance=0.5,
        skeleton_hops=(3, 5),
        alternative_sources=1,
        noise_intensity=0.4,
        solution_hops=(2, 3),
        decoy_probability=0.2,
    ),
    DifficultyTier.HARD: TierProfile(
        producer_capacity=2,
        neutral_capacity=2,
        positive_weight_chance=0.4,
        skeleton_hops=(4, 6),
        alternative_sources=2,
        cycle_divisor=2,
        noise_intensity=0.6,
        solution_hops=(3, 4),
        decoy_probability=0.35,
    ),
    DifficultyTier.EXPERT: TierProfile(
        producer_capacity=2,
        neutral_capacity=1,
        positive_weight_chance=0.3,
        skeleton_hops=(5, 7),
        alternative_sources=3,
        cycle_divisor=3,
        noise_intensity=0.8,
        solution_hops=(4, 5),
        decoy_probability=0.5,
    ),
}


def get_profile(difficulty: DifficultyTier | str) -> TierProfile:
    """Look up the tuning profile for a tier (enum or its string value)."""
    try:
        tier = DifficultyTier(difficulty)
    except ValueError:
        available = ", ".join(t.value for t in DifficultyTier)
        raise ValueError(f"Unknown difficulty '{difficulty}'. Available: {available}") from None
    return TIER_PROFILES[tier]


def random_weight(difficulty: DifficultyTier | str, rng: random.Random) -> int:
    """Signed weight of magnitude 1-3; positive with the tier's probability."""
    profile = get_profile(difficulty)
    positive = rng.random() < profile.positive_weight_chance
    magnitude = rng.randint(1, 3)
    return magnitude if positive else -magnitude
