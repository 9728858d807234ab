"""Pydantic models defining data contracts for levelforge."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class NodeRole(str, Enum):
    PRODUCER = "producer"
    CONSUMER = "consumer"
    NEUTRAL = "neutral"


class DifficultyTier(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"


class GraphPattern(str, Enum):
    TRIANGULAR = "triangular"
    GRID = "grid"
    CIRCULAR = "circular"
    DIAMOND = "diamond"
    TREE = "tree"
    MIXED = "mixed"


# ---------------------------------------------------------------------------
# Generation configuration models
# ---------------------------------------------------------------------------

class Bounds(BaseModel):
    """Axis-aligned playable area on the ground (x/z) plane."""
    model_config = ConfigDict(frozen=True)

    center_x: float = 0.0
    center_z: float = 0.0
    size_x: float = Field(default=20.0, ge=0)
    size_z: float = Field(default=20.0, ge=0)

    @property
    def min_x(self) -> float:
        return self.center_x - self.size_x / 2

    @property
    def max_x(self) -> float:
        return self.center_x + self.size_x / 2

    @property
    def min_z(self) -> float:
        return self.center_z - self.size_z / 2

    @property
    def max_z(self) -> float:
        return self.center_z + self.size_z / 2

    def expanded(self, amount: float) -> Bounds:
        """Grow (or shrink, for negative *amount*) each side by *amount*."""
        return Bounds(
            center_x=self.center_x,
            center_z=self.center_z,
            size_x=max(0.0, self.size_x + 2 * amount),
            size_z=max(0.0, self.size_z + 2 * amount),
        )

    def scaled(self, factor: float) -> Bounds:
        return Bounds(
            center_x=self.center_x,
            center_z=self.center_z,
            size_x=self.size_x * factor,
            size_z=self.size_z * factor,
        )


class NodeCounts(BaseModel):
    """How many nodes of each role a generated level gets."""
    producers: int = Field(default=2, ge=0)
    consumers: int = Field(default=2, ge=0)
    neutrals: int = Field(default=8, ge=0)

    @property
    def total(self) -> int:
        return self.producers + self.consumers + self.neutrals


class PlacementSettings(BaseModel):
    """Spawn rules for randomly scattered nodes (used when no pattern is set)."""
    min_node_distance: float = Field(default=1.5, gt=0)
    producer_zone_size: float = Field(default=0.3, ge=0.1, le=0.5, description="Bottom share of depth")
    consumer_zone_size: float = Field(default=0.3, ge=0.1, le=0.5, description="Top share of depth")
    neutral_zone_margin: float = Field(default=0.2, ge=0.0, le=0.3)
    max_attempts: int = Field(default=100, ge=1)


class GenerationConfig(BaseModel):
    """Top-level configuration for one generated level."""
    counts: NodeCounts = Field(default_factory=NodeCounts)
    pattern: Optional[GraphPattern] = Field(
        default=GraphPattern.GRID,
        description="Neutral layout; None scatters every node randomly",
    )
    placement: PlacementSettings = Field(default_factory=PlacementSettings)
    difficulty: DifficultyTier = DifficultyTier.MEDIUM
    generator: str = Field(default="core_noise", description="Registered mapping generator")
    bounds: Bounds = Field(default_factory=Bounds)
    bounds_padding: float = Field(default=0.5, ge=0)
    starting_energy: int = Field(default=5, ge=0)
    max_attempts: int = Field(default=3, ge=0, description="Solution-first regenerations")
    repair_connectivity: bool = True
    seed: Optional[int] = None


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

class GraphMetrics(BaseModel):
    """Difficulty analytics for a finished level graph."""
    node_count: int = 0
    edge_count: int = 0
    density: float = 0.0
    average_path_length: float = 0.0
    max_path_length: int = 0
    alternative_paths: int = 0
    complexity_score: float = 0.0

    def __str__(self) -> str:
        return (
            f"Nodes: {self.node_count}, Edges: {self.edge_count}, "
            f"Density: {self.density:.2f}, Avg Path: {self.average_path_length:.1f}, "
            f"Max Path: {self.max_path_length}, Alt Paths: {self.alternative_paths}, "
            f"Complexity: {self.complexity_score:.1f}"
        )


class SolveResult(BaseModel):
    """Verdict of the solvability search, with a witness when one exists."""
    solvable: bool = False
    paths: list[list[str]] = Field(default_factory=list)
    final_energy: Optional[int] = None
    attempts: int = 0


class LevelRecord(BaseModel):
    """A single row of a batch generation report."""
    level_name: str
    pattern: Optional[GraphPattern]
    difficulty: DifficultyTier
    generator: str
    producers: int
    consumers: int
    neutrals: int
    solvable: bool = False
    attempts: int = 0
    repaired_consumers: int = 0
    crossings: int = 0
    node_count: int = 0
    edge_count: int = 0
    density: float = 0.0
    average_path_length: float = 0.0
    max_path_length: int = 0
    alternative_paths: int = 0
    complexity_score: float = 0.0
    wall_time_seconds: float = 0.0
    error_message: str = ""
