"""
levelforge: procedural level generation and solvability checking for a
producer/consumer connection puzzle.
"""

from levelforge.config import (
    Bounds,
    DifficultyTier,
    GenerationConfig,
    GraphMetrics,
    GraphPattern,
    NodeCounts,
    NodeRole,
    SolveResult,
)
from levelforge.engine import GenerationResult, LevelBatchRunner, LevelPipeline, generate_level
from levelforge.geometry import would_connection_intersect, would_intersect
from levelforge.graph import LevelGraph, Node
from levelforge.metrics import compute_metrics
from levelforge.validation import (
    ConnectionBoard,
    find_solution,
    is_solvable,
    repair_connectivity,
    verify_solution,
)

__all__ = [
    "Bounds",
    "DifficultyTier",
    "GenerationConfig",
    "GraphMetrics",
    "GraphPattern",
    "NodeCounts",
    "NodeRole",
    "SolveResult",
    "GenerationResult",
    "LevelBatchRunner",
    "LevelPipeline",
    "generate_level",
    "would_connection_intersect",
    "would_intersect",
    "LevelGraph",
    "Node",
    "compute_metrics",
    "ConnectionBoard",
    "find_solution",
    "is_solvable",
    "repair_connectivity",
    "verify_solution",
]
