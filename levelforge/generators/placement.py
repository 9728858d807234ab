"""
Node placement for generated levels.

Producers sit along the bottom of the playable area, consumers along the
top, and neutrals fill the middle, either on a named layout pattern or
scattered randomly with minimum-distance rules.  Capacities and weights
come from the difficulty tier.
"""

from __future__ import annotations

import logging
import random
from typing import Iterable, Optional

from levelforge.config import (
    Bounds,
    DifficultyTier,
    GraphPattern,
    NodeCounts,
    NodeRole,
    PlacementSettings,
)
from levelforge.graph import LevelGraph, Node, Position
from levelforge.patterns import get_pattern
from levelforge.tiers import get_profile, random_weight

logger = logging.getLogger(__name__)

# Depth fraction (from the bottom) of the producer and consumer rows
PRODUCER_ROW = 0.2
CONSUMER_ROW = 0.8
# Share of the width the producer/consumer rows span
ROW_SPREAD = 0.6

# Producers and consumers keep this many min-distances apart when scattered
OPPOSITE_ROLE_FACTOR = 3.0


def make_node(
    node_id: str,
    role: NodeRole,
    position: Position,
    difficulty: DifficultyTier,
    rng: random.Random,
) -> Node:
    """Create a node with the tier's capacity and, for neutrals, a random weight."""
    profile = get_profile(difficulty)
    if role is NodeRole.PRODUCER:
        return Node(id=node_id, role=role, position=position, capacity=profile.producer_capacity)
    if role is NodeRole.CONSUMER:
        return Node(id=node_id, role=role, position=position, capacity=0)
    return Node(
        id=node_id,
        role=role,
        position=position,
        capacity=profile.neutral_capacity,
        weight=random_weight(difficulty, rng),
    )


def _row(count: int, bounds: Bounds, depth_fraction: float) -> list[Position]:
    z = bounds.min_z + bounds.size_z * depth_fraction
    spread = bounds.size_x * ROW_SPREAD
    if count == 1:
        return [(bounds.center_x, 0.0, z)]
    return [
        (bounds.center_x - spread / 2 + spread * i / (count - 1), 0.0, z)
        for i in range(count)
    ]


def build_level(
    counts: NodeCounts,
    pattern: GraphPattern | str,
    difficulty: DifficultyTier,
    bounds: Bounds,
    rng: Optional[random.Random] = None,
) -> LevelGraph:
    """
    Place neutrals on *pattern* and producer/consumer rows below/above them.

    The pattern may under-fill; the level then simply has fewer neutrals
    than requested.
    """
    rng = rng or random.Random()
    graph = LevelGraph(metadata={"params": {"pattern": getattr(pattern, "value", pattern)}})

    positions = get_pattern(pattern)().positions(counts.neutrals, bounds)
    if len(positions) < counts.neutrals:
        logger.warning(
            "Pattern %s placed %d of %d neutrals",
            getattr(pattern, "value", pattern), len(positions), counts.neutrals,
        )
    for i, pos in enumerate(positions):
        graph.add_node(make_node(f"neutral_{i}", NodeRole.NEUTRAL, pos, difficulty, rng))

    for i, pos in enumerate(_row(counts.producers, bounds, PRODUCER_ROW)):
        graph.add_node(make_node(f"producer_{i}", NodeRole.PRODUCER, pos, difficulty, rng))
    for i, pos in enumerate(_row(counts.consumers, bounds, CONSUMER_ROW)):
        graph.add_node(make_node(f"consumer_{i}", NodeRole.CONSUMER, pos, difficulty, rng))

    return graph


def place_random_node(
    node_id: str,
    role: NodeRole,
    bounds: Bounds,
    existing: Iterable[Node],
    difficulty: DifficultyTier,
    rng: random.Random,
    settings: Optional[PlacementSettings] = None,
) -> Optional[Node]:
    """
    Drop a node at a random spot inside its role's spawn zone.

    Producers spawn in the bottom band, consumers in the top band, neutrals
    in the middle.  A spot is rejected if it is closer than the minimum
    distance to any existing node (three times that to a node of the
    opposite producer/consumer role).  Returns None after
    ``settings.max_attempts`` rejected spots.
    """
    settings = settings or PlacementSettings()
    existing = list(existing)

    depth = bounds.size_z
    if role is NodeRole.PRODUCER:
        z_low, z_high = bounds.min_z, bounds.min_z + depth * settings.producer_zone_size
    elif role is NodeRole.CONSUMER:
        z_low, z_high = bounds.max_z - depth * settings.consumer_zone_size, bounds.max_z
    else:
        z_low = bounds.min_z + depth * settings.neutral_zone_margin
        z_high = bounds.max_z - depth * settings.neutral_zone_margin

    opposite = {
        NodeRole.PRODUCER: NodeRole.CONSUMER,
        NodeRole.CONSUMER: NodeRole.PRODUCER,
    }.get(role)

    for _ in range(settings.max_attempts):
        candidate = make_node(
            node_id,
            role,
            (rng.uniform(bounds.min_x, bounds.max_x), 0.0, rng.uniform(z_low, z_high)),
            difficulty,
            rng,
        )
        ok = True
        for other in existing:
            limit = settings.min_node_distance
            if opposite is not None and other.role is opposite:
                limit *= OPPOSITE_ROLE_FACTOR
            if candidate.distance_to(other) < limit:
                ok = False
                break
        if ok:
            return candidate

    logger.warning(
        "Could not find valid position for %s node after %d attempts",
        role.value, settings.max_attempts,
    )
    return None


def scatter_level(
    counts: NodeCounts,
    difficulty: DifficultyTier,
    bounds: Bounds,
    rng: Optional[random.Random] = None,
    settings: Optional[PlacementSettings] = None,
) -> LevelGraph:
    """Build a level by random placement; nodes with no legal spot are skipped."""
    rng = rng or random.Random()
    graph = LevelGraph(metadata={"params": {"pattern": None}})

    plan = (
        [(NodeRole.PRODUCER, f"producer_{i}") for i in range(counts.producers)]
        + [(NodeRole.CONSUMER, f"consumer_{i}") for i in range(counts.consumers)]
        + [(NodeRole.NEUTRAL, f"neutral_{i}") for i in range(counts.neutrals)]
    )
    for role, node_id in plan:
        node = place_random_node(node_id, role, bounds, graph.nodes(), difficulty, rng, settings)
        if node is not None:
            graph.add_node(node)
    return graph
