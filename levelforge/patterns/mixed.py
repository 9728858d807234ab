"""Hybrid layout: circular core with a grid around it."""

from __future__ import annotations

from levelforge.config import Bounds
from levelforge.graph import Position
from levelforge.patterns.base import BasePattern
from levelforge.patterns.circular import CircularPattern
from levelforge.patterns.grid import GridPattern

# Scale of the grid's bounds relative to the full region
GRID_SCALE = 0.6


class MixedPattern(BasePattern):
    """
    A third of the nodes in a circular core; the rest on a grid laid out
    in bounds scaled by :data:`GRID_SCALE`.
    """

    name = "mixed"

    def positions(self, count: int, bounds: Bounds) -> list[Position]:
        if count <= 0:
            return []

        circular_count = count // 3
        out = CircularPattern().positions(circular_count, bounds)[:circular_count]

        grid_count = count - len(out)
        out.extend(GridPattern().positions(grid_count, bounds.scaled(GRID_SCALE))[:grid_count])
        return out
