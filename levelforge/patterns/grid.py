"""Row/column grid layout."""

from __future__ import annotations

import math

from levelforge.config import Bounds
from levelforge.graph import Position
from levelforge.patterns.base import BasePattern


class GridPattern(BasePattern):
    """
    Neat rows and columns, slightly wider than tall.

    ``cols = ceil(sqrt(1.5 * count))`` and ``rows = ceil(count / cols)``;
    cells are spaced evenly with a one-cell margin on every side.
    """

    name = "grid"

    def positions(self, count: int, bounds: Bounds) -> list[Position]:
        if count <= 0:
            return []

        cols = math.ceil(math.sqrt(count * 1.5))
        rows = math.ceil(count / cols)

        width, height = self._extent(bounds)
        x_spacing = width / (cols + 1)
        z_spacing = height / (rows + 1)

        out: list[Position] = []
        for row in range(rows):
            for col in range(cols):
                if len(out) >= count:
                    return out
                x = bounds.center_x - width / 2 + x_spacing * (col + 1)
                z = bounds.center_z - height / 2 + z_spacing * (row + 1)
                out.append((x, 0.0, z))
        return out
