"""Binary-tree level layout."""

from __future__ import annotations

import math

from levelforge.config import Bounds
from levelforge.graph import Position
from levelforge.patterns.base import BasePattern


class TreePattern(BasePattern):
    """
    Hierarchical levels, top down: level *l* holds up to ``2 ** l`` nodes.

    The final level is capped at however many nodes remain.
    """

    name = "tree"

    def positions(self, count: int, bounds: Bounds) -> list[Position]:
        if count <= 0:
            return []

        width, height = self._extent(bounds)
        levels = math.ceil(math.log2(count)) + 1
        out: list[Position] = []

        for level in range(levels):
            if len(out) >= count:
                break
            nodes_in_level = min(2 ** level, count - len(out))
            z = bounds.center_z + height / 2 - height * level / levels

            for t in self._spread(nodes_in_level):
                x = bounds.center_x - width / 2 + width * float(t)
                out.append((x, 0.0, z))

        return out
