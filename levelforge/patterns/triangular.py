"""Triangular (pyramid) layout."""

from __future__ import annotations

import math

from levelforge.config import Bounds
from levelforge.graph import Position
from levelforge.patterns.base import BasePattern


class TriangularPattern(BasePattern):
    """
    Layers of growing width: layer *k* holds ``k + 1`` nodes.

    The layer count is ``ceil(sqrt(2 * count))``, which always leaves room
    for *count* nodes; the last layers may stay partly empty.
    """

    name = "triangular"

    def positions(self, count: int, bounds: Bounds) -> list[Position]:
        if count <= 0:
            return []

        width, height = self._extent(bounds)
        layers = math.ceil(math.sqrt(count * 2))
        out: list[Position] = []

        for layer in range(layers):
            if len(out) >= count:
                break
            nodes_in_layer = layer + 1
            z = bounds.center_z - height / 2 + height * layer / layers
            layer_width = width * (layer + 1) / layers

            for t in self._spread(nodes_in_layer):
                if len(out) >= count:
                    break
                x = bounds.center_x - layer_width / 2 + layer_width * float(t)
                out.append((x, 0.0, z))

        return out
