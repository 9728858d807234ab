"""Diamond (rhombus) layout."""

from __future__ import annotations

from levelforge.config import Bounds
from levelforge.graph import Position
from levelforge.patterns.base import BasePattern

MAX_LAYERS = 20


def _layer_width(layer: int, layers: int) -> int:
    """Widths grow by one up to the middle layer, then shrink symmetrically."""
    return layer + 1 if layer < layers / 2 else layers - layer


class DiamondPattern(BasePattern):
    """
    Symmetric rhombus: layer widths 1, 2, ..., peak, ..., 2, 1.

    Uses the smallest layer count (capped at :data:`MAX_LAYERS`) whose
    widths add up to at least *count*.  Past the cap the layout under-fills.
    """

    name = "diamond"

    def positions(self, count: int, bounds: Bounds) -> list[Position]:
        if count <= 0:
            return []

        width, height = self._extent(bounds)

        layers = 1
        while layers < MAX_LAYERS:
            if sum(_layer_width(l, layers) for l in range(layers)) >= count:
                break
            layers += 1

        out: list[Position] = []
        for layer in range(layers):
            if len(out) >= count:
                break
            nodes_in_layer = _layer_width(layer, layers)
            z = bounds.center_z - height / 2 + height * layer / max(1, layers - 1)
            layer_width = width * nodes_in_layer / layers

            for t in self._spread(nodes_in_layer):
                if len(out) >= count:
                    break
                x = bounds.center_x - layer_width / 2 + layer_width * float(t)
                out.append((x, 0.0, z))

        return out
