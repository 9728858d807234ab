"""Concentric rings layout."""

from __future__ import annotations

import math

import numpy as np

from levelforge.config import Bounds
from levelforge.graph import Position
from levelforge.patterns.base import BasePattern

# Angular offset between consecutive rings, in radians
RING_TWIST = 0.3


class CircularPattern(BasePattern):
    """
    Concentric rings around the centre of the bounds.

    Ring 0 holds a single node; ring *i* holds ``6 * (i + 1)`` nodes.  Each
    ring is rotated by :data:`RING_TWIST` relative to the previous one so
    spokes do not line up.
    """

    name = "circular"

    def positions(self, count: int, bounds: Bounds) -> list[Position]:
        if count <= 0:
            return []

        max_radius = min(bounds.size_x, bounds.size_z) * 0.4
        rings = math.ceil(math.sqrt(count / 2)) + 1
        out: list[Position] = []

        for ring in range(rings):
            if len(out) >= count:
                break
            radius = max_radius * (ring + 1) / rings
            nodes_in_ring = 1 if ring == 0 else 6 * (ring + 1)
            take = min(nodes_in_ring, count - len(out))

            angles = 2 * np.pi * np.arange(take) / nodes_in_ring + ring * RING_TWIST
            xs = bounds.center_x + np.cos(angles) * radius
            zs = bounds.center_z + np.sin(angles) * radius
            out.extend((float(x), 0.0, float(z)) for x, z in zip(xs, zs))

        return out
