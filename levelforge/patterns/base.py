"""Abstract base class for all spatial layout patterns."""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from levelforge.config import Bounds
from levelforge.graph import Position

# Share of the bounds a layout actually occupies
FILL_RATIO = 0.8


class BasePattern(ABC):
    """
    Base class for node layout patterns.

    Every pattern maps a node count and a bounded region to a list of
    positions on the ground plane (``y`` is always 0)::

        [(x0, 0.0, z0), (x1, 0.0, z1), ...]

    Patterns never fail and never return more than *count* positions.
    They may return fewer when the layout formula cannot hit *count*
    exactly.
    """

    name: str = "base"

    @abstractmethod
    def positions(self, count: int, bounds: Bounds) -> list[Position]:
        """
        Lay out up to *count* positions inside *bounds*.

        Parameters
        ----------
        count : int
            Desired number of positions.
        bounds : Bounds
            Region to lay out in.

        Returns
        -------
        list[Position]
            At most *count* ``(x, 0.0, z)`` tuples.
        """

    # ------------------------------------------------------------------
    # Helpers shared by all patterns
    # ------------------------------------------------------------------

    @staticmethod
    def _spread(n: int) -> np.ndarray:
        """Parameters in [0, 1] for *n* evenly spaced items; a lone item sits at 0.5."""
        if n <= 1:
            return np.array([0.5] * max(n, 0))
        return np.linspace(0.0, 1.0, n)

    @staticmethod
    def _extent(bounds: Bounds) -> tuple[float, float]:
        return bounds.size_x * FILL_RATIO, bounds.size_z * FILL_RATIO

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
