"""Spatial layout patterns for generated levels."""

from levelforge.patterns.base import BasePattern
from levelforge.patterns.circular import CircularPattern
from levelforge.patterns.diamond import DiamondPattern
from levelforge.patterns.grid import GridPattern
from levelforge.patterns.mixed import MixedPattern
from levelforge.patterns.tree import TreePattern
from levelforge.patterns.triangular import TriangularPattern

# Registry: name → class
PATTERN_REGISTRY: dict[str, type[BasePattern]] = {
    "triangular": TriangularPattern,
    "grid": GridPattern,
    "circular": CircularPattern,
    "diamond": DiamondPattern,
    "tree": TreePattern,
    "mixed": MixedPattern,
}


def get_pattern(name) -> type[BasePattern]:
    """Look up a pattern class by name (or :class:`GraphPattern` member)."""
    key = getattr(name, "value", name)
    if key not in PATTERN_REGISTRY:
        available = ", ".join(sorted(PATTERN_REGISTRY))
        raise ValueError(f"Unknown pattern '{key}'. Available: {available}")
    return PATTERN_REGISTRY[key]


def list_patterns() -> list[str]:
    """Return the names of all available patterns."""
    return sorted(PATTERN_REGISTRY.keys())


__all__ = [
    "BasePattern",
    "PATTERN_REGISTRY",
    "get_pattern",
    "list_patterns",
    "TriangularPattern",
    "GridPattern",
    "CircularPattern",
    "DiamondPattern",
    "TreePattern",
    "MixedPattern",
]
