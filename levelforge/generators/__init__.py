"""Mapping-table generators and node placement for levels."""

from levelforge.generators.base import BaseGenerator, GeneratorReport
from levelforge.generators.core_noise import CoreNoiseGenerator
from levelforge.generators.solution_first import SolutionFirstGenerator
from levelforge.generators.placement import (
    build_level,
    make_node,
    place_random_node,
    scatter_level,
)

# Registry: name → class
GENERATOR_REGISTRY: dict[str, type[BaseGenerator]] = {
    "core_noise": CoreNoiseGenerator,
    "solution_first": SolutionFirstGenerator,
}


def get_generator(name: str) -> type[BaseGenerator]:
    """Look up a generator class by name."""
    if name not in GENERATOR_REGISTRY:
        available = ", ".join(sorted(GENERATOR_REGISTRY))
        raise ValueError(f"Unknown generator '{name}'. Available: {available}")
    return GENERATOR_REGISTRY[name]


def list_generators() -> list[str]:
    """Return the names of all available generators."""
    return sorted(GENERATOR_REGISTRY.keys())


__all__ = [
    "BaseGenerator",
    "GeneratorReport",
    "GENERATOR_REGISTRY",
    "get_generator",
    "list_generators",
    "CoreNoiseGenerator",
    "SolutionFirstGenerator",
    "build_level",
    "make_node",
    "place_random_node",
    "scatter_level",
]
