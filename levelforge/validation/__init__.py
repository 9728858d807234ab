"""Level validation: solvability search, connectivity repair and play rules."""

from levelforge.validation.connection_rules import ConnectionBoard, EdgeCheck
from levelforge.validation.connectivity import (
    RepairReport,
    can_consumer_reach_producer,
    repair_connectivity,
)
from levelforge.validation.solvability import (
    SearchState,
    find_solution,
    is_solvable,
    verify_solution,
)
from levelforge.validation.structure import StructureReport, validate_structure

__all__ = [
    "ConnectionBoard",
    "EdgeCheck",
    "RepairReport",
    "can_consumer_reach_producer",
    "repair_connectivity",
    "SearchState",
    "find_solution",
    "is_solvable",
    "verify_solution",
    "StructureReport",
    "validate_structure",
]
