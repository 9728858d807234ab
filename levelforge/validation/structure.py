"""Static structure checks for a level before it is shipped or played."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from levelforge.geometry import find_crossings
from levelforge.graph import LevelGraph
from levelforge.validation.connectivity import can_consumer_reach_producer

logger = logging.getLogger(__name__)


@dataclass
class StructureReport:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors


def validate_structure(graph: LevelGraph) -> StructureReport:
    """
    Report structural problems in *graph*'s nodes and mapping table.

    Errors: no producers, no consumers, a consumer with outgoing mappings,
    a consumer no producer can reach, crossing mapping edges.
    Warnings: a producer or neutral with an empty mapping.
    """
    report = StructureReport()

    if not graph.producers():
        report.errors.append("Level has no producers")
    if not graph.consumers():
        report.errors.append("Level has no consumers")

    for consumer in graph.consumers():
        if graph.get_mapping(consumer.id):
            report.errors.append(f"Consumer {consumer.id} has outgoing mappings")
        if graph.producers() and not can_consumer_reach_producer(graph, consumer.id):
            report.errors.append(f"Consumer {consumer.id} cannot be reached from any producer")

    for (a, b), (c, d) in find_crossings(graph):
        report.errors.append(f"Mapping {a} -> {b} crosses {c} -> {d}")

    for node in graph.producers() + graph.neutrals():
        if not graph.get_mapping(node.id):
            report.warnings.append(f"{node.role.value.capitalize()} {node.id} has no outgoing mappings")

    if report.errors:
        logger.debug("Structure check found %d error(s)", len(report.errors))
    return report
