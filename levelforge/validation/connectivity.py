"""
Connectivity repair.

A cheap pre-pass before the solvability search: every consumer must be
reachable backwards over the mapping table from at least one producer,
ignoring capacity and energy.  Consumers that are not get wired in
greedily through their nearest neutral.

Edges added here are capacity-checked but not planarity-checked, so a
repaired level may contain a crossing that generation would have
refused.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import networkx as nx

from levelforge.graph import Edge, LevelGraph, Node

logger = logging.getLogger(__name__)


@dataclass
class RepairReport:
    """Outcome of :func:`repair_connectivity`."""
    checked: int = 0
    repaired: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    added_edges: list[Edge] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def can_consumer_reach_producer(graph: LevelGraph, consumer_id: str) -> bool:
    """True if some producer has a directed mapping path into *consumer_id*."""
    if consumer_id not in graph:
        return False
    G = graph.to_networkx()
    return any(
        G.nodes[ancestor]["role"] == "producer"
        for ancestor in nx.ancestors(G, consumer_id)
    )


def _touches_producer(graph: LevelGraph, node_id: str) -> bool:
    """Undirected reachability from *node_id* to any producer."""
    G = graph.to_networkx().to_undirected()
    return any(
        G.nodes[other]["role"] == "producer"
        for other in nx.node_connected_component(G, node_id)
    )


def _nearest(candidates: list[Node], origin: Node) -> Node:
    return min(candidates, key=origin.distance_to)


def _wire(graph: LevelGraph, report: RepairReport, from_id: str, to_id: str) -> bool:
    if graph.can_connect(from_id, to_id):
        return True
    if not graph.has_spare_capacity(from_id):
        return False
    graph.add_mapping(from_id, to_id)
    report.added_edges.append((from_id, to_id))
    return True


def _connect_consumer(graph: LevelGraph, consumer: Node, report: RepairReport) -> None:
    producers = graph.producers()
    neutrals = graph.neutrals()

    if not neutrals:
        _wire(graph, report, _nearest(producers, consumer).id, consumer.id)
        return

    entry = _nearest(neutrals, consumer)
    _wire(graph, report, entry.id, consumer.id)
    if _touches_producer(graph, entry.id):
        return

    producer = _nearest(producers, entry)
    if _wire(graph, report, producer.id, entry.id):
        return

    others = [n for n in neutrals if n.id != entry.id]
    if not others:
        return
    bridge = _nearest(others, entry)
    _wire(graph, report, entry.id, bridge.id)
    _wire(graph, report, producer.id, bridge.id)


def repair_connectivity(graph: LevelGraph) -> RepairReport:
    """
    Wire every unreachable consumer back to some producer.

    For each consumer with no producer upstream, the nearest neutral is
    mapped into it.  If that neutral is not linked to any producer at all,
    the nearest producer is mapped into it, or, when the producer is out of
    capacity, both are mapped into the neutral closest to it as a bridge.
    With no neutrals the nearest producer is mapped straight into the
    consumer.  The graph is modified in place.
    """
    report = RepairReport()
    if not graph.producers() or not graph.consumers():
        return report

    for consumer in graph.consumers():
        report.checked += 1
        if can_consumer_reach_producer(graph, consumer.id):
            continue

        logger.warning("Consumer %s cannot reach any producer; repairing", consumer.id)
        _connect_consumer(graph, consumer, report)

        if can_consumer_reach_producer(graph, consumer.id):
            report.repaired.append(consumer.id)
            logger.info("Fixed connectivity for consumer %s", consumer.id)
        else:
            report.failed.append(consumer.id)
            logger.error("Failed to fix connectivity for consumer %s", consumer.id)

    if report.repaired:
        logger.info("Fixed connectivity for %d unreachable consumer(s)", len(report.repaired))
    return report
