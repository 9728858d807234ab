"""
Difficulty metrics for a finished level graph.

Everything here is a pure function of the mapping table: the graph is read
through its networkx view and never modified.
"""

from __future__ import annotations

from typing import Optional

import networkx as nx

from levelforge.config import GraphMetrics
from levelforge.graph import LevelGraph

PATH_WEIGHT = 2.0
ALTERNATIVES_WEIGHT = 10.0
DENSITY_WEIGHT = 10.0


def shortest_producer_distance(G: nx.DiGraph, consumer_id: str) -> tuple[int, int]:
    """
    Backward BFS from a consumer to the nearest producer.

    Returns ``(distance, hits)`` where *hits* counts the producer edges
    found at that shortest distance, or ``(0, 0)`` if no producer is
    upstream.  Producers are endpoints and are not expanded through.
    """
    frontier = [consumer_id]
    visited = {consumer_id}
    distance = 0

    while frontier:
        hits = 0
        upstream: list[str] = []
        for node_id in frontier:
            for pred in G.predecessors(node_id):
                if G.nodes[pred]["role"] == "producer":
                    hits += 1
                elif pred not in visited:
                    visited.add(pred)
                    upstream.append(pred)
        distance += 1
        if hits:
            return distance, hits
        frontier = upstream

    return 0, 0


def compute_metrics(graph: Optional[LevelGraph]) -> GraphMetrics:
    """
    Compute counts, density, producer distances and a complexity score.

    The score is ``2·avg + 10/(alt + 1) + 10·(1 − density)``: longer
    routes, fewer equally short alternatives and sparser mapping tables
    all read as harder.  ``None`` or an empty level gives all-zero metrics.
    """
    if graph is None or len(graph) == 0:
        return GraphMetrics()

    G = graph.to_networkx()
    density = nx.density(G)

    lengths: list[int] = []
    alternatives = 0
    for consumer in graph.consumers():
        distance, hits = shortest_producer_distance(G, consumer.id)
        if distance > 0:
            lengths.append(distance)
            alternatives += hits

    average = sum(lengths) / len(lengths) if lengths else 0.0
    score = (
        PATH_WEIGHT * average
        + ALTERNATIVES_WEIGHT / (alternatives + 1)
        + DENSITY_WEIGHT * (1.0 - density)
    )

    return GraphMetrics(
        node_count=G.number_of_nodes(),
        edge_count=G.number_of_edges(),
        density=density,
        average_path_length=average,
        max_path_length=max(lengths, default=0),
        alternative_paths=alternatives,
        complexity_score=score,
    )
