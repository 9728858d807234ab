"""Tests for the graph metrics calculator."""

import pytest

from levelforge.config import GraphMetrics, NodeRole
from levelforge.graph import LevelGraph, Node
from levelforge.metrics import compute_metrics


P, C, N = NodeRole.PRODUCER, NodeRole.CONSUMER, NodeRole.NEUTRAL


def _chain():
    graph = LevelGraph([
        Node(id="P", role=P, capacity=1),
        Node(id="N", role=N, capacity=1),
        Node(id="C", role=C),
    ])
    graph.add_mapping("P", "N")
    graph.add_mapping("N", "C")
    return graph


def test_fully_mapped_graph_has_density_one():
    ids = ["a", "b", "c", "d"]
    graph = LevelGraph(Node(id=i, capacity=3) for i in ids)
    for source in ids:
        graph.set_mapping(source, [t for t in ids if t != source])

    metrics = compute_metrics(graph)
    assert metrics.edge_count == 12
    assert metrics.density == pytest.approx(1.0)


def test_chain_metrics():
    metrics = compute_metrics(_chain())
    assert metrics.node_count == 3
    assert metrics.edge_count == 2
    assert metrics.density == pytest.approx(2 / 6)
    assert metrics.average_path_length == pytest.approx(2.0)
    assert metrics.max_path_length == 2
    assert metrics.alternative_paths == 1
    assert metrics.complexity_score == pytest.approx(2 * 2.0 + 10 / 2 + 10 * (1 - 2 / 6))


def test_equal_length_alternatives_are_counted():
    graph = LevelGraph([
        Node(id="P0", role=P),
        Node(id="P1", role=P),
        Node(id="N", role=N, capacity=1),
        Node(id="C", role=C),
    ])
    graph.add_mapping("P0", "N")
    graph.add_mapping("P1", "N")
    graph.add_mapping("N", "C")
    metrics = compute_metrics(graph)
    assert metrics.max_path_length == 2
    assert metrics.alternative_paths == 2


def test_unreachable_consumer_is_ignored():
    graph = _chain()
    graph.add_node(Node(id="C2", role=C))
    metrics = compute_metrics(graph)
    assert metrics.average_path_length == pytest.approx(2.0)
    assert metrics.alternative_paths == 1


def test_pure_and_idempotent():
    graph = _chain()
    before = graph.mapping_edges()
    first = compute_metrics(graph)
    second = compute_metrics(graph)
    assert first == second
    assert graph.mapping_edges() == before


@pytest.mark.parametrize("graph", [None, LevelGraph()])
def test_degenerate_input_gives_zero_metrics(graph):
    metrics = compute_metrics(graph)
    assert metrics == GraphMetrics()
    assert metrics.complexity_score == 0.0


def test_single_node_density_is_zero():
    metrics = compute_metrics(LevelGraph([Node(id="solo")]))
    assert metrics.density == 0.0
    assert metrics.node_count == 1


def test_summary_string():
    text = str(compute_metrics(_chain()))
    assert text.startswith("Nodes: 3, Edges: 2, Density: 0.33")
    assert "Max Path: 2" in text
