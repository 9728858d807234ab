"""Tests for the planarity checks."""

from levelforge.config import NodeRole
from levelforge.geometry import (
    find_crossings,
    segments_intersect,
    would_connection_intersect,
    would_intersect,
)
from levelforge.graph import LevelGraph, Node


# ── Segment test ─────────────────────────────────────────────────────

class TestSegmentsIntersect:
    def test_disjoint_segments(self):
        assert not segments_intersect((0, 0, 0), (1, 0, 0), (0, 0, 1), (1, 0, 1))

    def test_crossing_segments(self):
        assert segments_intersect((0, 0, 0), (2, 0, 2), (0, 0, 2), (2, 0, 0))

    def test_shared_endpoint_is_not_a_crossing(self):
        assert not segments_intersect((0, 0, 0), (1, 0, 1), (1, 0, 1), (2, 0, 0))

    def test_endpoint_within_epsilon(self):
        assert not segments_intersect((0, 0, 0), (1, 0, 1), (1.005, 0, 1), (2, 0, 0))

    def test_height_is_ignored(self):
        assert segments_intersect((0, 5, 0), (2, -3, 2), (0, 1, 2), (2, 9, 0))

    def test_collinear_overlap_is_not_reported(self):
        assert not segments_intersect((0, 0, 0), (2, 0, 0), (1, 0, 0), (3, 0, 0))

    def test_t_junction_is_not_a_strict_crossing(self):
        assert not segments_intersect((0, 0, 0), (2, 0, 0), (1, 0, 0), (1, 0, 2))


def test_would_intersect_against_many():
    existing = [((0, 0, 5), (1, 0, 5)), ((0, 0, 2), (2, 0, 0))]
    assert would_intersect((0, 0, 0), (2, 0, 2), existing)
    assert not would_intersect((5, 0, 0), (6, 0, 0), existing)
    assert not would_intersect((0, 0, 0), (2, 0, 2), [])


# ── Graph-level helpers ──────────────────────────────────────────────

class TestGraphCrossings:
    def _x_graph(self):
        graph = LevelGraph([
            Node(id="A", role=NodeRole.PRODUCER, position=(0, 0, 0), capacity=2),
            Node(id="B", position=(2, 0, 2), capacity=2),
            Node(id="C", role=NodeRole.PRODUCER, position=(0, 0, 2), capacity=2),
            Node(id="D", position=(2, 0, 0), capacity=2),
        ])
        graph.add_mapping("A", "B")
        return graph

    def test_would_connection_intersect(self):
        graph = self._x_graph()
        assert would_connection_intersect(graph, "C", "D")
        assert not would_connection_intersect(graph, "A", "D")

    def test_explicit_edge_list(self):
        graph = self._x_graph()
        assert not would_connection_intersect(graph, "C", "D", edges=[])

    def test_unknown_node_counts_as_intersecting(self):
        assert would_connection_intersect(self._x_graph(), "A", "ghost")

    def test_find_crossings(self):
        graph = self._x_graph()
        assert find_crossings(graph) == []
        graph.add_mapping("C", "D")
        assert find_crossings(graph) == [(("A", "B"), ("C", "D"))]
