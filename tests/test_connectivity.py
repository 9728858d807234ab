"""Tests for connectivity checking and repair."""

import logging

import pytest

from levelforge.config import NodeRole
from levelforge.graph import LevelGraph, Node
from levelforge.validation.connectivity import (
    can_consumer_reach_producer,
    repair_connectivity,
)


P, C, N = NodeRole.PRODUCER, NodeRole.CONSUMER, NodeRole.NEUTRAL


@pytest.fixture()
def column():
    """Producer at the bottom, two neutrals, consumer at the top; no mappings."""
    return LevelGraph([
        Node(id="P", role=P, position=(0, 0, -6), capacity=2),
        Node(id="N0", role=N, position=(0, 0, -2), capacity=2),
        Node(id="N1", role=N, position=(0, 0, 3), capacity=2),
        Node(id="C", role=C, position=(0, 0, 6)),
    ])


# ── Reachability ─────────────────────────────────────────────────────

class TestReachability:
    def test_direct_and_transitive(self, column):
        assert not can_consumer_reach_producer(column, "C")
        column.add_mapping("N1", "C")
        assert not can_consumer_reach_producer(column, "C")
        column.add_mapping("N0", "N1")
        column.add_mapping("P", "N0")
        assert can_consumer_reach_producer(column, "C")

    def test_direction_matters(self, column):
        column.add_mapping("N0", "P")
        column.add_mapping("N0", "C")
        assert not can_consumer_reach_producer(column, "C")

    def test_unknown_consumer(self, column):
        assert not can_consumer_reach_producer(column, "ghost")


# ── Repair ───────────────────────────────────────────────────────────

class TestRepair:
    def test_reachable_level_untouched(self, column):
        column.add_mapping("P", "N1")
        column.add_mapping("N1", "C")
        report = repair_connectivity(column)
        assert report.checked == 1
        assert report.added_edges == []
        assert report.ok

    def test_wires_nearest_neutral_and_producer(self, column, caplog):
        with caplog.at_level(logging.WARNING):
            report = repair_connectivity(column)
        assert report.repaired == ["C"]
        assert report.added_edges == [("N1", "C"), ("P", "N1")]
        assert can_consumer_reach_producer(column, "C")
        assert "cannot reach any producer" in caplog.text

    def test_no_neutrals_links_producer_directly(self):
        graph = LevelGraph([
            Node(id="P", role=P, position=(0, 0, 0), capacity=1),
            Node(id="C", role=C, position=(0, 0, 5)),
        ])
        report = repair_connectivity(graph)
        assert report.added_edges == [("P", "C")]
        assert report.repaired == ["C"]

    def test_neutral_without_capacity_is_not_wired(self, column):
        column.set_mapping("N1", ["N0"])
        column.add_mapping("N1", "P")
        report = repair_connectivity(column)
        assert ("N1", "C") not in report.added_edges
        assert report.failed == ["C"]

    def test_bridge_when_producer_is_full(self, column):
        column.get_node("P").capacity = 1
        column.add_mapping("P", "N0")
        report = repair_connectivity(column)
        assert ("N1", "C") in report.added_edges
        assert ("N1", "N0") in report.added_edges
        assert ("P", "N1") not in report.added_edges

    def test_degenerate_levels(self):
        assert repair_connectivity(LevelGraph()).checked == 0
        only_consumer = LevelGraph([Node(id="C", role=C)])
        assert repair_connectivity(only_consumer).checked == 0
