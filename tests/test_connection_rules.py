"""Tests for the runtime connection rules."""

import pytest

from levelforge.config import NodeRole
from levelforge.graph import LevelGraph, Node
from levelforge.validation.connection_rules import ConnectionBoard, EdgeCheck


P, C, N = NodeRole.PRODUCER, NodeRole.CONSUMER, NodeRole.NEUTRAL


@pytest.fixture()
def graph():
    """
    P → N(cost 2) → C in a column on the left; a crossing pair Q → R,
    S → T on the right.
    """
    graph = LevelGraph([
        Node(id="P", role=P, position=(0, 0, 0), capacity=1),
        Node(id="N", role=N, position=(0, 0, 2), capacity=2, weight=-2),
        Node(id="C", role=C, position=(0, 0, 4)),
        Node(id="Q", role=P, position=(10, 0, 0), capacity=1),
        Node(id="R", role=N, position=(12, 0, 2), capacity=1),
        Node(id="S", role=N, position=(10, 0, 2), capacity=1),
        Node(id="T", role=C, position=(12, 0, 0)),
    ])
    graph.set_mapping("P", ["N", "C"])
    graph.set_mapping("N", ["C", "P"])
    graph.set_mapping("Q", ["R"])
    graph.set_mapping("S", ["T"])
    graph.set_mapping("C", ["N"])
    return graph


@pytest.fixture()
def board(graph):
    return ConnectionBoard(graph, starting_energy=5)


# ── Rules, in order ──────────────────────────────────────────────────

class TestValidateEdge:
    def test_allowed(self, board):
        check = board.validate_edge("P", "N")
        assert check == EdgeCheck(True)
        assert check

    def test_unknown_node(self, board):
        assert board.validate_edge("P", "ghost").reason == "Cannot connect unknown nodes"

    def test_self(self, board):
        assert "itself" in board.validate_edge("N", "N").reason

    def test_consumer_source(self, board):
        check = board.validate_edge("C", "N")
        assert not check
        assert "consumers are endpoints" in check.reason

    def test_capacity(self, board):
        board.connect("P", "N")
        assert "no available outgoing slots" in board.validate_edge("P", "C").reason

    def test_mapping(self, board):
        assert "not allowed by level mapping" in board.validate_edge("R", "Q").reason

    def test_existing_reverse(self, board):
        board.connect("P", "N")
        assert "already exists" in board.validate_edge("N", "P").reason

    def test_energy(self, graph):
        board = ConnectionBoard(graph, starting_energy=1)
        assert "Not enough energy" in board.validate_edge("P", "N").reason

    def test_crossing(self, board):
        board.connect("Q", "R")
        assert "would cross" in board.validate_edge("S", "T").reason

    def test_capacity_checked_before_mapping(self, board):
        board.connect("P", "N")
        reason = board.validate_edge("P", "R").reason
        assert "no available outgoing slots" in reason


# ── Connect / disconnect ─────────────────────────────────────────────

class TestConnections:
    def test_connect_applies_weight_once(self, board):
        board.connect("P", "N")
        assert board.energy == 3
        board.disconnect("P", "N")
        assert board.energy == 3
        board.connect("P", "N")
        assert board.energy == 3

    def test_connect_rejects_with_reason(self, board):
        with pytest.raises(ValueError, match="not allowed by level mapping"):
            board.connect("R", "Q")

    def test_disconnect_frees_capacity(self, board):
        board.connect("P", "N")
        assert board.disconnect("N", "P") is True
        assert board.connections == []
        assert board.validate_edge("P", "C").allowed
        assert board.disconnect("P", "N") is False

    def test_completion(self, board):
        assert not board.is_complete()
        board.connect("P", "N")
        board.connect("N", "C")
        assert board.is_consumer_connected("C")
        assert not board.is_consumer_connected("T")
        assert not board.is_complete()
        board.connect("S", "T")
        assert not board.is_consumer_connected("T")

    def test_complete_level(self, graph):
        graph.remove_node("T")
        board = ConnectionBoard(graph)
        board.connect("P", "N")
        board.connect("N", "C")
        assert board.is_complete()

    def test_reset(self, board):
        board.connect("P", "N")
        board.reset()
        assert board.connections == []
        assert board.energy == 5
        board.connect("P", "N")
        assert board.energy == 3
        board.reset(starting_energy=9)
        assert board.energy == 9
