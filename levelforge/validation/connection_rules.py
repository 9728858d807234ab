"""
Runtime connection rules.

A :class:`ConnectionBoard` is the play state of one level: the connections
a player has realized so far, the shared energy pool and which nodes have
already applied their weight.  It checks a proposed connection with the
same capacity, exclusivity, energy and planarity rules the generator and
solver use, one edge at a time.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Optional

from levelforge.geometry import would_connection_intersect
from levelforge.graph import Edge, LevelGraph

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EdgeCheck:
    """Verdict for a proposed connection; *reason* is empty when allowed."""
    allowed: bool
    reason: str = ""

    def __bool__(self) -> bool:
        return self.allowed


class ConnectionBoard:
    """
    Realized connections and energy for one level being played.

    Usage
    -----
    >>> board = ConnectionBoard(graph, starting_energy=5)
    >>> board.validate_edge("producer_0", "neutral_3")
    EdgeCheck(allowed=True, reason='')
    >>> board.connect("producer_0", "neutral_3")
    """

    def __init__(self, graph: LevelGraph, starting_energy: int = 5) -> None:
        self.graph = graph
        self.starting_energy = starting_energy
        self.energy = starting_energy
        self._connections: list[Edge] = []
        self._applied: set[str] = set()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def connections(self) -> list[Edge]:
        return list(self._connections)

    def outgoing(self, node_id: str) -> list[str]:
        return [to_id for from_id, to_id in self._connections if from_id == node_id]

    def connected(self, a: str, b: str) -> bool:
        """True if a realized connection joins *a* and *b* in either direction."""
        return (a, b) in self._connections or (b, a) in self._connections

    def validate_edge(self, from_id: str, to_id: str) -> EdgeCheck:
        """Check, in order, every rule a new connection from_id → to_id must pass."""
        source = self.graph.get_node(from_id)
        target = self.graph.get_node(to_id)

        if source is None or target is None:
            return EdgeCheck(False, "Cannot connect unknown nodes")
        if from_id == to_id:
            return EdgeCheck(False, "Cannot connect node to itself")
        if source.is_consumer:
            return EdgeCheck(False, f"Cannot connect from consumer {from_id}; consumers are endpoints")
        if len(self.outgoing(from_id)) >= source.capacity:
            return EdgeCheck(False, f"Node {from_id} has no available outgoing slots")
        if not self.graph.can_connect(from_id, to_id):
            return EdgeCheck(False, f"Connection from {from_id} to {to_id} not allowed by level mapping")
        if self.connected(from_id, to_id):
            return EdgeCheck(False, f"Connection between {from_id} and {to_id} already exists")
        if to_id not in self._applied and self.energy + target.weight < 0:
            return EdgeCheck(
                False,
                f"Not enough energy to connect to {to_id} (have {self.energy}, need {-target.weight})",
            )
        if would_connection_intersect(self.graph, from_id, to_id, self._connections):
            return EdgeCheck(False, f"Connection from {from_id} to {to_id} would cross an existing connection")
        return EdgeCheck(True)

    def is_consumer_connected(self, consumer_id: str) -> bool:
        """True if realized connections lead from some producer into *consumer_id*."""
        if consumer_id not in self.graph:
            return False

        visited = {consumer_id}
        queue = deque([consumer_id])
        while queue:
            current = queue.popleft()
            for from_id, to_id in self._connections:
                if to_id != current or from_id in visited:
                    continue
                node = self.graph.get_node(from_id)
                if node is not None and node.is_producer:
                    return True
                visited.add(from_id)
                queue.append(from_id)
        return False

    def is_complete(self) -> bool:
        """True once every consumer is fed by some producer."""
        consumers = self.graph.consumers()
        return bool(consumers) and all(self.is_consumer_connected(c.id) for c in consumers)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def connect(self, from_id: str, to_id: str) -> Edge:
        """
        Realize from_id → to_id.

        Raises
        ------
        ValueError
            If :meth:`validate_edge` rejects the connection; the message
            is the rejection reason.
        """
        check = self.validate_edge(from_id, to_id)
        if not check.allowed:
            logger.debug("Rejected %s -> %s: %s", from_id, to_id, check.reason)
            raise ValueError(check.reason)

        if to_id not in self._applied:
            self.energy += self.graph.get_node(to_id).weight
            self._applied.add(to_id)

        edge = (from_id, to_id)
        self._connections.append(edge)
        logger.debug("Created connection %s -> %s (energy %d)", from_id, to_id, self.energy)
        return edge

    def disconnect(self, from_id: str, to_id: str) -> bool:
        """
        Remove a realized connection in either direction.

        Frees the source's capacity slot.  Energy already applied stays
        applied.  Returns False if no such connection exists.
        """
        for edge in ((from_id, to_id), (to_id, from_id)):
            if edge in self._connections:
                self._connections.remove(edge)
                logger.debug("Removed connection %s -> %s", *edge)
                return True
        return False

    def reset(self, starting_energy: Optional[int] = None) -> None:
        """Clear every connection and restore the starting energy."""
        if starting_energy is not None:
            self.starting_energy = starting_energy
        self.energy = self.starting_energy
        self._connections.clear()
        self._applied.clear()

    def __repr__(self) -> str:
        return f"<ConnectionBoard connections={len(self._connections)} energy={self.energy}>"
