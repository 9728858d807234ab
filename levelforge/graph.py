"""
Level graph model.

A level is a set of :class:`Node` records plus a *mapping table*: for each
node, the ordered list of node ids it may legally connect to.  Mapping
entries are candidate edges, not realized connections.

The standard dict form mirrors the one used everywhere else in the
package::

    {
        "nodes": [
            {"id": "P0", "role": "producer", "position": [0, 0, -6],
             "capacity": 2, "weight": 0},
            ...
        ],
        "edges": [{"source": "P0", "target": "N3"}, ...],
        "metadata": {"generator": "core_noise", "size": 12, "params": {...}},
    }
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Iterator, Optional

import networkx as nx
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from levelforge.config import NodeRole

Position = tuple[float, float, float]
Edge = tuple[str, str]

MIN_WEIGHT = -3
MAX_WEIGHT = 3


class Node(BaseModel):
    """A single graph vertex: role tag, ground position, capacity and weight."""

    model_config = ConfigDict(validate_assignment=True)

    id: str
    role: NodeRole = NodeRole.NEUTRAL
    position: Position = (0.0, 0.0, 0.0)
    capacity: int = Field(default=1, ge=0, description="Max outgoing connections")
    weight: int = Field(default=0, description="Energy delta applied on first incoming edge")

    @field_validator("weight")
    @classmethod
    def _clamp_weight(cls, value: int) -> int:
        return max(MIN_WEIGHT, min(MAX_WEIGHT, value))

    @model_validator(mode="after")
    def _consumers_are_endpoints(self) -> Node:
        if self.role is NodeRole.CONSUMER and self.capacity != 0:
            # Bypass assignment validation so the validator does not re-enter.
            object.__setattr__(self, "capacity", 0)
        return self

    @property
    def is_producer(self) -> bool:
        return self.role is NodeRole.PRODUCER

    @property
    def is_consumer(self) -> bool:
        return self.role is NodeRole.CONSUMER

    @property
    def is_neutral(self) -> bool:
        return self.role is NodeRole.NEUTRAL

    @property
    def ground(self) -> tuple[float, float]:
        """Projection onto the horizontal (x, z) plane."""
        return (self.position[0], self.position[2])

    def distance_to(self, other: Node) -> float:
        return math.dist(self.position, other.position)


class LevelGraph:
    """
    Nodes plus the mapping table for one level.

    Every generator, validator and the metrics calculator reads and writes
    a level through this object.  It holds no global state; callers pass
    it explicitly.
    """

    def __init__(self, nodes: Iterable[Node] = (), metadata: Optional[dict[str, Any]] = None) -> None:
        self._nodes: dict[str, Node] = {}
        self._mappings: dict[str, list[str]] = {}
        self.metadata: dict[str, Any] = dict(metadata or {})
        for node in nodes:
            self.add_node(node)

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    def add_node(self, node: Node) -> Node:
        if node.id in self._nodes:
            raise ValueError(f"Duplicate node id '{node.id}'")
        self._nodes[node.id] = node
        self._mappings[node.id] = []
        return node

    def remove_node(self, node_id: str) -> None:
        """Remove a node and strip it from every other node's mapping."""
        self._require(node_id)
        del self._nodes[node_id]
        del self._mappings[node_id]
        for targets in self._mappings.values():
            if node_id in targets:
                targets.remove(node_id)

    def get_node(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    def nodes(self) -> list[Node]:
        return list(self._nodes.values())

    def node_ids(self) -> list[str]:
        return list(self._nodes)

    def producers(self) -> list[Node]:
        return [n for n in self._nodes.values() if n.role is NodeRole.PRODUCER]

    def consumers(self) -> list[Node]:
        return [n for n in self._nodes.values() if n.role is NodeRole.CONSUMER]

    def neutrals(self) -> list[Node]:
        return [n for n in self._nodes.values() if n.role is NodeRole.NEUTRAL]

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(list(self._nodes.values()))

    # ------------------------------------------------------------------
    # Mapping table
    # ------------------------------------------------------------------

    def get_mapping(self, node_id: str) -> list[str]:
        """Return a copy of the candidate targets declared for *node_id*."""
        return list(self._mappings.get(node_id, []))

    def set_mapping(self, node_id: str, targets: Iterable[str]) -> None:
        """Replace the mapping of *node_id*; order is kept, duplicates dropped."""
        self._require(node_id)
        cleaned: list[str] = []
        for target in targets:
            self._require(target)
            if target == node_id:
                raise ValueError(f"Node '{node_id}' cannot map to itself")
            if target not in cleaned:
                cleaned.append(target)
        self._mappings[node_id] = cleaned

    def add_mapping(self, from_id: str, to_id: str) -> bool:
        """Append *to_id* to the mapping of *from_id*; False if already there."""
        targets = self.get_mapping(from_id)
        if to_id in targets:
            return False
        targets.append(to_id)
        self.set_mapping(from_id, targets)
        return True

    def can_connect(self, from_id: str, to_id: str) -> bool:
        return to_id in self._mappings.get(from_id, ())

    def has_spare_capacity(self, node_id: str) -> bool:
        """True while the mapping is shorter than the node's capacity."""
        node = self._nodes.get(node_id)
        return node is not None and len(self._mappings[node_id]) < node.capacity

    def clear_mappings(self) -> None:
        for node_id in self._mappings:
            self._mappings[node_id] = []

    def mapping_edges(self) -> list[Edge]:
        return [
            (source, target)
            for source, targets in self._mappings.items()
            for target in targets
        ]

    def incoming(self, node_id: str) -> list[str]:
        """Ids of nodes whose mapping contains *node_id*."""
        return [source for source, targets in self._mappings.items() if node_id in targets]

    # ------------------------------------------------------------------
    # Conversions
    # ------------------------------------------------------------------

    def copy(self) -> LevelGraph:
        clone = LevelGraph(
            (node.model_copy() for node in self._nodes.values()),
            metadata=dict(self.metadata),
        )
        for node_id, targets in self._mappings.items():
            clone._mappings[node_id] = list(targets)
        return clone

    def to_networkx(self) -> nx.DiGraph:
        """Directed view of the mapping table; node attributes carry the record."""
        G = nx.DiGraph()
        for node in self._nodes.values():
            G.add_node(
                node.id,
                role=node.role.value,
                capacity=node.capacity,
                weight=node.weight,
                pos=node.ground,
            )
        G.add_edges_from(self.mapping_edges())
        return G

    def to_dict(self) -> dict:
        return {
            "nodes": [node.model_dump(mode="json") for node in self._nodes.values()],
            "edges": [{"source": u, "target": v} for u, v in self.mapping_edges()],
            "metadata": {
                "generator": self.metadata.get("generator", "custom"),
                "size": len(self._nodes),
                "params": self.metadata.get("params", {}),
            },
        }

    @classmethod
    def from_dict(cls, data: dict) -> LevelGraph:
        if "nodes" not in data:
            raise ValueError("Level dict missing required 'nodes' key")
        if "edges" not in data:
            raise ValueError("Level dict missing required 'edges' key")

        graph = cls(
            (Node.model_validate(raw) for raw in data["nodes"]),
            metadata=data.get("metadata"),
        )
        for edge in data["edges"]:
            graph.add_mapping(edge["source"], edge["target"])
        return graph

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require(self, node_id: str) -> None:
        if node_id not in self._nodes:
            raise ValueError(f"Unknown node id '{node_id}'")

    def __repr__(self) -> str:
        return (
            f"<LevelGraph nodes={len(self._nodes)} "
            f"edges={sum(len(t) for t in self._mappings.values())}>"
        )
