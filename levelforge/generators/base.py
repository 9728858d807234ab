"""Abstract base class for all mapping-table generators."""

from __future__ import annotations

import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterable, Optional

import numpy as np

from levelforge.config import DifficultyTier
from levelforge.geometry import would_connection_intersect
from levelforge.graph import LevelGraph, Node

logger = logging.getLogger(__name__)


@dataclass
class GeneratorReport:
    """What a generator did to the mapping table."""
    generator: str
    core_paths: list[list[str]] = field(default_factory=list)
    added_edges: int = 0
    skipped_edges: int = 0


class BaseGenerator(ABC):
    """
    Base class for mapping-table generators.

    A generator takes a level whose nodes are already placed and rewrites
    its mapping table in place.  Every edge goes through
    :meth:`_add_edge`, which refuses duplicates and reverse pairs, edges out
    of a node with no spare capacity, and edges that would cross an
    existing mapping edge.
    Refused edges are logged and skipped; generation never raises on them.
    """

    name: str = "base"

    def __init__(self) -> None:
        self._report = GeneratorReport(generator=self.name)

    @abstractmethod
    def generate(
        self,
        graph: LevelGraph,
        difficulty: DifficultyTier,
        rng: Optional[random.Random] = None,
    ) -> GeneratorReport:
        """
        Rewrite *graph*'s mapping table.

        Parameters
        ----------
        graph : LevelGraph
            Level with placed nodes.  Existing mappings are discarded.
        difficulty : DifficultyTier
            Tier whose profile drives path lengths and decoy density.
        rng : random.Random | None
            Random source; pass a seeded instance for reproducibility.

        Returns
        -------
        GeneratorReport
            Skeleton paths plus added/skipped edge counts.
        """

    # ------------------------------------------------------------------
    # Helpers shared by all generators
    # ------------------------------------------------------------------

    def _reset(self, graph: LevelGraph) -> None:
        graph.clear_mappings()
        self._report = GeneratorReport(generator=self.name)

    def _add_edge(self, graph: LevelGraph, from_id: str, to_id: str) -> bool:
        """Add from_id → to_id to the mapping table if it passes every gate."""
        if graph.can_connect(from_id, to_id):
            return False
        if graph.can_connect(to_id, from_id):
            logger.debug("Skipping %s -> %s: reverse pair already mapped", from_id, to_id)
            self._report.skipped_edges += 1
            return False
        if not graph.has_spare_capacity(from_id):
            logger.debug("Skipping %s -> %s: no spare capacity", from_id, to_id)
            self._report.skipped_edges += 1
            return False
        if would_connection_intersect(graph, from_id, to_id):
            logger.debug("Skipping %s -> %s: would cross an existing edge", from_id, to_id)
            self._report.skipped_edges += 1
            return False
        graph.add_mapping(from_id, to_id)
        self._report.added_edges += 1
        return True

    @staticmethod
    def _by_distance(candidates: Iterable[Node], origin: Node) -> list[Node]:
        """Candidates sorted nearest-first; ties keep input order."""
        nodes = list(candidates)
        if not nodes:
            return []
        coords = np.array([n.position for n in nodes], dtype=float)
        dists = np.linalg.norm(coords - np.array(origin.position, dtype=float), axis=1)
        order = np.argsort(dists, kind="stable")
        return [nodes[i] for i in order]

    @classmethod
    def _nearest(cls, candidates: Iterable[Node], origin: Node) -> Optional[Node]:
        ranked = cls._by_distance(candidates, origin)
        return ranked[0] if ranked else None

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
