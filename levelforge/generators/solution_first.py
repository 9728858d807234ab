"""Solution-first mapping generator, used when a core+noise level fails validation."""

from __future__ import annotations

import logging
import random
from typing import Optional

from levelforge.config import DifficultyTier
from levelforge.generators.base import BaseGenerator, GeneratorReport
from levelforge.graph import LevelGraph, Node
from levelforge.tiers import TierProfile, get_profile

logger = logging.getLogger(__name__)

DECOY_NEIGHBOURS = 3


class SolutionFirstGenerator(BaseGenerator):
    """
    Lays down one intended route per producer first, then sprinkles decoys.

    Each producer picks a random consumer and walks to it through the
    nearest still-unused neutrals (hop count from the tier's
    ``solution_hops``).  Decoys are then added to up to three nearby nodes
    per connectable node with the tier's ``decoy_probability``, never
    creating a reverse pair.
    """

    name = "solution_first"

    def generate(
        self,
        graph: LevelGraph,
        difficulty: DifficultyTier,
        rng: Optional[random.Random] = None,
    ) -> GeneratorReport:
        rng = rng or random.Random()
        profile = get_profile(difficulty)
        self._reset(graph)

        consumers = graph.consumers()
        if not consumers:
            logger.warning("No consumers to route to; nothing generated")
            return self._report

        available = graph.neutrals()
        low, high = profile.solution_hops

        for producer in graph.producers():
            target = rng.choice(consumers)
            path = [producer.id]
            last: Node = producer

            for _ in range(rng.randint(low, high)):
                nearest = self._nearest(available, last)
                if nearest is None:
                    break
                path.append(nearest.id)
                available.remove(nearest)
                last = nearest
            path.append(target.id)
            self._report.core_paths.append(path)

            for from_id, to_id in zip(path, path[1:]):
                self._add_edge(graph, from_id, to_id)

        self._add_decoys(graph, profile, rng)
        logger.info(
            "Solution-first level: %d routes, %d edges added, %d skipped",
            len(self._report.core_paths), self._report.added_edges, self._report.skipped_edges,
        )
        return self._report

    def _add_decoys(self, graph: LevelGraph, profile: TierProfile, rng: random.Random) -> None:
        connectable = graph.producers() + graph.neutrals()
        everyone = connectable + graph.consumers()

        for node in connectable:
            if not graph.has_spare_capacity(node.id):
                continue

            nearby = self._by_distance(
                (n for n in everyone if n.id != node.id and not graph.can_connect(node.id, n.id)),
                node,
            )[:DECOY_NEIGHBOURS]

            for target in nearby:
                if rng.random() >= profile.decoy_probability:
                    continue
                if not graph.has_spare_capacity(node.id):
                    break
                if graph.can_connect(target.id, node.id):
                    continue
                self._add_edge(graph, node.id, target.id)
