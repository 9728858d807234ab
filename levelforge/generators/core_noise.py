"""Core-path + noise mapping generator."""

from __future__ import annotations

import logging
import random
from typing import Optional

from levelforge.config import DifficultyTier
from levelforge.generators.base import BaseGenerator, GeneratorReport
from levelforge.graph import LevelGraph, Node
from levelforge.tiers import TierProfile, get_profile

logger = logging.getLogger(__name__)

# Chance that a noise dead end gets a second link chained onto it
DEAD_END_CHAIN_CHANCE = 0.3

# How many nearby nodes a random false edge chooses from
FALSE_EDGE_NEIGHBOURS = 3


class CoreNoiseGenerator(BaseGenerator):
    """
    Builds a level's mapping table in five phases:

    1. skeleton assignment: each producer is paired with the consumer that
       currently has the fewest skeleton paths (random tie-break);
    2. skeleton paths: greedy nearest-unused-neutral chains from producer
       to its consumer, hop count drawn from the tier's range;
    3. alternative sources: extra candidate upstream nodes per consumer so
       more than one route looks plausible;
    4. cycles among skeleton neutrals, fewer on harder tiers;
    5. noise: dead-end chains into unused neutrals and short false edges.

    A hop refused by the capacity or planarity gate is skipped, which can
    shorten or break a skeleton path; the solvability check downstream is
    what decides whether the result is acceptable.
    """

    name = "core_noise"

    def generate(
        self,
        graph: LevelGraph,
        difficulty: DifficultyTier,
        rng: Optional[random.Random] = None,
    ) -> GeneratorReport:
        rng = rng or random.Random()
        profile = get_profile(difficulty)
        self._reset(graph)

        core_paths = self._create_core_paths(graph, profile, rng)
        self._add_alternative_sources(graph, profile)
        self._add_cycles(graph, core_paths, profile, rng)
        self._add_noise(graph, profile, rng)

        self._report.core_paths = core_paths
        logger.info(
            "Generated level with %d core paths (%d edges added, %d skipped)",
            len(core_paths), self._report.added_edges, self._report.skipped_edges,
        )
        return self._report

    # ------------------------------------------------------------------
    # Phases 1 + 2
    # ------------------------------------------------------------------

    def _create_core_paths(
        self,
        graph: LevelGraph,
        profile: TierProfile,
        rng: random.Random,
    ) -> list[list[str]]:
        consumers = graph.consumers()
        if not consumers:
            logger.warning("No consumers to route to; skipping core paths")
            return []

        available = graph.neutrals()
        path_counts = {c.id: 0 for c in consumers}
        low, high = profile.skeleton_hops
        core_paths: list[list[str]] = []

        for producer in graph.producers():
            target = min(consumers, key=lambda c: (path_counts[c.id], rng.random()))
            path_counts[target.id] += 1

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
            core_paths.append(path)

            for from_id, to_id in zip(path, path[1:]):
                self._add_edge(graph, from_id, to_id)

        return core_paths

    # ------------------------------------------------------------------
    # Phase 3
    # ------------------------------------------------------------------

    def _add_alternative_sources(self, graph: LevelGraph, profile: TierProfile) -> None:
        per_consumer = profile.alternative_sources
        if per_consumer == 0:
            return

        connectable = graph.producers() + [
            n for n in graph.neutrals()
            if graph.get_mapping(n.id) and graph.has_spare_capacity(n.id)
        ]

        for consumer in graph.consumers():
            candidates = [
                n for n in connectable
                if not graph.can_connect(n.id, consumer.id) and graph.has_spare_capacity(n.id)
            ]
            added = 0
            for candidate in self._by_distance(candidates, consumer):
                if added >= per_consumer:
                    break
                if self._add_edge(graph, candidate.id, consumer.id):
                    added += 1
                    logger.debug("Added alternative source %s -> %s", candidate.id, consumer.id)

    # ------------------------------------------------------------------
    # Phase 4
    # ------------------------------------------------------------------

    def _add_cycles(
        self,
        graph: LevelGraph,
        core_paths: list[list[str]],
        profile: TierProfile,
        rng: random.Random,
    ) -> None:
        on_core = {node_id for path in core_paths for node_id in path}
        core_neutrals = [n for n in graph.neutrals() if n.id in on_core]
        if len(core_neutrals) < 2:
            return

        for _ in range(profile.cycle_count(len(core_paths))):
            a = rng.choice(core_neutrals)
            b = rng.choice(core_neutrals)
            if a.id == b.id:
                continue
            if graph.can_connect(a.id, b.id) or graph.can_connect(b.id, a.id):
                continue
            self._add_edge(graph, a.id, b.id)

    # ------------------------------------------------------------------
    # Phase 5
    # ------------------------------------------------------------------

    def _add_noise(self, graph: LevelGraph, profile: TierProfile, rng: random.Random) -> None:
        intensity = profile.noise_intensity
        all_nodes = graph.nodes()

        unused = [n for n in graph.neutrals() if not graph.get_mapping(n.id)]
        connectable = [
            n for n in graph.producers() + graph.neutrals()
            if graph.has_spare_capacity(n.id)
        ]

        for dead_end in unused:
            if rng.random() > intensity:
                continue

            feeder = self._nearest((n for n in connectable if n.id != dead_end.id), dead_end)
            if feeder is None or not graph.has_spare_capacity(feeder.id):
                continue
            self._add_edge(graph, feeder.id, dead_end.id)

            if rng.random() < DEAD_END_CHAIN_CHANCE:
                next_end = self._nearest((n for n in unused if n.id != dead_end.id), dead_end)
                if next_end is not None and dead_end.capacity > 0:
                    self._add_edge(graph, dead_end.id, next_end.id)

        for _ in range(int(len(all_nodes) * intensity)):
            source = rng.choice(all_nodes)
            if not graph.has_spare_capacity(source.id):
                continue

            nearby = self._by_distance(
                (n for n in all_nodes if n.id != source.id and not graph.can_connect(source.id, n.id)),
                source,
            )[:FALSE_EDGE_NEIGHBOURS]
            if not nearby:
                continue

            target = rng.choice(nearby)
            if not graph.can_connect(target.id, source.id):
                self._add_edge(graph, source.id, target.id)
