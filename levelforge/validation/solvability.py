"""
Solvability validator.

Decides whether every producer of a level can be routed to some consumer
at the same time, under the capacity, exclusivity and energy rules, and
returns a witness routing when one exists.

The search is depth-first over producers in input order.  For each
producer every consumer is tried, and for each consumer the candidate
paths are enumerated breadth-first (shortest first).  The search state is
an immutable :class:`SearchState`; committing a path returns a new state,
so a failed branch leaves the caller's state untouched.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence

from levelforge.config import SolveResult
from levelforge.graph import Edge, LevelGraph, Node

logger = logging.getLogger(__name__)

DEFAULT_STARTING_ENERGY = 5

# Opt-in search budget per (producer, consumer) pair.  The defaults of None
# enumerate every simple path, so an unsolvable verdict is exhaustive.
MAX_PATHS_PER_PAIR: Optional[int] = None
MAX_EXPANSIONS: Optional[int] = None


@dataclass(frozen=True)
class SearchState:
    """Ledger of used pairs, current energy and nodes whose weight is applied."""

    used: frozenset[Edge] = field(default_factory=frozenset)
    energy: int = DEFAULT_STARTING_ENERGY
    applied: frozenset[str] = field(default_factory=frozenset)

    def pair_taken(self, a: str, b: str) -> bool:
        """True if a→b or b→a is already on the ledger."""
        return (a, b) in self.used or (b, a) in self.used

    def uses_from(self, node_id: str) -> int:
        return sum(1 for source, _ in self.used if source == node_id)

    def remaining(self, node: Node) -> int:
        return node.capacity - self.uses_from(node.id)

    def commit(self, path: Sequence[str], energy: int, applied: frozenset[str]) -> SearchState:
        """Return the state after routing *path*; ``self`` is not modified."""
        return SearchState(
            used=self.used | frozenset(zip(path, path[1:])),
            energy=energy,
            applied=applied,
        )


@dataclass(frozen=True)
class _Partial:
    path: tuple[str, ...]
    energy: int
    applied: frozenset[str]


def candidate_paths(
    graph: LevelGraph,
    producer: Node,
    consumer: Node,
    state: SearchState,
    limit: Optional[int] = MAX_PATHS_PER_PAIR,
    max_expansions: Optional[int] = MAX_EXPANSIONS,
) -> Iterator[tuple[tuple[str, ...], int, frozenset[str]]]:
    """
    Yield ``(path, energy_after, applied_after)`` from *producer* to *consumer*.

    Paths come shortest first and pass only through neutrals.  Expansion
    into a node is refused when the pair is on the ledger in either
    direction, the node is already on the partial path, the node has no
    remaining capacity (the target consumer is exempt), or its first-time
    negative weight would drive energy below zero.

    *limit* caps the paths yielded and *max_expansions* the partial paths
    popped; None for either means no cap.
    """
    if state.remaining(producer) <= 0:
        return

    found = 0
    expansions = 0
    queue = deque([_Partial((producer.id,), state.energy, state.applied)])

    while queue:
        current = queue.popleft()
        expansions += 1
        if max_expansions is not None and expansions > max_expansions:
            logger.debug(
                "Path search %s -> %s stopped after %d expansions",
                producer.id, consumer.id, max_expansions,
            )
            return

        tail = current.path[-1]
        for target_id in graph.get_mapping(tail):
            if target_id in current.path or state.pair_taken(tail, target_id):
                continue
            target = graph.get_node(target_id)
            if target is None:
                continue
            if target_id != consumer.id and not target.is_neutral:
                continue
            if target_id != consumer.id and state.remaining(target) <= 0:
                continue

            energy = current.energy
            applied = current.applied
            if target_id not in applied:
                if energy + target.weight < 0:
                    continue
                energy += target.weight
                applied = applied | {target_id}

            path = current.path + (target_id,)
            if target_id == consumer.id:
                yield path, energy, applied
                found += 1
                if limit is not None and found >= limit:
                    return
                continue
            queue.append(_Partial(path, energy, applied))


def find_solution(
    graph: Optional[LevelGraph],
    starting_energy: int = DEFAULT_STARTING_ENERGY,
    max_paths_per_pair: Optional[int] = MAX_PATHS_PER_PAIR,
    max_expansions: Optional[int] = MAX_EXPANSIONS,
) -> SolveResult:
    """
    Search for a simultaneous routing of every producer.

    Parameters
    ----------
    graph : LevelGraph | None
        Level to check.  ``None`` or a level without producers or consumers
        is reported as unsolvable.
    starting_energy : int
        Shared energy pool at the start of play.
    max_paths_per_pair : int | None
        How many alternative paths to try for one (producer, consumer)
        pair before moving to the next consumer.  None (the default) tries
        every simple path, so False means no routing exists.
    max_expansions : int | None
        Partial paths popped per pair before giving up.  None means no cap.

    Returns
    -------
    SolveResult
        ``solvable`` plus, when True, one path per producer (in producer
        order) and the energy left after applying every weight.
    """
    if graph is None or len(graph) == 0:
        return SolveResult(solvable=False)

    producers = graph.producers()
    consumers = graph.consumers()
    if not producers or not consumers:
        return SolveResult(solvable=False)

    attempts = 0

    def search(index: int, state: SearchState) -> Optional[tuple[list[list[str]], SearchState]]:
        nonlocal attempts
        if index >= len(producers):
            return [], state

        producer = producers[index]
        for consumer in consumers:
            for path, energy, applied in candidate_paths(
                graph, producer, consumer, state, max_paths_per_pair, max_expansions,
            ):
                attempts += 1
                outcome = search(index + 1, state.commit(path, energy, applied))
                if outcome is not None:
                    rest, final = outcome
                    return [list(path)] + rest, final
        return None

    outcome = search(0, SearchState(energy=starting_energy))
    if outcome is None:
        logger.debug("No routing found after %d path attempts", attempts)
        return SolveResult(solvable=False, attempts=attempts)

    paths, final = outcome
    return SolveResult(solvable=True, paths=paths, final_energy=final.energy, attempts=attempts)


def is_solvable(
    graph: Optional[LevelGraph],
    starting_energy: int = DEFAULT_STARTING_ENERGY,
    max_paths_per_pair: Optional[int] = MAX_PATHS_PER_PAIR,
    max_expansions: Optional[int] = MAX_EXPANSIONS,
) -> bool:
    """True if every producer can be routed simultaneously."""
    return find_solution(graph, starting_energy, max_paths_per_pair, max_expansions).solvable


def verify_solution(
    graph: LevelGraph,
    paths: Sequence[Sequence[str]],
    starting_energy: int = DEFAULT_STARTING_ENERGY,
) -> list[str]:
    """
    Check a routing against every rule independently of the search.

    Returns a list of human-readable violations; empty means valid.
    """
    violations: list[str] = []
    used: set[Edge] = set()
    uses_from: dict[str, int] = {}
    applied: set[str] = set()
    energy = starting_energy

    starts = [path[0] for path in paths if path]
    for producer in graph.producers():
        count = starts.count(producer.id)
        if count != 1:
            violations.append(f"Producer {producer.id} starts {count} paths (expected 1)")

    for index, path in enumerate(paths):
        if len(path) < 2:
            violations.append(f"Path {index} is too short")
            continue
        nodes = [graph.get_node(node_id) for node_id in path]
        if any(node is None for node in nodes):
            violations.append(f"Path {index} references an unknown node")
            continue
        if not nodes[0].is_producer:
            violations.append(f"Path {index} does not start at a producer")
        if not nodes[-1].is_consumer:
            violations.append(f"Path {index} does not end at a consumer")
        if any(not node.is_neutral for node in nodes[1:-1]):
            violations.append(f"Path {index} passes through a non-neutral node")
        if len(set(path)) != len(path):
            violations.append(f"Path {index} visits a node twice")

        for a, b in zip(path, path[1:]):
            if not graph.can_connect(a, b):
                violations.append(f"{a} -> {b} is not in the mapping table")
            if (a, b) in used or (b, a) in used:
                violations.append(f"{a} -> {b} reuses a connected pair")
            used.add((a, b))
            uses_from[a] = uses_from.get(a, 0) + 1

            if b not in applied:
                energy += graph.get_node(b).weight
                applied.add(b)
                if energy < 0:
                    violations.append(f"Energy drops to {energy} entering {b}")

    for node_id, count in uses_from.items():
        node = graph.get_node(node_id)
        if node is not None and count > node.capacity:
            violations.append(f"{node_id} uses {count} connections (capacity {node.capacity})")

    return violations
