"""
Level generation pipeline.

Places nodes, builds the mapping table, repairs connectivity, proves the
level solvable (regenerating solution-first when it is not), and scores
it.  :class:`LevelBatchRunner` does this for many configurations and
produces a pandas DataFrame of results.
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, field
from itertools import product
from typing import Callable, Optional, Sequence

import pandas as pd
from tqdm import tqdm

from levelforge.config import (
    DifficultyTier,
    GenerationConfig,
    GraphMetrics,
    GraphPattern,
    LevelRecord,
    NodeCounts,
    SolveResult,
)
from levelforge.generators import (
    GeneratorReport,
    SolutionFirstGenerator,
    build_level,
    get_generator,
    scatter_level,
)
from levelforge.geometry import find_crossings
from levelforge.graph import LevelGraph
from levelforge.metrics import compute_metrics
from levelforge.validation.connectivity import RepairReport, repair_connectivity
from levelforge.validation.solvability import find_solution

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """A generated level plus everything learned while producing it."""
    graph: LevelGraph
    solution: SolveResult
    metrics: GraphMetrics
    generator_report: GeneratorReport
    repair: Optional[RepairReport] = None
    attempts: int = 0
    crossings: int = 0
    warnings: list[str] = field(default_factory=list)

    @property
    def solvable(self) -> bool:
        return self.solution.solvable


class LevelPipeline:
    """
    Produces one level from a :class:`GenerationConfig`.

    Usage
    -----
    >>> result = LevelPipeline(GenerationConfig(seed=7)).run()
    >>> result.solvable, str(result.metrics)
    """

    def __init__(self, config: Optional[GenerationConfig] = None) -> None:
        self.config = config or GenerationConfig()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def place_nodes(self, rng: random.Random) -> LevelGraph:
        """Lay out producers, consumers and neutrals inside the padded bounds."""
        cfg = self.config
        bounds = cfg.bounds.expanded(-cfg.bounds_padding)
        if cfg.pattern is None:
            return scatter_level(cfg.counts, cfg.difficulty, bounds, rng, cfg.placement)
        return build_level(cfg.counts, cfg.pattern, cfg.difficulty, bounds, rng)

    def run(self) -> GenerationResult:
        cfg = self.config
        rng = random.Random(cfg.seed)
        warnings: list[str] = []

        graph = self.place_nodes(rng)
        report = get_generator(cfg.generator)().generate(graph, cfg.difficulty, rng)

        repair = None
        if cfg.repair_connectivity:
            repair = repair_connectivity(graph)
            for consumer_id in repair.failed:
                warnings.append(f"Consumer {consumer_id} could not be reconnected")

        solution = find_solution(graph, cfg.starting_energy)
        attempts = 0
        while not solution.solvable and attempts < cfg.max_attempts:
            attempts += 1
            logger.warning(
                "Generated level is not solvable; regenerating solution-first (attempt %d/%d)",
                attempts, cfg.max_attempts,
            )
            report = SolutionFirstGenerator().generate(graph, cfg.difficulty, rng)
            solution = find_solution(graph, cfg.starting_energy)

        if not solution.solvable:
            message = f"Level is unsolvable after {attempts} regeneration attempt(s)"
            logger.warning(message)
            warnings.append(message)

        crossings = len(find_crossings(graph))
        if crossings:
            warnings.append(f"{crossings} crossing mapping pair(s) after repair")

        graph.metadata = {
            "generator": report.generator,
            "params": {
                "pattern": cfg.pattern.value if cfg.pattern else None,
                "difficulty": cfg.difficulty.value,
                "seed": cfg.seed,
                "starting_energy": cfg.starting_energy,
            },
        }
        metrics = compute_metrics(graph)
        logger.info(
            "Generated level with %d nodes at difficulty %s (solvable=%s)",
            len(graph), cfg.difficulty.value, solution.solvable,
        )
        logger.debug("Graph metrics: %s", metrics)

        return GenerationResult(
            graph=graph,
            solution=solution,
            metrics=metrics,
            generator_report=report,
            repair=repair,
            attempts=attempts,
            crossings=crossings,
            warnings=warnings,
        )


def generate_level(
    counts: Optional[NodeCounts] = None,
    pattern: Optional[GraphPattern | str] = GraphPattern.GRID,
    difficulty: DifficultyTier | str = DifficultyTier.MEDIUM,
    **options,
) -> GenerationResult:
    """
    Generate one level.

    Any other :class:`GenerationConfig` field (``seed``,
    ``starting_energy``, ``bounds``, ``generator``...) may be passed as a
    keyword argument.  The mapping table is in ``result.graph``.
    """
    config = GenerationConfig(
        counts=counts or NodeCounts(),
        pattern=pattern,
        difficulty=difficulty,
        **options,
    )
    return LevelPipeline(config).run()


# ---------------------------------------------------------------------------
# Batch generation
# ---------------------------------------------------------------------------

class LevelBatchRunner:
    """
    Generate many levels and tabulate the outcome.

    Usage
    -----
    >>> runner = LevelBatchRunner.sweep(GenerationConfig(seed=1), levels_per_config=5)
    >>> df = runner.run()
    """

    def __init__(self, configs: Sequence[GenerationConfig] = ()) -> None:
        self._jobs: list[tuple[str, GenerationConfig]] = []
        self.results: dict[str, GenerationResult] = {}
        for config in configs:
            self.add(config)

    @classmethod
    def sweep(
        cls,
        base: GenerationConfig,
        patterns: Sequence[Optional[GraphPattern]] = (GraphPattern.GRID,),
        difficulties: Sequence[DifficultyTier] = tuple(DifficultyTier),
        levels_per_config: int = 1,
    ) -> LevelBatchRunner:
        """Every pattern × difficulty combination, *levels_per_config* times each."""
        runner = cls()
        index = 0
        for pattern, difficulty in product(patterns, difficulties):
            for i in range(levels_per_config):
                seed = None if base.seed is None else base.seed + index
                index += 1
                config = base.model_copy(
                    update={"pattern": pattern, "difficulty": difficulty, "seed": seed},
                )
                label = pattern.value if pattern else "scatter"
                runner.add(config, name=f"{label}_{difficulty.value}_{i}")
        return runner

    def add(self, config: GenerationConfig, name: Optional[str] = None) -> None:
        self._jobs.append((name or f"level_{len(self._jobs)}", config))

    def __len__(self) -> int:
        return len(self._jobs)

    def run(self, progress_fn: Optional[Callable[[str, int, int], None]] = None) -> pd.DataFrame:
        """
        Generate every queued level and return one row per level.

        A level whose generation raises is recorded with its error message
        rather than aborting the batch.
        """
        if not self._jobs:
            raise RuntimeError("No levels queued. Call add() first.")

        records: list[LevelRecord] = []
        total = len(self._jobs)

        with tqdm(total=total, desc="Generating levels", unit="level") as pbar:
            for done, (name, config) in enumerate(self._jobs, start=1):
                records.append(self._run_one(name, config))
                pbar.update(1)
                if progress_fn:
                    progress_fn(name, done, total)

        df = pd.DataFrame([r.model_dump(mode="json") for r in records])
        logger.info(
            "Batch complete: %d levels, %d solvable",
            len(df), int(df["solvable"].sum()),
        )
        return df

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _run_one(self, name: str, config: GenerationConfig) -> LevelRecord:
        record = LevelRecord(
            level_name=name,
            pattern=config.pattern,
            difficulty=config.difficulty,
            generator=config.generator,
            producers=config.counts.producers,
            consumers=config.counts.consumers,
            neutrals=config.counts.neutrals,
        )
        t0 = time.perf_counter()
        try:
            result = LevelPipeline(config).run()
        except Exception as exc:  # noqa: BLE001
            logger.exception("Generation of %s failed", name)
            record.error_message = str(exc)
            record.wall_time_seconds = round(time.perf_counter() - t0, 6)
            return record

        self.results[name] = result
        update = result.metrics.model_dump()
        update.update(
            generator=result.generator_report.generator,
            solvable=result.solvable,
            attempts=result.attempts,
            repaired_consumers=len(result.repair.repaired) if result.repair else 0,
            crossings=result.crossings,
            wall_time_seconds=round(time.perf_counter() - t0, 6),
        )
        return record.model_copy(update=update)
