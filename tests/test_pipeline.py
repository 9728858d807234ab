"""Tests for the level generation pipeline and batch runner."""

import logging
import random

import pandas as pd
import pytest

from levelforge import generate_level
from levelforge.config import DifficultyTier, GenerationConfig, GraphPattern, NodeCounts
from levelforge.engine.pipeline import GenerationResult, LevelBatchRunner, LevelPipeline
from levelforge.generators import list_generators
from levelforge.validation.solvability import verify_solution


# ── Single level ─────────────────────────────────────────────────────

class TestGenerateLevel:
    def test_returns_result(self):
        result = generate_level(seed=1)
        assert isinstance(result, GenerationResult)
        assert len(result.graph) == NodeCounts().total
        assert result.metrics.node_count == len(result.graph)
        assert result.graph.metadata["generator"] in list_generators()
        assert result.graph.metadata["params"]["seed"] == 1

    @pytest.mark.parametrize("tier", list(DifficultyTier))
    def test_solvable_levels_carry_valid_witness(self, tier):
        solved = 0
        for seed in range(6):
            result = generate_level(difficulty=tier, seed=seed)
            if result.solvable:
                solved += 1
                assert len(result.solution.paths) == len(result.graph.producers())
                assert verify_solution(result.graph, result.solution.paths, 5) == []
            else:
                assert result.warnings
        assert solved >= 1

    def test_consumers_never_map_out(self):
        result = generate_level(pattern="diamond", difficulty="expert", seed=4)
        assert all(result.graph.get_mapping(c.id) == [] for c in result.graph.consumers())

    def test_seed_determinism(self):
        a = generate_level(pattern=GraphPattern.TREE, seed=21)
        b = generate_level(pattern=GraphPattern.TREE, seed=21)
        assert a.graph.mapping_edges() == b.graph.mapping_edges()
        assert a.metrics == b.metrics

    def test_scatter_placement(self):
        result = generate_level(pattern=None, seed=8)
        assert result.graph.metadata["params"]["pattern"] is None
        assert len(result.graph.producers()) == 2

    def test_unsolvable_is_reported_not_raised(self, caplog):
        counts = NodeCounts(producers=0, consumers=2, neutrals=4)
        with caplog.at_level(logging.WARNING):
            result = generate_level(counts, seed=0)
        assert not result.solvable
        assert result.attempts == 3
        assert any("unsolvable" in w for w in result.warnings)
        assert "not solvable" in caplog.text

    def test_no_retries_when_disabled(self):
        counts = NodeCounts(producers=0, consumers=1, neutrals=2)
        result = generate_level(counts, seed=0, max_attempts=0)
        assert result.attempts == 0
        assert not result.solvable

    def test_unknown_generator(self):
        with pytest.raises(ValueError, match="Unknown generator"):
            LevelPipeline(GenerationConfig(generator="nope")).run()

    def test_padding_shrinks_bounds(self):
        config = GenerationConfig(bounds_padding=2.0, seed=0)
        graph = LevelPipeline(config).place_nodes(random.Random(0))
        inner = config.bounds.expanded(-2.0)
        for node in graph.nodes():
            assert inner.min_x <= node.position[0] <= inner.max_x
            assert inner.min_z <= node.position[2] <= inner.max_z


# ── Batch ────────────────────────────────────────────────────────────

class TestLevelBatchRunner:
    def test_sweep_produces_dataframe(self):
        runner = LevelBatchRunner.sweep(
            GenerationConfig(seed=10),
            patterns=[GraphPattern.GRID, None],
            difficulties=[DifficultyTier.EASY, DifficultyTier.HARD],
            levels_per_config=2,
        )
        assert len(runner) == 8
        df = runner.run()
        assert isinstance(df, pd.DataFrame)
        assert len(df) == 8
        assert set(df["difficulty"]) == {"easy", "hard"}
        assert "scatter_easy_0" in set(df["level_name"])
        assert len(runner.results) == 8

    def test_schema_columns(self):
        df = LevelBatchRunner([GenerationConfig(seed=1)]).run()
        expected = {
            "level_name", "pattern", "difficulty", "generator", "producers",
            "consumers", "neutrals", "solvable", "attempts", "repaired_consumers",
            "crossings", "node_count", "edge_count", "density",
            "average_path_length", "max_path_length", "alternative_paths",
            "complexity_score", "wall_time_seconds", "error_message",
        }
        assert expected == set(df.columns)
        assert df.loc[0, "level_name"] == "level_0"

    def test_failure_is_recorded(self):
        runner = LevelBatchRunner([GenerationConfig(generator="nope", seed=0)])
        df = runner.run()
        assert "Unknown generator" in df.loc[0, "error_message"]
        assert not df.loc[0, "solvable"]

    def test_progress_callback(self):
        calls = []
        runner = LevelBatchRunner([GenerationConfig(seed=s) for s in range(3)])
        runner.run(progress_fn=lambda name, done, total: calls.append((name, done, total)))
        assert calls[-1] == ("level_2", 3, 3)

    def test_empty_runner(self):
        with pytest.raises(RuntimeError, match="No levels queued"):
            LevelBatchRunner().run()
