#!/usr/bin/env python3
"""
levelforge CLI: generate puzzle levels and report on them.

Single level (prints the summary and, with --output, writes the level dict)::

    python scripts/generate_levels.py --pattern grid --difficulty hard --seed 7

Batch sweep over patterns × difficulties (prints the results table)::

    python scripts/generate_levels.py --batch 5 --pattern grid circular --csv levels.csv
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from levelforge.config import DifficultyTier, GenerationConfig, GraphPattern, NodeCounts
from levelforge.engine import LevelBatchRunner, LevelPipeline
from levelforge.generators import list_generators

SCATTER = "scatter"


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="levelforge level generator")
    parser.add_argument("--producers", type=int, default=2, help="Number of producer nodes.")
    parser.add_argument("--consumers", type=int, default=2, help="Number of consumer nodes.")
    parser.add_argument("--neutrals", type=int, default=8, help="Number of neutral nodes.")
    parser.add_argument(
        "--pattern", "-p", nargs="+", default=["grid"],
        choices=[p.value for p in GraphPattern] + [SCATTER],
        help="Neutral layout(s); 'scatter' places every node randomly.",
    )
    parser.add_argument(
        "--difficulty", "-d", nargs="+", default=["medium"],
        choices=[d.value for d in DifficultyTier],
        help="Difficulty tier(s).",
    )
    parser.add_argument("--generator", "-g", default="core_noise", choices=list_generators())
    parser.add_argument("--energy", type=int, default=5, help="Starting energy.")
    parser.add_argument("--size", type=float, default=20.0, help="Side length of the square play area.")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--batch", "-b", type=int, default=0, help="Levels per pattern/difficulty combination.")
    parser.add_argument("--output", "-o", type=str, help="Write the generated level as JSON (single mode).")
    parser.add_argument("--csv", type=str, help="Write the batch results table as CSV.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s | %(message)s",
    )

    patterns = [None if p == SCATTER else GraphPattern(p) for p in args.pattern]
    difficulties = [DifficultyTier(d) for d in args.difficulty]
    base = GenerationConfig(
        counts=NodeCounts(producers=args.producers, consumers=args.consumers, neutrals=args.neutrals),
        pattern=patterns[0],
        difficulty=difficulties[0],
        generator=args.generator,
        starting_energy=args.energy,
        bounds={"size_x": args.size, "size_z": args.size},
        seed=args.seed,
    )

    # ── Batch mode ───────────────────────────────────────────
    if args.batch > 0:
        runner = LevelBatchRunner.sweep(base, patterns, difficulties, args.batch)
        df = runner.run()
        columns = [
            "level_name", "solvable", "attempts", "edge_count",
            "average_path_length", "alternative_paths", "complexity_score",
        ]
        print(df[columns].to_string(index=False))
        if args.csv:
            df.to_csv(args.csv, index=False)
            print(f"\nResults written to {args.csv}")
        return 0 if df["solvable"].all() else 1

    # ── Single level ─────────────────────────────────────────
    result = LevelPipeline(base).run()
    status = "SOLVABLE" if result.solvable else "UNSOLVABLE"
    print(f"Level is {status} ({result.attempts} regeneration attempt(s))")
    print(f"Graph metrics: {result.metrics}")
    if result.solvable:
        for path in result.solution.paths:
            print("  " + " -> ".join(path))
    for warning in result.warnings:
        print(f"Warning: {warning}")

    if args.output:
        with open(args.output, "w") as f:
            json.dump(result.graph.to_dict(), f, indent=2)
        print(f"Level written to {args.output}")
    return 0 if result.solvable else 1


if __name__ == "__main__":
    sys.exit(main())
