"""Level generation pipeline and batch runner."""

from levelforge.engine.pipeline import (
    GenerationResult,
    LevelBatchRunner,
    LevelPipeline,
    generate_level,
)

__all__ = [
    "GenerationResult",
    "LevelBatchRunner",
    "LevelPipeline",
    "generate_level",
]
