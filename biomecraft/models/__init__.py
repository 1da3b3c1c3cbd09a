"""Pydantic models for BiomeCraft"""

from biomecraft.models.biome import (
    BiomeConfig,
    BiomeEffects,
    SpawnEntry,
    Spawners,
    FEATURE_STAGE_COUNT,
    SPAWNER_CATEGORIES,
)
from biomecraft.models.validation import (
    Severity,
    ValidationIssue,
    ValidationReport,
    error_issue,
    warning_issue,
    format_validation_errors,
)

__all__ = [
    # Biome document models
    "BiomeConfig",
    "BiomeEffects",
    "SpawnEntry",
    "Spawners",
    "FEATURE_STAGE_COUNT",
    "SPAWNER_CATEGORIES",
    # Validation models
    "Severity",
    "ValidationIssue",
    "ValidationReport",
    "error_issue",
    "warning_issue",
    "format_validation_errors",
]
