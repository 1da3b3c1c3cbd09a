"""
Normalization - turn loosely-shaped AI output into a typed BiomeConfig.

Models get the biome format mostly right and the details wrong: hex strings
where Minecraft wants packed integers, numbers as strings, snake_case spawn
keys, a stage or two missing at the end of the feature list. This module
repairs what can be repaired unambiguously and leaves everything else for
the validator to report.
"""

import copy
import logging
from typing import Any

from pydantic import ValidationError

from biomecraft.errors import BiomeParseError, BiomeValidationError
from biomecraft.llm.client import parse_json_response
from biomecraft.minecraft.colors import normalize_color
from biomecraft.minecraft.templates import merge_with_defaults
from biomecraft.minecraft.validator import (
    OPTIONAL_COLORS,
    REQUIRED_COLORS,
    validate_biome_structure,
)
from biomecraft.models.biome import FEATURE_STAGE_COUNT, BiomeConfig
from biomecraft.models.validation import ValidationReport, error_issue

logger = logging.getLogger(__name__)

# Keys models like to invent that are not part of a worldgen biome file
IGNORED_KEYS = {"surface_builder", "name", "description", "biome_name", "attributes"}

_SPAWN_KEY_ALIASES = {
    "min_count": "minCount",
    "max_count": "maxCount",
    "mincount": "minCount",
    "maxcount": "maxCount",
    "entity": "type",
    "id": "type",
}


def parse_biome_response(output: Any) -> dict[str, Any]:
    """
    Extract a biome JSON object from raw model output.

    Accepts the raw completion text (optionally wrapped in markdown code
    fences) or an already-decoded dict.

    Raises:
        BiomeParseError: If no JSON object can be recovered
    """
    if isinstance(output, dict):
        return output

    if not isinstance(output, str):
        raise BiomeParseError(
            "Invalid biome response format: expected string or object, "
            f"got {type(output).__name__}"
        )

    try:
        parsed = parse_json_response(output, strict=True)
    except ValueError as e:
        raise BiomeParseError(f"Failed to parse biome response as JSON: {e}") from e

    if not isinstance(parsed, dict):
        raise BiomeParseError("Biome response must be a JSON object")
    return parsed


def _to_number(value: Any) -> Any:
    if isinstance(value, str):
        text = value.strip()
        try:
            number = float(text)
        except ValueError:
            return value
        return int(number) if number.is_integer() and "." not in text else number
    return value


def _to_bool(value: Any) -> Any:
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    return value


def _normalize_effects(effects: Any) -> Any:
    if not isinstance(effects, dict):
        return effects

    for field in REQUIRED_COLORS + OPTIONAL_COLORS:
        if effects.get(field) is None:
            continue
        try:
            effects[field] = normalize_color(effects[field])
        except ValueError:
            # Left as-is; the validator reports it with the field path
            pass

    for record, keys in (
        ("mood_sound", ("tick_delay", "block_search_extent", "offset")),
        ("music", ("min_delay", "max_delay")),
        ("additions_sound", ("tick_chance",)),
        ("particle", ("probability",)),
    ):
        if isinstance(effects.get(record), dict):
            for key in keys:
                if key in effects[record]:
                    effects[record][key] = _to_number(effects[record][key])

    if isinstance(effects.get("music"), dict) and "replace_current_music" in effects["music"]:
        effects["music"]["replace_current_music"] = _to_bool(
            effects["music"]["replace_current_music"]
        )

    # Some models emit the sound id wrapped in an object
    ambient = effects.get("ambient_sound")
    if isinstance(ambient, dict) and isinstance(ambient.get("sound"), str):
        effects["ambient_sound"] = ambient["sound"]

    return effects


def _normalize_spawn_entry(entry: Any) -> Any:
    if not isinstance(entry, dict):
        return entry
    normalized = {}
    for key, value in entry.items():
        key = _SPAWN_KEY_ALIASES.get(key, _SPAWN_KEY_ALIASES.get(key.lower(), key))
        normalized[key] = value if key == "type" else _to_number(value)
    return normalized


def _normalize_spawners(spawners: Any) -> Any:
    if not isinstance(spawners, dict):
        return spawners
    return {
        category: (
            [_normalize_spawn_entry(entry) for entry in entries]
            if isinstance(entries, list)
            else entries
        )
        for category, entries in spawners.items()
    }


def _normalize_features(features: Any) -> Any:
    if not isinstance(features, list):
        return features
    if len(features) < FEATURE_STAGE_COUNT:
        logger.warning(
            f"Padding feature list from {len(features)} to {FEATURE_STAGE_COUNT} stages"
        )
        features = features + [[] for _ in range(FEATURE_STAGE_COUNT - len(features))]
    return [
        [stage] if isinstance(stage, str) else stage
        for stage in features
    ]


def _normalize_carvers(carvers: Any) -> Any:
    # Pre-1.21 files group carvers by "air" / "liquid"
    if isinstance(carvers, dict):
        flattened = []
        for group in carvers.values():
            if isinstance(group, list):
                flattened.extend(group)
            elif isinstance(group, str):
                flattened.append(group)
        return flattened
    if isinstance(carvers, str):
        return [carvers]
    return carvers


def normalize_biome(raw: dict[str, Any], merge_defaults: bool = True) -> dict[str, Any]:
    """
    Repair a raw biome document without validating it.

    Args:
        raw: Decoded JSON object from the model (or a file)
        merge_defaults: Fill missing fields from the base biome

    Returns:
        A new dict; the input is not modified
    """
    biome = copy.deepcopy(raw)

    if set(biome) == {"biome"} and isinstance(biome["biome"], dict):
        biome = biome["biome"]

    dropped = IGNORED_KEYS.intersection(biome)
    if dropped:
        logger.debug(f"Dropping non-biome keys: {sorted(dropped)}")
        for key in dropped:
            del biome[key]

    if "carvers" in biome:
        biome["carvers"] = _normalize_carvers(biome["carvers"])

    if merge_defaults:
        biome = merge_with_defaults(biome)

    for field in ("temperature", "downfall"):
        if field in biome:
            biome[field] = _to_number(biome[field])
    if "has_precipitation" in biome:
        biome["has_precipitation"] = _to_bool(biome["has_precipitation"])

    if "effects" in biome:
        biome["effects"] = _normalize_effects(biome["effects"])
    if "spawners" in biome:
        biome["spawners"] = _normalize_spawners(biome["spawners"])
    if "features" in biome:
        biome["features"] = _normalize_features(biome["features"])

    return biome


def _report_from_pydantic(error: ValidationError) -> ValidationReport:
    report = ValidationReport()
    for detail in error.errors():
        path = ""
        for part in detail["loc"]:
            path += f"[{part}]" if isinstance(part, int) else (f".{part}" if path else str(part))
        report.add(error_issue(path or "root", detail["msg"], detail.get("input")))
    return report


def coerce_biome(raw: dict[str, Any], merge_defaults: bool = True) -> BiomeConfig:
    """
    Normalize, validate and type a raw biome document.

    Raises:
        BiomeValidationError: If the document breaks any schema or range rule
    """
    normalized = normalize_biome(raw, merge_defaults=merge_defaults)

    report = validate_biome_structure(normalized)
    for warning in report.warnings:
        logger.warning(f"Biome warning: {warning.field}: {warning.message} ({warning.value})")
    if not report.valid:
        logger.info(f"Biome failed validation with {len(report.errors)} error(s)")
        raise BiomeValidationError(report)

    try:
        return BiomeConfig.model_validate(normalized)
    except ValidationError as e:
        raise BiomeValidationError(_report_from_pydantic(e)) from e
