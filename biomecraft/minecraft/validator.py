"""
Minecraft biome validator - declarative field checks on raw biome documents.

These checks run on untyped data (what came back from the model, or a file a
user wants checked) and collect every problem into a ValidationReport instead
of stopping at the first one. Nothing in here raises.
"""

from __future__ import annotations

import re
from typing import Any

from biomecraft.minecraft.colors import MAX_COLOR, is_hex_color
from biomecraft.models.biome import (
    COUNT_RANGE,
    DOWNFALL_RANGE,
    FEATURE_STAGE_COUNT,
    GrassColorModifier,
    SPAWNER_CATEGORIES,
    TEMPERATURE_RANGE,
    TemperatureModifier,
    WEIGHT_RANGE,
)
from biomecraft.models.validation import ValidationReport, error_issue, warning_issue

REQUIRED_FIELDS = [
    "has_precipitation",
    "temperature",
    "downfall",
    "effects",
    "features",
    "spawners",
]

REQUIRED_COLORS = ["sky_color", "fog_color", "water_color", "water_fog_color"]
OPTIONAL_COLORS = ["grass_color", "foliage_color", "dry_foliage_color"]

_NAMESPACED_ID = re.compile(r"^[a-z0-9_.-]+:[a-z0-9_./-]+$")

# Common vanilla blocks (1.20+). Unknown ids are only warned about.
KNOWN_BLOCKS = frozenset(
    f"minecraft:{name}"
    for name in (
        "grass_block dirt stone sand gravel oak_log oak_leaves birch_log "
        "birch_leaves spruce_log spruce_leaves jungle_log jungle_leaves "
        "acacia_log acacia_leaves dark_oak_log dark_oak_leaves water lava "
        "bedrock coal_ore iron_ore gold_ore diamond_ore emerald_ore lapis_ore "
        "redstone_ore netherrack soul_sand soul_soil basalt blackstone snow ice "
        "packed_ice blue_ice clay terracotta red_sand mycelium podzol "
        "coarse_dirt granite diorite andesite deepslate tuff calcite "
        "moss_block rooted_dirt"
    ).split()
)

KNOWN_MOBS = frozenset(
    f"minecraft:{name}"
    for name in (
        # Hostile
        "zombie skeleton creeper spider cave_spider enderman witch slime "
        "phantom drowned husk stray zombie_villager vindicator evoker pillager "
        "ravager vex blaze ghast magma_cube wither_skeleton piglin piglin_brute "
        "hoglin zoglin guardian elder_guardian shulker silverfish endermite "
        # Passive
        "pig cow sheep chicken rabbit horse donkey mule llama cat wolf ocelot "
        "parrot fox panda polar_bear turtle goat axolotl frog villager "
        "iron_golem snow_golem mooshroom strider armadillo camel sniffer "
        # Aquatic
        "squid glow_squid dolphin cod salmon tropical_fish pufferfish tadpole "
        # Ambient
        "bat"
    ).split()
)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_integer(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def _check_range(
    report: ValidationReport,
    field: str,
    value: Any,
    low: float,
    high: float | None,
    integer: bool = False,
) -> None:
    """Check a numeric field. A high of None leaves the range open above."""
    name = field.split(".")[-1]
    kind = "an integer" if integer else "a number"
    expected = f"{low} to {high}" if high is not None else f">= {low}"
    if not (_is_integer(value) if integer else _is_number(value)):
        report.add(error_issue(field, f"{name} must be {kind}", value, expected))
    elif high is None and value < low:
        report.add(error_issue(field, f"{name} must be at least {low}", value, expected))
    elif high is not None and not low <= value <= high:
        report.add(error_issue(
            field, f"{name} must be between {low} and {high}", value, expected
        ))


def validate_temperature(temp: Any) -> ValidationReport:
    """Temperature below 0.15 snows, above 0.95 is hot and dry"""
    report = ValidationReport()
    _check_range(report, "temperature", temp, *TEMPERATURE_RANGE)
    return report


def validate_downfall(downfall: Any) -> ValidationReport:
    report = ValidationReport()
    _check_range(report, "downfall", downfall, *DOWNFALL_RANGE)
    return report


def validate_color_hex(color: Any, field: str = "color") -> ValidationReport:
    """Check a color string is in #RRGGBB form"""
    report = ValidationReport()
    if not isinstance(color, str):
        report.add(error_issue(field, "Color must be a string", type(color).__name__, "#RRGGBB"))
    elif not is_hex_color(color):
        report.add(error_issue(
            field, "Color must be in #RRGGBB format (e.g., #FF5733)", color, "#RRGGBB"
        ))
    return report


def validate_packed_color(color: Any, field: str) -> ValidationReport:
    report = ValidationReport()
    name = field.split(".")[-1]
    if not _is_number(color):
        report.add(error_issue(
            field,
            f"{name} must be a number (packed RGB integer)",
            color,
            f"number (0-{MAX_COLOR})",
        ))
    elif not _is_integer(color) or not 0 <= color <= MAX_COLOR:
        report.add(error_issue(
            field,
            f"{name} must be an integer between 0 and {MAX_COLOR}",
            color,
            f"0 to {MAX_COLOR}",
        ))
    return report


def validate_block_id(block_id: Any, field: str = "blockId") -> ValidationReport:
    """Check a block id is namespaced. Unknown vanilla blocks only warn."""
    report = ValidationReport()
    if not isinstance(block_id, str):
        report.add(error_issue(
            field, "Block ID must be a string", type(block_id).__name__,
            'string (e.g., "minecraft:stone")',
        ))
    elif not _NAMESPACED_ID.match(block_id):
        report.add(error_issue(
            field, 'Block ID must be namespaced (e.g., "minecraft:stone")',
            block_id, "namespace:id format",
        ))
    elif block_id.startswith("minecraft:") and block_id not in KNOWN_BLOCKS:
        report.add(warning_issue(
            field, "Block ID not in common blocks list (may still be valid)", block_id
        ))
    return report


def _validate_sound_record(
    report: ValidationReport,
    field: str,
    record: Any,
    numeric: dict[str, tuple[float, float | None, bool]],
) -> None:
    if not isinstance(record, dict):
        report.add(error_issue(field, f"{field} must be an object", type(record).__name__))
        return
    if not isinstance(record.get("sound"), str) or not record.get("sound"):
        report.add(error_issue(f"{field}.sound", "sound must be a non-empty string",
                               record.get("sound"), "sound event id"))
    for key, (low, high, integer) in numeric.items():
        if key in record:
            _check_range(report, f"{field}.{key}", record[key], low, high, integer)


def validate_effects(effects: Any) -> ValidationReport:
    """Check colors, modifiers and optional sound/particle records"""
    report = ValidationReport()

    if not isinstance(effects, dict):
        report.add(error_issue("effects", "effects must be an object", type(effects).__name__))
        return report

    for color_field in REQUIRED_COLORS:
        if color_field not in effects:
            report.add(error_issue(
                f"effects.{color_field}", f"Required color field '{color_field}' is missing"
            ))
        else:
            report.merge(validate_packed_color(effects[color_field], f"effects.{color_field}"))

    for color_field in OPTIONAL_COLORS:
        if effects.get(color_field) is not None:
            report.merge(validate_packed_color(effects[color_field], f"effects.{color_field}"))

    modifier = effects.get("grass_color_modifier")
    allowed = [m.value for m in GrassColorModifier]
    if modifier is not None and modifier not in allowed:
        report.add(error_issue(
            "effects.grass_color_modifier", "Unknown grass color modifier",
            modifier, f"One of: {', '.join(allowed)}",
        ))

    if effects.get("mood_sound") is not None:
        _validate_sound_record(report, "effects.mood_sound", effects["mood_sound"], {
            "tick_delay": (1, None, True),
            "block_search_extent": (1, None, True),
            "offset": (0, None, False),
        })

    if effects.get("additions_sound") is not None:
        _validate_sound_record(report, "effects.additions_sound", effects["additions_sound"], {
            "tick_chance": (0, 1, False),
        })

    if effects.get("ambient_sound") is not None and not isinstance(effects["ambient_sound"], str):
        report.add(error_issue(
            "effects.ambient_sound", "ambient_sound must be a sound event id",
            effects["ambient_sound"], "string",
        ))

    music = effects.get("music")
    if music is not None:
        _validate_sound_record(report, "effects.music", music, {
            "min_delay": (0, None, True),
            "max_delay": (0, None, True),
        })
        if (
            isinstance(music, dict)
            and _is_number(music.get("min_delay"))
            and _is_number(music.get("max_delay"))
            and music["min_delay"] > music["max_delay"]
        ):
            report.add(error_issue(
                "effects.music.min_delay",
                "min_delay must be less than or equal to max_delay",
                f"min: {music['min_delay']}, max: {music['max_delay']}",
            ))

    particle = effects.get("particle")
    if particle is not None:
        if not isinstance(particle, dict):
            report.add(error_issue("effects.particle", "particle must be an object",
                                   type(particle).__name__))
        else:
            options = particle.get("options")
            if not isinstance(options, dict) or not isinstance(options.get("type"), str):
                report.add(error_issue(
                    "effects.particle.options.type", "particle options must name a type",
                    options, "{\"type\": \"minecraft:ash\"}",
                ))
            else:
                block_state = options.get("block_state")
                if isinstance(block_state, dict) and "Name" in block_state:
                    report.merge(validate_block_id(
                        block_state["Name"], "effects.particle.options.block_state.Name"
                    ))
            _check_range(report, "effects.particle.probability",
                         particle.get("probability"), 0, 1)

    return report


def validate_features(features: Any) -> ValidationReport:
    """Check the fixed-length list of decoration stages"""
    report = ValidationReport()

    if not isinstance(features, list):
        report.add(error_issue(
            "features", "features must be an array", type(features).__name__,
            "array of arrays",
        ))
        return report

    if len(features) != FEATURE_STAGE_COUNT:
        report.add(error_issue(
            "features",
            f"features array must have exactly {FEATURE_STAGE_COUNT} stages "
            f"(0-{FEATURE_STAGE_COUNT - 1})",
            len(features),
            str(FEATURE_STAGE_COUNT),
        ))

    for index, stage in enumerate(features):
        if not isinstance(stage, list):
            report.add(error_issue(
                f"features[{index}]", f"Feature stage {index} must be an array",
                type(stage).__name__, "array",
            ))
            continue
        for feature_index, feature in enumerate(stage):
            path = f"features[{index}][{feature_index}]"
            if not isinstance(feature, str):
                report.add(error_issue(
                    path, "Feature must be a string (resource location)",
                    type(feature).__name__, "string",
                ))
            elif ":" not in feature:
                report.add(error_issue(
                    path, 'Feature should be a namespaced ID (e.g., "minecraft:ore_coal")',
                    feature, "namespace:id format",
                ))

    return report


def validate_spawn_entry(entry: Any, path: str) -> ValidationReport:
    """Check a single (type, weight, minCount, maxCount) tuple"""
    report = ValidationReport()

    if not isinstance(entry, dict):
        report.add(error_issue(path, "Spawn entry must be an object", type(entry).__name__))
        return report

    for field in ("type", "weight", "minCount", "maxCount"):
        if field not in entry:
            report.add(error_issue(
                f"{path}.{field}", f"Required field '{field}' is missing in spawn entry"
            ))

    if "type" in entry:
        mob = entry["type"]
        if not isinstance(mob, str):
            report.add(error_issue(
                f"{path}.type", "Mob type must be a string", type(mob).__name__,
                'string (e.g., "minecraft:zombie")',
            ))
        elif not _NAMESPACED_ID.match(mob):
            report.add(error_issue(
                f"{path}.type", "Mob type must be namespaced", mob, "namespace:id format",
            ))
        elif mob.startswith("minecraft:") and mob not in KNOWN_MOBS:
            report.add(warning_issue(
                f"{path}.type", "Mob type not in known mobs list (may still be valid)", mob,
            ))

    if "weight" in entry:
        _check_range(report, f"{path}.weight", entry["weight"], *WEIGHT_RANGE, integer=True)
    for field in ("minCount", "maxCount"):
        if field in entry:
            _check_range(report, f"{path}.{field}", entry[field], *COUNT_RANGE, integer=True)

    low, high = entry.get("minCount"), entry.get("maxCount")
    if _is_number(low) and _is_number(high) and low > high:
        report.add(error_issue(
            f"{path}.minCount",
            "minCount must be less than or equal to maxCount",
            f"min: {low}, max: {high}",
        ))

    return report


def validate_mob_spawns(spawners: Any) -> ValidationReport:
    """Check spawner categories and every spawn tuple in them"""
    report = ValidationReport()

    if not isinstance(spawners, dict):
        report.add(error_issue("spawners", "Spawners must be an object", type(spawners).__name__))
        return report

    for category, entries in spawners.items():
        if category not in SPAWNER_CATEGORIES:
            report.add(error_issue(
                f"spawners.{category}", f"Unknown spawner category '{category}'",
                category, f"One of: {', '.join(SPAWNER_CATEGORIES)}",
            ))
            continue
        if not isinstance(entries, list):
            report.add(error_issue(
                f"spawners.{category}", f"Spawner category '{category}' must be an array",
                type(entries).__name__, "array",
            ))
            continue
        for index, entry in enumerate(entries):
            report.merge(validate_spawn_entry(entry, f"spawners.{category}[{index}]"))

    return report


def validate_biome_structure(biome: Any) -> ValidationReport:
    """
    Validate a complete raw biome document.

    Checks that required fields exist and have the right types and ranges,
    then checks effects, feature stages and spawners in depth.
    """
    report = ValidationReport()

    if not isinstance(biome, dict):
        report.add(error_issue("root", "Biome must be an object", type(biome).__name__))
        return report

    for field in REQUIRED_FIELDS:
        if field not in biome:
            report.add(error_issue(field, f"Required field '{field}' is missing"))

    if "has_precipitation" in biome and not isinstance(biome["has_precipitation"], bool):
        report.add(error_issue(
            "has_precipitation", "has_precipitation must be a boolean",
            biome["has_precipitation"], "boolean",
        ))

    if "temperature" in biome:
        report.merge(validate_temperature(biome["temperature"]))
    if "downfall" in biome:
        report.merge(validate_downfall(biome["downfall"]))

    modifier = biome.get("temperature_modifier")
    allowed = [m.value for m in TemperatureModifier]
    if modifier is not None and modifier not in allowed:
        report.add(error_issue(
            "temperature_modifier", "Unknown temperature modifier",
            modifier, f"One of: {', '.join(allowed)}",
        ))

    carvers = biome.get("carvers")
    if carvers is not None:
        if not isinstance(carvers, list) or not all(isinstance(c, str) for c in carvers):
            report.add(error_issue(
                "carvers", "carvers must be a list of carver ids", carvers, "array of strings",
            ))

    if "spawn_costs" in biome and not isinstance(biome["spawn_costs"], dict):
        report.add(error_issue(
            "spawn_costs", "spawn_costs must be an object", type(biome["spawn_costs"]).__name__,
        ))

    if "effects" in biome:
        report.merge(validate_effects(biome["effects"]))
    if "features" in biome:
        report.merge(validate_features(biome["features"]))
    if "spawners" in biome:
        report.merge(validate_mob_spawns(biome["spawners"]))

    return report
