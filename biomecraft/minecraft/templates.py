"""
Biome templates - vanilla-inspired defaults and presets.

The base biome is a temperate plains-like biome. AI output is merged on top
of it so that anything the model forgets falls back to something playable.
"""

import copy
from typing import Any

from biomecraft.minecraft.colors import hex_to_int

STANDARD_CARVERS: list[str] = [
    "minecraft:cave",
    "minecraft:cave_extra_underground",
    "minecraft:canyon",
]

# Step 6: underground_ores
STANDARD_ORES: list[str] = [
    "minecraft:ore_dirt",
    "minecraft:ore_gravel",
    "minecraft:ore_granite_upper",
    "minecraft:ore_granite_lower",
    "minecraft:ore_diorite_upper",
    "minecraft:ore_diorite_lower",
    "minecraft:ore_andesite_upper",
    "minecraft:ore_andesite_lower",
    "minecraft:ore_tuff",
    "minecraft:ore_coal_upper",
    "minecraft:ore_coal_lower",
    "minecraft:ore_iron_upper",
    "minecraft:ore_iron_middle",
    "minecraft:ore_iron_small",
    "minecraft:ore_gold",
    "minecraft:ore_gold_lower",
    "minecraft:ore_redstone",
    "minecraft:ore_redstone_lower",
    "minecraft:ore_diamond",
    "minecraft:ore_diamond_medium",
    "minecraft:ore_diamond_large",
    "minecraft:ore_diamond_buried",
    "minecraft:ore_lapis",
    "minecraft:ore_lapis_buried",
    "minecraft:ore_copper",
    "minecraft:underwater_magma",
    "minecraft:disk_sand",
    "minecraft:disk_clay",
    "minecraft:disk_gravel",
]

# Step 9 (vegetal_decoration) is where a biome's personality lives
FEATURE_SETS: dict[str, list[str]] = {
    "forest": [
        "minecraft:glow_lichen",
        "minecraft:patch_tall_grass_2",
        "minecraft:dark_forest_vegetation",
        "minecraft:forest_flowers",
        "minecraft:patch_grass_forest",
        "minecraft:brown_mushroom_normal",
        "minecraft:red_mushroom_normal",
    ],
    "plains": [
        "minecraft:glow_lichen",
        "minecraft:patch_tall_grass_2",
        "minecraft:trees_plains",
        "minecraft:flower_plains",
        "minecraft:patch_grass_plain",
    ],
    "desert": [
        "minecraft:patch_dry_grass_desert",
        "minecraft:patch_dead_bush_2",
        "minecraft:patch_cactus_desert",
    ],
    "mushroom": [
        "minecraft:brown_mushroom_normal",
        "minecraft:red_mushroom_normal",
        "minecraft:brown_mushroom_taiga",
        "minecraft:red_mushroom_taiga",
    ],
    "cherry": [
        "minecraft:glow_lichen",
        "minecraft:patch_tall_grass_2",
        "minecraft:patch_grass_plain",
        "minecraft:flower_cherry",
        "minecraft:trees_cherry",
    ],
    "swamp": [
        "minecraft:trees_swamp",
        "minecraft:flower_swamp",
        "minecraft:patch_grass_normal",
        "minecraft:brown_mushroom_swamp",
        "minecraft:red_mushroom_swamp",
        "minecraft:patch_waterlily",
    ],
    "jungle": [
        "minecraft:trees_jungle",
        "minecraft:flower_jungle",
        "minecraft:patch_grass_jungle",
        "minecraft:bamboo_vegetation",
        "minecraft:vines",
    ],
    "taiga": [
        "minecraft:trees_taiga",
        "minecraft:flower_taiga",
        "minecraft:patch_grass_taiga",
        "minecraft:brown_mushroom_taiga",
        "minecraft:red_mushroom_taiga",
    ],
}

DEFAULT_VEGETATION: list[str] = [
    "minecraft:glow_lichen",
    "minecraft:patch_tall_grass_2",
    "minecraft:flower_default",
    "minecraft:patch_grass_plain",
    "minecraft:brown_mushroom_normal",
    "minecraft:red_mushroom_normal",
    "minecraft:patch_sugar_cane",
]


def _spawn(mob: str, weight: int, min_count: int, max_count: int) -> dict[str, Any]:
    return {
        "type": f"minecraft:{mob}",
        "weight": weight,
        "minCount": min_count,
        "maxCount": max_count,
    }


_STANDARD_MONSTERS = [
    _spawn("spider", 100, 4, 4),
    _spawn("zombie", 95, 4, 4),
    _spawn("zombie_villager", 5, 1, 1),
    _spawn("skeleton", 100, 4, 4),
    _spawn("creeper", 100, 4, 4),
    _spawn("slime", 100, 4, 4),
    _spawn("enderman", 10, 1, 4),
    _spawn("witch", 5, 1, 1),
]

MOB_SPAWNERS: dict[str, dict[str, list[dict[str, Any]]]] = {
    "peaceful": {
        "creature": [
            _spawn("sheep", 12, 4, 4),
            _spawn("rabbit", 4, 2, 3),
        ],
        "monster": [],
    },
    "standard": {
        "creature": [
            _spawn("sheep", 12, 4, 4),
            _spawn("pig", 10, 4, 4),
            _spawn("chicken", 10, 4, 4),
            _spawn("cow", 8, 4, 4),
        ],
        "monster": _STANDARD_MONSTERS,
    },
    "hostile": {
        "creature": [],
        "monster": [
            _spawn("spider", 100, 4, 4),
            _spawn("zombie", 100, 4, 4),
            _spawn("skeleton", 100, 4, 4),
            _spawn("creeper", 100, 4, 4),
            _spawn("enderman", 20, 2, 4),
            _spawn("witch", 10, 1, 2),
        ],
    },
    "desert": {
        "creature": [
            _spawn("rabbit", 4, 2, 4),
        ],
        "monster": [
            _spawn("spider", 100, 4, 4),
            _spawn("zombie", 19, 4, 4),
            _spawn("zombie_villager", 1, 1, 1),
            _spawn("skeleton", 100, 4, 4),
            _spawn("creeper", 100, 4, 4),
            _spawn("slime", 100, 4, 4),
            _spawn("enderman", 10, 1, 4),
            _spawn("witch", 5, 1, 1),
            _spawn("husk", 80, 4, 4),
        ],
    },
}

AMBIENT_SPAWNS = [_spawn("bat", 10, 8, 8)]
UNDERGROUND_WATER_SPAWNS = [_spawn("glow_squid", 10, 4, 6)]

COLOR_PALETTES: dict[str, dict[str, str]] = {
    "standard": {
        "sky_color": "#78a7ff",
        "water_color": "#3f76e4",
        "water_fog_color": "#050533",
        "fog_color": "#c0d8ff",
    },
    "warm": {
        "sky_color": "#6eb1ff",
        "water_color": "#3f76e4",
        "water_fog_color": "#050533",
        "fog_color": "#c0d8ff",
    },
    "cold": {
        "sky_color": "#7ba4ff",
        "water_color": "#3938c9",
        "water_fog_color": "#050533",
        "fog_color": "#c0d8ff",
    },
    "mystical": {
        "sky_color": "#5d4d8a",
        "water_color": "#9d4dff",
        "water_fog_color": "#2d1d4d",
        "fog_color": "#8a7dbb",
        "foliage_color": "#6b4d9a",
        "grass_color": "#4a3d5a",
    },
    "volcanic": {
        "sky_color": "#4d4d4d",
        "water_color": "#ff5733",
        "water_fog_color": "#331100",
        "fog_color": "#666666",
        "foliage_color": "#4d2600",
        "grass_color": "#332200",
    },
    "cherry": {
        "sky_color": "#7ba4ff",
        "water_color": "#5db7ef",
        "water_fog_color": "#5db7ef",
        "fog_color": "#c0d8ff",
        "foliage_color": "#b6db61",
        "grass_color": "#b6db61",
    },
}

BACKGROUND_MUSIC: dict[str, str] = {
    "overworld": "minecraft:music.overworld.meadow",
    "forest": "minecraft:music.overworld.forest",
    "desert": "minecraft:music.overworld.desert",
    "cherry": "minecraft:music.overworld.cherry_grove",
    "jungle": "minecraft:music.overworld.jungle",
    "swamp": "minecraft:music.overworld.swamp",
    "badlands": "minecraft:music.overworld.badlands",
}


def create_feature_array(vegetal_decorations: list[str]) -> list[list[str]]:
    """Build all 11 decoration stages with the given vegetation in stage 9"""
    return [
        [],  # 0: raw_generation
        ["minecraft:lake_lava_underground", "minecraft:lake_lava_surface"],  # 1: lakes
        ["minecraft:amethyst_geode"],  # 2: local_modifications
        ["minecraft:monster_room", "minecraft:monster_room_deep"],  # 3: underground_structures
        [],  # 4: surface_structures
        [],  # 5: strongholds
        list(STANDARD_ORES),  # 6: underground_ores
        ["minecraft:ore_infested"],  # 7: underground_decoration
        ["minecraft:spring_water", "minecraft:spring_lava"],  # 8: fluid_springs
        list(vegetal_decorations),  # 9: vegetal_decoration
        ["minecraft:freeze_top_layer"],  # 10: top_layer_modification
    ]


def _palette_colors(palette: dict[str, str]) -> dict[str, int]:
    return {key: hex_to_int(value) for key, value in palette.items()}


def create_biome_config(
    temperature: float,
    downfall: float,
    vegetal_decorations: list[str],
    colors: dict[str, str] | None = None,
    spawner_type: str = "standard",
    music: str | None = None,
) -> dict[str, Any]:
    """
    Build a complete raw biome document from presets.

    Args:
        temperature: Climate temperature (-2.0 to 2.0)
        downfall: Precipitation amount (0.0 to 1.0)
        vegetal_decorations: Feature ids placed in the vegetal decoration stage
        colors: Hex color overrides on top of the standard palette
        spawner_type: Key into MOB_SPAWNERS
        music: Optional background music sound id
    """
    if spawner_type not in MOB_SPAWNERS:
        raise ValueError(
            f"Unknown spawner preset '{spawner_type}'. "
            f"Choose from: {', '.join(MOB_SPAWNERS)}"
        )
    spawners = MOB_SPAWNERS[spawner_type]

    effects = _palette_colors(COLOR_PALETTES["standard"])
    effects.update(_palette_colors(colors or {}))
    if music:
        effects["music"] = {
            "sound": music,
            "min_delay": 12000,
            "max_delay": 24000,
            "replace_current_music": False,
        }

    return {
        "temperature": temperature,
        "downfall": downfall,
        "has_precipitation": temperature <= 1.5 and downfall > 0,
        "carvers": list(STANDARD_CARVERS),
        "effects": effects,
        "features": create_feature_array(vegetal_decorations),
        "spawn_costs": {},
        "spawners": {
            "ambient": copy.deepcopy(AMBIENT_SPAWNS),
            "axolotls": [],
            "creature": copy.deepcopy(spawners["creature"]),
            "misc": [],
            "monster": copy.deepcopy(spawners["monster"]),
            "underground_water_creature": copy.deepcopy(UNDERGROUND_WATER_SPAWNS),
            "water_ambient": [],
            "water_creature": [],
        },
    }


def base_biome() -> dict[str, Any]:
    """A fresh copy of the default biome"""
    biome = create_biome_config(
        temperature=0.8,
        downfall=0.4,
        vegetal_decorations=DEFAULT_VEGETATION,
    )
    biome["effects"]["mood_sound"] = {
        "sound": "minecraft:ambient.cave",
        "tick_delay": 6000,
        "block_search_extent": 8,
        "offset": 2.0,
    }
    return biome


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into a copy of base. Lists and scalars replace."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def merge_with_defaults(raw: dict[str, Any]) -> dict[str, Any]:
    """Fill in anything missing from a partial biome document with the base biome"""
    return deep_merge(base_biome(), raw)
