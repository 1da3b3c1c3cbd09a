"""
Biome schema models - Pydantic models for a Minecraft worldgen biome document
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from biomecraft.minecraft.colors import MAX_COLOR

FEATURE_STAGE_COUNT = 11

# Decoration steps in generation order
FEATURE_STAGE_NAMES = [
    "raw_generation",
    "lakes",
    "local_modifications",
    "underground_structures",
    "surface_structures",
    "strongholds",
    "underground_ores",
    "underground_decoration",
    "fluid_springs",
    "vegetal_decoration",
    "top_layer_modification",
]

SPAWNER_CATEGORIES = [
    "ambient",
    "axolotls",
    "creature",
    "misc",
    "monster",
    "underground_water_creature",
    "water_ambient",
    "water_creature",
]

TEMPERATURE_RANGE = (-2.0, 2.0)
DOWNFALL_RANGE = (0.0, 1.0)
WEIGHT_RANGE = (1, 1000)
COUNT_RANGE = (1, 10)

RESOURCE_LOCATION_PATTERN = r"^(?:[a-z0-9_.-]+:)?[a-z0-9_./-]+$"

Color = int


class TemperatureModifier(str, Enum):
    NONE = "none"
    FROZEN = "frozen"


class GrassColorModifier(str, Enum):
    NONE = "none"
    DARK_FOREST = "dark_forest"
    SWAMP = "swamp"


class MoodSound(BaseModel):
    """Cave ambience played in dark places"""
    sound: str
    tick_delay: int = Field(6000, gt=0)
    block_search_extent: int = Field(8, gt=0)
    offset: float = Field(2.0, ge=0)


class AdditionsSound(BaseModel):
    """Random one-shot sounds"""
    sound: str
    tick_chance: float = Field(ge=0, le=1)


class Music(BaseModel):
    """Background music selection"""
    sound: str
    min_delay: int = Field(12000, ge=0)
    max_delay: int = Field(24000, ge=0)
    replace_current_music: bool = False

    @model_validator(mode="after")
    def check_delays(self) -> "Music":
        if self.min_delay > self.max_delay:
            raise ValueError("music min_delay must be less than or equal to max_delay")
        return self


class ParticleOptions(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str


class Particle(BaseModel):
    """Ambient particles floating in the air"""
    options: ParticleOptions
    probability: float = Field(ge=0, le=1)


class BiomeEffects(BaseModel):
    """Visual and audio effects. Colors are packed RGB integers."""
    model_config = ConfigDict(use_enum_values=True)

    sky_color: Color = Field(ge=0, le=MAX_COLOR)
    fog_color: Color = Field(ge=0, le=MAX_COLOR)
    water_color: Color = Field(ge=0, le=MAX_COLOR)
    water_fog_color: Color = Field(ge=0, le=MAX_COLOR)
    grass_color: Color | None = Field(None, ge=0, le=MAX_COLOR)
    foliage_color: Color | None = Field(None, ge=0, le=MAX_COLOR)
    dry_foliage_color: Color | None = Field(None, ge=0, le=MAX_COLOR)
    grass_color_modifier: GrassColorModifier | None = None
    mood_sound: MoodSound | None = None
    ambient_sound: str | None = None
    additions_sound: AdditionsSound | None = None
    music: Music | None = None
    particle: Particle | None = None


class SpawnEntry(BaseModel):
    """A single spawn tuple: how often and how many of an entity appear"""
    model_config = ConfigDict(populate_by_name=True)

    type: str = Field(pattern=RESOURCE_LOCATION_PATTERN)
    weight: int = Field(ge=WEIGHT_RANGE[0], le=WEIGHT_RANGE[1])
    min_count: int = Field(alias="minCount", ge=COUNT_RANGE[0], le=COUNT_RANGE[1])
    max_count: int = Field(alias="maxCount", ge=COUNT_RANGE[0], le=COUNT_RANGE[1])

    @model_validator(mode="after")
    def check_counts(self) -> "SpawnEntry":
        if self.min_count > self.max_count:
            raise ValueError("minCount must be less than or equal to maxCount")
        return self


class Spawners(BaseModel):
    """Spawn tuples per mob category. Missing categories spawn nothing."""
    model_config = ConfigDict(extra="forbid")

    ambient: list[SpawnEntry] = Field(default_factory=list)
    axolotls: list[SpawnEntry] = Field(default_factory=list)
    creature: list[SpawnEntry] = Field(default_factory=list)
    misc: list[SpawnEntry] = Field(default_factory=list)
    monster: list[SpawnEntry] = Field(default_factory=list)
    underground_water_creature: list[SpawnEntry] = Field(default_factory=list)
    water_ambient: list[SpawnEntry] = Field(default_factory=list)
    water_creature: list[SpawnEntry] = Field(default_factory=list)


class BiomeConfig(BaseModel):
    """The validated configuration document for one generated biome"""
    model_config = ConfigDict(use_enum_values=True)

    temperature: float = Field(ge=TEMPERATURE_RANGE[0], le=TEMPERATURE_RANGE[1])
    downfall: float = Field(ge=DOWNFALL_RANGE[0], le=DOWNFALL_RANGE[1])
    has_precipitation: bool
    temperature_modifier: TemperatureModifier | None = None
    carvers: list[str] = Field(default_factory=list)
    effects: BiomeEffects
    features: list[list[str]]
    spawn_costs: dict[str, Any] = Field(default_factory=dict)
    spawners: Spawners = Field(default_factory=Spawners)

    @field_validator("features")
    @classmethod
    def check_feature_stages(cls, stages: list[list[str]]) -> list[list[str]]:
        if len(stages) != FEATURE_STAGE_COUNT:
            raise ValueError(
                f"features must have exactly {FEATURE_STAGE_COUNT} stages, got {len(stages)}"
            )
        for index, stage in enumerate(stages):
            for feature in stage:
                if ":" not in feature:
                    raise ValueError(
                        f"feature {feature!r} in stage {index} must be a namespaced id"
                    )
        return stages

    def to_minecraft_json(self) -> dict[str, Any]:
        """Serialize the document the way Minecraft reads biome files"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def preview(self) -> dict[str, Any]:
        """Short summary shown to clients alongside the download"""
        return {
            "temperature": self.temperature,
            "downfall": self.downfall,
            "has_precipitation": self.has_precipitation,
            "sky_color": self.effects.sky_color,
            "water_color": self.effects.water_color,
        }
