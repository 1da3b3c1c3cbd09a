"""
Name helpers - turn free text into Minecraft-safe resource names.
"""

import re

DEFAULT_BIOME_NAME = "custom_biome"

_INVALID_CHARS = re.compile(r"[^a-z0-9_]")
_REPEATED_UNDERSCORES = re.compile(r"_{2,}")
_RESOURCE_LOCATION = re.compile(r"^[a-z0-9_.-]+:[a-z0-9_./-]+$")


def sanitize_biome_name(name: str) -> str:
    """
    Lowercase, replace anything outside [a-z0-9_] with '_', collapse runs
    of '_' and strip them from both ends. May return an empty string.
    """
    sanitized = _INVALID_CHARS.sub("_", name.lower())
    sanitized = _REPEATED_UNDERSCORES.sub("_", sanitized)
    return sanitized.strip("_")


def derive_biome_name(description: str) -> str:
    """Name a biome after the first three words of its description"""
    words = description.split(" ")[:3]
    return sanitize_biome_name("_".join(words)) or DEFAULT_BIOME_NAME


def is_valid_resource_location(value: str) -> bool:
    """True for namespaced ids like 'custom:misty_forest'"""
    return bool(_RESOURCE_LOCATION.match(value))
