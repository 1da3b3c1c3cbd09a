"""Minecraft biome knowledge: colors, templates, validation and normalization.

Import from submodules directly:
    from biomecraft.minecraft.normalize import coerce_biome
    from biomecraft.minecraft.validator import validate_biome_structure
"""
