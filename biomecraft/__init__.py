"""BiomeCraft - natural-language descriptions to Minecraft biome datapacks."""

__version__ = "1.0.0"
