"""LLM integration components.

- `client.py`: LiteLLM client wrapper
- `prompt_loader.py`: Prompt template loading utility
- `biome_generator.py`: BiomeGenerator, description -> BiomeConfig

Import BiomeGenerator directly from its submodule to avoid circular imports:
    from biomecraft.llm.biome_generator import BiomeGenerator
"""

# Only import shared utilities that don't cause circular imports
from biomecraft.llm.client import get_completion, parse_json_response, get_model_string
from biomecraft.llm.prompt_loader import get_loader

__all__ = [
    "get_completion",
    "parse_json_response",
    "get_model_string",
    "get_loader",
]
