"""
Shared pytest fixtures for BiomeCraft tests.

This module provides:
- raw_biome: a complete, valid raw biome document (dict)
- sample_biome: the same document as a BiomeConfig
- mock_llm_client / mock_llm_with_responses: deterministic LLM stand-ins
- Custom markers for test categorization
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest

# Add project root to path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from biomecraft.minecraft.templates import FEATURE_SETS, create_biome_config  # noqa: E402
from biomecraft.models.biome import BiomeConfig  # noqa: E402

if TYPE_CHECKING:
    from tests.mocks.llm import MockLLMClient


# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line("markers", "integration: marks tests as integration tests")


# =============================================================================
# Biome Fixtures
# =============================================================================


@pytest.fixture
def raw_biome() -> dict[str, Any]:
    """A complete taiga-like biome with packed integer colors."""
    return create_biome_config(
        temperature=0.25,
        downfall=0.8,
        vegetal_decorations=FEATURE_SETS["taiga"],
        colors={"sky_color": "#7ba4ff", "water_color": "#3938c9"},
        spawner_type="standard",
        music="minecraft:music.overworld.forest",
    )


@pytest.fixture
def sample_biome(raw_biome: dict[str, Any]) -> BiomeConfig:
    """The raw_biome fixture as a validated BiomeConfig."""
    return BiomeConfig.model_validate(raw_biome)


# =============================================================================
# LLM Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_llm_client() -> "MockLLMClient":
    """Create a mock LLM that always answers with a valid snowy biome."""
    from tests.mocks.llm import MockBiomeResponse, MockLLMClient

    return MockLLMClient(
        responses={
            "default": MockBiomeResponse(temperature=-0.3, downfall=0.5).to_json(),
        }
    )


@pytest.fixture
def mock_llm_with_responses() -> callable:
    """Factory fixture to create mock LLM with custom responses.

    Usage:
        def test_something(mock_llm_with_responses):
            llm = mock_llm_with_responses(queue=['{"temperature": 9}', valid_json])
    """
    from tests.mocks.llm import MockLLMClient

    def _factory(
        responses: dict[str, Any] | None = None,
        queue: list[Any] | None = None,
    ) -> MockLLMClient:
        return MockLLMClient(responses=responses, queue=queue)

    return _factory
