"""Unit tests for BiomeGenerator with a mocked LLM."""

import pytest

from biomecraft.errors import (
    AIRateLimitError,
    AIServiceError,
    BiomeParseError,
    BiomeValidationError,
)
from biomecraft.llm.biome_generator import BiomeGenerator
from biomecraft.models.biome import BiomeConfig
from tests.mocks.llm import MockBiomeResponse, MockLLMClient


class ProviderError(Exception):
    """Stand-in for a provider exception carrying an HTTP status."""

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class TestBuildMessages:
    """Tests for prompt assembly."""

    def test_system_and_user(self) -> None:
        """A system message and a user message are produced."""
        messages = BiomeGenerator(completion=MockLLMClient()).build_messages(
            "A frozen lake surrounded by pines"
        )
        assert [m["role"] for m in messages] == ["system", "user"]

    def test_system_message_lists_stages(self) -> None:
        """The system message names all decoration stages and categories."""
        system = BiomeGenerator(completion=MockLLMClient()).build_messages("x")[0]["content"]
        assert "exactly 11 lists" in system
        assert "9: vegetal_decoration" in system
        assert "underground_water_creature" in system
        assert '{"type": "minecraft:<mob>"' in system

    def test_user_prompt_has_description_and_example(self) -> None:
        """The user prompt embeds the example biome and the description."""
        user = BiomeGenerator(completion=MockLLMClient()).build_messages(
            "A frozen lake surrounded by pines"
        )[1]["content"]
        assert '"A frozen lake surrounded by pines"' in user
        assert '"features"' in user


class TestGenerate:
    """Tests for BiomeGenerator.generate."""

    @pytest.mark.asyncio
    async def test_valid_first_answer(self, mock_llm_client: MockLLMClient) -> None:
        """A valid answer is returned as a BiomeConfig after one call."""
        biome = await BiomeGenerator(completion=mock_llm_client).generate(
            "A snowy forest with foxes"
        )
        assert isinstance(biome, BiomeConfig)
        assert biome.temperature == -0.3
        assert biome.effects.sky_color == 0x78A7FF
        mock_llm_client.assert_called(times=1)

    @pytest.mark.asyncio
    async def test_request_options(self, mock_llm_client: MockLLMClient) -> None:
        """JSON mode and sampling options are requested."""
        await BiomeGenerator(completion=mock_llm_client, model="ollama/llama3").generate(
            "A snowy forest with foxes"
        )
        kwargs = mock_llm_client.get_last_call().kwargs
        assert kwargs["response_format"] == {"type": "json_object"}
        assert kwargs["temperature"] == 0.7
        assert kwargs["max_tokens"] == 8192
        assert kwargs["model"] == "ollama/llama3"

    @pytest.mark.asyncio
    async def test_fenced_answer(self, mock_llm_with_responses) -> None:
        """Markdown-fenced answers are accepted."""
        llm = mock_llm_with_responses(queue=[MockBiomeResponse(fenced=True).to_json()])
        biome = await BiomeGenerator(completion=llm).generate("A mild meadow")
        assert biome.temperature == 0.5

    @pytest.mark.asyncio
    async def test_repair_after_invalid_answer(self, mock_llm_with_responses) -> None:
        """Validation errors are sent back and the corrected answer is used."""
        llm = mock_llm_with_responses(queue=[
            MockBiomeResponse(temperature=5).to_json(),
            MockBiomeResponse(temperature=1.2).to_json(),
        ])
        biome = await BiomeGenerator(completion=llm).generate("A scorching canyon")

        assert biome.temperature == 1.2
        llm.assert_called(times=2)
        repair_call = llm.get_last_call()
        assert [m["role"] for m in repair_call.messages] == [
            "system", "user", "assistant", "user",
        ]
        assert "failed validation" in repair_call.prompt
        assert "temperature must be between -2.0 and 2.0" in repair_call.prompt

    @pytest.mark.asyncio
    async def test_still_invalid_after_repair(self, mock_llm_with_responses) -> None:
        """A second invalid answer raises BiomeValidationError."""
        invalid = MockBiomeResponse(downfall=3).to_json()
        llm = mock_llm_with_responses(queue=[invalid, invalid])
        with pytest.raises(BiomeValidationError) as exc_info:
            await BiomeGenerator(completion=llm).generate("A drenched swamp")
        assert exc_info.value.code == "VALIDATION_ERROR"
        llm.assert_called(times=2)

    @pytest.mark.asyncio
    async def test_no_repairs(self, mock_llm_with_responses) -> None:
        """With repairs disabled the first invalid answer fails."""
        llm = mock_llm_with_responses(queue=[MockBiomeResponse(downfall=3).to_json()])
        with pytest.raises(BiomeValidationError):
            await BiomeGenerator(completion=llm, max_repair_attempts=0).generate("A swamp")
        llm.assert_called(times=1)

    @pytest.mark.asyncio
    async def test_unparseable_answer(self, mock_llm_with_responses) -> None:
        """Non-JSON answers raise BiomeParseError without a repair round."""
        llm = mock_llm_with_responses(queue=["Sorry, I can't do that."])
        with pytest.raises(BiomeParseError):
            await BiomeGenerator(completion=llm).generate("A swamp with frogs")
        llm.assert_called(times=1)

    @pytest.mark.asyncio
    async def test_empty_answer(self, mock_llm_with_responses) -> None:
        """An empty answer is an AI service failure."""
        llm = mock_llm_with_responses(queue=["  "])
        with pytest.raises(AIServiceError, match="empty response"):
            await BiomeGenerator(completion=llm).generate("A swamp with frogs")


class TestErrorMapping:
    """Tests for mapping provider failures to domain errors."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        RuntimeError("RateLimitError: rate limit reached for model"),
        RuntimeError("Resource has been exhausted (e.g. check quota)."),
        RuntimeError("HTTP 429 Too Many Requests"),
        ProviderError("slow down", status_code=429),
    ])
    async def test_rate_limits(self, mock_llm_with_responses, error: Exception) -> None:
        """Quota and rate limit failures become AIRateLimitError."""
        llm = mock_llm_with_responses(queue=[error])
        with pytest.raises(AIRateLimitError) as exc_info:
            await BiomeGenerator(completion=llm).generate("A windy plateau")
        assert exc_info.value.code == "AI_RATE_LIMIT"
        assert exc_info.value.__cause__ is error

    @pytest.mark.asyncio
    async def test_other_failures(self, mock_llm_with_responses) -> None:
        """Any other failure becomes AIServiceError."""
        llm = mock_llm_with_responses(queue=[ConnectionError("connection reset")])
        with pytest.raises(AIServiceError) as exc_info:
            await BiomeGenerator(completion=llm).generate("A windy plateau")
        assert type(exc_info.value) is AIServiceError
        assert exc_info.value.code == "AI_ERROR"
        assert "ConnectionError: connection reset" in str(exc_info.value)
