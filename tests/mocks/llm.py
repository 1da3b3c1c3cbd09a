"""
Mock LLM client for deterministic testing.

MockLLMClient stands in for ``biomecraft.llm.client.get_completion``: it is
an async callable taking a message list, and it returns predetermined
responses based on the content of the last message. Responses can also be
queued so that consecutive calls return different answers (useful for the
repair loop).

Example:
    >>> mock = MockLLMClient({"desert": '{"temperature": 2.0}'})
    >>> generator = BiomeGenerator(completion=mock)
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any


@dataclass
class LLMCall:
    """Record of a single LLM call for test verification.

    Attributes:
        messages: The messages sent to the LLM
        kwargs: Extra keyword arguments (model, temperature, ...)
        response: The response returned
        matched_pattern: The pattern that matched ("queue", "default" or "none")
    """

    messages: list[dict[str, str]]
    kwargs: dict[str, Any]
    response: str
    matched_pattern: str

    @property
    def prompt(self) -> str:
        return self.messages[-1]["content"] if self.messages else ""


class MockLLMClient:
    """Mock LLM completion function.

    Queued responses are returned first, in order. After that, patterns are
    matched case-insensitively against the last message, with a "default"
    fallback. A response that is an Exception instance is raised instead.
    """

    def __init__(
        self,
        responses: dict[str, str | Exception] | None = None,
        queue: list[str | Exception] | None = None,
    ) -> None:
        self.responses: dict[str, str | Exception] = responses or {}
        self.queue: list[str | Exception] = list(queue or [])
        self.call_history: list[LLMCall] = []

    async def __call__(self, messages: list[dict[str, str]], **kwargs: Any) -> str:
        response, pattern = self._find_response(messages)
        self.call_history.append(
            LLMCall(
                messages=list(messages),
                kwargs=kwargs,
                response=str(response),
                matched_pattern=pattern,
            )
        )
        if isinstance(response, Exception):
            raise response
        return response

    def _find_response(self, messages: list[dict[str, str]]) -> tuple[str | Exception, str]:
        if self.queue:
            return self.queue.pop(0), "queue"

        prompt_lower = messages[-1]["content"].lower() if messages else ""
        for pattern, response in self.responses.items():
            if pattern == "default":
                continue
            if pattern.lower() in prompt_lower:
                return response, pattern

        if "default" in self.responses:
            return self.responses["default"], "default"

        return "{}", "none"

    def get_last_call(self) -> LLMCall | None:
        """Get the most recent call, if any."""
        return self.call_history[-1] if self.call_history else None

    def assert_called(self, times: int | None = None) -> None:
        """Assert the mock was called (exactly ``times`` times if given)."""
        if times is not None:
            assert (
                len(self.call_history) == times
            ), f"Expected {times} calls, got {len(self.call_history)}"
        else:
            assert len(self.call_history) > 0, "Expected at least one call"


@dataclass
class MockBiomeResponse:
    """Builds a biome JSON answer the way a model might phrase it."""

    temperature: Any = 0.5
    downfall: Any = 0.8
    has_precipitation: Any = True
    sky_color: Any = "#78a7ff"
    water_color: Any = "#3f76e4"
    extra: dict[str, Any] = field(default_factory=dict)
    fenced: bool = False

    def to_json(self) -> str:
        data: dict[str, Any] = {
            "temperature": self.temperature,
            "downfall": self.downfall,
            "has_precipitation": self.has_precipitation,
            "effects": {
                "sky_color": self.sky_color,
                "fog_color": "#c0d8ff",
                "water_color": self.water_color,
                "water_fog_color": "#050533",
            },
            "spawners": {
                "creature": [
                    {"type": "minecraft:fox", "weight": 8, "min_count": 2, "max_count": 4}
                ],
                "monster": [
                    {"type": "minecraft:stray", "weight": 80, "minCount": 4, "maxCount": 4}
                ],
            },
        }
        data.update(self.extra)
        text = json.dumps(data)
        if self.fenced:
            return f"```json\n{text}\n```"
        return text
