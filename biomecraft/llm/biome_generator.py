"""
Biome Generator - AI-assisted biome generation from natural-language descriptions
"""

import logging
from typing import Awaitable, Callable

from biomecraft.errors import (
    AIRateLimitError,
    AIServiceError,
    BiomeValidationError,
    is_rate_limit_message,
)
from biomecraft.llm.client import get_completion
from biomecraft.llm.prompt_loader import PromptLoader, get_loader
from biomecraft.minecraft.normalize import coerce_biome, parse_biome_response
from biomecraft.models.biome import FEATURE_STAGE_NAMES, SPAWNER_CATEGORIES, BiomeConfig

logger = logging.getLogger(__name__)

PROMPT_CATEGORY = "biome_generator"

CompletionFn = Callable[..., Awaitable[str]]


class BiomeGenerator:
    """Turns a description into a validated BiomeConfig via the LLM"""

    def __init__(
        self,
        completion: CompletionFn | None = None,
        loader: PromptLoader | None = None,
        max_repair_attempts: int = 1,
        model: str | None = None,
    ):
        self._completion = completion or get_completion
        self._loader = loader or get_loader()
        self.max_repair_attempts = max_repair_attempts
        self.model = model

    def build_messages(self, description: str) -> list[dict[str, str]]:
        """Build the system + user messages for a description"""
        stage_list = "\n".join(
            f"  {index}: {name}" for index, name in enumerate(FEATURE_STAGE_NAMES)
        )
        system_message = self._loader.render(
            PROMPT_CATEGORY,
            "system_message.txt",
            stage_count=len(FEATURE_STAGE_NAMES),
            stage_list=stage_list,
            categories=", ".join(SPAWNER_CATEGORIES),
        )
        user_prompt = self._loader.render(
            PROMPT_CATEGORY,
            "user_prompt.txt",
            example=self._loader.get_prompt(PROMPT_CATEGORY, "example_biome.json").strip(),
            description=description,
        )
        return [
            {"role": "system", "content": system_message},
            {"role": "user", "content": user_prompt},
        ]

    async def _complete(self, messages: list[dict[str, str]]) -> str:
        try:
            response = await self._completion(
                messages,
                model=self.model,
                temperature=0.7,
                max_tokens=8192,
                response_format={"type": "json_object"},
            )
        except Exception as e:
            message = f"{type(e).__name__}: {e}"
            if is_rate_limit_message(message) or getattr(e, "status_code", None) == 429:
                raise AIRateLimitError(message) from e
            raise AIServiceError(message) from e

        if not response or not response.strip():
            raise AIServiceError("LLM returned empty response")
        return response

    async def generate(self, description: str) -> BiomeConfig:
        """
        Generate a biome configuration from a description.

        If the first answer fails validation, the errors are sent back to the
        model for up to ``max_repair_attempts`` corrections.

        Raises:
            AIServiceError: The LLM call failed (AIRateLimitError on quota errors)
            BiomeParseError: The answer was not JSON
            BiomeValidationError: The answer stayed invalid after repairs
        """
        logger.info(f"Generating biome for description ({len(description)} chars)")
        logger.debug(f"Description: {description[:100]}")

        messages = self.build_messages(description)
        attempt = 0

        while True:
            response = await self._complete(messages)
            logger.info(f"LLM response received, length: {len(response)}")

            raw = parse_biome_response(response)
            logger.debug(f"JSON parsed successfully, keys: {list(raw.keys())}")

            try:
                biome = coerce_biome(raw)
            except BiomeValidationError as e:
                if attempt >= self.max_repair_attempts:
                    logger.error(f"Biome still invalid after {attempt} repair attempt(s)")
                    raise
                attempt += 1
                logger.warning(
                    f"Generated biome invalid ({len(e.report.errors)} error(s)), "
                    f"requesting repair {attempt}/{self.max_repair_attempts}"
                )
                messages = messages + [
                    {"role": "assistant", "content": response},
                    {
                        "role": "user",
                        "content": self._loader.render(
                            PROMPT_CATEGORY, "repair_prompt.txt", errors=e.report.format()
                        ),
                    },
                ]
                continue

            logger.info(
                f"Biome validated: temperature={biome.temperature}, downfall={biome.downfall}"
            )
            return biome
