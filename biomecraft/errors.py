"""
Domain exceptions for BiomeCraft.

Every error carries a machine-readable ``code`` and the HTTP status the API
layer should answer with, so routes can map failures without string matching.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from biomecraft.models.validation import ValidationReport


class BiomeCraftError(Exception):
    """Base class for all BiomeCraft errors."""

    code = "INTERNAL_ERROR"
    status_code = 500
    title = "Internal server error"
    public_message = "An unexpected error occurred. Please try again."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.public_message)


class InvalidRequestError(BiomeCraftError):
    """The client sent a request we cannot work with."""

    code = "INVALID_REQUEST"
    status_code = 400
    title = "Invalid request"

    def __init__(self, title: str, message: str):
        super().__init__(message)
        self.title = title
        self.public_message = message


class RateLimitExceededError(BiomeCraftError):
    """The client exceeded the per-address request budget."""

    code = "RATE_LIMIT_EXCEEDED"
    status_code = 429
    title = "Rate limit exceeded"
    public_message = "Too many requests. Please wait a minute before trying again."


class AIServiceError(BiomeCraftError):
    """The generative-text service failed or returned nothing usable."""

    code = "AI_ERROR"
    title = "AI generation failed"
    public_message = (
        "Failed to generate biome configuration. "
        "Please try again with a different description."
    )


class AIRateLimitError(AIServiceError):
    """The generative-text service reported a quota or rate limit."""

    code = "AI_RATE_LIMIT"
    public_message = "AI service rate limit reached. Please try again in a moment."


class BiomeParseError(BiomeCraftError):
    """AI output could not be turned into a JSON object."""

    code = "VALIDATION_ERROR"
    title = "Validation failed"
    public_message = "The generated biome configuration is invalid. Please try again."


class BiomeValidationError(BiomeParseError):
    """A parsed biome document failed schema or range checks."""

    def __init__(self, report: "ValidationReport", message: str | None = None):
        self.report = report
        super().__init__(message or report.format())


class DatapackError(BiomeCraftError):
    """Bundling the datapack archive failed."""

    code = "GENERATION_ERROR"
    title = "Datapack creation failed"
    public_message = "Failed to create the datapack ZIP file. Please try again."


RATE_LIMIT_MARKERS = ("rate limit", "quota", "429")


def is_rate_limit_message(message: str) -> bool:
    """Check whether a provider error message describes a rate limit."""
    lowered = message.lower()
    return any(marker in lowered for marker in RATE_LIMIT_MARKERS)
