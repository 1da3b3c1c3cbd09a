"""
LLM client - completions through LiteLLM and JSON extraction from replies
"""

import os
import json
import logging
from typing import Any

from biomecraft.config import get_model, get_provider

logger = logging.getLogger(__name__)

# LiteLLM addresses these providers as "<provider>/<model>"
PREFIXED_PROVIDERS = ("gemini", "anthropic", "ollama")

# LiteLLM reads these itself; we only check they are present
API_KEY_VARS = {
    "gemini": "GEMINI_API_KEY",
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}

DEFAULT_OLLAMA_URL = "http://localhost:11434"

_decoder = json.JSONDecoder()


def get_model_string() -> str:
    """Model name as LiteLLM expects it for the configured provider"""
    provider = get_provider()
    model = get_model()
    if provider in PREFIXED_PROVIDERS:
        return f"{provider}/{model}"
    return model


def _check_provider_setup() -> None:
    provider = get_provider()

    if provider == "ollama":
        base_url = os.getenv("OLLAMA_BASE_URL", DEFAULT_OLLAMA_URL)
        os.environ["OLLAMA_API_BASE"] = base_url
        logger.debug(f"OLLAMA_API_BASE set to {base_url}")
        return

    key_var = API_KEY_VARS.get(provider)
    if key_var and not os.getenv(key_var):
        logger.warning(f"{key_var} is not set; requests to {provider} will fail")


async def get_completion(
    messages: list[dict[str, str]],
    model: str | None = None,
    temperature: float = 0.7,
    max_tokens: int = 8192,
    response_format: dict | None = None,
) -> str:
    """
    Ask the configured provider for a completion.

    Args:
        messages: Chat messages with 'role' and 'content'
        model: Full LiteLLM model string; defaults to get_model_string()
        response_format: e.g. {"type": "json_object"} for JSON mode

    Returns:
        The text of the first choice ("" if the model sent nothing)
    """
    import litellm

    _check_provider_setup()

    request: dict[str, Any] = {
        "model": model or get_model_string(),
        "messages": messages,
        "temperature": temperature,
        "max_tokens": max_tokens,
        "top_p": 0.95,
    }
    if response_format:
        request["response_format"] = response_format

    logger.info(f"LLM request: model={request['model']}, messages={len(messages)}")

    try:
        response = await litellm.acompletion(**request)
    except Exception as e:
        logger.error(f"LLM call failed: {type(e).__name__}: {e}")
        raise

    choice = response.choices[0]
    content = choice.message.content or ""
    finish_reason = getattr(choice, "finish_reason", None)
    logger.info(f"LLM reply: finish_reason={finish_reason}, length={len(content)}")
    if finish_reason == "length":
        logger.warning(f"LLM reply cut off at max_tokens={max_tokens}")

    return content


def _strip_fences(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        # Drop the opening fence and its language tag
        text = text[3:]
        if text.startswith("json"):
            text = text[4:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def _first_object(text: str) -> Any:
    """Decode the first complete JSON value starting at a '{', ignoring what follows"""
    start = text.find("{")
    while start != -1:
        try:
            value, _ = _decoder.raw_decode(text, start)
            return value
        except json.JSONDecodeError:
            start = text.find("{", start + 1)
    return None


def parse_json_response(response: str | None, strict: bool = False) -> Any:
    """
    Parse JSON out of an LLM reply.

    Markdown code fences are removed. If the reply is not JSON as a whole,
    the first JSON object embedded in it is used, so prose before or after
    the object (even prose containing braces) is tolerated.

    Raises:
        ValueError: On an empty reply, or on no JSON at all when ``strict``
    """
    if response is None or not response.strip():
        raise ValueError("LLM returned empty response. Please try again.")

    cleaned = _strip_fences(response)

    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        pass

    parsed = _first_object(cleaned)
    if parsed is not None:
        return parsed

    if strict:
        snippet = cleaned[:200] + "..." if len(cleaned) > 200 else cleaned
        raise ValueError(
            f"Failed to parse JSON from LLM response. "
            f"The AI may have returned malformed or truncated output. "
            f"Response preview: {snippet}"
        )
    return None
