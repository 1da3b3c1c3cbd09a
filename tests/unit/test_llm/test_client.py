"""Unit tests for the LiteLLM wrapper."""

import logging
import os
from types import SimpleNamespace
from typing import Any

import pytest

from biomecraft.llm.client import get_completion, get_model_string, parse_json_response


class TestParseJsonResponse:
    """Tests for parse_json_response."""

    def test_plain(self) -> None:
        """Plain JSON is decoded."""
        assert parse_json_response('{"a": 1}') == {"a": 1}

    def test_json_fence(self) -> None:
        """```json fences are removed."""
        assert parse_json_response('```json\n{"a": 1}\n```') == {"a": 1}

    def test_bare_fence(self) -> None:
        """Bare ``` fences are removed."""
        assert parse_json_response('```\n{"a": 1}\n```') == {"a": 1}

    def test_embedded_object(self) -> None:
        """An object surrounded by prose is extracted."""
        assert parse_json_response('Sure! {"a": {"b": 2}} Hope that helps.') == {"a": {"b": 2}}

    def test_object_followed_by_prose_with_braces(self) -> None:
        """Only the first object is decoded; braces in trailing prose are ignored."""
        text = '{"temperature": 0.5}\nTip: keep spawn_costs as {} for vanilla.'
        assert parse_json_response(text, strict=True) == {"temperature": 0.5}

    def test_fenced_object_with_trailing_note(self) -> None:
        """A note after the closing fence does not break parsing."""
        text = '```json\n{"a": {"b": [1, 2]}}\n```\nLet me know if you want {changes}.'
        assert parse_json_response(text) == {"a": {"b": [1, 2]}}

    def test_braces_in_leading_prose(self) -> None:
        """Braces that do not start valid JSON are skipped."""
        assert parse_json_response('Fill in {placeholders}: {"a": 1}') == {"a": 1}

    def test_lenient_failure(self) -> None:
        """Unparseable text returns None by default."""
        assert parse_json_response("no json here") is None

    def test_strict_failure(self) -> None:
        """strict=True raises with a preview of the text."""
        with pytest.raises(ValueError, match="Response preview: no json here"):
            parse_json_response("no json here", strict=True)

    def test_truncated_preview(self) -> None:
        """Long responses are cut in the error message."""
        with pytest.raises(ValueError) as exc_info:
            parse_json_response("x" * 500, strict=True)
        assert str(exc_info.value).endswith("x" * 200 + "...")

    @pytest.mark.parametrize("response", [None, "", "   \n"])
    def test_empty(self, response: Any) -> None:
        """Empty responses always raise."""
        with pytest.raises(ValueError, match="empty response"):
            parse_json_response(response)


class TestGetModelString:
    """Tests for provider prefixes."""

    @pytest.mark.parametrize("provider,expected", [
        ("gemini", "gemini/some-model"),
        ("anthropic", "anthropic/some-model"),
        ("ollama", "ollama/some-model"),
        ("openai", "some-model"),
    ])
    def test_prefix(
        self, monkeypatch: pytest.MonkeyPatch, provider: str, expected: str
    ) -> None:
        """Providers that need it get a LiteLLM prefix."""
        monkeypatch.setenv("LLM_PROVIDER", provider)
        monkeypatch.setenv("LLM_MODEL", "some-model")
        assert get_model_string() == expected

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Gemini Flash is used when nothing is configured."""
        monkeypatch.delenv("LLM_PROVIDER", raising=False)
        monkeypatch.delenv("LLM_MODEL", raising=False)
        assert get_model_string() == "gemini/gemini-2.5-flash"


class TestGetCompletion:
    """Tests for get_completion with LiteLLM patched out."""

    @pytest.mark.asyncio
    async def test_passes_arguments(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Request options are forwarded and the message content returned."""
        import litellm

        captured: dict[str, Any] = {}

        async def fake_acompletion(**kwargs: Any) -> SimpleNamespace:
            captured.update(kwargs)
            return SimpleNamespace(choices=[SimpleNamespace(
                message=SimpleNamespace(content='{"ok": true}'),
                finish_reason="stop",
            )])

        monkeypatch.setattr(litellm, "acompletion", fake_acompletion)
        monkeypatch.setenv("LLM_PROVIDER", "anthropic")

        result = await get_completion(
            [{"role": "user", "content": "hi"}],
            model="ollama/llama3",
            temperature=0.2,
            response_format={"type": "json_object"},
        )

        assert result == '{"ok": true}'
        assert captured["model"] == "ollama/llama3"
        assert captured["temperature"] == 0.2
        assert captured["max_tokens"] == 8192
        assert captured["response_format"] == {"type": "json_object"}

    @pytest.mark.asyncio
    async def test_errors_propagate(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Provider errors are re-raised to the caller."""
        import litellm

        async def failing(**kwargs: Any) -> None:
            raise RuntimeError("provider down")

        monkeypatch.setattr(litellm, "acompletion", failing)
        monkeypatch.setenv("LLM_PROVIDER", "anthropic")

        with pytest.raises(RuntimeError, match="provider down"):
            await get_completion([{"role": "user", "content": "hi"}])


class TestProviderSetup:
    """Tests for provider checks done before each request."""

    @pytest.fixture
    def fake_litellm(self, monkeypatch: pytest.MonkeyPatch) -> None:
        import litellm

        async def fake_acompletion(**kwargs: Any) -> SimpleNamespace:
            return SimpleNamespace(choices=[SimpleNamespace(
                message=SimpleNamespace(content=None), finish_reason="stop",
            )])

        monkeypatch.setattr(litellm, "acompletion", fake_acompletion)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("provider,key_var", [
        ("gemini", "GEMINI_API_KEY"),
        ("anthropic", "ANTHROPIC_API_KEY"),
        ("openai", "OPENAI_API_KEY"),
    ])
    async def test_missing_key_warns(
        self,
        fake_litellm: None,
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
        provider: str,
        key_var: str,
    ) -> None:
        """A missing API key is logged as a warning naming the variable."""
        monkeypatch.setenv("LLM_PROVIDER", provider)
        monkeypatch.delenv(key_var, raising=False)
        with caplog.at_level(logging.WARNING, logger="biomecraft.llm.client"):
            result = await get_completion([{"role": "user", "content": "hi"}])
        assert result == ""
        assert f"{key_var} is not set" in caplog.text

    @pytest.mark.asyncio
    async def test_key_present_no_warning(
        self,
        fake_litellm: None,
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """No warning is logged when the key is configured."""
        monkeypatch.setenv("LLM_PROVIDER", "gemini")
        monkeypatch.setenv("GEMINI_API_KEY", "test-key")
        with caplog.at_level(logging.WARNING, logger="biomecraft.llm.client"):
            await get_completion([{"role": "user", "content": "hi"}])
        assert "is not set" not in caplog.text

    @pytest.mark.asyncio
    async def test_ollama_base_url(
        self, fake_litellm: None, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Ollama's base URL is passed on to LiteLLM."""
        monkeypatch.setenv("LLM_PROVIDER", "ollama")
        monkeypatch.setenv("OLLAMA_BASE_URL", "http://gpu-box:11434")
        monkeypatch.setenv("OLLAMA_API_BASE", "unset")
        await get_completion([{"role": "user", "content": "hi"}])
        assert os.environ["OLLAMA_API_BASE"] == "http://gpu-box:11434"
