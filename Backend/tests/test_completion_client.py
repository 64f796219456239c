from types import SimpleNamespace

import pytest

from lendaria.core.config import Settings
from lendaria.core.exceptions import ConfigurationError
from lendaria.infrastructure.ai import (
    GeminiCompletionClient,
    OpenAICompletionClient,
    build_completion_client,
)


class FakeModels:
    def __init__(self, text):
        self.text = text
        self.calls = []

    async def generate_content(self, *, model, contents):
        self.calls.append((model, contents))
        return SimpleNamespace(text=self.text)


def test_build_defaults_to_gemini():
    client = build_completion_client(Settings())
    assert isinstance(client, GeminiCompletionClient)
    assert client.model == "gemini-1.5-flash"
    assert client.configured is False


def test_build_selects_openai(monkeypatch):
    monkeypatch.setenv("COMPLETION_PROVIDER", "openai")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

    client = build_completion_client(Settings())

    assert isinstance(client, OpenAICompletionClient)
    assert client.model == "gpt-4o-mini"
    assert client.configured is True


@pytest.mark.asyncio
async def test_gemini_without_key_raises_configuration_error():
    client = GeminiCompletionClient(api_key="")
    with pytest.raises(ConfigurationError, match="GEMINI_API_KEY"):
        await client.complete("prompt")


@pytest.mark.asyncio
async def test_openai_without_key_raises_configuration_error():
    client = OpenAICompletionClient(api_key="")
    with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
        await client.complete("prompt")


@pytest.mark.asyncio
async def test_gemini_returns_generated_text():
    models = FakeModels("## Relatório")
    client = GeminiCompletionClient(api_key="AIza-test", model="gemini-test")
    client._client = SimpleNamespace(aio=SimpleNamespace(models=models))

    assert await client.complete("analise") == "## Relatório"
    assert models.calls == [("gemini-test", "analise")]


@pytest.mark.asyncio
async def test_gemini_empty_text_becomes_empty_string():
    client = GeminiCompletionClient(api_key="AIza-test")
    client._client = SimpleNamespace(aio=SimpleNamespace(models=FakeModels(None)))

    assert await client.complete("analise") == ""
