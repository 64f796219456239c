"""Remote text-completion clients (prompt in, generated text out)."""
from __future__ import annotations

import asyncio
import time
from typing import Optional, Protocol

from google import genai
from google.genai import errors as genai_errors
from openai import OpenAI, OpenAIError

from lendaria.core.config import CompletionProvider, Settings, get_settings
from lendaria.core.exceptions import ConfigurationError, ExternalAPIError
from lendaria.core.logging import get_logger

LOGGER = get_logger(__name__)


class CompletionClient(Protocol):
    provider: str
    model: str

    async def complete(self, prompt: str) -> str:
        ...


class GeminiCompletionClient:
    """Gemini ``generate_content`` wrapper."""

    provider = "gemini"

    def __init__(self, *, api_key: Optional[str] = None, model: Optional[str] = None) -> None:
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self.model = model or settings.DEFAULT_MODEL
        self._client: Optional[genai.Client] = None
        if not self.api_key:
            LOGGER.warning("GeminiCompletionClient initialized without GEMINI_API_KEY; calls will fail")

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def _get_client(self) -> genai.Client:
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    async def complete(self, prompt: str) -> str:
        if not self.api_key:
            raise ConfigurationError("GEMINI_API_KEY não configurada.")

        start = time.perf_counter()
        try:
            response = await self._get_client().aio.models.generate_content(model=self.model, contents=prompt)
        except genai_errors.APIError as exc:
            LOGGER.error({"event": "completion_request_failed", "provider": self.provider, "model": self.model, "error": str(exc)})
            raise ExternalAPIError(f"Gemini request failed: {exc}", {"provider": self.provider}) from exc

        LOGGER.info({
            "event": "completion_request_succeeded",
            "provider": self.provider,
            "model": self.model,
            "duration_ms": int((time.perf_counter() - start) * 1000),
        })
        return response.text or ""


class OpenAICompletionClient:
    """OpenAI chat-completions wrapper run off the event loop."""

    provider = "openai"

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: float = 0.3,
        timeout: Optional[float] = None,
    ) -> None:
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.OPENAI_API_KEY
        self.model = model or settings.OPENAI_MODEL
        self.temperature = temperature
        self.timeout = timeout or settings.COMPLETION_TIMEOUT
        if not self.api_key:
            LOGGER.warning("OpenAICompletionClient initialized without OPENAI_API_KEY; calls will fail")

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def complete(self, prompt: str) -> str:
        if not self.api_key:
            raise ConfigurationError("OPENAI_API_KEY não configurada.")

        def _invoke_chat():
            client = OpenAI(api_key=self.api_key, timeout=self.timeout)
            return client.chat.completions.create(
                model=self.model,
                temperature=self.temperature,
                messages=[{"role": "user", "content": prompt}],
            )

        start = time.perf_counter()
        try:
            response = await asyncio.to_thread(_invoke_chat)
        except OpenAIError as exc:
            LOGGER.error({"event": "completion_request_failed", "provider": self.provider, "model": self.model, "error": str(exc)})
            raise ExternalAPIError(f"OpenAI request failed: {exc}", {"provider": self.provider}) from exc

        LOGGER.info({
            "event": "completion_request_succeeded",
            "provider": self.provider,
            "model": self.model,
            "duration_ms": int((time.perf_counter() - start) * 1000),
        })
        choices = getattr(response, "choices", None) or []
        if not choices:
            return ""
        return choices[0].message.content or ""


def build_completion_client(settings: Optional[Settings] = None) -> CompletionClient:
    """Select the completion provider configured in ``COMPLETION_PROVIDER``."""
    settings = settings or get_settings()
    provider = getattr(settings.COMPLETION_PROVIDER, "value", settings.COMPLETION_PROVIDER) or CompletionProvider.GEMINI.value
    provider = str(provider).lower()
    if provider == CompletionProvider.OPENAI.value:
        LOGGER.info({"event": "completion_provider_selected", "provider": "openai"})
        return OpenAICompletionClient(api_key=settings.OPENAI_API_KEY or "", model=settings.OPENAI_MODEL, timeout=settings.COMPLETION_TIMEOUT)
    LOGGER.info({"event": "completion_provider_selected", "provider": "gemini"})
    return GeminiCompletionClient(api_key=settings.GEMINI_API_KEY or "", model=settings.DEFAULT_MODEL)
