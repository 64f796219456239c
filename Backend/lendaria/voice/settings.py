"""Centralised configuration for voice capture."""
from __future__ import annotations

import os
from dataclasses import dataclass, field


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


@dataclass
class VoiceSettings:
    """Runtime configuration for voice capture on text fields."""

    speech_language: str = field(default_factory=lambda: os.getenv("SPEECH_LANGUAGE", "pt-BR"))
    debounce_ms: int = field(default_factory=lambda: _env_int("SPEECH_DEBOUNCE_MS", 500))
    unsupported_message: str = field(
        default_factory=lambda: os.getenv(
            "SPEECH_UNSUPPORTED_MESSAGE", "Navegador não suporta reconhecimento de voz."
        )
    )
    mic_title: str = "Falar para preencher"
    google_application_credentials: str | None = field(
        default_factory=lambda: os.getenv("GOOGLE_APPLICATION_CREDENTIALS")
    )
    voice_stream_sample_rate: int = field(default_factory=lambda: _env_int("VOICE_STREAM_SAMPLE_RATE", 16000))

    @property
    def debounce_seconds(self) -> float:
        return max(self.debounce_ms, 0) / 1000.0
