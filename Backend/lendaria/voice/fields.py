"""Text fields with a microphone affordance.

``SpeechInput`` and ``SpeechTextarea`` wrap a host-controlled text value and a
:class:`VoiceCaptureController`. Recognised transcripts are appended to the
current text and forwarded to the host through ``on_change`` with a
:class:`ChangeEvent`; the field never changes the host's value any other way.

Two merge strategies exist:

* ``IMMEDIATE`` merges against the host's value at the moment the transcript
  arrives and forwards the result synchronously.
* ``BUFFERED`` keeps a shadow copy of the text. Transcripts merge against the
  shadow and are forwarded at once; manual edits update the shadow right away
  but reach the host only after a quiet period.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from lendaria.core.logging import get_logger
from lendaria.voice import metrics as voice_metrics
from lendaria.voice.controller import Notifier, VoiceCaptureController
from lendaria.voice.debounce import Debouncer, Scheduler
from lendaria.voice.recognition import CapabilityProvider, static_provider
from lendaria.voice.settings import VoiceSettings

logger = get_logger(__name__)

SECRET_INPUT_TYPES = frozenset({"password"})


@dataclass(frozen=True)
class ChangeEvent:
    new_value: str


ChangeHandler = Callable[[ChangeEvent], Any]


class MergeStrategy(str, Enum):
    IMMEDIATE = "immediate"
    BUFFERED = "buffered"


def merge_transcript(prior: Optional[str], transcript: str) -> str:
    """Append ``transcript`` to ``prior`` separated by a single space."""
    current = prior or ""
    return f"{current} {transcript}" if current else transcript


@dataclass(frozen=True)
class MicButtonView:
    listening: bool
    title: str

    @property
    def icon(self) -> str:
        return "mic-off" if self.listening else "mic"


@dataclass(frozen=True)
class FieldView:
    value: str
    multiline: bool
    input_type: str
    mic: Optional[MicButtonView]


class SpeechField:
    multiline = False
    default_strategy = MergeStrategy.IMMEDIATE

    def __init__(
        self,
        value: Optional[str] = "",
        on_change: Optional[ChangeHandler] = None,
        *,
        input_type: str = "text",
        strategy: MergeStrategy | str | None = None,
        capability: Optional[CapabilityProvider] = None,
        settings: Optional[VoiceSettings] = None,
        scheduler: Optional[Scheduler] = None,
        notify: Optional[Notifier] = None,
        field_id: Optional[str] = None,
    ) -> None:
        self.settings = settings or VoiceSettings()
        self.input_type = input_type
        self.field_id = field_id
        self.strategy = MergeStrategy(strategy) if strategy is not None else self.default_strategy
        self._value = value or ""
        self._shadow = self._value
        self._on_change = on_change
        self._debouncer: Optional[Debouncer] = None
        if self.strategy is MergeStrategy.BUFFERED:
            self._debouncer = Debouncer(self.settings.debounce_seconds, scheduler)

        self.controller: Optional[VoiceCaptureController] = None
        if not self.is_secret:
            self.controller = VoiceCaptureController(
                capability or static_provider(None),
                self._handle_transcript,
                language=self.settings.speech_language,
                notify=notify,
                unsupported_message=self.settings.unsupported_message,
            )

    @property
    def is_secret(self) -> bool:
        return self.input_type in SECRET_INPUT_TYPES

    @property
    def value(self) -> str:
        if self.strategy is MergeStrategy.BUFFERED:
            return self._shadow
        return self._value

    @property
    def is_listening(self) -> bool:
        return bool(self.controller and self.controller.is_listening)

    @property
    def flush_pending(self) -> bool:
        return bool(self._debouncer and self._debouncer.pending)

    # Host-facing updates

    def set_value(self, value: Optional[str]) -> None:
        """Apply a value pushed by the host (e.g. a form reset).

        ``_value`` tracks what the host last held: its own pushes and every
        value the field emitted. Re-pushing that value is a re-render and
        keeps the buffer; anything else replaces it and drops a pending flush.
        """
        value = value or ""
        if value == self._value:
            return
        self._value = value
        if self.strategy is MergeStrategy.BUFFERED and value != self._shadow:
            self._shadow = value
            self._debouncer.cancel()

    def set_on_change(self, on_change: Optional[ChangeHandler]) -> None:
        self._on_change = on_change
        if self.controller is not None:
            self.controller.set_on_result(self._handle_transcript)

    def edit(self, text: str) -> None:
        """Apply a manual edit typed into the field."""
        if self.strategy is MergeStrategy.IMMEDIATE:
            self._emit(text)
            return
        self._shadow = text
        self._debouncer.schedule(self._flush)

    # Microphone

    def toggle_microphone(self) -> None:
        if self.controller is None:
            return
        self.controller.toggle()

    def render(self) -> FieldView:
        mic = None
        if self.controller is not None and self.controller.is_supported:
            mic = MicButtonView(listening=self.controller.is_listening, title=self.settings.mic_title)
        return FieldView(value=self.value, multiline=self.multiline, input_type=self.input_type, mic=mic)

    def unmount(self) -> None:
        if self._debouncer is not None and self._debouncer.pending:
            self._debouncer.cancel()
            self._flush()
        if self.controller is not None:
            self.controller.teardown()

    # Internals

    def _handle_transcript(self, transcript: str) -> None:
        if self.strategy is MergeStrategy.IMMEDIATE:
            self._emit(merge_transcript(self._value, transcript))
            return
        merged = merge_transcript(self._shadow, transcript)
        self._shadow = merged
        self._debouncer.cancel()
        voice_metrics.field_flushed("transcript")
        self._emit(merged)

    def _flush(self) -> None:
        voice_metrics.field_flushed("debounce")
        self._emit(self._shadow)

    def _emit(self, new_value: str) -> None:
        if self.strategy is MergeStrategy.BUFFERED:
            self._value = new_value
        handler = self._on_change
        if handler is None:
            logger.debug({"event": "speech_field_change_dropped", "field_id": self.field_id})
            return
        handler(ChangeEvent(new_value=new_value))


class SpeechInput(SpeechField):
    """Single-line field; transcripts merge against the host value."""

    multiline = False
    default_strategy = MergeStrategy.IMMEDIATE


class SpeechTextarea(SpeechField):
    """Multi-line field with a local buffer and debounced propagation."""

    multiline = True
    default_strategy = MergeStrategy.BUFFERED
