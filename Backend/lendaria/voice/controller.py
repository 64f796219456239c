"""Voice-capture controller binding a recognition session to a text field."""
from __future__ import annotations

from typing import Any, Callable, Optional

from lendaria.core.logging import get_logger
from lendaria.voice import metrics as voice_metrics
from lendaria.voice.recognition import (
    CapabilityProvider,
    RecognitionErrorEvent,
    RecognitionEvent,
    RecognitionFactory,
    RecognitionSession,
)

logger = get_logger(__name__)

TranscriptCallback = Callable[[str], Any]
Notifier = Callable[[str], Any]

DEFAULT_LANGUAGE = "pt-BR"
UNSUPPORTED_MESSAGE = "Navegador não suporta reconhecimento de voz."


def _log_notification(message: str) -> None:
    logger.warning({"event": "voice_capture_notification", "message": message})


class VoiceCaptureController:
    """Owns one recognition session and exposes a listening toggle.

    The capability provider is resolved once, at construction. The session is
    built lazily on the first :meth:`start_listening` call and reused until
    :meth:`teardown` aborts it. Failures never propagate to the caller: they
    are logged and the listening state is reset.

    The transcript callback is held behind :meth:`set_on_result` and read
    when a result arrives, so callers may swap it at any time without
    rebuilding the session.
    """

    def __init__(
        self,
        capability: CapabilityProvider,
        on_result: Optional[TranscriptCallback] = None,
        *,
        language: str = DEFAULT_LANGUAGE,
        notify: Optional[Notifier] = None,
        unsupported_message: str = UNSUPPORTED_MESSAGE,
        on_state_change: Optional[Callable[[bool], Any]] = None,
        metrics: Any | None = None,
    ) -> None:
        self._factory = self._resolve(capability)
        self._on_result = on_result
        self._language = language
        self._notify = notify or _log_notification
        self._unsupported_message = unsupported_message
        self._on_state_change = on_state_change
        self._metrics = metrics or voice_metrics
        self._session: Optional[RecognitionSession] = None
        self._is_listening = False
        self._torn_down = False

    @staticmethod
    def _resolve(capability: CapabilityProvider) -> Optional[RecognitionFactory]:
        try:
            return capability()
        except Exception as exc:  # noqa: BLE001 - feature detection must not raise
            logger.warning({"event": "voice_capability_probe_failed", "error": str(exc)})
            return None

    @property
    def is_supported(self) -> bool:
        return self._factory is not None

    @property
    def is_listening(self) -> bool:
        return self._is_listening

    @property
    def language(self) -> str:
        return self._language

    @property
    def has_session(self) -> bool:
        return self._session is not None

    def set_on_result(self, callback: Optional[TranscriptCallback]) -> None:
        self._on_result = callback

    def start_listening(self) -> None:
        if self._factory is None:
            self._record("unsupported")
            self._notify(self._unsupported_message)
            return
        if self._torn_down:
            logger.debug({"event": "voice_capture_start_ignored", "reason": "torn_down"})
            return

        try:
            session = self._ensure_session()
            self._bind(session)
            session.start()
        except Exception as exc:  # noqa: BLE001 - start failures are reported, not raised
            logger.error({"event": "voice_capture_start_failed", "error": str(exc)})
            self._record("start_failed")
            self._set_listening(False)
            return

        self._record("started")
        self._set_listening(True)

    def stop_listening(self) -> None:
        session = self._session
        if session is None:
            return
        try:
            session.stop()
        except Exception as exc:  # noqa: BLE001
            logger.error({"event": "voice_capture_stop_failed", "error": str(exc)})
        self._record("stopped")
        self._set_listening(False)

    def toggle(self) -> None:
        if self._is_listening:
            self.stop_listening()
        else:
            self.start_listening()

    def teardown(self) -> None:
        """Release the session's audio resources. Safe to call repeatedly."""
        if self._torn_down:
            return
        self._torn_down = True
        session = self._session
        self._session = None
        if session is not None:
            try:
                session.abort()
            except Exception as exc:  # noqa: BLE001
                logger.error({"event": "voice_capture_abort_failed", "error": str(exc)})
        self._set_listening(False)

    # Session wiring

    def _ensure_session(self) -> RecognitionSession:
        if self._session is None:
            session = self._factory()
            session.continuous = False
            session.interim_results = False
            session.lang = self._language
            self._session = session
            logger.debug({"event": "voice_capture_session_created", "lang": self._language})
        return self._session

    def _bind(self, session: RecognitionSession) -> None:
        session.onresult = self._handle_result
        session.onerror = self._handle_error
        session.onend = self._handle_end

    def _handle_result(self, event: RecognitionEvent) -> None:
        results = getattr(event, "results", None) or ()
        transcript = None
        if len(results) > 0 and len(results[0]) > 0:
            transcript = results[0][0].transcript

        if transcript is None:
            self._record("empty")
        else:
            self._record("transcript")
            callback = self._on_result
            if callback is not None:
                try:
                    callback(transcript)
                except Exception:  # noqa: BLE001 - consumer errors stay inside the field
                    logger.exception("voice_capture_result_callback_failed")
        self._set_listening(False)

    def _handle_error(self, event: RecognitionErrorEvent | Any = None) -> None:
        error = getattr(event, "error", event)
        logger.error({"event": "voice_capture_error", "error": str(error)})
        self._record("error")
        self._set_listening(False)

    def _handle_end(self, *_: Any) -> None:
        self._set_listening(False)

    # Helpers

    def _set_listening(self, value: bool) -> None:
        if self._is_listening == value:
            return
        self._is_listening = value
        if self._on_state_change is not None:
            try:
                self._on_state_change(value)
            except Exception:  # noqa: BLE001
                logger.exception("voice_capture_state_listener_failed")

    def _record(self, result: str) -> None:
        try:
            self._metrics.capture_event(result)
        except Exception as exc:  # noqa: BLE001
            logger.debug({"event": "voice_capture_metrics_failed", "result": result, "error": str(exc)})
