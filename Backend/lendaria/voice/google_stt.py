"""Recognition session backed by Google Cloud streaming Speech-to-Text."""
from __future__ import annotations

import asyncio
from contextlib import aclosing
from dataclasses import dataclass
from typing import Any, AsyncGenerator, AsyncIterator, Callable, Optional

from google.api_core.exceptions import GoogleAPIError
from google.cloud.speech_v1 import SpeechAsyncClient
from google.cloud.speech_v1.types import (
    RecognitionConfig,
    StreamingRecognitionConfig,
    StreamingRecognizeRequest,
)

from lendaria.core.exceptions import RecognitionStateError
from lendaria.core.logging import get_logger
from lendaria.voice.recognition import (
    EndCallback,
    ErrorCallback,
    RecognitionErrorEvent,
    RecognitionEvent,
    RecognitionFactory,
    ResultCallback,
)
from lendaria.voice.settings import VoiceSettings

logger = get_logger(__name__)

AudioSource = Callable[[], AsyncIterator[bytes | None]]


@dataclass
class TranscriptSegment:
    text: str
    is_final: bool
    stability: float | None = None
    confidence: float | None = None


class GoogleSpeechClient:
    """Thin wrapper around Google Cloud streaming STT."""

    def __init__(self, settings: VoiceSettings) -> None:
        self._settings = settings

    async def stream_transcribe(
        self,
        audio_chunks: AsyncIterator[bytes | None],
        *,
        language_code: str | None = None,
        sample_rate_hz: int | None = None,
        interim_results: bool = False,
        single_utterance: bool = True,
        enable_automatic_punctuation: bool = True,
    ) -> AsyncGenerator[TranscriptSegment, None]:
        """Yield transcript segments as they are produced by Google STT.

        Args:
            audio_chunks: asynchronous iterator yielding raw audio chunks (PCM 16-bit little endian).
                ``None`` ends the stream.
            language_code: optional language override; defaults to configured language.
            sample_rate_hz: audio sampling rate; defaults to configured rate.
            interim_results: also yield non-final hypotheses.
            single_utterance: let the service end the stream after the first utterance.
            enable_automatic_punctuation: toggle punctuation insertion.
        """

        language = language_code or self._settings.speech_language
        sample_rate = sample_rate_hz or self._settings.voice_stream_sample_rate

        recognition_config = RecognitionConfig(
            encoding=RecognitionConfig.AudioEncoding.LINEAR16,
            language_code=language,
            sample_rate_hertz=sample_rate,
            enable_automatic_punctuation=enable_automatic_punctuation,
            enable_word_time_offsets=False,
        )
        streaming_config = StreamingRecognitionConfig(
            config=recognition_config,
            interim_results=interim_results,
            single_utterance=single_utterance,
        )

        async def request_iterator() -> AsyncGenerator[StreamingRecognizeRequest, None]:
            yield StreamingRecognizeRequest(streaming_config=streaming_config)
            async for chunk in audio_chunks:
                if chunk is None:
                    break
                if not chunk:
                    continue
                yield StreamingRecognizeRequest(audio_content=chunk)

        try:
            async with SpeechAsyncClient() as client:
                responses = await client.streaming_recognize(requests=request_iterator())
                async for response in responses:
                    for result in response.results:
                        if not result.alternatives:
                            continue
                        alternative = result.alternatives[0]
                        yield TranscriptSegment(
                            text=alternative.transcript or "",
                            is_final=result.is_final,
                            stability=getattr(result, "stability", None),
                            confidence=getattr(alternative, "confidence", None),
                        )
        except GoogleAPIError as exc:
            logger.exception("Google STT streaming error", extra={"error": str(exc)})
            raise


class GoogleStreamingRecognition:
    """Recognition session running one streaming request per ``start()``.

    Callbacks fire on the event loop: ``onresult`` for each delivered
    transcript, ``onerror`` on failure, then ``onend``. ``stop()`` closes the
    audio stream so pending results still arrive; ``abort()`` cancels the
    request and fires nothing further.
    """

    def __init__(self, client: Any, audio_source: AudioSource, *, sample_rate_hz: int | None = None) -> None:
        self.continuous = False
        self.interim_results = False
        self.lang = "pt-BR"
        self.onresult: Optional[ResultCallback] = None
        self.onerror: Optional[ErrorCallback] = None
        self.onend: Optional[EndCallback] = None
        self._client = client
        self._audio_source = audio_source
        self._sample_rate_hz = sample_rate_hz
        self._task: Optional[asyncio.Task] = None
        self._stopping: Optional[asyncio.Event] = None

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.active:
            raise RecognitionStateError("recognition has already started")
        loop = asyncio.get_running_loop()
        self._stopping = asyncio.Event()
        self._task = loop.create_task(self._run())

    def stop(self) -> None:
        if self.active and self._stopping is not None:
            self._stopping.set()

    def abort(self) -> None:
        if self.active:
            self._task.cancel()

    async def wait_closed(self) -> None:
        """Wait for the current request to finish, however it ends."""
        if self._task is None:
            return
        await asyncio.gather(self._task, return_exceptions=True)

    async def _run(self) -> None:
        segments = self._client.stream_transcribe(
            self._audio(),
            language_code=self.lang,
            sample_rate_hz=self._sample_rate_hz,
            interim_results=self.interim_results,
            single_utterance=not self.continuous,
        )
        try:
            async with aclosing(segments):
                async for segment in segments:
                    if not segment.is_final and not self.interim_results:
                        continue
                    self._fire(self.onresult, RecognitionEvent.from_transcript(segment.text, segment.confidence))
                    if segment.is_final and not self.continuous:
                        break
        except asyncio.CancelledError:
            raise
        except GoogleAPIError as exc:
            self._fire(self.onerror, RecognitionErrorEvent(error="network", message=str(exc)))
        except Exception as exc:  # noqa: BLE001 - reported through onerror
            self._fire(self.onerror, RecognitionErrorEvent(error="audio-capture", message=str(exc)))
        self._fire(self.onend)

    async def _audio(self) -> AsyncGenerator[bytes | None, None]:
        stopping = self._stopping
        chunks = self._audio_source().__aiter__()
        stop_wait = asyncio.ensure_future(stopping.wait())
        next_chunk: Optional[asyncio.Future] = None
        try:
            while True:
                next_chunk = asyncio.ensure_future(chunks.__anext__())
                done, _ = await asyncio.wait({next_chunk, stop_wait}, return_when=asyncio.FIRST_COMPLETED)
                if next_chunk not in done:
                    return
                try:
                    chunk = next_chunk.result()
                except StopAsyncIteration:
                    return
                if chunk is None:
                    return
                yield chunk
        finally:
            stop_wait.cancel()
            if next_chunk is not None and not next_chunk.done():
                next_chunk.cancel()

    @staticmethod
    def _fire(callback: Optional[Callable[..., Any]], *args: Any) -> None:
        if callback is None:
            return
        try:
            callback(*args)
        except Exception:  # noqa: BLE001
            logger.exception("google_recognition_callback_failed")


def google_recognition_factory(settings: VoiceSettings, audio_source: AudioSource) -> RecognitionFactory:
    """Constructor for :class:`GoogleStreamingRecognition` sessions sharing one client."""
    client = GoogleSpeechClient(settings)

    def factory() -> GoogleStreamingRecognition:
        return GoogleStreamingRecognition(client, audio_source, sample_rate_hz=settings.voice_stream_sample_rate)

    return factory
