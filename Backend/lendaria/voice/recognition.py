"""Speech-recognition capability contract and capability probing.

A recognition capability is anything exposing a zero-argument constructor
that produces a :class:`RecognitionSession`. Host environments publish it
under a standard binding (``SpeechRecognition``) or a vendor-prefixed one
(``webkitSpeechRecognition``); :func:`probe_recognition_capability` looks
for either without assuming that any is present.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Protocol, Sequence

STANDARD_BINDING = "SpeechRecognition"
VENDOR_BINDING = "webkitSpeechRecognition"
CAPABILITY_BINDINGS = (STANDARD_BINDING, VENDOR_BINDING)


@dataclass(frozen=True)
class RecognitionAlternative:
    transcript: str
    confidence: float | None = None


@dataclass(frozen=True)
class RecognitionResult:
    """Ranked alternatives for one utterance, best first."""

    alternatives: Sequence[RecognitionAlternative] = ()
    is_final: bool = True

    def __len__(self) -> int:
        return len(self.alternatives)

    def __getitem__(self, index: int) -> RecognitionAlternative:
        return self.alternatives[index]


@dataclass(frozen=True)
class RecognitionEvent:
    results: Sequence[RecognitionResult] = field(default_factory=tuple)

    @classmethod
    def from_transcript(cls, transcript: str, confidence: float | None = None) -> "RecognitionEvent":
        return cls(results=(RecognitionResult((RecognitionAlternative(transcript, confidence),)),))


@dataclass(frozen=True)
class RecognitionErrorEvent:
    error: str
    message: str = ""


ResultCallback = Callable[[RecognitionEvent], Any]
ErrorCallback = Callable[[RecognitionErrorEvent], Any]
EndCallback = Callable[[], Any]


class RecognitionSession(Protocol):
    continuous: bool
    interim_results: bool
    lang: str
    onresult: Optional[ResultCallback]
    onerror: Optional[ErrorCallback]
    onend: Optional[EndCallback]

    def start(self) -> None:
        ...

    def stop(self) -> None:
        ...

    def abort(self) -> None:
        ...


RecognitionFactory = Callable[[], RecognitionSession]
CapabilityProvider = Callable[[], Optional[RecognitionFactory]]


def _lookup(environment: Any, name: str) -> Any:
    if environment is None:
        return None
    if isinstance(environment, Mapping):
        return environment.get(name)
    try:
        return getattr(environment, name, None)
    except Exception:  # noqa: BLE001 - probing must never raise
        return None


def probe_recognition_capability(environment: Any) -> Optional[RecognitionFactory]:
    """Return the recognition constructor exposed by ``environment``, if any."""
    for binding in CAPABILITY_BINDINGS:
        candidate = _lookup(environment, binding)
        if candidate is not None and callable(candidate):
            return candidate
    return None


def environment_provider(environment: Any) -> CapabilityProvider:
    """Wrap an environment into a capability provider for the controller."""
    return lambda: probe_recognition_capability(environment)


def static_provider(factory: Optional[RecognitionFactory]) -> CapabilityProvider:
    return lambda: factory
