"""Voice capture for text fields."""
from lendaria.voice.controller import VoiceCaptureController
from lendaria.voice.fields import (
    ChangeEvent,
    FieldView,
    MergeStrategy,
    MicButtonView,
    SpeechInput,
    SpeechTextarea,
    merge_transcript,
)
from lendaria.voice.recognition import environment_provider, probe_recognition_capability, static_provider

__all__ = [
    "ChangeEvent",
    "FieldView",
    "MergeStrategy",
    "MicButtonView",
    "SpeechInput",
    "SpeechTextarea",
    "VoiceCaptureController",
    "environment_provider",
    "merge_transcript",
    "probe_recognition_capability",
    "static_provider",
]
