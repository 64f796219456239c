"""Pytest configuration and shared fixtures."""
import os
import sys
from pathlib import Path

import pytest

# Keep test runs from writing backend.log into the repository
os.environ.setdefault("LOG_TO_FILE", "false")

# Ensure Backend/ is on sys.path so the 'lendaria' package resolves during tests
backend_root = Path(__file__).parent.parent
if str(backend_root) not in sys.path:
    sys.path.insert(0, str(backend_root))

from lendaria.core.config import get_settings
from lendaria.voice.recognition import RecognitionErrorEvent, RecognitionEvent


ENV_VARS = [
    'GEMINI_API_KEY',
    'VITE_GEMINI_API_KEY',
    'OPENAI_API_KEY',
    'COMPLETION_PROVIDER',
    'SUPABASE_URL',
    'VITE_SUPABASE_URL',
    'NEXT_PUBLIC_SUPABASE_URL',
    'SUPABASE_ANON_KEY',
    'VITE_SUPABASE_ANON_KEY',
    'NEXT_PUBLIC_SUPABASE_ANON_KEY',
    'ENVIRONMENT',
    'SPEECH_LANGUAGE',
    'SPEECH_DEBOUNCE_MS',
    'LENDARIA_ENV_FILE',
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Remove credentials and overrides that would leak from the machine."""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class FakeRecognition:
    """In-memory recognition session recording every platform call."""

    def __init__(self, start_error: Exception | None = None) -> None:
        self.continuous = None
        self.interim_results = None
        self.lang = None
        self.onresult = None
        self.onerror = None
        self.onend = None
        self.start_error = start_error
        self.starts = 0
        self.stops = 0
        self.aborts = 0

    def start(self) -> None:
        self.starts += 1
        if self.start_error is not None:
            raise self.start_error

    def stop(self) -> None:
        self.stops += 1

    def abort(self) -> None:
        self.aborts += 1

    def emit_result(self, transcript: str) -> None:
        self.onresult(RecognitionEvent.from_transcript(transcript, 0.9))

    def emit_empty_result(self) -> None:
        self.onresult(RecognitionEvent(results=()))

    def emit_error(self, error: str = "no-speech") -> None:
        self.onerror(RecognitionErrorEvent(error=error))

    def emit_end(self) -> None:
        self.onend()


class FakeCapability:
    """Recognition constructor that remembers the sessions it built."""

    def __init__(self, start_error: Exception | None = None) -> None:
        self.start_error = start_error
        self.sessions: list[FakeRecognition] = []

    def __call__(self) -> FakeRecognition:
        session = FakeRecognition(self.start_error)
        self.sessions.append(session)
        return session

    @property
    def session(self) -> FakeRecognition:
        return self.sessions[-1]

    def provider(self):
        return lambda: self


class ManualScheduler:
    """Deterministic stand-in for the event loop's ``call_later``."""

    class Handle:
        def __init__(self, due: float, callback) -> None:
            self.due = due
            self.callback = callback
            self.cancelled = False

        def cancel(self) -> None:
            self.cancelled = True

    def __init__(self) -> None:
        self.now = 0.0
        self.handles: list["ManualScheduler.Handle"] = []

    def call_later(self, delay, callback):
        handle = self.Handle(self.now + delay, callback)
        self.handles.append(handle)
        return handle

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [h for h in self.handles if not h.cancelled and h.due <= target]
            if not due:
                break
            handle = min(due, key=lambda h: h.due)
            self.handles.remove(handle)
            self.now = handle.due
            handle.callback()
        self.now = target

    @property
    def pending(self) -> int:
        return len([h for h in self.handles if not h.cancelled])


@pytest.fixture
def capability() -> FakeCapability:
    return FakeCapability()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


class FakeCompletionClient:
    provider = "fake"
    model = "fake-model"

    def __init__(self, response: str = "", error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.prompts: list[str] = []

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def completion_client() -> FakeCompletionClient:
    return FakeCompletionClient()


def pytest_configure(config):
    """Configure custom test markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
