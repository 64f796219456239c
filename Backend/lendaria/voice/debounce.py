"""Single-timer debouncing on top of an event-loop style scheduler."""
from __future__ import annotations

import asyncio
import threading
from typing import Any, Callable, Optional, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> Any:
        ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], Any]) -> TimerHandle:
        ...


class LoopScheduler:
    """Schedule on the running asyncio loop, or on a daemon timer thread when none is running."""

    def call_later(self, delay: float, callback: Callable[[], Any]) -> TimerHandle:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            timer = threading.Timer(delay, callback)
            timer.daemon = True
            timer.start()
            return timer
        return loop.call_later(delay, callback)


class Debouncer:
    """Owns at most one pending timer; each :meth:`schedule` replaces the previous one."""

    def __init__(self, delay: float, scheduler: Optional[Scheduler] = None) -> None:
        self.delay = delay
        self._scheduler = scheduler or LoopScheduler()
        self._handle: Optional[TimerHandle] = None
        self._token: Optional[object] = None
        self._lock = threading.RLock()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, callback: Callable[[], Any]) -> None:
        self.cancel()
        token = object()

        def fire() -> None:
            with self._lock:
                # A later schedule() or cancel() supersedes this timer.
                if self._token is not token:
                    return
                self._handle = None
                self._token = None
            callback()

        with self._lock:
            self._token = token
            handle = self._scheduler.call_later(self.delay, fire)
            if self._token is token:
                self._handle = handle

    def cancel(self) -> None:
        with self._lock:
            handle, self._handle = self._handle, None
            self._token = None
        if handle is not None:
            handle.cancel()
