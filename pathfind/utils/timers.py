from __future__ import annotations

import asyncio
from typing import Any, Callable, Optional


class Timer:
    """A single replaceable ``call_later`` slot.

    Scheduling again cancels whatever was pending, so timers never stack.
    """

    def __init__(self) -> None:
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def pending(self) -> bool:
        return self._handle is not None and not self._handle.cancelled()

    def schedule(self, delay: float, callback: Callable[..., Any], *args: Any) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(delay, self._run, callback, args)

    def _run(self, callback: Callable[..., Any], args: tuple) -> None:
        self._handle = None
        callback(*args)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class Debouncer:
    """Trailing-edge debounce: only the last call in a burst runs, ``delay`` after it."""

    def __init__(self, delay: float, callback: Callable[..., Any]) -> None:
        self.delay = delay
        self.callback = callback
        self._timer = Timer()

    def __call__(self, *args: Any) -> None:
        self._timer.schedule(self.delay, self.callback, *args)

    def cancel(self) -> None:
        self._timer.cancel()
