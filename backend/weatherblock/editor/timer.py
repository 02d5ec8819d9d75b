from __future__ import annotations

import asyncio
from typing import Callable, Optional, Protocol


class DebounceTimer(Protocol):
    """A cancellable one-shot timer; at most one pending callback."""

    @property
    def active(self) -> bool:
        raise NotImplementedError

    def start(self, delay: float, callback: Callable[[], None]) -> None:
        raise NotImplementedError

    def cancel(self) -> None:
        raise NotImplementedError


class LoopTimer(DebounceTimer):
    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop
        self._handle: Optional[asyncio.TimerHandle] = None

    @property
    def active(self) -> bool:
        return self._handle is not None

    def start(self, delay: float, callback: Callable[[], None]) -> None:
        self.cancel()
        loop = self._loop or asyncio.get_running_loop()

        def _fire() -> None:
            self._handle = None
            callback()

        self._handle = loop.call_later(delay, _fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
