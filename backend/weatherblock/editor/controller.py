from __future__ import annotations

import asyncio
import logging
import time
from datetime import tzinfo
from enum import Enum
from typing import Awaitable, Callable, Optional, Set

from weatherblock.domain.rendering import (
    DEFAULT_DATE_FORMAT,
    DEFAULT_TIME_FORMAT,
    BlockView,
    RenderFlags,
    TimezoneMode,
    build_view,
    render_html,
)
from weatherblock.domain.snapshot import WeatherSnapshot
from weatherblock.domain.units import MeasurementSystem, resolve_units
from weatherblock.errors import FetchError, TransportError
from weatherblock.services.block import BlockAttributes

from .timer import DebounceTimer, LoopTimer

logger = logging.getLogger(__name__)

DEBOUNCE_SECONDS = 0.5

FetchSnapshot = Callable[[str], Awaitable[WeatherSnapshot]]


class EditorState(str, Enum):
    IDLE = "idle"
    AWAITING_INPUT = "awaiting_input"
    LOADING = "loading"
    LOADED = "loaded"
    ERRORED = "errored"


class EditorController:
    """Editing loop for one block instance.

    Location edits are debounced before fetching; unit and hourly toggles
    only change how the current snapshot is rendered. Every fetch carries
    a generation number and only the latest generation may update state.
    Must be driven from inside a running asyncio loop.
    """

    def __init__(
        self,
        fetch: FetchSnapshot,
        *,
        attributes: Optional[BlockAttributes] = None,
        timer: Optional[DebounceTimer] = None,
        debounce: float = DEBOUNCE_SECONDS,
        viewer_tz: Optional[tzinfo] = None,
        date_format: str = DEFAULT_DATE_FORMAT,
        time_format: str = DEFAULT_TIME_FORMAT,
    ) -> None:
        self._fetch = fetch
        self.attributes = attributes or BlockAttributes()
        self._timer = timer or LoopTimer()
        self.debounce = debounce
        self.viewer_tz = viewer_tz
        self.date_format = date_format
        self.time_format = time_format
        self.state = EditorState.IDLE
        self.snapshot: Optional[WeatherSnapshot] = None
        self.failure: Optional[FetchError] = None
        self._generation = 0
        self._pending: Set[asyncio.Task] = set()

    @property
    def generation(self) -> int:
        return self._generation

    def mount(self) -> None:
        if self.attributes.location:
            self.state = EditorState.AWAITING_INPUT
            self._start_fetch()

    def set_location(self, value: str) -> None:
        self.attributes = self.attributes.model_copy(update={"location": value})
        self._timer.cancel()
        if not value:
            # supersede anything still in flight
            self._generation += 1
            self.snapshot = None
            self.failure = None
            self.state = EditorState.IDLE
            return
        self.state = EditorState.AWAITING_INPUT
        self._timer.start(self.debounce, self._start_fetch)

    def set_measurement_unit(self, value: MeasurementSystem | str) -> None:
        resolve_units(value)
        self.attributes = self.attributes.model_copy(update={"measurementunit": MeasurementSystem(value)})

    def set_show_hourly(self, value: bool) -> None:
        self.attributes = self.attributes.model_copy(update={"show_hourly": bool(value)})

    def _start_fetch(self) -> None:
        self._generation += 1
        generation = self._generation
        location = self.attributes.location
        self.state = EditorState.LOADING
        task = asyncio.get_running_loop().create_task(self._run_fetch(generation, location))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _run_fetch(self, generation: int, location: str) -> None:
        try:
            snapshot = await self._fetch(location)
        except Exception as exc:
            if generation != self._generation:
                logger.debug("dropping failure of superseded fetch %d for %r", generation, location)
                return
            logger.warning("weather fetch for %r failed: %s", location, exc)
            self.snapshot = None
            self.failure = exc if isinstance(exc, FetchError) else TransportError(str(exc), location=location)
            self.state = EditorState.ERRORED
            return
        if generation != self._generation:
            logger.debug("dropping stale response %d for %r", generation, location)
            return
        self.snapshot = snapshot
        self.failure = None
        self.state = EditorState.ERRORED if snapshot.error is not None else EditorState.LOADED

    async def wait_for_pending(self) -> None:
        while self._pending:
            await asyncio.gather(*list(self._pending))

    def view(self, now_epoch: Optional[int] = None) -> BlockView:
        if self.state is EditorState.LOADING:
            current = None
        else:
            current = self.failure or self.snapshot
        flags = RenderFlags(
            show_hourly=self.attributes.show_hourly,
            timezone_mode=TimezoneMode.VIEWER_LOCAL,
            viewer_tz=self.viewer_tz,
            date_format=self.date_format,
            time_format=self.time_format,
        )
        now_epoch = int(time.time()) if now_epoch is None else now_epoch
        return build_view(
            current,
            resolve_units(self.attributes.measurementunit),
            flags,
            now_epoch,
            location=self.attributes.location,
        )

    def render(self, now_epoch: Optional[int] = None) -> str:
        return render_html(self.view(now_epoch))
