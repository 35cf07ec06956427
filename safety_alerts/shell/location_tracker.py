"""Location Tracker - Imperative Shell.

Produces the user's position either from a live positioning source or from
a simulated walk driven by an asyncio timer. The two modes are exclusive:
starting one always releases the other's watch handle or timer task first.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Any, Protocol

from safety_alerts.core.config import TrackerConfig, TrackingMode
from safety_alerts.core.geo import Position


logger = logging.getLogger(__name__)


PositionCallback = Callable[[Position], None]
ErrorCallback = Callable[[Exception], None]


class PositioningError(Exception):
    """Raised or reported by a positioning source (denied, unavailable...)."""


class PositionSource(Protocol):
    """Push-based positioning source with watch/unwatch semantics."""

    def watch(self, on_position: PositionCallback, on_error: ErrorCallback) -> Any:
        """Start delivering fixes; returns a handle for ``unwatch``."""
        ...

    def unwatch(self, handle: Any) -> None:
        """Stop delivering fixes for a handle."""
        ...


class ManualPositionSource:
    """Positioning source driven by explicit ``push``/``fail`` calls.

    Stands in for a device GPS in tests and demos.
    """

    def __init__(self) -> None:
        self._watchers: dict[int, tuple[PositionCallback, ErrorCallback]] = {}
        self._next_handle = 1

    @property
    def active_watches(self) -> int:
        return len(self._watchers)

    def watch(self, on_position: PositionCallback, on_error: ErrorCallback) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._watchers[handle] = (on_position, on_error)
        return handle

    def unwatch(self, handle: int) -> None:
        self._watchers.pop(handle, None)

    def push(self, latitude: float, longitude: float) -> None:
        position = Position(latitude=latitude, longitude=longitude)
        for on_position, _ in list(self._watchers.values()):
            on_position(position)

    def fail(self, error: Exception | None = None) -> None:
        error = error or PositioningError("Position unavailable")
        for _, on_error in list(self._watchers.values()):
            on_error(error)


class LocationTracker:
    """Maintains the current user position.

    The position is None until the tracker is started, and never None
    afterwards. Listeners are called with every new position.

    Use as an async context manager to guarantee the watch handle or timer
    is released on exit:

        async with LocationTracker(source, config) as tracker:
            tracker.start(TrackingMode.SIMULATION)
            ...
    """

    def __init__(
        self,
        source: PositionSource | None = None,
        config: TrackerConfig | None = None,
    ) -> None:
        """Initialize tracker.

        Args:
            source: Live positioning source, None if the device has none
            config: Tracker configuration
        """
        self.source = source
        self.config = config or TrackerConfig()
        self._position: Position | None = None
        self._mode: TrackingMode | None = None
        self._listeners: list[PositionCallback] = []
        self._watch_handle: Any = None
        self._timer: asyncio.Task | None = None
        # Simulated positions are origin + n steps, never accumulated
        self._walk_origin: Position | None = None
        self._walk_steps = 0
        # Bumped on every start/stop; callbacks from older subscriptions are dropped
        self._generation = 0

    @property
    def position(self) -> Position | None:
        return self._position

    @property
    def mode(self) -> TrackingMode | None:
        """Active mode, None when stopped."""
        return self._mode

    @property
    def running(self) -> bool:
        return self._mode is not None

    def add_listener(self, listener: PositionCallback) -> None:
        self._listeners.append(listener)

    def seed(self, position: Position) -> None:
        """Set the starting point without notifying listeners."""
        self._position = position
        self._walk_origin = None

    def _emit(self, position: Position) -> None:
        self._position = position
        for listener in list(self._listeners):
            listener(position)

    def _use_default(self) -> None:
        logger.warning(
            "Using default position (%.4f, %.4f)",
            self.config.default_position.latitude,
            self.config.default_position.longitude,
        )
        self._emit(self.config.default_position)

    def start(self, mode: TrackingMode) -> None:
        """Start tracking in ``mode``, tearing down any previous mode first.

        Simulation mode needs a running event loop; without one this raises
        RuntimeError and leaves the current mode untouched.
        """
        loop = None
        if mode is TrackingMode.SIMULATION:
            loop = asyncio.get_running_loop()

        self.stop()
        self._generation += 1
        self._mode = mode
        self._walk_origin = None

        if loop is not None:
            self._start_simulation(loop)
        else:
            self._start_live()

        logger.info("Location tracking started in %s mode", mode.value)

    def _start_live(self) -> None:
        if self.source is None:
            logger.warning("No positioning source available")
            if self._position is None:
                self._use_default()
            return

        generation = self._generation

        def on_position(position: Position) -> None:
            if generation != self._generation:
                return
            self._walk_origin = None
            self._emit(position)

        def on_error(error: Exception) -> None:
            if generation != self._generation:
                return
            logger.warning("Positioning error: %s", error)
            if self._position is None:
                self._use_default()

        self._watch_handle = self.source.watch(on_position, on_error)

    def _start_simulation(self, loop: asyncio.AbstractEventLoop) -> None:
        if self._position is None:
            self._emit(self.config.default_position)

        self._timer = loop.create_task(
            self._simulate(self._generation),
            name="location-simulation",
        )

    async def _simulate(self, generation: int) -> None:
        while True:
            await asyncio.sleep(self.config.tick_seconds)
            if generation != self._generation:
                return
            try:
                self.tick()
            except Exception:
                logger.exception("Simulated position update failed")

    def tick(self) -> Position:
        """Advance the simulated walk by one step."""
        if self._position is None:
            self._walk_origin = None
            position = self.config.default_position
        else:
            if self._walk_origin is None:
                self._walk_origin = self._position
                self._walk_steps = 0
            self._walk_steps += 1
            distance = self._walk_steps * self.config.step_degrees
            position = self._walk_origin.offset(distance, distance)
        self._emit(position)
        return position

    def stop(self) -> None:
        """Release the watch handle and timer. Safe to call repeatedly."""
        self._generation += 1

        if self._watch_handle is not None:
            if self.source is not None:
                self.source.unwatch(self._watch_handle)
            self._watch_handle = None

        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

        if self._mode is not None:
            logger.info("Location tracking stopped (%s)", self._mode.value)
        self._mode = None

    async def __aenter__(self) -> "LocationTracker":
        return self

    async def aclose(self) -> None:
        """Stop tracking and wait for the timer task to finish."""
        timer = self._timer
        self.stop()
        if timer is not None:
            try:
                await timer
            except asyncio.CancelledError:
                pass

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
