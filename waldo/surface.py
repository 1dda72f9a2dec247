"""Live overlay surfaces and the temporal redraw schedule.

A live surface is what an interactive host (an overlay window) draws
from. The host owns the draw thread: it waits for redraw requests and
calls ``draw()``. A ``TemporalSchedule`` runs on its own timer thread
and only ever posts redraw requests; it never touches pixels.

Redraw requests travel through a one-slot queue. Ticks that arrive
before the host has drawn collapse into a single pending redraw.
"""

from __future__ import annotations

import queue
import threading
import time
from dataclasses import dataclass
from typing import Callable

import structlog

from .buffer import PixelBuffer
from .errors import SurfaceClosed

logger = structlog.get_logger(__name__)

DrawCallback = Callable[[PixelBuffer, float], None]


@dataclass(frozen=True)
class Frame:
    """Host frame a live surface is bound to, in screen pixels."""

    x: float
    y: float
    width: int
    height: int

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height


class TemporalSchedule:
    """Periodic timer that calls ``on_tick`` every ``interval`` seconds.

    ``stop()`` is idempotent and may be called from any thread, including
    the tick thread itself. When called from another thread it returns
    only after the timer thread has exited, so no tick fires afterwards.
    """

    def __init__(self, interval: float, on_tick: Callable[[], object], log=None):
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.interval = interval
        self._on_tick = on_tick
        self._log = log or logger
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self.tick_count = 0

    @property
    def running(self) -> bool:
        with self._lock:
            return self._thread is not None and not self._stop_event.is_set()

    def start(self) -> None:
        with self._lock:
            if self._thread is not None:
                return
            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._run,
                args=(self._stop_event,),
                name="waldo-temporal-schedule",
                daemon=True,
            )
            self._thread.start()
        self._log.debug("temporal_schedule_started", interval=self.interval)

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self.interval):
            self.tick_count += 1
            self._on_tick()

    def stop(self) -> bool:
        """Stop the timer.

        Returns:
            True if a running timer was stopped, False if it was already idle.
        """
        with self._lock:
            thread, self._thread = self._thread, None
            if thread is None:
                return False
            self._stop_event.set()

        if thread is not threading.current_thread():
            thread.join()
        self._log.debug("temporal_schedule_stopped", ticks=self.tick_count)
        return True


class LiveSurface:
    """A continuously redrawn overlay bound to a host frame.

    Args:
        frame: Host frame; its size fixes the backing buffer size.
        draw: Callback ``draw(buffer, time)`` filling a cleared buffer.
        clock: Monotonic clock in seconds, injectable for tests.
        log: structlog-style logger.
    """

    def __init__(
        self,
        frame: Frame,
        draw: DrawCallback,
        clock: Callable[[], float] = time.monotonic,
        log=None,
    ):
        self.frame = frame
        self._draw = draw
        self._clock = clock
        self._log = log or logger
        self._started_at = clock()
        self._buffer: PixelBuffer | None = PixelBuffer.allocate(frame.width, frame.height)
        self._redraws: queue.Queue[bool] = queue.Queue(maxsize=1)
        self._teardown: list[Callable[[], object]] = []
        self._lock = threading.Lock()
        self._closed = False
        self.draw_count = 0
        # First frame must be drawn
        self.invalidate()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def needs_display(self) -> bool:
        return not self._redraws.empty()

    def elapsed(self) -> float:
        """Seconds since the surface was created."""
        return self._clock() - self._started_at

    def invalidate(self) -> bool:
        """Request a redraw. Safe from any thread.

        Returns:
            True if a new request was queued, False if one was already
            pending or the surface is closed.
        """
        if self._closed:
            return False
        try:
            self._redraws.put_nowait(True)
        except queue.Full:
            return False
        return True

    def wait_for_redraw(self, timeout: float | None = 0.0) -> bool:
        """Consume a pending redraw request, waiting up to ``timeout`` seconds.

        ``timeout=None`` blocks until a request arrives.
        """
        try:
            if timeout == 0:
                self._redraws.get_nowait()
            else:
                self._redraws.get(timeout=timeout)
        except queue.Empty:
            return False
        return True

    def draw(self, into: PixelBuffer | None = None) -> PixelBuffer:
        """Redraw the overlay into ``into`` or the backing buffer.

        Raises:
            SurfaceClosed: If the surface has been torn down.
            ValueError: If ``into`` does not match the frame size.
        """
        with self._lock:
            if self._closed or self._buffer is None:
                raise SurfaceClosed("Cannot draw a closed surface")
            target = into if into is not None else self._buffer
            if target.size != self.frame.size:
                raise ValueError(f"Buffer size {target.size} does not match frame {self.frame.size}")
            target.clear()
            self._draw(target, self.elapsed())
            self.draw_count += 1
            return target

    def on_close(self, hook: Callable[[], object]) -> None:
        """Register a teardown hook, run before the backing buffer is released.

        On an already closed surface the hook runs immediately.
        """
        with self._lock:
            if not self._closed:
                self._teardown.append(hook)
                return
        hook()

    def remove_close_hook(self, hook: Callable[[], object]) -> bool:
        """Unregister a teardown hook. Returns False if it was not registered."""
        with self._lock:
            if hook not in self._teardown:
                return False
            self._teardown.remove(hook)
            return True

    def close(self) -> None:
        """Tear the surface down. Idempotent."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            hooks, self._teardown = self._teardown, []

        for hook in hooks:
            hook()

        with self._lock:
            self._buffer = None
        while self.wait_for_redraw(0):
            pass
        self._log.debug("live_surface_closed", draws=self.draw_count)

    def __enter__(self) -> LiveSurface:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
