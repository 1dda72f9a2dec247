"""Luminous overlay: tiled luminance pattern plus gradient corner markers.

Rendering algorithm:
1. Split the surface into tiles of ``luminance.pattern_tile_size`` pixels
2. Split each tile into a ``pattern_size x pattern_size`` grid of cells
3. Fill each cell with R=G=B=luminance_for(variant, x, y, time) and
   alpha = opacity / 255; tiles overhanging the edge are clipped
4. Draw the four corner markers last, on top of the pattern

With temporal patterns enabled, a live surface gets a timer that
requests a redraw every ``1 / flicker_frequency_hz`` seconds, so the
temporal variant is re-evaluated at the current surface time.
"""

from __future__ import annotations

import math
import threading
from functools import partial

import numpy as np
import structlog

from .buffer import PixelBuffer
from .constants import ConstantProfile
from .markers import place_markers
from .patterns import PatternVariant, adjust_for_background, pattern_grid, select_variant
from .renderer import OverlayRenderer
from .strategies import OverlayStrategy
from .surface import LiveSurface, TemporalSchedule

logger = structlog.get_logger(__name__)


def draw_pattern(
    buffer: PixelBuffer,
    variant: PatternVariant | str,
    opacity: int,
    time: float,
    profile: ConstantProfile,
    background_luminance: float | None = None,
    log=None,
) -> tuple[int, int]:
    """Tile the luminance pattern over the whole buffer.

    Returns:
        (tiles_x, tiles_y) drawn, counting clipped edge tiles.
    """
    log = log or logger
    tile = profile.luminance.pattern_tile_size
    cells = profile.luminance.pattern_size

    grid = pattern_grid(variant, time, profile)
    if background_luminance is not None:
        grid = np.array(
            [[adjust_for_background(v, background_luminance, profile) for v in row] for row in grid]
        )

    rows = (np.arange(buffer.height) % tile) * cells // tile
    cols = (np.arange(buffer.width) % tile) * cells // tile
    luminance = grid[np.ix_(rows, cols)]

    buffer.pixels[..., :3] = luminance[..., np.newaxis]
    buffer.pixels[..., 3] = opacity / 255.0

    tiles_x = math.ceil(buffer.width / tile)
    tiles_y = math.ceil(buffer.height / tile)
    log.debug(
        "luminous_tiles_drawn",
        tiles_x=tiles_x,
        tiles_y=tiles_y,
        variant=select_variant(variant).value,
        time=round(time, 3),
    )
    return tiles_x, tiles_y


class LuminanceRenderer(OverlayRenderer):
    """Renderer for the ``luminous`` strategy.

    Args:
        profile: Active constant profile.
        variant: Luminance pattern variant.
        temporal: Start the flicker schedule on live surfaces. Defaults to
            the profile's ``enable_temporal_patterns``.
        background_luminance: If set, cells too close to this background
            luminance are pushed away from it.
        log: structlog-style logger.
    """

    strategy = OverlayStrategy.LUMINANCE

    def __init__(
        self,
        profile: ConstantProfile,
        variant: PatternVariant | str = PatternVariant.UNIFORM,
        temporal: bool | None = None,
        background_luminance: float | None = None,
        log=None,
    ):
        super().__init__(profile, log)
        self.variant = select_variant(variant)
        if temporal is None:
            temporal = profile.luminance.enable_temporal_patterns
        self.temporal_enabled = temporal
        self.background_luminance = background_luminance
        self._schedule: TemporalSchedule | None = None
        self._schedule_hook = None
        self._schedule_lock = threading.Lock()

    @property
    def temporal_running(self) -> bool:
        with self._schedule_lock:
            return self._schedule is not None and self._schedule.running

    def set_variant(self, variant: PatternVariant | str) -> None:
        self.variant = select_variant(variant)
        if self._surface is not None:
            self._surface.invalidate()

    def draw(
        self,
        buffer: PixelBuffer,
        opacity: int,
        secondary_channel: bool,
        time: float,
    ) -> None:
        # Markers are drawn whatever the secondary channel flag says
        draw_pattern(
            buffer,
            self.variant,
            opacity,
            time,
            self.profile,
            background_luminance=self.background_luminance,
            log=self._log,
        )
        place_markers(buffer, opacity, self.profile, log=self._log)

    def _attach_surface(self, surface: LiveSurface) -> None:
        if self.temporal_enabled:
            self.start_temporal_pattern()

    def start_temporal_pattern(self) -> bool:
        """Start the flicker schedule for the current live surface.

        Returns:
            True if a schedule was started, False if one is already running
            or there is no open surface.
        """
        surface = self._surface
        if surface is None or surface.closed:
            return False

        with self._schedule_lock:
            if self._schedule is not None:
                return False
            interval = 1.0 / self.profile.luminance.flicker_frequency_hz
            schedule = TemporalSchedule(interval, surface.invalidate, log=self._log)
            hook = partial(self._stop_schedule, schedule)
            self._schedule = schedule
            self._schedule_hook = (surface, hook)

        schedule.start()
        # Runs the hook at once if the surface closed meanwhile
        surface.on_close(hook)
        return True

    def stop_temporal_pattern(self) -> None:
        """Stop the flicker schedule. Idempotent, callable from any thread."""
        with self._schedule_lock:
            schedule = self._schedule
        if schedule is not None:
            self._stop_schedule(schedule)

    def _stop_schedule(self, schedule: TemporalSchedule) -> None:
        registered = None
        with self._schedule_lock:
            if self._schedule is schedule:
                self._schedule = None
                registered, self._schedule_hook = self._schedule_hook, None
        if registered is not None:
            surface, hook = registered
            surface.remove_close_hook(hook)
        schedule.stop()

    def close(self) -> None:
        self.stop_temporal_pattern()
        super().close()
