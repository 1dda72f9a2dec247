"""Renderer contract shared by every overlay strategy.

A renderer produces either a one-shot raster (``render_image``, used for
export and tests) or a live surface bound to a host frame
(``create_live_surface``). Both paths validate parameters before any
allocation or drawing and then delegate to the strategy's ``draw``.
"""

from __future__ import annotations

import numbers
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable

import structlog

from .buffer import PixelBuffer
from .constants import ConstantProfile
from .errors import InvalidOpacity
from .strategies import OverlayStrategy
from .surface import Frame, LiveSurface

logger = structlog.get_logger(__name__)


def validate_opacity(opacity: int) -> None:
    """Opacity must be an integer in [1, 255].

    Raises:
        InvalidOpacity: If the value is out of range or not an integer.
    """
    if isinstance(opacity, bool) or not isinstance(opacity, numbers.Integral):
        raise InvalidOpacity(opacity)
    if not 1 <= opacity <= 255:
        raise InvalidOpacity(opacity)


class OverlayRenderer(ABC):
    """Base class for overlay strategies.

    Subclasses set ``strategy`` and implement ``draw``. They may extend
    ``validate_parameters`` with their own knobs and override
    ``_attach_surface`` to start per-surface machinery such as timers.
    """

    strategy: OverlayStrategy

    def __init__(self, profile: ConstantProfile, log=None):
        if not isinstance(profile, ConstantProfile):
            raise TypeError(f"profile must be a ConstantProfile, got {type(profile).__name__}")
        self.profile = profile
        self._log = log or logger
        self._surface: LiveSurface | None = None

    @property
    def requires_watermark_data(self) -> bool:
        return self.strategy.supports_data_embedding

    @property
    def live_surface(self) -> LiveSurface | None:
        return self._surface

    def validate_parameters(self, opacity: int) -> None:
        validate_opacity(opacity)

    @abstractmethod
    def draw(
        self,
        buffer: PixelBuffer,
        opacity: int,
        secondary_channel: bool,
        time: float,
    ) -> None:
        """Draw the overlay into a cleared buffer."""

    def render_image(
        self,
        width: int,
        height: int,
        opacity: int,
        secondary_channel: bool = False,
    ) -> PixelBuffer:
        """Render the overlay into a new buffer of exactly ``width x height``.

        Raises:
            ParameterError: If a parameter is out of range.
            SurfaceAllocationFailed: If the buffer cannot be created.
        """
        self.validate_parameters(opacity)
        buffer = PixelBuffer.allocate(width, height)
        self._log.debug(
            "rendering_overlay_image",
            strategy=self.strategy.value,
            width=width,
            height=height,
            secondary_channel=secondary_channel,
        )
        self.draw(buffer, opacity, secondary_channel, 0.0)
        return buffer

    def create_live_surface(
        self,
        frame: Frame,
        opacity: int,
        secondary_channel: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ) -> LiveSurface:
        """Create a live surface for ``frame``, replacing any previous one."""
        self.validate_parameters(opacity)
        self.close()

        def draw(buffer: PixelBuffer, elapsed: float) -> None:
            self.draw(buffer, opacity, secondary_channel, elapsed)

        surface = LiveSurface(frame, draw, clock=clock, log=self._log)
        self._log.debug(
            "creating_live_surface",
            strategy=self.strategy.value,
            frame=frame,
            secondary_channel=secondary_channel,
        )
        self._surface = surface
        self._attach_surface(surface)
        return surface

    def _attach_surface(self, surface: LiveSurface) -> None:
        pass

    def close(self) -> None:
        """Tear down the live surface owned by this renderer, if any."""
        surface, self._surface = self._surface, None
        if surface is not None:
            surface.close()


@dataclass(frozen=True)
class RenderRequest:
    """One render call: a raster export, or a live surface when ``frame`` is set."""

    width: int
    height: int
    opacity: int
    secondary_channel: bool = False
    frame: Frame | None = None

    def render(self, renderer: OverlayRenderer) -> PixelBuffer | LiveSurface:
        if self.frame is not None:
            return renderer.create_live_surface(self.frame, self.opacity, self.secondary_channel)
        return renderer.render_image(self.width, self.height, self.opacity, self.secondary_channel)
