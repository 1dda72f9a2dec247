"""Interactive overlay session: one active renderer and live surface."""

from __future__ import annotations

import threading

import structlog

from .constants import ConstantProfile
from .luminance import LuminanceRenderer
from .renderer import OverlayRenderer
from .selector import for_strategy
from .strategies import OverlayStrategy
from .surface import Frame, LiveSurface

logger = structlog.get_logger(__name__)


class OverlaySession:
    """Keeps the active overlay for a host and switches strategies.

    Starting a new strategy tears the previous renderer down first, which
    stops its temporal schedule before its surface is released.
    """

    def __init__(self, profile: ConstantProfile, log=None):
        self.profile = profile
        self._log = log or logger
        self._lock = threading.Lock()
        self._renderer: OverlayRenderer | None = None
        self._surface: LiveSurface | None = None

    @property
    def active(self) -> bool:
        return self._surface is not None and not self._surface.closed

    @property
    def renderer(self) -> OverlayRenderer | None:
        return self._renderer

    @property
    def surface(self) -> LiveSurface | None:
        return self._surface

    def start(
        self,
        strategy: OverlayStrategy | str,
        frame: Frame,
        opacity: int,
        secondary_channel: bool = False,
        **options: object,
    ) -> LiveSurface:
        """Start (or switch to) a strategy on ``frame``."""
        renderer = for_strategy(strategy, self.profile, **options)
        renderer.validate_parameters(opacity)

        with self._lock:
            previous = self._renderer
            self._renderer = None
            self._surface = None
        if previous is not None:
            previous.close()
            self._log.info("overlay_strategy_switched", previous=previous.strategy.value)

        surface = renderer.create_live_surface(frame, opacity, secondary_channel)
        with self._lock:
            self._renderer = renderer
            self._surface = surface
        self._log.info(
            "overlay_started",
            strategy=renderer.strategy.value,
            profile=self.profile.name,
            width=frame.width,
            height=frame.height,
        )
        return surface

    def stop(self) -> bool:
        """Stop the active overlay. Returns False if nothing was running."""
        with self._lock:
            renderer, self._renderer = self._renderer, None
            self._surface = None
        if renderer is None:
            return False
        renderer.close()
        self._log.info("overlay_stopped", strategy=renderer.strategy.value)
        return True

    def status(self) -> dict[str, object]:
        renderer = self._renderer
        surface = self._surface
        temporal = isinstance(renderer, LuminanceRenderer) and renderer.temporal_running
        return {
            "active": self.active,
            "strategy": renderer.strategy.value if renderer else None,
            "profile": self.profile.name,
            "frame": surface.frame if surface else None,
            "temporal": temporal,
        }
