"""Strategy selector: maps an overlay strategy to a fresh renderer.

Only the luminous and decorative strategies ship here. Matrix-code,
steganographic and hybrid encoders are plugged in by their own packages
through ``register_renderer``.
"""

from __future__ import annotations

from typing import Callable

import structlog

from .constants import ConstantProfile
from .decorative import DecorativeRenderer
from .errors import UnsupportedStrategy
from .luminance import LuminanceRenderer
from .renderer import OverlayRenderer
from .strategies import OverlayStrategy

logger = structlog.get_logger(__name__)

RendererFactory = Callable[..., OverlayRenderer]

_FACTORIES: dict[OverlayStrategy, RendererFactory] = {
    OverlayStrategy.LUMINANCE: LuminanceRenderer,
    OverlayStrategy.DECORATIVE: DecorativeRenderer,
}


def _resolve(strategy: OverlayStrategy | str) -> OverlayStrategy:
    if isinstance(strategy, OverlayStrategy):
        return strategy
    return OverlayStrategy.from_string(strategy)


def register_renderer(strategy: OverlayStrategy | str, factory: RendererFactory) -> None:
    """Register the factory for a strategy, replacing any previous one.

    The factory is called as ``factory(profile, **options)``.
    """
    resolved = _resolve(strategy)
    _FACTORIES[resolved] = factory
    logger.debug("renderer_registered", strategy=resolved.value)


def unregister_renderer(strategy: OverlayStrategy | str) -> None:
    _FACTORIES.pop(_resolve(strategy), None)


def available_strategies() -> list[OverlayStrategy]:
    """Strategies that currently have a renderer factory, in declaration order."""
    return [s for s in OverlayStrategy if s in _FACTORIES]


def for_strategy(
    strategy: OverlayStrategy | str,
    profile: ConstantProfile,
    **options: object,
) -> OverlayRenderer:
    """Create a new renderer for a strategy.

    Every call returns an independent instance, so callers never share
    live surfaces or timers.

    Args:
        strategy: Strategy enum member or identifier (e.g. "luminous").
        profile: Constant profile the renderer embeds with.
        **options: Strategy-specific constructor options.

    Raises:
        UnknownStrategy: If the identifier names no strategy.
        UnsupportedStrategy: If no factory is registered for the strategy.
    """
    resolved = _resolve(strategy)
    factory = _FACTORIES.get(resolved)
    if factory is None:
        available = ", ".join(s.value for s in available_strategies())
        raise UnsupportedStrategy(
            f"No renderer registered for '{resolved.value}'. Available: {available}"
        )
    renderer = factory(profile, **options)
    logger.debug("renderer_created", strategy=resolved.value, profile=profile.name)
    return renderer
