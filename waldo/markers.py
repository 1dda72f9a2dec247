"""Luminance gradient markers used to localize a recaptured overlay.

Each marker is a square made of ``gradient_steps`` vertical bands whose
luminance ramps linearly from ``min_luminance`` (left) to
``max_luminance`` (right). The detector finds the markers by that
monotonic slope, which survives partial occlusion and camera rotation.

Markers sit in the four corners by default. Strategies that already put
their own localization features in the corners (matrix codes) ask for the
edge layout instead: top/bottom centre and left/right middle.
"""

from __future__ import annotations

import structlog

from .buffer import PixelBuffer
from .constants import ConstantProfile

logger = structlog.get_logger(__name__)


def gradient_levels(profile: ConstantProfile) -> list[float]:
    """Luminance of each marker band, darkest first."""
    geometry = profile.luminance
    steps = geometry.gradient_steps
    span = geometry.max_luminance - geometry.min_luminance
    return [geometry.min_luminance + span * step / (steps - 1) for step in range(steps)]


def marker_positions(
    width: float,
    height: float,
    profile: ConstantProfile,
    avoid_corners: bool = False,
) -> list[tuple[float, float]]:
    """Top-left anchors of the four markers.

    Args:
        width: Surface width in pixels.
        height: Surface height in pixels.
        profile: Active constant profile.
        avoid_corners: Use the edge layout instead of the corners.

    Returns:
        Four (x, y) tuples.
    """
    marker = profile.luminance.corner_pattern_size
    margin = width * profile.luminance.margin_percentage

    if avoid_corners:
        return [
            (width / 2 - marker / 2, margin),
            (width / 2 - marker / 2, height - marker - margin),
            (margin, height / 2 - marker / 2),
            (width - marker - margin, height / 2 - marker / 2),
        ]

    return [
        (margin, margin),
        (width - marker - margin, margin),
        (margin, height - marker - margin),
        (width - marker - margin, height - marker - margin),
    ]


def draw_marker(
    buffer: PixelBuffer,
    x: float,
    y: float,
    opacity: int,
    profile: ConstantProfile,
) -> None:
    """Draw one gradient marker with its top-left corner at (x, y)."""
    size = profile.luminance.corner_pattern_size
    levels = gradient_levels(profile)
    band_width = size / len(levels)
    alpha = opacity / 255.0

    for step, luminance in enumerate(levels):
        buffer.fill_rect(
            x + step * band_width,
            y,
            band_width,
            size,
            (luminance, luminance, luminance, alpha),
        )


def place_markers(
    buffer: PixelBuffer,
    opacity: int,
    profile: ConstantProfile,
    avoid_corners: bool = False,
    log=None,
) -> list[tuple[float, float]]:
    """Draw all four markers, overwriting whatever lies beneath them.

    Returns:
        The marker anchors that were drawn.
    """
    log = log or logger
    positions = marker_positions(buffer.width, buffer.height, profile, avoid_corners)
    for x, y in positions:
        draw_marker(buffer, x, y, opacity, profile)

    log.debug(
        "luminous_markers_rendered",
        count=len(positions),
        placement="edge" if avoid_corners else "corner",
        width=buffer.width,
        height=buffer.height,
    )
    return positions
