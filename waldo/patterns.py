"""Luminance pattern functions for the luminous overlay.

Every variant is a pure function of ``(x, y, time)`` and the active
profile. The detector replays the same function for a candidate time
offset, so nothing here may read a clock or hold state.

Coordinates are logical cells within one tile, ``0 <= x, y < pattern_size``.
"""

from __future__ import annotations

import math
from enum import Enum

import numpy as np

from .constants import ConstantProfile
from .errors import UnsupportedVariant


class PatternVariant(str, Enum):
    """Luminance functions available to the luminous overlay."""

    UNIFORM = "uniform"
    GRADIENT = "gradient"
    CHECKERBOARD = "checkerboard"
    RADIAL = "radial"
    TEMPORAL = "temporal"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    PatternVariant.UNIFORM: "Uniform luminance across the screen",
    PatternVariant.GRADIENT: "Gradient luminance patterns",
    PatternVariant.CHECKERBOARD: "Checkerboard luminance pattern",
    PatternVariant.RADIAL: "Radial luminance pattern from center",
    PatternVariant.TEMPORAL: "Time-based flickering luminance pattern",
}


def select_variant(variant: PatternVariant | str) -> PatternVariant:
    """Resolve a variant enum member or name.

    Raises:
        UnsupportedVariant: If the name is not a known variant.
    """
    if isinstance(variant, PatternVariant):
        return variant
    try:
        return PatternVariant(str(variant).strip().lower())
    except ValueError:
        valid = ", ".join(v.value for v in PatternVariant)
        raise UnsupportedVariant(
            f"Unknown pattern variant '{variant}'. Valid variants: {valid}"
        ) from None


def _uniform(x: int, y: int, time: float, profile: ConstantProfile) -> float:
    return profile.base_luminance


def _gradient(x: int, y: int, time: float, profile: ConstantProfile) -> float:
    normalized_x = x / profile.luminance.pattern_size
    return profile.base_luminance + profile.luminance_delta * normalized_x


def _checkerboard(x: int, y: int, time: float, profile: ConstantProfile) -> float:
    checker = 1.0 if (x + y) % 2 == 0 else -1.0
    return profile.base_luminance + profile.luminance_delta * checker


def _radial(x: int, y: int, time: float, profile: ConstantProfile) -> float:
    center = profile.luminance.pattern_size / 2.0
    distance = math.hypot(x - center, y - center)
    max_distance = math.hypot(center, center)
    return profile.base_luminance + profile.luminance_delta * (distance / max_distance)


def _temporal(x: int, y: int, time: float, profile: ConstantProfile) -> float:
    geometry = profile.luminance
    flicker = math.sin(time * 2 * math.pi * geometry.flicker_frequency_hz)
    return profile.base_luminance + flicker * geometry.flicker_amplitude


_FUNCTIONS = {
    PatternVariant.UNIFORM: _uniform,
    PatternVariant.GRADIENT: _gradient,
    PatternVariant.CHECKERBOARD: _checkerboard,
    PatternVariant.RADIAL: _radial,
    PatternVariant.TEMPORAL: _temporal,
}


def luminance_for(
    variant: PatternVariant | str,
    x: int,
    y: int,
    time: float,
    profile: ConstantProfile,
) -> float:
    """Luminance of one logical pattern cell.

    Args:
        variant: Pattern variant (enum member or name).
        x: Cell column within the tile.
        y: Cell row within the tile.
        time: Seconds since the surface started (0 for static renders).
        profile: Active constant profile.

    Returns:
        Luminance in [0.0, 1.0].

    Raises:
        UnsupportedVariant: If the variant is not recognized.
    """
    func = _FUNCTIONS.get(select_variant(variant))
    if func is None:
        raise UnsupportedVariant(f"No luminance function for variant '{variant}'")
    return min(1.0, max(0.0, func(x, y, time, profile)))


def pattern_grid(
    variant: PatternVariant | str,
    time: float,
    profile: ConstantProfile,
) -> np.ndarray:
    """Luminance of every cell of one tile, indexed ``grid[y, x]``."""
    size = profile.luminance.pattern_size
    grid = np.empty((size, size), dtype=np.float64)
    for y in range(size):
        for x in range(size):
            grid[y, x] = luminance_for(variant, x, y, time, profile)
    return grid


def perceptual_luminance(red: float, green: float, blue: float, profile: ConstantProfile) -> float:
    """Weighted (Rec. 601) luminance of an RGB colour in [0, 1]."""
    wr, wg, wb = profile.luminance.luminance_weights
    return red * wr + green * wg + blue * wb


def adjust_for_background(
    luminance: float,
    background_luminance: float,
    profile: ConstantProfile,
) -> float:
    """Push a pattern luminance away from a background that is too close.

    When the contrast is below ``contrast_threshold`` the value moves away
    from the background (darker on light backgrounds, lighter on dark
    ones), clamped to the marker luminance range. Otherwise it is returned
    unchanged.
    """
    geometry = profile.luminance
    contrast = abs(luminance - background_luminance)
    if contrast >= geometry.contrast_threshold:
        return luminance

    adjustment = geometry.adaptive_adjustment_factor * (geometry.contrast_threshold - contrast)
    if background_luminance > 0.5:
        return max(luminance - adjustment, geometry.min_luminance)
    return min(luminance + adjustment, geometry.max_luminance)
