"""Error types for Waldo overlay rendering.

Parameter and lookup errors subclass ``ValueError`` so callers can treat
them like any other bad input. Each parameter error carries a stable
``code`` and the offending ``value``.
"""

from __future__ import annotations


class WatermarkError(Exception):
    """Base class for all Waldo rendering errors."""


class ParameterError(WatermarkError, ValueError):
    """A renderer parameter is outside its documented range."""

    code = "invalid_parameter"
    label = "parameter"
    bounds: tuple[int, int] = (0, 0)

    def __init__(self, value: object):
        self.value = value
        low, high = self.bounds
        super().__init__(f"Invalid {self.label}: {value} (must be {low}-{high})")


class InvalidOpacity(ParameterError):
    code = "invalid_opacity"
    label = "opacity"
    bounds = (1, 255)


class InvalidTileSize(ParameterError):
    code = "invalid_tile_size"
    label = "tile size"
    bounds = (50, 500)


class InvalidLineWidth(ParameterError):
    code = "invalid_line_width"
    label = "line width"
    bounds = (1, 10)


class SurfaceAllocationFailed(WatermarkError):
    """The backing pixel buffer could not be created."""

    code = "surface_allocation_failed"


class SurfaceClosed(WatermarkError):
    """A live surface was used after it was torn down."""

    code = "surface_closed"


class UnsupportedVariant(WatermarkError, ValueError):
    code = "unsupported_variant"


class UnknownStrategy(WatermarkError, ValueError):
    code = "unknown_strategy"


class UnsupportedStrategy(WatermarkError, ValueError):
    """The strategy is known but no renderer factory is registered for it."""

    code = "unsupported_strategy"


class ProfileError(WatermarkError, ValueError):
    """A constant profile is unknown or violates its invariants."""

    code = "invalid_profile"
