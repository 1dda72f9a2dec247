"""Decorative overlay: a tiled wireframe beagle labelled with the user name.

The pattern carries no luminance-encoded payload; it ties a capture to a
user by name and shows the renderer contract is not luminance-specific.
Tiles are built as SVG and rasterised with CairoSVG.

Stroke colour adapts to the background brightness:
- light background (> 0.5): 0.3 darker than the background
- dark background: 0.3 lighter than the background

With the secondary channel enabled, luminance markers are added in the
edge layout so they never land on corner features.
"""

from __future__ import annotations

import getpass
import io
import math
import numbers
from xml.sax.saxutils import escape

import structlog
from PIL import Image

from .buffer import PixelBuffer
from .constants import ConstantProfile
from .errors import InvalidLineWidth, InvalidTileSize
from .markers import place_markers
from .patterns import perceptual_luminance
from .renderer import OverlayRenderer, validate_opacity
from .strategies import OverlayStrategy

logger = structlog.get_logger(__name__)

DEFAULT_TILE_SIZE = 150
DEFAULT_LINE_WIDTH = 3
TILE_SIZE_RANGE = (50, 500)
LINE_WIDTH_RANGE = (1, 10)

# Outline drawn on a 150px reference tile, y pointing down
BASE_TILE = 150.0
_ELLIPSES = [
    (75.0, 50.0, 30.0, 30.0),  # head
    (45.0, 22.5, 10.0, 17.5),  # left ear
    (105.0, 22.5, 10.0, 17.5),  # right ear
    (75.0, 67.5, 10.0, 7.5),  # snout
    (63.0, 42.0, 3.0, 3.0),  # left eye
    (87.0, 42.0, 3.0, 3.0),  # right eye
    (75.0, 90.0, 20.0, 30.0),  # body
]
_NOSE = [(75.0, 65.0), (72.0, 72.0), (78.0, 72.0)]
_LEGS = [
    ((60.0, 110.0), (55.0, 140.0)),
    ((70.0, 110.0), (75.0, 140.0)),
    ((80.0, 115.0), (85.0, 140.0)),
    ((90.0, 115.0), (95.0, 140.0)),
]
_TAIL = ((95.0, 90.0), (105.0, 85.0), (110.0, 75.0), (115.0, 70.0))
_LABEL_BASELINE = 145.0
_LABEL_FONT_SIZE = 7.0


def _in_range(value: object, bounds: tuple[int, int]) -> bool:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        return False
    low, high = bounds
    return low <= value <= high


def adaptive_stroke_level(background_luminance: float, profile: ConstantProfile) -> float:
    """Gray level (0-1) of the outline for a uniform gray background."""
    brightness = perceptual_luminance(
        background_luminance, background_luminance, background_luminance, profile
    )
    if brightness > 0.5:
        return max(0.0, background_luminance - 0.3)
    return min(1.0, background_luminance + 0.3)


def _tile_group(
    tile_size: int,
    line_width: int,
    user_name: str,
    color: str,
    alpha: float,
) -> list[str]:
    """SVG elements of one tile, in tile-local pixel coordinates."""
    s = tile_size / BASE_TILE
    parts = [
        f'    <g id="beagle-tile" fill="none" stroke="{color}" stroke-opacity="{alpha:.4f}" '
        f'stroke-width="{line_width}" stroke-linecap="round" stroke-linejoin="round">'
    ]
    for cx, cy, rx, ry in _ELLIPSES:
        parts.append(
            f'      <ellipse cx="{cx * s:.2f}" cy="{cy * s:.2f}" '
            f'rx="{rx * s:.2f}" ry="{ry * s:.2f}"/>'
        )

    nose = " ".join(f"{x * s:.2f},{y * s:.2f}" for x, y in _NOSE)
    parts.append(f'      <polygon points="{nose}"/>')

    for (x1, y1), (x2, y2) in _LEGS:
        parts.append(
            f'      <line x1="{x1 * s:.2f}" y1="{y1 * s:.2f}" '
            f'x2="{x2 * s:.2f}" y2="{y2 * s:.2f}"/>'
        )

    (sx, sy), (c1x, c1y), (c2x, c2y), (ex, ey) = _TAIL
    parts.append(
        f'      <path d="M{sx * s:.2f},{sy * s:.2f} '
        f'C{c1x * s:.2f},{c1y * s:.2f} {c2x * s:.2f},{c2y * s:.2f} {ex * s:.2f},{ey * s:.2f}"/>'
    )

    parts.append(
        f'      <text x="{tile_size / 2:.2f}" y="{_LABEL_BASELINE * s:.2f}" '
        f'font-size="{_LABEL_FONT_SIZE * s:.2f}" font-family="sans-serif" '
        f'text-anchor="middle" stroke="none" fill="{color}" '
        f'fill-opacity="{alpha:.4f}" class="user-label">'
        f"{escape(user_name.upper())}</text>"
    )
    parts.append("    </g>")
    return parts


class DecorativeRenderer(OverlayRenderer):
    """Renderer for the ``beagle`` strategy.

    Args:
        profile: Active constant profile.
        tile_size: Tile side in pixels (50-500).
        line_width: Outline stroke width in pixels (1-10).
        user_name: Label drawn in every tile. Defaults to the login name.
        background_luminance: Assumed desktop brightness (0-1).
        log: structlog-style logger.
    """

    strategy = OverlayStrategy.DECORATIVE

    def __init__(
        self,
        profile: ConstantProfile,
        tile_size: int = DEFAULT_TILE_SIZE,
        line_width: int = DEFAULT_LINE_WIDTH,
        user_name: str | None = None,
        background_luminance: float = 0.9,
        log=None,
    ):
        super().__init__(profile, log)
        self.tile_size = tile_size
        self.line_width = line_width
        self.user_name = user_name if user_name is not None else getpass.getuser()
        self.background_luminance = background_luminance

    def set_tile_size(self, size: int) -> None:
        self.tile_size = size

    def set_line_width(self, width: int) -> None:
        self.line_width = width

    def validate_parameters(
        self,
        opacity: int,
        tile_size: int | None = None,
        line_width: int | None = None,
    ) -> None:
        """Check opacity, tile size and line width, in that order.

        Omitted knobs are taken from the renderer's current settings.

        Raises:
            InvalidOpacity: Opacity outside [1, 255].
            InvalidTileSize: Tile size outside [50, 500].
            InvalidLineWidth: Line width outside [1, 10].
        """
        validate_opacity(opacity)

        tile_size = self.tile_size if tile_size is None else tile_size
        if not _in_range(tile_size, TILE_SIZE_RANGE):
            raise InvalidTileSize(tile_size)

        line_width = self.line_width if line_width is None else line_width
        if not _in_range(line_width, LINE_WIDTH_RANGE):
            raise InvalidLineWidth(line_width)

    def render_svg(self, width: int, height: int, opacity: int) -> str:
        """Render the tiled outline as an SVG document.

        Raises:
            ParameterError: If a parameter is out of range.
        """
        self.validate_parameters(opacity)
        tiles_x = math.ceil(width / self.tile_size)
        tiles_y = math.ceil(height / self.tile_size)

        level = round(adaptive_stroke_level(self.background_luminance, self.profile) * 255)
        color = f"#{level:02x}{level:02x}{level:02x}"
        alpha = opacity / 255.0

        svg_parts: list[str] = [
            f'<svg xmlns="http://www.w3.org/2000/svg" '
            f'xmlns:xlink="http://www.w3.org/1999/xlink" '
            f'viewBox="0 0 {width} {height}" '
            f'width="{width}" height="{height}">',
            "  <defs>",
        ]
        svg_parts.extend(
            _tile_group(self.tile_size, self.line_width, self.user_name, color, alpha)
        )
        svg_parts.append("  </defs>")
        svg_parts.append('  <g class="beagle-tiles">')
        for ty in range(tiles_y):
            for tx in range(tiles_x):
                svg_parts.append(
                    f'    <use xlink:href="#beagle-tile" '
                    f'x="{tx * self.tile_size}" y="{ty * self.tile_size}"/>'
                )
        svg_parts.append("  </g>")
        svg_parts.append("</svg>")

        self._log.debug(
            "beagle_tiles_drawn",
            tiles_x=tiles_x,
            tiles_y=tiles_y,
            tile_size=self.tile_size,
            line_width=self.line_width,
        )
        return "\n".join(svg_parts)

    def draw(
        self,
        buffer: PixelBuffer,
        opacity: int,
        secondary_channel: bool,
        time: float,
    ) -> None:
        import cairosvg

        svg = self.render_svg(buffer.width, buffer.height, opacity)
        png_bytes = cairosvg.svg2png(
            bytestring=svg.encode("utf-8"),
            output_width=buffer.width,
            output_height=buffer.height,
        )
        with Image.open(io.BytesIO(png_bytes)) as layer:
            layer_buffer = PixelBuffer.from_image(layer)
        buffer.composite(layer_buffer.pixels)

        if secondary_channel:
            place_markers(buffer, opacity, self.profile, avoid_corners=True, log=self._log)
