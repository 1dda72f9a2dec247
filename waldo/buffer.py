"""RGBA pixel buffer used as the drawing target of every overlay.

The canvas is an ``(height, width, 4)`` float64 array of straight
(non-premultiplied) RGBA in [0, 1], origin at the top-left. Exports to
8-bit premultiplied RGBA, Pillow images and PNG bytes. Dimensions are
never scaled: what was requested is what comes out.
"""

from __future__ import annotations

import io
import math
import numbers

import numpy as np
import structlog
from PIL import Image

from .errors import SurfaceAllocationFailed

logger = structlog.get_logger(__name__)


class PixelBuffer:
    """A drawable RGBA canvas with clipped rectangle fills."""

    def __init__(self, pixels: np.ndarray):
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise ValueError(f"Expected an (h, w, 4) array, got shape {pixels.shape}")
        self.pixels = pixels

    @classmethod
    def allocate(cls, width: int, height: int) -> PixelBuffer:
        """Create a fully transparent canvas.

        Raises:
            SurfaceAllocationFailed: If the size is not a positive integer
                pair or the memory cannot be reserved.
        """
        if isinstance(width, bool) or isinstance(height, bool):
            raise SurfaceAllocationFailed(f"Invalid surface size: {width}x{height}")
        if not isinstance(width, numbers.Integral) or not isinstance(height, numbers.Integral):
            raise SurfaceAllocationFailed(f"Surface size must be integral, got {width}x{height}")
        if width <= 0 or height <= 0:
            raise SurfaceAllocationFailed(f"Surface size must be positive, got {width}x{height}")
        try:
            pixels = np.zeros((height, width, 4), dtype=np.float64)
        except MemoryError as e:
            logger.error("surface_allocation_failed", width=width, height=height)
            raise SurfaceAllocationFailed(
                f"Could not allocate {width}x{height} surface"
            ) from e
        return cls(pixels)

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def size(self) -> tuple[int, int]:
        """(width, height) in pixels."""
        return self.width, self.height

    def clear(self) -> None:
        self.pixels.fill(0.0)

    def _span(self, start: float, length: float, limit: int) -> tuple[int, int]:
        # A pixel is covered when its centre lies inside [start, start + length)
        lo = math.ceil(start - 0.5)
        hi = math.ceil(start + length - 0.5)
        return max(0, lo), min(limit, hi)

    def fill_rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        rgba: tuple[float, float, float, float],
    ) -> int:
        """Overwrite a rectangle with a colour, clipped to the canvas.

        Returns:
            Number of pixels written.
        """
        x0, x1 = self._span(x, width, self.width)
        y0, y1 = self._span(y, height, self.height)
        if x0 >= x1 or y0 >= y1:
            return 0
        self.pixels[y0:y1, x0:x1] = rgba
        return (x1 - x0) * (y1 - y0)

    def composite(self, layer: np.ndarray) -> None:
        """Source-over composite a straight-alpha float layer onto the canvas."""
        if layer.shape != self.pixels.shape:
            raise ValueError(f"Layer shape {layer.shape} does not match canvas {self.pixels.shape}")
        src_a = layer[..., 3:4]
        dst_a = self.pixels[..., 3:4]
        out_a = src_a + dst_a * (1.0 - src_a)
        weighted = layer[..., :3] * src_a + self.pixels[..., :3] * dst_a * (1.0 - src_a)
        out_rgb = np.divide(weighted, out_a, out=np.zeros_like(weighted), where=out_a > 0)
        self.pixels[..., :3] = out_rgb
        self.pixels[..., 3:4] = out_a

    def to_rgba8(self, premultiplied: bool = True) -> np.ndarray:
        """Export as an ``(h, w, 4)`` uint8 array."""
        rgba = np.clip(self.pixels, 0.0, 1.0)
        if premultiplied:
            rgba = np.concatenate([rgba[..., :3] * rgba[..., 3:4], rgba[..., 3:4]], axis=2)
        return np.rint(rgba * 255.0).astype(np.uint8)

    def to_image(self) -> Image.Image:
        """Export as a straight-alpha Pillow RGBA image."""
        return Image.fromarray(self.to_rgba8(premultiplied=False))

    def to_png(self) -> bytes:
        out = io.BytesIO()
        self.to_image().save(out, format="PNG")
        png_bytes = out.getvalue()
        logger.debug("png_exported", width=self.width, height=self.height, bytes=len(png_bytes))
        return png_bytes

    @classmethod
    def from_image(cls, image: Image.Image) -> PixelBuffer:
        """Load a Pillow image (any mode) as a straight-alpha canvas."""
        rgba = np.asarray(image.convert("RGBA"), dtype=np.float64) / 255.0
        return cls(rgba.copy())
