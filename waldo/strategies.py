"""Overlay strategy identifiers.

The string values are the identifiers used on the command line and in
the HTTP API.
"""

from __future__ import annotations

from enum import Enum

from .errors import UnknownStrategy


class OverlayStrategy(str, Enum):
    MATRIX_CODE = "qr"
    LUMINANCE = "luminous"
    STEGANOGRAPHY = "steganography"
    HYBRID = "hybrid"
    DECORATIVE = "beagle"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]

    @property
    def is_visible(self) -> bool:
        return self is not OverlayStrategy.STEGANOGRAPHY

    @property
    def supports_data_embedding(self) -> bool:
        return self in (
            OverlayStrategy.MATRIX_CODE,
            OverlayStrategy.STEGANOGRAPHY,
            OverlayStrategy.HYBRID,
        )

    @classmethod
    def from_string(cls, text: str) -> OverlayStrategy:
        """Parse a strategy identifier.

        Raises:
            UnknownStrategy: If the text names no strategy.
        """
        try:
            return cls(text.strip().lower())
        except ValueError:
            valid = ", ".join(s.value for s in cls)
            raise UnknownStrategy(
                f"Invalid overlay type '{text}'. Valid types: {valid}"
            ) from None

    @classmethod
    def default(cls) -> OverlayStrategy:
        return cls.HYBRID


_DESCRIPTIONS = {
    OverlayStrategy.MATRIX_CODE: "QR Code overlay with corner positioning",
    OverlayStrategy.LUMINANCE: "Luminous corner markers for enhanced camera detection and calibration",
    OverlayStrategy.STEGANOGRAPHY: "LSB steganography overlay (invisible pixel-level embedding)",
    OverlayStrategy.HYBRID: "Hybrid overlay combining QR codes, RGB patterns, and steganography",
    OverlayStrategy.DECORATIVE: "Wireframe beagle overlay tied to the current user",
}
