"""Constant profiles shared by overlay embedding and recapture detection.

A profile is the numeric contract between the renderer that puts a
watermark on screen and the detector that later reads it back from a
photograph. Both sides must use the same profile for a round trip;
mixing profiles cannot be detected at runtime and simply makes decoding
fail.

Two tuning generations exist:

- ``standard``: RGB delta 45, detection threshold 25, photo confidence 0.6.
  Tuned for phone cameras pointed at a screen.
- ``sensitive``: RGB delta 65, detection threshold 35, photo confidence 0.3,
  more sensitive adaptive multipliers. Tuned for compressed desktop
  captures.

No default profile is exposed: callers pick one by name.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace

from .errors import ProfileError


@dataclass(frozen=True)
class LuminanceGeometry:
    """Luminance pattern and marker geometry.

    Attributes:
        min_luminance: Darkest marker band (0-1).
        max_luminance: Brightest marker band (0-1).
        pattern_tile_size: Pixels per luminous pattern tile.
        pattern_size: Logical cells per tile side.
        gradient_steps: Bands per corner marker.
        flicker_frequency_hz: Temporal pattern rate.
        flicker_amplitude: Peak luminance swing of the temporal pattern.
        enable_temporal_patterns: Start the flicker schedule on live surfaces.
        contrast_threshold: Minimum pattern/background contrast before
            adaptive adjustment kicks in.
        adaptive_adjustment_factor: Strength of the adaptive adjustment.
        margin_percentage: Marker margin as a fraction of surface width.
        corner_pattern_size: Marker side length in pixels.
        center_pattern_size: Centre pattern side length in pixels.
        luminance_weights: Perceptual (r, g, b) weights.
    """

    min_luminance: float = 0.1
    max_luminance: float = 0.9
    pattern_tile_size: int = 64
    pattern_size: int = 32
    gradient_steps: int = 8
    flicker_frequency_hz: float = 2.0
    flicker_amplitude: float = 0.05
    enable_temporal_patterns: bool = False
    contrast_threshold: float = 0.3
    adaptive_adjustment_factor: float = 0.2
    margin_percentage: float = 0.05
    corner_pattern_size: float = 100.0
    center_pattern_size: float = 200.0
    luminance_weights: tuple[float, float, float] = (0.299, 0.587, 0.114)

    def __post_init__(self) -> None:
        if not 0.0 <= self.min_luminance < self.max_luminance <= 1.0:
            raise ProfileError(
                f"Luminance range must satisfy 0 <= min < max <= 1, "
                f"got {self.min_luminance}..{self.max_luminance}"
            )
        if self.pattern_tile_size < 1:
            raise ProfileError(f"pattern_tile_size must be >= 1, got {self.pattern_tile_size}")
        if self.pattern_size < 1:
            raise ProfileError(f"pattern_size must be >= 1, got {self.pattern_size}")
        if self.gradient_steps < 2:
            raise ProfileError(f"gradient_steps must be >= 2, got {self.gradient_steps}")
        if self.flicker_frequency_hz <= 0:
            raise ProfileError(
                f"flicker_frequency_hz must be positive, got {self.flicker_frequency_hz}"
            )
        if self.corner_pattern_size <= 0:
            raise ProfileError(
                f"corner_pattern_size must be positive, got {self.corner_pattern_size}"
            )


_U8_FIELDS = (
    "rgb_base",
    "rgb_delta",
    "alpha_opacity",
    "detection_threshold",
    "detection_tolerance",
    "qr_binary_threshold",
)


@dataclass(frozen=True)
class ConstantProfile:
    """A versioned set of embedding and detection parameters.

    Attributes:
        name: Profile name used for selection.
        version: Tuning generation.
        rgb_base: Base RGB value of pattern pixels (0-bits).
        rgb_delta: Added to ``rgb_base`` for 1-bits.
        alpha_opacity: Default overlay opacity (0-255).
        pattern_tile_size: Pixels per payload block (steganography, ROI).
        detection_threshold: Minimum delta the detector accepts as signal.
        detection_tolerance: Pixel tolerance for pattern matching.
        photo_confidence_threshold: Minimum confidence for a photo match.
        variance_threshold: Splits smooth from noisy recaptures.
        smooth_image_multiplier: Threshold multiplier for smooth images.
        noisy_image_multiplier: Threshold multiplier for noisy images.
        window_level_offset: Overlay layer relative to normal windows.
        luminance: Luminance pattern and marker geometry.
    """

    name: str
    version: int
    rgb_base: int
    rgb_delta: int
    alpha_opacity: int
    pattern_tile_size: int
    detection_threshold: int
    detection_tolerance: int
    photo_confidence_threshold: float
    variance_threshold: float
    smooth_image_multiplier: float
    noisy_image_multiplier: float
    window_level_offset: int = 1
    # Matrix-code geometry (version 2 codes, 37x37 modules)
    qr_binary_threshold: int = 127
    qr_threshold_sample_radius: int = 5
    qr_finder_pattern_tolerance: float = 0.8
    qr_version2_size: int = 37
    qr_version2_pixels_per_module: int = 5
    qr_version2_margin: int = 15
    qr_version2_menu_bar_offset: int = 50
    luminance: LuminanceGeometry = field(default_factory=LuminanceGeometry)

    def __post_init__(self) -> None:
        for name in _U8_FIELDS:
            value = getattr(self, name)
            if not 0 <= value <= 255:
                raise ProfileError(f"{name} must be 0-255, got {value}")
        # Detection threshold must stay below the 1-bit signal
        if self.detection_threshold >= self.rgb_delta:
            raise ProfileError(
                f"detection_threshold ({self.detection_threshold}) must be "
                f"less than rgb_delta ({self.rgb_delta})"
            )
        if self.rgb_base + self.rgb_delta > 255:
            raise ProfileError(
                f"rgb_base + rgb_delta must be <= 255, got {self.rgb_base + self.rgb_delta}"
            )
        if self.pattern_tile_size < 1:
            raise ProfileError(f"pattern_tile_size must be >= 1, got {self.pattern_tile_size}")

    @property
    def rgb_high(self) -> int:
        """RGB value for 1-bits."""
        return self.rgb_base + self.rgb_delta

    @property
    def rgb_low(self) -> int:
        """RGB value for 0-bits."""
        return self.rgb_base

    @property
    def base_luminance(self) -> float:
        return self.rgb_base / 255.0

    @property
    def luminance_delta(self) -> float:
        return self.rgb_delta / 255.0

    @property
    def qr_version2_pixel_size(self) -> int:
        return self.qr_version2_size * self.qr_version2_pixels_per_module

    def with_overrides(self, **overrides: object) -> ConstantProfile:
        """Return a copy with individual fields replaced.

        Every invariant is checked again on the new profile, so an external
        configuration loader cannot break ``detection_threshold < rgb_delta``.

        Raises:
            ProfileError: If a field is unknown or an invariant fails.
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise ProfileError(f"Unknown profile fields: {', '.join(unknown)}")
        return replace(self, **overrides)

    def summary(self) -> dict[str, object]:
        """Key values of the profile, for status output."""
        return {
            "version": self.version,
            "rgb_base": self.rgb_base,
            "rgb_delta": self.rgb_delta,
            "alpha_opacity": self.alpha_opacity,
            "pattern_tile_size": self.pattern_tile_size,
            "detection_threshold": self.detection_threshold,
            "photo_confidence_threshold": self.photo_confidence_threshold,
        }


STANDARD_PROFILE = ConstantProfile(
    name="standard",
    version=1,
    rgb_base=128,
    rgb_delta=45,
    alpha_opacity=40,
    pattern_tile_size=128,
    detection_threshold=25,
    detection_tolerance=20,
    photo_confidence_threshold=0.6,
    variance_threshold=400.0,
    smooth_image_multiplier=0.5,
    noisy_image_multiplier=1.0,
)

SENSITIVE_PROFILE = ConstantProfile(
    name="sensitive",
    version=2,
    rgb_base=128,
    rgb_delta=65,
    alpha_opacity=40,
    pattern_tile_size=128,
    detection_threshold=35,
    detection_tolerance=20,
    photo_confidence_threshold=0.3,
    variance_threshold=400.0,
    smooth_image_multiplier=0.3,
    noisy_image_multiplier=0.7,
)

PROFILES: dict[str, ConstantProfile] = {p.name: p for p in (STANDARD_PROFILE, SENSITIVE_PROFILE)}


def select_profile(name: str) -> ConstantProfile:
    """Select a constant profile by name.

    Args:
        name: Profile name (standard, sensitive).

    Returns:
        The matching ConstantProfile.

    Raises:
        ProfileError: If name is not recognized.
    """
    key = name.strip().lower()
    if key not in PROFILES:
        valid = ", ".join(PROFILES.keys())
        raise ProfileError(f"Unknown profile '{name}'. Valid profiles: {valid}")
    return PROFILES[key]
