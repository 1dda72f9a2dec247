"""Tests for luminance pattern functions."""

import math

import pytest

from waldo.constants import STANDARD_PROFILE
from waldo.errors import UnsupportedVariant
from waldo.patterns import (
    PatternVariant,
    adjust_for_background,
    luminance_for,
    pattern_grid,
    perceptual_luminance,
    select_variant,
)

BASE = 128 / 255
DELTA = 45 / 255


class TestLuminanceFor:
    def test_uniform_is_rgb_base(self):
        assert luminance_for(PatternVariant.UNIFORM, 0, 0, 0.0, STANDARD_PROFILE) == BASE
        assert luminance_for(PatternVariant.UNIFORM, 17, 9, 3.5, STANDARD_PROFILE) == BASE

    def test_gradient_increases_with_x(self):
        left = luminance_for("gradient", 0, 4, 0.0, STANDARD_PROFILE)
        right = luminance_for("gradient", 16, 4, 0.0, STANDARD_PROFILE)
        assert left == pytest.approx(BASE)
        assert right == pytest.approx(BASE + DELTA * 0.5)

    def test_checkerboard_alternates(self):
        even = luminance_for(PatternVariant.CHECKERBOARD, 0, 0, 0.0, STANDARD_PROFILE)
        odd = luminance_for(PatternVariant.CHECKERBOARD, 1, 0, 0.0, STANDARD_PROFILE)
        assert even == pytest.approx(173 / 255)
        assert odd == pytest.approx(83 / 255)

    def test_radial_center_and_corner(self):
        center = luminance_for(PatternVariant.RADIAL, 16, 16, 0.0, STANDARD_PROFILE)
        corner = luminance_for(PatternVariant.RADIAL, 0, 0, 0.0, STANDARD_PROFILE)
        assert center == pytest.approx(BASE)
        assert corner == pytest.approx(BASE + DELTA)

    def test_temporal_follows_flicker(self):
        # 2 Hz: a quarter period is 0.125 s
        at_zero = luminance_for(PatternVariant.TEMPORAL, 3, 3, 0.0, STANDARD_PROFILE)
        at_peak = luminance_for(PatternVariant.TEMPORAL, 3, 3, 0.125, STANDARD_PROFILE)
        at_trough = luminance_for(PatternVariant.TEMPORAL, 3, 3, 0.375, STANDARD_PROFILE)
        assert at_zero == pytest.approx(BASE)
        assert at_peak == pytest.approx(BASE + 0.05)
        assert at_trough == pytest.approx(BASE - 0.05)

    def test_deterministic(self):
        for variant in PatternVariant:
            first = luminance_for(variant, 7, 11, 1.234, STANDARD_PROFILE)
            second = luminance_for(variant, 7, 11, 1.234, STANDARD_PROFILE)
            assert first == second

    def test_range_for_all_variants(self):
        size = STANDARD_PROFILE.luminance.pattern_size
        for variant in PatternVariant:
            for t in (0.0, 0.1, 0.125, 0.37, 1.0):
                for y in range(0, size, 3):
                    for x in range(0, size, 3):
                        value = luminance_for(variant, x, y, t, STANDARD_PROFILE)
                        assert 0.0 <= value <= 1.0

    def test_clamped_to_unit_range(self):
        bright = STANDARD_PROFILE.with_overrides(rgb_base=250, rgb_delta=5, detection_threshold=1)
        value = luminance_for(PatternVariant.TEMPORAL, 0, 0, 0.125, bright)
        assert value == 1.0

    def test_accepts_variant_names(self):
        assert luminance_for("Checkerboard", 0, 0, 0.0, STANDARD_PROFILE) == luminance_for(
            PatternVariant.CHECKERBOARD, 0, 0, 0.0, STANDARD_PROFILE
        )

    def test_unknown_variant_raises(self):
        with pytest.raises(UnsupportedVariant, match="Unknown pattern variant"):
            luminance_for("spiral", 0, 0, 0.0, STANDARD_PROFILE)


class TestVariants:
    def test_all_variants_have_descriptions(self):
        for variant in PatternVariant:
            assert variant.description

    def test_select_variant_passthrough(self):
        assert select_variant(PatternVariant.RADIAL) is PatternVariant.RADIAL


class TestPatternGrid:
    def test_grid_shape(self):
        grid = pattern_grid(PatternVariant.UNIFORM, 0.0, STANDARD_PROFILE)
        assert grid.shape == (32, 32)

    def test_grid_is_row_major(self):
        grid = pattern_grid(PatternVariant.GRADIENT, 0.0, STANDARD_PROFILE)
        assert grid[0, 31] > grid[0, 0]
        assert grid[5, 3] == grid[0, 3]

    def test_grid_matches_luminance_for(self):
        grid = pattern_grid(PatternVariant.RADIAL, 0.0, STANDARD_PROFILE)
        assert grid[2, 9] == luminance_for(PatternVariant.RADIAL, 9, 2, 0.0, STANDARD_PROFILE)


class TestAdaptiveLuminance:
    def test_perceptual_white_is_one(self):
        assert perceptual_luminance(1.0, 1.0, 1.0, STANDARD_PROFILE) == pytest.approx(1.0)

    def test_perceptual_green_weighs_most(self):
        green = perceptual_luminance(0.0, 1.0, 0.0, STANDARD_PROFILE)
        red = perceptual_luminance(1.0, 0.0, 0.0, STANDARD_PROFILE)
        assert green > red

    def test_light_background_darkens(self):
        adjusted = adjust_for_background(0.5, 0.6, STANDARD_PROFILE)
        assert adjusted == pytest.approx(0.5 - 0.2 * (0.3 - 0.1))

    def test_dark_background_lightens(self):
        adjusted = adjust_for_background(0.5, 0.4, STANDARD_PROFILE)
        assert adjusted == pytest.approx(0.5 + 0.2 * (0.3 - 0.1))

    def test_enough_contrast_unchanged(self):
        assert adjust_for_background(0.5, 0.9, STANDARD_PROFILE) == 0.5

    def test_adjustment_is_finite(self):
        assert math.isfinite(adjust_for_background(0.5, 0.5, STANDARD_PROFILE))
