"""Tests for strategy identifiers and the renderer selector."""

import pytest

from waldo.constants import SENSITIVE_PROFILE, STANDARD_PROFILE
from waldo.decorative import DecorativeRenderer
from waldo.errors import UnknownStrategy, UnsupportedStrategy
from waldo.luminance import LuminanceRenderer
from waldo.selector import (
    available_strategies,
    for_strategy,
    register_renderer,
    unregister_renderer,
)
from waldo.strategies import OverlayStrategy


class TestOverlayStrategy:
    def test_identifiers(self):
        assert [s.value for s in OverlayStrategy] == [
            "qr",
            "luminous",
            "steganography",
            "hybrid",
            "beagle",
        ]

    def test_default_is_hybrid(self):
        assert OverlayStrategy.default() is OverlayStrategy.HYBRID

    def test_from_string(self):
        assert OverlayStrategy.from_string(" LUMINOUS ") is OverlayStrategy.LUMINANCE
        assert OverlayStrategy.from_string("beagle") is OverlayStrategy.DECORATIVE

    def test_from_string_unknown(self):
        with pytest.raises(UnknownStrategy, match="Invalid overlay type"):
            OverlayStrategy.from_string("laser")

    def test_only_steganography_is_invisible(self):
        assert [s for s in OverlayStrategy if not s.is_visible] == [OverlayStrategy.STEGANOGRAPHY]

    def test_data_embedding(self):
        assert OverlayStrategy.MATRIX_CODE.supports_data_embedding
        assert OverlayStrategy.HYBRID.supports_data_embedding
        assert not OverlayStrategy.LUMINANCE.supports_data_embedding
        assert not OverlayStrategy.DECORATIVE.supports_data_embedding

    def test_descriptions(self):
        for strategy in OverlayStrategy:
            assert strategy.description


class TestForStrategy:
    def test_luminous(self):
        renderer = for_strategy(OverlayStrategy.LUMINANCE, STANDARD_PROFILE)
        assert isinstance(renderer, LuminanceRenderer)
        assert renderer.profile is STANDARD_PROFILE

    def test_by_identifier(self):
        renderer = for_strategy("beagle", SENSITIVE_PROFILE, user_name="x")
        assert isinstance(renderer, DecorativeRenderer)
        assert renderer.profile is SENSITIVE_PROFILE

    def test_fresh_instance_each_call(self):
        first = for_strategy("luminous", STANDARD_PROFILE)
        second = for_strategy("luminous", STANDARD_PROFILE)
        assert first is not second

    def test_options_forwarded(self):
        renderer = for_strategy("beagle", STANDARD_PROFILE, tile_size=200, user_name="x")
        assert renderer.tile_size == 200

    def test_unregistered_strategy(self):
        with pytest.raises(UnsupportedStrategy, match="No renderer registered for 'qr'"):
            for_strategy("qr", STANDARD_PROFILE)

    def test_unsupported_is_value_error(self):
        with pytest.raises(ValueError):
            for_strategy(OverlayStrategy.STEGANOGRAPHY, STANDARD_PROFILE)

    def test_unknown_strategy(self):
        with pytest.raises(UnknownStrategy):
            for_strategy("laser", STANDARD_PROFILE)

    def test_profile_required(self):
        with pytest.raises(TypeError):
            for_strategy("luminous", "standard")

    def test_available(self):
        assert available_strategies() == [OverlayStrategy.LUMINANCE, OverlayStrategy.DECORATIVE]


class TestRegistry:
    def test_register_plugs_in_strategy(self):
        class HybridRenderer(LuminanceRenderer):
            strategy = OverlayStrategy.HYBRID

        register_renderer("hybrid", HybridRenderer)
        try:
            renderer = for_strategy(OverlayStrategy.HYBRID, STANDARD_PROFILE)
            assert isinstance(renderer, HybridRenderer)
            assert renderer.requires_watermark_data
            assert OverlayStrategy.HYBRID in available_strategies()
        finally:
            unregister_renderer("hybrid")

        with pytest.raises(UnsupportedStrategy):
            for_strategy("hybrid", STANDARD_PROFILE)

    def test_unregister_missing_is_noop(self):
        unregister_renderer(OverlayStrategy.MATRIX_CODE)
        assert OverlayStrategy.MATRIX_CODE not in available_strategies()
