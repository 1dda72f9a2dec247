"""Tests for the interactive overlay session."""

import dataclasses

import pytest

from waldo.constants import STANDARD_PROFILE
from waldo.errors import InvalidOpacity, InvalidTileSize
from waldo.session import OverlaySession
from waldo.surface import Frame

FRAME = Frame(0, 0, 200, 150)


@pytest.fixture
def session():
    session = OverlaySession(STANDARD_PROFILE)
    yield session
    session.stop()


class TestOverlaySession:
    def test_idle_status(self, session):
        status = session.status()
        assert status["active"] is False
        assert status["strategy"] is None
        assert status["profile"] == "standard"

    def test_start_luminous(self, session):
        surface = session.start("luminous", FRAME, 40)
        assert session.active
        assert session.surface is surface
        assert surface.draw().size == (200, 150)
        status = session.status()
        assert status["strategy"] == "luminous"
        assert status["frame"] == FRAME
        assert status["temporal"] is False

    def test_switch_closes_previous(self, session):
        first = session.start("luminous", FRAME, 40)
        second = session.start("beagle", FRAME, 40, user_name="tester")
        assert first.closed
        assert not second.closed
        assert session.status()["strategy"] == "beagle"

    def test_invalid_start_keeps_previous(self, session):
        surface = session.start("luminous", FRAME, 40)
        with pytest.raises(InvalidOpacity):
            session.start("beagle", FRAME, 0, user_name="tester")
        with pytest.raises(InvalidTileSize):
            session.start("beagle", FRAME, 40, tile_size=20, user_name="tester")
        assert not surface.closed
        assert session.status()["strategy"] == "luminous"

    def test_stop(self, session):
        surface = session.start("luminous", FRAME, 40)
        assert session.stop() is True
        assert session.stop() is False
        assert surface.closed
        assert not session.active

    def test_stop_halts_temporal_schedule(self):
        geometry = dataclasses.replace(
            STANDARD_PROFILE.luminance,
            flicker_frequency_hz=50.0,
            enable_temporal_patterns=True,
        )
        session = OverlaySession(STANDARD_PROFILE.with_overrides(luminance=geometry))
        session.start("luminous", FRAME, 40, variant="temporal")
        renderer = session.renderer
        assert session.status()["temporal"] is True
        session.stop()
        assert renderer.temporal_running is False
