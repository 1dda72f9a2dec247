"""Tests for Waldo FastAPI endpoints."""

import io

from fastapi.testclient import TestClient
from PIL import Image

from waldo.main import app

client = TestClient(app)


class TestHealthEndpoint:
    def test_health_returns_200(self):
        resp = client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "healthy"
        assert data["service"] == "waldo"

    def test_health_includes_version(self):
        resp = client.get("/health")
        assert resp.json()["version"] == "3.0.0"


class TestRenderEndpoint:
    def test_render_luminous_png(self):
        resp = client.post(
            "/render",
            json={"strategy": "luminous", "profile": "standard", "width": 128, "height": 96},
        )
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "image/png"
        assert resp.content[:4] == b"\x89PNG"
        img = Image.open(io.BytesIO(resp.content))
        assert img.size == (128, 96)

    def test_render_with_variant(self):
        resp = client.post(
            "/render",
            json={
                "profile": "sensitive",
                "width": 64,
                "height": 64,
                "variant": "checkerboard",
                "opacity": 255,
            },
        )
        assert resp.status_code == 200

    def test_render_beagle_png(self):
        resp = client.post(
            "/render",
            json={
                "strategy": "beagle",
                "profile": "standard",
                "width": 200,
                "height": 200,
                "user_name": "tester",
                "secondary_channel": True,
            },
        )
        assert resp.status_code == 200
        assert resp.content[:4] == b"\x89PNG"

    def test_missing_profile_returns_422(self):
        resp = client.post("/render", json={"strategy": "luminous"})
        assert resp.status_code == 422

    def test_unknown_profile_returns_422(self):
        resp = client.post("/render", json={"profile": "enhanced"})
        assert resp.status_code == 422
        assert "Unknown profile" in resp.json()["detail"]

    def test_invalid_opacity_returns_422(self):
        resp = client.post("/render", json={"profile": "standard", "opacity": 300})
        assert resp.status_code == 422
        assert "opacity" in resp.json()["detail"]

    def test_unknown_strategy_returns_422(self):
        resp = client.post("/render", json={"profile": "standard", "strategy": "laser"})
        assert resp.status_code == 422

    def test_unregistered_strategy_returns_422(self):
        resp = client.post("/render", json={"profile": "standard", "strategy": "qr"})
        assert resp.status_code == 422
        assert "No renderer registered" in resp.json()["detail"]

    def test_invalid_tile_size_returns_422(self):
        resp = client.post(
            "/render",
            json={"profile": "standard", "strategy": "beagle", "tile_size": 49, "user_name": "x"},
        )
        assert resp.status_code == 422
        assert "tile size" in resp.json()["detail"]

    def test_zero_width_returns_422(self):
        resp = client.post("/render", json={"profile": "standard", "width": 0})
        assert resp.status_code == 422

    def test_oversized_returns_422(self):
        for size in ({"width": 8193}, {"width": 2049}, {"height": 2049}):
            resp = client.post("/render", json={"profile": "standard", **size})
            assert resp.status_code == 422

    def test_largest_size_renders(self):
        for width, height in ((2048, 16), (16, 2048)):
            resp = client.post(
                "/render",
                json={"profile": "standard", "width": width, "height": height},
            )
            assert resp.status_code == 200
            img = Image.open(io.BytesIO(resp.content))
            assert img.size == (width, height)


class TestRenderSvgEndpoint:
    def test_beagle_svg(self):
        resp = client.post(
            "/render/svg",
            json={"strategy": "beagle", "profile": "standard", "user_name": "tester"},
        )
        assert resp.status_code == 200
        assert "image/svg+xml" in resp.headers["content-type"]
        assert "<svg" in resp.text
        assert "TESTER" in resp.text

    def test_luminous_svg_rejected(self):
        resp = client.post("/render/svg", json={"strategy": "luminous", "profile": "standard"})
        assert resp.status_code == 422


class TestListingEndpoints:
    def test_strategies(self):
        resp = client.get("/strategies")
        assert resp.status_code == 200
        data = {s["name"]: s for s in resp.json()}
        assert set(data) == {"qr", "luminous", "steganography", "hybrid", "beagle"}
        assert data["luminous"]["available"] is True
        assert data["qr"]["available"] is False
        assert data["steganography"]["visible"] is False

    def test_profiles(self):
        resp = client.get("/profiles")
        assert resp.status_code == 200
        data = resp.json()
        assert data["standard"]["rgb_delta"] == 45
        assert data["sensitive"]["rgb_delta"] == 65
        assert data["sensitive"]["detection_threshold"] == 35
