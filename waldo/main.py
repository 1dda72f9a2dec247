"""Waldo overlay export service -- FastAPI application.

Endpoints:
    POST /render        -- Render an overlay to a PNG image
    POST /render/svg    -- Render the decorative overlay as SVG
    GET  /strategies    -- List strategies and whether they can render here
    GET  /profiles      -- List constant profiles and their key values
    GET  /health        -- Health check

Rendering is CPU-only and synchronous; every request gets its own
renderer instance.
"""

from __future__ import annotations

import structlog
from fastapi import FastAPI, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel, Field

from . import __version__
from .constants import PROFILES, select_profile
from .selector import available_strategies, for_strategy
from .strategies import OverlayStrategy

structlog.configure(
    processors=[
        structlog.dev.ConsoleRenderer(),
    ],
)

logger = structlog.get_logger(__name__)

app = FastAPI(
    title="waldo",
    description="Screen watermark overlay renderer for capture tracing",
    version=__version__,
)


# --------------------------------------------------------------------------
# Request / Response models
# --------------------------------------------------------------------------


class RenderRequestModel(BaseModel):
    """Request body for /render and /render/svg."""

    strategy: str = Field(
        default="luminous",
        description="Overlay strategy identifier",
        examples=["luminous", "beagle"],
    )
    profile: str = Field(
        ...,
        description="Constant profile; must match the detector's profile",
        examples=["standard", "sensitive"],
    )
    width: int = Field(default=512, ge=1, le=2048, description="Output width in pixels")
    height: int = Field(default=512, ge=1, le=2048, description="Output height in pixels")
    opacity: int = Field(
        default=40,
        description="Overlay opacity (1-255)",
    )
    secondary_channel: bool = Field(
        default=False,
        description="Add luminance markers to strategies that support them",
    )
    variant: str | None = Field(
        default=None,
        description="Luminance pattern variant (luminous strategy only)",
        examples=["uniform", "checkerboard"],
    )
    tile_size: int | None = Field(default=None, description="Tile size (beagle strategy only)")
    line_width: int | None = Field(default=None, description="Line width (beagle strategy only)")
    user_name: str | None = Field(default=None, description="Label (beagle strategy only)")


class StrategyInfo(BaseModel):
    name: str
    description: str
    available: bool
    visible: bool
    supports_data_embedding: bool


class HealthResponse(BaseModel):
    """Response body for /health."""

    status: str
    service: str
    version: str


def _renderer_options(request: RenderRequestModel, strategy: OverlayStrategy) -> dict:
    options: dict = {}
    if strategy is OverlayStrategy.LUMINANCE and request.variant is not None:
        options["variant"] = request.variant
    if strategy is OverlayStrategy.DECORATIVE:
        if request.tile_size is not None:
            options["tile_size"] = request.tile_size
        if request.line_width is not None:
            options["line_width"] = request.line_width
        if request.user_name is not None:
            options["user_name"] = request.user_name
    return options


# --------------------------------------------------------------------------
# Endpoints
# --------------------------------------------------------------------------


@app.post(
    "/render",
    response_class=Response,
    responses={
        200: {"content": {"image/png": {}}, "description": "PNG-encoded overlay"},
        422: {"description": "Invalid input"},
    },
)
async def render_png(request: RenderRequestModel) -> Response:
    """Render an overlay into a PNG image."""
    try:
        strategy = OverlayStrategy.from_string(request.strategy)
        profile = select_profile(request.profile)
        renderer = for_strategy(strategy, profile, **_renderer_options(request, strategy))
        buffer = renderer.render_image(
            request.width,
            request.height,
            request.opacity,
            request.secondary_channel,
        )
        png_bytes = buffer.to_png()
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.error("render_png_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Rendering failed")

    return Response(content=png_bytes, media_type="image/png")


@app.post(
    "/render/svg",
    response_class=Response,
    responses={
        200: {"content": {"image/svg+xml": {}}, "description": "SVG overlay"},
        422: {"description": "Invalid input"},
    },
)
async def render_svg_endpoint(request: RenderRequestModel) -> Response:
    """Render the decorative overlay as SVG."""
    try:
        strategy = OverlayStrategy.from_string(request.strategy)
        if strategy is not OverlayStrategy.DECORATIVE:
            raise ValueError(f"SVG output is only available for '{OverlayStrategy.DECORATIVE.value}'")
        profile = select_profile(request.profile)
        renderer = for_strategy(strategy, profile, **_renderer_options(request, strategy))
        svg_content = renderer.render_svg(request.width, request.height, request.opacity)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except Exception as e:
        logger.error("render_svg_failed", error=str(e))
        raise HTTPException(status_code=500, detail="Rendering failed")

    return Response(content=svg_content, media_type="image/svg+xml")


@app.get("/strategies", response_model=list[StrategyInfo])
async def list_strategies() -> list[StrategyInfo]:
    available = set(available_strategies())
    return [
        StrategyInfo(
            name=s.value,
            description=s.description,
            available=s in available,
            visible=s.is_visible,
            supports_data_embedding=s.supports_data_embedding,
        )
        for s in OverlayStrategy
    ]


@app.get("/profiles")
async def list_profiles() -> dict[str, dict]:
    return {name: profile.summary() for name, profile in PROFILES.items()}


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Health check endpoint for Docker and load balancers."""
    return HealthResponse(
        status="healthy",
        service="waldo",
        version=__version__,
    )
