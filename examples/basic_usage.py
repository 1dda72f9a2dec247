#!/usr/bin/env python3
"""Basic usage example for Waldo.

Renders the luminous and decorative overlays to PNG files and drives a
live surface with the temporal pattern for a moment.

Usage:
    python examples/basic_usage.py
"""

import dataclasses
import os
import sys
import time

# Add parent directory to path for direct script execution
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from waldo import OverlayStrategy, PatternVariant, for_strategy, select_profile
from waldo.session import OverlaySession
from waldo.surface import Frame


def example_luminous_export():
    """Render every luminance variant with the standard profile."""
    print("=" * 60)
    print("Example 1: Luminous Overlay Export")
    print("=" * 60)

    profile = select_profile("standard")
    print(f"  Profile:     {profile.name} v{profile.version}")
    print(f"  RGB values:  {profile.rgb_low} / {profile.rgb_high}")

    for variant in PatternVariant:
        renderer = for_strategy(OverlayStrategy.LUMINANCE, profile, variant=variant)
        buffer = renderer.render_image(512, 384, profile.alpha_opacity)
        png_bytes = buffer.to_png()
        path = f"luminous_{variant.value}.png"
        with open(path, "wb") as f:
            f.write(png_bytes)
        print(f"  Variant: {variant.value:12s}  PNG: {len(png_bytes):6d} bytes -> {path}")

    print()


def example_decorative_export():
    """Render the wireframe overlay with edge markers."""
    print("=" * 60)
    print("Example 2: Decorative Overlay")
    print("=" * 60)

    profile = select_profile("sensitive")
    renderer = for_strategy("beagle", profile, tile_size=200, line_width=2, user_name="alice")

    svg = renderer.render_svg(800, 600, 60)
    print(f"  SVG length:  {len(svg)} chars")

    buffer = renderer.render_image(800, 600, 60, secondary_channel=True)
    with open("beagle.png", "wb") as f:
        f.write(buffer.to_png())
    print(f"  PNG size:    {buffer.width}x{buffer.height} -> beagle.png")
    print()


def example_live_session():
    """Run a temporal luminous overlay in a session and stop it."""
    print("=" * 60)
    print("Example 3: Live Session with Temporal Pattern")
    print("=" * 60)

    base = select_profile("standard")
    geometry = dataclasses.replace(base.luminance, enable_temporal_patterns=True)
    profile = base.with_overrides(luminance=geometry)

    session = OverlaySession(profile)
    surface = session.start("luminous", Frame(0, 0, 640, 480), 40, variant="temporal")

    deadline = time.monotonic() + 1.5
    while time.monotonic() < deadline:
        if surface.wait_for_redraw(timeout=0.1):
            surface.draw()

    print(f"  Status:      {session.status()}")
    print(f"  Frames:      {surface.draw_count}")
    session.stop()
    print(f"  Stopped:     {surface.closed}")
    print()


if __name__ == "__main__":
    example_luminous_export()
    example_decorative_export()
    example_live_session()
