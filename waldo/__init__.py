"""Waldo -- screen watermark overlays that survive recapture.

Renders a low-visibility identification pattern over whatever is on
screen so that a photograph or screen recording of the display can be
traced back to the session that produced it.

Several strategies share one renderer contract: the luminous overlay
(tiled luminance pattern plus gradient corner markers) and a decorative
wireframe overlay ship here; matrix-code, steganographic and hybrid
encoders plug in through the strategy selector.

Embedding and detection must use the same constant profile.
"""

__version__ = "3.0.0"

from .constants import PROFILES, SENSITIVE_PROFILE, STANDARD_PROFILE, ConstantProfile, select_profile
from .patterns import PatternVariant, luminance_for
from .selector import for_strategy
from .strategies import OverlayStrategy

__all__ = [
    "__version__",
    "ConstantProfile",
    "OverlayStrategy",
    "PROFILES",
    "PatternVariant",
    "SENSITIVE_PROFILE",
    "STANDARD_PROFILE",
    "for_strategy",
    "luminance_for",
    "select_profile",
]
