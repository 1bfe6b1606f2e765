"""
Blink colour schemes for the point sphere.

Each scheme defines:
  - primary:    Colour shown while ``sin(time * blink_speed + index) > 0``
  - secondary:  Colour shown otherwise
  - background: Canvas clear colour

Colours are RGB floats in [0, 1], the layout the render buffers use.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

RGBf = Tuple[float, float, float]


@dataclass(frozen=True)
class BlinkScheme:
    """Immutable two-colour blink scheme."""
    name: str
    primary: RGBf
    secondary: RGBf
    background: RGBf

    @staticmethod
    def _to_u8(c: RGBf) -> Tuple[int, int, int]:
        return tuple(max(0, min(255, int(round(v * 255)))) for v in c)

    @property
    def background_u8(self) -> Tuple[int, int, int]:
        return self._to_u8(self.background)


# ── Built-in schemes ─────────────────────────────────────────────────────

_BG = (0x16 / 255, 0x18 / 255, 0x18 / 255)

SCHEMES: Dict[str, BlinkScheme] = {
    "classic": BlinkScheme(
        name="Dodger Blue",
        primary=(0.1176, 0.5647, 1.0), secondary=(1.0, 1.0, 1.0),
        background=_BG,
    ),
    "ember": BlinkScheme(
        name="Ember",
        primary=(1.0, 0.42, 0.08), secondary=(1.0, 0.86, 0.6),
        background=_BG,
    ),
    "mint": BlinkScheme(
        name="Mint",
        primary=(0.2, 0.85, 0.6), secondary=(0.92, 1.0, 0.96),
        background=_BG,
    ),
    "mono": BlinkScheme(
        name="Monochrome",
        primary=(0.55, 0.55, 0.58), secondary=(1.0, 1.0, 1.0),
        background=_BG,
    ),
}

DEFAULT_SCHEME = "classic"


def get_scheme(key: str) -> BlinkScheme:
    """Look up a scheme by key.  Raises KeyError for unknown names."""
    return SCHEMES[key]


def list_schemes() -> List[str]:
    return list(SCHEMES.keys())
