"""
Frame field evaluator: radial wave morph and per-point colour blink.

Runs after the interaction pass every frame and is the only writer of
the render buffers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .field import ParticleField, RenderBuffers
from .palettes import DEFAULT_SCHEME, BlinkScheme, get_scheme

logger = logging.getLogger(__name__)


@dataclass
class MorphParams:
    """Wave and blink constants.  Time is in milliseconds."""
    wave_speed_1: float = 0.002
    wave_speed_2: float = 0.001
    amplitude_ratio: float = 0.15   # fraction of sphere radius
    morph_ease: float = 0.05        # per-frame approach to the toggle target
    blink_speed: float = 0.01


class FrameFieldEvaluator:
    """Writes final positions and colours for all points.

    Spherical angles are taken from the immutable original positions, so
    they are computed once here rather than per frame.
    """

    def __init__(
        self,
        field: ParticleField,
        params: Optional[MorphParams] = None,
        scheme: Optional[BlinkScheme] = None,
    ) -> None:
        self.field = field
        self.params = params or MorphParams()
        self.scheme = scheme or get_scheme(DEFAULT_SCHEME)
        self.morph_lerp: float = 1.0
        self.morph_target: float = 1.0

        unit = field.original_positions / field.radius
        self._unit = unit
        self._theta = np.arccos(np.clip(unit[:, 1], -1.0, 1.0))
        self._phi = np.arctan2(unit[:, 2], unit[:, 0])
        self._index = np.arange(field.count, dtype=np.float64)

    # ── toggle ────────────────────────────────────────────────────────────

    @property
    def morph_enabled(self) -> bool:
        return self.morph_target >= 0.5

    @morph_enabled.setter
    def morph_enabled(self, val: bool) -> None:
        self.morph_target = 1.0 if val else 0.0

    def ease_morph(self) -> None:
        self.morph_lerp += (self.morph_target - self.morph_lerp) * self.params.morph_ease

    # ── fields ────────────────────────────────────────────────────────────

    def wave_offsets(self, time: float) -> np.ndarray:
        """Unscaled radial wave offset per point → (count,) array."""
        p = self.params
        w1 = np.sin(time * p.wave_speed_1 + self._theta * 5.0 + self._phi * 3.0)
        w2 = np.cos(time * p.wave_speed_2 + self._theta * 3.0 - self._phi * 2.0)
        return (w1 + w2) * 0.5 * (self.field.radius * p.amplitude_ratio)

    def blink_mask(self, time: float) -> np.ndarray:
        """True where a point shows the primary colour."""
        return np.sin(time * self.params.blink_speed + self._index) > 0.0

    def evaluate(self, time: float, buffers: RenderBuffers) -> None:
        """Write positions and colours for *time* into *buffers* in place."""
        radius = self.field.radius + self.wave_offsets(time) * self.morph_lerp
        pos = buffers.position_view()
        pos[:] = self._unit * radius[:, np.newaxis] + self.field.spread_offsets

        col = buffers.color_view()
        mask = self.blink_mask(time)
        col[mask] = self.scheme.primary
        col[~mask] = self.scheme.secondary

        buffers.positions_dirty = True
        buffers.colors_dirty = True
