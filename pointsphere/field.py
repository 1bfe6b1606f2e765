"""
Particle field model.

Owns every per-point array of the sphere.  All arrays are allocated once
at construction, sized to ``count``, and mutated in place afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum

import numpy as np

logger = logging.getLogger(__name__)

GOLDEN_FRACTION = 1.618034


class ConfigError(ValueError):
    """Invalid construction parameters."""


class FieldInvariantError(RuntimeError):
    """Per-point arrays are in an inconsistent state."""


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@dataclass
class SphereConfig:
    """Construction-time options: point count and sphere radius."""
    dot_count: int = 1600
    radius: float = 2.0

    @classmethod
    def compact(cls) -> "SphereConfig":
        """Lighter 800-point sphere."""
        return cls(dot_count=800)

    def validate(self) -> None:
        if int(self.dot_count) != self.dot_count or self.dot_count < 1:
            raise ConfigError(f"dot_count must be a positive integer, got {self.dot_count!r}")
        if not self.radius > 0:
            raise ConfigError(f"radius must be positive, got {self.radius!r}")


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

def fibonacci_lattice(count: int, radius: float) -> np.ndarray:
    """Near-uniform points on a sphere → (count, 3) array.

    Index 0 sits on the north pole, index ``count-1`` on the south pole.
    """
    i = np.arange(count, dtype=np.float64)
    denom = max(count - 1, 1)
    y = 1.0 - (i / denom) * 2.0
    r = np.sqrt(np.maximum(0.0, 1.0 - y * y))
    theta = 2.0 * np.pi * np.mod(i * GOLDEN_FRACTION, 1.0)
    x = np.cos(theta) * r
    z = np.sin(theta) * r
    return np.stack([x, y, z], axis=1) * radius


class Regime(IntEnum):
    """Dynamic regime of a single point."""
    AT_REST = 0
    HELD = 1
    KICKING = 2


@dataclass
class RenderBuffers:
    """Flat position/colour arrays shared with the presentation layer."""
    positions: np.ndarray
    colors: np.ndarray
    positions_dirty: bool = True
    colors_dirty: bool = True

    @property
    def count(self) -> int:
        return self.positions.shape[0] // 3

    def position_view(self) -> np.ndarray:
        return self.positions.reshape(-1, 3)

    def color_view(self) -> np.ndarray:
        return self.colors.reshape(-1, 3)

    def mark_clean(self) -> None:
        """Called by the host after uploading both arrays."""
        self.positions_dirty = False
        self.colors_dirty = False


# ---------------------------------------------------------------------------
# Field
# ---------------------------------------------------------------------------

class ParticleField:
    """Per-point state for the interactive sphere.

    Parameters:
        config: Point count and radius (validated on construction).
    """

    def __init__(self, config: SphereConfig | None = None) -> None:
        self.config = config or SphereConfig()
        self.config.validate()
        self.count: int = int(self.config.dot_count)
        self.radius: float = float(self.config.radius)

        n = self.count
        self._original = fibonacci_lattice(n, self.radius)
        self._original.setflags(write=False)
        self.spread_offsets = np.zeros((n, 3))
        self.kick_progress = np.ones(n)
        self.kick_start = np.zeros((n, 3))
        self.kick_direction = np.zeros((n, 3))
        self.return_timers = np.zeros(n)
        logger.info("Particle field: %d points, radius %.3g", n, self.radius)

    @property
    def original_positions(self) -> np.ndarray:
        """Read-only (count, 3) lattice positions."""
        return self._original

    # ── regimes ───────────────────────────────────────────────────────────

    def regimes(self) -> np.ndarray:
        """Per-point :class:`Regime` tags.

        Kicking takes precedence over holding, matching the order in which
        the state machine examines a point.
        """
        tags = np.full(self.count, Regime.AT_REST, dtype=np.int8)
        tags[self.return_timers > 0.0] = Regime.HELD
        tags[self.kick_progress < 1.0] = Regime.KICKING
        return tags

    def regime(self, index: int) -> Regime:
        return Regime(int(self.regimes()[index]))

    def check_invariants(self) -> None:
        n = self.count
        shapes = {
            "spread_offsets": (self.spread_offsets.shape, (n, 3)),
            "kick_start": (self.kick_start.shape, (n, 3)),
            "kick_direction": (self.kick_direction.shape, (n, 3)),
            "kick_progress": (self.kick_progress.shape, (n,)),
            "return_timers": (self.return_timers.shape, (n,)),
            "original_positions": (self._original.shape, (n, 3)),
        }
        for name, (got, want) in shapes.items():
            if got != want:
                raise FieldInvariantError(f"{name} has shape {got}, expected {want}")
        if np.any(self.kick_progress < 0.0) or np.any(self.kick_progress > 1.0):
            raise FieldInvariantError("kick_progress outside [0, 1]")
        if np.any(self.return_timers < 0.0):
            raise FieldInvariantError("negative return timer")

    # ── lifecycle ─────────────────────────────────────────────────────────

    def reset(self) -> None:
        """Put every point back at rest without reallocating."""
        self.spread_offsets.fill(0.0)
        self.kick_progress.fill(1.0)
        self.kick_start.fill(0.0)
        self.kick_direction.fill(0.0)
        self.return_timers.fill(0.0)
        logger.info("Particle field reset")

    def create_buffers(self) -> RenderBuffers:
        """One-time construction of the renderable position/colour arrays."""
        positions = self._original.astype(np.float32).ravel()
        colors = np.ones(self.count * 3, dtype=np.float32)
        return RenderBuffers(positions=positions, colors=colors)
