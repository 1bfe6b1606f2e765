"""
Pointer geometry: latched screen samples and their resolution to a
world-space cursor point on (or near) the sphere surface.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .camera import PerspectiveCamera

logger = logging.getLogger(__name__)

# Distance along the pointer ray used when the ray misses the sphere.
# Tuned for the default radius / camera distance.
FALLBACK_DISTANCE = 5.0


# ---------------------------------------------------------------------------
# Samples
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PointerSample:
    """2D pointer position in screen pixels (y grows downward)."""
    x: float
    y: float


@dataclass(frozen=True)
class CursorSample:
    """Pointer position for one frame, paired with the previous frame's."""
    current: PointerSample
    previous: Optional[PointerSample] = None

    @property
    def speed(self) -> float:
        """Screen-space distance moved since the previous frame."""
        if self.previous is None:
            return 0.0
        dx = self.current.x - self.previous.x
        dy = self.current.y - self.previous.y
        return math.sqrt(dx * dx + dy * dy)


class PointerLatch:
    """Single-slot holder between pointer events and the frame loop.

    The host calls :meth:`update` from its event handlers; the simulation
    calls :meth:`read` exactly once per step.  Only the newest sample is
    kept.
    """

    def __init__(self) -> None:
        self._latest: Optional[PointerSample] = None
        self._last_read: Optional[PointerSample] = None

    @property
    def latest(self) -> Optional[PointerSample]:
        return self._latest

    def update(self, x: float, y: float) -> None:
        self._latest = PointerSample(float(x), float(y))

    def clear(self) -> None:
        """Pointer left the view."""
        self._latest = None
        self._last_read = None

    def read(self) -> Optional[CursorSample]:
        if self._latest is None:
            return None
        sample = CursorSample(self._latest, self._last_read)
        self._last_read = self._latest
        return sample


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

def screen_to_ndc(x: float, y: float, width: float, height: float) -> Tuple[float, float]:
    return (x / width) * 2.0 - 1.0, -(y / height) * 2.0 + 1.0


def intersect_sphere(
    origin: np.ndarray, direction: np.ndarray, radius: float,
) -> Optional[np.ndarray]:
    """Nearer intersection of a ray with the origin-centred sphere, or None."""
    a = float(np.dot(direction, direction))
    b = 2.0 * float(np.dot(origin, direction))
    c = float(np.dot(origin, origin)) - radius * radius
    disc = b * b - 4.0 * a * c
    if disc < 0.0:
        return None
    t = (-b - math.sqrt(disc)) / (2.0 * a)
    return origin + direction * t


def resolve_cursor(
    sample: PointerSample,
    width: float,
    height: float,
    camera: PerspectiveCamera,
    radius: float,
    fallback_distance: float = FALLBACK_DISTANCE,
) -> np.ndarray:
    """Map a screen sample to a world-space cursor point.

    On a miss the point is placed *radius* away from the camera along the
    pointer direction, so a usable point is always returned.
    """
    ndc = screen_to_ndc(sample.x, sample.y, width, height)
    origin, direction = camera.ray_from_ndc(ndc)
    hit = intersect_sphere(origin, direction, radius)
    if hit is not None:
        return hit

    eye = camera.eye
    along = origin + direction * fallback_distance
    d = along - eye
    n = np.linalg.norm(d)
    d = d / n if n > 0.0 else direction
    return eye + d * radius
