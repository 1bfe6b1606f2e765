"""
Perspective camera: builds world-space rays from NDC and projects
world points back to NDC for drawing.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

Vec3 = Tuple[float, float, float]


@dataclass
class PerspectiveCamera:
    """Pinhole camera looking from *position* towards *target*.

    Attributes:
        fov:    Vertical field of view in degrees.
        aspect: Viewport width / height.
    """
    fov: float = 75.0
    aspect: float = 1.0
    near: float = 0.1
    far: float = 1000.0
    position: Vec3 = (0.0, 0.0, 5.0)
    target: Vec3 = (0.0, 0.0, 0.0)
    up: Vec3 = (0.0, 1.0, 0.0)

    def set_aspect(self, width: int, height: int) -> None:
        self.aspect = width / max(height, 1)

    @property
    def eye(self) -> np.ndarray:
        return np.asarray(self.position, dtype=np.float64)

    @property
    def tan_half_fov(self) -> float:
        return math.tan(math.radians(self.fov) / 2.0)

    def basis(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Orthonormal (right, up, forward) frame of the camera."""
        forward = np.asarray(self.target, dtype=np.float64) - self.eye
        forward /= np.linalg.norm(forward)
        right = np.cross(forward, np.asarray(self.up, dtype=np.float64))
        right /= np.linalg.norm(right)
        true_up = np.cross(right, forward)
        return right, true_up, forward

    def ray_from_ndc(self, ndc: Tuple[float, float]) -> Tuple[np.ndarray, np.ndarray]:
        """Return (origin, unit direction) of the ray through *ndc*."""
        right, up, forward = self.basis()
        th = self.tan_half_fov
        d = forward + right * (ndc[0] * th * self.aspect) + up * (ndc[1] * th)
        return self.eye.copy(), d / np.linalg.norm(d)

    def project(self, points: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """Project world points → (ndc_xy (N, 2), view depth (N,)).

        Points behind the camera get a non-positive depth; callers cull them.
        """
        right, up, forward = self.basis()
        rel = np.atleast_2d(points) - self.eye
        depth = rel @ forward
        safe = np.where(np.abs(depth) > 1e-9, depth, 1e-9)
        th = self.tan_half_fov
        x = (rel @ right) / (safe * th * self.aspect)
        y = (rel @ up) / (safe * th)
        return np.stack([x, y], axis=1), depth
