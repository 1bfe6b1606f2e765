"""
Point projector: numpy-vectorised screen projection of the render buffers.

Turns the engine's flat position/colour arrays into screen coordinates,
pixel sizes and RGB bytes, sorted far-to-near for a painter's-algorithm
draw in the canvas.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from .mathutils import rotate_vectors

if TYPE_CHECKING:
    from .camera import PerspectiveCamera
    from .field import RenderBuffers

logger = logging.getLogger(__name__)

# World-space point diameter, attenuated with distance.
POINT_SIZE = 0.055


@dataclass
class ProjectedPoints:
    """Drawable points, ordered back to front."""
    xy: np.ndarray      # (M, 2) float pixel coordinates
    size: np.ndarray    # (M,) pixel diameters
    rgb: np.ndarray     # (M, 3) uint8


def breathing_scale(time: float, enabled: bool = True) -> float:
    """Slow display-only pulse of the whole sphere (time in ms)."""
    if not enabled:
        return 1.0
    return 1.0 + math.sin(time * 0.001) * 0.05


def project_frame(
    buffers: "RenderBuffers",
    rotation: np.ndarray,
    scale: float,
    camera: "PerspectiveCamera",
    width: int,
    height: int,
    point_size: float = POINT_SIZE,
) -> ProjectedPoints:
    """Project local-space buffer positions to the viewport.

    Parameters:
        buffers:  Render buffers written by the engine.
        rotation: Sphere orientation quaternion.
        scale:    Uniform display scale (breathing).
        camera:   Viewing camera.
        width:    Viewport width in pixels.
        height:   Viewport height in pixels.
    """
    local = buffers.position_view().astype(np.float64)
    world = rotate_vectors(rotation, local * scale)
    ndc, depth = camera.project(world)

    visible = depth > camera.near
    ndc = ndc[visible]
    depth = depth[visible]
    colors = buffers.color_view()[visible]

    # Far first
    order = np.argsort(-depth, kind="stable")
    ndc = ndc[order]
    depth = depth[order]
    colors = colors[order]

    xy = np.empty_like(ndc)
    xy[:, 0] = (ndc[:, 0] + 1.0) * 0.5 * width
    xy[:, 1] = (1.0 - ndc[:, 1]) * 0.5 * height

    size = point_size * height / (2.0 * camera.tan_half_fov * depth)
    rgb = np.clip(colors * 255.0 + 0.5, 0, 255).astype(np.uint8)
    return ProjectedPoints(xy=xy, size=np.maximum(size, 1.0), rgb=rgb)
