"""
Small vector, easing and quaternion helpers shared by the simulation.

Quaternions are numpy arrays in ``(w, x, y, z)`` order.
"""

from __future__ import annotations

import math
from typing import Sequence, Union

import numpy as np

ArrayLike = Union[np.ndarray, Sequence[float]]


# ── scalar / vector ──────────────────────────────────────────────────────

def lerp(a: ArrayLike, b: ArrayLike, t: float) -> np.ndarray:
    """Component-wise linear interpolation.  *t* is not clamped."""
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    return a + (b - a) * t


def ease_in_out_sine(t):
    """Sine ease: slow start, fast middle, slow end.  Maps 0→0 and 1→1."""
    return (1.0 - np.cos(np.pi * t)) / 2.0


def clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


def normalize_rows(v: np.ndarray) -> np.ndarray:
    """Normalise each row of an (N, 3) array.  Zero rows stay zero."""
    norms = np.linalg.norm(v, axis=-1, keepdims=True)
    safe = np.where(norms > 0.0, norms, 1.0)
    return v / safe


# ── quaternions ──────────────────────────────────────────────────────────

def quat_identity() -> np.ndarray:
    return np.array([1.0, 0.0, 0.0, 0.0])


def quat_from_axis_angle(axis: ArrayLike, angle: float) -> np.ndarray:
    """Quaternion rotating by *angle* radians about *axis*."""
    axis = np.asarray(axis, dtype=np.float64)
    n = np.linalg.norm(axis)
    if n == 0.0:
        return quat_identity()
    s = math.sin(angle / 2.0)
    x, y, z = axis / n * s
    return np.array([math.cos(angle / 2.0), x, y, z])


def quat_multiply(q1: np.ndarray, q2: np.ndarray) -> np.ndarray:
    """Hamilton product ``q1 * q2`` (apply q2 first, then q1)."""
    w1, x1, y1, z1 = q1
    w2, x2, y2, z2 = q2
    return np.array([
        w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
        w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
        w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
        w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
    ])


def quat_inverse(q: np.ndarray) -> np.ndarray:
    q = np.asarray(q, dtype=np.float64)
    n2 = float(np.dot(q, q))
    conj = np.array([q[0], -q[1], -q[2], -q[3]])
    return conj / n2 if n2 > 0.0 else conj


def rotate_vectors(q: np.ndarray, v: ArrayLike) -> np.ndarray:
    """Apply unit quaternion *q* to a vector or an (N, 3) array of vectors.

    Uses ``v' = v + 2w (u × v) + 2 u × (u × v)`` with ``u = (x, y, z)``.
    """
    q = np.asarray(q, dtype=np.float64)
    v = np.asarray(v, dtype=np.float64)
    w = q[0]
    u = q[1:]
    uv = np.cross(u, v)
    uuv = np.cross(u, uv)
    return v + 2.0 * (w * uv + uuv)
