"""
Per-point interaction state machine.

Each point is in one of three regimes (see :class:`~.field.Regime`):

  - Kicking:  animating outward from the exclusion boundary
  - Held:     waiting for its return timer to run out
  - At rest:  easing its offset back to zero

The pointer pass sweeps the cursor from its previous to its current world
position in ``path_steps + 1`` samples so fast swipes cannot skip points.
All per-point work is vectorised; only the path samples are looped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from .field import ParticleField
from .mathutils import clamp, ease_in_out_sine, lerp, normalize_rows, quat_inverse, rotate_vectors

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------

@dataclass
class InteractionParams:
    """Tuned constants of the pointer interaction.

    Per-frame steps are fixed increments, not scaled by wall-clock time.
    """
    # Exclusion zone
    cursor_radius_ratio: float = 0.38   # fraction of sphere radius
    buffer_band: float = 0.18           # soft band beyond the zone (world units)
    boundary_epsilon: float = 0.001

    # Path sweep
    path_steps: int = 12
    max_kicks_per_step: int = 2

    # Kick response
    speed_to_force: float = 0.2         # force = pointer speed / 5
    kick_threshold: float = 0.5
    kick_force_offset: float = 1.0
    kick_gain: float = 0.7
    kick_exponent: float = 1.15
    kick_cap_ratio: float = 0.7         # max kick as fraction of radius

    # Per-frame rates
    kick_step: float = 0.035
    buffer_ease: float = 0.18
    hold_time: float = 0.4
    hold_step: float = 0.017
    return_ease: float = 0.03


def kick_magnitude(force: float, radius: float, params: InteractionParams) -> float:
    """Outward kick distance for a given pointer force (power-law, capped)."""
    excess = max(0.0, force - params.kick_force_offset)
    amount = params.kick_gain * excess ** params.kick_exponent
    return clamp(amount, 0.0, params.kick_cap_ratio * radius)


@dataclass
class InteractionReport:
    """What one pointer pass did."""
    kicks_per_step: List[int] = field(default_factory=list)
    touched: int = 0

    @property
    def kicks(self) -> int:
        return sum(self.kicks_per_step)


# ---------------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------------

class InteractionStateMachine:
    """Drives kick / hold / return transitions of a :class:`ParticleField`."""

    def __init__(self, field: ParticleField, params: Optional[InteractionParams] = None) -> None:
        self.field = field
        self.params = params or InteractionParams()

    @property
    def cursor_radius(self) -> float:
        return self.field.radius * self.params.cursor_radius_ratio

    # ── per-frame regime update ───────────────────────────────────────────

    def advance(self) -> None:
        """Advance every point one frame within its current regime."""
        f = self.field
        p = self.params
        offsets = f.spread_offsets

        kicking = f.kick_progress < 1.0
        held = ~kicking & (f.return_timers > 0.0)
        resting = ~kicking & ~held

        if kicking.any():
            prog = np.minimum(f.kick_progress[kicking] + p.kick_step, 1.0)
            f.kick_progress[kicking] = prog
            ease = ease_in_out_sine(prog)[:, np.newaxis]
            offsets[kicking] = f.kick_start[kicking] + f.kick_direction[kicking] * ease

        if held.any():
            f.return_timers[held] = np.maximum(f.return_timers[held] - p.hold_step, 0.0)

        offsets[resting] += (0.0 - offsets[resting]) * p.return_ease

    # ── pointer pass ──────────────────────────────────────────────────────

    def apply_pointer(
        self,
        cursor_world: np.ndarray,
        previous_world: Optional[np.ndarray],
        speed: float,
        rotation: np.ndarray,
    ) -> InteractionReport:
        """Push points out of the cursor's exclusion zone.

        Parameters:
            cursor_world:   Resolved cursor position this frame.
            previous_world: Resolved cursor position last frame (or None).
            speed:          Screen-space pointer speed in pixels per frame.
            rotation:       Sphere orientation quaternion (w, x, y, z).
        """
        f = self.field
        p = self.params
        cursor_world = np.asarray(cursor_world, dtype=np.float64)
        inv = quat_inverse(rotation)
        orig = f.original_positions
        world = rotate_vectors(rotation, orig)

        zone = self.cursor_radius
        boundary = zone + p.boundary_epsilon
        force = speed * p.speed_to_force
        can_kick = force > p.kick_threshold
        spread = kick_magnitude(force, f.radius, p)

        touched = np.zeros(f.count, dtype=bool)
        report = InteractionReport()

        for s in range(p.path_steps + 1):
            if previous_world is not None:
                cursor = lerp(previous_world, cursor_world, s / p.path_steps)
            else:
                cursor = cursor_world

            active = f.kick_progress >= 1.0
            to_cursor = world - cursor
            dist = np.linalg.norm(to_cursor, axis=1)
            radial = normalize_rows(to_cursor)

            inside = active & (dist < zone)
            band = active & ~inside & (dist < zone + p.buffer_band)
            kicks = 0

            if inside.any():
                idx = np.flatnonzero(inside)
                surface = rotate_vectors(inv, cursor + radial[idx] * boundary)
                snapped = surface - orig[idx]
                f.spread_offsets[idx] = snapped
                if can_kick:
                    # Lowest indices first, capped per sample.
                    k = min(len(idx), p.max_kicks_per_step)
                    chosen = idx[:k]
                    f.kick_start[chosen] = snapped[:k]
                    f.kick_progress[chosen] = 0.0
                    f.kick_direction[chosen] = rotate_vectors(inv, radial[chosen] * spread)
                    kicks = k
                touched[idx] = True

            if band.any():
                idx = np.flatnonzero(band)
                # Target is anchored at the current cursor, not the swept one.
                target = rotate_vectors(inv, cursor_world + radial[idx] * boundary)
                current = orig[idx] + f.spread_offsets[idx]
                f.spread_offsets[idx] += (target - current) * p.buffer_ease
                f.return_timers[idx] = p.hold_time
                touched[idx] = True

            report.kicks_per_step.append(kicks)

        f.return_timers[~touched] = 0.0
        report.touched = int(touched.sum())
        if report.kicks:
            logger.debug("Pointer pass: %d kicks, %d points touched (force %.2f)",
                         report.kicks, report.touched, force)
        return report
