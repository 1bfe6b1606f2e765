"""
Point sphere simulation engine.

Owns the particle field and its render buffers and runs one simulation
step per rendered frame.  The engine has no GUI dependency: the host hands
it a :class:`FrameInput` and draws the returned buffers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from .camera import PerspectiveCamera
from .field import ParticleField, RenderBuffers, SphereConfig
from .interaction import InteractionParams, InteractionReport, InteractionStateMachine
from .mathutils import quat_identity
from .morph import FrameFieldEvaluator, MorphParams
from .palettes import BlinkScheme
from .pointer import FALLBACK_DISTANCE, CursorSample, resolve_cursor

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Frame I/O
# ---------------------------------------------------------------------------

@dataclass
class FrameInput:
    """Everything one simulation step reads.

    Attributes:
        time:     Frame timestamp in milliseconds.
        cursor:   Latched pointer sample for this frame, or None.
        rotation: Sphere orientation quaternion (w, x, y, z).
        camera:   Camera used to turn the pointer into a ray.
        width:    Viewport width in pixels.
        height:   Viewport height in pixels.
    """
    time: float
    cursor: Optional[CursorSample] = None
    rotation: np.ndarray = field(default_factory=quat_identity)
    camera: PerspectiveCamera = field(default_factory=PerspectiveCamera)
    width: int = 800
    height: int = 800


@dataclass
class FrameOutput:
    """Result of one simulation step."""
    buffers: RenderBuffers
    report: Optional[InteractionReport]
    morph_lerp: float


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class SphereEngine:
    """Runs the interaction and morph passes over a particle field.

    Parameters:
        config:      Point count and radius (or defaults).
        interaction: Interaction constants (or defaults).
        morph:       Wave / blink constants (or defaults).
        scheme:      Blink colours (or the default scheme).
        fallback_distance: Ray distance used when the pointer misses the sphere.
    """

    def __init__(
        self,
        config: Optional[SphereConfig] = None,
        interaction: Optional[InteractionParams] = None,
        morph: Optional[MorphParams] = None,
        scheme: Optional[BlinkScheme] = None,
        fallback_distance: float = FALLBACK_DISTANCE,
    ) -> None:
        self.field = ParticleField(config)
        self.buffers = self.field.create_buffers()
        self.interaction = InteractionStateMachine(self.field, interaction)
        self.evaluator = FrameFieldEvaluator(self.field, morph, scheme)
        self.fallback_distance = fallback_distance
        self.frame_count = 0
        logger.info("Engine ready: %d points", self.field.count)

    # ── properties ────────────────────────────────────────────────────────

    @property
    def morph_enabled(self) -> bool:
        return self.evaluator.morph_enabled

    @morph_enabled.setter
    def morph_enabled(self, val: bool) -> None:
        self.evaluator.morph_enabled = val
        logger.debug("Morph %s", "enabled" if val else "disabled")

    @property
    def scheme(self) -> BlinkScheme:
        return self.evaluator.scheme

    @scheme.setter
    def scheme(self, scheme: BlinkScheme) -> None:
        self.evaluator.scheme = scheme

    def reset(self) -> None:
        """Return every point to rest.  Buffers are kept."""
        self.field.reset()
        self.frame_count = 0

    # ── step ──────────────────────────────────────────────────────────────

    def resolve(self, frame: FrameInput):
        """World-space (current, previous) cursor points for *frame*."""
        cursor = frame.cursor
        radius = self.field.radius
        current = resolve_cursor(
            cursor.current, frame.width, frame.height,
            frame.camera, radius, self.fallback_distance,
        )
        previous = None
        if cursor.previous is not None:
            previous = resolve_cursor(
                cursor.previous, frame.width, frame.height,
                frame.camera, radius, self.fallback_distance,
            )
        return current, previous

    def step(self, frame: FrameInput) -> FrameOutput:
        """Advance the simulation by one frame and refresh the buffers."""
        self.interaction.advance()
        self.evaluator.ease_morph()

        report = None
        if frame.cursor is not None:
            current, previous = self.resolve(frame)
            report = self.interaction.apply_pointer(
                current, previous, frame.cursor.speed, frame.rotation,
            )

        self.evaluator.evaluate(frame.time, self.buffers)
        self.frame_count += 1
        return FrameOutput(self.buffers, report, self.evaluator.morph_lerp)
