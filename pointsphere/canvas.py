"""
Point sphere canvas widget: animated display with QTimer-driven steps.

One simulation step runs per timer tick (~60 fps) in the main thread.
Pointer moves are latched and read by the next step; the sphere slowly
auto-rotates about its vertical axis.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

import numpy as np
from PyQt5.QtCore import QPointF, QTimer, Qt, pyqtSignal
from PyQt5.QtGui import QColor, QImage, QPainter
from PyQt5.QtWidgets import QWidget

from .camera import PerspectiveCamera
from .engine import FrameInput, SphereEngine
from .mathutils import quat_from_axis_angle
from .pointer import PointerLatch
from .renderer import breathing_scale, project_frame

logger = logging.getLogger(__name__)

ROTATION_STEP = 0.002   # radians per frame about +Y


class SphereCanvas(QWidget):
    """Animated point sphere display.

    Signals:
        fps_changed(float):   current frame rate
        kicks_changed(int):   kicks issued in the last second
    """

    fps_changed = pyqtSignal(float)
    kicks_changed = pyqtSignal(int)

    def __init__(
        self,
        engine: SphereEngine,
        fps: int = 60,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.engine = engine
        self.camera = PerspectiveCamera()
        self.latch = PointerLatch()
        self._paused = False
        self.auto_rotate = True
        self.rotation_step = ROTATION_STEP
        self._angle = 0.0

        # Timing
        self._t0 = time.perf_counter()
        self._last_time = self._t0
        self._frame_count = 0
        self._fps_accum = 0.0
        self._kick_accum = 0
        self._frame_time_ms = 0.0
        self._projected = None

        self.setMinimumSize(400, 400)
        self.setMouseTracking(True)

        self._timer = QTimer(self)
        self._timer.setInterval(max(1, int(1000 / fps)))
        self._timer.timeout.connect(self._tick)
        self._timer.start()

    # ── properties ────────────────────────────────────────────────────────

    @property
    def paused(self) -> bool:
        return self._paused

    @paused.setter
    def paused(self, val: bool) -> None:
        self._paused = val
        if not val:
            self._last_time = time.perf_counter()

    @property
    def rotation(self) -> np.ndarray:
        return quat_from_axis_angle((0.0, 1.0, 0.0), self._angle)

    # ── animation loop ────────────────────────────────────────────────────

    def _tick(self) -> None:
        now = time.perf_counter()
        dt = now - self._last_time
        self._last_time = now

        w, h = max(self.width(), 1), max(self.height(), 1)
        self.camera.set_aspect(w, h)
        self._frame_time_ms = (now - self._t0) * 1000.0

        if not self._paused:
            if self.auto_rotate:
                self._angle += self.rotation_step
            frame = FrameInput(
                time=self._frame_time_ms,
                cursor=self.latch.read(),
                rotation=self.rotation,
                camera=self.camera,
                width=w,
                height=h,
            )
            out = self.engine.step(frame)
            if out.report is not None:
                self._kick_accum += out.report.kicks

        buffers = self.engine.buffers
        scale = breathing_scale(self._frame_time_ms, self.engine.morph_enabled)
        self._projected = project_frame(buffers, self.rotation, scale, self.camera, w, h)
        buffers.mark_clean()
        self.update()

        self._frame_count += 1
        self._fps_accum += dt
        if self._fps_accum >= 1.0:
            self.fps_changed.emit(self._frame_count / self._fps_accum)
            self.kicks_changed.emit(self._kick_accum)
            self._frame_count = 0
            self._fps_accum = 0.0
            self._kick_accum = 0

    # ── painting ──────────────────────────────────────────────────────────

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)

        bg = self.engine.scheme.background_u8
        painter.fillRect(self.rect(), QColor(*bg))

        pts = self._projected
        if pts is not None:
            painter.setPen(Qt.NoPen)
            for (x, y), size, (r, g, b) in zip(pts.xy, pts.size, pts.rgb):
                rad = float(size) * 0.5
                painter.setBrush(QColor(int(r), int(g), int(b)))
                painter.drawEllipse(QPointF(float(x), float(y)), rad, rad)

        if self._paused:
            painter.setPen(QColor(200, 200, 210, 180))
            painter.drawText(self.rect(), Qt.AlignCenter, "⏸ PAUSED")

        painter.end()

    # ── pointer ───────────────────────────────────────────────────────────

    def mouseMoveEvent(self, event):
        self.latch.update(event.x(), event.y())

    def leaveEvent(self, event):
        self.latch.clear()
        super().leaveEvent(event)

    # ── save ──────────────────────────────────────────────────────────────

    def get_image(self) -> Optional[QImage]:
        return self.grab().toImage()
