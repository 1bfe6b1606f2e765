"""
Control panel: user-adjustable settings for the point sphere.

Organised into groups:
  - Morph (toggle)
  - Motion (auto-rotate, rotation speed)
  - Colours (blink scheme)
  - Actions (pause, reset, save)
"""

from __future__ import annotations

import logging
from typing import Optional

from PyQt5.QtCore import Qt, pyqtSignal
from PyQt5.QtWidgets import (
    QCheckBox,
    QComboBox,
    QGridLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSlider,
    QVBoxLayout,
    QWidget,
)

from .canvas import ROTATION_STEP, SphereCanvas
from .engine import SphereEngine
from .palettes import SCHEMES, get_scheme, list_schemes

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Labelled slider helper
# ---------------------------------------------------------------------------

class LSlider(QWidget):
    """Horizontal slider with label and readout."""

    valueChanged = pyqtSignal(int)

    def __init__(self, label, lo, hi, val, suffix="", parent=None):
        super().__init__(parent)
        lay = QHBoxLayout(self)
        lay.setContentsMargins(0, 1, 0, 1)

        self._lbl = QLabel(label)
        self._lbl.setFixedWidth(110)
        lay.addWidget(self._lbl)

        self._slider = QSlider(Qt.Horizontal)
        self._slider.setRange(lo, hi)
        self._slider.setValue(val)
        lay.addWidget(self._slider, stretch=1)

        self._suffix = suffix
        self._ro = QLabel(f"{val}{suffix}")
        self._ro.setFixedWidth(48)
        self._ro.setAlignment(Qt.AlignRight | Qt.AlignVCenter)
        lay.addWidget(self._ro)

        self._slider.valueChanged.connect(self._changed)

    def _changed(self, v):
        self._ro.setText(f"{v}{self._suffix}")
        self.valueChanged.emit(v)

    def value(self):
        return self._slider.value()

    def setValue(self, v):
        self._slider.setValue(v)


# ---------------------------------------------------------------------------
# Control panel
# ---------------------------------------------------------------------------

class ControlPanel(QWidget):
    """Side panel with the sphere controls."""

    save_requested = pyqtSignal()

    def __init__(
        self,
        canvas: SphereCanvas,
        engine: SphereEngine,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.canvas = canvas
        self.engine = engine
        self.setFixedWidth(300)

        layout = QVBoxLayout(self)
        layout.setSpacing(8)

        # ══════════════════════════════════════════════════════════════════
        # MORPH
        # ══════════════════════════════════════════════════════════════════
        morph_group = QGroupBox("Morph")
        mg = QVBoxLayout(morph_group)

        self._morph_btn = QPushButton()
        self._morph_btn.setCheckable(True)
        self._morph_btn.toggled.connect(self._on_morph)
        mg.addWidget(self._morph_btn)
        self._morph_btn.setChecked(engine.morph_enabled)
        self._sync_morph_label(engine.morph_enabled)

        layout.addWidget(morph_group)

        # ══════════════════════════════════════════════════════════════════
        # MOTION
        # ══════════════════════════════════════════════════════════════════
        motion_group = QGroupBox("Motion")
        og = QVBoxLayout(motion_group)

        self._rotate_chk = QCheckBox("Auto-rotate")
        self._rotate_chk.setChecked(canvas.auto_rotate)
        self._rotate_chk.toggled.connect(lambda v: setattr(self.canvas, "auto_rotate", v))
        og.addWidget(self._rotate_chk)

        self._speed_slider = LSlider("Rotation Speed", 0, 400, 100, "%")
        self._speed_slider.valueChanged.connect(self._on_rotation_speed)
        og.addWidget(self._speed_slider)

        layout.addWidget(motion_group)

        # ══════════════════════════════════════════════════════════════════
        # COLOURS
        # ══════════════════════════════════════════════════════════════════
        color_group = QGroupBox("Blink Colours")
        cg = QVBoxLayout(color_group)

        self._scheme_combo = QComboBox()
        for i, key in enumerate(list_schemes()):
            self._scheme_combo.addItem(SCHEMES[key].name, key)
            if SCHEMES[key] == engine.scheme:
                self._scheme_combo.setCurrentIndex(i)
        self._scheme_combo.currentIndexChanged.connect(self._on_scheme_changed)
        cg.addWidget(self._scheme_combo)

        layout.addWidget(color_group)

        # ══════════════════════════════════════════════════════════════════
        # ACTIONS
        # ══════════════════════════════════════════════════════════════════
        action_group = QGroupBox("Actions")
        ag = QGridLayout(action_group)

        self._pause_btn = QPushButton("⏸  Pause")
        self._pause_btn.setCheckable(True)
        self._pause_btn.toggled.connect(self._on_pause)
        ag.addWidget(self._pause_btn, 0, 0)

        reset_btn = QPushButton("↻  Reset")
        reset_btn.clicked.connect(self._on_reset)
        ag.addWidget(reset_btn, 0, 1)

        save_btn = QPushButton("↓  Save PNG")
        save_btn.clicked.connect(self.save_requested.emit)
        ag.addWidget(save_btn, 1, 0, 1, 2)

        layout.addWidget(action_group)

        # ── Status ────────────────────────────────────────────────────────
        self._status = QLabel("Ready. Move the pointer over the sphere")
        self._status.setWordWrap(True)
        self._status.setStyleSheet("color: #888; font-size: 11px; font-style: italic;")
        layout.addWidget(self._status)

        # ── Help ──────────────────────────────────────────────────────────
        help_lbl = QLabel(
            "<b>Interactions:</b><br>"
            "• <b>Hover</b> to push points out of the cursor zone<br>"
            "• <b>Swipe fast</b> to kick points outward<br>"
            "• Points drift back home once the cursor leaves<br><br>"
            "<i>Morph: two travelling radial waves over the "
            "Fibonacci lattice, faded in and out smoothly.</i>"
        )
        help_lbl.setWordWrap(True)
        help_lbl.setStyleSheet(
            "color: #777; font-size: 11px; padding: 8px; "
            "background: #1c1e1e; border-radius: 4px;"
        )
        layout.addWidget(help_lbl)

        layout.addStretch()

        # ── wire signals ──────────────────────────────────────────────────
        canvas.fps_changed.connect(self._on_fps)
        canvas.kicks_changed.connect(self._on_kicks)
        self._kicks = 0

    # ── slots ─────────────────────────────────────────────────────────────

    def _sync_morph_label(self, enabled: bool) -> None:
        self._morph_btn.setText("◉  Morph On" if enabled else "○  Morph Off")

    def _on_morph(self, checked: bool) -> None:
        self.engine.morph_enabled = checked
        self._sync_morph_label(checked)

    def set_morph(self, enabled: bool) -> None:
        self._morph_btn.setChecked(enabled)

    def _on_rotation_speed(self, v: int) -> None:
        self.canvas.rotation_step = ROTATION_STEP * v / 100

    def _on_scheme_changed(self, idx: int) -> None:
        key = self._scheme_combo.currentData()
        try:
            self.engine.scheme = get_scheme(key)
        except KeyError as e:
            logger.error("Scheme error: %s", e)

    def _on_pause(self, checked: bool) -> None:
        self.canvas.paused = checked
        self._pause_btn.setText("▶  Play" if checked else "⏸  Pause")

    def set_paused(self, paused: bool) -> None:
        self._pause_btn.setChecked(paused)

    def _on_reset(self) -> None:
        self.engine.reset()
        self.canvas.latch.clear()

    def _on_kicks(self, kicks: int) -> None:
        self._kicks = kicks

    def _on_fps(self, fps: float) -> None:
        self._status.setText(
            f"{self.engine.field.count} points  •  {fps:.0f} fps  •  "
            f"{self._kicks} kicks/s  •  morph {self.engine.evaluator.morph_lerp*100:.0f}%"
        )
