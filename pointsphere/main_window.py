"""
Main window: assembles the sphere canvas, control panel, and menu bar.
"""

from __future__ import annotations

import logging

from PyQt5.QtGui import QKeySequence
from PyQt5.QtWidgets import (
    QAction,
    QFileDialog,
    QHBoxLayout,
    QMainWindow,
    QMessageBox,
    QWidget,
)

from . import __version__
from .canvas import SphereCanvas
from .controls import ControlPanel
from .engine import SphereEngine

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """Top-level window for the point sphere."""

    def __init__(self, engine: SphereEngine, fps: int = 60) -> None:
        super().__init__()
        self.setWindowTitle(f"Point Sphere  v{__version__}")
        self.setMinimumSize(760, 520)

        self.engine = engine
        self.canvas = SphereCanvas(engine, fps=fps)
        self.controls = ControlPanel(self.canvas, engine)

        central = QWidget()
        self.setCentralWidget(central)
        h_layout = QHBoxLayout(central)
        h_layout.setContentsMargins(8, 8, 8, 8)
        h_layout.setSpacing(12)
        h_layout.addWidget(self.canvas, stretch=1)
        h_layout.addWidget(self.controls)

        self._build_menu()
        self.statusBar().showMessage(f"{engine.field.count} points ready")

        self.controls.save_requested.connect(self._save)

    def _build_menu(self) -> None:
        menu = self.menuBar()

        file_menu = menu.addMenu("&File")
        save_act = QAction("&Save Image…", self)
        save_act.setShortcut(QKeySequence.Save)
        save_act.triggered.connect(self._save)
        file_menu.addAction(save_act)
        file_menu.addSeparator()
        quit_act = QAction("&Quit", self)
        quit_act.setShortcut(QKeySequence.Quit)
        quit_act.triggered.connect(self.close)
        file_menu.addAction(quit_act)

        view_menu = menu.addMenu("&View")
        pause_act = QAction("&Pause / Resume", self)
        pause_act.setShortcut(QKeySequence("Space"))
        pause_act.triggered.connect(self._toggle_pause)
        view_menu.addAction(pause_act)
        morph_act = QAction("Toggle &Morph", self)
        morph_act.setShortcut(QKeySequence("M"))
        morph_act.triggered.connect(self._toggle_morph)
        view_menu.addAction(morph_act)
        reset_act = QAction("&Reset Points", self)
        reset_act.setShortcut(QKeySequence("Ctrl+R"))
        reset_act.triggered.connect(self._reset)
        view_menu.addAction(reset_act)

        help_menu = menu.addMenu("&Help")
        about_act = QAction("&About", self)
        about_act.triggered.connect(self._about)
        help_menu.addAction(about_act)

    def _save(self) -> None:
        img = self.canvas.get_image()
        if img is None:
            QMessageBox.warning(self, "Save Error", "No image to save yet.")
            return
        path, _ = QFileDialog.getSaveFileName(
            self, "Save Sphere Image", "pointsphere.png",
            "PNG (*.png);;JPEG (*.jpg);;All (*)",
        )
        if path:
            if img.save(path):
                self.statusBar().showMessage(f"Saved to {path}")
            else:
                QMessageBox.critical(self, "Save Error", f"Failed to save:\n{path}")

    def _toggle_pause(self) -> None:
        self.controls.set_paused(not self.canvas.paused)

    def _toggle_morph(self) -> None:
        self.controls.set_morph(not self.engine.morph_enabled)

    def _reset(self) -> None:
        self.controls._on_reset()
        self.statusBar().showMessage("Points reset")

    def _about(self) -> None:
        QMessageBox.about(
            self,
            "About Point Sphere",
            f"<h3>Point Sphere v{__version__}</h3>"
            "<p>An interactive point-cloud sphere that reacts to the pointer.</p>"
            "<p><b>Interaction model:</b></p>"
            "<ul>"
            "<li>Ray/sphere intersection maps the pointer to the surface</li>"
            "<li>Swept cursor path (13 samples) catches fast swipes</li>"
            "<li>Exclusion-boundary snap with a soft easing band</li>"
            "<li>Sine-eased outward kicks, at most two per sample</li>"
            "<li>Hold, then exponential return home</li>"
            "</ul>"
            "<p><b>Morph:</b> two travelling radial waves over the "
            "Fibonacci lattice with a smoothly eased on/off toggle.</p>",
        )
