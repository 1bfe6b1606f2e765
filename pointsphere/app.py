"""
Application entry point: CLI parsing, dependency checks, Qt launch.
"""

from __future__ import annotations

import argparse
import logging
import sys

from . import __version__


def _check_deps() -> list:
    missing = []
    try:
        import numpy  # noqa: F401
    except ImportError:
        missing.append("numpy")
    try:
        import PyQt5  # noqa: F401
    except ImportError:
        missing.append("PyQt5")
    return missing


def _parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="pointsphere",
        description="Point Sphere, an interactive point-cloud sphere.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  %(prog)s                          # 1600 points, radius 2\n"
            "  %(prog)s --compact                # lighter 800-point sphere\n"
            "  %(prog)s --dots 3000 --radius 1.5  # denser, smaller sphere\n"
            "  %(prog)s --no-morph --scheme ember  # static shape, warm blink\n"
            "  %(prog)s --list-schemes            # show available colour schemes\n"
            "  %(prog)s -v                        # verbose logging\n"
        ),
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--dots", type=int, default=None, help="Number of points (default 1600)")
    p.add_argument("--compact", action="store_true", help="Use the 800-point default")
    p.add_argument("--radius", type=float, default=2.0, help="Sphere radius (default 2)")
    p.add_argument("--no-morph", action="store_true", help="Start with the wave morph off")
    p.add_argument("--scheme", type=str, default="classic", help="Blink colour scheme")
    p.add_argument("--fps", type=int, default=60, help="Target frame rate (10-120, default 60)")
    p.add_argument("--list-schemes", action="store_true", help="List colour schemes and exit")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return p.parse_args(argv)


def main(argv=None) -> None:
    args = _parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    logger = logging.getLogger("pointsphere")

    # List schemes
    if args.list_schemes:
        from .palettes import SCHEMES, list_schemes
        print("Available colour schemes:")
        for key in list_schemes():
            s = SCHEMES[key]
            print(f"  {key:10s}  {s.name:14s}  primary={s.primary}  secondary={s.secondary}")
        sys.exit(0)

    # Dependency check
    missing = _check_deps()
    if missing:
        print(f"ERROR: Missing packages: {', '.join(missing)}\n"
              f"Install: pip install {' '.join(missing)}", file=sys.stderr)
        sys.exit(1)

    # Validate
    from .field import ConfigError, SphereConfig
    config = SphereConfig.compact() if args.compact else SphereConfig()
    if args.dots is not None:
        config.dot_count = args.dots
    config.radius = args.radius
    try:
        config.validate()
    except ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)

    if not (10 <= args.fps <= 120):
        print("ERROR: --fps must be 10-120.", file=sys.stderr)
        sys.exit(1)

    from .palettes import SCHEMES, get_scheme
    if args.scheme not in SCHEMES:
        from .palettes import list_schemes
        avail = ", ".join(list_schemes())
        print(f"ERROR: Unknown scheme '{args.scheme}'. Available: {avail}", file=sys.stderr)
        sys.exit(1)

    # Launch
    logger.info("Starting Point Sphere v%s", __version__)
    logger.info("Points: %d, Radius: %g, Scheme: %s, Morph: %s",
                config.dot_count, config.radius, args.scheme,
                "off" if args.no_morph else "on")

    from PyQt5.QtWidgets import QApplication
    from .engine import SphereEngine
    from .main_window import MainWindow

    app = QApplication(sys.argv)
    app.setStyle("Fusion")
    app.setApplicationName("Point Sphere")
    app.setApplicationVersion(__version__)

    # Dark theme
    app.setStyleSheet("""
        QMainWindow, QWidget {
            background: #161818;
            color: #c8ccd0;
        }
        QGroupBox {
            font-weight: bold;
            font-size: 12px;
            color: #7fb8ff;
            border: 1px solid #2c3236;
            border-radius: 6px;
            margin-top: 8px;
            padding-top: 14px;
        }
        QGroupBox::title {
            subcontrol-origin: margin;
            subcontrol-position: top left;
            padding: 2px 8px;
        }
        QPushButton {
            background: #1f2427;
            border: 1px solid #3a4247;
            border-radius: 5px;
            padding: 5px 12px;
            color: #c8ccd0;
            font-size: 12px;
        }
        QPushButton:hover {
            background: #2a3135;
            border-color: #52606a;
        }
        QPushButton:checked {
            background: #1e4f80;
            color: #eaf4ff;
        }
        QComboBox {
            background: #1f2427;
            border: 1px solid #3a4247;
            border-radius: 4px;
            padding: 4px 8px;
            color: #c8ccd0;
        }
        QSlider::groove:horizontal {
            height: 4px;
            background: #2c3236;
            border-radius: 2px;
        }
        QSlider::handle:horizontal {
            background: #1e90ff;
            width: 14px;
            height: 14px;
            margin: -5px 0;
            border-radius: 7px;
        }
        QLabel {
            color: #aab0b6;
            font-size: 12px;
        }
        QStatusBar {
            color: #7a8288;
            font-size: 11px;
        }
        QMenu {
            background: #1f2427;
            color: #c8ccd0;
        }
        QMenu::item:selected {
            background: #1e4f80;
        }
    """)

    engine = SphereEngine(config=config, scheme=get_scheme(args.scheme))
    engine.morph_enabled = not args.no_morph

    window = MainWindow(engine, fps=args.fps)
    window.resize(1040, 720)
    window.show()

    sys.exit(app.exec_())
