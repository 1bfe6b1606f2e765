"""Tests for the point projector and CLI plumbing (no Qt required)."""
import math

import numpy as np
import pytest

from pointsphere.app import _parse_args, main
from pointsphere.camera import PerspectiveCamera
from pointsphere.engine import FrameInput, SphereEngine
from pointsphere.field import SphereConfig
from pointsphere.mathutils import quat_identity
from pointsphere.palettes import DEFAULT_SCHEME, SCHEMES, get_scheme, list_schemes
from pointsphere.renderer import breathing_scale, project_frame

W, H = 800, 600


class TestBreathing:
    def test_disabled(self):
        assert breathing_scale(1234.0, enabled=False) == 1.0

    def test_pulse(self):
        assert breathing_scale(0.0) == pytest.approx(1.0)
        assert breathing_scale(1000.0 * math.pi / 2) == pytest.approx(1.05)


class TestProjectFrame:
    def _frame(self):
        engine = SphereEngine(SphereConfig(dot_count=500, radius=2.0))
        engine.step(FrameInput(time=100.0))
        cam = PerspectiveCamera()
        cam.set_aspect(W, H)
        return engine, cam

    def test_sphere_fits_viewport(self):
        engine, cam = self._frame()
        pts = project_frame(engine.buffers, quat_identity(), 1.0, cam, W, H)
        assert len(pts.xy) == 500
        assert np.all((pts.xy[:, 0] > 0) & (pts.xy[:, 0] < W))
        assert np.all((pts.xy[:, 1] > 0) & (pts.xy[:, 1] < H))

    def test_far_to_near(self):
        engine, cam = self._frame()
        pts = project_frame(engine.buffers, quat_identity(), 1.0, cam, W, H)
        # Nearer points draw larger
        assert np.all(np.diff(pts.size) >= -1e-9)

    def test_colours_as_bytes(self):
        engine, cam = self._frame()
        pts = project_frame(engine.buffers, quat_identity(), 1.0, cam, W, H)
        assert pts.rgb.dtype == np.uint8
        allowed = {(30, 144, 255), (255, 255, 255)}
        assert {tuple(int(v) for v in c) for c in pts.rgb} <= allowed

    def test_points_behind_camera_culled(self):
        engine, _ = self._frame()
        cam = PerspectiveCamera(position=(0.0, 0.0, 1.0))   # inside the sphere
        pts = project_frame(engine.buffers, quat_identity(), 1.0, cam, W, H)
        assert 0 < len(pts.xy) < 500


class TestPalettes:
    def test_default_scheme(self):
        s = get_scheme(DEFAULT_SCHEME)
        assert s.primary == (0.1176, 0.5647, 1.0)
        assert s.secondary == (1.0, 1.0, 1.0)
        assert s.background_u8 == (0x16, 0x18, 0x18)

    def test_unknown_scheme(self):
        with pytest.raises(KeyError):
            get_scheme("nope")

    def test_list(self):
        assert list_schemes() == list(SCHEMES.keys())


class TestCli:
    def test_defaults(self):
        args = _parse_args([])
        assert args.dots is None
        assert args.radius == 2.0
        assert args.scheme == "classic"
        assert not args.no_morph

    def test_list_schemes(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--list-schemes"])
        assert exc.value.code == 0
        assert "classic" in capsys.readouterr().out

    def test_bad_radius(self):
        with pytest.raises(SystemExit) as exc:
            main(["--radius", "-1"])
        assert exc.value.code == 1

    def test_bad_scheme(self):
        with pytest.raises(SystemExit) as exc:
            main(["--scheme", "nope"])
        assert exc.value.code == 1
