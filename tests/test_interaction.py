"""Tests for the per-point interaction state machine."""
import numpy as np
import pytest

from pointsphere.field import ParticleField, Regime, SphereConfig
from pointsphere.interaction import (
    InteractionParams,
    InteractionStateMachine,
    kick_magnitude,
)
from pointsphere.mathutils import quat_from_axis_angle, quat_identity, rotate_vectors

RADIUS = 2.0
ZONE = 0.38 * RADIUS
BOUNDARY = ZONE + 0.001


def _machine(count=1600, params=None):
    field = ParticleField(SphereConfig(dot_count=count, radius=RADIUS))
    return field, InteractionStateMachine(field, params)


def _surface_near(field, index, nudge=(0.01, 0.02, 0.0)):
    """A cursor point on the sphere close to, but not on, a lattice point."""
    p = field.original_positions[index] + np.asarray(nudge)
    return p / np.linalg.norm(p) * RADIUS


class TestKickMagnitude:
    def test_sub_threshold_force_is_zero(self):
        p = InteractionParams()
        assert kick_magnitude(0.8, RADIUS, p) == 0.0
        assert kick_magnitude(1.0, RADIUS, p) == 0.0

    def test_power_law(self):
        p = InteractionParams()
        assert kick_magnitude(2.0, RADIUS, p) == pytest.approx(0.7)
        assert kick_magnitude(2.5, RADIUS, p) == pytest.approx(0.7 * 1.5 ** 1.15)

    def test_capped(self):
        assert kick_magnitude(100.0, RADIUS, InteractionParams()) == pytest.approx(0.7 * RADIUS)


class TestExclusionZone:
    def test_zero_distance_uses_snap_branch(self):
        field, sm = _machine()
        k = 500
        cursor = field.original_positions[k].copy()
        sm.apply_pointer(cursor, None, 0.0, quat_identity())
        assert field.return_timers[k] == 0.0
        assert field.kick_progress[k] == 1.0
        assert np.all(np.isfinite(field.spread_offsets))
        np.testing.assert_allclose(field.spread_offsets[k], 0.0, atol=1e-12)

    def test_inside_points_snap_to_boundary(self):
        field, sm = _machine()
        cursor = _surface_near(field, 700)
        orig = field.original_positions
        dist = np.linalg.norm(orig - cursor, axis=1)
        inside = dist < ZONE
        assert inside.sum() > 5

        report = sm.apply_pointer(cursor, None, 0.0, quat_identity())
        moved = np.linalg.norm(orig[inside] + field.spread_offsets[inside] - cursor, axis=1)
        np.testing.assert_allclose(moved, BOUNDARY, atol=1e-9)
        np.testing.assert_array_equal(field.return_timers[inside], 0.0)
        assert report.kicks == 0

    def test_buffer_band_eases_and_holds(self):
        field, sm = _machine()
        cursor = _surface_near(field, 700)
        orig = field.original_positions
        dist = np.linalg.norm(orig - cursor, axis=1)
        band = (dist >= ZONE) & (dist < ZONE + 0.18)
        assert band.any()

        sm.apply_pointer(cursor, None, 0.0, quat_identity())
        # Thirteen 18% steps along the same radial line
        expected = BOUNDARY + (dist[band] - BOUNDARY) * 0.82 ** 13
        moved = np.linalg.norm(orig[band] + field.spread_offsets[band] - cursor, axis=1)
        np.testing.assert_allclose(moved, expected, atol=1e-9)
        np.testing.assert_allclose(field.return_timers[band], 0.4)
        assert np.all(field.regimes()[band] == Regime.HELD)

    def test_far_points_untouched(self):
        field, sm = _machine()
        cursor = _surface_near(field, 700)
        dist = np.linalg.norm(field.original_positions - cursor, axis=1)
        far = dist >= ZONE + 0.18
        field.return_timers[far] = 0.3
        report = sm.apply_pointer(cursor, None, 0.0, quat_identity())
        np.testing.assert_array_equal(field.spread_offsets[far], 0.0)
        np.testing.assert_array_equal(field.return_timers[far], 0.0)
        assert report.touched == int((~far).sum())

    def test_rotated_sphere(self):
        field, sm = _machine()
        q = quat_from_axis_angle([0.0, 1.0, 0.0], 0.9)
        orig = field.original_positions
        world = rotate_vectors(q, orig)
        cursor = rotate_vectors(q, _surface_near(field, 900))
        inside = np.linalg.norm(world - cursor, axis=1) < ZONE
        assert inside.any()

        sm.apply_pointer(cursor, None, 0.0, q)
        displaced = rotate_vectors(q, orig[inside] + field.spread_offsets[inside])
        np.testing.assert_allclose(np.linalg.norm(displaced - cursor, axis=1), BOUNDARY, atol=1e-9)


class TestKicks:
    def test_kick_cap_per_step(self):
        field, sm = _machine()
        cursor = _surface_near(field, 800)
        dist = np.linalg.norm(field.original_positions - cursor, axis=1)
        inside = np.flatnonzero(dist < ZONE)
        assert len(inside) > 26

        report = sm.apply_pointer(cursor, None, 20.0, quat_identity())
        assert len(report.kicks_per_step) == 13
        assert all(k <= 2 for k in report.kicks_per_step)
        assert report.kicks == 26
        kicked = np.flatnonzero(field.kick_progress < 1.0)
        np.testing.assert_array_equal(kicked, inside[:26])

    def test_custom_cap(self):
        field, sm = _machine(params=InteractionParams(max_kicks_per_step=1))
        cursor = _surface_near(field, 800)
        report = sm.apply_pointer(cursor, None, 20.0, quat_identity())
        assert report.kicks_per_step == [1] * 13

    def test_no_kick_at_threshold(self):
        field, sm = _machine()
        cursor = _surface_near(field, 800)
        report = sm.apply_pointer(cursor, None, 2.5, quat_identity())   # force 0.5
        assert report.kicks == 0
        np.testing.assert_array_equal(field.kick_progress, 1.0)

    def test_kick_setup(self):
        field, sm = _machine()
        cursor = _surface_near(field, 800)
        sm.apply_pointer(cursor, None, 20.0, quat_identity())   # force 4
        kicked = np.flatnonzero(field.kick_progress < 1.0)
        orig = field.original_positions

        np.testing.assert_array_equal(field.kick_progress[kicked], 0.0)
        np.testing.assert_allclose(field.spread_offsets[kicked], field.kick_start[kicked])
        start = np.linalg.norm(orig[kicked] + field.kick_start[kicked] - cursor, axis=1)
        np.testing.assert_allclose(start, BOUNDARY, atol=1e-9)
        # Outward, capped at 0.7 * radius
        np.testing.assert_allclose(np.linalg.norm(field.kick_direction[kicked], axis=1), 0.7 * RADIUS)
        outward = np.einsum("ij,ij->i", field.kick_direction[kicked], orig[kicked] - cursor)
        assert np.all(outward > 0)

    def test_kicking_points_skipped_later_in_frame(self):
        field, sm = _machine()
        cursor = _surface_near(field, 800)
        sm.apply_pointer(cursor, None, 20.0, quat_identity())
        kicked = field.kick_progress < 1.0
        start = field.spread_offsets[kicked].copy()
        sm.apply_pointer(cursor, None, 20.0, quat_identity())
        np.testing.assert_array_equal(field.spread_offsets[kicked], start)

    def test_progress_monotonic_until_rest(self):
        field, sm = _machine()
        cursor = _surface_near(field, 800)
        sm.apply_pointer(cursor, None, 20.0, quat_identity())
        kicked = field.kick_progress < 1.0
        start = field.kick_start[kicked].copy()
        direction = field.kick_direction[kicked].copy()

        prev = field.kick_progress[kicked].copy()
        for frame in range(29):
            sm.advance()
            cur = field.kick_progress[kicked].copy()
            assert np.all(cur >= prev)
            if frame < 28:
                assert np.all(cur < 1.0)
            prev = cur
        np.testing.assert_array_equal(prev, 1.0)
        np.testing.assert_allclose(field.spread_offsets[kicked], start + direction)
        assert np.all(field.regimes()[kicked] == Regime.AT_REST)


class TestSweptPath:
    def test_catches_points_between_samples(self):
        a = np.array([np.cos(-0.7), 0.0, np.sin(-0.7)]) * RADIUS
        b = np.array([np.cos(0.7), 0.0, np.sin(0.7)]) * RADIUS

        field, sm = _machine()
        p = int(np.argmin(np.linalg.norm(field.original_positions - [RADIUS, 0.0, 0.0], axis=1)))
        orig = field.original_positions[p]
        assert np.linalg.norm(orig - a) > ZONE + 0.18
        assert np.linalg.norm(orig - b) > ZONE + 0.18

        sm.apply_pointer(b, None, 0.0, quat_identity())
        np.testing.assert_array_equal(field.spread_offsets[p], 0.0)

        field, sm = _machine()
        sm.apply_pointer(b, a, 0.0, quat_identity())
        assert np.linalg.norm(field.spread_offsets[p]) > 0.0


class TestAdvance:
    def test_rest_decays_to_zero(self):
        field, sm = _machine(count=200)
        rng = np.random.default_rng(3)
        field.spread_offsets[:] = rng.uniform(-1.0, 1.0, size=(200, 3))
        for _ in range(1000):
            sm.advance()
        assert np.max(np.abs(field.spread_offsets)) < 1e-9

    def test_rest_step_is_three_percent(self):
        field, sm = _machine(count=4)
        field.spread_offsets[0] = [1.0, -2.0, 0.5]
        sm.advance()
        np.testing.assert_allclose(field.spread_offsets[0], [0.97, -1.94, 0.485])

    def test_hold_then_return(self):
        field, sm = _machine(count=8)
        field.spread_offsets[3] = [0.5, 0.0, 0.0]
        field.return_timers[3] = 0.4

        sm.advance()
        assert field.return_timers[3] == pytest.approx(0.383)
        np.testing.assert_array_equal(field.spread_offsets[3], [0.5, 0.0, 0.0])

        for _ in range(23):
            sm.advance()
        assert field.return_timers[3] == 0.0
        np.testing.assert_array_equal(field.spread_offsets[3], [0.5, 0.0, 0.0])

        sm.advance()
        np.testing.assert_allclose(field.spread_offsets[3], [0.485, 0.0, 0.0])

    def test_regimes_stay_exclusive(self):
        field, sm = _machine()
        cursor = _surface_near(field, 800)
        sm.apply_pointer(cursor, None, 20.0, quat_identity())
        for _ in range(40):
            sm.advance()
            tags = field.regimes()
            assert set(np.unique(tags)) <= {Regime.AT_REST, Regime.HELD, Regime.KICKING}
            field.check_invariants()
