# Tests for the arc-length polyline and curvature estimate

import math

import numpy as np
import pytest
from railsim.track.curvature import curvature_at_distance, signed_turn_angle
from railsim.track.generator import generate_track
from railsim.track.spline import TrackSpline


def square(side=10.0):
    return np.array([
        [0.0, 0.0, 0.0],
        [0.0, 0.0, side],
        [side, 0.0, side],
        [side, 0.0, 0.0],
    ])


def arc(radius, count=200, sweep=math.pi / 2):
    """Polyline approximating a circular arc turning towards +x."""
    angles = np.linspace(0.0, sweep, count + 1)
    pts = np.zeros((count + 1, 3))
    pts[:, 0] = radius - radius * np.cos(angles)
    pts[:, 2] = radius * np.sin(angles)
    return pts


class TestTrackSpline:

    def test_rejects_bad_shape(self):
        with pytest.raises(ValueError):
            TrackSpline(np.zeros((1, 3)))
        with pytest.raises(ValueError):
            TrackSpline(np.zeros((5, 2)))

    def test_length_open(self):
        spline = TrackSpline(square())
        assert spline.length == pytest.approx(30.0)
        assert not spline.is_closed

    def test_length_closed(self):
        """Closing adds the segment back to the first point."""
        spline = TrackSpline(square(), closed=True)
        assert spline.length == pytest.approx(40.0)
        assert len(spline.points) == 4

    def test_length_matches_generated_track(self, short_track_config, seed):
        points = generate_track(seed, 1, short_track_config)
        spline = TrackSpline(points)
        expected = np.sum(np.linalg.norm(np.diff(points, axis=0), axis=1))
        assert spline.length == pytest.approx(expected)

    def test_round_trip_open(self, short_track_config, seed):
        """Ends of an open track map onto the first and last points."""
        points = generate_track(seed, 1, short_track_config)
        spline = TrackSpline(points)
        assert np.allclose(spline.position_at_distance(0.0), points[0])
        assert np.array_equal(spline.position_at_distance(spline.length), points[-1])
        assert np.array_equal(spline.position_at_distance(spline.length + 50.0), points[-1])
        assert np.allclose(spline.position_at_distance(-5.0), points[0])

    def test_round_trip_closed(self):
        """A closed track wraps back to its first point."""
        spline = TrackSpline(square(), closed=True)
        assert np.allclose(spline.position_at_distance(spline.length), square()[0])
        assert np.allclose(spline.position_at_distance(45.0), [0.0, 0.0, 5.0])
        assert np.allclose(spline.position_at_distance(-5.0), [5.0, 0.0, 0.0])

    def test_interpolation(self):
        spline = TrackSpline(square())
        assert np.allclose(spline.position_at_distance(5.0), [0.0, 0.0, 5.0])
        assert np.allclose(spline.position_at_distance(15.0), [5.0, 0.0, 10.0])

    def test_tangent(self):
        spline = TrackSpline(square())
        assert np.allclose(spline.tangent_at_distance(5.0), [0.0, 0.0, 1.0])
        assert np.allclose(spline.tangent_at_distance(15.0), [1.0, 0.0, 0.0])
        assert np.allclose(spline.tangent_at_distance(25.0), [0.0, 0.0, -1.0])

    def test_normal_is_up(self):
        spline = TrackSpline(square())
        assert np.allclose(spline.normal_at_distance(12.0), [0.0, 1.0, 0.0])

    def test_wrap_distance(self):
        open_spline = TrackSpline(square())
        closed_spline = TrackSpline(square(), closed=True)
        assert open_spline.wrap_distance(100.0) == pytest.approx(30.0)
        assert closed_spline.wrap_distance(100.0) == pytest.approx(20.0)


class TestCurvature:

    def test_turn_angle_sign(self):
        """Turning from +z towards +x is positive."""
        forward = np.array([0.0, 0.0, 1.0])
        right = np.array([1.0, 0.0, 0.0])
        assert signed_turn_angle(forward, right) == pytest.approx(math.pi / 2)
        assert signed_turn_angle(right, forward) == pytest.approx(-math.pi / 2)
        assert signed_turn_angle(forward, forward) == pytest.approx(0.0)

    def test_straight_zero(self):
        pts = np.zeros((11, 3))
        pts[:, 2] = np.arange(11) * 10.0
        spline = TrackSpline(pts)
        assert curvature_at_distance(spline, 50.0) == pytest.approx(0.0)

    def test_circular_arc(self):
        """Curvature of a finely sampled arc is close to 1 / radius."""
        radius = 100.0
        spline = TrackSpline(arc(radius))
        k = curvature_at_distance(spline, spline.length / 2, span=8.0)
        assert k == pytest.approx(1.0 / radius, rel=0.1)

    def test_mirrored_arc_negative(self):
        pts = arc(100.0)
        pts[:, 0] *= -1.0
        spline = TrackSpline(pts)
        assert curvature_at_distance(spline, spline.length / 2, span=8.0) < 0.0

    def test_open_track_ends(self):
        """Clamped windows at the ends still give finite values."""
        spline = TrackSpline(arc(50.0))
        for d in (0.0, spline.length):
            assert math.isfinite(curvature_at_distance(spline, d))
