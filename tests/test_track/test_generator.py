# Tests for procedural track generation

import numpy as np
import pytest
from railsim.core.geometry import count_self_intersections
from railsim.core.noise import seed_for_attempt
from railsim.core.types import TrackGeneratorConfig
from railsim.track.generator import TrackGenerator, generate_track, track_config_for_level


def headings(points):
    """Heading of each segment, measured from +z towards +x."""
    deltas = np.diff(points, axis=0)
    return np.arctan2(deltas[:, 0], deltas[:, 2])


class TestTrackGenerator:

    def test_shape(self, track_config, seed):
        """Should return segment_count + 1 points in 3-D."""
        points = generate_track(seed, 1, track_config)
        assert points.shape == (track_config.segment_count + 1, 3)
        assert np.all(points[:, 1] == 0.0)
        assert np.all(points[0] == 0.0)

    def test_deterministic(self, track_config, seed):
        """Same seed and level should give bit-identical tracks."""
        a = generate_track(seed, 1, track_config)
        b = generate_track(seed, 1, track_config)
        assert np.array_equal(a, b)

    def test_seed_changes_track(self, track_config, seed):
        a = generate_track(seed, 1, track_config)
        b = generate_track(seed + 1, 1, track_config)
        assert not np.array_equal(a, b)

    def test_level_folds_into_seed(self, track_config, seed):
        """Level L of seed S walks the same field as level 1 of S + L - 1."""
        a = generate_track(seed, 3, track_config)
        b = generate_track(seed + 2, 1, track_config)
        assert np.array_equal(a, b)

    def test_segment_length(self, track_config, seed):
        """Every segment should have the configured length."""
        points = generate_track(seed, 1, track_config)
        lengths = np.linalg.norm(np.diff(points, axis=0), axis=1)
        assert np.allclose(lengths, track_config.segment_length, atol=1e-6)

    def test_heading_bound(self, track_config, seed):
        """Consecutive segments never turn by more than max_heading_delta."""
        points = generate_track(seed, 1, track_config)
        turns = np.diff(headings(points))
        turns = (turns + np.pi) % (2 * np.pi) - np.pi
        assert np.max(np.abs(turns)) <= track_config.max_heading_delta + 1e-9

    def test_stem_straightness(self, seed):
        """A stem covering the whole track gives a straight line along z."""
        config = TrackGeneratorConfig(segment_count=50, stem_length=50 * 4.0)
        points = generate_track(seed, 1, config)
        assert np.allclose(points[:, 0], 0.0)
        assert points[-1, 2] == pytest.approx(200.0)

    def test_stem_prefix_straight(self, track_config, seed):
        """Points inside the stem stay on the z axis."""
        points = generate_track(seed, 1, track_config)
        stem_points = int(track_config.stem_length // track_config.segment_length) + 1
        assert np.allclose(points[:stem_points, 0], 0.0)

    def test_read_only(self, short_track_config, seed):
        points = generate_track(seed, 1, short_track_config)
        with pytest.raises(ValueError):
            points[0, 0] = 1.0

    @pytest.mark.parametrize("seed", [1, 2, 3, 42, 1337])
    def test_avoidance_not_worse_than_baseline(self, track_config, seed):
        """Chosen attempt has no more crossings than the raw noise walk."""
        generator = TrackGenerator(track_config, seed, 1)
        report = generator.generate_with_report()
        baseline = generator.walk(seed_for_attempt(generator.generation_seed, 0), avoid_self=False)
        assert report.intersection_count <= count_self_intersections(baseline)
        assert report.intersection_count == count_self_intersections(report.points)

    def test_report_attempts(self, track_config, seed):
        report = TrackGenerator(track_config, seed, 1).generate_with_report()
        assert 1 <= report.attempts_tried <= track_config.max_generation_attempts
        assert report.is_clean == (report.intersection_count == 0)

    def test_explicit_zero_attempts(self, seed):
        """Zero attempts still generates once."""
        config = TrackGeneratorConfig(segment_count=60, max_generation_attempts=0)
        generator = TrackGenerator(config, seed)
        assert generator._attempts == 1
        assert generator.generate_with_report().attempts_tried == 1

    def test_missing_attempts_uses_default(self, seed):
        generator = TrackGenerator(TrackGeneratorConfig(max_generation_attempts=None), seed)
        assert generator._attempts == 8

    def test_explicit_zero_recent_ignore(self, seed):
        """Adjacent segments are always skipped, even when zero is configured."""
        generator = TrackGenerator(TrackGeneratorConfig(avoidance_recent_segment_ignore=0), seed)
        assert generator._recent_ignore == 1


class TestResolveHeading:
    """Heading choice against a hand-built history ending at the origin."""

    # Old segment from (2.9, 10) to (2.9, 4); the walk now stands at the origin
    # heading +z, so a straight segment would end 2.9 m from it.
    NEAR_X = np.array([2.9, 2.9, 0.0])
    NEAR_Z = np.array([10.0, 4.0, 0.0])

    # Old segment across z = 2 that every candidate must cross.
    WALL_X = np.array([-10.0, 10.0, 0.0])
    WALL_Z = np.array([2.0, 2.0, 0.0])

    def make_generator(self, **overrides):
        params = dict(avoidance_recent_segment_ignore=1)
        params.update(overrides)
        return TrackGenerator(TrackGeneratorConfig(**params), seed=1)

    def test_no_history_takes_clamped_target(self):
        generator = self.make_generator()
        heading = generator._resolve_heading(self.NEAR_X, self.NEAR_Z, 2, 0.0, 0.0, 0.0, 0.1)
        assert heading == pytest.approx(0.045)

    def test_sweep_takes_first_clear_candidate(self):
        """The sweep stops at the smallest turn away from the old segment that clears it."""
        generator = self.make_generator(
            min_self_intersection_distance=3.0,
            avoidance_heading_step=0.001,
            avoidance_sweep_steps=60,
        )
        heading = generator._resolve_heading(self.NEAR_X, self.NEAR_Z, 3, 0.0, 0.0, 0.0, 0.0)
        assert heading == pytest.approx(-0.026, abs=1e-9)

    def test_fallback_takes_largest_clearance(self):
        """When nothing clears, the turn that gets furthest away wins."""
        generator = self.make_generator(min_self_intersection_distance=10.0)
        heading = generator._resolve_heading(self.NEAR_X, self.NEAR_Z, 3, 0.0, 0.0, 0.0, 0.0)
        assert heading == pytest.approx(-0.045)

    def test_all_crossing_keeps_target(self):
        """When every candidate crosses, the tie goes to the noise-driven heading."""
        generator = self.make_generator()
        heading = generator._resolve_heading(self.WALL_X, self.WALL_Z, 3, 0.0, 0.0, 0.0, 0.01)
        assert heading == pytest.approx(0.01)


class TestLevelScaling:

    def test_level_one_unchanged(self, track_config):
        assert track_config_for_level(track_config, 1) == track_config

    def test_longer_and_twistier(self, track_config):
        level3 = track_config_for_level(track_config, 3)
        assert level3.segment_count == track_config.segment_count + 320
        assert level3.base_curvature_per_meter == pytest.approx(track_config.base_curvature_per_meter * 1.5)
        assert level3.detail_curvature_per_meter == pytest.approx(track_config.detail_curvature_per_meter * 1.5)
        assert level3.max_heading_delta == track_config.max_heading_delta
