# Tests for headless session orchestration

import math

import pytest
from railsim.core.types import (
    ComfortConfig,
    FailureReason,
    GameConfig,
    GameStatus,
    TrackGeneratorConfig,
    TrackSamplerConfig,
    TrainControls,
)
from railsim.sim.session import DriveSession

THROTTLE = TrainControls(throttle=1.0, brake=0.0)
BRAKE = TrainControls(throttle=0.0, brake=1.0)


def drive(session, target_distance=None, max_seconds=300.0):
    """Bang-bang towards target_distance, or full throttle when None."""
    dt = session.config.fixed_dt
    frame = session.step(TrainControls(), 0.0)
    for _ in range(int(max_seconds / dt)):
        controls = THROTTLE
        if target_distance is not None:
            stopping = frame.speed * frame.speed / (2.0 * session.train.max_decel)
            if frame.distance + stopping >= target_distance:
                controls = BRAKE
        frame = session.step(controls, dt)
        if frame.status.is_terminal:
            break
    return frame


class TestDriveSession:

    def test_starts_ready(self, short_game_config):
        session = DriveSession(short_game_config, level=1, seed=42)
        assert session.status is GameStatus.READY
        assert "Level 1" in session.get_status_message()

    def test_ready_holds_brake(self, short_game_config):
        """Throttle before start() does not move the train or the clock."""
        session = DriveSession(short_game_config, level=1, seed=42)
        for _ in range(60):
            frame = session.step(THROTTLE, short_game_config.fixed_dt)
        assert frame.status is GameStatus.READY
        assert frame.distance == 0.0
        assert frame.elapsed == 0.0
        assert frame.brake == 1.0

    def test_frame_contents(self, short_game_config):
        session = DriveSession(short_game_config, level=1, seed=42)
        session.start()
        frame = session.step(THROTTLE, short_game_config.fixed_dt)
        assert frame.status is GameStatus.RUNNING
        assert frame.throttle == 1.0
        assert len(frame.samples) == len(short_game_config.sampler.preview_distances)
        assert frame.path_points[-1].distance_ahead == pytest.approx(
            short_game_config.sampler.path_look_ahead_distance
        )
        assert 0.0 < frame.safe_speed <= short_game_config.sampler.safe_speed_max
        assert frame.comfort_ratio == 1.0

    def test_par_time(self, short_game_config):
        session = DriveSession(short_game_config, level=1, seed=42)
        assert session.par_time_s > 0.0
        assert session.expected_duration == pytest.approx(
            session.par_time_s * short_game_config.schedule.par_factor
        )

    def test_station_stop_wins(self, short_game_config):
        session = DriveSession(short_game_config, level=1, seed=42)
        session.start()
        frame = drive(session, target_distance=session.layout.station_end_distance - 10.0)
        assert frame.status is GameStatus.WON
        assert frame.failure_reason is None
        assert session.layout.in_station(frame.distance)
        assert session.completion_time_ms == math.floor(session.elapsed * 1000.0)
        assert "win" in frame.status_message

    def test_hold_after_win(self, short_game_config):
        session = DriveSession(short_game_config, level=1, seed=42)
        session.start()
        drive(session, target_distance=session.layout.station_end_distance - 10.0)
        elapsed = session.elapsed
        frame = session.step(THROTTLE, short_game_config.fixed_dt)
        assert frame.status is GameStatus.WON
        assert frame.throttle == 0.0
        assert session.elapsed == elapsed

    def test_overrun_fails_on_bumper(self, short_game_config):
        session = DriveSession(short_game_config, level=1, seed=42)
        session.start()
        frame = drive(session)
        assert frame.status is GameStatus.FAILED
        assert frame.failure_reason is FailureReason.BUMPER
        assert frame.distance >= session.layout.bumper_distance
        assert session.completion_time_ms is None

    def test_comfort_failure(self):
        config = GameConfig(
            track=TrackGeneratorConfig(segment_count=60),
            comfort=ComfortConfig(max=1.0),
            sampler=TrackSamplerConfig(safe_speed_min=1.0, safe_speed_max=6.0),
        )
        session = DriveSession(config, level=1, seed=42)
        session.start()
        frame = drive(session)
        assert frame.status is GameStatus.FAILED
        assert frame.failure_reason is FailureReason.COMFORT
        assert frame.comfort == 0.0

    def test_restart(self, short_game_config):
        session = DriveSession(short_game_config, level=1, seed=42)
        session.start()
        drive(session)
        session.restart()
        assert session.status is GameStatus.RUNNING
        assert session.train.distance == 0.0
        assert session.comfort.comfort == short_game_config.comfort.max
        assert session.failure_reason is None
        assert session.elapsed == 0.0

    def test_deterministic_track(self, short_game_config):
        a = DriveSession(short_game_config, level=2, seed=7)
        b = DriveSession(short_game_config, level=2, seed=7)
        assert a.spline.length == b.spline.length
        assert a.layout == b.layout
