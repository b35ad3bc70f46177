# Pytest configuration and fixtures

import pytest
from pathlib import Path
import tempfile
import yaml

from railsim.core.types import (
    ComfortConfig,
    GameConfig,
    TerminalConfig,
    TrackGeneratorConfig,
    TrackLayout,
    TrainSimConfig,
)


@pytest.fixture
def seed():
    """Fixed seed for reproducibility."""
    return 42


@pytest.fixture
def track_config():
    """Default generator parameters."""
    return TrackGeneratorConfig()


@pytest.fixture
def short_track_config():
    """Short track that still leaves the straight stem."""
    return TrackGeneratorConfig(segment_count=60)


@pytest.fixture
def train_config():
    return TrainSimConfig()


@pytest.fixture
def terminal_config():
    return TerminalConfig()


@pytest.fixture
def layout():
    """Hand-built terminal layout on a 400 m straight."""
    return TrackLayout(
        bumper_distance=396.6,
        station_start_distance=262.6,
        station_end_distance=384.6,
    )


@pytest.fixture
def game_config():
    """Default configuration."""
    return GameConfig()


@pytest.fixture
def short_game_config():
    """Short level with comfort penalties disabled, so runs end on rules alone."""
    return GameConfig(
        track=TrackGeneratorConfig(segment_count=60),
        comfort=ComfortConfig(
            overspeed_penalty_rate=0.0,
            hard_brake_penalty_rate=0.0,
            jerk_penalty_rate=0.0,
            schedule_penalty_rate=0.0,
        ),
    )


@pytest.fixture
def config():
    """Standard test configuration."""
    return {
        "seed": 42,
        "fixed_dt": 1.0 / 60.0,
        "logging": {
            "level": "WARNING",
        },
        "track": {
            "segment_count": 120,
            "segment_length": 4.0,
            "stem_length": 120.0,
            "max_heading_delta": 0.045,
            "max_generation_attempts": 4,
        },
        "terminal": {
            "bumper_offset_from_track_end": 3.4,
            "station_gap_to_bumper": 12.0,
            "station_length": 122.0,
            "stop_speed_threshold": 0.35,
            "approach_decel": 1.15,
        },
        "train": {
            "mass": 50000.0,
            "traction_force_max": 60000.0,
            "brake_force_max": 75000.0,
            "drag_coefficient": 8.0,
            "rolling_resistance": 1500.0,
            "max_speed": 33.0,
        },
        "comfort": {
            "max": 100.0,
            "overspeed_penalty_rate": 1.5,
        },
        "sampler": {
            "preview_distances": [0.0, 25.0, 50.0, 100.0],
            "path_look_ahead_distance": 200.0,
            "path_sample_spacing": 10.0,
            "max_lateral_accel": 2.0,
            "safe_speed_min": 6.0,
            "safe_speed_max": 33.0,
            "curvature_epsilon": 0.0004,
        },
        "min_time": {
            "dt": 1.0 / 60.0,
            "stop_speed": 0.35,
            "time_ceiling_s": 1000.0,
            "margin_ms": 50,
        },
    }


@pytest.fixture
def temp_dir():
    """Create temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config_file(config, temp_dir):
    """Create temporary config file."""
    config_path = temp_dir / "config.yaml"
    with open(config_path, "w") as f:
        yaml.dump(config, f)
    return config_path
