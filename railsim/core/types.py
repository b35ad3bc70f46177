# Core type definitions
# FORBIDDEN: logging, any I/O

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Type, TypeVar


C = TypeVar("C")


def _from_section(cls: Type[C], section: Optional[Dict[str, Any]]) -> C:
    """Build a config dataclass from a dict, ignoring unknown keys."""
    if not section:
        return cls()
    known = {f.name for f in fields(cls)}
    kwargs = {key: value for key, value in section.items() if key in known}
    return cls(**kwargs)


@dataclass(frozen=True)
class TrackGeneratorConfig:
    """Procedural track walk parameters.

    Lengths are meters, angles radians, curvatures 1/m.
    Optional avoidance knobs default to values derived from the segment
    length and heading limit.
    """
    segment_count: int = 400
    segment_length: float = 4.0
    stem_length: float = 120.0
    max_heading_delta: float = 0.045
    curvature_noise_scale: float = 0.0016
    detail_noise_scale: float = 0.011
    base_curvature_per_meter: float = 0.0055
    detail_curvature_per_meter: float = 0.0025
    heading_damping: float = 0.0009
    bias_tracking: float = 0.02
    lateral_pull: float = 0.000004
    origin_warp_strength: float = 0.15
    min_self_intersection_distance: Optional[float] = 14.0
    avoidance_heading_step: Optional[float] = 0.006
    avoidance_sweep_steps: Optional[int] = 12
    avoidance_recent_segment_ignore: Optional[int] = 8
    max_generation_attempts: Optional[int] = 8


@dataclass(frozen=True)
class TerminalConfig:
    """Terminal station and bumper placement relative to the track end."""
    bumper_offset_from_track_end: float = 3.4
    station_gap_to_bumper: float = 12.0
    station_length: float = 122.0
    stop_speed_threshold: float = 0.35
    approach_decel: float = 1.15


@dataclass(frozen=True)
class TrainSimConfig:
    """Longitudinal train dynamics (SI units)."""
    mass: float = 50000.0
    traction_force_max: float = 60000.0
    brake_force_max: float = 75000.0
    drag_coefficient: float = 8.0
    rolling_resistance: float = 1500.0
    max_speed: float = 33.0


@dataclass(frozen=True)
class ComfortConfig:
    """Passenger comfort meter. Rates are per second."""
    max: float = 100.0
    overspeed_penalty_rate: float = 1.5
    hard_brake_threshold: float = -1.2
    hard_brake_penalty_rate: float = 6.0
    jerk_threshold: float = 1.5
    jerk_penalty_rate: float = 2.0
    schedule_penalty_rate: float = 0.5


@dataclass(frozen=True)
class TrackSamplerConfig:
    """Look-ahead sampling for the curvature preview and minimap."""
    preview_distances: Tuple[float, ...] = (0.0, 25.0, 50.0, 100.0, 150.0, 200.0, 300.0, 400.0)
    path_look_ahead_distance: float = 500.0
    path_sample_spacing: float = 10.0
    curvature_span: float = 4.0
    max_lateral_accel: float = 2.0
    safe_speed_min: float = 6.0
    safe_speed_max: float = 33.0
    curvature_epsilon: float = 0.0004

    def __post_init__(self) -> None:
        # YAML hands us lists
        object.__setattr__(self, "preview_distances", tuple(float(d) for d in self.preview_distances))


@dataclass(frozen=True)
class ControlRampConfig:
    """Input shaping for digital (key/button) throttle and brake."""
    throttle_rate_per_second: float = 0.6
    brake_ramp_seconds: float = 1.2
    brake_tap_seconds: float = 0.2
    brake_pulse_seconds: float = 0.16
    brake_pulse_strength: float = 0.45


@dataclass(frozen=True)
class ScheduleConfig:
    """Par time used for ETA and schedule pressure."""
    par_factor: float = 1.35


@dataclass(frozen=True)
class MinTimeConfig:
    """Bang-bang minimum time calculator settings."""
    dt: float = 1.0 / 60.0
    stop_speed: float = 0.35
    time_ceiling_s: float = 1000.0
    margin_ms: int = 50


@dataclass(frozen=True)
class GameConfig:
    """Complete immutable configuration for one game/session."""
    seed: int = 1337
    fixed_dt: float = 1.0 / 60.0
    track: TrackGeneratorConfig = field(default_factory=TrackGeneratorConfig)
    terminal: TerminalConfig = field(default_factory=TerminalConfig)
    train: TrainSimConfig = field(default_factory=TrainSimConfig)
    comfort: ComfortConfig = field(default_factory=ComfortConfig)
    sampler: TrackSamplerConfig = field(default_factory=TrackSamplerConfig)
    controls: ControlRampConfig = field(default_factory=ControlRampConfig)
    schedule: ScheduleConfig = field(default_factory=ScheduleConfig)
    min_time: MinTimeConfig = field(default_factory=MinTimeConfig)

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "GameConfig":
        """Build from a nested dict as loaded from YAML.

        Args:
            config: Dict with optional sections track, terminal, train,
                comfort, sampler, controls, schedule, min_time

        Returns:
            GameConfig with defaults for anything missing
        """
        return cls(
            seed=int(config.get("seed", cls.seed)),
            fixed_dt=float(config.get("fixed_dt", cls.fixed_dt)),
            track=_from_section(TrackGeneratorConfig, config.get("track")),
            terminal=_from_section(TerminalConfig, config.get("terminal")),
            train=_from_section(TrainSimConfig, config.get("train")),
            comfort=_from_section(ComfortConfig, config.get("comfort")),
            sampler=_from_section(TrackSamplerConfig, config.get("sampler")),
            controls=_from_section(ControlRampConfig, config.get("controls")),
            schedule=_from_section(ScheduleConfig, config.get("schedule")),
            min_time=_from_section(MinTimeConfig, config.get("min_time")),
        )


@dataclass(frozen=True)
class TrainControls:
    """Driver inputs, each in [0, 1]."""
    throttle: float = 0.0
    brake: float = 0.0


@dataclass(frozen=True)
class TrainPhysicsState:
    """Snapshot of the train after a tick."""
    distance: float
    speed: float
    accel: float
    jerk: float


@dataclass(frozen=True)
class TrackLayout:
    """Terminal distances along the track, derived once per level."""
    bumper_distance: float
    station_start_distance: float
    station_end_distance: float

    def in_station(self, distance: float) -> bool:
        return self.station_start_distance <= distance <= self.station_end_distance


@dataclass(frozen=True)
class CurvatureSample:
    """Curvature preview at a fixed distance ahead of the train."""
    distance_ahead: float
    lateral: float
    forward: float
    curvature: float
    safe_speed: float


@dataclass(frozen=True)
class MinimapPathPoint:
    """Track centerline point in the train's local frame."""
    distance_ahead: float
    lateral: float
    forward: float


class GameStatus(Enum):
    READY = "READY"
    RUNNING = "RUNNING"
    WON = "WON"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in (GameStatus.WON, GameStatus.FAILED)


class FailureReason(Enum):
    BUMPER = "BUMPER"
    COMFORT = "COMFORT"


@dataclass(frozen=True)
class Transition:
    """Status change produced by the rule engine."""
    status: GameStatus
    failure_reason: Optional[FailureReason] = None
