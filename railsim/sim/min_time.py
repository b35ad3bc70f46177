# Theoretical minimum completion time (par time / anti-cheat bound)
# FORBIDDEN: logging, any I/O

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from ..core.types import (
    GameConfig,
    MinTimeConfig,
    TrackLayout,
    TrainControls,
    TrainSimConfig,
)
from ..track.generator import TrackGenerator, track_config_for_level
from ..track.layout import compute_track_layout
from ..track.spline import TrackSpline
from .train import TrainSim

# Returned by minimum_time_ms when no finite bound exists
UNREACHABLE = None

FULL_THROTTLE = TrainControls(throttle=1.0, brake=0.0)
FULL_BRAKE = TrainControls(throttle=0.0, brake=1.0)


class MinTimeStatus(Enum):
    OK = "ok"
    STALLED = "stalled"      # came to rest outside the station band
    OVERRUN = "overrun"      # reached the bumper
    TIMEOUT = "timeout"      # safety time ceiling exceeded


@dataclass(frozen=True)
class MinimumTimeResult:
    """Outcome of a bang-bang run.

    time_ms is only set for OK; every other status means the layout cannot
    be completed and must not be used as a bound.
    """
    status: MinTimeStatus
    time_ms: Optional[int]
    simulated_time_s: float
    final_distance: float
    final_speed: float
    ticks: int

    @property
    def reachable(self) -> bool:
        return self.status is MinTimeStatus.OK


def run_optimal_stop(
    layout: TrackLayout,
    train_config: TrainSimConfig,
    config: MinTimeConfig,
) -> MinimumTimeResult:
    """Drive a layout with a perfect bang-bang controller.

    Full throttle until the brake-only stopping distance would carry the
    train past the station end, then full brake. The controller re-decides
    every tick, so it hugs the latest possible braking curve.

    Args:
        layout: Terminal distances
        train_config: Train dynamics
        config: Step size, stop speed, ceiling and safety margin

    Returns:
        MinimumTimeResult; time_ms is floor(simulated ms) - margin_ms
    """
    sim = TrainSim(train_config)
    max_decel = sim.max_decel
    dt = config.dt
    max_ticks = math.ceil(config.time_ceiling_s / dt)
    ticks = 0

    while True:
        state = sim.get_state()
        elapsed = ticks * dt

        if state.distance > 0.0 and state.speed <= config.stop_speed and layout.in_station(state.distance):
            elapsed_ms = math.floor(elapsed * 1000.0)
            return MinimumTimeResult(
                MinTimeStatus.OK, elapsed_ms - config.margin_ms,
                elapsed, state.distance, state.speed, ticks,
            )

        if state.distance >= layout.bumper_distance:
            status = MinTimeStatus.OVERRUN
        elif ticks > 0 and state.speed <= 0.0:
            status = MinTimeStatus.STALLED
        elif ticks >= max_ticks:
            status = MinTimeStatus.TIMEOUT
        else:
            status = None
        if status is not None:
            return MinimumTimeResult(status, None, elapsed, state.distance, state.speed, ticks)

        stopping_distance = state.speed * state.speed / (2.0 * max_decel)
        if state.distance + stopping_distance >= layout.station_end_distance:
            sim.set_controls(FULL_BRAKE)
        else:
            sim.set_controls(FULL_THROTTLE)

        sim.update(dt)
        ticks += 1


def level_layout(level: int, seed: int, config: GameConfig) -> TrackLayout:
    """Regenerate a level's track and derive its terminal layout."""
    track_config = track_config_for_level(config.track, level)
    points = TrackGenerator(track_config, seed, level).generate()
    spline = TrackSpline(points, closed=False)
    return compute_track_layout(spline.length, config.terminal)


def minimum_time(level: int, seed: int, config: GameConfig) -> MinimumTimeResult:
    """Theoretical minimum completion time for a level, with diagnostics."""
    return run_optimal_stop(level_layout(level, seed, config), config.train, config.min_time)


def minimum_time_ms(level: int, seed: int, config: GameConfig) -> Optional[int]:
    """Lower bound on completion time in ms, or UNREACHABLE."""
    result = minimum_time(level, seed, config)
    return result.time_ms if result.reachable else UNREACHABLE


class MinimumTimeCache:
    """Computes each level's bound once for a fixed seed and config."""

    def __init__(self, seed: int, config: GameConfig):
        self.seed = seed
        self.config = config
        self._results: Dict[int, MinimumTimeResult] = {}

    def result(self, level: int) -> MinimumTimeResult:
        if level not in self._results:
            self._results[level] = minimum_time(level, self.seed, self.config)
        return self._results[level]

    def __call__(self, level: int) -> Optional[int]:
        result = self.result(level)
        return result.time_ms if result.reachable else UNREACHABLE
