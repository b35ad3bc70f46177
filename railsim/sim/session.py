# Headless per-tick game orchestration
# May log; everything it drives is pure.

import logging
import math
from dataclasses import dataclass
from typing import List, Optional

from ..core.types import (
    CurvatureSample,
    FailureReason,
    GameConfig,
    GameStatus,
    MinimapPathPoint,
    TrainControls,
    TrackLayout,
)
from ..track.generator import GenerationReport, TrackGenerator, track_config_for_level
from ..track.layout import compute_track_layout
from ..track.sampler import TrackSampler
from ..track.spline import TrackSpline
from .comfort import ComfortInput, ComfortModel
from .min_time import FULL_BRAKE, run_optimal_stop
from .rules import RuleEngine
from .train import TrainSim


logger = logging.getLogger(__name__)

# Preview sample used as the curvature speed limit for comfort
SAFETY_PREVIEW_INDEX = 1


@dataclass(frozen=True)
class FrameMetrics:
    """Everything the HUD, minimap and audio layers read after a tick."""
    speed: float
    throttle: float
    brake: float
    distance: float
    wrapped_distance: float
    comfort: float
    comfort_ratio: float
    safe_speed: float
    samples: List[CurvatureSample]
    path_points: List[MinimapPathPoint]
    status: GameStatus
    failure_reason: Optional[FailureReason]
    status_message: str
    elapsed: float


class DriveSession:
    """One level of the game without rendering, audio or input devices.

    Builds the level's track, layout and simulation objects, then advances
    them one fixed step at a time. The same object serves the live loop,
    scripted replays and tests.
    """

    def __init__(self, config: GameConfig, level: int = 1, seed: Optional[int] = None):
        """Initialize session.

        Args:
            config: Game configuration
            level: 1-based level number
            seed: Session seed (config.seed when omitted)
        """
        self.config = config
        self.level = level
        self.seed = config.seed if seed is None else seed

        track_config = track_config_for_level(config.track, level)
        self.generation: GenerationReport = TrackGenerator(
            track_config, self.seed, level
        ).generate_with_report()
        if not self.generation.is_clean:
            logger.warning(
                f"Level {level} seed {self.seed}: kept attempt {self.generation.attempt_index} "
                f"with {self.generation.intersection_count} self-intersection(s) "
                f"after {self.generation.attempts_tried} attempts"
            )

        self.spline = TrackSpline(self.generation.points, closed=False)
        self.layout: TrackLayout = compute_track_layout(self.spline.length, config.terminal)
        self.sampler = TrackSampler(self.spline, config.sampler)
        self.train = TrainSim(config.train)
        self.comfort = ComfortModel(config.comfort)
        self.rules = RuleEngine(config.terminal, config.sampler.safe_speed_max)
        self.rules.set_layout(self.layout)

        par = run_optimal_stop(self.layout, config.train, config.min_time)
        if par.reachable:
            self.par_time_s: Optional[float] = par.simulated_time_s
            self.expected_duration: Optional[float] = par.simulated_time_s * config.schedule.par_factor
        else:
            logger.warning(f"Level {level}: no par time ({par.status.value}), schedule pressure disabled")
            self.par_time_s = None
            self.expected_duration = None

        logger.debug(
            f"Level {level}: track {self.spline.length:.1f} m, "
            f"station {self.layout.station_start_distance:.1f}-{self.layout.station_end_distance:.1f} m, "
            f"bumper {self.layout.bumper_distance:.1f} m"
        )

        self.status = GameStatus.READY
        self.failure_reason: Optional[FailureReason] = None
        self.elapsed = 0.0
        self.completion_time_ms: Optional[int] = None

    def start(self) -> None:
        """Leave READY and hand control to the driver."""
        if self.status is GameStatus.READY:
            self.status = GameStatus.RUNNING

    def restart(self) -> None:
        """Put the train back at the start and begin a new run."""
        self.train.reset()
        self.comfort.reset()
        self.elapsed = 0.0
        self.completion_time_ms = None
        self.failure_reason = None
        self.status = GameStatus.RUNNING

    def step(self, controls: TrainControls, dt: float) -> FrameMetrics:
        """Advance the run by one fixed step.

        Driver controls only apply while RUNNING; otherwise the train is held
        on full brake. Non-positive dt returns the current frame unchanged.

        Args:
            controls: Driver throttle and brake
            dt: Timestep in seconds

        Returns:
            Frame metrics after the step
        """
        running = self.status is GameStatus.RUNNING
        if dt > 0.0:
            self.train.set_controls(controls if running else FULL_BRAKE)
            self.train.update(dt)
            if running:
                self.elapsed += dt

        state = self.train.get_state()
        wrapped = self.spline.wrap_distance(state.distance)
        samples = self.sampler.sample_ahead(wrapped)
        path_points = self.sampler.sample_path_ahead(wrapped)

        if samples:
            curvature_safe_speed = samples[min(SAFETY_PREVIEW_INDEX, len(samples) - 1)].safe_speed
        else:
            curvature_safe_speed = self.config.sampler.safe_speed_max

        if running and dt > 0.0:
            comfort = self.comfort.update(
                ComfortInput(
                    speed=state.speed,
                    safe_speed=curvature_safe_speed,
                    accel=state.accel,
                    jerk=state.jerk,
                    elapsed=self.elapsed,
                    expected_duration=self.expected_duration,
                ),
                dt,
            )
        else:
            comfort = self.comfort.comfort

        transition = self.rules.check_transition(state.distance, state.speed, comfort, self.status)
        if transition is not None:
            self.status = transition.status
            self.failure_reason = transition.failure_reason
            if transition.status is GameStatus.WON:
                self.completion_time_ms = math.floor(self.elapsed * 1000.0)
                logger.info(f"Level {self.level} complete in {self.completion_time_ms} ms")
            else:
                logger.info(
                    f"Level {self.level} failed ({transition.failure_reason.value}) "
                    f"at {state.distance:.1f} m"
                )

        shown = self.train.get_controls() if self.status is GameStatus.RUNNING else FULL_BRAKE

        return FrameMetrics(
            speed=state.speed,
            throttle=shown.throttle,
            brake=shown.brake,
            distance=state.distance,
            wrapped_distance=wrapped,
            comfort=comfort,
            comfort_ratio=self.comfort.ratio,
            safe_speed=self.rules.compute_safe_speed(state.distance, curvature_safe_speed),
            samples=samples,
            path_points=path_points,
            status=self.status,
            failure_reason=self.failure_reason,
            status_message=self.get_status_message(state.distance),
            elapsed=self.elapsed,
        )

    def get_status_message(self, distance: Optional[float] = None) -> str:
        if distance is None:
            distance = self.train.distance
        return self.rules.get_status_message(self.status, self.failure_reason, self.level, distance)
