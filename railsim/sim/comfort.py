# Passenger comfort meter
# FORBIDDEN: logging, any I/O

from dataclasses import dataclass
from typing import Optional

from ..core.math_utils import clamp
from ..core.types import ComfortConfig


@dataclass(frozen=True)
class ComfortInput:
    """Per-tick inputs to the comfort model."""
    speed: float
    safe_speed: float
    accel: float
    jerk: float
    elapsed: float = 0.0
    expected_duration: Optional[float] = None


class ComfortModel:
    """Depletes with over-speed, harsh braking, jerk and lateness.

    Each penalty is proportional to how far its input exceeds a threshold,
    applied per second. Comfort never recovers during a run; only reset()
    refills it.
    """

    def __init__(self, config: ComfortConfig):
        self.config = config
        self.comfort = config.max

    @property
    def ratio(self) -> float:
        """Comfort as a fraction of the maximum, in [0, 1]."""
        if self.config.max <= 0:
            return 0.0
        return clamp(self.comfort / self.config.max, 0.0, 1.0)

    def penalty_rate(self, inputs: ComfortInput) -> float:
        """Total comfort loss per second for the given inputs."""
        cfg = self.config

        overspeed = max(0.0, inputs.speed - inputs.safe_speed)
        hard_brake = max(0.0, cfg.hard_brake_threshold - inputs.accel)
        harsh_jerk = max(0.0, abs(inputs.jerk) - cfg.jerk_threshold)

        penalty = (
            overspeed * cfg.overspeed_penalty_rate
            + hard_brake * cfg.hard_brake_penalty_rate
            + harsh_jerk * cfg.jerk_penalty_rate
        )
        if inputs.expected_duration is not None and inputs.elapsed > inputs.expected_duration:
            penalty += cfg.schedule_penalty_rate
        return penalty

    def update(self, inputs: ComfortInput, dt: float) -> float:
        """Apply one tick of penalties.

        Args:
            inputs: Current kinematics and schedule
            dt: Timestep in seconds; non-positive values leave comfort unchanged

        Returns:
            Comfort after the update, in [0, max]
        """
        if dt <= 0.0:
            return self.comfort

        penalty = self.penalty_rate(inputs)
        self.comfort = clamp(self.comfort - penalty * dt, 0.0, self.config.max)
        return self.comfort

    def reset(self) -> float:
        """Refill the meter and return the maximum."""
        self.comfort = self.config.max
        return self.comfort
