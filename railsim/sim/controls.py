# Input shaping and fixed-step timing
# FORBIDDEN: logging, any I/O

from ..core.math_utils import clamp
from ..core.types import ControlRampConfig, TrainControls

MAX_FRAME_SECONDS = 0.25


class ControlRamp:
    """Turns held/released buttons into smooth throttle and brake values.

    Throttle moves up or down at a fixed rate while its buttons are held and
    stays put otherwise. Brake ramps up while held and releases at once; a
    short tap leaves a brief decaying brake pulse.
    """

    def __init__(self, config: ControlRampConfig):
        self.config = config
        self.reset()

    def reset(self) -> None:
        self.throttle = 0.0
        self.brake = 0.0
        self._brake_hold_time = 0.0
        self._brake_pulse_time = 0.0
        self._was_brake_held = False

    def set_throttle(self, value: float) -> None:
        """Jump the throttle lever to a position (e.g. from a slider)."""
        self.throttle = clamp(value, 0.0, 1.0)

    def release_all(self) -> None:
        """Drop the brake, e.g. when the input device loses focus."""
        self.brake = 0.0
        self._brake_hold_time = 0.0
        self._was_brake_held = False

    def update(
        self,
        throttle_up: bool,
        throttle_down: bool,
        brake_held: bool,
        dt: float,
    ) -> TrainControls:
        """Advance the input state by dt seconds.

        Args:
            throttle_up: Throttle-increase button held
            throttle_down: Throttle-decrease button held
            brake_held: Brake button held
            dt: Timestep in seconds

        Returns:
            Controls to feed to TrainSim
        """
        cfg = self.config
        dt = max(0.0, dt)

        throttle_delta = cfg.throttle_rate_per_second * dt
        if throttle_up and not throttle_down:
            self.throttle = clamp(self.throttle + throttle_delta, 0.0, 1.0)
        elif throttle_down and not throttle_up:
            self.throttle = clamp(self.throttle - throttle_delta, 0.0, 1.0)

        if brake_held:
            self._brake_hold_time += dt
            if cfg.brake_ramp_seconds > 0:
                self.brake = clamp(self._brake_hold_time / cfg.brake_ramp_seconds, 0.0, 1.0)
            else:
                self.brake = 1.0
        else:
            if self._was_brake_held and self._brake_hold_time < cfg.brake_tap_seconds:
                self._brake_pulse_time = cfg.brake_pulse_seconds
            self._brake_hold_time = 0.0
            self.brake = 0.0

        self._was_brake_held = brake_held

        if self._brake_pulse_time > 0.0:
            self._brake_pulse_time = max(0.0, self._brake_pulse_time - dt)
            strength = self._brake_pulse_time / cfg.brake_pulse_seconds
            self.brake = max(self.brake, cfg.brake_pulse_strength * strength)

        return TrainControls(throttle=self.throttle, brake=self.brake)


class FixedStepClock:
    """Accumulates frame time and hands out fixed simulation steps."""

    def __init__(self, fixed_dt: float):
        if fixed_dt <= 0:
            raise ValueError(f"fixed_dt must be positive, got {fixed_dt}")
        self.fixed_dt = fixed_dt
        self.accumulator = 0.0

    def reset(self) -> None:
        self.accumulator = 0.0

    def advance(self, elapsed_seconds: float) -> int:
        """Add a frame's wall time and return how many steps to simulate.

        Frame time is clamped to MAX_FRAME_SECONDS so a stalled frame cannot
        trigger an unbounded catch-up burst.
        """
        self.accumulator += clamp(elapsed_seconds, 0.0, MAX_FRAME_SECONDS)
        steps = 0
        while self.accumulator >= self.fixed_dt:
            self.accumulator -= self.fixed_dt
            steps += 1
        return steps

    @property
    def alpha(self) -> float:
        """Fraction of a step left over, for render interpolation."""
        return self.accumulator / self.fixed_dt
