# Longitudinal train dynamics
# FORBIDDEN: logging, any I/O

from ..core.math_utils import clamp
from ..core.types import TrainControls, TrainPhysicsState, TrainSimConfig

# Traction fades towards top speed but never drops below 5% of its peak
TRACTION_FADE_SPEED_FACTOR = 1.15
TRACTION_FADE_LIMIT = 0.95


class TrainSim:
    """Single-body train integrated with explicit Euler steps.

    Forces: throttle traction (fading with speed), brake, quadratic drag and
    constant rolling resistance. The train never rolls backwards: speed is
    clamped to [0, max_speed] and distance only grows.
    """

    def __init__(self, config: TrainSimConfig):
        self.config = config
        self.reset()

    @property
    def max_decel(self) -> float:
        """Braking deceleration from the brake alone (m/s^2)."""
        return self.config.brake_force_max / self.config.mass

    def reset(self) -> None:
        """Return to rest at the start of the track with controls released."""
        self.throttle = 0.0
        self.brake = 0.0
        self.speed = 0.0
        self.distance = 0.0
        self.accel = 0.0
        self.jerk = 0.0

    def set_controls(self, controls: TrainControls) -> None:
        """Set throttle and brake, clamping each to [0, 1]."""
        self.throttle = clamp(controls.throttle, 0.0, 1.0)
        self.brake = clamp(controls.brake, 0.0, 1.0)

    def get_controls(self) -> TrainControls:
        return TrainControls(throttle=self.throttle, brake=self.brake)

    def update(self, dt: float) -> None:
        """Advance by dt seconds. Non-positive dt is ignored.

        Args:
            dt: Timestep in seconds
        """
        if dt <= 0.0:
            return

        cfg = self.config
        fade = 1.0 - min(self.speed / (cfg.max_speed * TRACTION_FADE_SPEED_FACTOR), TRACTION_FADE_LIMIT)
        traction = self.throttle * cfg.traction_force_max * fade
        brake = self.brake * cfg.brake_force_max
        drag = cfg.drag_coefficient * self.speed * self.speed

        net_force = traction - brake - drag - cfg.rolling_resistance
        accel = net_force / cfg.mass
        if self.speed <= 0.0 and accel < 0.0:
            # Resistive forces cannot push a train at rest backwards
            accel = 0.0

        self.jerk = (accel - self.accel) / dt
        self.accel = accel
        self.speed = clamp(self.speed + accel * dt, 0.0, cfg.max_speed)
        self.distance += self.speed * dt

    def get_state(self) -> TrainPhysicsState:
        return TrainPhysicsState(
            distance=self.distance,
            speed=self.speed,
            accel=self.accel,
            jerk=self.jerk,
        )
