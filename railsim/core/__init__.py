# Core module - Pure functions, no side effects
# FORBIDDEN: logging, any I/O

from .types import (
    GameConfig,
    TrackGeneratorConfig,
    TerminalConfig,
    TrainSimConfig,
    ComfortConfig,
    TrackSamplerConfig,
    ControlRampConfig,
    ScheduleConfig,
    MinTimeConfig,
    TrainControls,
    TrainPhysicsState,
    TrackLayout,
    CurvatureSample,
    MinimapPathPoint,
    GameStatus,
    FailureReason,
    Transition,
)
from .math_utils import clamp, lerp, smoothstep, wrap_distance
from .noise import hash01, value_noise, level_seed, seed_for_attempt
from .geometry import segments_intersect, segment_distance_sq, count_self_intersections
