# Sim module - Train physics, comfort, rules
# FORBIDDEN: logging, any I/O (except session, which may log)

from .train import TrainSim
from .comfort import ComfortModel, ComfortInput
from .rules import RuleEngine
from .controls import ControlRamp, FixedStepClock
from .min_time import (
    MinimumTimeCache,
    MinimumTimeResult,
    MinTimeStatus,
    UNREACHABLE,
    minimum_time,
    minimum_time_ms,
    run_optimal_stop,
)
from .session import DriveSession, FrameMetrics
