# Track module - Generation and geometry
# FORBIDDEN: logging, any I/O

from .generator import TrackGenerator, GenerationReport, generate_track, track_config_for_level
from .spline import TrackSpline
from .curvature import curvature_at_distance
from .sampler import TrackSampler, safe_speed_for_curvature
from .layout import compute_track_layout
