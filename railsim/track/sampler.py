# Look-ahead curvature preview and minimap path
# FORBIDDEN: logging, any I/O

import math
from typing import List, Tuple

import numpy as np

from ..core.math_utils import clamp
from ..core.types import CurvatureSample, MinimapPathPoint, TrackSamplerConfig
from .curvature import curvature_at_distance
from .spline import UP, TrackSpline


def safe_speed_for_curvature(curvature: float, config: TrackSamplerConfig) -> float:
    """Speed at which lateral acceleration stays within the configured limit.

    v = sqrt(a_lat / (|k| + eps)), clamped to [safe_speed_min, safe_speed_max].
    """
    raw = math.sqrt(config.max_lateral_accel / (abs(curvature) + config.curvature_epsilon))
    return clamp(raw, config.safe_speed_min, config.safe_speed_max)


class TrackSampler:
    """Samples the track ahead of the train in the train's local frame."""

    def __init__(self, spline: TrackSpline, config: TrackSamplerConfig):
        self.spline = spline
        self.config = config

    def update_spline(self, spline: TrackSpline) -> None:
        """Swap the track geometry after a level change."""
        self.spline = spline

    def sample_ahead(self, distance: float) -> List[CurvatureSample]:
        """Curvature and safe speed at each configured preview distance.

        Args:
            distance: Train position along the track

        Returns:
            One sample per entry of config.preview_distances
        """
        origin, tangent, right = self._frame(distance)
        samples = []
        for distance_ahead in self.config.preview_distances:
            sample_distance = distance + distance_ahead
            curvature = curvature_at_distance(self.spline, sample_distance, self.config.curvature_span)
            lateral, forward = self._relative(sample_distance, origin, tangent, right)
            samples.append(
                CurvatureSample(
                    distance_ahead=distance_ahead,
                    lateral=lateral,
                    forward=forward,
                    curvature=curvature,
                    safe_speed=safe_speed_for_curvature(curvature, self.config),
                )
            )
        return samples

    def sample_path_ahead(self, distance: float) -> List[MinimapPathPoint]:
        """Evenly spaced centerline points for the minimap.

        The last point always sits exactly at the look-ahead distance.
        """
        origin, tangent, right = self._frame(distance)
        look_ahead = max(1.0, self.config.path_look_ahead_distance)
        spacing = max(0.5, self.config.path_sample_spacing)

        offsets = [i * spacing for i in range(int(look_ahead // spacing) + 1)]
        if offsets[-1] < look_ahead:
            offsets.append(look_ahead)

        points = []
        for distance_ahead in offsets:
            lateral, forward = self._relative(distance + distance_ahead, origin, tangent, right)
            points.append(MinimapPathPoint(distance_ahead=distance_ahead, lateral=lateral, forward=forward))
        return points

    def _frame(self, distance: float) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        origin = self.spline.position_at_distance(distance)
        tangent = self.spline.tangent_at_distance(distance)
        right = np.cross(tangent, UP)
        right /= np.linalg.norm(right)
        return origin, tangent, right

    def _relative(
        self,
        sample_distance: float,
        origin: np.ndarray,
        tangent: np.ndarray,
        right: np.ndarray,
    ) -> Tuple[float, float]:
        delta = self.spline.position_at_distance(sample_distance) - origin
        return float(np.dot(delta, right)), max(0.0, float(np.dot(delta, tangent)))
