# Arc-length parameterized polyline
# FORBIDDEN: logging, any I/O

from typing import Tuple

import numpy as np

from ..core.math_utils import clamp, lerp, wrap_distance

UP = np.array([0.0, 1.0, 0.0])


class TrackSpline:
    """Arc-length aware wrapper around a generated centerline.

    Positions are linearly interpolated along the polyline; the segment
    enclosing a distance is found by binary search on the cumulative
    length table. Open tracks clamp distances to [0, length], closed
    tracks wrap them and include the closing segment back to the start.
    """

    def __init__(self, points: np.ndarray, closed: bool = False):
        """Initialize spline.

        Args:
            points: Centerline vertices, shape (N, 3), N >= 2
            closed: Join the last point back to the first
        """
        pts = np.array(points, dtype=np.float64)
        if pts.ndim != 2 or pts.shape[1] != 3 or len(pts) < 2:
            raise ValueError(f"Expected at least two (x, y, z) points, got shape {pts.shape}")

        if closed:
            pts = np.vstack([pts, pts[:1]])
        pts.flags.writeable = False

        self._points = pts
        self._closed = closed
        self._vertex_count = len(pts) - 1 if closed else len(pts)

        segment_lengths = np.linalg.norm(np.diff(pts, axis=0), axis=1)
        self._cumulative = np.concatenate([[0.0], np.cumsum(segment_lengths)])
        self._cumulative.flags.writeable = False
        self._length = float(self._cumulative[-1])

    @property
    def length(self) -> float:
        return self._length

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def points(self) -> np.ndarray:
        """Original vertices (without the closing duplicate)."""
        return self._points[:self._vertex_count]

    @property
    def cumulative_lengths(self) -> np.ndarray:
        return self._cumulative

    def wrap_distance(self, distance: float) -> float:
        """Map any distance onto the track: clamp when open, wrap when closed."""
        if self._length <= 1e-6:
            return 0.0
        if self._closed:
            return wrap_distance(distance, self._length)
        return clamp(distance, 0.0, self._length)

    def position_at_distance(self, distance: float) -> np.ndarray:
        """Point on the centerline at the given arc-length."""
        resolved = self.wrap_distance(distance)
        if not self._closed and resolved >= self._length:
            return self._points[-1].copy()

        index, t = self._segment_parameters(resolved)
        return lerp(self._points[index], self._points[index + 1], t)

    def tangent_at_distance(self, distance: float) -> np.ndarray:
        """Unit direction of the segment enclosing the given arc-length."""
        index, _ = self._segment_parameters(self.wrap_distance(distance))
        direction = self._points[index + 1] - self._points[index]
        magnitude = float(np.linalg.norm(direction))
        if magnitude <= 1e-12:
            return np.array([0.0, 0.0, 1.0])
        return direction / magnitude

    def normal_at_distance(self, distance: float) -> np.ndarray:
        """Up vector of the track frame (the track is flat)."""
        tangent = self.tangent_at_distance(distance)
        right = np.cross(tangent, UP)
        right /= np.linalg.norm(right)
        normal = np.cross(right, tangent)
        return normal / np.linalg.norm(normal)

    def _segment_parameters(self, distance: float) -> Tuple[int, float]:
        """Return segment index and interpolation factor for a resolved distance."""
        segment_count = len(self._points) - 1
        index = int(np.searchsorted(self._cumulative, distance, side="right")) - 1
        index = min(max(index, 0), segment_count - 1)

        start = self._cumulative[index]
        seg_length = self._cumulative[index + 1] - start
        if seg_length <= 0.0:
            return index, 0.0
        return index, clamp((distance - start) / seg_length, 0.0, 1.0)
