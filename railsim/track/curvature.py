# Finite-difference curvature estimate
# FORBIDDEN: logging, any I/O

import math

import numpy as np

from .spline import TrackSpline

CURVATURE_SAMPLE_SPAN = 4.0


def signed_turn_angle(a: np.ndarray, b: np.ndarray) -> float:
    """Angle from unit vector a to unit vector b around the up axis.

    The sign follows the vertical component of a x b; parallel vectors
    count as a positive (zero) turn.
    """
    dot = max(-1.0, min(1.0, float(np.dot(a, b))))
    cross_y = float(a[2] * b[0] - a[0] * b[2])
    sign = -1.0 if cross_y < 0.0 else 1.0
    return sign * math.acos(dot)


def curvature_at_distance(
    spline: TrackSpline,
    distance: float,
    span: float = CURVATURE_SAMPLE_SPAN,
) -> float:
    """Estimate signed curvature (1/m) around a distance along the track.

    Tangents are taken at distance - span, distance and distance + span; the
    two turn angles between consecutive tangents are summed and divided by
    the arc length they cover.

    Args:
        spline: Track geometry
        distance: Arc-length to evaluate at
        span: Half-width of the finite-difference window

    Returns:
        Curvature, positive where the heading (angle from +z towards +x) increases
    """
    if spline.is_closed:
        behind = span
        ahead = span
    else:
        center = spline.wrap_distance(distance)
        behind = center - spline.wrap_distance(center - span)
        ahead = spline.wrap_distance(center + span) - center
        distance = center

    arc_length = behind + ahead
    if arc_length < 0.001:
        return 0.0

    t_prev = spline.tangent_at_distance(distance - behind)
    t_curr = spline.tangent_at_distance(distance)
    t_next = spline.tangent_at_distance(distance + ahead)

    angle = signed_turn_angle(t_prev, t_curr) + signed_turn_angle(t_curr, t_next)
    return angle / arc_length
