# 2-D segment geometry on the ground (x, z) plane
# FORBIDDEN: logging, any I/O
#
# Every function broadcasts: pass floats for a single test or numpy arrays
# to test one segment against many at once.

import numpy as np

EPSILON = 1e-6


def orientation(ax, az, bx, bz, cx, cz):
    """Signed area of triangle (a, b, c), positive when c is left of a->b."""
    return (bx - ax) * (cz - az) - (bz - az) * (cx - ax)


def on_segment(ax, az, bx, bz, px, pz, epsilon: float = EPSILON):
    """Bounding-box test for a point already known to be collinear with a->b."""
    return (
        (px >= np.minimum(ax, bx) - epsilon)
        & (px <= np.maximum(ax, bx) + epsilon)
        & (pz >= np.minimum(az, bz) - epsilon)
        & (pz <= np.maximum(az, bz) + epsilon)
    )


def segments_intersect(ax, az, bx, bz, cx, cz, dx, dz, epsilon: float = EPSILON):
    """Test whether segment a->b intersects segment c->d.

    Proper crossings are detected from the orientation signs; touching and
    collinear overlaps count as intersections.

    Returns:
        True (elementwise) where the segments share a point within epsilon
    """
    o1 = orientation(ax, az, bx, bz, cx, cz)
    o2 = orientation(ax, az, bx, bz, dx, dz)
    o3 = orientation(cx, cz, dx, dz, ax, az)
    o4 = orientation(cx, cz, dx, dz, bx, bz)

    straddles_ab = ((o1 > epsilon) & (o2 < -epsilon)) | ((o1 < -epsilon) & (o2 > epsilon))
    straddles_cd = ((o3 > epsilon) & (o4 < -epsilon)) | ((o3 < -epsilon) & (o4 > epsilon))

    touching = (
        ((np.abs(o1) <= epsilon) & on_segment(ax, az, bx, bz, cx, cz, epsilon))
        | ((np.abs(o2) <= epsilon) & on_segment(ax, az, bx, bz, dx, dz, epsilon))
        | ((np.abs(o3) <= epsilon) & on_segment(cx, cz, dx, dz, ax, az, epsilon))
        | ((np.abs(o4) <= epsilon) & on_segment(cx, cz, dx, dz, bx, bz, epsilon))
    )
    return (straddles_ab & straddles_cd) | touching


def point_segment_distance_sq(px, pz, ax, az, bx, bz):
    """Squared distance from point p to segment a->b (clamped projection).

    Degenerate segments shorter than sqrt(EPSILON) are treated as points.
    """
    abx = bx - ax
    abz = bz - az
    ab_length_sq = abx * abx + abz * abz
    degenerate = ab_length_sq <= EPSILON
    safe_length_sq = np.where(degenerate, 1.0, ab_length_sq)

    t = np.clip(((px - ax) * abx + (pz - az) * abz) / safe_length_sq, 0.0, 1.0)
    t = np.where(degenerate, 0.0, t)
    ddx = px - (ax + abx * t)
    ddz = pz - (az + abz * t)
    return ddx * ddx + ddz * ddz


def segment_distance_sq(ax, az, bx, bz, cx, cz, dx, dz):
    """Squared minimum distance between two non-intersecting segments.

    The minimum over the four endpoint-to-segment distances; only valid
    when the segments do not cross.
    """
    return np.minimum(
        np.minimum(
            point_segment_distance_sq(ax, az, cx, cz, dx, dz),
            point_segment_distance_sq(bx, bz, cx, cz, dx, dz),
        ),
        np.minimum(
            point_segment_distance_sq(cx, cz, ax, az, bx, bz),
            point_segment_distance_sq(dx, dz, ax, az, bx, bz),
        ),
    )


def count_self_intersections(points: np.ndarray) -> int:
    """Count pairwise crossings between non-adjacent polyline segments.

    Points are (x, y, z) rows; only x and z are used. The pair formed by the
    first and last segment is skipped, since a closed loop joins them.

    Args:
        points: Polyline vertices, shape (N, 3)

    Returns:
        Number of intersecting segment pairs
    """
    points = np.asarray(points, dtype=np.float64)
    segment_count = len(points) - 1
    if segment_count <= 2:
        return 0

    xs = points[:, 0]
    zs = points[:, 2]

    intersections = 0
    for i in range(segment_count - 2):
        hits = segments_intersect(
            xs[i], zs[i], xs[i + 1], zs[i + 1],
            xs[i + 2:segment_count], zs[i + 2:segment_count],
            xs[i + 3:segment_count + 1], zs[i + 3:segment_count + 1],
        )
        if i == 0:
            hits = hits[:-1]
        intersections += int(np.count_nonzero(hits))
    return intersections
