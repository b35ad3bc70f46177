# Mathematical utilities
# FORBIDDEN: logging, any I/O


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp value to range.

    Args:
        value: Value to clamp
        min_val: Minimum allowed value
        max_val: Maximum allowed value

    Returns:
        Clamped value
    """
    return max(min_val, min(max_val, value))


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation between a and b."""
    return a + (b - a) * t


def smoothstep(t: float) -> float:
    """Cubic Hermite ease, t assumed in [0, 1]."""
    return t * t * (3.0 - 2.0 * t)


def wrap_distance(distance: float, length: float) -> float:
    """Wrap a distance onto a closed loop of the given length.

    Negative distances wrap backwards from the end of the loop.

    Args:
        distance: Arc-length, any sign
        length: Loop length (must be positive)

    Returns:
        Distance in [0, length)
    """
    return ((distance % length) + length) % length
