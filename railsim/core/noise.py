# Deterministic hashing and 1-D value noise
# FORBIDDEN: logging, any I/O, global random state
#
# All arithmetic is done on unsigned 32-bit integers so that a seed maps to
# the same noise field on every platform and interpreter.

import math

from .math_utils import smoothstep

UINT32_MASK = 0xFFFFFFFF
GOLDEN_RATIO_32 = 0x9E3779B9
HASH_MULTIPLIER = 0x45D9F3B


def to_uint32(value: int) -> int:
    """Wrap an arbitrary Python int into the unsigned 32-bit range."""
    return value & UINT32_MASK


def hash01(value: int, seed: int) -> float:
    """Hash an integer lattice coordinate to a float in [0, 1).

    Args:
        value: Lattice coordinate (any int, wrapped to 32 bits)
        seed: Generation seed (any int, wrapped to 32 bits)

    Returns:
        Pseudo-random value in [0, 1)
    """
    x = to_uint32(value) ^ to_uint32(seed)
    x = ((x ^ (x >> 16)) * HASH_MULTIPLIER) & UINT32_MASK
    x = ((x ^ (x >> 16)) * HASH_MULTIPLIER) & UINT32_MASK
    x ^= x >> 16
    return x / 4294967296.0


def value_noise(distance: float, frequency: float, seed_offset: int, seed: int) -> float:
    """Sample smooth 1-D value noise.

    The lattice is spaced 1/frequency apart along the distance axis; values
    between lattice points are blended with smoothstep.

    Args:
        distance: Sample position
        frequency: Lattice points per unit distance
        seed_offset: Offset added to the lattice index, selects an octave
        seed: Generation seed

    Returns:
        Noise value in [-1, 1]
    """
    x = distance * frequency
    x0 = math.floor(x)
    t = smoothstep(x - x0)
    a = hash01(x0 + seed_offset, seed)
    b = hash01(x0 + 1 + seed_offset, seed)
    return (a + (b - a) * t) * 2.0 - 1.0


def level_seed(seed: int, level: int) -> int:
    """Per-level generation seed."""
    return to_uint32(seed + level - 1)


def seed_for_attempt(seed: int, attempt_index: int) -> int:
    """Re-derive the generation seed for a retry attempt.

    Attempt 0 keeps the level seed so that a clean first walk is stable
    across changes to the retry policy.
    """
    if attempt_index == 0:
        return to_uint32(seed)
    return to_uint32(seed) ^ to_uint32(attempt_index * GOLDEN_RATIO_32)
