# Procedural track centerline generation
# FORBIDDEN: logging, any I/O

import math
from dataclasses import dataclass, replace
from typing import Iterator, Optional

import numpy as np

from ..core.geometry import count_self_intersections, segment_distance_sq, segments_intersect
from ..core.math_utils import clamp
from ..core.noise import level_seed, seed_for_attempt, value_noise
from ..core.types import TrackGeneratorConfig

MACRO_NOISE_OFFSET = 11
DETAIL_NOISE_OFFSET = 37

# Extra segments and curvature amplitude per level above 1
LEVEL_SEGMENT_STEP = 160
LEVEL_CURVATURE_STEP = 0.25


def track_config_for_level(config: TrackGeneratorConfig, level: int) -> TrackGeneratorConfig:
    """Scale track length and twistiness with the level number.

    Args:
        config: Level 1 generator configuration
        level: 1-based level number

    Returns:
        Configuration used to generate that level
    """
    steps = max(0, level - 1)
    curvature_scale = 1.0 + steps * LEVEL_CURVATURE_STEP
    return replace(
        config,
        segment_count=config.segment_count + steps * LEVEL_SEGMENT_STEP,
        base_curvature_per_meter=config.base_curvature_per_meter * curvature_scale,
        detail_curvature_per_meter=config.detail_curvature_per_meter * curvature_scale,
    )


@dataclass(frozen=True)
class GenerationReport:
    """Result of a generation run, with quality diagnostics."""
    points: np.ndarray
    attempt_index: int
    intersection_count: int
    attempts_tried: int

    @property
    def is_clean(self) -> bool:
        return self.intersection_count == 0


class TrackGenerator:
    """Walks a fixed number of equal-length segments driven by value noise.

    Heading follows a two-octave noise curvature signal with drift removal,
    heading damping and a pull back towards the x = 0 axis. Each step is
    checked against earlier segments and nudged sideways when it would run
    into them. Whole walks are retried with re-derived seeds until one has
    no self-intersections or the attempt budget runs out.
    """

    def __init__(self, config: TrackGeneratorConfig, seed: int, level: int = 1):
        """Initialize generator.

        Args:
            config: Generator parameters (already scaled for the level)
            seed: Session seed
            level: 1-based level number, folded into the generation seed
        """
        self.config = config
        self.generation_seed = level_seed(seed, level)

        max_delta = config.max_heading_delta
        self._heading_step = (
            config.avoidance_heading_step
            if config.avoidance_heading_step is not None
            else max(0.004, max_delta / 16)
        )
        self._sweep_steps = (
            config.avoidance_sweep_steps
            if config.avoidance_sweep_steps is not None
            else max(8, math.ceil(max_delta / self._heading_step))
        )
        min_clearance = (
            config.min_self_intersection_distance
            if config.min_self_intersection_distance is not None
            else config.segment_length * 0.75
        )
        self._min_clearance_sq = min_clearance * min_clearance
        recent_ignore = config.avoidance_recent_segment_ignore
        self._recent_ignore = max(1, recent_ignore if recent_ignore is not None else 1)
        attempts = config.max_generation_attempts
        self._attempts = max(1, attempts if attempts is not None else 8)

    def generate(self) -> np.ndarray:
        """Generate the level centerline, shape (segment_count + 1, 3)."""
        return self.generate_with_report().points

    def generate_with_report(self) -> GenerationReport:
        """Generate the centerline and report which attempt was kept.

        Returns the first attempt without self-intersections, otherwise the
        attempt with the fewest.
        """
        best: Optional[GenerationReport] = None

        for attempt_index in range(self._attempts):
            points = self.walk(seed_for_attempt(self.generation_seed, attempt_index))
            intersections = count_self_intersections(points)

            if intersections == 0:
                return GenerationReport(points, attempt_index, 0, attempt_index + 1)

            if best is None or intersections < best.intersection_count:
                best = GenerationReport(points, attempt_index, intersections, attempt_index + 1)

        return replace(best, attempts_tried=self._attempts)

    def walk(self, seed: int, avoid_self: bool = True) -> np.ndarray:
        """Run a single walk.

        Args:
            seed: Seed for the noise field of this attempt
            avoid_self: Disable to get the raw noise-driven walk

        Returns:
            Read-only array of points, y fixed at 0
        """
        cfg = self.config
        count = cfg.segment_count
        xs = np.zeros(count + 1, dtype=np.float64)
        zs = np.zeros(count + 1, dtype=np.float64)

        x = 0.0
        z = 0.0
        heading = 0.0
        distance_along = 0.0
        curvature_bias = 0.0

        for i in range(count):
            next_distance = distance_along + cfg.segment_length

            if next_distance <= cfg.stem_length:
                target_heading = 0.0
            else:
                noise_distance = (
                    next_distance - cfg.stem_length
                    + math.hypot(x, z) * cfg.origin_warp_strength
                )
                macro = value_noise(noise_distance, cfg.curvature_noise_scale, MACRO_NOISE_OFFSET, seed)
                detail = value_noise(noise_distance, cfg.detail_noise_scale, DETAIL_NOISE_OFFSET, seed)

                raw_curvature = (
                    macro * cfg.base_curvature_per_meter
                    + detail * cfg.detail_curvature_per_meter
                )
                curvature_bias += (raw_curvature - curvature_bias) * cfg.bias_tracking

                curvature = raw_curvature - curvature_bias
                curvature -= heading * cfg.heading_damping
                curvature -= x * cfg.lateral_pull

                target_heading = heading + clamp(
                    curvature * cfg.segment_length,
                    -cfg.max_heading_delta,
                    cfg.max_heading_delta,
                )

            if avoid_self:
                heading = self._resolve_heading(xs, zs, i + 1, x, z, heading, target_heading)
            else:
                heading += clamp(target_heading - heading, -cfg.max_heading_delta, cfg.max_heading_delta)

            x += math.sin(heading) * cfg.segment_length
            z += math.cos(heading) * cfg.segment_length
            distance_along = next_distance
            xs[i + 1] = x
            zs[i + 1] = z

        points = np.zeros((count + 1, 3), dtype=np.float64)
        points[:, 0] = xs
        points[:, 2] = zs
        points.flags.writeable = False
        return points

    def _candidate_deltas(self, base_delta: float) -> Iterator[float]:
        yield base_delta
        for step in range(1, self._sweep_steps + 1):
            sweep = step * self._heading_step
            yield base_delta + sweep
            yield base_delta - sweep

    def _resolve_heading(
        self,
        xs: np.ndarray,
        zs: np.ndarray,
        point_count: int,
        start_x: float,
        start_z: float,
        previous_heading: float,
        target_heading: float,
    ) -> float:
        """Pick the heading for the next segment.

        Tries the noise-driven delta first, then sweeps outward in both
        directions. Falls back to the candidate with the largest clearance,
        preferring the smallest deviation on ties.
        """
        max_delta = self.config.max_heading_delta
        length = self.config.segment_length
        base_delta = clamp(target_heading - previous_heading, -max_delta, max_delta)

        visited = set()
        best_heading = previous_heading + base_delta
        best_clearance_sq = -1.0
        best_penalty = math.inf

        for candidate in self._candidate_deltas(base_delta):
            delta = clamp(candidate, -max_delta, max_delta)
            key = round(delta * 1_000_000)
            if key in visited:
                continue
            visited.add(key)

            heading = previous_heading + delta
            end_x = start_x + math.sin(heading) * length
            end_z = start_z + math.cos(heading) * length
            clearance_sq = self._clearance_sq(xs, zs, point_count, start_x, start_z, end_x, end_z)

            if clearance_sq >= self._min_clearance_sq:
                return heading

            penalty = abs(delta - base_delta)
            if clearance_sq > best_clearance_sq or (
                abs(clearance_sq - best_clearance_sq) <= 1e-6 and penalty < best_penalty
            ):
                best_heading = heading
                best_clearance_sq = clearance_sq
                best_penalty = penalty

        return best_heading

    def _clearance_sq(
        self,
        xs: np.ndarray,
        zs: np.ndarray,
        point_count: int,
        start_x: float,
        start_z: float,
        end_x: float,
        end_z: float,
    ) -> float:
        """Squared clearance of a candidate segment to older segments.

        Returns -1 when the candidate crosses an older segment and infinity
        when there is nothing old enough to check against.
        """
        last_segment = point_count - 2 - self._recent_ignore
        if last_segment < 0:
            return math.inf

        ax = xs[:last_segment + 1]
        az = zs[:last_segment + 1]
        bx = xs[1:last_segment + 2]
        bz = zs[1:last_segment + 2]

        if np.any(segments_intersect(start_x, start_z, end_x, end_z, ax, az, bx, bz)):
            return -1.0

        return float(np.min(segment_distance_sq(start_x, start_z, end_x, end_z, ax, az, bx, bz)))


def generate_track(seed: int, level: int, config: TrackGeneratorConfig) -> np.ndarray:
    """Generate the centerline for (seed, level) with the given configuration."""
    return TrackGenerator(config, seed, level).generate()
