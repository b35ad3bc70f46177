# Metrics computation

from typing import Dict, List, Optional, Sequence

import numpy as np


def compute_run_metrics(
    speeds: Sequence[float],
    safe_speeds: Sequence[float],
    comforts: Sequence[float],
    dt: float,
    completion_time_ms: Optional[int] = None,
) -> Dict[str, float]:
    """Compute summary metrics for one driven run.

    Args:
        speeds: Speed per tick (m/s)
        safe_speeds: Advertised safe speed per tick (m/s)
        comforts: Comfort value per tick
        dt: Tick length in seconds
        completion_time_ms: Set when the run was won

    Returns:
        Dict of computed metrics
    """
    metrics = {}

    if len(speeds):
        speeds_arr = np.asarray(speeds, dtype=np.float64)
        metrics["mean_speed_kmh"] = float(np.mean(speeds_arr) * 3.6)
        metrics["max_speed_kmh"] = float(np.max(speeds_arr) * 3.6)
        metrics["duration_s"] = float(len(speeds_arr) * dt)

        if len(safe_speeds) == len(speeds):
            excess = speeds_arr - np.asarray(safe_speeds, dtype=np.float64)
            metrics["overspeed_fraction"] = float(np.mean(excess > 0.0))
            metrics["max_overspeed"] = float(max(0.0, np.max(excess)))

    if len(comforts):
        metrics["final_comfort"] = float(comforts[-1])
        metrics["min_comfort"] = float(np.min(comforts))

    if completion_time_ms is not None:
        metrics["completion_time_ms"] = float(completion_time_ms)

    return metrics


def compute_par_metrics(times_ms: List[Optional[int]]) -> Dict[str, float]:
    """Summarize minimum times across levels, ignoring unreachable ones.

    Args:
        times_ms: One entry per level, None where no bound exists

    Returns:
        Dict with counts and mean/min/max of the finite bounds
    """
    finite = [t for t in times_ms if t is not None]
    metrics = {
        "levels": float(len(times_ms)),
        "unreachable_levels": float(len(times_ms) - len(finite)),
    }
    if finite:
        metrics["mean_min_time_ms"] = float(np.mean(finite))
        metrics["min_min_time_ms"] = float(np.min(finite))
        metrics["max_min_time_ms"] = float(np.max(finite))
    return metrics
