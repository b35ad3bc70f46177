#!/usr/bin/env python3
"""Compute theoretical minimum completion times per level.

Regenerates each level for a seed and drives it with the bang-bang
controller. Levels that cannot be completed are reported as unreachable.

Usage:
    python scripts/min_time.py --levels 1 10
    python scripts/min_time.py --seed 42 --levels 3 3 --override track.segment_count=300
"""

import argparse
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from railsim.analysis.config import DEFAULT_CONFIG_PATH, load_game_config
from railsim.analysis.logger import setup_logging
from railsim.analysis.metrics import compute_par_metrics
from railsim.sim.min_time import MinimumTimeCache


def main():
    parser = argparse.ArgumentParser(description="Compute theoretical minimum level times")
    parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH)
    parser.add_argument("--seed", type=int, default=None, help="Session seed (config seed if omitted)")
    parser.add_argument("--levels", type=int, nargs=2, default=[1, 5], metavar=("FIRST", "LAST"))
    parser.add_argument("--output", type=Path, default=None, help="Save results to JSON")
    parser.add_argument("--override", nargs="*", default=[], help="Config overrides (key=value)")
    parser.add_argument("--log-level", type=str, default="INFO")

    args = parser.parse_args()

    logger = setup_logging(args.log_level)

    try:
        config = load_game_config(args.config, args.override)
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        sys.exit(1)

    seed = config.seed if args.seed is None else args.seed
    first, last = args.levels
    if first < 1 or last < first:
        logger.error(f"Invalid level range: {first}..{last}")
        sys.exit(1)

    cache = MinimumTimeCache(seed, config)
    rows = []

    print(f"{'Level':>5}  {'Status':>8}  {'Min time':>10}  {'Distance':>9}  {'Ticks':>7}")
    print("-" * 48)
    for level in range(first, last + 1):
        result = cache.result(level)
        shown = f"{result.time_ms} ms" if result.reachable else "-"
        print(
            f"{level:>5}  {result.status.value:>8}  {shown:>10}  "
            f"{result.final_distance:>8.1f}m  {result.ticks:>7}"
        )
        if not result.reachable:
            logger.warning(f"Level {level}: unreachable ({result.status.value})")
        rows.append({
            "level": level,
            "status": result.status.value,
            "time_ms": result.time_ms,
            "simulated_time_s": result.simulated_time_s,
            "final_distance": result.final_distance,
            "final_speed": result.final_speed,
            "ticks": result.ticks,
        })

    summary = compute_par_metrics([row["time_ms"] for row in rows])
    logger.info(
        f"Seed {seed}: {int(summary['levels'])} levels, "
        f"{int(summary['unreachable_levels'])} unreachable"
    )

    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        with open(args.output, "w") as f:
            json.dump({"seed": seed, "levels": rows, "summary": summary}, f, indent=2)
        logger.info(f"Results saved to {args.output}")


if __name__ == "__main__":
    main()
