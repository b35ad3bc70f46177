#!/usr/bin/env python3
"""Remove leaderboard times faster than the theoretical minimum.

Reads a JSON or CSV export of submitted times, flags every record that
beats its level's bang-bang bound and writes the remaining records back.

Usage:
    # Only report
    python scripts/purge_bogus_times.py times.json --dry-run

    # Write cleaned records next to the input
    python scripts/purge_bogus_times.py times.csv --output times.clean.csv
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from railsim.analysis.config import DEFAULT_CONFIG_PATH, load_config, apply_overrides
from railsim.analysis.leaderboard import (
    bogus_table,
    find_bogus_records,
    load_records,
    save_records,
    top_times_by_level,
)
from railsim.analysis.logger import setup_logging
from railsim.core.types import GameConfig
from railsim.sim.min_time import MinimumTimeCache


def main():
    parser = argparse.ArgumentParser(description="Purge impossible leaderboard times")
    parser.add_argument("records", type=Path, help="JSON or CSV file of track times")
    parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH)
    parser.add_argument("--seed", type=int, default=None, help="Session seed (config seed if omitted)")
    parser.add_argument("--output", type=Path, default=None, help="Cleaned file (input is overwritten if omitted)")
    parser.add_argument("--dry-run", action="store_true", help="Report only, write nothing")
    parser.add_argument("--top", action="store_true", help="Print the top times per level after purging")
    parser.add_argument("--override", nargs="*", default=[], help="Config overrides (key=value)")
    parser.add_argument("--log-level", type=str, default="INFO")

    args = parser.parse_args()

    logger = setup_logging(args.log_level)

    try:
        raw = apply_overrides(load_config(args.config), args.override)
        records = load_records(args.records)
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        sys.exit(1)

    config = GameConfig.from_dict(raw)
    seed = config.seed if args.seed is None else args.seed
    logger.info(f"Loaded {len(records)} records from {args.records} (seed {seed})")

    bogus = find_bogus_records(records, MinimumTimeCache(seed, config))

    if bogus:
        print(f"{'Id':<24} {'Level':>5} {'Time':>10} {'Minimum':>10}  User")
        print("-" * 64)
        for row in bogus_table(bogus):
            print(
                f"{row['record_id']:<24} {row['level']:>5} {row['time_ms']:>8}ms "
                f"{row['theoretical_min_ms']:>8}ms  {row['username'] or '-'}"
            )
    logger.info(f"Found {len(bogus)} bogus record(s)")

    bogus_ids = {b.record.record_id for b in bogus}
    kept = [r for r in records if r.record_id not in bogus_ids]

    if args.top:
        leaderboard_cfg = raw.get("leaderboard") or {}
        board = top_times_by_level(
            kept,
            max_level=int(leaderboard_cfg.get("max_level", 10)),
            min_level=int(leaderboard_cfg.get("min_level", 1)),
            limit=int(leaderboard_cfg.get("top_n", 3)),
        )
        for level, entries in board.items():
            listing = ", ".join(f"{r.username or 'Anonymous'} {r.time_ms}ms" for r in entries)
            print(f"Level {level}: {listing}")

    if args.dry_run:
        logger.info("Dry run, nothing written")
        return

    output = args.output or args.records
    save_records(output, kept)
    logger.info(f"Wrote {len(kept)} records to {output}")


if __name__ == "__main__":
    main()
