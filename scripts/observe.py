#!/usr/bin/env python3
"""Drive a level headlessly and record per-tick telemetry.

Runs a DriveSession with a simple autopilot (or full throttle) and
records what the train is actually doing. Useful for tuning comfort,
safe-speed and terminal parameters without the renderer.

Usage:
    # Autopilot on level 1
    python scripts/observe.py --level 1

    # Full throttle, expect a bumper failure
    python scripts/observe.py --level 2 --policy throttle

    # Save telemetry to file
    python scripts/observe.py --output telemetry.csv --verbose
"""

import argparse
import math
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from railsim.analysis.config import DEFAULT_CONFIG_PATH, load_game_config
from railsim.analysis.logger import FrameRecorder, setup_logging
from railsim.analysis.metrics import compute_run_metrics
from railsim.core.types import TrainControls
from railsim.sim.session import DriveSession, FrameMetrics

# Comfortable service braking target for the autopilot (m/s^2)
AUTOPILOT_DECEL = 0.9
AUTOPILOT_STOP_MARGIN = 6.0


def autopilot(session: DriveSession, frame: FrameMetrics) -> TrainControls:
    """Track the HUD safe speed and stop short of the platform end."""
    layout = session.layout
    remaining = max(0.0, layout.station_end_distance - AUTOPILOT_STOP_MARGIN - frame.distance)
    target = min(frame.safe_speed * 0.95, math.sqrt(2.0 * AUTOPILOT_DECEL * remaining))

    if frame.speed > target + 0.3:
        return TrainControls(throttle=0.0, brake=0.6)
    if frame.speed < target - 0.3:
        return TrainControls(throttle=1.0, brake=0.0)
    return TrainControls(throttle=0.3, brake=0.0)


def full_throttle(session: DriveSession, frame: FrameMetrics) -> TrainControls:
    return TrainControls(throttle=1.0, brake=0.0)


POLICIES = {"autopilot": autopilot, "throttle": full_throttle}


def run_level(
    session: DriveSession,
    policy,
    recorder: FrameRecorder,
    max_seconds: float,
    verbose: bool = False,
) -> dict:
    """Drive one run and record telemetry.

    Returns:
        Run statistics
    """
    dt = session.config.fixed_dt
    max_ticks = math.ceil(max_seconds / dt)

    session.start()
    frame = session.step(TrainControls(), 0.0)

    for tick in range(max_ticks):
        controls = policy(session, frame)
        frame = session.step(controls, dt)

        recorder.record(tick, {
            "distance": frame.distance,
            "speed": frame.speed,
            "safe_speed": frame.safe_speed,
            "throttle": frame.throttle,
            "brake": frame.brake,
            "comfort": frame.comfort,
            "status": frame.status.value,
        })

        if verbose and tick % 600 == 0:
            print(f"  t={frame.elapsed:6.1f}s  d={frame.distance:7.1f}m  "
                  f"v={frame.speed:5.1f}m/s  safe={frame.safe_speed:5.1f}  "
                  f"comfort={frame.comfort:5.1f}  {frame.status_message}")

        if frame.status.is_terminal:
            break

    return {
        "status": frame.status.value,
        "failure_reason": frame.failure_reason.value if frame.failure_reason else None,
        "completion_time_ms": session.completion_time_ms,
        "par_time_s": session.par_time_s,
        "track_length": session.spline.length,
        "message": frame.status_message,
    }


def main():
    parser = argparse.ArgumentParser(description="Observe a headless drive")
    parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH)
    parser.add_argument("--level", type=int, default=1)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--policy", choices=sorted(POLICIES), default="autopilot")
    parser.add_argument("--max-seconds", type=float, default=600.0)
    parser.add_argument("--output", type=Path, default=None, help="Save telemetry to CSV")
    parser.add_argument("--summary", type=Path, default=None, help="Save run summary to JSON")
    parser.add_argument("--verbose", action="store_true", help="Print periodic status")
    parser.add_argument("--override", nargs="*", default=[], help="Config overrides (key=value)")
    parser.add_argument("--log-level", type=str, default="INFO")

    args = parser.parse_args()

    logger = setup_logging(args.log_level)

    try:
        config = load_game_config(args.config, args.override)
    except (FileNotFoundError, ValueError) as e:
        logger.error(str(e))
        sys.exit(1)

    session = DriveSession(config, level=args.level, seed=args.seed)
    recorder = FrameRecorder()

    print(session.get_status_message())
    stats = run_level(session, POLICIES[args.policy], recorder, args.max_seconds, args.verbose)

    metrics = compute_run_metrics(
        recorder.get_series("speed"),
        recorder.get_series("safe_speed"),
        recorder.get_series("comfort"),
        config.fixed_dt,
        session.completion_time_ms,
    )

    print("\n" + "=" * 50)
    print(f"Result:           {stats['status']}"
          + (f" ({stats['failure_reason']})" if stats["failure_reason"] else ""))
    print(f"Track length:     {stats['track_length']:.1f} m")
    if stats["par_time_s"] is not None:
        print(f"Par time:         {stats['par_time_s']:.1f} s")
    for name, value in metrics.items():
        print(f"{name + ':':<18}{value:.2f}")
    print(stats["message"])

    if args.output is not None:
        recorder.save_csv(args.output)
        logger.info(f"Telemetry saved to {args.output}")
    if args.summary is not None:
        recorder.save_summary(args.summary, {**stats, **metrics})
        logger.info(f"Summary saved to {args.summary}")


if __name__ == "__main__":
    main()
