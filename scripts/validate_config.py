#!/usr/bin/env python3
"""Validate configuration file."""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from railsim.analysis.config import load_config, validate_config


def main():
    parser = argparse.ArgumentParser(description="Validate configuration file")
    parser.add_argument(
        "config",
        type=Path,
        help="Path to configuration file",
    )

    args = parser.parse_args()

    try:
        config = load_config(args.config)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        sys.exit(1)

    errors = validate_config(config)

    if errors:
        print("Configuration validation failed:")
        for error in errors:
            print(f"  - {error}")
        sys.exit(1)
    else:
        print("Configuration is valid")
        sys.exit(0)


if __name__ == "__main__":
    main()
