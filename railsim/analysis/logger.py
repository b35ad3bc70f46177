# Logging utilities

import csv
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """Setup logging configuration.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file path for logging

    Returns:
        Configured logger
    """
    logger = logging.getLogger("railsim")
    logger.setLevel(getattr(logging, level.upper()))

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(getattr(logging, level.upper()))
    console_format = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(message)s",
        datefmt="%H:%M:%S",
    )
    console_handler.setFormatter(console_format)
    logger.addHandler(console_handler)

    # File handler
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_format = logging.Formatter(
            "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        )
        file_handler.setFormatter(file_format)
        logger.addHandler(file_handler)

    return logger


class FrameRecorder:
    """Collects per-tick telemetry rows and writes them out for analysis."""

    def __init__(self) -> None:
        self.rows: List[Dict[str, Any]] = []

    def record(self, tick: int, metrics: Dict[str, Any]) -> None:
        """Record one tick.

        Args:
            tick: Simulation tick index
            metrics: Scalar values for this tick
        """
        self.rows.append({"tick": tick, **metrics})

    def get_series(self, name: str) -> List[Any]:
        """Get time series of a recorded value."""
        return [row[name] for row in self.rows if name in row]

    def save_csv(self, path: Path) -> None:
        """Write all rows to CSV, columns taken from the first row."""
        if not self.rows:
            return
        path.parent.mkdir(parents=True, exist_ok=True)
        fieldnames = list(self.rows[0].keys())
        with open(path, "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=fieldnames, extrasaction="ignore")
            writer.writeheader()
            writer.writerows(self.rows)

    def save_summary(self, path: Path, summary: Dict[str, Any]) -> None:
        """Write a JSON run summary alongside a timestamp."""
        path.parent.mkdir(parents=True, exist_ok=True)
        record = {"timestamp": datetime.now().isoformat(), **summary}
        with open(path, "w") as f:
            json.dump(record, f, indent=2)

    def clear(self) -> None:
        self.rows.clear()
