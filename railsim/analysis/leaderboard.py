# Leaderboard audit against theoretical minimum times

import csv
import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

ANONYMOUS = "Anonymous"

MinTimeFn = Callable[[int], Optional[int]]


@dataclass(frozen=True)
class TrackTimeRecord:
    """One submitted completion time."""
    record_id: str
    level: int
    time_ms: int
    username: Optional[str] = None


@dataclass(frozen=True)
class BogusRecord:
    """A record faster than physically possible."""
    record: TrackTimeRecord
    theoretical_min_ms: int


def find_bogus_records(records: Iterable[TrackTimeRecord], min_time_fn: MinTimeFn) -> List[BogusRecord]:
    """Flag records strictly faster than their level's minimum time.

    Each level's bound is computed once. Levels without a finite bound are
    never flagged, since comparing against them would only produce false
    positives.

    Args:
        records: Submitted times
        min_time_fn: Level -> bound in ms, or None when unreachable

    Returns:
        Bogus records in input order
    """
    bounds: Dict[int, Optional[int]] = {}
    bogus = []

    for record in records:
        if record.level not in bounds:
            bound = min_time_fn(record.level)
            bounds[record.level] = bound
            if bound is None:
                logger.warning(f"Level {record.level}: minimum time unreachable, skipping its records")
            else:
                logger.debug(f"Level {record.level}: minimum time {bound} ms")

        bound = bounds[record.level]
        if bound is not None and record.time_ms < bound:
            bogus.append(BogusRecord(record=record, theoretical_min_ms=bound))

    return bogus


def top_times_by_level(
    records: Iterable[TrackTimeRecord],
    max_level: int,
    min_level: int,
    limit: int = 3,
) -> Dict[int, List[TrackTimeRecord]]:
    """Fastest times per level, one entry per username.

    Args:
        records: Submitted times
        max_level: Highest level to include
        min_level: Lowest level to include
        limit: Entries kept per level

    Returns:
        Ordered dict from level (highest first) to its fastest records;
        levels without records are omitted
    """
    by_level: Dict[int, List[TrackTimeRecord]] = {}
    for record in sorted(records, key=lambda r: (-r.level, r.time_ms)):
        if not min_level <= record.level <= max_level:
            continue
        entries = by_level.setdefault(record.level, [])
        name = record.username or ANONYMOUS
        if len(entries) < limit and all((e.username or ANONYMOUS) != name for e in entries):
            entries.append(record)
    return by_level


def load_records(path: Path) -> List[TrackTimeRecord]:
    """Read records from a JSON list or a CSV file with a header row.

    Expected fields: id (or record_id), level, time_ms, username (optional).
    """
    path = Path(path)
    if path.suffix.lower() == ".json":
        with open(path) as f:
            rows = json.load(f)
        if not isinstance(rows, list):
            raise ValueError(f"{path}: expected a JSON list of records")
    else:
        with open(path, newline="") as f:
            rows = list(csv.DictReader(f))

    return [_record_from_row(row, index, path) for index, row in enumerate(rows)]


def save_records(path: Path, records: Iterable[TrackTimeRecord]) -> None:
    """Write records in the same format load_records reads."""
    path = Path(path)
    rows = [
        {"id": r.record_id, "level": r.level, "time_ms": r.time_ms, "username": r.username}
        for r in records
    ]
    if path.suffix.lower() == ".json":
        with open(path, "w") as f:
            json.dump(rows, f, indent=2)
        return

    with open(path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=["id", "level", "time_ms", "username"])
        writer.writeheader()
        for row in rows:
            writer.writerow({**row, "username": row["username"] or ""})


def bogus_table(bogus: Iterable[BogusRecord]) -> List[Dict[str, object]]:
    """Flatten bogus records for printing."""
    return [
        {**asdict(b.record), "theoretical_min_ms": b.theoretical_min_ms}
        for b in bogus
    ]


def _record_from_row(row: Dict[str, object], index: int, path: Path) -> TrackTimeRecord:
    try:
        record_id = row.get("id", row.get("record_id"))
        if record_id is None or record_id == "":
            raise KeyError("id")
        username = row.get("username") or None
        return TrackTimeRecord(
            record_id=str(record_id),
            level=int(row["level"]),
            time_ms=int(row["time_ms"]),
            username=str(username) if username is not None else None,
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"{path}: malformed record at row {index}: {row!r}") from exc
