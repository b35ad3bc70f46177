# Analysis module - Logging, config loading, metrics, leaderboard audit
# IMPURE - Has side effects (file I/O, logging)

from .logger import setup_logging, FrameRecorder
from .config import load_config, apply_overrides, load_game_config, validate_config
from .metrics import compute_run_metrics, compute_par_metrics
from .leaderboard import (
    TrackTimeRecord,
    BogusRecord,
    find_bogus_records,
    top_times_by_level,
    load_records,
    save_records,
)
