# Configuration loading

from pathlib import Path
from typing import Any, Dict, List

import yaml

from ..core.types import GameConfig

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "configs" / "base.yaml"


def load_config(config_path: Path) -> Dict[str, Any]:
    """Load configuration from YAML file.

    Args:
        config_path: Path to config file

    Returns:
        Configuration dictionary
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")
    with open(config_path) as f:
        config = yaml.safe_load(f)
    return config or {}


def apply_overrides(config: Dict[str, Any], overrides: List[str]) -> Dict[str, Any]:
    """Apply command-line overrides to config.

    Args:
        config: Base configuration
        overrides: List of "key.subkey=value" strings

    Returns:
        Modified configuration
    """
    for override in overrides:
        if "=" not in override:
            raise ValueError(f"Invalid override format: {override}. Expected key=value")

        key, value = override.split("=", 1)
        keys = key.split(".")

        # Navigate to nested key
        d = config
        for k in keys[:-1]:
            if k not in d or not isinstance(d[k], dict):
                d[k] = {}
            d = d[k]

        d[keys[-1]] = _parse_value(value)

    return config


def _parse_value(value: str) -> Any:
    """Infer int, float, bool or string from an override value."""
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        pass
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    return value


def load_game_config(config_path: Path = DEFAULT_CONFIG_PATH, overrides: List[str] = ()) -> GameConfig:
    """Load YAML, apply overrides and build the typed GameConfig."""
    config = load_config(config_path)
    if overrides:
        config = apply_overrides(config, list(overrides))
    return GameConfig.from_dict(config)


REQUIRED_SECTIONS = ["track", "terminal", "train", "comfort", "sampler", "min_time"]


def _check_positive(config: Dict[str, Any], section: str, keys: List[str], errors: List[str]) -> None:
    values = config.get(section) or {}
    for key in keys:
        if key not in values:
            continue
        value = values[key]
        if not isinstance(value, (int, float)) or isinstance(value, bool) or value <= 0:
            errors.append(f"{section}.{key} must be positive, got {value!r}")


def validate_config(config: Dict[str, Any]) -> List[str]:
    """Validate configuration.

    Args:
        config: Configuration dictionary

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    # Required sections
    for section in REQUIRED_SECTIONS:
        if section not in config:
            errors.append(f"Missing required section: {section}")
        elif not isinstance(config[section], dict):
            errors.append(f"Section {section} must be a mapping")
    if errors:
        return errors

    if "seed" in config and (not isinstance(config["seed"], int) or isinstance(config["seed"], bool)):
        errors.append(f"seed must be an integer, got {config['seed']!r}")
    if "fixed_dt" in config:
        if not isinstance(config["fixed_dt"], (int, float)) or config["fixed_dt"] <= 0:
            errors.append(f"fixed_dt must be positive, got {config['fixed_dt']!r}")

    _check_positive(
        config, "track",
        ["segment_count", "segment_length", "max_heading_delta"],
        errors,
    )
    stem = config["track"].get("stem_length", 0)
    if isinstance(stem, (int, float)) and stem < 0:
        errors.append(f"track.stem_length must be non-negative, got {stem}")

    _check_positive(config, "terminal", ["stop_speed_threshold", "approach_decel"], errors)
    _check_positive(
        config, "train",
        ["mass", "traction_force_max", "brake_force_max", "max_speed"],
        errors,
    )
    _check_positive(config, "comfort", ["max"], errors)
    _check_positive(
        config, "sampler",
        ["path_look_ahead_distance", "path_sample_spacing", "max_lateral_accel", "safe_speed_min", "curvature_epsilon"],
        errors,
    )
    _check_positive(config, "min_time", ["dt", "stop_speed", "time_ceiling_s"], errors)

    sampler = config["sampler"]
    low = sampler.get("safe_speed_min")
    high = sampler.get("safe_speed_max")
    if isinstance(low, (int, float)) and isinstance(high, (int, float)) and low > high:
        errors.append(f"sampler.safe_speed_min ({low}) must not exceed sampler.safe_speed_max ({high})")

    preview = sampler.get("preview_distances")
    if preview is not None:
        if not isinstance(preview, list) or not preview:
            errors.append("sampler.preview_distances must be a non-empty list")
        elif any(not isinstance(d, (int, float)) or d < 0 for d in preview):
            errors.append(f"sampler.preview_distances must be non-negative numbers, got {preview}")

    margin = config["min_time"].get("margin_ms", 0)
    if not isinstance(margin, int) or margin < 0:
        errors.append(f"min_time.margin_ms must be a non-negative integer, got {margin!r}")

    if "logging" in config:
        level = str((config["logging"] or {}).get("level", "INFO")).upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR"):
            errors.append(f"logging.level must be DEBUG, INFO, WARNING or ERROR, got '{level}'")

    return errors
