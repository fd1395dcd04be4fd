"""
fleettrack configuration loader

This module centralizes *all* configuration handling for fleettrack.

The analysis engine itself takes explicit thresholds; this loader decides
which thresholds the facade (and the CLI) hands it.

Precedence (highest to lowest) for any given value:
1) Explicit arguments (handled by callers / CLI flags)
2) Environment variables (FLEETTRACK_*)
3) User config: ~/.config/fleettrack/config.toml
4) Repo config: <repo_root>/config/config.toml
5) Hard defaults (fleettrack.constants)

Config files use a single [analysis] table:

    [analysis]
    stop_speed_kmh = 5.0
    min_stop_duration_s = 120
    simplify_tolerance_km = 0.0001
    max_batch_points = 500

Missing files are normal. Malformed files or non-numeric values fail loudly
with ConfigError.
"""

from __future__ import annotations

import math
import os
import tomllib
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Optional

from fleettrack import constants
from fleettrack.errors import ConfigError


# ---------------------------------------------------------------------------
# TOML loading helpers
# ---------------------------------------------------------------------------
def _load_toml(path: Path) -> dict[str, Any]:
    """
    Parse a TOML file at `path`.

    - If the file does not exist, return an empty dict (non-fatal).
    - If the file exists but is invalid TOML, raise ConfigError with the path.
    """
    if not path.is_file():
        return {}

    try:
        return tomllib.loads(path.read_text(encoding="utf-8")) or {}
    except (tomllib.TOMLDecodeError, OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Failed to parse TOML config: {path} ({e})") from e


# ---------------------------------------------------------------------------
# Generic coercion helpers
# ---------------------------------------------------------------------------
def _deep_get(d: dict[str, Any], dotted_key: str) -> Any:
    """
    Fetch nested dictionary values using dot-separated keys.

    Example:
        _deep_get(cfg, "analysis.stop_speed_kmh")

    Returns None if any part of the path is missing.
    """
    cur: Any = d
    for part in dotted_key.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return None
        cur = cur[part]
    return cur


def _as_number(v: Any, *, key: str, origin: str, integer: bool = False) -> float | int:
    """
    Coerce a TOML or environment value into a finite number.

    Strings are accepted so environment variables behave like TOML values.
    """
    if isinstance(v, bool):
        raise ConfigError(f"{key} must be numeric ({origin}), got {v!r}")
    try:
        num = int(v) if integer else float(v)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{key} must be numeric ({origin}), got {v!r}") from e
    if not math.isfinite(num):
        raise ConfigError(f"{key} must be finite ({origin}), got {v!r}")
    return num


# ---------------------------------------------------------------------------
# Repo discovery
# ---------------------------------------------------------------------------
def find_repo_root(start: Path) -> Optional[Path]:
    """
    Walk upward from `start` looking for the repo root.

    Heuristic: the presence of a `config/` directory marks the repo root.
    """
    start = start.resolve()
    for p in [start] + list(start.parents):
        if (p / "config").is_dir():
            return p
    return None


# ---------------------------------------------------------------------------
# Typed config dataclasses
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class AnalysisSettings:
    """
    Thresholds consumed by the tracking-analysis facade.
    """

    stop_speed_kmh: float = constants.STOP_SPEED_KMH
    min_stop_duration_s: float = constants.MIN_STOP_DURATION_S
    simplify_tolerance_km: float = constants.SIMPLIFY_TOLERANCE_KM
    max_batch_points: int = constants.MAX_BATCH_POINTS
    max_speed_kmh: float = constants.MAX_SPEED_KMH
    realistic_speed_kmh: float = constants.MAX_REALISTIC_SPEED_KMH
    acceptable_accuracy_m: float = constants.ACCEPTABLE_ACCURACY_M
    good_accuracy_m: float = constants.GOOD_ACCURACY_M


_INT_KEYS = {"max_batch_points"}

ENV_MAP = {f"FLEETTRACK_{f.name.upper()}": f.name for f in fields(AnalysisSettings)}


@dataclass(frozen=True)
class FleetTrackConfig:
    """
    Fully merged fleettrack configuration.

    Attributes:
    - analysis: thresholds for the analysis engine
    - source: provenance map showing where each value came from
    """

    analysis: AnalysisSettings = field(default_factory=AnalysisSettings)
    source: dict[str, str] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Main config loader
# ---------------------------------------------------------------------------
def load_config(
    repo_root: Optional[Path] = None,
    repo_config_path: Optional[Path] = None,
    user_config_path: Optional[Path] = None,
) -> FleetTrackConfig:
    """
    Load, merge, and normalize all fleettrack configuration.

    This function is the single authoritative entry point
    for configuration access.
    """

    if repo_root is None:
        repo_root = find_repo_root(Path(__file__).resolve())
    if repo_config_path is None and repo_root is not None:
        repo_config_path = repo_root / "config" / "config.toml"
    if user_config_path is None:
        user_config_path = Path.home() / ".config" / "fleettrack" / "config.toml"

    repo_cfg = _load_toml(repo_config_path) if repo_config_path else {}
    user_cfg = _load_toml(user_config_path) if user_config_path else {}

    settings = AnalysisSettings()
    src = {f"analysis.{f.name}": "default" for f in fields(AnalysisSettings)}

    # Repo, then user (user wins)
    for cfg, label, path in ((repo_cfg, "repo", repo_config_path), (user_cfg, "user", user_config_path)):
        for f in fields(AnalysisSettings):
            key = f"analysis.{f.name}"
            v = _deep_get(cfg, key)
            if v is None:
                continue
            origin = f"{label}:{path}"
            num = _as_number(v, key=key, origin=origin, integer=f.name in _INT_KEYS)
            settings = replace(settings, **{f.name: num})
            src[key] = origin

    # Environment variable overrides (highest non-CLI precedence)
    for env, name in ENV_MAP.items():
        v = os.environ.get(env)
        if not v:
            continue
        key = f"analysis.{name}"
        origin = f"env:{env}"
        num = _as_number(v, key=key, origin=origin, integer=name in _INT_KEYS)
        settings = replace(settings, **{name: num})
        src[key] = origin

    return FleetTrackConfig(analysis=settings, source=src)
