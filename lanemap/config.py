"""
Configuration for lane map analysis runs.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Optional, Union

import yaml

__all__ = [
    "LaneMapConfig",
    "LaneMapError",
    "ConfigError",
    "DEFAULT_MAX_TERMS",
    "DEFAULT_LANE_SIM_THRESHOLD",
    "DEFAULT_K",
    "DEFAULT_EDGE_MIN_WEIGHT",
    "load_config",
    "save_config",
]

DEFAULT_MAX_TERMS = 800
DEFAULT_LANE_SIM_THRESHOLD = 0.28
DEFAULT_K = 2
DEFAULT_EDGE_MIN_WEIGHT = 0.35


class LaneMapError(Exception):
    """Base class for contract violations raised by lanemap."""


class ConfigError(LaneMapError, ValueError):
    """Invalid configuration value (e.g. k <= 0, max_terms <= 0)."""


@dataclass
class LaneMapConfig:
    """Tunable parameters for one analysis run."""

    # Vocabulary
    max_terms: int = DEFAULT_MAX_TERMS

    # Lanes - higher threshold fragments into more, smaller lanes
    lane_sim_threshold: float = DEFAULT_LANE_SIM_THRESHOLD
    chronological: bool = True  # Cluster oldest first

    # Neighbor graph
    k: int = DEFAULT_K
    edge_min_weight: float = DEFAULT_EDGE_MIN_WEIGHT  # Display filter, applied after the graph is built

    # Output
    verbose: bool = False

    def __post_init__(self):
        if self.max_terms <= 0:
            raise ConfigError(f"max_terms must be positive, got {self.max_terms}")
        if self.k <= 0:
            raise ConfigError(f"k must be positive, got {self.k}")

    def to_dict(self) -> dict:
        """Convert to JSON/YAML-serializable dict."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "LaneMapConfig":
        """Create from dict, ignoring unknown keys."""
        valid_keys = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)


def load_config(path: Optional[Union[str, Path]] = None, **overrides) -> LaneMapConfig:
    """
    Load config from a YAML file, falling back to defaults.

    Args:
        path: YAML file with a top-level mapping (missing file = defaults)
        **overrides: Values that win over the file (None values are skipped)

    Returns:
        LaneMapConfig
    """
    data: dict = {}
    if path is not None:
        path = Path(path)
        if path.exists():
            with open(path) as f:
                try:
                    loaded = yaml.safe_load(f)
                except yaml.YAMLError as e:
                    raise ConfigError(f"Could not parse {path}: {e}") from e
            if loaded is None:
                loaded = {}
            if not isinstance(loaded, dict):
                raise ConfigError(f"{path} must contain a mapping, got {type(loaded).__name__}")
            data.update(loaded)

    data.update({k: v for k, v in overrides.items() if v is not None})
    return LaneMapConfig.from_dict(data)


def save_config(config: LaneMapConfig, path: Union[str, Path]) -> None:
    """Write config as YAML."""
    with open(path, 'w') as f:
        yaml.safe_dump(config.to_dict(), f, default_flow_style=False)
