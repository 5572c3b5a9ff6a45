"""Engine configuration.

Values are fixed when a :class:`~originality.detector.checker.OriginalityChecker`
is built. ``shingle_size``, ``num_perm`` and ``seed`` must be identical for every
signature ever compared; changing any of them means re-ingesting the corpus.

Example ``originality.yml``::

    shingle_size: 5
    num_perm: 128
    seed: 1
    top_k: 5
    min_length: 50
    workers: 4
    draft_retention_hours: 24
"""
from __future__ import annotations

import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml  # type: ignore

from .errors import ConfigError

CONFIG_ENV_VAR = "ORIGINALITY_CONFIG"


@dataclass(frozen=True)
class CheckerConfig:
    shingle_size: int = 5
    num_perm: int = 128
    seed: int = 1
    top_k: int = 5
    min_length: int = 50
    workers: int = 1
    parallel_threshold: int = 2048
    # None disables draft expiry in the JSON store.
    draft_retention_hours: Optional[float] = 24.0

    def __post_init__(self) -> None:
        for name in ("shingle_size", "num_perm", "top_k", "workers", "parallel_threshold"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")
        if not isinstance(self.seed, int) or isinstance(self.seed, bool) or self.seed < 0:
            raise ConfigError(f"seed must be a non-negative integer, got {self.seed!r}")
        if not isinstance(self.min_length, int) or self.min_length < 0:
            raise ConfigError(f"min_length must be a non-negative integer, got {self.min_length!r}")
        if self.draft_retention_hours is not None and self.draft_retention_hours <= 0:
            raise ConfigError("draft_retention_hours must be positive or null")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CheckerConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        return cls(**data)


def load_config(path: Union[str, Path, None] = None) -> CheckerConfig:
    """Load a :class:`CheckerConfig` from YAML.

    When *path* is ``None`` the ``ORIGINALITY_CONFIG`` environment variable is
    consulted; without either, defaults are returned.
    """
    if path is None:
        path = os.getenv(CONFIG_ENV_VAR)
        if not path:
            return CheckerConfig()

    cfg_path = Path(path).expanduser()
    try:
        with cfg_path.open(encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigError(f"Cannot read config {cfg_path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {cfg_path}: {exc}") from exc

    if raw is None:
        return CheckerConfig()
    if not isinstance(raw, dict):
        raise ConfigError(f"Config {cfg_path} must be a mapping")
    return CheckerConfig.from_dict(raw)
