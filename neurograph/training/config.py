"""Validated learning parameters."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Mapping, Optional

from ..core.errors import ConfigurationError


@dataclass(frozen=True)
class LearningConfig:
    """Parameters shared by every supervised learning run.

    ``max_iterations`` and ``min_error_change_iterations_limit`` of ``None``
    disable the corresponding stop condition.
    """

    learning_rate: float = 0.1
    max_error: float = 0.01
    max_iterations: Optional[int] = None
    min_error_change: float = math.inf
    min_error_change_iterations_limit: Optional[int] = None
    batch_mode: bool = False

    def __post_init__(self) -> None:
        if not (self.learning_rate > 0.0) or not math.isfinite(self.learning_rate):
            raise ConfigurationError(
                f"learning_rate must be a positive finite number, got {self.learning_rate!r}"
            )
        if not (self.max_error >= 0.0):
            raise ConfigurationError(f"max_error must be >= 0, got {self.max_error!r}")
        if self.max_iterations is not None and int(self.max_iterations) < 1:
            raise ConfigurationError(
                f"max_iterations must be >= 1, got {self.max_iterations!r}"
            )
        if not (self.min_error_change >= 0.0):
            raise ConfigurationError(
                f"min_error_change must be >= 0, got {self.min_error_change!r}"
            )
        limit = self.min_error_change_iterations_limit
        if limit is not None and int(limit) < 1:
            raise ConfigurationError(
                f"min_error_change_iterations_limit must be >= 1, got {limit!r}"
            )

    @classmethod
    def from_mapping(cls, cfg: Mapping[str, object]) -> "LearningConfig":
        def _opt_int(key: str) -> Optional[int]:
            value = cfg.get(key)
            return int(value) if value is not None else None

        return cls(
            learning_rate=float(cfg.get("learning_rate", cls.learning_rate)),
            max_error=float(cfg.get("max_error", cls.max_error)),
            max_iterations=_opt_int("max_iterations"),
            min_error_change=float(cfg.get("min_error_change", math.inf)),
            min_error_change_iterations_limit=_opt_int("min_error_change_iterations_limit"),
            batch_mode=bool(cfg.get("batch_mode", False)),
        )

    def to_dict(self) -> dict:
        return asdict(self)


__all__ = ["LearningConfig"]
