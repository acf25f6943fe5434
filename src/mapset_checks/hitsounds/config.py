"""Tunables for the cross-difficulty hitsound check."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping

from mapset_checks.data.beatmap import TIMESTAMP_WINDOW


@dataclass(frozen=True)
class HitsoundCheckConfig:
    """Hitsound check settings.

    The defaults reproduce the scorer-based check. Setting
    ``exclude_independent=False`` and ``min_contributors=2`` gives the older,
    simpler check that compares every difficulty and only reports cues
    present in more than one other difficulty.
    """

    timestamp_window: float = TIMESTAMP_WINDOW  # ms
    exclude_independent: bool = True
    min_contributors: int = 1
    check_span_bodies: bool = True
    max_comparisons: int | None = 5_000_000  # None = unlimited

    def __post_init__(self) -> None:
        if self.timestamp_window <= 0:
            raise ValueError(f"timestamp_window must be positive, got {self.timestamp_window}")
        if self.min_contributors < 1:
            raise ValueError(f"min_contributors must be >= 1, got {self.min_contributors}")

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> HitsoundCheckConfig:
        """Build a config from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in values.items() if k in known})
