"""Slider-only section check.

Long stretches made only of sliders are tiring for newer players, who have
to keep alternating between clicking and holding. A section is reported
when more than ``max_sliders`` sliders follow each other without a circle
in between and the run lasts longer than ``max_duration`` ms, measured from
the first slider's head to the last slider's tail.

This is a per-difficulty check: nothing is compared across the mapset.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, fields
from typing import Any, Mapping, Sequence

from mapset_checks.data.beatmap import Span, Variant

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SliderOnlyConfig:
    """Slider-only section settings.

    ``variants`` limits the check to the named difficulties (typically the
    easiest ones); None checks every difficulty.
    """

    max_sliders: int = 6
    max_duration: float = 5000.0  # ms
    variants: tuple[str, ...] | None = None

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> SliderOnlyConfig:
        """Build a config from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in values.items() if k in known}
        if kwargs.get("variants") is not None:
            kwargs["variants"] = tuple(kwargs["variants"])
        return cls(**kwargs)


@dataclass(frozen=True, slots=True)
class SliderOnlySection:
    """A run of consecutive sliders without any circle."""

    timestamp: int  # ms, first slider head
    variant: str
    count: int
    duration: float  # ms


def find_slider_only_sections(
    variant: Variant,
    config: SliderOnlyConfig | None = None,
) -> list[SliderOnlySection]:
    """Find slider-only sections in one difficulty.

    A run still open at the last object is evaluated as well.
    """
    config = config or SliderOnlyConfig()
    sections: list[SliderOnlySection] = []
    streak: list[Span] = []

    def close_streak() -> None:
        if len(streak) > config.max_sliders:
            duration = streak[-1].end - streak[0].start
            if duration > config.max_duration:
                sections.append(
                    SliderOnlySection(
                        timestamp=math.floor(streak[0].start),
                        variant=variant.name,
                        count=len(streak),
                        duration=duration,
                    )
                )
        streak.clear()

    for event in variant.events:
        if isinstance(event, Span):
            streak.append(event)
        else:
            close_streak()
    close_streak()

    return sections


def run_slider_only_check(
    variants: Sequence[Variant],
    config: SliderOnlyConfig | None = None,
) -> list[SliderOnlySection]:
    """Run the slider-only section check over every selected difficulty."""
    config = config or SliderOnlyConfig()
    findings: list[SliderOnlySection] = []
    for variant in variants:
        if config.variants is not None and variant.name not in config.variants:
            continue
        found = find_slider_only_sections(variant, config)
        logger.debug("%s: %d slider-only sections", variant.name, len(found))
        findings.extend(found)
    return findings
