"""Resolve the hitsound active at an arbitrary timestamp in a difficulty."""

from __future__ import annotations

import math
from dataclasses import dataclass

from mapset_checks.data.beatmap import (
    TIMESTAMP_WINDOW,
    CueDescriptor,
    Point,
    Span,
    Variant,
)


@dataclass(frozen=True, slots=True)
class ResolvedCue:
    """A cue pinned to the (floored) time of the object edge it came from."""

    time: int  # ms
    cue: CueDescriptor


def sample(
    variant: Variant,
    timestamp: float,
    window: float = TIMESTAMP_WINDOW,
) -> ResolvedCue | None:
    """Return the cue a player hears at ``timestamp`` in ``variant``.

    Circles and slider heads resolve within ``window`` ms of their start,
    slider tails within ``window`` ms of their end. Anything else, including
    instants inside a slider body, resolves to None.

    Args:
        variant: Difficulty to sample.
        timestamp: Query time in milliseconds.
        window: Matching tolerance in milliseconds.

    Returns:
        ResolvedCue, or None when no object edge lies at ``timestamp``.
    """
    event = variant.event_at(timestamp, window)

    if isinstance(event, Point):
        if abs(event.time - timestamp) < window:
            return ResolvedCue(time=math.floor(event.time), cue=event.cue)
        return None

    if isinstance(event, Span):
        if abs(event.start - timestamp) < window:
            return ResolvedCue(time=math.floor(event.start), cue=event.start_cue)
        if abs(event.end - timestamp) < window:
            return ResolvedCue(time=math.floor(event.end), cue=event.end_cue)

    return None
