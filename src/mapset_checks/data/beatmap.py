"""Hitsound-bearing playable events for one beatmap difficulty.

Each difficulty of a mapset is a Variant: a display name plus a sorted,
non-overlapping sequence of playable events. Events are either a Point
(circle, one cue) or a Span (slider, separate head and tail cues). Times are
in milliseconds and need not be integral.
"""

from __future__ import annotations

import bisect
import enum
import logging
from dataclasses import dataclass, field
from typing import Union

logger = logging.getLogger(__name__)

# Two timestamps closer than this (ms) are treated as the same instant
TIMESTAMP_WINDOW = 1.0


# ---------------------------------------------------------------------------
# Cue descriptors
# ---------------------------------------------------------------------------


class HitSound(enum.IntFlag):
    """Hitsound bits, using the osu! encoding."""

    NONE = 0
    NORMAL = 1
    WHISTLE = 2
    FINISH = 4
    CLAP = 8


class SampleSet(enum.IntEnum):
    """Sample bank identifiers (0 = inherit from timing point)."""

    AUTO = 0
    NORMAL = 1
    SOFT = 2
    DRUM = 3


# Auxiliary cues in reporting order
AUXILIARY_CUES: tuple[tuple[HitSound, str], ...] = (
    (HitSound.WHISTLE, "Whistle"),
    (HitSound.CLAP, "Clap"),
    (HitSound.FINISH, "Finish"),
)
AUXILIARY_MASK = HitSound.WHISTLE | HitSound.CLAP | HitSound.FINISH


@dataclass(frozen=True, slots=True)
class CueDescriptor:
    """Hitsound flags plus sample and addition banks active at one instant."""

    hitsound: HitSound = HitSound.NONE
    sampleset: SampleSet = SampleSet.AUTO
    addition: SampleSet = SampleSet.AUTO

    @property
    def auxiliary(self) -> HitSound:
        """Only the whistle/clap/finish bits."""
        return self.hitsound & AUXILIARY_MASK

    @property
    def has_auxiliary(self) -> bool:
        return bool(self.auxiliary)

    def missing_from(self, other: CueDescriptor) -> list[str]:
        """Names of auxiliary cues set in ``other`` but not in this descriptor."""
        missing = HitSound(int(other.auxiliary) & ~int(self.auxiliary))
        return cue_names(missing)


def cue_names(flags: HitSound) -> list[str]:
    """Human-readable names of the auxiliary bits in ``flags``."""
    return [name for flag, name in AUXILIARY_CUES if flags & flag]


# ---------------------------------------------------------------------------
# Playable events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Point:
    """An instant event (hit circle) carrying a single cue."""

    time: float
    cue: CueDescriptor = field(default_factory=CueDescriptor)

    @property
    def start(self) -> float:
        return self.time

    @property
    def end(self) -> float:
        return self.time


@dataclass(frozen=True, slots=True)
class Span:
    """A duration event (slider) with independent head and tail cues."""

    start: float
    end: float
    start_cue: CueDescriptor = field(default_factory=CueDescriptor)
    end_cue: CueDescriptor = field(default_factory=CueDescriptor)


PlayableEvent = Union[Point, Span]


# ---------------------------------------------------------------------------
# Variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Variant:
    """One difficulty of a mapset.

    Events must be sorted by start time and must not overlap; the loader
    enforces this before constructing a Variant.
    """

    name: str
    events: tuple[PlayableEvent, ...] = ()
    _starts: list[float] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "events", tuple(self.events))
        object.__setattr__(self, "_starts", [e.start for e in self.events])

    def __len__(self) -> int:
        return len(self.events)

    def event_at(self, timestamp: float, window: float = TIMESTAMP_WINDOW) -> PlayableEvent | None:
        """Return the event active at ``timestamp``.

        This is the latest event starting before ``timestamp + window``, so an
        event starting a fraction of a millisecond after the query still
        resolves. Returns None when no event starts that early.

        Args:
            timestamp: Query time in milliseconds.
            window: Tolerance in milliseconds.

        Returns:
            The enclosing or preceding event, or None.
        """
        idx = bisect.bisect_left(self._starts, timestamp + window) - 1
        if idx < 0:
            return None
        return self.events[idx]
