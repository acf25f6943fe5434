"""Playable event model and mapset loading."""

from mapset_checks.data.beatmap import (
    AUXILIARY_CUES,
    TIMESTAMP_WINDOW,
    CueDescriptor,
    HitSound,
    PlayableEvent,
    Point,
    SampleSet,
    Span,
    Variant,
    cue_names,
)
from mapset_checks.data.loader import (
    MapsetFormatError,
    parse_difficulty_json,
    parse_mapset,
    parse_mapset_json,
)

__all__ = [
    # Beatmap
    "AUXILIARY_CUES",
    "TIMESTAMP_WINDOW",
    "CueDescriptor",
    "HitSound",
    "PlayableEvent",
    "Point",
    "SampleSet",
    "Span",
    "Variant",
    "cue_names",
    # Loader
    "MapsetFormatError",
    "parse_difficulty_json",
    "parse_mapset",
    "parse_mapset_json",
]
