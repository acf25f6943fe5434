"""JSON mapset loader.

Builds Variants from a mapset document: one entry per difficulty, each with
its hit objects (circles and sliders) and their hitsound/sample fields.

Document layout::

    {
        "title": "Song",
        "difficulties": [
            {
                "name": "Insane",
                "hitObjects": [
                    {"type": "circle", "time": 1000, "hitsound": 2},
                    {"type": "slider", "time": 1500, "endTime": 1900,
                     "startHitsound": 0, "endHitsound": 8}
                ]
            }
        ]
    }
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from mapset_checks.data.beatmap import (
    CueDescriptor,
    HitSound,
    PlayableEvent,
    Point,
    SampleSet,
    Span,
    Variant,
)

logger = logging.getLogger(__name__)

_HITSOUND_BITS = HitSound.NORMAL | HitSound.WHISTLE | HitSound.FINISH | HitSound.CLAP


class MapsetFormatError(ValueError):
    """Raised when a mapset document cannot be turned into variants."""


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_mapset(path: Path | str) -> list[Variant]:
    """Parse a mapset JSON file.

    Args:
        path: Path to the mapset .json file.

    Returns:
        One Variant per difficulty, in document order.
    """
    path = Path(path)
    data = json.loads(path.read_text(encoding="utf-8"))
    return parse_mapset_json(data)


def parse_mapset_json(data: dict[str, Any]) -> list[Variant]:
    """Parse a mapset from an already-loaded JSON dict.

    Args:
        data: Parsed mapset document.

    Returns:
        One Variant per difficulty, in document order.

    Raises:
        MapsetFormatError: On a malformed document or duplicate difficulty names.
    """
    if not isinstance(data, dict):
        raise MapsetFormatError(f"Mapset document must be an object, got {type(data).__name__}")

    difficulties = data.get("difficulties")
    if not isinstance(difficulties, list):
        raise MapsetFormatError("Mapset document has no 'difficulties' list")

    variants: list[Variant] = []
    seen: set[str] = set()
    for diff in difficulties:
        variant = parse_difficulty_json(diff)
        if variant.name in seen:
            raise MapsetFormatError(f"Duplicate difficulty name: {variant.name!r}")
        seen.add(variant.name)
        variants.append(variant)

    logger.debug(
        "Loaded mapset %r: %d difficulties",
        data.get("title", ""), len(variants),
    )
    return variants


def parse_difficulty_json(data: dict[str, Any]) -> Variant:
    """Parse one difficulty entry into a Variant.

    Hit objects are sorted by start time. An object that starts before the
    previous one has ended is dropped with a warning, since the checks rely on
    at most one object being active at any instant.
    """
    if not isinstance(data, dict):
        raise MapsetFormatError("Difficulty entry must be an object")

    name = data.get("name")
    if not isinstance(name, str) or not name:
        raise MapsetFormatError("Difficulty entry is missing a 'name'")

    hit_objects = data.get("hitObjects", [])
    if not isinstance(hit_objects, list):
        raise MapsetFormatError(f"{name}: 'hitObjects' must be a list")

    events = sorted(
        (_parse_hit_object(obj, name) for obj in hit_objects),
        key=lambda e: e.start,
    )

    kept: list[PlayableEvent] = []
    for event in events:
        if kept and event.start < kept[-1].end:
            logger.warning(
                "%s: object at %.1fms overlaps object ending at %.1fms, skipping",
                name, event.start, kept[-1].end,
            )
            continue
        kept.append(event)

    return Variant(name=name, events=tuple(kept))


# ---------------------------------------------------------------------------
# Internal parsers for each object type
# ---------------------------------------------------------------------------


def _parse_hit_object(d: dict[str, Any], difficulty: str) -> PlayableEvent:
    if not isinstance(d, dict):
        raise MapsetFormatError(f"{difficulty}: hit object must be an object, got {d!r}")

    obj_type = d.get("type", "circle")
    if obj_type == "circle":
        return Point(
            time=_parse_float(d.get("time", 0), "time", difficulty),
            cue=_parse_cue(d.get("hitsound"), d.get("sampleset"), d.get("addition")),
        )
    if obj_type == "slider":
        start = _parse_float(d.get("time", 0), "time", difficulty)
        end = _parse_float(d.get("endTime", start), "endTime", difficulty)
        if end < start:
            raise MapsetFormatError(
                f"{difficulty}: slider at {start}ms ends before it starts ({end}ms)"
            )
        return Span(
            start=start,
            end=end,
            start_cue=_parse_cue(
                d.get("startHitsound"), d.get("startSampleset"), d.get("startAddition")
            ),
            end_cue=_parse_cue(
                d.get("endHitsound"), d.get("endSampleset"), d.get("endAddition")
            ),
        )
    raise MapsetFormatError(f"{difficulty}: unknown hit object type {obj_type!r}")


def _parse_float(value: Any, key: str, difficulty: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise MapsetFormatError(f"{difficulty}: invalid {key}: {value!r}") from e


def _parse_cue(hitsound: Any, sampleset: Any, addition: Any) -> CueDescriptor:
    try:
        bits = int(hitsound or 0)
    except (TypeError, ValueError) as e:
        raise MapsetFormatError(f"Invalid hitsound: {hitsound!r}") from e
    return CueDescriptor(
        hitsound=HitSound(bits & _HITSOUND_BITS),
        sampleset=_parse_sampleset(sampleset),
        addition=_parse_sampleset(addition),
    )


def _parse_sampleset(value: Any) -> SampleSet:
    try:
        return SampleSet(int(value or 0))
    except (TypeError, ValueError) as e:
        raise MapsetFormatError(f"Unknown sample set: {value!r}") from e
