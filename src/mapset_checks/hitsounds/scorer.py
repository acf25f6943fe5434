"""Detect difficulties with their own hitsounding.

Guest difficulties are sometimes hitsounded independently of the rest of the
set (very different rhythm, or copied from another set). Comparing such a
difficulty object-by-object against the others only produces noise, so a
pre-pass scores every difficulty by how often its cues disagree with the
rest of the set, and sets aside the outliers.

Score per difficulty V:
    raw(V)      = #(object heads of V, other difficulty W) with differing cues
                  // number of difficulties
    adjusted(V) = max(raw(V) - min(raw), 0)

V is independent when adjusted(V) exceeds both mean(raw) and a quarter of
V's object count. Both bars must be cleared; a difficulty with fixable
omissions is worse to silence than an independent one is to report.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from mapset_checks.data.beatmap import TIMESTAMP_WINDOW, Variant
from mapset_checks.hitsounds.sampler import sample

logger = logging.getLogger(__name__)


@dataclass
class Classification:
    """Partition of a mapset into shared and independent hitsounding."""

    shared: list[Variant] = field(default_factory=list)
    independent: list[Variant] = field(default_factory=list)
    scores: dict[str, int] = field(default_factory=dict)  # raw, by variant name


def inconsistency_score(
    variant: Variant,
    variants: Sequence[Variant],
    window: float = TIMESTAMP_WINDOW,
) -> int:
    """Count cue disagreements between ``variant`` and the rest of the set.

    Every object head of ``variant`` is compared with whatever the other
    difficulties play at the same instant. Instants that do not resolve in
    either difficulty are skipped rather than counted. Sample set and
    addition differences count as disagreements here.

    Args:
        variant: Difficulty to score.
        variants: The full mapset, ``variant`` included.
        window: Timestamp matching tolerance in milliseconds.

    Returns:
        Disagreement count, integer-divided by the number of difficulties.
    """
    if not variants:
        return 0

    count = 0
    for event in variant.events:
        own = sample(variant, event.start, window)
        if own is None:
            continue
        for other in variants:
            if other is variant:
                continue
            theirs = sample(other, own.time, window)
            if theirs is None:
                continue
            if own.cue != theirs.cue:
                count += 1

    return count // len(variants)


def classify(
    variants: Sequence[Variant],
    window: float = TIMESTAMP_WINDOW,
) -> Classification:
    """Split ``variants`` into shared-scheme and independent-scheme difficulties.

    The result does not depend on input order; each partition keeps the
    input order of its members.
    """
    result = Classification()
    if not variants:
        return result

    raw = np.array([inconsistency_score(v, variants, window) for v in variants], dtype=np.int64)
    min_score = int(raw.min())
    avg_score = float(raw.mean())
    adjusted = np.maximum(raw - min_score, 0)

    for variant, score, excess in zip(variants, raw, adjusted):
        result.scores[variant.name] = int(score)
        threshold = len(variant.events) // 4
        logger.debug(
            "%s: raw=%d adjusted=%d (avg=%.2f, threshold=%d)",
            variant.name, score, excess, avg_score, threshold,
        )
        if excess > avg_score and excess > threshold:
            result.independent.append(variant)
        else:
            result.shared.append(variant)

    if result.independent:
        logger.info(
            "Independent hitsounding: %s",
            ", ".join(v.name for v in result.independent),
        )
    return result
