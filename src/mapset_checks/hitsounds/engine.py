"""Cross-difficulty hitsound consistency check.

For every object edge (circle, slider head, slider tail) of every
difficulty, looks up what the other difficulties play at the same instant
and reports whistles, claps and finishes that the others have but this one
lacks. Difficulties with their own hitsounding (see ``scorer``) are reported
once and left out of the comparison. Slider bodies carrying additions are
reported separately for every difficulty.

Findings are emitted in this order:
    1. IndependentScheme, in input order
    2. MissingCues, by difficulty, then object, head before tail
    3. SpanBodyCue, by difficulty, then object
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Sequence, Union

from mapset_checks.data.beatmap import Span, Variant, cue_names
from mapset_checks.hitsounds.config import HitsoundCheckConfig
from mapset_checks.hitsounds.sampler import ResolvedCue, sample
from mapset_checks.hitsounds.scorer import classify

logger = logging.getLogger(__name__)


class ComparisonBudgetExceeded(RuntimeError):
    """Raised when a mapset would need more cue lookups than allowed."""


# ---------------------------------------------------------------------------
# Findings
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class IndependentScheme:
    """A difficulty whose hitsounding differs too much to compare."""

    variant: str


@dataclass(frozen=True, slots=True)
class MissingCues:
    """Cues heard in other difficulties at ``timestamp`` but not in ``variant``."""

    timestamp: int  # ms
    variant: str
    missing: tuple[str, ...]
    contributors: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class SpanBodyCue:
    """A slider whose body carries additions."""

    timestamp: int  # ms, slider head
    variant: str
    cues: tuple[str, ...]


Finding = Union[IndependentScheme, MissingCues, SpanBodyCue]


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


def run(
    variants: Sequence[Variant],
    config: HitsoundCheckConfig | None = None,
) -> list[Finding]:
    """Run the hitsound consistency check over a mapset.

    Args:
        variants: All difficulties of the mapset, with unique names.
        config: Check settings; defaults to HitsoundCheckConfig().

    Returns:
        Findings in emission order. Empty for fewer than two difficulties.

    Raises:
        ComparisonBudgetExceeded: If the mapset exceeds ``config.max_comparisons``.
    """
    config = config or HitsoundCheckConfig()
    if len(variants) < 2:
        return []

    _check_budget(variants, config)

    findings: list[Finding] = []
    if config.exclude_independent:
        classification = classify(variants, config.timestamp_window)
        findings.extend(IndependentScheme(v.name) for v in classification.independent)
        compared = classification.shared
    else:
        compared = list(variants)

    for variant in compared:
        findings.extend(find_missing_cues(variant, compared, config))

    if config.check_span_bodies:
        for variant in variants:
            findings.extend(find_span_body_cues(variant))

    logger.info(
        "Hitsound check: %d difficulties, %d compared, %d findings",
        len(variants), len(compared), len(findings),
    )
    return findings


def find_missing_cues(
    variant: Variant,
    others: Sequence[Variant],
    config: HitsoundCheckConfig,
) -> list[MissingCues]:
    """Compare each object edge of ``variant`` against ``others``.

    A slider tail that resolves to the same instant as its head (sliders
    shorter than the timestamp window) is compared only once.
    """
    findings: list[MissingCues] = []
    for event in variant.events:
        times = (event.start, event.end) if isinstance(event, Span) else (event.start,)
        compared: set[int] = set()
        for t in times:
            own = sample(variant, t, config.timestamp_window)
            if own is None or own.time in compared:
                continue
            compared.add(own.time)
            finding = _compare_at(variant, own, others, config)
            if finding is not None:
                findings.append(finding)
    return findings


def find_span_body_cues(variant: Variant) -> list[SpanBodyCue]:
    """Report sliders whose head cue has any whistle/clap/finish set."""
    return [
        SpanBodyCue(
            timestamp=math.floor(event.start),
            variant=variant.name,
            cues=tuple(cue_names(event.start_cue.auxiliary)),
        )
        for event in variant.events
        if isinstance(event, Span) and event.start_cue.has_auxiliary
    ]


def _compare_at(
    variant: Variant,
    own: ResolvedCue,
    others: Sequence[Variant],
    config: HitsoundCheckConfig,
) -> MissingCues | None:
    # cue name -> contributing difficulties; dicts keep first-seen order
    missing: dict[str, dict[str, None]] = {}
    contributors: dict[str, None] = {}
    for other in others:
        if other is variant:
            continue
        theirs = sample(other, own.time, config.timestamp_window)
        if theirs is None:
            continue
        names = own.cue.missing_from(theirs.cue)
        if not names:
            continue
        contributors[other.name] = None
        for name in names:
            missing.setdefault(name, {})[other.name] = None

    if not contributors or len(contributors) < config.min_contributors:
        return None

    return MissingCues(
        timestamp=own.time,
        variant=variant.name,
        missing=tuple(missing),
        contributors=tuple(contributors),
    )


def _check_budget(variants: Sequence[Variant], config: HitsoundCheckConfig) -> None:
    if config.max_comparisons is None:
        return

    edges = sum(
        2 if isinstance(e, Span) else 1
        for v in variants
        for e in v.events
    )
    # scoring pass plus comparison pass, each against every other difficulty
    estimate = 2 * edges * (len(variants) - 1)
    if estimate > config.max_comparisons:
        raise ComparisonBudgetExceeded(
            f"Mapset needs ~{estimate} cue lookups, limit is {config.max_comparisons}"
        )
