"""Cross-difficulty hitsound consistency check."""

from mapset_checks.hitsounds.config import HitsoundCheckConfig
from mapset_checks.hitsounds.engine import (
    ComparisonBudgetExceeded,
    Finding,
    IndependentScheme,
    MissingCues,
    SpanBodyCue,
    find_missing_cues,
    find_span_body_cues,
    run,
)
from mapset_checks.hitsounds.sampler import ResolvedCue, sample
from mapset_checks.hitsounds.scorer import Classification, classify, inconsistency_score

__all__ = [
    "HitsoundCheckConfig",
    "ComparisonBudgetExceeded",
    "Finding",
    "IndependentScheme",
    "MissingCues",
    "SpanBodyCue",
    "find_missing_cues",
    "find_span_body_cues",
    "run",
    "ResolvedCue",
    "sample",
    "Classification",
    "classify",
    "inconsistency_score",
]
