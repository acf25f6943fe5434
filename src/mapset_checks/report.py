"""Severity policy and conversion of findings to issue dictionaries.

Issue dicts are plain JSON-serialisable data; wording and presentation are
left to whatever displays them.
"""

from __future__ import annotations

import enum
from typing import Any

from mapset_checks.hitsounds.engine import (
    Finding,
    IndependentScheme,
    MissingCues,
    SpanBodyCue,
)
from mapset_checks.sliders import SliderOnlySection


class Severity(str, enum.Enum):
    MAJOR = "major"
    MINOR = "minor"


def severity_cutoff(num_variants: int) -> int:
    """Contributor count a MissingCues finding must exceed to be major.

    In a two-difficulty set any single missing cue is notable; in larger
    sets roughly half of the other difficulties must agree.
    """
    if num_variants > 2:
        return max(num_variants // 2 - 1, 0)
    return 0


def finding_severity(finding: Finding | SliderOnlySection, num_variants: int) -> Severity:
    """Severity of ``finding`` within a mapset of ``num_variants`` difficulties."""
    if isinstance(finding, MissingCues):
        if len(finding.contributors) > severity_cutoff(num_variants):
            return Severity.MAJOR
        return Severity.MINOR
    return Severity.MAJOR


def to_issue(finding: Finding | SliderOnlySection, num_variants: int) -> dict[str, Any]:
    """Convert a finding into an issue dict.

    Args:
        finding: Output of a registered check.
        num_variants: Total number of difficulties in the mapset.

    Returns:
        Dict with 'check', 'severity', 'variant' and 'timestamp' keys plus the
        finding-specific fields.
    """
    if isinstance(finding, IndependentScheme):
        check, timestamp, extra = "independent_hitsounds", None, {}
    elif isinstance(finding, MissingCues):
        check, timestamp = "missing_hitsounds", finding.timestamp
        extra = {"missing": list(finding.missing), "contributors": list(finding.contributors)}
    elif isinstance(finding, SpanBodyCue):
        check, timestamp = "slider_body_hitsounds", finding.timestamp
        extra = {"cues": list(finding.cues)}
    elif isinstance(finding, SliderOnlySection):
        check, timestamp = "slider_only_section", finding.timestamp
        extra = {"count": finding.count, "duration": finding.duration}
    else:
        raise TypeError(f"Unknown finding type: {type(finding).__name__}")

    return {
        "check": check,
        "severity": finding_severity(finding, num_variants).value,
        "variant": finding.variant,
        "timestamp": timestamp,
        **extra,
    }
