"""Registry of mapset checks.

Checks are listed explicitly in CHECKS, in the order they run. Each takes
the difficulties of one mapset plus its own settings mapping and returns
issue dicts (see ``report.to_issue``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence

from mapset_checks.data.beatmap import Variant
from mapset_checks.hitsounds.config import HitsoundCheckConfig
from mapset_checks.hitsounds.engine import run as run_hitsound_check
from mapset_checks.report import to_issue
from mapset_checks.sliders import SliderOnlyConfig, run_slider_only_check

logger = logging.getLogger(__name__)

CheckFn = Callable[[Sequence[Variant], Mapping[str, Any]], list[dict[str, Any]]]


@dataclass(frozen=True)
class CheckDescriptor:
    """A registered check: config section name, category and callable."""

    name: str
    category: str
    run: CheckFn


def _hitsound_check(variants: Sequence[Variant], settings: Mapping[str, Any]) -> list[dict[str, Any]]:
    config = HitsoundCheckConfig.from_dict(settings)
    return [to_issue(f, len(variants)) for f in run_hitsound_check(variants, config)]


def _slider_only_check(
    variants: Sequence[Variant], settings: Mapping[str, Any]
) -> list[dict[str, Any]]:
    config = SliderOnlyConfig.from_dict(settings)
    return [to_issue(f, len(variants)) for f in run_slider_only_check(variants, config)]


CHECKS: tuple[CheckDescriptor, ...] = (
    CheckDescriptor(name="hitsounds", category="Compose", run=_hitsound_check),
    CheckDescriptor(name="slider_only_sections", category="Compose", run=_slider_only_check),
)


def get_check(name: str) -> CheckDescriptor:
    """Look up a registered check by name."""
    for check in CHECKS:
        if check.name == name:
            return check
    raise ValueError(f"Unknown check: {name}. Must be one of: {', '.join(c.name for c in CHECKS)}")


def run_checks(
    variants: Sequence[Variant],
    settings: Mapping[str, Mapping[str, Any]] | None = None,
    only: Sequence[str] | None = None,
) -> list[dict[str, Any]]:
    """Run registered checks over one mapset.

    Args:
        variants: All difficulties of the mapset.
        settings: Per-check settings, keyed by check name.
        only: Names of checks to run; all registered checks when None.

    Returns:
        Issue dicts from every check, in registry order.
    """
    settings = settings or {}
    selected = CHECKS if only is None else tuple(get_check(name) for name in only)

    issues: list[dict[str, Any]] = []
    for check in selected:
        found = check.run(variants, settings.get(check.name, {}))
        logger.debug("%s: %d issues", check.name, len(found))
        issues.extend(found)
    return issues
