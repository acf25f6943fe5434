"""CLI: Run mapset checks over one or more mapset JSON files.

Usage:
    python scripts/check_mapset.py input=data/mapsets/song.json
    python scripts/check_mapset.py input=data/mapsets output=issues.json
    python scripts/check_mapset.py input=data/mapsets checks.hitsounds.min_contributors=2
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from pathlib import Path

import hydra
from omegaconf import DictConfig, OmegaConf
from tqdm import tqdm

from mapset_checks.checks import run_checks
from mapset_checks.data.loader import MapsetFormatError, parse_mapset
from mapset_checks.hitsounds.engine import ComparisonBudgetExceeded

logger = logging.getLogger(__name__)


def _collect_inputs(path: Path) -> list[Path]:
    """Return mapset files under ``path`` (a file or a directory)."""
    if path.is_file():
        return [path]
    if path.is_dir():
        return sorted(path.rglob("*.json"))
    logger.error("Input not found: %s", path)
    return []


@hydra.main(config_path="../configs", config_name="check", version_base=None)
def main(cfg: DictConfig) -> None:
    """Entry point for the mapset check CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    paths = _collect_inputs(Path(cfg.input))
    settings = OmegaConf.to_container(cfg.checks, resolve=True)
    only = list(cfg.only) if cfg.only is not None else None

    results: dict[str, list[dict]] = {}
    failed = 0
    for path in tqdm(paths, desc="Checking mapsets", disable=len(paths) < 2):
        try:
            variants = parse_mapset(path)
            issues = run_checks(variants, settings, only=only)
        except (
            MapsetFormatError,
            json.JSONDecodeError,
            UnicodeDecodeError,
            OSError,
            ComparisonBudgetExceeded,
        ) as e:
            logger.warning("Skipping %s: %s", path, e)
            failed += 1
            continue
        results[str(path)] = issues

    severities = Counter(i["severity"] for issues in results.values() for i in issues)
    logger.info(
        "Checked %d mapsets (%d skipped): %d major, %d minor",
        len(results), failed, severities["major"], severities["minor"],
    )

    if cfg.output:
        output_path = Path(cfg.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w") as f:
            json.dump(results, f, indent=2)
        print(f"\nWrote issues for {len(results)} mapsets to {output_path}")
    else:
        for path, issues in results.items():
            print(f"\n{path}")
            for issue in issues:
                print(f"  {json.dumps(issue)}")


if __name__ == "__main__":
    main()
