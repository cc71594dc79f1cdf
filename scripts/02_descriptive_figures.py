#!/usr/bin/env python
"""
02_descriptive_figures.py
- Stressor share, cumulative added/lost, per-region percent change
- Tables into outputs/tables/, figures into outputs/figures/
"""

import logging
import sys
from pathlib import Path

# ensure repo root on path for `honeybee` imports when running as script
REPO_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(REPO_ROOT))

import matplotlib
matplotlib.use("Agg")

from honeybee import aggregation, config
from honeybee.cleaning import clean_dataset
from honeybee.io import FileReadError, load_inputs
from honeybee.report import build_descriptive_outputs

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s | %(levelname)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("02_descriptive_figures")


def main():
    print("=" * 80)
    print("DESCRIPTIVE FIGURES")
    print("=" * 80)
    config.ensure_output_dirs()

    try:
        (df_colony, df_stressor), _ = load_inputs()
    except FileReadError as e:
        logger.error(str(e))
        return 1

    df, _ = clean_dataset(df_colony, df_stressor)
    _, log = build_descriptive_outputs(df)
    for line in log:
        print(f"  {line}")

    regions = aggregation.region_totals(df)
    print(f"\nRegions above {config.REGION_COLONY_THRESHOLD:,} colonies:")
    print(regions[['region', 'total_colonies', 'percent_change']].to_string(index=False))

    logger.info("Descriptive figures complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())
