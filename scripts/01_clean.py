#!/usr/bin/env python
"""
01_clean.py
- Load raw colony and stressor tables from data/original/
- Join, drop/impute missing values, normalize stressor labels
- Run QC checks on the cleaned records
"""

import logging
import sys
from pathlib import Path

# ensure repo root on path for `honeybee` imports when running as script
REPO_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(REPO_ROOT))

from honeybee import config, qc
from honeybee.aggregation import cumulative_by_year
from honeybee.cleaning import clean_dataset
from honeybee.io import FileReadError, load_inputs

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s | %(levelname)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("01_clean")


def main():
    config.print_config()

    try:
        (df_colony, df_stressor), log = load_inputs()
    except FileReadError as e:
        logger.error(str(e))
        return 1

    df, clean_log = clean_dataset(df_colony, df_stressor)
    for line in log + clean_log:
        print(f"  {line}")

    qc.print_qc_report(qc.run_qc(qc.default_checks(df, cumulative_by_year(df))))
    logger.info(f"Cleaning finished: {len(df):,} records")
    return 0


if __name__ == "__main__":
    sys.exit(main())
