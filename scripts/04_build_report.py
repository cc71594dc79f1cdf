#!/usr/bin/env python
"""
04_build_report.py
Report generator: runs load → clean → QC → figures → tests once and writes
outputs/report.md (figures in outputs/figures/, tables in outputs/tables/).
"""

import logging
import sys
from pathlib import Path
from time import perf_counter

# ensure repo root on path for `honeybee` imports when running as script
REPO_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(REPO_ROOT))

import matplotlib
matplotlib.use("Agg")

from honeybee import config, qc
from honeybee.aggregation import cumulative_by_year
from honeybee.cleaning import clean_dataset
from honeybee.io import FileReadError, file_size_mb, load_inputs, write_text
from honeybee.report import (build_descriptive_outputs, build_inference_outputs,
                             format_test_result, render_report)

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s | %(levelname)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("04_build_report")


def main():
    start = perf_counter()
    config.print_config()
    config.ensure_output_dirs()

    print("\n[1/4] Loading data...")
    try:
        (df_colony, df_stressor), log = load_inputs()
    except FileReadError as e:
        logger.error(str(e))
        return 1

    print("\n[2/4] Cleaning and QC...")
    df, clean_log = clean_dataset(df_colony, df_stressor)
    for line in log + clean_log:
        print(f"  {line}")
    qc_results = qc.run_qc(qc.default_checks(df, cumulative_by_year(df)))
    qc.print_qc_report(qc_results)

    print("\n[3/4] Descriptive figures...")
    figures, fig_log = build_descriptive_outputs(df)
    for line in fig_log:
        print(f"  {line}")

    print("\n[4/4] Hypothesis tests...")
    (results, test_figures), test_log = build_inference_outputs(df)
    for line in test_log:
        print(f"  {line}")
    for key in ('ttest', 'bootstrap'):
        print()
        print("\n".join(format_test_result(results[key])))
    figures.update(test_figures)

    text = render_report(df, qc_results, results, figures, config.REPORT_FILE)
    path = write_text(text, config.REPORT_FILE)
    print(f"\n✓ Report written: {path} ({file_size_mb(path):.3f} MB)")

    logger.info(f"Report complete in {perf_counter() - start:.1f}s")
    return 0


if __name__ == "__main__":
    sys.exit(main())
