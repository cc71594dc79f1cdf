"""
Report module: Build figures/tables for each stage and render the markdown report.
"""

import os
from datetime import date

import pandas as pd

from . import aggregation, config, plots
from .inference import run_inference
from .io import save_csv, save_figure


def format_test_result(result):
    """Human-readable summary lines for a TestResult."""
    ci_pct = 100 * (1 - result.alpha)
    return [
        f"[{result.test}] {result.label}",
        f"  H0: mean net change = {result.null_mean:g}",
        f"  n = {result.n:,} | mean = {result.mean:,.2f}",
        f"  statistic = {result.statistic:,.4f} | p-value = {result.p_value:.6f}",
        f"  {ci_pct:.0f}% CI of mean: [{result.ci_low:,.2f}, {result.ci_high:,.2f}]",
        f"  Decision: {result.conclusion}",
    ]


def build_descriptive_outputs(df, tables=None, figures=None):
    """
    Aggregate the cleaned records, save summary tables and descriptive figures.

    Args:
        df: Cleaned records
        tables: Dict of table name -> path (defaults to config.OUTPUT_TABLES)
        figures: Dict of figure name -> path (defaults to config.OUTPUT_FIGURES)

    Returns:
        Dict of figure name -> saved path, and log info
    """
    tables = tables or config.OUTPUT_TABLES
    figures = figures or config.OUTPUT_FIGURES
    log = []

    share = aggregation.stressor_share(df)
    by_year = aggregation.cumulative_by_year(df)
    by_quarter = aggregation.cumulative_by_quarter(df)
    regions = aggregation.region_totals(df)

    for name, table in [("stressor_share", share), ("cumulative_by_year", by_year),
                        ("cumulative_by_quarter", by_quarter), ("region_totals", regions)]:
        log.append(f"✓ Saved: {save_csv(table, tables[name])}")

    saved = {
        "stressor_share": save_figure(plots.plot_stressor_share(share), figures["stressor_share"]),
        "cumulative_by_year": save_figure(plots.plot_cumulative_lollipop(by_year, 'year'),
                                          figures["cumulative_by_year"]),
        "cumulative_by_quarter": save_figure(plots.plot_cumulative_lollipop(by_quarter, 'period'),
                                             figures["cumulative_by_quarter"]),
        "region_percent_change": save_figure(plots.plot_region_percent_change(regions),
                                             figures["region_percent_change"]),
    }
    log += [f"✓ Saved: {path}" for path in saved.values()]
    log.append(f"✓ {len(regions)} regions above {config.REGION_COLONY_THRESHOLD:,} colonies")
    return saved, log


def build_inference_outputs(df, tables=None, figures=None, n_iterations=None):
    """
    Run the hypothesis tests and save their tables and figures.

    Returns:
        (inference results dict, dict of figure name -> saved path) and log info
    """
    tables = tables or config.OUTPUT_TABLES
    figures = figures or config.OUTPUT_FIGURES

    results, log = run_inference(df, n_iterations=n_iterations)

    save_csv(results['regional_skewness'], tables["regional_skewness"])
    save_csv(pd.DataFrame([results['ttest'].as_dict(), results['bootstrap'].as_dict()]),
             tables["test_results"])

    saved = {
        "net_change_hist": save_figure(plots.plot_net_change_distribution(results['net'], results['ttest']),
                                       figures["net_change_hist"]),
        "bootstrap_null": save_figure(plots.plot_bootstrap_null(results['bootstrap']),
                                      figures["bootstrap_null"]),
    }
    log += [f"✓ Saved: {path}" for path in saved.values()]
    return (results, saved), log


def render_report(df, qc_results, inference, figures, report_path):
    """
    Build the markdown report.

    Args:
        df: Cleaned records
        qc_results: Output of qc.run_qc()
        inference: Results dict from inference.run_inference()
        figures: Dict of figure name -> Path
        report_path: Where the report will be written (figure links are relative to it)

    Returns:
        Markdown text
    """
    lines = [
        "# Honeybee Colony Gains & Stressors",
        "",
        f"_Generated {date.today().isoformat()}_",
        "",
        "## Data",
        "",
        f"- Records: {len(df):,} (year × quarter × region × stressor)",
        f"- Years: {df['year'].min()}–{df['year'].max()}",
        f"- Regions: {df['region'].nunique()}",
        "",
        "## Quality control",
        "",
    ]
    lines += [f"- {name}: {line.strip()}" for name, line in qc_results]

    lines += ["", "## Figures", ""]
    report_dir = os.path.dirname(os.path.abspath(report_path))
    for name, path in figures.items():
        rel = os.path.relpath(os.path.abspath(path), start=report_dir)
        lines.append(f"![{name}]({rel})")
        lines.append("")

    skew_table = inference['regional_skewness']
    lines += [
        "## Skewness of quarterly net change",
        "",
        f"National skewness: {inference['national_skewness']:.3f}",
        "",
        skew_table.head(10).to_markdown(index=False, floatfmt=",.3f"),
        "",
        "## Hypothesis tests",
        "",
    ]
    for key in ('ttest', 'bootstrap'):
        lines.append("```")
        lines += format_test_result(inference[key])
        lines.append("```")
        lines.append("")

    return "\n".join(lines)
