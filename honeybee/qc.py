"""
Quality Control (QC) module: Assertions and data quality checks on the cleaned records.
"""

from . import config
from .cleaning import STRESSOR_VALUES


def check_colony_count(df, count_col='colony_count'):
    """Assert colony counts are present and non-negative."""
    assert df[count_col].isnull().sum() == 0, f"Null {count_col} values found!"
    assert (df[count_col] >= 0).all(), f"Found negative {count_col} values!"
    return f"✓ {count_col} present and non-negative (n={len(df):,})"

def check_no_nationwide(df, region=config.NATIONWIDE_REGION):
    """Assert the nationwide pseudo-region was removed."""
    n_rows = (df['region'].str.casefold() == region.casefold()).sum()
    assert n_rows == 0, f"Found {n_rows} '{region}' rows!"
    return f"✓ No '{region}' rows"

def check_unique_records(df, keys=None):
    """Assert each (year, quarter, region, stressor) appears once."""
    keys = keys or config.RECORD_KEYS
    dup_count = df.duplicated(subset=keys).sum()
    assert dup_count == 0, f"Found {dup_count} duplicate {keys} records!"
    return f"✓ Records unique on {keys}"

def check_stressor_values(df, stressor_col='stressor'):
    """Check stressor labels against the fixed categories (unknown labels are reported)."""
    labels = set(df[stressor_col].dropna())
    unknown = sorted(labels - set(STRESSOR_VALUES))
    if unknown:
        return f"⚠️  Unrecognized stressor labels: {unknown}"
    return f"✓ Stressor labels within {len(STRESSOR_VALUES)} categories ({len(labels)} present)"

def check_percent_range(df, percent_cols=('percent_lost', 'percent_renovated', 'percent_stressed')):
    """Check percent columns fall within 0-100 (logs out-of-range counts)."""
    out_of_range = {col: int(((df[col] < 0) | (df[col] > 100)).sum())
                    for col in percent_cols if col in df.columns}
    flagged = {col: n for col, n in out_of_range.items() if n > 0}
    if flagged:
        return f"⚠️  Percent values outside 0-100: {flagged}"
    return f"✓ Percent columns within 0-100"

def check_cumulative_monotonic(df_cumulative, cols=('cumulative_added', 'cumulative_lost')):
    """Assert running totals never decrease."""
    for col in cols:
        assert df_cumulative[col].is_monotonic_increasing, f"{col} decreases!"
    return f"✓ Cumulative totals non-decreasing ({len(df_cumulative)} buckets)"

def run_qc(checks):
    """
    Run QC checks and collect formatted result lines.

    Args:
        checks: List of (name, check_func, kwargs) tuples

    Returns:
        List of (name, status line) tuples
    """
    results = []
    for name, check_func, kwargs in checks:
        try:
            results.append((name, f"  {check_func(**kwargs)}"))
        except AssertionError as e:
            results.append((f"❌ {name}", f"  ERROR: {e}"))
    return results

def print_qc_report(results):
    """Print formatted QC report from run_qc() output."""
    print("\n" + "=" * 80)
    print("QUALITY CONTROL REPORT")
    print("=" * 80)

    for name, line in results:
        print(f"\n{name}")
        print(line)

    print("\n" + "=" * 80)

def default_checks(df, df_cumulative=None):
    """Standard checks for the cleaned records."""
    checks = [
        ("Colony counts", check_colony_count, {'df': df}),
        ("Nationwide region removed", check_no_nationwide, {'df': df}),
        ("Unique records", check_unique_records, {'df': df}),
        ("Stressor categories", check_stressor_values, {'df': df}),
        ("Percent ranges", check_percent_range, {'df': df}),
    ]
    if df_cumulative is not None:
        checks.append(("Cumulative totals", check_cumulative_monotonic, {'df_cumulative': df_cumulative}))
    return checks
