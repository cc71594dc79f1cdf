"""
Aggregation module: Derived summary views of the cleaned records (for plots and tests).

All functions are read-only: they never modify the cleaned DataFrame and every
view is recomputed from it on demand.
"""

import pandas as pd
from . import config


def colony_records(df):
    """
    One row per (year, quarter, region).

    The colony fields are repeated for every stressor after the join, so
    totals must be computed on this view to avoid counting colonies twice.
    """
    colony_cols = [c for c in config.COLONY_NUMERIC_COLUMNS if c in df.columns]
    return (
        df[config.JOIN_KEYS + colony_cols]
        .drop_duplicates(subset=config.JOIN_KEYS)
        .sort_values(config.JOIN_KEYS)
        .reset_index(drop=True)
    )


def stressor_share(df):
    """
    Colonies affected per stressor and their share of all colonies.

    colonies_affected = colony_count * percent_stressed / 100, summed over all
    periods and regions. A colony can be hit by several stressors, so shares
    do not sum to 100.

    Returns:
        DataFrame [stressor, colonies_affected, share_pct] sorted by share
    """
    stressed = df[df['stressor'].notna()].copy()
    stressed['colonies_affected'] = stressed['colony_count'] * stressed['percent_stressed'] / 100
    total_colonies = colony_records(df)['colony_count'].sum()

    share = stressed.groupby('stressor', as_index=False)['colonies_affected'].sum()
    share['share_pct'] = 100 * share['colonies_affected'] / total_colonies if total_colonies > 0 else 0.0
    return share.sort_values('share_pct', ascending=False).reset_index(drop=True)


def _cumulative(df, keys):
    totals = (
        colony_records(df)
        .groupby(keys, as_index=False)[['colony_added', 'colony_lost']]
        .sum()
        .sort_values(keys)
        .reset_index(drop=True)
    )
    totals['cumulative_added'] = totals['colony_added'].cumsum()
    totals['cumulative_lost'] = totals['colony_lost'].cumsum()
    return totals


def cumulative_by_year(df):
    """Colonies added/lost per year with running totals across years."""
    return _cumulative(df, ['year'])


def cumulative_by_quarter(df):
    """Colonies added/lost per (year, quarter) with running totals in time order."""
    totals = _cumulative(df, ['year', 'quarter'])
    totals['period'] = totals['year'].astype(str) + '-Q' + totals['quarter'].astype(str)
    return totals


def region_totals(df, min_colonies=None):
    """
    Per-region totals restricted to regions with more than `min_colonies` colonies.

    Adds net_change_ratio = (total_added - total_lost) / total_colonies and the
    same value expressed in percent.

    Returns:
        DataFrame sorted by percent_change (descending)
    """
    if min_colonies is None:
        min_colonies = config.REGION_COLONY_THRESHOLD

    totals = (
        colony_records(df)
        .groupby('region', as_index=False)
        .agg(total_colonies=('colony_count', 'sum'),
             total_added=('colony_added', 'sum'),
             total_lost=('colony_lost', 'sum'))
    )
    totals = totals[totals['total_colonies'] > min_colonies].copy()
    totals['net_change_ratio'] = (totals['total_added'] - totals['total_lost']) / totals['total_colonies']
    totals['percent_change'] = 100 * totals['net_change_ratio']
    return totals.sort_values('percent_change', ascending=False).reset_index(drop=True)
