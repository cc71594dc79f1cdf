"""
Cleaning module: Normalization, joining and imputation for colony and stressor tables.
"""

from enum import Enum

import pandas as pd
import numpy as np
from . import config


class Stressor(str, Enum):
    """Fixed set of stressor categories reported by the survey."""
    VARROA_MITES = "Varroa Mites"
    OTHER_PESTS = "Other Pests"
    PESTICIDES = "Pesticides"
    OTHER = "Other"
    UNKNOWN = "Unknown"
    DISEASE = "Disease"


STRESSOR_VALUES = [member.value for member in Stressor]


def normalize_stressor(label):
    """
    Normalize a raw stressor label and map it onto the Stressor enum.

    Known misspellings and category names are corrected first, then the label
    is title-cased. Labels outside the enum are returned as the cleaned string.

    Args:
        label: Raw label (e.g. 'Disesases', 'Varroa mites')

    Returns:
        Stressor member, the cleaned string for unrecognized labels, or NaN
    """
    if label is None or pd.isna(label):
        return np.nan

    text = str(label).strip()
    text = config.STRESSOR_CORRECTIONS.get(text.lower(), text)
    text = ' '.join(text.split()).title()

    try:
        return Stressor(text)
    except ValueError:
        return text


def normalize_stressor_series(s: pd.Series) -> pd.Series:
    """Apply normalize_stressor and store plain string values."""
    def to_value(label):
        result = normalize_stressor(label)
        return result.value if isinstance(result, Stressor) else result
    return s.apply(to_value)


def impute_percent(percent, count, metric):
    """
    Derive a percentage from raw counts when it is missing.

    percent = 100 * metric / count, only when count > 0. An existing percent
    is returned unchanged; anything that cannot be derived stays NaN.
    """
    if percent is not None and not pd.isna(percent):
        return float(percent)
    if count is None or metric is None or pd.isna(count) or pd.isna(metric) or count <= 0:
        return np.nan
    return 100.0 * metric / count


def parse_quarter(label):
    """Map a quarter label ('January-March', 'Q1', 1, 1.0) to its number 1..4."""
    if isinstance(label, (float, np.floating)) and label.is_integer():
        label = int(label)
    if isinstance(label, (int, np.integer)) and 1 <= label <= 4:
        return int(label)
    key = str(label).strip().lower().replace(' ', '')
    if key not in config.QUARTER_LABELS:
        raise ValueError(f"Unknown quarter label: {label!r}")
    return config.QUARTER_LABELS[key]


def _clean_keys(df_clean, log):
    """Coerce year/quarter/region and drop rows whose keys are unusable."""
    df_clean['year'] = pd.to_numeric(df_clean['year'], errors='coerce')
    missing_year = df_clean['year'].isnull().sum()
    if missing_year > 0:
        log.append(f"⚠️  Dropped {missing_year} rows with missing year")
        df_clean = df_clean[df_clean['year'].notna()].copy()
    df_clean['year'] = df_clean['year'].astype('int64')

    df_clean['region'] = df_clean['region'].where(df_clean['region'].isna(),
                                                  df_clean['region'].astype(str).str.strip())
    missing_region = (df_clean['region'].isna() | (df_clean['region'] == '')).sum()
    if missing_region > 0:
        log.append(f"⚠️  Dropped {missing_region} rows with missing region")
        df_clean = df_clean[df_clean['region'].notna() & (df_clean['region'] != '')].copy()

    df_clean['quarter'] = df_clean['quarter'].apply(parse_quarter).astype('int64')
    return df_clean


def clean_colony(df_colony):
    """
    Clean colony data: keys, numeric types, duplicate keys.

    Args:
        df_colony: Colony DataFrame with canonical column names

    Returns:
        Cleaned DataFrame and log info
    """
    log = []
    df_clean = _clean_keys(df_colony.copy(), log)
    log.append(f"✓ Colony keys parsed ({df_clean['year'].min()}-{df_clean['year'].max()}, "
               f"{df_clean['region'].nunique()} regions)")

    for col in config.COLONY_NUMERIC_COLUMNS:
        if col in df_clean.columns:
            df_clean[col] = pd.to_numeric(df_clean[col], errors='coerce')
        else:
            df_clean[col] = np.nan
            log.append(f"⚠️  {col} column not found (filled with NaN)")

    dup_count = df_clean.duplicated(subset=config.JOIN_KEYS).sum()
    if dup_count > 0:
        log.append(f"⚠️  Removed {dup_count} duplicate colony rows (kept first occurrence)")
        df_clean = df_clean.drop_duplicates(subset=config.JOIN_KEYS, keep='first')

    log.append(f"✓ Colony cleaning complete: {df_colony.shape} → {df_clean.shape}")
    return df_clean, log


def clean_stressor(df_stressor):
    """
    Clean stressor data: keys, numeric types, stressor labels, duplicate records.

    Labels are normalized before duplicates are removed, so raw spellings of
    the same category ('Disesases', 'Diseases') collapse to one record per
    (year, quarter, region, stressor); the first occurrence is kept.

    Args:
        df_stressor: Stressor DataFrame with canonical column names

    Returns:
        Cleaned DataFrame and log info
    """
    log = []
    df_clean = _clean_keys(df_stressor.copy(), log)

    df_clean['percent_stressed'] = pd.to_numeric(df_clean['percent_stressed'], errors='coerce')
    df_clean['stressor'] = normalize_stressor_series(df_clean['stressor'])

    dup_count = df_clean.duplicated(subset=config.RECORD_KEYS).sum()
    if dup_count > 0:
        log.append(f"⚠️  Removed {dup_count} duplicate stressor records (kept first occurrence)")
        df_clean = df_clean.drop_duplicates(subset=config.RECORD_KEYS, keep='first')

    log.append(f"✓ Stressor cleaning complete: {df_stressor.shape} → {df_clean.shape}")
    return df_clean, log


def join_colony_stressor(df_colony, df_stressor):
    """
    Left join stressor rows into the colony table on (year, quarter, region).

    Every colony row is preserved; a colony row without stressor data yields a
    single record with a missing stressor.
    """
    stressor_cols = config.JOIN_KEYS + [c for c in df_stressor.columns
                                        if c not in config.JOIN_KEYS and c not in df_colony.columns]
    return df_colony.merge(
        df_stressor[stressor_cols],
        on=config.JOIN_KEYS,
        how='left',
        validate='one_to_many',
    )


def clean_dataset(df_colony, df_stressor):
    """
    Build the cleaned record table from the raw colony and stressor tables.

    Steps: clean both tables (stressor labels are normalized there), join,
    drop the nationwide pseudo-region, drop rows lacking colony_count, impute
    percent fields from counts, zero-fill remaining numerics, report
    unrecognized stressor labels.

    Returns:
        Cleaned DataFrame (one row per year/quarter/region/stressor) and log info
    """
    colony, log = clean_colony(df_colony)
    stressor, stressor_log = clean_stressor(df_stressor)
    log += stressor_log

    df = join_colony_stressor(colony, stressor)
    log.append(f"✓ Joined colony and stressor tables: {len(df):,} records")

    nationwide = df['region'].str.casefold() == config.NATIONWIDE_REGION.casefold()
    if nationwide.any():
        df = df[~nationwide].copy()
        log.append(f"✓ Removed {nationwide.sum()} '{config.NATIONWIDE_REGION}' summary records")

    missing_count = df['colony_count'].isnull().sum()
    if missing_count > 0:
        df = df[df['colony_count'].notna()].copy()
        log.append(f"⚠️  Dropped {missing_count} records without colony_count")

    for percent_col, count_col in config.PERCENT_FROM_COUNT.items():
        n_missing = df[percent_col].isnull().sum()
        df[percent_col] = [
            impute_percent(p, c, m)
            for p, c, m in zip(df[percent_col], df['colony_count'], df[count_col])
        ]
        n_imputed = n_missing - df[percent_col].isnull().sum()
        if n_imputed > 0:
            log.append(f"✓ Imputed {n_imputed} {percent_col} values from {count_col}")

    numeric_cols = config.COLONY_NUMERIC_COLUMNS + config.STRESSOR_NUMERIC_COLUMNS
    n_filled = int(df[numeric_cols].isnull().sum().sum())
    df[numeric_cols] = df[numeric_cols].fillna(0).astype(float)
    if n_filled > 0:
        log.append(f"⚠️  Filled {n_filled} missing numeric values with 0")

    unknown = sorted(set(df['stressor'].dropna()) - set(STRESSOR_VALUES))
    if unknown:
        log.append(f"⚠️  Unrecognized stressor labels passed through: {unknown}")
    else:
        log.append(f"✓ Stressor labels normalized ({df['stressor'].nunique()} categories)")

    df = df.sort_values(config.RECORD_KEYS, na_position='last').reset_index(drop=True)
    log.append(f"✓ Cleaned dataset: {len(df):,} records, {df['region'].nunique()} regions")
    return df, log
