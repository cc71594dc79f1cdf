"""
I/O module: Load the raw colony/stressor tables and save report artifacts.
"""

import pandas as pd
from pathlib import Path

from . import config


class FileReadError(IOError):
    """Raised when an input table is missing or cannot be parsed."""


def load_csv(filepath, **kwargs):
    """
    Load CSV file with error handling.

    Args:
        filepath: Path to CSV file
        **kwargs: Additional arguments for pd.read_csv()

    Returns:
        pd.DataFrame
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileReadError(f"CSV file not found: {filepath}")

    try:
        return pd.read_csv(filepath, **kwargs)
    except pd.errors.EmptyDataError as e:
        raise FileReadError(f"CSV file is empty: {filepath}") from e
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise FileReadError(f"CSV file is malformed: {filepath} ({e})") from e


def canonicalize_columns(df):
    """Normalize column names to snake_case and rename raw names to canonical ones."""
    df = df.copy()
    df.columns = [str(col).strip().lower().replace(' ', '_') for col in df.columns]
    return df.rename(columns=config.COLUMN_RENAMES)


def _load_table(filepath, required, name):
    df = canonicalize_columns(load_csv(filepath))
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise FileReadError(f"{name} table {filepath} is missing columns: {missing}")
    return df


def load_colony(filepath=None):
    """Load the colony metrics table with canonical column names."""
    filepath = filepath or config.INPUT_FILES["colony"]
    return _load_table(filepath, config.COLONY_REQUIRED_COLUMNS, "colony")


def load_stressor(filepath=None):
    """Load the stressor metrics table with canonical column names."""
    filepath = filepath or config.INPUT_FILES["stressor"]
    return _load_table(filepath, config.STRESSOR_REQUIRED_COLUMNS, "stressor")


def load_inputs(colony_path=None, stressor_path=None):
    """
    Load both input tables.

    Returns:
        (colony DataFrame, stressor DataFrame) and log info
    """
    log = []
    df_colony = load_colony(colony_path)
    log.append(f"✓ Loaded colony table: {df_colony.shape[0]:,} rows x {df_colony.shape[1]} cols")
    df_stressor = load_stressor(stressor_path)
    log.append(f"✓ Loaded stressor table: {df_stressor.shape[0]:,} rows x {df_stressor.shape[1]} cols")
    return (df_colony, df_stressor), log


def save_csv(df, filepath, **kwargs):
    """
    Save DataFrame to CSV.

    Args:
        df: DataFrame to save
        filepath: Output path
        **kwargs: Additional arguments for df.to_csv()

    Returns:
        Path to saved file
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    df.to_csv(filepath, index=False, **kwargs)

    return filepath


def save_figure(fig, filepath, dpi=None):
    """Save a matplotlib figure as PNG and close it."""
    import matplotlib.pyplot as plt

    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(filepath, dpi=dpi or config.DPI, bbox_inches='tight')
    plt.close(fig)
    return filepath


def write_text(text, filepath):
    """Write a text document (UTF-8)."""
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    filepath.write_text(text, encoding="utf-8")
    return filepath


def file_size_mb(filepath):
    """Get file size in MB."""
    return Path(filepath).stat().st_size / (1024 ** 2)
