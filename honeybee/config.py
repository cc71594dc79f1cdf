"""
Configuration module: paths, column maps, stressor labels and analysis settings.
"""

from pathlib import Path
import os

# ============================================================================
# PROJECT PATHS (zero hardcoding - all relative to PROJECT_ROOT)
# ============================================================================

def get_project_root():
    """Auto-detect project root by checking for data/ and honeybee/ folders."""
    env_root = os.getenv("HONEYBEE_PROJECT_ROOT")
    if env_root:
        return Path(env_root).expanduser().resolve()

    cwd = Path.cwd()

    # If already in project root
    if (cwd / "data").exists() and (cwd / "honeybee").exists():
        return cwd

    # If in scripts/ or tests/
    if cwd.name in ["scripts", "tests"] and (cwd.parent / "honeybee").exists():
        return cwd.parent

    # Fallback: the checkout this module lives in
    return Path(__file__).resolve().parent.parent

PROJECT_ROOT = get_project_root()

# Core data paths
DATA_DIR = PROJECT_ROOT / "data"
ORIGINAL_DIR = DATA_DIR / "original"
OUTPUTS_DIR = PROJECT_ROOT / "outputs"
FIGURES_DIR = OUTPUTS_DIR / "figures"
TABLES_DIR = OUTPUTS_DIR / "tables"
REPORT_FILE = OUTPUTS_DIR / "report.md"

# Input files (raw data)
INPUT_FILES = {
    "colony": ORIGINAL_DIR / "colony.csv",
    "stressor": ORIGINAL_DIR / "stressor.csv",
}

# Output tables (derived views, recomputed every run)
OUTPUT_TABLES = {
    "stressor_share": TABLES_DIR / "stressor_share.csv",
    "cumulative_by_year": TABLES_DIR / "cumulative_by_year.csv",
    "cumulative_by_quarter": TABLES_DIR / "cumulative_by_quarter.csv",
    "region_totals": TABLES_DIR / "region_totals.csv",
    "regional_skewness": TABLES_DIR / "regional_skewness.csv",
    "test_results": TABLES_DIR / "test_results.csv",
}

OUTPUT_FIGURES = {
    "stressor_share": FIGURES_DIR / "stressor_share_bar.png",
    "cumulative_by_year": FIGURES_DIR / "cumulative_by_year_lollipop.png",
    "cumulative_by_quarter": FIGURES_DIR / "cumulative_by_quarter_lollipop.png",
    "region_percent_change": FIGURES_DIR / "region_percent_change_diverging.png",
    "net_change_hist": FIGURES_DIR / "net_change_distribution.png",
    "bootstrap_null": FIGURES_DIR / "bootstrap_null_distribution.png",
}

# ============================================================================
# SCHEMA
# ============================================================================

JOIN_KEYS = ["year", "quarter", "region"]
RECORD_KEYS = JOIN_KEYS + ["stressor"]

# Raw TidyTuesday/USDA column names -> canonical names
COLUMN_RENAMES = {
    "months": "quarter",
    "state": "region",
    "colony_n": "colony_count",
    "colony_lost_pct": "percent_lost",
    "colony_reno": "colony_renovated",
    "colony_reno_pct": "percent_renovated",
    "stress_pct": "percent_stressed",
}

COLONY_REQUIRED_COLUMNS = ["year", "quarter", "region", "colony_count",
                           "colony_added", "colony_lost"]
COLONY_NUMERIC_COLUMNS = ["colony_count", "colony_max", "colony_added", "colony_lost",
                          "colony_renovated", "percent_lost", "percent_renovated"]

STRESSOR_REQUIRED_COLUMNS = ["year", "quarter", "region", "stressor", "percent_stressed"]
STRESSOR_NUMERIC_COLUMNS = ["percent_stressed"]

QUARTER_LABELS = {
    "january-march": 1,
    "april-june": 2,
    "july-september": 3,
    "october-december": 4,
    "q1": 1,
    "q2": 2,
    "q3": 3,
    "q4": 4,
}

# ============================================================================
# CLEANING CONSTANTS
# ============================================================================

# Aggregate pseudo-region; derivable from the states, not a primary observation
NATIONWIDE_REGION = "United States"

# Known raw label problems, applied before title-casing
STRESSOR_CORRECTIONS = {
    "disesases": "Disease",
    "diseases": "Disease",
    "other pests/parasites": "Other Pests",
    "other pests and parasites": "Other Pests",
}

# Percent columns imputed from raw counts when missing
PERCENT_FROM_COUNT = {
    "percent_lost": "colony_lost",
    "percent_renovated": "colony_renovated",
}

# ============================================================================
# ANALYSIS SETTINGS
# ============================================================================

REGION_COLONY_THRESHOLD = 500_000  # Regions shown in the percent-change plot
ALPHA = 0.05                       # Significance level for both tests
NULL_MEAN = 0.0                    # H0: mean quarterly net change is zero
BOOTSTRAP_ITERATIONS = 10_000
BOOTSTRAP_BATCH_SIZE = 1_000       # Resamples drawn per vectorized batch
SKEW_THRESHOLD = 1.0               # |skew| above this -> bootstrap instead of t-test
BOOTSTRAP_REGION = os.getenv("HONEYBEE_BOOTSTRAP_REGION")  # None -> most skewed region
RANDOM_SEED = 42

# ============================================================================
# FIGURES
# ============================================================================

DPI = 300
FIGSIZE = (12, 6)
COLOR_GAIN = "#2a9d8f"
COLOR_LOSS = "#e76f51"

# ============================================================================
# LOGGING
# ============================================================================

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()  # DEBUG, INFO, WARNING, ERROR


def ensure_output_dirs():
    """Create output folders if missing."""
    for directory in (FIGURES_DIR, TABLES_DIR):
        directory.mkdir(parents=True, exist_ok=True)


def print_config():
    """Print all configuration settings."""
    print("\n" + "=" * 80)
    print("PIPELINE CONFIGURATION")
    print("=" * 80)
    print(f"\n📁 PROJECT ROOT: {PROJECT_ROOT}")
    print(f"📂 DATA DIR: {ORIGINAL_DIR}")
    print(f"📂 OUTPUTS DIR: {OUTPUTS_DIR}")
    print(f"\n🐝 Analysis Settings:")
    print(f"   Region threshold: {REGION_COLONY_THRESHOLD:,} colonies")
    print(f"   Alpha: {ALPHA}")
    print(f"   Bootstrap iterations: {BOOTSTRAP_ITERATIONS:,} (seed={RANDOM_SEED})")
    print(f"   Bootstrap region: {BOOTSTRAP_REGION or 'auto (most skewed)'}")
    print(f"\n✓ Configuration loaded successfully")
    print("=" * 80 + "\n")
