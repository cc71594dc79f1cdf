import matplotlib
matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

from honeybee.cleaning import clean_dataset


@pytest.fixture
def raw_colony():
    """Colony table with the raw survey column names."""
    return pd.DataFrame({
        'year': [2015, 2015, 2016, 2015, 2015, 2016, 2015, 2015],
        'months': ['January-March', 'April-June', 'January-March', 'January-March',
                   'April-June', 'January-March', 'January-March', 'January-March'],
        'state': ['Alabama', 'Alabama', 'Alabama', 'California',
                  'California', 'California', 'United States', 'Texas'],
        'colony_n': [7000, 7500, 8000, 1_000_000, 1_200_000, np.nan, 2_800_000, 1000],
        'colony_max': [7000, 7500, 8000, 1_000_000, 1_200_000, np.nan, 2_900_000, 1000],
        'colony_lost': [1800, 860, 1000, 200_000, 100_000, np.nan, 500_000, 150],
        'colony_lost_pct': [26, 12, np.nan, 20, 8, np.nan, 18, np.nan],
        'colony_added': [2800, 1900, 500, 300_000, 250_000, np.nan, 600_000, 100],
        'colony_reno': [250, 1600, np.nan, 50_000, 60_000, np.nan, 200_000, 0],
        'colony_reno_pct': [4, 22, np.nan, 5, 5, np.nan, 7, np.nan],
    })


@pytest.fixture
def raw_stressor():
    """Stressor table with the raw survey column names and label problems."""
    rows = [
        (2015, 'January-March', 'Alabama', 'Varroa mites', 10.0),
        (2015, 'January-March', 'Alabama', 'Other pests/parasites', 5.4),
        (2015, 'January-March', 'Alabama', 'Disesases', np.nan),
        (2015, 'January-March', 'Alabama', 'Pesticides', 2.2),
        (2015, 'January-March', 'Alabama', 'Other', 9.1),
        (2015, 'January-March', 'Alabama', 'Unknown', 9.4),
        (2015, 'April-June', 'Alabama', 'Varroa mites', 16.7),
        (2015, 'January-March', 'California', 'Varroa mites', 30.0),
        (2015, 'January-March', 'California', 'Pesticides', 10.0),
        (2015, 'April-June', 'California', 'Varroa mites', 20.0),
        (2016, 'January-March', 'California', 'Varroa mites', 5.0),
        (2015, 'January-March', 'United States', 'Varroa mites', 33.0),
        (2015, 'January-March', 'Texas', 'Disesases', 4.0),
    ]
    return pd.DataFrame(rows, columns=['year', 'months', 'state', 'stressor', 'stress_pct'])


@pytest.fixture
def canonical_inputs(raw_colony, raw_stressor):
    """Raw tables renamed to canonical columns (what io.load_* returns)."""
    from honeybee.io import canonicalize_columns
    return canonicalize_columns(raw_colony), canonicalize_columns(raw_stressor)


@pytest.fixture
def clean_df(canonical_inputs):
    df, _ = clean_dataset(*canonical_inputs)
    return df


@pytest.fixture
def input_files(tmp_path, raw_colony, raw_stressor):
    colony_path = tmp_path / "colony.csv"
    stressor_path = tmp_path / "stressor.csv"
    raw_colony.to_csv(colony_path, index=False)
    raw_stressor.to_csv(stressor_path, index=False)
    return colony_path, stressor_path


@pytest.fixture
def output_paths(tmp_path):
    """Table/figure path maps pointing into tmp_path."""
    from honeybee import config
    tables = {name: tmp_path / "tables" / path.name for name, path in config.OUTPUT_TABLES.items()}
    figures = {name: tmp_path / "figures" / path.name for name, path in config.OUTPUT_FIGURES.items()}
    return tables, figures
