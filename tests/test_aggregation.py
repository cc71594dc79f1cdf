import pandas as pd
import pytest

from honeybee.aggregation import (colony_records, cumulative_by_quarter, cumulative_by_year,
                                  region_totals, stressor_share)


def test_colony_records_one_row_per_region_quarter(clean_df):
    records = colony_records(clean_df)
    assert len(records) == 6
    assert not records.duplicated(subset=['year', 'quarter', 'region']).any()


def test_stressor_share_values(clean_df):
    share = stressor_share(clean_df)
    total_colonies = 7000 + 7500 + 8000 + 1_000_000 + 1_200_000 + 1000

    varroa = share.set_index('stressor').loc['Varroa Mites']
    expected = 7000 * 0.10 + 7500 * 0.167 + 1_000_000 * 0.30 + 1_200_000 * 0.20
    assert varroa['colonies_affected'] == pytest.approx(expected)
    assert varroa['share_pct'] == pytest.approx(100 * expected / total_colonies)
    assert share.iloc[0]['stressor'] == 'Varroa Mites'


def test_stressor_share_ignores_missing_stressor(clean_df):
    share = stressor_share(clean_df)
    assert share['stressor'].notna().all()
    assert share.set_index('stressor').loc['Disease', 'colonies_affected'] == pytest.approx(40.0)


def test_cumulative_by_year(clean_df):
    by_year = cumulative_by_year(clean_df)
    assert by_year['year'].tolist() == [2015, 2016]
    assert by_year['colony_added'].tolist() == [554_800, 500]
    assert by_year['colony_lost'].tolist() == [302_810, 1000]
    assert by_year['cumulative_added'].tolist() == [554_800, 555_300]
    assert by_year['cumulative_lost'].tolist() == [302_810, 303_810]


def test_cumulative_totals_non_decreasing(clean_df):
    for table in (cumulative_by_year(clean_df), cumulative_by_quarter(clean_df)):
        assert table['cumulative_added'].is_monotonic_increasing
        assert table['cumulative_lost'].is_monotonic_increasing


def test_cumulative_by_quarter_time_order(clean_df):
    by_quarter = cumulative_by_quarter(clean_df)
    assert by_quarter['period'].tolist() == ['2015-Q1', '2015-Q2', '2016-Q1']


def test_region_totals_threshold(clean_df):
    totals = region_totals(clean_df)
    assert totals['region'].tolist() == ['California']

    row = totals.iloc[0]
    assert row['total_colonies'] == 2_200_000
    assert row['net_change_ratio'] == pytest.approx((550_000 - 300_000) / 2_200_000)
    assert row['percent_change'] == pytest.approx(100 * 250_000 / 2_200_000)


def test_region_totals_custom_threshold(clean_df):
    totals = region_totals(clean_df, min_colonies=0)
    assert set(totals['region']) == {'Alabama', 'California', 'Texas'}
    assert totals['percent_change'].is_monotonic_decreasing


def test_aggregations_do_not_modify_input(clean_df):
    before = clean_df.copy()
    stressor_share(clean_df)
    cumulative_by_quarter(clean_df)
    region_totals(clean_df)
    pd.testing.assert_frame_equal(clean_df, before)
