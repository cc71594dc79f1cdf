import numpy as np
import pandas as pd
import pytest
from scipy import stats

from honeybee.inference import (bootstrap_mean_test, distribution_skewness, net_change_table,
                                one_sample_ttest, recommend_test, regional_skewness,
                                run_inference, select_skewed_region)


@pytest.fixture
def positive_sample():
    return np.random.default_rng(1).normal(loc=50, scale=10, size=40)


@pytest.fixture
def centered_sample():
    return np.array([-3, -2, -1, 0, 1, 2, 3] * 5, dtype=float)


def test_net_change_table(clean_df):
    net = net_change_table(clean_df)
    assert len(net) == 6
    row = net[(net['region'] == 'Alabama') & (net['year'] == 2015) & (net['quarter'] == 1)].iloc[0]
    assert row['net_change'] == 2800 - 1800
    texas = net[net['region'] == 'Texas'].iloc[0]
    assert texas['net_change'] == -50


def test_distribution_skewness():
    assert distribution_skewness([1, 2, 3, 4, 5]) == pytest.approx(0.0)
    assert distribution_skewness([0, 0, 0, 0, 10]) > 0
    assert np.isnan(distribution_skewness([1, 2]))
    assert np.isnan(distribution_skewness([4, 4, 4, 4]))


def test_distribution_skewness_large_baseline():
    skew = distribution_skewness([1_000_000] * 4 + [1_000_009])
    assert skew == pytest.approx(stats.skew([0, 0, 0, 0, 9]))
    assert skew == pytest.approx(1.5)


def test_large_baseline_region_selected_for_bootstrap():
    net = pd.DataFrame({
        'region': ['A'] * 5 + ['B'] * 5,
        'net_change': [1, 2, 3, 4, 5] + [1_000_000] * 4 + [1_000_009],
    })
    table = regional_skewness(net)
    assert table.loc[0, 'region'] == 'B'
    assert select_skewed_region(table, threshold=1.0) == 'B'


def test_distribution_skewness_empty():
    with pytest.raises(ValueError):
        distribution_skewness([])


def test_regional_skewness_sorted_by_magnitude():
    net = pd.DataFrame({
        'region': ['A'] * 5 + ['B'] * 5 + ['C'] * 2,
        'net_change': [1, 2, 3, 4, 5, 0, 0, 0, 0, 10, 1, 2],
    })
    table = regional_skewness(net)
    assert table['region'].tolist() == ['B', 'A', 'C']
    assert table.loc[0, 'n'] == 5
    assert np.isnan(table.loc[2, 'skewness'])


@pytest.mark.parametrize("skew, expected", [
    (2.0, "bootstrap"), (-1.5, "bootstrap"), (0.5, "t-test"), (float('nan'), "t-test"),
])
def test_recommend_test(skew, expected):
    assert recommend_test(skew, threshold=1.0) == expected


def test_select_skewed_region():
    table = pd.DataFrame({'region': ['A', 'B', 'C', 'D'],
                          'skewness': [0.2, -3.0, 1.5, np.nan]})
    assert select_skewed_region(table, threshold=1.0) == 'B'
    assert select_skewed_region(table, threshold=1.0, region='C') == 'C'


def test_select_skewed_region_unknown_region():
    table = pd.DataFrame({'region': ['A'], 'skewness': [0.2]})
    with pytest.raises(ValueError, match="not found"):
        select_skewed_region(table, region='Z')


def test_one_sample_ttest_matches_scipy(positive_sample):
    result = one_sample_ttest(positive_sample, popmean=0, alpha=0.05)
    expected = stats.ttest_1samp(positive_sample, 0)

    assert result.statistic == pytest.approx(expected.statistic)
    assert result.p_value == pytest.approx(expected.pvalue)
    assert result.ci_low < result.mean < result.ci_high
    assert result.reject
    assert result.conclusion.startswith("Reject H0")


def test_one_sample_ttest_fails_to_reject_centered(centered_sample):
    result = one_sample_ttest(centered_sample)
    assert not result.reject
    assert result.conclusion.startswith("Fail to reject")
    assert result.ci_low < 0 < result.ci_high


def test_one_sample_ttest_needs_two_observations():
    with pytest.raises(ValueError):
        one_sample_ttest([5.0])


def test_one_sample_ttest_invalid_alpha(positive_sample):
    with pytest.raises(ValueError, match="alpha"):
        one_sample_ttest(positive_sample, alpha=1.5)


def test_bootstrap_rejects_positive_mean(positive_sample):
    result = bootstrap_mean_test(positive_sample, null_mean=0, n_iterations=2000, alpha=0.05, seed=7)
    assert result.p_value < 0.05
    assert result.reject
    assert result.statistic == pytest.approx(positive_sample.mean())


def test_bootstrap_fails_to_reject_centered(centered_sample):
    result = bootstrap_mean_test(centered_sample, null_mean=0, n_iterations=2000, alpha=0.05, seed=7)
    assert result.p_value == pytest.approx(1.0)
    assert not result.reject


def test_bootstrap_null_distribution(positive_sample):
    result = bootstrap_mean_test(positive_sample, n_iterations=2500, seed=3, batch_size=1000)
    assert result.null_distribution.shape == (2500,)
    assert result.null_distribution.mean() == pytest.approx(0.0, abs=1.0)
    assert result.ci_low < result.mean < result.ci_high


def test_bootstrap_is_reproducible(positive_sample):
    first = bootstrap_mean_test(positive_sample, n_iterations=500, seed=11)
    second = bootstrap_mean_test(positive_sample, n_iterations=500, seed=11)
    np.testing.assert_array_equal(first.null_distribution, second.null_distribution)
    assert first.p_value == second.p_value


def test_bootstrap_ignores_missing_values():
    result = bootstrap_mean_test([1.0, np.nan, 3.0], n_iterations=100, seed=0)
    assert result.n == 2
    assert result.mean == 2.0


@pytest.mark.parametrize("kwargs", [{'n_iterations': 0}, {'alpha': 0}])
def test_bootstrap_invalid_arguments(positive_sample, kwargs):
    with pytest.raises(ValueError):
        bootstrap_mean_test(positive_sample, **kwargs)


def test_bootstrap_empty_sample():
    with pytest.raises(ValueError, match="empty"):
        bootstrap_mean_test([], n_iterations=10)


def test_test_result_as_dict(positive_sample):
    record = one_sample_ttest(positive_sample).as_dict()
    assert set(record) == {'test', 'label', 'n', 'mean', 'statistic', 'p_value', 'alpha',
                           'ci_low', 'ci_high', 'reject', 'conclusion'}


def test_run_inference(clean_df):
    results, log = run_inference(clean_df, n_iterations=500, seed=0)
    assert results['region'] == 'Alabama'
    assert results['ttest'].n == 6
    assert results['bootstrap'].n == 3
    assert results['bootstrap'].label == 'Alabama'
    assert len(results['regional_skewness']) == 3
    assert any("t-test" in line for line in log)


def test_run_inference_explicit_region(clean_df):
    results, _ = run_inference(clean_df, region='California', n_iterations=200, seed=0)
    assert results['region'] == 'California'
    assert results['bootstrap'].n == 2
