"""
Inference module: Net colony change, skewness and hypothesis tests on the mean.

H0 for both tests: the mean quarterly net change (colonies added minus
colonies lost) equals zero.
"""

from dataclasses import dataclass, field
from typing import Optional

import numpy as np
import pandas as pd
from scipy import stats
from statsmodels.stats.weightstats import DescrStatsW

from . import config
from .aggregation import colony_records


@dataclass
class TestResult:
    __test__ = False  # not a pytest class

    test: str
    label: str
    n: int
    mean: float
    statistic: float
    p_value: float
    alpha: float
    ci_low: float
    ci_high: float
    null_mean: float = 0.0
    null_distribution: Optional[np.ndarray] = field(default=None, repr=False)

    @property
    def reject(self) -> bool:
        return bool(self.p_value < self.alpha)

    @property
    def conclusion(self) -> str:
        if self.reject:
            return f"Reject H0 at α={self.alpha} (mean ≠ {self.null_mean:g})"
        return f"Fail to reject H0 at α={self.alpha}"

    def as_dict(self):
        return {
            'test': self.test,
            'label': self.label,
            'n': self.n,
            'mean': self.mean,
            'statistic': self.statistic,
            'p_value': self.p_value,
            'alpha': self.alpha,
            'ci_low': self.ci_low,
            'ci_high': self.ci_high,
            'reject': self.reject,
            'conclusion': self.conclusion,
        }


def _as_sample(values) -> np.ndarray:
    sample = np.asarray(values, dtype=float)
    sample = sample[~np.isnan(sample)]
    if sample.size == 0:
        raise ValueError("Sample is empty")
    return sample


def _check_alpha(alpha):
    if not 0 < alpha < 1:
        raise ValueError(f"alpha must be in (0, 1), got {alpha}")


def net_change_table(df):
    """Per (year, quarter, region) net_change = colony_added - colony_lost."""
    net = colony_records(df)[config.JOIN_KEYS + ['colony_count', 'colony_added', 'colony_lost']].copy()
    net['net_change'] = net['colony_added'] - net['colony_lost']
    return net


def distribution_skewness(values) -> float:
    """Sample skewness (Fisher-Pearson, biased) of the non-missing values."""
    sample = _as_sample(values)
    if sample.size < 3 or np.ptp(sample) == 0:
        return float('nan')
    return float(stats.skew(sample))


def regional_skewness(net):
    """
    Skewness of net change per region.

    Args:
        net: Output of net_change_table()

    Returns:
        DataFrame [region, n, mean_net_change, skewness] sorted by |skewness|
    """
    rows = []
    for region, group in net.groupby('region'):
        rows.append({
            'region': region,
            'n': len(group),
            'mean_net_change': group['net_change'].mean(),
            'skewness': distribution_skewness(group['net_change']),
        })
    table = pd.DataFrame(rows, columns=['region', 'n', 'mean_net_change', 'skewness'])
    order = table['skewness'].abs().sort_values(ascending=False, na_position='last').index
    return table.loc[order].reset_index(drop=True)


def recommend_test(skewness, threshold=None) -> str:
    """'bootstrap' for strongly skewed data, 't-test' otherwise."""
    if threshold is None:
        threshold = config.SKEW_THRESHOLD
    if skewness is not None and not np.isnan(skewness) and abs(skewness) > threshold:
        return "bootstrap"
    return "t-test"


def select_skewed_region(skew_table, threshold=None, region=None) -> str:
    """
    Pick the region for the bootstrap test.

    An explicit `region` must be present in the table. Otherwise the region
    with the largest |skewness| is used, preferring regions above `threshold`.
    """
    if threshold is None:
        threshold = config.SKEW_THRESHOLD

    if region is not None:
        if region not in set(skew_table['region']):
            raise ValueError(f"Region {region!r} not found in net change data")
        return region

    ranked = skew_table.dropna(subset=['skewness'])
    if ranked.empty:
        raise ValueError("No region has enough observations to compute skewness")
    skewed = ranked[ranked['skewness'].abs() > threshold]
    candidates = skewed if not skewed.empty else ranked
    return candidates.loc[candidates['skewness'].abs().idxmax(), 'region']


def one_sample_ttest(values, popmean=None, alpha=None, label="National"):
    """
    One-sample t-test of the mean against `popmean`.

    Returns:
        TestResult with the t statistic, two-sided p-value and the
        (1 - alpha) confidence interval of the mean
    """
    popmean = config.NULL_MEAN if popmean is None else popmean
    alpha = config.ALPHA if alpha is None else alpha
    _check_alpha(alpha)

    sample = _as_sample(values)
    if sample.size < 2:
        raise ValueError("t-test needs at least two observations")

    t_stat, p_value = stats.ttest_1samp(sample, popmean)
    ci_low, ci_high = DescrStatsW(sample).tconfint_mean(alpha=alpha)

    return TestResult(
        test="one-sample t-test",
        label=label,
        n=int(sample.size),
        mean=float(sample.mean()),
        statistic=float(t_stat),
        p_value=float(p_value),
        alpha=alpha,
        ci_low=float(ci_low),
        ci_high=float(ci_high),
        null_mean=float(popmean),
    )


def bootstrap_mean_test(values, null_mean=None, n_iterations=None, alpha=None,
                        seed=None, label="Region", batch_size=None):
    """
    Bootstrap test of the mean against `null_mean`.

    The sample is shifted so its mean equals `null_mean`; resamples of the
    observed size are drawn with replacement and their means form the null
    distribution. The two-sided p-value is the fraction of bootstrap means at
    least as far from `null_mean` as the observed mean. The percentile
    confidence interval is taken from the same draws on the unshifted sample.

    Returns:
        TestResult; `statistic` is the observed mean and `null_distribution`
        holds the bootstrap means under H0
    """
    null_mean = config.NULL_MEAN if null_mean is None else null_mean
    n_iterations = config.BOOTSTRAP_ITERATIONS if n_iterations is None else n_iterations
    alpha = config.ALPHA if alpha is None else alpha
    seed = config.RANDOM_SEED if seed is None else seed
    batch_size = batch_size or config.BOOTSTRAP_BATCH_SIZE
    _check_alpha(alpha)
    if n_iterations <= 0:
        raise ValueError(f"n_iterations must be positive, got {n_iterations}")

    sample = _as_sample(values)
    observed = float(sample.mean())
    shifted = sample - observed + null_mean

    rng = np.random.default_rng(seed)
    null_means = np.empty(n_iterations)
    for start in range(0, n_iterations, batch_size):
        stop = min(start + batch_size, n_iterations)
        draws = rng.choice(shifted, size=(stop - start, sample.size), replace=True)
        null_means[start:stop] = draws.mean(axis=1)

    deviations = np.abs(null_means - null_mean)
    observed_deviation = abs(observed - null_mean)
    extreme = (deviations >= observed_deviation) | np.isclose(deviations, observed_deviation)
    p_value = float(extreme.mean())

    boot_means = null_means + (observed - null_mean)
    ci_low, ci_high = np.percentile(boot_means, [100 * alpha / 2, 100 * (1 - alpha / 2)])

    return TestResult(
        test="bootstrap mean test",
        label=label,
        n=int(sample.size),
        mean=observed,
        statistic=observed,
        p_value=p_value,
        alpha=alpha,
        ci_low=float(ci_low),
        ci_high=float(ci_high),
        null_mean=float(null_mean),
        null_distribution=null_means,
    )


def run_inference(df, region=None, n_iterations=None, seed=None):
    """
    Full inference stage on the cleaned records.

    Returns:
        dict with 'net', 'national_skewness', 'regional_skewness', 'ttest',
        'bootstrap', 'region' and log info
    """
    log = []
    net = net_change_table(df)
    national_skew = distribution_skewness(net['net_change'])
    log.append(f"✓ Net change computed for {len(net):,} region-quarters "
               f"(mean={net['net_change'].mean():,.1f})")
    log.append(f"✓ National skewness: {national_skew:.3f} → suggests {recommend_test(national_skew)}")

    skew_table = regional_skewness(net)

    ttest = one_sample_ttest(net['net_change'], label="National")
    log.append(f"✓ t-test: t={ttest.statistic:.3f}, p={ttest.p_value:.4g} → {ttest.conclusion}")

    region = select_skewed_region(skew_table, region=region or config.BOOTSTRAP_REGION)
    region_skew = skew_table.loc[skew_table['region'] == region, 'skewness'].iloc[0]
    if recommend_test(region_skew) != "bootstrap":
        log.append(f"⚠️  {region} skewness {region_skew:.3f} below threshold {config.SKEW_THRESHOLD}")

    region_values = net.loc[net['region'] == region, 'net_change']
    bootstrap = bootstrap_mean_test(region_values, n_iterations=n_iterations, seed=seed, label=region)
    log.append(f"✓ Bootstrap ({region}, skew={region_skew:.3f}): mean={bootstrap.mean:,.1f}, "
               f"p={bootstrap.p_value:.4g} → {bootstrap.conclusion}")

    results = {
        'net': net,
        'national_skewness': national_skew,
        'regional_skewness': skew_table,
        'ttest': ttest,
        'bootstrap': bootstrap,
        'region': region,
    }
    return results, log
