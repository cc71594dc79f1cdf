"""
Plots module: Report figures (bar, lollipop, diverging bar, distributions).

Every function returns a matplotlib Figure; saving is left to io.save_figure.
"""

import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns

from . import config

sns.set_theme(style="whitegrid", context="notebook")


def plot_stressor_share(share):
    """Bar chart of the share of colonies affected by each stressor."""
    fig, ax = plt.subplots(figsize=config.FIGSIZE)
    sns.barplot(data=share, x='stressor', y='share_pct', color=config.COLOR_LOSS, ax=ax)

    for patch, value in zip(ax.patches, share['share_pct']):
        ax.annotate(f"{value:.1f}%", (patch.get_x() + patch.get_width() / 2, patch.get_height()),
                    ha='center', va='bottom', fontsize=9)

    ax.set_xlabel('Stressor', fontsize=11)
    ax.set_ylabel('Colonies affected (% of all colonies)', fontsize=11)
    ax.set_title('Share of Colonies Affected by Stressor', fontsize=12, fontweight='bold')
    fig.tight_layout()
    return fig


def plot_cumulative_lollipop(cumulative, x_col='year', title=None):
    """
    Lollipop chart of cumulative colonies added vs lost.

    Args:
        cumulative: Output of cumulative_by_year() or cumulative_by_quarter()
        x_col: 'year' or 'period'
    """
    x = np.arange(len(cumulative))
    offset = 0.15

    fig, ax = plt.subplots(figsize=config.FIGSIZE)
    for shift, col, color, label in [
        (-offset, 'cumulative_added', config.COLOR_GAIN, 'Added'),
        (offset, 'cumulative_lost', config.COLOR_LOSS, 'Lost'),
    ]:
        ax.vlines(x + shift, 0, cumulative[col], color=color, linewidth=2, alpha=0.7)
        ax.scatter(x + shift, cumulative[col], color=color, s=60, zorder=3, label=label)

    rotation, ha = (45, 'right') if x_col == 'period' else (0, 'center')
    ax.set_xticks(x)
    ax.set_xticklabels(cumulative[x_col].astype(str), rotation=rotation, ha=ha)
    ax.set_xlabel(x_col.capitalize(), fontsize=11)
    ax.set_ylabel('Cumulative colonies', fontsize=11)
    ax.set_title(title or f'Cumulative Colonies Added vs Lost by {x_col.capitalize()}',
                 fontsize=12, fontweight='bold')
    ax.legend()
    fig.tight_layout()
    return fig


def plot_region_percent_change(totals):
    """Diverging horizontal bar chart of percent change for large regions."""
    ordered = totals.sort_values('percent_change')
    colors = np.where(ordered['percent_change'] >= 0, config.COLOR_GAIN, config.COLOR_LOSS)

    fig, ax = plt.subplots(figsize=(config.FIGSIZE[0], max(4, 0.4 * len(ordered))))
    ax.barh(ordered['region'], ordered['percent_change'], color=colors)
    ax.axvline(0, color='black', linewidth=1)

    ax.set_xlabel('Net change (% of total colonies)', fontsize=11)
    ax.set_ylabel('')
    ax.set_title(f'Net Colony Change for Regions > {config.REGION_COLONY_THRESHOLD:,} Colonies',
                 fontsize=12, fontweight='bold')
    fig.tight_layout()
    return fig


def plot_net_change_distribution(net, ttest=None):
    """Histogram of quarterly net change with the mean (and CI) marked."""
    fig, ax = plt.subplots(figsize=config.FIGSIZE)
    sns.histplot(net['net_change'], bins=50, kde=True, color=config.COLOR_GAIN, ax=ax)
    ax.axvline(0, color='black', linestyle='--', linewidth=1, label='H0: mean = 0')

    if ttest is not None:
        ax.axvline(ttest.mean, color=config.COLOR_LOSS, linewidth=2, label=f'Mean = {ttest.mean:,.0f}')
        ax.axvspan(ttest.ci_low, ttest.ci_high, color=config.COLOR_LOSS, alpha=0.15,
                   label=f'{100 * (1 - ttest.alpha):.0f}% CI')

    ax.set_xlabel('Net change (colonies added − lost)', fontsize=11)
    ax.set_ylabel('Region-quarters', fontsize=11)
    ax.set_title('Distribution of Quarterly Net Colony Change', fontsize=12, fontweight='bold')
    ax.legend()
    fig.tight_layout()
    return fig


def plot_bootstrap_null(result):
    """Bootstrap null distribution of the mean with the observed mean marked."""
    if result.null_distribution is None:
        raise ValueError("TestResult has no bootstrap null distribution")

    fig, ax = plt.subplots(figsize=config.FIGSIZE)
    ax.hist(result.null_distribution, bins=50, edgecolor='black', alpha=0.7, color='#8d99ae')
    ax.axvline(result.mean, color=config.COLOR_LOSS, linewidth=2,
               label=f'Observed mean = {result.mean:,.0f}')
    mirrored = 2 * result.null_mean - result.mean
    ax.axvline(mirrored, color=config.COLOR_LOSS, linewidth=1, linestyle='--')

    ax.set_xlabel('Bootstrap mean net change under H0', fontsize=11)
    ax.set_ylabel('Frequency', fontsize=11)
    ax.set_title(f'Bootstrap Null Distribution: {result.label} (p = {result.p_value:.4f})',
                 fontsize=12, fontweight='bold')
    ax.legend()
    fig.tight_layout()
    return fig
