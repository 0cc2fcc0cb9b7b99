"""
Two-Dimensional SCV Decomposition Service.

This module decomposes income inequality, measured by the squared coefficient of
variation SCV = var / (2 * mean^2), along two dimensions at once: income sources
and population groups defined by a categorical feature.

Source: Garcia-Penalosa, C., & Orgiazzi, E. (2013). Factor Components of
Inequality: A Cross-Country Study. Review of Income and Wealth, 59(4), 689-727.

Algorithm Overview:
- Stage 1, population statistics (once per source):
  * ovW = w / sum(w)
  * tMean, tVar, tSCV of total income under ovW
  * iMean, iVar, iSCV of source i under ovW
  * corrL = weighted correlation of source i with total income
  * alpha = corrL * (iMean / tMean) * sqrt(tSCV * iSCV) / iSCV
- Stage 2, group components (pure function of stage 1 + one group subset):
  * gW = group weights / their sum
  * grMean, grVar of source i inside the group under gW
  * popShare = group weight mass / total weight mass
  * W = alpha * popShare * (grMean / iMean)^2 * grVar / (2 * grMean^2)
  * B = alpha * 0.5 * popShare * ((grMean / iMean)^2 - 1)

For each source the components add up to alpha * iSCV, and when the sources
sum to total income the whole table adds up to tSCV.

Numeric degeneracy:
    A source with zero mean or zero variance (e.g. absent for every row) has an
    undefined alpha, and a group with zero source mean has an undefined W. These
    propagate as NaN/inf into the affected cells; nothing is clamped.

Stage 2 calls are independent across sources and groups; they run sequentially.

Dependencies:
    - numpy: float64 arithmetic with IEEE division semantics
    - pandas: record set in, result table out
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from scv2d.core.config import Settings, get_settings
from scv2d.models.enums import ColumnLayout
from scv2d.models.schemas import DecompositionResult, GroupComponent, SourceStatistics
from scv2d.services.moments import (
    normalize_weights,
    scv,
    weighted_correlation,
    weighted_mean,
    weighted_variance,
)
from scv2d.services.preparation import PreparedData, prepare_data

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TotalStatistics:
    """Weighted mean, variance and SCV of total income."""
    mean: np.float64
    variance: np.float64
    scv: np.float64


# =============================================================================
# STAGE 1 - Population statistics
# =============================================================================

def compute_total_statistics(
    total_values: np.ndarray,
    overall_weights: np.ndarray,
) -> TotalStatistics:
    """
    Weighted moments and SCV of total income.

    Args:
        total_values: Total income per row.
        overall_weights: Normalized population weights (ovW).
    """
    t_mean = weighted_mean(total_values, overall_weights)
    t_var = weighted_variance(total_values, overall_weights, mean=t_mean)
    return TotalStatistics(mean=t_mean, variance=t_var, scv=scv(t_mean, t_var))


def compute_source_statistics(
    source: str,
    source_values: np.ndarray,
    total_values: np.ndarray,
    overall_weights: np.ndarray,
    totals: TotalStatistics,
) -> SourceStatistics:
    """
    Population-level statistics and alpha of one income source.

    alpha is the share of total SCV attributable to the source before splitting
    into groups; it does not depend on the feature. A source with zero mean or
    zero variance yields NaN/inf and is reported with a warning.

    Args:
        source: Source column name.
        source_values: Source income per row.
        total_values: Total income per row.
        overall_weights: Normalized population weights (ovW).
        totals: Statistics of total income.

    Returns:
        SourceStatistics for the source.
    """
    i_mean = weighted_mean(source_values, overall_weights)
    i_var = weighted_variance(source_values, overall_weights, mean=i_mean)
    i_scv = scv(i_mean, i_var)
    corr = weighted_correlation(source_values, total_values, overall_weights)

    with np.errstate(divide='ignore', invalid='ignore'):
        alpha = corr * (i_mean / totals.mean) * np.sqrt(totals.scv * i_scv) / i_scv
        contribution = alpha * i_scv

    if not np.isfinite(alpha):
        logger.warning(
            f"Source '{source}' is degenerate (mean={float(i_mean)}, "
            f"scv={float(i_scv)}); its components are undefined"
        )

    return SourceStatistics(
        source=source,
        mean=float(i_mean),
        variance=float(i_var),
        scv=float(i_scv),
        correlation=float(corr),
        alpha=float(alpha),
        contribution=float(contribution),
    )


# =============================================================================
# STAGE 2 - Group components
# =============================================================================

def compute_group_components(
    statistics: SourceStatistics,
    group: str,
    group_values: np.ndarray,
    group_weights: np.ndarray,
    population_share: float,
) -> GroupComponent:
    """
    Within-group (W) and between-group (B) components of one (source, group) pair.

    Args:
        statistics: Stage-1 statistics of the source.
        group: Group label.
        group_values: Source income of the group's rows.
        group_weights: Raw (unnormalized) weights of the group's rows.
        population_share: Group weight mass / total weight mass.

    Returns:
        GroupComponent holding W, B and the group's source moments.

    Example:
        Two equally weighted groups with source means 10 and 30 around a
        population mean of 20 give ratios 0.25 and 2.25, hence
        B = alpha * 0.5 * 0.5 * (0.25 - 1) and alpha * 0.5 * 0.5 * (2.25 - 1).
    """
    g_weights = normalize_weights(group_weights)
    gr_mean = weighted_mean(group_values, g_weights)
    gr_var = weighted_variance(group_values, g_weights, mean=gr_mean)

    alpha = np.float64(statistics.alpha)
    i_mean = np.float64(statistics.mean)
    share = np.float64(population_share)

    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        ratio = (gr_mean / i_mean) ** 2
        within = alpha * share * ratio * gr_var / (np.float64(2.0) * gr_mean ** 2)
        between = alpha * np.float64(0.5) * share * (ratio - np.float64(1.0))

    return GroupComponent(
        source=statistics.source,
        group=group,
        population_share=float(share),
        mean=float(gr_mean),
        variance=float(gr_var),
        within=float(within),
        between=float(between),
    )


def _components_for_source(
    prepared: PreparedData,
    statistics: SourceStatistics,
    raw_weights: np.ndarray,
) -> List[GroupComponent]:
    values = prepared.values(statistics.source)
    total_weight = raw_weights.sum()
    components = []
    for group in prepared.groups:
        positions = prepared.group_positions[group]
        group_weights = raw_weights[positions]
        components.append(
            compute_group_components(
                statistics,
                group,
                values[positions],
                group_weights,
                group_weights.sum() / total_weight,
            )
        )
    return components


# =============================================================================
# ENTRY POINTS
# =============================================================================

def decompose_prepared(prepared: PreparedData) -> DecompositionResult:
    """
    Run both stages on already prepared data.

    Args:
        prepared: Output of prepare_data().

    Returns:
        DecompositionResult with every intermediate statistic.
    """
    roles = prepared.roles
    raw_weights = prepared.weights()
    overall_weights = normalize_weights(raw_weights)
    total_values = prepared.values(roles.total)

    totals = compute_total_statistics(total_values, overall_weights)

    source_statistics = [
        compute_source_statistics(
            source,
            prepared.values(source),
            total_values,
            overall_weights,
            totals,
        )
        for source in roles.sources
    ]

    components: List[GroupComponent] = []
    for statistics in source_statistics:
        components.extend(_components_for_source(prepared, statistics, raw_weights))

    logger.info(
        f"Decomposed SCV of '{roles.total}' ({float(totals.scv):.6g}) over "
        f"{len(roles.sources)} source(s) and {len(prepared.groups)} group(s) "
        f"from {prepared.observations} rows"
    )

    return DecompositionResult(
        total=roles.total,
        feature=roles.feature,
        weights=roles.weights,
        sources=list(roles.sources),
        groups=list(prepared.groups),
        total_mean=float(totals.mean),
        total_variance=float(totals.variance),
        total_scv=float(totals.scv),
        observations=prepared.observations,
        dropped_rows=prepared.dropped_rows,
        source_statistics=source_statistics,
        components=components,
    )


def decompose_detailed(
    data: pd.DataFrame,
    total: str,
    feature: Optional[str] = None,
    sources: Optional[Union[str, Sequence[str]]] = None,
    weights: Optional[str] = None,
    *,
    settings: Optional[Settings] = None,
) -> DecompositionResult:
    """
    Decompose total-income SCV by source and group, keeping intermediate results.

    Arguments as for decompose().

    Returns:
        DecompositionResult; call `.to_frame()` for the result table.
    """
    prepared = prepare_data(data, total, feature, sources, weights, settings=settings)
    return decompose_prepared(prepared)


def decompose(
    data: pd.DataFrame,
    total: str,
    feature: Optional[str] = None,
    sources: Optional[Union[str, Sequence[str]]] = None,
    weights: Optional[str] = None,
    *,
    settings: Optional[Settings] = None,
    layout: Optional[ColumnLayout] = None,
) -> pd.DataFrame:
    """
    Two-dimensional decomposition of the squared coefficient of variation.

    Every value of the returned table is the contribution of inequality in
    income source i among population members with feature value j to total
    income inequality, split into a within-group part (j.W) and a between-group
    part (j.B).

    Args:
        data: Record set with named columns.
        total: Column holding total income.
        feature: Categorical column to decompose by. If omitted, every row
            belongs to the single group 'all'.
        sources: Income source columns, expected to sum to `total` per row (not
            checked). May include `total` itself. Defaults to [total].
        weights: Population weight column. Defaults to 1 for every row.
        settings: Optional settings override.
        layout: Column arrangement; defaults to settings.column_layout.

    Returns:
        DataFrame with a 'source' column and '{j}.W' / '{j}.B' columns, one row
        per source.

    Raises:
        InvalidWeightError: A retained weight is zero or negative.
        DecompositionError: Other input problems (missing columns, no rows).

    Example:
        >>> df = pd.DataFrame({"hitotal": [100.0, 200.0], "w": [1.0, 1.0]})
        >>> decompose(df, "hitotal", weights="w").columns.tolist()
        ['source', 'all.W', 'all.B']
    """
    settings = settings or get_settings()
    result = decompose_detailed(data, total, feature, sources, weights, settings=settings)
    return result.to_frame(layout or settings.column_layout)


def summarize_contributions(result: DecompositionResult) -> pd.DataFrame:
    """
    Per-source totals of the decomposition.

    Columns:
        source, within (sum of j.W), between (sum of j.B),
        contribution (alpha * iSCV), share (contribution / total SCV)

    When the sources sum to total income the `share` column sums to 1.
    """
    rows = []
    for statistics in result.source_statistics:
        own = [c for c in result.components if c.source == statistics.source]
        with np.errstate(divide='ignore', invalid='ignore'):
            share = np.float64(statistics.contribution) / np.float64(result.total_scv)
        rows.append({
            "source": statistics.source,
            "within": float(np.sum([c.within for c in own])),
            "between": float(np.sum([c.between for c in own])),
            "contribution": statistics.contribution,
            "share": float(share),
        })
    return pd.DataFrame(rows, columns=["source", "within", "between", "contribution", "share"])
