"""
Weighted Moment Utilities.

Primitive statistics used repeatedly by the decomposition:

    weighted mean:         sum(w * x) / sum(w)
    weighted variance:     (1 / sum(w)) * sum(w * (x - mean)^2)   (population form)
    weighted correlation:  weighted covariance / (sd_x * sd_y)
    scv:                   variance / (2 * mean^2)

None of them require the weights to be normalized. Every function returns a
numpy float64, so a zero denominator produces inf or NaN instead of raising
ZeroDivisionError; the floating-point warnings are silenced with np.errstate.

Dependencies:
    - numpy: vectorized sums over aligned value/weight arrays
"""

from typing import Optional, Sequence, Union

import numpy as np

ArrayLike = Union[Sequence[float], np.ndarray]


def _aligned(values: ArrayLike, weights: ArrayLike):
    x = np.asarray(values, dtype=np.float64)
    w = np.asarray(weights, dtype=np.float64)
    if x.shape != w.shape:
        raise ValueError(
            f"Values and weights must be aligned: got {x.shape} and {w.shape}"
        )
    return x, w


def normalize_weights(weights: ArrayLike) -> np.ndarray:
    """
    Scale weights so they sum to 1.

    Args:
        weights: Non-negative weights, one per row.

    Returns:
        Array of the same length summing to 1 (NaN everywhere if the weights
        sum to zero).
    """
    w = np.asarray(weights, dtype=np.float64)
    with np.errstate(divide='ignore', invalid='ignore'):
        return w / w.sum()


def weighted_mean(values: ArrayLike, weights: ArrayLike) -> np.float64:
    """
    Weighted arithmetic mean.

    Example:
        >>> float(weighted_mean([100.0, 200.0], [1.0, 1.0]))
        150.0
    """
    x, w = _aligned(values, weights)
    with np.errstate(divide='ignore', invalid='ignore'):
        return np.float64(np.sum(w * x)) / np.float64(np.sum(w))


def weighted_variance(
    values: ArrayLike,
    weights: ArrayLike,
    mean: Optional[float] = None,
) -> np.float64:
    """
    Weighted population variance.

    Args:
        values: Observations.
        weights: Weights aligned with `values`.
        mean: Precomputed weighted mean; computed when omitted.

    Example:
        >>> float(weighted_variance([100.0, 200.0], [0.5, 0.5]))
        2500.0
    """
    x, w = _aligned(values, weights)
    if mean is None:
        mean = weighted_mean(x, w)
    with np.errstate(divide='ignore', invalid='ignore'):
        return (np.float64(1.0) / np.float64(np.sum(w))) * np.float64(
            np.sum(w * (x - mean) ** 2)
        )


def weighted_correlation(
    x_values: ArrayLike,
    y_values: ArrayLike,
    weights: ArrayLike,
) -> np.float64:
    """
    Weighted Pearson correlation between two aligned vectors.

    The normalization constant of the covariance cancels out, so the result
    matches cov.wt(..., cor=TRUE) regardless of the covariance estimator used.
    A constant vector gives NaN.
    """
    x, w = _aligned(x_values, weights)
    y, _ = _aligned(y_values, weights)
    x_mean = weighted_mean(x, w)
    y_mean = weighted_mean(y, w)
    with np.errstate(divide='ignore', invalid='ignore'):
        covariance = np.float64(np.sum(w * (x - x_mean) * (y - y_mean)))
        x_spread = np.float64(np.sum(w * (x - x_mean) ** 2))
        y_spread = np.float64(np.sum(w * (y - y_mean) ** 2))
        return covariance / np.sqrt(x_spread * y_spread)


def scv(mean: float, variance: float) -> np.float64:
    """
    Squared coefficient of variation in the half form: var / (2 * mean^2).

    Example:
        >>> round(float(scv(150.0, 2500.0)), 6)
        0.055556
    """
    with np.errstate(divide='ignore', invalid='ignore'):
        return np.float64(variance) / (np.float64(2.0) * np.float64(mean) ** 2)
