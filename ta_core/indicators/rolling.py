"""
Rolling window statistics engine.

Every statistic at index i covers the trailing window
[max(0, i - length + 1), i], so all of them are causal and defined from
the first bar on (a single-element window at i = 0).
"""
import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np
import pandas as pd

from ..shared.numeric import ArrayLike, to_array


@dataclass
class RollingStats:
    """Container for the four windowed statistics of one series."""
    maximum: pd.Series
    minimum: pd.Series
    mean: pd.Series
    std: pd.Series


def _check_length(length: int) -> None:
    if length < 1:
        raise ValueError(f"length must be >= 1, got {length}")


def _as_series(values: ArrayLike) -> pd.Series:
    if isinstance(values, pd.Series):
        return values.astype(float)
    return pd.Series(to_array(values))


def _like(template: ArrayLike, result: pd.Series):
    if isinstance(template, pd.Series):
        return result
    return result.to_numpy(dtype=float)


def _window(values: ArrayLike, length: int):
    _check_length(length)
    return _as_series(values).rolling(window=length, min_periods=1)


def rolling_max(values: ArrayLike, length: int):
    """Highest value over the trailing window."""
    return _like(values, _window(values, length).max())


def rolling_min(values: ArrayLike, length: int):
    """Lowest value over the trailing window."""
    return _like(values, _window(values, length).min())


def rolling_mean(values: ArrayLike, length: int):
    """Arithmetic mean over the available part of the trailing window."""
    return _like(values, _window(values, length).mean())


def rolling_sum(values: ArrayLike, length: int):
    return _like(values, _window(values, length).sum())


def rolling_variance(values: ArrayLike, length: int):
    """
    Population variance from the windowed mean and mean of squares.

    Floating-point cancellation can push mean(x^2) - mean(x)^2 slightly
    below zero; such values are clamped to 0.
    """
    _check_length(length)
    series = _as_series(values)
    mean = series.rolling(window=length, min_periods=1).mean()
    mean_sq = (series * series).rolling(window=length, min_periods=1).mean()
    variance = (mean_sq - mean * mean).clip(lower=0.0)
    return _like(values, variance)


def rolling_std(values: ArrayLike, length: int):
    """Population standard deviation over the trailing window."""
    variance = rolling_variance(values, length)
    return np.sqrt(variance)


def rolling_stats(values: ArrayLike, length: int) -> RollingStats:
    """Compute max, min, mean and std in one call (always returns Series)."""
    series = _as_series(values)
    return RollingStats(
        maximum=rolling_max(series, length),
        minimum=rolling_min(series, length),
        mean=rolling_mean(series, length),
        std=rolling_std(series, length),
    )


def highest_lowest(high: ArrayLike, low: ArrayLike, length: int) -> Tuple:
    """
    Channel over a high/low pair.

    Returns:
        Tuple of (highest high, lowest low) over the trailing window
    """
    return rolling_max(high, length), rolling_min(low, length)


def percentile_nearest_rank(window: np.ndarray, percentile: float) -> float:
    """Nearest-rank percentile of one window (no interpolation)."""
    ordered = np.sort(window[~np.isnan(window)])
    n = len(ordered)
    if n == 0:
        return 0.0
    rank = math.ceil(percentile / 100 * n)
    return float(ordered[max(rank - 1, 0)])


def rolling_percentile(values: ArrayLike, length: int, percentile: float):
    """Nearest-rank percentile over the trailing window."""
    result = _window(values, length).apply(
        lambda window: percentile_nearest_rank(window, percentile), raw=True
    )
    return _like(values, result)


def rolling_median(values: ArrayLike, length: int):
    """Lower median over the trailing window."""
    return rolling_percentile(values, length, 50)
