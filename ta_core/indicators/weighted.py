"""
Fixed-window moving averages.

Each output is a weighted sum over the trailing `length` inputs divided by
the sum of the weights. Offsets before the first bar read as 0 and a zero
weight sum gives 0. SIMPLE is the exception: it averages only the bars
actually available, so its first outputs are not biased toward zero.
"""
import math
from typing import Sequence

import numpy as np

from ..shared.numeric import (
    SeriesAccumulator, combine, prior_or_default, safe_divide, clamp_length, safe_exp, safe_pow,
)
from .rolling import rolling_mean, rolling_percentile


def weighted_window(values: np.ndarray, weights: Sequence[float]) -> np.ndarray:
    """
    Weighted sum over the trailing window, normalised by the weight sum.

    Args:
        values: Input series
        weights: weights[j] applies to the value j bars back (0 = current)

    Returns:
        Weighted average per bar (0 where the weight sum is 0)
    """
    weight_sum = float(sum(weights))
    out = SeriesAccumulator(len(values))
    for i in range(len(values)):
        total = 0.0
        for j, weight in enumerate(weights):
            total += prior_or_default(values, i, j) * weight
        out.append(safe_divide(total, weight_sum))
    return out.to_array()


def sma(values: np.ndarray, length: int) -> np.ndarray:
    return rolling_mean(values, length)


def wma(values: np.ndarray, length: int) -> np.ndarray:
    """Linearly weighted: the newest bar weighs `length`, the oldest 1."""
    return weighted_window(values, [length - j for j in range(length)])


def triangular(values: np.ndarray, length: int) -> np.ndarray:
    return sma(sma(values, length), length)


def symmetric_weighted(values: np.ndarray, length: int) -> np.ndarray:
    """Weights ramp up to the middle of the window and back down."""
    floor_half = length // 2
    round_half = int(round(length / 2))
    weights = [0.0] * length
    rising_end = floor_half - 1 if floor_half == round_half else floor_half
    for j in range(0, rising_end + 1):
        weights[j] += (length - (length - 1 - j)) * length
    for j in range(round_half, length):
        weights[j] += (length - j) * length
    return weighted_window(values, weights)


def hull(values: np.ndarray, length: int) -> np.ndarray:
    """WMA of (2 * WMA(length / 2) - WMA(length)) over sqrt(length) bars."""
    half_length = clamp_length(math.ceil(length / 2))
    sqrt_length = clamp_length(math.ceil(math.sqrt(length)))
    raw = combine([wma(values, half_length), wma(values, length)], [2, -1])
    return wma(raw, sqrt_length)


def least_squares(values: np.ndarray, length: int) -> np.ndarray:
    return combine([wma(values, length), sma(values, length)], [3, -2])


def linear_regression(values: np.ndarray, length: int) -> np.ndarray:
    """
    Endpoint of a least-squares line fitted to the available window.

    A single-bar window returns the input itself.
    """
    out = SeriesAccumulator(len(values))
    for i in range(len(values)):
        n = min(i + 1, length)
        if n < 2:
            out.append(values[i])
            continue
        sum_x = sum_y = sum_xx = sum_xy = 0.0
        for x in range(n):
            y = float(values[i - n + 1 + x])
            sum_x += x
            sum_y += y
            sum_xx += x * x
            sum_xy += x * y
        slope = safe_divide(n * sum_xy - sum_x * sum_y, n * sum_xx - sum_x * sum_x)
        intercept = (sum_y - slope * sum_x) / n
        out.append(intercept + slope * (n - 1))
    return out.to_array()


def arnaud_legoux(values: np.ndarray, length: int, offset: float = 0.85, sigma: float = 6.0) -> np.ndarray:
    """Gaussian-weighted window centred at `offset` of the window (0 = oldest)."""
    m = offset * (length - 1)
    s = safe_divide(length, sigma)
    weights = []
    for j in range(length):
        # j bars back sits at position (length - 1 - j) counted from the oldest bar
        position = length - 1 - j
        weights.append(safe_exp(-safe_divide((position - m) ** 2, 2 * s * s)))
    return weighted_window(values, weights)


def cubed_weighted(values: np.ndarray, length: int) -> np.ndarray:
    return weighted_window(values, [(length - j) ** 3 for j in range(length)])


def parabolic_weighted(values: np.ndarray, length: int) -> np.ndarray:
    return weighted_window(values, [(length - j) ** 2 for j in range(length)])


def fibonacci_weighted(values: np.ndarray, length: int) -> np.ndarray:
    """Weights follow Binet's formula, F(length - j)."""
    phi = (1 + math.sqrt(5)) / 2
    weights = []
    for j in range(length):
        power = safe_pow(phi, length - j)
        weights.append((power - safe_divide((-1) ** j, power)) / math.sqrt(5))
    return weighted_window(values, weights)


def henderson_weighted(values: np.ndarray, length: int) -> np.ndarray:
    """Henderson's graduation weights for a window of `length` terms."""
    m = clamp_length((length - 1) // 2)
    p2 = (m + 2) ** 2
    denominator = 8 * (m + 2) * (p2 - 1) * (4 * p2 - 1) * (4 * p2 - 9) * (4 * p2 - 25)
    weights = []
    for j in range(length):
        n2 = (j - m) ** 2
        numerator = 315 * ((m + 1) ** 2 - n2) * (p2 - n2) * ((m + 3) ** 2 - n2) * (3 * p2 - 11 * n2 - 16)
        weights.append(safe_divide(numerator, denominator))
    return weighted_window(values, weights)


def volume_weighted(values: np.ndarray, length: int, volume: np.ndarray) -> np.ndarray:
    """Average of price * volume over average volume."""
    numerator = sma(values * volume, length)
    denominator = sma(volume, length)
    return np.array([safe_divide(n, d) for n, d in zip(numerator, denominator)])


def volume_weighted_average_price(values: np.ndarray, length: int, volume: np.ndarray) -> np.ndarray:
    """Cumulative VWAP since the first bar; `length` is unused."""
    out = SeriesAccumulator(len(values))
    cumulative_pv = cumulative_volume = 0.0
    for i in range(len(values)):
        cumulative_pv += values[i] * volume[i]
        cumulative_volume += volume[i]
        out.append(safe_divide(cumulative_pv, cumulative_volume))
    return out.to_array()


def trimean(values: np.ndarray, length: int) -> np.ndarray:
    """(Q1 + 2 * median + Q3) / 4 with nearest-rank quartiles."""
    q1 = rolling_percentile(values, length, 25)
    median = rolling_percentile(values, length, 50)
    q3 = rolling_percentile(values, length, 75)
    return combine([q1, median, q3], [0.25, 0.5, 0.25])
