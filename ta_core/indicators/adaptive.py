"""
Adaptive moving averages.

The smoothing constant is recomputed every bar from a secondary measure
(efficiency ratio, channel position, momentum, fractal dimension, cycle
phase) and clamped into its valid range before it is applied. Several of
these start from the raw input rather than 0 so the first outputs track
price instead of decaying up from zero.
"""
import math
from typing import Optional, Tuple

import numpy as np

from ..shared.numeric import (
    SeriesAccumulator, prior_or_default, min_or_max, safe_divide, safe_pow,
    safe_exp, safe_log, clamp_length,
)
from ..shared.defaults import (
    BRYANT_MAX_LENGTH, FRAMA_MIN_ALPHA, MAMA_MIN_PERIOD, MAMA_MAX_PERIOD,
)
from .rolling import highest_lowest, rolling_mean, rolling_std, rolling_sum


def efficiency_ratio(values: np.ndarray, length: int) -> np.ndarray:
    """
    Kaufman efficiency ratio: net move over the sum of absolute bar moves.

    Always within [0, 1]; 0 when the window had no movement at all.
    """
    n = len(values)
    volatility = np.array([abs(values[i] - prior_or_default(values, i, 1)) for i in range(n)])
    volatility_sum = rolling_sum(volatility, length)
    out = SeriesAccumulator(n)
    for i in range(n):
        momentum = abs(values[i] - prior_or_default(values, i, length))
        out.append(safe_divide(momentum, volatility_sum[i]))
    return out.to_array()


def kaufman_adaptive(values: np.ndarray, length: int, fast_length: float = 2,
                     slow_length: float = 30) -> np.ndarray:
    fast_alpha = 2 / (fast_length + 1)
    slow_alpha = 2 / (slow_length + 1)
    er = efficiency_ratio(values, length)
    out = SeriesAccumulator(len(values))
    for i in range(len(values)):
        sc = (er[i] * (fast_alpha - slow_alpha) + slow_alpha) ** 2
        out.append(sc * values[i] + (1 - sc) * out.prior(1))
    return out.to_array()


def powered_kaufman_adaptive(values: np.ndarray, length: int, factor: float = 3) -> np.ndarray:
    er = efficiency_ratio(values, length)
    out = SeriesAccumulator(len(values))
    for i in range(len(values)):
        current = float(values[i])
        per = safe_pow(er[i], factor)
        out.append(per * current + (1 - per) * out.prior(1, default=current))
    return out.to_array()


def bryant_adaptive(values: np.ndarray, length: int, max_length: float = BRYANT_MAX_LENGTH,
                    trend: float = -1) -> np.ndarray:
    """
    Bryant adaptive moving average.

    The effective length is derived from the efficiency ratio and capped at
    max_length; only the upper cap applies, as published.
    """
    er = efficiency_ratio(values, length)
    out = SeriesAccumulator(len(values))
    for i in range(len(values)):
        ver = safe_pow(er[i] - ((2 * er[i]) - 1) / 2 * (1 - trend) + 0.5, 2)
        v_length = safe_divide(length - ver + 1, ver)
        v_length = min(v_length, max_length)
        v_alpha = safe_divide(2, v_length + 1)
        out.append(v_alpha * values[i] + (1 - v_alpha) * out.prior(1))
    return out.to_array()


def chande_momentum(values: np.ndarray, length: int) -> np.ndarray:
    """Chande momentum oscillator, bounded to [-100, 100]."""
    n = len(values)
    diffs = np.array([values[i] - prior_or_default(values, i, 1) for i in range(n)])
    pos_sum = rolling_sum(np.where(diffs > 0, diffs, 0.0), length)
    neg_sum = rolling_sum(np.where(diffs < 0, -diffs, 0.0), length)
    out = SeriesAccumulator(n)
    for i in range(n):
        total = pos_sum[i] + neg_sum[i]
        cmo = safe_divide((pos_sum[i] - neg_sum[i]) * 100, total)
        out.append(min_or_max(cmo, 100, -100))
    return out.to_array()


def variable_index_dynamic(values: np.ndarray, length: int) -> np.ndarray:
    """VIDYA: EMA whose weight is scaled by |CMO| / 100."""
    alpha = 2 / (length + 1)
    cmo = chande_momentum(values, length)
    out = SeriesAccumulator(len(values))
    for i in range(len(values)):
        weight = alpha * abs(cmo[i] / 100)
        out.append(values[i] * weight + out.prior(1) * (1 - weight))
    return out.to_array()


def _channel_position(current: float, highest: float, lowest: float) -> float:
    """How far price sits from the channel middle, 0 (middle) to 1 (edge)."""
    return min_or_max(safe_divide(abs(2 * current - lowest - highest), highest - lowest), 1, 0)


def adaptive(values: np.ndarray, length: int, fast_length: float = 2, slow_length: float = 14,
             high: Optional[np.ndarray] = None, low: Optional[np.ndarray] = None) -> np.ndarray:
    high = values if high is None else high
    low = values if low is None else low
    highest, lowest = highest_lowest(high, low, length + 1)
    fast_alpha = 2 / (fast_length + 1)
    slow_alpha = 2 / (slow_length + 1)
    out = SeriesAccumulator(len(values))
    for i in range(len(values)):
        multiplier = _channel_position(values[i], highest[i], lowest[i])
        ssc = multiplier * (fast_alpha - slow_alpha) + slow_alpha
        prev = out.prior(1)
        out.append(prev + ssc * ssc * (values[i] - prev))
    return out.to_array()


def adaptive_exponential(values: np.ndarray, length: int, high: Optional[np.ndarray] = None,
                         low: Optional[np.ndarray] = None) -> np.ndarray:
    """EMA whose rate grows with the channel position; plain SMA for the first bars."""
    high = values if high is None else high
    low = values if low is None else low
    highest, lowest = highest_lowest(high, low, length)
    base_rate = 2 / (length + 1)
    average = rolling_mean(values, length)
    out = SeriesAccumulator(len(values))
    for i in range(len(values)):
        current = float(values[i])
        rate = base_rate * (1 + _channel_position(current, highest[i], lowest[i]))
        prev = out.prior(1, default=current)
        out.append(average[i] if i <= length else prev + rate * (current - prev))
    return out.to_array()


def jurik(values: np.ndarray, length: int, phase: float = 50, power: float = 2) -> np.ndarray:
    """
    Jurik-style adaptive smoother.

    phase in [-100, 100] shifts between lag and overshoot; values outside
    that range saturate at ratios 0.5 and 2.5.
    """
    if phase < -100:
        phase_ratio = 0.5
    elif phase > 100:
        phase_ratio = 2.5
    else:
        phase_ratio = phase / 100 + 1.5
    ratio = 0.45 * (length - 1)
    beta = safe_divide(ratio, ratio + 2)
    alpha = safe_pow(beta, power)

    n = len(values)
    e0 = SeriesAccumulator(n)
    e1 = SeriesAccumulator(n)
    e2 = SeriesAccumulator(n)
    out = SeriesAccumulator(n)
    for i in range(n):
        current = float(values[i])
        prev_jma = out.prior(1)
        e0_value = e0.append((1 - alpha) * current + alpha * e0.prior(1))
        e1_value = e1.append((current - e0_value) * (1 - beta) + beta * e1.prior(1))
        e2_value = e2.append(
            (e0_value + phase_ratio * e1_value - prev_jma) * (1 - alpha) ** 2 + alpha ** 2 * e2.prior(1)
        )
        out.append(e2_value + prev_jma)
    return out.to_array()


def variable_length(values: np.ndarray, length: int, min_length: float = 5) -> np.ndarray:
    """
    EMA whose length walks between min_length and `length` bar by bar.

    Price inside the inner band (SMA +/- 0.25 std) lengthens the average by
    one bar, price outside the outer band (SMA +/- 1.75 std) shortens it.
    """
    max_length = length
    average = rolling_mean(values, max_length)
    std = rolling_std(values, max_length)
    lengths = SeriesAccumulator(len(values))
    out = SeriesAccumulator(len(values))
    for i in range(len(values)):
        current = float(values[i])
        outer_low = average[i] - 1.75 * std[i]
        inner_low = average[i] - 0.25 * std[i]
        inner_high = average[i] + 0.25 * std[i]
        outer_high = average[i] + 1.75 * std[i]

        prev_length = lengths.prior(1, default=max_length)
        if inner_low <= current <= inner_high:
            new_length = prev_length + 1
        elif current < outer_low or current > outer_high:
            new_length = prev_length - 1
        else:
            new_length = prev_length
        new_length = lengths.append(min_or_max(new_length, max_length, min_length))

        sc = 2 / (new_length + 1)
        out.append(current * sc + (1 - sc) * out.prior(1, default=current))
    return out.to_array()


def fractal_adaptive(values: np.ndarray, length: int, high: Optional[np.ndarray] = None,
                     low: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Ehlers FRAMA: alpha = exp(-4.6 * (D - 1)) from the fractal dimension D.

    D compares the range of the whole window with the ranges of its newer
    and older halves. Alpha is clamped to [0.01, 1].
    """
    high = values if high is None else high
    low = values if low is None else low
    half = clamp_length(math.ceil(length / 2))
    highest_full, lowest_full = highest_lowest(high, low, length)
    highest_half, lowest_half = highest_lowest(high, low, half)
    out = SeriesAccumulator(len(values))
    for i in range(len(values)):
        current = float(values[i])
        n3 = (highest_full[i] - lowest_full[i]) / length
        n1 = (highest_half[i] - lowest_half[i]) / half
        older_high = prior_or_default(highest_half, i, half, default=highest_half[i])
        older_low = prior_or_default(lowest_half, i, half, default=lowest_half[i])
        n2 = (older_high - older_low) / half
        if n1 > 0 and n2 > 0 and n3 > 0:
            dimension = (safe_log(n1 + n2) - safe_log(n3)) / math.log(2)
        else:
            dimension = 0.0
        alpha = min_or_max(safe_exp(-4.6 * (dimension - 1)), 1, FRAMA_MIN_ALPHA)
        out.append(alpha * current + (1 - alpha) * out.prior(1, default=current))
    return out.to_array()


def mesa_adaptive(values: np.ndarray, fast_alpha: float = 0.5,
                  slow_alpha: float = 0.05) -> Tuple[np.ndarray, np.ndarray]:
    """
    Ehlers MESA adaptive moving average.

    The dominant cycle's phase rate sets alpha each bar, between slow_alpha
    and fast_alpha. The period estimate is limited to 0.67x-1.5x of the
    previous estimate and to [6, 50] bars.

    Returns:
        Tuple of (MAMA, FAMA)
    """
    n = len(values)
    smooth = SeriesAccumulator(n)
    detrender = SeriesAccumulator(n)
    q1_series = SeriesAccumulator(n)
    i1_series = SeriesAccumulator(n)
    i2_series = SeriesAccumulator(n)
    q2_series = SeriesAccumulator(n)
    re_series = SeriesAccumulator(n)
    im_series = SeriesAccumulator(n)
    period_series = SeriesAccumulator(n)
    phase_series = SeriesAccumulator(n)
    mama = SeriesAccumulator(n)
    fama = SeriesAccumulator(n)

    for i in range(n):
        prev_period = period_series.prior(1)
        period_gain = 0.075 * prev_period + 0.54

        smooth.append((
            4 * values[i] + 3 * prior_or_default(values, i, 1)
            + 2 * prior_or_default(values, i, 2) + prior_or_default(values, i, 3)
        ) / 10)
        detrender.append(_hilbert_current(smooth, period_gain))
        q1 = q1_series.append(_hilbert_current(detrender, period_gain))
        i1 = i1_series.append(detrender.prior(4))
        j1 = _hilbert_current(i1_series, period_gain)
        jq = _hilbert_current(q1_series, period_gain)

        prev_i2 = i2_series.prior(1)
        prev_q2 = q2_series.prior(1)
        i2 = i2_series.append(0.2 * (i1 - jq) + 0.8 * prev_i2)
        q2 = q2_series.append(0.2 * (q1 + j1) + 0.8 * prev_q2)
        re = re_series.append(0.2 * (i2 * prev_i2 + q2 * prev_q2) + 0.8 * re_series.prior(1))
        im = im_series.append(0.2 * (i2 * prev_q2 - q2 * prev_i2) + 0.8 * im_series.prior(1))

        angle = math.atan(im / re) if re != 0 else 0.0
        period = 2 * math.pi / angle if angle != 0 else 0.0
        period = min_or_max(period, 1.5 * prev_period, 0.67 * prev_period)
        period = min_or_max(period, MAMA_MAX_PERIOD, MAMA_MIN_PERIOD)
        period_series.append(0.2 * period + 0.8 * prev_period)

        prev_phase = phase_series.prior(1)
        phase = phase_series.append(180 / math.pi * math.atan(q1 / i1) if i1 != 0 else 0.0)
        delta_phase = max(prev_phase - phase, 1.0)
        alpha = max(fast_alpha / delta_phase, slow_alpha)

        mama_value = mama.append(alpha * values[i] + (1 - alpha) * mama.prior(1))
        fama.append(0.5 * alpha * mama_value + (1 - 0.5 * alpha) * fama.prior(1))

    return mama.to_array(), fama.to_array()


def _hilbert_current(series: SeriesAccumulator, period_gain: float) -> float:
    """Hilbert transform ending at the value most recently appended to series."""
    return (
        0.0962 * series.prior(1) + 0.5769 * series.prior(3)
        - 0.5769 * series.prior(5) - 0.0962 * series.prior(7)
    ) * period_gain


def mesa_adaptive_line(values: np.ndarray, length: int, fast_alpha: float = 0.5,
                       slow_alpha: float = 0.05) -> np.ndarray:
    """MAMA line; the cycle is measured, so `length` is unused."""
    return mesa_adaptive(values, fast_alpha, slow_alpha)[0]


def following_adaptive_line(values: np.ndarray, length: int, fast_alpha: float = 0.5,
                            slow_alpha: float = 0.05) -> np.ndarray:
    """FAMA line; the cycle is measured, so `length` is unused."""
    return mesa_adaptive(values, fast_alpha, slow_alpha)[1]
