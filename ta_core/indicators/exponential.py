"""
Exponential-family moving averages.

The base recurrence is out[i] = k * x[i] + (1 - k) * out[i - 1] with the
prior output defaulting to 0. Multi-stage variants (DEMA, TEMA, T3, ...)
are built by running the EMA kernel repeatedly, each stage smoothing the
previous stage's output, and combining the stages linearly.
"""
import math
from typing import List

import numpy as np

from ..shared.defaults import EMA_MIN_ALPHA, EMA_MAX_ALPHA
from ..shared.numeric import (
    SeriesAccumulator, combine, min_or_max, safe_divide, safe_pow, clamp_length,
)


def smooth(values: np.ndarray, alpha: float) -> np.ndarray:
    """Single exponential recurrence with a fixed smoothing constant."""
    out = SeriesAccumulator(len(values))
    for i in range(len(values)):
        out.append(alpha * values[i] + (1 - alpha) * out.prior(1))
    return out.to_array()


def ema(values: np.ndarray, length: int) -> np.ndarray:
    """EMA with k = 2 / (length + 1), clamped to [0.01, 0.99]."""
    return smooth(values, min_or_max(2 / (length + 1), EMA_MAX_ALPHA, EMA_MIN_ALPHA))


def wilders(values: np.ndarray, length: int) -> np.ndarray:
    return smooth(values, 1 / length)


def ema_stages(values: np.ndarray, length: int, depth: int) -> List[np.ndarray]:
    """Run the EMA kernel `depth` times in sequence, keeping every stage."""
    stages = []
    current = values
    for _ in range(depth):
        current = ema(current, length)
        stages.append(current)
    return stages


def dema(values: np.ndarray, length: int) -> np.ndarray:
    return combine(ema_stages(values, length, 2), [2, -1])


def tema(values: np.ndarray, length: int) -> np.ndarray:
    return combine(ema_stages(values, length, 3), [3, -3, 1])


def qema(values: np.ndarray, length: int) -> np.ndarray:
    return combine(ema_stages(values, length, 5), [5, -10, 10, -5, 1])


def pema(values: np.ndarray, length: int) -> np.ndarray:
    return combine(ema_stages(values, length, 8), [8, -28, 56, -70, 56, -28, 8, -1])


def t3(values: np.ndarray, length: int, v_factor: float = 0.7) -> np.ndarray:
    """
    Tillson T3: six nested EMAs combined with volume-factor coefficients.

    c1 = -v^3
    c2 = 3v^2 + 3v^3
    c3 = -6v^2 - 3v - 3v^3
    c4 = 1 + 3v + v^3 + 3v^2
    T3 = c1*e6 + c2*e5 + c3*e4 + c4*e3
    """
    v = v_factor
    c1 = -v ** 3
    c2 = 3 * v ** 2 + 3 * v ** 3
    c3 = -6 * v ** 2 - 3 * v - 3 * v ** 3
    c4 = 1 + 3 * v + v ** 3 + 3 * v ** 2
    e = ema_stages(values, length, 6)
    return combine([e[5], e[4], e[3], e[2]], [c1, c2, c3, c4])


def zero_lag_ema(values: np.ndarray, length: int) -> np.ndarray:
    return combine(ema_stages(values, length, 2), [2, -1])


def zero_lag_tema(values: np.ndarray, length: int) -> np.ndarray:
    tema1 = tema(values, length)
    tema2 = tema(tema1, length)
    return combine([tema1, tema2], [2, -1])


def generalized_dema(values: np.ndarray, length: int, factor: float = 0.7) -> np.ndarray:
    e1, e2 = ema_stages(values, length, 2)
    return combine([e1, e2], [1 + factor, -factor])


def mcginley_dynamic(values: np.ndarray, length: int, k: float = 0.6) -> np.ndarray:
    """Speed adjusts to (price / previous)^4; the first output is the input itself."""
    out = SeriesAccumulator(len(values))
    for i in range(len(values)):
        current = float(values[i])
        prev = out.prior(1, default=current)
        ratio = safe_divide(current, prev)
        bottom = k * length * safe_pow(ratio, 4)
        if bottom != 0:
            out.append(prev + (current - prev) / max(bottom, 1))
        else:
            out.append(current)
    return out.to_array()


def ahrens(values: np.ndarray, length: int) -> np.ndarray:
    out = SeriesAccumulator(len(values))
    for i in range(len(values)):
        current = float(values[i])
        prev = out.prior(1)
        prior = out.prior(length, default=current)
        out.append(prev + (current - (prev + prior) / 2) / length)
    return out.to_array()


def regularized_ema(values: np.ndarray, length: int, lambda_: float = 0.5) -> np.ndarray:
    alpha = 2 / (length + 1)
    out = SeriesAccumulator(len(values))
    for i in range(len(values)):
        prev1 = out.prior(1)
        prev2 = out.prior(2)
        rema = (prev1 + alpha * (values[i] - prev1) + lambda_ * (2 * prev1 - prev2)) / (lambda_ + 1)
        out.append(rema)
    return out.to_array()


def zero_low_lag(values: np.ndarray, length: int, lag: float = 1.4) -> np.ndarray:
    """
    Zero-lag average built from a running sum and its length-bar difference.

    a[i] = lag * x + (1 - lag) * b[i - half] + a[i - 1]
    b[i] = (a[i] - a[i - length]) / length
    """
    lookback = clamp_length(math.ceil(length / 2))
    a = SeriesAccumulator(len(values))
    b = SeriesAccumulator(len(values))
    for i in range(len(values)):
        current = float(values[i])
        prior_b = b.prior(lookback, default=current)
        prior_a = a.prior(length)
        a_value = a.append(lag * current + (1 - lag) * prior_b + a.prior(1))
        b.append((a_value - prior_a) / length)
    return b.to_array()

