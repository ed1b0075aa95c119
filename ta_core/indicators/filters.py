"""
Ehlers filter bank.

Each filter is a fixed linear recurrence over current/prior inputs and
prior outputs. Coefficients depend only on the configured length, so they
are computed once before the sweep. The smoothing filters (super smoother,
Butterworth) pass the raw input through for the bars where their prior
outputs do not exist yet; the high-pass family reads missing history as 0.
"""
import math

import numpy as np

from ..shared.numeric import SeriesAccumulator, combine, prior_or_default, min_or_max


def super_smoother_2pole(values: np.ndarray, length: int) -> np.ndarray:
    arg = math.sqrt(2) * math.pi / length
    a1 = math.exp(-arg)
    c2 = 2 * a1 * math.cos(arg)
    c3 = -a1 * a1
    c1 = 1 - c2 - c3
    out = SeriesAccumulator(len(values))
    for i in range(len(values)):
        if i < 2:
            out.append(values[i])
            continue
        out.append(c1 * values[i] + c2 * out.prior(1) + c3 * out.prior(2))
    return out.to_array()


def super_smoother_2pole_v2(values: np.ndarray, length: int) -> np.ndarray:
    """Super smoother applied to the two-bar average of the input."""
    arg = math.sqrt(2) * math.pi / length
    a1 = math.exp(-arg)
    c2 = 2 * a1 * math.cos(arg)
    c3 = -a1 * a1
    c1 = (1 - c2 - c3) / 2
    out = SeriesAccumulator(len(values))
    for i in range(len(values)):
        if i < 2:
            out.append(values[i])
            continue
        out.append(c1 * (values[i] + values[i - 1]) + c2 * out.prior(1) + c3 * out.prior(2))
    return out.to_array()


def super_smoother_3pole(values: np.ndarray, length: int) -> np.ndarray:
    arg = math.pi / length
    a1 = math.exp(-arg)
    b1 = 2 * a1 * math.cos(1.738 * arg)
    c1 = a1 * a1
    coef2 = b1 + c1
    coef3 = -(c1 + b1 * c1)
    coef4 = c1 * c1
    coef1 = 1 - coef2 - coef3 - coef4
    out = SeriesAccumulator(len(values))
    for i in range(len(values)):
        if i < 3:
            out.append(values[i])
            continue
        out.append(coef1 * values[i] + coef2 * out.prior(1) + coef3 * out.prior(2) + coef4 * out.prior(3))
    return out.to_array()


def butterworth_2pole(values: np.ndarray, length: int) -> np.ndarray:
    arg = math.sqrt(2) * math.pi / length
    a1 = math.exp(-arg)
    b1 = 2 * a1 * math.cos(arg)
    coef2 = b1
    coef3 = -a1 * a1
    coef1 = (1 - b1 + a1 * a1) / 4
    out = SeriesAccumulator(len(values))
    for i in range(len(values)):
        if i < 2:
            out.append(values[i])
            continue
        out.append(
            coef1 * (values[i] + 2 * values[i - 1] + values[i - 2])
            + coef2 * out.prior(1) + coef3 * out.prior(2)
        )
    return out.to_array()


def butterworth_3pole(values: np.ndarray, length: int) -> np.ndarray:
    arg = math.pi / length
    a1 = math.exp(-arg)
    b1 = 2 * a1 * math.cos(1.738 * arg)
    c1 = a1 * a1
    coef2 = b1 + c1
    coef3 = -(c1 + b1 * c1)
    coef4 = c1 * c1
    coef1 = (1 - b1 + c1) * (1 - c1) / 8
    out = SeriesAccumulator(len(values))
    for i in range(len(values)):
        if i < 3:
            out.append(values[i])
            continue
        out.append(
            coef1 * (values[i] + 3 * values[i - 1] + 3 * values[i - 2] + values[i - 3])
            + coef2 * out.prior(1) + coef3 * out.prior(2) + coef4 * out.prior(3)
        )
    return out.to_array()


def laguerre(values: np.ndarray, length: int, gamma: float = 0.8) -> np.ndarray:
    """
    Four-stage Laguerre filter; gamma sets the damping, `length` is unused.

    The first stage starts from the raw input so the output does not
    ramp up from zero.
    """
    n = len(values)
    l0 = SeriesAccumulator(n)
    l1 = SeriesAccumulator(n)
    l2 = SeriesAccumulator(n)
    l3 = SeriesAccumulator(n)
    out = SeriesAccumulator(n)
    for i in range(n):
        current = float(values[i])
        prev0 = l0.prior(1, default=current)
        prev1 = l1.prior(1, default=current)
        prev2 = l2.prior(1, default=current)
        prev3 = l3.prior(1, default=current)
        v0 = l0.append((1 - gamma) * current + gamma * prev0)
        v1 = l1.append(-gamma * v0 + prev0 + gamma * prev1)
        v2 = l2.append(-gamma * v1 + prev1 + gamma * prev2)
        v3 = l3.append(-gamma * v2 + prev2 + gamma * prev3)
        out.append((v0 + 2 * v1 + 2 * v2 + v3) / 6)
    return out.to_array()


def _high_pass_alpha(arg: float) -> float:
    return (math.cos(arg) + math.sin(arg) - 1) / math.cos(arg)


def _high_pass_sweep(values: np.ndarray, alpha: float) -> np.ndarray:
    out = SeriesAccumulator(len(values))
    for i in range(len(values)):
        second_diff = values[i] - 2 * prior_or_default(values, i, 1) + prior_or_default(values, i, 2)
        out.append(
            (1 - alpha / 2) ** 2 * second_diff
            + 2 * (1 - alpha) * out.prior(1)
            - (1 - alpha) ** 2 * out.prior(2)
        )
    return out.to_array()


def high_pass(values: np.ndarray, length: int, mult: float = 1) -> np.ndarray:
    """
    Two-pole high-pass filter passing cycles shorter than mult * length.

    The angular argument is clamped to [0.01, 0.99] radians.
    """
    arg = min_or_max(2 * math.pi / (mult * length * math.sqrt(2)), 0.99, 0.01)
    return _high_pass_sweep(values, _high_pass_alpha(arg))


def roofing(values: np.ndarray, length: int, lower_length: float = 10) -> np.ndarray:
    """
    Roofing filter: high-pass at `length` bars, then a super smoother at
    lower_length bars, leaving the band between the two.
    """
    arg = min(0.707 * 2 * math.pi / length, 0.99)
    high_passed = _high_pass_sweep(values, _high_pass_alpha(arg))

    a1 = math.exp(-1.414 * math.pi / lower_length)
    b1 = 2 * a1 * math.cos(min(1.414 * math.pi / lower_length, 0.99))
    c2 = b1
    c3 = -a1 * a1
    c1 = 1 - c2 - c3
    out = SeriesAccumulator(len(values))
    for i in range(len(values)):
        hp_pair = (high_passed[i] + prior_or_default(high_passed, i, 1)) / 2
        out.append(c1 * hp_pair + c2 * out.prior(1) + c3 * out.prior(2))
    return out.to_array()


def decycler(values: np.ndarray, length: int) -> np.ndarray:
    """Input minus its high-pass component: a low-lag trend line."""
    return combine([values, high_pass(values, length)], [1, -1])
