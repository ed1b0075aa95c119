"""
Numeric helpers shared by every kernel.

Centralizes the edge-case policy of the forward sweeps:
- missing history resolves through prior_or_default()
- zero denominators resolve to a default (0) through safe_divide()
- overflow clamps to MAX_VALUE instead of raising
"""
import math
from typing import Sequence, Union

import numpy as np
import pandas as pd

from .defaults import MAX_VALUE, EXP_INPUT_CAP, MIN_LENGTH, MAX_LENGTH

ArrayLike = Union[pd.Series, np.ndarray, Sequence[float]]


def to_array(values: ArrayLike) -> np.ndarray:
    """Convert a series or sequence to a float ndarray without touching the source."""
    if isinstance(values, pd.Series):
        return values.to_numpy(dtype=float, copy=True)
    return np.array(values, dtype=float)


def wrap_like(template: ArrayLike, values: np.ndarray, name=None):
    """
    Return values shaped like the template.

    A pandas template gives a Series on the template's index; anything else
    gives a plain float ndarray.
    """
    if isinstance(template, pd.Series):
        return pd.Series(values, index=template.index, name=name if name is not None else template.name)
    return np.array(values, dtype=float)


def prior_or_default(values, i: int, offset: int = 1, default: float = 0.0) -> float:
    """
    Value at index i - offset, or default when that index is before the start.

    Args:
        values: Indexable sequence (ndarray, list)
        i: Current bar index
        offset: How many bars back to look (0 means the current bar)
        default: Returned when i - offset < 0

    Returns:
        The referenced value as float
    """
    idx = i - offset
    if idx < 0:
        return default
    return float(values[idx])


def min_or_max(value: float, maximum: float, minimum: float) -> float:
    """Clamp value into [minimum, maximum]."""
    return min(max(value, minimum), maximum)


def clamp_length(value: float, minimum: int = MIN_LENGTH, maximum: int = MAX_LENGTH) -> int:
    """Clamp a derived window length to the supported integer range."""
    return int(min(max(value, minimum), maximum))


def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """numerator / denominator, or default when the denominator is zero."""
    if denominator == 0:
        return default
    return numerator / denominator


def clamp_overflow(value: float) -> float:
    """Replace +/-inf with the representable maximum of the same sign."""
    if math.isinf(value):
        return math.copysign(MAX_VALUE, value)
    return value


def clamp_overflow_array(values) -> np.ndarray:
    """Element-wise clamp_overflow; NaN is left as is."""
    return np.nan_to_num(np.asarray(values, dtype=float), nan=np.nan, posinf=MAX_VALUE, neginf=-MAX_VALUE)


def combine(stages: Sequence[np.ndarray], coefficients: Sequence[float]) -> np.ndarray:
    """
    Linear combination of equal-length series, e.g. 2 * e1 - e2.

    Every term and every partial sum is clamped, so huge inputs saturate at
    +/-MAX_VALUE instead of producing inf - inf.
    """
    result = np.zeros(len(stages[0]))
    with np.errstate(over='ignore'):
        for stage, coefficient in zip(stages, coefficients):
            term = clamp_overflow_array(coefficient * np.asarray(stage, dtype=float))
            result = clamp_overflow_array(result + term)
    return result


def safe_pow(base: float, exponent: float) -> float:
    """Power that clamps overflow to MAX_VALUE and maps domain errors to 0."""
    try:
        result = math.pow(base, exponent)
    except OverflowError:
        return MAX_VALUE
    except ValueError:
        return 0.0
    return clamp_overflow(result)


def safe_exp(value: float) -> float:
    return math.exp(min(value, EXP_INPUT_CAP))


def safe_log(value: float) -> float:
    return math.log(value) if value > 0 else 0.0


def safe_sqrt(value: float) -> float:
    return math.sqrt(value) if value >= 0 else 0.0


class SeriesAccumulator:
    """
    Append-only output buffer owned by one kernel invocation.

    Values are written in bar order, so while bar i is being computed the
    buffer holds exactly bars 0..i-1 and prior(1) is the previous output.
    """

    def __init__(self, size: int):
        self._values = np.zeros(size, dtype=float)
        self._count = 0

    def __len__(self) -> int:
        return self._count

    def append(self, value: float) -> float:
        value = clamp_overflow(float(value))
        self._values[self._count] = value
        self._count += 1
        return value

    def prior(self, offset: int = 1, default: float = 0.0) -> float:
        """Output written offset bars before the bar currently being computed."""
        return prior_or_default(self._values, self._count, offset, default)

    @property
    def last(self) -> float:
        return self.prior(1)

    def to_array(self) -> np.ndarray:
        return self._values[:self._count].copy()
