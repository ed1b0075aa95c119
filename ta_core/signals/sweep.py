"""
Forward sweeps that turn numeric series into Signal series.

Each sweep walks the bars in order, reads the prior bar through
prior_or_default (so the first bar sees priors of 0) and applies one
decision table from the classifier. Outputs share the input's index.
"""
from typing import Optional, Union

import numpy as np
import pandas as pd

from ..shared.numeric import ArrayLike, prior_or_default, to_array
from ..shared.types import Signal
from .classifier import (
    crossover_signal, compare_signal, oscillator_signal, band_signal,
    condition_signal, bullish_bearish_signal, volatility_signal,
)


def _index_of(template: ArrayLike) -> Optional[pd.Index]:
    return template.index if isinstance(template, pd.Series) else None


def _signal_series(signals, template: ArrayLike) -> pd.Series:
    return pd.Series(signals, index=_index_of(template), dtype=object, name="signal")


def _deltas(delta: Optional[ArrayLike], size: int) -> np.ndarray:
    return np.zeros(size) if delta is None else to_array(delta)


def crossover_signals(delta: ArrayLike, strict: bool = False, is_reversed: bool = False) -> pd.Series:
    """Crossover table over a delta series (e.g. fast - slow)."""
    values = to_array(delta)
    signals = [
        crossover_signal(values[i], prior_or_default(values, i), strict=strict, is_reversed=is_reversed)
        for i in range(len(values))
    ]
    return _signal_series(signals, delta)


def compare_signals(delta: ArrayLike, is_reversed: bool = False) -> pd.Series:
    values = to_array(delta)
    signals = [
        compare_signal(values[i], prior_or_default(values, i), is_reversed=is_reversed)
        for i in range(len(values))
    ]
    return _signal_series(signals, delta)


def oscillator_signals(oscillator: ArrayLike, overbought: float, oversold: float,
                       delta: Optional[ArrayLike] = None, is_reversed: bool = False) -> pd.Series:
    """
    Bounded-oscillator table.

    Args:
        oscillator: Oscillator values checked against the thresholds
        overbought: Upper threshold
        oversold: Lower threshold
        delta: Optional slope series for the continuation case
            (e.g. oscillator - its signal line); all zeros if omitted
        is_reversed: Mirror the resulting signals
    """
    values = to_array(oscillator)
    deltas = _deltas(delta, len(values))
    signals = [
        oscillator_signal(
            values[i], prior_or_default(values, i), overbought, oversold,
            current_delta=deltas[i], prior_delta=prior_or_default(deltas, i),
            is_reversed=is_reversed,
        )
        for i in range(len(values))
    ]
    return _signal_series(signals, oscillator)


def band_signals(price: ArrayLike, upper: ArrayLike, lower: ArrayLike,
                 is_reversed: bool = False) -> pd.Series:
    """Band breakout/re-entry table for a price and its bands."""
    values = to_array(price)
    upper_values = to_array(upper)
    lower_values = to_array(lower)
    signals = [
        band_signal(
            values[i], prior_or_default(values, i),
            upper_values[i], prior_or_default(upper_values, i),
            lower_values[i], prior_or_default(lower_values, i),
            is_reversed=is_reversed,
        )
        for i in range(len(values))
    ]
    return _signal_series(signals, price)


def condition_signals(bullish: Union[ArrayLike, pd.Series], bearish: Union[ArrayLike, pd.Series],
                      is_reversed: bool = False) -> pd.Series:
    """Dual-condition table; booleans or numbers (> 0 is active)."""
    bull = to_array(bullish)
    bear = to_array(bearish)
    signals = [condition_signal(bull[i], bear[i], is_reversed=is_reversed) for i in range(len(bull))]
    return _signal_series(signals, bullish)


def bullish_bearish_signals(bullish_slope: ArrayLike, bearish_slope: ArrayLike,
                            is_reversed: bool = False) -> pd.Series:
    bull = to_array(bullish_slope)
    bear = to_array(bearish_slope)
    signals = [
        bullish_bearish_signal(
            bull[i], prior_or_default(bull, i), bear[i], prior_or_default(bear, i),
            is_reversed=is_reversed,
        )
        for i in range(len(bull))
    ]
    return _signal_series(signals, bullish_slope)


def volatility_signals(delta: ArrayLike, volatility: ArrayLike,
                       threshold: Union[float, ArrayLike], is_reversed: bool = False) -> pd.Series:
    """Slope table gated on volatility >= threshold (scalar or per-bar series)."""
    values = to_array(delta)
    vol = to_array(volatility)
    if np.ndim(threshold) == 0:
        thresholds = np.full(len(values), float(threshold))
    else:
        thresholds = to_array(threshold)
    signals = [
        volatility_signal(values[i], prior_or_default(values, i), vol[i], thresholds[i],
                          is_reversed=is_reversed)
        for i in range(len(values))
    ]
    return _signal_series(signals, delta)


def signal_counts(signals: pd.Series) -> dict:
    """Count of each Signal in a signal series (all members present)."""
    counts = {signal: 0 for signal in Signal}
    for signal in signals:
        counts[signal] += 1
    return counts
