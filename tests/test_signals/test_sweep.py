"""
Tests for whole-series signal sweeps.
"""
import numpy as np
import pandas as pd
import pytest

from ta_core.shared.types import Signal
from ta_core.signals.sweep import (
    band_signals,
    bullish_bearish_signals,
    compare_signals,
    condition_signals,
    crossover_signals,
    oscillator_signals,
    signal_counts,
    volatility_signals,
)


@pytest.fixture
def dates():
    return pd.date_range('2020-01-01', periods=5, freq='D')


class TestSweeps:
    """Sweeps apply the per-bar tables with prior values defaulting to 0."""

    def test_crossover(self, dates):
        delta = pd.Series([-1.0, 1.0, 2.0, -1.0, -2.0], index=dates)
        signals = crossover_signals(delta)
        assert list(signals) == [Signal.SELL, Signal.BUY, Signal.NEUTRAL, Signal.SELL, Signal.NEUTRAL]
        assert signals.index.equals(dates)
        assert signals.name == 'signal'

    def test_first_bar_compares_against_zero(self):
        signals = compare_signals(np.array([3.0]))
        assert list(signals) == [Signal.STRONG_BUY]
        assert isinstance(signals.index, pd.RangeIndex)

    def test_oscillator(self):
        values = [80.0, 69.0, 50.0, 20.0, 35.0]
        signals = oscillator_signals(values, 70, 30)
        assert signals.iloc[1] == Signal.SELL
        assert signals.iloc[4] == Signal.BUY
        assert signals.iloc[2] == Signal.NEUTRAL

    def test_band(self):
        price = [100.0, 110.0, 105.0]
        upper = [108.0, 110.0, 110.0]
        lower = [90.0, 90.0, 90.0]
        signals = band_signals(price, upper, lower)
        assert list(signals) == [Signal.NEUTRAL, Signal.SELL, Signal.NEUTRAL]

    def test_condition_accepts_booleans(self, dates):
        bullish = pd.Series([True, False, False, True, False], index=dates)
        bearish = pd.Series([False, True, False, True, False], index=dates)
        signals = condition_signals(bullish, bearish)
        assert list(signals) == [Signal.BUY, Signal.SELL, Signal.NEUTRAL, Signal.BUY, Signal.NEUTRAL]

    def test_bullish_bearish(self):
        signals = bullish_bearish_signals([1.0, 0.5], [0.0, 0.0])
        assert list(signals) == [Signal.STRONG_BUY, Signal.BUY]

    def test_volatility_scalar_and_series_threshold(self):
        delta = [1.0, 2.0, 3.0]
        volatility = [0.5, 2.0, 2.0]
        assert list(volatility_signals(delta, volatility, 1.0)) == [
            Signal.NEUTRAL, Signal.STRONG_BUY, Signal.STRONG_BUY,
        ]
        assert list(volatility_signals(delta, volatility, [0.0, 0.0, 5.0])) == [
            Signal.STRONG_BUY, Signal.STRONG_BUY, Signal.NEUTRAL,
        ]

    @pytest.mark.parametrize("sweep", [
        lambda **kw: band_signals([100.0, 110.0, 105.0], [108.0, 110.0, 110.0], [90.0, 90.0, 90.0], **kw),
        lambda **kw: condition_signals([True, False, False], [False, True, False], **kw),
        lambda **kw: volatility_signals([1.0, 2.0, -3.0], [0.5, 2.0, 2.0], 1.0, **kw),
    ])
    def test_reversed_mirrors(self, sweep):
        normal = sweep()
        assert list(sweep(is_reversed=True)) == [s.mirrored() for s in normal]

    def test_signal_counts(self):
        counts = signal_counts(crossover_signals([-1.0, 1.0, 2.0]))
        assert counts[Signal.SELL] == 1
        assert counts[Signal.BUY] == 1
        assert counts[Signal.NEUTRAL] == 1
        assert counts[Signal.STRONG_BUY] == 0
        assert set(counts) == set(Signal)
