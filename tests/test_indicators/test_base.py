"""
Tests for the Indicator base interface.
"""
from abc import ABC

import numpy as np
import pandas as pd
import pytest

from ta_core.indicators.base import Indicator
from ta_core.indicators.implementations import (
    BollingerBands,
    MovingAverageIndicator,
    RelativeStrengthIndex,
    MovingAverageConvergenceDivergence,
)
from ta_core.shared.types import BarSet, OutputBundle, Signal


class DoublingIndicator(Indicator):
    """Minimal concrete indicator used to exercise the base class."""

    name = "doubling"

    def evaluate(self, bars):
        doubled = bars.close * 2
        signals = pd.Series([Signal.NEUTRAL] * len(bars), index=bars.index, dtype=object)
        return OutputBundle(outputs={'Doubled': doubled}, signals=signals, name=self.name)


class TestIndicatorInterface:
    """Test Indicator abstract base class."""

    def test_indicator_is_abstract(self):
        """Indicator should be an ABC."""
        assert issubclass(Indicator, ABC)
        with pytest.raises(TypeError):
            Indicator()

    def test_indicator_requires_evaluate(self):
        """Indicator defines evaluate as abstract."""
        assert 'evaluate' in Indicator.__abstractmethods__

    def test_concrete_indicators_implement_evaluate(self):
        """All concrete indicators implement evaluate."""
        for cls in (MovingAverageIndicator, BollingerBands, RelativeStrengthIndex,
                    MovingAverageConvergenceDivergence):
            assert issubclass(cls, Indicator)
            assert cls.evaluate is not Indicator.evaluate


class TestCalculate:
    """calculate() and get_value_at() on top of evaluate()."""

    def test_calculate_accepts_series(self):
        dates = pd.date_range('2020-01-01', periods=4, freq='D')
        prices = pd.Series([1.0, 2.0, 3.0, 4.0], index=dates)
        result = DoublingIndicator().calculate(prices)
        assert list(result) == [2.0, 4.0, 6.0, 8.0]
        assert result.index.equals(dates)

    def test_calculate_accepts_barset(self):
        prices = pd.Series([1.0, 2.0])
        result = DoublingIndicator().calculate(BarSet.from_series(prices))
        assert list(result) == [2.0, 4.0]

    def test_get_value_at(self):
        dates = pd.date_range('2020-01-01', periods=4, freq='D')
        prices = pd.Series([1.0, 2.0, 3.0, 4.0], index=dates)
        assert DoublingIndicator().get_value_at(prices, dates[2]) == 6.0

    def test_get_value_at_missing_timestamp(self):
        dates = pd.date_range('2020-01-01', periods=4, freq='D')
        prices = pd.Series(np.arange(4, dtype=float), index=dates)
        assert DoublingIndicator().get_value_at(prices, pd.Timestamp('2021-01-01')) is None
