"""
Base indicator interface.

All indicators should follow this pattern:
1. Read one or more input series from a BarSet
2. Compose rolling statistics and moving-average kernels into named outputs
3. Classify the outputs into one signal per bar
"""
from abc import ABC, abstractmethod
from typing import Optional, Union

import pandas as pd

from ..shared.types import BarSet, InputName, OutputBundle


class Indicator(ABC):
    """
    Base class for all indicators.

    An indicator is a fixed composition of the core primitives. Each call
    to evaluate() builds a fresh OutputBundle; indicators keep only their
    configuration, never results.
    """

    name: str = "indicator"
    input_name: InputName = InputName.CLOSE

    @abstractmethod
    def evaluate(self, bars: BarSet) -> OutputBundle:
        """
        Calculate all outputs and the signal series.

        Args:
            bars: Read-only OHLCV input

        Returns:
            OutputBundle with named outputs, signals and the primary series
            (all on the bars' index)
        """
        pass

    def calculate(self, prices: Union[pd.Series, BarSet]) -> pd.Series:
        """
        Calculate the primary indicator series.

        Args:
            prices: Price series with datetime index, or a full BarSet

        Returns:
            Series with indicator values (same index as prices)
        """
        bars = prices if isinstance(prices, BarSet) else BarSet.from_series(prices)
        return self.evaluate(bars).primary_series()

    def get_value_at(self, prices: pd.Series, timestamp: pd.Timestamp) -> Optional[float]:
        """
        Get the primary value at a specific timestamp.

        Only data up to and including the timestamp is used.

        Args:
            prices: Price series (must include data before timestamp)
            timestamp: Timestamp to get value for

        Returns:
            Indicator value at timestamp, or None if unavailable
        """
        if timestamp not in prices.index:
            return None
        values = self.calculate(prices.loc[:timestamp])
        val = values[timestamp]
        return None if pd.isna(val) else float(val)
