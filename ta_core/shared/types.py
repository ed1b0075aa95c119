"""
Shared types for indicator modules.

This module consolidates the Signal enum, the read-only BarSet input and
the OutputBundle result so that kernels, classifiers and indicators agree
on one set of types.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

import numpy as np
import pandas as pd

from .exceptions import CalculationError


class Signal(Enum):
    """Discrete trade signal emitted once per bar."""
    STRONG_BUY = "strong_buy"
    BUY = "buy"
    NEUTRAL = "neutral"
    SELL = "sell"
    STRONG_SELL = "strong_sell"

    @property
    def is_bullish(self) -> bool:
        return self in (Signal.STRONG_BUY, Signal.BUY)

    @property
    def is_bearish(self) -> bool:
        return self in (Signal.STRONG_SELL, Signal.SELL)

    def mirrored(self) -> "Signal":
        """Swap buy and sell sides, keeping strength."""
        return _MIRRORED[self]


_MIRRORED = {
    Signal.STRONG_BUY: Signal.STRONG_SELL,
    Signal.BUY: Signal.SELL,
    Signal.NEUTRAL: Signal.NEUTRAL,
    Signal.SELL: Signal.BUY,
    Signal.STRONG_SELL: Signal.STRONG_BUY,
}


class InputName(Enum):
    """Which bar field (or price composite) feeds an indicator."""
    CLOSE = "close"
    OPEN = "open"
    HIGH = "high"
    LOW = "low"
    VOLUME = "volume"
    TYPICAL_PRICE = "typical_price"  # (h + l + c) / 3
    FULL_TYPICAL_PRICE = "full_typical_price"  # (o + h + l + c) / 4
    MEDIAN_PRICE = "median_price"  # (h + l) / 2
    WEIGHTED_CLOSE = "weighted_close"  # (h + l + 2c) / 4


@dataclass(frozen=True, eq=False)
class BarSet:
    """
    Read-only OHLCV input for one computation.

    All five series share one index; index i refers to the same bar in
    every series. Nothing in the library mutates a BarSet.
    """
    open: pd.Series
    high: pd.Series
    low: pd.Series
    close: pd.Series
    volume: pd.Series

    def __post_init__(self):
        lengths = {len(s) for s in (self.open, self.high, self.low, self.close, self.volume)}
        if len(lengths) != 1:
            raise ValueError(f"All bar series must have equal length, got lengths {sorted(lengths)}")

    def __len__(self) -> int:
        return len(self.close)

    @property
    def index(self) -> pd.Index:
        return self.close.index

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame) -> "BarSet":
        """
        Build a BarSet from an OHLCV DataFrame.

        Column names may be capitalised ('Close') or lower case ('close').
        A missing volume column becomes zeros.
        """
        columns = {str(c).lower(): c for c in df.columns}
        missing = [name for name in ("open", "high", "low", "close") if name not in columns]
        if missing:
            raise ValueError(f"DataFrame is missing required columns: {missing}")

        def column(name: str) -> pd.Series:
            return df[columns[name]].astype(float).rename(name)

        if "volume" in columns:
            volume = column("volume")
        else:
            volume = pd.Series(np.zeros(len(df)), index=df.index, name="volume")
        return cls(
            open=column("open"),
            high=column("high"),
            low=column("low"),
            close=column("close"),
            volume=volume,
        )

    @classmethod
    def from_series(cls, prices: pd.Series) -> "BarSet":
        """Degenerate bar set where every price field is the given series."""
        prices = prices.astype(float)
        volume = pd.Series(np.zeros(len(prices)), index=prices.index, name="volume")
        return cls(
            open=prices.rename("open"),
            high=prices.rename("high"),
            low=prices.rename("low"),
            close=prices.rename("close"),
            volume=volume,
        )

    def primary(self, input_name: InputName = InputName.CLOSE) -> pd.Series:
        """Select the primary input series (a field or a price composite)."""
        input_name = InputName(input_name)
        if input_name == InputName.CLOSE:
            result = self.close
        elif input_name == InputName.OPEN:
            result = self.open
        elif input_name == InputName.HIGH:
            result = self.high
        elif input_name == InputName.LOW:
            result = self.low
        elif input_name == InputName.VOLUME:
            result = self.volume
        elif input_name == InputName.TYPICAL_PRICE:
            result = (self.high + self.low + self.close) / 3
        elif input_name == InputName.FULL_TYPICAL_PRICE:
            result = (self.open + self.high + self.low + self.close) / 4
        elif input_name == InputName.MEDIAN_PRICE:
            result = (self.high + self.low) / 2
        else:
            result = (self.high + self.low + 2 * self.close) / 4
        return result.rename(input_name.value)


@dataclass
class OutputBundle:
    """
    Result of one indicator invocation.

    Created fresh per call and owned by the caller; nothing caches it.
    """
    outputs: Dict[str, pd.Series]
    signals: pd.Series
    primary: Optional[pd.Series] = None
    name: str = ""
    metadata: Dict[str, float] = field(default_factory=dict)

    def __getitem__(self, key: str) -> pd.Series:
        return self.outputs[key]

    def primary_series(self) -> pd.Series:
        """
        Series to feed into a subsequent, composed calculation.

        Raises:
            CalculationError: If there is no primary series and the bundle
                holds more than one output
        """
        if self.primary is not None:
            return self.primary
        if len(self.outputs) == 1:
            return next(iter(self.outputs.values()))
        raise CalculationError(
            f"{self.name or 'Indicator'} has {len(self.outputs)} outputs and no primary series; "
            f"pick one of {list(self.outputs)} explicitly"
        )
