"""
Reference indicator implementations following the Indicator interface.

Each class is a small, fixed composition of the core primitives (rolling
statistics, moving-average kernels and signal classification). They show
the primitives composing end to end; they are not a full catalog.
"""
import logging
from typing import Optional

import pandas as pd

from .base import Indicator
from .kernel import compute_moving_average
from .ma_kinds import MovingAverageSpec, MovingAvgKind
from .rolling import rolling_std, rolling_variance
from .adaptive import chande_momentum
from ..shared.types import BarSet, InputName, OutputBundle
from ..shared.numeric import min_or_max
from ..shared.defaults import (
    DEFAULT_LENGTH,
    RSI_LENGTH, RSI_SIGNAL_LENGTH, RSI_OVERBOUGHT, RSI_OVERSOLD,
    CMO_OVERBOUGHT, CMO_OVERSOLD,
    BOLLINGER_LENGTH, BOLLINGER_STD_MULT,
    MACD_FAST, MACD_SLOW, MACD_SIGNAL,
    STDDEV_LENGTH, STDDEV_SIGNAL_LENGTH,
)
from ..signals.classifier import SignalMode
from ..signals.sweep import (
    band_signals, bullish_bearish_signals, compare_signals, condition_signals,
    crossover_signals, oscillator_signals, volatility_signals, signal_counts,
)

logger = logging.getLogger(__name__)


def _ma(spec: MovingAverageSpec, series: pd.Series, bars: BarSet) -> pd.Series:
    return compute_moving_average(spec, series, volume=bars.volume, high=bars.high, low=bars.low)


class MovingAverageIndicator(Indicator):
    """
    A single configurable moving average with a configurable signal mode.

    The signal mode comes from a SignalConfig (see ta_core.signals.config):
    - compare / crossover: on price - average
    - bounded_oscillator: the average itself against overbought/oversold
    - band_breakout: price against average +/- threshold * rolling std
    - dual_condition: price above a rising average / below a falling one
    - bullish_bearish: slope table on the average's bar-to-bar change
    - volatility: compare table gated on rolling std >= threshold
    """

    def __init__(self, spec: Optional[MovingAverageSpec] = None,
                 input_name: InputName = InputName.CLOSE, signal_config=None):
        self.spec = spec or MovingAverageSpec(MovingAvgKind.EXPONENTIAL, DEFAULT_LENGTH)
        self.input_name = InputName(input_name)
        self.signal_config = signal_config
        self.name = self.spec.label

    def _signals(self, prices: pd.Series, average: pd.Series) -> pd.Series:
        config = self.signal_config
        mode = config.mode if config is not None else SignalMode.COMPARE
        is_reversed = config.is_reversed if config is not None else False
        delta = prices - average
        slope = average.diff().fillna(0.0)

        if mode == SignalMode.COMPARE:
            return compare_signals(delta, is_reversed=is_reversed)
        if mode == SignalMode.CROSSOVER:
            return crossover_signals(delta, strict=config.strict, is_reversed=is_reversed)
        if mode == SignalMode.BOUNDED_OSCILLATOR:
            return oscillator_signals(average, config.overbought, config.oversold,
                                      delta=slope, is_reversed=is_reversed)
        if mode == SignalMode.BAND_BREAKOUT:
            width = config.threshold * rolling_std(prices, self.spec.length)
            return band_signals(prices, average + width, average - width, is_reversed=is_reversed)
        if mode == SignalMode.DUAL_CONDITION:
            return condition_signals((delta > 0) & (slope > 0), (delta < 0) & (slope < 0),
                                     is_reversed=is_reversed)
        if mode == SignalMode.BULLISH_BEARISH:
            return bullish_bearish_signals(slope, slope, is_reversed=is_reversed)
        return volatility_signals(delta, rolling_std(prices, self.spec.length), config.threshold,
                                  is_reversed=is_reversed)

    def evaluate(self, bars: BarSet) -> OutputBundle:
        prices = bars.primary(self.input_name)
        average = _ma(self.spec, prices, bars).rename(self.name)
        signals = self._signals(prices, average)
        logger.debug(f"{self.name}: {signal_counts(signals)}")
        metadata = {name: float(value) for name, value in self.spec.resolved_params().items()}
        metadata['length'] = float(self.spec.length)
        if self.signal_config is not None:
            metadata['threshold'] = float(self.signal_config.threshold)
        return OutputBundle(outputs={self.name: average}, signals=signals, primary=average,
                            name=self.name, metadata=metadata)


class MovingAverageCross(Indicator):
    """Fast/slow moving-average crossover."""

    name = "ma_cross"

    def __init__(self, fast: Optional[MovingAverageSpec] = None, slow: Optional[MovingAverageSpec] = None,
                 input_name: InputName = InputName.CLOSE, strict: bool = False):
        self.fast = fast or MovingAverageSpec(MovingAvgKind.EXPONENTIAL, MACD_FAST)
        self.slow = slow or MovingAverageSpec(MovingAvgKind.EXPONENTIAL, MACD_SLOW)
        self.input_name = InputName(input_name)
        self.strict = strict

    def evaluate(self, bars: BarSet) -> OutputBundle:
        prices = bars.primary(self.input_name)
        fast = _ma(self.fast, prices, bars).rename("Fast")
        slow = _ma(self.slow, prices, bars).rename("Slow")
        spread = (fast - slow).rename("Spread")
        return OutputBundle(
            outputs={"Fast": fast, "Slow": slow, "Spread": spread},
            signals=crossover_signals(spread, strict=self.strict),
            primary=spread,
            name=self.name,
            metadata={'fast_length': float(self.fast.length), 'slow_length': float(self.slow.length)},
        )


class BollingerBands(Indicator):
    """
    Bollinger bands: average +/- std_mult population standard deviations.

    Three outputs and no primary series; pick a band explicitly to compose.
    """

    name = "bollinger_bands"

    def __init__(self, length: int = BOLLINGER_LENGTH, std_mult: float = BOLLINGER_STD_MULT,
                 kind: MovingAvgKind = MovingAvgKind.SIMPLE, input_name: InputName = InputName.CLOSE):
        self.spec = MovingAverageSpec(kind, length)
        self.std_mult = std_mult
        self.input_name = InputName(input_name)

    def evaluate(self, bars: BarSet) -> OutputBundle:
        prices = bars.primary(self.input_name)
        middle = _ma(self.spec, prices, bars).rename("MiddleBand")
        std = rolling_std(prices, self.spec.length)
        upper = (middle + self.std_mult * std).rename("UpperBand")
        lower = (middle - self.std_mult * std).rename("LowerBand")
        return OutputBundle(
            outputs={"UpperBand": upper, "MiddleBand": middle, "LowerBand": lower},
            signals=band_signals(prices, upper, lower),
            name=self.name,
            metadata={'length': float(self.spec.length), 'std_mult': float(self.std_mult)},
        )


class RelativeStrengthIndex(Indicator):
    """RSI bounded to [0, 100], with a smoothed signal line."""

    name = "rsi"

    def __init__(self, length: int = RSI_LENGTH, signal_length: int = RSI_SIGNAL_LENGTH,
                 kind: MovingAvgKind = MovingAvgKind.WILDERS,
                 overbought: float = RSI_OVERBOUGHT, oversold: float = RSI_OVERSOLD,
                 input_name: InputName = InputName.CLOSE):
        self.spec = MovingAverageSpec(kind, length)
        self.signal_spec = MovingAverageSpec(kind, signal_length)
        self.overbought = overbought
        self.oversold = oversold
        self.input_name = InputName(input_name)

    def evaluate(self, bars: BarSet) -> OutputBundle:
        prices = bars.primary(self.input_name)
        change = prices.diff().fillna(0.0)
        gain = change.where(change > 0, 0.0)
        loss = (-change).where(change < 0, 0.0)
        avg_gain = _ma(self.spec, gain, bars)
        avg_loss = _ma(self.spec, loss, bars)

        rsi_values = []
        for g, l in zip(avg_gain, avg_loss):
            if l == 0:
                rsi_values.append(100.0)
            elif g == 0:
                rsi_values.append(0.0)
            else:
                rsi_values.append(min_or_max(100 - 100 / (1 + g / l), 100, 0))
        rsi = pd.Series(rsi_values, index=prices.index, name="Rsi")
        signal_line = _ma(self.signal_spec, rsi, bars).rename("Signal")
        histogram = (rsi - signal_line).rename("Histogram")

        return OutputBundle(
            outputs={"Rsi": rsi, "Signal": signal_line, "Histogram": histogram},
            signals=oscillator_signals(rsi, self.overbought, self.oversold, delta=histogram),
            primary=rsi,
            name=self.name,
            metadata={
                'length': float(self.spec.length),
                'signal_length': float(self.signal_spec.length),
                'overbought': float(self.overbought),
                'oversold': float(self.oversold),
            },
        )


class ChandeMomentumOscillator(Indicator):
    """CMO bounded to [-100, 100], with a smoothed signal line."""

    name = "cmo"

    def __init__(self, length: int = DEFAULT_LENGTH, signal_length: int = RSI_SIGNAL_LENGTH,
                 kind: MovingAvgKind = MovingAvgKind.EXPONENTIAL,
                 overbought: float = CMO_OVERBOUGHT, oversold: float = CMO_OVERSOLD,
                 input_name: InputName = InputName.CLOSE):
        self.length = length
        self.signal_spec = MovingAverageSpec(kind, signal_length)
        self.overbought = overbought
        self.oversold = oversold
        self.input_name = InputName(input_name)

    def evaluate(self, bars: BarSet) -> OutputBundle:
        prices = bars.primary(self.input_name)
        cmo = pd.Series(chande_momentum(prices.to_numpy(dtype=float), self.length),
                        index=prices.index, name="Cmo")
        signal_line = _ma(self.signal_spec, cmo, bars).rename("Signal")
        return OutputBundle(
            outputs={"Cmo": cmo, "Signal": signal_line},
            signals=oscillator_signals(cmo, self.overbought, self.oversold, delta=cmo - signal_line),
            primary=cmo,
            name=self.name,
            metadata={
                'length': float(self.length),
                'signal_length': float(self.signal_spec.length),
                'overbought': float(self.overbought),
                'oversold': float(self.oversold),
            },
        )


class MovingAverageConvergenceDivergence(Indicator):
    """MACD line, signal line and histogram; signals on histogram zero crosses."""

    name = "macd"

    def __init__(self, fast: int = MACD_FAST, slow: int = MACD_SLOW, signal: int = MACD_SIGNAL,
                 kind: MovingAvgKind = MovingAvgKind.EXPONENTIAL, input_name: InputName = InputName.CLOSE):
        self.fast_spec = MovingAverageSpec(kind, fast)
        self.slow_spec = MovingAverageSpec(kind, slow)
        self.signal_spec = MovingAverageSpec(kind, signal)
        self.input_name = InputName(input_name)

    def evaluate(self, bars: BarSet) -> OutputBundle:
        prices = bars.primary(self.input_name)
        macd = (_ma(self.fast_spec, prices, bars) - _ma(self.slow_spec, prices, bars)).rename("Macd")
        signal_line = _ma(self.signal_spec, macd, bars).rename("Signal")
        histogram = (macd - signal_line).rename("Histogram")
        return OutputBundle(
            outputs={"Macd": macd, "Signal": signal_line, "Histogram": histogram},
            signals=crossover_signals(histogram),
            primary=macd,
            name=self.name,
            metadata={
                'fast_length': float(self.fast_spec.length),
                'slow_length': float(self.slow_spec.length),
                'signal_length': float(self.signal_spec.length),
            },
        )


class StandardDeviationVolatility(Indicator):
    """
    Rolling population standard deviation with an EMA signal line.

    Signals follow the price's slope against its average, but only while
    volatility is at or above its signal line.
    """

    name = "stddev"

    def __init__(self, length: int = STDDEV_LENGTH, signal_length: int = STDDEV_SIGNAL_LENGTH,
                 input_name: InputName = InputName.CLOSE):
        self.length = length
        self.average_spec = MovingAverageSpec(MovingAvgKind.SIMPLE, length)
        self.signal_spec = MovingAverageSpec(MovingAvgKind.EXPONENTIAL, signal_length)
        self.input_name = InputName(input_name)

    def evaluate(self, bars: BarSet) -> OutputBundle:
        prices = bars.primary(self.input_name)
        variance = rolling_variance(prices, self.length).rename("Variance")
        std = rolling_std(prices, self.length).rename("StdDev")
        signal_line = _ma(self.signal_spec, std, bars).rename("Signal")
        average = _ma(self.average_spec, prices, bars)
        return OutputBundle(
            outputs={"StdDev": std, "Variance": variance, "Signal": signal_line},
            signals=volatility_signals(prices - average, std, signal_line),
            primary=std,
            name=self.name,
            metadata={'length': float(self.length), 'signal_length': float(self.signal_spec.length)},
        )


class TrendConfirmation(Indicator):
    """
    Dual-condition trend filter.

    Bullish while price > fast > slow, bearish while price < fast < slow.
    """

    name = "trend_confirmation"

    def __init__(self, fast: Optional[MovingAverageSpec] = None, slow: Optional[MovingAverageSpec] = None,
                 input_name: InputName = InputName.CLOSE):
        self.fast = fast or MovingAverageSpec(MovingAvgKind.EXPONENTIAL, 20)
        self.slow = slow or MovingAverageSpec(MovingAvgKind.EXPONENTIAL, 50)
        self.input_name = InputName(input_name)

    def evaluate(self, bars: BarSet) -> OutputBundle:
        prices = bars.primary(self.input_name)
        fast = _ma(self.fast, prices, bars).rename("Fast")
        slow = _ma(self.slow, prices, bars).rename("Slow")
        bullish = (prices > fast) & (fast > slow)
        bearish = (prices < fast) & (fast < slow)
        return OutputBundle(
            outputs={"Fast": fast, "Slow": slow},
            signals=condition_signals(bullish, bearish),
            primary=fast,
            name=self.name,
            metadata={'fast_length': float(self.fast.length), 'slow_length': float(self.slow.length)},
        )


__all__ = [
    'MovingAverageIndicator',
    'MovingAverageCross',
    'BollingerBands',
    'RelativeStrengthIndex',
    'ChandeMomentumOscillator',
    'MovingAverageConvergenceDivergence',
    'StandardDeviationVolatility',
    'TrendConfirmation',
]
