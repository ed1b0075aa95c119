"""
Signal classification decision tables.

Each function maps one bar's already-computed numbers (current and prior
deltas, raw values, thresholds) to a Signal. Nothing is remembered between
calls; classify() dispatches by SignalMode.
"""
from enum import Enum
from typing import Any, Callable, Dict, Union

from ..shared.types import Signal

Number = Union[int, float, bool]


class SignalMode(Enum):
    """Available classification tables."""
    CROSSOVER = "crossover"
    COMPARE = "compare"
    BOUNDED_OSCILLATOR = "bounded_oscillator"
    BAND_BREAKOUT = "band_breakout"
    DUAL_CONDITION = "dual_condition"
    BULLISH_BEARISH = "bullish_bearish"
    VOLATILITY = "volatility"


def _oriented(signal: Signal, is_reversed: bool) -> Signal:
    return signal.mirrored() if is_reversed else signal


def crossover_signal(current_delta: float, prior_delta: float, strict: bool = False,
                     is_reversed: bool = False) -> Signal:
    """
    Flag a sign change of the delta between the prior and current bar.

    Non-strict: BUY when the delta turns positive from <= 0.
    Strict: BUY only when the prior delta was strictly negative.
    SELL mirrors BUY; anything else is NEUTRAL.
    """
    if strict:
        bullish = current_delta > 0 and prior_delta < 0
        bearish = current_delta < 0 and prior_delta > 0
    else:
        bullish = current_delta > 0 and prior_delta <= 0
        bearish = current_delta < 0 and prior_delta >= 0
    if bullish:
        signal = Signal.BUY
    elif bearish:
        signal = Signal.SELL
    else:
        signal = Signal.NEUTRAL
    return _oriented(signal, is_reversed)


def compare_signal(current_delta: float, prior_delta: float, is_reversed: bool = False) -> Signal:
    """
    Slope table: strong when the delta keeps growing in its direction.

    STRONG_BUY   current > 0 and current > prior
    STRONG_SELL  current < 0 and current < prior
    BUY          current > 0
    SELL         current < 0
    NEUTRAL      current == 0
    """
    if current_delta > 0 and current_delta > prior_delta:
        signal = Signal.STRONG_BUY
    elif current_delta < 0 and current_delta < prior_delta:
        signal = Signal.STRONG_SELL
    elif current_delta > 0:
        signal = Signal.BUY
    elif current_delta < 0:
        signal = Signal.SELL
    else:
        signal = Signal.NEUTRAL
    return _oriented(signal, is_reversed)


def oscillator_signal(current_value: float, prior_value: float, overbought: float, oversold: float,
                      current_delta: float = 0.0, prior_delta: float = 0.0,
                      is_reversed: bool = False) -> Signal:
    """
    Bounded oscillator with overbought/oversold hysteresis.

    Threshold crossings take precedence: falling back through overbought is
    a SELL, rising back through oversold is a BUY. Otherwise the delta pair
    decides through the slope table.
    """
    if prior_value > overbought and current_value <= overbought:
        signal = Signal.SELL
    elif prior_value < oversold and current_value >= oversold:
        signal = Signal.BUY
    else:
        signal = compare_signal(current_delta, prior_delta)
    return _oriented(signal, is_reversed)


def band_signal(current_value: float, prior_value: float, upper: float, prior_upper: float,
                lower: float, prior_lower: float, is_reversed: bool = False) -> Signal:
    """
    Band breakout and re-entry.

    SELL         price reaches the upper band from inside (entering overbought)
    BUY          price reaches the lower band from inside (entering oversold)
    STRONG_SELL  price falls back inside from above the upper band
    STRONG_BUY   price rises back inside from below the lower band
    NEUTRAL      otherwise

    Touching a band counts as reaching it.
    """
    if prior_value < prior_upper and current_value >= upper:
        signal = Signal.SELL
    elif prior_value > prior_lower and current_value <= lower:
        signal = Signal.BUY
    elif prior_value > prior_upper and current_value < upper:
        signal = Signal.STRONG_SELL
    elif prior_value < prior_lower and current_value > lower:
        signal = Signal.STRONG_BUY
    else:
        signal = Signal.NEUTRAL
    return _oriented(signal, is_reversed)


def _active(condition: Number) -> bool:
    if isinstance(condition, bool):
        return condition
    return condition > 0


def condition_signal(bullish: Number, bearish: Number, is_reversed: bool = False) -> Signal:
    """
    Two independent conditions; numbers count as active when > 0.

    The bullish condition wins when both are active.
    """
    if _active(bullish):
        signal = Signal.BUY
    elif _active(bearish):
        signal = Signal.SELL
    else:
        signal = Signal.NEUTRAL
    return _oriented(signal, is_reversed)


def bullish_bearish_signal(bullish_slope: float, prior_bullish_slope: float,
                           bearish_slope: float, prior_bearish_slope: float,
                           is_reversed: bool = False) -> Signal:
    """Slope table applied to separate bullish and bearish measures."""
    if bullish_slope > 0 and bullish_slope > prior_bullish_slope:
        signal = Signal.STRONG_BUY
    elif bearish_slope < 0 and bearish_slope < prior_bearish_slope:
        signal = Signal.STRONG_SELL
    elif bullish_slope > 0:
        signal = Signal.BUY
    elif bearish_slope < 0:
        signal = Signal.SELL
    else:
        signal = Signal.NEUTRAL
    return _oriented(signal, is_reversed)


def volatility_signal(current_delta: float, prior_delta: float, volatility: float,
                      threshold: float, is_reversed: bool = False) -> Signal:
    """Slope table gated on volatility: quiet markets give NEUTRAL."""
    if volatility < threshold:
        return Signal.NEUTRAL
    return compare_signal(current_delta, prior_delta, is_reversed=is_reversed)


_TABLES: Dict[SignalMode, Callable[..., Signal]] = {
    SignalMode.CROSSOVER: lambda cur, prior, **kw: crossover_signal(cur, prior, **kw),
    SignalMode.COMPARE: lambda cur, prior, **kw: compare_signal(cur, prior, **kw),
    SignalMode.BOUNDED_OSCILLATOR: lambda cur, prior, **kw: oscillator_signal(
        current_delta=cur, prior_delta=prior, **kw),
    SignalMode.BAND_BREAKOUT: lambda cur, prior, **kw: band_signal(**kw),
    SignalMode.DUAL_CONDITION: lambda cur, prior, **kw: condition_signal(**kw),
    SignalMode.BULLISH_BEARISH: lambda cur, prior, **kw: bullish_bearish_signal(**kw),
    SignalMode.VOLATILITY: lambda cur, prior, **kw: volatility_signal(cur, prior, **kw),
}


def parse_mode(mode: Union[str, SignalMode]) -> SignalMode:
    if isinstance(mode, SignalMode):
        return mode
    try:
        return SignalMode(str(mode).strip().lower())
    except ValueError:
        valid = ', '.join(m.value for m in SignalMode)
        raise ValueError(f"Unknown signal mode '{mode}'. Valid modes: {valid}") from None


def classify(mode: Union[str, SignalMode], current_delta: float = 0.0, prior_delta: float = 0.0,
             **extras: Any) -> Signal:
    """
    Classify one bar.

    Args:
        mode: Which decision table to apply
        current_delta: Delta at this bar (e.g. price - average)
        prior_delta: Delta at the previous bar
        **extras: Mode-specific inputs, passed through by keyword:
            CROSSOVER: strict, is_reversed
            COMPARE: is_reversed
            BOUNDED_OSCILLATOR: current_value, prior_value, overbought, oversold, is_reversed
            BAND_BREAKOUT: current_value, prior_value, upper, prior_upper, lower, prior_lower,
                is_reversed
            DUAL_CONDITION: bullish, bearish, is_reversed
            BULLISH_BEARISH: bullish_slope, prior_bullish_slope, bearish_slope,
                prior_bearish_slope, is_reversed
            VOLATILITY: volatility, threshold, is_reversed

    Returns:
        Signal for this bar
    """
    return _TABLES[parse_mode(mode)](current_delta, prior_delta, **extras)
