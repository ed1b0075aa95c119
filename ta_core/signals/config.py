"""
Analysis configuration.

Describes one indicator run: which input to read, which moving average to
apply and how to classify the result into signals. Config validation runs
at construction time (fail fast with clear errors).
"""
from dataclasses import dataclass, field
from typing import Dict, Optional

from ..shared.defaults import (
    DEFAULT_LENGTH, RSI_OVERBOUGHT, RSI_OVERSOLD, CROSSOVER_STRICT,
)
from ..shared.types import InputName
from ..indicators.ma_kinds import MovingAverageSpec, MovingAvgKind, parse_kind
from .classifier import SignalMode, parse_mode


def _validate_config(
    *,
    length: int,
    overbought: float,
    oversold: float,
    threshold: Optional[float] = None,
) -> None:
    """Validate kernel and signal parameters. Raises ValueError with clear message on failure."""
    if length < 1:
        raise ValueError(f"length must be >= 1, got {length}")
    if oversold >= overbought:
        raise ValueError(
            f"oversold ({oversold}) must be less than overbought ({overbought})"
        )
    if threshold is not None and threshold < 0:
        raise ValueError(f"threshold must be >= 0, got {threshold}")


@dataclass
class MovingAverageConfig:
    """Moving-average part of an analysis config."""
    kind: MovingAvgKind = MovingAvgKind.EXPONENTIAL
    length: int = DEFAULT_LENGTH
    params: Dict[str, float] = field(default_factory=dict)

    def __post_init__(self):
        self.kind = parse_kind(self.kind)
        # Builds (and so validates) the spec once up front
        self.to_spec()

    def to_spec(self) -> MovingAverageSpec:
        return MovingAverageSpec(kind=self.kind, length=self.length, params=self.params)


@dataclass
class SignalConfig:
    """How to turn the indicator output into signals."""
    mode: SignalMode = SignalMode.COMPARE
    strict: bool = CROSSOVER_STRICT
    is_reversed: bool = False
    overbought: float = RSI_OVERBOUGHT
    oversold: float = RSI_OVERSOLD
    threshold: float = 0.0

    def __post_init__(self):
        self.mode = parse_mode(self.mode)


@dataclass
class AnalysisConfig:
    """
    Complete configuration for one indicator run.

    Example:
        AnalysisConfig(
            name='ema_trend',
            moving_average=MovingAverageConfig(kind=MovingAvgKind.EXPONENTIAL, length=20),
            signal=SignalConfig(mode=SignalMode.CROSSOVER),
        )
    """
    name: str = "analysis"
    description: str = ""
    input_name: InputName = InputName.CLOSE
    moving_average: MovingAverageConfig = field(default_factory=MovingAverageConfig)
    signal: SignalConfig = field(default_factory=SignalConfig)

    def __post_init__(self):
        self.input_name = InputName(self.input_name)
        _validate_config(
            length=self.moving_average.length,
            overbought=self.signal.overbought,
            oversold=self.signal.oversold,
            threshold=self.signal.threshold,
        )

    def build_indicator(self):
        """Runnable indicator for this config."""
        from ..indicators.implementations import MovingAverageIndicator

        return MovingAverageIndicator(
            spec=self.moving_average.to_spec(),
            input_name=self.input_name,
            signal_config=self.signal,
        )
