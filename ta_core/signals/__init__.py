"""
Signal classification module.

Converts numeric deltas (current vs. previous bar) into discrete signals.
Indicators calculate values; this module interprets them.
"""
from .classifier import (
    SignalMode,
    classify,
    crossover_signal,
    compare_signal,
    oscillator_signal,
    band_signal,
    condition_signal,
    bullish_bearish_signal,
    volatility_signal,
)
from .sweep import (
    crossover_signals,
    compare_signals,
    oscillator_signals,
    band_signals,
    condition_signals,
    bullish_bearish_signals,
    volatility_signals,
    signal_counts,
)
from .config import AnalysisConfig, MovingAverageConfig, SignalConfig
from .config_loader import load_config_from_yaml, save_config_to_yaml, config_from_dict

__all__ = [
    'SignalMode',
    'classify',
    'crossover_signal',
    'compare_signal',
    'oscillator_signal',
    'band_signal',
    'condition_signal',
    'bullish_bearish_signal',
    'volatility_signal',
    'crossover_signals',
    'compare_signals',
    'oscillator_signals',
    'band_signals',
    'condition_signals',
    'bullish_bearish_signals',
    'volatility_signals',
    'signal_counts',
    'AnalysisConfig',
    'MovingAverageConfig',
    'SignalConfig',
    'load_config_from_yaml',
    'save_config_to_yaml',
    'config_from_dict',
]
