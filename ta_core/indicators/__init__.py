"""
Technical indicators module.

Rolling statistics, the moving-average kernel dispatcher and a small set
of reference indicators composed from them.
"""
from .rolling import (
    RollingStats,
    rolling_max,
    rolling_min,
    rolling_mean,
    rolling_sum,
    rolling_variance,
    rolling_std,
    rolling_stats,
    rolling_percentile,
    rolling_median,
    highest_lowest,
)
from .ma_kinds import MovingAvgKind, MovingAverageSpec, KIND_PARAMETERS, KIND_INPUTS, parse_kind
from .kernel import compute_moving_average, moving_average, compute_many, supported_kinds
from .base import Indicator
from .implementations import (
    MovingAverageIndicator,
    MovingAverageCross,
    BollingerBands,
    RelativeStrengthIndex,
    ChandeMomentumOscillator,
    MovingAverageConvergenceDivergence,
    StandardDeviationVolatility,
    TrendConfirmation,
)

__all__ = [
    'RollingStats',
    'rolling_max',
    'rolling_min',
    'rolling_mean',
    'rolling_sum',
    'rolling_variance',
    'rolling_std',
    'rolling_stats',
    'rolling_percentile',
    'rolling_median',
    'highest_lowest',
    'MovingAvgKind',
    'MovingAverageSpec',
    'KIND_PARAMETERS',
    'KIND_INPUTS',
    'parse_kind',
    'compute_moving_average',
    'moving_average',
    'compute_many',
    'supported_kinds',
    'Indicator',
    'MovingAverageIndicator',
    'MovingAverageCross',
    'BollingerBands',
    'RelativeStrengthIndex',
    'ChandeMomentumOscillator',
    'MovingAverageConvergenceDivergence',
    'StandardDeviationVolatility',
    'TrendConfirmation',
]
