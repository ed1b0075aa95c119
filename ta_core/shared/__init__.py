"""
Shared types, defaults and numeric helpers.

This module provides:
- Signal, InputName, BarSet and OutputBundle
- Centralized default values for all kernel and indicator parameters
- The prior-or-default / safe arithmetic helpers every kernel uses
"""
from .types import Signal, InputName, BarSet, OutputBundle
from .exceptions import CalculationError
from .numeric import (
    prior_or_default, min_or_max, clamp_length, safe_divide,
    safe_pow, safe_exp, safe_log, safe_sqrt, SeriesAccumulator, combine,
)

__all__ = [
    'Signal',
    'InputName',
    'BarSet',
    'OutputBundle',
    'CalculationError',
    'prior_or_default', 'min_or_max', 'clamp_length', 'safe_divide',
    'safe_pow', 'safe_exp', 'safe_log', 'safe_sqrt', 'SeriesAccumulator', 'combine',
]
