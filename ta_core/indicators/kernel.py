"""
Moving-average kernel dispatcher.

compute_moving_average() is the single entry point: it looks the kind up
in one dispatch table, resolves the kind's tuning parameters and auxiliary
bar series, runs the kernel and returns an output of the same length (and,
for pandas input, the same index) as the input.
"""
import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, Dict, Iterable, Optional, Union

import numpy as np
import pandas as pd

from ..shared.exceptions import CalculationError
from ..shared.numeric import ArrayLike, clamp_overflow_array, to_array, wrap_like
from . import adaptive, exponential, filters, weighted
from .ma_kinds import KIND_INPUTS, MovingAverageSpec, MovingAvgKind

logger = logging.getLogger(__name__)

Kernel = Callable[..., np.ndarray]

_KERNELS: Dict[MovingAvgKind, Kernel] = {
    MovingAvgKind.SIMPLE: weighted.sma,
    MovingAvgKind.WEIGHTED: weighted.wma,
    MovingAvgKind.TRIANGULAR: weighted.triangular,
    MovingAvgKind.SYMMETRIC_WEIGHTED: weighted.symmetric_weighted,
    MovingAvgKind.HULL: weighted.hull,
    MovingAvgKind.LEAST_SQUARES: weighted.least_squares,
    MovingAvgKind.LINEAR_REGRESSION: weighted.linear_regression,
    MovingAvgKind.ARNAUD_LEGOUX: weighted.arnaud_legoux,
    MovingAvgKind.CUBED_WEIGHTED: weighted.cubed_weighted,
    MovingAvgKind.PARABOLIC_WEIGHTED: weighted.parabolic_weighted,
    MovingAvgKind.FIBONACCI_WEIGHTED: weighted.fibonacci_weighted,
    MovingAvgKind.HENDERSON_WEIGHTED: weighted.henderson_weighted,
    MovingAvgKind.VOLUME_WEIGHTED: weighted.volume_weighted,
    MovingAvgKind.VOLUME_WEIGHTED_AVERAGE_PRICE: weighted.volume_weighted_average_price,
    MovingAvgKind.TRIMEAN: weighted.trimean,

    MovingAvgKind.EXPONENTIAL: exponential.ema,
    MovingAvgKind.WILDERS: exponential.wilders,
    MovingAvgKind.DOUBLE_EXPONENTIAL: exponential.dema,
    MovingAvgKind.TRIPLE_EXPONENTIAL: exponential.tema,
    MovingAvgKind.QUADRUPLE_EXPONENTIAL: exponential.qema,
    MovingAvgKind.PENTUPLE_EXPONENTIAL: exponential.pema,
    MovingAvgKind.T3: exponential.t3,
    MovingAvgKind.ZERO_LAG_EXPONENTIAL: exponential.zero_lag_ema,
    MovingAvgKind.ZERO_LAG_TRIPLE_EXPONENTIAL: exponential.zero_lag_tema,
    MovingAvgKind.GENERALIZED_DOUBLE_EXPONENTIAL: exponential.generalized_dema,
    MovingAvgKind.MCGINLEY_DYNAMIC: exponential.mcginley_dynamic,
    MovingAvgKind.AHRENS: exponential.ahrens,
    MovingAvgKind.REGULARIZED_EXPONENTIAL: exponential.regularized_ema,
    MovingAvgKind.ZERO_LOW_LAG: exponential.zero_low_lag,

    MovingAvgKind.KAUFMAN_ADAPTIVE: adaptive.kaufman_adaptive,
    MovingAvgKind.POWERED_KAUFMAN_ADAPTIVE: adaptive.powered_kaufman_adaptive,
    MovingAvgKind.BRYANT_ADAPTIVE: adaptive.bryant_adaptive,
    MovingAvgKind.VARIABLE_INDEX_DYNAMIC: adaptive.variable_index_dynamic,
    MovingAvgKind.ADAPTIVE: adaptive.adaptive,
    MovingAvgKind.ADAPTIVE_EXPONENTIAL: adaptive.adaptive_exponential,
    MovingAvgKind.JURIK: adaptive.jurik,
    MovingAvgKind.VARIABLE_LENGTH: adaptive.variable_length,
    MovingAvgKind.EHLERS_FRACTAL_ADAPTIVE: adaptive.fractal_adaptive,
    MovingAvgKind.EHLERS_MESA_ADAPTIVE: adaptive.mesa_adaptive_line,
    MovingAvgKind.EHLERS_FOLLOWING_ADAPTIVE: adaptive.following_adaptive_line,

    MovingAvgKind.EHLERS_SUPER_SMOOTHER_2POLE: filters.super_smoother_2pole,
    MovingAvgKind.EHLERS_SUPER_SMOOTHER_2POLE_V2: filters.super_smoother_2pole_v2,
    MovingAvgKind.EHLERS_SUPER_SMOOTHER_3POLE: filters.super_smoother_3pole,
    MovingAvgKind.EHLERS_BUTTERWORTH_2POLE: filters.butterworth_2pole,
    MovingAvgKind.EHLERS_BUTTERWORTH_3POLE: filters.butterworth_3pole,
    MovingAvgKind.EHLERS_LAGUERRE: filters.laguerre,
    MovingAvgKind.EHLERS_HIGH_PASS: filters.high_pass,
    MovingAvgKind.EHLERS_ROOFING: filters.roofing,
    MovingAvgKind.EHLERS_DECYCLER: filters.decycler,
}


def supported_kinds():
    """Kinds the dispatcher can evaluate."""
    return list(_KERNELS)


def compute_moving_average(
    spec: MovingAverageSpec,
    values: ArrayLike,
    *,
    volume: Optional[ArrayLike] = None,
    high: Optional[ArrayLike] = None,
    low: Optional[ArrayLike] = None,
):
    """
    Evaluate one moving average over a series.

    Args:
        spec: Kind, length and tuning parameters
        values: Input series (pd.Series, ndarray or sequence)
        volume: Volume series, required by the volume-weighted kinds
        high: High series for channel-based kinds (defaults to values)
        low: Low series for channel-based kinds (defaults to values)

    Returns:
        Output of the same length as values; a pd.Series on the same index
        when values is a Series, otherwise an ndarray

    Raises:
        ValueError: If the kind is not supported or volume is missing
        CalculationError: If an auxiliary series has a different length
    """
    kernel = _KERNELS.get(spec.kind)
    if kernel is None:
        raise ValueError(f"Unsupported moving average kind: {spec.kind}")

    array = to_array(values)
    kwargs = spec.resolved_params()
    auxiliary = {'volume': volume, 'high': high, 'low': low}
    for name in KIND_INPUTS.get(spec.kind, ()):
        series = auxiliary[name]
        if series is None:
            if name == 'volume':
                raise ValueError(f"{spec.kind.value} requires a volume series")
            series = array
        series = to_array(series)
        if len(series) != len(array):
            raise CalculationError(
                f"{name} series has {len(series)} bars but the input has {len(array)}"
            )
        kwargs[name] = series

    logger.debug(f"Computing {spec.kind.value} (length={spec.length}, params={spec.resolved_params()}) over {len(array)} bars")
    if len(array) == 0:
        return wrap_like(values, np.zeros(0), name=spec.label)
    result = kernel(array, spec.length, **kwargs)
    return wrap_like(values, clamp_overflow_array(result), name=spec.label)


def moving_average(
    kind: Union[str, MovingAvgKind],
    length: int,
    values: ArrayLike,
    *,
    volume: Optional[ArrayLike] = None,
    high: Optional[ArrayLike] = None,
    low: Optional[ArrayLike] = None,
    **params: float,
):
    """Shorthand for compute_moving_average(MovingAverageSpec(kind, length, params), values)."""
    spec = MovingAverageSpec(kind=kind, length=length, params=params)
    return compute_moving_average(spec, values, volume=volume, high=high, low=low)


def _compute_block(spec: MovingAverageSpec, values, volume, high, low):
    """Run one spec and time it. Returns (label, series, elapsed)."""
    start = time.perf_counter()
    result = compute_moving_average(spec, values, volume=volume, high=high, low=low)
    return spec.label, result, time.perf_counter() - start


def compute_many(
    specs: Iterable[MovingAverageSpec],
    values: ArrayLike,
    *,
    volume: Optional[ArrayLike] = None,
    high: Optional[ArrayLike] = None,
    low: Optional[ArrayLike] = None,
    max_workers: Optional[int] = None,
    timings: Optional[Dict[str, float]] = None,
) -> Dict[str, Union[pd.Series, np.ndarray]]:
    """
    Evaluate several independent moving averages over the same input.

    Kernels share no state, so each spec runs in its own worker thread.
    Each recurrence itself is still computed bar by bar in order.

    Args:
        specs: Moving-average configurations (labels must be unique)
        values: Input series shared by all specs
        volume, high, low: Auxiliary series, as for compute_moving_average
        max_workers: Thread pool size (None lets the executor decide)
        timings: Optional dict; receives elapsed seconds per label

    Returns:
        Dict mapping spec.label to its output
    """
    specs = list(specs)
    labels = [spec.label for spec in specs]
    duplicates = sorted({label for label in labels if labels.count(label) > 1})
    if duplicates:
        raise ValueError(f"Duplicate moving average labels: {duplicates}")

    start = time.perf_counter()
    results: Dict[str, Union[pd.Series, np.ndarray]] = {}
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [
            executor.submit(_compute_block, spec, values, volume, high, low)
            for spec in specs
        ]
        for future in as_completed(futures):
            label, result, elapsed = future.result()
            results[label] = result
            if timings is not None:
                timings[label] = elapsed

    logger.info(f"Computed {len(specs)} moving averages in {time.perf_counter() - start:.3f}s")
    return {label: results[label] for label in labels}
