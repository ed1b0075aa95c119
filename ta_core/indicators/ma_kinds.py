"""
Moving-average kinds and their parameter payloads.

MovingAvgKind is the closed tag; MovingAverageSpec carries the tag, the
window length and up to three named tuning parameters. Together they fully
determine a kernel's output for a given input series.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Mapping, Tuple, Union

from ..shared.defaults import (
    DEFAULT_LENGTH,
    ALMA_OFFSET, ALMA_SIGMA,
    T3_VOLUME_FACTOR, GDEMA_FACTOR, MCGINLEY_K, REMA_LAMBDA, ZERO_LOW_LAG,
    KAMA_FAST_LENGTH, KAMA_SLOW_LENGTH, AMA_FAST_LENGTH, AMA_SLOW_LENGTH,
    PKAMA_FACTOR, BRYANT_MAX_LENGTH, BRYANT_TREND, JURIK_PHASE, JURIK_POWER,
    VLMA_MIN_LENGTH, MAMA_FAST_ALPHA, MAMA_SLOW_ALPHA,
    LAGUERRE_GAMMA, HIGH_PASS_MULT, ROOFING_LOWER_LENGTH,
)

MAX_PARAMETERS = 3


class MovingAvgKind(Enum):
    """Supported moving-average recurrences."""
    # Fixed-window
    SIMPLE = "simple"
    WEIGHTED = "weighted"
    TRIANGULAR = "triangular"
    SYMMETRIC_WEIGHTED = "symmetric_weighted"
    HULL = "hull"
    LEAST_SQUARES = "least_squares"
    LINEAR_REGRESSION = "linear_regression"
    ARNAUD_LEGOUX = "arnaud_legoux"
    CUBED_WEIGHTED = "cubed_weighted"
    PARABOLIC_WEIGHTED = "parabolic_weighted"
    FIBONACCI_WEIGHTED = "fibonacci_weighted"
    HENDERSON_WEIGHTED = "henderson_weighted"
    VOLUME_WEIGHTED = "volume_weighted"
    VOLUME_WEIGHTED_AVERAGE_PRICE = "volume_weighted_average_price"
    TRIMEAN = "trimean"

    # Exponential family
    EXPONENTIAL = "exponential"
    WILDERS = "wilders"
    DOUBLE_EXPONENTIAL = "double_exponential"
    TRIPLE_EXPONENTIAL = "triple_exponential"
    QUADRUPLE_EXPONENTIAL = "quadruple_exponential"
    PENTUPLE_EXPONENTIAL = "pentuple_exponential"
    T3 = "t3"
    ZERO_LAG_EXPONENTIAL = "zero_lag_exponential"
    ZERO_LAG_TRIPLE_EXPONENTIAL = "zero_lag_triple_exponential"
    GENERALIZED_DOUBLE_EXPONENTIAL = "generalized_double_exponential"
    MCGINLEY_DYNAMIC = "mcginley_dynamic"
    AHRENS = "ahrens"
    REGULARIZED_EXPONENTIAL = "regularized_exponential"
    ZERO_LOW_LAG = "zero_low_lag"

    # Adaptive
    KAUFMAN_ADAPTIVE = "kaufman_adaptive"
    POWERED_KAUFMAN_ADAPTIVE = "powered_kaufman_adaptive"
    BRYANT_ADAPTIVE = "bryant_adaptive"
    VARIABLE_INDEX_DYNAMIC = "variable_index_dynamic"
    ADAPTIVE = "adaptive"
    ADAPTIVE_EXPONENTIAL = "adaptive_exponential"
    JURIK = "jurik"
    VARIABLE_LENGTH = "variable_length"
    EHLERS_FRACTAL_ADAPTIVE = "ehlers_fractal_adaptive"
    EHLERS_MESA_ADAPTIVE = "ehlers_mesa_adaptive"
    EHLERS_FOLLOWING_ADAPTIVE = "ehlers_following_adaptive"

    # Ehlers filter bank
    EHLERS_SUPER_SMOOTHER_2POLE = "ehlers_super_smoother_2pole"
    EHLERS_SUPER_SMOOTHER_2POLE_V2 = "ehlers_super_smoother_2pole_v2"
    EHLERS_SUPER_SMOOTHER_3POLE = "ehlers_super_smoother_3pole"
    EHLERS_BUTTERWORTH_2POLE = "ehlers_butterworth_2pole"
    EHLERS_BUTTERWORTH_3POLE = "ehlers_butterworth_3pole"
    EHLERS_LAGUERRE = "ehlers_laguerre"
    EHLERS_HIGH_PASS = "ehlers_high_pass"
    EHLERS_ROOFING = "ehlers_roofing"
    EHLERS_DECYCLER = "ehlers_decycler"


# Tuning parameters per kind, with defaults. Kinds not listed take none.
KIND_PARAMETERS: Dict[MovingAvgKind, Dict[str, float]] = {
    MovingAvgKind.ARNAUD_LEGOUX: {'offset': ALMA_OFFSET, 'sigma': ALMA_SIGMA},
    MovingAvgKind.T3: {'v_factor': T3_VOLUME_FACTOR},
    MovingAvgKind.GENERALIZED_DOUBLE_EXPONENTIAL: {'factor': GDEMA_FACTOR},
    MovingAvgKind.MCGINLEY_DYNAMIC: {'k': MCGINLEY_K},
    MovingAvgKind.REGULARIZED_EXPONENTIAL: {'lambda_': REMA_LAMBDA},
    MovingAvgKind.ZERO_LOW_LAG: {'lag': ZERO_LOW_LAG},
    MovingAvgKind.KAUFMAN_ADAPTIVE: {'fast_length': KAMA_FAST_LENGTH, 'slow_length': KAMA_SLOW_LENGTH},
    MovingAvgKind.POWERED_KAUFMAN_ADAPTIVE: {'factor': PKAMA_FACTOR},
    MovingAvgKind.BRYANT_ADAPTIVE: {'max_length': BRYANT_MAX_LENGTH, 'trend': BRYANT_TREND},
    MovingAvgKind.ADAPTIVE: {'fast_length': AMA_FAST_LENGTH, 'slow_length': AMA_SLOW_LENGTH},
    MovingAvgKind.JURIK: {'phase': JURIK_PHASE, 'power': JURIK_POWER},
    MovingAvgKind.VARIABLE_LENGTH: {'min_length': VLMA_MIN_LENGTH},
    MovingAvgKind.EHLERS_MESA_ADAPTIVE: {'fast_alpha': MAMA_FAST_ALPHA, 'slow_alpha': MAMA_SLOW_ALPHA},
    MovingAvgKind.EHLERS_FOLLOWING_ADAPTIVE: {'fast_alpha': MAMA_FAST_ALPHA, 'slow_alpha': MAMA_SLOW_ALPHA},
    MovingAvgKind.EHLERS_LAGUERRE: {'gamma': LAGUERRE_GAMMA},
    MovingAvgKind.EHLERS_HIGH_PASS: {'mult': HIGH_PASS_MULT},
    MovingAvgKind.EHLERS_ROOFING: {'lower_length': ROOFING_LOWER_LENGTH},
}

# Auxiliary bar series a kind reads besides its input.
KIND_INPUTS: Dict[MovingAvgKind, Tuple[str, ...]] = {
    MovingAvgKind.VOLUME_WEIGHTED: ('volume',),
    MovingAvgKind.VOLUME_WEIGHTED_AVERAGE_PRICE: ('volume',),
    MovingAvgKind.ADAPTIVE: ('high', 'low'),
    MovingAvgKind.ADAPTIVE_EXPONENTIAL: ('high', 'low'),
    MovingAvgKind.EHLERS_FRACTAL_ADAPTIVE: ('high', 'low'),
}


@dataclass(frozen=True)
class MovingAverageSpec:
    """
    One moving-average configuration: kind, length and tuning parameters.

    Validation runs at construction time (fail fast with clear errors).
    Parameters not given fall back to the kind's documented defaults.
    """
    kind: MovingAvgKind
    length: int = DEFAULT_LENGTH
    params: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, 'kind', parse_kind(self.kind))
        object.__setattr__(self, 'params', dict(self.params))
        if self.length < 1:
            raise ValueError(f"length must be >= 1, got {self.length}")
        if len(self.params) > MAX_PARAMETERS:
            raise ValueError(
                f"{self.kind.value} accepts at most {MAX_PARAMETERS} parameters, got {len(self.params)}"
            )
        allowed = KIND_PARAMETERS.get(self.kind, {})
        unknown = sorted(set(self.params) - set(allowed))
        if unknown:
            raise ValueError(
                f"Unknown parameter(s) {unknown} for {self.kind.value}; "
                f"supported: {sorted(allowed) or 'none'}"
            )

    def resolved_params(self) -> Dict[str, float]:
        """Kind defaults overridden by explicitly given parameters."""
        resolved = dict(KIND_PARAMETERS.get(self.kind, {}))
        resolved.update(self.params)
        return resolved

    @property
    def label(self) -> str:
        """
        Stable name for this configuration, e.g. 'exponential_20'.

        Parameters that differ from the kind's defaults are appended in name
        order, e.g. 'arnaud_legoux_9_sigma=2'.
        """
        defaults = KIND_PARAMETERS.get(self.kind, {})
        overrides = "".join(
            f"_{name}={value:g}" for name, value in sorted(self.params.items())
            if value != defaults.get(name)
        )
        return f"{self.kind.value}_{self.length}{overrides}"


def parse_kind(kind: Union[str, MovingAvgKind]) -> MovingAvgKind:
    """Accept a MovingAvgKind or its string value ('exponential', 'EXPONENTIAL')."""
    if isinstance(kind, MovingAvgKind):
        return kind
    name = str(kind).strip().lower()
    try:
        return MovingAvgKind(name)
    except ValueError:
        valid = ', '.join(k.value for k in MovingAvgKind)
        raise ValueError(f"Unknown moving average kind '{kind}'. Valid kinds: {valid}") from None
