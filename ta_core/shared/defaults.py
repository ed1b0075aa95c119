"""
Centralized default values for kernel and indicator parameters.

This is the SINGLE SOURCE OF TRUTH for all parameter defaults.
All modules should import from here to ensure consistency.

Tuning constants are the published values of each formula. Asymmetric
clamp bounds are kept exactly as published.
"""
import sys

# Numeric limits
MAX_VALUE = sys.float_info.max  # Overflow clamp for powers and products
EXP_INPUT_CAP = 100.0  # exp() arguments are capped here before evaluation
MIN_LENGTH = 2  # Derived integer lengths never go below this
MAX_LENGTH = 530  # Derived integer lengths never go above this

# Generic lengths
DEFAULT_LENGTH = 14  # Fallback window for kernels and indicators

# Exponential family
EMA_MIN_ALPHA = 0.01  # Lower clamp for 2 / (length + 1)
EMA_MAX_ALPHA = 0.99  # Upper clamp for 2 / (length + 1)
T3_VOLUME_FACTOR = 0.7
GDEMA_FACTOR = 0.7
MCGINLEY_K = 0.6
REMA_LAMBDA = 0.5
ZERO_LOW_LAG = 1.4

# Fixed-window family
ALMA_OFFSET = 0.85
ALMA_SIGMA = 6.0

# Adaptive family
KAMA_FAST_LENGTH = 2
KAMA_SLOW_LENGTH = 30
AMA_FAST_LENGTH = 2
AMA_SLOW_LENGTH = 14
PKAMA_FACTOR = 3.0
BRYANT_MAX_LENGTH = 100  # Literal cap on the derived length
BRYANT_TREND = -1.0
JURIK_PHASE = 50.0
JURIK_POWER = 2.0
VLMA_MIN_LENGTH = 5
MAMA_FAST_ALPHA = 0.5
MAMA_SLOW_ALPHA = 0.05
MAMA_MIN_PERIOD = 6.0  # Dominant cycle period clamp (bars)
MAMA_MAX_PERIOD = 50.0
FRAMA_MIN_ALPHA = 0.01

# Ehlers filter bank
LAGUERRE_GAMMA = 0.8
HIGH_PASS_MULT = 1.0
ROOFING_LOWER_LENGTH = 10

# Signal classification
RSI_LENGTH = 14
RSI_SIGNAL_LENGTH = 3
RSI_OVERBOUGHT = 70  # Crossing down through this level is a sell
RSI_OVERSOLD = 30  # Crossing up through this level is a buy
CMO_OVERBOUGHT = 50
CMO_OVERSOLD = -50
BOLLINGER_LENGTH = 20
BOLLINGER_STD_MULT = 2.0
MACD_FAST = 12  # Standard default
MACD_SLOW = 26  # Standard default
MACD_SIGNAL = 9  # Standard default
STDDEV_LENGTH = 20
STDDEV_SIGNAL_LENGTH = 14
CROSSOVER_STRICT = False  # Non-strict: a prior delta of exactly zero counts
