"""
Core technical-analysis primitives.

Provides unified interfaces for:
- Rolling window statistics (max, min, mean, population std)
- Moving-average kernels behind a single dispatcher
- Signal classification (crossover, oscillator, band breakout, dual condition)
- A small catalog of reference indicators built from the above
"""

__version__ = "0.1.0"
