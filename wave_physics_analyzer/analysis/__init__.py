"""Numeric analysis package.

Design principle:
  - Models (``wave_physics_analyzer.models``) hold wave definitions, profiles and
    result containers.
  - Analysis consumes models and produces spectra, series and classifications.

Every function is a pure function of its inputs; the only mutable object is
:class:`~wave_physics_analyzer.analysis.engine.WaveEngine`, whose wave list the
caller owns and serializes.
"""

from .engine import WaveEngine
from .fourier import (
    FourierAnalyzer,
    band_pass_filter,
    calculate_thd,
    fft,
    find_harmonics,
    get_spectrum,
    high_pass_filter,
    ifft,
    low_pass_filter,
    next_power_of_two,
)
from .interference import InterferenceCalculator, find_extrema_nodes, find_local_extrema

__all__ = [
    "WaveEngine",
    "FourierAnalyzer",
    "band_pass_filter",
    "calculate_thd",
    "fft",
    "find_harmonics",
    "get_spectrum",
    "high_pass_filter",
    "ifft",
    "low_pass_filter",
    "next_power_of_two",
    "InterferenceCalculator",
    "find_extrema_nodes",
    "find_local_extrema",
]
