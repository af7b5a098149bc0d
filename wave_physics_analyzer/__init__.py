"""Wave Physics Analyzer -- numeric core of an educational wave-physics demonstrator.

This package provides tools for:
- Defining periodic waves (sine, cosine, square, triangular, sawtooth)
- Superposing waves and sampling them in time or space
- Spectral analysis: radix-2 FFT/IFFT, windowing, one-sided spectra
- Harmonic extraction and total harmonic distortion
- Frequency-domain low-, high- and band-pass filtering
- Interference, beat, standing-wave and diffraction analysis

Key principles:
- No UI coupling: callers poll by re-sampling, nothing is pushed to them
- Deterministic: every result is a pure function of its inputs
- One configuration object (AnalysisProfile) for every tunable threshold

Main subpackages:
- analysis: WaveEngine, FourierAnalyzer, InterferenceCalculator
- models: WaveFunction, spectra, interference results, AnalysisProfile
"""

from .analysis import FourierAnalyzer, InterferenceCalculator, WaveEngine
from .models import AnalysisProfile, WaveFunction, WaveType

__all__ = [
    "AnalysisProfile",
    "FourierAnalyzer",
    "InterferenceCalculator",
    "WaveEngine",
    "WaveFunction",
    "WaveType",
]
