from .profile import DEFAULT_PROFILE, WINDOWS, AnalysisProfile, normalize_window
from .results import (
    InterferenceNode,
    InterferenceResult,
    InterferenceType,
    IntensityPattern,
    NodeType,
    Phenomenon,
    WaveAnalysis,
)
from .spectrum import FrequencyBin, FrequencySpectrum, Harmonic
from .waves import WaveFunction, WaveType

__all__ = [
    "AnalysisProfile",
    "DEFAULT_PROFILE",
    "WINDOWS",
    "normalize_window",
    "InterferenceNode",
    "InterferenceResult",
    "InterferenceType",
    "IntensityPattern",
    "NodeType",
    "Phenomenon",
    "WaveAnalysis",
    "FrequencyBin",
    "FrequencySpectrum",
    "Harmonic",
    "WaveFunction",
    "WaveType",
]
