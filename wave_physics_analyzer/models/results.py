from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

import numpy as np


class InterferenceType(str, Enum):
    CONSTRUCTIVE = "constructive"
    DESTRUCTIVE = "destructive"
    PARTIAL = "partial"
    NO_INTERFERENCE = "no_interference"


class NodeType(str, Enum):
    NODE = "node"  # local amplitude minimum
    ANTINODE = "antinode"  # local amplitude maximum


class Phenomenon(str, Enum):
    """Qualitative label for a wave collection.

    Values are the display strings, so ``Phenomenon.BEATING == "Beating"``.
    """

    NO_WAVES = "No waves"
    SINGLE_WAVE = "Single wave"
    BEATING = "Beating"
    RESONANCE = "Resonance"
    SUPERPOSITION = "Superposition"


def _empty() -> np.ndarray:
    return np.zeros(0, dtype=float)


@dataclass(frozen=True)
class InterferenceNode:
    position: float
    amplitude: float
    kind: NodeType


@dataclass(frozen=True)
class InterferenceResult:
    """Outcome of a two- or N-wave interference analysis.

    Attributes
    ----------
    type:
        Interference class.
    amplitude:
        Peak absolute value of the sampled superposition.
    phase:
        Relative phase ``phase2 - phase1`` in degrees, normalised to ``[0, 360)``.
    node_positions, antinode_positions:
        Positions of amplitude minima / maxima, ascending.
    beat_frequency:
        ``|f1 - f2|`` in Hz.
    description:
        Human-readable summary.
    """

    type: InterferenceType
    amplitude: float = 0.0
    phase: float = 0.0
    node_positions: np.ndarray = field(default_factory=_empty)
    antinode_positions: np.ndarray = field(default_factory=_empty)
    beat_frequency: float = 0.0
    description: str = ""


@dataclass(frozen=True)
class WaveAnalysis:
    """Summary statistics of a sampled wave series."""

    max_amplitude: float
    min_amplitude: float
    rms_amplitude: float
    frequency: float
    period: float
    energy: float
    phenomenon: str


@dataclass(frozen=True)
class IntensityPattern:
    """Normalised intensity sampled across a screen.

    ``maxima`` and ``minima`` hold the screen positions of strict interior
    intensity extrema.
    """

    positions: np.ndarray
    intensity: np.ndarray
    maxima: np.ndarray = field(default_factory=_empty)
    minima: np.ndarray = field(default_factory=_empty)
