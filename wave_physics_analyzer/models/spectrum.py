from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class FrequencyBin:
    """One sample of a one-sided spectrum."""

    frequency: float
    magnitude: float
    phase: float


@dataclass(frozen=True)
class Harmonic:
    """A detected harmonic.

    ``order`` is 1 for the fundamental, 2 for the second harmonic, and so on.
    """

    frequency: float
    amplitude: float
    phase: float
    order: int


def _empty() -> np.ndarray:
    return np.zeros(0, dtype=float)


@dataclass(frozen=True)
class FrequencySpectrum:
    """One-sided magnitude/phase spectrum of a real signal.

    Attributes
    ----------
    frequencies, magnitudes, phases:
        Parallel arrays of shape ``(fft_size//2 + 1,)`` in ascending frequency
        order (DC through Nyquist).  Magnitudes are amplitude-scaled
        (interior bins ``x2/N``, DC and Nyquist ``x1/N``); phases in radians.
    sample_rate:
        Sampling rate of the analysed signal (Hz).
    frequency_resolution:
        Bin spacing ``sample_rate / fft_size``.
    max_frequency:
        Nyquist frequency ``sample_rate / 2``.
    harmonics:
        Harmonics detected on this spectrum, ascending order.
    window:
        Name of the window applied before the transform.
    fft_size:
        Transform length after zero-padding.
    warnings:
        Non-fatal notes produced while building the spectrum.
    """

    frequencies: np.ndarray = field(default_factory=_empty)
    magnitudes: np.ndarray = field(default_factory=_empty)
    phases: np.ndarray = field(default_factory=_empty)

    sample_rate: float = 0.0
    frequency_resolution: float = 0.0
    max_frequency: float = 0.0

    harmonics: Tuple[Harmonic, ...] = ()
    window: str = "hanning"
    fft_size: int = 0
    warnings: tuple[str, ...] = ()

    def __len__(self) -> int:
        return int(self.frequencies.size)

    @property
    def is_empty(self) -> bool:
        return self.frequencies.size == 0

    @property
    def bins(self) -> Tuple[FrequencyBin, ...]:
        return tuple(
            FrequencyBin(frequency=float(f), magnitude=float(m), phase=float(p))
            for f, m, p in zip(self.frequencies, self.magnitudes, self.phases)
        )

    def to_frame(self) -> pd.DataFrame:
        """Bins as a DataFrame with columns ``frequency``, ``magnitude``, ``phase``."""
        return pd.DataFrame(
            {
                "frequency": np.asarray(self.frequencies, dtype=float),
                "magnitude": np.asarray(self.magnitudes, dtype=float),
                "phase": np.asarray(self.phases, dtype=float),
            }
        )

    def harmonics_frame(self) -> pd.DataFrame:
        """Detected harmonics as a DataFrame indexed by order."""
        rows = [
            {"order": h.order, "frequency": h.frequency, "amplitude": h.amplitude, "phase": h.phase}
            for h in self.harmonics
        ]
        df = pd.DataFrame(rows, columns=["order", "frequency", "amplitude", "phase"])
        return df.set_index("order")
