"""Wave superposition engine.

A :class:`WaveEngine` owns an insertion-ordered list of
:class:`~wave_physics_analyzer.models.waves.WaveFunction` objects and samples
their pointwise sum in time or space.  The list index is the only handle
callers hold on a wave.

The engine is not synchronized.  Mutation (``add_wave``, ``remove_wave``,
``clear_waves``) and sampling on the same instance from different threads
must be serialized by the caller.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Tuple

import numpy as np
import pandas as pd
from numpy.typing import ArrayLike

from wave_physics_analyzer.models.profile import DEFAULT_PROFILE, AnalysisProfile
from wave_physics_analyzer.models.results import Phenomenon, WaveAnalysis
from wave_physics_analyzer.models.waves import ArrayOrFloat, WaveFunction

logger = logging.getLogger(__name__)


def _sample_count(extent: float, sample_rate: float) -> int:
    if sample_rate <= 0:
        raise ValueError(f"sample_rate must be > 0, got {sample_rate}")
    return max(int(math.floor(extent * sample_rate)), 0)


class WaveEngine:
    """Owns a collection of waves and evaluates their superposition.

    Parameters
    ----------
    velocity:
        Propagation speed stored for callers, e.g. to pass to
        :meth:`WaveFunction.wavelength`.  The engine itself does not read it.
        Defaults to ``profile.velocity``.
    profile:
        Thresholds for phenomenon detection.
    """

    def __init__(self, velocity: Optional[float] = None, profile: Optional[AnalysisProfile] = None) -> None:
        self.profile = profile if profile is not None else DEFAULT_PROFILE
        self.velocity = float(self.profile.velocity if velocity is None else velocity)
        self._waves: List[WaveFunction] = []

    # ------------------------------------------------------------------
    # Wave management
    # ------------------------------------------------------------------

    def add_wave(self, wave: WaveFunction) -> int:
        """Append ``wave`` and return its index."""
        self._waves.append(wave)
        return len(self._waves) - 1

    def remove_wave(self, index: int) -> None:
        """Remove the wave at ``index``; out-of-range indices are ignored."""
        if 0 <= index < len(self._waves):
            del self._waves[index]
        else:
            logger.debug("remove_wave: index %d out of range (%d waves), ignored", index, len(self._waves))

    def clear_waves(self) -> None:
        self._waves.clear()

    def get_wave(self, index: int) -> Optional[WaveFunction]:
        if 0 <= index < len(self._waves):
            return self._waves[index]
        return None

    @property
    def waves(self) -> Tuple[WaveFunction, ...]:
        return tuple(self._waves)

    @property
    def wave_count(self) -> int:
        return len(self._waves)

    def __len__(self) -> int:
        return len(self._waves)

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def evaluate_superposition(self, x: ArrayOrFloat, t: ArrayOrFloat) -> ArrayOrFloat:
        """Sum of all waves at ``(x, t)``; ``0`` for an empty engine.

        Array arguments broadcast and return an array.
        """
        shape = np.broadcast(np.asarray(x), np.asarray(t)).shape
        total = np.zeros(shape, dtype=float)
        for wave in self._waves:
            total = total + wave.evaluate(x, t)
        if total.ndim == 0:
            return float(total)
        return total

    def evaluate_wave(self, index: int, x: ArrayOrFloat, t: ArrayOrFloat) -> ArrayOrFloat:
        wave = self.get_wave(index)
        if wave is None:
            return 0.0
        return wave.evaluate(x, t)

    # ------------------------------------------------------------------
    # Series generation
    # ------------------------------------------------------------------

    def generate_time_series(self, duration: float, sample_rate: float, position: float = 0.0) -> np.ndarray:
        """Sample the superposition at ``t_i = i / sample_rate``.

        Returns ``floor(duration * sample_rate)`` samples.
        """
        n = _sample_count(duration, sample_rate)
        t = np.arange(n, dtype=float) / float(sample_rate)
        return np.asarray(self.evaluate_superposition(position, t), dtype=float).reshape(n)

    def generate_detailed_time_series(self, duration: float, sample_rate: float, position: float = 0.0) -> pd.DataFrame:
        """Time series with finite-difference kinematics.

        Returns
        -------
        pandas.DataFrame
            Columns ``t``, ``amplitude``, ``velocity``, ``acceleration``.
            ``velocity[i] = (y[i] - y[i-1]) * fs`` with ``velocity[0] = 0``;
            ``acceleration[i] = (y[i] - 2*y[i-1] + y[i-2]) * fs**2`` with the
            first two samples set to 0.
        """
        y = self.generate_time_series(duration, sample_rate, position)
        fs = float(sample_rate)
        n = y.size

        velocity = np.zeros(n, dtype=float)
        acceleration = np.zeros(n, dtype=float)
        if n > 1:
            velocity[1:] = np.diff(y) * fs
        if n > 2:
            acceleration[2:] = (y[2:] - 2.0 * y[1:-1] + y[:-2]) * fs * fs

        return pd.DataFrame(
            {
                "t": np.arange(n, dtype=float) / fs,
                "amplitude": y,
                "velocity": velocity,
                "acceleration": acceleration,
            }
        )

    def generate_spatial_series(self, length: float, sample_rate: float, time: float = 0.0) -> np.ndarray:
        """Sample the superposition at ``x_i = i / sample_rate`` for a fixed ``time``."""
        n = _sample_count(length, sample_rate)
        x = np.arange(n, dtype=float) / float(sample_rate)
        return np.asarray(self.evaluate_superposition(x, np.full(n, float(time))), dtype=float).reshape(n)

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------

    def analyze_waves(self, data: ArrayLike, sample_rate: float) -> WaveAnalysis:
        """Basic statistics of a sampled series plus the engine's own labels.

        ``sample_rate`` is accepted alongside the series and not used.
        """
        y = np.asarray(data, dtype=float).ravel()
        if y.size == 0:
            return WaveAnalysis(0.0, 0.0, 0.0, 0.0, 0.0, 0.0, "No data")

        rms = float(np.sqrt(np.mean(y * y)))
        freq = self.get_dominant_frequency()
        return WaveAnalysis(
            max_amplitude=float(y.max()),
            min_amplitude=float(y.min()),
            rms_amplitude=rms,
            frequency=freq,
            period=1.0 / freq if freq > 0 else 0.0,
            energy=0.5 * rms * rms,
            phenomenon=self.detect_phenomenon().value,
        )

    def _frequencies(self) -> np.ndarray:
        return np.array([w.frequency for w in self._waves], dtype=float)

    def calculate_beat_frequency(self) -> float:
        """Smallest positive gap between sorted wave frequencies (0 if none)."""
        if len(self._waves) < 2:
            return 0.0
        gaps = np.diff(np.sort(self._frequencies()))
        gaps = gaps[gaps > 0]
        if gaps.size == 0:
            return 0.0
        return float(gaps.min())

    def detect_interference(self) -> bool:
        return len(self._waves) > 1

    def _has_resonance(self) -> bool:
        f = self._frequencies()
        tol = self.profile.resonance_tolerance_hz
        for i in range(f.size):
            for j in range(i + 1, f.size):
                if abs(f[i] - f[j]) < tol:
                    return True
        return False

    def detect_phenomenon(self) -> Phenomenon:
        """Classify the collection: no waves, single, beating, resonance or plain superposition."""
        if not self._waves:
            return Phenomenon.NO_WAVES
        if len(self._waves) == 1:
            return Phenomenon.SINGLE_WAVE

        beat = self.calculate_beat_frequency()
        if 0.0 < beat < self.profile.beat_max_hz:
            return Phenomenon.BEATING
        if self._has_resonance():
            return Phenomenon.RESONANCE
        return Phenomenon.SUPERPOSITION

    def calculate_total_energy(self) -> float:
        """Sum of individual wave energies.

        Cross terms between waves are ignored, so this is not the exact energy
        of the superposition.
        """
        return float(sum(w.energy for w in self._waves))

    def _strongest(self) -> Optional[WaveFunction]:
        if not self._waves:
            return None
        # max() keeps the first of equal keys
        return max(self._waves, key=lambda w: w.amplitude)

    def get_max_amplitude(self) -> float:
        wave = self._strongest()
        return 0.0 if wave is None else float(wave.amplitude)

    def get_dominant_frequency(self) -> float:
        wave = self._strongest()
        return 0.0 if wave is None else float(wave.frequency)
