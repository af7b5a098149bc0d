"""Interference, beat, standing-wave and diffraction analysis.

All samplers here share one uniform grid helper and one strict local-extrema
finder, so nodes of a superposition, nodes of a standing wave and fringes of a
diffraction pattern are located the same way.

Functions
---------
find_local_extrema
    Indices of strict interior local maxima or minima.
find_extrema_nodes
    Classify strict extrema of an amplitude profile into nodes and antinodes.

:class:`InterferenceCalculator` holds the wave-level operations.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from typing import List, Optional, Sequence

import numpy as np
from numpy.typing import ArrayLike

from wave_physics_analyzer.models.profile import DEFAULT_PROFILE, AnalysisProfile
from wave_physics_analyzer.models.results import (
    InterferenceNode,
    InterferenceResult,
    InterferenceType,
    IntensityPattern,
    NodeType,
)
from wave_physics_analyzer.models.waves import ArrayOrFloat, WaveFunction

logger = logging.getLogger(__name__)


# =====================================================================
#  Sampling and extrema helpers
# =====================================================================

def _check_points(num_points: int) -> int:
    num_points = int(num_points)
    if num_points <= 0:
        raise ValueError(f"num_points must be > 0, got {num_points}")
    return num_points


def sample_positions(length: float, num_points: int) -> np.ndarray:
    """``num_points`` evenly spaced positions over ``[0, length)``."""
    return np.linspace(0.0, float(length), _check_points(num_points), endpoint=False)


def screen_positions(screen_width: float, num_points: int) -> np.ndarray:
    """``num_points`` positions spanning ``[-width/2, width/2]`` (both ends included)."""
    half = 0.5 * float(screen_width)
    return np.linspace(-half, half, _check_points(num_points))


def find_local_extrema(data: ArrayLike, find_maxima: bool = True) -> np.ndarray:
    """Indices of strict interior local maxima (or minima).

    The first and last samples are never reported since they lack a neighbour
    on one side.
    """
    d = np.asarray(data, dtype=float)
    if d.ndim != 1:
        raise ValueError(f"data must be 1D, got shape {d.shape}")
    if d.size < 3:
        return np.zeros(0, dtype=int)

    mid = d[1:-1]
    if find_maxima:
        hit = (mid > d[:-2]) & (mid > d[2:])
    else:
        hit = (mid < d[:-2]) & (mid < d[2:])
    return np.nonzero(hit)[0] + 1


def find_extrema_nodes(
    amplitudes: ArrayLike,
    positions: ArrayLike,
    threshold: float = 0.1,
) -> List[InterferenceNode]:
    """Nodes and antinodes of an amplitude profile, in position order.

    A strict local minimum below ``threshold`` is a NODE; a strict local
    maximum at or above ``threshold`` is an ANTINODE.
    """
    a = np.asarray(amplitudes, dtype=float)
    x = np.asarray(positions, dtype=float)
    if a.shape != x.shape:
        raise ValueError(f"amplitudes and positions must match, got {a.shape} and {x.shape}")

    found = []
    for i in find_local_extrema(a, find_maxima=False):
        if a[i] < threshold:
            found.append((i, NodeType.NODE))
    for i in find_local_extrema(a, find_maxima=True):
        if a[i] >= threshold:
            found.append((i, NodeType.ANTINODE))

    found.sort(key=lambda item: item[0])
    return [InterferenceNode(position=float(x[i]), amplitude=float(a[i]), kind=kind) for i, kind in found]


def _split_nodes(nodes: Sequence[InterferenceNode]) -> tuple[np.ndarray, np.ndarray]:
    node_pos = np.array([n.position for n in nodes if n.kind is NodeType.NODE], dtype=float)
    anti_pos = np.array([n.position for n in nodes if n.kind is NodeType.ANTINODE], dtype=float)
    return node_pos, anti_pos


def calculate_rms_amplitude(data: ArrayLike) -> float:
    d = np.asarray(data, dtype=float)
    if d.size == 0:
        return 0.0
    return float(np.sqrt(np.mean(d * d)))


def _describe(result: InterferenceResult) -> str:
    if result.type is InterferenceType.CONSTRUCTIVE:
        text = "Constructive interference - waves reinforce each other"
    elif result.type is InterferenceType.DESTRUCTIVE:
        text = "Destructive interference - waves cancel each other"
    elif result.type is InterferenceType.PARTIAL:
        text = "Partial interference"
        if result.beat_frequency > 0:
            text += f" with beating at {result.beat_frequency:g} Hz"
    else:
        text = "No interference detected"

    if result.node_positions.size:
        text += f". {result.node_positions.size} nodes detected"
    if result.antinode_positions.size:
        text += f". {result.antinode_positions.size} antinodes detected"
    return text


# =====================================================================
#  Calculator
# =====================================================================

class InterferenceCalculator:
    """Interference analysis of two or more waves.

    Tolerances and thresholds default to the values of ``profile``.  The
    calculator holds no mutable state.
    """

    def __init__(self, profile: Optional[AnalysisProfile] = None) -> None:
        self.profile = profile if profile is not None else DEFAULT_PROFILE

    # ------------------------------------------------------------------
    # Superposition
    # ------------------------------------------------------------------

    def calculate_total_amplitude(
        self,
        waves: Sequence[WaveFunction],
        position: ArrayOrFloat,
        time: ArrayOrFloat,
    ) -> ArrayOrFloat:
        shape = np.broadcast(np.asarray(position), np.asarray(time)).shape
        total = np.zeros(shape, dtype=float)
        for wave in waves:
            total = total + wave.evaluate(position, time)
        if total.ndim == 0:
            return float(total)
        return total

    def _sample_total(self, waves: Sequence[WaveFunction], time: float, positions: np.ndarray) -> np.ndarray:
        return np.asarray(
            self.calculate_total_amplitude(waves, positions, np.full(positions.shape, float(time))),
            dtype=float,
        )

    def calculate_two_wave_interference(
        self,
        wave1: WaveFunction,
        wave2: WaveFunction,
        time: float = 0.0,
        length: float = 10.0,
        num_points: int = 1000,
    ) -> InterferenceResult:
        """Sample ``wave1 + wave2`` over ``[0, length)`` and classify the result."""
        positions = sample_positions(length, num_points)
        total = self._sample_total((wave1, wave2), time, positions)
        peak = float(np.max(np.abs(total)))

        kind = self.classify_interference(wave1.amplitude, wave2.amplitude, peak)
        node_pos, anti_pos = _split_nodes(find_extrema_nodes(np.abs(total), positions, self.profile.node_threshold))

        result = InterferenceResult(
            type=kind,
            amplitude=peak,
            phase=self.calculate_phase_shift(wave1, wave2),
            node_positions=node_pos,
            antinode_positions=anti_pos,
            beat_frequency=self.calculate_beat_frequency(wave1.frequency, wave2.frequency),
        )
        return _with_description(result)

    def calculate_multi_wave_interference(
        self,
        waves: Sequence[WaveFunction],
        time: float = 0.0,
        length: float = 10.0,
        num_points: int = 1000,
    ) -> InterferenceResult:
        """Summarize the superposition of any number of waves.

        Resonance takes precedence (CONSTRUCTIVE); otherwise the result is
        PARTIAL, described as beating when the first two waves beat slowly.
        """
        waves = list(waves)
        if not waves:
            return InterferenceResult(type=InterferenceType.NO_INTERFERENCE, description="No waves provided")
        if len(waves) == 1:
            return InterferenceResult(
                type=InterferenceType.NO_INTERFERENCE,
                amplitude=float(waves[0].amplitude),
                description="Single wave - no interference",
            )

        positions = sample_positions(length, num_points)
        total = self._sample_total(waves, time, positions)
        peak = float(np.max(np.abs(total)))
        beat = self.calculate_beat_frequency(waves[0].frequency, waves[1].frequency)
        node_pos, anti_pos = _split_nodes(find_extrema_nodes(np.abs(total), positions, self.profile.node_threshold))

        if self.detect_resonance(waves):
            kind = InterferenceType.CONSTRUCTIVE
            description = "Resonance detected - constructive interference"
        elif 0.0 < beat < self.profile.beat_max_hz:
            kind = InterferenceType.PARTIAL
            description = "Beat phenomenon detected"
        else:
            kind = InterferenceType.PARTIAL
            description = "Complex multi-wave interference"

        return InterferenceResult(
            type=kind,
            amplitude=peak,
            phase=self.calculate_phase_shift(waves[0], waves[1]),
            node_positions=node_pos,
            antinode_positions=anti_pos,
            beat_frequency=beat,
            description=description,
        )

    def classify_interference(
        self,
        amplitude1: float,
        amplitude2: float,
        result_amplitude: float,
        tolerance: Optional[float] = None,
    ) -> InterferenceType:
        """CONSTRUCTIVE near ``a1 + a2``, DESTRUCTIVE near ``|a1 - a2|``, else PARTIAL."""
        tol = self.profile.interference_tolerance if tolerance is None else tolerance
        if result_amplitude >= (amplitude1 + amplitude2) - tol:
            return InterferenceType.CONSTRUCTIVE
        if result_amplitude <= abs(amplitude1 - amplitude2) + tol:
            return InterferenceType.DESTRUCTIVE
        return InterferenceType.PARTIAL

    def find_interference_nodes(
        self,
        waves: Sequence[WaveFunction],
        time: float = 0.0,
        length: float = 10.0,
        num_points: int = 1000,
        threshold: Optional[float] = None,
    ) -> List[InterferenceNode]:
        positions = sample_positions(length, num_points)
        magnitude = np.abs(self._sample_total(waves, time, positions))
        thr = self.profile.node_threshold if threshold is None else threshold
        return find_extrema_nodes(magnitude, positions, thr)

    # ------------------------------------------------------------------
    # Beats
    # ------------------------------------------------------------------

    @staticmethod
    def calculate_beat_frequency(f1: float, f2: float) -> float:
        return abs(f1 - f2)

    def calculate_beat_period(self, f1: float, f2: float) -> float:
        beat = self.calculate_beat_frequency(f1, f2)
        return 1.0 / beat if beat > 0 else 0.0

    def calculate_beat_envelope(
        self,
        wave1: WaveFunction,
        wave2: WaveFunction,
        duration: float = 10.0,
        sample_rate: float = 100.0,
    ) -> np.ndarray:
        r"""Amplitude envelope of two sinusoids beating against each other.

        .. math::

            E(t) = \sqrt{A_1^2 + A_2^2 + 2 A_1 A_2 \cos(2\pi\,\Delta f\,t + \Delta\varphi)}

        with ``Δf = f2 - f1`` and ``Δφ`` the phase difference in radians.
        Sampled at ``t_i = i / sample_rate`` for ``floor(duration * sample_rate)``
        samples.
        """
        if sample_rate <= 0:
            raise ValueError(f"sample_rate must be > 0, got {sample_rate}")
        n = max(int(math.floor(duration * sample_rate)), 0)
        t = np.arange(n, dtype=float) / float(sample_rate)

        a1, a2 = float(wave1.amplitude), float(wave2.amplitude)
        dphi = math.radians(wave2.phase - wave1.phase)
        arg = 2.0 * np.pi * (wave2.frequency - wave1.frequency) * t + dphi
        # clip guards against tiny negative values from rounding
        return np.sqrt(np.clip(a1 * a1 + a2 * a2 + 2.0 * a1 * a2 * np.cos(arg), 0.0, None))

    # ------------------------------------------------------------------
    # Standing waves
    # ------------------------------------------------------------------

    def calculate_standing_wave(
        self,
        amplitude1: float,
        amplitude2: float,
        frequency: float,
        phase_shift: float = math.pi,
        length: float = 10.0,
        num_points: int = 1000,
        time: float = 0.0,
    ) -> np.ndarray:
        """``A1*sin(kx - wt) + A2*sin(kx + wt + phase_shift)`` over ``[0, length)``.

        ``phase_shift`` is in radians; ``k = 2*pi*f / velocity``.
        """
        x = sample_positions(length, num_points)
        omega = 2.0 * math.pi * frequency
        k = omega / self.profile.velocity
        forward = amplitude1 * np.sin(k * x - omega * time)
        backward = amplitude2 * np.sin(k * x + omega * time + phase_shift)
        return forward + backward

    def find_standing_wave_nodes(
        self,
        amplitude1: float,
        amplitude2: float,
        frequency: float,
        phase_shift: float = math.pi,
        length: float = 10.0,
        num_points: int = 1000,
        time: float = 0.0,
        threshold: Optional[float] = None,
    ) -> List[InterferenceNode]:
        """Nodes and antinodes of :meth:`calculate_standing_wave` at one instant."""
        wave = self.calculate_standing_wave(amplitude1, amplitude2, frequency, phase_shift, length, num_points, time)
        thr = self.profile.node_threshold if threshold is None else threshold
        return find_extrema_nodes(np.abs(wave), sample_positions(length, num_points), thr)

    # ------------------------------------------------------------------
    # Phase relationships
    # ------------------------------------------------------------------

    @staticmethod
    def calculate_phase_shift(wave1: WaveFunction, wave2: WaveFunction) -> float:
        """``phase2 - phase1`` in degrees, normalised to ``[0, 360)``."""
        diff = math.fmod(wave2.phase - wave1.phase, 360.0)
        if diff < 0:
            diff += 360.0
        if diff >= 360.0:
            diff -= 360.0
        return diff

    def are_in_phase(self, wave1: WaveFunction, wave2: WaveFunction, tolerance: float = 0.1) -> bool:
        diff = self.calculate_phase_shift(wave1, wave2)
        return diff <= tolerance or abs(diff - 360.0) <= tolerance

    def are_out_of_phase(self, wave1: WaveFunction, wave2: WaveFunction, tolerance: float = 0.1) -> bool:
        return abs(self.calculate_phase_shift(wave1, wave2) - 180.0) <= tolerance

    # ------------------------------------------------------------------
    # Resonance
    # ------------------------------------------------------------------

    def detect_resonance(self, waves: Sequence[WaveFunction], frequency_tolerance: Optional[float] = None) -> bool:
        """True if any two waves have frequencies within ``frequency_tolerance`` (inclusive)."""
        tol = self.profile.resonance_tolerance_hz if frequency_tolerance is None else frequency_tolerance
        freqs = [w.frequency for w in waves]
        for i in range(len(freqs)):
            for j in range(i + 1, len(freqs)):
                if abs(freqs[i] - freqs[j]) <= tol:
                    return True
        return False

    def calculate_resonance_amplification(self, waves: Sequence[WaveFunction]) -> float:
        """``|sum y(0, 0)| / sum(A)``; 1.0 means perfect reinforcement at the origin."""
        individual = float(sum(w.amplitude for w in waves))
        if individual <= 0:
            return 0.0
        return abs(float(self.calculate_total_amplitude(waves, 0.0, 0.0))) / individual

    @staticmethod
    def calculate_rms_amplitude(data: ArrayLike) -> float:
        return calculate_rms_amplitude(data)

    # ------------------------------------------------------------------
    # Diffraction patterns
    # ------------------------------------------------------------------

    def calculate_youngs_double_slit_pattern(
        self,
        wavelength: float,
        slit_separation: float,
        screen_distance: float,
        screen_width: float = 10.0,
        num_points: int = 1000,
    ) -> IntensityPattern:
        r"""Two-slit fringes in the small-angle limit.

        .. math:: I(y) = \cos^2\!\left(\frac{\pi d y}{\lambda L}\right)
        """
        _check_optics(wavelength, screen_distance)
        y = screen_positions(screen_width, num_points)
        intensity = np.cos(np.pi * slit_separation * y / (wavelength * screen_distance)) ** 2
        return _pattern(y, intensity)

    def calculate_single_slit_diffraction(
        self,
        wavelength: float,
        slit_width: float,
        screen_distance: float,
        screen_width: float = 10.0,
        num_points: int = 1000,
    ) -> IntensityPattern:
        r"""Fraunhofer single-slit pattern.

        .. math:: I(y) = \left(\frac{\sin\beta}{\beta}\right)^2,\quad \beta = \frac{\pi a y}{\lambda L}
        """
        _check_optics(wavelength, screen_distance)
        y = screen_positions(screen_width, num_points)
        # np.sinc(u) = sin(pi u) / (pi u)
        intensity = np.sinc(slit_width * y / (wavelength * screen_distance)) ** 2
        return _pattern(y, intensity)


def _with_description(result: InterferenceResult) -> InterferenceResult:
    return dataclasses.replace(result, description=_describe(result))


def _check_optics(wavelength: float, screen_distance: float) -> None:
    if wavelength <= 0:
        raise ValueError(f"wavelength must be > 0, got {wavelength}")
    if screen_distance <= 0:
        raise ValueError(f"screen_distance must be > 0, got {screen_distance}")


def _pattern(y: np.ndarray, intensity: np.ndarray) -> IntensityPattern:
    maxima = y[find_local_extrema(intensity, find_maxima=True)]
    minima = y[find_local_extrema(intensity, find_maxima=False)]
    logger.debug("intensity pattern: %d points, %d maxima, %d minima", y.size, maxima.size, minima.size)
    return IntensityPattern(positions=y, intensity=intensity, maxima=maxima, minima=minima)
