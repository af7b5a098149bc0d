"""Periodic wave functions.

A :class:`WaveFunction` is a tagged variant over :class:`WaveType`.  Every
variant shares the same three parameters (amplitude, frequency in Hz, phase in
degrees) and differs only in the evaluator selected from ``_EVALUATORS``.

Functions of time only
----------------------
The position argument ``x`` of :meth:`WaveFunction.evaluate` is part of the
interface but is not used by any current variant.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Union

import numpy as np

ArrayOrFloat = Union[float, np.ndarray]


class WaveType(str, Enum):
    SINUSOIDAL = "sinusoidal"
    COSINE = "cosine"
    SQUARE = "square"
    TRIANGULAR = "triangular"
    SAWTOOTH = "sawtooth"


def _angle(frequency: float, phase_deg: float, t: np.ndarray) -> np.ndarray:
    return 2.0 * np.pi * frequency * t + np.deg2rad(phase_deg)


def _cycle_fraction(frequency: float, phase_deg: float, t: np.ndarray) -> np.ndarray:
    """Fractional position within the current period, in ``[0, 1)``."""
    arg = frequency * t + phase_deg / 360.0
    return arg - np.floor(arg)


def _sinusoidal(a: float, f: float, phi: float, t: np.ndarray) -> np.ndarray:
    return a * np.sin(_angle(f, phi, t))


def _cosine(a: float, f: float, phi: float, t: np.ndarray) -> np.ndarray:
    return a * np.cos(_angle(f, phi, t))


def _square(a: float, f: float, phi: float, t: np.ndarray) -> np.ndarray:
    # sin == 0 resolves to +A
    return np.where(np.sin(_angle(f, phi, t)) >= 0.0, a, -a)


def _triangular(a: float, f: float, phi: float, t: np.ndarray) -> np.ndarray:
    frac = _cycle_fraction(f, phi, t)
    return np.select(
        [frac < 0.25, frac < 0.75],
        [a * 4.0 * frac, a * (2.0 - 4.0 * frac)],
        default=a * (4.0 * frac - 4.0),
    )


def _sawtooth(a: float, f: float, phi: float, t: np.ndarray) -> np.ndarray:
    return a * (2.0 * _cycle_fraction(f, phi, t) - 1.0)


_Evaluator = Callable[[float, float, float, np.ndarray], np.ndarray]

_EVALUATORS: Dict[WaveType, _Evaluator] = {
    WaveType.SINUSOIDAL: _sinusoidal,
    WaveType.COSINE: _cosine,
    WaveType.SQUARE: _square,
    WaveType.TRIANGULAR: _triangular,
    WaveType.SAWTOOTH: _sawtooth,
}

_EQUATION_FORMATS: Dict[WaveType, str] = {
    WaveType.SINUSOIDAL: "y = {a:g} * sin(2π * {f:g} * t + {p:g}°)",
    WaveType.COSINE: "y = {a:g} * cos(2π * {f:g} * t + {p:g}°)",
    WaveType.SQUARE: "y = {a:g} * sign(sin(2π * {f:g} * t + {p:g}°))",
    WaveType.TRIANGULAR: "y = {a:g} * triangular({f:g} * t + {p:g}°)",
    WaveType.SAWTOOTH: "y = {a:g} * sawtooth({f:g} * t + {p:g}°)",
}


@dataclass
class WaveFunction:
    """A periodic signal ``y(x, t)``.

    Attributes
    ----------
    wave_type : WaveType
        Variant tag selecting the waveform.
    amplitude : float
        Peak amplitude ``A``.
    frequency : float
        Frequency ``f`` in Hz.  Derived quantities expect ``f > 0``; at
        ``f == 0`` the period and wavelength are reported as ``math.inf``.
    phase : float
        Phase offset in degrees.

    The parameters are plain mutable attributes; callers adjust them in place
    (e.g. ``wave.frequency = 2.0``) or through :meth:`set_parameters`.
    """

    wave_type: WaveType = WaveType.SINUSOIDAL
    amplitude: float = 1.0
    frequency: float = 1.0
    phase: float = 0.0

    def __post_init__(self) -> None:
        self.wave_type = WaveType(self.wave_type)

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def sinusoidal(cls, amplitude: float = 1.0, frequency: float = 1.0, phase: float = 0.0) -> WaveFunction:
        return cls(WaveType.SINUSOIDAL, amplitude, frequency, phase)

    @classmethod
    def cosine(cls, amplitude: float = 1.0, frequency: float = 1.0, phase: float = 0.0) -> WaveFunction:
        return cls(WaveType.COSINE, amplitude, frequency, phase)

    @classmethod
    def square(cls, amplitude: float = 1.0, frequency: float = 1.0, phase: float = 0.0) -> WaveFunction:
        return cls(WaveType.SQUARE, amplitude, frequency, phase)

    @classmethod
    def triangular(cls, amplitude: float = 1.0, frequency: float = 1.0, phase: float = 0.0) -> WaveFunction:
        return cls(WaveType.TRIANGULAR, amplitude, frequency, phase)

    @classmethod
    def sawtooth(cls, amplitude: float = 1.0, frequency: float = 1.0, phase: float = 0.0) -> WaveFunction:
        return cls(WaveType.SAWTOOTH, amplitude, frequency, phase)

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def evaluate(self, x: ArrayOrFloat, t: ArrayOrFloat) -> ArrayOrFloat:
        """Evaluate the wave at position ``x`` and time ``t``.

        ``t`` may be a scalar or an array; the result has the same shape.
        ``x`` is accepted for interface symmetry and currently ignored.
        """
        tt = np.asarray(t, dtype=float)
        y = _EVALUATORS[self.wave_type](
            float(self.amplitude), float(self.frequency), float(self.phase), tt
        )
        if np.ndim(y) == 0:
            return float(y)
        return y

    def equation(self) -> str:
        """Human-readable formula, e.g. ``y = 2 * sin(2π * 1 * t + 0°)``."""
        return _EQUATION_FORMATS[self.wave_type].format(
            a=self.amplitude, f=self.frequency, p=self.phase
        )

    def set_parameters(self, amplitude: float, frequency: float, phase: float) -> None:
        self.amplitude = amplitude
        self.frequency = frequency
        self.phase = phase

    # ------------------------------------------------------------------
    # Derived properties
    # ------------------------------------------------------------------

    @property
    def period(self) -> float:
        if self.frequency == 0:
            return math.inf
        return 1.0 / self.frequency

    def wavelength(self, velocity: float = 1.0) -> float:
        if self.frequency == 0:
            return math.inf
        return velocity / self.frequency

    @property
    def angular_frequency(self) -> float:
        return 2.0 * math.pi * self.frequency

    def wave_number(self, velocity: float = 1.0) -> float:
        lam = self.wavelength(velocity)
        if math.isinf(lam):
            return 0.0
        if lam == 0:
            return math.inf
        return 2.0 * math.pi / lam

    @property
    def energy(self) -> float:
        """Energy proxy ``0.5 * A**2``."""
        return 0.5 * self.amplitude * self.amplitude
