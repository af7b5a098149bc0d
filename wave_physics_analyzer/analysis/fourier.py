"""FFT-based spectral analysis for sampled wave signals.

Provides a radix-2 Cooley-Tukey transform and its inverse, window functions,
one-sided amplitude spectra with harmonic and THD extraction, and
frequency-domain brick-wall filters.

Functions
---------
next_power_of_two
    Smallest power of two ``>= n`` (``0`` and ``1`` map to ``1``).
fft / ifft
    Recursive decimation-in-time transform of a zero-padded real signal, and
    its inverse via the conjugation identity.
window_coefficients / apply_window
    Rectangular, Hanning, Hamming and Blackman tapers.
get_spectrum
    Windowed one-sided amplitude spectrum with detected harmonics attached.
find_harmonics / calculate_thd / find_dominant_frequency
    Harmonic-series extraction from a spectrum.
low_pass_filter / high_pass_filter / band_pass_filter
    Zero out-of-band bins symmetrically and transform back.

:class:`FourierAnalyzer` binds these functions to an
:class:`~wave_physics_analyzer.models.profile.AnalysisProfile`.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import List, Optional, Sequence

import numpy as np
from numpy.typing import ArrayLike

from wave_physics_analyzer.models.profile import DEFAULT_PROFILE, AnalysisProfile, normalize_window
from wave_physics_analyzer.models.spectrum import FrequencySpectrum, Harmonic

logger = logging.getLogger(__name__)


# =====================================================================
#  Transforms
# =====================================================================

def next_power_of_two(n: int) -> int:
    n = int(n)
    if n <= 1:
        return 1
    power = 1
    while power < n:
        power *= 2
    return power


def _as_signal(signal: ArrayLike) -> np.ndarray:
    x = np.asarray(signal, dtype=float)
    if x.ndim != 1:
        raise ValueError(f"signal must be 1D, got shape {x.shape}")
    return x


def _check_sample_rate(sample_rate: float) -> float:
    if sample_rate <= 0:
        raise ValueError(f"sample_rate must be > 0, got {sample_rate}")
    return float(sample_rate)


def _fft_recursive(x: np.ndarray) -> np.ndarray:
    """Radix-2 DIT transform of a complex array whose length is a power of two."""
    n = x.size
    if n <= 1:
        return x.copy()

    even = _fft_recursive(x[0::2])
    odd = _fft_recursive(x[1::2])

    k = np.arange(n // 2)
    twiddle = np.exp(-2j * np.pi * k / n)
    t = twiddle * odd
    return np.concatenate([even + t, even - t])


def fft(signal: ArrayLike) -> np.ndarray:
    r"""Forward DFT of a real signal.

    The input is zero-padded to :func:`next_power_of_two` of its length and
    transformed with the recursive Cooley-Tukey split:

    .. math::

        X_k = E_k + w^k O_k,\quad X_{k+N/2} = E_k - w^k O_k,\quad w = e^{-2\pi i/N}

    Returns
    -------
    ndarray of complex, shape ``(next_power_of_two(len(signal)),)``
    """
    x = _as_signal(signal)
    n = next_power_of_two(x.size)
    padded = np.zeros(n, dtype=complex)
    padded[: x.size] = x
    return _fft_recursive(padded)


def ifft(spectrum: ArrayLike) -> np.ndarray:
    """Inverse DFT computed as ``conj(fft(conj(X))) / N``.

    The spectrum length must be a power of two.  An empty spectrum returns an
    empty array.
    """
    X = np.asarray(spectrum, dtype=complex)
    if X.ndim != 1:
        raise ValueError(f"spectrum must be 1D, got shape {X.shape}")

    n = X.size
    if n == 0:
        return np.zeros(0, dtype=complex)
    if n != next_power_of_two(n):
        raise ValueError(f"spectrum length must be a power of two, got {n}")

    y = _fft_recursive(np.conj(X))
    return np.conj(y) / float(n)


def frequency_axis(fft_size: int, sample_rate: float) -> np.ndarray:
    """One-sided frequency axis ``[0, df, ..., fs/2]`` for a transform of ``fft_size``."""
    fft_size = int(fft_size)
    if fft_size <= 0:
        raise ValueError(f"fft_size must be > 0, got {fft_size}")
    fs = _check_sample_rate(sample_rate)
    return np.arange(fft_size // 2 + 1, dtype=float) * (fs / fft_size)


# =====================================================================
#  Windows
# =====================================================================

def window_coefficients(name: str, n: int) -> np.ndarray:
    """Symmetric window of length ``n`` (denominator ``n - 1``)."""
    key = normalize_window(name)

    n = max(int(n), 0)
    if n <= 1 or key == "rectangular":
        return np.ones(n, dtype=float)

    phase = 2.0 * np.pi * np.arange(n, dtype=float) / (n - 1)
    if key == "hanning":
        return 0.5 - 0.5 * np.cos(phase)
    if key == "hamming":
        return 0.54 - 0.46 * np.cos(phase)
    return 0.42 - 0.5 * np.cos(phase) + 0.08 * np.cos(2.0 * phase)


def apply_window(signal: ArrayLike, name: str = "hanning") -> np.ndarray:
    """Return a windowed copy of ``signal``."""
    x = _as_signal(signal)
    return x * window_coefficients(name, x.size)


# =====================================================================
#  Spectrum and harmonics
# =====================================================================

def get_spectrum(
    signal: ArrayLike,
    sample_rate: float,
    *,
    window: str = "hanning",
    threshold: float = 0.1,
    max_order: int = 10,
    tolerance_bins: float = 2.0,
) -> FrequencySpectrum:
    """One-sided amplitude spectrum of a real signal.

    Parameters
    ----------
    signal:
        Real samples, 1D.
    sample_rate:
        Sampling rate in Hz. Must be > 0.
    window:
        Window applied to a copy of the signal before the transform.
    threshold, max_order, tolerance_bins:
        Forwarded to :func:`find_harmonics` for the attached harmonics.

    Returns
    -------
    FrequencySpectrum
        ``N//2 + 1`` bins from DC to Nyquist, where ``N`` is the padded
        transform size.  Interior magnitudes are scaled by ``2/N`` and the DC
        and Nyquist bins by ``1/N`` so that a bin-centred tone of amplitude
        ``A`` reads ``A`` under a rectangular window.  An empty signal gives an
        empty spectrum.
    """
    fs = _check_sample_rate(sample_rate)
    x = _as_signal(signal)
    window = normalize_window(window)

    if x.size == 0:
        return FrequencySpectrum(sample_rate=fs, max_frequency=fs / 2.0, window=window)

    warnings: List[str] = []
    n_fft = next_power_of_two(x.size)
    if n_fft != x.size:
        warnings.append(f"signal zero-padded from {x.size} to {n_fft} samples")

    X = fft(apply_window(x, window))

    n_bins = n_fft // 2 + 1
    resolution = fs / n_fft
    scale = np.full(n_bins, 1.0 / n_fft)
    scale[1 : n_fft // 2] = 2.0 / n_fft

    spectrum = FrequencySpectrum(
        frequencies=np.arange(n_bins, dtype=float) * resolution,
        magnitudes=np.abs(X[:n_bins]) * scale,
        phases=np.angle(X[:n_bins]),
        sample_rate=fs,
        frequency_resolution=resolution,
        max_frequency=fs / 2.0,
        window=window,
        fft_size=n_fft,
        warnings=tuple(warnings),
    )

    harmonics = find_harmonics(
        spectrum, threshold, max_order=max_order, tolerance_bins=tolerance_bins
    )
    logger.debug(
        "spectrum: n=%d n_fft=%d window=%s df=%.6g Hz harmonics=%s",
        x.size, n_fft, window, resolution, [h.order for h in harmonics],
    )
    return dataclasses.replace(spectrum, harmonics=tuple(harmonics))


def find_harmonics(
    spectrum: FrequencySpectrum,
    threshold: float = 0.1,
    *,
    max_order: int = 10,
    tolerance_bins: float = 2.0,
) -> List[Harmonic]:
    """Locate the harmonic series of the strongest non-DC peak.

    The fundamental is the non-DC bin with the largest magnitude.  If it sits
    at 0 Hz or is weaker than ``threshold``, nothing is returned.  For each
    order ``1..max_order`` the bin nearest to ``order * f0`` is accepted when
    it lies within ``tolerance_bins`` resolutions of the target and reaches
    ``threshold``.  The search stops at the first target above Nyquist.
    """
    f = np.asarray(spectrum.frequencies, dtype=float)
    m = np.asarray(spectrum.magnitudes, dtype=float)
    p = np.asarray(spectrum.phases, dtype=float)
    if f.size < 2:
        return []

    idx = 1 + int(np.argmax(m[1:]))
    f0 = float(f[idx])
    peak = float(m[idx])
    if f0 == 0.0 or peak <= 0.0 or peak < threshold:
        return []

    tol_hz = tolerance_bins * spectrum.frequency_resolution
    out: List[Harmonic] = []
    for order in range(1, int(max_order) + 1):
        target = order * f0
        if target > spectrum.max_frequency:
            break

        j = int(np.argmin(np.abs(f - target)))
        if abs(f[j] - target) <= tol_hz and m[j] >= threshold:
            out.append(Harmonic(frequency=float(f[j]), amplitude=float(m[j]), phase=float(p[j]), order=order))

    return out


def find_dominant_frequency(spectrum: FrequencySpectrum) -> float:
    """Frequency of the strongest non-DC bin, ``0.0`` when there is none."""
    m = np.asarray(spectrum.magnitudes, dtype=float)
    if m.size < 2:
        return 0.0
    idx = 1 + int(np.argmax(m[1:]))
    if m[idx] <= 0.0:
        return 0.0
    return float(spectrum.frequencies[idx])


def calculate_thd(harmonics: Sequence[Harmonic]) -> float:
    """Total harmonic distortion in percent.

    ``100 * sqrt(sum(A_n**2 for n >= 2) / A_1**2)``; ``0.0`` without a
    (non-zero) fundamental.
    """
    fundamental_power = 0.0
    harmonic_power = 0.0
    for h in harmonics:
        power = h.amplitude * h.amplitude
        if h.order == 1:
            fundamental_power = power
        else:
            harmonic_power += power

    if fundamental_power == 0.0:
        return 0.0
    return float(np.sqrt(harmonic_power / fundamental_power) * 100.0)


# =====================================================================
#  Filters
# =====================================================================

def spectral_mask(n_fft: int, low_bin: int, high_bin: int) -> np.ndarray:
    """Keep-mask over a full two-sided spectrum of length ``n_fft``.

    Bin ``k`` is kept when its folded index ``min(k, n_fft - k)`` lies in
    ``[low_bin, high_bin]``, so every bin and its mirror ``n_fft - k`` share
    the same fate and the inverse transform stays real.
    """
    k = np.arange(int(n_fft))
    folded = np.minimum(k, n_fft - k)
    return (folded >= low_bin) & (folded <= high_bin)


def _cutoff_bin(freq: float, n_fft: int, sample_rate: float, lowest: int, highest: int, offset: int = 0) -> int:
    """``floor(freq * N / fs) + offset`` clamped to ``[lowest, highest]``.

    Lower edges clamp to ``[0, N/2 + 1]`` and upper edges to ``[-1, N/2]``;
    the out-of-range value on either side yields an empty pass band.
    """
    raw = int(np.floor(freq * n_fft / sample_rate)) + offset
    clamped = min(max(raw, lowest), highest)
    if clamped != raw:
        logger.debug("cutoff %.6g Hz -> bin %d clamped to %d (n_fft=%d)", freq, raw, clamped, n_fft)
    return clamped


def _filter_band(
    signal: ArrayLike,
    sample_rate: float,
    low_freq: Optional[float],
    high_freq: Optional[float],
    *,
    high_exclusive: bool = False,
) -> np.ndarray:
    fs = _check_sample_rate(sample_rate)
    x = _as_signal(signal)
    if x.size == 0:
        return np.zeros(0, dtype=float)

    X = fft(x)
    n_fft = X.size

    nyquist_bin = n_fft // 2
    if low_freq is None:
        low_bin = 0
    else:
        low_bin = _cutoff_bin(low_freq, n_fft, fs, 0, nyquist_bin + 1, offset=1 if high_exclusive else 0)
    if high_freq is None:
        high_bin = nyquist_bin
    else:
        high_bin = _cutoff_bin(high_freq, n_fft, fs, -1, nyquist_bin)

    mask = spectral_mask(n_fft, low_bin, high_bin)
    filtered = ifft(np.where(mask, X, 0.0))
    logger.debug("filter: n_fft=%d keep bins [%d, %d] (%d of %d)", n_fft, low_bin, high_bin, int(mask.sum()), n_fft)
    return filtered.real[: x.size]


def low_pass_filter(signal: ArrayLike, cutoff_freq: float, sample_rate: float) -> np.ndarray:
    """Keep bins at or below ``floor(cutoff * N / fs)``.

    A cutoff at or above Nyquist returns the signal unchanged; a negative
    cutoff keeps nothing.
    """
    return _filter_band(signal, sample_rate, None, cutoff_freq)


def high_pass_filter(signal: ArrayLike, cutoff_freq: float, sample_rate: float) -> np.ndarray:
    """Remove bins at or below ``floor(cutoff * N / fs)``.

    A negative cutoff keeps every bin; a cutoff at or above Nyquist keeps none.
    """
    return _filter_band(signal, sample_rate, cutoff_freq, None, high_exclusive=True)


def band_pass_filter(
    signal: ArrayLike,
    low_freq: float,
    high_freq: float,
    sample_rate: float,
) -> np.ndarray:
    """Keep bins between ``low_freq`` and ``high_freq`` (inclusive bin indices).

    An inverted band is swapped rather than producing an empty pass band.  A
    band lying entirely above Nyquist passes nothing.
    """
    if low_freq > high_freq:
        logger.warning("band_pass_filter: low_freq %.6g > high_freq %.6g, swapping", low_freq, high_freq)
        low_freq, high_freq = high_freq, low_freq
    return _filter_band(signal, sample_rate, low_freq, high_freq)


# =====================================================================
#  Profile-bound facade
# =====================================================================

class FourierAnalyzer:
    """Spectral analysis bound to an :class:`AnalysisProfile`.

    Holds no state besides the frozen profile; calls are re-entrant.
    """

    def __init__(self, profile: Optional[AnalysisProfile] = None) -> None:
        self.profile = profile if profile is not None else DEFAULT_PROFILE

    next_power_of_two = staticmethod(next_power_of_two)

    def fft(self, signal: ArrayLike) -> np.ndarray:
        return fft(signal)

    def ifft(self, spectrum: ArrayLike) -> np.ndarray:
        return ifft(spectrum)

    def apply_window(self, signal: ArrayLike, name: Optional[str] = None) -> np.ndarray:
        return apply_window(signal, name or self.profile.window)

    def frequency_axis(self, fft_size: int, sample_rate: float) -> np.ndarray:
        return frequency_axis(fft_size, sample_rate)

    def get_spectrum(self, signal: ArrayLike, sample_rate: float, *, window: Optional[str] = None) -> FrequencySpectrum:
        prof = self.profile
        return get_spectrum(
            signal,
            sample_rate,
            window=window or prof.window,
            threshold=prof.harmonic_threshold,
            max_order=prof.max_harmonic_order,
            tolerance_bins=prof.harmonic_tolerance_bins,
        )

    def find_harmonics(self, spectrum: FrequencySpectrum, threshold: Optional[float] = None) -> List[Harmonic]:
        prof = self.profile
        return find_harmonics(
            spectrum,
            prof.harmonic_threshold if threshold is None else threshold,
            max_order=prof.max_harmonic_order,
            tolerance_bins=prof.harmonic_tolerance_bins,
        )

    def find_dominant_frequency(self, spectrum: FrequencySpectrum) -> float:
        return find_dominant_frequency(spectrum)

    def calculate_thd(self, harmonics: Sequence[Harmonic]) -> float:
        return calculate_thd(harmonics)

    def low_pass_filter(self, signal: ArrayLike, cutoff_freq: float, sample_rate: float) -> np.ndarray:
        return low_pass_filter(signal, cutoff_freq, sample_rate)

    def high_pass_filter(self, signal: ArrayLike, cutoff_freq: float, sample_rate: float) -> np.ndarray:
        return high_pass_filter(signal, cutoff_freq, sample_rate)

    def band_pass_filter(self, signal: ArrayLike, low_freq: float, high_freq: float, sample_rate: float) -> np.ndarray:
        return band_pass_filter(signal, low_freq, high_freq, sample_rate)
