"""Analysis profile -- bundles all analysis-relevant configuration.

An AnalysisProfile groups every parameter that affects analysis output
into one frozen dataclass.  It can be:

- Constructed with defaults matching the classroom demonstrator
- Overridden field-by-field via ``dataclasses.replace()``
- Serialized to/from a dict for JSON provenance
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Tuple

#: Window functions understood by :func:`~wave_physics_analyzer.analysis.fourier.window_coefficients`.
WINDOWS: Tuple[str, ...] = ("rectangular", "hanning", "hamming", "blackman")


def normalize_window(name: str) -> str:
    """Lower-cased window name; raises ``ValueError`` if it is not in :data:`WINDOWS`."""
    key = str(name).lower()
    if key not in WINDOWS:
        raise ValueError(f"window must be one of {WINDOWS}, got {name!r}")
    return key


@dataclass(frozen=True)
class AnalysisProfile:
    """Frozen configuration shared by the engine, analyzer and calculator.

    Fields
    ------
    velocity : float
        Propagation speed used for wavelength and wave number (unit speed by default).
    window : str
        Window applied by ``get_spectrum``; one of :data:`WINDOWS`.
    harmonic_threshold : float
        Minimum bin magnitude accepted as a harmonic.
    max_harmonic_order : int
        Highest harmonic order searched.
    harmonic_tolerance_bins : float
        Allowed distance between a harmonic's target frequency and the nearest
        bin, in units of frequency resolution.
    beat_max_hz : float
        Beat frequencies in ``(0, beat_max_hz)`` are reported as beating.
    resonance_tolerance_hz : float
        Frequencies closer than this are treated as resonant.
    interference_tolerance : float
        Amplitude tolerance for constructive/destructive classification.
    node_threshold : float
        Amplitude separating nodes (below) from antinodes (at or above).
    """

    velocity: float = 1.0
    window: str = "hanning"

    harmonic_threshold: float = 0.1
    max_harmonic_order: int = 10
    harmonic_tolerance_bins: float = 2.0

    beat_max_hz: float = 2.0
    resonance_tolerance_hz: float = 0.01
    interference_tolerance: float = 0.1
    node_threshold: float = 0.1

    def __post_init__(self) -> None:
        object.__setattr__(self, "window", normalize_window(self.window))
        if self.max_harmonic_order < 1:
            raise ValueError(f"max_harmonic_order must be >= 1, got {self.max_harmonic_order}")

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-friendly dict."""
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> AnalysisProfile:
        """Reconstruct from a dict (e.g. loaded from JSON).  Unknown keys are ignored."""
        known = set(cls.__dataclass_fields__)
        return cls(**{k: v for k, v in dict(d).items() if k in known})


DEFAULT_PROFILE = AnalysisProfile()
