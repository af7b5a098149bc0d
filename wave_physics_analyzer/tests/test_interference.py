"""Tests for interference, beats, standing waves and diffraction patterns."""

from __future__ import annotations

import numpy as np
import pytest

from wave_physics_analyzer.analysis.interference import (
    InterferenceCalculator,
    find_extrema_nodes,
    find_local_extrema,
    sample_positions,
)
from wave_physics_analyzer.models.results import InterferenceType, NodeType
from wave_physics_analyzer.models.waves import WaveFunction


@pytest.fixture
def calc() -> InterferenceCalculator:
    return InterferenceCalculator()


# -----------------------------------------------------------------------
# Extrema and nodes
# -----------------------------------------------------------------------


def test_sample_positions_half_open() -> None:
    x = sample_positions(2.0, 4)
    assert np.allclose(x, [0.0, 0.5, 1.0, 1.5])
    with pytest.raises(ValueError):
        sample_positions(1.0, 0)


def test_find_local_extrema_is_strict_and_interior() -> None:
    d = [3.0, 1.0, 2.0, 2.0, 0.5, 4.0]
    assert find_local_extrema(d, find_maxima=False).tolist() == [1, 4]
    assert find_local_extrema(d, find_maxima=True).tolist() == []
    assert find_local_extrema([1.0, 2.0]).size == 0


def test_find_extrema_nodes_classification() -> None:
    a = np.array([0.5, 0.05, 0.8, 0.3, 0.9, 0.9, 0.2])
    x = np.arange(a.size) * 0.5
    nodes = find_extrema_nodes(a, x, threshold=0.1)
    assert [(n.position, n.kind) for n in nodes] == [(0.5, NodeType.NODE), (1.0, NodeType.ANTINODE)]
    assert nodes[0].amplitude == pytest.approx(0.05)


def test_find_extrema_nodes_threshold_boundary() -> None:
    x = np.array([0.0, 1.0, 2.0])
    # a minimum equal to the threshold is not a node
    assert find_extrema_nodes([1.0, 0.1, 1.0], x, threshold=0.1) == []
    # a maximum equal to the threshold is an antinode
    nodes = find_extrema_nodes([0.0, 0.1, 0.0], x, threshold=0.1)
    assert [n.kind for n in nodes] == [NodeType.ANTINODE]


def test_find_extrema_nodes_shape_mismatch() -> None:
    with pytest.raises(ValueError):
        find_extrema_nodes([1.0, 0.0, 1.0], [0.0, 1.0])


# -----------------------------------------------------------------------
# Two-wave and multi-wave interference
# -----------------------------------------------------------------------


@pytest.mark.parametrize(
    "result, expected",
    [
        (4.0, InterferenceType.CONSTRUCTIVE),
        (3.95, InterferenceType.CONSTRUCTIVE),
        (0.0, InterferenceType.DESTRUCTIVE),
        (0.05, InterferenceType.DESTRUCTIVE),
        (2.5, InterferenceType.PARTIAL),
    ],
)
def test_classify_interference(calc: InterferenceCalculator, result: float, expected: InterferenceType) -> None:
    assert calc.classify_interference(2.0, 2.0, result) is expected


def test_two_waves_in_phase_are_constructive(calc: InterferenceCalculator) -> None:
    w1 = WaveFunction.sinusoidal(1.0, 1.0)
    w2 = WaveFunction.sinusoidal(1.0, 1.0)
    r = calc.calculate_two_wave_interference(w1, w2, time=0.25)
    assert r.type is InterferenceType.CONSTRUCTIVE
    assert r.amplitude == pytest.approx(2.0)
    assert r.phase == 0.0
    assert r.beat_frequency == 0.0
    assert r.node_positions.size == 0
    assert r.description.startswith("Constructive")


def test_two_waves_out_of_phase_are_destructive(calc: InterferenceCalculator) -> None:
    w1 = WaveFunction.sinusoidal(1.0, 1.0)
    w2 = WaveFunction.sinusoidal(1.0, 1.0, 180.0)
    r = calc.calculate_two_wave_interference(w1, w2, time=0.25)
    assert r.type is InterferenceType.DESTRUCTIVE
    assert r.amplitude == pytest.approx(0.0, abs=1e-12)
    assert r.phase == pytest.approx(180.0)
    assert r.description.startswith("Destructive")


def test_interference_samples_the_grid_once(calc: InterferenceCalculator, monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []
    original = calc._sample_total

    def counting(waves, time, positions):
        calls.append(positions.size)
        return original(waves, time, positions)

    monkeypatch.setattr(calc, "_sample_total", counting)
    w1 = WaveFunction.sinusoidal(1.0, 1.0)
    w2 = WaveFunction.sinusoidal(0.5, 1.3)

    r = calc.calculate_two_wave_interference(w1, w2, time=0.1, num_points=200)
    assert calls == [200]
    expected = calc.find_interference_nodes((w1, w2), time=0.1, num_points=200)
    assert r.node_positions.tolist() == [n.position for n in expected if n.kind is NodeType.NODE]

    calls.clear()
    calc.calculate_multi_wave_interference([w1, w2, WaveFunction.cosine(0.2, 4.0)], num_points=50)
    assert calls == [50]


def test_multi_wave_degenerate(calc: InterferenceCalculator) -> None:
    empty = calc.calculate_multi_wave_interference([])
    assert empty.type is InterferenceType.NO_INTERFERENCE
    assert empty.description == "No waves provided"

    single = calc.calculate_multi_wave_interference([WaveFunction.sinusoidal(2.5, 1.0)])
    assert single.type is InterferenceType.NO_INTERFERENCE
    assert single.amplitude == 2.5


def test_multi_wave_resonance_beating_and_complex(calc: InterferenceCalculator) -> None:
    resonant = calc.calculate_multi_wave_interference(
        [WaveFunction.sinusoidal(1.0, 2.0), WaveFunction.sinusoidal(1.0, 2.005)]
    )
    assert resonant.type is InterferenceType.CONSTRUCTIVE
    assert "Resonance" in resonant.description

    beating = calc.calculate_multi_wave_interference(
        [WaveFunction.sinusoidal(1.0, 1.0), WaveFunction.sinusoidal(1.0, 1.5), WaveFunction.cosine(0.5, 7.0)]
    )
    assert beating.type is InterferenceType.PARTIAL
    assert beating.beat_frequency == pytest.approx(0.5)
    assert beating.description == "Beat phenomenon detected"

    other = calc.calculate_multi_wave_interference([WaveFunction.sinusoidal(1.0, 1.0), WaveFunction.sinusoidal(1.0, 5.0)])
    assert other.type is InterferenceType.PARTIAL
    assert other.description == "Complex multi-wave interference"


def test_total_amplitude_is_sum(calc: InterferenceCalculator) -> None:
    waves = [WaveFunction.cosine(1.0, 1.0), WaveFunction.cosine(0.5, 3.0)]
    assert calc.calculate_total_amplitude(waves, 0.0, 0.0) == pytest.approx(1.5)
    assert calc.calculate_total_amplitude([], 0.0, 0.0) == 0.0


def test_time_only_waves_have_no_spatial_nodes(calc: InterferenceCalculator) -> None:
    waves = [WaveFunction.sinusoidal(1.0, 1.0), WaveFunction.sinusoidal(1.0, 3.0)]
    assert calc.find_interference_nodes(waves, time=0.1) == []


# -----------------------------------------------------------------------
# Beats
# -----------------------------------------------------------------------


def test_beat_frequency_and_period(calc: InterferenceCalculator) -> None:
    assert calc.calculate_beat_frequency(3.0, 2.5) == pytest.approx(0.5)
    assert calc.calculate_beat_period(1.0, 1.25) == pytest.approx(4.0)
    assert calc.calculate_beat_period(2.0, 2.0) == 0.0


def test_beat_envelope(calc: InterferenceCalculator) -> None:
    w1 = WaveFunction.sinusoidal(1.0, 1.0)
    w2 = WaveFunction.sinusoidal(1.0, 1.5)
    env = calc.calculate_beat_envelope(w1, w2, duration=10.0, sample_rate=100.0)
    assert env.shape == (1000,)
    assert env[0] == pytest.approx(2.0)
    assert env[100] == pytest.approx(0.0, abs=1e-6)  # t = 1 s, half a beat period
    assert env[200] == pytest.approx(2.0)
    assert np.all(env >= 0.0)
    assert np.all(env <= 2.0 + 1e-12)


def test_beat_envelope_bad_rate(calc: InterferenceCalculator) -> None:
    with pytest.raises(ValueError):
        calc.calculate_beat_envelope(WaveFunction(), WaveFunction(), sample_rate=0.0)


# -----------------------------------------------------------------------
# Standing waves
# -----------------------------------------------------------------------


def test_standing_wave_vanishes_at_t0(calc: InterferenceCalculator) -> None:
    y = calc.calculate_standing_wave(1.0, 1.0, 1.0, length=2.0, num_points=800, time=0.0)
    assert y.shape == (800,)
    assert np.allclose(y, 0.0, atol=1e-12)


def test_standing_wave_nodes_and_antinodes(calc: InterferenceCalculator) -> None:
    nodes = calc.find_standing_wave_nodes(1.0, 1.0, 1.0, length=2.0, num_points=800, time=0.25)
    node_pos = [n.position for n in nodes if n.kind is NodeType.NODE]
    anti_pos = [n.position for n in nodes if n.kind is NodeType.ANTINODE]
    assert node_pos == pytest.approx([0.25, 0.75, 1.25, 1.75], abs=1e-9)
    assert anti_pos == pytest.approx([0.5, 1.0, 1.5], abs=1e-9)
    assert all(n.amplitude == pytest.approx(2.0) for n in nodes if n.kind is NodeType.ANTINODE)


# -----------------------------------------------------------------------
# Phase and resonance
# -----------------------------------------------------------------------


def test_phase_shift_normalization() -> None:
    shift = InterferenceCalculator.calculate_phase_shift
    assert shift(WaveFunction(phase=350.0), WaveFunction(phase=10.0)) == pytest.approx(20.0)
    assert shift(WaveFunction(phase=10.0), WaveFunction(phase=350.0)) == pytest.approx(340.0)
    assert shift(WaveFunction(phase=0.0), WaveFunction(phase=720.0)) == 0.0


def test_in_and_out_of_phase(calc: InterferenceCalculator) -> None:
    assert calc.are_in_phase(WaveFunction(phase=0.0), WaveFunction(phase=359.95))
    assert not calc.are_in_phase(WaveFunction(phase=0.0), WaveFunction(phase=5.0))
    assert calc.are_out_of_phase(WaveFunction(phase=10.0), WaveFunction(phase=190.0))


def test_detect_resonance(calc: InterferenceCalculator) -> None:
    assert calc.detect_resonance([WaveFunction(frequency=2.0), WaveFunction(frequency=2.005)])
    assert calc.detect_resonance([WaveFunction(frequency=2.0), WaveFunction(frequency=2.5)], 0.5)
    assert not calc.detect_resonance([WaveFunction(frequency=1.0), WaveFunction(frequency=2.0)])
    assert not calc.detect_resonance([WaveFunction(frequency=1.0)])


def test_resonance_amplification(calc: InterferenceCalculator) -> None:
    cosines = [WaveFunction.cosine(1.0, 2.0), WaveFunction.cosine(1.0, 2.0)]
    assert calc.calculate_resonance_amplification(cosines) == pytest.approx(1.0)
    assert calc.calculate_resonance_amplification([]) == 0.0


def test_rms_amplitude(calc: InterferenceCalculator) -> None:
    assert calc.calculate_rms_amplitude([3.0, -3.0]) == pytest.approx(3.0)
    assert calc.calculate_rms_amplitude([]) == 0.0


# -----------------------------------------------------------------------
# Diffraction
# -----------------------------------------------------------------------


def test_double_slit_fringes(calc: InterferenceCalculator) -> None:
    p = calc.calculate_youngs_double_slit_pattern(0.5, 1.0, 2.0, screen_width=10.0, num_points=1001)
    assert p.positions[0] == pytest.approx(-5.0)
    assert p.positions[-1] == pytest.approx(5.0)
    assert p.maxima.tolist() == pytest.approx(list(range(-4, 5)), abs=1e-9)
    assert p.minima.tolist() == pytest.approx([k + 0.5 for k in range(-5, 5)], abs=1e-9)
    assert np.all((p.intensity >= 0.0) & (p.intensity <= 1.0 + 1e-12))


def test_single_slit_diffraction(calc: InterferenceCalculator) -> None:
    p = calc.calculate_single_slit_diffraction(0.5, 1.0, 2.0, screen_width=10.0, num_points=1001)
    assert p.minima.tolist() == pytest.approx([-4, -3, -2, -1, 1, 2, 3, 4], abs=1e-9)
    assert 0.0 == pytest.approx(p.maxima[np.argmin(np.abs(p.maxima))], abs=1e-9)
    assert p.intensity.max() == pytest.approx(1.0)


@pytest.mark.parametrize("wavelength, distance", [(0.0, 1.0), (-1.0, 1.0), (0.5, 0.0)])
def test_diffraction_rejects_bad_geometry(calc: InterferenceCalculator, wavelength: float, distance: float) -> None:
    with pytest.raises(ValueError):
        calc.calculate_youngs_double_slit_pattern(wavelength, 1.0, distance)
    with pytest.raises(ValueError):
        calc.calculate_single_slit_diffraction(wavelength, 1.0, distance)
