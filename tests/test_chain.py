import math

import pytest
import torch

from wlcsim import (
    ChainAnalyzer,
    ForceMode,
    SimulationParameters,
    calculate_wlc_chain,
    generate_chain,
    normalize,
    thermal_fluctuations,
)


def test_straight_chain_without_noise_or_force():
    chain = calculate_wlc_chain(
        length=3,
        persistence_length=50,
        temperature=300,
        time=0,
        bending_rigidity=1,
        noise_level=0,
        external_force=(0, 0, 0),
    )
    expected = torch.tensor(
        [[0.0, 1.0, 2.0], [0.0, 0.0, 0.0], [0.0, 0.0, 0.0]], dtype=torch.float64
    )
    assert torch.equal(chain, expected)


@pytest.mark.parametrize("length", [1, 2, 50, 200, 10000])
def test_output_has_requested_length(length):
    chain = calculate_wlc_chain(length, 50, 300, 1.23, 1.0, 1.0, (0.5, -0.2, 0.1))
    assert chain.shape == (3, length)
    assert chain.dtype == torch.float64


@pytest.mark.parametrize("params", [
    SimulationParameters(),
    SimulationParameters(length=7, noise_level=2.0, external_force=(10, -10, 3)),
    SimulationParameters(length=150, bending_rigidity=0.1, external_force=(0.1, 0.1, 0.1)),
    SimulationParameters(length=1),
])
@pytest.mark.parametrize("time", [0.0, 0.01, 42.5])
def test_first_point_is_origin(params, time):
    chain = generate_chain(params, time)
    assert torch.equal(chain[:, 0], torch.zeros(3, dtype=torch.float64))


def test_identical_inputs_give_identical_chains():
    params = SimulationParameters(length=120, external_force=(1.0, 2.0, -0.5))
    first = generate_chain(params, 3.7)
    second = generate_chain(params, 3.7)
    assert torch.equal(first, second)


def test_chain_changes_with_time():
    params = SimulationParameters(length=20)
    assert not torch.equal(generate_chain(params, 0.5), generate_chain(params, 0.51))


def test_first_segment_matches_fluctuation_formula():
    t = 0.7
    scale = math.sqrt(300 / 50) * 1.0
    kick = [
        0.5 * math.sin(t + 1) * scale,
        0.5 * math.cos(t + 1) * scale,
        0.5 * math.sin(0.5 * t) * scale,
    ]
    d = [1.0 + kick[0], kick[1], kick[2]]
    norm = math.sqrt(sum(c * c for c in d))
    expected = torch.tensor([c / norm for c in d], dtype=torch.float64)

    chain = calculate_wlc_chain(2, 50, 300, t, 1.0, 1.0, (0, 0, 0))
    assert torch.allclose(chain[:, 1], expected, atol=1e-12)


def test_segments_are_unit_length_without_force():
    chain = generate_chain(SimulationParameters(length=80), 2.0)
    lengths = ChainAnalyzer(chain).segment_lengths
    assert lengths == pytest.approx([1.0] * 79, abs=1e-12)


def test_segment_lengths_vary_with_force():
    params = SimulationParameters(length=30, bending_rigidity=2.0, external_force=(1, 2, 3))
    lengths = ChainAnalyzer(generate_chain(params, 0.4)).segment_lengths
    assert lengths.max() - lengths.min() > 1e-3


class TestForceModes:
    def test_compounding_force_decays_geometrically(self, quiet_params):
        f, b = 3.0, 2.0
        params = quiet_params.replace(bending_rigidity=b, external_force=(f, 0.0, 0.0))

        chain = generate_chain(params, 0.0, force_mode=ForceMode.COMPOUNDING)
        lengths = ChainAnalyzer(chain).segment_lengths

        # Direction stays along +x, so each segment is 1 + f * (1/b)^i
        expected = [1.0 + f * (1.0 / b) ** i for i in range(1, params.length)]
        assert lengths == pytest.approx(expected, rel=1e-12)

        contributions = ChainAnalyzer.force_contributions(params, ForceMode.COMPOUNDING)
        assert contributions[0].tolist() == pytest.approx(
            [f * (1.0 / b) ** i for i in range(1, params.length)]
        )
        assert torch.all(contributions[1:] == 0)

    def test_constant_force_is_recomputed_each_step(self, quiet_params):
        f, b = 3.0, 2.0
        params = quiet_params.replace(bending_rigidity=b, external_force=(f, 0.0, 0.0))

        chain = generate_chain(params, 0.0, force_mode=ForceMode.CONSTANT)
        lengths = ChainAnalyzer(chain).segment_lengths

        assert lengths == pytest.approx([1.0 + f / b] * (params.length - 1), rel=1e-12)
        contributions = ChainAnalyzer.force_contributions(params, "constant")
        assert contributions[0].tolist() == pytest.approx([f / b] * (params.length - 1))

    def test_modes_agree_for_unit_rigidity(self):
        params = SimulationParameters(length=40, external_force=(0.3, -0.4, 0.2))
        compounding = generate_chain(params, 1.1, force_mode=ForceMode.COMPOUNDING)
        constant = generate_chain(params, 1.1, force_mode=ForceMode.CONSTANT)
        assert torch.allclose(compounding, constant)

    def test_caller_force_is_not_mutated(self):
        force = torch.tensor([1.0, 1.0, 1.0], dtype=torch.float64)
        calculate_wlc_chain(10, 50, 300, 0.0, 4.0, 1.0, force)
        assert torch.equal(force, torch.ones(3, dtype=torch.float64))

    def test_mode_accepts_string(self):
        params = SimulationParameters(length=5)
        assert torch.equal(
            generate_chain(params, 0.2, force_mode="constant"),
            generate_chain(params, 0.2, force_mode=ForceMode.CONSTANT),
        )


class TestDegenerateInput:
    def test_zero_rigidity_gives_non_finite_points(self):
        chain = calculate_wlc_chain(10, 50, 300, 0.5, 0.0, 1.0, (0, 0, 0))
        assert chain.shape == (3, 10)
        assert torch.equal(chain[:, 0], torch.zeros(3, dtype=torch.float64))
        assert not torch.isfinite(chain[:, 1:]).any()
        assert ChainAnalyzer(chain).is_degenerate

    def test_zero_rigidity_with_force(self):
        chain = calculate_wlc_chain(5, 50, 300, 0.5, 0.0, 1.0, (1.0, 0, 0))
        assert (~torch.isfinite(chain[:, 1:])).any(dim=0).all()

    @pytest.mark.parametrize("persistence_length", [0.0, -10.0])
    def test_non_positive_persistence_length(self, persistence_length):
        chain = calculate_wlc_chain(8, persistence_length, 300, 0.5, 1.0, 1.0, (0, 0, 0))
        assert chain.shape == (3, 8)
        assert not torch.isfinite(chain[:, 1:]).all()

    @pytest.mark.parametrize("length", [0, -3])
    def test_non_positive_length_gives_empty_chain(self, length):
        chain = calculate_wlc_chain(length, 50, 300, 0.1, 1.0, 1.0, (0, 0, 0))
        assert chain.shape == (3, 0)
        assert thermal_fluctuations(length, 0.1, 1.0).shape == (3, 0)


class TestCoreHelpers:
    def test_normalize(self):
        v = torch.tensor([3.0, 0.0, 4.0], dtype=torch.float64)
        assert torch.allclose(normalize(v), torch.tensor([0.6, 0.0, 0.8], dtype=torch.float64))

    def test_normalize_keeps_zero_vector(self):
        v = torch.zeros(3, dtype=torch.float64)
        assert torch.equal(normalize(v), v)

    def test_thermal_fluctuations(self):
        t, scale = 0.3, 2.0
        fluct = thermal_fluctuations(4, t, scale)
        assert fluct.shape == (3, 4)
        assert torch.equal(fluct[:, 0], torch.zeros(3, dtype=torch.float64))
        expected = [math.sin(t + 2), math.cos(t + 2), math.sin(0.5 * t)]
        assert fluct[:, 2].tolist() == pytest.approx(expected)

    def test_zero_noise_gives_zero_fluctuations(self):
        assert torch.all(thermal_fluctuations(10, 5.0, 0.0) == 0)
