import math

import numpy as np
import pytest
import torch

from wlcsim import ChainAnalyzer, SimulationParameters


@pytest.fixture
def straight_chain():
    x = torch.arange(4, dtype=torch.float64)
    return torch.stack([x, torch.zeros(4, dtype=torch.float64), torch.zeros(4, dtype=torch.float64)])


def test_straight_chain_geometry(straight_chain):
    analyzer = ChainAnalyzer(straight_chain)

    assert analyzer.chain_length == 4
    assert analyzer.segments.shape == (3, 3)
    assert analyzer.segment_lengths.tolist() == [1.0, 1.0, 1.0]
    assert analyzer.contour_length == 3.0
    assert analyzer.end_to_end.tolist() == [3.0, 0.0, 0.0]
    assert analyzer.end_to_end_distance == 3.0
    assert analyzer.radius_of_gyration == pytest.approx(math.sqrt(1.25))
    assert not analyzer.is_degenerate


def test_single_point_chain():
    analyzer = ChainAnalyzer(torch.zeros((3, 1), dtype=torch.float64))
    assert analyzer.contour_length == 0.0
    assert analyzer.end_to_end_distance == 0.0


def test_finite_bounds(straight_chain):
    center, half_range = ChainAnalyzer(straight_chain).finite_bounds()
    assert center.tolist() == [1.5, 0.0, 0.0]
    assert half_range == 1.5


def test_finite_bounds_minimum_half_range():
    chain = torch.zeros((3, 2), dtype=torch.float64)
    center, half_range = ChainAnalyzer(chain).finite_bounds(min_half_range=5.0)
    assert center.tolist() == [0.0, 0.0, 0.0]
    assert half_range == 5.0


def test_degenerate_chain_bounds_ignore_non_finite(straight_chain):
    chain = straight_chain.clone()
    chain[:, 2] = float("nan")
    chain[0, 3] = float("inf")

    analyzer = ChainAnalyzer(chain)
    assert analyzer.is_degenerate

    center, half_range = analyzer.finite_bounds(min_half_range=0.1)
    assert center.tolist() == [0.5, 0.0, 0.0]
    assert half_range == 0.5


def test_all_points_non_finite():
    chain = torch.full((3, 3), float("nan"), dtype=torch.float64)
    center, half_range = ChainAnalyzer(chain).finite_bounds()
    assert np.array_equal(center, np.zeros(3))
    assert half_range == 1.0


def test_force_contributions_shape():
    params = SimulationParameters(length=10, bending_rigidity=4.0, external_force=(1, -2, 8))
    contributions = ChainAnalyzer.force_contributions(params)
    assert contributions.shape == (3, 9)
    assert contributions[:, 0].tolist() == [0.25, -0.5, 2.0]
    assert contributions[:, 1].tolist() == [0.0625, -0.125, 0.5]
