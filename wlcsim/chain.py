"""
Worm-like chain generation.

Builds the backbone of a stylized DNA strand as an ordered sequence of 3D
points. Each new segment starts from the previous growth direction,
receives a deterministic thermal kick, is renormalized, and is then
nudged by an external force attenuated by the bending rigidity:

    d_i = normalize(d_{i-1} + f_i) + F_i
    p_i = p_{i-1} + d_i

The direction is NOT renormalized after the force term, so segment
lengths vary along the chain.

Force attenuation (ForceMode):
    COMPOUNDING  F_i = F * (1/b)^i  the force vector is rescaled in place
                                    every step, so its influence decays
                                    geometrically along the chain
    CONSTANT     F_i = F / b        recomputed fresh at every step

The generator is a pure function: all working state (direction, force) is
local to one call, and no numeric input makes it raise. Invalid domains
(persistence_length <= 0, bending_rigidity == 0) yield non-finite points.
"""

from enum import Enum
from typing import TYPE_CHECKING

import torch

from .core import as_vector, normalize, thermal_scale, thermal_fluctuations

if TYPE_CHECKING:
    from .parameters import SimulationParameters


class ForceMode(str, Enum):
    """How the external force is attenuated from one segment to the next."""

    COMPOUNDING = "compounding"
    CONSTANT = "constant"


def calculate_wlc_chain(
    length: int,
    persistence_length: float,
    temperature: float,
    time: float,
    bending_rigidity: float,
    noise_level: float,
    external_force,
    force_mode: ForceMode = ForceMode.COMPOUNDING,
    device: torch.device | str = "cpu",
) -> torch.Tensor:
    """
    Generate one chain configuration at the given animation time.

    Args:
        length: Number of points in the chain (>= 1)
        persistence_length: Stiffness, larger means less fluctuation (> 0)
        temperature: Thermal energy scale (> 0)
        time: Elapsed animation time
        bending_rigidity: Attenuation of the external force (!= 0)
        noise_level: Multiplier on the thermal fluctuation (>= 0)
        external_force: Force vector (x, y, z)
        force_mode: Force attenuation mode (see module docstring)
        device: Device for tensor allocation

    Returns:
        Chain coordinates, shape (3, length), float64. chain[:, 0] is the
        origin and chain[:, i] is the position after i segments.

    Example:
            calculate_wlc_chain(3, 50, 300, 0.0, 1.0, 0.0, (0, 0, 0))
        tensor([[0., 1., 2.],
                [0., 0., 0.],
                [0., 0., 0.]], dtype=torch.float64)
    """
    force_mode = ForceMode(force_mode)
    n_points = max(int(length), 0)

    scale = thermal_scale(temperature, persistence_length, noise_level)
    fluctuations = thermal_fluctuations(n_points, time, scale, device=device)

    # 1/b as a tensor: b == 0 gives inf instead of ZeroDivisionError
    inv_rigidity = 1.0 / torch.tensor(bending_rigidity, dtype=torch.float64)

    direction = torch.tensor([1.0, 0.0, 0.0], dtype=torch.float64, device=device)
    force = as_vector(external_force, device=device)
    step_force = force * inv_rigidity

    points = torch.zeros((3, n_points), dtype=torch.float64, device=device)

    for i in range(1, n_points):
        direction = normalize(direction + fluctuations[:, i])

        if force_mode is ForceMode.COMPOUNDING:
            # In place: the next step scales the already-scaled force
            force.mul_(inv_rigidity)
            direction = direction + force
        else:
            direction = direction + step_force

        points[:, i] = points[:, i - 1] + direction

    return points


def generate_chain(
    params: "SimulationParameters",
    time: float,
    force_mode: ForceMode = ForceMode.COMPOUNDING,
    device: torch.device | str = "cpu",
) -> torch.Tensor:
    """
    Generate a chain from a parameter snapshot.

    Args:
        params: SimulationParameters snapshot (read once)
        time: Elapsed animation time
        force_mode: Force attenuation mode
        device: Device for tensor allocation

    Returns:
        Chain coordinates, shape (3, params.length)
    """
    return calculate_wlc_chain(
        length=params.length,
        persistence_length=params.persistence_length,
        temperature=params.temperature,
        time=time,
        bending_rigidity=params.bending_rigidity,
        noise_level=params.noise_level,
        external_force=params.external_force,
        force_mode=force_mode,
        device=device,
    )
