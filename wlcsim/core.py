"""
Core utility functions for worm-like chain generation.

This module provides the elementary vector operations used by the chain
generator: safe normalization of direction vectors, the thermal
fluctuation scale, and the deterministic pseudo-noise field that stands
in for thermal kicks.

All helpers operate on float64 torch tensors with vector components along
dimension 0, matching the (3, L) chain layout used throughout the package.
"""

import math
import torch


def as_vector(
    values,
    device: torch.device | str = "cpu",
) -> torch.Tensor:
    """
    Convert a 3-sequence (tuple, list, array or tensor) to a float64 vector.

    A fresh tensor is always returned, so callers may mutate it in place
    without touching the caller's data.

    Args:
        values: Three numeric components (x, y, z)
        device: Target device

    Returns:
        Tensor of shape (3,)
    """
    vec = torch.as_tensor(values, dtype=torch.float64, device=device).clone()
    return vec.reshape(3)


def normalize(v: torch.Tensor, vector_dim: int = 0) -> torch.Tensor:
    """
    Scale vectors to unit length.

    A zero vector is returned unchanged rather than turned into NaN, so a
    direction that cancels out exactly does not poison the chain. Non-finite
    input stays non-finite.

    Args:
        v: Vectors to normalize, shape (..., 3, ...)
        vector_dim: Dimension along which vector components (x,y,z) lie

    Returns:
        Unit vectors, same shape as v

    Example:
            normalize(torch.tensor([3.0, 0.0, 4.0], dtype=torch.float64))
        tensor([0.6000, 0.0000, 0.8000], dtype=torch.float64)
    """
    norm = torch.linalg.norm(v, dim=vector_dim, keepdim=True)
    safe_norm = torch.where(norm == 0, torch.ones_like(norm), norm)
    return v / safe_norm


def thermal_scale(
    temperature: float,
    persistence_length: float,
    noise_level: float,
) -> torch.Tensor:
    """
    Amplitude of the thermal fluctuation term.

        scale = sqrt(T / Lp) * noise_level

    Computed in torch so that a non-positive persistence length produces
    inf/NaN instead of raising.

    Args:
        temperature: Temperature T
        persistence_length: Persistence length Lp
        noise_level: Noise multiplier

    Returns:
        0-dim float64 tensor
    """
    ratio = torch.tensor(temperature, dtype=torch.float64) / persistence_length
    return torch.sqrt(ratio) * noise_level


def thermal_fluctuations(
    length: int,
    time: float,
    scale: torch.Tensor | float,
    device: torch.device | str = "cpu",
) -> torch.Tensor:
    """
    Deterministic pseudo-noise for every segment of a chain.

    For segment index i (1 <= i < length):

        f_i = 0.5 * scale * (sin(t + i), cos(t + i), sin(t / 2))

    This is a smooth function of time and index, not a random draw, so the
    chain wriggles continuously as time advances.

    Args:
        length: Number of points in the chain
        time: Elapsed animation time
        scale: Fluctuation amplitude (see thermal_scale)
        device: Target device

    Returns:
        Fluctuation vectors, shape (3, length). Column 0 is unused and
        left at zero so column i belongs to segment i.
    """
    length = max(int(length), 0)
    phase = time + torch.arange(length, dtype=torch.float64, device=device)
    fluct = torch.stack([
        torch.sin(phase),
        torch.cos(phase),
        torch.full_like(phase, math.sin(0.5 * time)),
    ]) * 0.5 * scale
    if length > 0:
        fluct[:, 0] = 0.0
    return fluct
