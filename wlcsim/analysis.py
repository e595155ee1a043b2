"""
Analysis tools for a single chain configuration.

This module provides the ChainAnalyzer class for computing geometric
properties of one generated chain, including:
- Segment vectors and their (non-unit) lengths
- Contour length and end-to-end distance
- Radius of gyration
- Degeneracy detection and finite bounding box for plotting
- The per-segment force contribution actually applied by the generator
"""

import torch
import numpy as np
from typing import Tuple

from .chain import ForceMode
from .core import as_vector


class ChainAnalyzer:
    """
    Geometric view of one chain.

    Shape convention: the chain tensor is (3, L) where L is the number of
    points; segments are (3, L - 1).
    """

    def __init__(self, chain: torch.Tensor):
        """
        Args:
            chain: Chain coordinates, shape (3, L)
        """
        self._chain = chain
        self.chain_length = chain.shape[1]

    # ------------------------------------------------------------------
    # Core properties
    # ------------------------------------------------------------------

    @property
    def chain(self) -> np.ndarray:
        """Chain coordinates as NumPy array, shape (3, L)."""
        return self._chain.cpu().numpy()

    @property
    def segments(self) -> torch.Tensor:
        """Segment vectors p[i] - p[i-1], shape (3, L - 1)."""
        return self._chain[:, 1:] - self._chain[:, :-1]

    @property
    def segment_lengths(self) -> np.ndarray:
        """Length of every segment, shape (L - 1,)."""
        return torch.linalg.norm(self.segments, dim=0).cpu().numpy()

    @property
    def contour_length(self) -> float:
        """Sum of segment lengths."""
        return float(self.segment_lengths.sum())

    @property
    def end_to_end(self) -> np.ndarray:
        """Vector from the first to the last point, shape (3,)."""
        return (self._chain[:, -1] - self._chain[:, 0]).cpu().numpy()

    @property
    def end_to_end_distance(self) -> float:
        return float(np.linalg.norm(self.end_to_end))

    @property
    def radius_of_gyration(self) -> float:
        """
        Root mean square distance of the points from their center of mass.
        """
        centered = self._chain - self._chain.mean(dim=1, keepdim=True)
        return float(torch.sqrt((centered ** 2).sum(dim=0).mean()))

    # ------------------------------------------------------------------
    # Degeneracy and display helpers
    # ------------------------------------------------------------------

    @property
    def is_degenerate(self) -> bool:
        """True if any coordinate is NaN or infinite."""
        return not bool(torch.isfinite(self._chain).all())

    def finite_bounds(self, min_half_range: float = 1.0) -> Tuple[np.ndarray, float]:
        """
        Cubic bounding box of the finite points.

        Args:
            min_half_range: Lower bound on the returned half-width

        Returns:
            center: Box center, shape (3,)
            half_range: Half of the largest box side
        """
        finite = torch.isfinite(self._chain).all(dim=0)
        pts = self._chain[:, finite]
        if pts.shape[1] == 0:
            return np.zeros(3), min_half_range

        lo = pts.min(dim=1).values
        hi = pts.max(dim=1).values
        center = ((lo + hi) / 2).cpu().numpy()
        half_range = max(float((hi - lo).max()) / 2, min_half_range)
        return center, half_range

    @staticmethod
    def force_contributions(
        params,
        force_mode: ForceMode = ForceMode.COMPOUNDING,
    ) -> torch.Tensor:
        """
        Force term added to the direction at each step of the generator.

        For COMPOUNDING the term at step i is F * (1/b)^i; for CONSTANT it
        is F / b at every step.

        Args:
            params: SimulationParameters snapshot
            force_mode: Force attenuation mode

        Returns:
            Force terms, shape (3, length - 1); column i-1 belongs to step i
        """
        force = as_vector(params.external_force)
        inv_rigidity = 1.0 / torch.tensor(params.bending_rigidity, dtype=torch.float64)
        steps = torch.arange(1, max(params.length, 1), dtype=torch.float64)

        if ForceMode(force_mode) is ForceMode.COMPOUNDING:
            factors = inv_rigidity ** steps
        else:
            factors = inv_rigidity.expand_as(steps)
        return force.view(3, 1) * factors.view(1, -1)
