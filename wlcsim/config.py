"""
Configuration management for the worm-like chain animation.

This module provides a centralized configuration class that manages
the run-level settings: device allocation, animation timing, the force
attenuation mode, camera and figure layout, and output paths.

Physical chain parameters live in parameters.py; they are edited while
the animation runs, whereas everything here is fixed at startup.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple
import math
import torch

from .chain import ForceMode


@dataclass
class SimulationConfig:
    """
    Central configuration for the WLC animation.

    This class manages:
    - Hardware configuration (CPU/GPU device)
    - Animation clock (time step per frame tick, frame interval)
    - Force attenuation mode of the chain generator
    - Camera and figure layout
    - File paths and GIF export settings

    Animation clock:
        Time advances by exactly `time_step` per display frame, so the
        animation speed is coupled to the refresh rate, not wall time.

        Example (time_step=0.01):
            after   1 tick: t = 0.01
            after 100 ticks: t = 1.00

    Attributes:
        device: Device for PyTorch tensors ("cpu" or "cuda")
        time_step: Time increment applied once per frame tick
        force_mode: "compounding" (force decays along the chain) or
            "constant" (same force contribution at every segment)
        interval_ms: Delay between frames of the interactive animation
        fov: Vertical field of view of the camera in degrees
        figure_size: (width, height) of the viewer figure in inches
        output_dir: Directory for exported GIFs
        frame_dpi: DPI resolution for captured frames
        gif_duration: Duration per frame in milliseconds
        verbose: Print per-frame progress lines
    """

    # Hardware configuration
    device: str = "cpu"

    # Animation clock
    time_step: float = 0.01
    force_mode: str = ForceMode.COMPOUNDING.value
    interval_ms: int = 16  # ~60 Hz refresh

    # Camera (perspective camera looking down -z at the origin)
    fov: float = 50.0  # degrees
    figure_size: Tuple[float, float] = (14.0, 8.0)

    # File system paths
    output_dir: Path = field(default_factory=lambda: Path("./local/outputs/gifs"))

    # Export parameters
    frame_dpi: int = 96
    gif_duration: int = 20  # milliseconds per frame

    verbose: bool = False

    # Private fields (computed in __post_init__)
    _torch_device: torch.device = field(init=False, repr=False)
    _force_mode: ForceMode = field(init=False, repr=False)

    def __post_init__(self):
        """Initialize derived properties and create directories."""
        self.output_dir = Path(self.output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

        self._torch_device = torch.device(self.device)

        # Raises ValueError on an unknown mode name
        self._force_mode = ForceMode(self.force_mode)
        self.force_mode = self._force_mode.value

        if self.time_step <= 0:
            raise ValueError(f"time_step must be positive, got {self.time_step}")

    @property
    def torch_device(self) -> torch.device:
        """Get PyTorch device object for tensor allocation."""
        return self._torch_device

    @property
    def chain_force_mode(self) -> ForceMode:
        """Force attenuation mode as a ForceMode member."""
        return self._force_mode

    @property
    def focal_length(self) -> float:
        """
        Matplotlib 3D focal length equivalent to the camera field of view.

        Returns:
            1 / tan(fov / 2)

        Example:
            >>> SimulationConfig(fov=90).focal_length
            1.0  # up to rounding
        """
        return 1.0 / math.tan(math.radians(self.fov) / 2)

    def output_path(self, name: str) -> Path:
        """
        Get output file path for an exported animation.

        Args:
            name: Base name of the file (without extension)

        Returns:
            Path to a GIF inside output_dir
        """
        return self.output_dir / f"{name}.gif"

    def __repr__(self) -> str:
        """Formatted string representation of configuration."""
        return (
            f"SimulationConfig(\n"
            f"  device={self.device}, force_mode={self.force_mode}\n"
            f"  time_step={self.time_step}, interval_ms={self.interval_ms}\n"
            f"  fov={self.fov}, figure_size={self.figure_size}\n"
            f"  output_dir={self.output_dir}\n"
            f")"
        )
