"""
Frame-tick driver for the chain animation.

The AnimationDriver owns the animation clock. Each tick advances time by
one fixed step, reads the parameter store exactly once, regenerates the
whole chain and hands it to every subscribed sink (typically a plotter).

Time is coupled to the frame rate, not to wall time: a faster display
refresh animates faster. Parameter edits never touch the clock.
"""

import time
from typing import Callable, List, Optional

import torch

from .chain import ForceMode, generate_chain
from .parameters import ParameterStore

# sink(chain, time) -> None
ChainSink = Callable[[torch.Tensor, float], None]


class Timer:
    """Simple timer for performance monitoring."""

    def __init__(self):
        self.start_time = time.perf_counter()
        self.last_lap = time.perf_counter()

    def lap(self) -> float:
        now = time.perf_counter()
        delta = now - self.last_lap
        self.last_lap = now
        return delta

    @property
    def total(self) -> float:
        return time.perf_counter() - self.start_time


class AnimationDriver:
    """
    Advances the animation clock and publishes one chain per frame.

    Attributes:
        store:       ParameterStore read once per tick
        time:        Accumulated animation time (starts at 0)
        time_step:   Increment applied per tick
        frame_count: Number of ticks performed
        force_mode:  Force attenuation mode passed to the generator
    """

    def __init__(
        self,
        store: ParameterStore,
        time_step: float = 0.01,
        force_mode: ForceMode = ForceMode.COMPOUNDING,
        device: torch.device | str = "cpu",
        verbose: bool = False,
    ):
        """
        Args:
            store:      Source of parameter snapshots
            time_step:  Time increment per frame tick
            force_mode: Force attenuation mode for the generator
            device:     Device for chain tensors
            verbose:    Print a progress line per tick
        """
        self.store = store
        self.time_step = time_step
        self.force_mode = ForceMode(force_mode)
        self.device = device
        self.verbose = verbose

        self.time: float = 0.0
        self.frame_count: int = 0
        self._latest: Optional[torch.Tensor] = None
        self._sinks: List[ChainSink] = []
        self._timer = Timer()

    @classmethod
    def from_config(cls, store: ParameterStore, config) -> "AnimationDriver":
        """Build a driver from a SimulationConfig."""
        return cls(
            store,
            time_step=config.time_step,
            force_mode=config.chain_force_mode,
            device=config.torch_device,
            verbose=config.verbose,
        )

    def subscribe(self, sink: ChainSink) -> None:
        """Register a callable receiving (chain, time) after every tick."""
        self._sinks.append(sink)

    def tick(self) -> torch.Tensor:
        """
        Advance one frame.

        Returns:
            The freshly generated chain, shape (3, length)
        """
        self.time += self.time_step
        self.frame_count += 1

        params = self.store.snapshot()
        chain = generate_chain(
            params,
            self.time,
            force_mode=self.force_mode,
            device=self.device,
        )
        self._latest = chain

        for sink in self._sinks:
            sink(chain, self.time)

        if self.verbose:
            print(
                f"\r  ↳ [Frame {self.frame_count}] t={self.time:.2f} | "
                f"L={params.length} | "
                f"Last: {self._timer.lap() * 1000:.1f}ms | "
                f"Total: {self._timer.total:.2f}s",
                end=""
            )

        return chain

    def run(self, n_frames: int) -> Optional[torch.Tensor]:
        """
        Perform n_frames ticks back to back.

        Returns:
            The last generated chain (None if n_frames is 0)
        """
        for _ in range(n_frames):
            self.tick()
        return self._latest

    @property
    def latest(self) -> Optional[torch.Tensor]:
        """Most recent chain, or None before the first tick."""
        return self._latest
