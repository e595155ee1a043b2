"""
Visualization tools for the worm-like chain animation.

This module provides the rendering and parameter-editing side of the
application: a 3D polyline plotter that redraws the chain each frame,
a slider panel forwarding edits to the ParameterStore, the interactive
viewer tying both to the AnimationDriver, and frame capture for GIF
export.
"""

import io
from functools import partial
from pathlib import Path
from typing import Dict, Optional, Sequence

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation
from matplotlib.widgets import Slider
from PIL import Image
import torch

from .analysis import ChainAnalyzer
from .animation import AnimationDriver
from .parameters import (
    FORCE_COMPONENTS,
    PARAMETER_RANGES,
    ParameterStore,
    ParameterValidationError,
    SliderSpec,
)

# Camera looking down -z: x to the right, y up
TOP_ELEVATION = 90
TOP_AZIMUTH = -90
CHAIN_COLOR = "blue"

TITLE = "DNA Simulation Using the Worm-Like Chain (WLC) Model"
DESCRIPTION = (
    "This simulation models DNA as a flexible chain using the Worm-Like Chain\n"
    "(WLC) model. The WLC model describes the DNA as a continuous, flexible\n"
    "polymer that can bend and twist."
)
PARAMETER_HELP = (
    "Length: total number of segments in the DNA chain.\n"
    "Persistence Length: stiffness; higher values mean a more rigid chain.\n"
    "Temperature: thermal energy; higher values increase fluctuations.\n"
    "Bending Rigidity: resistance to bending; attenuates the external force.\n"
    "Noise Level: intensity of the thermal fluctuations.\n"
    "External Force X, Y, Z: force stretching or compressing the chain."
)


class FrameCapture:
    """
    Frame buffer for headless GIF export.

    Each captured frame is stored as an RGB image together with the
    animation time it shows, so the export can report the time span
    it covers.
    """

    def __init__(self, dpi: int = 64):
        self.dpi = dpi
        self.frames: list[Image.Image] = []
        self.times: list[Optional[float]] = []

    def __len__(self) -> int:
        return len(self.frames)

    def capture(self, fig: plt.Figure, time: Optional[float] = None) -> Image.Image:
        """
        Rasterize the figure and append it to the buffer.

        Args:
            fig: Figure to rasterize
            time: Animation time of the frame, if known

        Returns:
            The captured frame
        """
        with io.BytesIO() as buf:
            fig.savefig(buf, format="png", dpi=self.dpi, facecolor="white")
            buf.seek(0)
            with Image.open(buf) as png:
                frame = png.convert("RGB")

        self.frames.append(frame)
        self.times.append(time)
        return frame

    def clear(self) -> None:
        self.frames.clear()
        self.times.clear()

    def time_span(self) -> Optional[tuple[float, float]]:
        """First and last known frame times, or None if no frame has one."""
        known = [t for t in self.times if t is not None]
        if not known:
            return None
        return known[0], known[-1]

    def save_gif(
            self,
            output_path: Path | str,
            duration: int = 20,
            loop: int = 0
    ) -> Optional[Path]:
        """
        Write the buffered frames as an animated GIF and empty the buffer.

        Args:
            output_path: Destination file; parent directories are created
            duration: Display time per frame in milliseconds
            loop: Loop count written to the file (0 loops forever)

        Returns:
            The written path, or None if the buffer was empty
        """
        if not self.frames:
            print("⚠️  No frames captured, skipping GIF save")
            return None

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        first, *rest = self.frames
        first.save(
            output_path,
            format="GIF",
            save_all=True,
            append_images=rest,
            duration=duration,
            loop=loop,
            disposal=2,
        )

        span = self.time_span()
        where = f" (t={span[0]:.2f}..{span[1]:.2f})" if span else ""
        print(f"✅ Saved GIF: {output_path} [{len(self)} frames{where}]")
        self.clear()
        return output_path


class BasePlotter:
    """
    Owns a figure with one 3D axis and the frame buffer used for export.

    Subclasses implement plot(chain, time).
    """

    def __init__(self, fig: Optional[plt.Figure] = None, ax=None, dpi: int = 64):
        """
        Args:
            fig: Figure to draw into (a new one if None)
            ax: 3D axis to draw into (added to fig if None)
            dpi: Rasterization resolution of captured frames
        """
        if ax is None:
            fig = fig if fig else plt.figure()
            ax = fig.add_subplot(111, projection="3d")
        self.fig = ax.figure
        self.ax = ax
        self.frame_capture = FrameCapture(dpi=dpi)
        self._last_time: Optional[float] = None

    def capture_frame(self) -> Image.Image:
        """Buffer the figure as it currently looks, tagged with the last plotted time."""
        return self.frame_capture.capture(self.fig, time=self._last_time)

    def save_gif(
            self,
            output_path: Path | str,
            duration: int = 20,
            loop: int = 0
    ) -> Optional[Path]:
        return self.frame_capture.save_gif(output_path, duration, loop)

    def close(self) -> None:
        plt.close(self.fig)

    def plot(self, chain: torch.Tensor, time: Optional[float] = None):
        raise NotImplementedError("Subclasses must implement plot()")


class ChainPlotter(BasePlotter):
    """
    3D polyline rendering of the chain.

    Keeps a single line artist whose data is replaced on every plot()
    call, so each frame fully replaces the previous geometry.
    """

    def __init__(
            self,
            fig: Optional[plt.Figure] = None,
            ax=None,
            color: str = CHAIN_COLOR,
            lw: float = 1.5,
            half_range: Optional[float] = None,
            dpi: int = 64
    ):
        """
        Initialize 3D plotter.

        Args:
            fig: Matplotlib figure
            ax: 3D axes (will create if None)
            color: Line color
            lw: Line width
            half_range: Fixed view half-width around the origin; follow
                the chain's bounding box if None
            dpi: Rasterization resolution of captured frames
        """
        super().__init__(fig, ax, dpi=dpi)
        self.color = color
        self.lw = lw
        self.half_range = half_range
        self.line = None
        self._warned_degenerate = False

        self.ax.set_axis_off()
        self.ax.set_box_aspect([1, 1, 1])
        self.ax.view_init(elev=TOP_ELEVATION, azim=TOP_AZIMUTH)

    def setup_camera(self, focal_length: float) -> None:
        """Switch to a perspective projection with the given focal length."""
        self.ax.set_proj_type("persp", focal_length=focal_length)

    def plot(self, chain: torch.Tensor, time: Optional[float] = None) -> None:
        """
        Draw the chain as one connected polyline.

        Args:
            chain: Chain coordinates, shape (3, L)
            time: Animation time, shown in the title if given
        """
        analyzer = ChainAnalyzer(chain)
        pts = analyzer.chain

        if analyzer.is_degenerate:
            if not self._warned_degenerate:
                print("⚠️  Chain contains non-finite points, drawing finite part only")
                self._warned_degenerate = True
            # Line3D skips NaN but not inf
            pts = np.where(np.isfinite(pts), pts, np.nan)

        x, y, z = pts
        if self.line is None:
            (self.line,) = self.ax.plot(x, y, z, color=self.color, lw=self.lw)
        else:
            self.line.set_data_3d(x, y, z)

        if self.half_range is None:
            center, half_range = analyzer.finite_bounds()
        else:
            center, half_range = np.zeros(3), self.half_range

        self.ax.set_xlim(center[0] - half_range, center[0] + half_range)
        self.ax.set_ylim(center[1] - half_range, center[1] + half_range)
        self.ax.set_zlim(center[2] - half_range, center[2] + half_range)

        if time is not None:
            self.ax.set_title(
                f"t={time:.2f}  L={analyzer.chain_length}  "
                f"R_ee={analyzer.end_to_end_distance:.1f}  "
                f"R_g={analyzer.radius_of_gyration:.1f}",
                fontsize=9
            )
        self._last_time = time


class ControlPanel:
    """
    Slider panel editing the ParameterStore.

    One slider per SliderSpec. A change is forwarded to the store; if the
    store rejects it the slider snaps back to the stored value.
    """

    def __init__(
            self,
            fig: plt.Figure,
            store: ParameterStore,
            specs: Sequence[SliderSpec] = PARAMETER_RANGES,
            left: float = 0.12,
            bottom: float = 0.04,
            width: float = 0.18,
            height: float = 0.022,
            spacing: float = 0.035
    ):
        """
        Args:
            fig: Figure to place the sliders in
            store: Parameter store receiving edits
            specs: Slider ranges, top to bottom
            left, bottom, width, height: Slider geometry (figure fraction)
            spacing: Vertical distance between sliders
        """
        self.fig = fig
        self.store = store
        self.specs = {spec.name: spec for spec in specs}
        self.sliders: Dict[str, Slider] = {}

        for row, spec in enumerate(reversed(specs)):
            ax = fig.add_axes([left, bottom + row * spacing, width, height])
            slider = Slider(
                ax,
                spec.label,
                spec.min,
                spec.max,
                valinit=self.current_value(spec.name),
                valstep=spec.step,
                color=CHAIN_COLOR
            )
            slider.label.set_fontsize(8)
            slider.on_changed(partial(self._on_change, spec.name))
            self.sliders[spec.name] = slider

    def current_value(self, name: str) -> float:
        """Value of a parameter in the current store snapshot."""
        params = self.store.snapshot()
        if name in FORCE_COMPONENTS:
            return params.external_force[FORCE_COMPONENTS[name]]
        return getattr(params, name)

    def _on_change(self, name: str, val: float) -> None:
        spec = self.specs[name]
        value = int(round(val)) if spec.integer else round(float(val), 6)

        try:
            self.store.set(name, value)
        except ParameterValidationError as e:
            print(f"⚠️  Rejected edit: {e}")
            self.sliders[name].set_val(self.current_value(name))


class InteractiveViewer:
    """
    Interactive window: animated chain plus parameter sliders.

    The FuncAnimation frame callback is AnimationDriver.tick(); the chain
    plotter is subscribed to the driver and redraws on every tick.
    """

    def __init__(self, config, store: Optional[ParameterStore] = None):
        """
        Args:
            config: SimulationConfig
            store: Parameter store (defaults if None)
        """
        self.config = config
        self.store = store if store is not None else ParameterStore()
        self.driver = AnimationDriver.from_config(self.store, config)

        self.fig = plt.figure(figsize=config.figure_size)
        chain_ax = self.fig.add_axes([0.35, 0.0, 0.65, 1.0], projection="3d")
        self.plotter = ChainPlotter(self.fig, chain_ax)
        self.plotter.setup_camera(config.focal_length)
        self.driver.subscribe(self.plotter.plot)

        self._draw_description()
        self.controls = ControlPanel(self.fig, self.store)
        self.anim: Optional[FuncAnimation] = None

    def _draw_description(self) -> None:
        self.fig.text(0.02, 0.97, TITLE, fontsize=12, fontweight="bold", va="top")
        self.fig.text(0.02, 0.91, DESCRIPTION, fontsize=9, va="top")
        self.fig.text(0.02, 0.78, "Parameters:", fontsize=9, fontweight="bold", va="top")
        self.fig.text(0.02, 0.75, PARAMETER_HELP, fontsize=8, va="top")

    def _animate_frame(self, frame):
        self.driver.tick()
        return (self.plotter.line,)

    def start(self) -> FuncAnimation:
        """Schedule frame ticks on the figure's event loop."""
        self.anim = FuncAnimation(
            self.fig,
            self._animate_frame,
            interval=self.config.interval_ms,
            blit=False,
            cache_frame_data=False
        )
        return self.anim

    def stop(self) -> None:
        """Stop scheduling frame ticks."""
        if self.anim is not None:
            self.anim.event_source.stop()

    def show(self) -> None:
        """Start the animation and block in the GUI main loop."""
        self.start()
        plt.show()


# Export all plotter classes
__all__ = [
    'FrameCapture',
    'BasePlotter',
    'ChainPlotter',
    'ControlPanel',
    'InteractiveViewer',
]
