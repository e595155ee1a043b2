"""
Worm-Like Chain DNA Animation Package

An animated, interactively parameterized worm-like chain (WLC) used as a
stylized DNA visualization. Every frame the whole chain is regenerated
from six physical parameters and the elapsed animation time.

Main Components:
---------------
config.SimulationConfig - Run configuration (device, clock, camera, paths)
parameters.ParameterStore - Validated, editable chain parameters
chain.calculate_wlc_chain - Chain generation (pure function)
animation.AnimationDriver - Frame clock driving the generator
analysis.ChainAnalyzer - Geometry of one chain
plotting.* - 3D rendering, sliders and GIF capture

Module Structure:
----------------
├── run.py                  # Interactive viewer / GIF export
└── wlcsim/                 # Package
    ├── config.py           # Configuration management
    ├── parameters.py       # Parameters, validation and slider ranges
    ├── core.py             # Vector helpers and thermal pseudo-noise
    ├── chain.py            # Chain generator
    ├── animation.py        # Frame-tick driver
    ├── analysis.py         # Chain analysis tools
    ├── plotting.py         # Visualization classes
    └── __init__.py         # This file

For detailed usage, see run.py.
"""

from .chain import ForceMode, calculate_wlc_chain, generate_chain
from .config import SimulationConfig
from .parameters import (
    SimulationParameters,
    ParameterStore,
    ParameterValidationError,
    SliderSpec,
    PARAMETER_RANGES,
)
from .animation import AnimationDriver
from .analysis import ChainAnalyzer
from .core import normalize, thermal_fluctuations
from .plotting import (
    ChainPlotter,
    ControlPanel,
    InteractiveViewer,
    FrameCapture,
    BasePlotter
)

__version__ = "1.0.0"

__all__ = [
    # Configuration
    'SimulationConfig',
    'SimulationParameters',
    'ParameterStore',
    'ParameterValidationError',
    'SliderSpec',
    'PARAMETER_RANGES',

    # Core functionality
    'ForceMode',
    'calculate_wlc_chain',
    'generate_chain',
    'AnimationDriver',
    'ChainAnalyzer',

    # Vector utilities
    'normalize',
    'thermal_fluctuations',

    # Visualization
    'ChainPlotter',
    'ControlPanel',
    'InteractiveViewer',
    'FrameCapture',
    'BasePlotter',
]
