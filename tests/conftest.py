import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pytest

from wlcsim import SimulationConfig, SimulationParameters, ParameterStore


@pytest.fixture
def config(tmp_path):
    return SimulationConfig(output_dir=tmp_path / "gifs", frame_dpi=32)


@pytest.fixture
def store():
    return ParameterStore()


@pytest.fixture
def quiet_params():
    """Noise-free parameters: the chain only feels the external force."""
    return SimulationParameters(length=6, noise_level=0.0)


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")
