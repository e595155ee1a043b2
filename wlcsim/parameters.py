"""
Editable physical parameters of the chain and the edit boundary.

SimulationParameters is an immutable snapshot that the animation reads
once per frame. ParameterStore is the only place where parameters change:
every edit is validated as a whole candidate set before the snapshot is
swapped, so the chain generator never sees an invalid domain through the
store.

PARAMETER_RANGES lists the slider ranges of the interactive viewer. They
are UI hints only; the store validates the physical domain and does not
clamp to these ranges.
"""

from dataclasses import dataclass, fields, replace as dc_replace
from typing import Tuple, NamedTuple
import math
import numbers


class ParameterValidationError(ValueError):
    """Raised when an edit would put a parameter outside its valid domain."""

    def __init__(self, name: str, value, reason: str):
        self.name = name
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {name}={value!r}: {reason}")


@dataclass(frozen=True)
class SimulationParameters:
    """
    Physical parameters of the worm-like chain.

    Attributes:
        length: Number of points in the chain (>= 1)
        persistence_length: Chain stiffness (> 0)
        temperature: Thermal energy scale (> 0)
        bending_rigidity: Attenuation of the external force (!= 0)
        noise_level: Thermal fluctuation multiplier (>= 0)
        external_force: Force vector (x, y, z)
    """

    length: int = 100
    persistence_length: float = 50.0
    temperature: float = 300.0
    bending_rigidity: float = 1.0
    noise_level: float = 1.0
    external_force: Tuple[float, float, float] = (0.0, 0.0, 0.0)

    def validate(self) -> "SimulationParameters":
        """
        Check the physical domain of every field.

        Returns:
            self, so calls can be chained

        Raises:
            ParameterValidationError: On the first violated constraint
        """
        if isinstance(self.length, bool) or not isinstance(self.length, int):
            raise ParameterValidationError("length", self.length, "must be an integer")
        if self.length < 1:
            raise ParameterValidationError("length", self.length, "must be >= 1")

        for name in ("persistence_length", "temperature", "bending_rigidity", "noise_level"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ParameterValidationError(name, value, "must be finite")

        if self.persistence_length <= 0:
            raise ParameterValidationError(
                "persistence_length", self.persistence_length, "must be > 0"
            )
        if self.temperature <= 0:
            raise ParameterValidationError("temperature", self.temperature, "must be > 0")
        if self.bending_rigidity == 0:
            raise ParameterValidationError(
                "bending_rigidity", self.bending_rigidity, "must be non-zero"
            )
        if self.noise_level < 0:
            raise ParameterValidationError("noise_level", self.noise_level, "must be >= 0")

        if len(self.external_force) != 3:
            raise ParameterValidationError(
                "external_force", self.external_force, "must have 3 components"
            )
        if not all(math.isfinite(c) for c in self.external_force):
            raise ParameterValidationError(
                "external_force", self.external_force, "must be finite"
            )
        return self

    def replace(self, **changes) -> "SimulationParameters":
        """Return a copy with the given fields changed (not validated)."""
        return dc_replace(self, **changes)


# Slider-style component names for the force vector
FORCE_COMPONENTS = {"force_x": 0, "force_y": 1, "force_z": 2}


class SliderSpec(NamedTuple):
    """Range of one editable parameter in the interactive viewer."""
    name: str
    label: str
    min: float
    max: float
    step: float
    integer: bool = False


PARAMETER_RANGES: Tuple[SliderSpec, ...] = (
    SliderSpec("length", "Length", 50, 200, 1, integer=True),
    SliderSpec("persistence_length", "Persistence Length", 10, 100, 1, integer=True),
    SliderSpec("temperature", "Temperature", 100, 500, 1, integer=True),
    SliderSpec("bending_rigidity", "Bending Rigidity", 0.1, 10, 0.1),
    SliderSpec("noise_level", "Noise Level", 0.1, 2, 0.1),
    SliderSpec("force_x", "External Force X", -10, 10, 0.1),
    SliderSpec("force_y", "External Force Y", -10, 10, 0.1),
    SliderSpec("force_z", "External Force Z", -10, 10, 0.1),
)


class ParameterStore:
    """
    Holds the current parameter snapshot and applies edits to it.

    Edits arriving between frames become visible to the next snapshot()
    call as a whole; a rejected edit leaves the previous snapshot in place.

    Example:
            store = ParameterStore()
            store.set("force_x", 2.5)
            store.snapshot().external_force
        (2.5, 0.0, 0.0)
    """

    _FIELD_NAMES = frozenset(f.name for f in fields(SimulationParameters))

    def __init__(self, initial: SimulationParameters | None = None):
        """
        Args:
            initial: Starting parameters (defaults if None)

        Raises:
            ParameterValidationError: If the initial configuration is invalid
        """
        initial = initial if initial is not None else SimulationParameters()
        self._params = self._coerce(initial).validate()

    def snapshot(self) -> SimulationParameters:
        """Current immutable parameter set."""
        return self._params

    def set(self, name: str, value) -> SimulationParameters:
        """
        Edit a single parameter.

        Args:
            name: Field name, or force_x / force_y / force_z
            value: New value

        Returns:
            The new snapshot

        Raises:
            KeyError: Unknown parameter name
            ParameterValidationError: Value outside the valid domain
        """
        return self.update(**{name: value})

    def update(self, **changes) -> SimulationParameters:
        """
        Edit several parameters at once.

        All changes are validated together and applied atomically.

        Returns:
            The new snapshot
        """
        force = list(self._params.external_force)
        field_changes = {}

        for name, value in changes.items():
            if name in FORCE_COMPONENTS:
                force[FORCE_COMPONENTS[name]] = _as_float(name, value)
            elif name in self._FIELD_NAMES:
                field_changes[name] = value
            else:
                raise KeyError(f"Unknown parameter: {name}")

        if "external_force" in field_changes:
            # Component edits apply on top of a vector given in the same call
            base = self._coerce_force(field_changes["external_force"])
            if len(base) != 3:
                raise ParameterValidationError(
                    "external_force", base, "must have 3 components"
                )
            force = [
                force[i] if name in changes else base[i]
                for name, i in FORCE_COMPONENTS.items()
            ]
        field_changes["external_force"] = tuple(force)

        candidate = self._coerce(self._params.replace(**field_changes)).validate()
        self._params = candidate
        return candidate

    @staticmethod
    def _coerce_force(values) -> Tuple[float, ...]:
        try:
            return tuple(float(c) for c in values)
        except (TypeError, ValueError):
            raise ParameterValidationError(
                "external_force", values, "must be numeric"
            ) from None

    @staticmethod
    def _coerce(params: SimulationParameters) -> SimulationParameters:
        """Normalize slider-style values (numpy scalars, float lengths, lists)."""
        length = params.length
        if isinstance(length, numbers.Real) and not isinstance(length, bool):
            if not float(length).is_integer():
                raise ParameterValidationError("length", length, "must be an integer")
            length = int(length)

        force = ParameterStore._coerce_force(params.external_force)

        return params.replace(
            length=length,
            persistence_length=_as_float("persistence_length", params.persistence_length),
            temperature=_as_float("temperature", params.temperature),
            bending_rigidity=_as_float("bending_rigidity", params.bending_rigidity),
            noise_level=_as_float("noise_level", params.noise_level),
            external_force=force,
        )


def _as_float(name: str, value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ParameterValidationError(name, value, "must be numeric") from None
