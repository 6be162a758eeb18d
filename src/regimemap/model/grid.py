"""
Grid Description (Data Model)
=============================
This module defines the immutable description of one regime-grid evaluation.

Why is this file needed?
------------------------
1. Immutability: A grid request is built on every parameter change (e.g. a
   slider move) and must never change after it has been sent to the worker.
2. Sequencing: Only the dispatcher assigns sequence numbers. Callers build
   'GridParameters'; the dispatcher stamps them into a 'GridSpec'.
3. Framing: 'GridSpec' knows how to turn itself into the request message
   exchanged with the computation channel, and back.

Classes:
    Composition: Hydrogen / helium / metal mass fractions.
    GridParameters: Sweep bounds, cell counts, composition and eta.
    GridSpec: GridParameters plus the sequence number.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from numbers import Real
from typing import Any, Dict, Mapping

import numpy as np

from regimemap.errors import ProtocolError

REQUEST_KEYS = ("logTMin", "logTMax", "logRhoMin", "logRhoMax", "cols", "rows", "X", "Y", "Z", "eta", "seq")


def _positive_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise ValueError(f"'{name}' must be a positive integer, got {value!r}.")
    if value < 1:
        raise ValueError(f"'{name}' must be a positive integer, got {value}.")
    return int(value)


@dataclass(frozen=True)
class Composition:
    """
    Mass fractions of the stellar matter.

    No sum-to-one check is made; the evaluator tolerates any values.
    """
    hydrogen_mass_fraction: float = 0.7
    helium_mass_fraction: float = 0.28
    metal_mass_fraction: float = 0.02


@dataclass(frozen=True)
class GridParameters:
    """Everything needed to evaluate a grid, except the sequence number."""
    log_temperature_min: float
    log_temperature_max: float
    log_density_min: float
    log_density_max: float
    columns: int
    rows: int
    composition: Composition = field(default_factory=Composition)
    radiation_departure_parameter: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "columns", _positive_int("columns", self.columns))
        object.__setattr__(self, "rows", _positive_int("rows", self.rows))

    @property
    def cell_count(self) -> int:
        return self.columns * self.rows

    def stamp(self, sequence_number: int) -> GridSpec:
        """Attach a sequence number, producing the GridSpec that gets sent."""
        return GridSpec(
            log_temperature_min=self.log_temperature_min,
            log_temperature_max=self.log_temperature_max,
            log_density_min=self.log_density_min,
            log_density_max=self.log_density_max,
            columns=self.columns,
            rows=self.rows,
            composition=self.composition,
            radiation_departure_parameter=self.radiation_departure_parameter,
            sequence_number=sequence_number,
        )


@dataclass(frozen=True)
class GridSpec(GridParameters):
    """A stamped, immutable evaluation request."""
    sequence_number: int = 0

    def __post_init__(self) -> None:
        super().__post_init__()
        if isinstance(self.sequence_number, bool) or not isinstance(self.sequence_number, (int, np.integer)):
            raise ValueError(f"'sequence_number' must be an integer, got {self.sequence_number!r}.")
        if self.sequence_number < 1:
            raise ValueError(f"'sequence_number' must be >= 1, got {self.sequence_number}.")
        object.__setattr__(self, "sequence_number", int(self.sequence_number))

    def to_message(self) -> Dict[str, Any]:
        """Encode as the request message of the channel protocol."""
        return {
            "logTMin": float(self.log_temperature_min),
            "logTMax": float(self.log_temperature_max),
            "logRhoMin": float(self.log_density_min),
            "logRhoMax": float(self.log_density_max),
            "cols": self.columns,
            "rows": self.rows,
            "X": float(self.composition.hydrogen_mass_fraction),
            "Y": float(self.composition.helium_mass_fraction),
            "Z": float(self.composition.metal_mass_fraction),
            "eta": float(self.radiation_departure_parameter),
            "seq": self.sequence_number,
        }

    @classmethod
    def from_message(cls, message: Mapping[str, Any]) -> GridSpec:
        """
        Decode a request message.

        Args:
            message: Mapping with the keys of the request protocol.

        Returns:
            The decoded GridSpec.

        Raises:
            ProtocolError: If a key is missing or has the wrong type or value.
        """
        missing = [key for key in REQUEST_KEYS if key not in message]
        if missing:
            raise ProtocolError(f"Request message is missing keys: {', '.join(missing)}")

        for key in ("logTMin", "logTMax", "logRhoMin", "logRhoMax", "X", "Y", "Z", "eta"):
            value = message[key]
            if isinstance(value, bool) or not isinstance(value, Real):
                raise ProtocolError(f"Request field '{key}' must be a number, got {value!r}.")

        try:
            return cls(
                log_temperature_min=float(message["logTMin"]),
                log_temperature_max=float(message["logTMax"]),
                log_density_min=float(message["logRhoMin"]),
                log_density_max=float(message["logRhoMax"]),
                columns=message["cols"],
                rows=message["rows"],
                composition=Composition(
                    hydrogen_mass_fraction=float(message["X"]),
                    helium_mass_fraction=float(message["Y"]),
                    metal_mass_fraction=float(message["Z"]),
                ),
                radiation_departure_parameter=float(message["eta"]),
                sequence_number=message["seq"],
            )
        except ValueError as e:
            raise ProtocolError(str(e)) from e
