from __future__ import annotations

import re
import tokenize
from typing import Dict

from pint import UnitRegistry
from pint.errors import DimensionalityError, UndefinedUnitError

ureg = UnitRegistry()
Q_ = ureg.Quantity

# canonical SI unit per physical dimension
SI_UNITS: Dict[str, str] = {
    "pressure":     "Pa",
    "density":      "kg/m^3",
    "velocity":     "m/s",
    "flow_rate":    "m^3/s",
    "area":         "m^2",
    "length":       "m",
    "acceleration": "m/s^2",
}

# "m2", "kg/m3", "m/s2" -> "m**2", "kg/m**3", "m/s**2"
_SHORT_EXP = re.compile(r"(?<=[A-Za-z])(\d+)")


class UnrecognizedUnit(ValueError):
    """Unit string cannot be parsed or does not match the target dimension."""

    def __init__(self, unit, dimension: str):
        super().__init__(f"cannot convert unit {unit!r} to {dimension} ({SI_UNITS.get(dimension, '?')})")
        self.unit = unit
        self.dimension = dimension


class UnitConverter:
    """
    Pint-backed conversion service used by the normalizer.

    Any object with the same ``convert`` signature can stand in for it.
    """

    def __init__(self, registry: UnitRegistry | None = None):
        self.ureg = registry or ureg

    def _parse(self, unit: str):
        try:
            return self.ureg.parse_units(unit)
        except UndefinedUnitError:
            alt = _SHORT_EXP.sub(r"**\1", unit)
            if alt == unit:
                raise
            return self.ureg.parse_units(alt)

    def convert(self, value: float, from_unit: str, dimension: str) -> float:
        if dimension not in SI_UNITS:
            raise KeyError(f"unknown dimension {dimension!r}")
        if not isinstance(from_unit, str) or not from_unit.strip():
            raise UnrecognizedUnit(from_unit, dimension)
        try:
            src = self._parse(from_unit.strip())
            dst = self._parse(SI_UNITS[dimension])
            return float(self.ureg.Quantity(value, src).to(dst).magnitude)
        except (UndefinedUnitError, DimensionalityError, AttributeError,
                TypeError, ValueError, SyntaxError, tokenize.TokenError) as e:
            raise UnrecognizedUnit(from_unit, dimension) from e

    def from_si(self, value: float, dimension: str, to_unit: str) -> float:
        """Inverse of ``convert``: SI magnitude -> magnitude in ``to_unit``."""
        try:
            src = self._parse(SI_UNITS[dimension])
            dst = self._parse(to_unit.strip())
            return float(self.ureg.Quantity(value, src).to(dst).magnitude)
        except (UndefinedUnitError, DimensionalityError, AttributeError,
                TypeError, ValueError, SyntaxError, tokenize.TokenError) as e:
            raise UnrecognizedUnit(to_unit, dimension) from e

    def as_quantity(self, value: float, dimension: str):
        return self.ureg.Quantity(value, self._parse(SI_UNITS[dimension]))
