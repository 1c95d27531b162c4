"""
Energy balance between the two stations:

    p + Kin + Pot = p_o + Kin_o + Pot_o

Each rule solves it for one unknown at ``this`` station against ``other``.
A rule fires only when all its inputs are known and its target is not;
it returns whether it wrote anything.
"""
from __future__ import annotations

import logging
from math import isfinite, sqrt

from common.models import Station
from common.units import SI_UNITS

log = logging.getLogger("bernoulli")


class InvalidPhysicalState(ValueError):
    """A derived quantity is mathematically undefined for the given inputs."""

    def __init__(self, rule: str, station: str, detail: str):
        super().__init__(f"{rule} at station {station}: {detail}")
        self.rule = rule
        self.station = station


def _known(*vals) -> bool:
    return all(v is not None for v in vals)


def _checked(rule: str, name: str, value: float) -> float:
    # NaN or inf inputs propagate silently through the arithmetic
    if not isfinite(value):
        raise InvalidPhysicalState(rule, name, f"result is {value}")
    return value


def solve_pressure(this: Station, other: Station, g: float | None = None, *, name: str = "-") -> bool:
    if this.p.known or not _known(other.p.value, this.Kin, this.Pot, other.Kin, other.Pot):
        return False
    p = _checked("pressure", name, other.p.value + other.Kin + other.Pot - this.Kin - this.Pot)
    this.p.set(p, SI_UNITS["pressure"])
    log.debug(f"p={p:.6g} Pa", extra={"station": name, "rule": "pressure"})
    return True


def solve_height(this: Station, other: Station, g: float | None, *, name: str = "-") -> bool:
    if this.h.known or not _known(this.p.value, other.p.value, this.Kin, other.Kin,
                                  other.Pot, this.rho.value, g):
        return False
    denom = this.rho.value * g
    if not denom or not isfinite(denom):
        raise InvalidPhysicalState("height", name, f"rho*g is {denom}")
    h = _checked("height", name, ((other.p.value - this.p.value) + other.Kin - this.Kin + other.Pot) / denom)
    this.h.set(h, SI_UNITS["length"])
    log.debug(f"h={h:.6g} m", extra={"station": name, "rule": "height"})
    return True


def solve_velocity(this: Station, other: Station, g: float | None = None, *, name: str = "-") -> bool:
    if this.v.known or not _known(this.p.value, other.p.value, other.Kin,
                                  this.Pot, other.Pot, this.rho.value):
        return False
    if this.rho.value == 0:
        raise InvalidPhysicalState("velocity", name, "density is zero")
    s = 2 * ((other.p.value - this.p.value) + other.Kin + other.Pot - this.Pot) / this.rho.value
    if not (s >= 0 and isfinite(s)):
        raise InvalidPhysicalState("velocity", name, f"radicand is {s:.6g} m^2/s^2")
    v = sqrt(s)
    this.v.set(v, SI_UNITS["velocity"])
    log.debug(f"v={v:.6g} m/s", extra={"station": name, "rule": "velocity"})
    return True


def solve_density(this: Station, other: Station, g: float | None, *, name: str = "-") -> bool:
    if this.rho.known or not _known(this.p.value, other.p.value, other.Kin, other.Pot,
                                    this.v.value, this.h.value, g):
        return False
    denom = this.v.value ** 2 + 2 * g * this.h.value
    if not denom or not isfinite(denom):
        raise InvalidPhysicalState("density", name, f"v**2 + 2*g*h is {denom}")
    rho = _checked("density", name, 2 * ((other.p.value - this.p.value) + other.Kin + other.Pot) / denom)
    this.rho.set(rho, SI_UNITS["density"])
    log.debug(f"rho={rho:.6g} kg/m^3", extra={"station": name, "rule": "density"})
    return True


# order in which the inference loop tries the rules, both stations each
RULES = (
    ("pressure", solve_pressure),
    ("velocity", solve_velocity),
    ("height", solve_height),
    ("density", solve_density),
)
