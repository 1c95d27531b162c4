from __future__ import annotations

import logging

from common.models import FlowState, Station

log = logging.getLogger("energy")


def compute_kinetic(station: Station, *, name: str = "-") -> bool:
    """Kin = 0.5*rho*v**2, once rho and v are known. Never overwrites."""
    if station.Kin is not None or not (station.rho.known and station.v.known):
        return False
    station.Kin = 0.5 * station.rho.value * station.v.value ** 2
    log.debug(f"Kin={station.Kin:.6g} J/m^3", extra={"station": name, "rule": "kinetic"})
    return True


def compute_potential(station: Station, g: float | None, *, name: str = "-") -> bool:
    """Pot = rho*g*h, once rho, g and h are known. Never overwrites."""
    if station.Pot is not None or g is None or not (station.rho.known and station.h.known):
        return False
    station.Pot = station.rho.value * g * station.h.value
    log.debug(f"Pot={station.Pot:.6g} J/m^3", extra={"station": name, "rule": "potential"})
    return True


def compute_energies(state: FlowState) -> bool:
    changed = False
    for idx, st in state.stations():
        changed |= compute_kinetic(st, name=idx)
        changed |= compute_potential(st, state.g.value, name=idx)
    return changed
