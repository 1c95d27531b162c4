from __future__ import annotations

import logging

from common.constants import CONTINUITY_ROUNDS
from common.models import FlowState, Station
from common.units import SI_UNITS

log = logging.getLogger("continuity")


def resolve_flow_rate(this: Station, other: Station, *, name: str = "-") -> bool:
    """Q1 = Q2 for incompressible flow; otherwise Q = A*v."""
    if this.Q.known:
        return False
    if other.Q.known:
        this.Q.set(other.Q.value, SI_UNITS["flow_rate"])
        how = "shared"
    elif this.A.known and this.v.known:
        this.Q.set(this.A.value * this.v.value, SI_UNITS["flow_rate"])
        how = "A*v"
    else:
        return False
    log.debug(f"Q={this.Q.value:.6g} m^3/s ({how})", extra={"station": name, "rule": "flow_rate"})
    return True


def resolve_area_velocity(station: Station, *, name: str = "-") -> bool:
    # a zero divisor leaves the target undetermined
    changed = False
    q, a, v = station.Q, station.A, station.v
    if not a.known and q.known and v.known and v.value != 0:
        a.set(q.value / v.value, SI_UNITS["area"])
        log.debug(f"A={a.value:.6g} m^2", extra={"station": name, "rule": "area"})
        changed = True
    if not v.known and q.known and a.known and a.value != 0:
        v.set(q.value / a.value, SI_UNITS["velocity"])
        log.debug(f"v={v.value:.6g} m/s", extra={"station": name, "rule": "velocity"})
        changed = True
    return changed


def resolve_continuity(state: FlowState, max_rounds: int = CONTINUITY_ROUNDS) -> bool:
    """
    Apply the continuity rules up to ``max_rounds`` times.

    A later rule can unlock an earlier one (Q2 from A2*v2 lets Q1 inherit it),
    hence the repetition. Stops early once a round changes nothing.
    """
    s1, s2 = state.inlet, state.outlet
    changed = False
    for _ in range(max_rounds):
        rnd = False
        rnd |= resolve_flow_rate(s1, s2, name="1")
        rnd |= resolve_flow_rate(s2, s1, name="2")
        rnd |= resolve_area_velocity(s1, name="1")
        rnd |= resolve_area_velocity(s2, name="2")
        if not rnd:
            break
        changed = True
    return changed
