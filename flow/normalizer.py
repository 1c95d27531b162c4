from __future__ import annotations

import logging
from typing import List, Tuple

from common.constants import FIELD_DIMENSIONS
from common.logging_utils import trace_calls
from common.models import FlowState, Quantity
from common.units import SI_UNITS, UnitConverter

log = logging.getLogger("normalizer")


def _to_si(q: Quantity, dimension: str, converter) -> float:
    target = SI_UNITS[dimension]
    # already canonical, or a bare number taken as SI
    if q.unit is None or q.unit == target:
        return float(q.value)
    return converter.convert(q.value, q.unit, dimension)


@trace_calls(values=True)
def normalize_units(state: FlowState, converter=None) -> FlowState:
    """
    Convert every known quantity of ``state`` to SI in place.

    All conversions run before any field is written, so an
    ``UnrecognizedUnit`` from the converter leaves the state untouched.
    Unknown quantities keep whatever unit they were given.
    """
    converter = converter or UnitConverter()
    pending: List[Tuple[Quantity, float, str]] = []

    if state.g.known:
        pending.append((state.g, _to_si(state.g, "acceleration", converter), SI_UNITS["acceleration"]))

    for idx, station in state.stations():
        for name, q in station.quantities():
            if not q.known:
                continue
            dim = FIELD_DIMENSIONS[name]
            pending.append((q, _to_si(q, dim, converter), SI_UNITS[dim]))

    for q, value, unit in pending:
        q.set(value, unit)

    log.debug(f"normalized {len(pending)} quantities to SI")
    return state


def apply_same_medium(state: FlowState) -> bool:
    """Copy density across when it is known at exactly one station."""
    if not state.same_medium:
        return False
    r1, r2 = state.inlet.rho, state.outlet.rho
    if r1.known == r2.known:
        return False
    src, dst = (r1, r2) if r1.known else (r2, r1)
    dst.set(src.value, SI_UNITS["density"])
    log.debug(f"same medium: rho={src.value:g} kg/m^3 on both stations", extra={"rule": "same_medium"})
    return True


def apply_neglect_height(state: FlowState) -> bool:
    """Fill missing heights: copy the single known one, or zero both."""
    if not state.neglect_height:
        return False
    h1, h2 = state.inlet.h, state.outlet.h
    if h1.known and h2.known:
        return False
    if h1.known:
        h2.set(h1.value, SI_UNITS["length"])
    elif h2.known:
        h1.set(h2.value, SI_UNITS["length"])
    else:
        h1.set(0.0, SI_UNITS["length"])
        h2.set(0.0, SI_UNITS["length"])
    log.debug(f"neglect height: h1={h1.value:g} m h2={h2.value:g} m", extra={"rule": "neglect_height"})
    return True


def normalize(state: FlowState, converter=None) -> FlowState:
    normalize_units(state, converter)
    apply_same_medium(state)
    apply_neglect_height(state)
    return state
