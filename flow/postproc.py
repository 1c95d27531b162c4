# postproc.py
from __future__ import annotations
from typing import Any, Dict
import pandas as pd

from common.constants import FIELD_DIMENSIONS, ENERGY_FIELDS
from common.models import FlowState
from common.units import SI_UNITS, UnitConverter
from flow.solver import is_underdetermined


def _nan_if_none(v):
    return float("nan") if v is None else v


def state_to_dataframe(state: FlowState, converter=None) -> pd.DataFrame:
    """
    Long table: one row per station field.

    With ``return_si_units`` off, known quantities are reported back in the
    unit the caller supplied them in.
    """
    converter = converter or UnitConverter()
    rows = []
    for idx, st in state.stations():
        for name, q in st.quantities():
            dim = FIELD_DIMENSIONS[name]
            value = q.value
            unit = SI_UNITS[dim] if q.known else q.unit
            if q.known and not state.return_si_units and q.source_unit not in (None, SI_UNITS[dim]):
                value, unit = converter.from_si(q.value, dim, q.source_unit), q.source_unit
            rows.append({
                "station": idx,
                "field": name,
                "value": _nan_if_none(value),
                "unit": unit,
                "known": q.known,
            })
        for e in ENERGY_FIELDS:
            val = getattr(st, e)
            rows.append({
                "station": idx,
                "field": e,
                "value": _nan_if_none(val),
                "unit": "J/m^3",
                "known": val is not None,
            })
    return pd.DataFrame(rows)


def head_breakdown(state: FlowState) -> pd.DataFrame:
    """Pressure, velocity and elevation head (m) per station; NaN where unknown."""
    g = state.g.value
    rows = []
    for idx, st in state.stations():
        rho, p, v, h = st.rho.value, st.p.value, st.v.value, st.h.value
        p_head = p / (rho * g) if None not in (rho, p, g) and rho * g != 0 else None
        v_head = v ** 2 / (2 * g) if None not in (v, g) and g != 0 else None
        parts = (p_head, v_head, h)
        rows.append({
            "station": idx,
            "pressure_head[m]": _nan_if_none(p_head),
            "velocity_head[m]": _nan_if_none(v_head),
            "elevation_head[m]": _nan_if_none(h),
            "total_head[m]": _nan_if_none(sum(parts) if None not in parts else None),
        })
    return pd.DataFrame(rows)


def summary(state: FlowState) -> Dict[str, Any]:
    return {
        "known": sorted(state.known_fields()),
        "unknown": sorted(state.unknown_fields()),
        "underdetermined": is_underdetermined(state),
    }
