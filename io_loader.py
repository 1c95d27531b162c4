from __future__ import annotations
from typing import Any, Dict
import yaml
from common.constants import STATION_FIELDS
from common.models import FlowState, Quantity, Station, as_number, as_flag


def _q(node: Any) -> Quantity:
    if isinstance(node, dict) and "value" in node and "unit" in node:
        unit = node["unit"]
        return Quantity(as_number(node["value"], node), None if unit is None else str(unit))
    raise ValueError(f"Invalid quantity format: {node!r}")


def _get(d: Dict[str, Any] | None, key: str, default=None):
    return d.get(key, default) if isinstance(d, dict) else default


def _station(name: str, node: Dict[str, Any] | None) -> Station:
    st = Station()
    for key, val in (node or {}).items():
        if key not in STATION_FIELDS:
            raise KeyError(f"{name}: unknown field '{key}'")
        setattr(st, key, _q(val))
    return st


def load_case(path: str) -> FlowState:
    with open(path, "r", encoding="utf-8") as fh:
        doc = yaml.safe_load(fh) or {}

    opts = _get(doc, "options") or {}
    state = FlowState(
        inlet=_station("inlet", _get(doc, "inlet")),
        outlet=_station("outlet", _get(doc, "outlet")),
        return_si_units=as_flag("return_si_units", _get(opts, "return_si_units", True)),
        same_medium=as_flag("same_medium", _get(opts, "same_medium", True)),
        neglect_height=as_flag("neglect_height", _get(opts, "neglect_height", True)),
    )
    if _get(opts, "g") is not None:
        state.g = _q(opts["g"])
    return state
