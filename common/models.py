from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

from common.constants import G_STANDARD, STATION_FIELDS, ENERGY_FIELDS


def as_number(val: Any, node: Any = None) -> Optional[float]:
    """None stays unknown; anything else must read as a float (YAML 1.1 gives "1e5" as a string)."""
    if val is None:
        return None
    bad = val if node is None else node
    if isinstance(val, bool):
        raise ValueError(f"Invalid quantity format: {bad!r}")
    try:
        return float(val)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid quantity format: {bad!r}") from e


def as_flag(key: str, val: Any) -> bool:
    if not isinstance(val, bool):
        raise ValueError(f"{key}: expected true or false, got {val!r}")
    return val


@dataclass
class Quantity:
    value: Optional[float] = None     # None = not yet determined
    unit: Optional[str] = None
    source_unit: Optional[str] = None  # unit as supplied, kept for reports

    def __post_init__(self):
        if self.source_unit is None:
            self.source_unit = self.unit

    @property
    def known(self) -> bool:
        return self.value is not None

    def set(self, value: float, unit: str) -> None:
        self.value = value
        self.unit = unit

    @classmethod
    def parse(cls, node: Any) -> "Quantity":
        """Accepts a Quantity, a {value|val, unit} mapping, a (value, unit) pair or a bare number."""
        if isinstance(node, Quantity):
            return cls(node.value, node.unit, node.source_unit)
        if node is None:
            return cls()
        if isinstance(node, Mapping):
            if "value" in node:
                val = node["value"]
            elif "val" in node:
                val = node["val"]
            else:
                raise ValueError(f"Invalid quantity format: {node!r}")
            unit = node.get("unit")
            return cls(as_number(val, node), unit, unit)
        if isinstance(node, (tuple, list)) and len(node) == 2:
            return cls(as_number(node[0], node), node[1], node[1])
        if isinstance(node, (int, float)) and not isinstance(node, bool):
            return cls(float(node), None, None)
        raise ValueError(f"Invalid quantity format: {node!r}")


@dataclass
class Station:
    p: Quantity = field(default_factory=Quantity)     # Pa
    rho: Quantity = field(default_factory=Quantity)   # kg/m^3
    v: Quantity = field(default_factory=Quantity)     # m/s
    Q: Quantity = field(default_factory=Quantity)     # m^3/s
    A: Quantity = field(default_factory=Quantity)     # m^2
    h: Quantity = field(default_factory=Quantity)     # m
    Kin: Optional[float] = None                       # J/m^3
    Pot: Optional[float] = None                       # J/m^3

    def quantities(self):
        return [(name, getattr(self, name)) for name in STATION_FIELDS]


_FLAG_KEYS = {
    "returnSIUnits": "return_si_units",
    "sameMedium": "same_medium",
    "neglectHeight": "neglect_height",
}


@dataclass
class FlowState:
    inlet: Station = field(default_factory=Station)
    outlet: Station = field(default_factory=Station)
    g: Quantity = field(default_factory=lambda: Quantity(G_STANDARD.magnitude, "m/s^2", "m/s^2"))
    return_si_units: bool = True
    same_medium: bool = True
    neglect_height: bool = True

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None = None, **kwargs) -> "FlowState":
        opts: Dict[str, Any] = dict(options or {})
        opts.update(kwargs)
        state = cls()
        for key, val in opts.items():
            flag = _FLAG_KEYS.get(key, key)
            if flag in _FLAG_KEYS.values():
                setattr(state, flag, as_flag(key, val))
            elif key == "g":
                state.g = Quantity.parse(val)
            elif len(key) > 1 and key[:-1] in STATION_FIELDS and key[-1] in "12":
                station = state.inlet if key[-1] == "1" else state.outlet
                setattr(station, key[:-1], Quantity.parse(val))
            else:
                raise KeyError(f"unrecognized flow option {key!r}")
        return state

    def stations(self) -> Tuple[Tuple[str, Station], Tuple[str, Station]]:
        return ("1", self.inlet), ("2", self.outlet)

    def snapshot(self) -> tuple:
        out = [self.g.value]
        for _, st in self.stations():
            out.extend(q.value for _, q in st.quantities())
            out.extend(getattr(st, e) for e in ENERGY_FIELDS)
        return tuple(out)

    def known_fields(self) -> FrozenSet[str]:
        known = set()
        for idx, st in self.stations():
            known.update(f"{name}{idx}" for name, q in st.quantities() if q.known)
            known.update(f"{e}{idx}" for e in ENERGY_FIELDS if getattr(st, e) is not None)
        return frozenset(known)

    def unknown_fields(self) -> FrozenSet[str]:
        every = {f"{name}{idx}" for idx, _ in self.stations()
                 for name in (*STATION_FIELDS, *ENERGY_FIELDS)}
        return frozenset(every - self.known_fields())
