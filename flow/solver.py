# =========================================================
# FILE: flow/solver.py
# =========================================================
from __future__ import annotations
from typing import Any, List, FrozenSet, Mapping
import logging

from common.constants import MAX_ROUNDS, CONTINUITY_ROUNDS
from common.logging_utils import trace_calls
from common.models import FlowState
from common.units import UnitConverter, UnrecognizedUnit
from flow.normalizer import normalize
from flow.energy import compute_energies
from flow.continuity import resolve_continuity
from flow.bernoulli import RULES, InvalidPhysicalState

__all__ = ["FlowSolver", "solve", "is_underdetermined", "UnrecognizedUnit", "InvalidPhysicalState"]


def is_underdetermined(state: FlowState) -> bool:
    return bool(state.unknown_fields())


class FlowSolver:
    """
    Fixed-point inference over a two-station flow state.

    Each round runs the continuity sub-loop, fills the energy terms, then
    tries the Bernoulli rules at both stations. Rules only ever turn unknown
    fields into known ones, so a round without change is a fixed point.
    """

    def __init__(
        self,
        state: FlowState,
        converter=None,
        *,
        max_rounds: int = MAX_ROUNDS,
        continuity_rounds: int = CONTINUITY_ROUNDS,
        logger_name: str = "solver",
    ):
        self.state = state
        self.converter = converter or UnitConverter()
        self.max_rounds = max_rounds
        self.continuity_rounds = continuity_rounds
        self.log = logging.getLogger(logger_name)
        self.history: List[FrozenSet[str]] = []
        self.rounds = 0

    def _round(self) -> bool:
        st = self.state
        g = st.g.value
        changed = resolve_continuity(st, self.continuity_rounds)
        changed |= compute_energies(st)
        for _, rule in RULES:
            changed |= rule(st.inlet, st.outlet, g, name="1")
            changed |= rule(st.outlet, st.inlet, g, name="2")
        return changed

    @trace_calls()
    def solve(self) -> FlowState:
        st = normalize(self.state, self.converter)
        self.history = [st.known_fields()]

        for it in range(self.max_rounds):
            changed = self._round()
            self.rounds = it + 1
            self.history.append(st.known_fields())
            self.log.debug(f"round {it+1}: {len(self.history[-1])} known", extra={"rule": "round"})
            if not changed:
                break
        else:
            self.log.debug(f"round cap {self.max_rounds} reached before a fixed point", extra={"rule": "round"})

        missing = st.unknown_fields()
        if missing:
            self.log.warning(f"underdetermined after {self.rounds} rounds, unknown: {', '.join(sorted(missing))}")
        else:
            self.log.info(f"fully resolved in {self.rounds} rounds")
        return st


def solve(flow_input: FlowState | Mapping[str, Any], converter=None, **kwargs) -> FlowState:
    """
    Resolve as many unknowns as the data permits.

    ``flow_input`` is either a FlowState, updated in place and returned,
    or an option mapping (``p1``, ``rho2``, ``sameMedium``, ...).
    """
    state = flow_input if isinstance(flow_input, FlowState) else FlowState.from_options(flow_input)
    return FlowSolver(state, converter, **kwargs).solve()
