"""
Interval constraint propagation kernel.

``prop`` runs the contractor to a (bounded) fixpoint; ``solve`` interleaves
propagation with bisection of the widest variable until every variable is
narrower than the configured precision or the search space is exhausted.
"""
import logging
import math
from typing import Any, Dict, List, Optional, Sequence

from ..exceptions import KernelError
from ..state.interval import Interval
from ..terms.nodes import Literal, Polarity
from ..terms.variables import collect_variables
from .base import KernelContext
from .contractor import Box, Contractor

logger = logging.getLogger(__name__)

_MAX_SWEEPS = 64
_MIN_REDUCTION = 0.01


def _improved(old: Interval, new: Interval) -> bool:
    if new.is_empty:
        return True
    if math.isinf(old.width):
        return (new.lower, new.upper) != (old.lower, old.upper)
    return old.width - new.width > _MIN_REDUCTION * old.width


class IcpKernel:
    """Branch-and-prune kernel built on the HC4 contractor."""

    name = "icp"

    def __init__(self, context: KernelContext):
        self.context = context
        self.config = context.config
        self.terms = context.terms
        self.store = context.store
        self.literals: List[Literal] = list(context.literals)
        self.contractor = Contractor(self.terms)
        self.explanation: List[Literal] = []
        self.boxes_explored = 0
        self._witness: Optional[Box] = None
        self._variables: Dict[int, List[int]] = {}

    # Protocol

    def prop(self) -> bool:
        box = self._current_box(self.literals)
        if not self._propagate(self.literals, box):
            logger.debug("Propagation refuted %d literal(s)", len(self.literals))
            self.explanation = self._explain(complete=False)
            return False
        self._write_back(box)
        return True

    def solve(self) -> bool:
        box = self._current_box(self.literals)
        witness = self._search(self.literals, box)
        if witness is None:
            logger.debug("Search space exhausted after %d box(es)", self.boxes_explored)
            self.explanation = self._explain(complete=True)
            return False
        # Only the root propagation is entailed by the literals; the witness
        # is a sample kept for the model and the trajectory
        self._witness = witness
        self._write_back(box)
        return True

    @property
    def witness(self) -> Dict[int, Interval]:
        """Box found by the last successful ``solve`` (empty otherwise)."""
        return dict(self._witness) if self._witness is not None else {}

    def trajectory(self) -> List[Dict[str, Any]]:
        """Per-mode enclosures of the ODE variables under true literals.

        The kernel does not integrate the dynamics; the trace records the
        time and state enclosures of the witness box.
        """
        box = self._witness if self._witness is not None else {}
        traces: Dict[int, Dict[str, Any]] = {}
        for lit in self.literals:
            if lit.polarity is not Polarity.TRUE:
                continue
            for var in self.context.ode_index.get(lit.atom):
                info = self.terms.variable_info(var)
                trace = traces.setdefault(info.ode_group, {
                    "group": info.ode_group,
                    "time": self._enclosure(info.time_variable, box).as_list(),
                    "values": [],
                })
                if any(entry["key"] == info.name for entry in trace["values"]):
                    continue
                trace["values"].append({
                    "key": info.name,
                    "enclosure": self._enclosure(var, box).as_list(),
                })
        return [traces[g] for g in sorted(traces)]

    def deduce(self, candidates: Sequence[int]) -> List[Literal]:
        asserted = {lit.atom for lit in self.literals}
        deduced = []
        for atom in candidates:
            if atom in asserted:
                continue
            variables = self._vars_of(atom)
            if any(var not in self.store for var in variables):
                continue
            box = {var: self.store.get(var) for var in variables}
            polarity = self.contractor.entailed(atom, box)
            if polarity is not Polarity.UNDEF:
                deduced.append(Literal(atom, polarity))
        return deduced

    # Propagation and search

    def _vars_of(self, atom: int) -> List[int]:
        if atom not in self._variables:
            self._variables[atom] = collect_variables(self.terms, atom)
        return self._variables[atom]

    def _box_variables(self, literals: Sequence[Literal]) -> List[int]:
        seen: Dict[int, None] = {}
        for lit in literals:
            for var in self._vars_of(lit.atom):
                seen[var] = None
        return list(seen)

    def _current_box(self, literals: Sequence[Literal]) -> Box:
        return {var: self.store.get(var) for var in self._box_variables(literals)}

    def _initial_box(self, literals: Sequence[Literal]) -> Box:
        return {var: self.store.initial(var) for var in self._box_variables(literals)}

    def _propagate(self, literals: Sequence[Literal], box: Box) -> bool:
        if any(iv.is_empty for iv in box.values()):
            return False
        for _ in range(_MAX_SWEEPS):
            before = dict(box)
            for lit in literals:
                if not self.contractor.revise(lit, box):
                    return False
            if not any(_improved(before[var], box[var]) for var in box):
                break
        return True

    def _search(self, literals: Sequence[Literal], box: Box) -> Optional[Box]:
        pending = [box]
        explored = 0
        while pending:
            current = pending.pop()
            explored += 1
            self.boxes_explored += 1
            if explored > self.config.max_boxes:
                raise KernelError(
                    f"Branch-and-prune budget of {self.config.max_boxes} boxes exhausted")
            if not self._propagate(literals, current):
                continue
            var = self._widest(current)
            if var is None:
                return current
            low, high = current[var].bisect()
            right = dict(current)
            right[var] = high
            left = dict(current)
            left[var] = low
            pending.append(right)
            pending.append(left)
        return None

    def _widest(self, box: Box) -> Optional[int]:
        best, best_width = None, self.config.precision
        for var, iv in box.items():
            if iv.width > best_width:
                best, best_width = var, iv.width
        return best

    def _write_back(self, box: Box) -> None:
        for var, iv in box.items():
            if iv != self.store.get(var):
                self.store.set(var, iv)

    def _enclosure(self, var: Optional[int], box: Box) -> Interval:
        if var is None:
            return Interval.entire()
        if var in box:
            return box[var]
        if var in self.store:
            return self.store.get(var)
        info = self.terms.variable_info(var)
        return Interval(info.lower, info.upper)

    # Explanation

    def _refutes(self, literals: Sequence[Literal], complete: bool) -> bool:
        box = self._initial_box(literals)
        if not self._propagate(literals, box):
            return True
        return complete and self._search(literals, box) is None

    def _explain(self, complete: bool) -> List[Literal]:
        """Conflict certificate over the asserted literals.

        The certificate is re-checked from the static bounds, so it refutes
        on its own, independent of bounds tightened by earlier checks.
        """
        core = list(self.literals)
        if self._refutes(core, complete):
            mode = complete
        elif not complete and self._refutes(core, True):
            mode = True
        else:
            raise KernelError(
                f"Static bounds do not reproduce the refutation of {len(core)} literal(s)")
        if not self.config.minimize_explanation:
            return core
        i = 0
        while i < len(core):
            trial = core[:i] + core[i + 1:]
            if trial and self._refutes(trial, mode):
                core = trial
            else:
                i += 1
        return core
