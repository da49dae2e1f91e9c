"""
Z3-backed complete search.

Propagation stays with interval constraint propagation; the complete check is
delegated to Z3's nonlinear real arithmetic engine, and the explanation is
taken from an unsat core over assumption literals.
"""
import logging
import time
from typing import Any, Dict, List

import z3

from ..exceptions import KernelError
from ..state.interval import Interval
from ..translator.term_to_z3 import TermToZ3Translator
from .base import KernelContext
from .icp import IcpKernel

logger = logging.getLogger(__name__)


class Z3Kernel(IcpKernel):
    """Kernel whose ``solve`` runs Z3 over the asserted literals."""

    name = "z3"

    def __init__(self, context: KernelContext):
        super().__init__(context)
        self.translator = TermToZ3Translator(self.terms)
        self.solver = z3.Solver()
        if self.config.timeout_ms:
            self.solver.set("timeout", self.config.timeout_ms)
        self.solver_time_ms = 0.0

    def solve(self) -> bool:
        variables = self._box_variables(self.literals)
        bounds = {var: self.store.initial(var) for var in variables}
        problem = self.translator.build_problem(self.literals, bounds)
        for constraint in problem.constraints:
            self.solver.add(constraint)

        assumptions: Dict[str, Any] = {}
        for name, expr in problem.tracked.items():
            indicator = z3.Bool(name)
            self.solver.add(z3.Implies(indicator, expr))
            assumptions[name] = indicator

        result = self._check(list(assumptions.values()))
        if result == z3.sat:
            self._record_witness(variables)
            return True

        core = {c.decl().name() for c in self.solver.unsat_core()}
        core_names = [name for name in assumptions if name in core]
        if self.config.minimize_explanation:
            core_names = self._minimize(core_names, assumptions)
        indices = {int(name.rsplit("_", 1)[1]) for name in core_names}
        self.explanation = [lit for i, lit in enumerate(self.literals) if i in indices]
        if not self.explanation:
            if not self.literals:
                raise KernelError("Z3 refuted the static bounds with no literal asserted")
            # Static bounds alone are contradictory
            self.explanation = list(self.literals)
        return False

    def _check(self, assumptions: List[Any]) -> Any:
        start_time = time.time()
        result = self.solver.check(*assumptions)
        self.solver_time_ms += (time.time() - start_time) * 1000
        if result == z3.unknown:
            raise KernelError(f"Z3 returned unknown: {self.solver.reason_unknown()}")
        return result

    def _minimize(self, names: List[str], assumptions: Dict[str, Any]) -> List[str]:
        core = list(names)
        i = 0
        while i < len(core):
            trial = core[:i] + core[i + 1:]
            if trial and self._check([assumptions[n] for n in trial]) == z3.unsat:
                core = trial
            else:
                i += 1
        return core

    def _record_witness(self, variables: List[int]) -> None:
        model = self.solver.model()
        witness = {}
        for var in variables:
            value = self.translator.model_value(model, var)
            if value is None:
                raise KernelError(f"Z3 model has no numeric value for {self.terms.to_string(var)}")
            witness[var] = Interval.point(value)
        logger.debug("Z3 witness over %d variable(s) in %.2fms", len(witness), self.solver_time_ms)
        self._witness = witness
