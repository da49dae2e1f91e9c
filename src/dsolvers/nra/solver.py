"""
Nonlinear real arithmetic theory solver plugin.

The search engine informs the plugin of every atom it may assert, then
interleaves ``assert_literal``, ``push_backtrack_point``,
``pop_backtrack_point`` and ``check``. Each check builds a fresh
propagation/search kernel over the asserted literals and the scoped interval
store and translates its verdict back into a boolean plus, on failure, a
conflict explanation.
"""
import functools
import logging
import time
from enum import Enum
from typing import Dict, List, Optional, TextIO

from .config import NRAConfig
from .exceptions import (
    ContractViolation,
    KernelError,
    NRAError,
    SolverStateError,
    UnbalancedCheckpointError,
    UninformedAtomError,
    UnpolarizedLiteralError,
)
from .kernel import KernelContext, KernelFactory, resolve_kernel
from .kernel.result import CheckOutcome, SolverResult
from .report import Reporter, TrajectoryReport, build_reporter
from .state import (
    AssertionLedger,
    BacktrackStack,
    Interval,
    OdeVariableIndex,
    ScopedIntervalStore,
)
from .terms import Literal, Polarity, TermStore, collect_variables

logger = logging.getLogger(__name__)


class SolverState(Enum):
    UNINITIALIZED = "uninitialized"
    INFORMED = "informed"
    ASSERTING = "asserting"
    CHECKED = "checked"
    CLOSED = "closed"


def _fatal_on_error(method):
    """Close the solver when an operation raises a fatal error."""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        if self.state is SolverState.CLOSED:
            raise SolverStateError(f"{method.__name__} called on a closed solver")
        try:
            return method(self, *args, **kwargs)
        except NRAError as exc:
            self._abort(f"{type(exc).__name__}: {exc}")
            raise
        except KeyboardInterrupt:
            self._abort(f"{method.__name__} interrupted")
            raise
    return wrapper


class NRASolver:
    """Incremental theory solver for nonlinear real arithmetic.

    The plugin exclusively owns its scoped interval store, assertion ledger
    and ODE variable index.

    Args:
        terms: Term representation the atoms live in
        config: Solver configuration (defaults to ``NRAConfig()``)
        theory_id: Identifier distinguishing this solver's deductions
        kernel_factory: Builds a kernel per check (defaults to ``config.kernel``)
        reporter: Diagnostic reporter (defaults to the one ``config`` enables)
        report_stream: Stream for trajectory reports when ``reporter`` is not given
    """

    def __init__(self,
                 terms: TermStore,
                 config: Optional[NRAConfig] = None,
                 *,
                 theory_id: int = 0,
                 kernel_factory: Optional[KernelFactory] = None,
                 reporter: Optional[Reporter] = None,
                 report_stream: Optional[TextIO] = None):
        self.terms = terms
        self.config = config or NRAConfig()
        self.theory_id = theory_id
        self.store = ScopedIntervalStore()
        self.ledger = AssertionLedger()
        self.ode_index = OdeVariableIndex()
        self.backtrack = BacktrackStack(self.store, self.ledger)
        self.kernel_factory = kernel_factory or resolve_kernel(self.config.kernel)
        self.reporter = reporter or build_reporter(self.config, report_stream)
        self.state = SolverState.UNINITIALIZED
        self.explanation: List[Literal] = []
        self.deductions: List[Literal] = []
        self.last_outcome: Optional[CheckOutcome] = None
        self.last_report: Optional[TrajectoryReport] = None
        self.model: Dict[int, Interval] = {}
        self._informed: Dict[int, None] = {}

    @property
    def depth(self) -> int:
        """Number of open backtrack points."""
        return self.backtrack.depth

    def is_informed(self, atom: int) -> bool:
        return atom in self._informed

    @_fatal_on_error
    def inform(self, atom: int) -> Polarity:
        """Register an atom the search engine may later assert.

        Every variable in the atom is registered with its static bound; with
        ODE support the atom's continuous-mode variables are indexed.

        Returns:
            Polarity.UNDEF: truth is never decided at inform time
        """
        if not self.terms.is_term(atom):
            raise ContractViolation(f"inform expects a term, got {self.terms.to_string(atom)}")
        variables = collect_variables(self.terms, atom)
        ode_variables = []
        for var in variables:
            info = self.terms.variable_info(var)
            self.store.initialize(var, Interval(info.lower, info.upper))
            if self.config.contain_ode and info.is_ode:
                ode_variables.append(var)
        if self.config.contain_ode:
            self.ode_index.record(atom, ode_variables)
        self._informed[atom] = None
        if self.state is SolverState.UNINITIALIZED:
            self.state = SolverState.INFORMED
        logger.debug("inform %s: %d variable(s), %d ODE variable(s)",
                     self.terms.to_string(atom), len(variables), len(ode_variables))
        self.reporter.on_inform(self, atom, variables)
        return Polarity.UNDEF

    @_fatal_on_error
    def assert_literal(self, literal: Literal, is_theory_deduced: bool = False) -> bool:
        """Record an asserted literal.

        Consistency is not examined here; ``check`` decides it. A literal this
        solver itself deduced with the same polarity is accepted without a
        new ledger entry.

        Returns:
            True
        """
        if literal.atom not in self._informed:
            raise UninformedAtomError(f"Atom {self.terms.to_string(literal.atom)} was never informed")
        if not literal.is_polarized:
            raise UnpolarizedLiteralError(f"Literal {self.terms.to_string(literal.atom)} has no polarity")
        if not self.ledger.assert_literal(literal):
            logger.debug("assert %s: already deduced by theory %d",
                         self.terms.to_string(literal.atom), self.theory_id)
        else:
            logger.debug("assert %s %s (theory deduced: %s)",
                         self.terms.to_string(literal.atom), literal.polarity.name, is_theory_deduced)
        self.state = SolverState.ASSERTING
        return True

    @_fatal_on_error
    def push_backtrack_point(self) -> None:
        frame = self.backtrack.push()
        logger.debug("push backtrack point %d (ledger size %d)", self.backtrack.depth, frame.ledger_size)
        self._enter_asserting()

    @_fatal_on_error
    def pop_backtrack_point(self) -> None:
        frame = self.backtrack.pop()
        logger.debug("pop backtrack point, ledger restored to %d", frame.ledger_size)
        self._enter_asserting()

    @_fatal_on_error
    def check(self, complete: bool) -> bool:
        """Decide consistency of the asserted literals.

        Args:
            complete: Run branch-and-prune search instead of propagation only

        Returns:
            True if consistent; on False ``explanation`` holds a conflict
            certificate drawn from the asserted literals
        """
        if self.state is SolverState.UNINITIALIZED:
            raise SolverStateError("check called before any atom was informed")
        self.explanation = []
        self.deductions = []
        self.last_report = None
        self.model = {}

        context = KernelContext(
            config=self.config,
            terms=self.terms,
            literals=self.ledger.literals,
            store=self.store,
            ode_index=self.ode_index,
        )
        kernel = self.kernel_factory(context)
        start_time = time.time()
        try:
            verdict = kernel.solve() if complete else kernel.prop()
            if not isinstance(verdict, bool):
                raise KernelError(f"Kernel {kernel.name} returned {verdict!r} instead of a verdict")
            report = None
            if verdict and complete:
                self.model = kernel.witness
                if self.config.report_trajectory:
                    report = TrajectoryReport(traces=kernel.trajectory(), groups=self.ode_groups())
        except NRAError:
            raise
        except Exception as exc:
            raise KernelError(f"Kernel {getattr(kernel, 'name', '?')} failed: {exc}") from exc
        elapsed_ms = (time.time() - start_time) * 1000

        if verdict:
            if not complete and self.config.theory_propagation:
                self._record_deductions(kernel)
        else:
            self.explanation = list(kernel.explanation)

        self.last_outcome = CheckOutcome(
            consistent=verdict,
            complete=complete,
            result=SolverResult.SAT if verdict else SolverResult.UNSAT,
            explanation=list(self.explanation),
            kernel_name=kernel.name,
            time_ms=elapsed_ms,
        )
        self.state = SolverState.CHECKED
        if report is not None:
            self.last_report = report
            self.reporter.on_trajectory(report)
        self.reporter.on_check(self, self.last_outcome)
        return verdict

    def owns(self, atom: int) -> bool:
        """Every atom belongs to this theory."""
        return True

    @_fatal_on_error
    def extract_model(self) -> None:
        """Publish bounds into the term representation.

        Right after a successful complete check the search witness is
        published; otherwise, and for variables outside the witness, the
        current store bounds are.
        """
        model = self.model if self.state is SolverState.CHECKED else {}
        for var, interval in self.store.items():
            self.terms.set_value(var, model.get(var, interval))

    def ode_groups(self) -> List[int]:
        """Modes of the ODE variables under the currently true literals."""
        return self.ode_index.groups(self.ledger, self.terms)

    @_fatal_on_error
    def close(self) -> None:
        """Tear the solver down.

        Raises:
            UnbalancedCheckpointError: If backtrack points are still open
        """
        if self.backtrack.depth:
            raise UnbalancedCheckpointError(
                f"Closing with {self.backtrack.depth} open backtrack point(s)")
        self.state = SolverState.CLOSED

    def _enter_asserting(self) -> None:
        if self.state is not SolverState.UNINITIALIZED:
            self.state = SolverState.ASSERTING

    def _record_deductions(self, kernel) -> None:
        for lit in kernel.deduce(list(self._informed)):
            if self.ledger.has_deduction(lit.atom):
                continue
            self.ledger.record_deduction(lit)
            self.deductions.append(lit)
        if self.deductions:
            logger.debug("deduced %d literal(s)", len(self.deductions))

    def _abort(self, reason: str) -> None:
        logger.error("NRA solver aborted: %s", reason)
        self.state = SolverState.CLOSED
