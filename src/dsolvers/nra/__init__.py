"""
Nonlinear real arithmetic theory solver.

This package provides an incremental theory-solver plugin that decides
conjunctions of nonlinear real-arithmetic literals with interval constraint
propagation, driven by an external DPLL(T) search engine.
"""

__version__ = "0.1.0"

from .config import NRAConfig, DEFAULT_PRECISION
from .exceptions import (
    NRAError,
    ContractViolation,
    CheckpointUnderflowError,
    UnbalancedCheckpointError,
    UnknownNodeError,
    UninformedAtomError,
    UnpolarizedLiteralError,
    BoundsMismatchError,
    OdeIndexError,
    SolverStateError,
    KernelError,
    UnsupportedOperatorError,
)
from .terms import Literal, Polarity, TermStore, collect_variables
from .state import (
    Interval,
    ScopedIntervalStore,
    AssertionLedger,
    BacktrackStack,
    OdeVariableIndex,
)
from .kernel import (
    CheckOutcome,
    SolverResult,
    IcpKernel,
    Z3Kernel,
    resolve_kernel,
)
from .report import (
    TrajectoryReport,
    NullReporter,
    LoggingReporter,
    JsonTrajectoryReporter,
    build_reporter,
)
from .solver import NRASolver, SolverState

__all__ = [
    "NRAConfig",
    "DEFAULT_PRECISION",
    "NRAError",
    "ContractViolation",
    "CheckpointUnderflowError",
    "UnbalancedCheckpointError",
    "UnknownNodeError",
    "UninformedAtomError",
    "UnpolarizedLiteralError",
    "BoundsMismatchError",
    "OdeIndexError",
    "SolverStateError",
    "KernelError",
    "UnsupportedOperatorError",
    "Literal",
    "Polarity",
    "TermStore",
    "collect_variables",
    "Interval",
    "ScopedIntervalStore",
    "AssertionLedger",
    "BacktrackStack",
    "OdeVariableIndex",
    "CheckOutcome",
    "SolverResult",
    "IcpKernel",
    "Z3Kernel",
    "resolve_kernel",
    "TrajectoryReport",
    "NullReporter",
    "LoggingReporter",
    "JsonTrajectoryReporter",
    "build_reporter",
    "NRASolver",
    "SolverState",
]
