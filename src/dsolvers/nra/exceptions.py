"""Exceptions raised by the NRA theory solver.

Contract violations and kernel failures are fatal: the plugin closes itself
and every later call is rejected. Arithmetic infeasibility is never an
exception, it is an ordinary ``False`` verdict from ``check``.
"""


class NRAError(Exception):
    """Base exception for NRA solver errors"""


class ContractViolation(NRAError):
    """The driving engine or term producer broke the incremental protocol"""


class CheckpointUnderflowError(ContractViolation):
    """A backtrack point was popped without a matching push"""


class UnbalancedCheckpointError(ContractViolation):
    """The solver was torn down with backtrack points still open"""


class UnknownNodeError(ContractViolation):
    """Variable extraction met a node of unrecognised kind"""


class UninformedAtomError(ContractViolation):
    """A literal was asserted over an atom the solver was never informed of"""


class UnpolarizedLiteralError(ContractViolation):
    """A literal was asserted without a concrete truth value"""


class BoundsMismatchError(ContractViolation):
    """A variable was re-registered with bounds different from its first registration"""


class OdeIndexError(ContractViolation):
    """An atom's ODE variable set was recorded twice with different contents"""


class SolverStateError(ContractViolation):
    """Operation is not legal in the solver's current state"""


class KernelError(NRAError):
    """The propagation/search kernel failed to produce a clean verdict"""


class UnsupportedOperatorError(KernelError):
    """The kernel has no interval semantics for an operator"""
