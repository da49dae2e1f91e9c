"""
Solver state: scoped interval store, assertion ledger, backtrack frames and
the ODE variable index.
"""

from .interval import Interval
from .scoped_store import ScopedIntervalStore
from .ledger import AssertionLedger
from .backtrack import BacktrackFrame, BacktrackStack
from .ode_index import OdeVariableIndex

__all__ = [
    "Interval",
    "ScopedIntervalStore",
    "AssertionLedger",
    "BacktrackFrame",
    "BacktrackStack",
    "OdeVariableIndex",
]
