"""
Interface between the theory plugin and a propagation/search kernel.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Protocol, Sequence, Tuple

from ..config import NRAConfig
from ..state.interval import Interval
from ..state.ode_index import OdeVariableIndex
from ..state.scoped_store import ScopedIntervalStore
from ..terms.nodes import Literal
from ..terms.store import TermStore


@dataclass(frozen=True)
class KernelContext:
    """Everything a kernel sees when the plugin builds it for one check.

    Attributes:
        config: Solver configuration
        terms: Term representation
        literals: Currently asserted literals, in assertion order
        store: Scoped interval store (mutated by propagation)
        ode_index: ODE variable index
    """
    config: NRAConfig
    terms: TermStore
    literals: Tuple[Literal, ...]
    store: ScopedIntervalStore
    ode_index: OdeVariableIndex


class PropagationKernel(Protocol):
    """Protocol every propagation/search kernel implements.

    A kernel is constructed fresh for every ``check`` from a ``KernelContext``.
    """

    name: str
    explanation: List[Literal]

    def prop(self) -> bool:
        """Prune bounds without case splitting.

        Returns:
            False if some variable's interval became empty
        """
        ...

    def solve(self) -> bool:
        """Branch-and-prune search to the configured precision.

        Returns:
            True if a witness box was found, False if the space is exhausted
        """
        ...

    @property
    def witness(self) -> Dict[int, Interval]:
        """Sample box of the last successful ``solve``; never written to the store."""
        ...

    def trajectory(self) -> List[Dict[str, Any]]:
        """Serialize the continuous trajectory of the last successful search."""
        ...

    def deduce(self, candidates: Sequence[int]) -> List[Literal]:
        """Literals over candidate atoms entailed by the current bounds."""
        ...
