"""
Check result types.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List

from ..terms.nodes import Literal


class SolverResult(Enum):
    """Verdict of a consistency check."""
    SAT = "sat"
    UNSAT = "unsat"
    UNKNOWN = "unknown"


@dataclass
class CheckOutcome:
    """Result of one ``check`` call.

    Attributes:
        consistent: Verdict returned to the search engine
        complete: True for branch-and-prune search, False for propagation only
        result: SAT/UNSAT view of the verdict
        explanation: Conflict certificate when inconsistent
        kernel_name: Name of the kernel that produced the verdict
        time_ms: Time spent in the kernel in milliseconds
    """
    consistent: bool
    complete: bool
    result: SolverResult = SolverResult.UNKNOWN
    explanation: List[Literal] = field(default_factory=list)
    kernel_name: str = "unknown"
    time_ms: float = 0.0

    def __str__(self) -> str:
        mode = "complete" if self.complete else "incomplete"
        if self.consistent:
            return f"Consistent ({mode}, {self.kernel_name}, {self.time_ms:.2f}ms)"
        return (f"Inconsistent: {len(self.explanation)} literal(s) in explanation "
                f"({mode}, {self.kernel_name}, {self.time_ms:.2f}ms)")
