"""
Ordered record of asserted literals with checkpoint markers.
"""
from typing import Dict, Iterator, List, Tuple

from ..exceptions import CheckpointUnderflowError
from ..terms.nodes import Literal, Polarity


class AssertionLedger:
    """Asserted literals plus a stack of checkpoint sizes.

    The ledger also remembers the deductions its owning solver emitted.
    A deduction is scoped like an assertion: popping the checkpoint that was
    open when it was recorded forgets it again.
    """

    def __init__(self):
        self._literals: List[Literal] = []
        self._checkpoints: List[Tuple[int, int]] = []
        self._deductions: Dict[int, Polarity] = {}
        self._deduction_trail: List[int] = []

    def __len__(self) -> int:
        return len(self._literals)

    def __iter__(self) -> Iterator[Literal]:
        return iter(self._literals)

    @property
    def literals(self) -> Tuple[Literal, ...]:
        return tuple(self._literals)

    @property
    def checkpoint_sizes(self) -> List[int]:
        return [size for size, _ in self._checkpoints]

    @property
    def depth(self) -> int:
        return len(self._checkpoints)

    def atoms(self) -> List[int]:
        return [lit.atom for lit in self._literals]

    def has_deduction(self, atom: int) -> bool:
        return atom in self._deductions

    def is_self_deduced(self, literal: Literal) -> bool:
        return self._deductions.get(literal.atom) is literal.polarity

    def assert_literal(self, literal: Literal) -> bool:
        """Append a literal.

        Returns:
            False (and leaves the ledger unchanged) if the literal matches a
            deduction recorded by this solver, True otherwise
        """
        if self.is_self_deduced(literal):
            return False
        self._literals.append(literal)
        return True

    def record_deduction(self, literal: Literal) -> None:
        if literal.atom in self._deductions:
            return
        self._deductions[literal.atom] = literal.polarity
        self._deduction_trail.append(literal.atom)

    def push_checkpoint(self) -> None:
        self._checkpoints.append((len(self._literals), len(self._deduction_trail)))

    def pop_checkpoint(self) -> None:
        """Retract every literal asserted since the matching ``push_checkpoint``.

        Raises:
            CheckpointUnderflowError: If the checkpoint stack is empty
        """
        if not self._checkpoints:
            raise CheckpointUnderflowError("pop_checkpoint on an empty checkpoint stack")
        size, trail_size = self._checkpoints.pop()
        while len(self._literals) > size:
            self._literals.pop()
        while len(self._deduction_trail) > trail_size:
            del self._deductions[self._deduction_trail.pop()]
