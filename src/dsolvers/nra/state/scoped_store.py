"""
Scoped (transactional) mapping from variables to their current bounds.
"""
import logging
from typing import Dict, Iterator, List, Tuple

from ..exceptions import BoundsMismatchError, CheckpointUnderflowError, ContractViolation
from .interval import Interval

logger = logging.getLogger(__name__)


class ScopedIntervalStore:
    """Variable -> Interval map organised as a stack of mutation frames.

    Every frame keeps an undo log holding the value a variable had before
    its first write inside the frame. Popping a frame replays that log, so
    the mapping is restored exactly no matter how often a variable was
    written in between.

    Initial bounds live in the base frame and survive every pop.
    """

    def __init__(self):
        self._values: Dict[int, Interval] = {}
        self._initial: Dict[int, Interval] = {}
        self._frames: List[Dict[int, Interval]] = []

    @property
    def depth(self) -> int:
        """Number of open frames."""
        return len(self._frames)

    def __contains__(self, var: int) -> bool:
        return var in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[int]:
        return iter(self._values)

    def items(self) -> Iterator[Tuple[int, Interval]]:
        """Entries in insertion order."""
        return iter(self._values.items())

    def snapshot(self) -> Dict[int, Interval]:
        return dict(self._values)

    def initialize(self, var: int, interval: Interval) -> None:
        """Register a variable's static bound in the base frame.

        Raises:
            BoundsMismatchError: If the variable is already registered with
                a different bound
        """
        if var in self._initial:
            if self._initial[var] != interval:
                raise BoundsMismatchError(
                    f"Variable {var} already registered with {self._initial[var]}, got {interval}")
            return
        self._initial[var] = interval
        self._values[var] = interval

    def initial(self, var: int) -> Interval:
        if var not in self._initial:
            raise ContractViolation(f"Variable {var} was never registered")
        return self._initial[var]

    def get(self, var: int) -> Interval:
        if var not in self._values:
            raise ContractViolation(f"Variable {var} was never registered")
        return self._values[var]

    def set(self, var: int, interval: Interval) -> None:
        if var not in self._values:
            raise ContractViolation(f"Variable {var} was never registered")
        if self._frames:
            self._frames[-1].setdefault(var, self._values[var])
        self._values[var] = interval

    def push_frame(self) -> None:
        self._frames.append({})

    def pop_frame(self) -> None:
        """Discard every write made since the matching ``push_frame``.

        Raises:
            CheckpointUnderflowError: If no frame is open
        """
        if not self._frames:
            raise CheckpointUnderflowError("pop_frame on a store with no open frame")
        undo = self._frames.pop()
        for var, previous in undo.items():
            self._values[var] = previous
        logger.debug("Restored %d variable(s), depth now %d", len(undo), len(self._frames))
