"""
Backtrack points bundling the interval store and the assertion ledger.
"""
from dataclasses import dataclass
from typing import List

from ..exceptions import CheckpointUnderflowError, ContractViolation
from .ledger import AssertionLedger
from .scoped_store import ScopedIntervalStore


@dataclass(frozen=True)
class BacktrackFrame:
    """Sizes recorded when a backtrack point was created."""
    store_depth: int
    ledger_size: int


class BacktrackStack:
    """Pushes and pops store frames and ledger checkpoints as one unit."""

    def __init__(self, store: ScopedIntervalStore, ledger: AssertionLedger):
        self.store = store
        self.ledger = ledger
        self._frames: List[BacktrackFrame] = []
        self._check_lockstep()

    @property
    def depth(self) -> int:
        return len(self._frames)

    @property
    def frames(self) -> List[BacktrackFrame]:
        return list(self._frames)

    def push(self) -> BacktrackFrame:
        frame = BacktrackFrame(store_depth=self.store.depth, ledger_size=len(self.ledger))
        self.store.push_frame()
        self.ledger.push_checkpoint()
        self._frames.append(frame)
        self._check_lockstep()
        return frame

    def pop(self) -> BacktrackFrame:
        if not self._frames:
            raise CheckpointUnderflowError("pop_backtrack_point without a matching push")
        frame = self._frames.pop()
        self.ledger.pop_checkpoint()
        self.store.pop_frame()
        self._check_lockstep()
        if len(self.ledger) != frame.ledger_size:
            raise ContractViolation(
                f"Ledger restored to {len(self.ledger)} literals, expected {frame.ledger_size}")
        return frame

    def _check_lockstep(self) -> None:
        if not (len(self.ledger.checkpoint_sizes) == self.store.depth == len(self._frames)):
            raise ContractViolation(
                f"Backtrack stacks drifted: ledger={len(self.ledger.checkpoint_sizes)} "
                f"store={self.store.depth} frames={len(self._frames)}")
