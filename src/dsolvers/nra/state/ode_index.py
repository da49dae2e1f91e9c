"""
Per-atom index of continuous-mode (ODE) variables.
"""
from typing import TYPE_CHECKING, Dict, Iterable, List, Set, Tuple

from ..exceptions import OdeIndexError
from ..terms.nodes import Literal, Polarity

if TYPE_CHECKING:
    from ..terms.store import TermStore


class OdeVariableIndex:
    """Maps an atom to the ODE-relevant variables occurring in it.

    Entries are written once, when the atom is informed, and are read-only
    afterwards.
    """

    def __init__(self):
        self._index: Dict[int, Tuple[int, ...]] = {}

    def __contains__(self, atom: int) -> bool:
        return atom in self._index

    def __len__(self) -> int:
        return len(self._index)

    def record(self, atom: int, variables: Iterable[int]) -> None:
        entry = tuple(variables)
        if atom in self._index:
            if set(self._index[atom]) != set(entry):
                raise OdeIndexError(f"ODE variables of atom {atom} already recorded as {self._index[atom]}")
            return
        self._index[atom] = entry

    def get(self, atom: int) -> Tuple[int, ...]:
        return self._index.get(atom, ())

    def groups(self, literals: Iterable[Literal], terms: "TermStore") -> List[int]:
        """Mode identifiers of the ODE variables under true literals.

        Only variables whose ``ode_var_type`` is TRUE count.
        """
        found: Set[int] = set()
        for lit in literals:
            if lit.polarity is not Polarity.TRUE:
                continue
            for var in self.get(lit.atom):
                info = terms.variable_info(var)
                if info.ode_var_type is Polarity.TRUE:
                    found.add(info.ode_group)
        return sorted(found)
