"""
Node variants of the term representation.

Terms live in a ``TermStore`` arena and refer to each other through integer
handles. A node is exactly one of the six variants below.
"""
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:
    from ..state.interval import Interval


class Polarity(Enum):
    """Tri-valued truth assignment of an atom."""
    TRUE = 1
    FALSE = -1
    UNDEF = 0

    def negate(self) -> "Polarity":
        if self is Polarity.TRUE:
            return Polarity.FALSE
        if self is Polarity.FALSE:
            return Polarity.TRUE
        return Polarity.UNDEF


@dataclass(frozen=True)
class Symbol:
    name: str


@dataclass(frozen=True)
class Numeral:
    value: float


@dataclass(frozen=True)
class Term:
    """Operator application: ``car`` is a Symbol handle, ``cdr`` an argument chain."""
    car: int
    cdr: int


@dataclass(frozen=True)
class ListNode:
    """Cons cell of an argument chain or a list of atoms."""
    car: int
    cdr: int


@dataclass(frozen=True)
class Definition:
    name: str


@dataclass(frozen=True)
class Nil:
    pass


Node = Union[Symbol, Numeral, Term, ListNode, Definition, Nil]


@dataclass
class VariableInfo:
    """Static metadata of a real-valued variable.

    Attributes:
        name: Variable name
        lower: Static lower bound
        upper: Static upper bound
        time_variable: Handle of the time variable if this is a continuous-mode
            state variable
        ode_group: Mode identifier; values <= 0 mean "not continuous"
        ode_var_type: Marks the variable as ODE-relevant
        value: Interval published by the last model extraction
    """
    name: str
    lower: float
    upper: float
    time_variable: Optional[int] = None
    ode_group: int = 0
    ode_var_type: Polarity = Polarity.UNDEF
    value: Optional["Interval"] = None

    @property
    def is_ode(self) -> bool:
        return self.time_variable is not None and self.ode_group > 0


@dataclass(frozen=True)
class Literal:
    """An atom handle together with a truth assignment."""
    atom: int
    polarity: Polarity = Polarity.TRUE

    def negate(self) -> "Literal":
        return Literal(self.atom, self.polarity.negate())

    @property
    def is_polarized(self) -> bool:
        return self.polarity is not Polarity.UNDEF
