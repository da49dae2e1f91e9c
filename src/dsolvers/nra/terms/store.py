"""
Arena of term nodes addressed by stable integer handles.
"""
import math
from typing import Dict, Iterable, List, Optional

from ..exceptions import ContractViolation, UnknownNodeError
from ..state.interval import Interval
from .nodes import (
    Definition,
    ListNode,
    Nil,
    Node,
    Numeral,
    Polarity,
    Symbol,
    Term,
    VariableInfo,
)

RELATIONS = ("<=", "<", ">=", ">", "=")


class TermStore:
    """Owns term nodes and variable metadata.

    Handles are indices into the arena. Symbols are interned so that an
    operator name maps to one handle.
    """

    def __init__(self):
        self._nodes: List[Node] = []
        self._symbols: Dict[str, int] = {}
        self._variables: Dict[int, VariableInfo] = {}
        self._nil = self.add(Nil())

    def __len__(self) -> int:
        return len(self._nodes)

    def add(self, node: Node) -> int:
        """Append a node to the arena and return its handle."""
        self._nodes.append(node)
        return len(self._nodes) - 1

    def node(self, handle: int) -> Node:
        if handle < 0 or handle >= len(self._nodes):
            raise UnknownNodeError(f"No node with handle {handle}")
        return self._nodes[handle]

    # Builders

    @property
    def nil(self) -> int:
        return self._nil

    def symbol(self, name: str) -> int:
        if name not in self._symbols:
            self._symbols[name] = self.add(Symbol(name))
        return self._symbols[name]

    def numeral(self, value: float) -> int:
        return self.add(Numeral(float(value)))

    def definition(self, name: str) -> int:
        return self.add(Definition(name))

    def cons(self, car: int, cdr: int) -> int:
        return self.add(ListNode(car, cdr))

    def list_of(self, handles: Iterable[int]) -> int:
        chain = self._nil
        for handle in reversed(list(handles)):
            chain = self.cons(handle, chain)
        return chain

    def term(self, op: str, *args: int) -> int:
        """Build the application ``(op args...)``."""
        return self.add(Term(self.symbol(op), self.list_of(args)))

    def variable(self,
                 name: str,
                 lower: float = -math.inf,
                 upper: float = math.inf,
                 *,
                 time_variable: Optional[int] = None,
                 ode_group: int = 0,
                 ode_var_type: Polarity = Polarity.UNDEF) -> int:
        """Create a real-valued variable with static bounds and optional ODE metadata."""
        handle = self.add(Term(self.symbol(name), self._nil))
        self._variables[handle] = VariableInfo(
            name=name,
            lower=float(lower),
            upper=float(upper),
            time_variable=time_variable,
            ode_group=ode_group,
            ode_var_type=ode_var_type,
        )
        return handle

    def le(self, lhs: int, rhs: int) -> int:
        return self.term("<=", lhs, rhs)

    def lt(self, lhs: int, rhs: int) -> int:
        return self.term("<", lhs, rhs)

    def ge(self, lhs: int, rhs: int) -> int:
        return self.term(">=", lhs, rhs)

    def gt(self, lhs: int, rhs: int) -> int:
        return self.term(">", lhs, rhs)

    def eq(self, lhs: int, rhs: int) -> int:
        return self.term("=", lhs, rhs)

    # Queries

    def is_variable(self, handle: int) -> bool:
        return handle in self._variables

    def variable_info(self, handle: int) -> VariableInfo:
        if handle not in self._variables:
            raise ContractViolation(f"Handle {handle} is not a variable")
        return self._variables[handle]

    def variables(self) -> List[int]:
        return list(self._variables)

    def is_term(self, handle: int) -> bool:
        return isinstance(self.node(handle), Term)

    def is_atom(self, handle: int) -> bool:
        return self.is_term(handle) and self.operator(handle) in RELATIONS

    def operator(self, handle: int) -> str:
        node = self.node(handle)
        if not isinstance(node, Term):
            raise ContractViolation(f"Handle {handle} is not a term")
        return self.name_of(node.car)

    def arguments(self, handle: int) -> List[int]:
        node = self.node(handle)
        if not isinstance(node, Term):
            raise ContractViolation(f"Handle {handle} is not a term")
        return self.elements(node.cdr)

    def elements(self, chain: int) -> List[int]:
        """Flatten a ListNode chain into a list of handles."""
        result = []
        node = self.node(chain)
        while not isinstance(node, Nil):
            if not isinstance(node, ListNode):
                raise UnknownNodeError(f"Malformed list chain at handle {chain}: {type(node).__name__}")
            result.append(node.car)
            chain = node.cdr
            node = self.node(chain)
        return result

    def name_of(self, handle: int) -> str:
        node = self.node(handle)
        if isinstance(node, (Symbol, Definition)):
            return node.name
        if isinstance(node, Term):
            return self.name_of(node.car)
        raise ContractViolation(f"Handle {handle} has no name")

    def to_string(self, handle: int) -> str:
        """Render a node as an s-expression."""
        node = self.node(handle)
        if isinstance(node, Symbol):
            return node.name
        if isinstance(node, Numeral):
            value = node.value
            return str(int(value)) if value.is_integer() else repr(value)
        if isinstance(node, Term):
            if handle in self._variables:
                return self._variables[handle].name
            args = " ".join(self.to_string(a) for a in self.elements(node.cdr))
            return f"({self.name_of(node.car)} {args})"
        if isinstance(node, ListNode):
            return "[" + ", ".join(self.to_string(a) for a in self.elements(handle)) + "]"
        if isinstance(node, Definition):
            return node.name
        if isinstance(node, Nil):
            return "nil"
        raise UnknownNodeError(f"Unknown node kind: {type(node).__name__}")

    # Model write-back

    def set_value(self, handle: int, interval: Interval) -> None:
        self.variable_info(handle).value = interval

    def value(self, handle: int) -> Optional[Interval]:
        return self.variable_info(handle).value
