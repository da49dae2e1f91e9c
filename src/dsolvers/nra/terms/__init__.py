"""
Term representation consumed by the NRA solver.
"""

from .nodes import (
    Polarity,
    Symbol,
    Numeral,
    Term,
    ListNode,
    Definition,
    Nil,
    Node,
    VariableInfo,
    Literal,
)
from .store import TermStore, RELATIONS
from .variables import collect_variables

__all__ = [
    "Polarity",
    "Symbol",
    "Numeral",
    "Term",
    "ListNode",
    "Definition",
    "Nil",
    "Node",
    "VariableInfo",
    "Literal",
    "TermStore",
    "RELATIONS",
    "collect_variables",
]
