"""
Variable extraction over the term representation.
"""
from typing import Dict, List

from ..exceptions import UnknownNodeError
from .nodes import Definition, ListNode, Nil, Numeral, Symbol, Term
from .store import TermStore


def collect_variables(terms: TermStore, handle: int) -> List[int]:
    """Collect every variable occurring in a node.

    Operators and argument chains are descended; symbol, numeral, definition
    and nil leaves contribute nothing.

    Args:
        terms: Term store owning the node
        handle: Node to search

    Returns:
        Distinct variable handles in first-occurrence order

    Raises:
        UnknownNodeError: If a node of unrecognised kind is met
    """
    found: Dict[int, None] = {}
    _collect(terms, handle, found)
    return list(found)


def _collect(terms: TermStore, handle: int, found: Dict[int, None]) -> None:
    node = terms.node(handle)
    if isinstance(node, (Symbol, Numeral, Definition, Nil)):
        return
    elif isinstance(node, Term):
        if terms.is_variable(handle):
            found[handle] = None
        _collect(terms, node.car, found)
        _collect_chain(terms, node.cdr, found)
    elif isinstance(node, ListNode):
        _collect(terms, node.car, found)
        _collect_chain(terms, node.cdr, found)
    else:
        raise UnknownNodeError(f"Unknown node kind at handle {handle}: {type(node).__name__}")


def _collect_chain(terms: TermStore, chain: int, found: Dict[int, None]) -> None:
    node = terms.node(chain)
    while not isinstance(node, Nil):
        if not isinstance(node, ListNode):
            raise UnknownNodeError(f"Malformed argument chain at handle {chain}: {type(node).__name__}")
        _collect(terms, node.car, found)
        chain = node.cdr
        node = terms.node(chain)
