"""
HC4-revise contractor over the term representation.

A literal is revised in three passes:
- forward: evaluate both sides of the relation over the current box
- intersect: narrow the two side enclosures with the relation
- backward: project the narrowed enclosures down to the variables
"""
import logging
from functools import reduce
from typing import Dict, List

from ..exceptions import UnsupportedOperatorError
from ..state.interval import INF, Interval
from ..terms.nodes import Literal, Numeral, Polarity, Term
from ..terms.store import RELATIONS, TermStore

logger = logging.getLogger(__name__)

Box = Dict[int, Interval]

NEGATED = {
    "<=": ">",
    "<": ">=",
    ">=": "<",
    ">": "<=",
    "=": "!=",
}

_UNARY = ("exp", "log", "sqrt", "sin", "cos")


class Contractor:
    """Narrows variable intervals against relational literals."""

    def __init__(self, terms: TermStore):
        self.terms = terms

    def evaluate(self, handle: int, box: Box) -> Interval:
        """Interval enclosure of an arithmetic term over ``box``."""
        return self._forward(handle, box, {})

    def revise(self, literal: Literal, box: Box) -> bool:
        """Narrow ``box`` in place against one literal.

        Returns:
            False if the literal cannot hold anywhere in the box
        """
        terms = self.terms
        relation = terms.operator(literal.atom)
        if relation not in RELATIONS:
            logger.debug("Skipping non-relational atom %s", terms.to_string(literal.atom))
            return True
        if literal.polarity is Polarity.FALSE:
            relation = NEGATED[relation]
        lhs, rhs = self._sides(literal.atom)

        values: Dict[int, Interval] = {}
        left = self._forward(lhs, box, values)
        right = self._forward(rhs, box, values)
        if left.is_empty or right.is_empty:
            return False

        if relation in ("<=", "<"):
            if relation == "<" and left.lower >= right.upper:
                return False
            new_left = left.intersect(Interval(-INF, right.upper))
            new_right = right.intersect(Interval(left.lower, INF))
        elif relation in (">=", ">"):
            if relation == ">" and left.upper <= right.lower:
                return False
            new_left = left.intersect(Interval(right.lower, INF))
            new_right = right.intersect(Interval(-INF, left.upper))
        elif relation == "=":
            new_left = new_right = left.intersect(right)
        else:
            # Disequality only refutes two identical points
            return not (left.is_point and left == right)

        if new_left.is_empty or new_right.is_empty:
            return False
        return (self._backward(lhs, new_left, box, values)
                and self._backward(rhs, new_right, box, values))

    def entailed(self, atom: int, box: Box) -> Polarity:
        """Truth value of an atom that holds everywhere in ``box``, if any."""
        relation = self.terms.operator(atom)
        if relation not in RELATIONS:
            return Polarity.UNDEF
        lhs, rhs = self._sides(atom)
        values: Dict[int, Interval] = {}
        left = self._forward(lhs, box, values)
        right = self._forward(rhs, box, values)
        if left.is_empty or right.is_empty:
            return Polarity.UNDEF

        if relation == "<=":
            holds, fails = left.upper <= right.lower, left.lower > right.upper
        elif relation == "<":
            holds, fails = left.upper < right.lower, left.lower >= right.upper
        elif relation == ">=":
            holds, fails = left.lower >= right.upper, left.upper < right.lower
        elif relation == ">":
            holds, fails = left.lower > right.upper, left.upper <= right.lower
        else:
            holds = left.is_point and left == right
            fails = left.intersect(right).is_empty

        if holds:
            return Polarity.TRUE
        if fails:
            return Polarity.FALSE
        return Polarity.UNDEF

    def _sides(self, atom: int) -> List[int]:
        args = self.terms.arguments(atom)
        if len(args) != 2:
            raise UnsupportedOperatorError(
                f"Relation {self.terms.operator(atom)} expects 2 arguments, got {len(args)}")
        return args

    def _exponent(self, handle: int) -> int:
        args = self.terms.arguments(handle)
        node = self.terms.node(args[1]) if len(args) == 2 else None
        if not isinstance(node, Numeral) or not node.value.is_integer():
            raise UnsupportedOperatorError(
                f"Only integer numeral exponents are supported: {self.terms.to_string(handle)}")
        return int(node.value)

    # Forward evaluation

    def _forward(self, handle: int, box: Box, values: Dict[int, Interval]) -> Interval:
        if handle in values:
            return values[handle]
        terms = self.terms
        node = terms.node(handle)
        if terms.is_variable(handle):
            result = box[handle]
        elif isinstance(node, Numeral):
            result = Interval.point(node.value)
        elif isinstance(node, Term):
            op = terms.operator(handle)
            args = terms.arguments(handle)
            if op in ("^", "pow"):
                result = self._forward(args[0], box, values).pow(self._exponent(handle))
            else:
                result = self._apply(op, [self._forward(a, box, values) for a in args], handle)
        else:
            raise UnsupportedOperatorError(
                f"{type(node).__name__} node {handle} in arithmetic position")
        values[handle] = result
        return result

    def _apply(self, op: str, args: List[Interval], handle: int) -> Interval:
        if op == "+":
            return reduce(lambda a, b: a + b, args, Interval.point(0.0))
        if op == "-":
            if len(args) == 1:
                return -args[0]
            if len(args) == 2:
                return args[0] - args[1]
        elif op == "*":
            return reduce(lambda a, b: a * b, args, Interval.point(1.0))
        elif op == "/":
            if len(args) == 2:
                return args[0] / args[1]
        elif op in _UNARY:
            if len(args) == 1:
                return getattr(args[0], op)()
        raise UnsupportedOperatorError(
            f"Unsupported operator {op!r} with {len(args)} argument(s): {self.terms.to_string(handle)}")

    # Backward projection

    def _backward(self, handle: int, target: Interval, box: Box, values: Dict[int, Interval]) -> bool:
        terms = self.terms
        narrowed = values[handle].intersect(target)
        if narrowed.is_empty:
            return False
        if terms.is_variable(handle):
            box[handle] = box[handle].intersect(narrowed)
            values[handle] = box[handle]
            return not box[handle].is_empty
        if isinstance(terms.node(handle), Numeral):
            return True
        values[handle] = narrowed

        op = terms.operator(handle)
        args = terms.arguments(handle)
        vals = [values[a] for a in args]

        if op == "+":
            for i, arg in enumerate(args):
                rest = reduce(lambda a, b: a + b, (v for j, v in enumerate(vals) if j != i), Interval.point(0.0))
                if not self._backward(arg, narrowed - rest, box, values):
                    return False
            return True
        if op == "-":
            if len(args) == 1:
                return self._backward(args[0], -narrowed, box, values)
            return (self._backward(args[0], narrowed + vals[1], box, values)
                    and self._backward(args[1], vals[0] - narrowed, box, values))
        if op == "*":
            for i, arg in enumerate(args):
                rest = reduce(lambda a, b: a * b, (v for j, v in enumerate(vals) if j != i), Interval.point(1.0))
                if not self._backward(arg, narrowed / rest, box, values):
                    return False
            return True
        if op == "/":
            return (self._backward(args[0], narrowed * vals[1], box, values)
                    and self._backward(args[1], vals[0] / narrowed, box, values))
        if op in ("^", "pow"):
            n = self._exponent(handle)
            if n == 0:
                return True
            powered = narrowed if n > 0 else Interval.point(1.0) / narrowed
            return self._backward(args[0], powered.root(abs(n), vals[0]), box, values)
        if op == "exp":
            return self._backward(args[0], narrowed.log(), box, values)
        if op == "log":
            return self._backward(args[0], narrowed.exp(), box, values)
        if op == "sqrt":
            return self._backward(args[0], narrowed.intersect(Interval(0.0, INF)).pow(2), box, values)
        # sin/cos are evaluated forward only
        return True
