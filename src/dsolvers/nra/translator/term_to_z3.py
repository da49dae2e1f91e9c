"""
Term representation to Z3 translation.

Converts atoms of the term store into Z3 real-arithmetic constraints.
"""
import math
from fractions import Fraction
from typing import Any, Dict, List, Optional

import z3

from ..exceptions import UnsupportedOperatorError
from ..state.interval import Interval
from ..terms.nodes import Literal, Numeral, Polarity, Term
from ..terms.store import TermStore


class Z3Problem:
    """Z3 variables and constraints built from a set of literals.

    Attributes:
        variables: Variable handle -> Z3 real constant
        constraints: Bound constraints on the variables
        tracked: Tracking name -> Z3 expression of the literal
    """

    def __init__(self):
        self.variables: Dict[int, Any] = {}
        self.constraints: List[Any] = []
        self.tracked: Dict[str, Any] = {}

    def add_variable(self, handle: int, var: Any):
        self.variables[handle] = var

    def add_constraint(self, constraint: Any):
        self.constraints.append(constraint)


class TermToZ3Translator:
    """Translates term-store atoms into Z3 expressions."""

    def __init__(self, terms: TermStore):
        self.terms = terms
        self._vars: Dict[int, Any] = {}

    def variable(self, handle: int) -> Any:
        if handle not in self._vars:
            info = self.terms.variable_info(handle)
            self._vars[handle] = z3.Real(f"{info.name}!{handle}")
        return self._vars[handle]

    def bound_constraints(self, handle: int, interval: Interval) -> List[Any]:
        """Constraints confining a variable to an interval (infinite ends are dropped)."""
        var = self.variable(handle)
        result = []
        if not math.isinf(interval.lower):
            result.append(var >= self._real(interval.lower))
        if not math.isinf(interval.upper):
            result.append(var <= self._real(interval.upper))
        return result

    def translate_literal(self, literal: Literal) -> Any:
        expr = self.translate_atom(literal.atom)
        if literal.polarity is Polarity.FALSE:
            return z3.Not(expr)
        return expr

    def translate_atom(self, atom: int) -> Any:
        op = self.terms.operator(atom)
        args = [self.translate(a) for a in self.terms.arguments(atom)]
        if len(args) != 2:
            raise UnsupportedOperatorError(f"Relation {op} expects 2 arguments, got {len(args)}")
        lhs, rhs = args
        if op == "<=":
            return lhs <= rhs
        elif op == "<":
            return lhs < rhs
        elif op == ">=":
            return lhs >= rhs
        elif op == ">":
            return lhs > rhs
        elif op == "=":
            return lhs == rhs
        raise UnsupportedOperatorError(f"Unsupported relation: {op}")

    def translate(self, handle: int) -> Any:
        """Translate an arithmetic term."""
        terms = self.terms
        node = terms.node(handle)
        if terms.is_variable(handle):
            return self.variable(handle)
        elif isinstance(node, Numeral):
            return self._real(node.value)
        elif isinstance(node, Term):
            return self._translate_app(handle)
        raise UnsupportedOperatorError(f"{type(node).__name__} node {handle} in arithmetic position")

    def _translate_app(self, handle: int) -> Any:
        op = self.terms.operator(handle)
        arg_handles = self.terms.arguments(handle)
        if op in ("^", "pow"):
            exponent = self._integer_exponent(handle, arg_handles)
            base = self.translate(arg_handles[0])
            if exponent < 0:
                return 1 / (base ** -exponent)
            return base ** exponent
        args = [self.translate(a) for a in arg_handles]
        if op == "+":
            return z3.Sum(*args) if args else self._real(0.0)
        if op == "*":
            return z3.Product(*args) if args else self._real(1.0)
        if op == "-" and len(args) == 1:
            return -args[0]
        if op == "-" and len(args) == 2:
            return args[0] - args[1]
        if op == "/" and len(args) == 2:
            return args[0] / args[1]
        raise UnsupportedOperatorError(f"No Z3 translation for {self.terms.to_string(handle)}")

    def _integer_exponent(self, handle: int, args: List[int]) -> int:
        node = self.terms.node(args[1]) if len(args) == 2 else None
        if not isinstance(node, Numeral) or not node.value.is_integer():
            raise UnsupportedOperatorError(
                f"Only integer numeral exponents are supported: {self.terms.to_string(handle)}")
        return int(node.value)

    @staticmethod
    def _real(value: float) -> Any:
        frac = Fraction(value)
        return z3.Q(frac.numerator, frac.denominator)

    def build_problem(self, literals: List[Literal], bounds: Dict[int, Interval]) -> Z3Problem:
        """Translate literals and variable bounds into a problem with tracked literals.

        Args:
            literals: Literals to track, in order
            bounds: Variable handle -> bound to enforce

        Returns:
            Z3Problem whose tracking names are ``lit_<index>``
        """
        problem = Z3Problem()
        for handle, interval in bounds.items():
            problem.add_variable(handle, self.variable(handle))
            for constraint in self.bound_constraints(handle, interval):
                problem.add_constraint(constraint)
        for i, lit in enumerate(literals):
            problem.tracked[f"lit_{i}"] = self.translate_literal(lit)
        return problem

    def model_value(self, model: Any, handle: int) -> Optional[float]:
        """Float value of a variable in a Z3 model."""
        value = model.eval(self.variable(handle), model_completion=True)
        if z3.is_rational_value(value):
            return float(value.as_fraction())
        if z3.is_algebraic_value(value):
            return float(value.approx(20).as_fraction())
        return None
