"""
Tests for the Z3 kernel and the term to Z3 translator.
"""
import pytest
import z3
from conftest import make_context
from dsolvers.nra import (
    Interval,
    KernelError,
    Literal,
    NRAConfig,
    Polarity,
    UnsupportedOperatorError,
)
from dsolvers.nra.kernel import Z3Kernel
from dsolvers.nra.translator import TermToZ3Translator


def test_z3_kernel_unsat_core(terms):
    """Test that Z3 returns every literal the conflict depends on."""
    x = terms.variable("x", 0, 10)
    y = terms.variable("y", -10, 10)
    unrelated = Literal(terms.le(y, terms.numeral(9)))
    a = Literal(terms.ge(x, terms.numeral(8)))
    b = Literal(terms.le(terms.term("+", x, y), terms.numeral(5)))
    c = Literal(terms.ge(y, terms.numeral(0)))

    kernel = Z3Kernel(make_context(terms, [unrelated, a, b, c]))
    assert kernel.solve() is False
    assert kernel.explanation == [a, b, c]


def test_z3_kernel_sat_keeps_witness_out_of_store(terms):
    """Test that a Z3 model becomes a point witness while the store keeps its bounds."""
    x = terms.variable("x", 0, 10)
    lit = Literal(terms.eq(terms.term("^", x, terms.numeral(2)), terms.numeral(2)))

    kernel = Z3Kernel(make_context(terms, [lit]))
    assert kernel.solve() is True
    witness = kernel.witness[x]
    assert witness.is_point
    assert witness.lower == pytest.approx(2 ** 0.5, abs=1e-9)
    assert kernel.store.get(x) == Interval(0.0, 10.0)


def test_z3_kernel_negated_literal(terms):
    """Test that FALSE literals are asserted negated."""
    x = terms.variable("x", 0, 10)
    lit = Literal(terms.le(x, terms.numeral(4)), Polarity.FALSE)

    kernel = Z3Kernel(make_context(terms, [lit]))
    assert kernel.solve() is True
    assert kernel.witness[x].lower > 4.0


def test_z3_kernel_propagation_is_interval_based(terms):
    """Test that prop still runs interval propagation."""
    x = terms.variable("x", 0, 10)
    lit = Literal(terms.le(x, terms.numeral(4)))

    kernel = Z3Kernel(make_context(terms, [lit]))
    assert kernel.prop() is True
    assert kernel.store.get(x) == Interval(0.0, 4.0)


def test_z3_kernel_unknown_is_error(terms, monkeypatch):
    """Test that an inconclusive Z3 answer is a kernel failure."""
    x = terms.variable("x", 0, 10)
    lit = Literal(terms.ge(x, terms.numeral(1)))

    kernel = Z3Kernel(make_context(terms, [lit]))
    monkeypatch.setattr(kernel.solver, "check", lambda *assumptions: z3.unknown)
    monkeypatch.setattr(kernel.solver, "reason_unknown", lambda: "timeout")
    with pytest.raises(KernelError):
        kernel.solve()


def test_z3_kernel_timeout_config(terms):
    x = terms.variable("x", 0, 10)
    lit = Literal(terms.ge(x, terms.numeral(1)))

    kernel = Z3Kernel(make_context(terms, [lit], NRAConfig(timeout_ms=5000)))
    assert kernel.solve() is True


def test_z3_kernel_unsupported_operator(terms):
    """Test that operators without a Z3 rendering are rejected."""
    x = terms.variable("x", 0, 10)
    lit = Literal(terms.le(terms.term("exp", x), terms.numeral(4)))

    kernel = Z3Kernel(make_context(terms, [lit]))
    with pytest.raises(UnsupportedOperatorError):
        kernel.solve()


def test_translate_atom(terms):
    """Test that a translated atom means the same thing in Z3."""
    x = terms.variable("x", 0, 10)
    y = terms.variable("y", 0, 10)
    atom = terms.le(terms.term("+", x, terms.term("*", terms.numeral(2), y)), terms.numeral(5))

    translator = TermToZ3Translator(terms)
    expr = translator.translate_atom(atom)
    solver = z3.Solver()
    solver.add(expr, translator.variable(y) == 3)
    assert solver.check() == z3.sat
    assert translator.model_value(solver.model(), x) <= -1.0


def test_translate_is_cached_per_variable(terms):
    x = terms.variable("x", 0, 10)
    translator = TermToZ3Translator(terms)
    assert translator.variable(x) is translator.variable(x)


def test_translate_negative_exponent(terms):
    x = terms.variable("x", 1, 10)
    atom = terms.eq(terms.term("^", x, terms.numeral(-1)), terms.numeral(0.5))

    translator = TermToZ3Translator(terms)
    solver = z3.Solver()
    solver.add(translator.translate_atom(atom))
    assert solver.check() == z3.sat
    assert translator.model_value(solver.model(), x) == pytest.approx(2.0)


def test_translate_rejects_real_exponent(terms):
    x = terms.variable("x", 1, 10)
    atom = terms.eq(terms.term("^", x, terms.numeral(0.5)), terms.numeral(2))

    with pytest.raises(UnsupportedOperatorError):
        TermToZ3Translator(terms).translate_atom(atom)


def test_bound_constraints_skip_infinite_ends(terms):
    x = terms.variable("x", 0)
    translator = TermToZ3Translator(terms)
    assert len(translator.bound_constraints(x, Interval(0.0, float("inf")))) == 1
    assert translator.bound_constraints(x, Interval.entire()) == []


def test_build_problem_tracks_literals(terms):
    x = terms.variable("x", 0, 10)
    a = Literal(terms.ge(x, terms.numeral(8)))
    b = Literal(terms.le(x, terms.numeral(3)), Polarity.FALSE)

    problem = TermToZ3Translator(terms).build_problem([a, b], {x: Interval(0.0, 10.0)})
    assert list(problem.tracked) == ["lit_0", "lit_1"]
    assert x in problem.variables
    assert len(problem.constraints) == 2


def test_z3_kernel_empty_refutation_is_error(terms, monkeypatch):
    """Test that a refutation with nothing asserted never yields an empty explanation."""
    kernel = Z3Kernel(make_context(terms, []))
    monkeypatch.setattr(kernel.solver, "check", lambda *assumptions: z3.unsat)
    monkeypatch.setattr(kernel.solver, "unsat_core", lambda: [])
    with pytest.raises(KernelError):
        kernel.solve()
