"""
Tests for interval arithmetic.
"""
import math

import pytest
from dsolvers.nra.state import Interval


def approx_interval(iv, lo, hi, tol=1e-9):
    return abs(iv.lower - lo) <= tol and abs(iv.upper - hi) <= tol


def test_empty_and_point():
    assert Interval(3.0, 1.0).is_empty
    assert Interval.empty().is_empty
    assert not Interval(1.0, 1.0).is_empty
    assert Interval.point(2.0).is_point
    assert Interval.empty().width == 0.0


def test_intersect_and_hull():
    a = Interval(0.0, 5.0)
    b = Interval(3.0, 8.0)
    assert a.intersect(b) == Interval(3.0, 5.0)
    assert a.hull(b) == Interval(0.0, 8.0)
    assert a.intersect(Interval(6.0, 7.0)).is_empty
    assert Interval.empty().hull(a) == a


def test_subset():
    assert Interval(1.0, 2.0).is_subset(Interval(0.0, 3.0))
    assert not Interval(-1.0, 2.0).is_subset(Interval(0.0, 3.0))
    assert Interval.empty().is_subset(Interval(0.0, 0.0))


def test_addition_rounds_outward():
    s = Interval(0.1, 0.2) + Interval(0.2, 0.3)
    assert s.lower <= 0.1 + 0.2
    assert s.upper >= 0.2 + 0.3
    assert approx_interval(s, 0.3, 0.5)


def test_subtraction():
    d = Interval(0.0, 10.0) - Interval(2.0, 3.0)
    assert approx_interval(d, -3.0, 8.0)


def test_multiplication_signs():
    assert approx_interval(Interval(-2.0, 3.0) * Interval(4.0, 5.0), -10.0, 15.0)
    assert approx_interval(Interval(-2.0, -1.0) * Interval(-3.0, 4.0), -8.0, 6.0)


def test_multiplication_with_infinity_and_zero():
    p = Interval(0.0, 0.0) * Interval.entire()
    assert p.lower <= 0.0 <= p.upper
    assert not math.isnan(p.lower) and not math.isnan(p.upper)


def test_division():
    q = Interval(1.0, 2.0) / Interval(4.0, 8.0)
    assert approx_interval(q, 0.125, 0.5)
    assert (Interval(1.0, 2.0) / Interval(0.0, 0.0)).is_empty
    assert (Interval(-1.0, 1.0) / Interval(-1.0, 1.0)) == Interval.entire()


def test_zero_divided_by_zero_is_entire():
    assert (Interval(0.0, 0.0) / Interval(0.0, 0.0)) == Interval.entire()
    assert (Interval(-1.0, 3.0) / Interval(0.0, 0.0)) == Interval.entire()
    assert (Interval(-2.0, -1.0) / Interval(0.0, 0.0)).is_empty


def test_division_by_half_open_zero_interval():
    q = Interval(1.0, 2.0) / Interval(0.0, 4.0)
    assert q.upper == math.inf
    assert q.lower == pytest.approx(0.25)


def test_even_power():
    assert approx_interval(Interval(-3.0, 2.0).pow(2), 0.0, 9.0)
    assert approx_interval(Interval(-3.0, -2.0).pow(2), 4.0, 9.0)
    assert approx_interval(Interval(-2.0, 3.0).pow(3), -8.0, 27.0)


def test_root_of_even_power_keeps_both_branches():
    r = Interval(4.0, 9.0).root(2, Interval(-10.0, 10.0))
    assert approx_interval(r, -3.0, 3.0)
    r = Interval(4.0, 9.0).root(2, Interval(0.0, 10.0))
    assert approx_interval(r, 2.0, 3.0)
    assert Interval(-4.0, -1.0).root(2, Interval.entire()).is_empty


def test_exp_log_sqrt():
    assert approx_interval(Interval(0.0, 1.0).exp(), 1.0, math.e)
    assert approx_interval(Interval(1.0, math.e).log(), 0.0, 1.0)
    assert Interval(-2.0, -1.0).log().is_empty
    assert approx_interval(Interval(-1.0, 4.0).sqrt(), 0.0, 2.0)


def test_sin_and_cos_ranges():
    assert approx_interval(Interval(0.0, math.pi).sin(), 0.0, 1.0, tol=1e-12)
    assert approx_interval(Interval(0.0, 10.0).sin(), -1.0, 1.0)
    c = Interval(0.1, 0.2).cos()
    assert c.lower <= math.cos(0.2) and c.upper >= math.cos(0.1)
    assert c.upper < 1.0


def test_bisect_finite_and_infinite():
    low, high = Interval(0.0, 4.0).bisect()
    assert low == Interval(0.0, 2.0)
    assert high == Interval(2.0, 4.0)
    low, high = Interval.entire().bisect()
    assert low.upper == 0.0 and high.lower == 0.0
    low, high = Interval(-math.inf, 5.0).bisect()
    assert low.upper < 5.0 and high.upper == 5.0
