"""
Closed real intervals with outward-rounded arithmetic.
"""
import math
from dataclasses import dataclass
from typing import List, Tuple

INF = math.inf


def _down(x: float) -> float:
    if math.isinf(x):
        return x
    return math.nextafter(x, -INF)


def _up(x: float) -> float:
    if math.isinf(x):
        return x
    return math.nextafter(x, INF)


def _mul(a: float, b: float) -> float:
    # 0 * inf is 0 in interval arithmetic
    if a == 0.0 or b == 0.0:
        return 0.0
    return a * b


def _pow(x: float, n: int) -> float:
    try:
        return x ** n
    except OverflowError:
        return INF if x > 0 or n % 2 == 0 else -INF
    except ZeroDivisionError:
        return INF


def _root(x: float, n: int) -> float:
    """Real non-negative n-th root of a non-negative number."""
    if math.isinf(x):
        return INF
    return x ** (1.0 / n)


def _exp(x: float) -> float:
    try:
        return math.exp(x)
    except OverflowError:
        return INF


def _log(x: float) -> float:
    if x <= 0.0:
        return -INF
    return math.log(x)


@dataclass(frozen=True)
class Interval:
    """A closed interval ``[lower, upper]``.

    An interval with ``lower > upper`` is empty; it signals infeasibility.
    """
    lower: float
    upper: float

    @classmethod
    def entire(cls) -> "Interval":
        return cls(-INF, INF)

    @classmethod
    def empty(cls) -> "Interval":
        return cls(INF, -INF)

    @classmethod
    def point(cls, value: float) -> "Interval":
        return cls(value, value)

    @property
    def is_empty(self) -> bool:
        return self.lower > self.upper

    @property
    def is_point(self) -> bool:
        return self.lower == self.upper

    @property
    def width(self) -> float:
        if self.is_empty:
            return 0.0
        return self.upper - self.lower

    @property
    def midpoint(self) -> float:
        lo, hi = self.lower, self.upper
        if math.isinf(lo) and math.isinf(hi):
            return 0.0
        if math.isinf(lo):
            return hi - max(1.0, abs(hi))
        if math.isinf(hi):
            return lo + max(1.0, abs(lo))
        return lo / 2.0 + hi / 2.0

    def contains(self, value: float) -> bool:
        return self.lower <= value <= self.upper

    def contains_zero(self) -> bool:
        return self.contains(0.0)

    def is_subset(self, other: "Interval") -> bool:
        if self.is_empty:
            return True
        return other.lower <= self.lower and self.upper <= other.upper

    def intersect(self, other: "Interval") -> "Interval":
        return Interval(max(self.lower, other.lower), min(self.upper, other.upper))

    def hull(self, other: "Interval") -> "Interval":
        if self.is_empty:
            return other
        if other.is_empty:
            return self
        return Interval(min(self.lower, other.lower), max(self.upper, other.upper))

    def bisect(self) -> Tuple["Interval", "Interval"]:
        mid = self.midpoint
        return Interval(self.lower, mid), Interval(mid, self.upper)

    def as_list(self) -> List[float]:
        return [self.lower, self.upper]

    def __str__(self) -> str:
        return f"[{self.lower}, {self.upper}]"

    # Arithmetic

    def __neg__(self) -> "Interval":
        if self.is_empty:
            return self
        return Interval(-self.upper, -self.lower)

    def __add__(self, other: "Interval") -> "Interval":
        if self.is_empty or other.is_empty:
            return Interval.empty()
        return Interval(_down(self.lower + other.lower), _up(self.upper + other.upper))

    def __sub__(self, other: "Interval") -> "Interval":
        if self.is_empty or other.is_empty:
            return Interval.empty()
        return Interval(_down(self.lower - other.upper), _up(self.upper - other.lower))

    def __mul__(self, other: "Interval") -> "Interval":
        if self.is_empty or other.is_empty:
            return Interval.empty()
        products = [
            _mul(self.lower, other.lower),
            _mul(self.lower, other.upper),
            _mul(self.upper, other.lower),
            _mul(self.upper, other.upper),
        ]
        return Interval(_down(min(products)), _up(max(products)))

    def __truediv__(self, other: "Interval") -> "Interval":
        """Extended division; a divisor straddling zero yields a hull."""
        if self.is_empty or other.is_empty:
            return Interval.empty()
        if not other.contains_zero():
            return self * Interval(_down(1.0 / other.upper), _up(1.0 / other.lower))
        if self.contains_zero():
            return Interval.entire()
        if other.lower == 0.0 and other.upper == 0.0:
            return Interval.empty()
        if other.lower == 0.0:
            if self.lower > 0.0:
                return Interval(_down(self.lower / other.upper), INF)
            return Interval(-INF, _up(self.upper / other.upper))
        if other.upper == 0.0:
            if self.lower > 0.0:
                return Interval(-INF, _up(self.lower / other.lower))
            return Interval(_down(self.upper / other.lower), INF)
        return Interval.entire()

    def pow(self, n: int) -> "Interval":
        """Integer power."""
        if self.is_empty:
            return self
        if n == 0:
            return Interval.point(1.0)
        if n < 0:
            return Interval.point(1.0) / self.pow(-n)
        lo, hi = self.lower, self.upper
        if n % 2 == 1 or lo >= 0.0:
            return Interval(_down(_pow(lo, n)), _up(_pow(hi, n)))
        if hi <= 0.0:
            return Interval(_down(_pow(hi, n)), _up(_pow(lo, n)))
        return Interval(0.0, _up(max(_pow(lo, n), _pow(hi, n))))

    def root(self, n: int, within: "Interval") -> "Interval":
        """Values ``x`` in ``within`` with ``x ** n`` in this interval (n > 0)."""
        if self.is_empty or within.is_empty:
            return Interval.empty()
        if n % 2 == 1:
            lo = -_root(-self.lower, n) if self.lower < 0 else _root(self.lower, n)
            hi = -_root(-self.upper, n) if self.upper < 0 else _root(self.upper, n)
            return within.intersect(Interval(_down(lo), _up(hi)))
        target = self.intersect(Interval(0.0, INF))
        if target.is_empty:
            return Interval.empty()
        outer = _up(_root(target.upper, n))
        inner = _down(_root(target.lower, n)) if target.lower > 0 else 0.0
        positive = within.intersect(Interval(inner, outer))
        negative = within.intersect(Interval(-outer, -inner))
        return positive.hull(negative)

    def exp(self) -> "Interval":
        if self.is_empty:
            return self
        return Interval(max(0.0, _down(_exp(self.lower))), _up(_exp(self.upper)))

    def log(self) -> "Interval":
        domain = self.intersect(Interval(0.0, INF))
        if domain.is_empty or domain.upper == 0.0:
            return Interval.empty()
        return Interval(_down(_log(domain.lower)), _up(_log(domain.upper)))

    def sqrt(self) -> "Interval":
        domain = self.intersect(Interval(0.0, INF))
        if domain.is_empty:
            return domain
        return Interval(max(0.0, _down(math.sqrt(domain.lower))), _up(math.sqrt(domain.upper)))

    def sin(self) -> "Interval":
        return self._periodic(math.sin, math.pi / 2.0)

    def cos(self) -> "Interval":
        return self._periodic(math.cos, 0.0)

    def _periodic(self, fn, peak: float) -> "Interval":
        # fn reaches +1 at peak + 2k*pi and -1 at peak + pi + 2k*pi
        if self.is_empty:
            return self
        if self.width >= 2.0 * math.pi:
            return Interval(-1.0, 1.0)
        lo = min(fn(self.lower), fn(self.upper))
        hi = max(fn(self.lower), fn(self.upper))
        if self._hits(peak):
            hi = 1.0
        if self._hits(peak + math.pi):
            lo = -1.0
        return Interval(max(-1.0, _down(lo)), min(1.0, _up(hi)))

    def _hits(self, phase: float) -> bool:
        k = math.ceil((self.lower - phase) / (2.0 * math.pi))
        return phase + 2.0 * math.pi * k <= self.upper
