"""
Pytest configuration and fixtures for dsolvers-nra tests.
"""
import sys
from pathlib import Path

import pytest

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from dsolvers.nra import (  # noqa: E402
    Interval,
    NRAConfig,
    NRASolver,
    OdeVariableIndex,
    ScopedIntervalStore,
    TermStore,
    collect_variables,
)
from dsolvers.nra.kernel import KernelContext  # noqa: E402


@pytest.fixture
def terms():
    return TermStore()


@pytest.fixture
def solver(terms):
    return NRASolver(terms)


def make_solver(terms, **config):
    """Build a solver over ``terms`` with the given configuration overrides."""
    return NRASolver(terms, NRAConfig(**config))


def make_context(terms, literals, config=None, store=None, ode_index=None):
    """Kernel context over ``literals`` with every variable at its static bound."""
    if store is None:
        store = ScopedIntervalStore()
        for lit in literals:
            for var in collect_variables(terms, lit.atom):
                info = terms.variable_info(var)
                store.initialize(var, Interval(info.lower, info.upper))
    return KernelContext(
        config=config or NRAConfig(),
        terms=terms,
        literals=tuple(literals),
        store=store,
        ode_index=ode_index or OdeVariableIndex(),
    )
