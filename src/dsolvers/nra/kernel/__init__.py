"""Propagation/search kernels.

A kernel is built fresh for every ``check`` from a ``KernelContext``; the
plugin picks the factory by name.
"""
from typing import Callable, Dict

from .base import KernelContext, PropagationKernel
from .result import CheckOutcome, SolverResult
from .contractor import Contractor
from .icp import IcpKernel
from .z3_kernel import Z3Kernel

KernelFactory = Callable[[KernelContext], PropagationKernel]

_KNOWN_KERNELS: Dict[str, KernelFactory] = {
    "icp": IcpKernel,
    "z3": Z3Kernel,
}


def resolve_kernel(name: str) -> KernelFactory:
    """Resolve a kernel name to its factory."""
    if name not in _KNOWN_KERNELS:
        raise ValueError(f"Unknown kernel: {name!r}")
    return _KNOWN_KERNELS[name]


__all__ = [
    "KernelContext",
    "KernelFactory",
    "PropagationKernel",
    "CheckOutcome",
    "SolverResult",
    "Contractor",
    "IcpKernel",
    "Z3Kernel",
    "resolve_kernel",
]
