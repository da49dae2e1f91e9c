"""
Solver configuration.

The plugin reads an ``NRAConfig`` once at construction and treats it as
immutable for its lifetime.
"""
import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_PRECISION = 0.001

KNOWN_KERNELS = ("icp", "z3")

_TRUE_STRINGS = ("1", "true", "yes", "on")


def _env_flag(environ: Mapping[str, str], key: str, default: bool) -> bool:
    value = environ.get(key)
    if value is None or value == "":
        return default
    return value.strip().lower() in _TRUE_STRINGS


@dataclass(frozen=True)
class NRAConfig:
    """Configuration surface consumed by the NRA theory solver.

    Attributes:
        precision: Width below which complete search stops bisecting a
            variable. ``0.0`` or ``None`` means unset and selects
            ``DEFAULT_PRECISION``.
        verbose: Emit diagnostics through the logging reporter
        contain_ode: Track continuous-mode (ODE) variables per atom
        json: Emit a trajectory report after each successful complete check
            (only effective together with ``contain_ode``)
        json_path: File the trajectory reports are appended to (stdout if unset)
        kernel: Propagation/search kernel name ("icp" or "z3")
        theory_propagation: Deduce entailed atoms after incomplete checks
        minimize_explanation: Shrink conflict explanations with a deletion filter
        max_boxes: Branch-and-prune budget; exceeding it is a kernel failure
        timeout_ms: Z3 kernel timeout in milliseconds (0 disables it)
    """
    precision: Optional[float] = DEFAULT_PRECISION
    verbose: bool = False
    contain_ode: bool = False
    json: bool = False
    json_path: Optional[str] = None
    kernel: str = "icp"
    theory_propagation: bool = False
    minimize_explanation: bool = True
    max_boxes: int = 100_000
    timeout_ms: int = 0

    def __post_init__(self):
        if self.precision is None or self.precision == 0.0:
            object.__setattr__(self, "precision", DEFAULT_PRECISION)
        if self.precision < 0:
            raise ValueError(f"precision must be non-negative, got {self.precision}")
        if self.kernel not in KNOWN_KERNELS:
            raise ValueError(f"Unknown kernel: {self.kernel!r} (expected one of {KNOWN_KERNELS})")
        if self.max_boxes <= 0:
            raise ValueError(f"max_boxes must be positive, got {self.max_boxes}")
        if self.timeout_ms < 0:
            raise ValueError(f"timeout_ms must be non-negative, got {self.timeout_ms}")

    @property
    def report_trajectory(self) -> bool:
        """True if trajectory reports are emitted after complete checks."""
        return self.contain_ode and self.json

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "NRAConfig":
        """Build a configuration from ``NRA_*`` environment variables.

        Unset variables keep their defaults.
        """
        env = os.environ if environ is None else environ
        precision = env.get("NRA_PRECISION")
        return cls(
            precision=float(precision) if precision else DEFAULT_PRECISION,
            verbose=_env_flag(env, "NRA_VERBOSE", False),
            contain_ode=_env_flag(env, "NRA_CONTAIN_ODE", False),
            json=_env_flag(env, "NRA_JSON", False),
            json_path=env.get("NRA_JSON_PATH") or None,
            kernel=env.get("NRA_KERNEL") or "icp",
            theory_propagation=_env_flag(env, "NRA_THEORY_PROPAGATION", False),
            max_boxes=int(env.get("NRA_MAX_BOXES") or 100_000),
            timeout_ms=int(env.get("NRA_TIMEOUT_MS") or 0),
        )
