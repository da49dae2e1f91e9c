"""Diagnostic reporting for the NRA solver.

The solver calls its reporter only at the end of ``inform`` and the end of
``check``; reporters never influence verdicts or solver state.
"""
import json
import logging
import sys
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Protocol, Sequence, TextIO

from .config import NRAConfig

if TYPE_CHECKING:
    from .kernel.result import CheckOutcome
    from .solver import NRASolver

diagnostics = logging.getLogger("dsolvers.nra.diagnostics")


@dataclass
class TrajectoryReport:
    """Continuous trajectory of a satisfying assignment."""

    traces: List[Dict[str, Any]]
    groups: List[int] = field(default_factory=list)

    def as_dict(self) -> Dict[str, Any]:
        return {"traces": self.traces, "groups": self.groups}

    def to_json(self) -> str:
        return json.dumps(self.as_dict())

    def format_report(self) -> str:
        lines: List[str] = []
        lines.append(f"Trajectory over mode(s) {', '.join(str(g) for g in self.groups) or '-'}:")
        lines.append("")
        for trace in self.traces:
            lo, hi = trace["time"]
            lines.append(f"Mode {trace['group']} (time [{lo}, {hi}]):")
            for entry in trace["values"]:
                lo, hi = entry["enclosure"]
                lines.append(f"  {entry['key']} in [{lo}, {hi}]")
            lines.append("")
        return "\n".join(lines)


class Reporter(Protocol):
    def on_inform(self, solver: "NRASolver", atom: int, variables: Sequence[int]) -> None:
        ...

    def on_check(self, solver: "NRASolver", outcome: "CheckOutcome") -> None:
        ...

    def on_trajectory(self, report: TrajectoryReport) -> None:
        ...


class NullReporter:
    def on_inform(self, solver, atom, variables) -> None:
        pass

    def on_check(self, solver, outcome) -> None:
        pass

    def on_trajectory(self, report) -> None:
        pass


class LoggingReporter(NullReporter):
    """Verbose diagnostics written to the ``dsolvers.nra.diagnostics`` logger."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or diagnostics

    def on_inform(self, solver, atom, variables) -> None:
        terms = solver.terms
        self.logger.info("inform: %s", terms.to_string(atom))
        for var in variables:
            info = terms.variable_info(var)
            if info.is_ode:
                self.logger.info("  %s [%s, %s] ode group %d", info.name, info.lower, info.upper, info.ode_group)
            else:
                self.logger.info("  %s [%s, %s]", info.name, info.lower, info.upper)

    def on_check(self, solver, outcome) -> None:
        terms = solver.terms
        self.logger.info("check: %s", outcome)
        for lit in solver.ledger:
            self.logger.info("  asserted literal: %s with polarity %s", terms.to_string(lit.atom), lit.polarity.name)
        for var, iv in solver.store.items():
            name = terms.variable_info(var).name
            marker = " (mode)" if name.startswith("mode_") else ""
            self.logger.info("  %s: [%s, %s]%s", name, iv.lower, iv.upper, marker)
        if not outcome.consistent:
            self.logger.info("  explanation: %s", " ".join(
                f"{terms.to_string(lit.atom)}:{lit.polarity.name}" for lit in outcome.explanation))


class JsonTrajectoryReporter(NullReporter):
    """Appends one JSON document per trajectory report.

    Documents go to ``stream`` if given, else are appended to ``path``, else
    written to stdout.
    """

    def __init__(self, stream: Optional[TextIO] = None, path: Optional[str] = None):
        self.stream = stream
        self.path = path

    def on_trajectory(self, report: TrajectoryReport) -> None:
        document = report.to_json() + "\n"
        if self.stream is not None:
            self.stream.write(document)
        elif self.path is not None:
            with open(self.path, "a", encoding="utf-8") as fh:
                fh.write(document)
        else:
            sys.stdout.write(document)


class CompositeReporter(NullReporter):
    def __init__(self, reporters: Sequence[Reporter]):
        self.reporters = list(reporters)

    def on_inform(self, solver, atom, variables) -> None:
        for r in self.reporters:
            r.on_inform(solver, atom, variables)

    def on_check(self, solver, outcome) -> None:
        for r in self.reporters:
            r.on_check(solver, outcome)

    def on_trajectory(self, report) -> None:
        for r in self.reporters:
            r.on_trajectory(report)


def build_reporter(config: NRAConfig, stream: Optional[TextIO] = None) -> Reporter:
    """Assemble the reporters enabled by a configuration."""
    reporters: List[Reporter] = []
    if config.verbose:
        reporters.append(LoggingReporter())
    if config.report_trajectory:
        reporters.append(JsonTrajectoryReporter(stream=stream, path=config.json_path))
    if not reporters:
        return NullReporter()
    if len(reporters) == 1:
        return reporters[0]
    return CompositeReporter(reporters)
