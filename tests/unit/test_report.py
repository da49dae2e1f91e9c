"""
Tests for diagnostic reporters.
"""
import io
import json
import logging

from conftest import make_solver
from dsolvers.nra import (
    JsonTrajectoryReporter,
    Literal,
    LoggingReporter,
    NRAConfig,
    NRASolver,
    NullReporter,
    Polarity,
    TrajectoryReport,
    build_reporter,
)
from dsolvers.nra.report import CompositeReporter


def sample_report():
    return TrajectoryReport(
        traces=[{
            "group": 1,
            "time": [0.0, 1.0],
            "values": [{"key": "x_1", "enclosure": [2.0, 2.5]}],
        }],
        groups=[1],
    )


def test_report_as_json():
    document = json.loads(sample_report().to_json())
    assert document == {
        "traces": [{
            "group": 1,
            "time": [0.0, 1.0],
            "values": [{"key": "x_1", "enclosure": [2.0, 2.5]}],
        }],
        "groups": [1],
    }


def test_format_report():
    text = sample_report().format_report()
    assert "Mode 1 (time [0.0, 1.0]):" in text
    assert "x_1 in [2.0, 2.5]" in text


def test_json_reporter_to_stream():
    stream = io.StringIO()
    JsonTrajectoryReporter(stream=stream).on_trajectory(sample_report())
    JsonTrajectoryReporter(stream=stream).on_trajectory(sample_report())

    lines = stream.getvalue().splitlines()
    assert len(lines) == 2
    assert json.loads(lines[0])["groups"] == [1]


def test_json_reporter_appends_to_path(tmp_path):
    path = tmp_path / "trajectory.json"
    reporter = JsonTrajectoryReporter(path=str(path))
    reporter.on_trajectory(sample_report())
    reporter.on_trajectory(sample_report())
    assert len(path.read_text().splitlines()) == 2


def test_json_reporter_defaults_to_stdout(capsys):
    JsonTrajectoryReporter().on_trajectory(sample_report())
    assert json.loads(capsys.readouterr().out)["traces"][0]["group"] == 1


def test_build_reporter():
    assert isinstance(build_reporter(NRAConfig()), NullReporter)
    assert isinstance(build_reporter(NRAConfig(verbose=True)), LoggingReporter)
    assert isinstance(build_reporter(NRAConfig(contain_ode=True, json=True)), JsonTrajectoryReporter)
    # json without ODE support emits nothing
    assert type(build_reporter(NRAConfig(json=True))) is NullReporter
    combined = build_reporter(NRAConfig(verbose=True, contain_ode=True, json=True))
    assert isinstance(combined, CompositeReporter)
    assert len(combined.reporters) == 2


def test_logging_reporter(terms, caplog):
    x = terms.variable("x", 0, 10)
    mode = terms.variable("mode_1", 1, 2)
    atom = terms.le(terms.term("+", x, mode), terms.numeral(5))
    solver = make_solver(terms, verbose=True)

    with caplog.at_level(logging.INFO, logger="dsolvers.nra.diagnostics"):
        solver.inform(atom)
        solver.assert_literal(Literal(atom))
        solver.check(False)

    messages = [r.getMessage() for r in caplog.records]
    assert any(m.startswith("inform: (<= (+ x mode_1) 5)") for m in messages)
    assert any("asserted literal" in m and "TRUE" in m for m in messages)
    assert any(m.strip().startswith("mode_1:") and m.endswith("(mode)") for m in messages)


def test_logging_reporter_explanation(terms, caplog):
    x = terms.variable("x", 0, 10)
    a = terms.ge(x, terms.numeral(8))
    b = terms.le(x, terms.numeral(3))
    solver = make_solver(terms, verbose=True)

    with caplog.at_level(logging.INFO, logger="dsolvers.nra.diagnostics"):
        for atom in (a, b):
            solver.inform(atom)
            solver.assert_literal(Literal(atom))
        solver.check(False)

    explanation = [r.getMessage() for r in caplog.records if r.getMessage().startswith("  explanation")]
    assert explanation == ["  explanation: (>= x 8):TRUE (<= x 3):TRUE"]


class RecordingReporter(NullReporter):
    def __init__(self):
        self.events = []

    def on_inform(self, solver, atom, variables):
        self.events.append(("inform", atom))

    def on_check(self, solver, outcome):
        self.events.append(("check", outcome.consistent))

    def on_trajectory(self, report):
        self.events.append(("trajectory", report.groups))


def test_reporter_called_at_checkpoints(terms):
    """Test that the reporter sees the end of inform and the end of check only."""
    t1 = terms.variable("time_1", 0, 1)
    x1 = terms.variable("x_1", 0, 10, time_variable=t1, ode_group=1, ode_var_type=Polarity.TRUE)
    atom = terms.ge(x1, terms.numeral(1))
    reporter = RecordingReporter()
    solver = NRASolver(terms, NRAConfig(contain_ode=True, json=True), reporter=reporter)

    solver.inform(atom)
    solver.assert_literal(Literal(atom))
    solver.push_backtrack_point()
    solver.check(True)
    solver.pop_backtrack_point()

    assert reporter.events == [("inform", atom), ("trajectory", [1]), ("check", True)]
