from xcode_test_engine.build.errors import parse_errors
from xcode_test_engine.models.data_models import BuildOutcome


def test_parse_errors_usage_error():
    outcome = BuildOutcome(
        exit_code=66,
        stdout="",
        stderr="xcodebuild: error: The workspace named \"App\" does not contain a scheme named \"Nope\".\n",
    )
    report = parse_errors(outcome)
    assert report.kind == "usage"
    assert "does not contain a scheme" in report.reasons[0]


def test_parse_errors_destination_error():
    outcome = BuildOutcome(
        exit_code=70,
        stdout="",
        stderr="xcodebuild: error: Unable to find a destination matching the provided destination specifier:\n",
    )
    assert parse_errors(outcome).kind == "destination"


def test_parse_errors_compile_error():
    outcome = BuildOutcome(
        exit_code=65,
        stdout="/src/App/View.swift:12:5: error: cannot find 'foo' in scope\n** TEST BUILD FAILED **\n",
        stderr="",
    )
    report = parse_errors(outcome)
    assert report.kind == "compile"
    assert report.reasons == ["/src/App/View.swift:12:5: cannot find 'foo' in scope"]


def test_parse_errors_unknown():
    report = parse_errors(BuildOutcome(exit_code=17, stdout="", stderr="killed"))
    assert report.kind == "unknown"
    assert "17" in report.reasons[0]
    assert report.excerpts == ["killed"]
