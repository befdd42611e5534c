from pathlib import Path

import pytest

from xcode_test_engine.models.data_models import (
    BuildOutcome,
    CoverageMode,
    EngineConfig,
    Invocation,
    OutcomeKind,
    ResultKind,
    ResultRecord,
)


class TestInvocation:
    """Test Invocation rendering."""

    def test_tokens_use_dash_key_quoted_value_form(self):
        invocation = Invocation(settings=(("scheme", "App"), ("sdk", "iphonesimulator")))
        assert invocation.tokens == ['-scheme "App"', '-sdk "iphonesimulator"']
        assert invocation.render() == '-scheme "App" -sdk "iphonesimulator"'

    def test_argv_is_unquoted(self):
        invocation = Invocation(settings=(("destination", "platform=iOS Simulator,name=iPhone 15"),))
        assert invocation.argv == ["-destination", "platform=iOS Simulator,name=iPhone 15"]

    def test_render_and_parse_recovers_settings(self):
        settings = {
            "scheme": "My App",
            "destination": "platform=iOS Simulator,name=iPhone 15",
            "configuration": "Debug",
        }
        invocation = Invocation(settings=tuple(settings.items()))
        assert Invocation.parse(invocation.render()) == settings

    @pytest.mark.parametrize("value", [
        'OTHER_SWIFT_FLAGS=-D "X"',
        'C:\\path\\',
        'a\\"b',
        "it's",
        "$(SRCROOT)/Config.xcconfig",
    ])
    def test_render_and_parse_recovers_values_with_quotes_and_backslashes(self, value):
        invocation = Invocation(settings=(("scheme", "App"), ("flags", value)))
        assert Invocation.parse(invocation.render()) == {"scheme": "App", "flags": value}

    def test_tokens_escape_quotes_but_argv_does_not(self):
        invocation = Invocation(settings=(("flags", '-D "X"'),))
        assert invocation.tokens == ['-flags "-D \\"X\\""']
        assert invocation.argv == ["-flags", '-D "X"']

    def test_parse_rejects_unpaired_tokens(self):
        with pytest.raises(ValueError):
            Invocation.parse('-scheme "App" -quiet')

    def test_invocation_is_immutable(self):
        invocation = Invocation(settings=(("scheme", "App"),))
        with pytest.raises(AttributeError):
            invocation.settings = ()


class TestBuildOutcome:
    """Test exit code classification."""

    @pytest.mark.parametrize("code,kind", [
        (0, OutcomeKind.SUCCESS),
        (65, OutcomeKind.TESTS_FAILED),
        (17, OutcomeKind.BROKEN),
        (1, OutcomeKind.BROKEN),
        (-9, OutcomeKind.BROKEN),
    ])
    def test_kind(self, code, kind):
        assert BuildOutcome(exit_code=code, stdout="", stderr="").kind is kind


class TestEngineConfig:
    """Test the coverage enablement rule."""

    def test_coverage_off_wins_over_settings(self):
        config = EngineConfig(
            project_root=Path("/p"),
            build_settings={"scheme": "App"},
            coverage_settings={"product": "App"},
            coverage_requested=CoverageMode.OFF,
        )
        assert config.coverage_enabled is False
        assert config.product == "App"

    def test_coverage_needs_settings(self):
        config = EngineConfig(project_root=Path("/p"), build_settings={"scheme": "App"})
        assert config.coverage_enabled is False
        assert config.product is None

    @pytest.mark.parametrize("flag,mode", [(None, CoverageMode.UNSET), (True, CoverageMode.ON), (False, CoverageMode.OFF)])
    def test_coverage_mode_from_flag(self, flag, mode):
        assert CoverageMode.from_flag(flag) is mode


def test_result_record_to_dict():
    record = ResultRecord(name="Suite::testA", result=ResultKind.FAIL, duration=0.5, user_data="boom",
                          coverage={"a.m": "NCU"})
    assert record.to_dict() == {
        "name": "Suite::testA",
        "result": "fail",
        "duration": 0.5,
        "userData": "boom",
        "coverage": {"a.m": "NCU"},
    }
