"""Unit tests for build_engine.validate.fields."""

from __future__ import annotations

from datetime import timedelta

import pytest

from build_engine.models.build import (
    BuildSpec,
    EnvVar,
    GitSource,
    Output,
    ParamValue,
    StrategyRef,
    Trigger,
    TriggerWhen,
)
from build_engine.models.buildrun import BuildRunReason
from build_engine.testing import make_build_run
from build_engine.validate.fields import build_run_fields


def _inline_spec(**overrides: object) -> BuildSpec:
    return BuildSpec(
        source=GitSource(url="https://github.com/shipwright-io/sample-go"),
        strategy=StrategyRef(name="buildah"),
        output=Output(image="registry.example.com/org/app"),
        **overrides,  # type: ignore[arg-type]
    )


# ---------------------------------------------------------------------------
# Reference vs inline spec
# ---------------------------------------------------------------------------


class TestReferenceOrSpec:
    def test_neither_set(self):
        run = make_build_run(build_name=None)
        reason, message = build_run_fields(run)
        assert reason == BuildRunReason.NO_REF_OR_SPEC.value
        assert "either 'buildRef' or 'buildSpec'" in message

    def test_neither_set_ignores_overrides(self):
        run = make_build_run(build_name=None, env=[EnvVar(name="A", value="b")])
        assert build_run_fields(run)[0] == BuildRunReason.NO_REF_OR_SPEC.value

    def test_reference_only_is_fine(self):
        run = make_build_run(
            output=Output(image="registry.example.com/org/other"),
            param_values=[ParamValue(name="p", value="v")],
            timeout=timedelta(minutes=5),
        )
        assert build_run_fields(run) == ("", "")

    def test_inline_only_is_fine(self):
        run = make_build_run(build_name=None, build_spec=_inline_spec())
        assert build_run_fields(run) == ("", "")

    def test_both_set_is_ambiguous(self):
        run = make_build_run(build_name="b", build_spec=_inline_spec())
        reason, message = build_run_fields(run)
        assert reason == BuildRunReason.AMBIGUOUS_BUILD.value
        assert message == "fields 'buildRef' and 'buildSpec' are mutually exclusive"

    def test_both_set_wins_over_overrides(self):
        run = make_build_run(
            build_name="b",
            build_spec=_inline_spec(),
            output=Output(image="x"),
            env=[EnvVar(name="A", value="b")],
        )
        assert build_run_fields(run)[0] == BuildRunReason.AMBIGUOUS_BUILD.value


# ---------------------------------------------------------------------------
# Overrides combined with an inline spec
# ---------------------------------------------------------------------------


class TestOverrideForbidden:
    @pytest.mark.parametrize(
        ("overrides", "field"),
        [
            ({"output": Output(image="registry.example.com/org/x")}, "'output'"),
            ({"param_values": [ParamValue(name="p", value="v")]}, "'paramValues'"),
            ({"env": [EnvVar(name="A", value="b")]}, "'env'"),
            ({"timeout": timedelta(minutes=1)}, "'timeout'"),
        ],
    )
    def test_single_override(self, overrides, field):
        run = make_build_run(build_name=None, build_spec=_inline_spec(), **overrides)
        reason, message = build_run_fields(run)
        assert reason == BuildRunReason.BUILD_FIELD_OVERRIDE_FORBIDDEN.value
        assert field in message

    def test_trigger_in_inline_spec(self):
        trigger = Trigger(when=[TriggerWhen(name="push", type="GitHub")])
        run = make_build_run(build_name=None, build_spec=_inline_spec(trigger=trigger))
        reason, message = build_run_fields(run)
        assert reason == BuildRunReason.BUILD_FIELD_OVERRIDE_FORBIDDEN.value
        assert "'triggers'" in message

    def test_first_offending_field_is_reported(self):
        run = make_build_run(
            build_name=None,
            build_spec=_inline_spec(),
            env=[EnvVar(name="A", value="b")],
            timeout=timedelta(minutes=1),
            param_values=[ParamValue(name="p", value="v")],
        )
        _, message = build_run_fields(run)
        assert "'paramValues'" in message

    def test_output_reported_before_everything(self):
        run = make_build_run(
            build_name=None,
            build_spec=_inline_spec(),
            output=Output(image="x"),
            env=[EnvVar(name="A", value="b")],
        )
        _, message = build_run_fields(run)
        assert "'output'" in message

    def test_empty_lists_are_not_overrides(self):
        run = make_build_run(build_name=None, build_spec=_inline_spec(), env=[], param_values=[])
        assert build_run_fields(run) == ("", "")

    def test_input_is_not_mutated(self):
        run = make_build_run(build_name=None, build_spec=_inline_spec(), env=[EnvVar(name="A", value="b")])
        before = run.model_dump()
        build_run_fields(run)
        assert run.model_dump() == before
