"""Factories for resource models with sensible test defaults."""

from __future__ import annotations

import json

from build_engine.models.build import Build, BuildSpec, GitSource, Output, StrategyRef
from build_engine.models.buildrun import BuildRun, BuildRunSpec, ReferencedBuild
from build_engine.models.meta import CONDITION_SUCCEEDED, Condition, ConditionStatus, ObjectMeta
from build_engine.models.pipeline import Step, TaskSpec
from build_engine.models.strategy import BuildStrategy, BuildStrategySpec, ClusterBuildStrategy, Secret
from build_engine.models.taskrun import StepState, StepTerminated, TaskRun, TaskRunSpec

NAMESPACE = "build-ns"


def make_build(
    name: str = "buildah-golang",
    *,
    namespace: str = NAMESPACE,
    annotations: dict[str, str] | None = None,
    **spec: object,
) -> Build:
    spec.setdefault("source", GitSource(url="https://github.com/shipwright-io/sample-go"))
    spec.setdefault("strategy", StrategyRef(name="buildah"))
    spec.setdefault("output", Output(image="registry.example.com/org/app:latest"))
    return Build(
        metadata=ObjectMeta(name=name, namespace=namespace, annotations=annotations or {}),
        spec=BuildSpec(**spec),  # type: ignore[arg-type]
    )


def make_build_run(
    name: str = "buildah-golang-run",
    *,
    namespace: str = NAMESPACE,
    build_name: str | None = "buildah-golang",
    build_spec: BuildSpec | None = None,
    **spec: object,
) -> BuildRun:
    return BuildRun(
        metadata=ObjectMeta(name=name, namespace=namespace),
        spec=BuildRunSpec(build=ReferencedBuild(name=build_name, spec=build_spec), **spec),  # type: ignore[arg-type]
    )


def make_strategy(
    name: str = "buildah",
    *,
    namespace: str = NAMESPACE,
    cluster: bool = False,
    steps: list[Step] | None = None,
    **spec: object,
) -> BuildStrategy:
    steps = steps if steps is not None else [
        Step(
            name="build-and-push",
            image="quay.io/containers/buildah:latest",
            command=["/bin/bash"],
            args=["-c", "buildah bud -t $(params.shp-output-image) $(params.shp-source-context)"],
        )
    ]
    strategy_spec = BuildStrategySpec(steps=steps, **spec)  # type: ignore[arg-type]
    if cluster:
        return ClusterBuildStrategy(metadata=ObjectMeta(name=name), spec=strategy_spec)
    return BuildStrategy(metadata=ObjectMeta(name=name, namespace=namespace), spec=strategy_spec)


def make_secret(name: str, *, namespace: str = NAMESPACE) -> Secret:
    return Secret(metadata=ObjectMeta(name=name, namespace=namespace))


def termination_message(entries: dict[str, str]) -> str:
    """Encode *entries* the way the execution engine writes step results."""
    return json.dumps([{"key": key, "value": value} for key, value in entries.items()])


def make_task_run(
    name: str = "buildah-golang-run-taskrun",
    *,
    namespace: str = NAMESPACE,
    status: ConditionStatus | None = None,
    reason: str = "",
    messages: list[str] | None = None,
) -> TaskRun:
    """Build a TaskRun with a ``Succeeded`` condition and one step per termination message."""
    task_run = TaskRun(
        metadata=ObjectMeta(name=name, namespace=namespace),
        spec=TaskRunSpec(task_spec=TaskSpec()),
    )
    if status is not None:
        task_run.status.conditions.append(Condition(type=CONDITION_SUCCEEDED, status=status, reason=reason))
    for idx, message in enumerate(messages or []):
        task_run.status.steps.append(
            StepState(
                name=f"step-{idx}",
                container=f"step-step-{idx}",
                terminated=StepTerminated(exit_code=1, message=message),
            )
        )
    task_run.status.pod_name = f"{name}-pod"
    return task_run
