"""Generate the TaskRun executing a BuildRun.

The task spec is assembled in a fixed order: one step per source (see
:func:`~build_engine.sources.compiler.amend_task_spec_with_sources`),
then the strategy's build steps.  Parameter values and environment
variables declared on the build are merged with those of the BuildRun,
the BuildRun winning on name clashes.
"""

from __future__ import annotations

import logging
import posixpath

from build_engine.config import Settings
from build_engine.models.build import LABEL_BUILD, LABEL_BUILD_GENERATION, BuildSpec, EnvVar, ParamValue
from build_engine.models.buildrun import LABEL_BUILD_RUN, BuildRun
from build_engine.models.meta import ObjectMeta, OwnerReference
from build_engine.models.pipeline import Step, TaskParam, TaskSpec, Volume, VolumeMount
from build_engine.models.strategy import BuildStrategy, StrategyParameter
from build_engine.models.taskrun import PodTemplate, TaskRun, TaskRunParam, TaskRunSpec
from build_engine.sources.compiler import amend_task_spec_with_sources
from build_engine.sources.naming import (
    PARAM_OUTPUT_IMAGE,
    PARAM_SOURCE_CONTEXT,
    PARAM_SOURCE_ROOT,
    RESULT_IMAGE_DIGEST,
    RESULT_IMAGE_SIZE,
    prefixed,
    secret_mount_path,
    secret_volume_name,
)

logger = logging.getLogger(__name__)


class TaskRunGenerationError(ValueError):
    """The BuildRun cannot be turned into a TaskRun as specified."""


# ---------------------------------------------------------------------------
# Merging helpers
# ---------------------------------------------------------------------------


def merge_env(base: list[EnvVar], overrides: list[EnvVar]) -> list[EnvVar]:
    """Return *base* with same-named entries replaced by *overrides*, new names appended."""
    merged = {env.name: env for env in base}
    for env in overrides:
        merged[env.name] = env
    return list(merged.values())


def merge_param_values(base: list[ParamValue], overrides: list[ParamValue]) -> list[ParamValue]:
    merged = {param.name: param for param in base}
    for param in overrides:
        merged[param.name] = param
    return list(merged.values())


def _param_value(param: ParamValue, definition: StrategyParameter) -> str | list[str]:
    if definition.type == "array":
        if param.values is None:
            raise TaskRunGenerationError(f"parameter {param.name} is an array parameter, 'values' must be set")
        return list(param.values)
    if param.value is None:
        raise TaskRunGenerationError(f"parameter {param.name} is a string parameter, 'value' must be set")
    return param.value


def _strategy_params(
    settings: Settings,
    strategy: BuildStrategy,
    values: list[ParamValue],
) -> tuple[list[TaskParam], list[TaskRunParam]]:
    definitions = {p.name: p for p in strategy.spec.parameters}
    reserved = f"{settings.result_prefix}-"

    params: list[TaskParam] = []
    for definition in strategy.spec.parameters:
        default = definition.defaults if definition.type == "array" else definition.default
        params.append(
            TaskParam(
                name=definition.name,
                type=definition.type,
                description=definition.description,
                default=default,
            )
        )

    run_params: list[TaskRunParam] = []
    provided: set[str] = set()
    for value in values:
        if value.name.startswith(reserved):
            raise TaskRunGenerationError(f"parameter {value.name} uses the reserved prefix {reserved!r}")
        definition = definitions.get(value.name)
        if definition is None:
            raise TaskRunGenerationError(
                f"parameter {value.name} is not defined in {strategy.kind} {strategy.metadata.name}"
            )
        run_params.append(TaskRunParam(name=value.name, value=_param_value(value, definition)))
        provided.add(value.name)

    missing = sorted(
        d.name for d in strategy.spec.parameters if d.name not in provided and d.default is None and d.defaults is None
    )
    if missing:
        raise TaskRunGenerationError(f"parameters without a value and without a default: {', '.join(missing)}")
    return params, run_params


# ---------------------------------------------------------------------------
# Task spec and TaskRun
# ---------------------------------------------------------------------------


def generate_task_spec(
    settings: Settings,
    build_spec: BuildSpec,
    strategy: BuildStrategy,
    env: list[EnvVar] | None = None,
) -> TaskSpec:
    """Compile *build_spec* and *strategy* into a task spec.

    Parameters
    ----------
    settings:
        Supplies source step images and the result prefix.
    build_spec:
        The effective build specification.
    strategy:
        The resolved strategy whose steps build and push the image.
    env:
        Environment variables added to every strategy step; defaults to
        ``build_spec.env``.

    Raises
    ------
    TaskRunGenerationError
        If a source step name collides with a strategy step name.
    """
    prefix = settings.result_prefix
    task_spec = TaskSpec(
        params=[
            TaskParam(
                name=prefixed(prefix, PARAM_SOURCE_ROOT),
                description="Absolute path to the directory the sources are placed in.",
                default=settings.source_root,
            ),
            TaskParam(
                name=prefixed(prefix, PARAM_SOURCE_CONTEXT),
                description="Absolute path to the directory the build runs in.",
            ),
            TaskParam(
                name=prefixed(prefix, PARAM_OUTPUT_IMAGE),
                description="The URL of the image that the build produces.",
            ),
        ],
    )
    task_spec.add_result(prefixed(prefix, RESULT_IMAGE_DIGEST), "The digest of the image.")
    task_spec.add_result(prefixed(prefix, RESULT_IMAGE_SIZE), "The compressed size of the image.")

    amend_task_spec_with_sources(settings, task_spec, build_spec)

    step_env = build_spec.env if env is None else env
    source_steps = set(task_spec.step_names())
    for strategy_step in strategy.spec.steps:
        if strategy_step.name in source_steps:
            raise TaskRunGenerationError(
                f"step {strategy_step.name} of {strategy.kind} {strategy.metadata.name} collides with a source step"
            )
        step: Step = strategy_step.model_copy(deep=True)
        step.env = merge_env(step.env, step_env)
        task_spec.steps.append(step)

    push_secret = build_spec.output.push_secret
    if push_secret:
        task_spec.add_volume(Volume(name=secret_volume_name(prefix, push_secret), secret_name=push_secret))
        mount = VolumeMount(
            name=secret_volume_name(prefix, push_secret),
            mount_path=secret_mount_path(prefix, push_secret),
            read_only=True,
        )
        for step in task_spec.steps[len(source_steps) :]:
            step.volume_mounts.append(mount)

    return task_spec


def effective_build_spec(build_spec: BuildSpec, build_run: BuildRun) -> BuildSpec:
    """Return a copy of *build_spec* with the BuildRun's overrides applied."""
    spec = build_spec.model_copy(deep=True)
    if build_run.spec.output is not None:
        spec.output = build_run.spec.output.model_copy(deep=True)
    spec.param_values = merge_param_values(spec.param_values, build_run.spec.param_values)
    spec.env = merge_env(spec.env, build_run.spec.env)
    if build_run.spec.timeout is not None:
        spec.timeout = build_run.spec.timeout
    return spec


def task_run_name(build_run: BuildRun) -> str:
    return f"{build_run.metadata.name}-taskrun"


def generate_task_run(
    settings: Settings,
    build_spec: BuildSpec,
    build_run: BuildRun,
    strategy: BuildStrategy,
    build_generation: int | None = None,
) -> TaskRun:
    """Create the TaskRun executing *build_run*.

    *build_spec* is the referenced build's spec or the BuildRun's inline
    spec.  The TaskRun is labelled with the build and run names and is
    controlled by the BuildRun.

    Raises
    ------
    TaskRunGenerationError
        If parameter values do not match the strategy's parameters.
    """
    prefix = settings.result_prefix
    spec = effective_build_spec(build_spec, build_run)
    task_spec = generate_task_spec(settings, spec, strategy)

    strategy_params, strategy_values = _strategy_params(settings, strategy, spec.param_values)
    task_spec.params.extend(strategy_params)

    context_dir = spec.source.context_dir if spec.source is not None else None
    source_context = posixpath.join(settings.source_root, context_dir) if context_dir else settings.source_root
    params = [
        TaskRunParam(name=prefixed(prefix, PARAM_SOURCE_ROOT), value=settings.source_root),
        TaskRunParam(name=prefixed(prefix, PARAM_SOURCE_CONTEXT), value=source_context),
        TaskRunParam(name=prefixed(prefix, PARAM_OUTPUT_IMAGE), value=spec.output.image),
        *strategy_values,
    ]

    labels = {
        LABEL_BUILD: build_run.build_name,
        LABEL_BUILD_RUN: build_run.metadata.name,
    }
    if build_generation is not None:
        labels[LABEL_BUILD_GENERATION] = str(build_generation)

    task_run = TaskRun(
        metadata=ObjectMeta(
            name=task_run_name(build_run),
            namespace=build_run.metadata.namespace,
            labels=labels,
            owner_references=[OwnerReference(kind=build_run.kind, name=build_run.metadata.name, controller=True)],
        ),
        spec=TaskRunSpec(
            task_spec=task_spec,
            params=params,
            service_account_name=build_run.spec.service_account,
            timeout=spec.timeout,
            pod_template=PodTemplate(
                node_selector=dict(spec.node_selector),
                tolerations=[t.model_copy() for t in spec.tolerations],
                scheduler_name=spec.scheduler_name,
            ),
        ),
    )
    logger.debug(
        "Generated TaskRun %s with steps %s",
        task_run.metadata.name,
        task_spec.step_names(),
    )
    return task_run
