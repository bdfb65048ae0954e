"""Reconciler for BuildRun resources.

A pass walks the following states::

    NotFound   -> done
    Done       -> done (a finished run is never touched again)
    Validating -> field conflicts, env overrides, build lookup,
                  inline spec validation
    Compiling  -> generate and create the TaskRun
    Observing  -> mirror the TaskRun condition, extract failures

Semantic problems end the run with a ``False`` Succeeded condition and
are not retried.  Technical errors propagate so the caller can re-run
the pass; nothing is written to status in that case.  Status is written
exactly once per pass.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from build_engine.config import Settings
from build_engine.errors import NotFoundError
from build_engine.models.build import Build, BuildReason, BuildSpec, BuildStrategyKind
from build_engine.models.buildrun import LABEL_BUILD_RUN, BuildRun, BuildRunReason
from build_engine.models.meta import (
    CONDITION_SUCCEEDED,
    Condition,
    ConditionStatus,
    ObjectMeta,
    set_condition,
)
from build_engine.models.taskrun import TaskRun
from build_engine.reconciler.build import default_dependencies
from build_engine.reconciler.client import (
    KIND_BUILD,
    KIND_BUILD_RUN,
    KIND_TASK_RUN,
    ClientStrategyLookup,
    Request,
    ResourceClient,
    Result,
)
from build_engine.resources.failures import update_buildrun_using_task_run_condition
from build_engine.resources.taskrun import TaskRunGenerationError, generate_task_run
from build_engine.validate.capabilities import RepositoryProbe
from build_engine.validate.chain import run_all
from build_engine.validate.env import check_env_vars
from build_engine.validate.fields import build_run_fields
from build_engine.validate.registry import (
    INLINE_BUILD_VALIDATIONS,
    ValidatorRegistry,
    create_default_registry,
)
from build_engine.validate.strategy import unknown_kind_failure

logger = logging.getLogger(__name__)


def _resource(build_run: BuildRun) -> dict[str, str]:
    return {"kind": KIND_BUILD_RUN, "namespace": build_run.metadata.namespace, "name": build_run.metadata.name}


def _fail(build_run: BuildRun, reason: str, message: str) -> None:
    set_condition(
        build_run.status.conditions,
        Condition(
            type=CONDITION_SUCCEEDED,
            status=ConditionStatus.FALSE,
            reason=reason,
            message=message,
        ),
    )
    build_run.status.completion_time = datetime.now(UTC)
    logger.info(
        "BuildRun %s/%s failed: %s: %s",
        build_run.metadata.namespace,
        build_run.metadata.name,
        reason,
        message,
        extra={"resource": _resource(build_run)},
    )


class BuildRunReconciler:
    """Turns BuildRuns into TaskRuns and reports their progress."""

    def __init__(
        self,
        client: ResourceClient,
        settings: Settings,
        registry: ValidatorRegistry | None = None,
        probe: RepositoryProbe | None = None,
    ) -> None:
        self._client = client
        self._settings = settings
        self._registry = registry or create_default_registry()
        self._deps = default_dependencies(client, settings, probe)
        self._strategies = ClientStrategyLookup(client)

    async def reconcile(self, request: Request) -> Result:
        try:
            stored: BuildRun = await self._client.get(KIND_BUILD_RUN, request.namespace, request.name)
        except NotFoundError:
            logger.debug("BuildRun %s/%s is gone, nothing to do", request.namespace, request.name)
            return Result()

        if stored.status.is_done():
            return Result()

        build_run = stored.model_copy(deep=True)
        if build_run.status.task_run_name:
            await self._observe(build_run, build_run.status.task_run_name)
        else:
            await self._start(build_run)

        await self._client.update_status(build_run)
        return Result()

    # ------------------------------------------------------------------
    # Validating and compiling
    # ------------------------------------------------------------------

    async def _start(self, build_run: BuildRun) -> None:
        existing: list[TaskRun] = await self._client.list(
            KIND_TASK_RUN,
            build_run.metadata.namespace,
            {LABEL_BUILD_RUN: build_run.metadata.name},
        )
        if existing:
            # Created by an earlier pass whose status write did not land.
            await self._observe(build_run, existing[0].metadata.name)
            return

        reason, message = build_run_fields(build_run)
        if reason:
            _fail(build_run, reason, message)
            return

        env_failure = check_env_vars(build_run.spec.env)
        if env_failure is not None:
            _fail(build_run, env_failure.reason.value, env_failure.message)
            return

        resolved = await self._resolve_build_spec(build_run)
        if resolved is None:
            return
        build_spec, generation = resolved

        try:
            strategy_kind = BuildStrategyKind(build_spec.strategy.resolved_kind)
        except ValueError:
            # The build changed since it was last validated.
            kind_failure = unknown_kind_failure(build_spec.strategy.kind)
            _fail(build_run, kind_failure.reason.value, kind_failure.message)
            return

        strategy = await self._strategies.get_strategy(
            strategy_kind,
            build_run.metadata.namespace,
            build_spec.strategy.name,
        )
        if strategy is None:
            not_found = (
                BuildReason.CLUSTER_BUILD_STRATEGY_NOT_FOUND
                if strategy_kind == BuildStrategyKind.CLUSTER
                else BuildReason.BUILD_STRATEGY_NOT_FOUND
            )
            _fail(build_run, not_found.value, f"{strategy_kind.value} {build_spec.strategy.name} not found")
            return

        try:
            task_run = generate_task_run(self._settings, build_spec, build_run, strategy, generation)
        except TaskRunGenerationError as exc:
            _fail(build_run, BuildRunReason.TASK_RUN_GENERATION_FAILED.value, str(exc))
            return

        await self._client.create(task_run)
        logger.info(
            "Created TaskRun %s for BuildRun %s/%s",
            task_run.metadata.name,
            build_run.metadata.namespace,
            build_run.metadata.name,
            extra={"resource": _resource(build_run)},
        )

        build_run.status.task_run_name = task_run.metadata.name
        build_run.status.build_spec = build_spec.model_copy(deep=True)
        build_run.status.start_time = datetime.now(UTC)
        set_condition(
            build_run.status.conditions,
            Condition(
                type=CONDITION_SUCCEEDED,
                status=ConditionStatus.UNKNOWN,
                reason=BuildRunReason.PENDING.value,
                message=f"TaskRun {task_run.metadata.name} created",
            ),
        )

    async def _resolve_build_spec(self, build_run: BuildRun) -> tuple[BuildSpec, int | None] | None:
        """Return the build spec to run and the build generation, or ``None`` after failing the run."""
        namespace = build_run.metadata.namespace
        inline = build_run.spec.build.spec
        if inline is not None:
            transient = Build(
                metadata=ObjectMeta(name=build_run.metadata.name, namespace=namespace),
                spec=inline,
            )
            validators = self._registry.build_chain(INLINE_BUILD_VALIDATIONS, self._deps)
            failure = await run_all(transient, validators, timeout=self._settings.validation_timeout)
            if failure is not None:
                _fail(build_run, failure.reason.value, failure.message)
                return None
            return inline, None

        name = build_run.spec.build.name or ""
        try:
            build: Build = await self._client.get(KIND_BUILD, namespace, name)
        except NotFoundError:
            _fail(build_run, BuildRunReason.BUILD_NOT_FOUND.value, f"build.shipwright.io {name!r} not found")
            return None

        if build.status.registered != ConditionStatus.TRUE:
            registered = build.status.registered.value if build.status.registered else ConditionStatus.UNKNOWN.value
            build_reason = build.status.reason.value if build.status.reason else ""
            _fail(
                build_run,
                BuildRunReason.BUILD_REGISTRATION_FAILED.value,
                f"the Build is not registered correctly, build: {name}, "
                f"registered status: {registered}, reason: {build_reason}",
            )
            return None
        return build.spec, build.metadata.generation

    # ------------------------------------------------------------------
    # Observing
    # ------------------------------------------------------------------

    async def _observe(self, build_run: BuildRun, task_run_name: str) -> None:
        try:
            task_run: TaskRun = await self._client.get(KIND_TASK_RUN, build_run.metadata.namespace, task_run_name)
        except NotFoundError:
            _fail(build_run, BuildRunReason.TASK_RUN_NOT_FOUND.value, f"TaskRun {task_run_name} not found")
            return

        build_run.status.task_run_name = task_run.metadata.name
        if build_run.status.start_time is None:
            build_run.status.start_time = task_run.status.start_time or datetime.now(UTC)
        update_buildrun_using_task_run_condition(build_run, task_run, self._settings.result_prefix)
