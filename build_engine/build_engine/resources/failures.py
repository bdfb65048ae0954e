"""Recover structured failure details from a terminated TaskRun.

Steps report results by writing a JSON array of ``{"key", "value"}``
entries as their termination message.  When the TaskRun failed, the
error reason and message a step recorded under the well-known
``<prefix>-result-error-reason`` / ``<prefix>-result-error-message`` keys
are copied onto the BuildRun status.  The format is produced by the
execution engine and is read here exactly as written.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from pydantic import BaseModel, TypeAdapter, ValidationError

from build_engine.models.buildrun import (
    BuildRun,
    BuildRunOutput,
    BuildRunReason,
    FailureDetails,
    FailureLocation,
)
from build_engine.models.meta import CONDITION_SUCCEEDED, Condition, ConditionStatus, get_condition, set_condition
from build_engine.models.taskrun import (
    TASK_RUN_REASON_CANCELLED,
    TASK_RUN_REASON_FAILED,
    TASK_RUN_REASON_PENDING,
    TASK_RUN_REASON_TIMED_OUT,
    StepState,
    TaskRun,
)
from build_engine.sources.naming import (
    RESULT_ERROR_MESSAGE,
    RESULT_ERROR_REASON,
    RESULT_IMAGE_DIGEST,
    RESULT_IMAGE_SIZE,
    prefixed,
)

logger = logging.getLogger(__name__)


class ResultEntry(BaseModel):
    """One key/value pair of a step termination message."""

    key: str
    value: str = ""


_RESULT_ENTRIES = TypeAdapter(list[ResultEntry])


def parse_termination_message(message: str) -> list[ResultEntry] | None:
    """Decode a termination message, returning ``None`` when it is not a result array."""
    if not message:
        return None
    try:
        return _RESULT_ENTRIES.validate_json(message)
    except ValidationError as exc:
        logger.debug("Ignoring unparsable termination message: %s", exc.errors()[0]["msg"])
        return None


def _failed(taskrun: TaskRun) -> bool:
    condition = get_condition(taskrun.status.conditions, CONDITION_SUCCEEDED)
    return (
        condition is not None
        and condition.status == ConditionStatus.FALSE
        and condition.reason == TASK_RUN_REASON_FAILED
    )


def _step_failure(step: StepState, prefix: str) -> tuple[str, str] | None:
    if step.terminated is None:
        return None
    entries = parse_termination_message(step.terminated.message)
    if entries is None:
        return None

    values = {entry.key: entry.value for entry in entries}
    reason_key = prefixed(prefix, RESULT_ERROR_REASON)
    message_key = prefixed(prefix, RESULT_ERROR_MESSAGE)
    if reason_key not in values or message_key not in values:
        return None
    return values[reason_key], values[message_key]


def update_buildrun_using_task_failures(buildrun: BuildRun, taskrun: TaskRun, prefix: str = "shp") -> None:
    """Set ``buildrun.status.failure_details`` from the first step that reported an error.

    Does nothing unless the TaskRun's ``Succeeded`` condition is exactly
    ``status=False, reason=Failed``.  Malformed or incomplete termination
    messages leave the failure details untouched.  Applying the function
    repeatedly to the same TaskRun yields the same result.
    """
    if not _failed(taskrun):
        return

    for step in taskrun.status.steps:
        failure = _step_failure(step, prefix)
        if failure is None:
            continue
        reason, message = failure
        buildrun.status.failure_details = FailureDetails(
            reason=reason,
            message=message,
            location=FailureLocation(pod=taskrun.status.pod_name, container=step.container or step.name),
        )
        logger.info(
            "BuildRun %s/%s failed in step %s: %s",
            buildrun.metadata.namespace,
            buildrun.metadata.name,
            step.name,
            reason,
        )
        return


# ---------------------------------------------------------------------------
# Condition mapping
# ---------------------------------------------------------------------------

_REASON_BY_TASK_RUN_REASON: dict[str, BuildRunReason] = {
    TASK_RUN_REASON_TIMED_OUT: BuildRunReason.TIMEOUT,
    TASK_RUN_REASON_CANCELLED: BuildRunReason.CANCELLED,
}


def _image_output(taskrun: TaskRun, prefix: str) -> BuildRunOutput | None:
    results = {result.name: result.value for result in taskrun.status.results}
    digest = results.get(prefixed(prefix, RESULT_IMAGE_DIGEST))
    if digest is None:
        return None
    size_value = results.get(prefixed(prefix, RESULT_IMAGE_SIZE), "0")
    try:
        size = int(size_value)
    except ValueError:
        logger.debug("Ignoring non-numeric image size result %r", size_value)
        size = 0
    return BuildRunOutput(digest=digest, size=size)


def update_buildrun_using_task_run_condition(buildrun: BuildRun, taskrun: TaskRun, prefix: str = "shp") -> None:
    """Mirror the TaskRun ``Succeeded`` condition onto the BuildRun.

    A TaskRun without a ``Succeeded`` condition is reported as pending.
    On success the image digest and size results are copied to the
    BuildRun output; on failure the failure details are extracted.
    """
    condition = get_condition(taskrun.status.conditions, CONDITION_SUCCEEDED)
    if condition is None:
        set_condition(
            buildrun.status.conditions,
            Condition(
                type=CONDITION_SUCCEEDED,
                status=ConditionStatus.UNKNOWN,
                reason=BuildRunReason.PENDING.value,
                message="TaskRun has not reported a condition yet",
            ),
        )
        return

    if condition.status == ConditionStatus.UNKNOWN:
        reason = BuildRunReason.PENDING if condition.reason == TASK_RUN_REASON_PENDING else BuildRunReason.RUNNING
    elif condition.status == ConditionStatus.TRUE:
        reason = BuildRunReason.SUCCEEDED
    else:
        reason = _REASON_BY_TASK_RUN_REASON.get(condition.reason, BuildRunReason.FAILED)

    set_condition(
        buildrun.status.conditions,
        Condition(
            type=CONDITION_SUCCEEDED,
            status=condition.status,
            reason=reason.value,
            message=condition.message,
        ),
    )

    if condition.status == ConditionStatus.UNKNOWN:
        return

    buildrun.status.completion_time = (
        taskrun.status.completion_time or buildrun.status.completion_time or datetime.now(UTC)
    )
    if condition.status == ConditionStatus.TRUE:
        buildrun.status.output = _image_output(taskrun, prefix)
    else:
        update_buildrun_using_task_failures(buildrun, taskrun, prefix)
