"""Execution resource models.

A ``TaskRun`` is the running or terminated instance of a compiled
:class:`~build_engine.models.pipeline.TaskSpec`.  It is produced and
advanced by the external execution engine; the controller only reads its
status.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from pydantic import BaseModel, Field

from build_engine.models.build import Toleration
from build_engine.models.meta import Condition, ObjectMeta
from build_engine.models.pipeline import TaskSpec

# Reasons the execution engine reports on its Succeeded condition.
TASK_RUN_REASON_PENDING = "Pending"
TASK_RUN_REASON_RUNNING = "Running"
TASK_RUN_REASON_SUCCESSFUL = "Succeeded"
TASK_RUN_REASON_FAILED = "Failed"
TASK_RUN_REASON_TIMED_OUT = "TaskRunTimeout"
TASK_RUN_REASON_CANCELLED = "TaskRunCancelled"


class StepTerminated(BaseModel):
    exit_code: int = 0
    reason: str = ""
    message: str = Field(default="", description="Termination message written by the step.")


class StepState(BaseModel):
    name: str = ""
    container: str = ""
    terminated: StepTerminated | None = None


class TaskRunResult(BaseModel):
    name: str
    value: str


class PodTemplate(BaseModel):
    node_selector: dict[str, str] = Field(default_factory=dict)
    tolerations: list[Toleration] = Field(default_factory=list)
    scheduler_name: str = ""


class TaskRunParam(BaseModel):
    name: str
    value: str | list[str]


class TaskRunSpec(BaseModel):
    task_spec: TaskSpec
    params: list[TaskRunParam] = Field(default_factory=list)
    service_account_name: str | None = None
    timeout: timedelta | None = None
    pod_template: PodTemplate = Field(default_factory=PodTemplate)


class TaskRunStatus(BaseModel):
    conditions: list[Condition] = Field(default_factory=list)
    steps: list[StepState] = Field(default_factory=list)
    results: list[TaskRunResult] = Field(default_factory=list)
    pod_name: str = ""
    start_time: datetime | None = None
    completion_time: datetime | None = None


class TaskRun(BaseModel):
    kind: str = Field(default="TaskRun")
    metadata: ObjectMeta
    spec: TaskRunSpec
    status: TaskRunStatus = Field(default_factory=TaskRunStatus)
