"""BuildRun resource models.

A ``BuildRun`` requests a single execution of a build.  It either
references a :class:`~build_engine.models.build.Build` by name or carries
an inline :class:`~build_engine.models.build.BuildSpec` -- never both.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum

from pydantic import BaseModel, Field

from build_engine.models.build import BuildSpec, EnvVar, Output, ParamValue
from build_engine.models.meta import (
    CONDITION_SUCCEEDED,
    Condition,
    ConditionStatus,
    ObjectMeta,
    get_condition,
)

LABEL_BUILD_RUN = "buildrun.shipwright.io/name"


class BuildRunReason(str, Enum):
    """Reason codes written to the BuildRun ``Succeeded`` condition."""

    NO_REF_OR_SPEC = "BuildRunNoRefOrSpec"
    AMBIGUOUS_BUILD = "BuildRunAmbiguousBuild"
    BUILD_FIELD_OVERRIDE_FORBIDDEN = "BuildRunBuildFieldOverrideForbidden"
    BUILD_NOT_FOUND = "BuildNotFound"
    BUILD_REGISTRATION_FAILED = "BuildRegistrationFailed"
    TASK_RUN_GENERATION_FAILED = "TaskRunGenerationFailed"
    TASK_RUN_NOT_FOUND = "TaskRunNotFound"
    PENDING = "Pending"
    RUNNING = "Running"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    TIMEOUT = "BuildRunTimeout"
    CANCELLED = "BuildRunCanceled"


class ReferencedBuild(BaseModel):
    name: str | None = Field(default=None, description="Name of a Build in the same namespace.")
    spec: BuildSpec | None = Field(default=None, description="Inline build specification.")


class BuildRunSpec(BaseModel):
    build: ReferencedBuild = Field(default_factory=ReferencedBuild)
    output: Output | None = None
    param_values: list[ParamValue] = Field(default_factory=list)
    env: list[EnvVar] = Field(default_factory=list)
    timeout: timedelta | None = None
    service_account: str | None = None


class FailureLocation(BaseModel):
    pod: str = ""
    container: str = ""


class FailureDetails(BaseModel):
    """Structured failure recovered from an execution step's termination message."""

    reason: str = ""
    message: str = ""
    location: FailureLocation | None = None


class BuildRunOutput(BaseModel):
    digest: str = ""
    size: int = 0


class BuildRunStatus(BaseModel):
    conditions: list[Condition] = Field(default_factory=list)
    task_run_name: str | None = None
    build_spec: BuildSpec | None = None
    failure_details: FailureDetails | None = None
    output: BuildRunOutput | None = None
    start_time: datetime | None = None
    completion_time: datetime | None = None

    def succeeded(self) -> Condition | None:
        return get_condition(self.conditions, CONDITION_SUCCEEDED)

    def is_done(self) -> bool:
        condition = self.succeeded()
        return condition is not None and condition.status != ConditionStatus.UNKNOWN


class BuildRun(BaseModel):
    kind: str = Field(default="BuildRun")
    metadata: ObjectMeta
    spec: BuildRunSpec = Field(default_factory=BuildRunSpec)
    status: BuildRunStatus = Field(default_factory=BuildRunStatus)

    @property
    def build_name(self) -> str:
        """Name the run is labelled with: the referenced build, or the run itself for inline specs."""
        return self.spec.build.name or self.metadata.name
