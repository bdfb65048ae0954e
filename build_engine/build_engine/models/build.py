"""Build resource models.

A ``Build`` is an immutable template describing where source comes from,
which strategy turns it into an image, and where the image is pushed.  The
controller core only ever writes ``Build.status``.
"""

from __future__ import annotations

from datetime import timedelta
from enum import Enum

from pydantic import BaseModel, Field

from build_engine.models.meta import API_GROUP, ConditionStatus, ObjectMeta

# ---------------------------------------------------------------------------
# Well-known annotations and labels
# ---------------------------------------------------------------------------

ANNOTATION_VERIFY_REPOSITORY = f"{API_GROUP}/verify.repository"
ANNOTATION_BUILD_RUN_DELETION = f"{API_GROUP}/build-run-deletion"
LABEL_BUILD = f"{API_GROUP}/name"
LABEL_BUILD_GENERATION = f"{API_GROUP}/generation"

ALL_VALIDATIONS_SUCCEEDED = "all validations succeeded"


class BuildReason(str, Enum):
    """Closed vocabulary of ``Build.status.reason`` codes."""

    SUCCEEDED = "Succeeded"
    SPEC_SOURCE_SECRET_REF_NOT_FOUND = "SpecSourceSecretRefNotFound"
    SPEC_OUTPUT_SECRET_REF_NOT_FOUND = "SpecOutputSecretRefNotFound"
    MULTIPLE_SECRET_REF_NOT_FOUND = "MultipleSecretRefNotFound"
    BUILD_STRATEGY_NOT_FOUND = "BuildStrategyNotFound"
    CLUSTER_BUILD_STRATEGY_NOT_FOUND = "ClusterBuildStrategyNotFound"
    UNKNOWN_BUILD_STRATEGY_KIND = "UnknownBuildStrategyKind"
    SET_OWNER_REFERENCE_FAILED = "SetOwnerReferenceFailed"
    REMOTE_REPOSITORY_UNREACHABLE = "RemoteRepositoryUnreachable"
    BUILD_NAME_INVALID = "BuildNameInvalid"
    SPEC_ENV_NAME_CAN_NOT_BE_BLANK = "SpecEnvNameCanNotBeBlank"
    SPEC_ENV_ONLY_ONE_OF_VALUE_OR_VALUE_FROM = "SpecEnvOnlyOneOfValueOrValueFromMustBeSpecified"
    SOURCE_NAME_CAN_NOT_BE_BLANK = "SpecSourceNameCanNotBeBlank"
    SOURCE_NAME_NOT_UNIQUE = "SourceNameNotUnique"
    SOURCE_URL_NOT_VALID = "SourceURLNotValid"
    OUTPUT_TIMESTAMP_NOT_SUPPORTED = "OutputTimestampNotSupported"
    OUTPUT_TIMESTAMP_NOT_VALID = "OutputTimestampNotValid"
    NODE_SELECTOR_NOT_VALID = "NodeSelectorNotValid"
    TOLERATION_NOT_VALID = "TolerationNotValid"
    SCHEDULER_NAME_NOT_VALID = "SchedulerNameNotValid"
    TRIGGER_INVALID_TYPE = "TriggerInvalidType"
    TRIGGER_INVALID_GITHUB_WEBHOOK = "TriggerInvalidGitHubWebHook"
    TRIGGER_INVALID_IMAGE = "TriggerInvalidImage"
    TRIGGER_INVALID_PIPELINE = "TriggerInvalidPipeline"


class BuildStrategyKind(str, Enum):
    """Scope of a referenced strategy."""

    NAMESPACED = "BuildStrategy"
    CLUSTER = "ClusterBuildStrategy"


class OutputTimestamp(str, Enum):
    """Literal keywords accepted by ``spec.output.timestamp``."""

    ZERO = "Zero"
    SOURCE = "SourceTimestamp"
    BUILD = "BuildTimestamp"


class TriggerType(str, Enum):
    GITHUB = "GitHub"
    IMAGE = "Image"
    PIPELINE = "Pipeline"


class GitHubEventName(str, Enum):
    PUSH = "Push"
    PULL_REQUEST = "PullRequest"


# ---------------------------------------------------------------------------
# Source and strategy
# ---------------------------------------------------------------------------


class GitSource(BaseModel):
    """The default source of a build; always a git repository."""

    url: str = Field(default="", description="Repository URL.")
    revision: str | None = Field(default=None, description="Branch, tag or commit to check out.")
    clone_secret: str | None = Field(default=None, description="Secret holding clone credentials.")
    context_dir: str | None = Field(default=None, description="Sub-directory to build from.")

    @property
    def is_empty(self) -> bool:
        return not self.url


class HttpSource(BaseModel):
    """An auxiliary artifact downloaded next to the default source."""

    name: str = Field(default="")
    url: str = Field(default="")


class StrategyRef(BaseModel):
    name: str = Field(..., min_length=1)
    kind: str | None = Field(
        default=None,
        description="BuildStrategy or ClusterBuildStrategy; unset means BuildStrategy.",
    )

    @property
    def resolved_kind(self) -> str:
        return self.kind or BuildStrategyKind.NAMESPACED.value


# ---------------------------------------------------------------------------
# Output, environment, parameters
# ---------------------------------------------------------------------------


class Output(BaseModel):
    image: str = Field(default="", description="Registry image reference to push to.")
    push_secret: str | None = Field(default=None)
    timestamp: str | None = Field(
        default=None,
        description="Zero, SourceTimestamp, BuildTimestamp or a unix epoch in seconds.",
    )
    labels: dict[str, str] = Field(default_factory=dict)
    annotations: dict[str, str] = Field(default_factory=dict)


class KeySelector(BaseModel):
    name: str
    key: str


class EnvVarSource(BaseModel):
    field_path: str | None = None
    secret_key_ref: KeySelector | None = None
    config_map_key_ref: KeySelector | None = None


class EnvVar(BaseModel):
    name: str = Field(default="")
    value: str | None = Field(default=None)
    value_from: EnvVarSource | None = Field(default=None)


class ParamValue(BaseModel):
    """Value for a strategy parameter; either a single string or a list."""

    name: str = Field(..., min_length=1)
    value: str | None = None
    values: list[str] | None = None


class Toleration(BaseModel):
    key: str = ""
    operator: str = "Equal"
    value: str = ""
    effect: str = ""


# ---------------------------------------------------------------------------
# Triggers and retention
# ---------------------------------------------------------------------------


class GitHubEventFilter(BaseModel):
    events: list[str] = Field(default_factory=list)
    branches: list[str] = Field(default_factory=list)


class ImageFilter(BaseModel):
    names: list[str] = Field(default_factory=list)


class PipelineObjectRef(BaseModel):
    name: str | None = None
    status: list[str] = Field(default_factory=list)
    selector: dict[str, str] = Field(default_factory=dict)


class TriggerWhen(BaseModel):
    name: str = ""
    type: str = ""
    github: GitHubEventFilter | None = None
    image: ImageFilter | None = None
    object_ref: PipelineObjectRef | None = None


class Trigger(BaseModel):
    when: list[TriggerWhen] = Field(default_factory=list)
    trigger_secret: str | None = None


class Retention(BaseModel):
    ttl_after_failed: timedelta | None = None
    ttl_after_succeeded: timedelta | None = None
    at_build_deletion: bool | None = Field(
        default=None,
        description="Delete the build's runs together with the build.",
    )


# ---------------------------------------------------------------------------
# Build
# ---------------------------------------------------------------------------


class BuildSpec(BaseModel):
    source: GitSource | None = Field(default=None)
    sources: list[HttpSource] = Field(default_factory=list)
    strategy: StrategyRef
    output: Output = Field(default_factory=Output)
    env: list[EnvVar] = Field(default_factory=list)
    param_values: list[ParamValue] = Field(default_factory=list)
    node_selector: dict[str, str] = Field(default_factory=dict)
    tolerations: list[Toleration] = Field(default_factory=list)
    scheduler_name: str = Field(default="")
    trigger: Trigger | None = Field(default=None)
    timeout: timedelta | None = Field(default=None)
    retention: Retention | None = Field(default=None)

    @property
    def has_source(self) -> bool:
        return self.source is not None and not self.source.is_empty


class BuildStatus(BaseModel):
    registered: ConditionStatus | None = Field(default=None)
    reason: BuildReason | None = Field(default=None)
    message: str | None = Field(default=None)


class Build(BaseModel):
    kind: str = Field(default="Build")
    metadata: ObjectMeta
    spec: BuildSpec
    status: BuildStatus = Field(default_factory=BuildStatus)

    @property
    def verify_repository(self) -> bool:
        return self.metadata.annotations.get(ANNOTATION_VERIFY_REPOSITORY, "").lower() == "true"

    @property
    def delete_runs_with_build(self) -> bool:
        if self.spec.retention is not None and self.spec.retention.at_build_deletion is not None:
            return self.spec.retention.at_build_deletion
        return self.metadata.annotations.get(ANNOTATION_BUILD_RUN_DELETION, "").lower() == "true"
