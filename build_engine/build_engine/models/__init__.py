"""Resource models for the build engine."""

from build_engine.models.build import (
    Build,
    BuildReason,
    BuildSpec,
    BuildStatus,
    BuildStrategyKind,
    EnvVar,
    GitSource,
    HttpSource,
    Output,
    ParamValue,
    StrategyRef,
    Toleration,
    Trigger,
    TriggerWhen,
)
from build_engine.models.buildrun import (
    BuildRun,
    BuildRunReason,
    BuildRunSpec,
    BuildRunStatus,
    FailureDetails,
    ReferencedBuild,
)
from build_engine.models.meta import Condition, ConditionStatus, ObjectMeta, OwnerReference
from build_engine.models.pipeline import Step, TaskSpec
from build_engine.models.strategy import BuildStrategy, ClusterBuildStrategy, Secret
from build_engine.models.taskrun import StepState, StepTerminated, TaskRun

__all__ = [
    "Build",
    "BuildReason",
    "BuildRun",
    "BuildRunReason",
    "BuildRunSpec",
    "BuildRunStatus",
    "BuildSpec",
    "BuildStatus",
    "BuildStrategy",
    "BuildStrategyKind",
    "ClusterBuildStrategy",
    "Condition",
    "ConditionStatus",
    "EnvVar",
    "FailureDetails",
    "GitSource",
    "HttpSource",
    "ObjectMeta",
    "Output",
    "OwnerReference",
    "ParamValue",
    "ReferencedBuild",
    "Secret",
    "Step",
    "StepState",
    "StepTerminated",
    "StrategyRef",
    "TaskRun",
    "TaskSpec",
    "Toleration",
    "Trigger",
    "TriggerWhen",
]
