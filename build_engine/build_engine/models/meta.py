"""Object metadata and condition types shared by every resource kind."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

API_GROUP = "build.shipwright.io"
API_VERSION = f"{API_GROUP}/v1beta1"

CONDITION_SUCCEEDED = "Succeeded"


class ConditionStatus(str, Enum):
    """Tri-state completion flag."""

    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"


class OwnerReference(BaseModel):
    """Back-reference from a dependent resource to the resource that owns it."""

    api_version: str = Field(default=API_VERSION)
    kind: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    controller: bool = Field(
        default=False,
        description="True when the owner is the managing controller of the dependent.",
    )


class ObjectMeta(BaseModel):
    """Identity and bookkeeping fields of a declarative resource."""

    name: str = Field(..., description="Resource name, unique per namespace and kind.")
    namespace: str = Field(default="", description="Empty for cluster-scoped resources.")
    annotations: dict[str, str] = Field(default_factory=dict)
    labels: dict[str, str] = Field(default_factory=dict)
    generation: int = Field(default=1, ge=0)
    resource_version: str = Field(default="")
    owner_references: list[OwnerReference] = Field(default_factory=list)

    def owner_index(self, kind: str, name: str) -> int:
        """Return the position of the owner reference for *kind*/*name*, or -1."""
        for idx, ref in enumerate(self.owner_references):
            if ref.kind == kind and ref.name == name:
                return idx
        return -1

    def controller_reference(self) -> OwnerReference | None:
        """Return the owner reference flagged as controller, if any."""
        for ref in self.owner_references:
            if ref.controller:
                return ref
        return None


class Condition(BaseModel):
    """A typed status flag describing resource progress."""

    type: str = Field(..., min_length=1)
    status: ConditionStatus = Field(default=ConditionStatus.UNKNOWN)
    reason: str = Field(default="")
    message: str = Field(default="")
    last_transition_time: datetime | None = Field(default=None)


def get_condition(conditions: list[Condition], condition_type: str) -> Condition | None:
    """Return the condition of *condition_type* from *conditions*, or ``None``."""
    for condition in conditions:
        if condition.type == condition_type:
            return condition
    return None


def set_condition(conditions: list[Condition], condition: Condition) -> None:
    """Insert *condition*, replacing any existing condition of the same type.

    ``last_transition_time`` is carried over from the existing condition when
    the status does not change.
    """
    for idx, existing in enumerate(conditions):
        if existing.type == condition.type:
            if existing.status == condition.status and condition.last_transition_time is None:
                condition = condition.model_copy(update={"last_transition_time": existing.last_transition_time})
            conditions[idx] = condition
            return
    conditions.append(condition)
