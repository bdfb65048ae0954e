"""Strategy resources: reusable build step templates."""

from __future__ import annotations

from pydantic import BaseModel, Field

from build_engine.models.meta import ObjectMeta
from build_engine.models.pipeline import Step


class StrategyParameter(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = ""
    type: str = Field(default="string", description="string or array")
    default: str | None = None
    defaults: list[str] | None = None


class BuildStrategySpec(BaseModel):
    steps: list[Step] = Field(default_factory=list)
    parameters: list[StrategyParameter] = Field(default_factory=list)


class BuildStrategy(BaseModel):
    """A namespace-scoped strategy."""

    kind: str = Field(default="BuildStrategy")
    metadata: ObjectMeta
    spec: BuildStrategySpec = Field(default_factory=BuildStrategySpec)


class ClusterBuildStrategy(BuildStrategy):
    """A cluster-scoped strategy; ``metadata.namespace`` is empty."""

    kind: str = Field(default="ClusterBuildStrategy")


class Secret(BaseModel):
    kind: str = Field(default="Secret")
    metadata: ObjectMeta
    type: str = Field(default="Opaque")
    data: dict[str, str] = Field(default_factory=dict)
