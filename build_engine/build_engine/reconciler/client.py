"""Resource client interface and the validator capability adapters built on it.

The client talks to the remote control plane and is provided by the
embedding process.  Implementations raise
:class:`~build_engine.errors.NotFoundError` for missing objects,
:class:`~build_engine.errors.StatusConflictError` for stale writes and
:class:`~build_engine.errors.ClientUnavailableError` for everything else.
"""

from __future__ import annotations

from typing import Any, Protocol

from pydantic import BaseModel, Field

from build_engine.errors import NotFoundError
from build_engine.models.build import BuildStrategyKind
from build_engine.models.buildrun import BuildRun
from build_engine.models.strategy import BuildStrategy

KIND_BUILD = "Build"
KIND_BUILD_RUN = "BuildRun"
KIND_TASK_RUN = "TaskRun"
KIND_SECRET = "Secret"


class ResourceClient(Protocol):
    """Async access to declarative resources.

    Objects are pydantic models; ``kind`` is the resource kind name
    (``"Build"``, ``"BuildRun"``, ...).  ``namespace`` is empty for
    cluster-scoped kinds.
    """

    async def get(self, kind: str, namespace: str, name: str) -> Any: ...

    async def list(self, kind: str, namespace: str, labels: dict[str, str] | None = None) -> list[Any]: ...

    async def create(self, obj: BaseModel) -> Any: ...

    async def update(self, obj: BaseModel) -> Any: ...

    async def update_status(self, obj: BaseModel) -> Any: ...


class Request(BaseModel):
    """Identity of the resource a reconciliation pass works on."""

    namespace: str = Field(default="")
    name: str = Field(..., min_length=1)


class Result(BaseModel):
    """Outcome of a pass; ``requeue_after`` asks for another pass after the delay."""

    requeue: bool = False
    requeue_after: float | None = None


# ---------------------------------------------------------------------------
# Capability adapters
# ---------------------------------------------------------------------------


class ClientSecretLookup:
    def __init__(self, client: ResourceClient) -> None:
        self._client = client

    async def secret_exists(self, namespace: str, name: str) -> bool:
        try:
            await self._client.get(KIND_SECRET, namespace, name)
        except NotFoundError:
            return False
        return True


class ClientStrategyLookup:
    def __init__(self, client: ResourceClient) -> None:
        self._client = client

    async def get_strategy(
        self,
        kind: BuildStrategyKind,
        namespace: str,
        name: str,
    ) -> BuildStrategy | None:
        if kind == BuildStrategyKind.CLUSTER:
            namespace = ""
        try:
            return await self._client.get(kind.value, namespace, name)
        except NotFoundError:
            return None


class ClientBuildRunStore:
    def __init__(self, client: ResourceClient) -> None:
        self._client = client

    async def list_build_runs(self, namespace: str, build_name: str) -> list[BuildRun]:
        runs = await self._client.list(KIND_BUILD_RUN, namespace)
        return [run for run in runs if run.spec.build.name == build_name]

    async def update_build_run(self, build_run: BuildRun) -> None:
        await self._client.update(build_run)
