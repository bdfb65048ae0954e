"""Narrow collaborator interfaces the validators depend on.

Each validator receives only the capability it needs rather than a
general resource client.  The reconciler package provides adapters that
implement these protocols on top of a
:class:`~build_engine.reconciler.client.ResourceClient`.
"""

from __future__ import annotations

from typing import Protocol

from build_engine.models.build import BuildStrategyKind
from build_engine.models.buildrun import BuildRun
from build_engine.models.strategy import BuildStrategy


class SecretLookup(Protocol):
    async def secret_exists(self, namespace: str, name: str) -> bool:
        """Return whether the secret *name* exists in *namespace*."""
        ...


class StrategyLookup(Protocol):
    async def get_strategy(
        self,
        kind: BuildStrategyKind,
        namespace: str,
        name: str,
    ) -> BuildStrategy | None:
        """Return the referenced strategy, or ``None`` when it does not exist.

        ``namespace`` is ignored for cluster-scoped strategies.
        """
        ...


class RepositoryProbe(Protocol):
    async def is_reachable(self, url: str) -> bool:
        """Return whether the git repository at *url* answers anonymous requests."""
        ...


class BuildRunOwnerStore(Protocol):
    async def list_build_runs(self, namespace: str, build_name: str) -> list[BuildRun]:
        """Return all runs in *namespace* that belong to the build *build_name*."""
        ...

    async def update_build_run(self, build_run: BuildRun) -> None:
        """Persist metadata changes (owner references) of *build_run*."""
        ...
