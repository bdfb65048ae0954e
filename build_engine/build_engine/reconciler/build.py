"""Reconciler for Build resources.

Each pass loads the build, runs the validation chain in priority order
and writes the outcome to ``Build.status`` with a single status update.
"""

from __future__ import annotations

import logging

from build_engine.config import Settings
from build_engine.errors import NotFoundError
from build_engine.models.build import Build, BuildStatus
from build_engine.reconciler.client import (
    KIND_BUILD,
    ClientBuildRunStore,
    ClientSecretLookup,
    ClientStrategyLookup,
    Request,
    ResourceClient,
    Result,
)
from build_engine.validate.capabilities import RepositoryProbe
from build_engine.validate.chain import apply_result, run_all
from build_engine.validate.registry import (
    BUILD_VALIDATIONS,
    ValidatorDependencies,
    ValidatorRegistry,
    create_default_registry,
)
from build_engine.validate.source_url import HttpRepositoryProbe

logger = logging.getLogger(__name__)


def default_dependencies(
    client: ResourceClient,
    settings: Settings,
    probe: RepositoryProbe | None = None,
) -> ValidatorDependencies:
    """Wire every validator capability to *client*."""
    return ValidatorDependencies(
        secrets=ClientSecretLookup(client),
        strategies=ClientStrategyLookup(client),
        probe=probe or HttpRepositoryProbe(timeout=settings.repository_probe_timeout),
        build_runs=ClientBuildRunStore(client),
    )


class BuildReconciler:
    """Validates builds and records whether they are registered.

    Parameters
    ----------
    client:
        Resource client for the control plane.
    settings:
        Controller settings; supplies the validation deadline.
    registry:
        Validator registry; defaults to every built-in validator.
    probe:
        Repository probe used by the source URL validator.
    """

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

    async def reconcile(self, request: Request) -> Result:
        try:
            stored: Build = await self._client.get(KIND_BUILD, request.namespace, request.name)
        except NotFoundError:
            logger.debug("Build %s/%s is gone, nothing to do", request.namespace, request.name)
            return Result()

        build = stored.model_copy(deep=True)
        validators = self._registry.build_chain(BUILD_VALIDATIONS, self._deps)
        failure = await run_all(build, validators, timeout=self._settings.validation_timeout)

        build.status = BuildStatus()
        apply_result(build.status, failure)
        await self._client.update_status(build)

        logger.info(
            "Build %s/%s registered=%s reason=%s",
            request.namespace,
            request.name,
            build.status.registered.value if build.status.registered else None,
            build.status.reason.value if build.status.reason else None,
            extra={"resource": {"kind": KIND_BUILD, "namespace": request.namespace, "name": request.name}},
        )
        return Result()
