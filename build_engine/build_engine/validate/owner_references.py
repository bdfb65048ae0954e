"""Validator that keeps BuildRun owner references in line with the build's retention.

When the build asks for its runs to be deleted together with it, each run
gets a controller owner reference pointing at the build so the platform's
garbage collector removes them.  When the setting is off, references added
earlier are removed again.
"""

from __future__ import annotations

import logging

from build_engine.errors import NotFoundError
from build_engine.models.build import Build, BuildReason
from build_engine.models.buildrun import BuildRun
from build_engine.models.meta import OwnerReference
from build_engine.validate.base import BaseValidator, ValidationFailure, ValidatorType
from build_engine.validate.capabilities import BuildRunOwnerStore

logger = logging.getLogger(__name__)


class AlreadyOwnedError(ValueError):
    """The run is already controlled by a different owner."""


def set_controller_reference(owner: Build, build_run: BuildRun) -> None:
    """Add a controller owner reference to *owner* on *build_run*.

    Raises
    ------
    AlreadyOwnedError
        If *build_run* already has a different controller.
    """
    existing = build_run.metadata.controller_reference()
    if existing is not None and (existing.kind, existing.name) != (owner.kind, owner.metadata.name):
        raise AlreadyOwnedError(
            f"Object {build_run.metadata.namespace}/{build_run.metadata.name} is already owned by "
            f"another {existing.kind} controller {existing.name}"
        )
    if build_run.metadata.owner_index(owner.kind, owner.metadata.name) == -1:
        build_run.metadata.owner_references.append(
            OwnerReference(kind=owner.kind, name=owner.metadata.name, controller=True)
        )


class OwnerReferencesValidator(BaseValidator):
    def __init__(self, build_runs: BuildRunOwnerStore) -> None:
        self._build_runs = build_runs

    @property
    def validator_type(self) -> ValidatorType:
        return ValidatorType.OWNER_REFERENCES

    async def validate(self, build: Build) -> ValidationFailure | None:
        runs = await self._build_runs.list_build_runs(build.metadata.namespace, build.metadata.name)

        if build.delete_runs_with_build:
            for run in runs:
                if run.metadata.owner_index(build.kind, build.metadata.name) != -1:
                    continue
                try:
                    set_controller_reference(build, run)
                except AlreadyOwnedError as exc:
                    return ValidationFailure(
                        reason=BuildReason.SET_OWNER_REFERENCE_FAILED,
                        message=f"unexpected error when trying to set the ownerreference: {exc}",
                    )
                if await self._update(run):
                    logger.info(
                        "Set owner reference of build %s on buildrun %s",
                        build.metadata.name,
                        run.metadata.name,
                    )
            return None

        for run in runs:
            idx = run.metadata.owner_index(build.kind, build.metadata.name)
            if idx == -1:
                continue
            del run.metadata.owner_references[idx]
            if await self._update(run):
                logger.info(
                    "Removed owner reference of build %s from buildrun %s",
                    build.metadata.name,
                    run.metadata.name,
                )
        return None

    async def _update(self, run: BuildRun) -> bool:
        """Write *run* back; a run deleted since it was listed is skipped."""
        try:
            await self._build_runs.update_build_run(run)
        except NotFoundError:
            logger.debug("BuildRun %s/%s disappeared, skipping", run.metadata.namespace, run.metadata.name)
            return False
        return True
