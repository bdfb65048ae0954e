"""Validator for secret references (clone secret, push secret)."""

from __future__ import annotations

import logging

from build_engine.models.build import Build, BuildReason
from build_engine.validate.base import BaseValidator, ValidationFailure, ValidatorType
from build_engine.validate.capabilities import SecretLookup

logger = logging.getLogger(__name__)


class CredentialsValidator(BaseValidator):
    """Every secret referenced by the build must exist in the build's namespace.

    A single missing secret is reported with a reason specific to where it
    is referenced.  Several missing secrets are reported together, sorted by
    name so the message is stable across passes.
    """

    def __init__(self, secrets: SecretLookup) -> None:
        self._secrets = secrets

    @property
    def validator_type(self) -> ValidatorType:
        return ValidatorType.SECRETS

    async def validate(self, build: Build) -> ValidationFailure | None:
        referenced: dict[str, BuildReason] = {}
        if build.spec.source is not None and build.spec.source.clone_secret:
            referenced[build.spec.source.clone_secret] = BuildReason.SPEC_SOURCE_SECRET_REF_NOT_FOUND
        if build.spec.output.push_secret:
            referenced.setdefault(build.spec.output.push_secret, BuildReason.SPEC_OUTPUT_SECRET_REF_NOT_FOUND)

        missing: list[str] = []
        for name in referenced:
            if not await self._secrets.secret_exists(build.metadata.namespace, name):
                logger.debug("Secret %s/%s not found", build.metadata.namespace, name)
                missing.append(name)

        if not missing:
            return None
        if len(missing) == 1:
            return ValidationFailure(
                reason=referenced[missing[0]],
                message=f"referenced secret {missing[0]} not found",
            )
        return ValidationFailure(
            reason=BuildReason.MULTIPLE_SECRET_REF_NOT_FOUND,
            message=f"missing secrets are {','.join(sorted(missing))}",
        )
