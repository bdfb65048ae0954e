"""Validator for ``spec.env`` entries."""

from __future__ import annotations

from build_engine.models.build import Build, BuildReason, EnvVar
from build_engine.validate.base import BaseValidator, ValidationFailure, ValidatorType


def check_env_vars(env: list[EnvVar]) -> ValidationFailure | None:
    """Return the first problem found in *env*, or ``None``.

    A name must not be blank, and exactly one of ``value`` or
    ``value_from`` must be given.  An empty ``value`` counts as unset.
    Shared with the BuildRun reconciler, which applies the same rules to
    run-level overrides.
    """
    for env_var in env:
        if not env_var.name.strip():
            return ValidationFailure(
                reason=BuildReason.SPEC_ENV_NAME_CAN_NOT_BE_BLANK,
                message="name for environment variable must not be blank",
            )
        has_value = bool(env_var.value)
        has_value_from = env_var.value_from is not None
        if has_value == has_value_from:
            return ValidationFailure(
                reason=BuildReason.SPEC_ENV_ONLY_ONE_OF_VALUE_OR_VALUE_FROM,
                message="only one of value or valueFrom must be specified",
            )
    return None


class EnvValidator(BaseValidator):
    @property
    def validator_type(self) -> ValidatorType:
        return ValidatorType.ENV

    async def validate(self, build: Build) -> ValidationFailure | None:
        return check_env_vars(build.spec.env)
