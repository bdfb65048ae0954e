"""Validator for ``metadata.name``."""

from __future__ import annotations

from build_engine.models.build import Build, BuildReason
from build_engine.validate.base import BaseValidator, ValidationFailure, ValidatorType
from build_engine.validate.labels import is_valid_label_value


class BuildNameValidator(BaseValidator):
    """The build name is copied into run labels, so it must be a valid label value."""

    @property
    def validator_type(self) -> ValidatorType:
        return ValidatorType.BUILD_NAME

    async def validate(self, build: Build) -> ValidationFailure | None:
        errs = is_valid_label_value(build.metadata.name)
        if errs:
            return ValidationFailure(reason=BuildReason.BUILD_NAME_INVALID, message=", ".join(errs))
        return None
