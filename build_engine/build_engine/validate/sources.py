"""Validator for auxiliary ``spec.sources`` entries."""

from __future__ import annotations

from urllib.parse import urlparse

from build_engine.models.build import Build, BuildReason
from build_engine.sources.naming import DEFAULT_SOURCE_NAME
from build_engine.validate.base import BaseValidator, ValidationFailure, ValidatorType


class SourcesValidator(BaseValidator):
    """Auxiliary source names must be set and unique, URLs must be HTTP(S).

    Names become step names in the compiled pipeline, so they may not
    collide with each other or with the default source.
    """

    @property
    def validator_type(self) -> ValidatorType:
        return ValidatorType.SOURCE

    async def validate(self, build: Build) -> ValidationFailure | None:
        seen: set[str] = {DEFAULT_SOURCE_NAME}
        for source in build.spec.sources:
            name = source.name.strip()
            if not name:
                return ValidationFailure(
                    reason=BuildReason.SOURCE_NAME_CAN_NOT_BE_BLANK,
                    message="name for source must not be blank",
                )
            if name in seen:
                return ValidationFailure(
                    reason=BuildReason.SOURCE_NAME_NOT_UNIQUE,
                    message=f"source name {name!r} is not unique",
                )
            seen.add(name)

            parsed = urlparse(source.url)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                return ValidationFailure(
                    reason=BuildReason.SOURCE_URL_NOT_VALID,
                    message=f"source {name!r} has an invalid URL {source.url!r}, must be http or https",
                )
        return None
