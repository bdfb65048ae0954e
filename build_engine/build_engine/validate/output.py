"""Validator for ``spec.output``."""

from __future__ import annotations

import re

from build_engine.models.build import Build, BuildReason, OutputTimestamp
from build_engine.validate.base import BaseValidator, ValidationFailure, ValidatorType

_EPOCH_RE = re.compile(r"[+-]?\d+")
_KEYWORDS = frozenset(t.value for t in OutputTimestamp)


class OutputValidator(BaseValidator):
    """The image timestamp must be a known keyword or an integer epoch.

    ``SourceTimestamp`` needs a source to take the timestamp from.
    """

    @property
    def validator_type(self) -> ValidatorType:
        return ValidatorType.OUTPUT

    async def validate(self, build: Build) -> ValidationFailure | None:
        timestamp = build.spec.output.timestamp
        if timestamp is None:
            return None

        if timestamp == OutputTimestamp.SOURCE.value and not build.spec.has_source:
            return ValidationFailure(
                reason=BuildReason.OUTPUT_TIMESTAMP_NOT_SUPPORTED,
                message="cannot use SourceTimestamp output image setting with an empty build source",
            )

        if timestamp in _KEYWORDS or _EPOCH_RE.fullmatch(timestamp):
            return None

        return ValidationFailure(
            reason=BuildReason.OUTPUT_TIMESTAMP_NOT_VALID,
            message="output timestamp value is invalid, must be Zero, SourceTimestamp, BuildTimestamp, or number",
        )
