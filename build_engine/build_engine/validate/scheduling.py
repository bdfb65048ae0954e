"""Validators for pod placement fields: scheduler name, node selector, tolerations."""

from __future__ import annotations

from build_engine.models.build import Build, BuildReason
from build_engine.validate.base import BaseValidator, ValidationFailure, ValidatorType
from build_engine.validate.labels import is_qualified_name, is_valid_label_value

_TOLERATION_OPERATORS = frozenset({"Exists", "Equal"})
_SUPPORTED_TAINT_EFFECT = "NoSchedule"


class SchedulerNameValidator(BaseValidator):
    """``spec.scheduler_name``, when set, must be a qualified name."""

    @property
    def validator_type(self) -> ValidatorType:
        return ValidatorType.SCHEDULER_NAME

    async def validate(self, build: Build) -> ValidationFailure | None:
        name = build.spec.scheduler_name
        if not name:
            return None
        errs = is_qualified_name(name)
        if errs:
            return ValidationFailure(reason=BuildReason.SCHEDULER_NAME_NOT_VALID, message=", ".join(errs))
        return None


class NodeSelectorValidator(BaseValidator):
    """Every node selector key must be a qualified name and every value a label value."""

    @property
    def validator_type(self) -> ValidatorType:
        return ValidatorType.NODE_SELECTOR

    async def validate(self, build: Build) -> ValidationFailure | None:
        for key in sorted(build.spec.node_selector):
            errs = is_qualified_name(key) + is_valid_label_value(build.spec.node_selector[key])
            if errs:
                return ValidationFailure(reason=BuildReason.NODE_SELECTOR_NOT_VALID, message=", ".join(errs))
        return None


class TolerationsValidator(BaseValidator):
    """Checks key, operator, value and effect of every toleration."""

    @property
    def validator_type(self) -> ValidatorType:
        return ValidatorType.TOLERATIONS

    async def validate(self, build: Build) -> ValidationFailure | None:
        for toleration in build.spec.tolerations:
            errs = is_qualified_name(toleration.key)
            if errs:
                return self._fail(", ".join(errs))

            if toleration.operator not in _TOLERATION_OPERATORS:
                return self._fail("Toleration operator not valid. Must be one of 'Exists', 'Equal'")

            errs = is_valid_label_value(toleration.value)
            if errs:
                return self._fail(", ".join(errs))

            if toleration.effect and toleration.effect != _SUPPORTED_TAINT_EFFECT:
                return self._fail("Only the 'NoSchedule' toleration effect is supported.")
        return None

    @staticmethod
    def _fail(message: str) -> ValidationFailure:
        return ValidationFailure(reason=BuildReason.TOLERATION_NOT_VALID, message=message)
