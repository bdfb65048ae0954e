"""Validator for ``spec.trigger.when`` entries."""

from __future__ import annotations

from build_engine.models.build import Build, BuildReason, GitHubEventName, TriggerType, TriggerWhen
from build_engine.validate.base import BaseValidator, ValidationFailure, ValidatorType

_GITHUB_EVENTS = frozenset(e.value for e in GitHubEventName)


def _check_github(when: TriggerWhen) -> ValidationFailure | None:
    if when.github is None:
        return _fail(BuildReason.TRIGGER_INVALID_GITHUB_WEBHOOK, when, "missing required attribute `.github`")
    if not when.github.events:
        return _fail(BuildReason.TRIGGER_INVALID_GITHUB_WEBHOOK, when, "missing required attribute `.github.events`")
    for event in when.github.events:
        if event not in _GITHUB_EVENTS:
            return _fail(BuildReason.TRIGGER_INVALID_GITHUB_WEBHOOK, when, f"unsupported GitHub event {event!r}")
    return None


def _check_image(when: TriggerWhen) -> ValidationFailure | None:
    if when.image is None:
        return _fail(BuildReason.TRIGGER_INVALID_IMAGE, when, "missing required attribute `.image`")
    if not when.image.names:
        return _fail(BuildReason.TRIGGER_INVALID_IMAGE, when, "missing required attribute `.image.names`")
    return None


def _check_pipeline(when: TriggerWhen) -> ValidationFailure | None:
    ref = when.object_ref
    if ref is None:
        return _fail(BuildReason.TRIGGER_INVALID_PIPELINE, when, "missing required attribute `.objectRef`")
    if not ref.status:
        return _fail(BuildReason.TRIGGER_INVALID_PIPELINE, when, "missing required attribute `.objectRef.status`")
    if not ref.name and not ref.selector:
        return _fail(
            BuildReason.TRIGGER_INVALID_PIPELINE,
            when,
            "missing required attribute `.objectRef.name` or `.objectRef.selector`",
        )
    if ref.name and ref.selector:
        return _fail(
            BuildReason.TRIGGER_INVALID_PIPELINE,
            when,
            "contains `.objectRef.name` and `.objectRef.selector`, must be only one",
        )
    return None


def _fail(reason: BuildReason, when: TriggerWhen, detail: str) -> ValidationFailure:
    return ValidationFailure(reason=reason, message=f"{when.name!r} {detail}")


_CHECKS = {
    TriggerType.GITHUB.value: _check_github,
    TriggerType.IMAGE.value: _check_image,
    TriggerType.PIPELINE.value: _check_pipeline,
}


class TriggersValidator(BaseValidator):
    @property
    def validator_type(self) -> ValidatorType:
        return ValidatorType.TRIGGERS

    async def validate(self, build: Build) -> ValidationFailure | None:
        if build.spec.trigger is None:
            return None
        for when in build.spec.trigger.when:
            check = _CHECKS.get(when.type)
            if check is None:
                return ValidationFailure(
                    reason=BuildReason.TRIGGER_INVALID_TYPE,
                    message=f"{when.name!r} contains an invalid type {when.type!r}",
                )
            failure = check(when)
            if failure is not None:
                return failure
        return None
