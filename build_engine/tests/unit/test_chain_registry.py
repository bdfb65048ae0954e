"""Unit tests for the validator registry and the chain runner."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from build_engine.errors import ClientUnavailableError, TechnicalError, ValidationTimeoutError
from build_engine.models.build import ALL_VALIDATIONS_SUCCEEDED, Build, BuildReason, BuildStatus
from build_engine.models.meta import ConditionStatus
from build_engine.testing import StaticRepositoryProbe, make_build
from build_engine.validate.base import BaseValidator, ValidationFailure, ValidatorType
from build_engine.validate.chain import apply_result, run_all
from build_engine.validate.credentials import CredentialsValidator
from build_engine.validate.env import EnvValidator
from build_engine.validate.registry import (
    BUILD_VALIDATIONS,
    INLINE_BUILD_VALIDATIONS,
    ValidatorDependencies,
    ValidatorRegistry,
    create_default_registry,
    new_validation,
)


class _Recording(BaseValidator):
    """Validator returning a canned result and recording its calls."""

    def __init__(self, tag: ValidatorType, failure: ValidationFailure | None = None) -> None:
        self._tag = tag
        self._failure = failure
        self.calls = 0

    @property
    def validator_type(self) -> ValidatorType:
        return self._tag

    async def validate(self, build: Build) -> ValidationFailure | None:
        self.calls += 1
        return self._failure


class _Slow(_Recording):
    async def validate(self, build: Build) -> ValidationFailure | None:
        await asyncio.sleep(10)
        return None


class _Broken(_Recording):
    async def validate(self, build: Build) -> ValidationFailure | None:
        raise ClientUnavailableError("control plane unreachable")


def _deps() -> ValidatorDependencies:
    return ValidatorDependencies(
        secrets=AsyncMock(),
        strategies=AsyncMock(),
        probe=StaticRepositoryProbe(),
        build_runs=AsyncMock(),
    )


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class TestValidatorRegistry:
    def test_default_registry_covers_every_type(self):
        registry = create_default_registry()
        assert len(registry) == len(ValidatorType)
        assert set(registry.get_types()) == set(ValidatorType)

    def test_build_chain_keeps_priority_order(self):
        chain = create_default_registry().build_chain(BUILD_VALIDATIONS, _deps())
        assert [v.validator_type for v in chain] == list(BUILD_VALIDATIONS)

    def test_inline_chain_skips_build_only_checks(self):
        assert ValidatorType.BUILD_NAME not in INLINE_BUILD_VALIDATIONS
        assert ValidatorType.OWNER_REFERENCES not in INLINE_BUILD_VALIDATIONS
        assert ValidatorType.TRIGGERS not in INLINE_BUILD_VALIDATIONS
        assert INLINE_BUILD_VALIDATIONS[0] == ValidatorType.SCHEDULER_NAME

    def test_create_by_string_tag(self):
        validator = create_default_registry().create("secrets", _deps())
        assert isinstance(validator, CredentialsValidator)

    def test_unknown_tag_rejected(self):
        with pytest.raises(ValueError, match="unknown validation type 'nosuch'"):
            create_default_registry().create("nosuch", _deps())

    def test_unregistered_tag_rejected(self):
        registry = ValidatorRegistry()
        with pytest.raises(ValueError, match="unknown validation type"):
            registry.create(ValidatorType.ENV, _deps())

    def test_duplicate_registration_rejected(self):
        registry = create_default_registry()
        with pytest.raises(ValueError, match="already registered"):
            registry.register(ValidatorType.ENV, lambda deps: EnvValidator())

    def test_unregister(self):
        registry = create_default_registry()
        registry.unregister(ValidatorType.TRIGGERS)
        assert ValidatorType.TRIGGERS not in registry
        with pytest.raises(KeyError):
            registry.unregister(ValidatorType.TRIGGERS)

    def test_missing_capability_rejected(self):
        with pytest.raises(ValueError, match="requires the secrets capability"):
            create_default_registry().create(ValidatorType.SECRETS, ValidatorDependencies())


class TestNewValidation:
    def test_pure_validators_need_no_capabilities(self):
        assert isinstance(new_validation("env", ValidatorDependencies()), EnvValidator)

    def test_unknown_tag(self):
        with pytest.raises(ValueError):
            new_validation("bogus", ValidatorDependencies())


# ---------------------------------------------------------------------------
# Chain runner
# ---------------------------------------------------------------------------


class TestRunAll:
    @pytest.mark.asyncio
    async def test_all_pass(self):
        validators = [_Recording(ValidatorType.ENV), _Recording(ValidatorType.OUTPUT)]
        assert await run_all(make_build(), validators) is None
        assert [v.calls for v in validators] == [1, 1]

    @pytest.mark.asyncio
    async def test_first_failure_wins(self):
        first = _Recording(
            ValidatorType.ENV,
            ValidationFailure(reason=BuildReason.SPEC_ENV_NAME_CAN_NOT_BE_BLANK, message="first"),
        )
        second = _Recording(
            ValidatorType.OUTPUT,
            ValidationFailure(reason=BuildReason.OUTPUT_TIMESTAMP_NOT_VALID, message="second"),
        )

        failure = await run_all(make_build(), [first, second])

        assert failure.message == "first"
        assert second.calls == 0

    @pytest.mark.asyncio
    async def test_later_failure_reported_when_earlier_pass(self):
        second = _Recording(
            ValidatorType.OUTPUT,
            ValidationFailure(reason=BuildReason.OUTPUT_TIMESTAMP_NOT_VALID, message="second"),
        )
        failure = await run_all(make_build(), [_Recording(ValidatorType.ENV), second])
        assert failure.reason == BuildReason.OUTPUT_TIMESTAMP_NOT_VALID

    @pytest.mark.asyncio
    async def test_technical_error_aborts_chain(self):
        after = _Recording(ValidatorType.OUTPUT)
        with pytest.raises(TechnicalError):
            await run_all(make_build(), [_Broken(ValidatorType.SECRETS), after])
        assert after.calls == 0

    @pytest.mark.asyncio
    async def test_deadline_raises_timeout_error(self):
        after = _Recording(ValidatorType.OUTPUT)
        with pytest.raises(ValidationTimeoutError):
            await run_all(make_build(), [_Slow(ValidatorType.SOURCE_URL), after], timeout=0.01)
        assert after.calls == 0

    def test_timeout_error_is_technical(self):
        assert issubclass(ValidationTimeoutError, TechnicalError)

    @pytest.mark.asyncio
    async def test_build_is_not_mutated(self):
        build = make_build()
        failing = _Recording(
            ValidatorType.ENV,
            ValidationFailure(reason=BuildReason.SPEC_ENV_NAME_CAN_NOT_BE_BLANK, message="blank"),
        )
        await run_all(build, [failing])
        assert build.status == BuildStatus()


class TestApplyResult:
    def test_failure(self):
        status = BuildStatus()
        apply_result(status, ValidationFailure(reason=BuildReason.BUILD_NAME_INVALID, message="bad name"))
        assert status.registered == ConditionStatus.FALSE
        assert status.reason == BuildReason.BUILD_NAME_INVALID
        assert status.message == "bad name"

    def test_success(self):
        status = BuildStatus(
            registered=ConditionStatus.FALSE, reason=BuildReason.BUILD_NAME_INVALID, message="stale"
        )
        apply_result(status, None)
        assert status.registered == ConditionStatus.TRUE
        assert status.reason == BuildReason.SUCCEEDED
        assert status.message == ALL_VALIDATIONS_SUCCEEDED
