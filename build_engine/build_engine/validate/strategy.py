"""Validator for ``spec.strategy`` references."""

from __future__ import annotations

from build_engine.models.build import Build, BuildReason, BuildStrategyKind
from build_engine.validate.base import BaseValidator, ValidationFailure, ValidatorType
from build_engine.validate.capabilities import StrategyLookup


def unknown_kind_failure(kind: str | None) -> ValidationFailure:
    """Return the failure reported for a strategy reference of an unsupported *kind*."""
    return ValidationFailure(
        reason=BuildReason.UNKNOWN_BUILD_STRATEGY_KIND,
        message=(
            f"unknown strategy kind {kind} used, must be one of "
            f"{BuildStrategyKind.NAMESPACED.value}, {BuildStrategyKind.CLUSTER.value}"
        ),
    )


class StrategyValidator(BaseValidator):
    """The referenced strategy must exist; an unset kind means namespaced."""

    def __init__(self, strategies: StrategyLookup) -> None:
        self._strategies = strategies

    @property
    def validator_type(self) -> ValidatorType:
        return ValidatorType.STRATEGY

    async def validate(self, build: Build) -> ValidationFailure | None:
        ref = build.spec.strategy
        namespace = build.metadata.namespace
        try:
            kind = BuildStrategyKind(ref.resolved_kind)
        except ValueError:
            return unknown_kind_failure(ref.kind)

        strategy = await self._strategies.get_strategy(kind, namespace, ref.name)
        if strategy is not None:
            return None

        if kind is BuildStrategyKind.CLUSTER:
            return ValidationFailure(
                reason=BuildReason.CLUSTER_BUILD_STRATEGY_NOT_FOUND,
                message=f"clusterBuildStrategy {ref.name} does not exist",
            )
        return ValidationFailure(
            reason=BuildReason.BUILD_STRATEGY_NOT_FOUND,
            message=f"buildStrategy {ref.name} does not exist in namespace {namespace}",
        )
