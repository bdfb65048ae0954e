"""Validator registry: maps each :class:`ValidatorType` tag to a factory.

Factories receive a :class:`ValidatorDependencies` bundle and pick out
only the capability their validator needs.  Asking for a validator whose
capability was not supplied is a programming error and raises
``ValueError``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import TypeVar

from build_engine.validate.base import BaseValidator, ValidatorType
from build_engine.validate.build_name import BuildNameValidator
from build_engine.validate.capabilities import (
    BuildRunOwnerStore,
    RepositoryProbe,
    SecretLookup,
    StrategyLookup,
)
from build_engine.validate.credentials import CredentialsValidator
from build_engine.validate.env import EnvValidator
from build_engine.validate.output import OutputValidator
from build_engine.validate.owner_references import OwnerReferencesValidator
from build_engine.validate.scheduling import (
    NodeSelectorValidator,
    SchedulerNameValidator,
    TolerationsValidator,
)
from build_engine.validate.source_url import SourceURLValidator
from build_engine.validate.sources import SourcesValidator
from build_engine.validate.strategy import StrategyValidator
from build_engine.validate.triggers import TriggersValidator

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Priority order for Build resources: the first failing concern is the one
# recorded in status.
BUILD_VALIDATIONS: tuple[ValidatorType, ...] = (
    ValidatorType.SCHEDULER_NAME,
    ValidatorType.NODE_SELECTOR,
    ValidatorType.TOLERATIONS,
    ValidatorType.ENV,
    ValidatorType.SECRETS,
    ValidatorType.STRATEGY,
    ValidatorType.SOURCE_URL,
    ValidatorType.SOURCE,
    ValidatorType.OUTPUT,
    ValidatorType.BUILD_NAME,
    ValidatorType.OWNER_REFERENCES,
    ValidatorType.TRIGGERS,
)

# Inline build specs embedded in a BuildRun have no name of their own, no
# dependent runs and no triggers.
INLINE_BUILD_VALIDATIONS: tuple[ValidatorType, ...] = tuple(
    t
    for t in BUILD_VALIDATIONS
    if t not in (ValidatorType.BUILD_NAME, ValidatorType.OWNER_REFERENCES, ValidatorType.TRIGGERS)
)


@dataclass(frozen=True)
class ValidatorDependencies:
    """Capabilities available to validator factories."""

    secrets: SecretLookup | None = None
    strategies: StrategyLookup | None = None
    probe: RepositoryProbe | None = None
    build_runs: BuildRunOwnerStore | None = None


ValidatorFactory = Callable[[ValidatorDependencies], BaseValidator]


def _require(dependency: T | None, name: str, validator_type: ValidatorType) -> T:
    if dependency is None:
        raise ValueError(f"Validator {validator_type.value} requires the {name} capability.")
    return dependency


_DEFAULT_FACTORIES: dict[ValidatorType, ValidatorFactory] = {
    ValidatorType.SECRETS: lambda deps: CredentialsValidator(_require(deps.secrets, "secrets", ValidatorType.SECRETS)),
    ValidatorType.STRATEGY: lambda deps: StrategyValidator(
        _require(deps.strategies, "strategies", ValidatorType.STRATEGY)
    ),
    ValidatorType.SOURCE_URL: lambda deps: SourceURLValidator(_require(deps.probe, "probe", ValidatorType.SOURCE_URL)),
    ValidatorType.SOURCE: lambda deps: SourcesValidator(),
    ValidatorType.OUTPUT: lambda deps: OutputValidator(),
    ValidatorType.BUILD_NAME: lambda deps: BuildNameValidator(),
    ValidatorType.ENV: lambda deps: EnvValidator(),
    ValidatorType.OWNER_REFERENCES: lambda deps: OwnerReferencesValidator(
        _require(deps.build_runs, "build_runs", ValidatorType.OWNER_REFERENCES)
    ),
    ValidatorType.TRIGGERS: lambda deps: TriggersValidator(),
    ValidatorType.NODE_SELECTOR: lambda deps: NodeSelectorValidator(),
    ValidatorType.TOLERATIONS: lambda deps: TolerationsValidator(),
    ValidatorType.SCHEDULER_NAME: lambda deps: SchedulerNameValidator(),
}


class ValidatorRegistry:
    """Registry of validator factories keyed by :class:`ValidatorType`."""

    def __init__(self) -> None:
        self._factories: dict[ValidatorType, ValidatorFactory] = {}

    def register(self, validator_type: ValidatorType, factory: ValidatorFactory) -> None:
        """Register *factory* for *validator_type*.

        Raises
        ------
        ValueError
            If a factory for the same type is already registered.
        """
        if validator_type in self._factories:
            raise ValueError(
                f"Validator type {validator_type.value} is already registered. "
                f"Unregister the existing factory first."
            )
        self._factories[validator_type] = factory
        logger.debug("Registered validator type: %s", validator_type.value)

    def unregister(self, validator_type: ValidatorType) -> None:
        """Remove the factory for *validator_type*.

        Raises
        ------
        KeyError
            If the type is not registered.
        """
        if validator_type not in self._factories:
            raise KeyError(f"Validator type {validator_type.value} is not registered.")
        del self._factories[validator_type]

    def create(self, validator_type: ValidatorType | str, deps: ValidatorDependencies) -> BaseValidator:
        """Instantiate the validator registered for *validator_type*.

        Raises
        ------
        ValueError
            If the tag is unknown, not registered, or its capability is missing.
        """
        tag = _parse_tag(validator_type)
        factory = self._factories.get(tag)
        if factory is None:
            raise ValueError(f"unknown validation type {tag.value!r}")
        return factory(deps)

    def build_chain(
        self,
        validator_types: Iterable[ValidatorType | str],
        deps: ValidatorDependencies,
    ) -> list[BaseValidator]:
        """Instantiate validators in the given (priority) order."""
        return [self.create(t, deps) for t in validator_types]

    def get_types(self) -> list[ValidatorType]:
        """Return all registered types, sorted by tag."""
        return sorted(self._factories, key=lambda t: t.value)

    def __len__(self) -> int:
        return len(self._factories)

    def __contains__(self, validator_type: ValidatorType) -> bool:
        return validator_type in self._factories


def create_default_registry() -> ValidatorRegistry:
    """Create a registry with every built-in validator registered."""
    registry = ValidatorRegistry()
    for validator_type, factory in _DEFAULT_FACTORIES.items():
        registry.register(validator_type, factory)
    return registry


def new_validation(validator_type: ValidatorType | str, deps: ValidatorDependencies) -> BaseValidator:
    """Instantiate a built-in validator by tag."""
    return _DEFAULT_FACTORIES[_parse_tag(validator_type)](deps)


def _parse_tag(validator_type: ValidatorType | str) -> ValidatorType:
    try:
        return ValidatorType(validator_type)
    except ValueError as exc:
        raise ValueError(f"unknown validation type {validator_type!r}") from exc
