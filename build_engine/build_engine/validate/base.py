"""Abstract base class and result type for build validators.

Every validation concern is a subclass of :class:`BaseValidator` keyed by a
:class:`ValidatorType` tag.  A validator inspects a build and either returns
``None`` (the concern is satisfied) or a :class:`ValidationFailure`
describing the semantic problem.  Validators never write to the build's
status; the chain runner applies the first failure it sees.

Infrastructure problems (an unreachable resource client, an expired
deadline) are raised as :class:`~build_engine.errors.TechnicalError` and
abort the whole pass.
"""

from __future__ import annotations

import abc
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from build_engine.models.build import Build, BuildReason


class ValidatorType(str, Enum):
    """Tag identifying one validation concern."""

    SECRETS = "secrets"
    STRATEGY = "strategy"
    SOURCE_URL = "sourceurl"
    SOURCE = "source"
    OUTPUT = "output"
    BUILD_NAME = "buildname"
    ENV = "env"
    OWNER_REFERENCES = "ownerreferences"
    TRIGGERS = "triggers"
    NODE_SELECTOR = "nodeselector"
    TOLERATIONS = "tolerations"
    SCHEDULER_NAME = "schedulername"


class ValidationFailure(BaseModel):
    """A semantic rule violation: the reason code and message to record in status."""

    model_config = ConfigDict(frozen=True)

    reason: BuildReason = Field(..., description="Status reason code.")
    message: str = Field(..., description="Human-readable explanation.")


class BaseValidator(abc.ABC):
    """Abstract base for all validators.

    Implementations receive their collaborators through the constructor and
    must not keep per-build state between calls.
    """

    @property
    @abc.abstractmethod
    def validator_type(self) -> ValidatorType:
        """The concern this validator checks."""

    @abc.abstractmethod
    async def validate(self, build: Build) -> ValidationFailure | None:
        """Check *build* and return the failure to record, if any.

        Raises
        ------
        TechnicalError
            When a collaborator needed for the check is unavailable.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.validator_type.value})"
