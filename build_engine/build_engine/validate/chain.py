"""Chain runner: executes validators in priority order.

Validators run strictly one after another.  The first one that reports a
:class:`ValidationFailure` ends the chain; validators after it are not
executed in this pass, so the recorded status always names the
highest-priority problem.  A :class:`~build_engine.errors.TechnicalError`
from any validator aborts the chain immediately and propagates.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from build_engine.errors import ValidationTimeoutError
from build_engine.models.build import ALL_VALIDATIONS_SUCCEEDED, Build, BuildReason, BuildStatus
from build_engine.models.meta import ConditionStatus
from build_engine.validate.base import BaseValidator, ValidationFailure

logger = logging.getLogger(__name__)


async def run_all(
    build: Build,
    validators: Sequence[BaseValidator],
    *,
    timeout: float | None = None,
) -> ValidationFailure | None:
    """Run *validators* against *build* and return the first failure.

    Parameters
    ----------
    build:
        The build to validate.  Validators only read it (the owner
        reference validator updates dependent runs, not the build).
    validators:
        Validators in priority order.
    timeout:
        Deadline in seconds for the whole chain; ``None`` waits forever.

    Returns
    -------
    ValidationFailure | None
        The failure of the first validator that reported one, or ``None``
        when every validator passed.

    Raises
    ------
    TechnicalError
        Propagated from a validator, or :class:`ValidationTimeoutError`
        when the deadline expires.
    """
    try:
        async with asyncio.timeout(timeout):
            for validator in validators:
                failure = await validator.validate(build)
                if failure is not None:
                    logger.info(
                        "Validation %s failed for %s/%s: %s",
                        validator.validator_type.value,
                        build.metadata.namespace,
                        build.metadata.name,
                        failure.reason.value,
                    )
                    return failure
    except TimeoutError as exc:
        raise ValidationTimeoutError(
            f"validation of {build.metadata.namespace}/{build.metadata.name} did not finish within {timeout}s"
        ) from exc
    return None


def apply_result(status: BuildStatus, failure: ValidationFailure | None) -> None:
    """Write the chain outcome onto *status*.

    A failure marks the build as not registered; no failure marks it as
    registered with reason ``Succeeded``.
    """
    if failure is not None:
        status.registered = ConditionStatus.FALSE
        status.reason = failure.reason
        status.message = failure.message
        return
    status.registered = ConditionStatus.TRUE
    status.reason = BuildReason.SUCCEEDED
    status.message = ALL_VALIDATIONS_SUCCEEDED
