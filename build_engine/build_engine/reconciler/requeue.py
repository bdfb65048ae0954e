"""Re-run reconciliation passes that failed for technical reasons.

A pass that raises :class:`~build_engine.errors.TechnicalError` wrote no
status, so running it again from scratch is safe.  The wait between
passes doubles each time up to a ceiling, spread by a jitter fraction so
many resources failing together do not retry in lockstep.  Any other
exception propagates on the first pass.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field

from build_engine.config import Settings
from build_engine.errors import TechnicalError
from build_engine.reconciler.client import Request, Result

logger = logging.getLogger(__name__)


class Reconciler(Protocol):
    async def reconcile(self, request: Request) -> Result: ...


class RequeueConfig(BaseModel):
    """How often, and how patiently, a failed pass is re-run."""

    model_config = ConfigDict(frozen=True)

    max_retries: int = Field(default=5, ge=0, description="Passes re-run after the first before giving up.")
    base_delay: float = Field(default=1.0, gt=0.0, description="Seconds to wait before the first re-run.")
    max_delay: float = Field(default=60.0, gt=0.0, description="Longest wait between two passes, in seconds.")
    jitter: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Each wait is scaled by a random factor in [1 - jitter, 1 + jitter]; 0 disables.",
    )

    @classmethod
    def from_settings(cls, settings: Settings) -> RequeueConfig:
        return cls(
            max_retries=settings.requeue_max_retries,
            base_delay=settings.requeue_base_delay,
            max_delay=settings.requeue_max_delay,
        )

    def delay_for(self, retry: int) -> float:
        """Seconds to wait before re-run number *retry* (counting from 0)."""
        delay = min(self.base_delay * 2**retry, self.max_delay)
        if self.jitter:
            delay *= 1.0 + random.uniform(-self.jitter, self.jitter)  # noqa: S311
        return delay


async def reconcile_with_backoff(
    reconciler: Reconciler,
    request: Request,
    config: RequeueConfig | None = None,
) -> Result:
    """Reconcile *request*, re-running the pass while it fails technically.

    Parameters
    ----------
    reconciler:
        A Build or BuildRun reconciler.
    request:
        The resource to reconcile.
    config:
        Requeue limits; defaults to :class:`RequeueConfig`.

    Raises
    ------
    TechnicalError
        The error of the final pass once ``max_retries`` re-runs failed.
    """
    config = config or RequeueConfig()
    retry = 0
    while True:
        try:
            return await reconciler.reconcile(request)
        except TechnicalError as exc:
            if retry >= config.max_retries:
                logger.error(
                    "Giving up on %s/%s after %d passes: %s",
                    request.namespace,
                    request.name,
                    retry + 1,
                    exc,
                )
                raise
            delay = config.delay_for(retry)
            retry += 1
            logger.warning(
                "Pass for %s/%s failed (%s), requeue %d/%d in %.1fs",
                request.namespace,
                request.name,
                exc,
                retry,
                config.max_retries,
                delay,
            )
            await asyncio.sleep(delay)
