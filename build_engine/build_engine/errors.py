"""Exception hierarchy for technical (retryable) failures.

Semantic problems with a resource are never raised: validators return a
:class:`~build_engine.validate.base.ValidationFailure` value and the
reconciler records it in status.  Everything defined here means "abort the
pass and let the caller try again later".
"""

from __future__ import annotations


class BuildEngineError(Exception):
    """Base class for all errors raised by the build engine."""


class TechnicalError(BuildEngineError):
    """A transient infrastructure failure; the reconciliation pass must be retried."""


class ClientUnavailableError(TechnicalError):
    """The resource client could not be reached or returned an unexpected error."""


class ValidationTimeoutError(TechnicalError):
    """The validation chain did not finish before its deadline."""


class StatusConflictError(TechnicalError):
    """A status write was rejected because the resource version is stale."""


class NotFoundError(BuildEngineError):
    """The requested object does not exist."""

    def __init__(self, kind: str, namespace: str, name: str) -> None:
        self.kind = kind
        self.namespace = namespace
        self.name = name
        super().__init__(f"{kind} {namespace}/{name} not found" if namespace else f"{kind} {name} not found")
