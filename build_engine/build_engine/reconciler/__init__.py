"""Reconcilers for Build and BuildRun resources."""

from build_engine.errors import NotFoundError
from build_engine.reconciler.build import BuildReconciler
from build_engine.reconciler.buildrun import BuildRunReconciler
from build_engine.reconciler.client import Request, ResourceClient, Result
from build_engine.reconciler.requeue import RequeueConfig, reconcile_with_backoff

__all__ = [
    "BuildReconciler",
    "BuildRunReconciler",
    "NotFoundError",
    "Request",
    "RequeueConfig",
    "ResourceClient",
    "Result",
    "reconcile_with_backoff",
]
