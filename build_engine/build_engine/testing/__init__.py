"""Test doubles and model factories for the build engine's collaborators."""

from build_engine.testing.factories import (
    NAMESPACE,
    make_build,
    make_build_run,
    make_secret,
    make_strategy,
    make_task_run,
    termination_message,
)
from build_engine.testing.fakes import FakeClient, StaticRepositoryProbe

__all__ = [
    "FakeClient",
    "NAMESPACE",
    "StaticRepositoryProbe",
    "make_build",
    "make_build_run",
    "make_secret",
    "make_strategy",
    "make_task_run",
    "termination_message",
]
