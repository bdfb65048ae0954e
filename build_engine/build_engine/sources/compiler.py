"""Compile a build's source descriptors into ordered pipeline steps.

The default git source always produces the first step, named
``source-default``; auxiliary HTTP sources follow in declaration order.
Callers invoke :func:`amend_task_spec_with_sources` exactly once per task
spec they construct.
"""

from __future__ import annotations

import logging

from build_engine.config import Settings
from build_engine.models.build import BuildSpec
from build_engine.models.pipeline import TaskSpec
from build_engine.sources.git import append_git_step
from build_engine.sources.http import append_http_step
from build_engine.sources.naming import DEFAULT_SOURCE_NAME

logger = logging.getLogger(__name__)


def amend_task_spec_with_sources(settings: Settings, task_spec: TaskSpec, build_spec: BuildSpec) -> None:
    """Append one step per source of *build_spec* to *task_spec*."""
    if build_spec.source is not None and build_spec.has_source:
        append_git_step(settings, task_spec, build_spec.source, DEFAULT_SOURCE_NAME)

    # Only HTTP sources exist as auxiliary sources today.
    for source in build_spec.sources:
        append_http_step(settings, task_spec, source)

    logger.debug("Compiled source steps: %s", task_spec.step_names())
