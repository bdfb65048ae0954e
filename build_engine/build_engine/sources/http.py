"""Step builder for HTTP sources."""

from __future__ import annotations

import shlex

from build_engine.config import Settings
from build_engine.models.build import HttpSource
from build_engine.models.pipeline import Step, TaskSpec
from build_engine.sources.naming import PARAM_SOURCE_ROOT, param_ref, prefixed, source_step_name


def http_step(settings: Settings, source: HttpSource) -> Step:
    """Return a step downloading *source* into the source root; performs no I/O."""
    return Step(
        name=source_step_name(source.name),
        image=settings.remote_artifacts_image,
        command=["/bin/sh"],
        args=["-e", "-x", "-c", f"wget {shlex.quote(source.url)}"],
        working_dir=param_ref(prefixed(settings.result_prefix, PARAM_SOURCE_ROOT)),
    )


def append_http_step(settings: Settings, task_spec: TaskSpec, source: HttpSource) -> None:
    task_spec.steps.append(http_step(settings, source))
