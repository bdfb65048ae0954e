"""Source step builders and the source compiler."""

from build_engine.sources.compiler import amend_task_spec_with_sources
from build_engine.sources.git import append_git_step, git_step
from build_engine.sources.http import append_http_step, http_step

__all__ = [
    "amend_task_spec_with_sources",
    "append_git_step",
    "append_http_step",
    "git_step",
    "http_step",
]
