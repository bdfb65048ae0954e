"""TaskRun generation and TaskRun-to-BuildRun status mapping."""

from build_engine.resources.failures import (
    ResultEntry,
    parse_termination_message,
    update_buildrun_using_task_failures,
    update_buildrun_using_task_run_condition,
)
from build_engine.resources.taskrun import (
    TaskRunGenerationError,
    effective_build_spec,
    generate_task_run,
    generate_task_spec,
)

__all__ = [
    "ResultEntry",
    "TaskRunGenerationError",
    "effective_build_spec",
    "generate_task_run",
    "generate_task_spec",
    "parse_termination_message",
    "update_buildrun_using_task_failures",
    "update_buildrun_using_task_run_condition",
]
