"""Step builder for git sources."""

from __future__ import annotations

from build_engine.config import Settings
from build_engine.models.build import GitSource
from build_engine.models.pipeline import Step, TaskSpec, Volume, VolumeMount
from build_engine.sources.naming import (
    PARAM_SOURCE_ROOT,
    RESULT_ERROR_MESSAGE,
    RESULT_ERROR_REASON,
    param_ref,
    prefixed,
    result_path,
    secret_mount_path,
    secret_volume_name,
    source_result,
    source_step_name,
)


def git_step(settings: Settings, source: GitSource, name: str) -> Step:
    """Return the clone step for *source*; performs no I/O.

    The step writes the checked-out commit and its author as results, and
    on failure writes an error reason and message the result extractor
    picks up from the termination message.
    """
    prefix = settings.result_prefix
    args = [
        "--url",
        source.url,
        "--target",
        param_ref(prefixed(prefix, PARAM_SOURCE_ROOT)),
        "--result-file-commit-sha",
        result_path(source_result(prefix, name, "commit-sha")),
        "--result-file-commit-author",
        result_path(source_result(prefix, name, "commit-author")),
        "--result-file-error-message",
        result_path(prefixed(prefix, RESULT_ERROR_MESSAGE)),
        "--result-file-error-reason",
        result_path(prefixed(prefix, RESULT_ERROR_REASON)),
    ]
    if source.revision:
        args += ["--revision", source.revision]

    volume_mounts: list[VolumeMount] = []
    if source.clone_secret:
        args += ["--secret-path", secret_mount_path(prefix, source.clone_secret)]
        volume_mounts.append(
            VolumeMount(
                name=secret_volume_name(prefix, source.clone_secret),
                mount_path=secret_mount_path(prefix, source.clone_secret),
                read_only=True,
            )
        )

    return Step(
        name=source_step_name(name),
        image=settings.git_container_image,
        command=[settings.git_container_command],
        args=args,
        volume_mounts=volume_mounts,
    )


def append_git_step(settings: Settings, task_spec: TaskSpec, source: GitSource, name: str) -> None:
    """Append the clone step for *source* to *task_spec* with its results and volumes."""
    prefix = settings.result_prefix
    task_spec.add_result(source_result(prefix, name, "commit-sha"), "The commit SHA of the cloned source.")
    task_spec.add_result(source_result(prefix, name, "commit-author"), "The author of the cloned commit.")
    task_spec.add_result(prefixed(prefix, RESULT_ERROR_REASON), "Reason of a failed source step.")
    task_spec.add_result(prefixed(prefix, RESULT_ERROR_MESSAGE), "Message of a failed source step.")
    if source.clone_secret:
        task_spec.add_volume(
            Volume(name=secret_volume_name(prefix, source.clone_secret), secret_name=source.clone_secret)
        )
    task_spec.steps.append(git_step(settings, source, name))
