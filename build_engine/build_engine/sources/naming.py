"""Names of the params, results and volumes shared by compiled steps.

Every name is namespaced with the configured result prefix (``shp`` by
default) so it cannot clash with names a strategy author chooses.
"""

from __future__ import annotations

DEFAULT_SOURCE_NAME = "default"

PARAM_SOURCE_ROOT = "source-root"
PARAM_SOURCE_CONTEXT = "source-context"
PARAM_OUTPUT_IMAGE = "output-image"
PARAM_OUTPUT_TIMESTAMP = "output-timestamp"

RESULT_IMAGE_DIGEST = "image-digest"
RESULT_IMAGE_SIZE = "image-size"
RESULT_ERROR_REASON = "result-error-reason"
RESULT_ERROR_MESSAGE = "result-error-message"


def prefixed(prefix: str, name: str) -> str:
    return f"{prefix}-{name}"


def param_ref(name: str) -> str:
    """Placeholder the execution engine replaces with the param's value."""
    return f"$(params.{name})"


def result_path(name: str) -> str:
    """Placeholder the execution engine replaces with the result file path."""
    return f"$(results.{name}.path)"


def source_result(prefix: str, source_name: str, result: str) -> str:
    return f"{prefix}-source-{source_name}-{result}"


def source_step_name(source_name: str) -> str:
    return f"source-{source_name}"


def secret_volume_name(prefix: str, secret_name: str) -> str:
    return f"{prefix}-{secret_name}"


def secret_mount_path(prefix: str, secret_name: str) -> str:
    return f"/workspace/{prefix}-{secret_name}"
