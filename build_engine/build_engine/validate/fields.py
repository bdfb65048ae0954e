"""Field-conflict checks for BuildRun requests.

Pure function, no I/O: a BuildRun must reference a build or inline one,
not both, and an inline build may not be combined with run-level
overrides.
"""

from __future__ import annotations

from build_engine.models.buildrun import BuildRun, BuildRunReason


def build_run_fields(build_run: BuildRun) -> tuple[str, str]:
    """Return ``(reason, message)`` for the first conflict, or ``("", "")``.

    Rules are checked in a fixed order and the first match wins:

    1. neither a build reference nor an inline spec;
    2. both a build reference and an inline spec;
    3. an inline spec combined with an ``output``, ``param_values``,
       ``env``, ``timeout`` or ``trigger`` override, in that order.
    """
    ref = build_run.spec.build
    if ref.spec is None and ref.name is None:
        return (
            BuildRunReason.NO_REF_OR_SPEC.value,
            "no build referenced or specified, either 'buildRef' or 'buildSpec' has to be set",
        )

    if ref.spec is None:
        return "", ""

    if ref.name is not None:
        return BuildRunReason.AMBIGUOUS_BUILD.value, "fields 'buildRef' and 'buildSpec' are mutually exclusive"

    spec = build_run.spec
    if spec.output is not None:
        return _override_forbidden("cannot use 'output' override and 'buildSpec' simultaneously")
    if spec.param_values:
        return _override_forbidden("cannot use 'paramValues' override and 'buildSpec' simultaneously")
    if spec.env:
        return _override_forbidden("cannot use 'env' override and 'buildSpec' simultaneously")
    if spec.timeout is not None:
        return _override_forbidden("cannot use 'timeout' override and 'buildSpec' simultaneously")
    if ref.spec.trigger is not None:
        return _override_forbidden("cannot use 'triggers' override in the 'BuildRun', only allowed in the 'Build'")

    return "", ""


def _override_forbidden(message: str) -> tuple[str, str]:
    return BuildRunReason.BUILD_FIELD_OVERRIDE_FORBIDDEN.value, message
