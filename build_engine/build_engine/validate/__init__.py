"""Build validation: pluggable validators composed into a priority-ordered chain.

Quick start::

    from build_engine.validate import (
        BUILD_VALIDATIONS, ValidatorDependencies, apply_result,
        create_default_registry, run_all,
    )

    registry = create_default_registry()
    chain = registry.build_chain(BUILD_VALIDATIONS, ValidatorDependencies(...))
    failure = await run_all(build, chain, timeout=30)
    apply_result(build.status, failure)
"""

from build_engine.validate.base import BaseValidator, ValidationFailure, ValidatorType
from build_engine.validate.chain import apply_result, run_all
from build_engine.validate.fields import build_run_fields
from build_engine.validate.registry import (
    BUILD_VALIDATIONS,
    INLINE_BUILD_VALIDATIONS,
    ValidatorDependencies,
    ValidatorRegistry,
    create_default_registry,
    new_validation,
)

__all__ = [
    "BUILD_VALIDATIONS",
    "INLINE_BUILD_VALIDATIONS",
    "BaseValidator",
    "ValidationFailure",
    "ValidatorDependencies",
    "ValidatorRegistry",
    "ValidatorType",
    "apply_result",
    "build_run_fields",
    "create_default_registry",
    "new_validation",
    "run_all",
]
