"""Error handling framework for adhoc_filters.

This package provides:
- Error code registry with E-XXXX format codes
- Typed domain exceptions raised by the models and the classifier
- Error formatting and grouping utilities

Error categories:
- E-1xxx: Selection data errors
- E-2xxx: Validation errors
- E-4xxx: System/integration errors
"""

from adhoc_filters.errors.registry import (
    ErrorCategory,
    ErrorCode,
    ERROR_REGISTRY,
    get_error,
    get_errors_by_category,
)
from adhoc_filters.errors.formatter import (
    FilterError,
    format_error,
    format_error_summary,
    group_errors,
)
from adhoc_filters.errors.domain import (
    ConfigError,
    InvalidEnumError,
    InvalidFilterError,
    ShapeMismatchError,
    UnresolvedReferenceError,
)

__all__ = [
    # Registry
    "ErrorCode",
    "ErrorCategory",
    "ERROR_REGISTRY",
    "get_error",
    "get_errors_by_category",
    # Formatter
    "FilterError",
    "format_error",
    "group_errors",
    "format_error_summary",
    # Domain
    "UnresolvedReferenceError",
    "InvalidFilterError",
    "InvalidEnumError",
    "ShapeMismatchError",
    "ConfigError",
]
