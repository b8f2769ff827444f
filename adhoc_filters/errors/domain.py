"""Typed domain exceptions for filter classification.

Callers catch a specific subclass to react to one failure mode, or
FilterError to handle all of them. Each subclass is built through
FilterError.from_code so the message and remediation come from the registry.

Usage:
    # In the classifier
    raise UnresolvedReferenceError.from_code(
        "E-1001", metric_name="sum__value", subject="sum__value", options=[2]
    )

    # In the selection control
    try:
        filters = classify(options, context)
    except UnresolvedReferenceError as e:
        show_warning(format_error(e))
"""

from adhoc_filters.errors.formatter import FilterError


class UnresolvedReferenceError(FilterError):
    """A saved-metric reference names a metric the context does not know."""


class InvalidFilterError(FilterError):
    """A filter record was built from missing or malformed fields."""


class InvalidEnumError(InvalidFilterError):
    """A clause, expression type or operator is outside its closed vocabulary."""


class ShapeMismatchError(FilterError):
    """A selected option matches none of the recognized option variants."""


class ConfigError(FilterError):
    """Configuration failed validation."""
