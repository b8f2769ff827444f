"""Pydantic models for ad-hoc filters and the options they are built from."""

from adhoc_filters.models.filter import (
    AdhocFilter,
    ExpressionType,
    FilterClause,
    FilterOperator,
    dedupe_filters,
    filters_equal,
)
from adhoc_filters.models.options import (
    OPTION_TYPES,
    AdhocMetricRef,
    ClassificationContext,
    ColumnInfo,
    ColumnRef,
    SavedMetric,
    SavedMetricRef,
    SelectableOption,
    parse_adhoc_metric,
    parse_option,
)

__all__ = [
    # Filter model
    "AdhocFilter",
    "ExpressionType",
    "FilterClause",
    "FilterOperator",
    "dedupe_filters",
    "filters_equal",
    # Options and context
    "AdhocMetricRef",
    "ClassificationContext",
    "ColumnInfo",
    "ColumnRef",
    "OPTION_TYPES",
    "SavedMetric",
    "SavedMetricRef",
    "SelectableOption",
    "parse_adhoc_metric",
    "parse_option",
]
