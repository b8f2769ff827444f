"""Ad-hoc filter classification for chart query builders.

Turns the options picked in a filter selector (columns, ad-hoc metrics,
saved metrics and already-built filters) into an ordered list of
AdhocFilter records.

Main Entry Points:
    classify: Normalize a complete selection into filters.
    AdhocFilter.equals: Structural filter equality.

Supporting Helpers:
    options_for_select, merge_selection, replace_filter, remove_filter.
"""

from adhoc_filters.classifier import UnresolvedPolicy, classify, classify_option
from adhoc_filters.models import (
    AdhocFilter,
    AdhocMetricRef,
    ClassificationContext,
    ColumnInfo,
    ColumnRef,
    ExpressionType,
    FilterClause,
    FilterOperator,
    SavedMetric,
    SavedMetricRef,
    SelectableOption,
    dedupe_filters,
    filters_equal,
    parse_adhoc_metric,
    parse_option,
)
from adhoc_filters.selection import (
    merge_selection,
    options_for_select,
    remove_filter,
    replace_filter,
)

__all__ = [
    # Classification (primary entry points)
    "classify",
    "classify_option",
    "UnresolvedPolicy",
    # Filter model
    "AdhocFilter",
    "ExpressionType",
    "FilterClause",
    "FilterOperator",
    "filters_equal",
    "dedupe_filters",
    # Options and context
    "AdhocMetricRef",
    "ClassificationContext",
    "ColumnInfo",
    "ColumnRef",
    "SavedMetric",
    "SavedMetricRef",
    "SelectableOption",
    "parse_adhoc_metric",
    "parse_option",
    # Selection helpers
    "options_for_select",
    "merge_selection",
    "replace_filter",
    "remove_filter",
]
