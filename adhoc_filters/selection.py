"""Helpers for the selection control that owns the filter list.

The classifier only normalizes a complete list. These helpers cover the
control's side of the exchange: building the options it offers, merging
previously accepted filters with fresh picks, and producing new lists when a
filter is edited or removed. Lists are never mutated in place.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from adhoc_filters.classifier import UnresolvedPolicy, classify
from adhoc_filters.filter_constants import HAVING_DATASOURCE_TYPES
from adhoc_filters.models.filter import AdhocFilter, dedupe_filters
from adhoc_filters.models.options import (
    AdhocMetricRef,
    ClassificationContext,
    ColumnRef,
    SavedMetricRef,
    SelectableOption,
    parse_adhoc_metric,
)

logger = logging.getLogger(__name__)

__all__ = [
    "dedupe_filters",
    "merge_selection",
    "options_for_select",
    "remove_filter",
    "replace_filter",
]


def options_for_select(
    context: ClassificationContext | Mapping[str, Any],
    form_metrics: Iterable[str | AdhocMetricRef | Mapping[str, Any] | None] = (),
) -> list[SelectableOption]:
    """Build the options a filter selector offers.

    Every known column is offered. Metrics are offered only when the
    datasource accepts HAVING filters, and only those the chart already
    uses: a string in ``form_metrics`` names a saved metric, anything else
    is an ad-hoc metric definition.

    Args:
        context: Datasource columns and saved metrics.
        form_metrics: Metrics selected on the chart, in chart order.

    Returns:
        Column options first, then metric options in ``form_metrics`` order.

    Raises:
        ShapeMismatchError: An ad-hoc metric definition is incomplete.
    """
    context = ClassificationContext.coerce(context)
    options: list[SelectableOption] = [
        ColumnRef(column_name=column.column_name, type=column.type)
        for column in context.columns
    ]
    if context.datasource_type not in HAVING_DATASOURCE_TYPES:
        return options

    known_metrics = context.saved_metric_lookup()
    for metric in form_metrics:
        if not metric:
            continue
        if isinstance(metric, str):
            if metric not in known_metrics:
                logger.debug("Not offering unknown saved metric %r", metric)
                continue
            options.append(SavedMetricRef(saved_metric_name=metric))
        elif isinstance(metric, AdhocMetricRef):
            options.append(metric)
        else:
            options.append(parse_adhoc_metric(metric))
    return options


def merge_selection(
    existing: Sequence[AdhocFilter],
    new_options: Iterable[SelectableOption | Mapping[str, Any]],
    context: ClassificationContext | Mapping[str, Any],
    *,
    on_unresolved: UnresolvedPolicy | str = UnresolvedPolicy.REJECT,
    dedupe: bool = False,
) -> list[AdhocFilter]:
    """Append freshly selected options after the accepted filters.

    Existing filters keep their positions and pass through untouched.
    """
    return classify(
        [*existing, *new_options],
        context,
        on_unresolved=on_unresolved,
        dedupe=dedupe,
    )


def replace_filter(
    filters: Sequence[AdhocFilter], index: int, new_filter: AdhocFilter
) -> list[AdhocFilter]:
    """Return a new list with the filter at ``index`` replaced.

    Raises:
        IndexError: If ``index`` is out of range.
    """
    result = list(filters)
    result[index] = new_filter
    return result


def remove_filter(filters: Sequence[AdhocFilter], index: int) -> list[AdhocFilter]:
    """Return a new list without the filter at ``index``.

    Raises:
        IndexError: If ``index`` is out of range.
    """
    result = list(filters)
    del result[index]
    return result
