"""Selection classifier: turns selected options into AdhocFilter records.

The selection control hands over its complete, ordered list of selected
options on every change: filters accepted earlier followed by whatever was
just picked. Each entry maps to exactly one AdhocFilter:

    AdhocFilter     -> returned unchanged (keeps manual operator/comparator edits)
    SavedMetricRef  -> SQL / HAVING on the saved metric's expression
    AdhocMetricRef  -> SQL / HAVING on the metric label
    ColumnRef       -> SIMPLE / WHERE on the column name

New filters start from the per-clause defaults in filter_constants.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from adhoc_filters.errors.domain import ShapeMismatchError, UnresolvedReferenceError
from adhoc_filters.errors.formatter import format_error_summary
from adhoc_filters.filter_constants import defaults_for_clause
from adhoc_filters.models.filter import (
    AdhocFilter,
    ExpressionType,
    FilterClause,
    FilterOperator,
    dedupe_filters,
)
from adhoc_filters.models.options import (
    AdhocMetricRef,
    ClassificationContext,
    ColumnRef,
    SavedMetricRef,
    SelectableOption,
    parse_option,
)

logger = logging.getLogger(__name__)


class UnresolvedPolicy(str, Enum):
    """What to do with a saved-metric reference the context cannot resolve."""

    REJECT = "reject"  # raise, return nothing
    SKIP = "skip"  # drop the element, log a warning


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def classify(
    selected_options: Iterable[SelectableOption | Mapping[str, Any]],
    context: ClassificationContext | Mapping[str, Any],
    *,
    on_unresolved: UnresolvedPolicy | str = UnresolvedPolicy.REJECT,
    dedupe: bool = False,
) -> list[AdhocFilter]:
    """Normalize a selection into an ordered list of filters.

    Args:
        selected_options: Options in selection order. Typed variants or raw
            mappings in the selector's shapes.
        context: Known columns and saved metrics, as a ClassificationContext
            or a mapping of its fields.
        on_unresolved: REJECT (default) fails the whole batch on an unknown
            saved metric; SKIP drops that element, shortening the output, and
            logs one grouped warning for everything dropped.
        dedupe: Drop filters equal to an earlier one.

    Returns:
        One filter per option, in input order (subject to SKIP and dedupe).

    Raises:
        UnresolvedReferenceError: Unknown saved metric under REJECT.
        ShapeMismatchError: An option matches no known variant.
        InvalidEnumError: A filter payload carries an invalid enum value.
    """
    policy = UnresolvedPolicy(on_unresolved)
    saved_metrics = ClassificationContext.coerce(context).saved_metric_lookup()
    options = list(selected_options)

    filters: list[AdhocFilter] = []
    skipped: list[UnresolvedReferenceError] = []
    for index, raw_option in enumerate(options):
        option = parse_option(raw_option, index)
        try:
            filters.append(_classify_parsed(option, saved_metrics, index))
        except UnresolvedReferenceError as exc:
            if policy is UnresolvedPolicy.REJECT:
                raise
            skipped.append(exc)

    if skipped:
        logger.warning(
            "Skipped %d unresolved option(s):\n%s",
            len(skipped),
            format_error_summary(skipped),
        )

    if dedupe:
        filters = dedupe_filters(filters)

    logger.debug("Classified %d option(s) into %d filter(s)", len(options), len(filters))
    return filters


def classify_option(
    option: SelectableOption | Mapping[str, Any],
    context: ClassificationContext | Mapping[str, Any],
) -> AdhocFilter:
    """Classify a single option. Unresolved saved metrics always raise."""
    saved_metrics = ClassificationContext.coerce(context).saved_metric_lookup()
    return _classify_parsed(parse_option(option), saved_metrics, None)


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


def _classify_parsed(
    option: SelectableOption,
    saved_metrics: dict[str, str],
    index: int | None,
) -> AdhocFilter:
    if isinstance(option, AdhocFilter):
        return option
    if isinstance(option, SavedMetricRef):
        return _saved_metric_filter(option, saved_metrics, index)
    if isinstance(option, AdhocMetricRef):
        return _metric_filter(option.label)
    if isinstance(option, ColumnRef):
        return _column_filter(option.column_name)
    raise ShapeMismatchError.from_code(
        "E-4001", option=option, options=[index] if index is not None else []
    )


def _saved_metric_filter(
    option: SavedMetricRef,
    saved_metrics: dict[str, str],
    index: int | None,
) -> AdhocFilter:
    name = option.saved_metric_name
    expression = saved_metrics.get(name)
    if expression is None:
        raise UnresolvedReferenceError.from_code(
            "E-1001",
            metric_name=name,
            subject=name,
            options=[index] if index is not None else [],
            details={"known_metrics": sorted(saved_metrics)},
        )
    logger.debug("Saved metric %r resolved to %r", name, expression)
    return _metric_filter(expression)


def _metric_filter(subject: str) -> AdhocFilter:
    defaults = defaults_for_clause(FilterClause.HAVING)
    return AdhocFilter(
        expression_type=ExpressionType.SQL,
        subject=subject,
        operator=FilterOperator(defaults.operator),
        comparator=defaults.comparator,
        clause=FilterClause.HAVING,
    )


def _column_filter(column_name: str) -> AdhocFilter:
    defaults = defaults_for_clause(FilterClause.WHERE)
    return AdhocFilter(
        expression_type=ExpressionType.SIMPLE,
        subject=column_name,
        operator=FilterOperator(defaults.operator),
        comparator=defaults.comparator,
        clause=FilterClause.WHERE,
    )
