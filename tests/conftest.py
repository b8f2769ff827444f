"""Root-level pytest fixtures for all tests.

Provides a small table datasource (three columns, one saved metric), an
ad-hoc SUM metric over one of its columns, and a pre-existing WHERE filter.
"""

import pytest

from adhoc_filters.models.filter import (
    AdhocFilter,
    ExpressionType,
    FilterClause,
    FilterOperator,
)
from adhoc_filters.models.options import (
    AdhocMetricRef,
    ClassificationContext,
    ColumnInfo,
    SavedMetric,
)


@pytest.fixture
def columns() -> list[ColumnInfo]:
    return [
        ColumnInfo(column_name="source", type="VARCHAR(255)"),
        ColumnInfo(column_name="target", type="VARCHAR(255)"),
        ColumnInfo(column_name="value", type="DOUBLE"),
    ]


@pytest.fixture
def saved_metric() -> SavedMetric:
    return SavedMetric(metric_name="sum__value", expression="SUM(value)")


@pytest.fixture
def context(columns, saved_metric) -> ClassificationContext:
    """Table datasource with the standard columns and saved metric."""
    return ClassificationContext(
        columns=columns,
        saved_metrics=[saved_metric],
        datasource_type="table",
    )


@pytest.fixture
def empty_context() -> ClassificationContext:
    return ClassificationContext()


@pytest.fixture
def sum_source_metric() -> AdhocMetricRef:
    """SIMPLE ad-hoc metric, label derives to SUM(source)."""
    return AdhocMetricRef(
        expression_type=ExpressionType.SIMPLE,
        column=ColumnInfo(column_name="source", type="VARCHAR(255)"),
        aggregate="SUM",
    )


@pytest.fixture
def simple_filter() -> AdhocFilter:
    """An existing, user-edited WHERE filter: value > '10'."""
    return AdhocFilter(
        expression_type=ExpressionType.SIMPLE,
        subject="value",
        operator=FilterOperator.gt,
        comparator="10",
        clause=FilterClause.WHERE,
    )
