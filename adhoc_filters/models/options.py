"""Selectable option variants and the context they are classified against.

A selection control offers four kinds of options: an already-built
AdhocFilter, a raw column, an inline (ad-hoc) metric, and a reference to a
saved metric. Each kind is its own model so the classifier can dispatch on
type instead of sniffing dictionary keys. parse_option is the one place that
still accepts the loose dictionary shapes a front end sends.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from adhoc_filters.errors.domain import ShapeMismatchError
from adhoc_filters.filter_constants import (
    AGGREGATES,
    SQL_LABEL_MAX_LENGTH,
    SQL_LABEL_TRUNCATE_AT,
)
from adhoc_filters.models.filter import AdhocFilter, ExpressionType

# ---------------------------------------------------------------------------
# Datasource metadata
# ---------------------------------------------------------------------------


class ColumnInfo(BaseModel):
    """A column known to the datasource.

    Attributes:
        column_name: Column name as stored in the datasource.
        type: Database type string (e.g. "VARCHAR(255)", "DOUBLE"), if known.
    """

    model_config = ConfigDict(frozen=True)

    column_name: str = Field(..., description="Column name in the datasource")
    type: str | None = Field(default=None, description="Database type string")


class SavedMetric(BaseModel):
    """A named metric stored in the datasource metadata."""

    model_config = ConfigDict(frozen=True)

    metric_name: str = Field(..., description="Unique metric name")
    expression: str = Field(..., description="SQL aggregate expression")


class ClassificationContext(BaseModel):
    """Lookup tables the classifier resolves options against.

    Attributes:
        columns: Columns known to the datasource.
        saved_metrics: Saved metrics known to the datasource.
        datasource_type: Datasource kind; only "table" datasources accept
            HAVING filters on metrics.
    """

    model_config = ConfigDict(frozen=True)

    columns: tuple[ColumnInfo, ...] = ()
    saved_metrics: tuple[SavedMetric, ...] = ()
    datasource_type: str = "table"

    @classmethod
    def coerce(cls, context: ClassificationContext | Mapping[str, Any]) -> ClassificationContext:
        """Return ``context`` as a ClassificationContext, validating plain mappings."""
        if isinstance(context, cls):
            return context
        return cls.model_validate(context)

    def saved_metric_lookup(self) -> dict[str, str]:
        """Map saved metric name -> SQL expression. Later duplicates win."""
        return {m.metric_name: m.expression for m in self.saved_metrics}

    def saved_metric_expression(self, metric_name: str) -> str | None:
        return self.saved_metric_lookup().get(metric_name)

    def column_names(self) -> list[str]:
        return [c.column_name for c in self.columns]


# ---------------------------------------------------------------------------
# Option variants
# ---------------------------------------------------------------------------


class ColumnRef(BaseModel):
    """A raw column picked in the selector."""

    model_config = ConfigDict(frozen=True)

    column_name: str
    type: str | None = None


class SavedMetricRef(BaseModel):
    """A saved metric picked in the selector, referenced by name."""

    model_config = ConfigDict(frozen=True)

    saved_metric_name: str


class AdhocMetricRef(BaseModel):
    """An inline metric: an aggregate over a column, or free-form SQL.

    When no label is given one is derived: ``SUM(source)`` for a SIMPLE
    metric, the SQL text itself (truncated when long) for a SQL metric.
    A payload that carries SQL text and no expression type is a SQL metric
    unless it also names an aggregate or column.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    expression_type: ExpressionType = Field(
        default=ExpressionType.SIMPLE, alias="expressionType"
    )
    column: ColumnInfo | None = None
    aggregate: str | None = None
    sql_expression: str | None = Field(default=None, alias="sqlExpression")
    label: str = ""

    @model_validator(mode="before")
    @classmethod
    def _derive_defaults(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        if _is_bare_sql(data):
            data = {**data, "expressionType": ExpressionType.SQL.value}
        if not data.get("label"):
            data = {**data, "label": _default_metric_label(data)}
        return data

    @model_validator(mode="after")
    def _check_complete(self) -> AdhocMetricRef:
        if self.expression_type == ExpressionType.SIMPLE:
            if self.column is None:
                raise ValueError("SIMPLE metric requires a column")
            if self.aggregate not in AGGREGATES:
                raise ValueError(
                    f"aggregate must be one of {', '.join(AGGREGATES)}, "
                    f"got {self.aggregate!r}"
                )
        elif not self.sql_expression:
            raise ValueError("SQL metric requires sqlExpression")
        return self


SelectableOption = Union[AdhocFilter, SavedMetricRef, AdhocMetricRef, ColumnRef]

OPTION_TYPES: tuple[type, ...] = (AdhocFilter, SavedMetricRef, AdhocMetricRef, ColumnRef)

_METRIC_KEYS = ("aggregate", "sqlExpression", "sql_expression", "expressionType", "expression_type")


def parse_option(option: Any, index: int | None = None) -> SelectableOption:
    """Coerce a selected option into one of the typed variants.

    Typed variants pass through. ColumnInfo and SavedMetric records map onto
    ColumnRef and SavedMetricRef. Mappings are recognized by shape, checked
    in order: ``clause`` (existing filter), ``saved_metric_name``, metric
    keys (``aggregate``, ``sqlExpression``, ``expressionType``), then
    ``column_name``.

    Args:
        option: The selected option.
        index: Position of the option in the selection, for error context.

    Raises:
        ShapeMismatchError: The option matches no variant, or an ad-hoc
            metric payload is incomplete.
        InvalidEnumError: A filter payload has an out-of-vocabulary enum.
    """
    positions = [index] if index is not None else []

    if isinstance(option, OPTION_TYPES):
        return option
    if isinstance(option, ColumnInfo):
        return ColumnRef(column_name=option.column_name, type=option.type)
    if isinstance(option, SavedMetric):
        return SavedMetricRef(saved_metric_name=option.metric_name)

    if isinstance(option, Mapping):
        if "clause" in option:
            return AdhocFilter.create(option)
        try:
            if "saved_metric_name" in option:
                return SavedMetricRef.model_validate(option)
            if any(key in option for key in _METRIC_KEYS):
                return parse_adhoc_metric(option, positions)
            if "column_name" in option:
                return ColumnRef.model_validate(option)
        except ValidationError as exc:
            raise ShapeMismatchError.from_code(
                "E-4001",
                option=dict(option),
                options=positions,
                details={"errors": exc.errors()},
            ) from exc

    raise ShapeMismatchError.from_code("E-4001", option=option, options=positions)


def parse_adhoc_metric(
    option: Mapping[str, Any], positions: list[int] | None = None
) -> AdhocMetricRef:
    """Validate an ad-hoc metric payload, raising ShapeMismatchError (E-2005)."""
    try:
        return AdhocMetricRef.model_validate(option)
    except ValidationError as exc:
        raise ShapeMismatchError.from_code(
            "E-2005",
            reason=exc.errors()[0]["msg"],
            options=list(positions or []),
            details={"errors": exc.errors()},
        ) from exc


def _is_bare_sql(data: Mapping[str, Any]) -> bool:
    if "expressionType" in data or "expression_type" in data:
        return False
    if data.get("aggregate") is not None or data.get("column") is not None:
        return False
    return bool(data.get("sqlExpression", data.get("sql_expression")))


def _default_metric_label(data: Mapping[str, Any]) -> str:
    expression_type = data.get("expressionType", data.get("expression_type"))
    if str(getattr(expression_type, "value", expression_type)) == ExpressionType.SQL.value:
        sql = data.get("sqlExpression", data.get("sql_expression")) or ""
        if len(sql) < SQL_LABEL_MAX_LENGTH:
            return sql
        return sql[:SQL_LABEL_TRUNCATE_AT] + "..."

    column = data.get("column")
    if isinstance(column, ColumnInfo):
        column_name = column.column_name
    elif isinstance(column, Mapping):
        column_name = column.get("column_name", "")
    else:
        column_name = ""
    aggregate = data.get("aggregate") or ""
    return f"{aggregate}({column_name})"
