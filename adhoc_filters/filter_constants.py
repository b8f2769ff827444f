"""Canonical constants for ad-hoc filter classification.

This module is the single source of truth for filter policy data: the
operator vocabulary, the aggregate vocabulary used by inline metrics, and the
default operator/comparator pair a freshly selected option receives for each
clause.
"""

from __future__ import annotations

from typing import NamedTuple

# ---------------------------------------------------------------------------
# Operator vocabulary
# ---------------------------------------------------------------------------

EQUALS = "=="
NOT_EQUALS = "!="
GREATER_THAN = ">"
LESS_THAN = "<"
GREATER_THAN_OR_EQUAL = ">="
LESS_THAN_OR_EQUAL = "<="
IN = "in"
NOT_IN = "not in"
LIKE = "LIKE"
REGEX = "regex"
IS_NOT_NULL = "IS NOT NULL"
IS_NULL = "IS NULL"

OPERATORS: tuple[str, ...] = (
    EQUALS,
    NOT_EQUALS,
    GREATER_THAN,
    LESS_THAN,
    GREATER_THAN_OR_EQUAL,
    LESS_THAN_OR_EQUAL,
    IN,
    NOT_IN,
    LIKE,
    REGEX,
    IS_NOT_NULL,
    IS_NULL,
)

MULTI_VALUE_OPERATORS: frozenset[str] = frozenset({IN, NOT_IN})
UNARY_OPERATORS: frozenset[str] = frozenset({IS_NOT_NULL, IS_NULL})

# Regex matching has no portable SQL spelling, so it only renders for display.
SQL_OPERATOR_SPELLING: dict[str, str] = {
    EQUALS: "=",
    NOT_EQUALS: "<>",
    IN: "IN",
    NOT_IN: "NOT IN",
    REGEX: "REGEXP",
}

# ---------------------------------------------------------------------------
# Aggregates for inline metrics
# ---------------------------------------------------------------------------

AGGREGATES: tuple[str, ...] = (
    "AVG",
    "COUNT",
    "COUNT_DISTINCT",
    "MAX",
    "MIN",
    "SUM",
)

# SQL expressions at or above this length get truncated in derived labels.
SQL_LABEL_MAX_LENGTH = 43
SQL_LABEL_TRUNCATE_AT = 40

# ---------------------------------------------------------------------------
# Default operator/comparator policy per clause
# ---------------------------------------------------------------------------


class FilterDefaults(NamedTuple):
    """Operator and comparator a newly selected option starts with."""

    operator: str
    comparator: str | int


# Metric filters default to a minimum-threshold test after aggregation.
METRIC_FILTER_DEFAULTS = FilterDefaults(operator=GREATER_THAN, comparator=0)

# Column filters start as an empty equality awaiting a typed value.
COLUMN_FILTER_DEFAULTS = FilterDefaults(operator=EQUALS, comparator="")

CLAUSE_DEFAULTS: dict[str, FilterDefaults] = {
    "HAVING": METRIC_FILTER_DEFAULTS,
    "WHERE": COLUMN_FILTER_DEFAULTS,
}

# Datasource types whose queries accept a HAVING clause.
HAVING_DATASOURCE_TYPES: frozenset[str] = frozenset({"table"})


def defaults_for_clause(clause: str) -> FilterDefaults:
    """Return the default operator/comparator pair for a clause.

    Args:
        clause: "WHERE" or "HAVING" (a FilterClause member also works).

    Raises:
        KeyError: If the clause has no registered defaults.
    """
    return CLAUSE_DEFAULTS[str(getattr(clause, "value", clause))]
