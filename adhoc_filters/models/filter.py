"""AdhocFilter data model and its equality semantics.

An AdhocFilter is one filter clause of a chart query: either a structured
(subject, operator, comparator) triplet applied to raw rows in WHERE, or a
free-form SQL comparison on an aggregated metric applied in HAVING. Records
are frozen Pydantic v2 models; replacing a filter means building a new one.

Comparator equality is kind-aware: numbers compare numerically (0 == 0.0),
strings compare exactly, and a number never equals a string (0 != "0").
Booleans are rejected as comparators so True can never alias 1.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from adhoc_filters.errors.domain import InvalidEnumError, InvalidFilterError
from adhoc_filters.filter_constants import (
    EQUALS,
    GREATER_THAN,
    GREATER_THAN_OR_EQUAL,
    IN,
    IS_NOT_NULL,
    IS_NULL,
    LESS_THAN,
    LESS_THAN_OR_EQUAL,
    LIKE,
    MULTI_VALUE_OPERATORS,
    NOT_EQUALS,
    NOT_IN,
    REGEX,
    SQL_OPERATOR_SPELLING,
    UNARY_OPERATORS,
)

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class ExpressionType(str, Enum):
    """How a filter is carried: structured triplet or free-form SQL."""

    SIMPLE = "SIMPLE"
    SQL = "SQL"


class FilterClause(str, Enum):
    """Whether a filter applies before (WHERE) or after (HAVING) aggregation."""

    WHERE = "WHERE"
    HAVING = "HAVING"


class FilterOperator(str, Enum):
    """Allowed filter operators. Values are the operator spellings."""

    eq = EQUALS
    neq = NOT_EQUALS
    gt = GREATER_THAN
    lt = LESS_THAN
    gte = GREATER_THAN_OR_EQUAL
    lte = LESS_THAN_OR_EQUAL
    in_ = IN          # Python attribute is `in_` (reserved word)
    not_in = NOT_IN
    like = LIKE
    regex = REGEX
    is_not_null = IS_NOT_NULL
    is_null = IS_NULL


Scalar = Union[str, int, float]
Comparator = Union[Scalar, tuple[Scalar, ...], None]


def _comparator_key(value: Comparator) -> tuple:
    """Normalize a comparator into a hashable, kind-tagged key."""
    if value is None:
        return ("none", None)
    if isinstance(value, tuple):
        return ("multi", tuple(_comparator_key(item) for item in value))
    if isinstance(value, (int, float)):
        return ("number", value)
    return ("string", value)


# ---------------------------------------------------------------------------
# Model
# ---------------------------------------------------------------------------


class AdhocFilter(BaseModel):
    """A single filter clause, immutable once built."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    expression_type: ExpressionType = Field(
        ..., alias="expressionType", description="SIMPLE triplet or free-form SQL."
    )
    subject: str = Field(
        ..., description="Column name, or metric SQL expression / label."
    )
    operator: FilterOperator = Field(..., description="Comparison operator.")
    comparator: Comparator = Field(
        default=None, description="Right-hand-side value of the comparison."
    )
    clause: FilterClause = Field(..., description="WHERE or HAVING.")

    @field_validator("comparator", mode="before")
    @classmethod
    def _reject_boolean_comparator(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("comparator must be a string or a number, not a boolean")
        if isinstance(value, (list, tuple)):
            if any(isinstance(item, bool) for item in value):
                raise ValueError("comparator values must be strings or numbers")
            return tuple(value)
        return value

    # -- construction -------------------------------------------------------

    @classmethod
    def create(
        cls, fields: Mapping[str, Any] | None = None, **kwargs: Any
    ) -> AdhocFilter:
        """Build a filter, translating validation failures into domain errors.

        Accepts either field names (``expression_type``) or the serialized
        aliases (``expressionType``), as a mapping, keyword arguments, or both.

        Raises:
            InvalidEnumError: clause, expression type or operator is outside
                its closed vocabulary, or the comparator has the wrong kind.
            InvalidFilterError: any other field is missing or malformed.
        """
        data = {**(fields or {}), **kwargs}
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise _domain_error_for(exc, data) from exc

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> AdhocFilter:
        """Build a filter from its form-data dictionary, validated like create()."""
        return cls.create(payload)

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the camelCase form-data keys."""
        return self.model_dump(by_alias=True, mode="json")

    def duplicate_with(self, **changes: Any) -> AdhocFilter:
        """Return a new filter with the given fields replaced."""
        return self.create({**self.model_dump(), **changes})

    # -- equality -----------------------------------------------------------

    def _equality_key(self) -> tuple:
        return (
            self.expression_type,
            self.subject,
            self.operator,
            _comparator_key(self.comparator),
            self.clause,
        )

    def equals(self, other: object) -> bool:
        """Structural equality over all five attributes."""
        if not isinstance(other, AdhocFilter):
            return False
        return self._equality_key() == other._equality_key()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AdhocFilter):
            return NotImplemented
        return self.equals(other)

    def __hash__(self) -> int:
        return hash(self._equality_key())

    # -- inspection ---------------------------------------------------------

    def is_valid(self) -> bool:
        """Whether the filter carries enough information to be applied."""
        if not self.subject:
            return False
        if self.expression_type == ExpressionType.SQL:
            return True
        operator = self.operator.value
        if operator in UNARY_OPERATORS:
            return True
        if operator in MULTI_VALUE_OPERATORS:
            return isinstance(self.comparator, tuple) and len(self.comparator) > 0
        return self.comparator is not None and self.comparator != ""

    def to_sql_expression(self) -> str:
        """Render the filter as SQL text for display.

        Subjects are emitted verbatim: a column name for SIMPLE filters, the
        metric expression or label for SQL filters.
        """
        operator = self.operator.value
        spelled = SQL_OPERATOR_SPELLING.get(operator, operator)
        if operator in UNARY_OPERATORS:
            return f"{self.subject} {spelled}"
        if self.comparator is None:
            return self.subject
        return f"{self.subject} {spelled} {_sql_literal(self.comparator)}"


def filters_equal(a: AdhocFilter, b: AdhocFilter) -> bool:
    """Module-level form of AdhocFilter.equals."""
    return a.equals(b)


def dedupe_filters(filters: Iterable[AdhocFilter]) -> list[AdhocFilter]:
    """Drop filters equal to an earlier one, keeping first-occurrence order."""
    seen: set[AdhocFilter] = set()
    result: list[AdhocFilter] = []
    for adhoc_filter in filters:
        if adhoc_filter in seen:
            continue
        seen.add(adhoc_filter)
        result.append(adhoc_filter)
    return result


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_ENUM_ERROR_CODES: dict[str, str] = {
    "clause": "E-2001",
    "expressionType": "E-2002",
    "expression_type": "E-2002",
    "operator": "E-2003",
    "comparator": "E-2004",
}

_FIELD_NAMES: dict[str, str] = {
    "expressionType": "expression_type",
    "expression_type": "expressionType",
}


def _domain_error_for(
    exc: ValidationError, data: Mapping[str, Any]
) -> InvalidFilterError:
    """Map the first pydantic error onto the filter error registry."""
    first = exc.errors()[0]
    field = str(first["loc"][0]) if first["loc"] else ""
    code = _ENUM_ERROR_CODES.get(field)
    value = data.get(field, data.get(_FIELD_NAMES.get(field, field)))
    if code is not None and first["type"] != "missing":
        return InvalidEnumError.from_code(
            code, field=field, value=value, details={"errors": exc.errors()}
        )
    return InvalidFilterError.from_code(
        "E-2006",
        field=field,
        reason=first["msg"],
        details={"errors": exc.errors()},
    )


def _sql_literal(value: Comparator) -> str:
    if isinstance(value, tuple):
        return "(" + ", ".join(_sql_literal(item) for item in value) + ")"
    if isinstance(value, (int, float)):
        return str(value)
    escaped = str(value).replace("'", "''")
    return f"'{escaped}'"
