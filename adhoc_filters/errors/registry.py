"""Error code registry with E-XXXX format codes.

This module defines the error code system for adhoc_filters, organizing
errors into categories:
- E-1xxx: Selection data errors (references the context cannot resolve)
- E-2xxx: Validation errors (malformed filter or metric records)
- E-4xxx: System/integration errors

Each error includes a code, title, message template, and remediation steps.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorCategory(str, Enum):
    """Categories for error codes."""

    DATA = "data"  # E-1xxx: Selection data errors
    VALIDATION = "validation"  # E-2xxx: Validation errors
    SYSTEM = "system"  # E-4xxx: System/integration errors


@dataclass
class ErrorCode:
    """Definition of an error code with metadata.

    Attributes:
        code: Error code in E-XXXX format.
        category: Error category for grouping.
        title: Short title for display.
        message_template: Message with {placeholders} for context.
        remediation: Action the caller should take to resolve.
    """

    code: str  # E-XXXX format
    category: ErrorCategory
    title: str
    message_template: str
    remediation: str


ERROR_REGISTRY: dict[str, ErrorCode] = {
    # Data errors (E-1xxx)
    "E-1001": ErrorCode(
        code="E-1001",
        category=ErrorCategory.DATA,
        title="Unresolved Saved Metric",
        message_template="Saved metric '{metric_name}' is not defined on the datasource.",
        remediation="Reload the datasource metadata or remove the metric from the selection.",
    ),
    # Validation errors (E-2xxx)
    "E-2001": ErrorCode(
        code="E-2001",
        category=ErrorCategory.VALIDATION,
        title="Invalid Filter Clause",
        message_template="Invalid clause {value!r}. Must be WHERE or HAVING.",
        remediation="Use FilterClause.WHERE for columns and FilterClause.HAVING for metrics.",
    ),
    "E-2002": ErrorCode(
        code="E-2002",
        category=ErrorCategory.VALIDATION,
        title="Invalid Expression Type",
        message_template="Invalid expression type {value!r}. Must be SIMPLE or SQL.",
        remediation="Use ExpressionType.SIMPLE or ExpressionType.SQL.",
    ),
    "E-2003": ErrorCode(
        code="E-2003",
        category=ErrorCategory.VALIDATION,
        title="Invalid Filter Operator",
        message_template="Operator {value!r} is not a supported filter operator.",
        remediation="Use one of the operators listed in filter_constants.OPERATORS.",
    ),
    "E-2004": ErrorCode(
        code="E-2004",
        category=ErrorCategory.VALIDATION,
        title="Invalid Comparator",
        message_template="Comparator {value!r} must be a string, a number, or a list of them.",
        remediation="Pass the comparison value as text or as a number.",
    ),
    "E-2005": ErrorCode(
        code="E-2005",
        category=ErrorCategory.VALIDATION,
        title="Invalid Ad-hoc Metric",
        message_template="Ad-hoc metric is incomplete: {reason}",
        remediation="SIMPLE metrics need a column and an aggregate; SQL metrics need an expression.",
    ),
    "E-2006": ErrorCode(
        code="E-2006",
        category=ErrorCategory.VALIDATION,
        title="Invalid Filter Field",
        message_template="Filter field '{field}' is invalid: {reason}",
        remediation="Provide expressionType, subject, operator, comparator and clause.",
    ),
    # System errors (E-4xxx)
    "E-4001": ErrorCode(
        code="E-4001",
        category=ErrorCategory.SYSTEM,
        title="Unrecognized Option Shape",
        message_template="Selected option {option!r} is not a filter, column, saved metric or ad-hoc metric.",
        remediation="This indicates an integration problem in the selection control. Check the option payload.",
    ),
    "E-4002": ErrorCode(
        code="E-4002",
        category=ErrorCategory.SYSTEM,
        title="Invalid Configuration",
        message_template="Configuration is invalid: {details_text}",
        remediation="Correct the config file or ADHOC_FILTERS_ environment overrides.",
    ),
}


def get_error(code: str) -> ErrorCode | None:
    """Get error definition by code.

    Args:
        code: Error code in E-XXXX format.

    Returns:
        ErrorCode if found, None otherwise.
    """
    return ERROR_REGISTRY.get(code)


def get_errors_by_category(category: ErrorCategory) -> list[ErrorCode]:
    """Get all errors in a category."""
    return [e for e in ERROR_REGISTRY.values() if e.category == category]
