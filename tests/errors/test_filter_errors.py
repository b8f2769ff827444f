"""Unit tests for the error registry, formatter and domain errors."""

import pytest

from adhoc_filters.errors import (
    ConfigError,
    ErrorCategory,
    FilterError,
    InvalidEnumError,
    InvalidFilterError,
    ShapeMismatchError,
    UnresolvedReferenceError,
    format_error,
    format_error_summary,
    get_error,
    get_errors_by_category,
    group_errors,
)


@pytest.mark.parametrize(
    "code,category,title",
    [
        ("E-1001", ErrorCategory.DATA, "Unresolved Saved Metric"),
        ("E-2001", ErrorCategory.VALIDATION, "Invalid Filter Clause"),
        ("E-2002", ErrorCategory.VALIDATION, "Invalid Expression Type"),
        ("E-2003", ErrorCategory.VALIDATION, "Invalid Filter Operator"),
        ("E-2004", ErrorCategory.VALIDATION, "Invalid Comparator"),
        ("E-2005", ErrorCategory.VALIDATION, "Invalid Ad-hoc Metric"),
        ("E-2006", ErrorCategory.VALIDATION, "Invalid Filter Field"),
        ("E-4001", ErrorCategory.SYSTEM, "Unrecognized Option Shape"),
        ("E-4002", ErrorCategory.SYSTEM, "Invalid Configuration"),
    ],
)
def test_error_codes_registered(code, category, title):
    """All classification error codes must be registered."""
    error = get_error(code)
    assert error is not None, f"{code} not found in registry"
    assert error.category == category
    assert error.title == title


def test_unknown_code_lookup():
    assert get_error("E-9999") is None


def test_errors_by_category():
    codes = {e.code for e in get_errors_by_category(ErrorCategory.DATA)}
    assert codes == {"E-1001"}


class TestFromCode:
    """Tests for FilterError.from_code()."""

    def test_message_formatted(self):
        err = FilterError.from_code("E-1001", metric_name="sum__value")
        assert err.message == "Saved metric 'sum__value' is not defined on the datasource."
        assert str(err) == f"E-1001: {err.message}"
        assert err.remediation

    def test_special_keys(self):
        err = FilterError.from_code(
            "E-1001",
            metric_name="m",
            subject="m",
            options=[2],
            details={"known_metrics": []},
        )
        assert err.options == [2]
        assert err.subject == "m"
        assert err.details == {"known_metrics": []}

    def test_missing_placeholder_keeps_template(self):
        err = FilterError.from_code("E-1001")
        assert "{metric_name}" in err.message

    def test_unknown_code(self):
        err = FilterError.from_code("E-9999")
        assert err.code == "E-9999"
        assert "Unknown error" in err.message

    def test_subclass_preserved(self):
        err = UnresolvedReferenceError.from_code("E-1001", metric_name="m")
        assert isinstance(err, UnresolvedReferenceError)
        assert isinstance(err, FilterError)

    def test_hierarchy(self):
        assert issubclass(InvalidEnumError, InvalidFilterError)
        for cls in (ShapeMismatchError, ConfigError, InvalidFilterError):
            assert issubclass(cls, FilterError)

    def test_raisable(self):
        with pytest.raises(FilterError, match="E-4001"):
            raise ShapeMismatchError.from_code("E-4001", option={"x": 1})


class TestFormatting:
    """Tests for format_error(), group_errors() and format_error_summary()."""

    def test_format_single_option(self):
        err = UnresolvedReferenceError.from_code(
            "E-1001", metric_name="m", subject="m", options=[4]
        )
        text = format_error(err)
        assert text.splitlines()[0] == err.__str__()
        assert "  Location: Option 4" in text
        assert "  Subject: m" in text
        assert "  Action: " in text

    def test_format_without_remediation(self):
        err = FilterError.from_code("E-4001", option=1)
        assert "Action" not in format_error(err, include_remediation=False)

    def test_format_many_options_truncated(self):
        err = FilterError.from_code("E-4001", option=1, options=list(range(12)))
        assert "(and 2 more)" in format_error(err)

    def test_group_merges_positions(self):
        errors = [
            UnresolvedReferenceError.from_code("E-1001", metric_name="m", subject="m", options=[5]),
            UnresolvedReferenceError.from_code("E-1001", metric_name="m", subject="m", options=[1]),
            UnresolvedReferenceError.from_code("E-1001", metric_name="n", subject="n", options=[2]),
        ]
        grouped = group_errors(errors)
        assert len(grouped) == 2
        assert grouped[0].options == [1, 5]
        assert isinstance(grouped[0], UnresolvedReferenceError)
        assert errors[0].options == [5]

    def test_summary_empty(self):
        assert format_error_summary([]) == "No errors."

    def test_summary_multiple(self):
        errors = [
            FilterError.from_code("E-1001", metric_name="m"),
            FilterError.from_code("E-4001", option="x"),
        ]
        assert format_error_summary(errors).startswith("2 error type(s) found:")
