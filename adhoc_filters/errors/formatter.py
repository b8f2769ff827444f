"""Error formatting and grouping utilities.

This module provides:
- FilterError exception class, the base of every adhoc_filters error
- Error formatting for display next to the filter selector
- Error grouping to combine duplicates across selected options
"""

from dataclasses import dataclass, field

from adhoc_filters.errors.registry import get_error


@dataclass
class FilterError(Exception):
    """Application error with code, message, and context.

    Attributes:
        code: Error code in E-XXXX format.
        message: Human-readable error message.
        remediation: Action the caller should take to resolve.
        options: Positions of the affected options in the selection.
        subject: Affected column or metric name, if applicable.
        details: Additional context dictionary.
    """

    code: str
    message: str
    remediation: str
    options: list[int] = field(default_factory=list)  # Affected option positions
    subject: str | None = None
    details: dict = field(default_factory=dict)

    def __str__(self) -> str:
        """Return string representation of the error."""
        return f"{self.code}: {self.message}"

    @classmethod
    def from_code(cls, code: str, **kwargs: object) -> "FilterError":
        """Create error from registry code with context substitution.

        Args:
            code: Error code in E-XXXX format.
            **kwargs: Context values for message template substitution.
                Special keys 'options' and 'details' are used for
                FilterError fields rather than message substitution.

        Returns:
            Instance of ``cls`` with formatted message.
        """
        options = kwargs.get("options", [])
        if not isinstance(options, list):
            options = []
        subject = kwargs.get("subject")
        if not isinstance(subject, str):
            subject = None
        details = kwargs.get("details", {})
        if not isinstance(details, dict):
            details = {}

        error_def = get_error(code)
        if not error_def:
            return cls(
                code=code,
                message=f"Unknown error: {code}",
                remediation="Report this error code to the maintainers.",
                options=options,
                subject=subject,
                details=details,
            )

        message = error_def.message_template
        template_kwargs = {
            k: v for k, v in kwargs.items() if k not in ("options", "details")
        }
        try:
            message = message.format(**template_kwargs)
        except KeyError:
            # Keep template if some placeholders are missing
            pass

        return cls(
            code=error_def.code,
            message=message,
            remediation=error_def.remediation,
            options=options,
            subject=subject,
            details=details,
        )


def format_error(error: FilterError, include_remediation: bool = True) -> str:
    """Format error for display.

    Args:
        error: The FilterError to format.
        include_remediation: Whether to include remediation steps.

    Returns:
        Multi-line formatted string.
    """
    lines = [f"{error.code}: {error.message}"]

    if error.options:
        if len(error.options) == 1:
            lines.append(f"  Location: Option {error.options[0]}")
        else:
            options_str = ", ".join(str(i) for i in error.options[:10])
            if len(error.options) > 10:
                options_str += f" (and {len(error.options) - 10} more)"
            lines.append(f"  Affected options: {options_str}")

    if error.subject:
        lines.append(f"  Subject: {error.subject}")

    if include_remediation:
        lines.append(f"  Action: {error.remediation}")

    return "\n".join(lines)


def group_errors(errors: list[FilterError]) -> list[FilterError]:
    """Group errors by code and message, combining option positions.

    Example:
        3 identical "Unresolved Saved Metric" errors at options 0, 2, 5
        -> 1 error with options=[0, 2, 5]

    Args:
        errors: List of FilterError objects to group.

    Returns:
        List of grouped errors, in first-seen order, with sorted positions.
    """
    groups: dict[str, FilterError] = {}

    for error in errors:
        key = f"{error.code}|{error.message}|{error.subject or ''}"
        if key in groups:
            groups[key].options.extend(error.options)
        else:
            groups[key] = type(error)(
                code=error.code,
                message=error.message,
                remediation=error.remediation,
                options=list(error.options),  # Copy to avoid mutation
                subject=error.subject,
                details=error.details.copy(),
            )

    result = list(groups.values())
    for error in result:
        error.options = sorted(set(error.options))

    return result


def format_error_summary(errors: list[FilterError]) -> str:
    """Format a list of errors for display, grouping duplicates."""
    if not errors:
        return "No errors."

    grouped = group_errors(errors)

    if len(grouped) == 1:
        return format_error(grouped[0])

    lines = [f"{len(grouped)} error type(s) found:\n"]
    for i, error in enumerate(grouped, 1):
        lines.append(f"{i}. {format_error(error)}")
        lines.append("")

    return "\n".join(lines)
