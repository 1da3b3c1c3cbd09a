"""
Validation models for biome documents.

A ValidationReport collects every problem found while checking a raw biome
document. Issues carry the dotted field path that failed, a human-readable
message and, where useful, the offending value and what was expected.

Warnings flag values that are well formed but unusual (for example a mob id
that is not in the vanilla list). They never make a report invalid.

Example:
    >>> report = ValidationReport()
    >>> report.add(error_issue("temperature", "Temperature must be a number"))
    >>> report.valid
    False
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class Severity(str, Enum):
    """How serious a validation issue is."""

    ERROR = "error"
    WARNING = "warning"


class ValidationIssue(BaseModel):
    """A single problem found in a biome document.

    Attributes:
        field: Dotted path of the failing field (e.g. ``spawners.monster[0].weight``)
        message: Human-readable explanation
        value: The offending value, if it helps the reader
        expected: Short description of what would have been accepted
        severity: ERROR invalidates the document, WARNING does not
    """

    field: str
    message: str
    value: Any = None
    expected: str | None = None
    severity: Severity = Severity.ERROR


class ValidationReport(BaseModel):
    """Outcome of validating a biome document."""

    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]

    @property
    def valid(self) -> bool:
        return not self.errors

    def add(self, issue: ValidationIssue) -> "ValidationReport":
        self.issues.append(issue)
        return self

    def merge(self, other: "ValidationReport") -> "ValidationReport":
        """Append all issues from another report and return self."""
        self.issues.extend(other.issues)
        return self

    def format(self) -> str:
        """Render the errors as a numbered list."""
        return format_validation_errors(self.errors)

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": [i.model_dump(mode="json", exclude={"severity"}) for i in self.errors],
            "warnings": [i.model_dump(mode="json", exclude={"severity"}) for i in self.warnings],
        }


# Convenience factory functions


def error_issue(
    field: str,
    message: str,
    value: Any = None,
    expected: str | None = None,
) -> ValidationIssue:
    """Create an ERROR issue.

    Example:
        >>> issue = error_issue("downfall", "downfall must be a number", "wet", "number")
        >>> issue.severity == Severity.ERROR
        True
    """
    return ValidationIssue(field=field, message=message, value=value, expected=expected)


def warning_issue(
    field: str,
    message: str,
    value: Any = None,
    expected: str | None = None,
) -> ValidationIssue:
    """Create a WARNING issue."""
    return ValidationIssue(
        field=field,
        message=message,
        value=value,
        expected=expected,
        severity=Severity.WARNING,
    )


def format_validation_errors(issues: list[ValidationIssue]) -> str:
    """Format issues as a readable, numbered string."""
    if not issues:
        return "No errors"

    lines = []
    for index, issue in enumerate(issues, start=1):
        line = f"{index}. {issue.field}: {issue.message}"
        if issue.value is not None:
            line += f" (got: {json.dumps(issue.value, default=str)})"
        if issue.expected:
            line += f" (expected: {issue.expected})"
        lines.append(line)
    return "\n".join(lines)
