"""Validation result models shared by the journal validator and its callers."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from finance_core.models.common import utc_now


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue (e.g., 'lines[2].debit')"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'negative_amount', 'unbalanced')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of the two-stage journal validation.

    Stage 1: Line validation (accounts, signs, one-sidedness)
    Stage 2: Balance validation (debits equal credits)
    """

    validated_at: datetime = Field(default_factory=utc_now)

    lines_valid: bool
    balance_valid: bool
    is_valid: bool

    issues: list[ValidationIssue] = Field(default_factory=list)

    # Warnings don't block posting but are worth surfacing
    warnings: list[str] = Field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def errors(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == "error"]
