"""
Two-Stage Journal Validation

DESIGN DECISION: Validation happens in two distinct stages:

STAGE 1 - LINE VALIDATION:
- At least one line
- Every line names an account
- No negative debits or credits
- Each line is one-sided: a debit or a credit, never both, never neither

STAGE 2 - BALANCE VALIDATION:
- Total debits equal total credits after rounding to cents
- Only meaningful once every line is individually sound

Chart membership is checked too, but only as a warning: postings to
accounts missing from the chart are tolerated.

IMPORTANT: Validation NEVER silently fixes issues.
It reports them; the journal service refuses to post on any error.
"""

from typing import Optional

from finance_core.models.accounts import Account
from finance_core.models.common import ZERO, round_money
from finance_core.models.journal import JournalEntryInput
from finance_core.models.validation import ValidationIssue, ValidationResult


class JournalValidator:
    """
    Validates proposed journal entries through a two-stage pipeline.

    Stage 1: Line validation
    Stage 2: Balance validation (skipped when stage 1 fails)
    """

    def _validate_lines(
        self,
        entry: JournalEntryInput,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 1: per-line checks.

        Returns: (is_valid, list_of_issues)
        """
        issues = []

        if not entry.lines:
            issues.append(ValidationIssue(
                field="lines",
                issue_type="missing",
                message="A journal entry needs at least one line",
                severity="error",
                suggested_fix="Add the debit and credit lines for this event",
            ))
            return False, issues

        for index, line in enumerate(entry.lines):
            prefix = f"lines[{index}]"

            if not line.account:
                issues.append(ValidationIssue(
                    field=f"{prefix}.account",
                    issue_type="missing",
                    message=f"Line {index + 1} has no account",
                    severity="error",
                ))

            if line.debit < 0:
                issues.append(ValidationIssue(
                    field=f"{prefix}.debit",
                    issue_type="negative_amount",
                    message=f"Line {index + 1} has a negative debit ({line.debit})",
                    severity="error",
                    suggested_fix="Record the amount as a credit instead",
                ))
            if line.credit < 0:
                issues.append(ValidationIssue(
                    field=f"{prefix}.credit",
                    issue_type="negative_amount",
                    message=f"Line {index + 1} has a negative credit ({line.credit})",
                    severity="error",
                    suggested_fix="Record the amount as a debit instead",
                ))

            if line.debit != ZERO and line.credit != ZERO:
                issues.append(ValidationIssue(
                    field=prefix,
                    issue_type="two_sided",
                    message=f"Line {index + 1} carries both a debit and a credit",
                    severity="error",
                    suggested_fix="Split it into two lines",
                ))
            elif line.debit == ZERO and line.credit == ZERO:
                issues.append(ValidationIssue(
                    field=prefix,
                    issue_type="zero_amount",
                    message=f"Line {index + 1} has neither a debit nor a credit",
                    severity="error",
                ))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return is_valid, issues

    def _validate_balance(
        self,
        entry: JournalEntryInput,
    ) -> tuple[bool, list[ValidationIssue]]:
        """Stage 2: debits must equal credits."""
        total_debit = round_money(sum((line.debit for line in entry.lines), ZERO))
        total_credit = round_money(sum((line.credit for line in entry.lines), ZERO))

        if total_debit == total_credit:
            return True, []

        return False, [ValidationIssue(
            field="lines",
            issue_type="unbalanced",
            message=(
                f"Debits ({total_debit}) do not equal credits ({total_credit}); "
                f"difference {total_debit - total_credit}"
            ),
            severity="error",
            suggested_fix="Add or correct a line so both sides match",
        )]

    def _check_chart(
        self,
        entry: JournalEntryInput,
        chart: list[Account],
    ) -> list[ValidationIssue]:
        """Warn about accounts that are not in the chart."""
        known = {account.code for account in chart}
        issues = []
        for index, line in enumerate(entry.lines):
            if line.account and line.account not in known:
                issues.append(ValidationIssue(
                    field=f"lines[{index}].account",
                    issue_type="unknown_account",
                    message=f"Account '{line.account}' is not in the chart of accounts",
                    severity="warning",
                ))
        return issues

    def validate(
        self,
        entry: JournalEntryInput,
        chart: Optional[list[Account]] = None,
    ) -> ValidationResult:
        """
        Run the full validation pipeline.

        Args:
            entry: The proposed journal entry
            chart: The tenant's chart; when empty or None, chart checks are skipped

        Returns:
            ValidationResult with all issues found
        """
        all_issues = []

        lines_valid, line_issues = self._validate_lines(entry)
        all_issues.extend(line_issues)

        # Only check balance if every line is sound
        balance_valid = False
        if lines_valid:
            balance_valid, balance_issues = self._validate_balance(entry)
            all_issues.extend(balance_issues)

        if chart:
            all_issues.extend(self._check_chart(entry, chart))

        warnings = [issue.message for issue in all_issues if issue.severity == "warning"]

        return ValidationResult(
            lines_valid=lines_valid,
            balance_valid=balance_valid,
            is_valid=lines_valid and balance_valid,
            issues=all_issues,
            warnings=warnings,
        )

    def get_summary(self, result: ValidationResult) -> str:
        """One-paragraph summary of the errors, used as the exception message."""
        if result.is_valid:
            return "Journal entry is valid"
        messages = "; ".join(issue.message for issue in result.errors)
        return f"Journal entry rejected: {messages}"
