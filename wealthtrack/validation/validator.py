"""
Two-Stage Transaction Validation

DESIGN DECISION: The transaction form is checked in two stages:

STAGE 1 - SCHEMA VALIDATION:
- Required field presence (amount, category, date)
- Amount is a number and greater than zero
- Investor fields are complete and only used on income
- Text fields and duration within the limits the stored models accept

STAGE 2 - SEMANTIC VALIDATION:
- Future dates
- Maturity already in the past
- Unusually high interest rates
- Stored periodic interest far from the computed one

Stage 2 only runs when stage 1 passes.

IMPORTANT: Validation NEVER silently fixes issues.
It reports them for the user to correct.
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

from wealthtrack.interest.projection import periodic_interest_amount
from wealthtrack.models.transaction import (
    InvestorDetails,
    Transaction,
    TransactionDraft,
    TransactionType,
    ValidationIssue,
    ValidationResult,
)
from wealthtrack.utils.dates import maturity_date_for

# Annual rates above this (percent) get a warning
HIGH_ROI_PERCENT = Decimal("36")

# Longest text accepted per form field; mirrors the stored models
MAX_LENGTHS = {
    "category": ("Category", 200),
    "payment_mode": ("Payment mode", 100),
    "note": ("Note", 1000),
    "investor_name": ("Investor name", 200),
    "purpose": ("Purpose", 500),
}
MAX_DURATION_MONTHS = 1200


def parse_amount(raw: Optional[str]) -> Optional[Decimal]:
    """Parse a form amount; None if missing or not a finite number."""
    if raw is None or not str(raw).strip():
        return None
    try:
        value = Decimal(str(raw).strip().replace(",", ""))
    except InvalidOperation:
        return None
    return value if value.is_finite() else None


class TransactionValidator:
    """
    Validates transaction form drafts through a two-stage pipeline.

    Stage 1: Schema validation
    Stage 2: Semantic validation
    """

    def _validate_schema(
        self,
        draft: TransactionDraft,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 1: Schema validation.

        Returns: (is_valid, list_of_issues)
        """
        issues = []

        if draft.amount is None or not draft.amount.strip():
            issues.append(ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Amount is required",
                severity="error",
            ))
        else:
            amount = parse_amount(draft.amount)
            if amount is None:
                issues.append(ValidationIssue(
                    field="amount",
                    issue_type="invalid_value",
                    message=f"Amount '{draft.amount}' is not a number",
                    severity="error",
                ))
            elif amount <= 0:
                issues.append(ValidationIssue(
                    field="amount",
                    issue_type="invalid_value",
                    message="Amount must be greater than zero",
                    severity="error",
                ))

        if not draft.category:
            issues.append(ValidationIssue(
                field="category",
                issue_type="missing",
                message="Please choose a category",
                severity="error",
            ))

        if draft.on_date is None:
            issues.append(ValidationIssue(
                field="date",
                issue_type="missing",
                message="Date is required",
                severity="error",
            ))

        issues.extend(self._validate_lengths(draft))

        if draft.has_investor_details:
            issues.extend(self._validate_investor_schema(draft))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return is_valid, issues

    def _validate_lengths(self, draft: TransactionDraft) -> list[ValidationIssue]:
        issues = []
        for field, (label, limit) in MAX_LENGTHS.items():
            value = getattr(draft, field)
            if value and len(value) > limit:
                issues.append(ValidationIssue(
                    field=field,
                    issue_type="too_long",
                    message=f"{label} is too long (max {limit} characters)",
                    severity="error",
                ))
        return issues

    def _validate_investor_schema(
        self,
        draft: TransactionDraft,
    ) -> list[ValidationIssue]:
        issues = []

        if draft.type != TransactionType.INCOME:
            issues.append(ValidationIssue(
                field="investor_details",
                issue_type="invalid_value",
                message="Investor details can only be recorded on income",
                severity="error",
            ))

        roi = parse_amount(draft.roi)
        if roi is None:
            issues.append(ValidationIssue(
                field="roi",
                issue_type="missing",
                message="Rate of interest is required for investor funds",
                severity="error",
            ))
        elif roi < 0:
            issues.append(ValidationIssue(
                field="roi",
                issue_type="invalid_value",
                message="Rate of interest cannot be negative",
                severity="error",
            ))

        if draft.return_period is None:
            issues.append(ValidationIssue(
                field="return_period",
                issue_type="missing",
                message="Please choose how often interest is paid",
                severity="error",
            ))

        if draft.duration_months is None or draft.duration_months < 1:
            issues.append(ValidationIssue(
                field="duration_months",
                issue_type="invalid_value",
                message="Duration must be at least one month",
                severity="error",
            ))
        elif draft.duration_months > MAX_DURATION_MONTHS:
            issues.append(ValidationIssue(
                field="duration_months",
                issue_type="invalid_value",
                message=f"Duration cannot exceed {MAX_DURATION_MONTHS} months",
                severity="error",
            ))

        if draft.periodic_interest_amount:
            periodic = parse_amount(draft.periodic_interest_amount)
            if periodic is None or periodic < 0:
                issues.append(ValidationIssue(
                    field="periodic_interest_amount",
                    issue_type="invalid_value",
                    message="Interest per period must be a non-negative number",
                    severity="error",
                ))

        return issues

    def _validate_semantic(
        self,
        draft: TransactionDraft,
        today: date,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 2: Semantic validation.

        Only warnings here; the user may save anyway.
        """
        issues = []

        if draft.on_date > today:
            issues.append(ValidationIssue(
                field="date",
                issue_type="future_date",
                message=f"Date ({draft.on_date}) is in the future",
                severity="warning",
            ))

        if draft.has_investor_details:
            maturity = maturity_date_for(draft.on_date, draft.duration_months)
            if maturity < today:
                issues.append(ValidationIssue(
                    field="duration_months",
                    issue_type="past_maturity",
                    message=f"This fund already matured on {maturity}",
                    severity="warning",
                ))

            roi = parse_amount(draft.roi)
            if roi > HIGH_ROI_PERCENT:
                issues.append(ValidationIssue(
                    field="roi",
                    issue_type="suspicious_value",
                    message=f"Rate of interest ({roi}%) seems unusually high",
                    severity="warning",
                ))

            periodic = parse_amount(draft.periodic_interest_amount)
            if periodic:
                expected = periodic_interest_amount(
                    parse_amount(draft.amount),
                    roi,
                    draft.return_period,
                    draft.duration_months,
                )
                # Allow 5% difference for rounding
                if expected and abs(periodic - expected) > expected * Decimal("0.05"):
                    issues.append(ValidationIssue(
                        field="periodic_interest_amount",
                        issue_type="inconsistent",
                        message=(
                            f"Interest per period (₹{periodic}) differs from "
                            f"the computed ₹{expected.quantize(Decimal('0.01'))}"
                        ),
                        severity="warning",
                    ))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return is_valid, issues

    def validate(
        self,
        draft: TransactionDraft,
        today: Optional[date] = None,
    ) -> ValidationResult:
        """
        Run full two-stage validation pipeline.

        Args:
            draft: The form input to validate
            today: Reference date for date checks (defaults to today)

        Returns:
            ValidationResult with all issues found
        """
        today = today or date.today()
        all_issues = []

        schema_valid, schema_issues = self._validate_schema(draft)
        all_issues.extend(schema_issues)

        if schema_valid:
            _, semantic_issues = self._validate_semantic(draft, today)
            all_issues.extend(semantic_issues)

        return ValidationResult(issues=all_issues)

    def build_transaction(
        self,
        draft: TransactionDraft,
        user_id: str,
    ) -> Transaction:
        """
        Turn a draft into a Transaction.

        Call only after validate() reported no errors.

        Raises:
            ValueError: If the draft does not pass schema validation
        """
        schema_valid, issues = self._validate_schema(draft)
        if not schema_valid:
            messages = "; ".join(i.message for i in issues if i.severity == "error")
            raise ValueError(f"Cannot build transaction: {messages}")

        investor_details = None
        if draft.has_investor_details:
            investor_details = InvestorDetails(
                investor_name=draft.investor_name,
                roi=parse_amount(draft.roi),
                return_period=draft.return_period,
                duration_months=draft.duration_months,
                purpose=draft.purpose or None,
                periodic_interest_amount=parse_amount(draft.periodic_interest_amount) or None,
            )

        return Transaction(
            user_id=user_id,
            amount=parse_amount(draft.amount),
            type=draft.type,
            category=draft.category,
            payment_mode=draft.payment_mode or None,
            note=draft.note or None,
            investor_details=investor_details,
            date=draft.on_date,
        )

    def get_user_friendly_summary(
        self,
        result: ValidationResult,
    ) -> str:
        """
        Generate a user-friendly summary of validation results.
        """
        if result.is_valid and not result.warnings:
            return "✅ All checks passed!"

        lines = []

        if result.has_errors:
            lines.append("❌ Please fix the following:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.message}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("⚠️ Please verify the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        return "\n".join(lines)
