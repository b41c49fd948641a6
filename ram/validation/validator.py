"""
Input Validation

The record stores perform no validation. Anything the user typed is
checked here first, and the flows refuse to append when the result
has errors.

IMPORTANT: Validation NEVER silently fixes input.
An amount that does not parse blocks the append; it is not
replaced by zero or rounded.
"""

from decimal import Decimal, InvalidOperation

from ram.models.records import ValidationIssue, ValidationResult


class InvalidAmountError(ValueError):
    """The text entered as an amount is not a finite decimal number."""

    def __init__(self, text: str, message: str):
        self.text = text
        super().__init__(message)


def parse_amount(text: str) -> Decimal:
    """
    Parse user-entered text into a signed decimal amount.

    Raises:
        InvalidAmountError: If the text is empty, not a number,
                            or not finite (NaN, Infinity)
    """
    cleaned = text.strip()
    if not cleaned:
        raise InvalidAmountError(text, "Amount is required")

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise InvalidAmountError(text, f"'{cleaned}' is not a valid amount")

    if not amount.is_finite():
        raise InvalidAmountError(text, f"'{cleaned}' is not a finite amount")

    return amount


class RecordInputValidator:
    """Checks the fields entered for a new record."""

    def validate_debt_input(self, name: str, amount_text: str) -> ValidationResult:
        """
        Check a new debt.

        Errors:
            amount missing, not a number, or not finite
        Warnings:
            empty name (allowed, but probably a mistake)
        """
        issues = []
        parsed_amount = None

        try:
            parsed_amount = parse_amount(amount_text)
        except InvalidAmountError as e:
            issue_type = "missing" if not amount_text.strip() else "invalid_format"
            issues.append(ValidationIssue(
                field="amount",
                issue_type=issue_type,
                message=str(e),
                severity="error",
            ))

        if not name.strip():
            issues.append(ValidationIssue(
                field="name",
                issue_type="missing",
                message="No name entered for this debt",
                severity="warning",
            ))

        return ValidationResult(issues=issues, parsed_amount=parsed_amount)

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """Short message for the presentation layer."""
        if not result.issues:
            return ""
        if result.has_errors:
            return " ".join(i.message for i in result.issues if i.severity == "error")
        return " ".join(i.message for i in result.issues)
