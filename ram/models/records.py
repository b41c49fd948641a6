"""
Core Data Models for RAM

These models define the records kept by the two collections and
the result of checking user input before a record is created.

DESIGN DECISION: Records are immutable. The only lifecycle is
"append with a fresh id" and "delete by position"; nothing is
ever edited in place.
"""

from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# RECORDS
# =============================================================================

class DebtRecord(BaseModel):
    """
    A debt somebody owes to the user.

    Amounts are signed. Only positive amounts are shown as
    "owed to you"; zero and negative entries are stored as given.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Stable identifier, never reused"
    )
    name: str = Field(
        ...,
        description="Who owes the money"
    )
    amount: Decimal = Field(
        ...,
        description="Amount owed (signed)"
    )

    @property
    def is_outstanding(self) -> bool:
        """Is this debt rendered as owed to the user?"""
        return self.amount > 0


class CredentialRecord(BaseModel):
    """
    Stored login for a website.

    NOTE: the password is kept in plaintext; protection is limited
    to the authentication gate and whatever the host storage offers.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Stable identifier, never reused"
    )
    website: str
    username: str
    password: str = Field(repr=False)


# =============================================================================
# INPUT VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single problem found in user input."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'not_finite')"
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


class ValidationResult(BaseModel):
    """
    Result of checking the fields entered for a new record.

    Errors block the append; warnings are shown but do not.
    """

    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All issues found"
    )
    parsed_amount: Optional[Decimal] = Field(
        default=None,
        description="The amount, when it could be parsed"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def is_valid(self) -> bool:
        return not self.has_errors
