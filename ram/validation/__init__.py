"""Input validation package."""

from ram.validation.validator import (
    InvalidAmountError,
    RecordInputValidator,
    parse_amount,
)

__all__ = ["InvalidAmountError", "RecordInputValidator", "parse_amount"]
