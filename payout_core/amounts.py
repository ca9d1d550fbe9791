"""
Payout Amount Validation Module

Checks candidate payout amounts, expressed in major units, before they are
converted to lowest denomination and submitted. Rules are evaluated in a
fixed order and only the first failure is reported:

    required -> not a number -> not positive -> too many decimals -> exceeds maximum
"""

from decimal import Decimal
from dataclasses import dataclass
from typing import Optional
from enum import Enum
import logging

from .config import get_config
from .currency import (
    Currency, Number, decimal_places, format_currency, parse_decimal, to_decimal
)
from .logging_config import log_action

logger = logging.getLogger(__name__)

# Payouts are settled in whole pence/cents
MAX_DECIMAL_PLACES = 2


class AmountError(Enum):
    """Amount validation failures, in precedence order"""
    REQUIRED = "required"
    NOT_A_NUMBER = "not_a_number"
    NOT_POSITIVE = "not_positive"
    TOO_MANY_DECIMALS = "too_many_decimals"
    EXCEEDS_MAXIMUM = "exceeds_maximum"


@dataclass(frozen=True)
class AmountValidationResult:
    """Outcome of an amount validation; amount is set only when valid"""
    valid: bool
    amount: Optional[Decimal] = None
    error: Optional[AmountError] = None
    message: Optional[str] = None

    def __bool__(self) -> bool:
        return self.valid


def _format_maximum(maximum: Decimal) -> str:
    formatted = format_currency(maximum, Currency.GBP, is_lowest_denomination=False)
    if decimal_places(maximum) == 0:
        formatted = formatted[:-3]
    return formatted


def _error_message(error: AmountError, maximum: Optional[Decimal]) -> str:
    if error is AmountError.REQUIRED:
        return "Amount is required"
    if error is AmountError.NOT_A_NUMBER:
        return "Amount must be a valid number"
    if error is AmountError.NOT_POSITIVE:
        return "Amount must be greater than 0"
    if error is AmountError.TOO_MANY_DECIMALS:
        return f"Amount can only have up to {MAX_DECIMAL_PLACES} decimal places"
    return f"Amount cannot exceed {_format_maximum(maximum)}"


def _reject(error: AmountError, maximum: Optional[Decimal] = None) -> AmountValidationResult:
    log_action(
        logger, "debug", "Amount rejected",
        action="validate_amount", error_code=error.value
    )
    return AmountValidationResult(
        valid=False, error=error, message=_error_message(error, maximum)
    )


def _check_decimal(amount: Decimal, maximum: Optional[Decimal]) -> AmountValidationResult:
    if maximum is None:
        maximum = get_config().max_payout_decimal

    if not amount.is_finite():
        return _reject(AmountError.NOT_A_NUMBER)
    if amount <= 0:
        return _reject(AmountError.NOT_POSITIVE)
    if decimal_places(amount) > MAX_DECIMAL_PLACES:
        return _reject(AmountError.TOO_MANY_DECIMALS)
    if amount > maximum:
        return _reject(AmountError.EXCEEDS_MAXIMUM, maximum)

    return AmountValidationResult(valid=True, amount=amount)


def validate_amount(amount: Number, maximum: Optional[Decimal] = None) -> AmountValidationResult:
    """
    Validate a numeric major-unit amount.

    Args:
        amount: Candidate amount (int, float or Decimal)
        maximum: Upper bound in major units; defaults to PayoutConfig.max_payout_amount

    Returns:
        AmountValidationResult with the Decimal amount when valid
    """
    try:
        value = to_decimal(amount)
    except TypeError:
        return _reject(AmountError.NOT_A_NUMBER)
    return _check_decimal(value, maximum)


def validate_amount_input(text: str, maximum: Optional[Decimal] = None) -> AmountValidationResult:
    """
    Validate an amount typed into a text field.

    Empty input is reported as required before any numeric rule applies.
    """
    if not isinstance(text, str):
        raise TypeError(f"Amount input must be a string, not {type(text).__name__}")

    if not text.strip():
        return _reject(AmountError.REQUIRED)

    value = parse_decimal(text)
    if value is None:
        return _reject(AmountError.NOT_A_NUMBER)

    return _check_decimal(value, maximum)
