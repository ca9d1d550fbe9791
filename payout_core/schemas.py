"""
Pydantic schemas for payout form validation

Field rules delegate to the pure validators in iban, amounts and currency;
the schemas only translate their results into pydantic errors whose type is
the stable error code and whose message is shown to the user as-is.
"""

from decimal import Decimal
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Type
import logging

from pydantic import BaseModel, Field, ValidationError, field_serializer, field_validator
from pydantic_core import PydanticCustomError

from .amounts import AmountValidationResult, validate_amount, validate_amount_input
from .currency import Currency, to_lowest_denomination
from .iban import validate_iban
from .logging_config import log_action

logger = logging.getLogger(__name__)


def _raise_for_amount(result: AmountValidationResult) -> Decimal:
    if not result.valid:
        raise PydanticCustomError(result.error.value, result.message)
    return result.amount


def check_amount(value: Any) -> Decimal:
    """Numeric amount in major units"""
    return _raise_for_amount(validate_amount(value))


def check_amount_input(value: Any) -> Decimal:
    """Amount as typed into a text input"""
    if not isinstance(value, str):
        raise PydanticCustomError("string_type", "Amount must be a string")
    return _raise_for_amount(validate_amount_input(value))


def check_currency(value: Any) -> Currency:
    try:
        return Currency.from_code(value)
    except ValueError:
        raise PydanticCustomError("unsupported_currency", "Please select a valid currency") from None


def check_iban(value: Any) -> str:
    """Returns the normalized IBAN"""
    if not isinstance(value, str):
        raise PydanticCustomError("string_type", "IBAN must be a string")
    result = validate_iban(value)
    if not result.valid:
        raise PydanticCustomError(result.error.value, result.message)
    return result.iban


class CreatePayoutRequest(BaseModel):
    amount: int = Field(..., gt=0, description="Amount in lowest denomination (pence/cents)")
    currency: str = Field(..., description="Currency code (GBP, EUR)")
    iban: str = Field(..., description="Normalized destination IBAN")


class PayoutFormBase(BaseModel):
    amount: Decimal = Field(..., description="Amount in major units")
    currency: Currency
    iban: str

    @field_validator("currency", mode="before")
    @classmethod
    def parse_currency(cls, value: Any) -> Currency:
        return check_currency(value)

    @field_validator("iban", mode="before")
    @classmethod
    def parse_iban(cls, value: Any) -> str:
        return check_iban(value)

    @field_serializer("currency")
    def serialize_currency(self, currency: Currency) -> str:
        return currency.code

    def to_request(self) -> CreatePayoutRequest:
        """Build the API payload, converting the amount to lowest denomination"""
        return CreatePayoutRequest(
            amount=to_lowest_denomination(self.amount),
            currency=self.currency.code,
            iban=self.iban
        )


class PayoutForm(PayoutFormBase):
    """Payout form with a numeric amount"""

    @field_validator("amount", mode="before")
    @classmethod
    def parse_amount(cls, value: Any) -> Decimal:
        return check_amount(value)


class PayoutFormInput(PayoutFormBase):
    """Payout form with the amount still as entered text"""

    @field_validator("amount", mode="before")
    @classmethod
    def parse_amount(cls, value: Any) -> Decimal:
        return check_amount_input(value)


FIELD_CHECKS: Dict[str, Callable[[Any], Any]] = {
    "amount": check_amount,
    "currency": check_currency,
    "iban": check_iban,
}


@dataclass(frozen=True)
class FieldValidationResult:
    success: bool
    error: Optional[str] = None


@dataclass(frozen=True)
class PayoutFormResult:
    success: bool
    data: Optional[PayoutFormBase] = None
    errors: Optional[Dict[str, str]] = None


def validate_field(field: str, value: Any) -> FieldValidationResult:
    """
    Validate a single PayoutForm field, e.g. on every keystroke

    Raises:
        KeyError: If field is not a payout form field
    """
    check = FIELD_CHECKS[field]
    try:
        check(value)
    except PydanticCustomError as exc:
        return FieldValidationResult(success=False, error=exc.message())
    return FieldValidationResult(success=True)


def validate_payout_form(data: Any, schema: Type[PayoutFormBase] = PayoutForm) -> PayoutFormResult:
    """
    Validate a complete payout form

    Args:
        data: Mapping of form field names to values
        schema: PayoutForm for numeric amounts, PayoutFormInput for text amounts

    Returns:
        PayoutFormResult with the parsed form, or the first error message per field
    """
    try:
        form = schema.model_validate(data)
    except ValidationError as exc:
        errors: Dict[str, str] = {}
        for error in exc.errors():
            field = str(error["loc"][0]) if error["loc"] else "form"
            errors.setdefault(field, error["msg"])

        log_action(
            logger, "info", "Payout form rejected",
            action="validate_payout_form",
            extra={"fields": sorted(errors), "schema": schema.__name__}
        )
        return PayoutFormResult(success=False, errors=errors)

    return PayoutFormResult(success=True, data=form)
