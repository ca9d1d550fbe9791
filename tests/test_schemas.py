"""
Test suite for payout form schemas

Tests the pydantic payout forms, single-field validation used while the user
types, and whole-form validation used on submit.
"""

import pytest
from decimal import Decimal
from pydantic import ValidationError

from payout_core.currency import Currency
from payout_core.schemas import (
    PayoutForm, PayoutFormInput, CreatePayoutRequest,
    validate_field, validate_payout_form
)


VALID_FORM = {
    "amount": 100.5,
    "currency": "GBP",
    "iban": "GB82WEST12345698765432",
}


class TestPayoutForm:
    """Test numeric payout form"""

    def test_valid_form(self):
        form = PayoutForm.model_validate(VALID_FORM)
        assert form.amount == Decimal("100.5")
        assert form.currency is Currency.GBP
        assert form.iban == "GB82WEST12345698765432"
        assert form.model_dump() == {
            "amount": Decimal("100.5"),
            "currency": "GBP",
            "iban": "GB82WEST12345698765432",
        }

    def test_iban_is_normalized(self):
        form = PayoutForm(amount=10, currency="EUR", iban="gb82 west 1234 5698 7654 32")
        assert form.iban == "GB82WEST12345698765432"
        assert form.currency is Currency.EUR

    @pytest.mark.parametrize("missing", ["amount", "currency", "iban"])
    def test_missing_fields(self, missing):
        data = {k: v for k, v in VALID_FORM.items() if k != missing}
        with pytest.raises(ValidationError):
            PayoutForm.model_validate(data)

    def test_error_types_are_stable_codes(self):
        with pytest.raises(ValidationError) as exc_info:
            PayoutForm.model_validate({
                "amount": -100,
                "currency": "USD",
                "iban": "GB00WEST12345698765432",
            })

        errors = {e["loc"][0]: e for e in exc_info.value.errors()}
        assert errors["amount"]["type"] == "not_positive"
        assert errors["amount"]["msg"] == "Amount must be greater than 0"
        assert errors["currency"]["type"] == "unsupported_currency"
        assert errors["iban"]["type"] == "invalid_checksum"
        assert errors["iban"]["msg"] == "Invalid IBAN checksum"

    def test_to_request(self):
        """Test the API payload carries the amount in pence"""
        form = PayoutForm(amount=Decimal("1234.56"), currency="GBP", iban="GB82WEST12345698765432")
        request = form.to_request()
        assert isinstance(request, CreatePayoutRequest)
        assert request.model_dump() == {
            "amount": 123456,
            "currency": "GBP",
            "iban": "GB82WEST12345698765432",
        }

    def test_request_rejects_non_positive_amount(self):
        with pytest.raises(ValidationError):
            CreatePayoutRequest(amount=0, currency="GBP", iban="GB82WEST12345698765432")


class TestPayoutFormInput:
    """Test text payout form"""

    def test_transforms_string_amount(self):
        form = PayoutFormInput.model_validate({
            "amount": "100.5",
            "currency": "GBP",
            "iban": "gb82 west 1234 5698 7654 32",
        })
        assert form.model_dump() == {
            "amount": Decimal("100.5"),
            "currency": "GBP",
            "iban": "GB82WEST12345698765432",
        }
        assert form.to_request().amount == 10050

    @pytest.mark.parametrize("amount, message", [
        ("", "Amount is required"),
        ("abc", "Amount must be a valid number"),
        ("0", "Amount must be greater than 0"),
        ("-10", "Amount must be greater than 0"),
        ("10.999", "Amount can only have up to 2 decimal places"),
        (100, "Amount must be a string"),
    ])
    def test_amount_errors(self, amount, message):
        result = validate_payout_form(
            {"amount": amount, "currency": "GBP", "iban": "GB82WEST12345698765432"},
            schema=PayoutFormInput
        )
        assert not result.success
        assert result.errors == {"amount": message}


class TestValidateField:
    """Test single-field validation"""

    def test_amount(self):
        assert validate_field("amount", 100).success
        result = validate_field("amount", -100)
        assert not result.success
        assert result.error == "Amount must be greater than 0"

    def test_currency(self):
        assert validate_field("currency", "GBP").success
        result = validate_field("currency", "USD")
        assert not result.success
        assert result.error == "Please select a valid currency"

    def test_iban(self):
        assert validate_field("iban", "GB82WEST12345698765432").success
        result = validate_field("iban", "INVALID")
        assert not result.success
        assert result.error.startswith("Invalid IBAN format")
        assert validate_field("iban", None).error == "IBAN must be a string"

    def test_unknown_field(self):
        with pytest.raises(KeyError):
            validate_field("reference", "abc")


class TestValidatePayoutForm:
    """Test whole-form validation"""

    def test_valid_form(self):
        result = validate_payout_form(VALID_FORM)
        assert result.success
        assert result.errors is None
        assert result.data.model_dump() == {
            "amount": Decimal("100.5"),
            "currency": "GBP",
            "iban": "GB82WEST12345698765432",
        }

    def test_errors_for_every_invalid_field(self):
        result = validate_payout_form({"amount": -100, "currency": "USD", "iban": "INVALID"})
        assert not result.success
        assert result.data is None
        assert set(result.errors) == {"amount", "currency", "iban"}

    def test_one_error_per_field(self):
        """Test a negative amount with too many decimals reports one message"""
        result = validate_payout_form({
            "amount": -100.999,
            "currency": "GBP",
            "iban": "GB82WEST12345698765432",
        })
        assert result.errors == {"amount": "Amount must be greater than 0"}

    def test_missing_field(self):
        result = validate_payout_form({"amount": 100, "currency": "GBP"})
        assert result.errors == {"iban": "Field required"}

    def test_unknown_country_message(self):
        result = validate_payout_form({
            "amount": 100,
            "currency": "GBP",
            "iban": "XX82WEST12345698765432",
        })
        assert result.errors == {"iban": "Unknown country code: XX"}

    def test_non_mapping_input(self):
        result = validate_payout_form("not a form")
        assert not result.success
        assert list(result.errors) == ["form"]
