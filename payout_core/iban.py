"""
IBAN Validation Module

Normalizes and validates International Bank Account Numbers (ISO 13616):
structure, per-country length and the MOD-97 (ISO 7064) checksum.

All validators are pure functions that report failures as result values.
Checks run in a fixed order (structure, length, checksum) and stop at the
first failure.
"""

from dataclasses import dataclass
from typing import Dict, Optional
from enum import Enum
import logging
import re
import string

from .logging_config import log_action

logger = logging.getLogger(__name__)


# Country code -> total IBAN length (SWIFT IBAN registry)
IBAN_LENGTHS: Dict[str, int] = {
    "AD": 24, "AE": 23, "AL": 28, "AT": 20, "AZ": 28,
    "BA": 20, "BE": 16, "BG": 22, "BH": 22, "BI": 27,
    "BR": 29, "BY": 28, "CH": 21, "CR": 22, "CY": 28,
    "CZ": 24, "DE": 22, "DJ": 27, "DK": 18, "DO": 28,
    "EE": 20, "EG": 29, "ES": 24, "FI": 18, "FK": 18,
    "FO": 18, "FR": 27, "GB": 22, "GE": 22, "GI": 23,
    "GL": 18, "GR": 27, "GT": 28, "HN": 28, "HR": 21,
    "HU": 28, "IE": 22, "IL": 23, "IQ": 23, "IS": 26,
    "IT": 27, "JO": 30, "KW": 30, "KZ": 20, "LB": 28,
    "LC": 32, "LI": 21, "LT": 20, "LU": 20, "LV": 21,
    "LY": 25, "MC": 27, "MD": 24, "ME": 22, "MK": 19,
    "MN": 20, "MR": 27, "MT": 31, "MU": 30, "NI": 28,
    "NL": 18, "NO": 15, "OM": 23, "PK": 24, "PL": 28,
    "PS": 29, "PT": 25, "QA": 29, "RO": 24, "RS": 22,
    "SA": 24, "SC": 31, "SD": 18, "SE": 24, "SI": 19,
    "SK": 24, "SM": 27, "SO": 23, "ST": 25, "SV": 28,
    "TL": 23, "TN": 24, "TR": 26, "UA": 29, "VA": 22,
    "VG": 24, "XK": 20, "YE": 30,
}

IBAN_MIN_LENGTH = 15
IBAN_MAX_LENGTH = 34

IBAN_PATTERN = re.compile(r"^[A-Z]{2}[0-9]{2}[A-Z0-9]{1,30}$")
_WHITESPACE = re.compile(r"\s+")

# 0-9 map to themselves, A-Z to 10..35
_CHECKSUM_DIGITS: Dict[str, str] = {
    char: str(int(char, 36)) for char in string.digits + string.ascii_uppercase
}


class IbanError(Enum):
    """Reasons an IBAN is rejected, in the order they are checked"""
    INVALID_FORMAT = "invalid_format"
    UNKNOWN_COUNTRY_CODE = "unknown_country_code"
    INVALID_LENGTH = "invalid_length"
    INVALID_CHECKSUM = "invalid_checksum"


@dataclass(frozen=True)
class IbanValidationResult:
    """Outcome of validate_iban()"""
    valid: bool
    iban: str  # Normalized form of the input
    error: Optional[IbanError] = None
    message: Optional[str] = None

    def __bool__(self) -> bool:
        return self.valid


def normalize_iban(value: str) -> str:
    """
    Convert an IBAN to its canonical form: uppercase, no whitespace.

    Example:
        normalize_iban('gb82 west 1234') -> 'GB82WEST1234'
    """
    if not isinstance(value, str):
        raise TypeError(f"IBAN must be a string, not {type(value).__name__}")
    return _WHITESPACE.sub("", value.upper())


def validate_iban_structure(iban: str) -> bool:
    """Check the 2 letters + 2 digits + alphanumeric shape and overall bounds"""
    if not IBAN_MIN_LENGTH <= len(iban) <= IBAN_MAX_LENGTH:
        return False
    return IBAN_PATTERN.fullmatch(iban) is not None


def validate_iban_length(iban: str) -> bool:
    """Check the length against the registry entry for its country code"""
    expected = IBAN_LENGTHS.get(iban[:2])
    return expected is not None and len(iban) == expected


def validate_iban_checksum(iban: str) -> bool:
    """
    MOD-97 check: move the first four characters to the end, map letters
    to 10..35 and require the resulting number mod 97 to equal 1.

    The remainder is folded digit by digit so the full number is never built.
    Any character outside 0-9/A-Z (lowercase included) fails the check.
    """
    rearranged = iban[4:] + iban[:4]
    remainder = 0
    for char in rearranged:
        digits = _CHECKSUM_DIGITS.get(char)
        if digits is None:
            return False
        for digit in digits:
            remainder = (remainder * 10 + int(digit)) % 97
    return remainder == 1


def mask_iban(iban: str) -> str:
    """Hide all but the first and last four characters"""
    if len(iban) <= 8:
        return iban
    return iban[:4] + "*" * (len(iban) - 8) + iban[-4:]


def format_iban(iban: str) -> str:
    """Print an IBAN in groups of four: 'GB82 WEST 1234 5698 7654 32'"""
    normalized = normalize_iban(iban)
    return " ".join(normalized[i:i + 4] for i in range(0, len(normalized), 4))


def _reject(iban: str, error: IbanError, message: str) -> IbanValidationResult:
    log_action(
        logger, "debug", "IBAN rejected",
        action="validate_iban", error_code=error.value,
        extra={"iban": mask_iban(iban)}
    )
    return IbanValidationResult(valid=False, iban=iban, error=error, message=message)


def validate_iban(value: str) -> IbanValidationResult:
    """
    Validate an IBAN as entered by a user.

    Args:
        value: Raw IBAN, any case, spaces allowed

    Returns:
        IbanValidationResult carrying the normalized IBAN and, on failure,
        the first failing check and a human readable message
    """
    iban = normalize_iban(value)

    if not validate_iban_structure(iban):
        return _reject(
            iban, IbanError.INVALID_FORMAT,
            "Invalid IBAN format. Must start with 2 letters followed by 2 digits"
        )

    if not validate_iban_length(iban):
        country_code = iban[:2]
        expected = IBAN_LENGTHS.get(country_code)
        if expected is None:
            return _reject(
                iban, IbanError.UNKNOWN_COUNTRY_CODE,
                f"Unknown country code: {country_code}"
            )
        return _reject(
            iban, IbanError.INVALID_LENGTH,
            f"Invalid IBAN length for {country_code}: expected {expected}, got {len(iban)}"
        )

    if not validate_iban_checksum(iban):
        return _reject(iban, IbanError.INVALID_CHECKSUM, "Invalid IBAN checksum")

    return IbanValidationResult(valid=True, iban=iban)
