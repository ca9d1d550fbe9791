"""
Payout Validation Core

IBAN validation and monetary amount handling for merchant payouts:
normalization, per-country length checks, MOD-97 checksums,
lowest-denomination conversions and currency display formatting.
"""

__version__ = "1.0.0"
