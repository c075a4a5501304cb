"""Domain exceptions for recurring-billing.

Exception hierarchy:
    DomainException (base)
    ├── Recurrence Errors
    │   └── InvalidRuleError
    └── Money Errors
        ├── InvalidAmountError
        ├── InvalidCurrencyError
        └── CurrencyMismatchError

Point queries signal exhaustion with None, never with an exception.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base exception for all domain-level errors.

    All domain exceptions inherit from this class to enable
    catching domain errors distinctly from programming errors.
    """


# =============================================================================
# Recurrence Errors
# =============================================================================


class InvalidRuleError(DomainException):
    """Raised when recurrence rule text cannot be parsed.

    Causes:
        - empty, blank or missing text
        - missing FREQ, or FREQ outside DAILY/WEEKLY/MONTHLY/YEARLY
        - a known key with a malformed or out-of-range value
          (e.g. INTERVAL=0, BYMONTH=13, BYMONTHDAY=0, BYDAY=XX)

    Unknown keys are ignored by the parser and never cause this error.
    """


# =============================================================================
# Money Errors
# =============================================================================


class InvalidAmountError(DomainException):
    """Raised when a monetary amount or scalar is unusable.

    Covers unparseable or non-finite amounts at construction and
    division of an amount by zero.
    """


class InvalidCurrencyError(DomainException):
    """Raised when a currency code is not three ASCII letters."""


class CurrencyMismatchError(DomainException):
    """Raised when two Money values of different currency are combined.

    Applies to add, subtract, compare and sum. Amounts are never
    converted between currencies.
    """
