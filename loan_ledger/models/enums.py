"""Enumeration types for loan ledger entities."""

from enum import Enum
from typing import TypeVar

from loan_ledger.exceptions import InvalidTermsError

E = TypeVar("E", bound=Enum)


class InterestType(str, Enum):
    FLAT = "FLAT"
    REDUCING = "REDUCING"
    COMPOUND = "COMPOUND"


class PaymentFrequency(str, Enum):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    BIWEEKLY = "BIWEEKLY"
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"


class ScheduleType(str, Enum):
    FIXED = "FIXED"
    FLEXIBLE = "FLEXIBLE"


class InstallmentStatus(str, Enum):
    PENDING = "PENDING"
    PARTIALLY_PAID = "PARTIALLY_PAID"
    PAID = "PAID"
    OVERDUE = "OVERDUE"


class LoanStatus(str, Enum):
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    CLOSED = "CLOSED"
    WRITTEN_OFF = "WRITTEN_OFF"


class PaymentMethod(str, Enum):
    CASH = "CASH"
    BANK_TRANSFER = "BANK_TRANSFER"
    MOBILE_MONEY = "MOBILE_MONEY"
    CARD = "CARD"
    CHEQUE = "CHEQUE"


class WaiverStatus(str, Enum):
    AUTO_APPROVED = "AUTO_APPROVED"
    PENDING_APPROVAL = "PENDING_APPROVAL"


def coerce_enum(enum_cls: type[E], value: object, name: str) -> E:
    """Convert an enum member or its (case-insensitive) value to a member.

    Raises
    ------
    InvalidTermsError
        If the value is not a member of ``enum_cls``.
    """
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        normalized = value.strip().upper()
        for candidate in (normalized, normalized.replace("-", "_"), normalized.replace("-", "")):
            try:
                return enum_cls(candidate)
            except ValueError:
                continue
    allowed = ", ".join(member.value for member in enum_cls)
    raise InvalidTermsError(f"Unknown {name} {value!r}; expected one of {allowed}")
