"""Loan terms, milestones and modification payloads."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from loan_ledger.exceptions import InvalidTermsError
from loan_ledger.models.enums import (
    InterestType,
    PaymentFrequency,
    ScheduleType,
    coerce_enum,
)
from loan_ledger.money import to_decimal


@dataclass(frozen=True)
class LoanTerms:
    """Immutable loan pricing terms.

    Rates are percentages: ``annual_rate=18`` means 18% a year and
    ``late_penalty_percent=5`` means 5% of the overdue amount per 30 days.
    Numbers are coerced to ``Decimal`` and enum fields accept their string
    values.
    """

    principal: Decimal
    annual_rate: Decimal
    term_days: int
    interest_type: InterestType = InterestType.REDUCING
    payment_frequency: PaymentFrequency = PaymentFrequency.MONTHLY
    processing_fee_percent: Decimal = Decimal("0")
    platform_fee_per_period: Decimal = Decimal("0")
    late_penalty_percent: Decimal = Decimal("0")
    grace_period_days: int = 0

    def __post_init__(self) -> None:
        for name in (
            "principal",
            "annual_rate",
            "processing_fee_percent",
            "platform_fee_per_period",
            "late_penalty_percent",
        ):
            object.__setattr__(self, name, to_decimal(getattr(self, name), name))

        for name in ("term_days", "grace_period_days"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidTermsError(f"{name} must be an integer, got {value!r}")

        object.__setattr__(
            self,
            "interest_type",
            coerce_enum(InterestType, self.interest_type, "interest type"),
        )
        object.__setattr__(
            self,
            "payment_frequency",
            coerce_enum(PaymentFrequency, self.payment_frequency, "payment frequency"),
        )


@dataclass(frozen=True)
class Milestone:
    """One flexible-schedule repayment point.

    Exactly one of ``principal_percentage`` (share of the principal still
    outstanding at that point) or ``principal_amount`` must be set.
    """

    days_from_disbursement: int
    principal_percentage: Decimal | None = None
    principal_amount: Decimal | None = None

    def __post_init__(self) -> None:
        if isinstance(self.days_from_disbursement, bool) or not isinstance(
            self.days_from_disbursement, int
        ):
            raise InvalidTermsError("days_from_disbursement must be an integer")
        if (self.principal_percentage is None) == (self.principal_amount is None):
            raise InvalidTermsError(
                "Milestone needs exactly one of principal_percentage or principal_amount"
            )
        if self.principal_percentage is not None:
            object.__setattr__(
                self,
                "principal_percentage",
                to_decimal(self.principal_percentage, "principal_percentage"),
            )
        if self.principal_amount is not None:
            object.__setattr__(
                self,
                "principal_amount",
                to_decimal(self.principal_amount, "principal_amount"),
            )


@dataclass(frozen=True)
class LoanModification:
    """Requested change to a live loan.

    ``None`` keeps the loan's current value; an explicit zero rate is a
    real change.
    """

    principal: Decimal | None = None
    annual_rate: Decimal | None = None
    term_days: int | None = None
    payment_frequency: PaymentFrequency | None = None
    schedule_type: ScheduleType | None = None
    milestones: list[Milestone] = field(default_factory=list)
    start_date: date | None = None
    reason: str = ""

    def __post_init__(self) -> None:
        if self.principal is not None:
            object.__setattr__(self, "principal", to_decimal(self.principal, "principal"))
        if self.annual_rate is not None:
            object.__setattr__(self, "annual_rate", to_decimal(self.annual_rate, "annual_rate"))
        if self.payment_frequency is not None:
            object.__setattr__(
                self,
                "payment_frequency",
                coerce_enum(PaymentFrequency, self.payment_frequency, "payment frequency"),
            )
        if self.schedule_type is not None:
            object.__setattr__(
                self,
                "schedule_type",
                coerce_enum(ScheduleType, self.schedule_type, "schedule type"),
            )
