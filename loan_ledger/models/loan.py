"""Loan and installment models for the repayment ledger."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from loan_ledger.models.enums import InstallmentStatus, LoanStatus, ScheduleType
from loan_ledger.models.terms import LoanTerms
from loan_ledger.money import ZERO, sum_money


@dataclass
class Installment:
    """One scheduled repayment obligation.

    ``penalty_amount`` is the penalty still chargeable after waivers;
    ``penalty_waived_amount`` records how much has been waived so far.
    Paid amounts are tracked per component so an allocation can be
    reversed exactly.
    """

    installment_number: int  # 1, 2, 3, ...
    due_date: date
    principal_due: Decimal
    interest_due: Decimal
    fees_due: Decimal = ZERO
    penalty_amount: Decimal = ZERO
    penalty_waived_amount: Decimal = ZERO
    penalty_paid: Decimal = ZERO
    fees_paid: Decimal = ZERO
    interest_paid: Decimal = ZERO
    principal_paid: Decimal = ZERO
    status: InstallmentStatus = InstallmentStatus.PENDING
    last_payment_date: date | None = None

    # Properties included when the record is serialized
    DERIVED_FIELDS = ("total_due", "amount_paid", "outstanding_amount")

    @property
    def total_due(self) -> Decimal:
        return self.principal_due + self.interest_due + self.fees_due + self.penalty_amount

    @property
    def amount_paid(self) -> Decimal:
        return self.penalty_paid + self.fees_paid + self.interest_paid + self.principal_paid

    @property
    def outstanding_amount(self) -> Decimal:
        return max(ZERO, self.total_due - self.amount_paid)

    @property
    def unpaid_penalty(self) -> Decimal:
        return max(ZERO, self.penalty_amount - self.penalty_paid)

    @property
    def unpaid_fees(self) -> Decimal:
        return max(ZERO, self.fees_due - self.fees_paid)

    @property
    def unpaid_interest(self) -> Decimal:
        return max(ZERO, self.interest_due - self.interest_paid)

    @property
    def unpaid_principal(self) -> Decimal:
        return max(ZERO, self.principal_due - self.principal_paid)

    @property
    def is_settled(self) -> bool:
        return self.outstanding_amount == ZERO


@dataclass
class Loan:
    """Loan aggregate: terms plus its ordered installment sequence.

    ``schedule_type`` records how the installments were generated, so a
    later modification regenerates the same kind of schedule.
    """

    loan_id: str
    principal: Decimal
    disbursement_date: date
    terms: LoanTerms
    status: LoanStatus = LoanStatus.ACTIVE
    installments: list[Installment] = field(default_factory=list)
    schedule_type: ScheduleType = ScheduleType.FIXED

    DERIVED_FIELDS = ("outstanding_balance",)

    @property
    def outstanding_balance(self) -> Decimal:
        """Sum of outstanding installment amounts."""
        return sum_money(inst.outstanding_amount for inst in self.installments)
