"""Payment input and allocation result models."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from loan_ledger.models.enums import InstallmentStatus, LoanStatus, PaymentMethod
from loan_ledger.models.loan import Installment
from loan_ledger.money import ZERO


@dataclass
class Payment:
    """Incoming repayment, owned by the caller."""

    amount: Decimal
    payment_date: date
    method: PaymentMethod = PaymentMethod.CASH
    reference: str = ""


@dataclass
class InstallmentAllocation:
    """Portion of one payment applied to one installment."""

    installment_number: int
    penalty: Decimal = ZERO
    fees: Decimal = ZERO
    interest: Decimal = ZERO
    principal: Decimal = ZERO
    previous_status: InstallmentStatus = InstallmentStatus.PENDING
    previous_payment_date: date | None = None

    @property
    def total(self) -> Decimal:
        return self.penalty + self.fees + self.interest + self.principal


@dataclass
class AllocationResult:
    """Outcome of applying (or reversing) a payment against a loan."""

    installments: list[Installment]
    allocations: list[InstallmentAllocation] = field(default_factory=list)
    applied: Decimal = ZERO
    remainder: Decimal = ZERO
    outstanding_balance: Decimal = ZERO
    loan_status: LoanStatus = LoanStatus.ACTIVE
    payment_date: date | None = None
