"""Payment allocation and reversal against a loan's installments."""

import logging
from dataclasses import replace
from datetime import date
from typing import Sequence

from loan_ledger.config import LedgerConfig
from loan_ledger.exceptions import InvalidPaymentError, LedgerError
from loan_ledger.models.enums import InstallmentStatus, LoanStatus
from loan_ledger.models.loan import Installment, Loan
from loan_ledger.models.payment import AllocationResult, InstallmentAllocation, Payment
from loan_ledger.money import ZERO, sum_money, to_decimal, to_money

logger = logging.getLogger(__name__)

# Oldest obligations inside an installment are cleared first
ALLOCATION_ORDER = ("penalty", "fees", "interest", "principal")


def _ordered(installments: Sequence[Installment]) -> list[Installment]:
    return sorted(installments, key=lambda inst: inst.installment_number)


class PaymentAllocator:
    """Apply payments oldest-installment-first, penalty then fees, interest, principal.

    The allocator reads the current state and returns the next state; it is
    not safe to run twice concurrently against the same loan. Callers must
    serialize allocations per loan.

    Parameters
    ----------
    config : LedgerConfig | None
        Overpayment tolerance and credit-mode default.
    """

    def __init__(self, config: LedgerConfig | None = None) -> None:
        self.config = config or LedgerConfig()

    def apply(
        self,
        loan: Loan,
        installments: Sequence[Installment],
        payment: Payment,
        *,
        allow_credit: bool | None = None,
    ) -> AllocationResult:
        """Apply a ``Payment`` record."""
        return self.apply_payment(
            loan,
            installments,
            payment.amount,
            payment.payment_date,
            allow_credit=allow_credit,
        )

    def apply_payment(
        self,
        loan: Loan,
        installments: Sequence[Installment],
        amount: object,
        payment_date: date,
        *,
        allow_credit: bool | None = None,
    ) -> AllocationResult:
        """Allocate a payment amount across unpaid installments.

        Parameters
        ----------
        loan : Loan
            Loan the installments belong to.
        installments : Sequence[Installment]
            Current installments; not modified.
        amount : object
            Payment amount.
        payment_date : date
            Date the money was received.
        allow_credit : bool | None
            Accept payments above the outstanding balance and report the
            excess as remainder. Defaults to ``config.payment.allow_credit``.

        Returns
        -------
        AllocationResult
            Updated installments, per-installment allocations and any
            unconsumed remainder.

        Raises
        ------
        InvalidPaymentError
            If the amount is not positive, or exceeds the outstanding
            balance by more than the tolerance outside credit mode.
        """
        try:
            pool = to_money(to_decimal(amount, "payment amount"))
        except LedgerError as exc:
            raise InvalidPaymentError(str(exc)) from exc
        if pool <= 0:
            logger.warning("Rejected non-positive payment for loan %s: %s", loan.loan_id, amount)
            raise InvalidPaymentError(f"Payment amount must be positive, got {pool}")

        ordered = _ordered(installments)
        outstanding = sum_money(inst.outstanding_amount for inst in ordered)
        credit_mode = self.config.payment.allow_credit if allow_credit is None else allow_credit
        tolerance = self.config.payment.overpayment_tolerance
        if not credit_mode and pool > outstanding + tolerance:
            logger.warning(
                "Rejected payment %s for loan %s above outstanding balance %s",
                pool,
                loan.loan_id,
                outstanding,
            )
            raise InvalidPaymentError(
                f"Payment {pool} exceeds outstanding balance {outstanding}"
            )

        updated: list[Installment] = []
        allocations: list[InstallmentAllocation] = []

        for installment in ordered:
            if pool == 0 or installment.is_settled:
                updated.append(replace(installment))
                continue

            allocation = InstallmentAllocation(
                installment_number=installment.installment_number,
                previous_status=installment.status,
                previous_payment_date=installment.last_payment_date,
            )
            for component in ALLOCATION_ORDER:
                portion = min(pool, getattr(installment, f"unpaid_{component}"))
                setattr(allocation, component, portion)
                pool -= portion

            paid = replace(
                installment,
                penalty_paid=installment.penalty_paid + allocation.penalty,
                fees_paid=installment.fees_paid + allocation.fees,
                interest_paid=installment.interest_paid + allocation.interest,
                principal_paid=installment.principal_paid + allocation.principal,
                last_payment_date=payment_date,
            )
            paid.status = (
                InstallmentStatus.PAID if paid.is_settled else InstallmentStatus.PARTIALLY_PAID
            )
            updated.append(paid)
            allocations.append(allocation)

        applied = sum_money(allocation.total for allocation in allocations)
        balance = sum_money(inst.outstanding_amount for inst in updated)
        loan_status = loan.status
        if balance == 0 and loan.status == LoanStatus.ACTIVE:
            loan_status = LoanStatus.CLOSED

        logger.info(
            "Applied %s to loan %s across %d installments, remainder=%s, balance=%s",
            applied,
            loan.loan_id,
            len(allocations),
            pool,
            balance,
            extra={"loan_id": loan.loan_id, "amount": applied},
        )
        return AllocationResult(
            installments=updated,
            allocations=allocations,
            applied=applied,
            remainder=pool,
            outstanding_balance=balance,
            loan_status=loan_status,
            payment_date=payment_date,
        )

    def reverse(
        self,
        loan: Loan,
        installments: Sequence[Installment],
        result: AllocationResult,
    ) -> AllocationResult:
        """Undo a previous allocation.

        Subtracts each recorded component amount and restores the status and
        payment date the installment had before the allocation.

        Raises
        ------
        InvalidPaymentError
            If an allocated installment is missing or holds less than the
            amount being reversed.
        """
        by_number = {allocation.installment_number: allocation for allocation in result.allocations}
        present = {inst.installment_number for inst in installments}
        missing = sorted(set(by_number) - present)
        if missing:
            raise InvalidPaymentError(f"Cannot reverse: installments {missing} not found")

        restored: list[Installment] = []
        for installment in _ordered(installments):
            allocation = by_number.get(installment.installment_number)
            if allocation is None:
                restored.append(replace(installment))
                continue

            for component in ALLOCATION_ORDER:
                if getattr(installment, f"{component}_paid") < getattr(allocation, component):
                    raise InvalidPaymentError(
                        f"Cannot reverse {component} on installment "
                        f"{installment.installment_number}: more than was paid"
                    )

            restored.append(
                replace(
                    installment,
                    penalty_paid=installment.penalty_paid - allocation.penalty,
                    fees_paid=installment.fees_paid - allocation.fees,
                    interest_paid=installment.interest_paid - allocation.interest,
                    principal_paid=installment.principal_paid - allocation.principal,
                    status=allocation.previous_status,
                    last_payment_date=allocation.previous_payment_date,
                )
            )

        balance = sum_money(inst.outstanding_amount for inst in restored)
        loan_status = loan.status
        if balance > 0 and loan.status == LoanStatus.CLOSED:
            loan_status = LoanStatus.ACTIVE

        logger.info(
            "Reversed %s on loan %s, balance=%s",
            result.applied,
            loan.loan_id,
            balance,
            extra={"loan_id": loan.loan_id, "amount": result.applied},
        )
        return AllocationResult(
            installments=restored,
            allocations=list(result.allocations),
            applied=result.applied,
            remainder=ZERO,
            outstanding_balance=balance,
            loan_status=loan_status,
            payment_date=result.payment_date,
        )
