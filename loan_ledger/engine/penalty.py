"""Late payment penalties and overdue assessment."""

import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Sequence

from loan_ledger.config import LedgerConfig
from loan_ledger.exceptions import InvalidTermsError
from loan_ledger.models.enums import InstallmentStatus
from loan_ledger.models.loan import Installment
from loan_ledger.models.terms import LoanTerms
from loan_ledger.money import HUNDRED, ZERO, to_decimal, to_money

logger = logging.getLogger(__name__)


class PenaltyCalculator:
    """Compute late penalties.

    The penalty rate is a monthly percentage prorated daily over a 30-day
    month (``config.penalty.month_days``). Penalty is charged on the unpaid
    installment amount only, never on penalty already assessed.
    """

    def __init__(self, config: LedgerConfig | None = None) -> None:
        self.config = config or LedgerConfig()

    def compute_penalty(
        self,
        overdue_amount: object,
        days_overdue: int,
        penalty_rate_percent: object,
        grace_period_days: int = 0,
    ) -> Decimal:
        """Penalty for one overdue amount.

        Parameters
        ----------
        overdue_amount : object
            Unpaid amount the penalty is charged on.
        days_overdue : int
            Days since the due date.
        penalty_rate_percent : object
            Monthly penalty rate in percent.
        grace_period_days : int
            Days after the due date with no penalty.

        Returns
        -------
        Decimal
            ``overdue x rate/100 x (days - grace) / 30``, or 0 within grace.
        """
        amount = to_decimal(overdue_amount, "overdue_amount")
        rate = to_decimal(penalty_rate_percent, "penalty_rate_percent")
        if amount < 0:
            raise InvalidTermsError("overdue_amount cannot be negative")
        if rate < 0 or rate > HUNDRED:
            raise InvalidTermsError("penalty_rate_percent must be between 0 and 100")
        if grace_period_days < 0:
            raise InvalidTermsError("grace_period_days cannot be negative")

        if days_overdue <= grace_period_days:
            return ZERO

        applicable_days = days_overdue - grace_period_days
        month_days = Decimal(self.config.penalty.month_days)
        return to_money(amount * (rate / HUNDRED) * applicable_days / month_days)

    @staticmethod
    def days_overdue(due_date: date, as_of: date) -> int:
        """Days past the due date, 0 if not yet due."""
        return max(0, (as_of - due_date).days)

    def assess(
        self,
        installments: Sequence[Installment],
        terms: LoanTerms,
        as_of: date,
    ) -> list[Installment]:
        """Mark past-due installments OVERDUE and bring their penalty up to date.

        The accrued penalty is recomputed from scratch as of ``as_of``,
        reduced by anything already waived, and never lowers a penalty
        that was assessed earlier. Settled and not-yet-due installments are
        returned unchanged.

        Parameters
        ----------
        installments : Sequence[Installment]
            Current installments of one loan.
        terms : LoanTerms
            Loan terms carrying penalty rate and grace period.
        as_of : date
            Assessment date supplied by the caller's clock.

        Returns
        -------
        list[Installment]
            New installment records; the input is not modified.
        """
        assessed: list[Installment] = []
        newly_overdue = 0

        for installment in installments:
            days = self.days_overdue(installment.due_date, as_of)
            if installment.is_settled or days == 0:
                assessed.append(replace(installment))
                continue

            base = installment.unpaid_principal + installment.unpaid_interest + installment.unpaid_fees
            accrued = self.compute_penalty(
                base, days, terms.late_penalty_percent, terms.grace_period_days
            )
            penalty = max(installment.penalty_amount, accrued - installment.penalty_waived_amount, ZERO)

            if installment.status != InstallmentStatus.OVERDUE:
                newly_overdue += 1
            assessed.append(
                replace(installment, penalty_amount=penalty, status=InstallmentStatus.OVERDUE)
            )

        if newly_overdue:
            logger.info("Marked %d installments overdue as of %s", newly_overdue, as_of.isoformat())
        return assessed
