"""Repayment schedule generation: fixed (evenly spaced) and flexible (milestones)."""

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Sequence

from loan_ledger.config import LedgerConfig
from loan_ledger.engine.terms import TermsCalculator
from loan_ledger.exceptions import InvalidTermsError, ScheduleIntegrityError
from loan_ledger.models.enums import InterestType, PaymentFrequency, ScheduleType, coerce_enum
from loan_ledger.models.loan import Installment
from loan_ledger.models.quotes import AmortizationRow
from loan_ledger.models.terms import LoanTerms, Milestone
from loan_ledger.money import HUNDRED, ZERO, sum_money, to_money

logger = logging.getLogger(__name__)


class ScheduleGenerator:
    """Build the installment sequence for a loan.

    Output installments are all PENDING with nothing paid and no penalty.
    Every monetary field is rounded to cents as it is computed, so the
    schedule totals equal the sum of the visible rows.

    Parameters
    ----------
    config : LedgerConfig | None
        Calendar conventions (period lengths, milestone spacing).
    """

    def __init__(self, config: LedgerConfig | None = None) -> None:
        self.config = config or LedgerConfig()
        self.calculator = TermsCalculator(self.config)

    def generate(
        self,
        terms: LoanTerms,
        disbursement_date: date,
        schedule_type: ScheduleType = ScheduleType.FIXED,
        milestones: Sequence[Milestone] | None = None,
    ) -> list[Installment]:
        """Generate a schedule of the requested type.

        Parameters
        ----------
        terms : LoanTerms
            Loan terms.
        disbursement_date : date
            Day the funds were released; due dates count from here.
        schedule_type : ScheduleType
            FIXED or FLEXIBLE.
        milestones : Sequence[Milestone] | None
            Flexible milestones; ignored for fixed schedules.

        Returns
        -------
        list[Installment]
            Installments numbered from 1.
        """
        schedule_type = coerce_enum(ScheduleType, schedule_type, "schedule type")
        if schedule_type == ScheduleType.FLEXIBLE:
            return self.generate_flexible(terms, disbursement_date, milestones)
        return self.generate_fixed(terms, disbursement_date)

    def generate_fixed(self, terms: LoanTerms, disbursement_date: date) -> list[Installment]:
        """Evenly spaced installments; the last period is shortened to fit the term."""
        self.calculator.validate_terms(terms)
        frequency = terms.payment_frequency
        period_days = self.config.schedule.days_for(frequency)
        count = self.calculator.number_of_installments(terms.term_days, frequency)
        fees = to_money(terms.platform_fee_per_period)
        principal = to_money(terms.principal)
        amortized = terms.interest_type == InterestType.REDUCING

        if amortized:
            emi = self.calculator.compute_emi(
                principal, terms.annual_rate, terms.term_days, frequency, count
            )
            daily_rate = self.calculator.daily_rate(terms.annual_rate)
        else:
            # Flat and compound interest is fixed up front and spread evenly
            total_interest = self.calculator.compute_interest(
                principal, terms.annual_rate, terms.term_days, terms.interest_type, frequency
            )
            interest_share = to_money(total_interest / count)
            principal_share = to_money(principal / count)

        installments: list[Installment] = []
        remaining = principal
        interest_scheduled = ZERO
        elapsed = 0

        for number in range(1, count + 1):
            days = min(period_days, terms.term_days - elapsed)
            elapsed += days
            is_last = number == count

            if amortized:
                interest = to_money(remaining * daily_rate * days)
                if is_last:
                    principal_due = remaining
                else:
                    principal_due = min(remaining, max(ZERO, emi - interest))
            else:
                if is_last:
                    interest = total_interest - interest_scheduled
                    principal_due = remaining
                else:
                    interest = min(interest_share, total_interest - interest_scheduled)
                    principal_due = min(remaining, principal_share)
                interest_scheduled += interest

            remaining -= principal_due
            installments.append(
                Installment(
                    installment_number=number,
                    due_date=disbursement_date + timedelta(days=elapsed),
                    principal_due=principal_due,
                    interest_due=interest,
                    fees_due=fees,
                )
            )

        self.verify_schedule(installments, principal)
        logger.info(
            "Generated fixed schedule: %d installments, principal=%s, frequency=%s",
            len(installments),
            principal,
            frequency.value,
        )
        return installments

    def generate_flexible(
        self,
        terms: LoanTerms,
        disbursement_date: date,
        milestones: Sequence[Milestone] | None = None,
    ) -> list[Installment]:
        """Milestone-driven installments.

        Each milestone takes its share of the principal still outstanding;
        the final milestone takes whatever principal remains. Interest
        accrues daily on the remaining principal since the previous
        milestone.
        """
        self.calculator.validate_terms(terms)
        points = list(milestones) if milestones else self.default_milestones(terms.term_days)
        self._validate_milestones(points)

        daily_rate = self.calculator.daily_rate(terms.annual_rate)
        fees = to_money(terms.platform_fee_per_period)
        principal = to_money(terms.principal)
        remaining = principal
        previous_days = 0
        installments: list[Installment] = []

        for index, milestone in enumerate(points):
            interval = milestone.days_from_disbursement - previous_days
            previous_days = milestone.days_from_disbursement
            interest = to_money(remaining * daily_rate * interval)

            if index == len(points) - 1:
                principal_due = remaining
            elif milestone.principal_percentage is not None:
                principal_due = min(
                    remaining, to_money(remaining * milestone.principal_percentage / HUNDRED)
                )
            else:
                principal_due = min(remaining, to_money(milestone.principal_amount))

            remaining -= principal_due
            installments.append(
                Installment(
                    installment_number=index + 1,
                    due_date=disbursement_date + timedelta(days=milestone.days_from_disbursement),
                    principal_due=principal_due,
                    interest_due=interest,
                    fees_due=fees,
                )
            )

        self.verify_schedule(installments, principal)
        logger.info(
            "Generated flexible schedule: %d milestones, principal=%s",
            len(installments),
            principal,
        )
        return installments

    def default_milestones(self, term_days: int) -> list[Milestone]:
        """Monthly milestones repaying equal slices of the original principal.

        Milestone ``i`` of ``k`` takes ``1 / (k - i + 1)`` of the remaining
        principal, which is an equal share of the original amount.
        """
        spacing = self.config.schedule.milestone_days
        months = -(-term_days // spacing)
        return [
            Milestone(
                days_from_disbursement=min(i * spacing, term_days),
                principal_percentage=HUNDRED / Decimal(months - i + 1),
            )
            for i in range(1, months + 1)
        ]

    def amortization_table(
        self, principal: object, annual_rate: object, months: int
    ) -> list[AmortizationRow]:
        """Month-by-month EMI breakdown of a reducing-balance loan.

        Interest is charged on the opening balance at ``rate / 12 / 100``
        and the rest of the EMI repays principal. The final row clears the
        balance, so its payment absorbs the rounding remainder.

        Parameters
        ----------
        principal : object
            Amount borrowed.
        annual_rate : object
            Annual rate in percent.
        months : int
            Number of monthly payments.

        Returns
        -------
        list[AmortizationRow]
            One row per month, numbered from 1.
        """
        if isinstance(months, bool) or not isinstance(months, int) or months <= 0:
            raise InvalidTermsError(f"months must be a positive integer, got {months!r}")
        frequency = PaymentFrequency.MONTHLY
        term_days = months * self.config.schedule.days_for(frequency)
        emi = self.calculator.compute_emi(principal, annual_rate, term_days, frequency, months)
        monthly_rate = self.calculator.periodic_rate(annual_rate, frequency)

        balance = to_money(principal)
        rows: list[AmortizationRow] = []
        for month in range(1, months + 1):
            interest = to_money(balance * monthly_rate)
            if month == months:
                principal_part = balance
            else:
                principal_part = min(balance, max(ZERO, emi - interest))
            balance -= principal_part
            rows.append(
                AmortizationRow(
                    month=month,
                    payment=principal_part + interest,
                    principal=principal_part,
                    interest=interest,
                    balance=balance,
                )
            )

        logger.debug("Amortization table: %d months, emi=%s", months, emi)
        return rows

    @staticmethod
    def balance_at(installments: Sequence[Installment], as_of: date) -> Decimal:
        """Scheduled principal still to fall due after ``as_of``.

        Installments due on or before ``as_of`` count as repaid, whatever
        has actually been paid; before the first due date this is the full
        principal.
        """
        return sum_money(inst.principal_due for inst in installments if inst.due_date > as_of)

    @staticmethod
    def next_due(installments: Sequence[Installment]) -> Installment | None:
        """Earliest installment that is not yet settled, or ``None``."""
        open_installments = [inst for inst in installments if not inst.is_settled]
        if not open_installments:
            return None
        return min(open_installments, key=lambda inst: (inst.due_date, inst.installment_number))

    def verify_schedule(self, installments: Sequence[Installment], principal: Decimal) -> None:
        """Check numbering and principal reconciliation.

        Raises
        ------
        ScheduleIntegrityError
            If numbers are not contiguous from 1, an amount is negative, or
            the principal does not reconcile within tolerance.
        """
        if not installments:
            raise ScheduleIntegrityError("Schedule cannot be empty")

        for expected, installment in enumerate(installments, start=1):
            if installment.installment_number != expected:
                raise ScheduleIntegrityError(
                    f"Installment numbers must be contiguous from 1; "
                    f"found {installment.installment_number} at position {expected}"
                )
            if min(installment.principal_due, installment.interest_due, installment.fees_due) < 0:
                raise ScheduleIntegrityError(
                    f"Installment {installment.installment_number} has a negative amount"
                )

        scheduled = sum_money(inst.principal_due for inst in installments)
        drift = abs(scheduled - to_money(principal))
        if drift > self.config.principal_tolerance:
            raise ScheduleIntegrityError(
                f"Scheduled principal {scheduled} does not reconcile with {to_money(principal)}"
            )

    def _validate_milestones(self, milestones: Sequence[Milestone]) -> None:
        previous = 0
        for milestone in milestones:
            if milestone.days_from_disbursement <= previous:
                raise InvalidTermsError("Milestone days must be positive and strictly increasing")
            previous = milestone.days_from_disbursement
            if milestone.principal_percentage is not None and not (
                ZERO <= milestone.principal_percentage <= HUNDRED
            ):
                raise InvalidTermsError("Milestone principal_percentage must be between 0 and 100")
            if milestone.principal_amount is not None and milestone.principal_amount < 0:
                raise InvalidTermsError("Milestone principal_amount cannot be negative")
