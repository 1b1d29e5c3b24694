"""Synthetic loans, terms and payments."""

from datetime import date, timedelta
from decimal import Decimal

from loan_ledger.generators.base import BaseGenerator
from loan_ledger.models.enums import (
    InterestType,
    LoanStatus,
    PaymentFrequency,
    PaymentMethod,
)
from loan_ledger.models.loan import Installment, Loan
from loan_ledger.models.payment import Payment
from loan_ledger.models.terms import LoanTerms


class LoanGenerator(BaseGenerator):
    """Generate valid random loan terms and loans."""

    # Term lengths in days by frequency
    TERM_DAYS = {
        PaymentFrequency.DAILY: (30, 60, 90),
        PaymentFrequency.WEEKLY: (28, 56, 91, 182),
        PaymentFrequency.BIWEEKLY: (56, 84, 182, 365),
        PaymentFrequency.MONTHLY: (90, 180, 365, 730),
        PaymentFrequency.QUARTERLY: (360, 365, 730),
    }

    # Annual rate ranges in percent by interest type
    RATE_RANGES = {
        InterestType.FLAT: (6, 36),
        InterestType.REDUCING: (8, 30),
        InterestType.COMPOUND: (5, 24),
    }

    def generate_terms(
        self,
        interest_type: InterestType | None = None,
        payment_frequency: PaymentFrequency | None = None,
    ) -> LoanTerms:
        """Generate loan terms.

        Parameters
        ----------
        interest_type : InterestType | None
            Fix the interest type instead of picking one at random.
        payment_frequency : PaymentFrequency | None
            Fix the frequency instead of picking one at random.

        Returns
        -------
        LoanTerms
            Terms that pass engine validation.
        """
        interest_type = interest_type or self.rng.choice(list(InterestType))
        frequency = payment_frequency or self.rng.choice(list(PaymentFrequency))
        low, high = self.RATE_RANGES[interest_type]

        return LoanTerms(
            principal=Decimal(self.rng.randint(10, 500) * 100),
            annual_rate=Decimal(str(round(self.rng.uniform(low, high), 2))),
            term_days=self.rng.choice(self.TERM_DAYS[frequency]),
            interest_type=interest_type,
            payment_frequency=frequency,
            processing_fee_percent=Decimal(self.rng.choice(("0", "1", "2", "2.5", "3"))),
            platform_fee_per_period=Decimal(self.rng.choice(("0", "0", "5", "10"))),
            late_penalty_percent=Decimal(self.rng.choice(("2", "3", "5", "10"))),
            grace_period_days=self.rng.choice((0, 3, 5, 7)),
        )

    def generate(
        self,
        terms: LoanTerms | None = None,
        disbursement_date: date | None = None,
        installments: list[Installment] | None = None,
    ) -> Loan:
        """Generate a loan around the given (or random) terms."""
        terms = terms or self.generate_terms()
        if disbursement_date is None:
            disbursement_date = self.fake.date_between(
                start_date=date(2023, 1, 1), end_date=date(2024, 12, 31)
            )

        return Loan(
            loan_id=self.fake.uuid4(),
            principal=terms.principal,
            disbursement_date=disbursement_date,
            terms=terms,
            status=LoanStatus.ACTIVE,
            installments=list(installments or []),
        )


class PaymentGenerator(BaseGenerator):
    """Generate repayment records with realistic references."""

    METHOD_WEIGHTS = {
        PaymentMethod.CASH: 30,
        PaymentMethod.MOBILE_MONEY: 30,
        PaymentMethod.BANK_TRANSFER: 25,
        PaymentMethod.CARD: 10,
        PaymentMethod.CHEQUE: 5,
    }

    def generate(self, amount: Decimal, payment_date: date) -> Payment:
        """Generate a payment of a known amount on a known date."""
        method = self.rng.choices(
            list(self.METHOD_WEIGHTS), weights=list(self.METHOD_WEIGHTS.values())
        )[0]
        return Payment(
            amount=amount,
            payment_date=payment_date,
            method=method,
            reference=self.fake.bothify(text="PAY-####-????").upper(),
        )

    def generate_late(self, amount: Decimal, due_date: date, max_days_late: int = 30) -> Payment:
        """Generate a payment received after the due date."""
        days_late = self.rng.randint(1, max_days_late)
        return self.generate(amount, due_date + timedelta(days=days_late))
