"""Loan terms calculator: interest, EMI, fees, proceeds and effective rate."""

import logging
from decimal import ROUND_HALF_UP, Decimal

from loan_ledger.config import LedgerConfig
from loan_ledger.exceptions import InvalidTermsError
from loan_ledger.models.enums import InterestType, PaymentFrequency, coerce_enum
from loan_ledger.models.quotes import TermsQuote
from loan_ledger.models.terms import LoanTerms
from loan_ledger.money import HUNDRED, ZERO, round_rate, to_decimal, to_money

logger = logging.getLogger(__name__)


def _positive(value: object, name: str) -> Decimal:
    number = to_decimal(value, name)
    if number <= 0:
        raise InvalidTermsError(f"{name} must be positive, got {number}")
    return number


def _percentage(value: object, name: str) -> Decimal:
    number = to_decimal(value, name)
    if number < 0 or number > HUNDRED:
        raise InvalidTermsError(f"{name} must be between 0 and 100, got {number}")
    return number


def _positive_int(value: object, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidTermsError(f"{name} must be a positive integer, got {value!r}")
    return value


class TermsCalculator:
    """Pure calculations over loan terms.

    Every method is a deterministic function of its arguments and the
    calendar conventions in ``config``.

    Parameters
    ----------
    config : LedgerConfig | None
        Calendar and rounding conventions (defaults to ``LedgerConfig()``).
    """

    def __init__(self, config: LedgerConfig | None = None) -> None:
        self.config = config or LedgerConfig()

    @property
    def days_in_year(self) -> Decimal:
        return Decimal(self.config.schedule.days_in_year)

    def validate_terms(self, terms: LoanTerms) -> LoanTerms:
        """Check that terms are usable by the engine.

        Raises
        ------
        InvalidTermsError
            If principal or term is not positive, a rate is outside
            [0, 100], or a fee or grace period is negative.
        """
        _positive(terms.principal, "principal")
        _positive_int(terms.term_days, "term_days")
        _percentage(terms.annual_rate, "annual_rate")
        _percentage(terms.processing_fee_percent, "processing_fee_percent")
        _percentage(terms.late_penalty_percent, "late_penalty_percent")
        if terms.platform_fee_per_period < 0:
            raise InvalidTermsError("platform_fee_per_period cannot be negative")
        if terms.grace_period_days < 0:
            raise InvalidTermsError("grace_period_days cannot be negative")
        return terms

    def number_of_periods(self, term_days: int, frequency: PaymentFrequency) -> int:
        """Billing periods in a term, rounded half-up (365 days monthly is 12)."""
        _positive_int(term_days, "term_days")
        frequency = coerce_enum(PaymentFrequency, frequency, "payment frequency")
        periods_per_year = self.config.schedule.periods_for(frequency)
        periods = (Decimal(term_days * periods_per_year) / self.days_in_year).quantize(
            Decimal(1), rounding=ROUND_HALF_UP
        )
        return max(1, int(periods))

    def number_of_installments(self, term_days: int, frequency: PaymentFrequency) -> int:
        """Installments in a fixed schedule: ``ceil(term_days / period_days)``."""
        _positive_int(term_days, "term_days")
        frequency = coerce_enum(PaymentFrequency, frequency, "payment frequency")
        period_days = self.config.schedule.days_for(frequency)
        return -(-term_days // period_days)

    def periodic_rate(self, annual_rate: object, frequency: PaymentFrequency) -> Decimal:
        """Rate per payment period as a fraction (monthly: ``rate / 12 / 100``)."""
        rate = _percentage(annual_rate, "annual_rate")
        frequency = coerce_enum(PaymentFrequency, frequency, "payment frequency")
        return rate / HUNDRED / Decimal(self.config.schedule.periods_for(frequency))

    def daily_rate(self, annual_rate: object) -> Decimal:
        """Daily rate as a fraction: ``rate / 365 / 100``."""
        return _percentage(annual_rate, "annual_rate") / self.days_in_year / HUNDRED

    def compute_emi(
        self,
        principal: object,
        annual_rate: object,
        term_days: int,
        frequency: PaymentFrequency = PaymentFrequency.MONTHLY,
        number_of_periods: int | None = None,
    ) -> Decimal:
        """Equated periodic installment for an amortized loan.

        Parameters
        ----------
        principal : object
            Amount borrowed.
        annual_rate : object
            Annual rate in percent.
        term_days : int
            Loan term in days.
        frequency : PaymentFrequency
            Payment frequency; sets the periodic rate.
        number_of_periods : int | None
            Installment count; defaults to the billing periods in the term.

        Returns
        -------
        Decimal
            Per-period payment rounded half-up to cents.
        """
        amount = _positive(principal, "principal")
        if number_of_periods is None:
            number_of_periods = self.number_of_periods(term_days, frequency)
        n = _positive_int(number_of_periods, "number_of_periods")
        rate = self.periodic_rate(annual_rate, frequency)

        if rate == 0:
            return to_money(amount / n)

        factor = (1 + rate) ** n
        return to_money(amount * rate * factor / (factor - 1))

    def compute_interest(
        self,
        principal: object,
        rate: object,
        term_days: int,
        interest_type: InterestType,
        frequency: PaymentFrequency = PaymentFrequency.MONTHLY,
    ) -> Decimal:
        """Total interest over the term for the given interest type."""
        amount = _positive(principal, "principal")
        annual_rate = _percentage(rate, "rate")
        days = _positive_int(term_days, "term_days")
        interest_type = coerce_enum(InterestType, interest_type, "interest type")
        years = Decimal(days) / self.days_in_year

        if interest_type == InterestType.FLAT:
            return to_money(amount * annual_rate / HUNDRED * years)

        if interest_type == InterestType.REDUCING:
            # The rounded principal / n EMI would leave a cent of negative interest
            if self.periodic_rate(annual_rate, frequency) == 0:
                return ZERO
            periods = self.number_of_periods(days, frequency)
            emi = self.compute_emi(amount, annual_rate, days, frequency, periods)
            return to_money(emi * periods - amount)

        # Compound, annual compounding
        growth = (1 + annual_rate / HUNDRED) ** years
        return to_money(amount * (growth - 1))

    def compute_processing_fee(self, principal: object, fee_percent: object) -> Decimal:
        """Processing fee as a percentage of principal."""
        amount = _positive(principal, "principal")
        return to_money(amount * _percentage(fee_percent, "processing_fee_percent") / HUNDRED)

    def compute_platform_fee_total(self, fee_per_period: object, number_of_periods: int) -> Decimal:
        """Platform fee charged every period, summed over the term."""
        fee = to_decimal(fee_per_period, "platform_fee_per_period")
        if fee < 0:
            raise InvalidTermsError("platform_fee_per_period cannot be negative")
        return to_money(fee * _positive_int(number_of_periods, "number_of_periods"))

    def compute_net_proceeds(
        self,
        principal: object,
        processing_fee: object,
        platform_fee_total: object,
    ) -> Decimal:
        """Amount the borrower receives after upfront deductions."""
        return to_money(
            to_decimal(principal, "principal")
            - to_decimal(processing_fee, "processing_fee")
            - to_decimal(platform_fee_total, "platform_fee_total")
        )

    def compute_total_repayable(
        self,
        principal: object,
        interest: object,
        platform_fee_total: object = ZERO,
    ) -> Decimal:
        """Principal plus interest plus platform fees."""
        return to_money(
            to_decimal(principal, "principal")
            + to_decimal(interest, "interest")
            + to_decimal(platform_fee_total, "platform_fee_total")
        )

    def compute_effective_rate(
        self,
        net_proceeds: object,
        total_repayable: object,
        term_months: object,
    ) -> Decimal:
        """Annualized cost of credit on what the borrower actually receives.

        Returns ``0`` when ``net_proceeds`` is zero.
        """
        proceeds = to_decimal(net_proceeds, "net_proceeds")
        repayable = to_decimal(total_repayable, "total_repayable")
        months = _positive(term_months, "term_months")
        if proceeds == 0:
            return ZERO
        cost = repayable - proceeds
        return round_rate(cost / proceeds * (Decimal(12) / months) * HUNDRED)

    def quote(self, terms: LoanTerms) -> TermsQuote:
        """Price a set of terms in one call."""
        self.validate_terms(terms)
        frequency = terms.payment_frequency
        periods = self.number_of_periods(terms.term_days, frequency)

        interest = self.compute_interest(
            terms.principal,
            terms.annual_rate,
            terms.term_days,
            terms.interest_type,
            frequency,
        )
        processing_fee = self.compute_processing_fee(terms.principal, terms.processing_fee_percent)
        platform_fee_total = self.compute_platform_fee_total(terms.platform_fee_per_period, periods)
        total_amount = to_money(terms.principal + interest)
        total_repayable = self.compute_total_repayable(terms.principal, interest, platform_fee_total)
        net_proceeds = self.compute_net_proceeds(terms.principal, processing_fee, platform_fee_total)

        if terms.interest_type == InterestType.REDUCING:
            emi = self.compute_emi(
                terms.principal, terms.annual_rate, terms.term_days, frequency, periods
            )
            installment_amount = to_money(emi + terms.platform_fee_per_period)
        else:
            installment_amount = to_money(total_repayable / periods)

        term_months = self.number_of_periods(terms.term_days, PaymentFrequency.MONTHLY)
        effective_rate = self.compute_effective_rate(net_proceeds, total_repayable, term_months)

        logger.debug(
            "Quoted %s loan principal=%s interest=%s periods=%d installment=%s",
            terms.interest_type.value,
            terms.principal,
            interest,
            periods,
            installment_amount,
        )

        return TermsQuote(
            principal=to_money(terms.principal),
            interest=interest,
            processing_fee=processing_fee,
            platform_fee_total=platform_fee_total,
            total_amount=total_amount,
            total_repayable=total_repayable,
            net_proceeds=net_proceeds,
            total_deductions=to_money(processing_fee + platform_fee_total),
            number_of_periods=periods,
            installment_amount=installment_amount,
            effective_rate=effective_rate,
        )
