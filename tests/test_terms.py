"""Tests for TermsCalculator."""

from decimal import Decimal

import pytest

from loan_ledger.engine import TermsCalculator
from loan_ledger.exceptions import InvalidTermsError
from loan_ledger.models import InterestType, LoanTerms, PaymentFrequency


@pytest.fixture
def calculator() -> TermsCalculator:
    return TermsCalculator()


class TestFlatQuote:
    """A year-long flat loan of 12,000 at 18%."""

    def test_flat_interest(self, calculator: TermsCalculator) -> None:
        interest = calculator.compute_interest(12000, 18, 365, InterestType.FLAT)

        assert interest == Decimal("2160.00")

    def test_flat_quote(self, calculator: TermsCalculator, flat_terms: LoanTerms) -> None:
        """Test interest, repayable total, installment and effective rate."""
        quote = calculator.quote(flat_terms)

        assert quote.interest == Decimal("2160.00")
        assert quote.total_amount == Decimal("14160.00")
        assert quote.total_repayable == Decimal("14160.00")
        assert quote.number_of_periods == 12
        assert quote.installment_amount == Decimal("1180.00")
        assert quote.net_proceeds == Decimal("12000.00")
        assert quote.effective_rate == Decimal("18.00")

    def test_flat_interest_is_linear_in_term(self, calculator: TermsCalculator) -> None:
        one_year = calculator.compute_interest(12000, 18, 365, InterestType.FLAT)
        two_years = calculator.compute_interest(12000, 18, 730, InterestType.FLAT)

        assert two_years == one_year * 2

    @pytest.mark.parametrize(
        "principal,term_days,rate,expected",
        [
            (12000, 365, 9, "1080.00"),
            (10000, 365, 6, "600.00"),
            (5000, 730, 10, "1000.00"),
        ],
    )
    def test_flat_interest_is_linear_in_rate(
        self,
        calculator: TermsCalculator,
        principal: int,
        term_days: int,
        rate: int,
        expected: str,
    ) -> None:
        """Test doubling the rate doubles flat interest."""
        single = calculator.compute_interest(principal, rate, term_days, InterestType.FLAT)
        double = calculator.compute_interest(principal, rate * 2, term_days, InterestType.FLAT)

        assert single == Decimal(expected)
        assert double == single * 2


class TestReducingBalance:
    """Tests for EMI and reducing-balance interest."""

    def test_emi(self, calculator: TermsCalculator) -> None:
        """Test the standard 12,000 at 12% over 12 months EMI."""
        assert calculator.compute_emi(12000, 12, 365) == Decimal("1066.19")

    def test_emi_zero_rate(self, calculator: TermsCalculator) -> None:
        assert calculator.compute_emi(12000, 0, 365) == Decimal("1000.00")

    @pytest.mark.parametrize("interest_type", list(InterestType))
    def test_zero_rate_interest_is_zero(
        self, calculator: TermsCalculator, interest_type: InterestType
    ) -> None:
        """Test a 1,000 loan over three periods, where 1000 / 3 rounds to 333.33."""
        assert calculator.compute_interest(1000, 0, 90, interest_type) == Decimal("0.00")

    def test_zero_rate_reducing_quote(self, calculator: TermsCalculator) -> None:
        terms = LoanTerms(principal=1000, annual_rate=0, term_days=90)

        quote = calculator.quote(terms)

        assert quote.interest == Decimal("0.00")
        assert quote.total_amount == Decimal("1000.00")
        assert quote.total_repayable == Decimal("1000.00")
        assert quote.effective_rate == Decimal("0")

    def test_reducing_interest(self, calculator: TermsCalculator) -> None:
        interest = calculator.compute_interest(12000, 12, 365, InterestType.REDUCING)

        assert interest == Decimal("794.28")

    def test_reducing_quote_installment_is_emi(self, calculator: TermsCalculator) -> None:
        terms = LoanTerms(principal=12000, annual_rate=12, term_days=365)

        quote = calculator.quote(terms)

        assert quote.installment_amount == Decimal("1066.19")
        assert quote.interest == Decimal("794.28")

    def test_reducing_quote_adds_platform_fee(self, calculator: TermsCalculator) -> None:
        terms = LoanTerms(
            principal=12000, annual_rate=12, term_days=365, platform_fee_per_period=10
        )

        quote = calculator.quote(terms)

        assert quote.installment_amount == Decimal("1076.19")
        assert quote.platform_fee_total == Decimal("120.00")


class TestCompound:
    def test_one_year(self, calculator: TermsCalculator) -> None:
        assert calculator.compute_interest(10000, 10, 365, InterestType.COMPOUND) == Decimal(
            "1000.00"
        )

    def test_two_years(self, calculator: TermsCalculator) -> None:
        assert calculator.compute_interest(10000, 10, 730, "compound") == Decimal("2100.00")


class TestFees:
    """Tests for fees, proceeds and effective rate."""

    def test_processing_fee(self, calculator: TermsCalculator) -> None:
        assert calculator.compute_processing_fee(10000, "2.5") == Decimal("250.00")

    def test_platform_fee_total(self, calculator: TermsCalculator) -> None:
        assert calculator.compute_platform_fee_total(10, 12) == Decimal("120.00")

    def test_net_proceeds(self, calculator: TermsCalculator) -> None:
        assert calculator.compute_net_proceeds(10000, 250, 120) == Decimal("9630.00")

    def test_total_repayable(self, calculator: TermsCalculator) -> None:
        assert calculator.compute_total_repayable(10000, 1200, 120) == Decimal("11320.00")

    def test_effective_rate_zero_proceeds(self, calculator: TermsCalculator) -> None:
        assert calculator.compute_effective_rate(0, 100, 12) == Decimal("0.00")

    def test_quote_with_fees(self, calculator: TermsCalculator) -> None:
        """Test a flat quote that deducts processing and platform fees."""
        terms = LoanTerms(
            principal=10000,
            annual_rate=12,
            term_days=360,
            interest_type=InterestType.FLAT,
            processing_fee_percent=2,
            platform_fee_per_period=10,
        )

        quote = calculator.quote(terms)

        assert quote.interest == Decimal("1183.56")
        assert quote.number_of_periods == 12
        assert quote.processing_fee == Decimal("200.00")
        assert quote.platform_fee_total == Decimal("120.00")
        assert quote.total_repayable == Decimal("11303.56")
        assert quote.net_proceeds == Decimal("9680.00")
        assert quote.total_deductions == Decimal("320.00")
        assert quote.installment_amount == Decimal("941.96")


class TestPeriods:
    """Tests for period and installment counts."""

    @pytest.mark.parametrize(
        "term_days,frequency,expected",
        [
            (365, PaymentFrequency.MONTHLY, 12),
            (365, PaymentFrequency.WEEKLY, 52),
            (365, PaymentFrequency.BIWEEKLY, 26),
            (365, PaymentFrequency.QUARTERLY, 4),
            (90, PaymentFrequency.MONTHLY, 3),
            (10, PaymentFrequency.MONTHLY, 1),
        ],
    )
    def test_number_of_periods(
        self,
        calculator: TermsCalculator,
        term_days: int,
        frequency: PaymentFrequency,
        expected: int,
    ) -> None:
        assert calculator.number_of_periods(term_days, frequency) == expected

    def test_number_of_installments(self, calculator: TermsCalculator) -> None:
        assert calculator.number_of_installments(360, PaymentFrequency.MONTHLY) == 12
        assert calculator.number_of_installments(365, PaymentFrequency.MONTHLY) == 13
        assert calculator.number_of_installments(28, "weekly") == 4

    def test_periodic_rate(self, calculator: TermsCalculator) -> None:
        assert calculator.periodic_rate(12, PaymentFrequency.MONTHLY) == Decimal("0.01")


class TestValidation:
    """Tests for rejected inputs."""

    def test_zero_principal(self, calculator: TermsCalculator) -> None:
        with pytest.raises(InvalidTermsError, match="principal must be positive"):
            calculator.compute_emi(0, 12, 365)

    def test_rate_above_hundred(self, calculator: TermsCalculator) -> None:
        with pytest.raises(InvalidTermsError, match="between 0 and 100"):
            calculator.compute_interest(1000, 101, 365, InterestType.FLAT)

    def test_negative_term(self, calculator: TermsCalculator) -> None:
        with pytest.raises(InvalidTermsError, match="term_days must be a positive integer"):
            calculator.number_of_periods(-30, PaymentFrequency.MONTHLY)

    def test_validate_terms(self, calculator: TermsCalculator) -> None:
        terms = LoanTerms(principal=1000, annual_rate=10, term_days=90, grace_period_days=-1)

        with pytest.raises(InvalidTermsError, match="grace_period_days cannot be negative"):
            calculator.validate_terms(terms)

    def test_validate_terms_returns_terms(
        self, calculator: TermsCalculator, flat_terms: LoanTerms
    ) -> None:
        assert calculator.validate_terms(flat_terms) is flat_terms

    def test_unknown_interest_type(self, calculator: TermsCalculator) -> None:
        with pytest.raises(InvalidTermsError, match="Unknown interest type"):
            calculator.compute_interest(1000, 10, 365, "simple")
