"""Pytest configuration and fixtures."""

from datetime import date
from decimal import Decimal

import pytest

from loan_ledger.config import LedgerConfig
from loan_ledger.engine import ScheduleGenerator
from loan_ledger.models import (
    Installment,
    InterestType,
    Loan,
    LoanTerms,
    PaymentFrequency,
)


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def sample_loan_id() -> str:
    """Sample loan ID."""
    return "loan-test-001"


@pytest.fixture
def disbursement_date() -> date:
    """Fixed disbursement date."""
    return date(2024, 1, 1)


@pytest.fixture
def ledger_config() -> LedgerConfig:
    """Default engine configuration."""
    return LedgerConfig()


@pytest.fixture
def flat_terms() -> LoanTerms:
    """12,000 at 18% flat over a year, paid monthly."""
    return LoanTerms(
        principal=Decimal("12000"),
        annual_rate=Decimal("18"),
        term_days=365,
        interest_type=InterestType.FLAT,
        payment_frequency=PaymentFrequency.MONTHLY,
        late_penalty_percent=Decimal("5"),
        grace_period_days=3,
    )


@pytest.fixture
def reducing_terms() -> LoanTerms:
    """12,000 at 12% reducing balance over twelve 30-day months."""
    return LoanTerms(
        principal=Decimal("12000"),
        annual_rate=Decimal("12"),
        term_days=360,
        interest_type=InterestType.REDUCING,
        payment_frequency=PaymentFrequency.MONTHLY,
        late_penalty_percent=Decimal("5"),
        grace_period_days=3,
    )


@pytest.fixture
def zero_rate_terms() -> LoanTerms:
    """Interest-free loan with whole-number installments."""
    return LoanTerms(
        principal=Decimal("12000"),
        annual_rate=Decimal("0"),
        term_days=360,
        interest_type=InterestType.REDUCING,
        payment_frequency=PaymentFrequency.MONTHLY,
        late_penalty_percent=Decimal("5"),
    )


@pytest.fixture
def schedule(reducing_terms: LoanTerms, disbursement_date: date) -> list[Installment]:
    """Fresh fixed schedule for the reducing-balance loan."""
    return ScheduleGenerator().generate(reducing_terms, disbursement_date)


@pytest.fixture
def loan(
    sample_loan_id: str,
    reducing_terms: LoanTerms,
    disbursement_date: date,
    schedule: list[Installment],
) -> Loan:
    """Active loan carrying the reducing-balance schedule."""
    return Loan(
        loan_id=sample_loan_id,
        principal=reducing_terms.principal,
        disbursement_date=disbursement_date,
        terms=reducing_terms,
        installments=schedule,
    )


@pytest.fixture
def single_installment(disbursement_date: date) -> Installment:
    """One pending installment of exactly 1,000."""
    return Installment(
        installment_number=1,
        due_date=date(2024, 1, 31),
        principal_due=Decimal("900.00"),
        interest_due=Decimal("100.00"),
    )
