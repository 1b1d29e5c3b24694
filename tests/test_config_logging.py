"""Tests for config and logging."""

import json
import logging
import os
import sys
from datetime import date
from decimal import Decimal
from io import StringIO
from unittest.mock import patch

import pytest

from loan_ledger.config import (
    LedgerConfig,
    PaymentConfig,
    PenaltyConfig,
    ScenarioConfig,
    ScheduleConfig,
)
from loan_ledger.engine import PaymentAllocator
from loan_ledger.exceptions import ConfigurationError
from loan_ledger.logging import JsonFormatter, get_logger, setup_logging
from loan_ledger.models import Loan, PaymentFrequency

ENV_VARS = [
    "LEDGER_OVERPAYMENT_TOLERANCE",
    "LEDGER_DAYS_IN_YEAR",
    "LEDGER_ALLOW_CREDIT",
    "LEDGER_LOG_LEVEL",
]


def _clean_env(**values: str) -> dict[str, str]:
    env = {k: v for k, v in os.environ.items() if k not in ENV_VARS}
    env.update(values)
    return env


class TestScheduleConfig:
    """Tests for ScheduleConfig."""

    def test_default_values(self) -> None:
        """Test default calendar conventions."""
        config = ScheduleConfig()

        assert config.days_for(PaymentFrequency.DAILY) == 1
        assert config.days_for(PaymentFrequency.WEEKLY) == 7
        assert config.days_for(PaymentFrequency.BIWEEKLY) == 14
        assert config.days_for(PaymentFrequency.MONTHLY) == 30
        assert config.days_for(PaymentFrequency.QUARTERLY) == 90
        assert config.periods_for(PaymentFrequency.MONTHLY) == 12
        assert config.periods_for(PaymentFrequency.WEEKLY) == 52
        assert config.days_in_year == 365
        assert config.milestone_days == 30

    def test_defaults_not_shared(self) -> None:
        """Test each config gets its own frequency maps."""
        assert ScheduleConfig().period_days is not ScheduleConfig().period_days

    def test_missing_frequency_raises(self) -> None:
        """Test a frequency without a configured length is a config error."""
        config = ScheduleConfig(period_days={PaymentFrequency.MONTHLY: 30})

        with pytest.raises(ConfigurationError, match="No period length"):
            config.days_for(PaymentFrequency.WEEKLY)

    def test_missing_periods_per_year_raises(self) -> None:
        config = ScheduleConfig(periods_per_year={})

        with pytest.raises(ConfigurationError, match="No periods-per-year"):
            config.periods_for(PaymentFrequency.MONTHLY)


class TestPaymentAndPenaltyConfig:
    """Tests for PaymentConfig and PenaltyConfig."""

    def test_default_values(self) -> None:
        assert PaymentConfig().overpayment_tolerance == Decimal("0.00")
        assert PaymentConfig().allow_credit is False
        assert PenaltyConfig().month_days == 30

    def test_custom_values(self) -> None:
        config = PaymentConfig(overpayment_tolerance=Decimal("1.00"), allow_credit=True)

        assert config.overpayment_tolerance == Decimal("1.00")
        assert config.allow_credit is True


class TestScenarioConfig:
    """Tests for ScenarioConfig."""

    def test_default_values(self) -> None:
        """Test default scenario values."""
        config = ScenarioConfig(name="book")

        assert config.num_loans == 50
        assert config.on_time_rate == 0.80
        assert config.late_rate == 0.15
        assert config.seed is None
        assert config.labels == {}

    def test_custom_values(self) -> None:
        config = ScenarioConfig(name="book", num_loans=5, seed=7, labels={"env": "test"})

        assert config.num_loans == 5
        assert config.seed == 7
        assert config.labels["env"] == "test"


class TestLedgerConfig:
    """Tests for LedgerConfig."""

    def test_default_values(self) -> None:
        """Test default configuration values."""
        config = LedgerConfig()

        assert config.principal_tolerance == Decimal("0.00")
        assert config.log_level == "INFO"
        assert isinstance(config.schedule, ScheduleConfig)
        assert isinstance(config.payment, PaymentConfig)

    def test_from_env_default(self) -> None:
        """Test creating config from environment with defaults."""
        with patch.dict(os.environ, _clean_env(), clear=True):
            config = LedgerConfig.from_env()

        assert config.payment.overpayment_tolerance == Decimal("0.00")
        assert config.payment.allow_credit is False
        assert config.schedule.days_in_year == 365
        assert config.log_level == "INFO"

    def test_from_env_custom(self) -> None:
        """Test creating config from custom environment values."""
        env = _clean_env(
            LEDGER_OVERPAYMENT_TOLERANCE="0.50",
            LEDGER_DAYS_IN_YEAR="360",
            LEDGER_ALLOW_CREDIT="true",
            LEDGER_LOG_LEVEL="DEBUG",
        )
        with patch.dict(os.environ, env, clear=True):
            config = LedgerConfig.from_env()

        assert config.payment.overpayment_tolerance == Decimal("0.50")
        assert config.payment.allow_credit is True
        assert config.schedule.days_in_year == 360
        assert config.log_level == "DEBUG"

    def test_from_env_invalid_tolerance(self) -> None:
        with patch.dict(os.environ, _clean_env(LEDGER_OVERPAYMENT_TOLERANCE="abc"), clear=True):
            with pytest.raises(ConfigurationError, match="must be a decimal"):
                LedgerConfig.from_env()

    def test_from_env_negative_tolerance(self) -> None:
        with patch.dict(os.environ, _clean_env(LEDGER_OVERPAYMENT_TOLERANCE="-1"), clear=True):
            with pytest.raises(ConfigurationError, match="non-negative"):
                LedgerConfig.from_env()

    def test_from_env_invalid_days_in_year(self) -> None:
        with patch.dict(os.environ, _clean_env(LEDGER_DAYS_IN_YEAR="year"), clear=True):
            with pytest.raises(ConfigurationError, match="must be an integer"):
                LedgerConfig.from_env()

    def test_from_env_zero_days_in_year(self) -> None:
        with patch.dict(os.environ, _clean_env(LEDGER_DAYS_IN_YEAR="0"), clear=True):
            with pytest.raises(ConfigurationError, match="must be positive"):
                LedgerConfig.from_env()


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_logging_default(self) -> None:
        """Test default logging setup."""
        setup_logging()

        logger = logging.getLogger("loan_ledger")
        assert logger.level == logging.INFO

    def test_setup_logging_debug(self) -> None:
        """Test debug level logging setup."""
        setup_logging(level="DEBUG")

        logger = logging.getLogger()
        assert logger.level == logging.DEBUG

    def test_setup_logging_invalid_level(self) -> None:
        """Test logging with invalid level defaults to INFO."""
        setup_logging(level="INVALID")

        logger = logging.getLogger()
        assert logger.level == logging.INFO

    def test_setup_logging_json_format(self) -> None:
        """Test JSON format logging."""
        setup_logging(format_type="json")

        logger = logging.getLogger()
        assert any(isinstance(h.formatter, JsonFormatter) for h in logger.handlers)

    def test_setup_logging_replaces_handlers(self) -> None:
        """Test that setup_logging replaces existing handlers."""
        logger = logging.getLogger()
        logger.addHandler(logging.StreamHandler())
        logger.addHandler(logging.StreamHandler())

        setup_logging()

        assert len(logger.handlers) == 1

    def test_faker_logger_quieted(self) -> None:
        """Test that Faker's locale chatter is quieted."""
        setup_logging(level="DEBUG")

        assert logging.getLogger("faker").level == logging.WARNING


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def _record(self, **kwargs: object) -> logging.LogRecord:
        defaults = dict(
            name="loan_ledger.engine.allocation",
            level=logging.INFO,
            pathname="/path/to/file.py",
            lineno=42,
            msg="Applied %s",
            args=("100.00",),
            exc_info=None,
        )
        defaults.update(kwargs)
        return logging.LogRecord(**defaults)

    def test_format_basic(self) -> None:
        """Test basic log formatting."""
        data = json.loads(JsonFormatter().format(self._record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "loan_ledger.engine.allocation"
        assert data["message"] == "Applied 100.00"
        assert "timestamp" in data

    def test_format_with_exception(self) -> None:
        """Test formatting with exception info."""
        try:
            raise ValueError("Test error")
        except ValueError:
            exc_info = sys.exc_info()

        data = json.loads(
            JsonFormatter().format(self._record(level=logging.ERROR, exc_info=exc_info))
        )

        assert data["level"] == "ERROR"
        assert "ValueError" in data["exception"]

    def test_format_with_extra_decimal(self) -> None:
        """Test extra fields with Decimal amounts serialize as strings."""
        record = self._record()
        record.extra = {"loan_id": "loan-1", "amount": Decimal("12.50")}

        data = json.loads(JsonFormatter().format(record))

        assert data["loan_id"] == "loan-1"
        assert data["amount"] == "12.50"


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger(self) -> None:
        logger = get_logger("loan_ledger.test")

        assert isinstance(logger, logging.Logger)
        assert logger.name == "loan_ledger.test"

    def test_get_logger_same_instance(self) -> None:
        assert get_logger("test.same") is get_logger("test.same")


class TestPackageInit:
    """Tests for loan_ledger __init__.py."""

    def test_version_exported(self) -> None:
        """Test that __version__ is exported."""
        from loan_ledger import __version__

        assert isinstance(__version__, str)


class TestLoanContext:
    """Tests for loan context in structured logs."""

    def test_context_fields_promoted(self) -> None:
        record = logging.LogRecord(
            name="loan_ledger.engine.allocation",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg="Applied",
            args=(),
            exc_info=None,
        )
        record.loan_id = "loan-9"
        record.amount = Decimal("250.00")

        data = json.loads(JsonFormatter().format(record))

        assert data["loan_id"] == "loan-9"
        assert data["amount"] == "250.00"
        assert "installment_number" not in data

    def test_engine_log_reaches_stream(self, loan: Loan) -> None:
        """Test an allocation is logged as JSON with its loan id."""
        stream = StringIO()
        setup_logging(level="INFO", format_type="json", stream=stream)

        PaymentAllocator().apply_payment(loan, loan.installments, Decimal("100"), date(2024, 2, 1))

        lines = [json.loads(line) for line in stream.getvalue().splitlines()]
        applied = [line for line in lines if line["logger"] == "loan_ledger.engine.allocation"]
        assert applied[-1]["loan_id"] == loan.loan_id
        assert applied[-1]["amount"] == "100.00"
