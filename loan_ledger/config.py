"""Configuration management for loan-ledger."""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any

from loan_ledger.exceptions import ConfigurationError
from loan_ledger.models.enums import PaymentFrequency


def _default_period_days() -> dict[PaymentFrequency, int]:
    return {
        PaymentFrequency.DAILY: 1,
        PaymentFrequency.WEEKLY: 7,
        PaymentFrequency.BIWEEKLY: 14,
        PaymentFrequency.MONTHLY: 30,
        PaymentFrequency.QUARTERLY: 90,
    }


def _default_periods_per_year() -> dict[PaymentFrequency, int]:
    return {
        PaymentFrequency.DAILY: 365,
        PaymentFrequency.WEEKLY: 52,
        PaymentFrequency.BIWEEKLY: 26,
        PaymentFrequency.MONTHLY: 12,
        PaymentFrequency.QUARTERLY: 4,
    }


@dataclass(frozen=True)
class ScheduleConfig:
    """Calendar conventions used by schedule and terms calculations."""

    period_days: dict[PaymentFrequency, int] = field(default_factory=_default_period_days)
    periods_per_year: dict[PaymentFrequency, int] = field(
        default_factory=_default_periods_per_year
    )
    days_in_year: int = 365
    milestone_days: int = 30  # spacing of default flexible milestones

    def days_for(self, frequency: PaymentFrequency) -> int:
        """Get the length in days of one payment period."""
        try:
            return self.period_days[frequency]
        except KeyError as exc:
            raise ConfigurationError(f"No period length configured for {frequency}") from exc

    def periods_for(self, frequency: PaymentFrequency) -> int:
        """Get the number of payment periods in a year."""
        try:
            return self.periods_per_year[frequency]
        except KeyError as exc:
            raise ConfigurationError(f"No periods-per-year configured for {frequency}") from exc


@dataclass(frozen=True)
class PenaltyConfig:
    """Late penalty conventions."""

    month_days: int = 30  # penalty rate is monthly, prorated over a 30-day month


@dataclass(frozen=True)
class PaymentConfig:
    """Payment acceptance rules."""

    overpayment_tolerance: Decimal = Decimal("0.00")
    allow_credit: bool = False


@dataclass
class ScenarioConfig:
    """Configuration for a synthetic repayment scenario."""

    name: str
    num_loans: int = 50
    on_time_rate: float = 0.80
    late_rate: float = 0.15
    waiver_rate: float = 0.50
    seed: int | None = None
    labels: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class LedgerConfig:
    """Main configuration for loan-ledger."""

    schedule: ScheduleConfig = field(default_factory=ScheduleConfig)
    penalty: PenaltyConfig = field(default_factory=PenaltyConfig)
    payment: PaymentConfig = field(default_factory=PaymentConfig)
    principal_tolerance: Decimal = Decimal("0.00")
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "LedgerConfig":
        """Create config from environment variables."""
        import os

        try:
            tolerance = Decimal(os.getenv("LEDGER_OVERPAYMENT_TOLERANCE", "0.00"))
        except InvalidOperation as exc:
            raise ConfigurationError("LEDGER_OVERPAYMENT_TOLERANCE must be a decimal") from exc
        if not tolerance.is_finite() or tolerance < 0:
            raise ConfigurationError("LEDGER_OVERPAYMENT_TOLERANCE must be non-negative")

        days_in_year_str = os.getenv("LEDGER_DAYS_IN_YEAR", "365")
        try:
            days_in_year = int(days_in_year_str)
        except ValueError as exc:
            raise ConfigurationError("LEDGER_DAYS_IN_YEAR must be an integer") from exc
        if days_in_year <= 0:
            raise ConfigurationError("LEDGER_DAYS_IN_YEAR must be positive")

        payment = PaymentConfig(
            overpayment_tolerance=tolerance,
            allow_credit=os.getenv("LEDGER_ALLOW_CREDIT", "false").lower() == "true",
        )

        return cls(
            schedule=ScheduleConfig(days_in_year=days_in_year),
            payment=payment,
            log_level=os.getenv("LEDGER_LOG_LEVEL", "INFO"),
        )
