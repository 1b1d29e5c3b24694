"""Repayment scenario: a seeded loan book driven through the ledger engine."""

from __future__ import annotations

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Any

from loan_ledger.config import LedgerConfig, ScenarioConfig
from loan_ledger.engine import (
    PaymentAllocator,
    PenaltyCalculator,
    ScheduleGenerator,
    WaiverEngine,
)
from loan_ledger.generators import LoanGenerator, PaymentGenerator
from loan_ledger.models.enums import InstallmentStatus, LoanStatus
from loan_ledger.models.loan import Installment, Loan
from loan_ledger.models.waiver import WaiverRequest
from loan_ledger.money import ZERO, sum_money

logger = logging.getLogger(__name__)


class RepaymentScenario:
    """Generate a loan book and replay realistic repayment behaviour.

    This scenario creates:
    - Loans with random valid terms and fixed schedules
    - For every installment due by ``as_of`` one of:
        - On-time payment of the installment amount on the due date
        - Late payment (1-30 days), after penalty assessment and an
          optional waiver request
        - No payment at all (the installment stays overdue)
    """

    def __init__(
        self,
        num_loans: int = 50,
        on_time_rate: float = 0.80,
        late_rate: float = 0.15,
        waiver_rate: float = 0.50,
        authority_limit: Decimal = Decimal("50.00"),
        as_of: date | None = None,
        seed: int | None = None,
        *,
        config: ScenarioConfig | None = None,
        ledger_config: LedgerConfig | None = None,
    ) -> None:
        """Initialize repayment scenario.

        Parameters
        ----------
        num_loans : int
            Number of loans to generate.
        on_time_rate : float
            Share of due installments paid on the due date.
        late_rate : float
            Share of due installments paid late; the rest are missed.
        waiver_rate : float
            Share of late installments whose borrower asks for a waiver.
        authority_limit : Decimal
            Waiver limit of the simulated collector.
        as_of : date | None
            Replay cut-off date (default 2025-06-30).
        seed : int | None
            Random seed for reproducibility.
        config : ScenarioConfig | None
            Optional scenario configuration. If provided, overrides the
            count, rates and seed arguments.
        ledger_config : LedgerConfig | None
            Engine configuration shared by every component.
        """
        if config is not None:
            num_loans = config.num_loans
            on_time_rate = config.on_time_rate
            late_rate = config.late_rate
            waiver_rate = config.waiver_rate
            seed = config.seed if config.seed is not None else seed
        if on_time_rate < 0 or late_rate < 0 or on_time_rate + late_rate > 1:
            raise ValueError("on_time_rate and late_rate must be non-negative and sum to at most 1")

        self.config = config
        self.num_loans = num_loans
        self.on_time_rate = on_time_rate
        self.late_rate = late_rate
        self.waiver_rate = waiver_rate
        self.authority_limit = authority_limit
        self.as_of = as_of or date(2025, 6, 30)
        self.seed = seed

        self.loans: list[Loan] = []
        self.stats: dict[str, Any] = {}

        ledger_config = ledger_config or LedgerConfig()
        self._loan_gen = LoanGenerator(seed=seed)
        self._payment_gen = PaymentGenerator(seed=seed)
        self._schedules = ScheduleGenerator(ledger_config)
        self._penalties = PenaltyCalculator(ledger_config)
        self._allocator = PaymentAllocator(ledger_config)
        self._waivers = WaiverEngine(ledger_config)

    def generate(self) -> list[Loan]:
        """Generate the book and replay payments up to ``as_of``.

        Returns
        -------
        list[Loan]
            Loans with their installments in replayed state.
        """
        logger.info(
            "Starting repayment scenario: %d loans, as of %s",
            self.num_loans,
            self.as_of.isoformat(),
        )
        self.loans = []
        self.stats = {
            "payments": 0,
            "collected": ZERO,
            "waivers_auto_approved": 0,
            "waivers_escalated": 0,
            "waived": ZERO,
        }

        for _ in range(self.num_loans):
            loan = self._loan_gen.generate()
            loan.installments = self._schedules.generate(
                loan.terms, loan.disbursement_date, loan.schedule_type
            )
            self._replay(loan)
            self.loans.append(loan)

        logger.info(
            "Replayed %d payments totalling %s across %d loans",
            self.stats["payments"],
            self.stats["collected"],
            len(self.loans),
        )
        return self.loans

    def _replay(self, loan: Loan) -> None:
        rng = self._loan_gen.rng
        due_numbers = [
            inst.installment_number for inst in loan.installments if inst.due_date <= self.as_of
        ]

        for number in due_numbers:
            due_date = loan.installments[number - 1].due_date
            roll = rng.random()

            if roll < self.on_time_rate:
                self._pay(loan, number, due_date)
            elif roll < self.on_time_rate + self.late_rate:
                pay_date = due_date + timedelta(days=rng.randint(1, 30))
                if pay_date > self.as_of:
                    continue
                loan.installments = self._penalties.assess(loan.installments, loan.terms, pay_date)
                if rng.random() < self.waiver_rate:
                    self._request_waiver(loan, number)
                self._pay(loan, number, pay_date)

        loan.installments = self._penalties.assess(loan.installments, loan.terms, self.as_of)

    def _pay(self, loan: Loan, number: int, payment_date: date) -> None:
        amount = loan.installments[number - 1].outstanding_amount
        if amount == 0:
            return
        payment = self._payment_gen.generate(amount, payment_date)
        result = self._allocator.apply(loan, loan.installments, payment)
        loan.installments = result.installments
        loan.status = result.loan_status
        self.stats["payments"] += 1
        self.stats["collected"] += result.applied

    def _request_waiver(self, loan: Loan, number: int) -> None:
        penalty = self._waivers.penalty_total(loan.installments, number)
        if penalty == 0:
            return
        request = WaiverRequest(
            loan_id=loan.loan_id,
            requested_amount=penalty,
            authority_limit=self.authority_limit,
            installment_number=number,
            reason="Borrower hardship",
        )
        decision = self._waivers.evaluate_waiver(request, penalty)
        if not decision.auto_approved:
            self.stats["waivers_escalated"] += 1
            return

        application = self._waivers.apply_waiver(
            loan.installments, decision.approved_amount, installment_number=number
        )
        loan.installments = application.installments
        self.stats["waivers_auto_approved"] += 1
        self.stats["waived"] += application.waived

    @property
    def installments(self) -> list[Installment]:
        """All installments of the book, loan by loan."""
        return [inst for loan in self.loans for inst in loan.installments]

    def export(self, sinks: list[Any]) -> None:
        """Export generated data to sinks.

        Installment records are flattened and tagged with their ``loan_id``.

        Parameters
        ----------
        sinks : list[Any]
            Sink instances (ConsoleSink, JsonFileSink).
        """
        from loan_ledger.sinks.serialization import dataclass_to_dict

        installment_rows = []
        for loan in self.loans:
            for inst in loan.installments:
                row = dataclass_to_dict(inst)
                row["loan_id"] = loan.loan_id
                installment_rows.append(row)

        loan_rows = []
        for loan in self.loans:
            row = dataclass_to_dict(loan)
            row.pop("installments")
            loan_rows.append(row)

        for sink in sinks:
            sink.write_batch("loans", loan_rows)
            sink.write_batch("installments", installment_rows)

        logger.info("Exported repayment scenario to %d sinks", len(sinks))

    def get_summary(self) -> dict[str, Any]:
        """Get summary statistics for the replayed book.

        Returns
        -------
        dict[str, Any]
            Book totals and status distributions; empty before ``generate``.
        """
        if not self.loans:
            return {}

        loan_status: dict[str, int] = {}
        for loan in self.loans:
            loan_status[loan.status.value] = loan_status.get(loan.status.value, 0) + 1

        installment_status: dict[str, int] = {}
        for inst in self.installments:
            installment_status[inst.status.value] = installment_status.get(inst.status.value, 0) + 1

        return {
            "total_loans": len(self.loans),
            "total_principal": sum_money(loan.principal for loan in self.loans),
            "outstanding_balance": sum_money(loan.outstanding_balance for loan in self.loans),
            "overdue_installments": installment_status.get(InstallmentStatus.OVERDUE.value, 0),
            "closed_loans": loan_status.get(LoanStatus.CLOSED.value, 0),
            "loan_status_distribution": loan_status,
            "installment_status_distribution": installment_status,
            **self.stats,
        }
