"""Loan amortization and repayment ledger engine."""

from loan_ledger.engine.allocation import ALLOCATION_ORDER, PaymentAllocator
from loan_ledger.engine.modification import ModificationRecalculator
from loan_ledger.engine.payoff import PayoffCalculator
from loan_ledger.engine.penalty import PenaltyCalculator
from loan_ledger.engine.schedule import ScheduleGenerator
from loan_ledger.engine.terms import TermsCalculator
from loan_ledger.engine.waiver import WaiverEngine

__all__ = [
    "ALLOCATION_ORDER",
    "ModificationRecalculator",
    "PaymentAllocator",
    "PayoffCalculator",
    "PenaltyCalculator",
    "ScheduleGenerator",
    "TermsCalculator",
    "WaiverEngine",
]
