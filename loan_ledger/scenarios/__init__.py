"""Scenarios that drive the engine the way a servicing application would."""

from loan_ledger.scenarios.repayment import RepaymentScenario

__all__ = ["RepaymentScenario"]
