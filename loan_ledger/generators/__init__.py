"""Synthetic data generators for ledger demos and tests."""

from loan_ledger.generators.loan import LoanGenerator, PaymentGenerator

__all__ = ["LoanGenerator", "PaymentGenerator"]
