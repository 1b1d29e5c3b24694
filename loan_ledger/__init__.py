"""Loan amortization and repayment ledger engine.

Stateless calculators for loan terms, repayment schedules, late penalties,
payment allocation, penalty waivers, loan modifications and early payoff.
"""

__version__ = "0.1.0"
