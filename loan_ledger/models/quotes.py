"""Calculation outputs: terms quotes, payoff quotes and affordability."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass
class TermsQuote:
    """Summary of what a set of loan terms costs the borrower.

    ``total_repayable`` and ``net_proceeds`` are both reported so the caller
    can pick the product policy (fees repaid over time versus deducted up
    front).
    """

    principal: Decimal
    interest: Decimal
    processing_fee: Decimal
    platform_fee_total: Decimal
    total_amount: Decimal  # principal + interest
    total_repayable: Decimal  # principal + interest + platform fees
    net_proceeds: Decimal
    total_deductions: Decimal
    number_of_periods: int
    installment_amount: Decimal
    effective_rate: Decimal


@dataclass
class PayoffQuote:
    """Early settlement quote."""

    outstanding_principal: Decimal
    outstanding_interest: Decimal
    other_charges: Decimal
    total_outstanding: Decimal
    discount_amount: Decimal
    payoff_amount: Decimal
    savings: Decimal


@dataclass
class AffordabilityResult:
    """Debt-to-income screening result."""

    monthly_income: Decimal
    monthly_payment: Decimal
    dti_ratio: Decimal
    max_dti_ratio: Decimal
    is_affordable: bool
    max_affordable_payment: Decimal
    disposable_income: Decimal


@dataclass
class AmortizationRow:
    """One month of an amortization table; ``balance`` is after this payment."""

    month: int
    payment: Decimal
    principal: Decimal
    interest: Decimal
    balance: Decimal
