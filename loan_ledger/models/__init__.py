"""Domain models for the loan repayment ledger."""

from loan_ledger.models.enums import (
    InstallmentStatus,
    InterestType,
    LoanStatus,
    PaymentFrequency,
    PaymentMethod,
    ScheduleType,
    WaiverStatus,
)
from loan_ledger.models.loan import Installment, Loan
from loan_ledger.models.payment import AllocationResult, InstallmentAllocation, Payment
from loan_ledger.models.quotes import (
    AffordabilityResult,
    AmortizationRow,
    PayoffQuote,
    TermsQuote,
)
from loan_ledger.models.terms import LoanModification, LoanTerms, Milestone
from loan_ledger.models.waiver import WaiverApplication, WaiverDecision, WaiverRequest

__all__ = [
    "AffordabilityResult",
    "AllocationResult",
    "AmortizationRow",
    "Installment",
    "InstallmentAllocation",
    "InstallmentStatus",
    "InterestType",
    "Loan",
    "LoanModification",
    "LoanStatus",
    "LoanTerms",
    "Milestone",
    "Payment",
    "PaymentFrequency",
    "PaymentMethod",
    "PayoffQuote",
    "ScheduleType",
    "TermsQuote",
    "WaiverApplication",
    "WaiverDecision",
    "WaiverRequest",
    "WaiverStatus",
]
