"""Penalty waiver request and result models."""

from dataclasses import dataclass, field
from decimal import Decimal

from loan_ledger.models.enums import WaiverStatus
from loan_ledger.models.loan import Installment
from loan_ledger.money import ZERO


@dataclass
class WaiverRequest:
    """Request to waive assessed penalty.

    Without ``installment_number`` the waiver is spread across every unpaid
    installment that carries penalty.
    """

    loan_id: str
    requested_amount: Decimal
    authority_limit: Decimal = ZERO
    installment_number: int | None = None
    reason: str = ""


@dataclass
class WaiverDecision:
    """Whether a waiver can be applied without further approval."""

    auto_approved: bool
    approved_amount: Decimal
    requested_amount: Decimal
    status: WaiverStatus


@dataclass
class WaiverApplication:
    """Installments after a waiver, with the amount taken from each."""

    installments: list[Installment]
    waived_by_installment: dict[int, Decimal] = field(default_factory=dict)
    waived: Decimal = ZERO
