"""Penalty waiver evaluation and distribution."""

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Sequence

from loan_ledger.config import LedgerConfig
from loan_ledger.exceptions import InvalidWaiverError, LedgerError
from loan_ledger.models.enums import InstallmentStatus, WaiverStatus
from loan_ledger.models.loan import Installment
from loan_ledger.models.waiver import WaiverApplication, WaiverDecision, WaiverRequest
from loan_ledger.money import ZERO, sum_money, to_decimal, to_money

logger = logging.getLogger(__name__)


def _amount(value: object, name: str) -> Decimal:
    try:
        return to_money(to_decimal(value, name))
    except LedgerError as exc:
        raise InvalidWaiverError(str(exc)) from exc


class WaiverEngine:
    """Decide and apply penalty waivers.

    Authority limits come from the caller's access-control layer as plain
    values; the engine only compares amounts.
    """

    def __init__(self, config: LedgerConfig | None = None) -> None:
        self.config = config or LedgerConfig()

    @staticmethod
    def penalty_total(
        installments: Sequence[Installment],
        installment_number: int | None = None,
    ) -> Decimal:
        """Unpaid penalty across unpaid installments, or on a single installment."""
        if installment_number is not None:
            target = _find(installments, installment_number)
            return target.unpaid_penalty
        return sum_money(
            inst.unpaid_penalty for inst in installments if not inst.is_settled
        )

    def evaluate_waiver(
        self,
        request: WaiverRequest,
        current_penalty_total: object,
        authority_limit: object | None = None,
    ) -> WaiverDecision:
        """Decide whether a waiver request can be applied without escalation.

        Parameters
        ----------
        request : WaiverRequest
            The waiver being asked for.
        current_penalty_total : object
            Penalty currently outstanding on the targeted scope.
        authority_limit : object | None
            Requester's waiver limit; defaults to ``request.authority_limit``.

        Returns
        -------
        WaiverDecision
            Auto-approved iff the requested amount is within the limit.

        Raises
        ------
        InvalidWaiverError
            If the request is not positive or exceeds the penalty total.
        """
        requested = _amount(request.requested_amount, "requested_amount")
        penalty_total = _amount(current_penalty_total, "current_penalty_total")
        limit = _amount(
            request.authority_limit if authority_limit is None else authority_limit,
            "authority_limit",
        )

        if requested <= 0:
            raise InvalidWaiverError(f"Waiver amount must be positive, got {requested}")
        if requested > penalty_total:
            logger.warning(
                "Rejected waiver on loan %s: requested %s exceeds penalties %s",
                request.loan_id,
                requested,
                penalty_total,
            )
            raise InvalidWaiverError(
                f"Requested waiver amount ({requested}) exceeds total penalties ({penalty_total})"
            )

        if requested <= limit:
            logger.info(
                "Auto-approved waiver of %s on loan %s",
                requested,
                request.loan_id,
                extra={"loan_id": request.loan_id, "amount": requested},
            )
            return WaiverDecision(
                auto_approved=True,
                approved_amount=requested,
                requested_amount=requested,
                status=WaiverStatus.AUTO_APPROVED,
            )

        logger.info(
            "Waiver of %s on loan %s exceeds authority limit %s, pending approval",
            requested,
            request.loan_id,
            limit,
        )
        return WaiverDecision(
            auto_approved=False,
            approved_amount=ZERO,
            requested_amount=requested,
            status=WaiverStatus.PENDING_APPROVAL,
        )

    def apply_waiver(
        self,
        installments: Sequence[Installment],
        amount: object,
        installment_number: int | None = None,
    ) -> WaiverApplication:
        """Reduce penalty by an approved waiver amount.

        A targeted waiver comes off one installment. A loan-wide waiver is
        spread oldest-first over unpaid installments carrying penalty, each
        absorbing as much of its unpaid penalty as the waiver still covers.

        Raises
        ------
        InvalidWaiverError
            If the amount is not positive or exceeds the penalty available
            in the targeted scope.
        """
        remaining = _amount(amount, "waiver amount")
        if remaining <= 0:
            raise InvalidWaiverError(f"Waiver amount must be positive, got {remaining}")

        available = self.penalty_total(installments, installment_number)
        if remaining > available:
            raise InvalidWaiverError(
                f"Waiver amount ({remaining}) exceeds waivable penalties ({available})"
            )

        waived_by_installment: dict[int, Decimal] = {}
        updated: list[Installment] = []

        for installment in sorted(installments, key=lambda inst: inst.installment_number):
            eligible = (
                installment.installment_number == installment_number
                if installment_number is not None
                else not installment.is_settled
            )
            if remaining == 0 or not eligible or installment.unpaid_penalty == 0:
                updated.append(replace(installment))
                continue

            portion = min(installment.unpaid_penalty, remaining)
            remaining -= portion
            waived = replace(
                installment,
                penalty_amount=installment.penalty_amount - portion,
                penalty_waived_amount=installment.penalty_waived_amount + portion,
            )
            if waived.is_settled:
                waived.status = InstallmentStatus.PAID
            updated.append(waived)
            waived_by_installment[installment.installment_number] = portion

        total = sum_money(waived_by_installment.values())
        logger.info("Waived %s across installments %s", total, sorted(waived_by_installment))
        return WaiverApplication(
            installments=updated,
            waived_by_installment=waived_by_installment,
            waived=total,
        )


def _find(installments: Sequence[Installment], installment_number: int) -> Installment:
    for installment in installments:
        if installment.installment_number == installment_number:
            return installment
    raise InvalidWaiverError(f"Installment {installment_number} not found")
