"""Early settlement quotes and affordability screening."""

from decimal import Decimal
from typing import Sequence

from loan_ledger.exceptions import InvalidTermsError
from loan_ledger.models.loan import Installment
from loan_ledger.models.quotes import AffordabilityResult, PayoffQuote
from loan_ledger.money import HUNDRED, ZERO, round_rate, sum_money, to_decimal, to_money


class PayoffCalculator:
    """Quote early payoff and debt-to-income affordability."""

    def early_payoff(
        self,
        outstanding_principal: object,
        outstanding_interest: object,
        discount_percent: object = ZERO,
        other_charges: object = ZERO,
    ) -> PayoffQuote:
        """Settlement amount with a discount on the remaining interest.

        ``payoff = principal + interest - interest x discount / 100``, plus
        any other charges (unpaid fees and penalties) the caller includes.
        """
        principal = to_money(outstanding_principal)
        interest = to_money(outstanding_interest)
        charges = to_money(other_charges)
        discount = to_decimal(discount_percent, "discount_percent")
        if min(principal, interest, charges) < 0:
            raise InvalidTermsError("Outstanding amounts cannot be negative")
        if discount < 0 or discount > HUNDRED:
            raise InvalidTermsError("discount_percent must be between 0 and 100")

        total = principal + interest + charges
        discount_amount = to_money(interest * discount / HUNDRED)
        return PayoffQuote(
            outstanding_principal=principal,
            outstanding_interest=interest,
            other_charges=charges,
            total_outstanding=total,
            discount_amount=discount_amount,
            payoff_amount=total - discount_amount,
            savings=discount_amount,
        )

    def quote_for_installments(
        self,
        installments: Sequence[Installment],
        discount_percent: object = ZERO,
    ) -> PayoffQuote:
        """Early payoff for whatever is still unpaid on a schedule."""
        return self.early_payoff(
            sum_money(inst.unpaid_principal for inst in installments),
            sum_money(inst.unpaid_interest for inst in installments),
            discount_percent,
            other_charges=sum_money(
                inst.unpaid_fees + inst.unpaid_penalty for inst in installments
            ),
        )

    def affordability(
        self,
        monthly_income: object,
        monthly_payment: object,
        max_dti_percent: object = Decimal("40"),
    ) -> AffordabilityResult:
        """Debt-to-income check: affordable iff ``payment / income x 100 <= max``."""
        income = to_decimal(monthly_income, "monthly_income")
        payment = to_decimal(monthly_payment, "monthly_payment")
        max_dti = to_decimal(max_dti_percent, "max_dti_percent")
        if income <= 0:
            raise InvalidTermsError("monthly_income must be positive")
        if payment < 0:
            raise InvalidTermsError("monthly_payment cannot be negative")

        dti = payment / income * HUNDRED
        return AffordabilityResult(
            monthly_income=to_money(income),
            monthly_payment=to_money(payment),
            dti_ratio=round_rate(dti),
            max_dti_ratio=max_dti,
            is_affordable=dti <= max_dti,
            max_affordable_payment=to_money(income * max_dti / HUNDRED),
            disposable_income=to_money(income - payment),
        )
