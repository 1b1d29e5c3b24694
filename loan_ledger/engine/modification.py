"""Schedule regeneration when a live loan's terms change."""

import logging
from dataclasses import replace

from loan_ledger.config import LedgerConfig
from loan_ledger.engine.schedule import ScheduleGenerator
from loan_ledger.models.enums import ScheduleType
from loan_ledger.models.loan import Installment, Loan
from loan_ledger.models.terms import LoanModification, LoanTerms

logger = logging.getLogger(__name__)


class ModificationRecalculator:
    """Replace a loan's schedule after a principal, rate, term or frequency change.

    The previous schedule is discarded and the full schedule regenerated
    from the merged terms. Whether paid history is kept for audit is the
    caller's decision.
    """

    def __init__(self, config: LedgerConfig | None = None) -> None:
        self.config = config or LedgerConfig()
        self.schedule_generator = ScheduleGenerator(self.config)

    @staticmethod
    def merge_terms(loan: Loan, modification: LoanModification) -> LoanTerms:
        """Overlay the modification on the loan's current terms.

        Unset (``None``) fields keep the loan's value; zero is a real value.
        """
        current = loan.terms
        return replace(
            current,
            principal=(
                modification.principal if modification.principal is not None else loan.principal
            ),
            annual_rate=(
                modification.annual_rate
                if modification.annual_rate is not None
                else current.annual_rate
            ),
            term_days=(
                modification.term_days if modification.term_days is not None else current.term_days
            ),
            payment_frequency=(
                modification.payment_frequency
                if modification.payment_frequency is not None
                else current.payment_frequency
            ),
        )

    @staticmethod
    def schedule_type_for(loan: Loan, modification: LoanModification) -> ScheduleType:
        """Schedule type to regenerate with; unset keeps the loan's own."""
        if modification.schedule_type is not None:
            return modification.schedule_type
        return loan.schedule_type

    def recalculate(self, loan: Loan, modification: LoanModification) -> list[Installment]:
        """Generate the replacement schedule for a modified loan."""
        terms = self.merge_terms(loan, modification)
        start = modification.start_date or loan.disbursement_date
        installments = self.schedule_generator.generate(
            terms,
            start,
            schedule_type=self.schedule_type_for(loan, modification),
            milestones=modification.milestones or None,
        )
        logger.info(
            "Recalculated loan %s: %d installments replaced by %d (%s)",
            loan.loan_id,
            len(loan.installments),
            len(installments),
            modification.reason or "no reason given",
        )
        return installments

    def apply(self, loan: Loan, modification: LoanModification) -> Loan:
        """Return the loan with merged terms and its regenerated schedule."""
        terms = self.merge_terms(loan, modification)
        return replace(
            loan,
            principal=terms.principal,
            terms=terms,
            schedule_type=self.schedule_type_for(loan, modification),
            installments=self.recalculate(loan, modification),
        )
