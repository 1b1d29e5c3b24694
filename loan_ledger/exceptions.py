"""Custom exception hierarchy for loan-ledger."""


class LedgerError(Exception):
    """Base exception for all loan-ledger errors."""


class InvalidTermsError(LedgerError):
    """Raised when loan terms or calculation inputs are invalid."""


class InvalidPaymentError(LedgerError):
    """Raised when a payment cannot be allocated or reversed."""


class InvalidWaiverError(LedgerError):
    """Raised when a penalty waiver exceeds the penalty it targets."""


class ScheduleIntegrityError(LedgerError):
    """Raised when a generated schedule breaks a structural invariant.

    This signals a defect in the engine, not bad caller input.
    """


class ConfigurationError(LedgerError):
    """Raised when configuration is invalid or missing."""
