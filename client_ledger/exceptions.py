"""
Error types raised by the services.

NotFoundError and ValidationError subclass ValueError so that
callers catching ValueError keep working. The API layer maps
NotFoundError to 404 and any other ValueError to 400.
"""


class LedgerError(Exception):
    """Base class for all client ledger errors."""


class ValidationError(LedgerError, ValueError):
    """Input rejected before it reaches the balance engine."""


class NotFoundError(LedgerError, ValueError):
    """
    A client or transaction does not exist for this user.

    Resources owned by another user are reported the same way,
    so ids cannot be probed across users.
    """


class ComputationInvariantViolation(LedgerError, RuntimeError):
    """
    The running balance disagrees with the net sum of the set.

    This is never raised for well-formed input. If it is, the
    balance engine has a bug and must not be trusted.
    """
