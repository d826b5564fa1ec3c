# share_core/errors.py


class ShareError(Exception):
    """Base class for everything the sharing core raises."""


class PreconditionViolation(ShareError, ValueError):
    """Bad parameters or evaluation points, rejected before any share is made."""


class ArithmeticPrecondition(ShareError, ArithmeticError):
    """Operand has no inverse mod p (only happens when a caller skipped validation)."""
