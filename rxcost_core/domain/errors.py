from __future__ import annotations


class InvalidInput(ValueError):
    """Raised for a negative, non-finite or non-numeric cost, or a blank prescription field."""


class NoInstallmentDue(ValueError):
    """Raised when a payment is requested but no installment has been projected."""
