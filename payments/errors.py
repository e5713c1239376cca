"""
Payment error hierarchy
"""
from typing import Any, Optional


class PaymentError(Exception):
    """Base class for payment and checkout errors"""


class PaymentFailedError(PaymentError):
    """The payment capability rejected the payment or returned an error"""

    def __init__(self, message: str, status_code: Optional[int] = None, details: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details


class CheckoutInProgressError(PaymentError):
    """A checkout attempt is already submitting"""
