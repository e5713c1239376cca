"""
Payments package for Extreme Fit Bag
Contains the payment capability boundary and the PayPal implementation
"""

from .errors import (
    PaymentError, PaymentFailedError, CheckoutInProgressError
)
from .capability import PaymentCapability, load_payment_capability, resolve_platform_mode
from .paypal import PayPalCapability

__all__ = [
    'PaymentError', 'PaymentFailedError', 'CheckoutInProgressError',
    'PaymentCapability', 'load_payment_capability', 'resolve_platform_mode',
    'PayPalCapability'
]
