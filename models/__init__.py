"""
Models package for Extreme Fit Bag
Contains data models and type definitions
"""

from .cart import LineItem, CartSummary
from .payment import (
    PlatformMode, PaymentStatus, PaymentResult, PaymentAttempt, CheckoutOutcome
)

__all__ = [
    'LineItem', 'CartSummary',
    'PlatformMode', 'PaymentStatus', 'PaymentResult', 'PaymentAttempt', 'CheckoutOutcome'
]
