"""
Services package for Extreme Fit Bag
Contains cart state and checkout logic
"""

from .cart_store import CartStore
from .checkout_service import CheckoutCoordinator

__all__ = [
    'CartStore', 'CheckoutCoordinator'
]
