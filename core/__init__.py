"""
Core package for Extreme Fit Bag
Contains the screen-level composition of cart and checkout
"""

from .bag_registry import BagRegistry
from .bag_screen import BagScreen, default_bag_items

__all__ = [
    'BagRegistry', 'BagScreen', 'default_bag_items'
]
