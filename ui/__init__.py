"""
UI package for Extreme Fit Bag
Contains user interface implementations
"""

from .simple_ui import SimpleBagUI, console_approval

__all__ = [
    'SimpleBagUI', 'console_approval'
]
