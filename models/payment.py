"""
Payment and checkout related data models
"""
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional, Dict, Any

from .cart import to_money


class PlatformMode(Enum):
    WEB_DEMO = "web_demo"
    NATIVE_LIVE = "native_live"
    NATIVE_UNAVAILABLE = "native_unavailable"


class PaymentStatus(Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILURE = "failure"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class PaymentResult:
    """Successful response from a payment capability"""
    transaction_id: str


@dataclass
class PaymentAttempt:
    """A single checkout attempt. amount_due is fixed when the attempt is built."""
    amount_due: Decimal
    currency: str
    description: str
    platform_mode: PlatformMode
    status: PaymentStatus = PaymentStatus.PENDING
    transaction_id: Optional[str] = None
    failure_reason: Optional[str] = None

    def __post_init__(self):
        self.amount_due = to_money(self.amount_due)

    def succeed(self, transaction_id: Optional[str] = None):
        self.status = PaymentStatus.SUCCESS
        self.transaction_id = transaction_id

    def fail(self, reason: str):
        self.status = PaymentStatus.FAILURE
        self.failure_reason = reason

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "amount_due": str(self.amount_due),
            "currency": self.currency,
            "description": self.description,
            "platform_mode": self.platform_mode.value,
            "status": self.status.value,
            "transaction_id": self.transaction_id,
            "failure_reason": self.failure_reason
        }


@dataclass(frozen=True)
class CheckoutOutcome:
    """User-facing result of a checkout attempt"""
    status: PaymentStatus
    title: str
    message: str
    cart_cleared: bool = False
    transaction_id: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status is PaymentStatus.SUCCESS

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "success": self.success,
            "status": self.status.value,
            "title": self.title,
            "message": self.message,
            "cart_cleared": self.cart_cleared,
            "transaction_id": self.transaction_id
        }
