"""
Cart related data models
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Any, Union

CENTS = Decimal("0.01")


def to_money(value: Union[Decimal, float, int, str]) -> Decimal:
    """Convert a price-like value to a two-decimal Decimal"""
    # str() first so floats like 45.99 keep their printed value
    return Decimal(str(value)).quantize(CENTS)


def parse_price(value: Union[Decimal, float, int, str]) -> Decimal:
    """Like to_money, but refuses amounts that would lose sub-cent digits"""
    amount = Decimal(str(value))
    if amount != amount.quantize(CENTS):
        raise ValueError(f"price must have at most two decimal places, got {value}")
    return amount.quantize(CENTS)


def format_money(value: Decimal) -> str:
    """Format an amount the way the bag screen displays it"""
    return f"${to_money(value)}"


@dataclass
class LineItem:
    """Cart line item data model"""
    id: int
    name: str
    details: str
    unit_price: Decimal
    quantity: int = 1

    def __post_init__(self):
        self.unit_price = parse_price(self.unit_price)
        if self.unit_price < 0:
            raise ValueError(f"unit_price must be non-negative, got {self.unit_price}")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise TypeError(f"quantity must be an integer, got {self.quantity!r}")
        if self.quantity < 1:
            raise ValueError(f"quantity must be at least 1, got {self.quantity}")

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "id": self.id,
            "name": self.name,
            "details": self.details,
            "unit_price": str(self.unit_price),
            "quantity": self.quantity,
            "line_total": str(self.line_total)
        }


@dataclass(frozen=True)
class CartSummary:
    """Cart summary data model"""
    line_count: int
    total_item_count: int
    subtotal: Decimal
    shipping_cost: Decimal
    total: Decimal

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "line_count": self.line_count,
            "total_item_count": self.total_item_count,
            "subtotal": str(self.subtotal),
            "shipping_cost": str(self.shipping_cost),
            "total": str(self.total)
        }
