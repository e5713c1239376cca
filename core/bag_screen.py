"""
Main BagScreen class - composes the cart store and checkout coordinator
"""
from decimal import Decimal
from typing import Any, Dict, List, Optional

from config import Settings
from models.cart import LineItem, format_money
from payments.capability import PaymentCapability, resolve_platform_mode
from services.cart_store import CartStore
from services.checkout_service import CheckoutCoordinator


def default_bag_items() -> List[LineItem]:
    # Seed bag shown by the storefront until a checkout-session service supplies one
    return [
        LineItem(1, "Athletic Gear 1", "Size L - Black", Decimal("45.99"), 2),
        LineItem(2, "Athletic Gear 2", "Size M - Red", Decimal("52.99"), 1),
        LineItem(3, "Athletic Gear 3", "Size XL - Blue", Decimal("38.95"), 3),
    ]


class BagScreen:
    # Screen-level facade used by the Flask API and the console UI

    def __init__(self, settings: Optional[Settings] = None,
                 payment_capability: Optional[PaymentCapability] = None,
                 items: Optional[List[LineItem]] = None):
        self.settings = settings or Settings()
        self.payment_capability = payment_capability

        self.cart_store = CartStore(
            default_bag_items() if items is None else items,
            shipping_cost=self.settings.shipping_cost
        )
        self.platform_mode = resolve_platform_mode(self.settings.platform, payment_capability)
        self.checkout_coordinator = CheckoutCoordinator(
            self.cart_store,
            self.platform_mode,
            payment_capability,
            currency=self.settings.currency
        )

    # === Quantity controls ===
    def increment(self, item_id) -> Dict[str, Any]:
        self.cart_store.increment(item_id)
        return self.get_bag_details()

    def decrement(self, item_id) -> Dict[str, Any]:
        self.cart_store.decrement(item_id)
        return self.get_bag_details()

    # === Display ===
    def get_bag_details(self) -> Dict[str, Any]:
        # Everything the bag screen renders: items, header, summary rows, checkout button state
        items = self.cart_store.items
        summary = self.cart_store.summary()

        return {
            "success": True,
            "platform_mode": self.platform_mode.value,
            "header": f"{summary.total_item_count} items",
            "cart_items": [
                dict(item.to_dict(), price_display=format_money(item.unit_price))
                for item in items
            ],
            "summary": summary.to_dict(),
            "display": {
                "subtotal": format_money(summary.subtotal),
                "shipping": format_money(summary.shipping_cost),
                "total": format_money(summary.total)
            },
            "checkout_enabled": not self.checkout_coordinator.is_submitting
        }

    # === Checkout ===
    async def checkout(self) -> Dict[str, Any]:
        outcome = await self.checkout_coordinator.initiate_checkout()
        return outcome.to_dict()
