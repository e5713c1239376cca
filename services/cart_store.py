"""
Cart store - holds the bag's line items and derives its totals
"""
import logging
import threading
from decimal import Decimal
from typing import Callable, Iterable, List, Optional, Tuple

from config import DEFAULT_SHIPPING_COST
from models.cart import LineItem, CartSummary, to_money

logger = logging.getLogger(__name__)

CartListener = Callable[[CartSummary], None]


class CartStore:
    # In-memory, observable cart. All operations are total: unknown ids are ignored.

    def __init__(self, items: Optional[Iterable[LineItem]] = None,
                 shipping_cost: Decimal = DEFAULT_SHIPPING_COST):
        self.shipping_cost = to_money(shipping_cost)
        self._items: List[LineItem] = []
        self._listeners: List[CartListener] = []
        self._lock = threading.RLock()
        self._cached_totals: Optional[Tuple[Decimal, int]] = None

        for item in items or []:
            if self._find(item.id) is not None:
                raise ValueError(f"Duplicate line item id: {item.id}")
            self._items.append(item)

    def _find(self, item_id) -> Optional[LineItem]:
        for item in self._items:
            if item.id == item_id:
                return item
        return None

    @property
    def items(self) -> List[LineItem]:
        # Copies, so callers can't mutate quantities behind the store's back
        with self._lock:
            return [LineItem(item.id, item.name, item.details, item.unit_price, item.quantity)
                    for item in self._items]

    @property
    def is_empty(self) -> bool:
        with self._lock:
            return not self._items

    def get_item(self, item_id) -> Optional[LineItem]:
        with self._lock:
            item = self._find(item_id)
            if item is None:
                return None
            return LineItem(item.id, item.name, item.details, item.unit_price, item.quantity)

    def increment(self, item_id):
        # No upper bound on quantity
        with self._lock:
            item = self._find(item_id)
            if item is None:
                return
            item.quantity += 1
            self._changed()

    def decrement(self, item_id):
        # Quantity floor is 1; decrementing never removes the item
        with self._lock:
            item = self._find(item_id)
            if item is None or item.quantity <= 1:
                return
            item.quantity -= 1
            self._changed()

    def clear(self):
        # Empty the bag after a successful checkout
        with self._lock:
            if not self._items:
                return
            self._items = []
            self._changed()

    def get_subtotal_and_count(self) -> Tuple[Decimal, int]:
        with self._lock:
            if self._cached_totals is None:
                subtotal = sum((item.line_total for item in self._items), Decimal("0.00"))
                count = sum(item.quantity for item in self._items)
                self._cached_totals = (subtotal, count)
            return self._cached_totals

    @property
    def total(self) -> Decimal:
        subtotal, _ = self.get_subtotal_and_count()
        return subtotal + self.shipping_cost

    def summary(self) -> CartSummary:
        with self._lock:
            subtotal, count = self.get_subtotal_and_count()
            return CartSummary(
                line_count=len(self._items),
                total_item_count=count,
                subtotal=subtotal,
                shipping_cost=self.shipping_cost,
                total=subtotal + self.shipping_cost
            )

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        # Register a change listener; returns a function that removes it
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _changed(self):
        self._cached_totals = None
        summary = self.summary()
        for listener in list(self._listeners):
            try:
                listener(summary)
            except Exception:
                logger.exception("Cart listener %r failed", listener)
