"""
Simple text-based UI for the bag screen
"""
import asyncio
import re
from typing import Any, Dict, Optional

from core.bag_screen import BagScreen
from payments.errors import CheckoutInProgressError

QUANTITY_COMMAND = re.compile(r'^([+-])\s*(\d+)$')


class SimpleBagUI:
    """Simple text-based bag interface"""

    def __init__(self, bag_screen: BagScreen):
        self.bag = bag_screen

    def run(self):
        """Run the console bag"""
        print("Extreme Fit - My Cart")
        print("Commands: +<id> / -<id> (change quantity), bag, pay, quit")
        self._show_bag()

        while True:
            user_input = input("\n> ").strip().lower()

            if user_input in ["quit", "exit"]:
                print("Thanks for shopping with Extreme Fit!")
                break

            elif user_input in ["bag", "cart"]:
                self._show_bag()

            elif user_input in ["pay", "checkout"]:
                self._checkout()

            else:
                self._handle_quantity(user_input)

    def _handle_quantity(self, user_input: str):
        """Apply a +<id> / -<id> command"""
        match = QUANTITY_COMMAND.match(user_input)
        if not match:
            print("Unknown command. Try '+1', '-2', 'bag', 'pay' or 'quit'.")
            return

        sign, item_id = match.group(1), int(match.group(2))
        if sign == "+":
            self.bag.increment(item_id)
        else:
            self.bag.decrement(item_id)
        self._show_bag()

    def _show_bag(self):
        """Show bag contents and summary"""
        details = self.bag.get_bag_details()
        print(f"\n🛒 My Cart ({details['header']})")

        if not details['cart_items']:
            print("Your bag is empty.")
        for item in details['cart_items']:
            print(f"[{item['id']}] {item['name']} - {item['details']}  "
                  f"{item['price_display']} x{item['quantity']}")

        display = details['display']
        print(f"Subtotal: {display['subtotal']}")
        print(f"Shipping: {display['shipping']}")
        print(f"Total:    {display['total']}")

    def _checkout(self):
        """Pay with PayPal and show the resulting alert"""
        try:
            outcome = asyncio.run(self.bag.checkout())
        except CheckoutInProgressError:
            print("A payment is already being processed.")
            return

        self._show_alert(outcome)
        if outcome['cart_cleared']:
            self._show_bag()

    def _show_alert(self, outcome: Dict[str, Any]):
        print(f"\n{outcome['title']}")
        print(outcome['message'])


async def console_approval(order_id: str, approve_url: Optional[str]) -> bool:
    """Ask the shopper to approve the PayPal order in a browser"""
    print(f"\nApprove PayPal order {order_id}:")
    print(approve_url or "(PayPal did not return an approval link)")
    answer = await asyncio.to_thread(input, "Press Enter once approved, or type 'cancel': ")
    return answer.strip().lower() != "cancel"
