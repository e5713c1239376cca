"""
Checkout service - drives a single PayPal checkout attempt
"""
import logging
import threading
from typing import Optional

from models.payment import (
    CheckoutOutcome, PaymentAttempt, PaymentStatus, PlatformMode
)
from payments.capability import PaymentCapability
from payments.errors import CheckoutInProgressError
from .cart_store import CartStore

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "USD"
STORE_NAME = "Extreme Fit"

DEMO_TITLE = "Demo Mode"
DEMO_MESSAGE = ("PayPal payment simulation completed successfully!\n\n"
                "Note: PayPal integration works on mobile devices. This is a demo for web.")
UNAVAILABLE_TITLE = "PayPal Unavailable"
UNAVAILABLE_MESSAGE = "PayPal payment is not available on this platform."
SUCCESS_TITLE = "Payment Successful!"
FAILURE_TITLE = "Payment Failed"
FAILURE_MESSAGE = "There was an error processing your payment. Please try again."


class CheckoutCoordinator:
    # Runs checkout against the platform mode and payment capability chosen at startup

    def __init__(self, cart_store: CartStore, platform_mode: PlatformMode,
                 payment_capability: Optional[PaymentCapability] = None,
                 currency: str = DEFAULT_CURRENCY):
        if platform_mode is PlatformMode.NATIVE_LIVE and payment_capability is None:
            raise ValueError("NATIVE_LIVE checkout requires a payment capability")

        self.cart_store = cart_store
        self.platform_mode = platform_mode
        self.payment_capability = payment_capability
        self.currency = currency
        self.last_attempt: Optional[PaymentAttempt] = None
        self._submitting = False
        self._guard = threading.Lock()

    @property
    def is_submitting(self) -> bool:
        return self._submitting

    def _build_attempt(self) -> PaymentAttempt:
        # Snapshot the total now; later quantity changes must not alter the amount
        summary = self.cart_store.summary()
        return PaymentAttempt(
            amount_due=summary.total,
            currency=self.currency,
            description=f"{STORE_NAME} - {summary.total_item_count} items",
            platform_mode=self.platform_mode
        )

    async def initiate_checkout(self) -> CheckoutOutcome:
        # Only one attempt may be in flight at a time
        with self._guard:
            if self._submitting:
                raise CheckoutInProgressError("A checkout attempt is already in progress")
            if self.platform_mode is PlatformMode.WEB_DEMO:
                return self._complete_demo()
            if self.platform_mode is PlatformMode.NATIVE_UNAVAILABLE:
                return self._report_unavailable()
            self._submitting = True

        try:
            return await self._submit_payment()
        finally:
            self._submitting = False

    def _complete_demo(self) -> CheckoutOutcome:
        attempt = self._build_attempt()
        attempt.succeed()
        self.last_attempt = attempt

        self.cart_store.clear()
        logger.info("Demo checkout completed for %s %s", attempt.amount_due, attempt.currency)
        return CheckoutOutcome(
            status=PaymentStatus.SUCCESS,
            title=DEMO_TITLE,
            message=DEMO_MESSAGE,
            cart_cleared=True
        )

    def _report_unavailable(self) -> CheckoutOutcome:
        attempt = self._build_attempt()
        attempt.status = PaymentStatus.UNAVAILABLE
        self.last_attempt = attempt

        logger.info("Checkout requested but no payment capability is loaded")
        return CheckoutOutcome(
            status=PaymentStatus.UNAVAILABLE,
            title=UNAVAILABLE_TITLE,
            message=UNAVAILABLE_MESSAGE
        )

    async def _submit_payment(self) -> CheckoutOutcome:
        attempt = self._build_attempt()
        self.last_attempt = attempt
        logger.info("Submitting payment of %s %s (%s)",
                    attempt.amount_due, attempt.currency, attempt.description)

        try:
            result = await self.payment_capability.submit(
                attempt.amount_due, attempt.currency, attempt.description
            )
        except Exception as e:
            # Detail stays in the log; the user only sees the generic message
            logger.warning("Payment failed: %s", e, exc_info=True)
            attempt.fail(FAILURE_MESSAGE)
            return CheckoutOutcome(
                status=PaymentStatus.FAILURE,
                title=FAILURE_TITLE,
                message=FAILURE_MESSAGE
            )

        attempt.succeed(result.transaction_id)
        self.cart_store.clear()
        logger.info("Payment successful: %s", result.transaction_id)
        return CheckoutOutcome(
            status=PaymentStatus.SUCCESS,
            title=SUCCESS_TITLE,
            message=f"Transaction ID: {result.transaction_id}",
            cart_cleared=True,
            transaction_id=result.transaction_id
        )
