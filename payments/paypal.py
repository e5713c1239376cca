"""
PayPal REST payment capability.

Uses the Orders v2 API:
1. client-credentials OAuth token (/v1/oauth2/token)
2. CAPTURE order creation (/v2/checkout/orders)
3. buyer approval, when PayPal asks for it, through an approval handler
4. capture (/v2/checkout/orders/{id}/capture)

Payment succeeds only once the capture comes back COMPLETED; the capture id
is used as the transaction id. An order that still needs the buyer's
approval and has no handler to obtain it is a failure.
"""
import asyncio
import logging
from decimal import Decimal
from typing import Any, Awaitable, Callable, Dict, Optional

import aiohttp

from models.cart import to_money
from models.payment import PaymentResult
from .capability import PaymentCapability
from .errors import PaymentFailedError

logger = logging.getLogger(__name__)

PAYPAL_BASE_URLS = {
    "sandbox": "https://api-m.sandbox.paypal.com",
    "production": "https://api-m.paypal.com",
}

# Order states that still need the buyer to approve on PayPal
AWAITING_APPROVAL = ("CREATED", "PAYER_ACTION_REQUIRED")
APPROVAL_LINK_RELS = ("payer-action", "approve")

# (order_id, approve_url) -> True once the buyer has approved
ApprovalHandler = Callable[[str, Optional[str]], Awaitable[bool]]


class PayPalCapability(PaymentCapability):
    """
    PayPal payment capability.

    Example:
    ```python
    async def approve(order_id, approve_url):
        print(f"Approve at {approve_url}")
        return True

    paypal = PayPalCapability(client_id, client_secret, environment="sandbox",
                              approval_handler=approve)
    result = await paypal.submit(Decimal("276.82"), "USD", "Extreme Fit - 6 items")
    print(result.transaction_id)
    ```
    """

    def __init__(self, client_id: str, client_secret: str,
                 environment: str = "sandbox", timeout: float = 30.0,
                 approval_handler: Optional[ApprovalHandler] = None):
        if environment not in PAYPAL_BASE_URLS:
            raise ValueError(f"Unknown PayPal environment: {environment}")
        self.client_id = client_id
        self.client_secret = client_secret
        self.environment = environment
        self.base_url = PAYPAL_BASE_URLS[environment]
        self.timeout = timeout
        self.approval_handler = approval_handler

    async def _get_access_token(self, session: aiohttp.ClientSession) -> str:
        auth = aiohttp.BasicAuth(self.client_id, self.client_secret)
        async with session.post(
            f"{self.base_url}/v1/oauth2/token",
            data={"grant_type": "client_credentials"},
            auth=auth,
        ) as response:
            if response.status != 200:
                body = await response.text()
                raise PaymentFailedError("PayPal authentication failed",
                                         status_code=response.status, details=body)
            payload = await response.json()

        token = payload.get("access_token")
        if not token:
            raise PaymentFailedError("PayPal authentication returned no access token")
        return token

    @staticmethod
    def build_order_payload(amount: Decimal, currency: str, description: str) -> Dict[str, Any]:
        return {
            "intent": "CAPTURE",
            "purchase_units": [
                {
                    "description": description,
                    "amount": {
                        "currency_code": currency,
                        "value": str(to_money(amount)),
                    },
                }
            ],
        }

    @staticmethod
    def approval_url(order: Dict[str, Any]) -> Optional[str]:
        for link in order.get("links", []):
            if link.get("rel") in APPROVAL_LINK_RELS:
                return link.get("href")
        return None

    @staticmethod
    def capture_id(order: Dict[str, Any]) -> Optional[str]:
        # First capture of the first purchase unit
        for unit in order.get("purchase_units", []):
            captures = unit.get("payments", {}).get("captures", [])
            if captures:
                return captures[0].get("id")
        return None

    async def _post(self, session: aiohttp.ClientSession, path: str, token: str,
                    body: Dict[str, Any], action: str) -> Dict[str, Any]:
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }
        async with session.post(f"{self.base_url}{path}", json=body, headers=headers) as response:
            if response.status not in (200, 201):
                details = await response.text()
                raise PaymentFailedError(f"PayPal {action} failed",
                                         status_code=response.status, details=details)
            return await response.json()

    async def _await_approval(self, order_id: str, order: Dict[str, Any]):
        if self.approval_handler is None:
            raise PaymentFailedError("PayPal order requires payer approval", details=order)

        approved = await self.approval_handler(order_id, self.approval_url(order))
        if not approved:
            raise PaymentFailedError("PayPal order was not approved by the payer")

    async def submit(self, amount: Decimal, currency: str, description: str) -> PaymentResult:
        # One session per submit: callers may drive each checkout on a fresh event loop
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                token = await self._get_access_token(session)

                order = await self._post(
                    session, "/v2/checkout/orders", token,
                    self.build_order_payload(amount, currency, description), "order creation"
                )
                order_id = order.get("id")
                if not order_id:
                    raise PaymentFailedError("PayPal response did not include an order id",
                                             details=order)

                status = order.get("status")
                logger.info("PayPal order created: %s (%s)", order_id, status)

                if status in AWAITING_APPROVAL:
                    await self._await_approval(order_id, order)
                elif status not in ("APPROVED", "COMPLETED"):
                    raise PaymentFailedError(f"PayPal order in unexpected state: {status}",
                                             details=order)

                if status != "COMPLETED":
                    order = await self._post(
                        session, f"/v2/checkout/orders/{order_id}/capture", token, {}, "capture"
                    )
                    status = order.get("status")

        except asyncio.TimeoutError as e:
            raise PaymentFailedError("PayPal request timed out") from e
        except aiohttp.ClientError as e:
            raise PaymentFailedError(f"PayPal request failed: {e}") from e

        if status != "COMPLETED":
            raise PaymentFailedError(f"PayPal capture not completed: {status}", details=order)

        transaction_id = self.capture_id(order) or order_id
        logger.info("PayPal order %s captured: %s", order_id, transaction_id)
        return PaymentResult(transaction_id=transaction_id)
