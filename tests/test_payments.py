"""
Tests for platform resolution, capability loading and the PayPal client
"""
import os
import unittest
from decimal import Decimal
from unittest.mock import patch

from aiohttp import BasicAuth, web
from aiohttp.test_utils import AioHTTPTestCase

from config import Settings
from core.bag_screen import BagScreen, default_bag_items
from models.payment import PaymentStatus, PlatformMode
from payments.capability import load_payment_capability, resolve_platform_mode
from payments.errors import PaymentFailedError
from payments.paypal import PayPalCapability
from services.cart_store import CartStore
from services.checkout_service import CheckoutCoordinator


class TestPlatformResolution(unittest.TestCase):
    """Test cases for resolve_platform_mode and load_payment_capability"""

    def test_web_is_demo(self):
        """Test web resolves to demo even with a capability"""
        capability = PayPalCapability("id", "secret")

        self.assertEqual(resolve_platform_mode("web", None), PlatformMode.WEB_DEMO)
        self.assertEqual(resolve_platform_mode("web", capability), PlatformMode.WEB_DEMO)

    def test_native_modes(self):
        """Test native platforms depend on capability presence"""
        capability = PayPalCapability("id", "secret")

        self.assertEqual(resolve_platform_mode("ios", capability), PlatformMode.NATIVE_LIVE)
        self.assertEqual(resolve_platform_mode("android", None), PlatformMode.NATIVE_UNAVAILABLE)

    def test_no_capability_on_web(self):
        """Test web never loads PayPal"""
        settings = Settings(platform="web", paypal_client_id="id", paypal_client_secret="secret")

        self.assertIsNone(load_payment_capability(settings))

    def test_no_capability_without_credentials(self):
        """Test native without credentials loads nothing"""
        with self.assertLogs("payments.capability", level="INFO"):
            capability = load_payment_capability(Settings(platform="ios"))

        self.assertIsNone(capability)

    def test_capability_loaded(self):
        """Test native with credentials gets a PayPal capability"""
        settings = Settings(platform="android", paypal_client_id="id",
                            paypal_client_secret="secret", paypal_environment="production",
                            paypal_timeout=5.0)

        capability = load_payment_capability(settings)

        self.assertIsInstance(capability, PayPalCapability)
        self.assertEqual(capability.base_url, "https://api-m.paypal.com")
        self.assertEqual(capability.timeout, 5.0)

    def test_invalid_environment_is_unavailable(self):
        """Test a bad PayPal environment leaves native checkout unavailable instead of crashing"""
        settings = Settings(platform="ios", paypal_client_id="id",
                            paypal_client_secret="secret", paypal_environment="staging")

        with self.assertLogs("payments.capability", level="WARNING"):
            capability = load_payment_capability(settings)

        self.assertIsNone(capability)
        self.assertEqual(BagScreen(settings, capability).platform_mode,
                         PlatformMode.NATIVE_UNAVAILABLE)


class TestSettings(unittest.TestCase):
    """Test cases for environment configuration"""

    def test_from_env(self):
        """Test settings are read from the environment"""
        env = {
            "APP_PLATFORM": "iOS",
            "PAYPAL_CLIENT_ID": "client",
            "PAYPAL_CLIENT_SECRET": "secret",
            "PAYPAL_ENVIRONMENT": "production",
            "SHIPPING_COST": "9.50",
            "CURRENCY": "eur",
            "DEBUG": "true",
            "BAG_MAX_SESSIONS": "25",
        }
        with patch.dict(os.environ, env):
            settings = Settings.from_env()

        self.assertEqual(settings.platform, "ios")
        self.assertTrue(settings.paypal_configured)
        self.assertEqual(settings.shipping_cost, Decimal("9.50"))
        self.assertEqual(settings.currency, "EUR")
        self.assertTrue(settings.debug)
        self.assertFalse(settings.is_web)
        self.assertEqual(settings.bag_max_sessions, 25)

    def test_invalid_paypal_environment(self):
        """Test an unknown PayPal environment is rejected"""
        with patch.dict(os.environ, {"PAYPAL_ENVIRONMENT": "staging"}):
            with self.assertRaises(ValueError):
                Settings.from_env()

    def test_defaults(self):
        """Test default settings run the web demo"""
        settings = Settings()

        self.assertTrue(settings.is_web)
        self.assertFalse(settings.paypal_configured)
        self.assertEqual(settings.shipping_cost, Decimal("15.00"))


class TestPayPalCapability(AioHTTPTestCase):
    """Test cases for PayPalCapability against a local PayPal stand-in"""

    ORDER_ID = "5O190127TN364715T"
    CAPTURE_ID = "3C679366HH908993F"
    APPROVE_URL = "https://www.sandbox.paypal.com/checkoutnow?token=5O190127TN364715T"

    async def get_application(self):
        self.order_status = 201
        self.order_state = "PAYER_ACTION_REQUIRED"
        self.capture_status = 201
        self.capture_state = "COMPLETED"
        self.order_requests = []
        self.capture_requests = []

        async def token(request):
            form = await request.post()
            try:
                auth = BasicAuth.decode(request.headers.get("Authorization", ""))
            except ValueError:
                auth = None
            if auth is None or (auth.login, auth.password) != ("client", "secret") \
                    or form.get("grant_type") != "client_credentials":
                return web.json_response({"error": "invalid_client"}, status=401)
            return web.json_response({"access_token": "A21AA-token", "token_type": "Bearer"})

        async def create_order(request):
            if request.headers.get("Authorization") != "Bearer A21AA-token":
                return web.json_response({"name": "AUTHENTICATION_FAILURE"}, status=401)
            self.order_requests.append(await request.json())
            if self.order_status != 201:
                return web.json_response({"name": "UNPROCESSABLE_ENTITY"}, status=self.order_status)
            return web.json_response({
                "id": self.ORDER_ID,
                "status": self.order_state,
                "links": [
                    {"rel": "self", "href": f"/v2/checkout/orders/{self.ORDER_ID}"},
                    {"rel": "payer-action", "href": self.APPROVE_URL},
                ],
            }, status=201)

        async def capture_order(request):
            if request.headers.get("Authorization") != "Bearer A21AA-token":
                return web.json_response({"name": "AUTHENTICATION_FAILURE"}, status=401)
            self.capture_requests.append(request.match_info["order_id"])
            if self.capture_status != 201:
                return web.json_response({"name": "UNPROCESSABLE_ENTITY",
                                          "details": [{"issue": "INSTRUMENT_DECLINED"}]},
                                         status=self.capture_status)
            return web.json_response({
                "id": request.match_info["order_id"],
                "status": self.capture_state,
                "purchase_units": [
                    {"payments": {"captures": [{"id": self.CAPTURE_ID, "status": "COMPLETED"}]}}
                ],
            }, status=201)

        app = web.Application()
        app.router.add_post("/v1/oauth2/token", token)
        app.router.add_post("/v2/checkout/orders", create_order)
        app.router.add_post("/v2/checkout/orders/{order_id}/capture", capture_order)
        return app

    def make_capability(self, approval_handler=None) -> PayPalCapability:
        capability = PayPalCapability("client", "secret", environment="sandbox", timeout=5,
                                      approval_handler=approval_handler)
        capability.base_url = str(self.server.make_url("/")).rstrip("/")
        return capability

    def make_approver(self, approved=True):
        approvals = []

        async def approve(order_id, approve_url):
            approvals.append((order_id, approve_url))
            return approved

        return approve, approvals

    async def test_unapproved_order_is_not_a_payment(self):
        """Test an order awaiting buyer approval fails without an approval handler"""
        with self.assertRaises(PaymentFailedError):
            await self.make_capability().submit(Decimal("276.82"), "USD", "Extreme Fit - 6 items")

        self.assertEqual(len(self.order_requests), 1)
        self.assertEqual(self.capture_requests, [])

    async def test_unapproved_order_keeps_the_cart(self):
        """Test checkout reports failure and keeps the bag when the order was never approved"""
        store = CartStore(default_bag_items())
        coordinator = CheckoutCoordinator(store, PlatformMode.NATIVE_LIVE, self.make_capability())

        with self.assertLogs("services.checkout_service", level="WARNING"):
            outcome = await coordinator.initiate_checkout()

        self.assertEqual(outcome.status, PaymentStatus.FAILURE)
        self.assertFalse(outcome.cart_cleared)
        self.assertEqual(store.summary().total_item_count, 6)

    async def test_approved_order_is_captured(self):
        """Test submit waits for approval, captures and returns the capture id"""
        approve, approvals = self.make_approver()

        result = await self.make_capability(approve).submit(
            Decimal("276.82"), "USD", "Extreme Fit - 6 items"
        )

        self.assertEqual(result.transaction_id, self.CAPTURE_ID)
        self.assertEqual(approvals, [(self.ORDER_ID, self.APPROVE_URL)])
        self.assertEqual(self.capture_requests, [self.ORDER_ID])
        unit = self.order_requests[0]["purchase_units"][0]
        self.assertEqual(self.order_requests[0]["intent"], "CAPTURE")
        self.assertEqual(unit["amount"], {"currency_code": "USD", "value": "276.82"})
        self.assertEqual(unit["description"], "Extreme Fit - 6 items")

    async def test_approved_order_clears_the_cart(self):
        """Test a captured payment completes checkout"""
        approve, _ = self.make_approver()
        store = CartStore(default_bag_items())
        coordinator = CheckoutCoordinator(store, PlatformMode.NATIVE_LIVE,
                                          self.make_capability(approve))

        outcome = await coordinator.initiate_checkout()

        self.assertTrue(outcome.success)
        self.assertEqual(outcome.transaction_id, self.CAPTURE_ID)
        self.assertTrue(store.is_empty)

    async def test_declined_approval_is_not_captured(self):
        """Test a buyer who cancels approval is never charged"""
        approve, approvals = self.make_approver(approved=False)

        with self.assertRaises(PaymentFailedError):
            await self.make_capability(approve).submit(Decimal("15.00"), "USD", "Extreme Fit - 0 items")

        self.assertEqual(len(approvals), 1)
        self.assertEqual(self.capture_requests, [])

    async def test_already_approved_order_is_captured(self):
        """Test an order PayPal reports as APPROVED goes straight to capture"""
        self.order_state = "APPROVED"

        result = await self.make_capability().submit(Decimal("15.00"), "USD", "Extreme Fit - 0 items")

        self.assertEqual(result.transaction_id, self.CAPTURE_ID)
        self.assertEqual(self.capture_requests, [self.ORDER_ID])

    async def test_incomplete_capture_raises(self):
        """Test a capture that doesn't come back COMPLETED is a failure"""
        self.capture_state = "PENDING"
        approve, _ = self.make_approver()

        with self.assertRaises(PaymentFailedError):
            await self.make_capability(approve).submit(Decimal("15.00"), "USD", "Extreme Fit - 0 items")

    async def test_declined_capture_raises(self):
        """Test a non-2xx capture response raises PaymentFailedError"""
        self.capture_status = 422
        approve, _ = self.make_approver()

        with self.assertRaises(PaymentFailedError) as ctx:
            await self.make_capability(approve).submit(Decimal("15.00"), "USD", "Extreme Fit - 0 items")

        self.assertEqual(ctx.exception.status_code, 422)

    async def test_unexpected_order_state_raises(self):
        """Test an order in a state we can't capture from fails"""
        self.order_state = "VOIDED"
        approve, approvals = self.make_approver()

        with self.assertRaises(PaymentFailedError):
            await self.make_capability(approve).submit(Decimal("15.00"), "USD", "Extreme Fit - 0 items")

        self.assertEqual(approvals, [])
        self.assertEqual(self.capture_requests, [])

    async def test_rejected_order_raises(self):
        """Test a non-2xx order response raises PaymentFailedError"""
        self.order_status = 422

        with self.assertRaises(PaymentFailedError) as ctx:
            await self.make_capability().submit(Decimal("15.00"), "USD", "Extreme Fit - 0 items")

        self.assertEqual(ctx.exception.status_code, 422)

    async def test_bad_credentials_raise(self):
        """Test an auth failure raises PaymentFailedError"""
        capability = self.make_capability()
        capability.client_id = ""
        capability.client_secret = ""

        with self.assertRaises(PaymentFailedError):
            await capability.submit(Decimal("15.00"), "USD", "Extreme Fit - 0 items")

    def test_order_payload_amount_format(self):
        """Test amounts are sent as two-decimal strings"""
        payload = PayPalCapability.build_order_payload(Decimal("261.8"), "USD", "x")

        self.assertEqual(payload["purchase_units"][0]["amount"]["value"], "261.80")

    def test_unknown_environment(self):
        """Test an unknown environment is rejected"""
        with self.assertRaises(ValueError):
            PayPalCapability("id", "secret", environment="staging")


if __name__ == '__main__':
    unittest.main()
