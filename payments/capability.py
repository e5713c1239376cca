"""
Payment capability boundary and composition-time loading
"""
import logging
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional

from config import Settings, WEB_PLATFORM
from models.payment import PaymentResult, PlatformMode

logger = logging.getLogger(__name__)


class PaymentCapability(ABC):
    """External service that actually moves money.

    submit() resolves to a PaymentResult on success and raises on any
    rejection (network error, cancellation, decline).
    """

    @abstractmethod
    async def submit(self, amount: Decimal, currency: str, description: str) -> PaymentResult:
        raise NotImplementedError


def resolve_platform_mode(platform: str, capability: Optional[PaymentCapability]) -> PlatformMode:
    # Resolved once at startup, never re-probed per checkout
    if platform == WEB_PLATFORM:
        return PlatformMode.WEB_DEMO
    if capability is None:
        return PlatformMode.NATIVE_UNAVAILABLE
    return PlatformMode.NATIVE_LIVE


def load_payment_capability(settings: Settings,
                            approval_handler=None) -> Optional[PaymentCapability]:
    # Web runs the demo checkout, so no capability is ever loaded there
    if settings.is_web:
        return None

    if not settings.paypal_configured:
        logger.info("PayPal not available on this platform (%s): credentials not configured",
                    settings.platform)
        return None

    from .paypal import PayPalCapability

    try:
        capability = PayPalCapability(
            client_id=settings.paypal_client_id,
            client_secret=settings.paypal_client_secret,
            environment=settings.paypal_environment,
            timeout=settings.paypal_timeout,
            approval_handler=approval_handler
        )
    except ValueError as e:
        logger.warning("PayPal not available on this platform (%s): %s", settings.platform, e)
        return None

    logger.info("PayPal capability loaded for %s (%s)", settings.platform, settings.paypal_environment)
    return capability
