"""
Application settings loaded from the environment (.env supported)
"""
import logging
import os
from dataclasses import dataclass
from decimal import Decimal

from dotenv import load_dotenv

load_dotenv()

WEB_PLATFORM = "web"
PAYPAL_ENVIRONMENTS = ("sandbox", "production")
DEFAULT_SHIPPING_COST = Decimal("15.00")


@dataclass
class Settings:
    """Runtime configuration for the bag core and its surfaces"""
    platform: str = WEB_PLATFORM
    paypal_client_id: str = ""
    paypal_client_secret: str = ""
    paypal_environment: str = "sandbox"
    paypal_timeout: float = 30.0
    shipping_cost: Decimal = DEFAULT_SHIPPING_COST
    currency: str = "USD"
    secret_key: str = "extreme-fit-dev-key"
    port: int = 5000
    debug: bool = False
    log_level: str = "INFO"
    bag_max_sessions: int = 1000
    bag_idle_seconds: float = 3600.0

    @property
    def is_web(self) -> bool:
        return self.platform == WEB_PLATFORM

    @property
    def paypal_configured(self) -> bool:
        return bool(self.paypal_client_id and self.paypal_client_secret)

    @classmethod
    def from_env(cls) -> "Settings":
        # Read each setting from the environment, falling back to the defaults above
        environment = os.getenv("PAYPAL_ENVIRONMENT", "sandbox").lower()
        if environment not in PAYPAL_ENVIRONMENTS:
            raise ValueError(
                f"PAYPAL_ENVIRONMENT must be one of {PAYPAL_ENVIRONMENTS}, got {environment!r}"
            )

        return cls(
            platform=os.getenv("APP_PLATFORM", WEB_PLATFORM).lower(),
            paypal_client_id=os.getenv("PAYPAL_CLIENT_ID", ""),
            paypal_client_secret=os.getenv("PAYPAL_CLIENT_SECRET", ""),
            paypal_environment=environment,
            paypal_timeout=float(os.getenv("PAYPAL_TIMEOUT", "30")),
            shipping_cost=Decimal(os.getenv("SHIPPING_COST", str(DEFAULT_SHIPPING_COST))),
            currency=os.getenv("CURRENCY", "USD").upper(),
            secret_key=os.getenv("SECRET_KEY", "extreme-fit-dev-key"),
            port=int(os.getenv("PORT", "5000")),
            debug=os.getenv("DEBUG", "False").lower() == "true",
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            bag_max_sessions=int(os.getenv("BAG_MAX_SESSIONS", "1000")),
            bag_idle_seconds=float(os.getenv("BAG_IDLE_SECONDS", "3600"))
        )


def configure_logging(level: str = "INFO"):
    """Configure root logging for the entry points"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
