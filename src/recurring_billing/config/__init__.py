"""Configuration - Settings and logging setup."""

from recurring_billing.config.logging import configure_from_settings, configure_logging, get_logger
from recurring_billing.config.settings import BillingSettings, get_settings

__all__ = [
    "BillingSettings",
    "configure_from_settings",
    "configure_logging",
    "get_logger",
    "get_settings",
]
