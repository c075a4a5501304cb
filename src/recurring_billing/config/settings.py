"""Settings for the billing-date engine.

Priority chain (highest to lowest):
  1. Init kwargs
  2. Env vars with the ``RECURRING_BILLING_`` prefix
  3. ``.env`` file in the working directory
  4. Code defaults
"""

from __future__ import annotations

from datetime import date
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BillingSettings(BaseSettings):
    """Tunable defaults for billing-date queries and logging.

    Attributes:
        default_occurrence_count: Dates returned by list queries when the
            caller gives no count.
        count_anchor: Start date COUNT-capped rules are replayed from when
            answering next-date queries.
        log_level: Level for the ``recurring_billing`` logger.
        log_json: Emit JSON log lines instead of console output.
    """

    model_config = SettingsConfigDict(
        env_prefix="RECURRING_BILLING_",
        env_file=".env",
        extra="ignore",
        frozen=True,
    )

    default_occurrence_count: int = Field(default=12, ge=1)
    count_anchor: date = date(2024, 1, 1)
    log_level: str = "WARNING"
    log_json: bool = False


@lru_cache(maxsize=1)
def get_settings() -> BillingSettings:
    """Return the process-wide settings, loaded once."""
    return BillingSettings()
