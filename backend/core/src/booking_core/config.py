"""Environment-driven settings for the booking engine.

All values come from environment variables so the same code runs locally,
under tests (moto) and in Lambda.
"""

import datetime as dt
import os
from functools import lru_cache
from zoneinfo import ZoneInfo

from pydantic import BaseModel, ConfigDict, Field

from booking_core.models.enums import PaymentProvider


class BookingSettings(BaseModel):
    """Runtime configuration."""

    model_config = ConfigDict(frozen=True)

    environment: str = Field(default="dev")
    table_prefix: str = Field(default="booking-dev")
    timezone: str = Field(default="Asia/Seoul", description="Calendar used for 'today'")
    currency: str = Field(default="KRW")
    payment_provider: PaymentProvider = Field(default=PaymentProvider.MOCK)
    cors_allow_origins: tuple[str, ...] = Field(
        default=("http://localhost:3000", "http://127.0.0.1:3000")
    )

    @classmethod
    def from_env(cls) -> "BookingSettings":
        """Build settings from the current process environment."""
        environment = os.getenv("ENVIRONMENT", "dev")
        origins = os.getenv("CORS_ALLOW_ORIGINS")
        return cls(
            environment=environment,
            # Allow override via DYNAMODB_TABLE_PREFIX for testing
            table_prefix=os.getenv("DYNAMODB_TABLE_PREFIX", f"booking-{environment}"),
            timezone=os.getenv("BOOKING_TIMEZONE", "Asia/Seoul"),
            currency=os.getenv("BOOKING_CURRENCY", "KRW"),
            payment_provider=PaymentProvider(os.getenv("PAYMENT_PROVIDER", "mock").lower()),
            cors_allow_origins=(
                tuple(o.strip() for o in origins.split(",") if o.strip())
                if origins
                else cls.model_fields["cors_allow_origins"].default
            ),
        )

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def today(self, now: dt.datetime) -> dt.date:
        """Calendar date of `now` in the configured timezone."""
        if now.tzinfo is None:
            now = now.replace(tzinfo=dt.UTC)
        return now.astimezone(self.tzinfo).date()


@lru_cache(maxsize=1)
def get_settings() -> BookingSettings:
    """Get the cached settings instance."""
    return BookingSettings.from_env()


def reset_settings() -> None:
    """Drop cached settings (for testing only)."""
    get_settings.cache_clear()
