"""Application configuration management."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.constants import LogLevel


class Settings(BaseSettings):
    """Application settings."""

    # Application
    app_name: str = Field(default="Stripe Storefront", description="Storefront")
    debug: bool = Field(default=False, description="Debug mode")
    version: str = Field(default="0.1.0", description="Application version")
    log_level: LogLevel = Field(
        default=LogLevel.INFO, description="Root log level", alias="LOG_LEVEL"
    )

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port", alias="PORT")
    public_url: str = Field(
        default="http://localhost:8000",
        description="Public base URL used to build redirect targets",
        alias="PUBLIC_URL",
    )

    # Stripe Configuration
    stripe_secret_key: str = Field(
        default="",
        description="Stripe secret API key, required to build the payment client",
        alias="STRIPE_SECRET_KEY",
    )
    stripe_api_version: str = Field(
        default="2025-01-27.acacia",
        description="Stripe API version pinned on every request",
        alias="STRIPE_API_VERSION",
    )
    currency: str = Field(
        default="usd", description="Currency for charges and balance entries"
    )
    demo_email_domain: str = Field(
        default="example.com",
        description="Domain used for playground customer emails",
    )

    # Plan price IDs
    stripe_price_id_basic: str = Field(
        default="price_1RqSK0Cu6bmtuBQfCjwQ4pkI",
        description="Stripe price ID for the Basic plan",
        alias="STRIPE_PRICE_ID_BASIC",
    )
    stripe_price_id_basic_yearly: str = Field(
        default="price_1RqTE0Cu6bmtuBQfYBroUu9a",
        description="Stripe yearly price ID for the Basic plan",
        alias="STRIPE_PRICE_ID_BASIC_YEARLY",
    )
    stripe_price_id_pro: str = Field(
        default="price_1RqTG8Cu6bmtuBQfxhba36iM",
        description="Stripe price ID for the Pro plan",
        alias="STRIPE_PRICE_ID_PRO",
    )
    stripe_price_id_pro_yearly: str = Field(
        default="price_1QyHtWCu6bmtuBQfVY0a0Uxb",
        description="Stripe yearly price ID for the Pro plan",
        alias="STRIPE_PRICE_ID_PRO_YEARLY",
    )
    stripe_price_id_enterprise: str = Field(
        default="price_1RqTG8Cu6bmtuBQfxhba36iM",
        description="Stripe price ID for the Enterprise plan",
        alias="STRIPE_PRICE_ID_ENTERPRISE",
    )
    stripe_price_id_enterprise_yearly: str = Field(
        default="price_1QyHtWCu6bmtuBQfVY0a0Uxb",
        description="Stripe yearly price ID for the Enterprise plan",
        alias="STRIPE_PRICE_ID_ENTERPRISE_YEARLY",
    )

    # CORS
    allowed_origins: list[str] = Field(
        default=[
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:8000",
            "http://127.0.0.1:8000",
        ],
        description="CORS allowed origins",
    )
    allowed_methods: list[str] = Field(
        default=["GET", "POST", "OPTIONS"],
        description="CORS allowed methods",
    )
    allowed_headers: list[str] = Field(
        default=["*"], description="CORS allowed headers"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    def price_id_for(self, plan: str, yearly: bool = False) -> str:
        """Return the configured Stripe price ID for a plan."""
        suffix = "_yearly" if yearly else ""
        return str(getattr(self, f"stripe_price_id_{plan}{suffix}"))


# Global settings instance
settings = Settings()
