"""
Application configuration management with environment variables.

This module provides centralized configuration management using Pydantic
BaseSettings for type-safe environment variable handling with validation
and default values. Shop-level pricing inputs (VAT rate, express fee) and
the store details printed on receipts live here as well.
"""

from decimal import Decimal
from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    All settings can be overridden via environment variables with the
    APP_ prefix (e.g., APP_DEFAULT_VAT_RATE_PERCENT, APP_EXPRESS_FEE).
    """

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging Configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Application logging level",
    )

    # Environment Configuration
    environment: Literal["development", "staging", "production", "test"] = Field(
        default="development",
        description="Application environment",
    )

    # API Configuration
    api_v1_prefix: str = Field(
        default="/api/v1",
        description="API version 1 route prefix",
    )

    cors_origins: Annotated[list[str], NoDecode] = Field(
        default=["http://localhost:3000"],
        description="Allowed CORS origins",
    )

    # Application Configuration
    app_name: str = Field(
        default="Laundra Back Office",
        description="Application name",
    )

    app_version: str = Field(
        default="1.0.0",
        description="Application version",
    )

    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    # Pricing Configuration
    currency: str = Field(
        default="GBP",
        description="ISO 4217 currency code used for all order amounts",
    )

    default_vat_rate_percent: Decimal = Field(
        default=Decimal("20"),
        ge=0,
        le=100,
        description="VAT rate applied to the pre-tax subtotal, in percent",
    )

    express_fee: Decimal = Field(
        default=Decimal("15.00"),
        ge=0,
        description="Flat per-order fee charged for express service",
    )

    # Workflow Configuration
    allow_status_rollback: bool = Field(
        default=True,
        description="Allow one-step backward order status transitions",
    )

    # Store Details
    store_name: str = Field(default="Laundra", description="Trading name")
    store_phone: str = Field(default="01174031831", description="Store phone")
    store_address_line1: str = Field(
        default="Clifton Down Shopping Centre",
        description="First address line",
    )
    store_address_line2: str = Field(
        default="Whiteladies Road, Clifton",
        description="Second address line",
    )
    store_address_city: str = Field(default="Bristol", description="City")
    store_address_postcode: str = Field(default="BS8 2NN", description="Postcode")
    store_vat_number: str = Field(
        default="GB123456789",
        description="VAT registration number printed on receipts",
    )

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        """
        Validate currency code format.

        Args:
            v: Currency code value

        Returns:
            Upper-cased currency code

        Raises:
            ValueError: If the code is not three letters
        """
        code = v.strip().upper()
        if len(code) != 3 or not code.isalpha():
            raise ValueError("Currency must be a three-letter ISO 4217 code")
        return code

    @field_validator("store_vat_number")
    @classmethod
    def validate_store_vat_number(cls, v: str, info) -> str:
        """
        Require a VAT number outside development.

        Args:
            v: VAT number value
            info: Validation info context

        Returns:
            Stripped VAT number

        Raises:
            ValueError: If VAT number is empty in production
        """
        environment = info.data.get("environment", "development")
        if environment == "production" and not v.strip():
            raise ValueError(
                "Store VAT number is required in production environment. "
                "Set APP_STORE_VAT_NUMBER environment variable."
            )
        return v.strip()

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v) -> list[str]:
        """
        Parse CORS origins from a comma-separated string or a list.

        The environment value is passed through undecoded, so
        APP_CORS_ORIGINS=http://a.local,http://b.local works as written.

        Args:
            v: CORS origins value (string or list)

        Returns:
            List of CORS origin URLs
        """
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings instance.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
