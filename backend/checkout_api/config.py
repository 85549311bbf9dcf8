"""Application configuration via environment variables.

Provides type-safe settings loading using pydantic-settings.
Environment variables can be loaded from a .env file.

The settings object is built once and handed to the app factory; handlers
read it through dependencies instead of touching os.environ.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Environment Variables:
        SHOPIFY_STORE_DOMAIN: Shop domain, e.g. example.myshopify.com (alias SHOPIFY_STORE)
        SHOPIFY_ADMIN_ACCESS_TOKEN: Admin API access token (alias SHOPIFY_ACCESS_TOKEN)
        SHOPIFY_API_VERSION: Admin REST API version path segment
        CRON_SECRET: Shared secret for manual cleanup triggers
        CRON_MARKER_HEADER: Header the hosting scheduler sets on timer invocations
        LOG_LEVEL: Logging level (default INFO)
        LOG_JSON: Emit JSON log lines (default true)
    """

    # Shopify
    SHOPIFY_STORE_DOMAIN: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SHOPIFY_STORE_DOMAIN", "SHOPIFY_STORE"),
    )
    SHOPIFY_ADMIN_ACCESS_TOKEN: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("SHOPIFY_ADMIN_ACCESS_TOKEN", "SHOPIFY_ACCESS_TOKEN"),
    )
    SHOPIFY_API_VERSION: str = "2024-01"
    SHOPIFY_TIMEOUT_SECONDS: float = 15.0

    # Cleanup trigger
    CRON_SECRET: Optional[str] = None
    CRON_MARKER_HEADER: str = "x-vercel-cron"

    # Cleanup sweep
    DRAFT_ORDER_MAX_AGE_MINUTES: int = Field(default=30, ge=1)
    CLEANUP_PAGE_SIZE: int = Field(default=250, ge=1, le=250)
    CLEANUP_MAX_PAGES: int = Field(default=10, ge=1)
    CLEANUP_DELETE_DELAY_SECONDS: float = Field(default=0.1, ge=0)

    # Draft order defaults
    DEFAULT_LINE_ITEM_TITLE: str = "Custom Shade"
    DRAFT_ORDER_DEFAULT_NOTE: Optional[str] = None
    DRAFT_ORDER_TAGS: Optional[str] = None

    # Application
    SERVICE_NAME: str = "shade-checkout-api"
    SERVICE_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True
    CORS_ORIGINS: str = "*"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("SHOPIFY_STORE_DOMAIN")
    @classmethod
    def normalize_store_domain(cls, v: Optional[str]) -> Optional[str]:
        """Strip scheme and slashes so the domain can be used in URLs."""
        if v is None:
            return None
        v = v.strip()
        for prefix in ("https://", "http://"):
            if v.lower().startswith(prefix):
                v = v[len(prefix):]
        v = v.strip("/ ")
        return v or None

    @field_validator("SHOPIFY_ADMIN_ACCESS_TOKEN", "CRON_SECRET", "DRAFT_ORDER_DEFAULT_NOTE")
    @classmethod
    def blank_as_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

    @property
    def shopify_configured(self) -> bool:
        """True when both the store domain and access token are present."""
        return bool(self.SHOPIFY_STORE_DOMAIN and self.SHOPIFY_ADMIN_ACCESS_TOKEN)

    @property
    def shopify_base_url(self) -> str:
        return f"https://{self.SHOPIFY_STORE_DOMAIN}/admin/api/{self.SHOPIFY_API_VERSION}"

    @property
    def draft_order_tags(self) -> List[str]:
        if not self.DRAFT_ORDER_TAGS:
            return []
        return [tag.strip() for tag in self.DRAFT_ORDER_TAGS.split(",") if tag.strip()]

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    def missing_required(self) -> List[str]:
        """Names of required settings that are not set."""
        missing = []
        if not self.SHOPIFY_STORE_DOMAIN:
            missing.append("SHOPIFY_STORE_DOMAIN")
        if not self.SHOPIFY_ADMIN_ACCESS_TOKEN:
            missing.append("SHOPIFY_ADMIN_ACCESS_TOKEN")
        return missing


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache for singleton behavior.
    Call get_settings.cache_clear() to reload settings.
    """
    return Settings()
