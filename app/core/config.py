# app/core/config.py

import os
from functools import lru_cache
from typing import Optional
from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings.
    Loads values from environment variables (.env file)
    """
    # Shopify Admin API
    SHOPIFY_SHOP_URL: Optional[str] = None
    SHOPIFY_ADMIN_API_ACCESS_TOKEN: Optional[str] = None
    SHOPIFY_API_VERSION: str = "2024-10"
    SHOPIFY_REQUEST_TIMEOUT: float = 30.0

    # Bundle storage layout on Shopify
    BUNDLE_TAG: str = "bundle"
    BUNDLE_METAFIELD_NAMESPACE: str = "custom"
    BUNDLE_METAFIELD_KEY: str = "bundle_products"

    # Catalog reads
    CATALOG_PAGE_SIZE: int = 20
    BUNDLE_RESOLVE_CONCURRENCY: int = 20 # >= page size means every bundle on the page resolves at once

    # Create bundle form
    DEFAULT_DISCOUNT: int = 10

    # Basic Auth
    BASIC_AUTH_USERNAME: str = "admin"
    BASIC_AUTH_PASSWORD: Optional[str] = None

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    model_config = ConfigDict(
        env_file=os.environ.get('ENV_FILE', '.env') if os.path.exists('.env') else None,
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


@lru_cache()
def get_settings():
    """Cached settings to avoid loading .env file for every request"""
    return Settings()

def clear_settings_cache():
    """Clear the settings cache - useful when switching between environments"""
    get_settings.cache_clear()
