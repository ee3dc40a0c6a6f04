from fastapi import Depends

from app.core.config import Settings, get_settings
from app.services.bundle_service import BundleService
from app.services.shopify.client import ShopifyGraphQLClient


def get_shopify_client(settings: Settings = Depends(get_settings)) -> ShopifyGraphQLClient:
    """Dependency for an Admin API client bound to the configured shop."""
    return ShopifyGraphQLClient(settings)


def get_bundle_service(
    client: ShopifyGraphQLClient = Depends(get_shopify_client),
    settings: Settings = Depends(get_settings),
) -> BundleService:
    return BundleService(client, settings)
