# tests/conftest.py
import pytest
from unittest.mock import AsyncMock, MagicMock
from fastapi.testclient import TestClient

from app.core.config import Settings, clear_settings_cache, get_settings
from app.core.security import get_current_username
from app.dependencies import get_bundle_service
from app.main import app
from app.services.bundle_service import BundleService
from app.services.shopify.client import ShopifyGraphQLClient


@pytest.fixture
def settings():
    """Provide test settings"""
    return Settings(
        SHOPIFY_SHOP_URL="test-shop.myshopify.com",
        SHOPIFY_ADMIN_API_ACCESS_TOKEN="shpat_test_token",
        SHOPIFY_API_VERSION="2024-10",
        BASIC_AUTH_USERNAME="admin",
        BASIC_AUTH_PASSWORD="test_password",
        ENVIRONMENT="test",
    )


@pytest.fixture
def mock_shopify_client():
    """Provide a mocked ShopifyGraphQLClient with empty catalog responses"""
    client = MagicMock(spec=ShopifyGraphQLClient)
    client.get_products = AsyncMock(return_value=[])
    client.get_bundle_products = AsyncMock(return_value=[])
    client.get_nodes = AsyncMock(return_value=[])
    client.create_product = AsyncMock(return_value={"product": None, "userErrors": []})
    return client


@pytest.fixture
def bundle_service(mock_shopify_client, settings):
    return BundleService(mock_shopify_client, settings)


@pytest.fixture
def test_client(settings, bundle_service):
    """Provide an authenticated test client backed by the mocked Shopify client"""
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_bundle_service] = lambda: bundle_service
    app.dependency_overrides[get_current_username] = lambda: "admin"
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
    clear_settings_cache()


@pytest.fixture
def anonymous_client(settings, bundle_service):
    """Test client that goes through HTTP Basic auth"""
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_bundle_service] = lambda: bundle_service
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
    clear_settings_cache()
