# tests/test_routes/test_bundle_routes.py
import re

import pytest
from fastapi.testclient import TestClient

from app.core.config import get_settings, clear_settings_cache
from app.core.exceptions import ShopifyAPIError
from app.core.security import get_current_username
from app.main import app
from tests.mocks import make_bundle_node, make_product_node, make_user_errors_payload

GUITAR_ID = "gid://shopify/Product/1"
AMP_ID = "gid://shopify/Product/2"
BUNDLE_ID = "gid://shopify/Product/100"

GUITAR = make_product_node(GUITAR_ID, "Vintage Guitar", "10.00")
AMP = make_product_node(AMP_ID, "Valve Amp", "20.00")


@pytest.fixture
def catalog(mock_shopify_client):
    """One bundle (Guitar + Amp at 10% off), one broken bundle, two available products"""
    mock_shopify_client.get_products.return_value = [GUITAR, AMP]
    mock_shopify_client.get_bundle_products.return_value = [
        make_bundle_node(
            gid=BUNDLE_ID,
            title="Starter Pack",
            description="Everything to get going",
            products=[GUITAR_ID, AMP_ID],
            discount=10,
        ),
        make_bundle_node(gid="gid://shopify/Product/101", title="Broken Pack", raw_value="{oops"),
    ]
    mock_shopify_client.get_nodes.return_value = [GUITAR, AMP]
    return mock_shopify_client


# --- Pages ---

def test_creator_page_lists_bundles_and_products(test_client, catalog):
    response = test_client.get("/app/bundles")

    assert response.status_code == 200
    assert "Smart Bundle Creator" in response.text
    assert "Starter Pack" in response.text
    assert "2 items" in response.text
    assert "$27.00" in response.text
    assert "Broken Pack" not in response.text
    assert "Vintage Guitar" in response.text
    assert "Add to Bundle" in response.text
    assert 'id="create-bundle-title"' not in response.text


def test_creator_page_without_bundles_shows_empty_state(test_client, mock_shopify_client):
    mock_shopify_client.get_products.return_value = [GUITAR]

    response = test_client.get("/app/bundles")

    assert response.status_code == 200
    assert "No bundles created yet" in response.text


def test_view_details_opens_bundle_modal(test_client, catalog):
    response = test_client.get("/app/bundles", params={"view": BUNDLE_ID})

    assert response.status_code == 200
    assert "Everything to get going" in response.text
    assert "Bundle Discount: 10%" in response.text
    assert "Original Total: $30.00" in response.text
    assert "Final Price: $27.00" in response.text


def test_created_banner_after_redirect(test_client, catalog):
    response = test_client.get("/app/bundles", params={"created": "Summer Set"})

    assert 'Bundle "Summer Set" created.' in response.text


def test_created_bundles_page_is_list_only(test_client, catalog):
    response = test_client.get("/app/created-bundles", params={"view": BUNDLE_ID})

    assert response.status_code == 200
    assert "All Bundles" in response.text
    assert "Starter Pack" in response.text
    assert "Final Price: $27.00" in response.text
    assert "Available Products" not in response.text
    catalog.get_products.assert_not_awaited()


def test_shopify_failure_fails_the_page_with_one_message(test_client, mock_shopify_client):
    mock_shopify_client.get_products.side_effect = ShopifyAPIError("Network error: connection refused")

    response = test_client.get("/app/bundles")

    assert response.status_code == 502
    assert "Network error: connection refused" in response.text


# --- Draft actions ---

def test_add_to_bundle_keeps_selection_in_page(test_client, catalog):
    response = test_client.post(
        "/app/bundles/draft",
        data={"action": "add", "product_id": GUITAR_ID, "discount": "10"},
    )

    assert response.status_code == 200
    assert f'name="selected_products" value="{GUITAR_ID}"' in response.text
    assert 'id="create-bundle-title"' not in response.text


def test_open_modal_previews_selected_products(test_client, catalog):
    response = test_client.post(
        "/app/bundles/draft",
        data={"action": "open", "discount": "10", "selected_products": [GUITAR_ID, AMP_ID]},
    )

    assert response.status_code == 200
    assert 'id="create-bundle-title"' in response.text
    assert "Selected Products" in response.text
    assert "Total Price: $30.00" in response.text
    assert "Discounted Price: $27.00" in response.text


def test_remove_from_selection(test_client, catalog):
    response = test_client.post(
        "/app/bundles/draft",
        data={"remove": GUITAR_ID, "name": "Starter", "discount": "10", "selected_products": [GUITAR_ID, AMP_ID]},
    )

    assert response.status_code == 200
    assert f'name="selected_products" value="{GUITAR_ID}"' not in response.text
    assert f'name="selected_products" value="{AMP_ID}"' in response.text
    assert "Total Price: $20.00" in response.text


def test_cancel_discards_draft(test_client, catalog):
    response = test_client.post(
        "/app/bundles/draft",
        data={"action": "cancel", "name": "Starter", "discount": "25", "selected_products": [GUITAR_ID]},
    )

    assert response.status_code == 200
    assert 'name="selected_products"' not in response.text
    assert 'id="create-bundle-title"' not in response.text


# --- Create bundle ---

def test_create_bundle_without_products_is_rejected(test_client, catalog):
    response = test_client.post("/app/bundles", data={"name": "Starter", "discount": "10"})

    assert response.status_code == 400
    assert "add at least one product" in response.text
    catalog.create_product.assert_not_awaited()


def test_create_bundle_without_name_is_rejected(test_client, catalog):
    response = test_client.post(
        "/app/bundles", data={"name": "", "discount": "10", "selected_products": [GUITAR_ID]}
    )

    assert response.status_code == 400
    catalog.create_product.assert_not_awaited()


def test_create_bundle_redirects_on_success(test_client, catalog):
    catalog.create_product.return_value = {
        "product": {"id": "gid://shopify/Product/200", "title": "Summer Set", "metafield": None},
        "userErrors": [],
    }

    response = test_client.post(
        "/app/bundles",
        data={
            "name": "Summer Set",
            "description": "Sunny",
            "discount": "15",
            "selected_products": [GUITAR_ID, AMP_ID],
        },
        follow_redirects=False,
    )

    assert response.status_code == 303
    assert response.headers["location"] == "/app/bundles?created=Summer+Set"
    product_input = catalog.create_product.await_args.args[0]
    assert product_input["title"] == "Summer Set"
    assert product_input["descriptionHtml"] == "Sunny"
    assert product_input["tags"] == ["bundle"]
    assert product_input["metafields"][0]["value"] == (
        f'{{"products":["{GUITAR_ID}","{AMP_ID}"],"discount":15}}'
    )


def test_create_bundle_shows_first_user_error(test_client, catalog):
    catalog.create_product.return_value = make_user_errors_payload("Handle has already been taken", "Metafield value is invalid")

    response = test_client.post(
        "/app/bundles",
        data={"name": "Starter Pack", "discount": "10", "selected_products": [GUITAR_ID]},
    )

    assert response.status_code == 400
    assert "Handle has already been taken" in response.text
    assert "Metafield value is invalid" not in response.text
    assert f'name="selected_products" value="{GUITAR_ID}"' in response.text


# --- Auth and health ---

def test_pages_require_basic_auth(anonymous_client, catalog):
    assert anonymous_client.get("/app/bundles").status_code == 401
    assert anonymous_client.get("/app/bundles", auth=("admin", "wrong")).status_code == 401
    assert anonymous_client.get("/app/bundles", auth=("admin", "test_password")).status_code == 200


def test_root_redirects_to_creator(test_client):
    response = test_client.get("/", follow_redirects=False)

    assert response.status_code == 307
    assert response.headers["location"] == "/app/bundles"


def test_health_is_open(anonymous_client):
    response = anonymous_client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["shopify_configured"] is True


# --- Draft survives the other modals ---

def test_enter_in_create_modal_refreshes_preview(test_client, catalog):
    response = test_client.post(
        "/app/bundles/draft",
        data={"action": "open", "name": "Starter", "discount": "10", "selected_products": [GUITAR_ID, AMP_ID]},
    )

    modal = response.text.split('aria-labelledby="create-bundle-title"', 1)[1]
    default_button = re.search(r"<button[^>]*>", modal).group(0)
    assert 'name="action"' in default_button
    assert 'value="update"' in default_button
    assert 'name="remove"' not in default_button


def test_view_details_keeps_selection(test_client, catalog):
    added = test_client.post(
        "/app/bundles/draft",
        data={"action": "add", "product_id": GUITAR_ID, "name": "Starter", "discount": "15"},
    )
    assert f'<input type="hidden" name="view" value="{BUNDLE_ID}">' in added.text

    response = test_client.post(
        "/app/bundles/draft",
        data={
            "action": "view",
            "view": BUNDLE_ID,
            "name": "Starter",
            "discount": "15",
            "selected_products": [GUITAR_ID],
        },
    )

    assert response.status_code == 200
    assert "Final Price: $27.00" in response.text
    assert f'name="selected_products" value="{GUITAR_ID}"' in response.text
    assert '<input type="hidden" name="discount" value="15">' in response.text
    assert 'id="create-bundle-title"' not in response.text


def test_closing_details_keeps_selection(test_client, catalog):
    response = test_client.post(
        "/app/bundles/draft",
        data={"action": "view", "discount": "10", "selected_products": [GUITAR_ID]},
    )

    assert response.status_code == 200
    assert "Final Price:" not in response.text
    assert f'name="selected_products" value="{GUITAR_ID}"' in response.text


def test_draft_without_discount_uses_configured_default(test_client, catalog, settings):
    settings.DEFAULT_DISCOUNT = 12

    response = test_client.post(
        "/app/bundles/draft",
        data={"action": "open", "selected_products": [GUITAR_ID]},
    )

    assert '<option value="12" selected>' in response.text
    assert "Discounted Price: $8.80" in response.text


def test_create_bundle_without_discount_uses_configured_default(test_client, catalog, settings):
    settings.DEFAULT_DISCOUNT = 20
    catalog.create_product.return_value = {
        "product": {"id": "gid://shopify/Product/200", "title": "Starter"},
        "userErrors": [],
    }

    response = test_client.post(
        "/app/bundles",
        data={"name": "Starter", "selected_products": [GUITAR_ID]},
        follow_redirects=False,
    )

    assert response.status_code == 303
    product_input = catalog.create_product.await_args.args[0]
    assert product_input["metafields"][0]["value"] == f'{{"products":["{GUITAR_ID}"],"discount":20}}'


# --- Unconfigured shop ---

@pytest.fixture
def unconfigured_client(settings):
    """Authenticated client whose settings lack Shopify credentials"""
    settings.SHOPIFY_SHOP_URL = None
    settings.SHOPIFY_ADMIN_API_ACCESS_TOKEN = None
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_current_username] = lambda: "admin"
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
    clear_settings_cache()


def test_missing_shopify_credentials_render_platform_error(unconfigured_client):
    response = unconfigured_client.get("/app/bundles")

    assert response.status_code == 502
    assert "SHOPIFY_SHOP_URL and SHOPIFY_ADMIN_API_ACCESS_TOKEN must be set" in response.text
