# app.services.shopify.client

import json
import logging
import httpx
from typing import Dict, List, Optional, Any

from app.core.config import Settings, get_settings
from app.core.exceptions import ShopifyAPIError, ShopifyConfigurationError, ShopifyGraphQLError
from app.services.shopify import queries

logger = logging.getLogger(__name__)


class ShopifyGraphQLClient:
    """
    Asynchronous client for the Shopify Admin GraphQL API.

    Every call opens its own httpx.AsyncClient, so an instance carries no
    connection state between requests. Reads:
      - get_products(): products matching a search filter, with min variant price
      - get_bundle_products(): tagged products with one metafield value
      - get_nodes(): products looked up by GID
    Writes:
      - create_product(): productCreate with metafields

    Documentation: https://shopify.dev/docs/api/admin-graphql
    """

    def __init__(self, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self.store_domain = self._normalize_store_domain(settings.SHOPIFY_SHOP_URL)
        self.admin_api_token = settings.SHOPIFY_ADMIN_API_ACCESS_TOKEN
        self.api_version = settings.SHOPIFY_API_VERSION
        self.timeout = settings.SHOPIFY_REQUEST_TIMEOUT

        if not self.store_domain or not self.admin_api_token:
            raise ShopifyConfigurationError(
                "SHOPIFY_SHOP_URL and SHOPIFY_ADMIN_API_ACCESS_TOKEN must be set in .env or as environment variables."
            )

        self.graphql_url = f"https://{self.store_domain}/admin/api/{self.api_version}/graphql.json"

        # Throttle status as last reported by Shopify, kept for diagnostics only
        self.max_available_points: Optional[float] = None
        self.currently_available_points: Optional[float] = None
        self.restore_rate: Optional[float] = None

        logger.debug(f"ShopifyGraphQLClient initialized for {self.store_domain} (API version {self.api_version})")

    @staticmethod
    def _normalize_store_domain(domain: Optional[str]) -> Optional[str]:
        """
        Accept "my-store", "my-store.myshopify.com" or "https://my-store.myshopify.com/".
        """
        if not domain:
            return domain
        domain = domain.replace("https://", "").replace("http://", "").rstrip("/")
        if "." not in domain:
            domain = f"{domain}.myshopify.com"
        return domain

    def _get_headers(self) -> Dict[str, str]:
        return {
            "X-Shopify-Access-Token": self.admin_api_token,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _update_throttle_status(self, extensions: Optional[Dict[str, Any]]) -> None:
        if not extensions or "cost" not in extensions:
            return
        throttle = extensions["cost"].get("throttleStatus") or {}
        if not throttle:
            return
        self.max_available_points = float(throttle.get("maximumAvailable", 0))
        self.currently_available_points = float(throttle.get("currentlyAvailable", 0))
        self.restore_rate = float(throttle.get("restoreRate", 0))
        logger.debug(
            f"Shopify cost: requested={extensions['cost'].get('requestedQueryCost')} "
            f"available={self.currently_available_points}/{self.max_available_points}"
        )

    async def _make_request(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        POST one GraphQL document and return its "data" object.

        Raises:
            ShopifyAPIError: network failure, timeout, non-2xx status or a non-JSON body
            ShopifyGraphQLError: the response carries top-level "errors"
        """
        payload: Dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        logger.debug(f"Shopify GraphQL request: {query.strip().splitlines()[0]}")
        if variables:
            logger.debug(f"Variables: {json.dumps(variables)[:500]}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.graphql_url,
                    headers=self._get_headers(),
                    json=payload,
                )
        except httpx.TimeoutException as e:
            logger.error(f"Shopify request timed out: {str(e)}")
            raise ShopifyAPIError(f"Request timed out: {str(e)}") from e
        except httpx.RequestError as e:
            logger.error(f"Shopify network error: {str(e)}")
            raise ShopifyAPIError(f"Network error: {str(e)}") from e

        if response.status_code not in (200, 201):
            logger.error(f"Shopify API error {response.status_code}: {response.text}")
            raise ShopifyAPIError(f"Request failed ({response.status_code}): {response.text}")

        try:
            response_data = response.json()
        except ValueError as e:
            logger.error(f"Failed to decode Shopify response. Content: {response.text[:500]}")
            raise ShopifyAPIError("Failed to decode JSON response") from e

        self._update_throttle_status(response_data.get("extensions"))

        if response_data.get("errors"):
            raise ShopifyGraphQLError(response_data["errors"])

        return response_data.get("data") or {}

    # --- Reads ---

    async def get_products(self, query_filter: Optional[str] = None, first: int = 20) -> List[Dict[str, Any]]:
        """First page of products matching a Shopify search filter, as raw nodes."""
        variables = {"first": first, "query": query_filter}
        data = await self._make_request(queries.GET_PRODUCTS_QUERY, variables)
        edges = (data.get("products") or {}).get("edges") or []
        return [edge["node"] for edge in edges]

    async def get_bundle_products(
        self,
        tag: str,
        namespace: str,
        key: str,
        first: int = 20,
    ) -> List[Dict[str, Any]]:
        """First page of products carrying `tag`, each with the raw value of metafield namespace.key."""
        variables = {
            "first": first,
            "query": f"tag:{tag}",
            "namespace": namespace,
            "key": key,
        }
        data = await self._make_request(queries.GET_BUNDLES_QUERY, variables)
        edges = (data.get("products") or {}).get("edges") or []
        return [edge["node"] for edge in edges]

    async def get_nodes(self, ids: List[str]) -> List[Optional[Dict[str, Any]]]:
        """
        Look up products by GID.

        Shopify returns null for ids that no longer exist and an empty object for
        ids that are not products; both are passed through unchanged.
        """
        data = await self._make_request(queries.GET_PRODUCTS_BY_IDS_QUERY, {"ids": ids})
        return data.get("nodes") or []

    # --- Writes ---

    async def create_product(self, product_input: Dict[str, Any], namespace: str, key: str) -> Dict[str, Any]:
        """
        Creates a new product using the productCreate mutation.
        product_input: A dictionary matching the ProductInput GraphQL type.
                       See https://shopify.dev/docs/api/admin-graphql/latest/inputs/ProductInput

        Returns the productCreate payload ({"product": ..., "userErrors": [...]});
        user errors are left for the caller to interpret.
        """
        variables = {"input": product_input, "namespace": namespace, "key": key}
        data = await self._make_request(queries.CREATE_PRODUCT_MUTATION, variables)
        payload = data.get("productCreate") or {}
        if payload.get("userErrors"):
            logger.warning(f"UserErrors during productCreate for '{product_input.get('title')}': {payload['userErrors']}")
        return payload
