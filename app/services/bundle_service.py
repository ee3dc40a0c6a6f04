# app/services/bundle_service.py
"""
Bundles on top of the Shopify catalog.

A bundle is a product tagged with settings.BUNDLE_TAG whose metafield
(BUNDLE_METAFIELD_NAMESPACE.BUNDLE_METAFIELD_KEY) holds the member product ids
and the discount. Reading bundles is a two step affair: list the tagged
products, then resolve each one's members with a nodes() lookup.
"""

import asyncio
import logging
from typing import Any, Dict, Iterable, List

from app.core.config import Settings
from app.core.enums import BundleResolutionFailure, METAFIELD_TYPE_JSON, ProductStatus
from app.core.exceptions import BundleCreationError, ShopifyServiceError, ValidationError
from app.schemas.bundle import (
    BundleCreate,
    BundleNode,
    BundleResolution,
    CatalogProduct,
    CreatedBundle,
    ResolvedBundle,
    UnresolvedBundle,
    UserError,
)
from app.services.bundles.codec import decode_bundle_metafield, encode_bundle_metafield
from app.services.shopify.client import ShopifyGraphQLClient

logger = logging.getLogger(__name__)


class BundleService:
    """Reads and creates bundles for one authenticated shop"""

    def __init__(self, client: ShopifyGraphQLClient, settings: Settings):
        self.client = client
        self.settings = settings
        self.tag = settings.BUNDLE_TAG
        self.namespace = settings.BUNDLE_METAFIELD_NAMESPACE
        self.key = settings.BUNDLE_METAFIELD_KEY
        self.page_size = settings.CATALOG_PAGE_SIZE

    # --- Catalog reads ---

    async def list_available_products(self) -> List[CatalogProduct]:
        """Products that are not bundles themselves (first page only)"""
        nodes = await self.client.get_products(query_filter=f"NOT tag:{self.tag}", first=self.page_size)
        products = [CatalogProduct.from_graphql(node) for node in nodes]
        logger.info(f"Fetched {len(products)} available products")
        return products

    async def list_bundle_nodes(self) -> List[BundleNode]:
        """Bundle products with their raw metafield value (first page only)"""
        nodes = await self.client.get_bundle_products(
            tag=self.tag,
            namespace=self.namespace,
            key=self.key,
            first=self.page_size,
        )
        return [BundleNode.from_graphql(node) for node in nodes]

    async def resolve_bundle(self, node: BundleNode) -> BundleResolution:
        """
        Decode a bundle's metafield and fetch its member products.

        Failures stay local to this bundle and come back as an UnresolvedBundle.
        """
        value = node.metafield_value
        if not value:
            return self._unresolved(node, BundleResolutionFailure.MISSING_METAFIELD)

        bundle_data = decode_bundle_metafield(value)
        if bundle_data is None:
            return self._unresolved(node, BundleResolutionFailure.INVALID_METAFIELD)

        if not bundle_data.products:
            return self._unresolved(node, BundleResolutionFailure.NO_PRODUCTS)

        try:
            member_nodes = await self.client.get_nodes(bundle_data.products)
        except ShopifyServiceError as e:
            logger.warning(f"Error processing bundle {node.id}: {e}")
            return self._unresolved(node, BundleResolutionFailure.LOOKUP_FAILED)

        # Deleted products come back as null, non-product ids as {}
        products = [CatalogProduct.from_graphql(member) for member in member_nodes if member and member.get("id")]
        if not products:
            return self._unresolved(node, BundleResolutionFailure.NO_PRODUCTS)

        return ResolvedBundle(
            id=node.id,
            title=node.title,
            description=node.description,
            discount=bundle_data.discount,
            products=products,
        )

    async def resolve_bundles(self, nodes: List[BundleNode]) -> List[BundleResolution]:
        """
        Resolve bundles concurrently, at most BUNDLE_RESOLVE_CONCURRENCY at a time.

        Results are returned in the order of `nodes`, whatever order the lookups finish in.
        """
        semaphore = asyncio.Semaphore(max(1, self.settings.BUNDLE_RESOLVE_CONCURRENCY))

        async def _resolve(node: BundleNode) -> BundleResolution:
            async with semaphore:
                return await self.resolve_bundle(node)

        return list(await asyncio.gather(*(_resolve(node) for node in nodes)))

    @staticmethod
    def displayable(resolutions: Iterable[BundleResolution]) -> List[ResolvedBundle]:
        """Only bundles with at least one resolved product are shown"""
        return [
            resolution for resolution in resolutions
            if isinstance(resolution, ResolvedBundle) and resolution.product_count > 0
        ]

    async def list_bundles(self) -> List[ResolvedBundle]:
        nodes = await self.list_bundle_nodes()
        resolutions = await self.resolve_bundles(nodes)
        bundles = self.displayable(resolutions)

        skipped = len(resolutions) - len(bundles)
        if skipped:
            reasons = [r.reason.value for r in resolutions if isinstance(r, UnresolvedBundle)]
            logger.info(f"Hiding {skipped} of {len(resolutions)} bundles without resolved products: {reasons}")
        return bundles

    # --- Creation ---

    def build_product_input(self, bundle: BundleCreate) -> Dict[str, Any]:
        """ProductInput for productCreate: tag, status and metafield are set in the same call"""
        return {
            "title": bundle.name,
            "descriptionHtml": bundle.description,
            "tags": [self.tag],
            "status": ProductStatus.ACTIVE.value,
            "metafields": [
                {
                    "namespace": self.namespace,
                    "key": self.key,
                    "type": METAFIELD_TYPE_JSON,
                    "value": encode_bundle_metafield(bundle.products, bundle.discount),
                }
            ],
        }

    async def create_bundle(self, bundle: BundleCreate) -> CreatedBundle:
        """
        Create the bundle product on Shopify.

        Raises:
            ValidationError: no products selected or no name, checked before calling Shopify
            BundleCreationError: Shopify reported user errors (first message is used)
        """
        if not bundle.products:
            raise ValidationError("Select at least one product for the bundle")
        if not bundle.name:
            raise ValidationError("Bundle name is required")

        logger.info(f"Creating bundle '{bundle.name}' with {len(bundle.products)} products at {bundle.discount}% off")
        payload = await self.client.create_product(
            self.build_product_input(bundle),
            namespace=self.namespace,
            key=self.key,
        )

        user_errors = [UserError.from_graphql(error) for error in payload.get("userErrors") or []]
        if user_errors:
            raise BundleCreationError(user_errors[0].message, user_errors=user_errors)

        product = payload.get("product")
        if not product:
            raise BundleCreationError("Shopify did not return the created bundle")

        created = CreatedBundle.from_graphql(product)
        logger.info(f"Created bundle {created.id} ('{created.title}')")
        return created

    @staticmethod
    def _unresolved(node: BundleNode, reason: BundleResolutionFailure) -> UnresolvedBundle:
        if reason != BundleResolutionFailure.MISSING_METAFIELD:
            logger.debug(f"Bundle {node.id} unresolved: {reason.value}")
        return UnresolvedBundle(id=node.id, title=node.title, reason=reason)
