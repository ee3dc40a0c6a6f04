"""
Schemas for Shopify catalog nodes and bundles.

Shopify answers in camelCase; fields are snake_case with aliases so the raw
GraphQL nodes can be validated directly.
"""

from typing import List, Literal, Optional, Union
from pydantic import ConfigDict, Field, StrictInt, StrictStr

from app.core.enums import BundleResolutionFailure
from app.schemas.base import BaseSchema
from app.services.bundles import pricing


class Money(BaseSchema):
    amount: float
    currency_code: str = Field(alias="currencyCode")


class PriceRange(BaseSchema):
    min_variant_price: Money = Field(alias="minVariantPrice")


class CatalogProduct(BaseSchema):
    """A product as listed in the Available Products table or inside a bundle"""
    id: str
    title: str
    price_range: PriceRange = Field(alias="priceRangeV2")

    @property
    def price(self) -> float:
        return self.price_range.min_variant_price.amount

    @property
    def currency_code(self) -> str:
        return self.price_range.min_variant_price.currency_code


class Metafield(BaseSchema):
    value: Optional[str] = None


class BundleNode(BaseSchema):
    """A product tagged as a bundle, before its metafield has been decoded"""
    id: str
    title: str
    description: Optional[str] = ""
    metafield: Optional[Metafield] = None

    @property
    def metafield_value(self) -> Optional[str]:
        return self.metafield.value if self.metafield else None


class BundleData(BaseSchema):
    """Decoded value of the bundle metafield"""
    model_config = ConfigDict(extra="ignore")

    products: List[StrictStr]
    discount: StrictInt


class ResolvedBundle(BaseSchema):
    kind: Literal["resolved"] = "resolved"
    id: str
    title: str
    description: Optional[str] = ""
    discount: int
    products: List[CatalogProduct] = []

    @property
    def product_count(self) -> int:
        return len(self.products)

    @property
    def total_price(self) -> float:
        return pricing.bundle_total(self.products)

    @property
    def discounted_price(self) -> float:
        return pricing.discounted_price(self.total_price, self.discount)


class UnresolvedBundle(BaseSchema):
    kind: Literal["unresolved"] = "unresolved"
    id: str
    title: str
    reason: BundleResolutionFailure

    @property
    def product_count(self) -> int:
        return 0


BundleResolution = Union[ResolvedBundle, UnresolvedBundle]


class BundleCreate(BaseSchema):
    """Input of the create-bundle flow"""
    name: str
    description: Optional[str] = ""
    products: List[str]
    discount: int = 10


class CreatedBundle(BaseSchema):
    id: str
    title: str
    metafield: Optional[Metafield] = None


class UserError(BaseSchema):
    field: Optional[List[str]] = None
    message: str
