"""
State of the "Create New Bundle" modal.

The draft travels with the rendered page as hidden form fields, so it only
lives as long as the page does; navigating away discards it.
"""

import logging
from typing import List, Optional, Sequence

from pydantic import BaseModel

from app.core.enums import DISCOUNT_OPTIONS, DraftAction
from app.schemas.base import BaseSchema
from app.schemas.bundle import BundleCreate, CatalogProduct
from app.services.bundles import pricing

logger = logging.getLogger(__name__)

DEFAULT_DISCOUNT = 10


class DraftPreview(BaseModel):
    products: List[CatalogProduct]
    total_price: float
    discounted_price: float


class BundleDraft(BaseSchema):
    name: str = ""
    description: str = ""
    selected_products: List[str] = []
    discount: int = DEFAULT_DISCOUNT

    @property
    def can_submit(self) -> bool:
        """Mirrors the enabled state of the modal's Create Bundle button"""
        return bool(self.selected_products) and bool(self.name)

    @property
    def discount_choices(self) -> List[int]:
        """Offered percentages, plus the current discount when it is not one of them"""
        return sorted(set(DISCOUNT_OPTIONS) | {self.discount})

    def is_selected(self, product_id: str) -> bool:
        return product_id in self.selected_products

    def add_product(self, product_id: str) -> None:
        if product_id and product_id not in self.selected_products:
            self.selected_products.append(product_id)

    def remove_product(self, product_id: str) -> None:
        self.selected_products = [pid for pid in self.selected_products if pid != product_id]

    def reset(self, default_discount: int = DEFAULT_DISCOUNT) -> None:
        self.name = ""
        self.description = ""
        self.selected_products = []
        self.discount = default_discount

    def selected_from(self, available: Sequence[CatalogProduct]) -> List[CatalogProduct]:
        """Selected products in selection order; ids no longer in the catalog page are skipped."""
        by_id = {product.id: product for product in available}
        return [by_id[pid] for pid in self.selected_products if pid in by_id]

    def preview(self, available: Sequence[CatalogProduct]) -> DraftPreview:
        products = self.selected_from(available)
        total = pricing.selection_total(products)
        return DraftPreview(
            products=products,
            total_price=total,
            discounted_price=pricing.discounted_price(total, self.discount),
        )

    def to_bundle_create(self) -> BundleCreate:
        return BundleCreate(
            name=self.name,
            description=self.description,
            products=list(self.selected_products),
            discount=self.discount,
        )


def apply_draft_action(
    draft: BundleDraft,
    action: DraftAction,
    product_id: Optional[str] = None,
    default_discount: int = DEFAULT_DISCOUNT,
) -> bool:
    """
    Apply one modal action to the draft in place.

    Returns whether the create modal should be shown afterwards. Adding happens
    from the Available Products table, so it leaves the modal closed; removing
    happens inside the modal.
    """
    logger.debug(f"Draft action {action.value} product={product_id}")

    if action == DraftAction.ADD:
        draft.add_product(product_id)
        return False
    if action == DraftAction.REMOVE:
        draft.remove_product(product_id)
        return True
    if action == DraftAction.CANCEL:
        draft.reset(default_discount)
        return False
    if action == DraftAction.VIEW:
        return False
    # OPEN and UPDATE only carry the edited fields, already on the draft
    return True
