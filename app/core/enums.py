"""
Shared enums and constants used across the application.
"""

from enum import Enum

class ProductStatus(str, Enum):
    """Shopify ProductStatus values"""
    ACTIVE = "ACTIVE"
    DRAFT = "DRAFT"
    ARCHIVED = "ARCHIVED"


class BundleResolutionFailure(str, Enum):
    """Why a bundle node could not be turned into a displayable bundle"""
    MISSING_METAFIELD = "missing_metafield"
    INVALID_METAFIELD = "invalid_metafield"
    LOOKUP_FAILED = "lookup_failed"
    NO_PRODUCTS = "no_products"


class DraftAction(str, Enum):
    """Actions the create-bundle modal can post back"""
    OPEN = "open"
    ADD = "add"
    REMOVE = "remove"
    UPDATE = "update"
    CANCEL = "cancel"
    VIEW = "view"  # open or close the bundle details modal, draft untouched


# Discount percentages offered by the create-bundle form
DISCOUNT_OPTIONS = (5, 10, 15, 20, 25)

METAFIELD_TYPE_JSON = "json"
