"""
Core module exports.
"""
from .enums import (
    ProductStatus,
    BundleResolutionFailure,
    DraftAction,
    DISCOUNT_OPTIONS,
)

from .exceptions import (
    BaseServiceError,
    PlatformServiceError,
    ShopifyServiceError,
    ShopifyAPIError,
    ShopifyConfigurationError,
    ShopifyGraphQLError,
    BundleServiceError,
    BundleCreationError,
    ValidationError,
)
