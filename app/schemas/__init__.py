"""
Schema exports for the application.
"""

# Base schemas
from .base import BaseSchema

# Catalog and bundle schemas
from .bundle import (
    Money,
    PriceRange,
    CatalogProduct,
    Metafield,
    BundleNode,
    BundleData,
    ResolvedBundle,
    UnresolvedBundle,
    BundleResolution,
    BundleCreate,
    CreatedBundle,
    UserError,
)
