class BaseServiceError(Exception):
    """Base exception for all service-related errors."""
    pass

class PlatformServiceError(BaseServiceError):
    """Base exception for platform service errors."""
    pass

class ShopifyServiceError(PlatformServiceError):
    """Base exception for Shopify-specific errors."""
    pass

class ShopifyAPIError(ShopifyServiceError):
    """Raised when a Shopify API call fails at the transport or HTTP level."""
    pass

class ShopifyConfigurationError(ShopifyServiceError):
    """Raised when the shop URL or Admin API token is not configured."""
    pass

class ShopifyGraphQLError(ShopifyServiceError):
    """Raised when Shopify answers a GraphQL call with top-level errors."""
    def __init__(self, errors):
        self.errors = errors
        message = "GraphQL query failed with errors:\n"
        for error in errors:
            msg = error.get('message', 'Unknown error')
            path = error.get('path', [])
            message += f"- Message: {msg}, Path: {path}\n"
        super().__init__(message)

class BundleServiceError(BaseServiceError):
    """Base exception for bundle service errors."""
    pass

class BundleCreationError(BundleServiceError):
    """Raised when Shopify rejects a bundle with user errors."""
    def __init__(self, message: str, user_errors=None):
        self.user_errors = user_errors or []
        super().__init__(message)

class ValidationError(BaseServiceError):
    """Raised when data validation fails."""
    pass
